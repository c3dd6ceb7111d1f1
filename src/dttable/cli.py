#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
命令行入口

    dttable book-to-json t_book._dt        -> t_book.json
    dttable book-from-json t_book.json     -> t_book._dt
    dttable items-to-json t_item2._dt      -> t_item2.json
    dttable items-from-json t_item2.json   -> t_item2._dt
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .converter import BookJsonConverter, ItemJsonConverter
from .core.text_codec import DEFAULT_ENCODING
from .exceptions import DtTableError


COMMANDS = {
    'book-to-json': (BookJsonConverter, 'to_json_file', "将书籍表 _dt 解码为 JSON"),
    'book-from-json': (BookJsonConverter, 'from_json_file', "将 JSON 编码为书籍表 _dt"),
    'items-to-json': (ItemJsonConverter, 'to_json_file', "将物品表 _dt 解码为 JSON"),
    'items-from-json': (ItemJsonConverter, 'from_json_file', "将 JSON 编码为物品表 _dt"),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='dttable',
        description="_dt 游戏数据表与 JSON 互转工具"
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help="输出更多日志 (-vv 为调试级别)")
    parser.add_argument('--encoding', default=DEFAULT_ENCODING,
                        help=f"游戏文本编码 (默认 {DEFAULT_ENCODING})")

    subparsers = parser.add_subparsers(dest='command')
    for name, (_, _, help_text) in COMMANDS.items():
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('input_path', help="输入文件路径")
        sub.add_argument('-o', '--output', help="输出文件路径 (默认 <stem>.json / <stem>._dt)")
        if name.endswith('-to-json'):
            sub.add_argument('--strict', action='store_true',
                             help="文本无法解码时中止转换")
    return parser


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')


def main(argv: Optional[List[str]] = None) -> int:
    """
    命令行主函数

    Returns:
        进程退出码: 0 成功，1 转换失败
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args.verbose)

    converter, method, _ = COMMANDS[args.command]
    kwargs = {'output_path': args.output, 'encoding': args.encoding}
    if method == 'to_json_file':
        kwargs['strict'] = args.strict

    try:
        output_path = getattr(converter, method)(args.input_path, **kwargs)
    except (DtTableError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(output_path)
    return 0
