#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
dttable 工具函数

提供输出路径推导等通用功能。
"""

import os
from typing import Optional


JSON_SUFFIX = '.json'
TABLE_SUFFIX = '._dt'


def get_file_stem(path: str) -> str:
    """
    取文件名中第一个点号之前的部分

    Examples:
        >>> get_file_stem("data/t_book._dt")
        't_book'
        >>> get_file_stem("t_item2.json")
        't_item2'
    """
    name = os.path.basename(path)
    return name.split('.', 1)[0] or name


def derive_output_path(input_path: str, suffix: str, output_path: Optional[str] = None) -> str:
    """
    推导输出文件路径

    未指定 output_path 时，输出到输入文件所在目录的 <stem><suffix>。

    Args:
        input_path: 输入文件路径
        suffix: 输出后缀 (JSON_SUFFIX 或 TABLE_SUFFIX)
        output_path: 显式指定的输出路径

    Returns:
        输出文件路径
    """
    if output_path:
        return output_path
    directory = os.path.dirname(input_path)
    return os.path.join(directory, get_file_stem(input_path) + suffix)
