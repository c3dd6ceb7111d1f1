#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
指针表读写

_dt 表格开头是一组连续的 u16 小端偏移，指向同一文件中的记录。
表本身没有条目数: 第一个偏移值同时就是指针表的字节长度，
读取到该位置即结束。
"""

import struct
from typing import List, Tuple

from .binary_io import BinaryReader, BinaryWriter
from ..exceptions import InvalidFormatError


# 单偏移记录 (物品表) 与 [名称, 内容] 双偏移记录 (书籍表)
ITEM_RECORD_WIDTH = 2
BOOK_RECORD_WIDTH = 4


def read_pointer_table(
    reader: BinaryReader,
    start: int = 0,
    record_width: int = ITEM_RECORD_WIDTH
) -> Tuple[List[int], int]:
    """
    读取自终止指针表

    从 start 开始逐条读取 record_width 字节的记录，
    直到读取位置等于读到的第一个偏移值。

    Args:
        reader: 二进制读取器
        start: 指针表起始位置
        record_width: 每条记录的字节数 (2 的倍数)

    Returns:
        (扁平的 u16 偏移列表, 第一个偏移值)
        空数据返回 ([], start)

    Raises:
        TruncatedInputError: 数据在指针表结束前耗尽
        InvalidFormatError: 第一个偏移无法作为表的结束位置
    """
    if reader.size <= start:
        return [], start

    reader.seek(start)
    first_offset = reader.read_u16()

    table_size = first_offset - start
    if table_size < record_width or table_size % record_width:
        raise InvalidFormatError(
            f"指针表结束位置无效 (起始 0x{start:04X})",
            expected=f"起始位置之后 {record_width} 字节的整数倍",
            actual=f"0x{first_offset:04X}"
        )

    offsets = [first_offset]
    per_record = record_width // 2
    offsets.extend(reader.read_u16() for _ in range(per_record - 1))
    while reader.position != first_offset:
        offsets.extend(reader.read_u16() for _ in range(per_record))

    return offsets, first_offset


def write_pointer_table(offsets: List[int]) -> bytes:
    """
    序列化指针表

    调用方需已计算好最终偏移 (两遍式写入)。

    Args:
        offsets: u16 偏移列表

    Returns:
        小端序字节
    """
    return struct.pack(f'<{len(offsets)}H', *offsets)


def patch_pointer_table(writer: BinaryWriter, position: int, offsets: List[int]) -> None:
    """
    将指针表回写到预留区域

    Args:
        writer: 二进制写入器
        position: 预留区域起始位置
        offsets: u16 偏移列表
    """
    writer.patch_bytes(position, write_pointer_table(offsets))
