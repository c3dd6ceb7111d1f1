#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
dttable 核心模块

提供二进制 I/O 封装、指针表读写、文本编解码和数据结构定义。
"""

from .binary_io import BinaryReader, BinaryWriter
from .pointer_table import (
    read_pointer_table, write_pointer_table, patch_pointer_table,
    ITEM_RECORD_WIDTH, BOOK_RECORD_WIDTH,
)
from .text_codec import TextCodec, DEFAULT_ENCODING
from .schema import Book, Page, Line, Item, IMAGE_CLEAR

__all__ = [
    "BinaryReader",
    "BinaryWriter",
    "read_pointer_table",
    "write_pointer_table",
    "patch_pointer_table",
    "ITEM_RECORD_WIDTH",
    "BOOK_RECORD_WIDTH",
    "TextCodec",
    "DEFAULT_ENCODING",
    "Book",
    "Page",
    "Line",
    "Item",
    "IMAGE_CLEAR",
]
