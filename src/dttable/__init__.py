#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
dttable - _dt 游戏数据表与 JSON 的无损互转

支持书籍表 (带控制字节的分页文本) 和物品表 (名称 + 说明)
"""

__version__ = "0.1.0"

# 异常类
from .exceptions import (
    DtTableError,
    TruncatedInputError,
    InvalidFormatError,
    MalformedDirectiveError,
    UndecodableTextError,
    MalformedJsonError,
)

# 数据结构与编解码
from .core import Book, Page, Line, Item, TextCodec, IMAGE_CLEAR
from .book import BookDecoder, BookEncoder
from .items import ItemTableCodec

# 格式转换
from .converter import BookJsonConverter, ItemJsonConverter

__all__ = [
    # 版本
    "__version__",
    # 异常
    "DtTableError",
    "TruncatedInputError",
    "InvalidFormatError",
    "MalformedDirectiveError",
    "UndecodableTextError",
    "MalformedJsonError",
    # 数据结构
    "Book",
    "Page",
    "Line",
    "Item",
    "IMAGE_CLEAR",
    "TextCodec",
    # 编解码
    "BookDecoder",
    "BookEncoder",
    "ItemTableCodec",
    # 格式转换
    "BookJsonConverter",
    "ItemJsonConverter",
]
