#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
pytest 全局配置

提供手工构造的书籍表 / 物品表二进制样本及其对应的数据模型。
"""

import pytest

from dttable.core.schema import Book, Page, Line, Item, IMAGE_CLEAR


# ==================== 书籍表样本 ====================

# 两本书的指针表: [name, content] * 2
BOOK_HEADER = bytes([0x08, 0x00, 0x0B, 0x00, 0x32, 0x00, 0x34, 0x00])

BOOK0_NAME = b'AB\x00'                          # 0x08
BOOK0_CONTENT = (                               # 0x0B
    b'\x2310x'                                  # image_x = 10
    b'\x2320y'                                  # image_y = 20
    b'\x2312F'                                  # image_id = 12
    b'Hi\x07\x05there\x232S'                    # 颜色 5 + 字号 '2'
    b'\x01'
    b'second'
    b'\x02\x03'                                 # 分页
    b'\x23F'                                    # 清除图像
    b'end'
    b'\x00'
)
BOOK1_NAME = b'Z\x00'                           # 0x32
BOOK1_CONTENT = b'x\x00'                        # 0x34

BOOK_BLOB = BOOK_HEADER + BOOK0_NAME + BOOK0_CONTENT + BOOK1_NAME + BOOK1_CONTENT


def make_books():
    """BOOK_BLOB 对应的模型"""
    return [
        Book(id=0, name='AB', pages=[
            Page(id=0, image_x=10, image_y=20, image_id=12, lines=[
                Line(id=0, text='Hi<C:5>there<S:2>'),
                Line(id=1, text='second'),
            ]),
            Page(id=1, image_id=IMAGE_CLEAR, lines=[
                Line(id=0, text='end'),
            ]),
        ]),
        Book(id=1, name='Z', pages=[
            Page(id=0, lines=[Line(id=0, text='x')]),
        ]),
    ]


# ==================== 物品表样本 ====================

ITEM_BLOB = bytes([
    0x04, 0x00, 0x14, 0x00,         # 指针表
    0x08, 0x00, 0x0E, 0x00,         # record 0 @0x04
]) + b'Sword\x00' + b'Sharp\x00' + bytes([
    0x18, 0x00, 0x1C, 0x00,         # record 1 @0x14
]) + b'Cap\x00' + b'\x00'


def make_items():
    """ITEM_BLOB 对应的模型"""
    return [
        Item(item_id=0, item_name='Sword', item_desc='Sharp'),
        Item(item_id=1, item_name='Cap', item_desc=''),
    ]


def make_book_blob(name: bytes, content: bytes) -> bytes:
    """构造只有一本书的书籍表"""
    return bytes([0x04, 0x00, 0x04 + len(name), 0x00]) + name + content


# ==================== 基础 Fixtures ====================

@pytest.fixture
def book_blob() -> bytes:
    return BOOK_BLOB


@pytest.fixture
def books():
    return make_books()


@pytest.fixture
def item_blob() -> bytes:
    return ITEM_BLOB


@pytest.fixture
def items():
    return make_items()


@pytest.fixture
def book_file(tmp_path):
    """写入磁盘的书籍表样本"""
    path = tmp_path / "t_book._dt"
    path.write_bytes(BOOK_BLOB)
    return path


@pytest.fixture
def item_file(tmp_path):
    """写入磁盘的物品表样本"""
    path = tmp_path / "t_item2._dt"
    path.write_bytes(ITEM_BLOB)
    return path
