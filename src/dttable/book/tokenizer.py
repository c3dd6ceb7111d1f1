#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
书籍内容区词法分析

内容区是一串无类型字节，夹杂着换行、分页、结束等控制字节，
以及 0x07 (颜色) 和 0x23 (格式) 两类多字节指令。

这里用显式状态机描述文法: step() 是纯函数
(state, byte, address) -> (state, event)，只负责字节分类，
不接触 Book / Page / Line 模型; tokenize() 驱动状态机并处理文件末尾。

    Scanning ──0x07──> AwaitColor ──n──> Scanning        (COLOR n)
    Scanning ──0x23──> DirectiveStart ──F──> Scanning     (IMAGE_ID 0xFFF)
                       DirectiveStart ──b──> DirectiveValue
                       DirectiveValue ──F/x/y/S──> Scanning
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple, Union

from ..core.binary_io import BinaryReader
from ..core.schema import (
    CTRL_END_BOOK, CTRL_END_LINE, CTRL_END_PAGE, CTRL_PAGE_BREAK,
    CTRL_COLOR, CTRL_FORMAT,
    FORMAT_IMAGE, FORMAT_SIZE, FORMAT_IMAGE_X, FORMAT_IMAGE_Y,
    IMAGE_CLEAR,
)
from ..exceptions import MalformedDirectiveError, TruncatedInputError


# ==================== 状态 ====================

@dataclass(frozen=True)
class Scanning:
    """普通文本扫描"""
    pass


@dataclass(frozen=True)
class AwaitColor:
    """已读到 0x07，等待颜色值字节"""
    pass


@dataclass(frozen=True)
class DirectiveStart:
    """已读到 0x23，等待第一个参数字节"""
    pass


@dataclass(frozen=True)
class DirectiveValue:
    """0x23 指令的数值累积中"""
    value: bytes
    address: int   # 第一个数值字节的地址，用于报错


State = Union[Scanning, AwaitColor, DirectiveStart, DirectiveValue]

SCANNING = Scanning()


# ==================== 事件 ====================

class EventKind(Enum):
    TEXT = 'text'            # 普通字符字节
    END_LINE = 'end_line'
    END_PAGE = 'end_page'
    END_BOOK = 'end_book'
    COLOR = 'color'          # value: 颜色编号 (int)
    SIZE = 'size'            # value: 原始数字字节 (bytes)
    IMAGE_X = 'image_x'      # value: u16
    IMAGE_Y = 'image_y'      # value: u16
    IMAGE_ID = 'image_id'    # value: u16，IMAGE_CLEAR 表示清除


@dataclass(frozen=True)
class Event:
    kind: EventKind
    address: int
    value: Union[int, bytes, None] = None


_SIMPLE_CONTROLS = {
    CTRL_END_BOOK: EventKind.END_BOOK,
    CTRL_END_LINE: EventKind.END_LINE,
    CTRL_END_PAGE: EventKind.END_PAGE,
}

_NUMERIC_FORMATS = {
    FORMAT_IMAGE: EventKind.IMAGE_ID,
    FORMAT_IMAGE_X: EventKind.IMAGE_X,
    FORMAT_IMAGE_Y: EventKind.IMAGE_Y,
}


def parse_u16(value: bytes, kind: str, address: int) -> int:
    """
    将 ASCII 数字串解析为 u16

    Raises:
        MalformedDirectiveError: 非纯数字或超出 u16 范围
    """
    text = value.decode('ascii', errors='replace')
    if not value.isdigit() or int(value) > 0xFFFF:
        raise MalformedDirectiveError(kind, text, address=address)
    return int(value)


# ==================== 状态转移 ====================

def step(state: State, byte: int, address: int) -> Tuple[State, Optional[Event]]:
    """
    状态转移函数

    Args:
        state: 当前状态
        byte: 读到的字节
        address: 该字节在文件中的地址

    Returns:
        (新状态, 产生的事件或 None)

    Raises:
        MalformedDirectiveError: 格式指令的数值无法解析
    """
    if isinstance(state, Scanning):
        if byte in _SIMPLE_CONTROLS:
            return SCANNING, Event(_SIMPLE_CONTROLS[byte], address)
        if byte == CTRL_PAGE_BREAK:
            return SCANNING, None
        if byte == CTRL_COLOR:
            return AwaitColor(), None
        if byte == CTRL_FORMAT:
            return DirectiveStart(), None
        return SCANNING, Event(EventKind.TEXT, address, byte)

    if isinstance(state, AwaitColor):
        return SCANNING, Event(EventKind.COLOR, address, byte)

    if isinstance(state, DirectiveStart):
        if byte == FORMAT_IMAGE:
            return SCANNING, Event(EventKind.IMAGE_ID, address, IMAGE_CLEAR)
        # 第一个字节无论取值都属于数值部分
        return DirectiveValue(bytes([byte]), address), None

    if isinstance(state, DirectiveValue):
        if byte in _NUMERIC_FORMATS:
            kind = _NUMERIC_FORMATS[byte]
            number = parse_u16(state.value, kind.value, state.address)
            return SCANNING, Event(kind, state.address, number)
        if byte == FORMAT_SIZE:
            return SCANNING, Event(EventKind.SIZE, state.address, state.value)
        return DirectiveValue(state.value + bytes([byte]), state.address), None

    raise TypeError(f"未知状态: {state!r}")


def tokenize(reader: BinaryReader, offset: int) -> Iterator[Event]:
    """
    从 offset 开始扫描一本书的内容区

    产生事件直到 END_BOOK。普通文本状态下遇到文件末尾等同于 0x00;
    指令读到一半遇到文件末尾则为截断错误。

    Args:
        reader: 二进制读取器
        offset: 内容区起始地址

    Yields:
        Event

    Raises:
        TruncatedInputError: 指令参数未读完即到达文件末尾
        MalformedDirectiveError: 格式指令的数值无法解析
    """
    reader.seek(offset)
    state: State = SCANNING
    while True:
        address = reader.position
        if reader.at_end():
            if not isinstance(state, Scanning):
                raise TruncatedInputError(address, 1, 0)
            yield Event(EventKind.END_BOOK, address)
            return

        state, event = step(state, reader.read_u8(), address)
        if event is None:
            continue
        yield event
        if event.kind is EventKind.END_BOOK:
            return
