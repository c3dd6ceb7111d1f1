#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
dttable 数据结构定义

定义书籍表的 Book / Page / Line、物品表的 Item，
以及书籍内容区使用的控制字节常量。

id 字段只存在于 JSON 中: 二进制不保存，解码时按位置分配，编码时忽略。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..exceptions import MalformedJsonError


# ==================== 控制字节 ====================

CTRL_END_BOOK = 0x00
CTRL_END_LINE = 0x01
CTRL_END_PAGE = 0x02      # 引擎的 "等待输入"，视为分页
CTRL_PAGE_BREAK = 0x03    # 与 0x02 成对出现，解码时忽略
CTRL_COLOR = 0x07
CTRL_FORMAT = 0x23        # '#'

# 0x23 指令的类型字节
FORMAT_IMAGE = 0x46       # 'F'
FORMAT_SIZE = 0x53        # 'S'
FORMAT_IMAGE_X = 0x78     # 'x'
FORMAT_IMAGE_Y = 0x79     # 'y'

# image_id 的保留值: 清除图像 (0x23 0x46，无数字)
IMAGE_CLEAR = 0xFFF

# 文本内联标记
COLOR_MARKER = '<C:'
SIZE_MARKER = '<S:'
MARKER_END = '>'


# ==================== JSON 辅助 ====================

def _require(data: Dict[str, Any], key: str, kind: type, where: str) -> Any:
    """取出必需字段并检查类型"""
    if not isinstance(data, dict):
        raise MalformedJsonError(f"{where} 应为对象，实际为 {type(data).__name__}")
    if key not in data:
        raise MalformedJsonError(f"{where} 缺少字段 '{key}'")
    value = data[key]
    if not isinstance(value, kind):
        raise MalformedJsonError(
            f"{where}.{key} 应为 {kind.__name__}，实际为 {type(value).__name__}"
        )
    return value


def _optional_u16(data: Dict[str, Any], key: str, where: str) -> Optional[int]:
    """取出可选 u16 字段: 缺失与 null 均视为未设置"""
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 0xFFFF:
        raise MalformedJsonError(f"{where}.{key} 应为 0-65535 的整数，实际为 {value!r}")
    return value


# ==================== 书籍表 ====================

@dataclass
class Line:
    """一行文本，可包含 <C:n> / <S:n> 内联标记"""
    id: int = 0
    text: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'text': self.text}

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> 'Line':
        return cls(id=index, text=_require(data, 'text', str, f"line[{index}]"))


@dataclass
class Page:
    """
    一页

    image_x / image_y / image_id 为 None 表示 "不变更"，
    image_id == IMAGE_CLEAR 表示显式清除图像，两者语义不同。
    """
    id: int = 0
    image_x: Optional[int] = None
    image_y: Optional[int] = None
    image_id: Optional[int] = None
    lines: List[Line] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """序列化为 JSON 对象，未设置的图像字段直接省略"""
        data: Dict[str, Any] = {'id': self.id}
        for key in ('image_x', 'image_y', 'image_id'):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        data['lines'] = [line.to_dict() for line in self.lines]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> 'Page':
        where = f"page[{index}]"
        lines = _require(data, 'lines', list, where)
        return cls(
            id=index,
            image_x=_optional_u16(data, 'image_x', where),
            image_y=_optional_u16(data, 'image_y', where),
            image_id=_optional_u16(data, 'image_id', where),
            lines=[Line.from_dict(line, i) for i, line in enumerate(lines)]
        )


@dataclass
class Book:
    """一本书: 名称 + 若干页"""
    id: int = 0
    name: str = ''
    pages: List[Page] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'pages': [page.to_dict() for page in self.pages]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> 'Book':
        where = f"book[{index}]"
        name = _require(data, 'name', str, where)
        pages = _require(data, 'pages', list, where)
        return cls(
            id=index,
            name=name,
            pages=[Page.from_dict(page, i) for i, page in enumerate(pages)]
        )


# ==================== 物品表 ====================

@dataclass
class Item:
    """物品: 名称 + 说明，id 仅为可读性而写入 JSON"""
    item_id: int = 0
    item_name: str = ''
    item_desc: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'item_id': self.item_id,
            'item_name': self.item_name,
            'item_desc': self.item_desc
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> 'Item':
        where = f"item[{index}]"
        return cls(
            item_id=index,
            item_name=_require(data, 'item_name', str, where),
            item_desc=_require(data, 'item_desc', str, where)
        )
