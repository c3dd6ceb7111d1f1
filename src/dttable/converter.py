#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
格式转换工具

提供 _dt 表格与 JSON 之间的互转功能。
转换是全有或全无的: 结果在内存中完整生成后才写入磁盘。
"""

import json
import logging
from typing import Any, List, Optional

from .book import BookDecoder, BookEncoder
from .core.schema import Book, Item
from .core.text_codec import TextCodec, DEFAULT_ENCODING
from .exceptions import MalformedJsonError
from .items import ItemTableCodec
from .utils import derive_output_path, JSON_SUFFIX, TABLE_SUFFIX


logger = logging.getLogger(__name__)


def load_json_array(text: str) -> List[Any]:
    """
    解析 JSON 文本并确认顶层为数组

    Raises:
        MalformedJsonError: 语法错误或顶层不是数组
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedJsonError(f"第 {e.lineno} 行第 {e.colno} 列: {e.msg}") from e
    if not isinstance(data, list):
        raise MalformedJsonError(f"顶层应为数组，实际为 {type(data).__name__}")
    return data


class _TableJsonConverter:
    """
    _dt 表格和 JSON 互转的公共流程

    子类提供 model (带 from_dict/to_dict 的数据类) 和编解码实现。
    """

    model: Any = None

    @classmethod
    def _decode_bytes(cls, data: bytes, codec: TextCodec) -> List[Any]:
        raise NotImplementedError

    @classmethod
    def _encode_models(cls, models: List[Any], codec: TextCodec) -> bytes:
        raise NotImplementedError

    @classmethod
    def decode(
        cls,
        path: str,
        encoding: str = DEFAULT_ENCODING,
        strict: bool = False,
        indent: int = 2
    ) -> str:
        """
        读取 _dt 文件并返回 JSON 文本

        Args:
            path: _dt 文件路径
            encoding: 游戏文本编码
            strict: 文本解码失败是否视为致命错误
            indent: JSON 缩进

        Returns:
            JSON 文本
        """
        with open(path, 'rb') as f:
            data = f.read()
        models = cls._decode_bytes(data, TextCodec(encoding, strict=strict))
        logger.info("%s: 解码 %d 条记录", path, len(models))
        return json.dumps(
            [model.to_dict() for model in models],
            ensure_ascii=False,
            indent=indent
        )

    @classmethod
    def encode(cls, path: str, encoding: str = DEFAULT_ENCODING) -> bytes:
        """
        读取 JSON 文件并返回 _dt 字节

        Args:
            path: JSON 文件路径
            encoding: 游戏文本编码

        Returns:
            _dt 文件内容

        Raises:
            MalformedJsonError: JSON 结构错误或文件不是 UTF-8
        """
        with open(path, 'rb') as f:
            raw = f.read()
        try:
            text = raw.decode('utf-8')
        except UnicodeDecodeError as e:
            raise MalformedJsonError(f"{path} 不是 UTF-8 文本: {e}") from e
        entries = load_json_array(text)
        models = [cls.model.from_dict(entry, i) for i, entry in enumerate(entries)]
        data = cls._encode_models(models, TextCodec(encoding))
        logger.info("%s: 编码 %d 条记录, %d 字节", path, len(models), len(data))
        return data

    @classmethod
    def to_json_file(
        cls,
        path: str,
        output_path: Optional[str] = None,
        encoding: str = DEFAULT_ENCODING,
        strict: bool = False,
        indent: int = 2
    ) -> str:
        """
        将 _dt 文件转换为 JSON 文件

        Returns:
            写入的 JSON 文件路径
        """
        text = cls.decode(path, encoding=encoding, strict=strict, indent=indent)
        output_path = derive_output_path(path, JSON_SUFFIX, output_path)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(text)
        return output_path

    @classmethod
    def from_json_file(
        cls,
        path: str,
        output_path: Optional[str] = None,
        encoding: str = DEFAULT_ENCODING
    ) -> str:
        """
        将 JSON 文件转换为 _dt 文件

        Returns:
            写入的 _dt 文件路径
        """
        data = cls.encode(path, encoding=encoding)
        output_path = derive_output_path(path, TABLE_SUFFIX, output_path)
        with open(output_path, 'wb') as f:
            f.write(data)
        return output_path


class BookJsonConverter(_TableJsonConverter):
    """
    书籍表和 JSON 互转

    JSON 格式:
    [
        {
            "id": 0,
            "name": "...",
            "pages": [
                {"id": 0, "image_id": 12, "lines": [{"id": 0, "text": "..."}]}
            ]
        }
    ]
    """

    model = Book

    @classmethod
    def _decode_bytes(cls, data: bytes, codec: TextCodec) -> List[Book]:
        return BookDecoder(codec).decode(data)

    @classmethod
    def _encode_models(cls, models: List[Book], codec: TextCodec) -> bytes:
        return BookEncoder(codec).encode(models)


class ItemJsonConverter(_TableJsonConverter):
    """
    物品表和 JSON 互转

    JSON 格式:
    [{"item_id": 0, "item_name": "...", "item_desc": "..."}]
    """

    model = Item

    @classmethod
    def _decode_bytes(cls, data: bytes, codec: TextCodec) -> List[Item]:
        return ItemTableCodec(codec).decode(data)

    @classmethod
    def _encode_models(cls, models: List[Item], codec: TextCodec) -> bytes:
        return ItemTableCodec(codec).encode(models)
