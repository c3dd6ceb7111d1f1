#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
游戏字符集编解码

_dt 表格中的文本使用固定的双字节字符集 (CP932, Shift-JIS 的 Windows 扩展)。
解码失败不会中断转换: 记录告警、回调通知并以替换字符继续。
"""

import logging
from typing import Callable, Optional

from ..exceptions import UndecodableTextError


logger = logging.getLogger(__name__)

DEFAULT_ENCODING = 'cp932'


class TextCodec:
    """
    游戏文本编解码器

    encode() 从不追加 0x00 结束符，由调用方显式写入。
    """

    def __init__(
        self,
        encoding: str = DEFAULT_ENCODING,
        strict: bool = False,
        on_error: Optional[Callable[[UndecodableTextError], None]] = None
    ):
        """
        初始化编解码器

        Args:
            encoding: Python 编码名，默认 cp932
            strict: 为 True 时解码失败直接抛出 UndecodableTextError
            on_error: 解码失败时的回调 (非 strict 模式)
        """
        self.encoding = encoding
        self.strict = strict
        self._on_error = on_error
        self.errors = []

    def decode(self, data: bytes, address: Optional[int] = None) -> str:
        """
        解码字节为文本

        Args:
            data: 原始字节 (不含结束符)
            address: 字节在文件中的起始地址，仅用于诊断

        Returns:
            解码后的文本，无法解码的部分替换为 U+FFFD

        Raises:
            UndecodableTextError: strict 模式下解码失败
        """
        try:
            return data.decode(self.encoding)
        except UnicodeDecodeError:
            error = UndecodableTextError(data, self.encoding, address)
            if self.strict:
                raise error
            logger.warning("%s", error)
            self.errors.append(error)
            if self._on_error:
                self._on_error(error)
            return data.decode(self.encoding, errors='replace')

    def encode(self, text: str) -> bytes:
        """
        编码文本为字节

        无法表示的字符写为 &#N; 数字引用，不会失败。
        """
        try:
            return text.encode(self.encoding)
        except UnicodeEncodeError:
            logger.warning("文本包含 %s 无法表示的字符，已替换为数字引用: %r",
                           self.encoding, text)
            return text.encode(self.encoding, errors='xmlcharrefreplace')
