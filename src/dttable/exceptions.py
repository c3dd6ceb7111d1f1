#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
dttable 异常定义

所有异常均继承自 DtTableError，便于统一捕获。
除 UndecodableTextError 默认只记录告警外，其余异常都会中止整个转换。
"""

from typing import Optional


class DtTableError(Exception):
    """dttable 基础异常"""
    pass


class TruncatedInputError(DtTableError):
    """
    输入截断异常

    当指针表或记录超出文件末尾时抛出。
    """
    def __init__(self, address: int, size: int, available: int):
        self.address = address
        self.size = size
        self.available = available
        super().__init__(
            f"数据在 0x{address:04X} 处被截断: "
            f"期望读取 {size} 字节，实际只有 {available} 字节"
        )


class InvalidFormatError(DtTableError):
    """
    表格式无效异常

    当指针表结构不合法或偏移超出 u16 范围时抛出。
    """
    def __init__(self, message: str, expected: str = None, actual: str = None):
        self.expected = expected
        self.actual = actual
        if expected and actual:
            message = f"{message}: 期望 {expected}, 实际 {actual}"
        super().__init__(message)


class MalformedDirectiveError(DtTableError):
    """
    控制指令格式错误

    解码时: 0x23 指令的数值字段无法解析为 u16 (附带字节地址)。
    编码时: 文本中的 <C:n> / <S:n> 标记无法还原为控制字节 (附带位置描述)。
    """
    def __init__(
        self,
        kind: str,
        value: str,
        address: Optional[int] = None,
        context: Optional[str] = None
    ):
        self.kind = kind
        self.value = value
        self.address = address
        self.context = context

        message = f"无法解析 {kind} 指令的值 {value!r}"
        if address is not None:
            message += f" (地址 0x{address:04X})"
        if context:
            message += f" ({context})"
        super().__init__(message)


class UndecodableTextError(DtTableError):
    """
    文本解码失败

    字节序列无法用游戏字符集完整解码。默认不致命:
    TextCodec 记录告警并用替换字符继续; strict 模式下才会抛出。
    """
    def __init__(self, data: bytes, encoding: str, address: Optional[int] = None):
        self.data = data
        self.encoding = encoding
        self.address = address

        message = f"无法以 {encoding} 解码字节 {data.hex(' ')}"
        if address is not None:
            message += f" (地址 0x{address:04X})"
        super().__init__(message)


class MalformedJsonError(DtTableError):
    """
    JSON 结构错误

    输入 JSON 无法解析，或缺少必需字段 / 字段类型不符时抛出。
    """
    def __init__(self, message: str):
        super().__init__(f"JSON 格式错误: {message}")
