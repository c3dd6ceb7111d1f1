#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
二进制 I/O 封装

提供 BinaryWriter 和 BinaryReader 类，封装所有底层读写操作，
使上层编解码器不需要直接操作 struct 和文件指针。

_dt 表格全部为小端序，偏移均为 u16。
"""

import io
import struct
from typing import Any, BinaryIO, Tuple, Union

from ..exceptions import TruncatedInputError, InvalidFormatError


U16_MAX = 0xFFFF


class BinaryWriter:
    """
    二进制写入器

    写入内存缓冲区，完整结果生成后再由调用方落盘。
    支持预留头部空间并在偏移确定后回写 (两遍式写入)。
    """

    def __init__(self):
        self._file = io.BytesIO()
        self._position = 0

    @property
    def position(self) -> int:
        """当前写入位置"""
        return self._position

    # ==================== 原始写入 ====================

    def write_bytes(self, data: bytes) -> int:
        """
        写入原始字节

        Args:
            data: 要写入的字节

        Returns:
            写入的字节数
        """
        written = self._file.write(data)
        self._position += written
        return written

    def write_struct(self, fmt: str, *values: Any) -> int:
        """按 struct 格式写入"""
        data = struct.pack(fmt, *values)
        return self.write_bytes(data)

    # ==================== 类型化写入 ====================

    def write_u8(self, value: int) -> int:
        """写入无符号 8 位整数"""
        return self.write_struct('<B', value)

    def write_u16(self, value: int) -> int:
        """写入无符号 16 位整数 (Little-Endian)"""
        return self.write_struct('<H', value)

    def write_cstring(self, data: bytes) -> int:
        """
        写入以 0x00 结尾的字节串

        Args:
            data: 已编码的字符串字节 (不含结束符)

        Returns:
            字符串起始位置
        """
        start = self._position
        self.write_bytes(data)
        self.write_u8(0)
        return start

    # ==================== 位置控制 ====================

    def offset(self) -> int:
        """
        返回当前位置作为 u16 偏移

        Raises:
            InvalidFormatError: 位置超出 u16 可寻址范围
        """
        if self._position > U16_MAX:
            raise InvalidFormatError(
                "偏移超出 u16 范围",
                expected=f"<= 0x{U16_MAX:04X}",
                actual=f"0x{self._position:X}"
            )
        return self._position

    def reserve(self, size: int) -> int:
        """
        预留空间 (写入零字节)

        用于预留指针表等固定大小区域，稍后回写。

        Args:
            size: 预留字节数

        Returns:
            预留区域的起始位置
        """
        start = self._position
        self.write_bytes(b'\x00' * size)
        return start

    def seek(self, position: int):
        """移动到指定位置"""
        self._file.seek(position)
        self._position = position

    def patch_bytes(self, position: int, data: bytes):
        """
        在指定位置回写数据

        写入后恢复到原位置。
        """
        current = self._position
        self.seek(position)
        self.write_bytes(data)
        self.seek(current)

    def patch_u16(self, position: int, value: int):
        """在指定位置回写 u16 值"""
        self.patch_bytes(position, struct.pack('<H', value))

    def getvalue(self) -> bytes:
        """返回已写入的全部字节"""
        return self._file.getvalue()


class BinaryReader:
    """
    二进制读取器

    随机访问式读取: 指针表要求在整个文件内前后跳转，
    因此输入必须是完整的可寻址字节块，而不是单向流。
    """

    def __init__(self, data: Union[bytes, bytearray, BinaryIO]):
        """
        初始化读取器

        Args:
            data: 完整文件内容，或以 'rb' 模式打开的文件对象
        """
        if isinstance(data, (bytes, bytearray)):
            data = io.BytesIO(bytes(data))
        self._file = data
        self._position = 0
        self._file.seek(0, io.SEEK_END)
        self._size = self._file.tell()
        self._file.seek(0)

    @property
    def position(self) -> int:
        """当前读取位置"""
        return self._position

    @property
    def size(self) -> int:
        """数据总长度"""
        return self._size

    def at_end(self) -> bool:
        """是否已到达数据末尾"""
        return self._position >= self._size

    # ==================== 原始读取 ====================

    def read_bytes(self, size: int) -> bytes:
        """
        读取指定字节数

        Args:
            size: 要读取的字节数

        Returns:
            读取的字节

        Raises:
            TruncatedInputError: 剩余数据不足请求的字节数
        """
        data = self._file.read(size)
        if len(data) < size:
            raise TruncatedInputError(self._position, size, len(data))
        self._position += size
        return data

    def read_struct(self, fmt: str) -> Tuple[Any, ...]:
        """按 struct 格式读取"""
        size = struct.calcsize(fmt)
        data = self.read_bytes(size)
        return struct.unpack(fmt, data)

    # ==================== 类型化读取 ====================

    def read_u8(self) -> int:
        """读取无符号 8 位整数"""
        return self.read_struct('<B')[0]

    def read_u16(self) -> int:
        """读取无符号 16 位整数 (Little-Endian)"""
        return self.read_struct('<H')[0]

    def read_cstring(self, terminator: int = 0x00) -> bytes:
        """
        读取以结束符结尾的字节串

        结束符被消费但不包含在返回值中。遇到文件末尾时
        直接返回已读取部分，不视为错误。

        Args:
            terminator: 结束字节，默认 0x00

        Returns:
            不含结束符的原始字节
        """
        buffer = bytearray()
        while not self.at_end():
            byte = self.read_u8()
            if byte == terminator:
                break
            buffer.append(byte)
        return bytes(buffer)

    # ==================== 位置控制 ====================

    def seek(self, position: int):
        """
        移动到指定位置

        Args:
            position: 目标位置
        """
        self._file.seek(position)
        self._position = position
