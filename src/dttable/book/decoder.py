#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
书籍表解码器

二进制布局:
    [name_offset: u16][content_offset: u16] * N    自终止指针表
    name:    以 0x00 结尾的字符串
    content: 控制字节文法，见 tokenizer 模块
"""

import logging
from typing import List, Optional

from .tokenizer import EventKind, tokenize
from ..core.binary_io import BinaryReader
from ..core.pointer_table import read_pointer_table, BOOK_RECORD_WIDTH
from ..core.schema import Book, Page, Line, COLOR_MARKER, SIZE_MARKER
from ..core.text_codec import TextCodec
from ..exceptions import MalformedDirectiveError, TruncatedInputError


logger = logging.getLogger(__name__)


class _LineBuffer:
    """行文本累积: 原始字节在遇到标记或行结束时才统一解码"""

    def __init__(self, codec: TextCodec):
        self._codec = codec
        self._parts: List[str] = []
        self._pending = bytearray()
        self._pending_address: Optional[int] = None

    def push_byte(self, byte: int, address: int):
        if self._pending_address is None:
            self._pending_address = address
        self._pending.append(byte)

    def push_marker(self, marker: str):
        self._flush()
        self._parts.append(marker)

    def _flush(self):
        if self._pending:
            data = bytes(self._pending)
            # 普通文本中的标记拼写无法与控制字节区分，不能无损往返
            for marker in (COLOR_MARKER, SIZE_MARKER):
                index = data.find(marker.encode('ascii'))
                if index != -1:
                    raise MalformedDirectiveError(
                        'text', data.decode('ascii', errors='replace'),
                        address=self._pending_address + index
                    )
            self._parts.append(self._codec.decode(data, self._pending_address))
        self._pending.clear()
        self._pending_address = None

    def take(self) -> str:
        """取出当前行文本并清空"""
        self._flush()
        text = ''.join(self._parts)
        self._parts = []
        return text


class BookDecoder:
    """
    书籍表解码器

    按文件顺序发现书、页、行，任何致命错误都会中止整个解码。
    """

    def __init__(self, codec: Optional[TextCodec] = None):
        """
        初始化解码器

        Args:
            codec: 文本编解码器，默认 CP932
        """
        self._codec = codec or TextCodec()

    def decode(self, data: bytes) -> List[Book]:
        """
        解码整个书籍表

        Args:
            data: 完整文件内容

        Returns:
            Book 列表，id 等于其在列表中的位置

        Raises:
            TruncatedInputError: 指针表或指令超出文件末尾
            InvalidFormatError: 指针表结构无效
            MalformedDirectiveError: 图像坐标 / 编号无法解析
        """
        reader = BinaryReader(data)
        offsets, table_end = read_pointer_table(reader, 0, BOOK_RECORD_WIDTH)
        logger.debug("书籍指针表: %d 本, 结束于 0x%04X", len(offsets) // 2, table_end)

        books = []
        for book_id in range(len(offsets) // 2):
            name_offset, content_offset = offsets[book_id * 2:book_id * 2 + 2]
            books.append(self._read_book(reader, book_id, name_offset, content_offset))
        return books

    def _read_book(
        self,
        reader: BinaryReader,
        book_id: int,
        name_offset: int,
        content_offset: int
    ) -> Book:
        """读取单本书: 名称 + 内容区"""
        for offset in (name_offset, content_offset):
            if offset >= reader.size:
                raise TruncatedInputError(offset, 1, 0)

        reader.seek(name_offset)
        name = self._codec.decode(reader.read_cstring(), name_offset)
        logger.debug("Book %d: %s (内容 0x%04X)", book_id, name, content_offset)

        book = Book(id=book_id, name=name)
        page = Page(id=0)
        buffer = _LineBuffer(self._codec)

        def finish_line(address: int):
            line = Line(id=len(page.lines), text=buffer.take())
            logger.debug("    Line %d @0x%04X: %r", line.id, address, line.text)
            page.lines.append(line)

        for event in tokenize(reader, content_offset):
            kind = event.kind
            if kind is EventKind.TEXT:
                buffer.push_byte(event.value, event.address)
            elif kind is EventKind.COLOR:
                buffer.push_marker(f'<C:{event.value}>')
            elif kind is EventKind.SIZE:
                size = self._codec.decode(event.value, event.address)
                buffer.push_marker(f'<S:{size}>')
            elif kind is EventKind.IMAGE_X:
                page.image_x = event.value
            elif kind is EventKind.IMAGE_Y:
                page.image_y = event.value
            elif kind is EventKind.IMAGE_ID:
                page.image_id = event.value
            elif kind is EventKind.END_LINE:
                finish_line(event.address)
            elif kind in (EventKind.END_PAGE, EventKind.END_BOOK):
                finish_line(event.address)
                logger.debug("  Page %d: %d 行", page.id, len(page.lines))
                book.pages.append(page)
                page = Page(id=len(book.pages))

        return book
