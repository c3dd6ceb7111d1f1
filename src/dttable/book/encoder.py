#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
书籍表编码器

BookDecoder 的逆过程: 遍历 Book → Page → Line，
把 <C:n> / <S:n> 标记还原为控制字节，最后回写指针表。
"""

import logging
from typing import List, Optional

from ..core.binary_io import BinaryWriter
from ..core.pointer_table import patch_pointer_table, BOOK_RECORD_WIDTH
from ..core.schema import (
    Book, Page,
    CTRL_END_BOOK, CTRL_END_LINE, CTRL_END_PAGE, CTRL_PAGE_BREAK,
    CTRL_COLOR, CTRL_FORMAT,
    FORMAT_IMAGE, FORMAT_SIZE, FORMAT_IMAGE_X, FORMAT_IMAGE_Y,
    IMAGE_CLEAR, COLOR_MARKER, SIZE_MARKER, MARKER_END,
)
from ..core.text_codec import TextCodec
from ..exceptions import MalformedDirectiveError


logger = logging.getLogger(__name__)

# 行文本中不允许直接出现的控制字节 (只能通过标记表达)
RESERVED_BYTES = frozenset({
    CTRL_END_BOOK, CTRL_END_LINE, CTRL_END_PAGE, CTRL_PAGE_BREAK,
    CTRL_COLOR, CTRL_FORMAT,
})


def _find_marker(text: str, start: int) -> int:
    """返回下一个 <C: 或 <S: 的位置，没有则返回 -1"""
    positions = [p for p in (text.find(COLOR_MARKER, start),
                             text.find(SIZE_MARKER, start)) if p != -1]
    return min(positions) if positions else -1


class BookEncoder:
    """
    书籍表编码器

    两遍式写入: 先预留指针表空间，逐本写入名称与内容并记录偏移，
    全部写完后回写指针表。
    """

    def __init__(self, codec: Optional[TextCodec] = None):
        """
        初始化编码器

        Args:
            codec: 文本编解码器，默认 CP932
        """
        self._codec = codec or TextCodec()

    def encode(self, books: List[Book]) -> bytes:
        """
        编码书籍列表

        Book / Page / Line 的 id 不参与编码，顺序由列表位置决定。

        Args:
            books: Book 列表

        Returns:
            完整的 _dt 文件内容

        Raises:
            MalformedDirectiveError: 文本中的标记无法还原
            InvalidFormatError: 偏移超出 u16 范围
        """
        writer = BinaryWriter()
        table_position = writer.reserve(BOOK_RECORD_WIDTH * len(books))

        offsets = []
        for book_id, book in enumerate(books):
            name_offset = writer.offset()
            writer.write_cstring(self._codec.encode(book.name))
            content_offset = writer.offset()
            logger.debug("Book %d: 名称 0x%04X, 内容 0x%04X",
                         book_id, name_offset, content_offset)
            self._write_content(writer, book, book_id)
            offsets.extend((name_offset, content_offset))

        patch_pointer_table(writer, table_position, offsets)
        return writer.getvalue()

    def _write_content(self, writer: BinaryWriter, book: Book, book_id: int):
        """写入一本书的内容区，以 0x00 结束"""
        for page_id, page in enumerate(book.pages):
            if page_id:
                writer.write_u8(CTRL_END_PAGE)
                writer.write_u8(CTRL_PAGE_BREAK)
            self._write_page_directives(writer, page)
            for line_id, line in enumerate(page.lines):
                if line_id:
                    writer.write_u8(CTRL_END_LINE)
                logger.debug("  Page %d, Line %d @0x%04X", page_id, line_id, writer.position)
                context = f"book {book_id}, page {page_id}, line {line_id}"
                writer.write_bytes(self.expand_markers(line.text, context))
        writer.write_u8(CTRL_END_BOOK)

    @staticmethod
    def _write_page_directives(writer: BinaryWriter, page: Page):
        """按 x → y → image_id 的固定顺序写入格式指令"""
        for value, type_byte in ((page.image_x, FORMAT_IMAGE_X),
                                 (page.image_y, FORMAT_IMAGE_Y)):
            if value is not None:
                writer.write_u8(CTRL_FORMAT)
                writer.write_bytes(str(value).encode('ascii'))
                writer.write_u8(type_byte)

        if page.image_id == IMAGE_CLEAR:
            writer.write_u8(CTRL_FORMAT)
            writer.write_u8(FORMAT_IMAGE)
        elif page.image_id is not None:
            writer.write_u8(CTRL_FORMAT)
            writer.write_bytes(str(page.image_id).encode('ascii'))
            writer.write_u8(FORMAT_IMAGE)

    def expand_markers(self, text: str, context: str = '') -> bytes:
        """
        将行文本编码为字节，并把内联标记还原为控制字节

            <C:n>  ->  07 n         (n 为 0-255 的十进制)
            <S:d>  ->  23 d 53      (d 为原样保存的数字字符)

        Args:
            text: 行文本
            context: 出错时附带的位置描述

        Returns:
            编码后的字节 (不含行结束符)

        Raises:
            MalformedDirectiveError: 标记不完整、数值越界，或文本含有保留控制字节
        """
        output = bytearray()
        position = 0
        while position < len(text):
            marker = _find_marker(text, position)
            literal_end = len(text) if marker == -1 else marker
            output += self._encode_literal(text[position:literal_end], context)
            if marker == -1:
                break

            end = text.find(MARKER_END, marker)
            if end == -1:
                raise MalformedDirectiveError(
                    'marker', text[marker:], context=context
                )
            value = text[marker + len(COLOR_MARKER):end]

            if text.startswith(COLOR_MARKER, marker):
                if not (value.isascii() and value.isdigit()) or int(value) > 0xFF:
                    raise MalformedDirectiveError('color', value, context=context)
                output.append(CTRL_COLOR)
                output.append(int(value))
            else:
                if not value:
                    raise MalformedDirectiveError('size', value, context=context)
                output.append(CTRL_FORMAT)
                output += self._codec.encode(value)
                output.append(FORMAT_SIZE)

            position = end + len(MARKER_END)

        return bytes(output)

    def _encode_literal(self, text: str, context: str) -> bytes:
        data = self._codec.encode(text)
        reserved = RESERVED_BYTES.intersection(data)
        if reserved:
            raise MalformedDirectiveError(
                'text', f"含保留控制字节 {sorted(reserved)}", context=context
            )
        return data
