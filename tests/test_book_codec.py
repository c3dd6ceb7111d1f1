#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
书籍表编解码测试

测试 BookDecoder / BookEncoder 以及两者的往返一致性。
"""

import logging

import pytest

from dttable import BookDecoder, BookEncoder, TextCodec
from dttable.core.schema import Book, Page, Line, IMAGE_CLEAR
from dttable.exceptions import (
    InvalidFormatError,
    MalformedDirectiveError,
    TruncatedInputError,
)

from conftest import make_book_blob


# ==================== 解码测试 ====================

class TestBookDecoder:
    """BookDecoder 测试"""

    def test_decode_sample(self, book_blob, books):
        assert BookDecoder().decode(book_blob) == books

    def test_empty_blob(self):
        assert BookDecoder().decode(b'') == []

    def test_no_image_directive_leaves_fields_unset(self):
        result = BookDecoder().decode(make_book_blob(b'N\x00', b'text\x00'))
        page = result[0].pages[0]

        assert page.image_x is None
        assert page.image_y is None
        assert page.image_id is None

    @pytest.mark.parametrize("content,image_id", [
        (b'\x23F\x00', IMAGE_CLEAR),
        (b'\x2312F\x00', 12),
        (b'\x230F\x00', 0),
    ])
    def test_image_id(self, content, image_id):
        result = BookDecoder().decode(make_book_blob(b'N\x00', content))

        assert result[0].pages[0].image_id == image_id

    def test_eof_mid_line(self):
        """内容区末尾缺少 0x00 时按书籍结束处理"""
        result = BookDecoder().decode(make_book_blob(b'N\x00', b'ab\x01cd'))

        assert result == [Book(id=0, name='N', pages=[
            Page(id=0, lines=[Line(id=0, text='ab'), Line(id=1, text='cd')])
        ])]

    def test_empty_content(self):
        """空内容区解码为一页一行空文本"""
        result = BookDecoder().decode(make_book_blob(b'N\x00', b'\x00'))

        assert result[0].pages == [Page(id=0, lines=[Line(id=0, text='')])]

    def test_ids_are_positional(self):
        content = b'a\x01b\x01c\x02\x03d\x02\x03e\x00'
        result = BookDecoder().decode(make_book_blob(b'N\x00', content))
        pages = result[0].pages

        assert [p.id for p in pages] == [0, 1, 2]
        assert [l.id for l in pages[0].lines] == [0, 1, 2]
        assert [l.text for l in pages[0].lines] == ['a', 'b', 'c']

    def test_shift_jis_text(self):
        name = 'オーブメント'.encode('cp932') + b'\x00'
        content = 'ようこそ'.encode('cp932') + b'\x07\x02' + '!'.encode('cp932') + b'\x00'
        result = BookDecoder().decode(make_book_blob(name, content))

        assert result[0].name == 'オーブメント'
        assert result[0].pages[0].lines[0].text == 'ようこそ<C:2>!'

    def test_undecodable_text_continues(self):
        """文本解码失败不中止转换"""
        codec = TextCodec()
        result = BookDecoder(codec).decode(make_book_blob(b'N\x00', b'a\x82\x01b\x00'))
        lines = result[0].pages[0].lines

        assert lines[0].text.startswith('a')
        assert lines[1].text == 'b'
        assert len(codec.errors) == 1

    def test_malformed_directive_reports_address(self):
        blob = make_book_blob(b'N\x00', b'\x231Ax\x00')

        with pytest.raises(MalformedDirectiveError) as exc_info:
            BookDecoder().decode(blob)

        # 内容区从 0x06 开始，数值从 0x07 开始
        assert exc_info.value.address == 0x07

    def test_truncated_table(self):
        with pytest.raises(TruncatedInputError):
            BookDecoder().decode(b'\x08\x00\x0a\x00')

    def test_misaligned_table(self):
        with pytest.raises(InvalidFormatError):
            BookDecoder().decode(b'\x06\x00\x06\x00\x06\x00')

    @pytest.mark.parametrize("blob,address", [
        (b'\x04\x00\x09\x00N\x00', 0x09),           # 内容区越界
        (b'\x04\x00\x06\x00N\x00', 0x06),           # 内容区恰好位于文件末尾
    ])
    def test_offset_past_end(self, blob, address):
        with pytest.raises(TruncatedInputError) as exc_info:
            BookDecoder().decode(blob)

        assert exc_info.value.address == address

    def test_name_offset_past_end(self):
        # 第二本书的名称偏移超出文件
        blob = bytes([0x08, 0x00, 0x0A, 0x00, 0x40, 0x00, 0x0A, 0x00]) + b'N\x00t\x00'

        with pytest.raises(TruncatedInputError) as exc_info:
            BookDecoder().decode(blob)

        assert exc_info.value.address == 0x40

    @pytest.mark.parametrize("content,address", [
        (b'a<C:b\x00', 0x07),
        (b'<C:5>\x00', 0x06),
        (b'ok\x01x<S:1>\x00', 0x0A),
    ])
    def test_literal_marker_text_rejected(self, content, address):
        """数据中的标记拼写在重新编码时会变成控制字节"""
        with pytest.raises(MalformedDirectiveError) as exc_info:
            BookDecoder().decode(make_book_blob(b'N\x00', content))

        assert exc_info.value.address == address

    def test_line_debug_log(self, book_blob, caplog):
        with caplog.at_level(logging.DEBUG, logger="dttable.book.decoder"):
            BookDecoder().decode(book_blob)

        assert "Line 1 @0x002A: 'second'" in caplog.text


# ==================== 编码测试 ====================

class TestBookEncoder:
    """BookEncoder 测试"""

    def test_encode_sample(self, book_blob, books):
        assert BookEncoder().encode(books) == book_blob

    def test_empty(self):
        assert BookEncoder().encode([]) == b''

    def test_ids_ignored(self, book_blob, books):
        """编码只看列表位置，不看 id 字段"""
        for book in books:
            book.id = 99
            for page in book.pages:
                page.id = 42

        assert BookEncoder().encode(books) == book_blob

    def test_directive_order(self):
        """x → y → image_id 的固定顺序"""
        book = Book(name='N', pages=[
            Page(image_id=3, image_y=2, image_x=1, lines=[Line(text='t')])
        ])

        data = BookEncoder().encode([book])

        assert data.endswith(b'N\x00\x231x\x232y\x233Ft\x00')

    def test_image_clear(self):
        book = Book(name='N', pages=[Page(image_id=IMAGE_CLEAR, lines=[Line(text='t')])])

        assert BookEncoder().encode([book]).endswith(b'N\x00\x23Ft\x00')

    def test_page_and_line_separators(self):
        book = Book(name='N', pages=[
            Page(lines=[Line(text='a'), Line(text='b')]),
            Page(lines=[Line(text='c')]),
        ])

        assert BookEncoder().encode([book]).endswith(b'N\x00a\x01b\x02\x03c\x00')

    def test_line_debug_log(self, caplog):
        book = Book(name='N', pages=[Page(lines=[Line(text='a'), Line(text='b')])])

        with caplog.at_level(logging.DEBUG, logger="dttable.book.encoder"):
            BookEncoder().encode([book])

        # 内容区从 0x06 开始，第二行位于 0x01 之后
        assert "Page 0, Line 1 @0x0008" in caplog.text

    def test_offset_overflow(self):
        book = Book(name='A' * 0x10000, pages=[Page(lines=[Line(text='t')])])

        with pytest.raises(InvalidFormatError):
            BookEncoder().encode([book])


# ==================== 内联标记测试 ====================

class TestExpandMarkers:
    """<C:n> / <S:n> 标记还原测试"""

    def test_color_and_size(self):
        data = BookEncoder().expand_markers('Hi<C:5>there<S:2>')

        assert data == b'Hi\x07\x05there\x23\x32\x53'

    def test_shift_jis_literal(self):
        data = BookEncoder().expand_markers('<C:255>剣')

        assert data == b'\x07\xff' + '剣'.encode('cp932')

    @pytest.mark.parametrize("text,expected", [
        ('', b''),
        ('plain', b'plain'),
        ('a<b', b'a<b'),
        ('<C:0><C:12>', b'\x07\x00\x07\x0c'),
        ('<S:12>', b'\x2312S'),
    ])
    def test_expand(self, text, expected):
        assert BookEncoder().expand_markers(text) == expected

    @pytest.mark.parametrize("text", [
        '<C:256>',      # 超出单字节
        '<C:x>',        # 非数字
        '<C:>',
        '<C:5',         # 缺少 >
        '<S:>',
        'a#b',          # 保留控制字节
        'a\x01b',
    ])
    def test_malformed(self, text):
        with pytest.raises(MalformedDirectiveError):
            BookEncoder().expand_markers(text, 'book 0, page 0, line 0')


# ==================== 往返测试 ====================

class TestRoundTrip:
    """解码 → 编码 → 解码"""

    def test_decode_encode_identical_bytes(self, book_blob):
        books = BookDecoder().decode(book_blob)

        assert BookEncoder().encode(books) == book_blob

    def test_model_roundtrip(self, books):
        assert BookDecoder().decode(BookEncoder().encode(books)) == books

    def test_encode_is_deterministic(self, books):
        encoder = BookEncoder()

        assert encoder.encode(books) == encoder.encode(books)

    def test_none_and_clear_stay_distinct(self):
        books = [Book(id=0, name='N', pages=[
            Page(id=0, lines=[Line(id=0, text='a')]),
            Page(id=1, image_id=IMAGE_CLEAR, lines=[Line(id=0, text='b')]),
            Page(id=2, image_id=7, lines=[Line(id=0, text='c')]),
        ])]

        result = BookDecoder().decode(BookEncoder().encode(books))

        assert [p.image_id for p in result[0].pages] == [None, IMAGE_CLEAR, 7]
        assert result == books
