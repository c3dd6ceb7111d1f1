#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
物品表编解码测试
"""

import pytest

from dttable import ItemTableCodec
from dttable.core.schema import Item
from dttable.exceptions import TruncatedInputError


class TestItemTableCodec:
    """ItemTableCodec 测试"""

    def test_decode_sample(self, item_blob, items):
        assert ItemTableCodec().decode(item_blob) == items

    def test_encode_sample(self, item_blob, items):
        """编码结果与样本逐字节一致"""
        assert ItemTableCodec().encode(items) == item_blob

    def test_roundtrip_bytes(self, item_blob):
        codec = ItemTableCodec()

        assert codec.encode(codec.decode(item_blob)) == item_blob

    def test_empty(self):
        codec = ItemTableCodec()

        assert codec.encode([]) == b''
        assert codec.decode(b'') == []

    def test_shift_jis(self):
        items = [Item(item_id=0, item_name='ティアラ', item_desc='ＨＰを回復する')]
        codec = ItemTableCodec()

        assert codec.decode(codec.encode(items)) == items

    def test_ids_are_positional(self):
        items = [Item(item_id=7, item_name='a', item_desc='b'),
                 Item(item_id=3, item_name='c', item_desc='d')]
        result = ItemTableCodec().decode(ItemTableCodec().encode(items))

        assert [item.item_id for item in result] == [0, 1]

    def test_record_header_truncated(self):
        """记录偏移指向文件末尾附近时报告截断"""
        with pytest.raises(TruncatedInputError):
            ItemTableCodec().decode(b'\x02\x00')
