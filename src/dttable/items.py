#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
物品表编解码

二进制布局:
    [record_offset: u16] * N                 自终止指针表
    record: [name_off: u16][desc_off: u16]   名称 / 说明的绝对偏移
            name\\0 desc\\0                   紧跟在记录头之后
"""

import logging
from typing import List, Optional

from .core.binary_io import BinaryReader, BinaryWriter
from .core.pointer_table import read_pointer_table, patch_pointer_table, ITEM_RECORD_WIDTH
from .core.schema import Item
from .core.text_codec import TextCodec


logger = logging.getLogger(__name__)

RECORD_HEADER_SIZE = 4


class ItemTableCodec:
    """物品表编解码器，与书籍表共用指针表和文本编解码"""

    def __init__(self, codec: Optional[TextCodec] = None):
        self._codec = codec or TextCodec()

    def decode(self, data: bytes) -> List[Item]:
        """
        解码物品表

        记录头中的两个子偏移不参与解码: 名称和说明
        按顺序从记录头之后读取。

        Raises:
            TruncatedInputError: 指针表或记录头超出文件末尾
            InvalidFormatError: 指针表结构无效
        """
        reader = BinaryReader(data)
        offsets, _ = read_pointer_table(reader, 0, ITEM_RECORD_WIDTH)

        items = []
        for item_id, record_offset in enumerate(offsets):
            reader.seek(record_offset)
            reader.read_bytes(RECORD_HEADER_SIZE)
            name_address = reader.position
            name = self._codec.decode(reader.read_cstring(), name_address)
            desc_address = reader.position
            desc = self._codec.decode(reader.read_cstring(), desc_address)
            logger.debug("Item %d @0x%04X: %s", item_id, record_offset, name)
            items.append(Item(item_id=item_id, item_name=name, item_desc=desc))
        return items

    def encode(self, items: List[Item]) -> bytes:
        """
        编码物品表

        Raises:
            InvalidFormatError: 偏移超出 u16 范围
        """
        writer = BinaryWriter()
        table_position = writer.reserve(ITEM_RECORD_WIDTH * len(items))

        record_offsets = []
        for item in items:
            record_offset = writer.offset()
            record_offsets.append(record_offset)
            header_position = writer.reserve(RECORD_HEADER_SIZE)

            name_offset = writer.offset()
            writer.write_cstring(self._codec.encode(item.item_name))
            desc_offset = writer.offset()
            writer.write_cstring(self._codec.encode(item.item_desc))

            writer.patch_u16(header_position, name_offset)
            writer.patch_u16(header_position + 2, desc_offset)

        patch_pointer_table(writer, table_position, record_offsets)
        return writer.getvalue()
