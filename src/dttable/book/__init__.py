#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
dttable 书籍表

提供书籍表 (t_book._dt) 的词法分析、解码和编码功能。
"""

from .tokenizer import Event, EventKind, step, tokenize
from .decoder import BookDecoder
from .encoder import BookEncoder

__all__ = [
    "Event",
    "EventKind",
    "step",
    "tokenize",
    "BookDecoder",
    "BookEncoder",
]
