#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Table of Contents Module

Derives TOC outlines from heading blocks and pagination results.

Usage:
    from composer.toc import TocGenerator, render_text

    outline = TocGenerator(TocConfig.standard()).generate(document, pagination)
    print("\\n\\f".join(render_text(outline)))

Version: 1.0.0
"""

from .generator import (
    TocEntry,
    TocOutline,
    TocGenerator,
    clean_heading_title,
    generate_for_block,
    heading_to_anchor,
    should_update_toc,
    toc_blocks,
)
from .formatting import (
    TocNode,
    build_outline_tree,
    format_entry,
    render_text,
    to_markdown,
)

__all__ = [
    "TocEntry",
    "TocOutline",
    "TocGenerator",
    "clean_heading_title",
    "generate_for_block",
    "heading_to_anchor",
    "should_update_toc",
    "toc_blocks",
    "TocNode",
    "build_outline_tree",
    "format_entry",
    "render_text",
    "to_markdown",
]

__version__ = "1.0.0"
