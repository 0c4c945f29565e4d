#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Executor Module

Provides section pagination.
"""

from .block_flow import (
    BlockFlowExecutor,
    ColumnLayout,
    FlowState,
    LayoutOptions,
    PageLayout,
    PlacedBlock,
    SectionLayout,
    paginate_section,
)

__all__ = [
    "BlockFlowExecutor",
    "ColumnLayout",
    "FlowState",
    "LayoutOptions",
    "PageLayout",
    "PlacedBlock",
    "SectionLayout",
    "paginate_section",
]
