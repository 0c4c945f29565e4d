#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Structural Document Model

Pure operations over Document -> Section -> Flow -> Block, legacy
migration, and the single-editor session.

Usage:
    from composer.model import EditContext, create_document, add_section

    ctx = EditContext()
    doc = create_document("Report", ctx=ctx)
    doc, section = add_section(doc, "Body", ctx=ctx)

Version: 1.0.0
"""

from composer.context import EditContext, FixedClock, SequentialIds
from .operations import (
    add_block,
    add_flow,
    add_section,
    create_document,
    delete_block,
    delete_flow,
    delete_section,
    find_block,
    find_flow,
    find_section,
    iter_blocks,
    move_block,
    update_block,
    update_section,
)
from .migration import (
    MigrationResult,
    ensure_primary_flow,
    get_primary_flow,
    migrate_flow_ownership,
)
from .session import EditorSession

__all__ = [
    # Context
    "EditContext",
    "FixedClock",
    "SequentialIds",

    # Operations
    "add_block",
    "add_flow",
    "add_section",
    "create_document",
    "delete_block",
    "delete_flow",
    "delete_section",
    "find_block",
    "find_flow",
    "find_section",
    "iter_blocks",
    "move_block",
    "update_block",
    "update_section",

    # Migration
    "MigrationResult",
    "ensure_primary_flow",
    "get_primary_flow",
    "migrate_flow_ownership",

    # Session
    "EditorSession",
]

__version__ = "1.0.0"
