#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Versions Module

Snapshots, block-level diffs and safe revert.

Usage:
    from composer.versions import compute_block_diffs, revert_to_version

    diff = compute_block_diffs(v1.content, v2.content)
    for entry in diff.visible():
        print(entry.type.value, summarize_block(entry.block))

Version: 1.0.0
"""

from .diff import (
    BlockDiff,
    DiffStatistics,
    DiffType,
    DocumentDiff,
    changed_fields,
    compute_block_diffs,
    diff_versions,
    summarize_block,
)
from .snapshots import PersistenceProvider, next_version_number, take_snapshot
from .revert import RevertResult, revert_to_version

__all__ = [
    "BlockDiff",
    "DiffStatistics",
    "DiffType",
    "DocumentDiff",
    "changed_fields",
    "compute_block_diffs",
    "diff_versions",
    "summarize_block",
    "PersistenceProvider",
    "next_version_number",
    "take_snapshot",
    "RevertResult",
    "revert_to_version",
]

__version__ = "1.0.0"
