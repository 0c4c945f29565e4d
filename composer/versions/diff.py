#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Version Diff Engine

Block-level comparison of two documents (or two DocumentVersions).

Blocks are joined by id only. A block that keeps its id while moving to
another flow or section is reported as unchanged/modified with differing
locations; a block re-created under a new id is reported as removed + added.

Version: 1.0.0
"""

from dataclasses import dataclass
from enum import Enum
from functools import singledispatch
from typing import Any, Dict, List, Optional, Tuple
import logging

from composer.contracts import (
    Block,
    BlockContent,
    BlockLocation,
    ChartContent,
    CrossReferenceContent,
    DividerContent,
    Document,
    DocumentVersion,
    FigureContent,
    HeadingContent,
    ListContent,
    ParagraphContent,
    QuoteContent,
    SpacerContent,
    TableContent,
    TableOfContentsContent,
)

logger = logging.getLogger(__name__)

COMPARED_FIELDS = ("content", "type", "metadata")


class DiffType(Enum):
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class BlockDiff:
    """
    Classification of one block id.

    ``old`` is the location in the first document (absent for added blocks),
    ``new`` the location in the second (absent for removed blocks).
    """
    type: DiffType
    old: Optional[BlockLocation] = None
    new: Optional[BlockLocation] = None
    changed_fields: Tuple[str, ...] = ()

    @property
    def block_id(self) -> str:
        return (self.new or self.old).block.id

    @property
    def block(self) -> Block:
        """The block as it is in the newer document, or the removed block"""
        return (self.new or self.old).block

    @property
    def old_block(self) -> Optional[Block]:
        return self.old.block if self.old else None

    @property
    def new_block(self) -> Optional[Block]:
        return self.new.block if self.new else None

    @property
    def moved(self) -> bool:
        """Same id, different owning section or flow"""
        if self.old is None or self.new is None:
            return False
        return (self.old.section_id, self.old.flow_id) != (self.new.section_id, self.new.flow_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "block_id": self.block_id,
            "changed_fields": list(self.changed_fields),
            "old": _location_dict(self.old),
            "new": _location_dict(self.new),
            "summary": summarize_block(self.block),
        }


@dataclass(frozen=True)
class DiffStatistics:
    added: int = 0
    removed: int = 0
    modified: int = 0
    unchanged: int = 0

    @property
    def total_changes(self) -> int:
        return self.added + self.removed + self.modified

    @property
    def has_changes(self) -> bool:
        return self.total_changes > 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "added": self.added,
            "removed": self.removed,
            "modified": self.modified,
            "unchanged": self.unchanged,
        }


@dataclass(frozen=True)
class DocumentDiff:
    """Ordered block diffs plus their tallies"""
    diffs: Tuple[BlockDiff, ...]
    statistics: DiffStatistics

    def visible(self) -> List[BlockDiff]:
        """Diffs without the unchanged entries"""
        return [d for d in self.diffs if d.type != DiffType.UNCHANGED]

    def of_type(self, diff_type: DiffType) -> List[BlockDiff]:
        return [d for d in self.diffs if d.type == diff_type]

    def get(self, block_id: str) -> Optional[BlockDiff]:
        for diff in self.diffs:
            if diff.block_id == block_id:
                return diff
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "statistics": self.statistics.to_dict(),
            "diffs": [d.to_dict() for d in self.diffs],
        }

    def __len__(self) -> int:
        return len(self.diffs)

    def __iter__(self):
        return iter(self.diffs)


def changed_fields(old: Block, new: Block) -> Tuple[str, ...]:
    """Compared fields whose values differ between two versions of a block"""
    return tuple(name for name in COMPARED_FIELDS if getattr(old, name) != getattr(new, name))


def compute_block_diffs(old: Document, new: Document) -> DocumentDiff:
    """
    Classify every block id of two documents.

    Order: the first document's traversal order for removed, modified and
    unchanged blocks, then the second document's order for added blocks.
    """
    new_locations: Dict[str, BlockLocation] = {}
    for location in new.walk():
        new_locations.setdefault(location.block.id, location)

    diffs: List[BlockDiff] = []
    seen = set()

    for location in old.walk():
        block_id = location.block.id
        if block_id in seen:
            continue
        seen.add(block_id)

        match = new_locations.get(block_id)
        if match is None:
            diffs.append(BlockDiff(type=DiffType.REMOVED, old=location))
            continue

        fields = changed_fields(location.block, match.block)
        diffs.append(BlockDiff(
            type=DiffType.MODIFIED if fields else DiffType.UNCHANGED,
            old=location,
            new=match,
            changed_fields=fields,
        ))

    for block_id, location in new_locations.items():
        if block_id not in seen:
            diffs.append(BlockDiff(type=DiffType.ADDED, new=location))

    counts = {diff_type: 0 for diff_type in DiffType}
    for diff in diffs:
        counts[diff.type] += 1
    statistics = DiffStatistics(
        added=counts[DiffType.ADDED],
        removed=counts[DiffType.REMOVED],
        modified=counts[DiffType.MODIFIED],
        unchanged=counts[DiffType.UNCHANGED],
    )

    logger.debug(f"Diff {old.id} -> {new.id}: {statistics.to_dict()}")
    return DocumentDiff(diffs=tuple(diffs), statistics=statistics)


def diff_versions(older: DocumentVersion, newer: DocumentVersion) -> DocumentDiff:
    """Compare the content of two versions"""
    return compute_block_diffs(older.content, newer.content)


def summarize_block(block: Block) -> str:
    """Short display text for a block"""
    return _summarize(block.content)


@singledispatch
def _summarize(content: BlockContent) -> str:
    return "Unknown block type"


@_summarize.register(HeadingContent)
@_summarize.register(ParagraphContent)
def _(content) -> str:
    return content.text


@_summarize.register
def _(content: QuoteContent) -> str:
    if content.attribution:
        return f"{content.text} ({content.attribution})"
    return content.text


@_summarize.register
def _(content: ListContent) -> str:
    return ", ".join(content.items)


@_summarize.register
def _(content: FigureContent) -> str:
    return f"Image: {content.alt or 'Untitled'}"


@_summarize.register
def _(content: TableContent) -> str:
    return f"Table: {len(content.rows)} rows"


@_summarize.register
def _(content: ChartContent) -> str:
    return f"Chart ({content.chart_type}): {len(content.values)} values"


@_summarize.register
def _(content: CrossReferenceContent) -> str:
    return f"Reference: {content.label or content.target_block_id or 'Untitled'}"


@_summarize.register
def _(content: DividerContent) -> str:
    return "Divider"


@_summarize.register
def _(content: SpacerContent) -> str:
    return f"Spacer: {content.height}pt"


@_summarize.register
def _(content: TableOfContentsContent) -> str:
    return f"Table of contents: {content.config.title}"


def _location_dict(location: Optional[BlockLocation]) -> Optional[Dict[str, Any]]:
    if location is None:
        return None
    return {
        "section_id": location.section_id,
        "flow_id": location.flow_id,
        "block": location.block.to_dict(),
    }
