#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Anchor Index

Records where headings, figures and tables landed after pagination, numbers
figures and tables in document order, and resolves cross-reference blocks
to display text and page numbers.

Version: 1.0.0
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from composer.contracts import (
    Block,
    BlockType,
    CrossReferenceContent,
    FigureContent,
    HeadingContent,
    TableContent,
)


class AnchorType(Enum):
    HEADING = "heading"
    FIGURE = "figure"
    TABLE = "table"


_ANCHOR_TYPES = {
    BlockType.HEADING: AnchorType.HEADING,
    BlockType.FIGURE: AnchorType.FIGURE,
    BlockType.TABLE: AnchorType.TABLE,
}


@dataclass(frozen=True)
class Anchor:
    """A referenceable block and its position in the paginated document"""
    block_id: str
    type: AnchorType
    section_id: str
    page_number: int       # running, 1-based
    column_index: int
    top: float
    title: str = ""
    number: Optional[int] = None  # figures and tables only

    def to_dict(self) -> Dict[str, Any]:
        return {
            "block_id": self.block_id,
            "type": self.type.value,
            "section_id": self.section_id,
            "page_number": self.page_number,
            "column_index": self.column_index,
            "top": self.top,
            "title": self.title,
            "number": self.number,
        }


@dataclass(frozen=True)
class ResolvedReference:
    """Display text for a cross-reference block"""
    source_block_id: str
    target_block_id: str
    text: str
    page_number: Optional[int] = None
    anchor: Optional[Anchor] = None

    @property
    def resolved(self) -> bool:
        return self.anchor is not None


def anchor_title(block: Block) -> str:
    content = block.content
    if isinstance(content, HeadingContent):
        return content.text
    if isinstance(content, (FigureContent, TableContent)):
        return content.caption
    return ""


class AnchorIndex:
    """
    Anchors of one paginated document, in document order.

    Usage:
        index = AnchorIndex()
        index.register(block, section_id, page_number, column_index, top)
        index.resolve(xref_block).text   # "Figure 2: Revenue by region"
    """

    def __init__(self):
        self._anchors: Dict[str, Anchor] = {}
        self._counters = {AnchorType.FIGURE: 0, AnchorType.TABLE: 0}

    def register(
        self,
        block: Block,
        section_id: str,
        page_number: int,
        column_index: int,
        top: float,
    ) -> Optional[Anchor]:
        """Register a block; blocks that are not anchor types are ignored"""
        anchor_type = _ANCHOR_TYPES.get(block.type)
        if anchor_type is None or block.id in self._anchors:
            return None

        number = None
        if anchor_type in self._counters:
            self._counters[anchor_type] += 1
            number = self._counters[anchor_type]

        anchor = Anchor(
            block_id=block.id,
            type=anchor_type,
            section_id=section_id,
            page_number=page_number,
            column_index=column_index,
            top=top,
            title=anchor_title(block),
            number=number,
        )
        self._anchors[block.id] = anchor
        return anchor

    def get(self, block_id: str) -> Optional[Anchor]:
        return self._anchors.get(block_id)

    def all(self) -> List[Anchor]:
        return list(self._anchors.values())

    def by_type(self, anchor_type: AnchorType) -> List[Anchor]:
        return [a for a in self._anchors.values() if a.type == anchor_type]

    def on_page(self, page_number: int) -> List[Anchor]:
        return [a for a in self._anchors.values() if a.page_number == page_number]

    def list_of_figures(self) -> List[Anchor]:
        return self.by_type(AnchorType.FIGURE)

    def list_of_tables(self) -> List[Anchor]:
        return self.by_type(AnchorType.TABLE)

    def resolve(self, block: Block) -> ResolvedReference:
        """
        Resolve a cross-reference block.

        Figures and tables read "Figure N: caption"; headings read as their
        text; an explicit label wins over the heading text. Unresolved
        targets keep the label (or "??").
        """
        if not isinstance(block.content, CrossReferenceContent):
            raise TypeError(f"Block {block.id} is not a cross-reference")
        content = block.content
        anchor = self._anchors.get(content.target_block_id)

        if anchor is None:
            return ResolvedReference(
                source_block_id=block.id,
                target_block_id=content.target_block_id,
                text=content.label or "??",
            )

        if anchor.type == AnchorType.HEADING:
            text = content.label or anchor.title or f"Section on page {anchor.page_number}"
        else:
            text = f"{anchor.type.value.capitalize()} {anchor.number}"
            if anchor.title:
                text += f": {anchor.title}"

        return ResolvedReference(
            source_block_id=block.id,
            target_block_id=content.target_block_id,
            text=text,
            page_number=anchor.page_number,
            anchor=anchor,
        )

    def __len__(self) -> int:
        return len(self._anchors)

    def __contains__(self, block_id: str) -> bool:
        return block_id in self._anchors
