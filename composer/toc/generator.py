#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Table of Contents Generator - Derive a TOC outline from headings and layout.

Provides:
- Outline generation over sections in order, flows then blocks
- Per-level inclusion and section exclusion
- Page numbers resolved from each heading's own section layout
- Stale-reference reporting for headings without a computed layout
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
import logging
import re

from composer.contracts import (
    BlockType,
    Document,
    HeadingContent,
    TableOfContentsContent,
    TocConfig,
)
from composer.errors import Diagnostic, DiagnosticKind, NotFound, report
from composer.layout import DocumentPagination, SectionLayout

logger = logging.getLogger(__name__)

Layouts = Union[DocumentPagination, Mapping[str, SectionLayout]]


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class TocEntry:
    """Single entry in the Table of Contents."""
    block_id: str                # Heading block the entry points to
    section_id: str
    section_name: str
    text: str                    # Heading text
    level: int                   # Heading level (1-6)
    anchor: str                  # URL-safe anchor for links
    page_number: Optional[int]   # None when the section has no layout yet

    def to_dict(self) -> Dict[str, Any]:
        return {
            "block_id": self.block_id,
            "section_id": self.section_id,
            "section_name": self.section_name,
            "text": self.text,
            "level": self.level,
            "anchor": self.anchor,
            "page_number": self.page_number,
        }

    def __repr__(self):
        indent = "  " * (self.level - 1)
        return f"{indent}[L{self.level}] {self.text} (p. {self.page_number})"


@dataclass(frozen=True)
class TocOutline:
    """
    Flat, ordered list of TOC entries annotated with level.

    Nesting is a presentation concern: see ``build_outline_tree``.
    """
    title: str
    entries: Tuple[TocEntry, ...]
    config: TocConfig
    toc_block_id: Optional[str] = None
    diagnostics: Tuple[Diagnostic, ...] = ()

    @property
    def is_stale(self) -> bool:
        return any(entry.page_number is None for entry in self.entries)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "toc_block_id": self.toc_block_id,
            "entries": [e.to_dict() for e in self.entries],
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def __repr__(self):
        return f"<TOC: {len(self.entries)} entries>"


# =============================================================================
# TOC GENERATOR
# =============================================================================

class TocGenerator:
    """
    Generate a Table of Contents outline.

    Usage:
        generator = TocGenerator(TocConfig.standard())
        outline = generator.generate(document, pagination, toc_section_id=section.id)
        text = render_text(outline)
    """

    def __init__(self, config: TocConfig):
        """
        Initialize TOC generator.

        Args:
            config: Complete TOC configuration (validated here)
        """
        config.assert_valid()
        self.config = config

    def generate(
        self,
        document: Document,
        layouts: Layouts,
        toc_section_id: Optional[str] = None,
        toc_block_id: Optional[str] = None,
        first_pages: Optional[Mapping[str, int]] = None,
    ) -> TocOutline:
        """
        Generate the outline for a document.

        Args:
            document: Document to scan
            layouts: DocumentPagination, or section id -> SectionLayout
            toc_section_id: Section holding the TOC block; always skipped
            toc_block_id: Id of the TOC block, recorded on the outline
            first_pages: Page number of each section's first page; taken
                from ``layouts`` when it is a DocumentPagination, otherwise
                every section starts at page 1

        Returns:
            TocOutline with entries in document order
        """
        if isinstance(layouts, DocumentPagination):
            first_pages = layouts.first_pages if first_pages is None else first_pages
            layouts = layouts.layouts
        first_pages = first_pages or {}

        excluded = set(self.config.exclude_sections)
        if toc_section_id is not None:
            excluded.add(toc_section_id)

        entries: List[TocEntry] = []
        diagnostics: List[Diagnostic] = []

        for section in document.ordered_sections():
            if section.id in excluded:
                continue

            layout = layouts.get(section.id)
            for block, _flow in section.iter_blocks():
                if block.type != BlockType.HEADING:
                    continue
                level = block.heading_level
                if level is None or not self.config.includes_level(level):
                    continue
                if block.metadata.get("includeInTOC") is False:
                    continue

                page_number = None
                if layout is not None:
                    page_index = layout.page_of(block.id)
                    if page_index is not None:
                        page_number = first_pages.get(section.id, 1) + page_index

                if page_number is None:
                    report(logger, diagnostics, Diagnostic(
                        kind=DiagnosticKind.STALE_REFERENCE,
                        message=(
                            f"Heading {block.id} in section '{section.name}' has no "
                            f"computed layout; emitted without a page number"
                        ),
                        section_id=section.id,
                        block_id=block.id,
                    ))

                text = clean_heading_title(block.content)
                entries.append(TocEntry(
                    block_id=block.id,
                    section_id=section.id,
                    section_name=section.name,
                    text=text,
                    level=level,
                    anchor=heading_to_anchor(text),
                    page_number=page_number,
                ))

        logger.debug(f"Generated TOC for document {document.id}: {len(entries)} entries")
        return TocOutline(
            title=self.config.title,
            entries=tuple(entries),
            config=self.config,
            toc_block_id=toc_block_id,
            diagnostics=tuple(diagnostics),
        )


def generate_for_block(document: Document, layouts: Layouts, block_id: str) -> TocOutline:
    """
    Generate the outline of a table-of-contents block, using the block's own
    configuration and skipping the section it lives in.
    """
    location = document.locate(block_id)
    if location is None:
        raise NotFound("block", block_id)
    if not isinstance(location.block.content, TableOfContentsContent):
        raise TypeError(f"Block {block_id} is not a table of contents")

    generator = TocGenerator(location.block.content.config)
    return generator.generate(
        document,
        layouts,
        toc_section_id=location.section_id,
        toc_block_id=block_id,
    )


def toc_blocks(document: Document) -> List[str]:
    """Ids of all table-of-contents blocks, in document order"""
    return [
        location.block.id
        for location in document.walk()
        if location.block.type == BlockType.TABLE_OF_CONTENTS
    ]


def should_update_toc(last_update: Optional[str], document: Document) -> bool:
    """True when the document changed after ``last_update`` (ISO-8601)"""
    if not last_update:
        return True
    try:
        return datetime.fromisoformat(document.updated_at) > datetime.fromisoformat(last_update)
    except ValueError:
        return True


def clean_heading_title(content: HeadingContent) -> str:
    """
    Heading text without markdown heading prefixes.

    Args:
        content: Heading content

    Returns:
        Cleaned heading title, "Untitled" when empty
    """
    text = content.text.strip()

    # Remove markdown heading prefixes (# ## ### ####)
    text = re.sub(r'^#{1,6}\s+', '', text)

    return text or "Untitled"


def heading_to_anchor(text: str) -> str:
    """
    Convert heading text to URL-safe anchor.

    GitHub-style anchor generation:
    - Lowercase
    - Replace spaces with hyphens
    - Remove special characters except hyphens
    - Preserve accented Latin characters

    Args:
        text: Heading text

    Returns:
        URL-safe anchor string
    """
    anchor = text.lower()

    # Replace spaces with hyphens
    anchor = anchor.replace(' ', '-')

    # Remove special characters (keep letters, numbers, hyphens, accented Latin)
    anchor = re.sub(r'[^\w\-\u00C0-\u024F\u1E00-\u1EFF]', '', anchor, flags=re.UNICODE)

    # Remove multiple consecutive hyphens
    anchor = re.sub(r'-+', '-', anchor)

    # Remove leading/trailing hyphens
    anchor = anchor.strip('-')

    return anchor
