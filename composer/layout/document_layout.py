#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Document Layout

Paginates every Section of a Document in order and numbers pages across
sections. Section layouts are cached by Section identity: since model
operations share untouched Section values between revisions, an edit only
re-paginates the section it touched.

Version: 1.0.0
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
import logging

from composer.contracts import Document, Section
from composer.errors import Diagnostic
from .anchors import AnchorIndex
from .executor.block_flow import BlockFlowExecutor, LayoutOptions, SectionLayout
from .measurement import MeasurementProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentPagination:
    """Section layouts of a whole document, with running page numbers"""
    document_id: str
    layouts: Dict[str, SectionLayout]
    first_pages: Dict[str, int]   # section id -> page number of its first page
    section_order: Tuple[str, ...]
    anchors: AnchorIndex

    @property
    def total_pages(self) -> int:
        return sum(layout.page_count for layout in self.layouts.values())

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return [d for sid in self.section_order for d in self.layouts[sid].diagnostics]

    def layout_for(self, section_id: str) -> Optional[SectionLayout]:
        return self.layouts.get(section_id)

    def page_number(self, block_id: str) -> Optional[int]:
        """Running page number (1-based) of the first page holding a block"""
        for section_id in self.section_order:
            page_index = self.layouts[section_id].page_of(block_id)
            if page_index is not None:
                return self.first_pages[section_id] + page_index
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "document_id": self.document_id,
            "total_pages": self.total_pages,
            "sections": [
                {
                    "first_page": self.first_pages[sid],
                    **self.layouts[sid].to_dict(),
                }
                for sid in self.section_order
            ],
        }


class DocumentLayout:
    """
    Layout cache for one measurement provider.

    Usage:
        layout = DocumentLayout(EstimatingMeasurer())
        pagination = layout.paginate(document)
        pagination.page_number(block_id)
    """

    def __init__(
        self,
        measurer: MeasurementProvider,
        options: Optional[LayoutOptions] = None,
    ):
        self.executor = BlockFlowExecutor(measurer, options)
        self._cache: Dict[str, Tuple[Section, SectionLayout]] = {}
        self.hits = 0
        self.misses = 0

    @property
    def measurer(self) -> MeasurementProvider:
        return self.executor.measurer

    def layout_section(self, section: Section) -> SectionLayout:
        """Layout of one section, reused while the Section value is unchanged"""
        cached = self._cache.get(section.id)
        if cached is not None and cached[0] is section:
            self.hits += 1
            return cached[1]

        self.misses += 1
        layout = self.executor.execute(section)
        self._cache[section.id] = (section, layout)
        return layout

    def paginate(self, document: Document) -> DocumentPagination:
        sections = document.ordered_sections()
        live_ids = {s.id for s in sections}
        for stale in [sid for sid in self._cache if sid not in live_ids]:
            del self._cache[stale]

        layouts: Dict[str, SectionLayout] = {}
        first_pages: Dict[str, int] = {}
        anchors = AnchorIndex()
        page_number = 1

        for section in sections:
            layout = self.layout_section(section)
            layouts[section.id] = layout
            first_pages[section.id] = page_number
            self._register_anchors(anchors, section, layout, page_number)
            page_number += layout.page_count

        logger.debug(
            f"Paginated document {document.id}: {page_number - 1} pages "
            f"(cache hits={self.hits}, misses={self.misses})"
        )
        return DocumentPagination(
            document_id=document.id,
            layouts=layouts,
            first_pages=first_pages,
            section_order=tuple(s.id for s in sections),
            anchors=anchors,
        )

    def invalidate(self, section_id: Optional[str] = None):
        """Drop one cached section layout, or all of them"""
        if section_id is None:
            self._cache.clear()
        else:
            self._cache.pop(section_id, None)

    def _register_anchors(
        self,
        anchors: AnchorIndex,
        section: Section,
        layout: SectionLayout,
        first_page: int,
    ):
        blocks = {block.id: block for block, _ in section.iter_blocks()}
        for page in layout.pages:
            for column in page.columns:
                for placed in column.blocks:
                    anchors.register(
                        blocks[placed.block_id],
                        section_id=section.id,
                        page_number=first_page + page.index,
                        column_index=column.index,
                        top=placed.top,
                    )
