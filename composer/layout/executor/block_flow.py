#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Block Flow Executor

Paginates one Section:
- Walk flows in order, blocks in list order
- Apply pagination rules (breakBefore, breakAfter, breakAvoid, keepWithNext)
- Fill columns, then pages
- Snap block tops to the baseline grid
- Flag wide tables and charts as rotated or oversized

Version: 1.0.0
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import logging
import math

from config.constants import FLOAT_TOLERANCE, MIN_FRAGMENT_HEIGHT_PT
from composer.contracts import Block, BlockType, Flow, Section
from composer.errors import Diagnostic, DiagnosticKind, InvalidConfiguration, report
from ..measurement import MeasureContext, Measurement, MeasurementProvider, measure
from ..page_masters import PageGeometry, compute_geometry

logger = logging.getLogger(__name__)

# Text-flow blocks that may be split across columns
SPLITTABLE_TYPES = frozenset({
    BlockType.PARAGRAPH,
    BlockType.QUOTE,
    BlockType.ORDERED_LIST,
    BlockType.UNORDERED_LIST,
})

# Blocks whose natural width is checked against the column width
WIDE_TYPES = frozenset({BlockType.TABLE, BlockType.CHART})


@dataclass(frozen=True)
class LayoutOptions:
    """Engine switches that are not part of the PageMaster"""
    allow_splitting: bool = False
    min_fragment_height: float = MIN_FRAGMENT_HEIGHT_PT

    @classmethod
    def from_settings(cls, settings) -> 'LayoutOptions':
        return cls(
            allow_splitting=settings.allow_block_splitting,
            min_fragment_height=settings.min_fragment_height,
        )


@dataclass(frozen=True)
class PlacedBlock:
    """A block (or one fragment of a split block) positioned in a column"""
    block_id: str
    flow_id: str
    top: float
    height: float
    fragment: Optional[int] = None   # index when the block was split
    rotated: bool = False
    oversized: bool = False
    overflow: bool = False           # taller than a full column

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def to_dict(self) -> Dict[str, Any]:
        return {
            "block_id": self.block_id,
            "flow_id": self.flow_id,
            "top": self.top,
            "height": self.height,
            "fragment": self.fragment,
            "rotated": self.rotated,
            "oversized": self.oversized,
            "overflow": self.overflow,
        }


@dataclass(frozen=True)
class ColumnLayout:
    index: int
    blocks: Tuple[PlacedBlock, ...] = ()

    @property
    def used_height(self) -> float:
        return max((b.bottom for b in self.blocks), default=0.0)

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "blocks": [b.to_dict() for b in self.blocks]}


@dataclass(frozen=True)
class PageLayout:
    index: int
    columns: Tuple[ColumnLayout, ...] = ()

    def placed_blocks(self) -> List[PlacedBlock]:
        return [placed for column in self.columns for placed in column.blocks]

    def is_empty(self) -> bool:
        return not self.placed_blocks()

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "columns": [c.to_dict() for c in self.columns]}


@dataclass(frozen=True)
class SectionLayout:
    """Pagination result for one Section"""
    section_id: str
    geometry: PageGeometry
    pages: Tuple[PageLayout, ...]
    diagnostics: Tuple[Diagnostic, ...] = ()

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def page_map(self) -> Dict[int, Dict[int, List[str]]]:
        """{page_index: {column_index: [block_id, ...]}}"""
        return {
            page.index: {
                column.index: [placed.block_id for placed in column.blocks]
                for column in page.columns
            }
            for page in self.pages
        }

    def page_of(self, block_id: str) -> Optional[int]:
        """Index of the first page holding ``block_id``"""
        for page in self.pages:
            for placed in page.placed_blocks():
                if placed.block_id == block_id:
                    return page.index
        return None

    def placements(self, block_id: str) -> List[Tuple[int, int, PlacedBlock]]:
        """Every (page, column, placement) of a block, fragments included"""
        found = []
        for page in self.pages:
            for column in page.columns:
                for placed in column.blocks:
                    if placed.block_id == block_id:
                        found.append((page.index, column.index, placed))
        return found

    def get_blocks_on_page(self, page_index: int) -> List[PlacedBlock]:
        if 0 <= page_index < len(self.pages):
            return self.pages[page_index].placed_blocks()
        return []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "section_id": self.section_id,
            "geometry": self.geometry.to_dict(),
            "page_count": self.page_count,
            "pages": [p.to_dict() for p in self.pages],
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


@dataclass
class FlowState:
    """Current position of block flow execution"""
    columns: int
    column_height: float
    grid_spacing: Optional[float] = None  # set when the baseline grid is on
    current_page: int = 0
    current_column: int = 0
    y_position: float = 0.0
    pending_break: bool = False
    pages: List[List[List[PlacedBlock]]] = field(default_factory=list)

    def __post_init__(self):
        if not self.pages:
            self.pages.append(self._empty_page())

    def _empty_page(self) -> List[List[PlacedBlock]]:
        return [[] for _ in range(self.columns)]

    def column_is_empty(self) -> bool:
        return not self.pages[self.current_page][self.current_column]

    def snap(self, y: float) -> float:
        """Next baseline at or below ``y``"""
        if not self.grid_spacing:
            return y
        lines = y / self.grid_spacing
        nearest = round(lines)
        if abs(lines - nearest) * self.grid_spacing <= FLOAT_TOLERANCE:
            return nearest * self.grid_spacing
        return math.ceil(lines) * self.grid_spacing

    def next_top(self) -> float:
        return self.snap(self.y_position)

    def fits(self, top: float, height: float) -> bool:
        return top + height <= self.column_height + FLOAT_TOLERANCE

    def available_space(self) -> float:
        """Space left in the current column below the next baseline"""
        return self.column_height - self.next_top()

    def new_page(self):
        """Start a new page"""
        self.pages.append(self._empty_page())
        self.current_page += 1
        self.current_column = 0
        self.y_position = 0.0

    def next_column(self):
        """Move to the next column, or a new page after the last one"""
        if self.current_column + 1 < self.columns:
            self.current_column += 1
            self.y_position = 0.0
        else:
            self.new_page()

    def place(self, placed: PlacedBlock):
        self.pages[self.current_page][self.current_column].append(placed)
        self.y_position = placed.bottom

    def to_pages(self) -> Tuple[PageLayout, ...]:
        return tuple(
            PageLayout(
                index=page_index,
                columns=tuple(
                    ColumnLayout(index=column_index, blocks=tuple(blocks))
                    for column_index, blocks in enumerate(columns)
                ),
            )
            for page_index, columns in enumerate(self.pages)
        )


class BlockFlowExecutor:
    """
    Paginates Sections with an injected measurement provider.

    The executor is stateless between calls: the same Section, measurer and
    options always produce the same SectionLayout.

    Usage:
        executor = BlockFlowExecutor(FixedHeightMeasurer(default=20))
        layout = executor.execute(section)
        layout.page_map()
    """

    def __init__(
        self,
        measurer: MeasurementProvider,
        options: Optional[LayoutOptions] = None,
    ):
        """
        Initialize block flow executor.

        Args:
            measurer: Callable returning a Measurement (or a height) per block
            options: Splitting switches; blocks are kept whole by default
        """
        self.measurer = measurer
        self.options = options or LayoutOptions()

    def execute(self, section: Section) -> SectionLayout:
        """
        Paginate a section.

        Raises:
            InvalidConfiguration: the PageMaster leaves no usable space
        """
        page_master = section.page_master
        geometry = compute_geometry(page_master)

        grid_spacing = None
        if page_master.baseline_grid:
            if page_master.grid_spacing <= 0:
                raise InvalidConfiguration(
                    f"Section {section.id}: grid spacing must be positive, got {page_master.grid_spacing}",
                    {"section_id": section.id, "grid_spacing": page_master.grid_spacing},
                )
            grid_spacing = page_master.grid_spacing

        context = MeasureContext(
            section_id=section.id,
            page_master=page_master,
            column_width=geometry.column_width,
            column_height=geometry.column_height,
        )
        stream: List[Tuple[Block, Flow]] = list(section.iter_blocks())
        measurements = [measure(self.measurer, block, context) for block, _ in stream]

        logger.debug(f"Paginating section {section.id}: {len(stream)} blocks")

        state = FlowState(
            columns=geometry.columns,
            column_height=geometry.column_height,
            grid_spacing=grid_spacing,
        )
        diagnostics: List[Diagnostic] = []

        for i, (block, flow) in enumerate(stream):
            rules = block.pagination_rules
            if (state.pending_break or rules.break_before) and not state.column_is_empty():
                state.next_column()
            state.pending_break = False

            if rules.keep_with_next and i + 1 < len(stream):
                self._keep_with_next(state, measurements[i], stream[i + 1][0], measurements[i + 1])

            self._place_block(state, section, block, flow, measurements[i], geometry, diagnostics)

            if rules.break_after:
                # applied lazily so a final breakAfter never adds an empty page
                state.pending_break = True

        layout = SectionLayout(
            section_id=section.id,
            geometry=geometry,
            pages=state.to_pages(),
            diagnostics=tuple(diagnostics),
        )
        logger.debug(f"Section {section.id} complete: {len(stream)} blocks across {layout.page_count} pages")
        return layout

    def _keep_with_next(
        self,
        state: FlowState,
        current: Measurement,
        next_block: Block,
        following: Measurement,
    ):
        """Move to the next column unless this block and the next fit together"""
        if next_block.pagination_rules.break_before or state.column_is_empty():
            return
        if current.height + following.height > state.column_height + FLOAT_TOLERANCE:
            # the pair never fits one column; place this block normally
            return
        top = state.next_top()
        next_top = state.snap(top + current.height)
        if not state.fits(next_top, following.height):
            state.next_column()

    def _place_block(
        self,
        state: FlowState,
        section: Section,
        block: Block,
        flow: Flow,
        measurement: Measurement,
        geometry: PageGeometry,
        diagnostics: List[Diagnostic],
    ):
        height = measurement.height
        rotated, oversized = self._width_flags(section, block, measurement, geometry)

        top = state.next_top()
        if not state.fits(top, height):
            if self._can_split(block) and self._place_fragments(state, block, flow, height):
                return
            if not state.column_is_empty():
                state.next_column()
                return self._place_block(state, section, block, flow, measurement, geometry, diagnostics)

        overflow = not state.fits(top, height)
        state.place(PlacedBlock(
            block_id=block.id,
            flow_id=flow.id,
            top=top,
            height=height,
            rotated=rotated,
            oversized=oversized,
            overflow=overflow,
        ))

        if overflow:
            report(logger, diagnostics, Diagnostic(
                kind=DiagnosticKind.OVERFLOW_WARNING,
                message=(
                    f"Block {block.id} ({height:.1f}pt) is taller than a column "
                    f"({geometry.column_height:.1f}pt) and overflows page {state.current_page}"
                ),
                section_id=section.id,
                block_id=block.id,
                details={
                    "height": height,
                    "column_height": geometry.column_height,
                    "page": state.current_page,
                    "column": state.current_column,
                },
            ))

    def _can_split(self, block: Block) -> bool:
        return (
            self.options.allow_splitting
            and block.type in SPLITTABLE_TYPES
            and not block.pagination_rules.break_avoid
        )

    def _place_fragments(self, state: FlowState, block: Block, flow: Flow, height: float) -> bool:
        """
        Split a block across columns. Returns False (placing nothing) when no
        first fragment of at least ``min_fragment_height`` fits here.
        """
        minimum = self.options.min_fragment_height
        remaining = height
        fragment = 0

        while True:
            top = state.next_top()
            space = state.column_height - top
            if state.fits(top, remaining):
                piece = remaining
            else:
                piece = min(space, remaining - minimum)
                if piece < minimum - FLOAT_TOLERANCE:
                    if fragment == 0:
                        return False
                    # a fresh column is always tall enough for one more fragment
                    piece = min(space, remaining)
            state.place(PlacedBlock(
                block_id=block.id,
                flow_id=flow.id,
                top=top,
                height=piece,
                fragment=fragment,
            ))
            remaining -= piece
            fragment += 1
            if remaining <= FLOAT_TOLERANCE:
                return True
            state.next_column()

    def _width_flags(
        self,
        section: Section,
        block: Block,
        measurement: Measurement,
        geometry: PageGeometry,
    ) -> Tuple[bool, bool]:
        """(rotated, oversized) for a table or chart wider than its column"""
        if block.type not in WIDE_TYPES or measurement.width is None:
            return False, False
        if measurement.width <= geometry.column_width + FLOAT_TOLERANCE:
            return False, False
        if section.page_master.allow_table_rotation:
            logger.debug(f"Block {block.id} rotated: {measurement.width:.1f}pt > {geometry.column_width:.1f}pt")
            return True, False
        return False, True


def paginate_section(
    section: Section,
    measurer: MeasurementProvider,
    options: Optional[LayoutOptions] = None,
) -> SectionLayout:
    """Paginate one section; see BlockFlowExecutor"""
    return BlockFlowExecutor(measurer, options).execute(section)
