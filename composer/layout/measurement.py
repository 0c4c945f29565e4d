#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Block Measurement

The paginator never guesses sizes itself: heights (and, for tables and
charts, natural widths) come from a measurement provider. A provider is any
callable ``(block, MeasureContext) -> Measurement | float``.

Two providers ship with the engine:
- FixedHeightMeasurer: table-driven, for tests and previews
- EstimatingMeasurer: text-length heuristic, for the CLI

Version: 1.0.0
"""

from dataclasses import dataclass
from functools import singledispatchmethod
from typing import Callable, Dict, Optional, Union
import math

from config.constants import (
    CHART_HEIGHT_PT,
    CHARS_PER_LINE,
    DEFAULT_LINE_HEIGHT_PT,
    FIGURE_HEIGHT_PT,
    REFERENCE_COLUMN_WIDTH_PT,
    TABLE_COLUMN_WIDTH_PT,
)
from composer.contracts import (
    Block,
    BlockContent,
    BlockType,
    ChartContent,
    CrossReferenceContent,
    DividerContent,
    FigureContent,
    HeadingContent,
    ListContent,
    PageMaster,
    ParagraphContent,
    QuoteContent,
    SpacerContent,
    TableContent,
    TableOfContentsContent,
)


@dataclass(frozen=True)
class Measurement:
    """Measured size of a block in points; ``width`` is its natural width"""
    height: float
    width: Optional[float] = None


@dataclass(frozen=True)
class MeasureContext:
    """Where a block is being measured"""
    section_id: str
    page_master: PageMaster
    column_width: float
    column_height: float


MeasurementProvider = Callable[[Block, MeasureContext], Union[Measurement, float]]


def measure(provider: MeasurementProvider, block: Block, context: MeasureContext) -> Measurement:
    """Call a provider and normalize its answer to a Measurement"""
    result = provider(block, context)
    if not isinstance(result, Measurement):
        result = Measurement(height=float(result))
    if result.height < 0:
        raise ValueError(f"Measured negative height {result.height} for block {block.id}")
    return result


class FixedHeightMeasurer:
    """
    Table-driven measurer.

    Usage:
        measurer = FixedHeightMeasurer(heights={"b1": 300}, default=20)
        measurer = FixedHeightMeasurer(by_type={BlockType.HEADING: 24}, widths={"t1": 900})
    """

    def __init__(
        self,
        heights: Optional[Dict[str, float]] = None,
        by_type: Optional[Dict[Union[BlockType, str], float]] = None,
        default: float = DEFAULT_LINE_HEIGHT_PT,
        widths: Optional[Dict[str, float]] = None,
    ):
        self.heights = dict(heights or {})
        self.by_type = {BlockType(k): v for k, v in (by_type or {}).items()}
        self.default = default
        self.widths = dict(widths or {})

    def __call__(self, block: Block, context: MeasureContext) -> Measurement:
        if block.id in self.heights:
            height = self.heights[block.id]
        else:
            height = self.by_type.get(block.type, self.default)
        return Measurement(height=height, width=self.widths.get(block.id))

    def __repr__(self):
        return f"FixedHeightMeasurer(default={self.default}, ids={len(self.heights)})"


class EstimatingMeasurer:
    """
    Estimate block heights from content.

    No text is shaped: heights are line counts (characters per line scaled
    to the column width) times the line height, plus per-type base heights.
    Good enough for page maps and TOC page numbers in previews.
    """

    # Line height multipliers by heading level
    HEADING_SCALE = {1: 2.0, 2: 1.7, 3: 1.5, 4: 1.3, 5: 1.15, 6: 1.0}

    def __init__(
        self,
        line_height: float = DEFAULT_LINE_HEIGHT_PT,
        chars_per_line: int = CHARS_PER_LINE,
    ):
        self.line_height = line_height
        self.chars_per_line = chars_per_line

    def __call__(self, block: Block, context: MeasureContext) -> Measurement:
        return self._measure(block.content, block, context)

    def _lines(self, text: str, context: MeasureContext) -> int:
        per_line = max(1, int(self.chars_per_line * context.column_width / REFERENCE_COLUMN_WIDTH_PT))
        return max(1, math.ceil(len(text) / per_line))

    def _caption(self, caption: str, context: MeasureContext) -> float:
        return self._lines(caption, context) * self.line_height if caption else 0.0

    @singledispatchmethod
    def _measure(self, content: BlockContent, block: Block, context: MeasureContext) -> Measurement:
        return Measurement(height=self.line_height)

    @_measure.register
    def _(self, content: HeadingContent, block: Block, context: MeasureContext) -> Measurement:
        level = block.heading_level or 1
        lines = self._lines(content.text, context)
        return Measurement(height=lines * self.line_height * self.HEADING_SCALE[level])

    @_measure.register
    def _(self, content: ParagraphContent, block: Block, context: MeasureContext) -> Measurement:
        return Measurement(height=self._lines(content.text, context) * self.line_height)

    @_measure.register
    def _(self, content: QuoteContent, block: Block, context: MeasureContext) -> Measurement:
        lines = self._lines(content.text, context) + (1 if content.attribution else 0)
        return Measurement(height=lines * self.line_height)

    @_measure.register
    def _(self, content: ListContent, block: Block, context: MeasureContext) -> Measurement:
        lines = sum(self._lines(item, context) for item in content.items) or 1
        return Measurement(height=lines * self.line_height)

    @_measure.register
    def _(self, content: FigureContent, block: Block, context: MeasureContext) -> Measurement:
        return Measurement(height=FIGURE_HEIGHT_PT + self._caption(content.caption, context))

    @_measure.register
    def _(self, content: TableContent, block: Block, context: MeasureContext) -> Measurement:
        rows = len(content.rows) + (1 if content.headers else 0)
        columns = max([len(content.headers)] + [len(row) for row in content.rows])
        return Measurement(
            height=max(1, rows) * self.line_height * 1.5 + self._caption(content.caption, context),
            width=columns * TABLE_COLUMN_WIDTH_PT,
        )

    @_measure.register
    def _(self, content: ChartContent, block: Block, context: MeasureContext) -> Measurement:
        # one label slot per data point
        width = len(content.labels) * TABLE_COLUMN_WIDTH_PT / 2 if content.labels else None
        return Measurement(height=CHART_HEIGHT_PT + self._caption(content.caption, context), width=width)

    @_measure.register
    def _(self, content: CrossReferenceContent, block: Block, context: MeasureContext) -> Measurement:
        return Measurement(height=self.line_height)

    @_measure.register
    def _(self, content: DividerContent, block: Block, context: MeasureContext) -> Measurement:
        return Measurement(height=self.line_height)

    @_measure.register
    def _(self, content: SpacerContent, block: Block, context: MeasureContext) -> Measurement:
        return Measurement(height=content.height)

    @_measure.register
    def _(self, content: TableOfContentsContent, block: Block, context: MeasureContext) -> Measurement:
        # title plus a page of entries; the outline is not known while measuring
        return Measurement(height=(1 + 20) * self.line_height)
