#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Layout Presets - Named LayoutIntent -> canonical PageMaster.

Selecting a preset overwrites a Section's PageMaster wholesale. Selecting
``custom`` keeps the current PageMaster and unlocks manual editing.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from composer.contracts import (
    LayoutIntent,
    Margins,
    Orientation,
    PageMaster,
    PageSize,
)


@dataclass(frozen=True)
class LayoutPreset:
    """A named layout with its canonical PageMaster"""
    intent: LayoutIntent
    name: str
    description: str
    page_master: PageMaster
    features: Tuple[str, ...] = ()


LAYOUT_PRESETS: Dict[LayoutIntent, LayoutPreset] = {
    LayoutIntent.COVER: LayoutPreset(
        intent=LayoutIntent.COVER,
        name="Cover Page",
        description="Full-page layout for document covers and title pages",
        page_master=PageMaster(
            page_size=PageSize.LETTER,
            orientation=Orientation.PORTRAIT,
            margins=Margins(top=2, right=1.5, bottom=2, left=1.5),
            columns=1,
            column_gap=0,
            has_header=False,
            has_footer=False,
            baseline_grid=False,
            grid_spacing=9.0,
            allow_table_rotation=False,
        ),
        features=(
            "Single column layout",
            "Large margins for visual impact",
            "No headers or footers",
        ),
    ),
    LayoutIntent.EXECUTIVE_SUMMARY: LayoutPreset(
        intent=LayoutIntent.EXECUTIVE_SUMMARY,
        name="Executive Summary",
        description="Single-column layout optimized for executive summaries and key findings",
        page_master=PageMaster(
            page_size=PageSize.LETTER,
            orientation=Orientation.PORTRAIT,
            margins=Margins(top=1, right=1.25, bottom=1, left=1.25),
            columns=1,
            column_gap=0,
            has_header=True,
            has_footer=True,
            baseline_grid=True,
            grid_spacing=12.0,  # 6 lines per inch
            allow_table_rotation=False,
        ),
        features=(
            "Single column for readability",
            "Headers and footers enabled",
            "Baseline grid for consistency",
        ),
    ),
    LayoutIntent.BODY: LayoutPreset(
        intent=LayoutIntent.BODY,
        name="Body Content",
        description="Two-column layout for main document content and detailed discussions",
        page_master=PageMaster(
            page_size=PageSize.LETTER,
            orientation=Orientation.PORTRAIT,
            margins=Margins(top=0.75, right=0.75, bottom=0.75, left=0.75),
            columns=2,
            column_gap=0.375,
            has_header=True,
            has_footer=True,
            baseline_grid=True,
            grid_spacing=12.0,
            allow_table_rotation=False,
        ),
        features=(
            "Two-column layout for efficiency",
            "Narrow margins for more content",
            "Optimized for text-heavy content",
        ),
    ),
    LayoutIntent.DATA_APPENDIX: LayoutPreset(
        intent=LayoutIntent.DATA_APPENDIX,
        name="Data Appendix",
        description="Landscape layout optimized for tables, charts, and data visualization",
        page_master=PageMaster(
            page_size=PageSize.LETTER,
            orientation=Orientation.LANDSCAPE,
            margins=Margins(top=0.5, right=0.5, bottom=0.5, left=0.5),
            columns=1,
            column_gap=0,
            has_header=True,
            has_footer=True,
            baseline_grid=False,
            grid_spacing=9.0,
            allow_table_rotation=True,
        ),
        features=(
            "Landscape orientation",
            "Minimal margins for data",
            "Table rotation enabled",
        ),
    ),
}


def apply_layout_preset(intent: LayoutIntent, current: PageMaster) -> PageMaster:
    """
    PageMaster for ``intent``: the preset's canonical PageMaster, or
    ``current`` unchanged for CUSTOM.
    """
    intent = LayoutIntent(intent)
    if intent == LayoutIntent.CUSTOM:
        return current
    return LAYOUT_PRESETS[intent].page_master


def get_layout_preset(intent: LayoutIntent) -> Optional[LayoutPreset]:
    """Get layout preset by intent (None for CUSTOM)"""
    return LAYOUT_PRESETS.get(LayoutIntent(intent))


def list_layout_presets() -> List[LayoutPreset]:
    """All named presets, in declaration order"""
    return list(LAYOUT_PRESETS.values())


def detect_layout_intent(page_master: PageMaster) -> LayoutIntent:
    """
    Match a PageMaster against the presets' key characteristics
    (orientation, columns, top/right margins, table rotation).
    """
    for intent, preset in LAYOUT_PRESETS.items():
        pm = preset.page_master
        matches = (
            pm.orientation == page_master.orientation
            and pm.columns == page_master.columns
            and abs(pm.margins.top - page_master.margins.top) < 0.1
            and abs(pm.margins.right - page_master.margins.right) < 0.1
            and pm.allow_table_rotation == page_master.allow_table_rotation
        )
        if matches:
            return intent

    return LayoutIntent.CUSTOM
