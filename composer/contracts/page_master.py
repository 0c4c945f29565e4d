#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Page Master Contract

Physical and layout configuration of a Section: page size, orientation,
margins, columns and baseline grid. Geometry is expressed in inches; the
grid spacing is expressed in layout units (points).

Version: 1.0.0
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple, Union
from enum import Enum

from config.constants import (
    PAGE_SIZES,
    DEFAULT_MARGIN_IN,
    DEFAULT_COLUMN_GAP_IN,
    DEFAULT_GRID_SPACING_PT,
    MIN_COLUMNS,
    MAX_COLUMNS,
)


class PageSize(Enum):
    """Named page sizes"""
    LETTER = "Letter"
    A4 = "A4"
    LEGAL = "Legal"
    TABLOID = "Tabloid"

    @property
    def dimensions(self) -> Tuple[float, float]:
        """(width, height) in inches, portrait"""
        return PAGE_SIZES[self.value]


class Orientation(Enum):
    """Page orientation"""
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class LayoutIntent(Enum):
    """Named layout presets; CUSTOM unlocks manual PageMaster editing"""
    COVER = "cover"
    EXECUTIVE_SUMMARY = "executive-summary"
    BODY = "body"
    DATA_APPENDIX = "data-appendix"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Margins:
    """Page margins in inches."""
    top: float = DEFAULT_MARGIN_IN
    right: float = DEFAULT_MARGIN_IN
    bottom: float = DEFAULT_MARGIN_IN
    left: float = DEFAULT_MARGIN_IN

    def to_dict(self) -> Dict[str, float]:
        return {
            "top": self.top,
            "right": self.right,
            "bottom": self.bottom,
            "left": self.left,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Margins':
        return cls(
            top=data.get("top", DEFAULT_MARGIN_IN),
            right=data.get("right", DEFAULT_MARGIN_IN),
            bottom=data.get("bottom", DEFAULT_MARGIN_IN),
            left=data.get("left", DEFAULT_MARGIN_IN),
        )


@dataclass(frozen=True)
class PageMaster:
    """Layout configuration of a Section"""
    page_size: PageSize = PageSize.LETTER
    orientation: Orientation = Orientation.PORTRAIT
    margins: Margins = field(default_factory=Margins)
    columns: int = 1
    column_gap: float = DEFAULT_COLUMN_GAP_IN
    has_header: bool = False
    has_footer: bool = False
    baseline_grid: bool = False
    grid_spacing: float = DEFAULT_GRID_SPACING_PT
    allow_table_rotation: bool = False

    @property
    def page_dimensions(self) -> Tuple[float, float]:
        """(width, height) in inches after orientation"""
        width, height = self.page_size.dimensions
        if self.orientation == Orientation.LANDSCAPE:
            return height, width
        return width, height

    def columns_in_range(self) -> bool:
        return MIN_COLUMNS <= self.columns <= MAX_COLUMNS

    def merge(self, partial: Dict[str, Any]) -> 'PageMaster':
        """
        Shallow-merge a partial update (serialized camelCase or attribute
        names). Margins are merged key by key.
        """
        merged = self.to_dict()
        for key, value in partial.items():
            key = _ATTRIBUTE_TO_KEY.get(key, key)
            if key not in merged:
                raise KeyError(key)
            if key == "margins":
                margins = dict(merged["margins"])
                margins.update(value.to_dict() if isinstance(value, Margins) else value)
                value = margins
            elif isinstance(value, Enum):
                value = value.value
            merged[key] = value
        return PageMaster.from_dict(merged)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pageSize": self.page_size.value,
            "orientation": self.orientation.value,
            "margins": self.margins.to_dict(),
            "columns": self.columns,
            "columnGap": self.column_gap,
            "hasHeader": self.has_header,
            "hasFooter": self.has_footer,
            "baselineGrid": self.baseline_grid,
            "gridSpacing": self.grid_spacing,
            "allowTableRotation": self.allow_table_rotation,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PageMaster':
        return cls(
            page_size=PageSize(data.get("pageSize", PageSize.LETTER.value)),
            orientation=Orientation(data.get("orientation", Orientation.PORTRAIT.value)),
            margins=Margins.from_dict(data.get("margins", {})),
            columns=data.get("columns", 1),
            column_gap=data.get("columnGap", DEFAULT_COLUMN_GAP_IN),
            has_header=data.get("hasHeader", False),
            has_footer=data.get("hasFooter", False),
            baseline_grid=data.get("baselineGrid", False),
            grid_spacing=data.get("gridSpacing", DEFAULT_GRID_SPACING_PT),
            allow_table_rotation=data.get("allowTableRotation", False),
        )


_ATTRIBUTE_TO_KEY = {
    "page_size": "pageSize",
    "column_gap": "columnGap",
    "has_header": "hasHeader",
    "has_footer": "hasFooter",
    "baseline_grid": "baselineGrid",
    "grid_spacing": "gridSpacing",
    "allow_table_rotation": "allowTableRotation",
}


def default_page_master(page_size: Union[PageSize, str] = PageSize.LETTER) -> PageMaster:
    """Portrait, one column, 1in margins, no header/footer, grid off"""
    return PageMaster(page_size=PageSize(page_size))
