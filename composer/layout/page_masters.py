#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Page Geometry

Turns a PageMaster (inches) into the point-based geometry the paginator
works with: page size, content box and per-column box.

Version: 1.0.0
"""

from dataclasses import dataclass
from typing import Any, Dict

from config.constants import (
    POINTS_PER_INCH,
    HEADER_RESERVATION_IN,
    FOOTER_RESERVATION_IN,
    MIN_COLUMNS,
    MAX_COLUMNS,
)
from composer.contracts import PageMaster
from composer.errors import InvalidConfiguration


def inches_to_points(inches: float) -> float:
    return inches * POINTS_PER_INCH


@dataclass(frozen=True)
class PageGeometry:
    """Usable space of one page, in points"""
    page_width: float
    page_height: float
    margin_top: float
    margin_left: float
    header_height: float
    footer_height: float
    columns: int
    column_gap: float
    column_width: float
    column_height: float

    @property
    def content_top(self) -> float:
        """Distance from page top to the first line of body content"""
        return self.margin_top + self.header_height

    def column_left(self, column_index: int) -> float:
        """Distance from the page's left edge to a column's left edge"""
        return self.margin_left + column_index * (self.column_width + self.column_gap)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page_width": self.page_width,
            "page_height": self.page_height,
            "columns": self.columns,
            "column_gap": self.column_gap,
            "column_width": self.column_width,
            "column_height": self.column_height,
            "content_top": self.content_top,
        }


def compute_geometry(page_master: PageMaster) -> PageGeometry:
    """
    Compute column geometry for a PageMaster.

    Raises:
        InvalidConfiguration: columns outside 1-3, or margins, reservations
            and gaps leave no positive column width or height
    """
    if not MIN_COLUMNS <= page_master.columns <= MAX_COLUMNS:
        raise InvalidConfiguration(
            f"columns must be between {MIN_COLUMNS} and {MAX_COLUMNS}, got {page_master.columns}",
            {"columns": page_master.columns},
        )

    width_in, height_in = page_master.page_dimensions
    margins = page_master.margins

    header = HEADER_RESERVATION_IN if page_master.has_header else 0.0
    footer = FOOTER_RESERVATION_IN if page_master.has_footer else 0.0

    usable_height = height_in - margins.top - margins.bottom - header - footer
    gaps = (page_master.columns - 1) * page_master.column_gap
    usable_width = (width_in - margins.left - margins.right - gaps) / page_master.columns

    if usable_height <= 0 or usable_width <= 0:
        raise InvalidConfiguration(
            f"PageMaster leaves no usable space "
            f"(column {usable_width:.3f}in x {usable_height:.3f}in)",
            {
                "column_width_in": usable_width,
                "column_height_in": usable_height,
                "page_master": page_master.to_dict(),
            },
        )

    return PageGeometry(
        page_width=inches_to_points(width_in),
        page_height=inches_to_points(height_in),
        margin_top=inches_to_points(margins.top),
        margin_left=inches_to_points(margins.left),
        header_height=inches_to_points(header),
        footer_height=inches_to_points(footer),
        columns=page_master.columns,
        column_gap=inches_to_points(page_master.column_gap),
        column_width=inches_to_points(usable_width),
        column_height=inches_to_points(usable_height),
    )
