#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Layout Module

Paginates Sections into pages and columns.

Components:
- compute_geometry: PageMaster (inches) -> column geometry (points)
- Layout presets: LayoutIntent -> canonical PageMaster
- Measurers: FixedHeightMeasurer, EstimatingMeasurer
- BlockFlowExecutor: pagination rules, baseline grid, rotation
- DocumentLayout: running page numbers, per-section cache, anchors

Usage:
    from composer.layout import DocumentLayout, FixedHeightMeasurer

    layout = DocumentLayout(FixedHeightMeasurer(default=20))
    pagination = layout.paginate(document)
    pagination.layout_for(section_id).page_map()

Version: 1.0.0
"""

from .page_masters import PageGeometry, compute_geometry, inches_to_points
from .presets import (
    LAYOUT_PRESETS,
    LayoutPreset,
    apply_layout_preset,
    detect_layout_intent,
    get_layout_preset,
    list_layout_presets,
)
from .measurement import (
    EstimatingMeasurer,
    FixedHeightMeasurer,
    MeasureContext,
    Measurement,
    MeasurementProvider,
    measure,
)
from .executor.block_flow import (
    BlockFlowExecutor,
    ColumnLayout,
    FlowState,
    LayoutOptions,
    PageLayout,
    PlacedBlock,
    SectionLayout,
    paginate_section,
)
from .anchors import Anchor, AnchorIndex, AnchorType, ResolvedReference
from .document_layout import DocumentLayout, DocumentPagination

__all__ = [
    # Geometry
    "PageGeometry",
    "compute_geometry",
    "inches_to_points",

    # Presets
    "LAYOUT_PRESETS",
    "LayoutPreset",
    "apply_layout_preset",
    "detect_layout_intent",
    "get_layout_preset",
    "list_layout_presets",

    # Measurement
    "EstimatingMeasurer",
    "FixedHeightMeasurer",
    "MeasureContext",
    "Measurement",
    "MeasurementProvider",
    "measure",

    # Pagination
    "BlockFlowExecutor",
    "ColumnLayout",
    "FlowState",
    "LayoutOptions",
    "PageLayout",
    "PlacedBlock",
    "SectionLayout",
    "paginate_section",

    # Document
    "Anchor",
    "AnchorIndex",
    "AnchorType",
    "ResolvedReference",
    "DocumentLayout",
    "DocumentPagination",
]

__version__ = "1.0.0"
