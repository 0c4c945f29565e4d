#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Document Contracts Module

Defines the serialized shape of the semantic document model:
- Document -> Section -> Flow -> Block
- PageMaster and LayoutIntent
- DocumentVersion snapshots
- TOC configuration carried by table-of-contents blocks

Usage:
    from composer.contracts import Document, load_document

    result = load_document(json.loads(raw))
    for warning in result.diagnostics:
        ...
    raw_again = result.document.to_json()

Version: 1.0.0
"""

from .base import (
    BaseContract,
    ContractMetadata,
    ContractError,
    ContractValidationError,
    calculate_checksum,
    canonical_json,
    utc_now_iso,
)

from .page_master import (
    PageSize,
    Orientation,
    LayoutIntent,
    Margins,
    PageMaster,
    default_page_master,
)

from .toc_config import (
    TocConfig,
    PageNumberAlignment,
    LeaderStyle,
    LinkStyle,
)

from .content import (
    BlockType,
    BlockContent,
    HeadingContent,
    ParagraphContent,
    QuoteContent,
    ListContent,
    FigureContent,
    TableContent,
    ChartContent,
    CrossReferenceContent,
    DividerContent,
    SpacerContent,
    TableOfContentsContent,
    CONTENT_TYPES,
    empty_content,
    content_from_dict,
)

from .document import (
    FlowType,
    PaginationRules,
    Block,
    Flow,
    Section,
    Document,
    BlockLocation,
    LoadResult,
    load_document,
)

from .version import (
    VersionType,
    DocumentVersion,
)

__all__ = [
    # Base
    "BaseContract",
    "ContractMetadata",
    "ContractError",
    "ContractValidationError",
    "calculate_checksum",
    "canonical_json",
    "utc_now_iso",

    # Page layout
    "PageSize",
    "Orientation",
    "LayoutIntent",
    "Margins",
    "PageMaster",
    "default_page_master",

    # TOC configuration
    "TocConfig",
    "PageNumberAlignment",
    "LeaderStyle",
    "LinkStyle",

    # Block content
    "BlockType",
    "BlockContent",
    "HeadingContent",
    "ParagraphContent",
    "QuoteContent",
    "ListContent",
    "FigureContent",
    "TableContent",
    "ChartContent",
    "CrossReferenceContent",
    "DividerContent",
    "SpacerContent",
    "TableOfContentsContent",
    "CONTENT_TYPES",
    "empty_content",
    "content_from_dict",

    # Document tree
    "FlowType",
    "PaginationRules",
    "Block",
    "Flow",
    "Section",
    "Document",
    "BlockLocation",
    "LoadResult",
    "load_document",

    # Versions
    "VersionType",
    "DocumentVersion",
]

__version__ = "1.0.0"
