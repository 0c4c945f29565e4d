#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Block Content Variants

A block's ``content`` is a tagged union: each block type owns exactly one
content class. Consumers dispatch on the variant (``isinstance`` or
``functools.singledispatch``) instead of probing dictionary keys.

Version: 1.0.0
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple, Type
from enum import Enum
import re

from composer.errors import ContractValidationError
from .toc_config import TocConfig


class BlockType(Enum):
    """Closed set of block types"""
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    QUOTE = "quote"
    ORDERED_LIST = "ordered-list"
    UNORDERED_LIST = "unordered-list"
    FIGURE = "figure"
    TABLE = "table"
    CHART = "chart"
    CROSS_REFERENCE = "cross-reference"
    DIVIDER = "divider"
    SPACER = "spacer"
    TABLE_OF_CONTENTS = "table-of-contents"


class BlockContent:
    """Base class of all content variants"""

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BlockContent':
        raise NotImplementedError

    def merge(self, partial: Dict[str, Any]) -> 'BlockContent':
        """Shallow-merge a partial update; unknown fields are rejected"""
        merged = self.to_dict()
        unknown = []
        for key, value in partial.items():
            key = _camel(key)
            if key not in merged:
                unknown.append(key)
                continue
            merged[key] = value.to_dict() if hasattr(value, "to_dict") else value
        if unknown:
            raise ContractValidationError(
                [f"{type(self).__name__} has no field '{key}'" for key in unknown]
            )
        return type(self).from_dict(merged)


@dataclass(frozen=True)
class HeadingContent(BlockContent):
    text: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HeadingContent':
        return cls(text=data.get("text", ""))


@dataclass(frozen=True)
class ParagraphContent(BlockContent):
    text: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ParagraphContent':
        return cls(text=data.get("text", ""))


@dataclass(frozen=True)
class QuoteContent(BlockContent):
    text: str = ""
    attribution: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "attribution": self.attribution}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'QuoteContent':
        return cls(text=data.get("text", ""), attribution=data.get("attribution", ""))


@dataclass(frozen=True)
class ListContent(BlockContent):
    """Items of an ordered or unordered list"""
    items: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"items": list(self.items)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ListContent':
        return cls(items=tuple(data.get("items", ())))


@dataclass(frozen=True)
class FigureContent(BlockContent):
    src: str = ""
    alt: str = ""
    caption: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"src": self.src, "alt": self.alt, "caption": self.caption}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FigureContent':
        return cls(
            src=data.get("src", ""),
            alt=data.get("alt", ""),
            caption=data.get("caption", ""),
        )


@dataclass(frozen=True)
class TableContent(BlockContent):
    headers: Tuple[str, ...] = ()
    rows: Tuple[Tuple[str, ...], ...] = ()
    caption: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "headers": list(self.headers),
            "rows": [list(row) for row in self.rows],
            "caption": self.caption,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TableContent':
        return cls(
            headers=tuple(data.get("headers", ())),
            rows=tuple(tuple(row) for row in data.get("rows", ())),
            caption=data.get("caption", ""),
        )


@dataclass(frozen=True)
class ChartContent(BlockContent):
    chart_type: str = "bar"
    labels: Tuple[str, ...] = ()
    values: Tuple[float, ...] = ()
    caption: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chartType": self.chart_type,
            "labels": list(self.labels),
            "values": list(self.values),
            "caption": self.caption,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChartContent':
        return cls(
            chart_type=data.get("chartType", "bar"),
            labels=tuple(data.get("labels", ())),
            values=tuple(data.get("values", ())),
            caption=data.get("caption", ""),
        )


@dataclass(frozen=True)
class CrossReferenceContent(BlockContent):
    target_block_id: str = ""
    label: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"targetBlockId": self.target_block_id, "label": self.label}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CrossReferenceContent':
        return cls(
            target_block_id=data.get("targetBlockId", ""),
            label=data.get("label", ""),
        )


@dataclass(frozen=True)
class DividerContent(BlockContent):
    style: str = "solid"

    def to_dict(self) -> Dict[str, Any]:
        return {"style": self.style}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DividerContent':
        return cls(style=data.get("style", "solid"))


@dataclass(frozen=True)
class SpacerContent(BlockContent):
    """Vertical whitespace; height in points"""
    height: float = 12.0

    def to_dict(self) -> Dict[str, Any]:
        return {"height": self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SpacerContent':
        return cls(height=data.get("height", 12.0))


@dataclass(frozen=True)
class TableOfContentsContent(BlockContent):
    config: TocConfig = field(default_factory=TocConfig.standard)

    def to_dict(self) -> Dict[str, Any]:
        return {"config": self.config.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TableOfContentsContent':
        if "config" not in data:
            return cls()
        config = data["config"]
        if isinstance(config, TocConfig):
            return cls(config=config)
        return cls(config=TocConfig.from_dict(config))


CONTENT_TYPES: Dict[BlockType, Type[BlockContent]] = {
    BlockType.HEADING: HeadingContent,
    BlockType.PARAGRAPH: ParagraphContent,
    BlockType.QUOTE: QuoteContent,
    BlockType.ORDERED_LIST: ListContent,
    BlockType.UNORDERED_LIST: ListContent,
    BlockType.FIGURE: FigureContent,
    BlockType.TABLE: TableContent,
    BlockType.CHART: ChartContent,
    BlockType.CROSS_REFERENCE: CrossReferenceContent,
    BlockType.DIVIDER: DividerContent,
    BlockType.SPACER: SpacerContent,
    BlockType.TABLE_OF_CONTENTS: TableOfContentsContent,
}


def empty_content(block_type: BlockType) -> BlockContent:
    """Default (empty) content variant for a block type"""
    return CONTENT_TYPES[block_type]()


def content_from_dict(block_type: BlockType, data: Any) -> BlockContent:
    """
    Build the content variant for ``block_type``.

    Legacy payloads stored text blocks as a bare string; those are accepted
    for the text-carrying variants.
    """
    content_cls = CONTENT_TYPES[block_type]
    if data is None:
        return content_cls()
    if isinstance(data, BlockContent):
        if not isinstance(data, content_cls):
            raise ContractValidationError(
                [f"{type(data).__name__} is not valid content for a {block_type.value} block"]
            )
        return data
    if isinstance(data, str) and content_cls in (HeadingContent, ParagraphContent, QuoteContent):
        return content_cls(text=data)
    if not isinstance(data, dict):
        raise ContractValidationError([f"Invalid content for a {block_type.value} block: {data!r}"])
    return content_cls.from_dict(data)


def _camel(name: str) -> str:
    """snake_case attribute name to the serialized camelCase key"""
    return re.sub(r"_([a-z])", lambda m: m.group(1).upper(), name)
