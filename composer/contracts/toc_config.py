#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Table of Contents Configuration Contract

Carried by ``table-of-contents`` blocks. Every field is explicit: a
serialized configuration missing a field is rejected rather than silently
defaulted. ``TocConfig.standard()`` is the named preset used by new TOC
blocks.

Version: 1.0.0
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Tuple
from enum import Enum

from config.constants import HEADING_LEVELS
from composer.errors import ContractValidationError


class PageNumberAlignment(Enum):
    RIGHT = "right"
    INLINE = "inline"


class LeaderStyle(Enum):
    DOTS = "dots"
    DASHES = "dashes"
    NONE = "none"

    @property
    def char(self) -> str:
        return {"dots": ".", "dashes": "-", "none": " "}[self.value]


class LinkStyle(Enum):
    HOVER = "hover"
    ALWAYS = "always"
    NONE = "none"


@dataclass(frozen=True)
class TocConfig:
    """Table of contents configuration (lengths in inches)"""
    title: str
    include_levels: Tuple[bool, ...]
    exclude_sections: Tuple[str, ...]
    columns: int
    column_gap: float
    indent_per_level: float
    item_spacing: float
    show_page_numbers: bool
    page_number_alignment: PageNumberAlignment
    leader: LeaderStyle
    link_style: LinkStyle
    auto_update: bool
    allow_page_breaks: bool
    show_continued: bool

    @classmethod
    def standard(cls) -> 'TocConfig':
        """H1-H3, single column, right-aligned page numbers with dot leaders"""
        return cls(
            title="Table of Contents",
            include_levels=(True, True, True, False, False, False),
            exclude_sections=(),
            columns=1,
            column_gap=0.5,
            indent_per_level=0.25,
            item_spacing=0.125,
            show_page_numbers=True,
            page_number_alignment=PageNumberAlignment.RIGHT,
            leader=LeaderStyle.DOTS,
            link_style=LinkStyle.HOVER,
            auto_update=True,
            allow_page_breaks=True,
            show_continued=True,
        )

    def includes_level(self, level: int) -> bool:
        """True when heading ``level`` (1-6) is enabled"""
        return 1 <= level <= HEADING_LEVELS and self.include_levels[level - 1]

    def with_changes(self, **changes) -> 'TocConfig':
        config = replace(self, **changes)
        config.assert_valid()
        return config

    def validate(self) -> List[str]:
        errors = []
        if len(self.include_levels) != HEADING_LEVELS:
            errors.append(f"includeLevels must have {HEADING_LEVELS} entries")
        if self.columns not in (1, 2):
            errors.append(f"columns must be 1 or 2, got {self.columns}")
        for name in ("column_gap", "indent_per_level", "item_spacing"):
            if getattr(self, name) < 0:
                errors.append(f"{name} must not be negative")
        return errors

    def assert_valid(self) -> None:
        errors = self.validate()
        if errors:
            raise ContractValidationError(errors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "includeLevels": list(self.include_levels),
            "excludeSections": list(self.exclude_sections),
            "columns": self.columns,
            "columnGap": self.column_gap,
            "indentPerLevel": self.indent_per_level,
            "itemSpacing": self.item_spacing,
            "showPageNumbers": self.show_page_numbers,
            "pageNumberAlignment": self.page_number_alignment.value,
            "leader": self.leader.value,
            "linkStyle": self.link_style.value,
            "autoUpdate": self.auto_update,
            "allowPageBreaks": self.allow_page_breaks,
            "showContinued": self.show_continued,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TocConfig':
        missing = [key for key in _REQUIRED_KEYS if key not in data]
        if missing:
            raise ContractValidationError([f"TOC configuration missing '{key}'" for key in missing])

        try:
            config = cls(
                title=data["title"],
                include_levels=tuple(bool(v) for v in data["includeLevels"]),
                exclude_sections=tuple(data["excludeSections"]),
                columns=data["columns"],
                column_gap=data["columnGap"],
                indent_per_level=data["indentPerLevel"],
                item_spacing=data["itemSpacing"],
                show_page_numbers=data["showPageNumbers"],
                page_number_alignment=PageNumberAlignment(data["pageNumberAlignment"]),
                leader=LeaderStyle(data["leader"]),
                link_style=LinkStyle(data["linkStyle"]),
                auto_update=data["autoUpdate"],
                allow_page_breaks=data["allowPageBreaks"],
                show_continued=data["showContinued"],
            )
        except ValueError as e:
            raise ContractValidationError([str(e)]) from e

        config.assert_valid()
        return config


_REQUIRED_KEYS = (
    "title", "includeLevels", "excludeSections", "columns", "columnGap",
    "indentPerLevel", "itemSpacing", "showPageNumbers", "pageNumberAlignment",
    "leader", "linkStyle", "autoUpdate", "allowPageBreaks", "showContinued",
)
