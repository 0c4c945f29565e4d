#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
TOC Presentation

Text and Markdown renderings of a TocOutline. Nesting is derived here from
consecutive level deltas; the outline itself stays flat.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from config.constants import TOC_CONTINUED_SUFFIX, TOC_LINES_PER_PAGE, TOC_TEXT_WIDTH
from composer.contracts import PageNumberAlignment, TocConfig
from .generator import TocEntry, TocOutline

MIN_LEADER = 2
CHARS_PER_INCH = 10  # TOC_TEXT_WIDTH spread over an 8in line


@dataclass
class TocNode:
    """An entry with the entries nested below it"""
    entry: TocEntry
    children: List['TocNode'] = field(default_factory=list)

    def __repr__(self):
        return f"<TocNode L{self.entry.level} {self.entry.text!r} ({len(self.children)} children)>"


def build_outline_tree(entries: Sequence[TocEntry]) -> List[TocNode]:
    """
    Nest entries by level: an entry becomes a child of the closest preceding
    entry with a lower level. Skipped levels (H1 followed by H3) nest one
    step deep.
    """
    roots: List[TocNode] = []
    stack: List[TocNode] = []

    for entry in entries:
        node = TocNode(entry)
        while stack and stack[-1].entry.level >= entry.level:
            stack.pop()
        if stack:
            stack[-1].children.append(node)
        else:
            roots.append(node)
        stack.append(node)

    return roots


def _indent_steps(indent_per_level: float) -> int:
    """Two-space steps per level, one step per quarter inch; never zero for a non-zero indent"""
    if indent_per_level <= 0:
        return 0
    return max(1, round(indent_per_level * 4))


def format_entry(entry: TocEntry, config: TocConfig, width: int = TOC_TEXT_WIDTH) -> str:
    """
    Render one entry as a line of text.

    Inline alignment appends "(p. N)"; right alignment pads with the leader
    character so the page number ends at ``width``. Entries without a page
    number render their text only.
    """
    indent = "  " * ((entry.level - 1) * _indent_steps(config.indent_per_level))
    text = f"{indent}{entry.text}"

    if not config.show_page_numbers or entry.page_number is None:
        return text

    if config.page_number_alignment == PageNumberAlignment.INLINE:
        return f"{text} (p. {entry.page_number})"

    page_text = str(entry.page_number)
    leader_count = max(MIN_LEADER, width - len(text) - len(page_text))
    return f"{text}{config.leader.char * leader_count}{page_text}"


def render_text(
    outline: TocOutline,
    lines_per_page: int = TOC_LINES_PER_PAGE,
    width: int = TOC_TEXT_WIDTH,
) -> List[str]:
    """
    Render an outline as text pages.

    Each page starts with the title (followed by "(continued)" on later pages
    when ``show_continued`` is set). Without ``allow_page_breaks`` the whole
    outline is a single page. Two-column configurations place entries side by
    side, filling the left column first.

    Returns:
        One string per page
    """
    config = outline.config
    columns = config.columns
    gap = max(MIN_LEADER, int(round(config.column_gap * CHARS_PER_INCH))) if columns == 2 else 0
    column_width = (width - gap) // columns

    lines = [format_entry(entry, config, column_width) for entry in outline.entries]

    body_lines = max(1, lines_per_page - 2)  # title + blank line
    per_page = body_lines * columns
    if config.allow_page_breaks and lines:
        chunks = [lines[i:i + per_page] for i in range(0, len(lines), per_page)]
    else:
        chunks = [lines]

    pages = []
    for index, chunk in enumerate(chunks):
        title = outline.title
        if index > 0 and config.show_continued:
            title = f"{title} {TOC_CONTINUED_SUFFIX}"
        body = _side_by_side(chunk, column_width, gap) if columns == 2 else chunk
        pages.append("\n".join([title, ""] + body))

    return pages


def to_markdown(outline: TocOutline, include_title: bool = True) -> str:
    """
    Convert an outline to Markdown with anchor links.

    Example output:
        ## Table of Contents

        - [Introduction](#introduction) (p. 1)
          - [Background](#background) (p. 2)
    """
    lines = []

    if include_title:
        lines.append(f"## {outline.title}")
        lines.append("")

    show_pages = outline.config.show_page_numbers
    for entry in outline.entries:
        indent = "  " * (entry.level - 1)
        line = f"{indent}- [{entry.text}](#{entry.anchor})"
        if show_pages and entry.page_number is not None:
            line += f" (p. {entry.page_number})"
        lines.append(line)

    return "\n".join(lines)


def _side_by_side(lines: List[str], column_width: int, gap: int) -> List[str]:
    half = (len(lines) + 1) // 2
    left, right = lines[:half], lines[half:]
    rows = []
    for i, text in enumerate(left):
        other: Optional[str] = right[i] if i < len(right) else None
        if other is None:
            rows.append(text)
        else:
            rows.append(f"{text.ljust(column_width)}{' ' * gap}{other}")
    return rows
