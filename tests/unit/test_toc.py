"""
Unit Tests for the Table of Contents Generator

Outline derivation from headings and layouts, stale references, and the
text/Markdown renderings.
"""

from dataclasses import replace

import pytest

from composer.contracts import (
    BlockType,
    HeadingContent,
    LeaderStyle,
    PageNumberAlignment,
    TocConfig,
)
from composer.errors import DiagnosticKind, NotFound
from composer.layout import DocumentLayout, FixedHeightMeasurer
from composer.model import add_block, update_block
from composer.toc import (
    TocEntry,
    TocGenerator,
    TocOutline,
    build_outline_tree,
    clean_heading_title,
    format_entry,
    generate_for_block,
    heading_to_anchor,
    render_text,
    should_update_toc,
    to_markdown,
    toc_blocks,
)

H1_H2 = TocConfig.standard().with_changes(include_levels=(True, True, False, False, False, False))


@pytest.fixture
def paginate():
    layout = DocumentLayout(FixedHeightMeasurer(default=20))
    return layout.paginate


@pytest.fixture
def document_with_toc(ctx, sample_document, section_builder, tall_column_master):
    """
    The sample document plus a trailing "Contents" section holding a TOC
    block and a heading of its own.
    """
    document, ids = sample_document
    document, ids["contents"], ids["contents_flow"] = section_builder(document, "Contents", tall_column_master)
    document, toc = add_block(
        document, ids["contents"], ids["contents_flow"], BlockType.TABLE_OF_CONTENTS,
        {"config": H1_H2.to_dict()}, ctx=ctx,
    )
    document, own = add_block(
        document, ids["contents"], ids["contents_flow"], BlockType.HEADING,
        {"text": "Contents heading"}, metadata={"level": 1}, ctx=ctx,
    )
    ids["toc"] = toc.id
    ids["own_heading"] = own.id
    return document, ids


class TestTocGenerator:
    """Test outline generation."""

    def test_include_levels_h1_h2(self, sample_document, paginate):
        """Test that only enabled levels appear, in document order."""
        document, ids = sample_document
        outline = TocGenerator(H1_H2).generate(document, paginate(document))
        assert [(e.text, e.level, e.page_number) for e in outline] == [
            ("Introduction", 1, 1),
            ("Background", 2, 1),
            ("Results", 1, 2),
        ]
        assert ids["details"] not in [e.block_id for e in outline]
        assert outline.diagnostics == ()
        assert outline.is_stale is False

    def test_entry_fields(self, sample_document, paginate):
        document, ids = sample_document
        entry = TocGenerator(TocConfig.standard()).generate(document, paginate(document)).entries[-1]
        assert entry.block_id == ids["results"]
        assert entry.section_id == ids["data"]
        assert entry.section_name == "Data"
        assert entry.anchor == "results"

    def test_excluded_sections(self, sample_document, paginate):
        document, ids = sample_document
        config = TocConfig.standard().with_changes(exclude_sections=(ids["overview"],))
        outline = TocGenerator(config).generate(document, paginate(document))
        assert [e.text for e in outline] == ["Results"]

    def test_toc_section_is_skipped(self, document_with_toc, paginate):
        """Test that headings in the section holding the TOC block are left out."""
        document, ids = document_with_toc
        outline = generate_for_block(document, paginate(document), ids["toc"])
        assert ids["own_heading"] not in [e.block_id for e in outline]
        assert outline.toc_block_id == ids["toc"]
        assert outline.config == H1_H2
        assert len(outline) == 3

    def test_page_numbers_follow_section_order(self, document_with_toc, paginate):
        """Test running page numbers when the TOC section comes first."""
        document, ids = document_with_toc
        sections = tuple(
            replace(s, order={ids["contents"]: 0, ids["overview"]: 1, ids["data"]: 2}[s.id])
            for s in document.sections
        )
        document = replace(document, sections=sections)
        outline = generate_for_block(document, paginate(document), ids["toc"])
        assert [e.page_number for e in outline] == [2, 2, 3]

    def test_include_in_toc_false(self, ctx, sample_document, paginate):
        document, ids = sample_document
        document = update_block(document, ids["background"], {"metadata": {"includeInTOC": False}}, ctx=ctx)
        outline = TocGenerator(H1_H2).generate(document, paginate(document))
        assert [e.text for e in outline] == ["Introduction", "Results"]

    def test_stale_reference(self, sample_document, paginate, caplog):
        """Test that a section without layout yields entries without page numbers."""
        document, ids = sample_document
        layouts = {ids["overview"]: paginate(document).layouts[ids["overview"]]}
        with caplog.at_level("WARNING", logger="composer.toc"):
            outline = TocGenerator(H1_H2).generate(document, layouts)
        results = [e for e in outline if e.block_id == ids["results"]][0]
        assert results.page_number is None
        assert outline.is_stale is True
        assert len(outline.diagnostics) == 1
        diagnostic = outline.diagnostics[0]
        assert diagnostic.kind == DiagnosticKind.STALE_REFERENCE
        assert diagnostic.block_id == ids["results"]
        assert "no computed layout" in caplog.text

    def test_mapping_layouts_start_at_page_one(self, sample_document, paginate):
        document, ids = sample_document
        layouts = paginate(document).layouts
        outline = TocGenerator(H1_H2).generate(document, layouts)
        assert [e.page_number for e in outline] == [1, 1, 1]
        outline = TocGenerator(H1_H2).generate(document, layouts, first_pages={ids["data"]: 7})
        assert outline.entries[-1].page_number == 7

    def test_generate_for_block_errors(self, sample_document, paginate):
        document, ids = sample_document
        pagination = paginate(document)
        with pytest.raises(NotFound):
            generate_for_block(document, pagination, "missing")
        with pytest.raises(TypeError):
            generate_for_block(document, pagination, ids["intro"])

    def test_toc_blocks(self, document_with_toc, sample_document):
        document, ids = document_with_toc
        assert toc_blocks(document) == [ids["toc"]]
        assert toc_blocks(sample_document[0]) == []


class TestHeadingText:
    """Test heading cleanup and anchors."""

    def test_clean_heading_title(self):
        assert clean_heading_title(HeadingContent(text="## Overview ")) == "Overview"
        assert clean_heading_title(HeadingContent(text="   ")) == "Untitled"

    @pytest.mark.parametrize("text, anchor", [
        ("Introduction", "introduction"),
        ("Hello, World!", "hello-world"),
        ("Café  Menu", "café-menu"),
        ("- Q3 results -", "q3-results"),
    ])
    def test_heading_to_anchor(self, text, anchor):
        assert heading_to_anchor(text) == anchor

    def test_should_update_toc(self, sample_document):
        document, _ = sample_document
        assert should_update_toc(None, document) is True
        assert should_update_toc("2023-12-31T00:00:00+00:00", document) is True
        assert should_update_toc("2024-01-01T00:00:00+00:00", document) is False
        assert should_update_toc("yesterday", document) is True


def entry(text, level, page=1):
    return TocEntry(
        block_id=text.lower(),
        section_id="s1",
        section_name="Body",
        text=text,
        level=level,
        anchor=heading_to_anchor(text),
        page_number=page,
    )


def outline(config, *entries):
    return TocOutline(title=config.title, entries=tuple(entries), config=config)


class TestFormatting:
    """Test text and Markdown renderings."""

    def test_right_aligned_with_dots(self):
        line = format_entry(entry("Introduction", 1, 3), TocConfig.standard(), width=30)
        assert line == "Introduction" + "." * 17 + "3"
        assert len(line) == 30

    def test_indent_per_level(self):
        line = format_entry(entry("Background", 2), TocConfig.standard(), width=30)
        assert line.startswith("  Background.")

    @pytest.mark.parametrize("indent, prefix", [(0.0, "Background"), (0.1, "  Background"), (0.5, "    Background")])
    def test_indent_rounding(self, indent, prefix):
        config = TocConfig.standard().with_changes(indent_per_level=indent)
        assert format_entry(entry("Background", 2), config, width=30).startswith(prefix + ".")

    def test_inline_page_number(self):
        config = TocConfig.standard().with_changes(page_number_alignment=PageNumberAlignment.INLINE)
        assert format_entry(entry("Results", 1, 12), config) == "Results (p. 12)"

    def test_leader_styles(self):
        dashes = TocConfig.standard().with_changes(leader=LeaderStyle.DASHES)
        blank = TocConfig.standard().with_changes(leader=LeaderStyle.NONE)
        assert format_entry(entry("A", 1, 1), dashes, width=6) == "A----1"
        assert format_entry(entry("A", 1, 1), blank, width=6) == "A    1"

    def test_minimum_leader(self):
        line = format_entry(entry("A very long heading", 1, 10), TocConfig.standard(), width=10)
        assert line == "A very long heading..10"

    def test_without_page_numbers(self):
        config = TocConfig.standard().with_changes(show_page_numbers=False)
        assert format_entry(entry("Results", 1), config) == "Results"
        assert format_entry(entry("Stale", 1, None), TocConfig.standard()) == "Stale"

    def test_render_pages_with_continued(self):
        config = TocConfig.standard()
        pages = render_text(outline(config, entry("A", 1), entry("B", 1), entry("C", 1)), lines_per_page=4, width=10)
        assert len(pages) == 2
        assert pages[0].splitlines()[0] == "Table of Contents"
        assert pages[1].splitlines()[0] == "Table of Contents (continued)"
        assert pages[1].splitlines()[2] == "C........1"

    def test_render_without_continued(self):
        config = TocConfig.standard().with_changes(show_continued=False)
        pages = render_text(outline(config, entry("A", 1), entry("B", 1), entry("C", 1)), lines_per_page=4)
        assert pages[1].splitlines()[0] == "Table of Contents"

    def test_render_without_page_breaks(self):
        config = TocConfig.standard().with_changes(allow_page_breaks=False)
        pages = render_text(outline(config, entry("A", 1), entry("B", 1), entry("C", 1)), lines_per_page=4)
        assert len(pages) == 1
        assert len(pages[0].splitlines()) == 5

    def test_render_empty_outline(self):
        pages = render_text(outline(TocConfig.standard()))
        assert pages == ["Table of Contents\n"]

    def test_two_columns(self):
        config = TocConfig.standard().with_changes(columns=2, page_number_alignment=PageNumberAlignment.INLINE)
        pages = render_text(outline(config, entry("A", 1), entry("B", 1), entry("C", 1)), width=40)
        rows = pages[0].splitlines()[2:]
        assert len(rows) == 2
        assert rows[0] == "A (p. 1)".ljust(17) + " " * 5 + "C (p. 1)"
        assert rows[1] == "B (p. 1)"

    def test_to_markdown(self):
        text = to_markdown(outline(TocConfig.standard(), entry("Introduction", 1, 1), entry("Background", 2, 4)))
        assert text.splitlines() == [
            "## Table of Contents",
            "",
            "- [Introduction](#introduction) (p. 1)",
            "  - [Background](#background) (p. 4)",
        ]

    def test_to_markdown_without_title_or_pages(self):
        config = TocConfig.standard().with_changes(show_page_numbers=False)
        text = to_markdown(outline(config, entry("Intro", 1)), include_title=False)
        assert text == "- [Intro](#intro)"


class TestOutlineTree:
    """Test nesting derived from level deltas."""

    def test_nesting(self):
        entries = [entry("A", 1), entry("A1", 3), entry("A2", 2), entry("B", 1)]
        roots = build_outline_tree(entries)
        assert [n.entry.text for n in roots] == ["A", "B"]
        assert [n.entry.text for n in roots[0].children] == ["A1", "A2"]
        assert roots[1].children == []

    def test_starts_below_level_one(self):
        roots = build_outline_tree([entry("Deep", 3), entry("Top", 1)])
        assert [n.entry.text for n in roots] == ["Deep", "Top"]
