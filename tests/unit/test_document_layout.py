"""
Unit Tests for Document Layout and Anchors

Running page numbers across sections, the per-section layout cache and
cross-reference resolution.
"""

import pytest

from composer.contracts import Block, BlockType
from composer.layout import AnchorIndex, AnchorType, DocumentLayout, FixedHeightMeasurer
from composer.model import add_block, delete_section, update_block


@pytest.fixture
def layout():
    return DocumentLayout(FixedHeightMeasurer(default=20))


class TestRunningPages:
    """Test page numbering across sections."""

    def test_first_pages(self, layout, sample_document):
        document, ids = sample_document
        pagination = layout.paginate(document)
        assert pagination.first_pages == {ids["overview"]: 1, ids["data"]: 2}
        assert pagination.total_pages == 2
        assert pagination.section_order == (ids["overview"], ids["data"])

    def test_page_number_of_block(self, layout, sample_document):
        document, ids = sample_document
        pagination = layout.paginate(document)
        assert pagination.page_number(ids["intro"]) == 1
        assert pagination.page_number(ids["table"]) == 2
        assert pagination.page_number("missing") is None

    def test_multi_page_section_shifts_later_sections(self, sample_document):
        document, ids = sample_document
        layout = DocumentLayout(FixedHeightMeasurer(heights={ids["para"]: 700}, default=20))
        pagination = layout.paginate(document)
        assert pagination.layout_for(ids["overview"]).page_count == 2
        assert pagination.first_pages[ids["data"]] == 3
        assert pagination.page_number(ids["background"]) == 2

    def test_to_dict(self, layout, sample_document):
        document, ids = sample_document
        data = layout.paginate(document).to_dict()
        assert data["total_pages"] == 2
        assert [s["first_page"] for s in data["sections"]] == [1, 2]
        assert data["sections"][1]["section_id"] == ids["data"]

    def test_diagnostics_collected_in_section_order(self, sample_document):
        document, ids = sample_document
        layout = DocumentLayout(FixedHeightMeasurer(heights={ids["figure"]: 2000, ids["para"]: 2000}))
        diagnostics = layout.paginate(document).diagnostics
        assert [d.block_id for d in diagnostics] == [ids["para"], ids["figure"]]


class TestLayoutCache:
    """Test that only changed sections are paginated again."""

    def test_unchanged_document_hits_cache(self, layout, sample_document):
        document, _ = sample_document
        first = layout.paginate(document)
        second = layout.paginate(document)
        assert layout.misses == 2
        assert layout.hits == 2
        assert second.layouts == first.layouts

    def test_edit_recomputes_only_touched_section(self, ctx, layout, sample_document):
        document, ids = sample_document
        layout.paginate(document)
        edited = update_block(document, ids["results"], {"content": {"text": "Findings"}}, ctx=ctx)
        layout.paginate(edited)
        assert layout.misses == 3
        assert layout.hits == 1

    def test_invalidate(self, layout, sample_document):
        document, ids = sample_document
        layout.paginate(document)
        layout.invalidate(ids["overview"])
        layout.paginate(document)
        assert layout.misses == 3
        layout.invalidate()
        layout.paginate(document)
        assert layout.misses == 5

    def test_deleted_section_drops_out(self, ctx, layout, sample_document):
        document, ids = sample_document
        layout.paginate(document)
        pagination = layout.paginate(delete_section(document, ids["overview"], ctx=ctx))
        assert pagination.first_pages == {ids["data"]: 1}
        assert pagination.layout_for(ids["overview"]) is None


class TestAnchors:
    """Test anchor registration and cross-reference resolution."""

    def add_reference(self, ctx, document, ids, target, label=""):
        return add_block(
            document, ids["data"], ids["data_flow"], BlockType.CROSS_REFERENCE,
            {"targetBlockId": target, "label": label}, ctx=ctx,
        )

    def test_numbering(self, layout, sample_document):
        document, ids = sample_document
        anchors = layout.paginate(document).anchors
        figure = anchors.get(ids["figure"])
        assert figure.type == AnchorType.FIGURE
        assert figure.number == 1
        assert figure.title == "Revenue"
        assert figure.page_number == 2
        assert anchors.get(ids["intro"]).number is None
        assert [a.block_id for a in anchors.list_of_tables()] == [ids["table"]]
        assert len(anchors.on_page(1)) == 3
        assert ids["para"] not in anchors
        assert len(anchors) == 6

    def test_resolve_figure(self, ctx, layout, sample_document):
        document, ids = sample_document
        document, ref = self.add_reference(ctx, document, ids, ids["figure"])
        resolved = layout.paginate(document).anchors.resolve(ref)
        assert resolved.resolved is True
        assert resolved.text == "Figure 1: Revenue"
        assert resolved.page_number == 2

    def test_resolve_heading(self, ctx, layout, sample_document):
        document, ids = sample_document
        document, plain = self.add_reference(ctx, document, ids, ids["background"])
        document, labelled = self.add_reference(ctx, document, ids, ids["background"], "see background")
        anchors = layout.paginate(document).anchors
        assert anchors.resolve(plain).text == "Background"
        assert anchors.resolve(labelled).text == "see background"
        assert anchors.resolve(plain).page_number == 1

    def test_unresolved_reference(self, ctx, layout, sample_document):
        document, ids = sample_document
        document, ref = self.add_reference(ctx, document, ids, "deleted-block")
        resolved = layout.paginate(document).anchors.resolve(ref)
        assert resolved.resolved is False
        assert resolved.text == "??"
        assert resolved.page_number is None

    def test_resolve_rejects_other_blocks(self):
        block = Block(id="p", type=BlockType.PARAGRAPH, content={"text": "x"})
        with pytest.raises(TypeError):
            AnchorIndex().resolve(block)

    def test_split_block_registered_once(self):
        index = AnchorIndex()
        block = Block(id="t", type=BlockType.TABLE, content={"caption": "Totals"})
        assert index.register(block, "s1", 1, 0, 0.0) is not None
        assert index.register(block, "s1", 2, 0, 0.0) is None
        assert index.get("t").page_number == 1
