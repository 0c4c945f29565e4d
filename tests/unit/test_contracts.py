"""
Unit Tests for Document Contracts

Serialized shape of documents, sections, blocks, page masters, TOC
configuration and versions.
"""

import json
import pytest

from composer.contracts import (
    Block,
    BlockType,
    ChartContent,
    Document,
    DocumentVersion,
    FigureContent,
    Flow,
    HeadingContent,
    LayoutIntent,
    LeaderStyle,
    Margins,
    Orientation,
    PageMaster,
    PageSize,
    PaginationRules,
    ParagraphContent,
    Section,
    TableOfContentsContent,
    TocConfig,
    VersionType,
    content_from_dict,
    empty_content,
    load_document,
)
from composer.errors import ContractValidationError, DiagnosticKind


class TestPageMaster:
    """Test PageMaster defaults, orientation and merging."""

    def test_defaults(self):
        """Test the default page master: Letter, portrait, 1 column, 1in margins."""
        pm = PageMaster()
        assert pm.page_size == PageSize.LETTER
        assert pm.orientation == Orientation.PORTRAIT
        assert pm.margins == Margins(1.0, 1.0, 1.0, 1.0)
        assert pm.columns == 1
        assert pm.has_header is False
        assert pm.has_footer is False
        assert pm.baseline_grid is False

    def test_landscape_swaps_dimensions(self):
        """Test that landscape swaps page width and height."""
        pm = PageMaster(page_size=PageSize.A4, orientation=Orientation.LANDSCAPE)
        assert pm.page_dimensions == (11.69, 8.27)

    def test_merge_margins_key_by_key(self):
        """Test that a partial margins update keeps the other margins."""
        pm = PageMaster().merge({"margins": {"top": 0.5}, "columns": 2})
        assert pm.margins == Margins(top=0.5, right=1.0, bottom=1.0, left=1.0)
        assert pm.columns == 2

    def test_merge_accepts_attribute_names(self):
        """Test snake_case keys and enum values in a partial update."""
        pm = PageMaster().merge({"has_header": True, "orientation": Orientation.LANDSCAPE})
        assert pm.has_header is True
        assert pm.orientation == Orientation.LANDSCAPE

    def test_merge_unknown_key(self):
        """Test that unknown keys are rejected."""
        with pytest.raises(KeyError):
            PageMaster().merge({"bleed": 0.125})

    def test_round_trip(self):
        """Test to_dict/from_dict round trip with camelCase keys."""
        pm = PageMaster(columns=3, column_gap=0.5, baseline_grid=True, allow_table_rotation=True)
        data = pm.to_dict()
        assert data["columnGap"] == 0.5
        assert data["allowTableRotation"] is True
        assert PageMaster.from_dict(data) == pm


class TestTocConfig:
    """Test TOC configuration validation."""

    def test_standard_preset(self):
        """Test the standard preset includes H1-H3."""
        config = TocConfig.standard()
        assert config.include_levels == (True, True, True, False, False, False)
        assert config.includes_level(3) is True
        assert config.includes_level(4) is False
        assert config.includes_level(7) is False

    def test_missing_field_is_rejected(self):
        """Test that a serialized config missing a field raises."""
        data = TocConfig.standard().to_dict()
        del data["leader"]
        with pytest.raises(ContractValidationError) as exc_info:
            TocConfig.from_dict(data)
        assert "leader" in str(exc_info.value)

    def test_invalid_enum_value(self):
        """Test that an unknown leader style raises."""
        data = TocConfig.standard().to_dict()
        data["leader"] = "stars"
        with pytest.raises(ContractValidationError):
            TocConfig.from_dict(data)

    def test_invalid_columns(self):
        """Test that only 1 or 2 TOC columns are accepted."""
        with pytest.raises(ContractValidationError):
            TocConfig.standard().with_changes(columns=3)

    def test_wrong_level_count(self):
        """Test that include_levels must have six entries."""
        config = TocConfig.standard()
        assert config.with_changes(leader=LeaderStyle.DASHES).leader == LeaderStyle.DASHES
        with pytest.raises(ContractValidationError):
            config.with_changes(include_levels=(True, False))

    def test_round_trip(self):
        """Test to_dict/from_dict round trip."""
        config = TocConfig.standard().with_changes(title="Contents", exclude_sections=("s-1",))
        assert TocConfig.from_dict(config.to_dict()) == config


class TestBlockContent:
    """Test tagged content variants."""

    def test_empty_content_per_type(self):
        """Test that every block type has an empty variant."""
        assert empty_content(BlockType.HEADING) == HeadingContent()
        assert empty_content(BlockType.FIGURE) == FigureContent()
        assert isinstance(empty_content(BlockType.TABLE_OF_CONTENTS), TableOfContentsContent)

    def test_legacy_string_content(self):
        """Test that bare strings are accepted for text blocks."""
        assert content_from_dict(BlockType.PARAGRAPH, "Hello") == ParagraphContent(text="Hello")

    def test_string_rejected_for_structured_block(self):
        """Test that a string is not valid table content."""
        with pytest.raises(ContractValidationError):
            content_from_dict(BlockType.TABLE, "a | b")

    def test_wrong_variant_rejected(self):
        """Test that a block refuses content of another type."""
        with pytest.raises(ContractValidationError):
            Block(id="b1", type=BlockType.HEADING, content=FigureContent(src="x.png"))

    def test_dict_content_converted(self):
        """Test that dict content becomes the typed variant."""
        block = Block(id="c1", type=BlockType.CHART, content={"chartType": "line", "values": [1, 2]})
        assert block.content == ChartContent(chart_type="line", values=(1, 2))

    def test_merge_rejects_unknown_field(self):
        """Test partial merge of content."""
        content = HeadingContent(text="Intro")
        assert content.merge({"text": "Overview"}).text == "Overview"
        with pytest.raises(ContractValidationError):
            content.merge({"subtitle": "x"})

    def test_toc_content_without_config(self):
        """Test that a TOC block without config uses the standard preset."""
        assert TableOfContentsContent.from_dict({}).config == TocConfig.standard()


class TestBlock:
    """Test Block metadata helpers."""

    def test_heading_level_default(self):
        """Test that a heading without level metadata is level 1."""
        block = Block(id="h", type=BlockType.HEADING, content={"text": "A"})
        assert block.heading_level == 1

    def test_heading_level_out_of_range(self):
        """Test that levels outside 1-6 are ignored."""
        block = Block(id="h", type=BlockType.HEADING, content={"text": "A"}, metadata={"level": 9})
        assert block.heading_level is None

    def test_non_heading_has_no_level(self):
        block = Block(id="p", type=BlockType.PARAGRAPH, content={"text": "A"}, metadata={"level": 2})
        assert block.heading_level is None

    def test_pagination_rules_merge(self):
        """Test merging rules with serialized or attribute names."""
        rules = PaginationRules().merge({"keepWithNext": True, "break_avoid": 1})
        assert rules == PaginationRules(keep_with_next=True, break_avoid=True)
        with pytest.raises(ContractValidationError):
            rules.merge({"orphans": 2})


class TestDocumentSerialization:
    """Test Document round trip and legacy handling."""

    def test_round_trip(self, sample_document):
        """Test from_dict(to_dict(doc)) == doc."""
        document, _ = sample_document
        assert Document.from_dict(document.to_dict()) == document

    def test_json_round_trip_is_stable(self, sample_document):
        """Test that to_json is byte-stable for equal values."""
        document, _ = sample_document
        text = document.to_json()
        again = Document.from_json(text)
        assert again.to_json() == text
        assert again.checksum() == document.checksum()
        assert len(document.checksum()) == 16

    def test_envelope(self, sample_document):
        """Test the metadata envelope carries the checksum."""
        document, _ = sample_document
        envelope = document.envelope()
        assert envelope["metadata"]["checksum"] == document.checksum()
        assert envelope["payload"]["id"] == document.id

    def test_sections_sorted_by_order(self):
        """Test that sections are read back in order."""
        data = {
            "id": "d1",
            "title": "T",
            "sections": [
                {"id": "s-b", "name": "B", "order": 1, "flows": []},
                {"id": "s-a", "name": "A", "order": 0, "flows": []},
            ],
        }
        document = Document.from_dict(data)
        assert [s.id for s in document.ordered_sections()] == ["s-a", "s-b"]

    def test_legacy_section_blocks_are_ignored(self):
        """Test that blocks attached directly to a section raise a schema warning."""
        data = {
            "id": "d1",
            "title": "Legacy",
            "sections": [{
                "id": "s1",
                "name": "Body",
                "order": 0,
                "blocks": [{"id": "b1", "type": "paragraph", "content": {"text": "orphan"}}],
                "flows": [],
            }],
        }
        result = load_document(data)
        assert len(result.diagnostics) == 1
        diagnostic = result.diagnostics[0]
        assert diagnostic.kind == DiagnosticKind.SCHEMA_WARNING
        assert diagnostic.section_id == "s1"
        assert diagnostic.details["block_ids"] == ["b1"]
        assert result.document.locate("b1") is None
        assert not hasattr(result.document.sections[0], "blocks")

    def test_validate_duplicates(self):
        """Test that duplicate ids and orders are reported."""
        block = Block(id="b1", type=BlockType.DIVIDER, content=None)
        document = Document(
            id="d1",
            title="Dup",
            sections=(
                Section(id="s1", name="A", order=0),
                Section(id="s2", name="B", order=0),
            ),
        )
        errors = document.validate()
        assert any("order 0" in e for e in errors)

        flows = (Flow(id="f1", name="Main", blocks=(block,)), Flow(id="f2", name="Side", blocks=(block,), order=1))
        document = Document(id="d2", title="Dup", sections=(Section(id="s1", name="A", flows=flows),))
        assert any("block id 'b1'" in e for e in document.validate())
        with pytest.raises(ContractValidationError):
            document.assert_valid()

    def test_count_by_type(self, sample_document):
        document, _ = sample_document
        counts = document.count_by_type()
        assert counts["heading"] == 4
        assert counts["figure"] == 1


class TestDocumentVersion:
    """Test DocumentVersion contract."""

    def test_round_trip(self, sample_document):
        """Test version serialization keeps the full content."""
        document, _ = sample_document
        version = DocumentVersion(
            id="v1",
            document_id=document.id,
            version_number=1,
            title=document.title,
            content=document,
            version_type=VersionType.SAFETY,
            created_by="alice",
            created_at="2024-01-01T00:00:00+00:00",
            label="Before edits",
        )
        data = json.loads(version.to_json())
        assert data["version_type"] == "safety"
        assert DocumentVersion.from_dict(data) == version
        assert version.is_valid()

    def test_document_id_mismatch(self, sample_document):
        """Test that a version must point at its own content."""
        document, _ = sample_document
        version = DocumentVersion(
            id="v1", document_id="other", version_number=0, title="x", content=document,
        )
        errors = version.validate()
        assert len(errors) == 2

    def test_layout_intent_values(self):
        """Test the closed set of layout intents."""
        assert {i.value for i in LayoutIntent} == {
            "cover", "executive-summary", "body", "data-appendix", "custom",
        }
