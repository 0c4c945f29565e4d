"""
Unit Tests for Snapshots and Revert

Revert must store a safety version before replacing the live document,
and must leave everything untouched when that fails.
"""

import pytest

from composer.context import EditContext, FixedClock
from composer.contracts import VersionType
from composer.errors import ContractValidationError
from composer.model import create_document, update_block
from composer.versions import next_version_number, revert_to_version, take_snapshot


class TestTakeSnapshot:
    """Test immutable version construction."""

    def test_deep_copy(self, ctx, sample_document):
        document, _ = sample_document
        version = take_snapshot(document, 1, VersionType.MANUAL, "alice", label="Draft", ctx=ctx)
        assert version.content == document
        assert version.content is not document
        assert version.content.sections[0] is not document.sections[0]
        assert version.document_id == document.id
        assert version.title == document.title
        assert version.label == "Draft"
        assert version.created_at == "2024-01-01T00:00:00+00:00"

    def test_invalid_version_number(self, ctx, sample_document):
        document, _ = sample_document
        with pytest.raises(ContractValidationError):
            take_snapshot(document, 0, ctx=ctx)

    def test_next_version_number(self, ctx, sample_document):
        document, _ = sample_document
        assert next_version_number([]) == 1
        versions = [take_snapshot(document, n, ctx=ctx) for n in (1, 4, 2)]
        assert next_version_number(versions) == 5


class TestRevert:
    """Test safety-first whole-document revert."""

    @pytest.fixture
    def history(self, ctx, persistence, sample_document):
        """v1 of the sample document, then an edit on the live copy."""
        document, ids = sample_document
        v1 = persistence.create_version(document, VersionType.MANUAL, "alice")
        live = update_block(document, ids["intro"], {"content": {"text": "Preface"}}, ctx=ctx)
        return live, v1, ids

    def test_restores_target_content(self, ctx, persistence, history):
        live, v1, ids = history
        result = revert_to_version(live, v1, persistence, created_by="bob", ctx=ctx)
        assert result.document.locate(ids["intro"]).block.content.text == "Introduction"
        assert result.document.sections == v1.content.sections
        assert result.document is not v1.content
        assert result.target is v1

    def test_safety_version_first(self, ctx, persistence, history):
        live, v1, _ = history
        result = revert_to_version(live, v1, persistence, created_by="bob", ctx=ctx)
        safety = result.safety_version
        assert safety.version_type == VersionType.SAFETY
        assert safety.version_number == 2
        assert safety.created_by == "bob"
        assert safety.content == live
        assert safety.label == "Safety backup - 2024-01-01T00:00:00+00:00"
        assert persistence.calls == ["create_version:manual", "create_version:safety"]

    def test_failed_safety_aborts(self, ctx, persistence, history):
        """Test that a failing safety snapshot propagates and replaces nothing."""
        live, v1, ids = history
        persistence.fail_create = True
        with pytest.raises(IOError):
            revert_to_version(live, v1, persistence, ctx=ctx)
        assert live.locate(ids["intro"]).block.content.text == "Preface"
        assert len(persistence.versions[live.id]) == 1

    def test_skip_safety(self, ctx, persistence, history, caplog):
        live, v1, _ = history
        with caplog.at_level("WARNING", logger="composer.versions"):
            result = revert_to_version(live, v1, persistence, skip_safety=True, ctx=ctx)
        assert result.safety_version is None
        assert persistence.calls == ["create_version:manual"]
        assert "without a safety version" in caplog.text

    def test_updated_at_is_refreshed(self, persistence, history):
        live, v1, _ = history
        later = EditContext(clock=FixedClock("2024-06-01T12:00:00+00:00"))
        result = revert_to_version(live, v1, persistence, ctx=later)
        assert result.document.updated_at == "2024-06-01T12:00:00+00:00"
        assert result.document.created_at == v1.content.created_at

    def test_version_of_another_document(self, ctx, persistence, history):
        live, _, _ = history
        other = create_document("Other", ctx=ctx)
        foreign = persistence.create_version(other, VersionType.MANUAL, "alice")
        with pytest.raises(ContractValidationError):
            revert_to_version(live, foreign, persistence, ctx=ctx)
        assert persistence.calls[-1] == "create_version:manual"

    def test_list_versions_newest_first(self, ctx, persistence, history):
        live, v1, _ = history
        revert_to_version(live, v1, persistence, ctx=ctx)
        assert [v.version_number for v in persistence.list_versions(live.id)] == [2, 1]
