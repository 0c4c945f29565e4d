"""
Pytest configuration and shared fixtures for Doc Composer tests.
"""
import sys
import pytest
from pathlib import Path
from typing import Dict, List, Optional

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from composer.context import EditContext, FixedClock, SequentialIds
from composer.contracts import (
    BlockType,
    Document,
    DocumentVersion,
    Margins,
    PageMaster,
    VersionType,
)
from composer.errors import NotFound
from composer.layout import FixedHeightMeasurer
from composer.model import add_block, add_flow, add_section, create_document, update_section
from composer.versions import PersistenceProvider, next_version_number, take_snapshot


# ============================================================================
# Fakes
# ============================================================================

class InMemoryPersistence(PersistenceProvider):
    """Persistence collaborator backed by dictionaries."""

    def __init__(self, ctx: Optional[EditContext] = None):
        self.ctx = ctx or EditContext(id_factory=SequentialIds("ver"), clock=FixedClock())
        self.documents: Dict[str, Document] = {}
        self.versions: Dict[str, List[DocumentVersion]] = {}
        self.fail_create = False
        self.calls: List[str] = []

    def load(self, document_id: str) -> Document:
        self.calls.append("load")
        if document_id not in self.documents:
            raise NotFound("document", document_id)
        return self.documents[document_id]

    def save(self, document: Document) -> None:
        self.calls.append("save")
        self.documents[document.id] = document

    def list_versions(self, document_id: str) -> List[DocumentVersion]:
        self.calls.append("list_versions")
        versions = self.versions.get(document_id, [])
        return sorted(versions, key=lambda v: v.version_number, reverse=True)

    def create_version(self, document, version_type, created_by, label=None) -> DocumentVersion:
        self.calls.append(f"create_version:{VersionType(version_type).value}")
        if self.fail_create:
            raise IOError("storage unavailable")
        existing = self.versions.setdefault(document.id, [])
        version = take_snapshot(
            document,
            next_version_number(existing),
            version_type=version_type,
            created_by=created_by,
            label=label,
            ctx=self.ctx,
        )
        existing.append(version)
        return version


# ============================================================================
# Fixtures: Context & Collaborators
# ============================================================================

@pytest.fixture
def ctx() -> EditContext:
    """Deterministic ids (id-1, id-2, ...) and a fixed clock."""
    return EditContext(id_factory=SequentialIds("id"), clock=FixedClock())


@pytest.fixture
def persistence() -> InMemoryPersistence:
    return InMemoryPersistence()


@pytest.fixture
def measurer() -> FixedHeightMeasurer:
    """Every block is 20pt tall unless overridden per test."""
    return FixedHeightMeasurer(default=20)


# ============================================================================
# Fixtures: Page Masters
# ============================================================================

@pytest.fixture
def tall_column_master() -> PageMaster:
    """Letter, one column, 720pt usable height (0.5in top/bottom margins)."""
    return PageMaster(margins=Margins(top=0.5, right=1.0, bottom=0.5, left=1.0))


# ============================================================================
# Fixtures: Sample Documents
# ============================================================================

def build_section(ctx, document, name, page_master=None):
    """Add a section with a single "Main" flow; returns (document, section_id, flow_id)."""
    document, section = add_section(document, name, ctx=ctx)
    if page_master is not None:
        document = update_section(document, section.id, {"page_master": page_master}, ctx=ctx)
    document, flow = add_flow(document, section.id, "Main", ctx=ctx)
    return document, section.id, flow.id


@pytest.fixture
def section_builder(ctx):
    """build_section bound to the test's context"""
    def _build(document, name, page_master=None):
        return build_section(ctx, document, name, page_master)
    return _build


@pytest.fixture
def empty_document(ctx) -> Document:
    return create_document("Quarterly Report", ctx=ctx)


@pytest.fixture
def sample_document(ctx, tall_column_master):
    """
    Two sections:
    - "Overview": H1 Introduction, paragraph, H2 Background, H3 Details
    - "Data": H1 Results, figure, table
    Returns (document, ids) where ids maps short names to block/section ids.
    """
    document = create_document("Quarterly Report", ctx=ctx)
    ids = {}

    document, ids["overview"], ids["overview_flow"] = build_section(
        ctx, document, "Overview", tall_column_master
    )
    for key, block_type, content, level in [
        ("intro", BlockType.HEADING, {"text": "Introduction"}, 1),
        ("para", BlockType.PARAGRAPH, {"text": "Revenue grew in every region."}, None),
        ("background", BlockType.HEADING, {"text": "Background"}, 2),
        ("details", BlockType.HEADING, {"text": "Details"}, 3),
    ]:
        metadata = {"level": level} if level else None
        document, block = add_block(
            document, ids["overview"], ids["overview_flow"], block_type, content,
            metadata=metadata, ctx=ctx,
        )
        ids[key] = block.id

    document, ids["data"], ids["data_flow"] = build_section(
        ctx, document, "Data", tall_column_master
    )
    for key, block_type, content, level in [
        ("results", BlockType.HEADING, {"text": "Results"}, 1),
        ("figure", BlockType.FIGURE, {"src": "chart.png", "alt": "Chart", "caption": "Revenue"}, None),
        ("table", BlockType.TABLE, {"headers": ["Region", "Q1"], "rows": [["EU", "10"]], "caption": "Totals"}, None),
    ]:
        metadata = {"level": level} if level else None
        document, block = add_block(
            document, ids["data"], ids["data_flow"], block_type, content,
            metadata=metadata, ctx=ctx,
        )
        ids[key] = block.id

    return document, ids


# ============================================================================
# Session-level Setup
# ============================================================================

def pytest_configure(config):
    """Register the markers added below."""
    config.addinivalue_line("markers", "unit: fast, isolated tests")
    config.addinivalue_line("markers", "integration: tests crossing package boundaries")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers."""
    for item in items:
        # Auto-add 'unit' marker to test files in tests/unit/
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        # Auto-add 'integration' marker to test files in tests/integration/
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
