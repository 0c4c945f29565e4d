#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Editor Session

Holds exactly one live Document and applies mutations to it in the order
they are issued. The session owns the layout cache, keeps table-of-contents
outlines current and drives snapshot/revert through an injected
persistence provider.

Usage:
    session = EditorSession.new("Annual Report", persistence=provider)
    section = session.add_section("Body")
    flow = session.add_flow(section.id, "Main")
    session.add_block(section.id, flow.id, "heading", {"text": "Overview"})
    session.paginate().total_pages
"""

from typing import Any, Callable, Dict, Optional
import logging

from config import settings
from composer.contracts import (
    Block,
    Document,
    DocumentVersion,
    Flow,
    Section,
    TableOfContentsContent,
    VersionType,
    load_document,
)
from composer.context import EditContext
from composer.errors import ContractError
from composer.layout import (
    DocumentLayout,
    DocumentPagination,
    EstimatingMeasurer,
    LayoutOptions,
    MeasurementProvider,
)
from composer.toc import TocGenerator, TocOutline, toc_blocks
from composer.versions import (
    DocumentDiff,
    PersistenceProvider,
    RevertResult,
    compute_block_diffs,
    revert_to_version,
)
from . import operations

logger = logging.getLogger(__name__)


class EditorSession:
    """Single-editor session around one live Document"""

    def __init__(
        self,
        document: Document,
        measurer: Optional[MeasurementProvider] = None,
        persistence: Optional[PersistenceProvider] = None,
        ctx: Optional[EditContext] = None,
        options: Optional[LayoutOptions] = None,
        author: Optional[str] = None,
    ):
        self.document = document
        self.ctx = ctx if ctx is not None else EditContext()
        self.persistence = persistence
        self.author = author or settings.default_author
        self.layout = DocumentLayout(
            measurer or EstimatingMeasurer(settings.line_height, settings.chars_per_line),
            options or LayoutOptions.from_settings(settings),
        )
        self._pagination: Optional[DocumentPagination] = None
        self._paginated: Optional[Document] = None
        self._outlines: Dict[str, TocOutline] = {}
        self.refresh_toc()

    @classmethod
    def new(cls, title: str, description: str = "", **kwargs) -> 'EditorSession':
        ctx = kwargs.pop("ctx", None) or EditContext()
        document = operations.create_document(title, description, ctx=ctx)
        return cls(document, ctx=ctx, **kwargs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], **kwargs) -> 'EditorSession':
        """Open a serialized document; load warnings land in the context sink"""
        ctx = kwargs.pop("ctx", None) or EditContext()
        result = load_document(data)
        ctx.diagnostics.extend(result.diagnostics)
        return cls(result.document, ctx=ctx, **kwargs)

    # =========================================================================
    # Mutations
    # =========================================================================

    def apply(self, operation: Callable, *args, **kwargs) -> Any:
        """
        Run a model operation against the live document.

        Operations returning ``(document, created)`` yield ``created``;
        the others yield the new document.
        """
        result = operation(self.document, *args, ctx=self.ctx, **kwargs)
        if isinstance(result, tuple):
            document, created = result
        else:
            document, created = result, result
        self._replace(document)
        return created

    def add_section(self, name: str, **kwargs) -> Section:
        return self.apply(operations.add_section, name, **kwargs)

    def update_section(self, section_id: str, partial: Dict[str, Any]) -> Document:
        return self.apply(operations.update_section, section_id, partial)

    def delete_section(self, section_id: str) -> Document:
        return self.apply(operations.delete_section, section_id)

    def add_flow(self, section_id: str, name: str, **kwargs) -> Flow:
        return self.apply(operations.add_flow, section_id, name, **kwargs)

    def delete_flow(self, section_id: str, flow_id: str) -> Document:
        return self.apply(operations.delete_flow, section_id, flow_id)

    def add_block(self, section_id: str, flow_id: str, block_type, content=None, **kwargs) -> Block:
        return self.apply(operations.add_block, section_id, flow_id, block_type, content, **kwargs)

    def update_block(self, block_id: str, partial: Dict[str, Any]) -> Document:
        return self.apply(operations.update_block, block_id, partial)

    def delete_block(self, block_id: str) -> Document:
        return self.apply(operations.delete_block, block_id)

    def move_block(self, block_id: str, section_id: str, flow_id: str, position: Optional[int] = None) -> Document:
        return self.apply(operations.move_block, block_id, section_id, flow_id, position)

    def _replace(self, document: Document, auto_only: bool = True):
        """Commit ``document``; an outline refresh that raises leaves the session as it was"""
        if document is self.document:
            return
        previous, outlines = self.document, dict(self._outlines)
        self.document = document
        try:
            self._refresh_outlines(auto_only=auto_only)
        except ContractError:
            logger.warning(f"Rejected edit of {previous.id}; keeping the previous document")
            self.document, self._outlines = previous, outlines
            raise

    # =========================================================================
    # Layout and TOC
    # =========================================================================

    def paginate(self) -> DocumentPagination:
        """Pagination of the live document; unchanged sections come from cache"""
        if self._pagination is None or self._paginated is not self.document:
            self._pagination = self.layout.paginate(self.document)
            self._paginated = self.document
        return self._pagination

    def outline(self, toc_block_id: str) -> Optional[TocOutline]:
        """Last generated outline of a TOC block"""
        return self._outlines.get(toc_block_id)

    @property
    def outlines(self) -> Dict[str, TocOutline]:
        return dict(self._outlines)

    def refresh_toc(self) -> Dict[str, TocOutline]:
        """Regenerate every TOC outline, whatever its autoUpdate setting"""
        self._refresh_outlines(auto_only=False)
        return self.outlines

    def _refresh_outlines(self, auto_only: bool):
        block_ids = toc_blocks(self.document)
        for stale in [bid for bid in self._outlines if bid not in block_ids]:
            del self._outlines[stale]
        if not block_ids:
            return

        pagination = None
        for block_id in block_ids:
            location = self.document.locate(block_id)
            content: TableOfContentsContent = location.block.content
            if auto_only and not content.config.auto_update and block_id in self._outlines:
                continue
            if pagination is None:
                pagination = self.paginate()
            outline = TocGenerator(content.config).generate(
                self.document,
                pagination,
                toc_section_id=location.section_id,
                toc_block_id=block_id,
            )
            self.ctx.diagnostics.extend(outline.diagnostics)
            self._outlines[block_id] = outline

    # =========================================================================
    # Versions
    # =========================================================================

    def _require_persistence(self) -> PersistenceProvider:
        if self.persistence is None:
            raise ValueError("EditorSession has no persistence provider")
        return self.persistence

    def save(self) -> None:
        self._require_persistence().save(self.document)

    def snapshot(
        self,
        label: Optional[str] = None,
        version_type: VersionType = VersionType.MANUAL,
    ) -> DocumentVersion:
        """Store a version of the live document"""
        version = self._require_persistence().create_version(
            self.document, version_type, self.author, label=label,
        )
        logger.info(f"Snapshot v{version.version_number} of {self.document.id}")
        return version

    def revert(self, target: DocumentVersion, skip_safety: bool = False) -> RevertResult:
        """Safety-snapshot the live document, then restore ``target``"""
        result = revert_to_version(
            self.document,
            target,
            self._require_persistence(),
            created_by=self.author,
            skip_safety=skip_safety,
            ctx=self.ctx,
        )
        self._replace(result.document, auto_only=False)
        return result

    def diff_against(self, version: DocumentVersion) -> DocumentDiff:
        """Changes from ``version`` to the live document"""
        return compute_block_diffs(version.content, self.document)

    @property
    def diagnostics(self):
        return list(self.ctx.diagnostics)
