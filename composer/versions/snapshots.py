#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Version Snapshots

DocumentVersions are immutable deep copies of a Document. Storing them is
the job of a PersistenceProvider supplied by the caller; the core only
builds snapshots and asks the provider to keep them.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
import copy
import logging

from composer.contracts import Document, DocumentVersion, VersionType
from composer.context import EditContext

logger = logging.getLogger(__name__)


class PersistenceProvider(ABC):
    """Storage collaborator for documents and their versions"""

    @abstractmethod
    def load(self, document_id: str) -> Document:
        """Load the live document; raises NotFound when unknown"""
        pass

    @abstractmethod
    def save(self, document: Document) -> None:
        pass

    @abstractmethod
    def list_versions(self, document_id: str) -> List[DocumentVersion]:
        """Versions of a document, newest first"""
        pass

    @abstractmethod
    def create_version(
        self,
        document: Document,
        version_type: VersionType,
        created_by: str,
        label: Optional[str] = None,
    ) -> DocumentVersion:
        """Snapshot ``document`` under the next version number and store it"""
        pass


def take_snapshot(
    document: Document,
    version_number: int,
    version_type: VersionType = VersionType.MANUAL,
    created_by: str = "",
    label: Optional[str] = None,
    ctx: Optional[EditContext] = None,
) -> DocumentVersion:
    """Build an immutable version holding a deep copy of ``document``"""
    ctx = ctx if ctx is not None else EditContext()
    version = DocumentVersion(
        id=ctx.new_id(),
        document_id=document.id,
        version_number=version_number,
        title=document.title,
        content=copy.deepcopy(document),
        version_type=VersionType(version_type),
        created_by=created_by,
        created_at=ctx.now(),
        label=label,
    )
    version.assert_valid()
    logger.debug(f"Snapshot {version!r}")
    return version


def next_version_number(versions: Iterable[DocumentVersion]) -> int:
    """One past the highest existing version number (1 for none)"""
    return max((v.version_number for v in versions), default=0) + 1
