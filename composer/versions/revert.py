#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Whole-document revert.

Two steps, strictly in order:
1. ask the persistence provider for a ``safety`` version of the live document
2. replace the live document with a copy of the target version's content

If step 1 fails the exception propagates and nothing is replaced, so the
prior state is always recoverable.
"""

from dataclasses import dataclass, replace
from typing import Optional
import copy
import logging

from config import settings
from composer.contracts import Document, DocumentVersion, VersionType
from composer.errors import ContractValidationError
from composer.context import EditContext
from .snapshots import PersistenceProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RevertResult:
    """New live document plus the versions involved"""
    document: Document
    target: DocumentVersion
    safety_version: Optional[DocumentVersion] = None


def revert_to_version(
    document: Document,
    target: DocumentVersion,
    persistence: PersistenceProvider,
    created_by: Optional[str] = None,
    skip_safety: bool = False,
    ctx: Optional[EditContext] = None,
) -> RevertResult:
    """
    Revert ``document`` to ``target``.

    Args:
        document: Current live document
        target: Version to restore; must belong to the same document
        persistence: Provider that stores the safety version
        created_by: Author recorded on the safety version
        skip_safety: Caller policy to skip the safety snapshot
        ctx: Source of the new ``updated_at`` timestamp

    Returns:
        RevertResult; ``document`` is a deep copy of the target content
    """
    ctx = ctx if ctx is not None else EditContext()
    if target.document_id != document.id:
        raise ContractValidationError([
            f"Version {target.id} belongs to document {target.document_id}, not {document.id}"
        ])

    safety_version = None
    if skip_safety:
        logger.warning(f"Reverting {document.id} to v{target.version_number} without a safety version")
    else:
        safety_version = persistence.create_version(
            document,
            VersionType.SAFETY,
            created_by or settings.default_author,
            label=f"Safety backup - {ctx.now()}",
        )
        logger.info(f"Created safety version v{safety_version.version_number} of {document.id}")

    restored = replace(copy.deepcopy(target.content), updated_at=ctx.now())
    logger.info(f"Reverted {document.id} to v{target.version_number}")
    return RevertResult(document=restored, target=target, safety_version=safety_version)
