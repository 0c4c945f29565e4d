#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Document Version Contract

An immutable, timestamped full copy of a Document. Versions are consumed
only by whole-document revert and by comparison, never by partial merge.

Version: 1.0.0
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum

from .base import BaseContract, utc_now_iso
from .document import Document


class VersionType(Enum):
    """Why a version was taken"""
    MANUAL = "manual"    # explicit user snapshot
    SAFETY = "safety"    # taken automatically right before a revert
    AUTO = "auto"        # autosave collaborator


@dataclass(frozen=True)
class DocumentVersion(BaseContract):
    """Snapshot of a document at a point in time"""
    id: str
    document_id: str
    version_number: int
    title: str
    content: Document
    version_type: VersionType = VersionType.MANUAL
    created_by: str = ""
    created_at: str = field(default_factory=utc_now_iso)
    label: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "document_id": self.document_id,
            "version_number": self.version_number,
            "title": self.title,
            "label": self.label,
            "content": self.content.to_dict(),
            "version_type": self.version_type.value,
            "created_by": self.created_by,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DocumentVersion':
        content = Document.from_dict(data["content"])
        return cls(
            id=data["id"],
            document_id=data.get("document_id", content.id),
            version_number=data["version_number"],
            title=data.get("title", content.title),
            content=content,
            version_type=VersionType(data.get("version_type", VersionType.MANUAL.value)),
            created_by=data.get("created_by", ""),
            created_at=data.get("created_at", ""),
            label=data.get("label"),
        )

    def validate(self) -> List[str]:
        errors = []
        if self.version_number < 1:
            errors.append(f"version_number must be positive, got {self.version_number}")
        if self.document_id != self.content.id:
            errors.append(
                f"document_id '{self.document_id}' does not match content id '{self.content.id}'"
            )
        errors.extend(f"content: {e}" for e in self.content.validate())
        return errors

    def __repr__(self) -> str:
        return f"<DocumentVersion v{self.version_number} ({self.version_type.value}) of {self.document_id}>"
