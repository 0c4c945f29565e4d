#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Base Contract Classes

Shared helpers for the serialized document contracts: canonical JSON,
checksums and the metadata envelope written around a payload.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List
from datetime import datetime, timezone
import json
import hashlib

from config.constants import CONTRACT_VERSION, CHECKSUM_LENGTH
from composer.errors import ContractError, ContractValidationError


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string"""
    return datetime.now(timezone.utc).isoformat()


def canonical_json(data: Any) -> str:
    """Stable JSON text used for checksums and byte-stable output"""
    return json.dumps(data, sort_keys=True, ensure_ascii=False, separators=(",", ":"))


def calculate_checksum(data: Dict[str, Any]) -> str:
    """Checksum of a serialized contract payload"""
    return hashlib.sha256(canonical_json(data).encode("utf-8")).hexdigest()[:CHECKSUM_LENGTH]


@dataclass(frozen=True)
class ContractMetadata:
    """Envelope metadata written alongside a serialized contract"""
    version: str = CONTRACT_VERSION
    created_at: str = field(default_factory=utc_now_iso)
    checksum: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "created_at": self.created_at,
            "checksum": self.checksum,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ContractMetadata':
        return cls(
            version=data.get("version", CONTRACT_VERSION),
            created_at=data.get("created_at", ""),
            checksum=data.get("checksum", ""),
        )


class BaseContract(ABC):
    """
    Top-level serialized contract (Document, DocumentVersion).

    Subclasses provide ``to_dict``/``from_dict`` using the camelCase wire
    names and ``validate`` returning every problem found at once. JSON text,
    checksums and the metadata envelope are derived from ``to_dict``.
    """

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        pass

    @classmethod
    @abstractmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BaseContract':
        pass

    @abstractmethod
    def validate(self) -> List[str]:
        """Problems found in the contract; empty when it is consistent"""
        pass

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> 'BaseContract':
        return cls.from_dict(json.loads(text))

    def checksum(self) -> str:
        return calculate_checksum(self.to_dict())

    def envelope(self) -> Dict[str, Any]:
        """Payload wrapped with contract version and checksum"""
        payload = self.to_dict()
        meta = ContractMetadata(checksum=calculate_checksum(payload))
        return {"metadata": meta.to_dict(), "payload": payload}

    def is_valid(self) -> bool:
        return not self.validate()

    def assert_valid(self) -> None:
        errors = self.validate()
        if errors:
            raise ContractValidationError(errors)
