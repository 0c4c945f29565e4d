#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Error taxonomy for the composer core.

Two conditions abort an operation and propagate to the caller:

- ``NotFound``: an id does not resolve in the document tree.
- ``InvalidConfiguration``: a PageMaster (or TOC) setting yields no usable space
  or an out-of-range value.

Everything else degrades gracefully. Recoverable conditions are recorded as
``Diagnostic`` values, logged at WARNING, and handed back on the result object
so the document stays usable.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
import logging

__all__ = [
    "ContractError",
    "ContractValidationError",
    "NotFound",
    "InvalidConfiguration",
    "DiagnosticKind",
    "Diagnostic",
    "report",
]


class ContractError(Exception):
    """Base error for contract violations"""
    pass


class ContractValidationError(ContractError):
    """Raised when contract validation fails"""
    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Contract validation failed: {errors}")


class NotFound(ContractError):
    """Raised when a section, flow or block id does not resolve"""
    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier}")


class InvalidConfiguration(ContractError):
    """Raised when layout configuration yields non-positive usable space"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.details = details or {}
        super().__init__(message)


class DiagnosticKind(Enum):
    """Recoverable conditions"""
    SCHEMA_WARNING = "schema_warning"      # legacy blocks attached to a section
    OVERFLOW_WARNING = "overflow_warning"  # block taller than one column
    STALE_REFERENCE = "stale_reference"    # TOC entry without a computed layout


@dataclass(frozen=True)
class Diagnostic:
    """A recovered warning, reported to the caller instead of raised"""
    kind: DiagnosticKind
    message: str
    section_id: Optional[str] = None
    block_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "section_id": self.section_id,
            "block_id": self.block_id,
            "details": dict(self.details),
        }

    def __repr__(self):
        return f"[{self.kind.value.upper()}] {self.message}"


def report(
    logger: logging.Logger,
    sink: Optional[List[Diagnostic]],
    diagnostic: Diagnostic,
) -> Diagnostic:
    """Log a diagnostic and append it to ``sink`` when one is given"""
    logger.warning(
        diagnostic.message,
        extra={
            "diagnostic": diagnostic.kind.value,
            "section_id": diagnostic.section_id,
            "block_id": diagnostic.block_id,
        },
    )
    if sink is not None:
        sink.append(diagnostic)
    return diagnostic
