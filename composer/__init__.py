#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Document Composer core.

Packages:
- composer.contracts: serialized document model
- composer.model: pure edit operations, migration, editor session
- composer.layout: pagination engine
- composer.toc: table-of-contents outlines
- composer.versions: snapshots, diffs, revert
"""

from .errors import (
    ContractError,
    ContractValidationError,
    Diagnostic,
    DiagnosticKind,
    InvalidConfiguration,
    NotFound,
)

__all__ = [
    "ContractError",
    "ContractValidationError",
    "Diagnostic",
    "DiagnosticKind",
    "InvalidConfiguration",
    "NotFound",
]

__version__ = "1.0.0"
