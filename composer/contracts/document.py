#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Semantic Document Contract

Content hierarchy: Document -> Section -> Flow -> Block.

This is the persisted-state contract: ``to_dict`` produces the serialized
shape a storage collaborator round-trips, ``from_dict`` reads it back.
All values are frozen; ordered collections are tuples so untouched
subtrees can be shared between document revisions.

Version: 1.0.0
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple
from enum import Enum
import logging

from config.constants import HEADING_LEVELS
from composer.errors import ContractValidationError, Diagnostic, DiagnosticKind, report
from .base import BaseContract, utc_now_iso
from .content import BlockContent, BlockType, content_from_dict
from .page_master import LayoutIntent, PageMaster

logger = logging.getLogger(__name__)


class FlowType(Enum):
    """Kinds of content stream"""
    LINEAR = "linear"
    GRID = "grid"
    BRANCHING = "branching"


@dataclass(frozen=True)
class PaginationRules:
    """Break rules evaluated by the layout engine"""
    keep_with_next: bool = False
    break_before: bool = False
    break_after: bool = False
    break_avoid: bool = False

    def merge(self, partial: Dict[str, Any]) -> 'PaginationRules':
        merged = self.to_dict()
        unknown = []
        for key, value in partial.items():
            key = _RULE_KEYS.get(key, key)
            if key not in merged:
                unknown.append(key)
                continue
            merged[key] = bool(value)
        if unknown:
            raise ContractValidationError([f"Unknown pagination rule '{key}'" for key in unknown])
        return PaginationRules.from_dict(merged)

    def to_dict(self) -> Dict[str, bool]:
        return {
            "keepWithNext": self.keep_with_next,
            "breakBefore": self.break_before,
            "breakAfter": self.break_after,
            "breakAvoid": self.break_avoid,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PaginationRules':
        return cls(
            keep_with_next=data.get("keepWithNext", False),
            break_before=data.get("breakBefore", False),
            break_after=data.get("breakAfter", False),
            break_avoid=data.get("breakAvoid", False),
        )


_RULE_KEYS = {
    "keep_with_next": "keepWithNext",
    "break_before": "breakBefore",
    "break_after": "breakAfter",
    "break_avoid": "breakAvoid",
}


@dataclass(frozen=True)
class Block:
    """A typed content block; ``id`` is stable across edits"""
    id: str
    type: BlockType
    content: BlockContent
    metadata: Dict[str, Any] = field(default_factory=dict)
    pagination_rules: PaginationRules = field(default_factory=PaginationRules)

    def __post_init__(self):
        # content must be the variant owned by ``type``; dicts are converted
        object.__setattr__(self, "content", content_from_dict(self.type, self.content))

    @property
    def heading_level(self) -> Optional[int]:
        """Heading level 1-6 for heading blocks, None otherwise"""
        if self.type != BlockType.HEADING:
            return None
        try:
            level = int(self.metadata.get("level", 1))
        except (TypeError, ValueError):
            return None
        if 1 <= level <= HEADING_LEVELS:
            return level
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "content": self.content.to_dict(),
            "metadata": dict(self.metadata),
            "paginationRules": self.pagination_rules.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Block':
        block_type = BlockType(data["type"])
        return cls(
            id=data["id"],
            type=block_type,
            content=content_from_dict(block_type, data.get("content")),
            metadata=dict(data.get("metadata") or {}),
            pagination_rules=PaginationRules.from_dict(data.get("paginationRules") or {}),
        )


@dataclass(frozen=True)
class Flow:
    """An ordered, independently addressable stream of blocks"""
    id: str
    name: str
    type: FlowType = FlowType.LINEAR
    blocks: Tuple[Block, ...] = ()
    order: int = 0

    def block_index(self, block_id: str) -> Optional[int]:
        for i, block in enumerate(self.blocks):
            if block.id == block_id:
                return i
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "blocks": [b.to_dict() for b in self.blocks],
            "order": self.order,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Flow':
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            type=FlowType(data.get("type", FlowType.LINEAR.value)),
            blocks=tuple(Block.from_dict(b) for b in data.get("blocks", [])),
            order=data.get("order", 0),
        )


@dataclass(frozen=True)
class Section:
    """
    A paginated part of a document.

    A section never owns blocks directly: content is reachable only
    through its flows.
    """
    id: str
    name: str
    description: str = ""
    page_master: PageMaster = field(default_factory=PageMaster)
    layout_intent: LayoutIntent = LayoutIntent.CUSTOM
    flows: Tuple[Flow, ...] = ()
    order: int = 0

    def ordered_flows(self) -> List[Flow]:
        """Flows sorted by ``order``; ties keep insertion order"""
        return sorted(self.flows, key=lambda f: f.order)

    def get_flow(self, flow_id: str) -> Optional[Flow]:
        for flow in self.flows:
            if flow.id == flow_id:
                return flow
        return None

    def iter_blocks(self) -> Iterator[Tuple[Block, Flow]]:
        for flow in self.ordered_flows():
            for block in flow.blocks:
                yield block, flow

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "pageMaster": self.page_master.to_dict(),
            "layoutIntent": self.layout_intent.value,
            "flows": [f.to_dict() for f in self.flows],
            "order": self.order,
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        diagnostics: Optional[List[Diagnostic]] = None,
    ) -> 'Section':
        legacy_blocks = data.get("blocks")
        if legacy_blocks:
            report(logger, diagnostics, Diagnostic(
                kind=DiagnosticKind.SCHEMA_WARNING,
                message=(
                    f"Section '{data.get('name', '')}' carries {len(legacy_blocks)} block(s) "
                    f"outside any flow; ignored"
                ),
                section_id=data.get("id"),
                details={"block_ids": [b.get("id") for b in legacy_blocks if isinstance(b, dict)]},
            ))

        flows = sorted(
            (Flow.from_dict(f) for f in data.get("flows", [])),
            key=lambda f: f.order,
        )
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            description=data.get("description", ""),
            page_master=PageMaster.from_dict(data.get("pageMaster") or {}),
            layout_intent=LayoutIntent(data.get("layoutIntent", LayoutIntent.CUSTOM.value)),
            flows=tuple(flows),
            order=data.get("order", 0),
        )


@dataclass(frozen=True)
class BlockLocation:
    """A block together with the ids of its owning section and flow"""
    block: Block
    section_id: str
    flow_id: str


@dataclass(frozen=True)
class Document(BaseContract):
    """Root of the semantic document tree"""
    id: str
    title: str
    description: str = ""
    sections: Tuple[Section, ...] = ()
    metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: str = field(default_factory=utc_now_iso)
    updated_at: str = field(default_factory=utc_now_iso)

    def ordered_sections(self) -> List[Section]:
        """Sections sorted by ``order``; ties keep insertion order"""
        return sorted(self.sections, key=lambda s: s.order)

    def get_section(self, section_id: str) -> Optional[Section]:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

    def walk(self) -> Iterator[BlockLocation]:
        """Section -> Flow -> Block traversal in render order"""
        for section in self.ordered_sections():
            for block, flow in section.iter_blocks():
                yield BlockLocation(block=block, section_id=section.id, flow_id=flow.id)

    def locate(self, block_id: str) -> Optional[BlockLocation]:
        for location in self.walk():
            if location.block.id == block_id:
                return location
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "sections": [s.to_dict() for s in self.sections],
            "metadata": dict(self.metadata),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        diagnostics: Optional[List[Diagnostic]] = None,
    ) -> 'Document':
        sections = sorted(
            (Section.from_dict(s, diagnostics) for s in data.get("sections", [])),
            key=lambda s: s.order,
        )
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            description=data.get("description", ""),
            sections=tuple(sections),
            metadata=dict(data.get("metadata") or {}),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )

    def validate(self) -> List[str]:
        """Structural checks: unique ids, unique section order, column range"""
        errors = []

        seen_orders = set()
        seen_sections = set()
        for section in self.sections:
            if section.id in seen_sections:
                errors.append(f"section id '{section.id}' is duplicate")
            seen_sections.add(section.id)
            if section.order in seen_orders:
                errors.append(f"section order {section.order} is duplicate")
            seen_orders.add(section.order)
            if not section.page_master.columns_in_range():
                errors.append(f"section '{section.id}' has {section.page_master.columns} columns")

        seen_flows = set()
        seen_blocks = set()
        for section in self.sections:
            for flow in section.flows:
                if flow.id in seen_flows:
                    errors.append(f"flow id '{flow.id}' is duplicate")
                seen_flows.add(flow.id)
                for block in flow.blocks:
                    if block.id in seen_blocks:
                        errors.append(f"block id '{block.id}' is duplicate")
                    seen_blocks.add(block.id)

        return errors

    def count_by_type(self) -> Dict[str, int]:
        """Count blocks by type"""
        counts = {}
        for location in self.walk():
            type_name = location.block.type.value
            counts[type_name] = counts.get(type_name, 0) + 1
        return counts


@dataclass(frozen=True)
class LoadResult:
    """A deserialized document plus the warnings raised while reading it"""
    document: Document
    diagnostics: Tuple[Diagnostic, ...] = ()


def load_document(data: Dict[str, Any]) -> LoadResult:
    """Deserialize a document, collecting recoverable schema warnings"""
    diagnostics: List[Diagnostic] = []
    document = Document.from_dict(data, diagnostics)
    return LoadResult(document=document, diagnostics=tuple(diagnostics))
