#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Document Operations

Pure mutators over the semantic document tree. Each operation returns a new
Document and rebuilds only the path from the root to the changed node;
untouched sections, flows and blocks are shared with the input.

Usage:
    ctx = EditContext()
    doc = create_document("Quarterly Report", ctx=ctx)
    doc, section = add_section(doc, "Body", ctx=ctx)
    doc, flow = add_flow(doc, section.id, "Main", ctx=ctx)
    doc, block = add_block(doc, section.id, flow.id, BlockType.HEADING, {"text": "Intro"}, ctx=ctx)

Version: 1.0.0
"""

from dataclasses import replace
from typing import Any, Dict, Iterator, Optional, Tuple, Union
import logging

from config import settings
from composer.contracts import (
    Block,
    BlockContent,
    BlockLocation,
    BlockType,
    Document,
    Flow,
    FlowType,
    LayoutIntent,
    PageMaster,
    PaginationRules,
    Section,
    content_from_dict,
    default_page_master,
)
from composer.errors import ContractValidationError, InvalidConfiguration, NotFound
from composer.layout.presets import apply_layout_preset
from composer.context import EditContext

logger = logging.getLogger(__name__)

_SECTION_KEYS = {
    "name": "name",
    "description": "description",
    "layout_intent": "layout_intent",
    "layoutIntent": "layout_intent",
    "page_master": "page_master",
    "pageMaster": "page_master",
}

_BLOCK_GROUPS = {
    "content": "content",
    "metadata": "metadata",
    "pagination_rules": "pagination_rules",
    "paginationRules": "pagination_rules",
}


# =========================================================================
# Lookup
# =========================================================================

def find_section(document: Document, section_id: str) -> Section:
    """Resolve a section id; raises NotFound"""
    section = document.get_section(section_id)
    if section is None:
        raise NotFound("section", section_id)
    return section


def find_flow(document: Document, section_id: str, flow_id: str) -> Flow:
    """Resolve a section/flow path; raises NotFound"""
    flow = find_section(document, section_id).get_flow(flow_id)
    if flow is None:
        raise NotFound("flow", flow_id)
    return flow


def find_block(document: Document, block_id: str) -> BlockLocation:
    """Locate a block anywhere in the document; raises NotFound"""
    location = document.locate(block_id)
    if location is None:
        raise NotFound("block", block_id)
    return location


def iter_blocks(document: Document) -> Iterator[BlockLocation]:
    """Section -> Flow -> Block traversal in render order"""
    return document.walk()


# =========================================================================
# Path rebuilding
# =========================================================================

def _context(ctx: Optional[EditContext]) -> EditContext:
    return ctx if ctx is not None else EditContext()


def _next_order(items) -> int:
    if not items:
        return 0
    return max(item.order for item in items) + 1


def _stable_sorted(items) -> Tuple:
    return tuple(sorted(items, key=lambda item: item.order))


def _with_section(document: Document, section: Section, ctx: EditContext) -> Document:
    sections = tuple(section if s.id == section.id else s for s in document.sections)
    return replace(document, sections=sections, updated_at=ctx.now())


def _with_flow(section: Section, flow: Flow) -> Section:
    flows = tuple(flow if f.id == flow.id else f for f in section.flows)
    return replace(section, flows=flows)


def _insert(blocks: Tuple[Block, ...], block: Block, index: Optional[int]) -> Tuple[Block, ...]:
    if index is None:
        return blocks + (block,)
    return blocks[:index] + (block,) + blocks[index:]


def _index_after(flow: Flow, after_block_id: Optional[str]) -> Optional[int]:
    if after_block_id is None:
        return None
    index = flow.block_index(after_block_id)
    if index is None:
        raise NotFound("block", after_block_id)
    return index + 1


# =========================================================================
# Document and sections
# =========================================================================

def create_document(
    title: str,
    description: str = "",
    metadata: Optional[Dict[str, Any]] = None,
    ctx: Optional[EditContext] = None,
) -> Document:
    """Create an empty document (no sections)"""
    ctx = _context(ctx)
    now = ctx.now()
    document = Document(
        id=ctx.new_id(),
        title=title,
        description=description,
        metadata=dict(metadata or {}),
        created_at=now,
        updated_at=now,
    )
    logger.debug(f"Created document {document.id}: {title!r}")
    return document


def add_section(
    document: Document,
    name: str,
    description: str = "",
    layout_intent: Union[LayoutIntent, str] = LayoutIntent.CUSTOM,
    ctx: Optional[EditContext] = None,
) -> Tuple[Document, Section]:
    """
    Append a section with the default PageMaster (or the preset's, when a
    named layout intent is given). Its order is one past the current maximum.
    """
    ctx = _context(ctx)
    intent = LayoutIntent(layout_intent)
    section = Section(
        id=ctx.new_id(),
        name=name,
        description=description,
        page_master=apply_layout_preset(intent, default_page_master(settings.default_page_size)),
        layout_intent=intent,
        flows=(),
        order=_next_order(document.sections),
    )
    updated = replace(
        document,
        sections=_stable_sorted(document.sections + (section,)),
        updated_at=ctx.now(),
    )
    logger.debug(f"Added section {section.id} ({name!r}) at order {section.order}")
    return updated, section


def update_section(
    document: Document,
    section_id: str,
    partial: Dict[str, Any],
    ctx: Optional[EditContext] = None,
) -> Document:
    """
    Merge ``partial`` into a section.

    Recognized keys: ``name``, ``description``, ``layout_intent`` and
    ``page_master`` (a PageMaster or a partial mapping; margins merge key by
    key). A named layout intent replaces the PageMaster with its preset,
    ``custom`` keeps it. Editing the PageMaster under a named intent switches
    the section to ``custom``.
    """
    ctx = _context(ctx)
    section = find_section(document, section_id)

    changes: Dict[str, Any] = {}
    unknown = []
    for key, value in partial.items():
        if key in _SECTION_KEYS:
            changes[_SECTION_KEYS[key]] = value
        else:
            unknown.append(key)
    if unknown:
        raise ContractValidationError([f"Section has no field '{key}'" for key in unknown])

    intent = section.layout_intent
    page_master = section.page_master

    if "layout_intent" in changes:
        intent = LayoutIntent(changes["layout_intent"])
        page_master = apply_layout_preset(intent, page_master)

    if "page_master" in changes:
        edit = changes["page_master"]
        if isinstance(edit, PageMaster):
            edited = edit
        else:
            try:
                edited = page_master.merge(edit)
            except KeyError as e:
                raise ContractValidationError([f"PageMaster has no field {e}"]) from e
            except ValueError as e:
                raise ContractValidationError([f"Invalid PageMaster value: {e}"]) from e
        if edited != page_master and intent != LayoutIntent.CUSTOM:
            logger.info(
                f"Section {section_id}: PageMaster edited under '{intent.value}', "
                f"switching layout intent to custom"
            )
            intent = LayoutIntent.CUSTOM
        page_master = edited

    if not page_master.columns_in_range():
        raise InvalidConfiguration(
            f"Section {section_id}: columns must be between 1 and 3, got {page_master.columns}",
            {"section_id": section_id, "columns": page_master.columns},
        )

    updated = replace(
        section,
        name=changes.get("name", section.name),
        description=changes.get("description", section.description),
        layout_intent=intent,
        page_master=page_master,
    )
    if updated == section:
        return document
    return _with_section(document, updated, ctx)


def delete_section(
    document: Document,
    section_id: str,
    ctx: Optional[EditContext] = None,
) -> Document:
    """Remove a section together with its flows and blocks"""
    ctx = _context(ctx)
    find_section(document, section_id)
    sections = tuple(s for s in document.sections if s.id != section_id)
    logger.debug(f"Deleted section {section_id}")
    return replace(document, sections=sections, updated_at=ctx.now())


# =========================================================================
# Flows
# =========================================================================

def add_flow(
    document: Document,
    section_id: str,
    name: str,
    flow_type: Union[FlowType, str] = FlowType.LINEAR,
    ctx: Optional[EditContext] = None,
) -> Tuple[Document, Flow]:
    """Append an empty flow to a section"""
    ctx = _context(ctx)
    section = find_section(document, section_id)
    flow = Flow(
        id=ctx.new_id(),
        name=name,
        type=FlowType(flow_type),
        blocks=(),
        order=_next_order(section.flows),
    )
    section = replace(section, flows=_stable_sorted(section.flows + (flow,)))
    logger.debug(f"Added flow {flow.id} ({name!r}) to section {section_id}")
    return _with_section(document, section, ctx), flow


def delete_flow(
    document: Document,
    section_id: str,
    flow_id: str,
    ctx: Optional[EditContext] = None,
) -> Document:
    """Remove a flow and the blocks it owns"""
    ctx = _context(ctx)
    find_flow(document, section_id, flow_id)
    section = find_section(document, section_id)
    section = replace(section, flows=tuple(f for f in section.flows if f.id != flow_id))
    logger.debug(f"Deleted flow {flow_id} from section {section_id}")
    return _with_section(document, section, ctx)


# =========================================================================
# Blocks
# =========================================================================

def add_block(
    document: Document,
    section_id: str,
    flow_id: str,
    block_type: Union[BlockType, str],
    content: Any = None,
    *,
    metadata: Optional[Dict[str, Any]] = None,
    pagination_rules: Union[PaginationRules, Dict[str, Any], None] = None,
    after_block_id: Optional[str] = None,
    ctx: Optional[EditContext] = None,
) -> Tuple[Document, Block]:
    """
    Insert a new block into a flow.

    The block is appended, or inserted right after ``after_block_id``.
    Missing content defaults to the empty variant for the type.
    """
    ctx = _context(ctx)
    section = find_section(document, section_id)
    flow = find_flow(document, section_id, flow_id)
    index = _index_after(flow, after_block_id)

    if isinstance(pagination_rules, dict):
        pagination_rules = PaginationRules().merge(pagination_rules)

    block_type = BlockType(block_type)
    block = Block(
        id=ctx.new_id(),
        type=block_type,
        content=content_from_dict(block_type, content),
        metadata=dict(metadata or {}),
        pagination_rules=pagination_rules or PaginationRules(),
    )

    flow = replace(flow, blocks=_insert(flow.blocks, block, index))
    logger.debug(f"Added {block_type.value} block {block.id} to flow {flow_id}")
    return _with_section(document, _with_flow(section, flow), ctx), block


def update_block(
    document: Document,
    block_id: str,
    partial: Dict[str, Any],
    ctx: Optional[EditContext] = None,
) -> Document:
    """
    Shallow-merge ``partial`` into a block, group by group.

    ``partial`` maps ``content``, ``metadata`` and ``pagination_rules`` to
    partial mappings. A content group may also be a whole content variant of
    the block's type, which replaces the content.
    """
    ctx = _context(ctx)
    location = find_block(document, block_id)
    block = location.block

    unknown = [key for key in partial if key not in _BLOCK_GROUPS]
    if unknown:
        raise ContractValidationError([f"Block has no field group '{key}'" for key in unknown])

    changes: Dict[str, Any] = {}
    for key, value in partial.items():
        group = _BLOCK_GROUPS[key]
        if group == "content":
            if isinstance(value, BlockContent):
                changes["content"] = content_from_dict(block.type, value)
            else:
                changes["content"] = block.content.merge(value)
        elif group == "metadata":
            metadata = dict(block.metadata)
            metadata.update(value)
            changes["metadata"] = metadata
        else:
            if isinstance(value, PaginationRules):
                changes["pagination_rules"] = value
            else:
                changes["pagination_rules"] = block.pagination_rules.merge(value)

    updated = replace(block, **changes)
    if updated == block:
        return document

    section = find_section(document, location.section_id)
    flow = section.get_flow(location.flow_id)
    blocks = tuple(updated if b.id == block_id else b for b in flow.blocks)
    flow = replace(flow, blocks=blocks)
    return _with_section(document, _with_flow(section, flow), ctx)


def delete_block(
    document: Document,
    block_id: str,
    ctx: Optional[EditContext] = None,
) -> Document:
    """Remove a block from its owning flow"""
    ctx = _context(ctx)
    location = find_block(document, block_id)
    section = find_section(document, location.section_id)
    flow = section.get_flow(location.flow_id)
    flow = replace(flow, blocks=tuple(b for b in flow.blocks if b.id != block_id))
    logger.debug(f"Deleted block {block_id} from flow {flow.id}")
    return _with_section(document, _with_flow(section, flow), ctx)


def move_block(
    document: Document,
    block_id: str,
    section_id: str,
    flow_id: str,
    position: Optional[int] = None,
    ctx: Optional[EditContext] = None,
) -> Document:
    """
    Move a block to ``position`` in another (or the same) flow, keeping its
    id. ``position`` indexes the target flow after removal; None appends.
    """
    ctx = _context(ctx)
    location = find_block(document, block_id)
    find_flow(document, section_id, flow_id)

    document = delete_block(document, block_id, ctx=ctx)
    section = find_section(document, section_id)
    flow = section.get_flow(flow_id)
    if position is not None:
        position = max(0, min(position, len(flow.blocks)))
    flow = replace(flow, blocks=_insert(flow.blocks, location.block, position))
    logger.debug(f"Moved block {block_id} from flow {location.flow_id} to {flow_id}")
    return _with_section(document, _with_flow(section, flow), ctx)
