#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Document Migration

Opt-in repairs for legacy serialized documents. Loading never moves
content on its own: a section that still carries ``blocks`` outside any
flow is reported and its blocks ignored. ``migrate_flow_ownership`` is the
explicit step that rescues those blocks into the section's primary flow.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple
import copy
import logging

from composer.contracts import Document, Flow, FlowType, Section
from composer.context import EditContext

logger = logging.getLogger(__name__)

PRIMARY_FLOW_NAMES = ("Main", "Main Content")


@dataclass(frozen=True)
class MigrationResult:
    """Migrated document plus a human-readable log of what changed"""
    document: Document
    changes_made: bool
    log: Tuple[str, ...] = ()


def get_primary_flow(section: Section) -> Optional[Flow]:
    """The "Main" flow when present, else the first flow in order"""
    flows = section.ordered_flows()
    for flow in flows:
        if flow.name in PRIMARY_FLOW_NAMES:
            return flow
    return flows[0] if flows else None


def migrate_flow_ownership(
    data: Dict[str, Any],
    ctx: Optional[EditContext] = None,
) -> MigrationResult:
    """
    Move blocks attached directly to serialized sections into each
    section's primary flow, creating a "Main" flow where none exists.
    Sections without any flow also receive an empty "Main" flow.
    """
    ctx = ctx if ctx is not None else EditContext()
    data = copy.deepcopy(data)
    log: List[str] = []

    for section in data.get("sections", []):
        name = section.get("name", "")
        flows = section.setdefault("flows", [])
        orphans = section.pop("blocks", None) or []

        if orphans:
            primary = _primary_flow_dict(flows)
            if primary is None:
                primary = _new_flow_dict(flows, ctx)
                flows.append(primary)
                log.append(f'Created Main flow in section "{name}"')
            primary.setdefault("blocks", []).extend(orphans)
            log.append(f'Moved {len(orphans)} blocks to {primary["name"]} flow in section "{name}"')
        elif not flows:
            flows.append(_new_flow_dict(flows, ctx))
            log.append(f'Created default Main flow in empty section "{name}"')

    changes_made = bool(log)
    if changes_made:
        data["updated_at"] = ctx.now()
        for entry in log:
            logger.info(entry)

    return MigrationResult(
        document=Document.from_dict(data),
        changes_made=changes_made,
        log=tuple(log),
    )


def ensure_primary_flow(
    document: Document,
    ctx: Optional[EditContext] = None,
) -> MigrationResult:
    """Give every section without flows an empty "Main" flow"""
    ctx = ctx if ctx is not None else EditContext()
    log: List[str] = []
    sections = []

    for section in document.sections:
        if section.flows:
            sections.append(section)
            continue
        flow = Flow(id=ctx.new_id(), name="Main", type=FlowType.LINEAR, order=0)
        sections.append(replace(section, flows=(flow,)))
        log.append(f'Created default Main flow in empty section "{section.name}"')

    if not log:
        return MigrationResult(document=document, changes_made=False)

    for entry in log:
        logger.info(entry)
    migrated = replace(document, sections=tuple(sections), updated_at=ctx.now())
    return MigrationResult(document=migrated, changes_made=True, log=tuple(log))


def _primary_flow_dict(flows: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    ordered = sorted(flows, key=lambda f: f.get("order", 0))
    for flow in ordered:
        if flow.get("name") in PRIMARY_FLOW_NAMES:
            return flow
    return ordered[0] if ordered else None


def _new_flow_dict(flows: List[Dict[str, Any]], ctx: EditContext) -> Dict[str, Any]:
    order = max((f.get("order", 0) for f in flows), default=-1) + 1
    return {
        "id": ctx.new_id(),
        "name": "Main",
        "type": FlowType.LINEAR.value,
        "blocks": [],
        "order": order,
    }
