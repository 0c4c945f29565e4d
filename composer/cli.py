#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Document Composer CLI - Inspect serialized documents from the command line

Usage:
    doc-composer paginate report.json
    doc-composer toc report.json --markdown
    doc-composer diff v1.json v2.json --all
"""

import sys
import json
import argparse
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from config import settings, setup_logger
from composer.contracts import Document, DocumentVersion, TocConfig, load_document
from composer.errors import ContractError
from composer.layout import DocumentLayout, EstimatingMeasurer, LayoutOptions
from composer.toc import TocGenerator, generate_for_block, render_text, to_markdown, toc_blocks
from composer.versions import DiffType, compute_block_diffs, summarize_block

logger = logging.getLogger("composer.cli")

DIFF_MARKERS = {
    DiffType.ADDED: "+",
    DiffType.REMOVED: "-",
    DiffType.MODIFIED: "~",
    DiffType.UNCHANGED: " ",
}


def read_json(path: str) -> Dict[str, Any]:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def read_document(path: str) -> Document:
    """Load a serialized document, or the content of a serialized version"""
    data = read_json(path)
    if "version_number" in data and "content" in data:
        return DocumentVersion.from_dict(data).content
    result = load_document(data)
    for diagnostic in result.diagnostics:
        print(f"⚠️  {diagnostic!r}", file=sys.stderr)
    return result.document


def build_layout() -> DocumentLayout:
    return DocumentLayout(
        EstimatingMeasurer(settings.line_height, settings.chars_per_line),
        LayoutOptions.from_settings(settings),
    )


def cmd_paginate(args):
    """Print the page map of every section"""
    document = read_document(args.document)
    pagination = build_layout().paginate(document)

    if args.json:
        print(json.dumps(pagination.to_dict(), indent=2, ensure_ascii=False))
        return 0

    print(f"{document.title} - {pagination.total_pages} pages")
    for section in document.ordered_sections():
        layout = pagination.layout_for(section.id)
        first = pagination.first_pages[section.id]
        print(f"\n[{section.name}] {layout.page_count} pages (from p. {first})")
        for page_index, columns in layout.page_map().items():
            for column_index, block_ids in columns.items():
                print(f"  p. {first + page_index} col {column_index + 1}: {', '.join(block_ids) or '-'}")
        for diagnostic in layout.diagnostics:
            print(f"  ⚠️  {diagnostic!r}")
    return 0


def cmd_toc(args):
    """Print the outline of a TOC block (or a standard outline)"""
    document = read_document(args.document)
    pagination = build_layout().paginate(document)

    block_id = args.block
    if block_id is None:
        existing = toc_blocks(document)
        block_id = existing[0] if existing else None

    if block_id is not None:
        outline = generate_for_block(document, pagination, block_id)
    else:
        outline = TocGenerator(TocConfig.standard()).generate(document, pagination)

    if args.markdown:
        print(to_markdown(outline))
    else:
        pages = render_text(outline, settings.toc_lines_per_page, settings.toc_text_width)
        print("\n\f\n".join(pages))
    return 0


def cmd_diff(args):
    """Print block changes between two documents or versions"""
    old = read_document(args.old)
    new = read_document(args.new)
    diff = compute_block_diffs(old, new)

    if args.json:
        print(json.dumps(diff.to_dict(), indent=2, ensure_ascii=False))
        return 0

    stats = diff.statistics
    print(
        f"{stats.added} added, {stats.removed} removed, "
        f"{stats.modified} modified, {stats.unchanged} unchanged"
    )
    entries = diff.diffs if args.all else diff.visible()
    for entry in entries:
        line = f"{DIFF_MARKERS[entry.type]} [{entry.block.type.value}] {summarize_block(entry.block)}"
        if entry.changed_fields:
            line += f"  ({', '.join(entry.changed_fields)})"
        print(line)
    return 0


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        prog="doc-composer",
        description="Paginate, outline and compare structured documents",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--log-level', default=settings.log_level, help='Log level (default: %(default)s)')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Paginate command
    paginate_parser = subparsers.add_parser('paginate', help='Print the page map of a document')
    paginate_parser.add_argument('document', help='Serialized document (JSON)')
    paginate_parser.add_argument('--json', action='store_true', help='Print the full layout as JSON')

    # TOC command
    toc_parser = subparsers.add_parser('toc', help='Print a table of contents')
    toc_parser.add_argument('document', help='Serialized document (JSON)')
    toc_parser.add_argument('--block', help='TOC block id (default: first TOC block)')
    toc_parser.add_argument('--markdown', action='store_true', help='Print Markdown with anchors')

    # Diff command
    diff_parser = subparsers.add_parser('diff', help='Compare two documents or versions')
    diff_parser.add_argument('old', help='Older document or version (JSON)')
    diff_parser.add_argument('new', help='Newer document or version (JSON)')
    diff_parser.add_argument('--all', action='store_true', help='Include unchanged blocks')
    diff_parser.add_argument('--json', action='store_true', help='Print the diff as JSON')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logger("composer", level=args.log_level, log_file=settings.log_file, json_format=settings.log_json)

    # Route to command handlers
    commands = {
        'paginate': cmd_paginate,
        'toc': cmd_toc,
        'diff': cmd_diff,
    }

    handler = commands[args.command]
    try:
        return handler(args)
    except FileNotFoundError as e:
        print(f"❌ File not found: {e.filename}", file=sys.stderr)
        return 1
    except (ContractError, ValueError, KeyError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"❌ {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
