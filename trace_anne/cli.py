#!/usr/bin/env python3
"""
Trace Anne command line

Inspect and annotate the dataset named in config.yaml without the
terminal UI.

Usage:
    trace-anne list                     List records with annotation status
    trace-anne show <index>             Show a specific record
    trace-anne annotate <index> <label> Save a label into a record
    trace-anne stats                    Show annotation progress

Options common to every command:
    -c, --config PATH   Settings file (default: ./config.yaml)
    -v, --verbose       Log store reads and writes to stderr
"""

import argparse
import json
import logging
import sys

from trace_anne.annotations import annotation_progress, load_page, submit_annotation
from trace_anne.errors import InvalidIndex, TraceAnneError
from trace_anne.logging_config import configure_logging
from trace_anne.summary import get_record_summary, truncate


# ============== Commands ==============

def cmd_list(args):
    """List all records with their annotation."""
    page = load_page(args.config)
    config = page.config
    labels = config.labels

    left_title = truncate(labels.left.upper(), 30)
    right_title = truncate(labels.right.upper(), 30)
    header = f"{'IDX':<6} {left_title:<32} {right_title:<32} {'ANNOTATION'}"
    print("-" * len(header))
    print(header)
    print("-" * len(header))

    count = 0
    for idx, record in enumerate(page.records):
        summary = get_record_summary(record, idx, config, max_len=30)

        if args.unannotated and summary['annotated']:
            continue

        annotation = truncate(summary['annotation'], 30) if summary['annotated'] else '-'
        print(f"{summary['index']:<6} {summary['left']:<32} {summary['right']:<32} {annotation}")

        count += 1
        if args.limit and count >= args.limit:
            print(f"\n... (limited to {args.limit} records)")
            break

    print("-" * len(header))
    print(f"Displayed {count} records")


def cmd_show(args):
    """Show a specific record."""
    page = load_page(args.config)
    records = page.records

    if args.index < 0 or args.index >= len(records):
        raise InvalidIndex(args.index, size=len(records))

    print(f"Record {args.index}:")
    print("=" * 60)
    print(json.dumps(records[args.index], indent=2, ensure_ascii=False))


def cmd_annotate(args):
    """Save a label into one record."""
    result = submit_annotation(args.index, args.label, config_path=args.config)
    print(f"Saved {result.column}={result.label!r} for record {result.index} "
          f"({result.index + 1}/{result.total})")


def cmd_stats(args):
    """Show annotation progress."""
    page = load_page(args.config)
    config = page.config
    done, total = annotation_progress(page.records, config.annotation_column)
    percent = (done / total * 100) if total else 0.0

    print("=" * 60)
    print(f"Data file:         {config.data_path}")
    print(f"Annotation column: {config.annotation_column}")
    print(f"Records:           {total}")
    print(f"Annotated:         {done} ({percent:.1f}%)")
    print(f"Remaining:         {total - done}")
    print("=" * 60)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trace-anne",
        description="Trace Anne - annotate paired text records in a JSONL file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('-c', '--config', default=None, help='Settings file (default: ./config.yaml)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log store activity to stderr')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # List command
    list_parser = subparsers.add_parser('list', help='List records with annotation status')
    list_parser.add_argument('-n', '--limit', type=int, help='Limit number of records')
    list_parser.add_argument('--unannotated', action='store_true', help='Only show records without a label')
    list_parser.set_defaults(func=cmd_list)

    # Show command
    show_parser = subparsers.add_parser('show', help='Show a specific record')
    show_parser.add_argument('index', type=int, help='Record index (0-based)')
    show_parser.set_defaults(func=cmd_show)

    # Annotate command
    annotate_parser = subparsers.add_parser('annotate', help='Save a label into a record')
    annotate_parser.add_argument('index', help='Record index (0-based)')
    annotate_parser.add_argument('label', help='Annotation text')
    annotate_parser.set_defaults(func=cmd_annotate)

    # Stats command
    stats_parser = subparsers.add_parser('stats', help='Show annotation progress')
    stats_parser.set_defaults(func=cmd_stats)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        args.func(args)
    except TraceAnneError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
