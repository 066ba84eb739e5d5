#!/usr/bin/env python3
"""
Chat Archive CLI

Browse, search and export a ChatGPT conversations.json from the terminal.
Shares all list/search/linearize logic with the desktop browser.
"""

import argparse
import json
import sys
from pathlib import Path

from archive_index import ArchiveIndex
from archive_logging import get_logger, setup_logging
from archive_model import ArchiveFormatError, ConversationRecord, find_record, load_archive
from insights import extract_insights, model_slug
from linearize import linearize
from list_view import SortKey, filter_sort, search_snippet, use_system_collation
from match_index import index_messages, iter_matches
from transcript import dump_record, dump_records, format_date, format_transcript, select_subset
from viewer_config import ViewerConfig
from virtual_window import visible_range

logger = get_logger('cli')

SORT_CHOICES = [k.value for k in SortKey]


def _get_record(records: list[ConversationRecord], conv_id: str) -> ConversationRecord:
    record = find_record(records, conv_id)
    if record is None:
        raise LookupError(f'Conversation not found: {conv_id}')
    return record


def _print_rows(rows: list[ConversationRecord], term: str, show_snippets: bool, config: ViewerConfig):
    for record in rows:
        print(f"  [{record.node_count:4d} nodes] {format_date(record.create_time):>12}  {record.title or 'Untitled Chat'}")
        print(f'             ID: {record.id}')
        if show_snippets:
            snippet = search_snippet(record, term, config.snippet_before, config.snippet_after)
            if snippet:
                print(f'             "{snippet}"')


def cmd_list(args, records: list[ConversationRecord], config: ViewerConfig) -> int:
    view = filter_sort(records, args.search, args.content, args.sort)
    shown = view[:args.limit] if args.limit else view

    print("=" * 60)
    print(f"{len(records)} total • {len(view)} shown")
    print("=" * 60)
    _print_rows(shown, args.search, bool(args.content and args.search), config)
    return 0


def cmd_window(args, records: list[ConversationRecord], config: ViewerConfig) -> int:
    view = filter_sort(records, args.search, args.content, args.sort)
    show_snippets = args.snippets or bool(args.content and args.search)
    row_height = config.row_height_for(show_snippets)
    rows = visible_range(args.scroll, args.height, row_height, len(view), config.overscan)

    print(f"Row height: {row_height}px  Total extent: {len(view) * row_height}px")
    if not rows:
        print("No rows to render.")
        return 0
    print(f"Rendering rows {rows.start}..{rows.stop - 1} of {len(view)}")
    for i in rows:
        print(f"  {i * row_height:>8}px  {view[i].title or 'Untitled Chat'}")
    return 0


def cmd_show(args, records: list[ConversationRecord], config: ViewerConfig) -> int:
    record = _get_record(records, args.id)
    print(format_transcript(record, linearize(record)), end='')
    return 0


def cmd_find(args, records: list[ConversationRecord], config: ViewerConfig) -> int:
    record = _get_record(records, args.id)
    messages = linearize(record)
    match_index = index_messages(messages, args.term)

    print(f"Matches for '{args.term}': {match_index.total_matches}")
    print(f"Offsets: {list(match_index.offsets)}")

    if args.show:
        for entry in iter_matches(messages, args.term):
            print(f"  #{entry.sequence + 1}  message {entry.message_id}  "
                  f"segment {entry.segment_index}  [{entry.start}:{entry.end}]")
    return 0


def cmd_insights(args, records: list[ConversationRecord], config: ViewerConfig) -> int:
    record = _get_record(records, args.id)
    found = extract_insights(record)

    if args.json:
        print(json.dumps([
            {'id': i.id, 'label': i.label, 'value': i.value, 'type': i.kind.value, 'timestamp': i.timestamp}
            for i in found
        ], indent=2, ensure_ascii=False))
        return 0

    print(f"Model: {model_slug(linearize(record))}")
    print(f"Session: {record.id}")
    if not found:
        print("No diagnostic metadata extracted from this capture.")
    for seq, insight in enumerate(found):
        print(f"\n--- {insight.label} (+{seq}) ---")
        print(insight.value)
    return 0


def cmd_export(args, records: list[ConversationRecord], config: ViewerConfig) -> int:
    record = _get_record(records, args.id)
    out = Path(args.output)

    if out.suffix == '.json':
        text = dump_record(record)
    else:
        text = format_transcript(record, linearize(record))
    out.write_text(text, encoding='utf-8')

    logger.info('Exported %s to %s', record.id, out)
    print(f"Exported to {out.name}")
    return 0


def cmd_export_subset(args, records: list[ConversationRecord], config: ViewerConfig) -> int:
    subset = select_subset(records, set(args.ids))
    missing = set(args.ids) - {r.id for r in subset}
    for conv_id in sorted(missing):
        print(f"Warning: conversation not found: {conv_id}", file=sys.stderr)

    out = Path(args.output)
    out.write_text(dump_records(subset), encoding='utf-8')
    print(f"Exported {len(subset)} conversations to {out.name}")
    return 0


def cmd_search(args, records: list[ConversationRecord], config: ViewerConfig) -> int:
    index = ArchiveIndex(index_dir=config.index_dir, in_memory=args.in_memory)
    try:
        msg_count = index.add_records(records)
        hits = index.search(args.query, limit=args.limit or config.search_limit)
    finally:
        index.cleanup()

    conv_ids = {h['conv_id'] for h in hits}
    print(f"Indexed {msg_count} messages. Found {len(hits)} matches in {len(conv_ids)} conversations.")
    for h in hits:
        text = h['text']
        print(f"\n[{h['title']}] ({h['role']}) score={h['score']:.2f}")
        print(f"  ID: {h['conv_id']}")
        print(f"  {text[:500]}{'...' if len(text) > 500 else ''}")
    return 0


COMMANDS = {
    'list': cmd_list,
    'window': cmd_window,
    'show': cmd_show,
    'find': cmd_find,
    'insights': cmd_insights,
    'export': cmd_export,
    'export-subset': cmd_export_subset,
    'search': cmd_search,
}


def build_parser(config: ViewerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Browse, search and export ChatGPT conversation archives',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Newest conversations whose title or content mentions "tantivy"
  python archive_cli.py list conversations.json --search tantivy --content

  # Print the current branch of a conversation as a transcript
  python archive_cli.py show conversations.json <conversation_id>

  # Count and number matches for find-in-conversation
  python archive_cli.py find conversations.json <conversation_id> "error" --show

  # Export several conversations verbatim
  python archive_cli.py export-subset conversations.json ID1 ID2 -o subset.json
        """
    )
    parser.add_argument('--log-level', default=config.log_level, help='Logging level (default: %(default)s)')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    def add(name: str, help_text: str) -> argparse.ArgumentParser:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('archive', help='Path to conversations.json')
        return sub

    def add_view_args(sub: argparse.ArgumentParser):
        sub.add_argument('--search', default='', help='Filter term')
        sub.add_argument('--content', action='store_true', help='Match message content, not just titles (slower)')
        sub.add_argument('--sort', choices=SORT_CHOICES, default=config.default_sort, help='Sort order')

    list_parser = add('list', 'List conversations')
    add_view_args(list_parser)
    list_parser.add_argument('--limit', type=int, default=0, help='Show at most N rows')

    window_parser = add('window', 'Show which list rows a viewport would render')
    add_view_args(window_parser)
    window_parser.add_argument('--scroll', type=float, default=0, help='Scroll offset in pixels')
    window_parser.add_argument('--height', type=float, default=800, help='Viewport height in pixels')
    window_parser.add_argument('--snippets', action='store_true', help='Use the taller snippet row height')

    show_parser = add('show', 'Print a conversation transcript')
    show_parser.add_argument('id', help='Conversation ID')

    find_parser = add('find', 'Find matches inside a conversation')
    find_parser.add_argument('id', help='Conversation ID')
    find_parser.add_argument('term', help='Text to find (literal, case-insensitive)')
    find_parser.add_argument('--show', action='store_true', help='List every match')

    insights_parser = add('insights', 'Show the process trace of a conversation')
    insights_parser.add_argument('id', help='Conversation ID')
    insights_parser.add_argument('--json', action='store_true', help='Print as JSON')

    export_parser = add('export', 'Export a conversation (.json = verbatim record, else transcript)')
    export_parser.add_argument('id', help='Conversation ID')
    export_parser.add_argument('-o', '--output', required=True, help='Output file')

    subset_parser = add('export-subset', 'Export several conversations verbatim as JSON')
    subset_parser.add_argument('ids', nargs='+', help='Conversation IDs')
    subset_parser.add_argument('-o', '--output', required=True, help='Output JSON file')

    search_parser = add('search', 'Ranked full-text search across the archive')
    search_parser.add_argument('query', help='Search query')
    search_parser.add_argument('--limit', type=int, default=0, help='Maximum hits')
    search_parser.add_argument('--in-memory', action='store_true', help='Keep the index in memory')

    return parser


def main(argv: list[str] | None = None) -> int:
    config = ViewerConfig.from_env()
    parser = build_parser(config)
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.log_level)
    use_system_collation()

    archive = Path(args.archive)
    if not archive.exists():
        print(f"Error: File not found: {archive}", file=sys.stderr)
        return 1

    try:
        records = load_archive(archive)
        return COMMANDS[args.command](args, records, config)
    except (ArchiveFormatError, LookupError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
