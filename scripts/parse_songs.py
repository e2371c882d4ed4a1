#!/usr/bin/env python3
"""
parse_songs.py - Build songs.json from the curated songs CSV

Reads the CSV (Song Title, Artist, Album, Year, Page, Character(s), Context),
turns every data row into a base song record and writes the records, in file
order, to songs.json. Existing iTunes metadata is not carried over: run
enrich_songs.py afterwards.

EXAMPLES:
  python scripts/parse_songs.py
  python scripts/parse_songs.py data/songs.csv -o data/songs.json --backup
"""

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is importable when run from a checkout
HERE = Path(__file__).resolve().parent.parent
if str(HERE) not in sys.path:
    sys.path.insert(0, str(HERE))

from soundtrack.config_manager import Config
from soundtrack.csv_parser import SongCSVParser
from soundtrack.exceptions import ConfigurationError
from soundtrack.song_store import save_songs


def build_parser(config: Config) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Parse the songs CSV into songs.json base records",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('input', nargs='?', default=config.songs_csv_path,
                        help=f'Input CSV file (default: {config.songs_csv_path})')
    parser.add_argument('-o', '--output', default=config.songs_json_path,
                        help=f'Output JSON file (default: {config.songs_json_path})')
    parser.add_argument('--dry-run', action='store_true', help='Parse and show stats without writing output')
    parser.add_argument('--backup', action='store_true', help='Back up the existing output file before overwriting it')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose debug logging')
    return parser


def print_statistics(csv_parser: SongCSVParser) -> None:
    stats = csv_parser.stats
    print("\n📊 Summary:")
    print(f"   Rows read:        {stats['raw_rows']}")
    print(f"   Parsed:           {stats['parsed']} entries")
    print(f"   Album-only:       {stats['album_only']}")
    if stats['malformed']:
        print(f"   ⚠️  Malformed:     {stats['malformed']}")


def main(argv=None) -> None:
    try:
        config = Config()
    except ConfigurationError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)

    args = build_parser(config).parse_args(argv)

    logging.basicConfig(level=getattr(logging, str(config.log_level).upper(), logging.INFO), format=config.log_format)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        csv_parser = SongCSVParser(args.input)
        songs = csv_parser.parse()
    except FileNotFoundError:
        logging.error(f"File not found: {args.input}")
        sys.exit(1)

    print_statistics(csv_parser)

    if args.dry_run:
        logging.info("🔍 Dry run complete - no output file written")
        return

    save_songs(Path(args.output), songs, make_backup=args.backup)
    print(f"\n✨ Successfully wrote {len(songs)} songs to {args.output}")


if __name__ == '__main__':
    main()
