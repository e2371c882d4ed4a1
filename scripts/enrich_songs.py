#!/usr/bin/env python3
"""
enrich_songs.py - Fill in iTunes metadata on songs.json

Looks up every titled song that is missing itunesTrackId, previewUrl or
albumArt. Exact album matches are saved automatically; partial and
no-album matches are shown and need a y/n answer (or --exact-only to skip
them without asking).

A run stops after the query budget (default 15 searches). Songs it did not
reach are left for the next run. songs.json is rewritten once at the end.

EXAMPLES:
  python scripts/enrich_songs.py
  python scripts/enrich_songs.py data/songs.json --budget 30 --exact-only
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
from soundtrack.enrichment import SongEnricher, exact_only, prompt_confirm, run_enrichment
from soundtrack.exceptions import ConfigurationError, DataError
from soundtrack.itunes_client import ITunesClient


def build_parser(config: Config) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Enrich songs.json with iTunes track ids, previews and artwork",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('songs', nargs='?', default=config.songs_json_path,
                        help=f'songs.json to enrich in place (default: {config.songs_json_path})')
    parser.add_argument('--budget', type=int, default=config.query_budget,
                        help=f'Maximum searches this run (default: {config.query_budget})')
    parser.add_argument('--delay', type=float, default=config.query_delay,
                        help=f'Seconds between searches (default: {config.query_delay})')
    parser.add_argument('--timeout', type=float, default=config.itunes_timeout,
                        help=f'Search request timeout in seconds (default: {config.itunes_timeout})')
    parser.add_argument('--exact-only', action='store_true',
                        help='Never prompt; only save exact album matches')
    parser.add_argument('--backup', action='store_true', help='Back up songs.json before rewriting it')
    parser.add_argument('--no-progress', action='store_true', help='Hide the progress bar')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose debug logging')
    return parser


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

    config.query_budget = args.budget
    config.query_delay = args.delay
    config.itunes_timeout = args.timeout
    try:
        config._validate()
    except ConfigurationError as e:
        logging.error(f"❌ {e}")
        sys.exit(1)

    songs_path = Path(args.songs)
    if not songs_path.exists():
        logging.error(f"File not found: {songs_path} (run parse_songs.py first)")
        sys.exit(1)

    client = ITunesClient(
        delay=config.query_delay,
        user_agent=config.user_agent,
        timeout=config.itunes_timeout,
        base_url=config.itunes_search_url,
        country=config.itunes_country,
    )
    enricher = SongEnricher(
        client,
        confirm=exact_only if args.exact_only else prompt_confirm,
        query_budget=config.query_budget,
        artwork_size=config.artwork_size,
        result_limit=config.itunes_result_limit,
        show_progress=not args.no_progress,
    )

    logging.info(f"🔍 Reading {songs_path}...")
    logging.info(f"   Rate limit: {config.query_delay:.1f}s between requests, budget {config.query_budget} queries")
    try:
        run_enrichment(songs_path, enricher, make_backup=args.backup)
    except DataError as e:
        logging.error(f"❌ Could not read {songs_path}: {e}")
        sys.exit(1)

    enricher.print_summary()
    print(f"\n💾 Updated {songs_path}")


if __name__ == '__main__':
    main()
