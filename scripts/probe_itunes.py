#!/usr/bin/env python3
"""
probe_itunes.py - Show what the iTunes Search API returns for one song

Runs the same search the enrichment uses for the song at INDEX (0-based,
in songs.json order) and prints the album match plus every other result.
Nothing is written.

EXAMPLES:
  python scripts/probe_itunes.py 0
  python scripts/probe_itunes.py 12 --songs data/songs.json
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Ensure project root is importable when run from a checkout
HERE = Path(__file__).resolve().parent.parent
if str(HERE) not in sys.path:
    sys.path.insert(0, str(HERE))

from soundtrack.config_manager import Config
from soundtrack.exceptions import ConfigurationError, DataError, ITunesAPIError
from soundtrack.itunes_client import ITunesClient
from soundtrack.matching import album_similarity, select_best_candidate
from soundtrack.models import MatchType, SearchCandidate, SongEntry
from soundtrack.song_store import load_songs

USAGE = "Usage: python scripts/probe_itunes.py <song-index>"


def build_parser(config: Config) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Probe the iTunes Search API for one song in songs.json",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('index', nargs='?', help='0-based index of the song in songs.json')
    parser.add_argument('--songs', default=config.songs_json_path,
                        help=f'songs.json to read (default: {config.songs_json_path})')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose debug logging')
    return parser


def resolve_index(raw: Optional[str], count: int) -> Optional[int]:
    """Return the index if it is an integer within [0, count), else None."""
    try:
        index = int(raw)
    except (TypeError, ValueError):
        return None
    if 0 <= index < count:
        return index
    return None


def print_usage_error(songs: List[SongEntry]) -> None:
    upper = f"0-{len(songs) - 1}" if songs else "none available"
    print(f"\n❌ Error: Please provide a valid song index ({upper})", file=sys.stderr)
    print(f"{USAGE}\n", file=sys.stderr)
    if songs:
        print("Available songs:", file=sys.stderr)
        for i, song in enumerate(songs):
            print(f"  {i}: {song}", file=sys.stderr)
    print("", file=sys.stderr)


def display_candidate(candidate: SearchCandidate, expected_album: str) -> None:
    print(f"Track Name: {candidate.track_name}")
    print(f"Artist: {candidate.artist_name}")
    print(f"Album: {candidate.collection_name} (similarity {album_similarity(expected_album, candidate.collection_name)}%)")
    print(f"Track ID: {candidate.track_id}")
    print(f"Preview URL: {candidate.preview_url or '❌ Not available'}")
    print(f"Artwork (100px): {candidate.artwork_url100 or '❌ Not available'}")
    print(f"iTunes Link: {candidate.track_view_url}")
    print("")


def display_results(candidates: List[SearchCandidate], best: Optional[SearchCandidate],
                    match_type: str, expected_album: str) -> None:
    if not candidates:
        print("❌ No results found\n")
        return

    print(f"✅ Found {len(candidates)} results\n")
    if best is not None:
        print(f"🎯 BEST MATCH ({MatchType.label(match_type)}):")
        print("=" * 60)
        display_candidate(best, expected_album)
        print("Other results:")
        print("-" * 60)

    for i, candidate in enumerate(candidates, 1):
        if best is not None and candidate.track_id == best.track_id:
            continue
        print(f"--- Result {i} ---")
        display_candidate(candidate, expected_album)


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
        songs = load_songs(Path(args.songs))
    except (FileNotFoundError, DataError) as e:
        logging.error(f"❌ Could not read {args.songs}: {e}")
        sys.exit(1)

    index = resolve_index(args.index, len(songs))
    if index is None:
        print_usage_error(songs)
        sys.exit(1)

    song = songs[index]
    print("\n" + "=" * 60)
    print(f"Testing song {index}: {song}")
    print(f'Expected album: "{song.album}"')
    print("=" * 60)

    if not song.title:
        print("\n⚠️  Album-only entry: enrichment never searches for it\n")
        return

    client = ITunesClient(
        delay=config.query_delay,
        user_agent=config.user_agent,
        timeout=config.itunes_timeout,
        base_url=config.itunes_search_url,
        country=config.itunes_country,
    )
    try:
        candidates = client.search_songs(song.artist, song.title, limit=config.itunes_result_limit)
    except ITunesAPIError as e:
        logging.error(f"❌ Error: {e}")
        sys.exit(1)

    best, match_type = select_best_candidate(candidates, song.album)
    if best is not None and match_type == MatchType.EXACT:
        print(f'\n✨ Found album match: "{best.collection_name}"\n')
    elif candidates:
        print(f'\n⚠️  No exact album match found for "{song.album}"\n')

    display_results(candidates, best, match_type, song.album)


if __name__ == '__main__':
    main()
