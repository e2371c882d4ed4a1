"""
iTunes Enrichment for Song Mentions

Fills in itunesTrackId, previewUrl and albumArt on records that still lack
them. Each run spends at most `query_budget` searches, one at a time, and
leaves whatever it didn't reach for the next run.

Only EXACT album matches are committed automatically. Anything fuzzier goes
through a decision function, which is the interactive y/n prompt for the
command-line tool and can be swapped for a fixed policy in batch use.
"""

import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List

import requests
from tqdm import tqdm

from soundtrack.exceptions import APIError, ValidationError
from soundtrack.itunes_client import ITunesClient
from soundtrack.matching import album_similarity, high_res_artwork, select_best_candidate
from soundtrack.models import MatchType, SearchCandidate, SongEntry
from soundtrack.song_store import load_songs, save_songs

logger = logging.getLogger(__name__)

ConfirmFn = Callable[[SearchCandidate, str], bool]


class EnrichOutcome:
    """Result codes for a single enrich_one call."""
    ENRICHED = 'enriched'
    SKIPPED_NO_TITLE = 'skipped_no_title'
    ALREADY_ENRICHED = 'already_enriched'
    NO_RESULTS = 'no_results'
    REJECTED = 'rejected'
    ERROR = 'error'

    @classmethod
    def is_skip(cls, outcome: str) -> bool:
        """Outcomes counted as "skipped" in the run summary."""
        return outcome in (cls.NO_RESULTS, cls.REJECTED, cls.ERROR)


def needs_enrichment(song: SongEntry) -> bool:
    """A record needs enrichment if it has a title and any metadata is missing."""
    return bool(song.title) and not song.is_enriched


def describe_candidate(candidate: SearchCandidate, match_type: str, expected_album: str = '') -> str:
    """Multi-line description of a candidate for the operator."""
    lines = [
        '=' * 60,
        f"🎯 {MatchType.label(match_type)}",
        '=' * 60,
        f"Track Name: {candidate.track_name}",
        f"Artist: {candidate.artist_name}",
        f"Album: {candidate.collection_name}",
    ]
    if expected_album and match_type != MatchType.EXACT:
        lines.append(f"Album similarity: {album_similarity(expected_album, candidate.collection_name)}%")
    lines.extend([
        f"Track ID: {candidate.track_id}",
        f"Preview URL: {candidate.preview_url or '❌ Not available'}",
        f"Artwork: {candidate.artwork_url100 or '❌ Not available'}",
        f"iTunes Link: {candidate.track_view_url}",
    ])
    return '\n'.join(lines)


def prompt_confirm(candidate: SearchCandidate, match_type: str) -> bool:
    """Ask the operator on stdin; yes iff the answer is "y" or "yes"."""
    try:
        answer = input('\nUse this result? (y/n): ')
    except EOFError:
        return False
    return answer.strip().lower() in ('y', 'yes')


def exact_only(candidate: SearchCandidate, match_type: str) -> bool:
    """Batch policy: never accept a non-exact match."""
    return False


def accept_all(candidate: SearchCandidate, match_type: str) -> bool:
    """Batch policy: accept whatever the heuristic picked."""
    return True


class SongEnricher:
    """
    Sequential enrichment loop over song records.

    Args:
        client: Object with `search_songs(artist, title, limit)`
        confirm: Decision function for non-exact matches
        query_budget: Maximum searches per run
        artwork_size: Pixel size for the rewritten artwork URL
        result_limit: Results requested per search
        show_progress: Show a tqdm progress bar on stderr
    """

    def __init__(
        self,
        client: ITunesClient,
        confirm: ConfirmFn = prompt_confirm,
        query_budget: int = 15,
        artwork_size: int = 1000,
        result_limit: int = 5,
        show_progress: bool = True,
    ):
        self.client = client
        self.confirm = confirm
        self.query_budget = int(query_budget)
        self.artwork_size = int(artwork_size)
        self.result_limit = int(result_limit)
        self.show_progress = show_progress
        self.queries = 0
        self.stats: Dict[str, int] = self._empty_stats()

    @staticmethod
    def _empty_stats() -> Dict[str, int]:
        return {
            'candidates': 0,
            'enriched': 0,
            'skipped': 0,
            'errors': 0,
            'queries': 0,
            'remaining': 0,
            'budget_exhausted': 0,
        }

    def apply_candidate(self, song: SongEntry, candidate: SearchCandidate) -> None:
        """Copy playback metadata from an accepted candidate onto the song."""
        song.itunes_track_id = str(candidate.track_id)
        song.preview_url = candidate.preview_url or ''
        song.album_art = high_res_artwork(candidate.artwork_url100, self.artwork_size)

    def enrich_one(self, song: SongEntry) -> str:
        """
        Look up one song and commit the match if accepted.

        Returns:
            An EnrichOutcome code. The song is only modified on ENRICHED.

        Raises:
            ITunesAPIError: if the search fails (the query still counts)
        """
        if not song.title:
            return EnrichOutcome.SKIPPED_NO_TITLE
        if song.is_enriched:
            return EnrichOutcome.ALREADY_ENRICHED

        self.queries += 1
        candidates = self.client.search_songs(song.artist, song.title, limit=self.result_limit)

        if not candidates:
            logger.info(f"❌ No results for {song}. Skipping.")
            return EnrichOutcome.NO_RESULTS

        best, match_type = select_best_candidate(candidates, song.album)
        if best is None:
            logger.info(f"❌ No suitable match for {song}. Skipping.")
            return EnrichOutcome.NO_RESULTS

        if MatchType.needs_confirmation(match_type):
            print(describe_candidate(best, match_type, song.album))
            confirmed = self.confirm(best, match_type)
        else:
            logger.info(f"✅ Auto-confirming exact album match: '{best.collection_name}'")
            confirmed = True

        if not confirmed:
            logger.info(f"⏭️  Skipped {song} ({match_type} match on '{best.collection_name}')")
            return EnrichOutcome.REJECTED

        self.apply_candidate(song, best)
        logger.info(f"✅ Updated {song} → track {song.itunes_track_id}")
        return EnrichOutcome.ENRICHED

    def enrich_all(self, songs: List[SongEntry]) -> Dict[str, int]:
        """
        Enrich every record that needs it, until the query budget runs out.

        Records are processed in order; a failure on one record is logged
        and counted as skipped, and the loop moves on.

        Returns:
            Run statistics
        """
        self.stats = self._empty_stats()
        self.queries = 0
        pending = [song for song in songs if needs_enrichment(song)]
        self.stats['candidates'] = len(pending)

        logger.info(f"📊 Found {len(pending)} songs needing enrichment")
        if not pending:
            logger.info("✨ All songs are already enriched!")
            return self.stats

        processed = 0
        progress_bar = tqdm(pending, desc="iTunes lookup", unit="song", file=sys.stderr, disable=not self.show_progress)
        for song in progress_bar:
            if self.queries >= self.query_budget:
                self.stats['budget_exhausted'] = 1
                logger.warning(f"⚠️  Reached query limit ({self.query_budget} queries). Stopping to avoid rate limits.")
                logger.info("   Remaining songs will be processed on the next run.")
                break

            progress_bar.set_postfix_str(f"{song.artist[:30]}...", refresh=False)
            logger.debug(
                f"[{processed + 1}/{len(pending)}] {song} | expected album: "
                f"'{song.album or '(none specified)'}' | queries used: {self.queries}/{self.query_budget}"
            )
            try:
                outcome = self.enrich_one(song)
            except (APIError, ValidationError, requests.RequestException) as e:
                logger.error(f"❌ Error processing {song}: {e}")
                self.stats['errors'] += 1
                outcome = EnrichOutcome.ERROR

            processed += 1
            if outcome == EnrichOutcome.ENRICHED:
                self.stats['enriched'] += 1
            elif EnrichOutcome.is_skip(outcome):
                self.stats['skipped'] += 1

        self.stats['queries'] = self.queries
        self.stats['remaining'] = len(pending) - processed
        return self.stats

    def print_summary(self) -> None:
        print("\n" + "=" * 60)
        print("✨ Enrichment Complete!")
        print("=" * 60)
        print(f"Enriched: {self.stats['enriched']} songs")
        print(f"Skipped: {self.stats['skipped']} songs")
        if self.stats['errors']:
            print(f"Errors: {self.stats['errors']} (counted as skipped)")
        print(f"Queries used: {self.stats['queries']}/{self.query_budget}")
        if self.stats['remaining']:
            print(f"\n⚠️  {self.stats['remaining']} songs remaining. Run again to continue enrichment.")


def run_enrichment(json_path: Path, enricher: SongEnricher, make_backup: bool = False) -> Dict[str, int]:
    """
    Load songs.json, enrich it, and write it back once.

    The file is rewritten even when nothing changed, so the on-disk format
    stays canonical after every run.
    """
    songs = load_songs(json_path)
    stats = enricher.enrich_all(songs)
    save_songs(json_path, songs, make_backup=make_backup)
    return stats
