"""
Album Matching for iTunes Search Results

The search service ranks results by its own relevance, which regularly puts
a live version, a compilation or a deluxe reissue ahead of the album the
book actually names. These helpers pick the candidate whose collection
matches the expected album and tag how confident that pick is.
"""

import logging
import re
from typing import List, Optional, Tuple

from rapidfuzz import fuzz

from soundtrack.models import MatchType, SearchCandidate
from soundtrack.text_utils import normalize_album_name

logger = logging.getLogger(__name__)

# ".../source/100x100bb.jpg" -> size "100x100", optional "bb", extension
_ARTWORK_SIZE_RE = re.compile(r'/\d+x\d+(?:bb)?\.(?:jpe?g|png|webp)$', re.IGNORECASE)


def select_best_candidate(
    candidates: List[SearchCandidate],
    expected_album: str,
) -> Tuple[Optional[SearchCandidate], str]:
    """
    Pick the candidate that best matches the expected album.

    Tiers, in order:
        1. No expected album: first candidate, PARTIAL
        2. Collection name equals the expected album: EXACT
        3. Either name contains the other: PARTIAL
        4. Otherwise: first candidate, NONE

    Args:
        candidates: Search results in relevance order
        expected_album: Album named in the book ("" if none)

    Returns:
        (candidate, match_type); candidate is None only when the list is empty
    """
    if not candidates:
        return None, MatchType.NONE

    expected = normalize_album_name(expected_album)
    if not expected:
        return candidates[0], MatchType.PARTIAL

    for candidate in candidates:
        if normalize_album_name(candidate.collection_name) == expected:
            logger.debug(f"Exact album match: '{candidate.collection_name}'")
            return candidate, MatchType.EXACT

    for candidate in candidates:
        collection = normalize_album_name(candidate.collection_name)
        # A missing collection ("") is contained in any album, so singles land here too
        if expected in collection or collection in expected:
            logger.debug(f"Partial album match: '{candidate.collection_name}' ~ '{expected_album}'")
            return candidate, MatchType.PARTIAL

    logger.debug(f"No album match for '{expected_album}', falling back to first result")
    return candidates[0], MatchType.NONE


def album_similarity(expected_album: str, collection_name: str) -> int:
    """
    Token-set similarity (0-100) between the expected album and a collection.

    Shown to the operator next to non-exact matches; it does not affect
    which tier a candidate lands in.
    """
    expected = normalize_album_name(expected_album)
    collection = normalize_album_name(collection_name)
    if not expected or not collection:
        return 0
    return int(round(fuzz.token_set_ratio(expected, collection)))


def high_res_artwork(artwork_url: Optional[str], size: int = 1000) -> str:
    """
    Rewrite an artwork URL to its high-resolution variant.

    Examples:
        ".../100x100bb.jpg" -> ".../1000x1000bb.jpg"
        ".../60x60bb.png" -> ".../1000x1000bb.jpg"

    URLs without an embedded size are returned unchanged; a missing URL
    becomes "".
    """
    if not artwork_url:
        return ''
    return _ARTWORK_SIZE_RE.sub(f'/{size}x{size}bb.jpg', artwork_url)
