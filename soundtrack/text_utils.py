"""
Text Utilities for Song Mention Parsing and Album Matching

Provides the cleaning applied to raw CSV fields and the normalization used
when comparing the album named in the book with catalog collection names.

These functions handle common variations like:
- Curly vs straight quotes ("Don’t" vs "Don't")
- Zero-width characters pasted in from e-book copies
- Repeated or stray whitespace
"""

import re
import unicodedata


# Title/album cell used in the source CSV for "not applicable"
PLACEHOLDER = '\u2014'  # em-dash


def clean_field(text: str) -> str:
    """
    Clean a raw CSV field.

    Strips surrounding whitespace, a leading byte-order mark and zero-width
    characters. Inner text is otherwise preserved as written.

    Examples:
        "  Heroes \u200b" -> "Heroes"
        "\ufefftitle" -> "title"
    """
    if not text or not isinstance(text, str):
        return ""
    result = re.sub(r'[\u200B-\u200D\uFEFF]', '', text)
    return result.strip()


def is_placeholder(text: str) -> bool:
    """True if the cleaned field is the em-dash placeholder."""
    return clean_field(text) == PLACEHOLDER


def normalize_album_name(name: str) -> str:
    """
    Normalize an album/collection name for comparison.

    Examples:
        "  Nevermind " -> "nevermind"
        "What’s Going On" -> "what's going on"
        "OK   Computer" -> "ok computer"

    Args:
        name: Album name from the CSV or an iTunes collectionName

    Returns:
        Lowercased, trimmed name with quotes and whitespace normalized
    """
    if not name:
        return ""
    # NFKC = compatibility composition (ligatures, full-width forms)
    result = unicodedata.normalize('NFKC', name)
    result = re.sub(r'[\u200B-\u200D\uFEFF]', '', result)
    result = re.sub(r'[\u2018\u2019\u201B\u0060\u00B4]', "'", result)
    result = re.sub(r'[\u201C\u201D\u201E\u201F]', '"', result)
    result = re.sub(r'\s+', ' ', result)
    return result.lower().strip()


def build_search_term(artist: str, title: str) -> str:
    """Free-text query sent to the search service ("<artist> <title>")."""
    return ' '.join(part for part in (clean_field(artist), clean_field(title)) if part)
