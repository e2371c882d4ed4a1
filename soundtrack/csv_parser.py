"""
CSV Parser for Song Mentions

Turns the hand-curated songs CSV into base SongEntry records.

Expected CSV format (header row required, always skipped):
    Song Title,Artist,Album,Year,Page,Character(s),Context
    "Heroes",David Bowie,"Heroes",1977,"24, 34","Ken, Hua",...

Parsing is best-effort: a row with an unreadable year or page, or with no
artist, still produces a record (None in the numeric field, "" for the
artist) so one bad row never sinks the batch.
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional

from soundtrack.models import SongEntry
from soundtrack.text_utils import clean_field, is_placeholder

logger = logging.getLogger(__name__)

# Title, Artist, Album, Year, Page(s), Character(s), Context
COLUMN_COUNT = 7

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


def split_csv_row(row: str, delimiter: str = ',') -> List[str]:
    """
    Split one CSV line into trimmed fields.

    A double quote toggles "inside field" mode; while inside, the delimiter
    is literal. Quote characters themselves are not kept.

    Examples:
        'a,"b, c",d' -> ['a', 'b, c', 'd']
        ' x , y ' -> ['x', 'y']
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False

    for char in row:
        if char == '"':
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append(''.join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append(''.join(current).strip())
    return fields


def parse_int(text: str) -> Optional[int]:
    """
    Parse the leading integer of a field ("1977" -> 1977, "24abc" -> 24).

    Returns None when the text has no integer prefix.
    """
    match = _LEADING_INT.match(text or '')
    if not match:
        return None
    return int(match.group(1))


def parse_first_page(page_field: str) -> Optional[int]:
    """Return the first page of a page list ("24, 34" -> 24)."""
    first = (page_field or '').split(',')[0].strip()
    return parse_int(first)


def parse_characters(character_field: str) -> List[str]:
    """Split a character list, dropping empty entries ("A, , B" -> ["A", "B"])."""
    return [c.strip() for c in (character_field or '').split(',') if c.strip()]


def row_to_entry(fields: List[str], entry_id: str) -> SongEntry:
    """
    Map split CSV fields onto a SongEntry.

    The em-dash placeholder means "album-only mention" in the title column
    and "no specific album" in the album column. The context column is read
    but not kept.
    """
    padded = list(fields) + [''] * (COLUMN_COUNT - len(fields))
    title_raw, artist_raw, album_raw, year_raw, page_raw, characters_raw = padded[:6]

    return SongEntry(
        id=entry_id,
        title=None if is_placeholder(title_raw) else clean_field(title_raw),
        artist=clean_field(artist_raw),
        album='' if is_placeholder(album_raw) else clean_field(album_raw),
        year=parse_int(year_raw),
        page=parse_first_page(page_raw),
        characters=parse_characters(characters_raw),
    )


class SongCSVParser:
    """
    Parser for the songs CSV.

    Ids are a 1-based running counter over parsed rows, so they follow the
    order of the file and ignore any numbering upstream.
    """

    def __init__(self, csv_path: str):
        """
        Initialize the parser.

        Args:
            csv_path: Path to the CSV file
        """
        self.csv_path = Path(csv_path)
        self.entries: List[SongEntry] = []
        self.stats: Dict[str, int] = {
            'raw_rows': 0,
            'parsed': 0,
            'album_only': 0,
            'malformed': 0,
        }

        if not self.csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_path}")

        logger.debug(f"SongCSVParser initialized for {self.csv_path}")

    def parse(self) -> List[SongEntry]:
        """
        Read every data row of the CSV into SongEntry records.

        Returns:
            List of entries in file order
        """
        logger.info(f"🔍 Reading {self.csv_path}...")
        # utf-8-sig drops a BOM written by spreadsheet exports
        text = self.csv_path.read_text(encoding='utf-8-sig')
        # Only "\n" ends a row; str.splitlines would also break on U+2028,
        # form feeds and other separators that turn up inside pasted text
        rows = [row.rstrip('\r') for row in text.split('\n')]
        rows = [row for row in rows if row.strip()]

        self.entries = []
        for row in rows[1:]:
            self.stats['raw_rows'] += 1
            self.entries.append(self.parse_row(row))

        logger.info(f"📊 Parsed {self.stats['parsed']} entries from {self.stats['raw_rows']} rows")
        if self.stats['malformed']:
            logger.warning(f"⚠️  {self.stats['malformed']} rows had a missing artist or an unreadable year/page")
        return self.entries

    def parse_row(self, row: str) -> SongEntry:
        """Parse one data row; problems are logged and counted, never fatal."""
        fields = split_csv_row(row)
        entry_id = str(self.stats['parsed'] + 1)
        entry = row_to_entry(fields, entry_id)

        problems = []
        if not entry.artist:
            problems.append("no artist")
        if entry.year is None or entry.page is None:
            padded = fields + [''] * (COLUMN_COUNT - len(fields))
            problems.append(f"non-numeric year/page (year={padded[3]!r}, page={padded[4]!r})")
        if problems:
            self.stats['malformed'] += 1
            logger.warning(f"Row {entry_id} has {', '.join(problems)}: {row[:80]!r}")

        self.stats['parsed'] += 1
        if entry.is_album_only:
            self.stats['album_only'] += 1
            logger.info(f"✅ Parsed: Album-only entry - {entry.artist} (page {entry.page})")
        else:
            logger.info(f'✅ Parsed: "{entry.title}" by {entry.artist} (page {entry.page})')
        return entry

    def __repr__(self) -> str:
        return f"SongCSVParser(path={self.csv_path}, parsed={self.stats['parsed']})"
