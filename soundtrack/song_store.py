"""Read/write helpers for songs.json and its backups.

songs.json is an ordered array of song records. It is read wholesale and
written wholesale; record order is the timeline order and is never changed.
"""
from pathlib import Path
from datetime import datetime
import json
import logging
from typing import List

from soundtrack.exceptions import DataError
from soundtrack.models import SongEntry

logger = logging.getLogger(__name__)


def create_backup(path: Path) -> Path:
    """Create a timestamped backup of the data file and return the backup path."""
    p = Path(path)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_name = f"{p.stem}_backup_{timestamp}{p.suffix}"
    backup_path = p.parent / backup_name
    backup_path.write_text(p.read_text(encoding='utf-8'), encoding='utf-8')
    logger.info(f"Created backup: {backup_path}")
    return backup_path


def load_songs(path: Path) -> List[SongEntry]:
    """Read songs.json into SongEntry records, preserving order.

    Raises:
        FileNotFoundError: if the file does not exist
        DataError: if the file is not a JSON array of song objects
    """
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding='utf-8'))
    except json.JSONDecodeError as e:
        raise DataError(f"{p} is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise DataError(f"{p} must contain a JSON array of songs, got {type(data).__name__}")

    songs = [SongEntry.from_dict(item) for item in data]
    logger.debug(f"Loaded {len(songs)} songs from {p}")
    return songs


def save_songs(path: Path, songs: List[SongEntry], make_backup: bool = False) -> None:
    """Write songs to `path` as a JSON array.

    If make_backup is True and the destination exists, a timestamped backup
    is created first using `create_backup`.
    """
    p = Path(path)
    if make_backup and p.exists():
        create_backup(p)
    p.parent.mkdir(parents=True, exist_ok=True)
    payload = [song.to_dict() for song in songs]
    p.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + '\n', encoding='utf-8')
    logger.info(f"💾 Wrote {len(songs)} songs to {p}")
