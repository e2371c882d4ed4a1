from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from soundtrack.exceptions import ValidationError


# JSON field name -> dataclass attribute, in the order written to songs.json
FIELD_NAMES = [
    ('id', 'id'),
    ('title', 'title'),
    ('artist', 'artist'),
    ('album', 'album'),
    ('year', 'year'),
    ('page', 'page'),
    ('characters', 'characters'),
    ('itunesTrackId', 'itunes_track_id'),
    ('previewUrl', 'preview_url'),
    ('albumArt', 'album_art'),
    ('spotifyUrl', 'spotify_url'),
]

OPTIONAL_FIELDS = {'title', 'itunesTrackId', 'previewUrl', 'albumArt', 'spotifyUrl'}


@dataclass
class SongEntry:
    id: str
    artist: str
    title: Optional[str] = None
    album: str = ""
    year: Optional[int] = None
    page: Optional[int] = None
    characters: List[str] = field(default_factory=list)
    # iTunes metadata (filled in by enrichment)
    itunes_track_id: Optional[str] = None
    preview_url: Optional[str] = None
    album_art: Optional[str] = None
    # Fallback link for when the preview breaks
    spotify_url: Optional[str] = None
    # Keys found in songs.json that we don't model; written back untouched
    extra: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def is_album_only(self) -> bool:
        return self.title is None

    @property
    def is_enriched(self) -> bool:
        # previewUrl == "" still counts: the catalog simply had no preview
        return (
            self.itunes_track_id is not None
            and self.preview_url is not None
            and self.album_art is not None
        )

    @property
    def has_preview(self) -> bool:
        return bool(self.preview_url)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for json_name, attr in FIELD_NAMES:
            value = getattr(self, attr)
            if json_name in OPTIONAL_FIELDS and value is None:
                continue
            if json_name == 'characters':
                value = list(value)
            data[json_name] = value
        for key, value in self.extra.items():
            data.setdefault(key, value)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SongEntry':
        if not isinstance(data, dict):
            raise ValidationError(f"Song record must be an object, got {type(data).__name__}")
        if 'id' not in data or 'artist' not in data:
            raise ValidationError(f"Song record is missing 'id' or 'artist': {data!r}")

        known = {json_name for json_name, _ in FIELD_NAMES}
        kwargs = {}
        for json_name, attr in FIELD_NAMES:
            if json_name in data:
                kwargs[attr] = data[json_name]
        kwargs['id'] = str(data['id'])
        kwargs['album'] = data.get('album') or ''
        kwargs['characters'] = list(data.get('characters') or [])
        # iTunes ids are numbers in the API but strings on disk
        if kwargs.get('itunes_track_id') is not None:
            kwargs['itunes_track_id'] = str(kwargs['itunes_track_id'])
        extra = {k: v for k, v in data.items() if k not in known}
        return cls(extra=extra, **kwargs)

    def __str__(self) -> str:
        if self.title:
            return f'"{self.title}" by {self.artist}'
        return f'Album-only entry - {self.artist}'


# Result keys that may be missing or null, but are text when present
_OPTIONAL_TEXT_KEYS = ('collectionName', 'trackViewUrl', 'previewUrl', 'artworkUrl100', 'artworkUrl60')


@dataclass
class SearchCandidate:
    """One result row from the iTunes Search API."""
    track_id: int
    track_name: str
    artist_name: str
    collection_name: str
    track_view_url: str = ""
    preview_url: Optional[str] = None
    artwork_url100: Optional[str] = None
    artwork_url60: Optional[str] = None

    @classmethod
    def from_api(cls, result: Dict[str, Any]) -> 'SearchCandidate':
        """Build a candidate from a raw `results[]` item.

        Raises:
            ValidationError: if the result lacks a track id or names
        """
        try:
            track_id = int(result['trackId'])
            track_name = result['trackName']
            artist_name = result['artistName']
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Malformed iTunes result: {e}") from e

        for key in _OPTIONAL_TEXT_KEYS:
            value = result.get(key)
            if value is not None and not isinstance(value, str):
                raise ValidationError(
                    f"Malformed iTunes result: {key} must be a string, got {type(value).__name__}"
                )

        return cls(
            track_id=track_id,
            track_name=track_name,
            artist_name=artist_name,
            # Singles sometimes come back without a collection
            collection_name=result.get('collectionName') or '',
            track_view_url=result.get('trackViewUrl') or '',
            preview_url=result.get('previewUrl'),
            artwork_url100=result.get('artworkUrl100'),
            artwork_url60=result.get('artworkUrl60'),
        )


class MatchType:
    """
    Confidence tiers for a candidate relative to the expected album.

    Only EXACT matches are committed without asking the operator.
    """
    EXACT = 'exact'
    PARTIAL = 'partial'
    NONE = 'none'

    _LABELS = {
        EXACT: 'EXACT MATCH',
        PARTIAL: 'PARTIAL MATCH',
        NONE: 'NO ALBUM MATCH',
    }

    @classmethod
    def needs_confirmation(cls, match_type: str) -> bool:
        return match_type != cls.EXACT

    @classmethod
    def label(cls, match_type: str) -> str:
        return cls._LABELS.get(match_type, match_type.upper())
