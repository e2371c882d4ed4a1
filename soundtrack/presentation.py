"""
Presentation state for the song timeline page.

Everything here is a pure function of the loaded songs and a small
immutable ViewState. The page (whatever draws it) keeps one ViewState,
feeds user and audio events through `reduce`, and redraws from `render`.

The current index always points into the character-filtered list, not into
the full song list.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence

from soundtrack.models import SongEntry

# Filter option meaning "no character filter"
ALL_CHARACTERS = "All"

DEFAULT_HEADING = "Stay True"


class Event:
    """Events accepted by `reduce`."""
    NEXT = 'next'
    PREV = 'prev'
    SELECT_CHARACTER = 'select_character'
    # Intent only; the audio resource answers with PLAYED/PAUSED
    TOGGLE_PLAY = 'toggle_play'
    # Mirrored from the active audio resource
    PLAYED = 'played'
    PAUSED = 'paused'
    ENDED = 'ended'
    MUTE_CHANGED = 'mute_changed'


KEY_BINDINGS = {
    'ArrowLeft': Event.PREV,
    'ArrowRight': Event.NEXT,
    ' ': Event.TOGGLE_PLAY,
}


@dataclass(frozen=True)
class ViewState:
    index: int = 0
    character: str = ALL_CHARACTERS
    playing: bool = False
    muted: bool = False


def unique_characters(songs: Sequence[SongEntry]) -> List[str]:
    """Filter options: "All" followed by every character name, sorted.

    A character literally named "All" collapses into the "All" option, so
    selecting it shows every song rather than only that character's.
    """
    names = {name for song in songs for name in song.characters}
    names.discard(ALL_CHARACTERS)
    return [ALL_CHARACTERS] + sorted(names)


def filtered_by_character(songs: Sequence[SongEntry], selected: str) -> List[SongEntry]:
    """Songs mentioning `selected`, in timeline order ("All" returns every song)."""
    if selected == ALL_CHARACTERS:
        return list(songs)
    return [song for song in songs if selected in song.characters]


def current_song(state: ViewState, songs: Sequence[SongEntry]) -> Optional[SongEntry]:
    filtered = filtered_by_character(songs, state.character)
    if 0 <= state.index < len(filtered):
        return filtered[state.index]
    return None


def _fresh_track(state: ViewState, preserve_mute: bool) -> ViewState:
    # A new track gets a new audio resource: stopped, and unmuted unless asked otherwise
    return replace(state, playing=False, muted=state.muted if preserve_mute else False)


def reduce(
    state: ViewState,
    songs: Sequence[SongEntry],
    event: str,
    payload: Any = None,
    preserve_mute: bool = False,
) -> ViewState:
    """
    Apply one event to the view state and return the new state.

    Args:
        state: Current state
        songs: Full song list in timeline order
        event: One of the Event constants
        payload: Character name for SELECT_CHARACTER, muted flag for MUTE_CHANGED
        preserve_mute: Keep the mute flag when the track changes

    Returns:
        The new state (the input is never modified)
    """
    if event in (Event.NEXT, Event.PREV):
        count = len(filtered_by_character(songs, state.character))
        step = 1 if event == Event.NEXT else -1
        target = state.index + step
        if not 0 <= target < count:
            return state
        return _fresh_track(replace(state, index=target), preserve_mute)

    if event == Event.SELECT_CHARACTER:
        selected = payload or ALL_CHARACTERS
        before = current_song(state, songs)
        count = len(filtered_by_character(songs, selected))
        index = state.index if 0 <= state.index < count else 0
        new_state = replace(state, character=selected, index=index)
        after = current_song(new_state, songs)
        if before is not after:
            new_state = _fresh_track(new_state, preserve_mute)
        return new_state

    if event == Event.PLAYED:
        return replace(state, playing=True)

    if event in (Event.PAUSED, Event.ENDED):
        return replace(state, playing=False)

    if event == Event.MUTE_CHANGED:
        muted = (not state.muted) if payload is None else bool(payload)
        return replace(state, muted=muted)

    # TOGGLE_PLAY and unknown events leave the state alone
    return state


def key_to_event(key: str) -> Optional[str]:
    """Map a keyboard key name to an event, or None if unbound."""
    return KEY_BINDINGS.get(key)


def _song_card(song: SongEntry) -> Dict[str, Any]:
    return {
        'id': song.id,
        'title': song.title,
        'artist': song.artist,
        'album': song.album,
        'year': song.year,
        'page': song.page,
        'characters': list(song.characters),
        'album_art': song.album_art or None,
        'fallback_url': song.spotify_url or None,
    }


def render(state: ViewState, songs: Sequence[SongEntry], heading: str = DEFAULT_HEADING) -> Dict[str, Any]:
    """
    Build the view model for the current state.

    `audio` is None when the current song has no preview, so the page
    omits the player rather than showing a broken one.
    """
    filtered = filtered_by_character(songs, state.character)
    count = len(filtered)
    song = current_song(state, songs)

    view: Dict[str, Any] = {
        'heading': heading,
        'empty': song is None,
        'song': None,
        'audio': None,
        'index': state.index if song is not None else 0,
        'count': count,
        'position': f"{state.index + 1} / {count}" if song is not None else "0 / 0",
        'prev_disabled': song is None or state.index == 0,
        'next_disabled': song is None or state.index >= count - 1,
        'character_options': unique_characters(songs),
        'selected_character': state.character,
    }
    if song is None:
        return view

    view['song'] = _song_card(song)
    if song.has_preview:
        view['audio'] = {
            'src': song.preview_url,
            'playing': state.playing,
            'muted': state.muted,
        }
    return view
