"""
Playback control for the song timeline page.

Exactly one AudioResource exists at a time, bound to the song at the current
index. Moving to another song closes that resource and creates a new one,
so playback always starts fresh. Play/pause/mute state shown on the page is
whatever the resource last reported through its events.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence

from soundtrack.models import SongEntry
from soundtrack.presentation import (
    ALL_CHARACTERS,
    DEFAULT_HEADING,
    Event,
    ViewState,
    current_song,
    filtered_by_character,
    key_to_event,
    reduce,
    render,
)

logger = logging.getLogger(__name__)


class AudioResource:
    """
    One audio element playing a preview URL.

    This base class only tracks element-side state and fires events
    ('play', 'pause', 'ended', 'volumechange') to registered listeners. A UI
    backend subclasses it and calls `emit` when its player reports a change.
    """

    EVENTS = ('play', 'pause', 'ended', 'volumechange')

    def __init__(self, src: str):
        self.src = src
        self.paused = True
        self.muted = False
        self.closed = False
        self._listeners: Dict[str, List[Callable[[], None]]] = {e: [] for e in self.EVENTS}

    def on(self, event: str, callback: Callable[[], None]) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unknown audio event: {event}")
        self._listeners[event].append(callback)

    def emit(self, event: str) -> None:
        for callback in list(self._listeners.get(event, [])):
            callback()

    def play(self) -> None:
        if self.closed:
            return
        self.paused = False
        self.emit('play')

    def pause(self) -> None:
        if self.closed:
            return
        self.paused = True
        self.emit('pause')

    def set_muted(self, muted: bool) -> None:
        if self.closed:
            return
        self.muted = bool(muted)
        self.emit('volumechange')

    def end(self) -> None:
        """Called when the preview reaches its end."""
        if self.closed:
            return
        self.paused = True
        self.emit('ended')

    def close(self) -> None:
        """Stop and release the element; it emits nothing afterwards."""
        self.paused = True
        self.closed = True
        for listeners in self._listeners.values():
            listeners.clear()

    def __repr__(self) -> str:
        return f"AudioResource(src={self.src!r}, paused={self.paused}, muted={self.muted})"


class PlaybackController:
    """
    Binds user intent (play/pause, mute, prev/next, character filter) to the
    single active AudioResource.

    Args:
        songs: Full song list in timeline order
        audio_factory: Callable creating an AudioResource for a URL
        preserve_mute: Carry the mute flag over to the next track
    """

    def __init__(
        self,
        songs: Sequence[SongEntry],
        audio_factory: Callable[[str], AudioResource] = AudioResource,
        preserve_mute: bool = False,
    ):
        self.songs = list(songs)
        self.audio_factory = audio_factory
        self.preserve_mute = preserve_mute
        self.state = ViewState()
        self.audio: Optional[AudioResource] = None
        self._bind()

    @property
    def filtered(self) -> List[SongEntry]:
        return filtered_by_character(self.songs, self.state.character)

    @property
    def current(self) -> Optional[SongEntry]:
        return current_song(self.state, self.songs)

    def dispatch(self, event: str, payload=None) -> ViewState:
        """Apply an event; rebind the audio resource if the current song changed."""
        before = self.current
        self.state = reduce(self.state, self.songs, event, payload, preserve_mute=self.preserve_mute)
        if self.current is not before:
            self._bind()
        return self.state

    def _bind(self) -> None:
        if self.audio is not None:
            self.audio.close()
            self.audio = None

        song = self.current
        if song is None or not song.has_preview:
            logger.debug(f"No preview for {song}; audio control omitted")
            return

        audio = self.audio_factory(song.preview_url)
        audio.on('play', lambda: self._mirror(Event.PLAYED))
        audio.on('pause', lambda: self._mirror(Event.PAUSED))
        audio.on('ended', lambda: self._mirror(Event.ENDED))
        audio.on('volumechange', lambda: self._mirror(Event.MUTE_CHANGED, audio.muted))
        self.audio = audio
        if self.state.muted:
            audio.set_muted(True)
        logger.debug(f"Bound audio for {song}: {song.preview_url}")

    def _mirror(self, event: str, payload=None) -> None:
        self.state = reduce(self.state, self.songs, event, payload, preserve_mute=self.preserve_mute)

    def toggle_play_pause(self) -> None:
        if self.audio is None:
            return
        if self.state.playing:
            self.audio.pause()
        else:
            self.audio.play()

    def toggle_mute(self) -> None:
        if self.audio is None:
            return
        self.audio.set_muted(not self.audio.muted)

    def next(self) -> ViewState:
        return self.dispatch(Event.NEXT)

    def prev(self) -> ViewState:
        return self.dispatch(Event.PREV)

    def select_character(self, name: str = ALL_CHARACTERS) -> ViewState:
        return self.dispatch(Event.SELECT_CHARACTER, name)

    def handle_key(self, key: str) -> ViewState:
        event = key_to_event(key)
        if event == Event.TOGGLE_PLAY:
            self.toggle_play_pause()
        elif event is not None:
            self.dispatch(event)
        return self.state

    def render(self, heading: str = DEFAULT_HEADING) -> dict:
        return render(self.state, self.songs, heading=heading)
