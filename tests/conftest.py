"""
Pytest fixtures for book soundtrack toolkit tests

Provides common test data and mock objects for use across all test modules.
"""
import json
import os
import sys

import pytest

from soundtrack.models import SearchCandidate, SongEntry


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keep tests independent of the developer's environment settings."""
    for key in list(os.environ):
        if key.startswith(('SONGS_', 'ITUNES_', 'QUERY_', 'ARTWORK_', 'UA_')) or key in ('PRESERVE_MUTE', 'LOG_LEVEL', 'LOG_FORMAT'):
            monkeypatch.delenv(key, raising=False)
    # A developer's config.py must not leak in; None makes `import config` fail
    monkeypatch.setitem(sys.modules, 'config', None)


@pytest.fixture
def sample_csv_text():
    """CSV in the curated format, including the awkward cases."""
    return (
        "Song Title,Artist,Album,Year,Page,Character(s),Context\n"
        '"Heroes",David Bowie,"Heroes",1977,"24, 34","Ken, Hua",Played in the dorm\n'
        "—,Pavement,Slanted and Enchanted,1992,41,Hua,Album passed around\n"
        'Range Life,Pavement,"Crooked Rain, Crooked Rain",1994,57,"Ken, , Hua","On the drive, windows down"\n'
        "Loser,Beck,—,1993,pg. 60,Ken,Radio\n"
    )


@pytest.fixture
def sample_csv_file(tmp_path, sample_csv_text):
    csv_path = tmp_path / "songs.csv"
    csv_path.write_text(sample_csv_text, encoding="utf-8")
    return csv_path


@pytest.fixture
def itunes_result():
    """One raw iTunes Search API result."""
    return {
        "wrapperType": "track",
        "kind": "song",
        "trackId": 1440833098,
        "trackName": "Range Life",
        "artistName": "Pavement",
        "collectionName": "Crooked Rain, Crooked Rain",
        "previewUrl": "https://audio-ssl.itunes.apple.com/preview/range-life.m4a",
        "artworkUrl60": "https://is1-ssl.mzstatic.com/image/thumb/Music/source/60x60bb.jpg",
        "artworkUrl100": "https://is1-ssl.mzstatic.com/image/thumb/Music/source/100x100bb.jpg",
        "trackViewUrl": "https://music.apple.com/us/album/range-life/1440833084?i=1440833098",
    }


@pytest.fixture
def itunes_response(itunes_result):
    """Search API body with a live version ranked above the studio album."""
    live = dict(itunes_result, trackId=111, collectionName="Live at Brixton")
    return {"resultCount": 2, "results": [live, itunes_result]}


def make_candidate(track_id=1, album="Album", preview="https://example.com/p.m4a",
                   artwork="https://example.com/art/100x100bb.jpg"):
    return SearchCandidate(
        track_id=track_id,
        track_name=f"Track {track_id}",
        artist_name="Artist",
        collection_name=album,
        track_view_url=f"https://music.apple.com/track/{track_id}",
        preview_url=preview,
        artwork_url100=artwork,
    )


@pytest.fixture
def candidate_factory():
    return make_candidate


@pytest.fixture
def sample_songs():
    """Small timeline: two characters, one song without a preview."""
    return [
        SongEntry(id="1", title="Heroes", artist="David Bowie", album="Heroes", year=1977, page=24,
                  characters=["Ken", "Hua"], itunes_track_id="10", preview_url="https://p/1.m4a",
                  album_art="https://a/1000x1000bb.jpg"),
        SongEntry(id="2", title=None, artist="Pavement", album="Slanted and Enchanted", year=1992, page=41,
                  characters=["Hua"]),
        SongEntry(id="3", title="Range Life", artist="Pavement", album="Crooked Rain, Crooked Rain", year=1994,
                  page=57, characters=["Ken"], itunes_track_id="30", preview_url="",
                  album_art="https://a/1000x1000bb.jpg"),
        SongEntry(id="4", title="Loser", artist="Beck", album="", year=1993, page=60,
                  characters=["Ken", "Hua"], itunes_track_id="40", preview_url="https://p/4.m4a",
                  album_art="https://a/1000x1000bb.jpg", spotify_url="https://open.spotify.com/track/x"),
    ]


@pytest.fixture
def songs_json_file(tmp_path, sample_songs):
    path = tmp_path / "songs.json"
    path.write_text(json.dumps([s.to_dict() for s in sample_songs], indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def pytest_terminal_summary(terminalreporter, exitstatus, config):
    """Print a concise, one-line summary at the end of the test run."""
    stats = getattr(terminalreporter, "stats", {})

    def _count(key):
        return len(stats.get(key, [])) if stats.get(key) is not None else 0

    passed = _count('passed')
    failed = _count('failed')
    skipped = _count('skipped')
    errors = _count('error')

    total = passed + failed + skipped + errors

    terminalreporter.write_sep("=", "pytest summary")
    terminalreporter.write_line(
        f"Total: {total}  Passed: {passed}  Failed: {failed}  Skipped: {skipped}  Errors: {errors}"
    )
