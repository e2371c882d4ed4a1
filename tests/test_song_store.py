"""
Unit tests for soundtrack/song_store.py

Tests reading, writing and backing up songs.json.
"""
import json

import pytest

from soundtrack.exceptions import DataError, ValidationError
from soundtrack.models import SongEntry
from soundtrack.song_store import create_backup, load_songs, save_songs


class TestLoadSongs:

    @pytest.mark.unit
    def test_load_preserves_order(self, songs_json_file):
        songs = load_songs(songs_json_file)
        assert [s.id for s in songs] == ["1", "2", "3", "4"]
        assert songs[1].is_album_only
        assert songs[3].spotify_url == "https://open.spotify.com/track/x"

    @pytest.mark.unit
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_songs(tmp_path / "nope.json")

    @pytest.mark.unit
    def test_invalid_json(self, tmp_path):
        path = tmp_path / "songs.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(DataError, match="not valid JSON"):
            load_songs(path)

    @pytest.mark.unit
    def test_not_a_list(self, tmp_path):
        path = tmp_path / "songs.json"
        path.write_text('{"songs": []}', encoding="utf-8")
        with pytest.raises(DataError, match="JSON array"):
            load_songs(path)

    @pytest.mark.unit
    def test_record_without_artist(self, tmp_path):
        path = tmp_path / "songs.json"
        path.write_text('[{"id": "1", "title": "x"}]', encoding="utf-8")
        with pytest.raises(ValidationError):
            load_songs(path)


class TestSaveSongs:

    @pytest.mark.unit
    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "out" / "nested" / "songs.json"
        save_songs(path, [SongEntry(id="1", artist="Beck", title="Loser")])
        assert path.exists()

    @pytest.mark.unit
    def test_output_format(self, tmp_path):
        path = tmp_path / "songs.json"
        save_songs(path, [SongEntry(id="1", artist="Sigur Rós", title="Hoppípolla", characters=["Hua"])])

        text = path.read_text(encoding="utf-8")
        assert "Sigur Rós" in text
        assert text.endswith("]\n")
        assert json.loads(text) == [{
            "id": "1", "title": "Hoppípolla", "artist": "Sigur Rós", "album": "",
            "year": None, "page": None, "characters": ["Hua"],
        }]

    @pytest.mark.unit
    def test_save_then_load_keeps_records(self, tmp_path, sample_songs):
        path = tmp_path / "songs.json"
        save_songs(path, sample_songs)
        assert load_songs(path) == sample_songs

    @pytest.mark.unit
    def test_backup_only_when_file_exists(self, tmp_path):
        path = tmp_path / "songs.json"
        save_songs(path, [], make_backup=True)
        assert list(tmp_path.glob("songs_backup_*")) == []

        save_songs(path, [SongEntry(id="1", artist="A")], make_backup=True)
        backups = list(tmp_path.glob("songs_backup_*.json"))
        assert len(backups) == 1
        assert json.loads(backups[0].read_text(encoding="utf-8")) == []


class TestCreateBackup:

    @pytest.mark.unit
    def test_backup_copies_content(self, tmp_path):
        path = tmp_path / "songs.json"
        path.write_text('[{"id": "1"}]', encoding="utf-8")

        backup = create_backup(path)

        assert backup.parent == tmp_path
        assert backup.name.startswith("songs_backup_")
        assert backup.suffix == ".json"
        assert backup.read_text(encoding="utf-8") == '[{"id": "1"}]'
