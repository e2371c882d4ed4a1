"""
Tests for the command-line scripts in scripts/

Each script is driven through `main(argv)`; HTTP is mocked with `responses`.
"""
import json

import pytest
import responses

from scripts import enrich_songs, parse_songs, probe_itunes

SEARCH_URL = "https://itunes.apple.com/search"


@pytest.fixture(autouse=True)
def no_rate_limit(monkeypatch):
    monkeypatch.setenv('QUERY_DELAY', '0')


class TestParseSongs:

    @pytest.mark.unit
    def test_writes_json(self, tmp_path, sample_csv_file, capsys):
        output = tmp_path / "out" / "songs.json"

        parse_songs.main([str(sample_csv_file), '-o', str(output)])

        data = json.loads(output.read_text(encoding="utf-8"))
        assert [d["id"] for d in data] == ["1", "2", "3", "4"]
        assert "title" not in data[1]
        assert data[0]["page"] == 24
        assert "4 entries" in capsys.readouterr().out

    @pytest.mark.unit
    def test_dry_run_writes_nothing(self, tmp_path, sample_csv_file):
        output = tmp_path / "songs.json"
        parse_songs.main([str(sample_csv_file), '-o', str(output), '--dry-run'])
        assert not output.exists()

    @pytest.mark.unit
    def test_missing_input(self, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            parse_songs.main([str(tmp_path / "missing.csv"), '-o', str(tmp_path / "songs.json")])
        assert excinfo.value.code == 1


class TestEnrichSongs:

    @pytest.mark.unit
    @responses.activate
    def test_exact_only_run(self, songs_json_file, itunes_result, capsys):
        data = json.loads(songs_json_file.read_text(encoding="utf-8"))
        for record in data:
            for key in ("itunesTrackId", "previewUrl", "albumArt"):
                record.pop(key, None)
        songs_json_file.write_text(json.dumps(data), encoding="utf-8")

        exact = dict(itunes_result, collectionName="Heroes")
        responses.add(responses.GET, SEARCH_URL, json={"resultCount": 1, "results": [exact]}, status=200)

        enrich_songs.main([str(songs_json_file), '--exact-only', '--no-progress', '--budget', '2'])

        saved = json.loads(songs_json_file.read_text(encoding="utf-8"))
        assert len(responses.calls) == 2
        assert saved[0]["itunesTrackId"] == "1440833098"
        assert saved[0]["albumArt"].endswith("/1000x1000bb.jpg")
        assert "itunesTrackId" not in saved[2]
        out = capsys.readouterr().out
        assert "Queries used: 2/2" in out
        assert "1 songs remaining" in out

    @pytest.mark.unit
    def test_invalid_budget(self, songs_json_file):
        with pytest.raises(SystemExit) as excinfo:
            enrich_songs.main([str(songs_json_file), '--budget', '0'])
        assert excinfo.value.code == 1

    @pytest.mark.unit
    def test_missing_file(self, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            enrich_songs.main([str(tmp_path / "songs.json")])
        assert excinfo.value.code == 1

    @pytest.mark.unit
    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "songs.json"
        path.write_text("not json", encoding="utf-8")
        with pytest.raises(SystemExit) as excinfo:
            enrich_songs.main([str(path), '--no-progress'])
        assert excinfo.value.code == 1


class TestProbeItunes:

    @pytest.mark.unit
    def test_resolve_index(self):
        assert probe_itunes.resolve_index("2", 4) == 2
        assert probe_itunes.resolve_index("4", 4) is None
        assert probe_itunes.resolve_index("-1", 4) is None
        assert probe_itunes.resolve_index("x", 4) is None
        assert probe_itunes.resolve_index(None, 4) is None

    @pytest.mark.unit
    @pytest.mark.parametrize("argv", [[], ["99"], ["abc"]])
    def test_bad_index_exits_with_usage(self, songs_json_file, capsys, argv):
        with pytest.raises(SystemExit) as excinfo:
            probe_itunes.main(argv + ['--songs', str(songs_json_file)])

        assert excinfo.value.code == 1
        err = capsys.readouterr().err
        assert "Please provide a valid song index (0-3)" in err
        assert '0: "Heroes" by David Bowie' in err

    @pytest.mark.unit
    def test_album_only_entry_makes_no_request(self, songs_json_file, capsys):
        probe_itunes.main(['1', '--songs', str(songs_json_file)])
        assert "Album-only entry" in capsys.readouterr().out

    @pytest.mark.unit
    @responses.activate
    def test_shows_best_match(self, songs_json_file, itunes_response, capsys):
        responses.add(responses.GET, SEARCH_URL, json=itunes_response, status=200)

        probe_itunes.main(['2', '--songs', str(songs_json_file)])

        out = capsys.readouterr().out
        assert 'Found album match: "Crooked Rain, Crooked Rain"' in out
        assert "BEST MATCH (EXACT MATCH)" in out
        assert "Live at Brixton" in out

    @pytest.mark.unit
    @responses.activate
    def test_api_error_exits(self, songs_json_file):
        responses.add(responses.GET, SEARCH_URL, body="down", status=503)
        with pytest.raises(SystemExit) as excinfo:
            probe_itunes.main(['0', '--songs', str(songs_json_file)])
        assert excinfo.value.code == 1
