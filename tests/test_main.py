"""
Tests for configuration and the command-line entry point.

The config singleton is pointed at a temporary directory so nothing is
written to the real home directory.
"""

import json

import pytest

from src.database.db import Database
from src.main import main
from src.utils.config import Config


@pytest.fixture
def app_dir(qapp, tmp_path, monkeypatch):
    monkeypatch.setattr(Config, "_APP_DIR", tmp_path)
    monkeypatch.setattr(Config, "_CONFIG_FILE", tmp_path / "config.json")
    monkeypatch.setattr(Config, "_EXPORT_DIR", tmp_path / "exports")
    monkeypatch.setattr(Config, "_DB_PATH", tmp_path / "artemis.db")
    monkeypatch.setattr(Config, "_instance", None)
    monkeypatch.delenv("ARTEMIS_USER", raising=False)
    return tmp_path


def run(*argv):
    with pytest.raises(SystemExit) as info:
        main(list(argv))
    return info.value.code


class TestConfig:
    """Tests for the settings singleton."""

    def test_defaults(self, app_dir):
        config = Config()
        assert config.get("ends_per_round") == 10
        assert config.get("off_target_policy") == "record"
        assert Config.get_user_id() == "local"

    def test_saved_values_override(self, app_dir):
        (app_dir / "config.json").write_text(json.dumps({"ends_per_round": 6}))
        assert Config().get("ends_per_round") == 6
        assert Config().get("mock_preset") == "club_archer"

    def test_corrupt_file_uses_defaults(self, app_dir):
        (app_dir / "config.json").write_text("{not json")
        assert Config().get("ends_per_round") == 10

    def test_set_persists(self, app_dir):
        Config().set("user_id", "robin")
        saved = json.loads((app_dir / "config.json").read_text())
        assert saved["user_id"] == "robin"

    def test_env_user_overrides(self, app_dir, monkeypatch):
        monkeypatch.setenv("ARTEMIS_USER", "marian")
        assert Config.get_user_id() == "marian"

    def test_export_dir_created(self, app_dir):
        assert Config.get_export_dir().is_dir()

    def test_db_path_creates_app_dir(self, app_dir, monkeypatch):
        nested = app_dir / "nested"
        monkeypatch.setattr(Config, "_APP_DIR", nested)
        assert Config.get_db_path() == nested / "artemis.db"
        assert nested.is_dir()


class TestCli:
    """End-to-end runs of the artemis command."""

    def test_record_then_history(self, app_dir, capsys):
        assert run("record", "--ends", "3", "--preset", "olympian", "--notes", "calm") == 0
        rounds = Database(app_dir / "artemis.db").load_rounds("local")
        assert len(rounds) == 1
        assert rounds[0].num_ends == 3
        assert all(end.is_complete for end in rounds[0].ends)
        assert rounds[0].notes == "calm"

        assert run("history") == 0
        assert rounds[0].id in capsys.readouterr().out

    def test_stats_empty(self, app_dir, capsys):
        assert run("stats") == 0
        assert "Shots:                0" in capsys.readouterr().out

    def test_notes_and_delete(self, app_dir):
        run("record", "--ends", "1")
        db = Database(app_dir / "artemis.db")
        round_id = db.load_rounds("local")[0].id

        assert run("notes", round_id, "new notes") == 0
        assert db.load_rounds("local")[0].notes == "new notes"

        assert run("delete", round_id) == 0
        assert db.load_rounds("local") == []

    def test_delete_missing_fails(self, app_dir, capsys):
        assert run("delete", "nope") == 1
        assert "Error" in capsys.readouterr().out

    def test_export_csv(self, app_dir):
        run("record", "--ends", "2")
        target = app_dir / "history.csv"
        assert run("export", str(target)) == 0
        assert len(target.read_text().splitlines()) == 2

    def test_import_missing_file_fails(self, app_dir, capsys):
        assert run("import-json", str(app_dir / "absent.json")) == 1
        assert "Error" in capsys.readouterr().out

    def test_import_invalid_json_fails(self, app_dir, capsys):
        bad = app_dir / "bad.json"
        bad.write_text("{not json")
        assert run("import-json", str(bad)) == 1
        assert "Error" in capsys.readouterr().out
        assert Database(app_dir / "artemis.db").load_rounds("local") == []

    def test_json_round_trip(self, app_dir):
        run("--user", "robin", "record", "--ends", "2")
        out = app_dir / "rounds.json"
        assert run("--user", "robin", "export-json", str(out)) == 0
        assert run("--user", "marian", "import-json", str(out)) == 0

        db = Database(app_dir / "artemis.db")
        original = db.load_rounds("robin")[0]
        copied = db.load_rounds("marian")[0]
        assert copied.id == original.id
        assert copied.total_score == original.total_score
