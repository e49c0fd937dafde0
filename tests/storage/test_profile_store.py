"""
Unit Tests for Profile Storage

Tests for the locked JSON save file and the in-memory store.
"""

import json

import pytest

from tsumqma.core.models.progress import PlayerProfile, StageProgress
from tsumqma.storage import (
    JsonProfileStore,
    MemoryProfileStore,
    locked_read_json,
    locked_write_json,
)


class TestFileLocking:
    """Tests for locked JSON helpers."""

    def test_read_when_missing_then_none(self, tmp_path):
        assert locked_read_json(tmp_path / "absent.json") is None

    def test_write_when_parent_missing_then_created(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "data.json"
        locked_write_json(path, {"a": 1})
        assert locked_read_json(path) == {"a": 1}

    def test_write_when_shorter_content_then_old_tail_removed(self, tmp_path):
        path = tmp_path / "data.json"
        locked_write_json(path, {"long": "x" * 200})
        locked_write_json(path, {"s": 1})
        assert json.loads(path.read_text(encoding="utf-8")) == {"s": 1}

    def test_read_when_empty_file_then_none(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("", encoding="utf-8")
        assert locked_read_json(path) is None


class TestJsonProfileStore:
    """Tests for JsonProfileStore."""

    def test_load_when_no_file_then_none(self, tmp_path):
        assert JsonProfileStore(tmp_path / "save.json").load() is None

    def test_save_when_loaded_back_then_equal(self, tmp_path):
        store = JsonProfileStore(tmp_path / "save.json")
        profile = PlayerProfile(selected_character="fire", player_name="三田", total_answers=3)
        profile.stages["design"] = StageProgress(2, 10, 150)
        profile.recompute_aggregate()
        store.save(profile)
        assert store.load() == profile

    def test_save_when_written_then_non_ascii_kept_readable(self, tmp_path):
        path = tmp_path / "save.json"
        JsonProfileStore(path).save(PlayerProfile(player_name="三田"))
        assert "三田" in path.read_text(encoding="utf-8")

    def test_load_when_corrupted_then_none(self, tmp_path):
        path = tmp_path / "save.json"
        path.write_text("{not json", encoding="utf-8")
        assert JsonProfileStore(path).load() is None

    def test_load_when_not_utf8_then_none(self, tmp_path):
        path = tmp_path / "save.json"
        path.write_bytes(b'{"playerName": "\xff\xfe"}')
        assert JsonProfileStore(path).load() is None

    def test_load_when_schema_invalid_then_none(self, tmp_path):
        path = tmp_path / "save.json"
        path.write_text(json.dumps({"totalAnswers": "many"}), encoding="utf-8")
        assert JsonProfileStore(path).load() is None

    def test_load_when_legacy_save_then_migrated(self, tmp_path):
        path = tmp_path / "save.json"
        path.write_text(json.dumps({"level": 4, "exp": 20, "selectedCharacter": "leaf"}),
                        encoding="utf-8")
        profile = JsonProfileStore(path).load()
        assert profile.stages["ai"].level == 4
        assert profile.selected_character == "leaf"


class TestMemoryProfileStore:
    """Tests for MemoryProfileStore."""

    def test_load_when_empty_then_none(self):
        assert MemoryProfileStore().load() is None

    def test_save_when_profile_mutated_later_then_snapshot_unchanged(self):
        store = MemoryProfileStore()
        profile = PlayerProfile()
        store.save(profile)
        profile.total_answers = 10
        assert store.load().total_answers == 0
        assert store.save_count == 1
