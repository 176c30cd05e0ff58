"""
Tests for the SQLite result store.
"""

import json

import pytest

from wordle_league.core.leaderboard import compute_leaderboard
from wordle_league.core.models import ResultRow
from wordle_league.core.store import ResultStore, normalize_handle


@pytest.fixture
def store(tmp_path):
    s = ResultStore.open(tmp_path / "db" / "wordle.sqlite")
    yield s
    s.close()


def row(user="1", day="2024-05-01", guesses=3, failed=False, puzzle=1047, raw="3/6: <@1>"):
    return ResultRow(user_id=user, puzzle_number=puzzle, date_iso=day, guesses=guesses, failed=failed, raw=raw)


class TestNormalizeHandle:
    def test_adds_prefix_and_lowercases(self):
        assert normalize_handle(" Zahir Hassan ") == "@zahir hassan"

    def test_keeps_single_prefix(self):
        assert normalize_handle("@Nina") == "@nina"

    def test_empty(self):
        assert normalize_handle("@ ") == ""


class TestResults:
    def test_open_creates_parent_directory(self, tmp_path, store):
        assert (tmp_path / "db" / "wordle.sqlite").exists()

    def test_round_trip(self, store):
        store.upsert_result(row())
        assert store.all_results() == [row()]

    def test_failed_row(self, store):
        store.upsert_result(row(guesses=None, failed=True))
        [stored] = store.all_results()
        assert stored.failed is True
        assert stored.guesses is None

    def test_latest_write_wins(self, store):
        store.upsert_result(row(guesses=3))
        store.upsert_result(row(guesses=None, failed=True, raw="X/6: <@1>"))
        [stored] = store.all_results()
        assert stored.failed is True
        assert stored.raw == "X/6: <@1>"

    def test_duplicate_upsert_is_idempotent(self, store):
        store.upsert_result(row())
        once = compute_leaderboard(store.all_results())
        store.upsert_result(row())
        assert compute_leaderboard(store.all_results()) == once
        assert store.counts()["results"] == 1

    def test_results_for_user(self, store):
        store.upsert_result(row(user="1"))
        store.upsert_result(row(user="2"))
        store.upsert_result(row(user="1", day="2024-05-02", guesses=4))
        rows = store.results_for_user("1")
        assert [r.date_iso for r in rows] == ["2024-05-01", "2024-05-02"]

    def test_rejects_inconsistent_rows(self, store):
        with pytest.raises(ValueError):
            store.upsert_result(row(guesses=3, failed=True))
        with pytest.raises(ValueError):
            store.upsert_result(row(guesses=None, failed=False))
        with pytest.raises(ValueError):
            store.upsert_result(row(guesses=7))
        assert store.all_results() == []


class TestPlayers:
    def test_display_names(self, store):
        store.upsert_result(row(user="1"))
        store.set_display_name("1", "Anika")
        store.set_display_name("2", "Bonsen")
        assert store.display_names() == {"1": "Anika", "2": "Bonsen"}


class TestAliases:
    def test_set_and_get(self, store):
        store.set_alias("@Zahir", "42")
        assert store.get_alias("zahir") == "42"
        assert store.get_alias("@ZAHIR") == "42"

    def test_unknown_alias(self, store):
        assert store.get_alias("@nobody") is None

    def test_remove(self, store):
        store.set_alias("@a", "1")
        assert store.remove_alias("@a") is True
        assert store.remove_alias("@a") is False

    def test_seed_does_not_overwrite(self, store, tmp_path):
        path = tmp_path / "aliases.json"
        path.write_text(json.dumps({"@Anika": "1", "jiawen": 2}), encoding="utf-8")
        store.set_alias("@anika", "99")
        assert store.seed_aliases(path) == 1
        assert store.list_aliases() == {"@anika": "99", "@jiawen": "2"}

    def test_seed_missing_file(self, store, tmp_path):
        assert store.seed_aliases(tmp_path / "missing.json") == 0

    def test_seed_rejects_non_object(self, store, tmp_path):
        path = tmp_path / "aliases.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            store.seed_aliases(path)


class TestMaintenance:
    def test_clear_defaults(self, store):
        store.upsert_result(row())
        store.set_alias("@a", "1")
        store.clear()
        assert store.counts() == {"results": 0, "games": 0, "players": 0, "aliases": 1}

    def test_clear_keep_players_drop_aliases(self, store):
        store.upsert_result(row())
        store.set_alias("@a", "1")
        store.clear(keep_players=True, drop_aliases=True, vacuum=True)
        assert store.counts() == {"results": 0, "games": 0, "players": 1, "aliases": 0}
