"""
Tests for handle resolution (alias table + member directory).
"""

from types import SimpleNamespace

import pytest

from wordle_league.core.aliases import AliasResolver, MemberDirectory, normalize
from wordle_league.core.store import ResultStore


def member(uid, name, display_name=None, global_name=None):
    return SimpleNamespace(id=uid, name=name, display_name=display_name or name, global_name=global_name, nick=None)


@pytest.fixture
def directory():
    d = MemberDirectory()
    d.refresh([
        member(1, "zahir_h", display_name="Zahir Hassan"),
        member(2, "anika.k", global_name="Anika"),
        member(3, "jiawen"),
        member(4, "jiunee"),
    ])
    return d


@pytest.fixture
def store():
    s = ResultStore.open(":memory:")
    yield s
    s.close()


class TestNormalize:
    def test_strips_punctuation_and_case(self):
        assert normalize("Anika.K") == "anikak"


class TestMemberDirectory:
    def test_empty_until_refreshed(self):
        d = MemberDirectory()
        assert len(d) == 0
        assert d.refreshed_at is None
        assert d.lookup("@anyone") is None

    def test_refresh_records_time_and_size(self, directory):
        assert len(directory) == 4
        assert directory.refreshed_at is not None

    def test_refresh_replaces_previous_members(self, directory):
        directory.refresh([member(9, "solo")])
        assert directory.lookup("@jiawen") is None
        assert directory.lookup("@solo") == "9"

    def test_exact_display_name(self, directory):
        assert directory.lookup("@zahir hassan") == "1"

    def test_exact_global_name(self, directory):
        assert directory.lookup("@anika") == "2"

    def test_normalized_match(self, directory):
        assert directory.lookup("@zahirh") == "1"

    def test_unique_prefix(self, directory):
        assert directory.lookup("@jiaw") == "3"

    def test_ambiguous_prefix(self, directory):
        assert directory.lookup("@ji") is None

    def test_blank_handle(self, directory):
        assert directory.lookup("@") is None


class TestAliasResolver:
    def test_alias_table_wins(self, store, directory):
        store.set_alias("@anika", "200")
        assert AliasResolver(store, directory).resolve("@anika") == "200"

    def test_falls_back_to_directory(self, store, directory):
        assert AliasResolver(store, directory).resolve("@jiunee") == "4"

    def test_digit_ids_pass_through(self, store, directory):
        assert AliasResolver(store, directory).resolve("12345") == "12345"

    def test_unresolved(self, store, directory):
        assert AliasResolver(store, directory).resolve("@bonsen") is None
