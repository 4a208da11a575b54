"""Tests for the keyword index.

Covers:
- Tokenizing and indexing names
- Multi-token intersection queries
- Renumbering on removal
"""
from __future__ import annotations

import pytest

from portfolio.keyword_index import KeywordIndex, tokenize


def make_index(*names: str) -> KeywordIndex:
    """Helper to index names at positions 0..n-1."""
    idx = KeywordIndex()
    for pos, name in enumerate(names):
        idx.index(name, pos)
    return idx


class TestTokenize:
    def test_lowercases_and_splits_on_whitespace(self):
        assert tokenize("Growth  Fund\tUSA") == ["growth", "fund", "usa"]

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_blank_has_no_tokens(self, text):
        assert tokenize(text) == []


class TestIndexAndLookup:
    def test_lookup_returns_positions_in_order(self):
        idx = make_index("Growth Fund", "Bank", "International Bank Fund")
        assert idx.lookup("fund") == [0, 2]
        assert idx.lookup("bank") == [1, 2]

    def test_lookup_is_case_insensitive(self):
        idx = make_index("Growth Fund")
        assert idx.lookup("FUND") == [0]

    def test_unknown_token_is_empty(self):
        assert make_index("Growth Fund").lookup("bond") == []

    def test_lookup_returns_a_copy(self):
        idx = make_index("Growth Fund")
        idx.lookup("fund").append(99)
        assert idx.lookup("fund") == [0]


class TestQuery:
    def test_intersection(self):
        idx = make_index("Growth Fund", "International Bank Fund")
        assert idx.query(["fund"]) == {0, 1}
        assert idx.query(["growth", "fund"]) == {0}

    def test_unknown_token_empties_result(self):
        idx = make_index("Growth Fund", "International Bank Fund")
        assert idx.query(["fund", "bond"]) == set()

    def test_empty_token_list_is_rejected(self):
        with pytest.raises(ValueError):
            make_index("Growth Fund").query([])


class TestRemoveAt:
    """Removal drops the position and shifts later ones down."""

    def test_renumbers_later_positions(self):
        idx = make_index("Alpha Fund", "Beta Fund", "Gamma Fund", "Beta Bank")

        idx.remove_at(1)

        assert idx.lookup("fund") == [0, 1]
        assert idx.lookup("gamma") == [1]
        assert idx.lookup("beta") == [2]
        assert idx.lookup("bank") == [2]
        assert idx.lookup("alpha") == [0]

    def test_deletes_emptied_buckets(self):
        idx = make_index("Alpha Fund", "Beta Fund")

        idx.remove_at(0)

        assert "alpha" not in idx
        assert idx.buckets() == {"fund": [0], "beta": [0]}

    def test_remove_last_position(self):
        idx = make_index("Alpha Fund", "Beta Fund")
        idx.remove_at(1)
        assert idx.buckets() == {"alpha": [0], "fund": [0]}
