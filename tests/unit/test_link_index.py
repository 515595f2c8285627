from __future__ import annotations

import pytest

from csv_link_editor.engine.link_index import (
    LinkIndex,
    build_link_index,
    find_next_link_row,
    find_prev_link_row,
)

ROWS = [
    {"Content": '<a href="/0">0</a>', "Content 2": ""},
    {"Content": "plain", "Content 2": ""},
    {"Content": "", "Content 2": "<a href='/2'>2</a>"},
    {"Content": '<a href="/3">3</a>', "Content 2": '<a href="/3b">3b</a>'},
    {"Content": "<a>no href</a>", "Content 2": ""},
]


def test_build_scans_all_link_columns():
    assert build_link_index(ROWS, ["Content", "Content 2"]) == [0, 2, 3]


def test_build_single_column():
    assert build_link_index(ROWS, ["Content 2"]) == [2, 3]


def test_row_with_two_link_cells_appears_once():
    assert build_link_index(ROWS, ["Content", "Content 2"]).count(3) == 1


def test_build_without_columns_is_empty():
    assert build_link_index(ROWS, []) == []


def test_build_accepts_position_pairs():
    pairs = [(10, ROWS[0]), (11, ROWS[1]), (12, ROWS[2])]
    assert build_link_index(pairs, ["Content", "Content 2"]) == [10, 12]


def test_missing_column_value_is_ignored():
    assert build_link_index([{"Other": "x"}], ["Content"]) == []


@pytest.mark.parametrize(
    "from_position,expected",
    [(-1, 0), (0, 2), (1, 2), (2, 3), (3, None), (100, None)],
)
def test_find_next(from_position, expected):
    assert find_next_link_row([0, 2, 3], from_position) == expected


@pytest.mark.parametrize(
    "from_position,expected",
    [(5, 3), (3, 2), (2, 0), (1, 0), (0, None), (-1, None)],
)
def test_find_prev(from_position, expected):
    assert find_prev_link_row([0, 2, 3], from_position) == expected


def test_find_on_empty_index():
    assert find_next_link_row([], -1) is None
    assert find_prev_link_row([], 10) is None


class TestLinkIndex:
    def test_empty(self):
        idx = LinkIndex.empty()
        assert len(idx) == 0
        assert idx.columns == ()
        assert idx.next_row(-1) is None

    def test_build_and_navigate(self):
        idx = LinkIndex.build(ROWS, ["Content", "Content 2"])
        assert idx.positions == (0, 2, 3)
        assert idx.columns == ("Content", "Content 2")
        assert idx.next_row(0) == 2
        assert idx.prev_row(len(ROWS)) == 3
        assert 2 in idx
        assert 1 not in idx

    def test_index_is_sorted_and_unique(self):
        idx = LinkIndex.build(ROWS * 3, ["Content", "Content 2"])
        assert list(idx.positions) == sorted(set(idx.positions))
