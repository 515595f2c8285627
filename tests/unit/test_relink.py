from __future__ import annotations

from pathlib import Path

import pytest

from csv_link_editor.services.relink import RelinkError, load_href_mapping, relink_session

LINK_COLUMNS = ["Content", "Content 2"]


def test_relink_rewrites_matching_hrefs(session):
    result = relink_session(
        session,
        {"https://example.com/b": "https://example.org/b", "/c": "/c2", "/unused": "/x"},
        LINK_COLUMNS,
    )

    assert result.rows_scanned == 2
    assert result.links_rewritten == 2
    assert result.cells_updated == 1
    assert result.unmatched == ["/unused"]
    assert result.elapsed_seconds >= 0
    hrefs = [l.href for l in session.links_in_cell(2, "Content 2")]
    assert hrefs == ["https://example.org/b", "/c2"]
    # untouched cell keeps its value
    assert session.links_in_cell(0, "Content")[0].href == "https://example.com/a"


def test_relink_records_changes(session):
    relink_session(session, {"https://example.com/a": "/a"}, LINK_COLUMNS)
    (change,) = session.changes()
    assert (change.row, change.column) == (0, "Content")
    assert "https://example.com/a" in change.original
    assert change.current == '<p>See <a href="/a">A</a></p>'


def test_identity_mapping_counts_as_seen(session):
    result = relink_session(session, {"/c": "/c"}, LINK_COLUMNS)
    assert result.links_rewritten == 0
    assert result.unmatched == []
    assert session.changes() == []


def test_uses_designated_columns(session):
    session.designate_link_columns(["Content"])
    result = relink_session(session, {"/c": "/c2"})
    assert result.rows_scanned == 1
    assert result.unmatched == ["/c"]


def test_no_link_columns(session):
    with pytest.raises(RelinkError, match="no link columns"):
        relink_session(session, {"/c": "/c2"})


class TestLoadHrefMapping:
    def test_loads_mapping(self, tmp_path: Path):
        p = tmp_path / "map.yml"
        p.write_text('"/old": "/new"\nhttps://a.example/x: https://b.example/x\n', encoding="utf-8")
        assert load_href_mapping(p) == {"/old": "/new", "https://a.example/x": "https://b.example/x"}

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(RelinkError, match="not found"):
            load_href_mapping(tmp_path / "nope.yml")

    def test_not_a_mapping(self, tmp_path: Path):
        p = tmp_path / "map.yml"
        p.write_text("- /old\n", encoding="utf-8")
        with pytest.raises(RelinkError, match="mapping"):
            load_href_mapping(p)

    def test_non_string_values(self, tmp_path: Path):
        p = tmp_path / "map.yml"
        p.write_text('"/old": 3\n', encoding="utf-8")
        with pytest.raises(RelinkError, match="strings"):
            load_href_mapping(p)

    def test_invalid_yaml(self, tmp_path: Path):
        p = tmp_path / "map.yml"
        p.write_text("a: [\n", encoding="utf-8")
        with pytest.raises(RelinkError, match="invalid yaml"):
            load_href_mapping(p)
