from __future__ import annotations

from datetime import timezone

from archive.models.domain import RawDocument
from archive.services.sections import (
    filter_by_section,
    parse_pub_date,
    section_terms,
    sort_by_date_descending,
)


def _doc(doc_id: str, section: str | None = None, pub_date: str | None = None) -> RawDocument:
    return RawDocument.model_validate({"_id": doc_id, "section_name": section, "pub_date": pub_date})


def test_general_is_identity():
    docs = [_doc("a", "Sports"), _doc("b", None), _doc("c", "Arts")]
    assert filter_by_section(docs, "GENERAL") is docs
    assert filter_by_section([], "GENERAL") == []


def test_science_includes_health_excludes_sports():
    docs = [_doc("h", "Health"), _doc("s", "Sports"), _doc("c", "Climate"), _doc("x", "Science")]
    assert [d.id for d in filter_by_section(docs, "SCIENCE")] == ["h", "c", "x"]


def test_match_is_case_insensitive_substring():
    docs = [_doc("a", "TECHNOLOGY"), _doc("b", "Personal tech reviews"), _doc("c", "World")]
    assert [d.id for d in filter_by_section(docs, "TECHNOLOGY")] == ["a", "b"]


def test_unknown_section_matches_its_literal():
    docs = [_doc("a", "World"), _doc("b", "U.S."), _doc("c", "world news")]
    assert section_terms("World") == ("World",)
    assert [d.id for d in filter_by_section(docs, "World")] == ["a", "c"]


def test_lowercase_tag_is_literal():
    docs = [_doc("a", "Science"), _doc("b", "Health")]
    assert [d.id for d in filter_by_section(docs, "science")] == ["a"]


def test_missing_section_name_never_matches_specific_section():
    docs = [_doc("a", None), _doc("b", "")]
    assert filter_by_section(docs, "SPORTS") == []


def test_sort_most_recent_first():
    docs = [
        _doc("old", pub_date="2024-01-01T00:00:00+0000"),
        _doc("new", pub_date="2024-01-31T23:00:00+0000"),
        _doc("mid", pub_date="2024-01-15T12:00:00Z"),
    ]
    assert [d.id for d in sort_by_date_descending(docs)] == ["new", "mid", "old"]


def test_sort_respects_offsets():
    docs = [
        _doc("utc", pub_date="2024-01-05T10:00:00+0000"),
        _doc("earlier", pub_date="2024-01-05T10:30:00+0100"),
    ]
    assert [d.id for d in sort_by_date_descending(docs)] == ["utc", "earlier"]


def test_unparsable_dates_sort_last_in_input_order():
    docs = [
        _doc("bad1", pub_date="not a date"),
        _doc("ok", pub_date="2024-01-02"),
        _doc("none"),
        _doc("bad2", pub_date="32/13/2024"),
    ]
    assert [d.id for d in sort_by_date_descending(docs)] == ["ok", "bad1", "none", "bad2"]


def test_sort_is_stable_and_idempotent():
    docs = [
        _doc("a", pub_date="2024-01-02T00:00:00+0000"),
        _doc("b", pub_date="2024-01-02T00:00:00+0000"),
        _doc("c", pub_date="2024-01-03T00:00:00+0000"),
        _doc("d"),
    ]
    once = sort_by_date_descending(docs)
    twice = sort_by_date_descending(once)
    assert [d.id for d in once] == ["c", "a", "b", "d"]
    assert [d.id for d in twice] == [d.id for d in once]


def test_parse_pub_date_variants():
    assert parse_pub_date("2024-01-05T10:00:00+0000").tzinfo is not None
    assert parse_pub_date("2024-01-05T10:00:00.250+0000").microsecond == 250000
    naive = parse_pub_date("2024-01-05")
    assert naive is not None and naive.tzinfo == timezone.utc
    assert parse_pub_date("") is None
    assert parse_pub_date(None) is None
    assert parse_pub_date("yesterday") is None
