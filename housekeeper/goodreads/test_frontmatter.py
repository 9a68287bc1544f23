from __future__ import annotations

import copy

import pytest

from housekeeper.goodreads.frontmatter import (
    FIELD_STRATEGIES,
    build_fresh_record,
    is_empty,
    merge_metadata,
    parse_int,
)
from housekeeper.goodreads.library_export import GOODREADS_HEADERS, GoodreadsBook


def _book(**overrides: str) -> GoodreadsBook:
    row = {header: "" for header in GOODREADS_HEADERS}
    row.update(
        {
            "Book Id": "7235533",
            "Title": "The Way of Kings (The Stormlight Archive, #1)",
            "Author": "Brandon Sanderson",
            "My Rating": "5",
            "Number of Pages": "1007",
            "Original Publication Year": "2010",
            "Date Read": "2023/05/14",
            "Exclusive Shelf": "read",
            "Read Count": "2",
        }
    )
    row.update({key.replace("_", " "): value for key, value in overrides.items()})
    return GoodreadsBook(**row)  # type: ignore[misc]


def test_shelf_fresh_value_always_wins() -> None:
    assert merge_metadata({"shelf": "to-read"}, {"shelf": "read"})["shelf"] == "to-read"


def test_shelf_kept_from_existing_when_fresh_lacks_it() -> None:
    assert merge_metadata({}, {"shelf": "read"})["shelf"] == "read"


def test_tags_string_is_unioned_with_fresh_list() -> None:
    merged = merge_metadata({"tags": ["books"]}, {"tags": "books fiction"})
    assert isinstance(merged["tags"], list)
    assert set(merged["tags"]) == {"books", "fiction"}
    assert len(merged["tags"]) == 2


def test_tags_string_split_on_any_whitespace() -> None:
    merged = merge_metadata({"tags": ["books"]}, {"tags": "  fantasy\tepic  "})
    assert set(merged["tags"]) == {"books", "fantasy", "epic"}


def test_tags_existing_list_wins_when_not_empty() -> None:
    merged = merge_metadata({"tags": ["books"]}, {"tags": ["reading"]})
    assert merged["tags"] == ["reading"]


def test_rating_uses_existing_value_when_present() -> None:
    assert merge_metadata({"rating": 3}, {"rating": 5})["rating"] == 5


@pytest.mark.parametrize(
    ("fresh", "existing", "expected"),
    [
        (3, "4", 4),
        (3, None, 3),
        (3, "", 3),
        ("2", 4.0, 4),
        (3, "not a number", 3),
    ],
)
def test_rating_is_coerced_to_int(fresh: object, existing: object, expected: int) -> None:
    assert merge_metadata({"rating": fresh}, {"rating": existing})["rating"] == expected


def test_uncoercible_hand_edited_rating_is_kept() -> None:
    assert merge_metadata({"rating": "bad"}, {"rating": "five"})["rating"] == "five"
    assert merge_metadata({"title": "Emma"}, {"rating": "five"}) == {"title": "Emma", "rating": "five"}


@pytest.mark.parametrize("existing", [None, ""])
def test_uncoercible_rating_without_existing_value_is_dropped(existing: object) -> None:
    merged = merge_metadata({"title": "Emma", "rating": "bad"}, {"rating": existing})

    assert "rating" not in merged
    assert merge_metadata({"title": "Emma", "rating": "bad"}, merged) == merged


@pytest.mark.parametrize("empty", [None, "", []])
def test_generic_key_takes_fresh_value_when_existing_empty(empty: object) -> None:
    assert merge_metadata({"year": 2010}, {"year": empty})["year"] == 2010


def test_generic_key_keeps_existing_value() -> None:
    assert merge_metadata({"title": "Fresh"}, {"title": "Edited by hand"})["title"] == "Edited by hand"


def test_empty_sequence_adopts_fresh_value() -> None:
    assert merge_metadata({"topics": []}, {"topics": []})["topics"] == []
    assert merge_metadata({"topics": ["[[Fantasy]]"]}, {"topics": []})["topics"] == ["[[Fantasy]]"]


def test_sequence_with_blank_element_is_not_empty() -> None:
    assert merge_metadata({"aliases": ["Fresh"]}, {"aliases": [""]})["aliases"] == [""]


def test_existing_only_keys_are_preserved_in_order_after_fresh_keys() -> None:
    merged = merge_metadata(
        {"title": "A", "year": 2001},
        {"notes": "", "year": None, "status": "owned"},
    )
    assert list(merged) == ["title", "year", "notes", "status"]
    assert merged["notes"] == ""
    assert merged["status"] == "owned"


def test_merge_does_not_mutate_inputs() -> None:
    fresh = {"tags": ["books"], "topics": ["a"], "shelf": "read"}
    existing = {"tags": "books fiction", "topics": [], "aliases": ["x"]}
    fresh_before = copy.deepcopy(fresh)
    existing_before = copy.deepcopy(existing)

    merged = merge_metadata(fresh, existing)
    merged["topics"].append("b")
    merged["aliases"].append("y")

    assert fresh == fresh_before
    assert existing == existing_before


def test_merge_is_a_fixed_point_on_its_own_result() -> None:
    fresh = build_fresh_record(_book())
    existing = {"tags": "books owned", "rating": "4", "shelf": "to-read", "topics": [], "title": "Custom"}

    once = merge_metadata(fresh, existing)
    twice = merge_metadata(fresh, once)

    assert twice == once


def test_field_strategies_cover_special_keys() -> None:
    assert set(FIELD_STRATEGIES) == {"shelf", "tags", "rating"}


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, True), ("", True), ([], True), ((), True), ([""], False), (0, False), ("x", False)],
)
def test_is_empty(value: object, expected: bool) -> None:
    assert is_empty(value) is expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [("5", 5), (" 4.5 ", 4), ("-2", -2), (7, 7), (3.9, 3), ("", None), ("abc", None), (True, None), (None, None)],
)
def test_parse_int(value: object, expected: int | None) -> None:
    assert parse_int(value) == expected


def test_build_fresh_record_from_export_row() -> None:
    record = build_fresh_record(_book(Additional_Authors="Isaac Stewart, Ben McSweeney"))

    assert record == {
        "aliases": [],
        "tags": ["books"],
        "categories": ["[[Books]]"],
        "url": "https://www.goodreads.com/book/show/7235533",
        "title": "The Way of Kings",
        "series-name": "The Stormlight Archive",
        "series-number": "1",
        "author": ["[[Brandon Sanderson]]", "[[Isaac Stewart]]", "[[Ben McSweeney]]"],
        "shelf": "read",
        "rating": 5,
        "length": 1007,
        "year": 2010,
        "read-last": "2023-05-14",
        "read-count": 2,
        "topics": [],
    }


def test_build_fresh_record_omits_unparseable_numbers_and_defaults_read_count() -> None:
    record = build_fresh_record(
        _book(Number_of_Pages="", Original_Publication_Year="", Date_Read="", Read_Count="")
    )

    assert "length" not in record
    assert "year" not in record
    assert record["read-last"] == ""
    assert record["read-count"] == 0
