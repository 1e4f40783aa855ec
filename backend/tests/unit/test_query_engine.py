from __future__ import annotations

from datetime import date

import pytest

from roster.models.employee import ContractType, EmploymentBasis
from roster.models.query import (
    EmployeeCriteria,
    PageRequest,
    SearchParams,
    SortDirection,
    SortField,
    SortSpec,
)
from roster.services import query_engine
from tests.conftest import make_record

TODAY = date(2025, 6, 1)


def _roster():
    return [
        make_record("3", "John", "Doe", email="c@x.com", start_date=date(2023, 1, 15)),
        make_record(
            "1",
            "Sarah",
            "Smith",
            email="a@x.com",
            contract_type=ContractType.CONTRACT,
            employment_basis=EmploymentBasis.PART_TIME,
            start_date=date(2024, 2, 1),
            finish_date=date(2025, 6, 1),
        ),
        make_record(
            "2",
            "Michael",
            "Wong",
            email="b@x.com",
            contract_type=ContractType.CONTRACT,
            start_date=date(2024, 1, 1),
            finish_date=date(2024, 12, 31),
        ),
        make_record("4", "johanna", "Adams", email="D@x.com", start_date=date(2022, 5, 9)),
    ]


def _ids(page):
    return [e.id for e in page.content]


def _run(criteria=None, sort=None, page=None, records=None):
    return query_engine.query(
        records if records is not None else _roster(),
        criteria or EmployeeCriteria(),
        sort or SortSpec(),
        page or PageRequest(page=0, size=10),
        TODAY,
    )


def test_no_criteria_returns_everyone_sorted_by_first_name():
    page = _run()
    assert [e.first_name for e in page.content] == ["johanna", "John", "Michael", "Sarah"]
    assert page.total_elements == 4


def test_name_token_matches_first_or_last_name_case_insensitively():
    assert _ids(_run(EmployeeCriteria(name="JOH"))) == ["4", "3"]
    assert _ids(_run(EmployeeCriteria(name="wong"))) == ["2"]
    assert _ids(_run(EmployeeCriteria(name="zzz"))) == []


def test_criteria_are_combined_with_and():
    criteria = EmployeeCriteria(contract_type=ContractType.CONTRACT, employment_basis=EmploymentBasis.FULL_TIME)
    assert _ids(_run(criteria)) == ["2"]


def test_active_filter_uses_finish_date():
    # Sarah finishes today and still counts as active
    assert _ids(_run(EmployeeCriteria(ongoing=True))) == ["4", "3", "1"]
    assert _ids(_run(EmployeeCriteria(ongoing=False))) == ["2"]


def test_ongoing_flag_with_past_finish_date_counts_as_inactive():
    anomaly = make_record("9", "Zed", "Anomaly", finish_date=date(2020, 1, 1), ongoing=True)
    page = _run(EmployeeCriteria(ongoing=False), records=[anomaly])
    assert _ids(page) == ["9"]


def test_inactive_scenario_returns_only_michael_wong():
    records = [
        make_record("1", "John", "Doe", start_date=date(2023, 1, 15)),
        make_record("2", "Sarah", "Smith", start_date=date(2024, 2, 1), finish_date=date(2025, 2, 1)),
        make_record("3", "Michael", "Wong", start_date=date(2024, 1, 1), finish_date=date(2024, 12, 31)),
    ]
    page = query_engine.query(
        records, EmployeeCriteria(ongoing=False), SortSpec(), PageRequest(), date(2025, 1, 20)
    )
    assert [(e.first_name, e.last_name) for e in page.content] == [("Michael", "Wong")]


def test_email_sort_descending():
    records = [
        make_record("1", "A", "One", email="b@x"),
        make_record("2", "B", "Two", email="a@x"),
        make_record("3", "C", "Three", email="c@x"),
    ]
    sort = SortSpec(field=SortField.EMAIL, direction=SortDirection.DESC)
    page = _run(sort=sort, records=records)
    assert [e.email for e in page.content] == ["c@x", "b@x", "a@x"]


def test_start_date_sort_is_chronological():
    page = _run(sort=SortSpec(field=SortField.START_DATE))
    assert _ids(page) == ["4", "3", "2", "1"]


def test_contract_type_sort_breaks_ties_by_id_in_both_directions():
    asc = _run(sort=SortSpec(field=SortField.CONTRACT_TYPE))
    desc = _run(sort=SortSpec(field=SortField.CONTRACT_TYPE, direction=SortDirection.DESC))
    assert _ids(asc) == ["1", "2", "3", "4"]
    assert _ids(desc) == ["3", "4", "1", "2"]


def test_duplicate_sort_keys_are_ordered_by_id():
    records = [make_record(str(i), "Sam", f"Last{i}", email=f"s{i}@x.com") for i in (5, 2, 9, 1)]
    assert _ids(_run(records=records)) == ["1", "2", "5", "9"]


def test_page_size_ten_over_three_records():
    records = _roster()[:3]
    first = _run(page=PageRequest(page=0, size=10), records=records)
    second = _run(page=PageRequest(page=1, size=10), records=records)

    assert len(first.content) == 3
    assert first.total_pages == 1
    assert first.first is True and first.last is True
    assert second.content == []
    assert second.total_pages == 1
    assert second.number_of_elements == 0


def test_huge_page_size_still_counts_one_page():
    page = _run(page=PageRequest(page=0, size=10**400))

    assert len(page.content) == 4
    assert page.total_pages == 1
    assert page.last is True


def test_empty_population_has_zero_pages():
    page = _run(records=[])
    assert page.total_elements == 0
    assert page.total_pages == 0
    assert page.content == []


@pytest.mark.parametrize("size", [1, 2, 3, 4, 5])
def test_concatenated_pages_reproduce_filtered_population(size):
    everyone = _ids(_run())
    first = _run(page=PageRequest(page=0, size=size))

    collected: list[str] = []
    for index in range(first.total_pages):
        page = _run(page=PageRequest(page=index, size=size))
        assert len(page.content) <= size
        assert page.content
        collected.extend(_ids(page))

    assert collected == everyone
    assert _run(page=PageRequest(page=first.total_pages, size=size)).content == []


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("email", SortField.EMAIL),
        ("EMAIL", SortField.EMAIL),
        ("lastName", SortField.LAST_NAME),
        ("last_name", SortField.LAST_NAME),
        ("START_DATE", SortField.START_DATE),
        ("contractType", SortField.CONTRACT_TYPE),
        ("hoursPerWeek", SortField.FIRST_NAME),
        ("id; DROP TABLE employees", SortField.FIRST_NAME),
        ("", SortField.FIRST_NAME),
        (None, SortField.FIRST_NAME),
    ],
)
def test_parse_sort_field(raw, expected):
    assert query_engine.parse_sort_field(raw) is expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("desc", SortDirection.DESC),
        ("DESCENDING", SortDirection.DESC),
        ("asc", SortDirection.ASC),
        ("sideways", SortDirection.ASC),
        (None, SortDirection.ASC),
    ],
)
def test_parse_sort_direction(raw, expected):
    assert query_engine.parse_sort_direction(raw) is expected


@pytest.mark.parametrize("raw", ["ALL", "TEMPORARY", "", "  ", None, "PERMANENT_ISH"])
def test_unknown_contract_type_filter_has_no_effect(raw):
    criteria, _, _ = query_engine.normalize(SearchParams(contract_type=raw))
    assert criteria.contract_type is None
    assert _ids(_run(criteria)) == _ids(_run())


def test_variant_parsing_is_case_insensitive():
    assert query_engine.parse_variant(ContractType, "permanent") is ContractType.PERMANENT
    assert query_engine.parse_variant(EmploymentBasis, " part_time ") is EmploymentBasis.PART_TIME


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("true", True), ("FALSE", False), (True, True), ("maybe", None), (None, None)],
)
def test_parse_flag(raw, expected):
    assert query_engine.parse_flag(raw) is expected


@pytest.mark.parametrize(
    ("page", "size", "expected"),
    [
        (None, None, (0, 10)),
        ("2", "5", (2, 5)),
        (0, 0, (0, 1)),
        (-3, -7, (0, 1)),
        ("abc", "xyz", (0, 10)),
    ],
)
def test_page_request_is_clamped(page, size, expected):
    request = query_engine.page_request(page, size)
    assert (request.page, request.size) == expected


def test_normalize_strips_blank_name():
    criteria, sort, page = query_engine.normalize(
        SearchParams(name="   ", sort_by="email", sort_direction="desc", size="3")
    )
    assert criteria.name is None
    assert sort == SortSpec(field=SortField.EMAIL, direction=SortDirection.DESC)
    assert page == PageRequest(page=0, size=3)
