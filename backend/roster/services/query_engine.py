"""Filtering, ordering and paging of employee records.

Raw search input is normalized first and never rejected: unknown variants
mean "no filter", unknown sort fields mean ``firstName`` and unknown
directions mean ascending. The normalized criteria are evaluated in memory
here and translated to Cosmos SQL by the Cosmos repository.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import date
from enum import Enum
from typing import Any, TypeVar

from roster.models.employee import (
    ContractType,
    EmployeeRecord,
    EmployeeResponse,
    EmploymentBasis,
)
from roster.models.query import (
    EmployeeCriteria,
    EmployeePage,
    PageRequest,
    SearchParams,
    SortDirection,
    SortField,
    SortSpec,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

Predicate = Callable[[EmployeeRecord], bool]

# Keys are lowercased with underscores removed, so "first_name", "firstName"
# and "FIRSTNAME" all resolve to the same field.
_SORT_FIELDS: dict[str, SortField] = {
    "firstname": SortField.FIRST_NAME,
    "lastname": SortField.LAST_NAME,
    "email": SortField.EMAIL,
    "startdate": SortField.START_DATE,
    "contracttype": SortField.CONTRACT_TYPE,
}

_DESCENDING = {"desc", "descending"}
_TRUE = {"true", "1", "yes"}
_FALSE = {"false", "0", "no"}


# -------------------------
# normalization
# -------------------------
def parse_variant(enum_cls: type[E], raw: Any) -> E | None:
    if raw is None:
        return None
    if isinstance(raw, enum_cls):
        return raw
    key = str(raw).strip().upper()
    try:
        return enum_cls[key]
    except KeyError:
        if key and key != "ALL":
            logger.debug("Ignoring unknown %s filter %r", enum_cls.__name__, raw)
        return None


def parse_flag(raw: Any) -> bool | None:
    if raw is None or isinstance(raw, bool):
        return raw
    value = str(raw).strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    return None


def parse_sort_field(raw: Any) -> SortField:
    if raw is None:
        return SortField.FIRST_NAME
    key = str(raw).strip().replace("_", "").lower()
    return _SORT_FIELDS.get(key, SortField.FIRST_NAME)


def parse_sort_direction(raw: Any) -> SortDirection:
    if raw is not None and str(raw).strip().lower() in _DESCENDING:
        return SortDirection.DESC
    return SortDirection.ASC


def _to_int(raw: Any, default: int) -> int:
    if raw is None or isinstance(raw, bool):
        return default
    try:
        return int(str(raw).strip())
    except ValueError:
        return default


def page_request(page: Any, size: Any, default_size: int = 10) -> PageRequest:
    return PageRequest(
        page=max(0, _to_int(page, 0)),
        size=max(1, _to_int(size, default_size)),
    )


def normalize(
    params: SearchParams,
    default_size: int = 10,
) -> tuple[EmployeeCriteria, SortSpec, PageRequest]:
    name = params.name.strip() if params.name else None
    criteria = EmployeeCriteria(
        name=name or None,
        contract_type=parse_variant(ContractType, params.contract_type),
        employment_basis=parse_variant(EmploymentBasis, params.employment_basis),
        ongoing=parse_flag(params.ongoing),
    )
    sort = SortSpec(
        field=parse_sort_field(params.sort_by),
        direction=parse_sort_direction(params.sort_direction),
    )
    return criteria, sort, page_request(params.page, params.size, default_size)


# -------------------------
# filtering
# -------------------------
def is_active(record: EmployeeRecord, today: date) -> bool:
    return record.finish_date is None or record.finish_date >= today


def build_predicates(criteria: EmployeeCriteria, today: date) -> list[Predicate]:
    predicates: list[Predicate] = []

    if criteria.name:
        token = criteria.name.lower()
        predicates.append(
            lambda r: token in r.first_name.lower() or token in r.last_name.lower()
        )

    if criteria.contract_type is not None:
        contract_type = criteria.contract_type
        predicates.append(lambda r: r.contract_type == contract_type)

    if criteria.employment_basis is not None:
        basis = criteria.employment_basis
        predicates.append(lambda r: r.employment_basis == basis)

    if criteria.ongoing is True:
        predicates.append(lambda r: is_active(r, today))
    elif criteria.ongoing is False:
        predicates.append(lambda r: not is_active(r, today))

    return predicates


def filter_records(
    records: Iterable[EmployeeRecord],
    criteria: EmployeeCriteria,
    today: date,
) -> list[EmployeeRecord]:
    predicates = build_predicates(criteria, today)
    return [r for r in records if all(p(r) for p in predicates)]


# -------------------------
# ordering
# -------------------------
def sort_value(record: EmployeeRecord, field: SortField) -> Any:
    if field is SortField.LAST_NAME:
        return record.last_name.lower()
    if field is SortField.EMAIL:
        return record.email.lower()
    if field is SortField.START_DATE:
        return record.start_date
    if field is SortField.CONTRACT_TYPE:
        return record.contract_type.value
    return record.first_name.lower()


def sort_records(records: Iterable[EmployeeRecord], sort: SortSpec) -> list[EmployeeRecord]:
    # Two stable passes: ties on the sort field keep ascending id order in
    # both directions.
    by_id = sorted(records, key=lambda r: r.id)
    return sorted(
        by_id,
        key=lambda r: sort_value(r, sort.field),
        reverse=sort.direction is SortDirection.DESC,
    )


# -------------------------
# paging
# -------------------------
def build_page(
    content: Sequence[EmployeeRecord],
    total: int,
    page: PageRequest,
) -> EmployeePage:
    total_pages = -(-total // page.size)
    return EmployeePage(
        content=[EmployeeResponse.from_record(r) for r in content],
        total_elements=total,
        total_pages=total_pages,
        number=page.page,
        size=page.size,
        number_of_elements=len(content),
        first=page.page == 0,
        last=page.page >= total_pages - 1,
    )


def slice_page(
    records: Sequence[EmployeeRecord],
    page: PageRequest,
) -> list[EmployeeRecord]:
    return list(records[page.offset : page.offset + page.size])


def query(
    records: Iterable[EmployeeRecord],
    criteria: EmployeeCriteria,
    sort: SortSpec,
    page: PageRequest,
    today: date,
) -> EmployeePage:
    ordered = sort_records(filter_records(records, criteria, today), sort)
    return build_page(slice_page(ordered, page), len(ordered), page)
