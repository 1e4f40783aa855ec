"""Query models: raw search parameters, normalized criteria and page results."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from roster.models.employee import (
    CamelModel,
    ContractType,
    EmployeeResponse,
    EmploymentBasis,
)


class SearchParams(BaseModel):
    """Search input exactly as the caller sent it. Nothing here is trusted."""

    name: str | None = None
    contract_type: str | None = None
    employment_basis: str | None = None
    ongoing: str | bool | None = None
    sort_by: str | None = None
    sort_direction: str | None = None
    page: str | int | None = None
    size: str | int | None = None


class SortField(str, Enum):
    FIRST_NAME = "firstName"
    LAST_NAME = "lastName"
    EMAIL = "email"
    START_DATE = "startDate"
    CONTRACT_TYPE = "contractType"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class EmployeeCriteria(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str | None = None
    contract_type: ContractType | None = None
    employment_basis: EmploymentBasis | None = None
    ongoing: bool | None = None


class SortSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: SortField = SortField.FIRST_NAME
    direction: SortDirection = SortDirection.ASC


class PageRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    page: int = 0
    size: int = 10

    @property
    def offset(self) -> int:
        return self.page * self.size


class EmployeePage(CamelModel):
    """One page of a filtered, sorted employee listing."""

    content: list[EmployeeResponse]
    total_elements: int
    total_pages: int
    number: int
    size: int
    number_of_elements: int
    first: bool
    last: bool
