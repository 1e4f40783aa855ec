"""Employee models: stored record, write payloads and response projections."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

AU_MOBILE_PATTERN = r"^(\+?61|0)4\d{8}$"

# Fields a patch may explicitly clear with null; the rest ignore null.
NULLABLE_FIELDS: frozenset[str] = frozenset(
    {
        "middle_name",
        "mobile_number",
        "residential_address",
        "finish_date",
        "hours_per_week",
        "thumbnail_url",
    }
)


class ContractType(str, Enum):
    PERMANENT = "PERMANENT"
    CONTRACT = "CONTRACT"


class EmploymentBasis(str, Enum):
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"


class EmployeeRole(str, Enum):
    ADMIN = "ADMIN"
    HR = "HR"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"
    INTERN = "INTERN"
    CONTRACTOR = "CONTRACTOR"


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class _EmployeeInput(CamelModel):
    @field_validator(
        "middle_name",
        "mobile_number",
        "residential_address",
        "thumbnail_url",
        mode="before",
        check_fields=False,
    )
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("email", check_fields=False)
    @classmethod
    def _email_length(cls, value: str | None) -> str | None:
        if value is not None and len(value) > 200:
            raise ValueError("email must be at most 200 characters")
        return value


class EmployeeCreate(_EmployeeInput):
    """Request body for a new employee."""

    first_name: str = Field(..., min_length=1, max_length=200)
    middle_name: str | None = Field(default=None, max_length=200)
    last_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    mobile_number: str | None = Field(default=None, pattern=AU_MOBILE_PATTERN)
    residential_address: str | None = Field(default=None, max_length=255)
    contract_type: ContractType
    employment_basis: EmploymentBasis
    role: EmployeeRole = EmployeeRole.EMPLOYEE
    start_date: date
    finish_date: date | None = None
    ongoing: bool | None = None
    hours_per_week: int | None = Field(default=None, gt=0, le=168)
    thumbnail_url: str | None = Field(default=None, max_length=500)


class EmployeeUpdate(_EmployeeInput):
    """Partial update. Only fields present in the payload are applied."""

    first_name: str | None = Field(default=None, min_length=1, max_length=200)
    middle_name: str | None = Field(default=None, max_length=200)
    last_name: str | None = Field(default=None, min_length=1, max_length=200)
    email: EmailStr | None = None
    mobile_number: str | None = Field(default=None, pattern=AU_MOBILE_PATTERN)
    residential_address: str | None = Field(default=None, max_length=255)
    contract_type: ContractType | None = None
    employment_basis: EmploymentBasis | None = None
    role: EmployeeRole | None = None
    start_date: date | None = None
    finish_date: date | None = None
    ongoing: bool | None = None
    hours_per_week: int | None = Field(default=None, gt=0, le=168)
    thumbnail_url: str | None = Field(default=None, max_length=500)

    def changes(self) -> dict[str, object]:
        """Supplied fields, minus nulls sent for fields that cannot be cleared."""
        supplied = self.model_dump(include=self.model_fields_set)
        return {
            name: value
            for name, value in supplied.items()
            if value is not None or name in NULLABLE_FIELDS
        }


class EmployeeRecord(CamelModel):
    """Stored shape of an employee. Owned by the repositories."""

    id: str
    first_name: str
    middle_name: str | None = None
    last_name: str
    email: str
    mobile_number: str | None = None
    residential_address: str | None = None
    contract_type: ContractType
    employment_basis: EmploymentBasis
    role: EmployeeRole = EmployeeRole.EMPLOYEE
    start_date: date
    finish_date: date | None = None
    ongoing: bool
    hours_per_week: int | None = None
    thumbnail_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class EmployeeResponse(CamelModel):
    """Employee as returned to API callers."""

    id: str
    first_name: str
    middle_name: str | None = None
    last_name: str
    email: str
    mobile_number: str | None = None
    residential_address: str | None = None
    contract_type: ContractType
    employment_basis: EmploymentBasis
    role: EmployeeRole
    start_date: date
    finish_date: date | None = None
    ongoing: bool
    hours_per_week: int | None = None
    thumbnail_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_record(cls, record: EmployeeRecord) -> EmployeeResponse:
        return cls.model_validate(record.model_dump())


class EmployeeStats(CamelModel):
    """Roster head counts for the dashboard."""

    total_employees: int = 0
    active_count: int = 0
    inactive_count: int = 0
    full_time_count: int = 0
    part_time_count: int = 0
    permanent_count: int = 0
    contract_count: int = 0
    active_full_time_count: int = 0
    active_part_time_count: int = 0
    inactive_full_time_count: int = 0
    inactive_part_time_count: int = 0
    role_counts: dict[EmployeeRole, int] = Field(
        default_factory=lambda: {role: 0 for role in EmployeeRole}
    )
