from __future__ import annotations

from datetime import date
from typing import Protocol

from roster.models.employee import EmployeeRecord
from roster.models.query import EmployeeCriteria, PageRequest, SortSpec


class DuplicateEmailError(Exception):
    """The store already holds another employee with this email."""

    def __init__(self, email: str) -> None:
        super().__init__(f"Email '{email}' is already in use")
        self.email = email


class EmployeeRepository(Protocol):
    """Persistence contract for employee records.

    Stores assign ``id`` on insert and maintain ``created_at`` and
    ``updated_at``. Email uniqueness is enforced case-insensitively; a
    violation raises :class:`DuplicateEmailError`.
    """

    async def insert(self, record: EmployeeRecord) -> EmployeeRecord: ...

    async def replace(self, record: EmployeeRecord) -> EmployeeRecord: ...

    async def find_by_id(self, employee_id: str) -> EmployeeRecord | None: ...

    async def find_all(self) -> list[EmployeeRecord]: ...

    async def find_page(
        self,
        criteria: EmployeeCriteria,
        sort: SortSpec,
        page: PageRequest,
        today: date,
    ) -> tuple[list[EmployeeRecord], int]: ...

    async def delete_by_id(self, employee_id: str) -> bool: ...

    async def check_connection(self) -> bool: ...

    async def close(self) -> None: ...
