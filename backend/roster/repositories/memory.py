"""Process-local employee store. Used when no database is configured and in tests."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from uuid import uuid4

from roster.models.employee import EmployeeRecord
from roster.models.query import EmployeeCriteria, PageRequest, SortSpec
from roster.repositories.base import DuplicateEmailError
from roster.services import query_engine

logger = logging.getLogger(__name__)


class InMemoryEmployeeRepository:
    def __init__(self) -> None:
        self._records: dict[str, EmployeeRecord] = {}

    def _email_owner(self, email: str) -> str | None:
        key = email.lower()
        for record in self._records.values():
            if record.email.lower() == key:
                return record.id
        return None

    async def insert(self, record: EmployeeRecord) -> EmployeeRecord:
        if self._email_owner(record.email) is not None:
            raise DuplicateEmailError(record.email)

        now = datetime.now(timezone.utc)
        stored = record.model_copy(update={"id": str(uuid4()), "created_at": now, "updated_at": now})
        self._records[stored.id] = stored
        return stored

    async def replace(self, record: EmployeeRecord) -> EmployeeRecord:
        existing = self._records.get(record.id)
        if existing is None:
            raise KeyError(record.id)

        owner = self._email_owner(record.email)
        if owner is not None and owner != record.id:
            raise DuplicateEmailError(record.email)

        stored = record.model_copy(
            update={"created_at": existing.created_at, "updated_at": datetime.now(timezone.utc)}
        )
        self._records[stored.id] = stored
        return stored

    async def find_by_id(self, employee_id: str) -> EmployeeRecord | None:
        return self._records.get(employee_id)

    async def find_all(self) -> list[EmployeeRecord]:
        return list(self._records.values())

    async def find_page(
        self,
        criteria: EmployeeCriteria,
        sort: SortSpec,
        page: PageRequest,
        today: date,
    ) -> tuple[list[EmployeeRecord], int]:
        matches = query_engine.filter_records(self._records.values(), criteria, today)
        ordered = query_engine.sort_records(matches, sort)
        return query_engine.slice_page(ordered, page), len(ordered)

    async def delete_by_id(self, employee_id: str) -> bool:
        return self._records.pop(employee_id, None) is not None

    async def check_connection(self) -> bool:
        return True

    async def close(self) -> None:
        logger.debug("Discarding %d in-memory employee records", len(self._records))
        self._records.clear()
