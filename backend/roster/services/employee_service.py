"""Employee record service: CRUD, paged search and roster statistics."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from roster.core.config import Settings
from roster.core.exceptions import ConflictError, NotFoundError
from roster.models.employee import (
    ContractType,
    EmployeeCreate,
    EmployeeRecord,
    EmployeeResponse,
    EmployeeStats,
    EmployeeUpdate,
    EmploymentBasis,
)
from roster.models.query import EmployeePage, SearchParams, SortSpec
from roster.repositories.base import DuplicateEmailError, EmployeeRepository
from roster.repositories.cosmos import CosmosEmployeeRepository
from roster.repositories.memory import InMemoryEmployeeRepository
from roster.services import query_engine
from roster.services.status_engine import enforce_employment_status

logger = logging.getLogger(__name__)


class EmployeeService:
    def __init__(
        self,
        repository: EmployeeRepository | None = None,
        today: Callable[[], date] = date.today,
        default_page_size: int = 10,
    ) -> None:
        self.repository: EmployeeRepository | None = repository
        self.today = today
        self.default_page_size = default_page_size
        self.initialized: bool = repository is not None

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        self.default_page_size = settings.DEFAULT_PAGE_SIZE
        if settings.COSMOS_DB_ENDPOINT and settings.COSMOS_DB_KEY:
            self.repository = CosmosEmployeeRepository.from_settings(settings)
        else:
            logger.warning("Cosmos DB credentials missing, using in-memory employee store")
            self.repository = InMemoryEmployeeRepository()
        self.initialized = True
        logger.info("EmployeeService initialized (store=%s)", type(self.repository).__name__)

    async def close(self) -> None:
        if self.repository:
            await self.repository.close()
            self.repository = None
            self.initialized = False

    @property
    def store(self) -> EmployeeRepository:
        if self.repository is None:
            raise RuntimeError("EmployeeService not initialized")
        return self.repository

    async def _load(self, employee_id: str) -> EmployeeRecord:
        record = await self.store.find_by_id(employee_id)
        if record is None:
            raise NotFoundError(employee_id)
        return record

    async def create(self, payload: EmployeeCreate) -> EmployeeResponse:
        changes = payload.model_dump()
        if payload.ongoing is None:
            # Not supplied: the status engine derives it from the finish date.
            del changes["ongoing"]

        candidate = EmployeeRecord(id="", ongoing=False, **{k: v for k, v in changes.items() if k != "ongoing"})
        candidate = enforce_employment_status(candidate, changes)

        try:
            saved = await self.store.insert(candidate)
        except DuplicateEmailError as err:
            logger.warning("Rejected new employee: %s", err)
            raise ConflictError(str(err)) from err

        logger.info("Created employee %s", saved.id)
        return EmployeeResponse.from_record(saved)

    async def get_by_id(self, employee_id: str) -> EmployeeResponse:
        return EmployeeResponse.from_record(await self._load(employee_id))

    async def list_all(self) -> list[EmployeeResponse]:
        records = query_engine.sort_records(await self.store.find_all(), SortSpec())
        return [EmployeeResponse.from_record(r) for r in records]

    async def list_page(self, params: SearchParams) -> EmployeePage:
        criteria, sort, page = query_engine.normalize(params, self.default_page_size)
        records, total = await self.store.find_page(criteria, sort, page, self.today())
        return query_engine.build_page(records, total, page)

    async def update(self, employee_id: str, patch: EmployeeUpdate) -> EmployeeResponse:
        current = await self._load(employee_id)
        changes = patch.changes()

        # Work on a copy; the stored record is untouched until validation passes.
        candidate = enforce_employment_status(current.model_copy(update=changes), changes)

        try:
            saved = await self.store.replace(candidate)
        except DuplicateEmailError as err:
            logger.warning("Rejected update of employee %s: %s", employee_id, err)
            raise ConflictError(str(err)) from err

        logger.info("Updated employee %s (%s)", employee_id, ", ".join(sorted(changes)) or "no changes")
        return EmployeeResponse.from_record(saved)

    async def delete(self, employee_id: str) -> None:
        if not await self.store.delete_by_id(employee_id):
            raise NotFoundError(employee_id)
        logger.info("Deleted employee %s", employee_id)

    async def stats(self) -> EmployeeStats:
        today = self.today()
        stats = EmployeeStats()
        for record in await self.store.find_all():
            active = query_engine.is_active(record, today)
            full_time = record.employment_basis is EmploymentBasis.FULL_TIME

            stats.total_employees += 1
            if active:
                stats.active_count += 1
            else:
                stats.inactive_count += 1

            if full_time:
                stats.full_time_count += 1
                if active:
                    stats.active_full_time_count += 1
                else:
                    stats.inactive_full_time_count += 1
            else:
                stats.part_time_count += 1
                if active:
                    stats.active_part_time_count += 1
                else:
                    stats.inactive_part_time_count += 1

            if record.contract_type is ContractType.PERMANENT:
                stats.permanent_count += 1
            else:
                stats.contract_count += 1

            stats.role_counts[record.role] += 1
        return stats

    async def check_connection(self) -> bool:
        if self.repository is None:
            return False
        return await self.repository.check_connection()


employee_service = EmployeeService()
