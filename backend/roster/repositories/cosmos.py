"""Cosmos DB employee store.

Documents are stored with camelCase keys, partitioned on ``/id``. Each
document also carries a ``sortKeys`` object with lowercased copies of the
text sort fields, because Cosmos SQL cannot order case-insensitively. Paged
queries order by two properties and need a composite index per sort field,
``(<field> ASC, id ASC)`` and ``(<field> DESC, id ASC)``.

Email uniqueness is checked with a lookup on ``sortKeys.email`` before each
write. Unique key policies are scoped to a logical partition, so with one
document per partition the container cannot enforce it itself.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any
from uuid import uuid4

from azure.cosmos.aio import CosmosClient
from azure.cosmos.exceptions import CosmosResourceNotFoundError

from roster.core.config import Settings
from roster.models.employee import EmployeeRecord
from roster.models.query import EmployeeCriteria, PageRequest, SortDirection, SortField, SortSpec
from roster.repositories.base import DuplicateEmailError

logger = logging.getLogger(__name__)

# Allow-listed ORDER BY paths. Raw caller input never reaches the query text.
_ORDER_PATHS: dict[SortField, str] = {
    SortField.FIRST_NAME: "c.sortKeys.firstName",
    SortField.LAST_NAME: "c.sortKeys.lastName",
    SortField.EMAIL: "c.sortKeys.email",
    SortField.START_DATE: "c.startDate",
    SortField.CONTRACT_TYPE: "c.contractType",
}

Parameters = list[dict[str, Any]]


def build_filter_clause(criteria: EmployeeCriteria, today: date) -> tuple[str, Parameters]:
    clauses: list[str] = []
    params: Parameters = []

    if criteria.name:
        clauses.append("(CONTAINS(c.firstName, @name, true) OR CONTAINS(c.lastName, @name, true))")
        params.append({"name": "@name", "value": criteria.name})

    if criteria.contract_type is not None:
        clauses.append("c.contractType = @contractType")
        params.append({"name": "@contractType", "value": criteria.contract_type.value})

    if criteria.employment_basis is not None:
        clauses.append("c.employmentBasis = @employmentBasis")
        params.append({"name": "@employmentBasis", "value": criteria.employment_basis.value})

    if criteria.ongoing is not None:
        # ISO dates compare chronologically as strings
        if criteria.ongoing:
            clauses.append("(NOT IS_DEFINED(c.finishDate) OR IS_NULL(c.finishDate) OR c.finishDate >= @today)")
        else:
            clauses.append("(IS_DEFINED(c.finishDate) AND NOT IS_NULL(c.finishDate) AND c.finishDate < @today)")
        params.append({"name": "@today", "value": today.isoformat()})

    if not clauses:
        return "", params
    return " WHERE " + " AND ".join(clauses), params


def build_page_query(
    criteria: EmployeeCriteria,
    sort: SortSpec,
    page: PageRequest,
    today: date,
) -> tuple[str, Parameters]:
    where, params = build_filter_clause(criteria, today)
    direction = "DESC" if sort.direction is SortDirection.DESC else "ASC"
    query = (
        f"SELECT * FROM c{where} "
        f"ORDER BY {_ORDER_PATHS[sort.field]} {direction}, c.id ASC "
        "OFFSET @skip LIMIT @limit"
    )
    params = params + [
        {"name": "@skip", "value": page.offset},
        {"name": "@limit", "value": page.size},
    ]
    return query, params


def build_count_query(criteria: EmployeeCriteria, today: date) -> tuple[str, Parameters]:
    where, params = build_filter_clause(criteria, today)
    return f"SELECT VALUE COUNT(1) FROM c{where}", params


def to_document(record: EmployeeRecord) -> dict[str, Any]:
    doc = record.model_dump(mode="json", by_alias=True)
    doc["sortKeys"] = {
        "firstName": record.first_name.lower(),
        "lastName": record.last_name.lower(),
        "email": record.email.lower(),
    }
    return doc


def from_document(doc: dict[str, Any]) -> EmployeeRecord:
    return EmployeeRecord.model_validate(doc)


class CosmosEmployeeRepository:
    def __init__(self, container: Any, client: CosmosClient | None = None) -> None:
        self.container = container
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> CosmosEmployeeRepository:
        client = CosmosClient(settings.COSMOS_DB_ENDPOINT, settings.COSMOS_DB_KEY)
        db = client.get_database_client(settings.COSMOS_DB_DATABASE)
        container = db.get_container_client(settings.COSMOS_DB_EMPLOYEES_CONTAINER)
        logger.info("Cosmos employee store ready (container=%s)", settings.COSMOS_DB_EMPLOYEES_CONTAINER)
        return cls(container, client)

    async def _query(self, query: str, params: Parameters | None = None) -> list[Any]:
        items: list[Any] = []
        async for item in self.container.query_items(
            query=query,
            parameters=params or [],
            enable_cross_partition_query=True,
        ):
            items.append(item)
        return items

    async def _email_owner(self, email: str) -> str | None:
        owners = await self._query(
            "SELECT VALUE c.id FROM c WHERE c.sortKeys.email = @email",
            [{"name": "@email", "value": email.lower()}],
        )
        return owners[0] if owners else None

    async def insert(self, record: EmployeeRecord) -> EmployeeRecord:
        if await self._email_owner(record.email) is not None:
            raise DuplicateEmailError(record.email)

        now = datetime.now(timezone.utc)
        stored = record.model_copy(update={"id": str(uuid4()), "created_at": now, "updated_at": now})
        await self.container.create_item(body=to_document(stored))
        return stored

    async def replace(self, record: EmployeeRecord) -> EmployeeRecord:
        owner = await self._email_owner(record.email)
        if owner is not None and owner != record.id:
            raise DuplicateEmailError(record.email)

        stored = record.model_copy(update={"updated_at": datetime.now(timezone.utc)})
        await self.container.replace_item(item=record.id, body=to_document(stored))
        return stored

    async def find_by_id(self, employee_id: str) -> EmployeeRecord | None:
        try:
            doc = await self.container.read_item(item=employee_id, partition_key=employee_id)
        except CosmosResourceNotFoundError:
            return None
        return from_document(doc)

    async def find_all(self) -> list[EmployeeRecord]:
        return [from_document(doc) for doc in await self._query("SELECT * FROM c")]

    async def find_page(
        self,
        criteria: EmployeeCriteria,
        sort: SortSpec,
        page: PageRequest,
        today: date,
    ) -> tuple[list[EmployeeRecord], int]:
        count_query, count_params = build_count_query(criteria, today)
        counts = await self._query(count_query, count_params)
        total = int(counts[0]) if counts else 0
        if page.offset >= total:
            return [], total

        page_query, page_params = build_page_query(criteria, sort, page, today)
        docs = await self._query(page_query, page_params)
        return [from_document(doc) for doc in docs], total

    async def delete_by_id(self, employee_id: str) -> bool:
        try:
            await self.container.delete_item(item=employee_id, partition_key=employee_id)
        except CosmosResourceNotFoundError:
            return False
        return True

    async def check_connection(self) -> bool:
        try:
            await self._query("SELECT VALUE COUNT(1) FROM c")
            return True
        except Exception:
            logger.exception("Cosmos DB connection check failed")
            return False

    async def close(self) -> None:
        if self.client:
            await self.client.close()
            self.client = None
