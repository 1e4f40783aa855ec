from __future__ import annotations

from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

from roster.core.dependencies import get_employee_service
from roster.main import app
from roster.models.employee import (
    ContractType,
    EmployeeCreate,
    EmployeeRecord,
    EmployeeRole,
    EmploymentBasis,
)
from roster.repositories.memory import InMemoryEmployeeRepository
from roster.services.employee_service import EmployeeService

TODAY = date(2026, 3, 1)


def make_record(
    employee_id: str,
    first_name: str,
    last_name: str,
    *,
    email: str | None = None,
    contract_type: ContractType = ContractType.PERMANENT,
    employment_basis: EmploymentBasis = EmploymentBasis.FULL_TIME,
    role: EmployeeRole = EmployeeRole.EMPLOYEE,
    start_date: date = date(2023, 1, 15),
    finish_date: date | None = None,
    ongoing: bool | None = None,
) -> EmployeeRecord:
    return EmployeeRecord(
        id=employee_id,
        first_name=first_name,
        last_name=last_name,
        email=email or f"{first_name}.{last_name}@example.com".lower(),
        contract_type=contract_type,
        employment_basis=employment_basis,
        role=role,
        start_date=start_date,
        finish_date=finish_date,
        ongoing=finish_date is None if ongoing is None else ongoing,
    )


def sample_payloads() -> list[EmployeeCreate]:
    return [
        EmployeeCreate(
            first_name="John",
            last_name="Doe",
            email="john.doe@gmail.com",
            mobile_number="0410123456",
            residential_address="123 Sydney Road, Sydney NSW 2000",
            contract_type=ContractType.PERMANENT,
            employment_basis=EmploymentBasis.FULL_TIME,
            start_date=date(2023, 1, 15),
            ongoing=True,
            hours_per_week=38,
            thumbnail_url="https://example.com/john-photo.jpg",
        ),
        EmployeeCreate(
            first_name="Sarah",
            middle_name="Jane",
            last_name="Smith",
            email="sarah.smith@gmail.com",
            mobile_number="0422333444",
            contract_type=ContractType.CONTRACT,
            employment_basis=EmploymentBasis.PART_TIME,
            role=EmployeeRole.HR,
            start_date=date(2024, 2, 1),
            finish_date=date(2026, 6, 30),
            ongoing=False,
            hours_per_week=24,
        ),
        EmployeeCreate(
            first_name="Michael",
            last_name="Wong",
            email="michael.wong@gmail.com",
            mobile_number="0433555666",
            contract_type=ContractType.CONTRACT,
            employment_basis=EmploymentBasis.FULL_TIME,
            role=EmployeeRole.CONTRACTOR,
            start_date=date(2024, 1, 1),
            finish_date=date(2024, 12, 31),
            ongoing=False,
            hours_per_week=40,
        ),
    ]


@pytest.fixture
def service() -> EmployeeService:
    return EmployeeService(repository=InMemoryEmployeeRepository(), today=lambda: TODAY)


@pytest.fixture
async def seeded_service(service: EmployeeService) -> EmployeeService:
    for payload in sample_payloads():
        await service.create(payload)
    return service


@pytest.fixture
def client(service: EmployeeService):
    app.dependency_overrides[get_employee_service] = lambda: service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(service: EmployeeService):
    app.dependency_overrides[get_employee_service] = lambda: service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
