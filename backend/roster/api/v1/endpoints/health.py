from __future__ import annotations

from fastapi import APIRouter, Depends

from roster.core.config import settings
from roster.core.dependencies import get_employee_service
from roster.repositories.cosmos import CosmosEmployeeRepository
from roster.services.employee_service import EmployeeService

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check(service: EmployeeService = Depends(get_employee_service)):  # noqa: B008
    services: dict[str, str] = {}

    try:
        if not service.initialized:
            services["employee_store"] = "not_configured"
        elif isinstance(service.repository, CosmosEmployeeRepository):
            ok = await service.check_connection()
            services["cosmos_db"] = "ok" if ok else "error"
        else:
            services["employee_store"] = "in_memory"
    except Exception:
        services["cosmos_db"] = "error"

    all_ok = all(v in ("ok", "in_memory", "not_configured") for v in services.values())

    return {
        "status": "healthy" if all_ok else "degraded",
        "version": settings.APP_VERSION,
        "services": services,
    }


@router.get("/ready")
async def readiness_probe(service: EmployeeService = Depends(get_employee_service)):  # noqa: B008
    return {"ready": service.initialized}
