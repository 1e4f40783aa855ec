from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from roster.core.dependencies import get_employee_service
from roster.core.exceptions import ConflictError, NotFoundError, RosterError, ValidationFailedError
from roster.models.employee import EmployeeCreate, EmployeeResponse, EmployeeStats, EmployeeUpdate
from roster.models.query import EmployeePage, SearchParams
from roster.services.employee_service import EmployeeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])


def _http_error(err: RosterError) -> HTTPException:
    if isinstance(err, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(err))
    if isinstance(err, ValidationFailedError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"rule": err.rule, "message": err.message},
        )
    if isinstance(err, ConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(err))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err))


@router.get("", response_model=list[EmployeeResponse])
async def list_employees(service: EmployeeService = Depends(get_employee_service)):  # noqa: B008
    try:
        return await service.list_all()
    except Exception as err:
        logger.exception("Failed to list employees")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve employees",
        ) from err


@router.get("/search", response_model=EmployeePage)
async def search_employees(
    name: str | None = None,
    first_name: str | None = Query(default=None, alias="firstName"),
    contract_type: str | None = Query(default=None, alias="contractType"),
    employment_basis: str | None = Query(default=None, alias="employmentBasis"),
    ongoing: str | None = None,
    sort_by: str | None = Query(default=None, alias="sortBy"),
    sort_direction: str | None = Query(default=None, alias="sortDirection"),
    page: str | None = None,
    size: str | None = None,
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    params = SearchParams(
        name=name if name is not None else first_name,
        contract_type=contract_type,
        employment_basis=employment_basis,
        ongoing=ongoing,
        sort_by=sort_by,
        sort_direction=sort_direction,
        page=page,
        size=size,
    )
    try:
        return await service.list_page(params)
    except Exception as err:
        logger.exception("Failed to search employees")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to search employees",
        ) from err


@router.get("/stats", response_model=EmployeeStats)
async def employee_stats(service: EmployeeService = Depends(get_employee_service)):  # noqa: B008
    try:
        return await service.stats()
    except Exception as err:
        logger.exception("Failed to compute employee stats")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute employee stats",
        ) from err


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: str,
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    try:
        return await service.get_by_id(employee_id)
    except RosterError as err:
        raise _http_error(err) from err
    except Exception as err:
        logger.exception("Failed to get employee %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve employee",
        ) from err


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: EmployeeCreate,
    request: Request,
    response: Response,
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    try:
        created = await service.create(payload)
    except RosterError as err:
        raise _http_error(err) from err
    except Exception as err:
        logger.exception("Failed to create employee")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create employee",
        ) from err

    response.headers["Location"] = str(request.url_for("get_employee", employee_id=created.id))
    return created


@router.put("/{employee_id}", response_model=EmployeeResponse)
@router.patch("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: str,
    patch: EmployeeUpdate,
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    try:
        return await service.update(employee_id, patch)
    except RosterError as err:
        raise _http_error(err) from err
    except Exception as err:
        logger.exception("Failed to update employee %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update employee",
        ) from err


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: str,
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    try:
        await service.delete(employee_id)
    except RosterError as err:
        raise _http_error(err) from err
    except Exception as err:
        logger.exception("Failed to delete employee %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete employee",
        ) from err
    return Response(status_code=status.HTTP_204_NO_CONTENT)
