from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from equipment_tracker.database.supabase_client import get_service_supabase, get_supabase
from equipment_tracker.modules.employees.schemas import (
    EmployeeUpdate, EmployeeResponse, PermissionsUpdate, PermissionsResponse
)
from equipment_tracker.modules.employees.service import EmployeeService
from equipment_tracker.core.capabilities import RequestContext
from equipment_tracker.core.dependencies import require_capability, require_owner
from equipment_tracker.config.capabilities_config import ROLES
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/employees", tags=["employees"])


def get_employee_service(
    supabase: Client = Depends(get_supabase),
    admin: Client = Depends(get_service_supabase)
) -> EmployeeService:
    return EmployeeService(supabase, admin=admin)


@router.get("", response_model=List[EmployeeResponse])
async def list_employees(
    role: Optional[str] = None,
    ctx: RequestContext = Depends(require_capability("employees")),
    service: EmployeeService = Depends(get_employee_service)
):
    """List studio members (requires employees capability)"""
    if role and role not in ROLES:
        raise HTTPException(status_code=400, detail=f"role must be one of {', '.join(ROLES)}")
    return service.list_employees(ctx, role=role)


@router.get("/export")
async def export_employees(
    ctx: RequestContext = Depends(require_capability("employees")),
    service: EmployeeService = Depends(get_employee_service)
):
    """Download studio members as CSV"""
    return Response(
        content=service.export_csv(ctx),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="employees.csv"'}
    )


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: str,
    ctx: RequestContext = Depends(require_capability("employees")),
    service: EmployeeService = Depends(get_employee_service)
):
    return service.get_employee(ctx, employee_id)


@router.put("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: str,
    employee_data: EmployeeUpdate,
    ctx: RequestContext = Depends(require_owner),
    service: EmployeeService = Depends(get_employee_service)
):
    """Update a member's name (owner only)"""
    return service.update_employee(ctx, employee_id, employee_data)


@router.delete("/{employee_id}", status_code=204)
async def remove_employee(
    employee_id: str,
    ctx: RequestContext = Depends(require_owner),
    service: EmployeeService = Depends(get_employee_service)
):
    """Remove an employee from the studio (owner only)"""
    service.remove_employee(ctx, employee_id)
    return None


@router.get("/{employee_id}/permissions", response_model=PermissionsResponse)
async def get_permissions(
    employee_id: str,
    ctx: RequestContext = Depends(require_owner),
    service: EmployeeService = Depends(get_employee_service)
):
    """Get an employee's capability flags (owner only)"""
    return service.get_permissions(ctx, employee_id)


@router.put("/{employee_id}/permissions", response_model=PermissionsResponse)
async def update_permissions(
    employee_id: str,
    permissions_data: PermissionsUpdate,
    ctx: RequestContext = Depends(require_owner),
    service: EmployeeService = Depends(get_employee_service)
):
    """Set an employee's capability flags (owner only)"""
    return service.update_permissions(ctx, employee_id, permissions_data)
