from supabase import Client
from equipment_tracker.modules.employees.schemas import (
    EmployeeUpdate, EmployeeResponse, PermissionsUpdate, PermissionsResponse
)
from equipment_tracker.config.capabilities_config import capability_columns, default_permission_values
from equipment_tracker.core.capabilities import RequestContext
from equipment_tracker.core.csv_io import render_csv, format_date
from equipment_tracker.core.exceptions import InventoryError, NotFound, Unauthorized, StorageError
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

EMPLOYEE_CSV_HEADERS = ["Name", "Email", "Role", "Joined Date"]


class EmployeeService:
    def __init__(self, supabase: Client, admin: Optional[Client] = None):
        self.supabase = supabase
        # Studio membership and role are not client-writable columns
        self.admin = admin or supabase

    def _find_member(self, ctx: RequestContext, employee_id: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("profiles")\
            .select("*")\
            .eq("id", employee_id)\
            .eq("studio_id", ctx.studio_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def list_employees(self, ctx: RequestContext, role: Optional[str] = None) -> List[EmployeeResponse]:
        """List profiles belonging to the caller's studio"""
        try:
            query = self.supabase.table("profiles")\
                .select("*")\
                .eq("studio_id", ctx.studio_id)
            if role:
                query = query.eq("role", role)
            result = query.order("created_at", desc=True).execute()
            return [EmployeeResponse(**row) for row in result.data or []]
        except Exception as e:
            raise StorageError(str(e)) from e

    def get_employee(self, ctx: RequestContext, employee_id: str) -> EmployeeResponse:
        try:
            member = self._find_member(ctx, employee_id)
        except Exception as e:
            raise StorageError(str(e)) from e
        if not member:
            raise NotFound("Employee")
        return EmployeeResponse(**member)

    def update_employee(self, ctx: RequestContext, employee_id: str, employee_data: EmployeeUpdate) -> EmployeeResponse:
        """Update a studio member's display name"""
        try:
            if not self._find_member(ctx, employee_id):
                raise NotFound("Employee")
            result = self.supabase.table("profiles")\
                .update({
                    "full_name": employee_data.full_name or None,
                    "updated_at": datetime.utcnow().isoformat()
                })\
                .eq("id", employee_id)\
                .eq("studio_id", ctx.studio_id)\
                .execute()
            if not result.data:
                raise NotFound("Employee")
            return EmployeeResponse(**result.data[0])
        except InventoryError:
            raise
        except Exception as e:
            raise StorageError(str(e)) from e

    def _find_permissions(self, ctx: RequestContext, employee_id: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("employee_permissions")\
            .select("*")\
            .eq("employee_id", employee_id)\
            .eq("studio_id", ctx.studio_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def get_permissions(self, ctx: RequestContext, employee_id: str) -> PermissionsResponse:
        """Stored permissions, or the defaults an employee without a row receives"""
        try:
            member = self._find_member(ctx, employee_id)
            if not member:
                raise NotFound("Employee")
            if member.get("role") == "owner":
                raise Unauthorized("Owners always hold every capability")
            row = self._find_permissions(ctx, employee_id)
        except InventoryError:
            raise
        except Exception as e:
            raise StorageError(str(e)) from e
        if row:
            return PermissionsResponse(**row)
        return PermissionsResponse(
            employee_id=employee_id,
            studio_id=ctx.studio_id,
            **default_permission_values()
        )

    def update_permissions(self, ctx: RequestContext, employee_id: str, permissions_data: PermissionsUpdate) -> PermissionsResponse:
        """Set capability flags for an employee, creating the row on first edit"""
        try:
            member = self._find_member(ctx, employee_id)
            if not member:
                raise NotFound("Employee")
            if member.get("role") == "owner":
                raise Unauthorized("Owners always hold every capability")

            changes = {
                column: getattr(permissions_data, column)
                for column in capability_columns()
                if getattr(permissions_data, column) is not None
            }
            row = self._find_permissions(ctx, employee_id)
            if row:
                if not changes:
                    return PermissionsResponse(**row)
                result = self.supabase.table("employee_permissions")\
                    .update({**changes, "updated_at": datetime.utcnow().isoformat()})\
                    .eq("id", row["id"])\
                    .execute()
            else:
                result = self.supabase.table("employee_permissions").insert({
                    "employee_id": employee_id,
                    "studio_id": ctx.studio_id,
                    **default_permission_values(),
                    **changes
                }).execute()
            if not result.data:
                raise StorageError("Failed to save permissions")
            logger.info(f"Permissions for {employee_id} updated by {ctx.user_id}: {changes}")
            return PermissionsResponse(**result.data[0])
        except InventoryError:
            raise
        except Exception as e:
            raise StorageError(str(e)) from e

    def remove_employee(self, ctx: RequestContext, employee_id: str) -> bool:
        """Detach an employee from the studio and drop their permissions row"""
        try:
            member = self._find_member(ctx, employee_id)
            if not member:
                raise NotFound("Employee")
            if member.get("role") == "owner" or employee_id == ctx.user_id:
                raise Unauthorized("The studio owner cannot be removed")

            self.supabase.table("employee_permissions")\
                .delete()\
                .eq("employee_id", employee_id)\
                .eq("studio_id", ctx.studio_id)\
                .execute()
            result = self.admin.table("profiles")\
                .update({
                    "studio_id": None,
                    "role": "employee",
                    "updated_at": datetime.utcnow().isoformat()
                })\
                .eq("id", employee_id)\
                .eq("studio_id", ctx.studio_id)\
                .execute()
            logger.info(f"Employee {employee_id} removed from studio {ctx.studio_id}")
            return len(result.data) > 0
        except InventoryError:
            raise
        except Exception as e:
            raise StorageError(str(e)) from e

    def export_csv(self, ctx: RequestContext) -> str:
        employees = self.list_employees(ctx)
        return render_csv(EMPLOYEE_CSV_HEADERS, [
            [e.full_name or "", e.email, e.role, format_date(e.created_at)]
            for e in employees
        ])
