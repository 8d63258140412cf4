from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class EmployeeUpdate(BaseModel):
    full_name: Optional[str] = None


class EmployeeResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    role: str
    studio_id: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PermissionsUpdate(BaseModel):
    can_access_dashboard: Optional[bool] = None
    can_access_equipment: Optional[bool] = None
    can_access_issues: Optional[bool] = None
    can_access_employees: Optional[bool] = None
    can_access_reports: Optional[bool] = None
    can_access_analytics: Optional[bool] = None


class PermissionsResponse(BaseModel):
    id: Optional[str] = None  # None when the employee has no row and defaults apply
    employee_id: str
    studio_id: str
    can_access_dashboard: bool
    can_access_equipment: bool
    can_access_issues: bool
    can_access_employees: bool
    can_access_reports: bool
    can_access_analytics: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
