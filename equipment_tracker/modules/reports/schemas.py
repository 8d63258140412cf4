from pydantic import BaseModel
from typing import Dict, List, Optional
from equipment_tracker.modules.issues.schemas import IssueResponse


class UsageEntry(BaseModel):
    equipment_id: str
    name: str
    usage_count: int
    status: Optional[str] = None


class UtilizationReport(BaseModel):
    total_equipment: int
    status_counts: Dict[str, int]
    utilization_rate: str  # percentage, one decimal; "0" when there is no equipment
    most_used: List[UsageEntry] = []


class TimelinePoint(BaseModel):
    date: str
    count: int


class RequesterEntry(BaseModel):
    name: str
    count: int


class IssueHistoryReport(BaseModel):
    days: int
    total_issues: int
    issued_count: int
    returned_count: int
    return_rate: str
    timeline: List[TimelinePoint] = []
    top_requesters: List[RequesterEntry] = []
    recent_issues: List[IssueResponse] = []


class MaintenanceEntry(BaseModel):
    name: str
    count: int
    cost: float


class MaintenanceReport(BaseModel):
    total_records: int
    total_cost: float
    type_counts: Dict[str, int]
    top_equipment: List[MaintenanceEntry] = []


class DashboardSummary(BaseModel):
    total_equipment: int
    available_equipment: int
    issued_equipment: int
    maintenance_equipment: int
    active_issues: int
    total_members: int
    recent_issues: List[IssueResponse] = []
