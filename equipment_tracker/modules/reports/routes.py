from fastapi import APIRouter, Depends, HTTPException
from equipment_tracker.database.supabase_client import get_supabase
from equipment_tracker.modules.reports.schemas import (
    UtilizationReport, IssueHistoryReport, MaintenanceReport, DashboardSummary
)
from equipment_tracker.modules.reports.service import ReportService
from equipment_tracker.modules.reports.aggregation import HISTORY_WINDOWS
from equipment_tracker.core.capabilities import RequestContext
from equipment_tracker.core.dependencies import require_capability
from supabase import Client

router = APIRouter(prefix="/reports", tags=["reports"])


def get_report_service(supabase: Client = Depends(get_supabase)) -> ReportService:
    return ReportService(supabase)


@router.get("/dashboard", response_model=DashboardSummary)
async def dashboard(
    ctx: RequestContext = Depends(require_capability("dashboard")),
    service: ReportService = Depends(get_report_service)
):
    """Headline counts and the latest issues for the studio dashboard"""
    return service.dashboard(ctx)


@router.get("/utilization", response_model=UtilizationReport)
async def utilization(
    ctx: RequestContext = Depends(require_capability("reports")),
    service: ReportService = Depends(get_report_service)
):
    return service.utilization(ctx)


@router.get("/issues", response_model=IssueHistoryReport)
async def issue_history(
    days: int = 30,
    ctx: RequestContext = Depends(require_capability("reports")),
    service: ReportService = Depends(get_report_service)
):
    """Issue activity over the last 7, 30, 90 or 365 days"""
    if days not in HISTORY_WINDOWS:
        raise HTTPException(status_code=400, detail=f"days must be one of {', '.join(str(d) for d in HISTORY_WINDOWS)}")
    return service.issue_history(ctx, days=days)


@router.get("/maintenance", response_model=MaintenanceReport)
async def maintenance(
    ctx: RequestContext = Depends(require_capability("reports")),
    service: ReportService = Depends(get_report_service)
):
    return service.maintenance_report(ctx)
