from supabase import Client
from equipment_tracker.config import settings
from equipment_tracker.modules.reports import aggregation
from equipment_tracker.modules.reports.schemas import (
    UtilizationReport, IssueHistoryReport, MaintenanceReport, DashboardSummary
)
from equipment_tracker.modules.equipment.service import EquipmentService
from equipment_tracker.modules.issues.schemas import IssueResponse
from equipment_tracker.modules.issues.service import IssueService
from equipment_tracker.modules.maintenance.service import MaintenanceService
from equipment_tracker.core.capabilities import RequestContext
from equipment_tracker.core.exceptions import StorageError
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class ReportService:
    """Loads studio-scoped rows and hands them to the pure aggregation functions."""

    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.equipment = EquipmentService(supabase)
        self.issues = IssueService(supabase)
        self.maintenance = MaintenanceService(supabase)

    def _issue_responses(self, rows: List[Dict[str, Any]], equipment: List[Dict[str, Any]]) -> List[IssueResponse]:
        names = {item["id"]: item["name"] for item in equipment}
        return [IssueResponse(**row, equipment_name=names.get(row["equipment_id"])) for row in rows]

    def _member_count(self, ctx: RequestContext) -> int:
        try:
            result = self.supabase.table("profiles")\
                .select("id")\
                .eq("studio_id", ctx.studio_id)\
                .execute()
        except Exception as e:
            raise StorageError(str(e)) from e
        return len(result.data or [])

    def utilization(self, ctx: RequestContext) -> UtilizationReport:
        equipment = self.equipment.list_rows(ctx)
        issues = self.issues.list_rows(ctx)
        return UtilizationReport(**aggregation.equipment_utilization(equipment, issues, top_n=settings.report_top_n))

    def issue_history(self, ctx: RequestContext, days: int = 30, now: Optional[datetime] = None) -> IssueHistoryReport:
        equipment = self.equipment.list_rows(ctx)
        report = aggregation.issue_history(
            self.issues.list_rows(ctx),
            days=days,
            now=now,
            top_n=settings.report_top_n,
            recent_n=settings.report_recent_n
        )
        report["recent_issues"] = self._issue_responses(report["recent_issues"], equipment)
        return IssueHistoryReport(**report)

    def maintenance_report(self, ctx: RequestContext) -> MaintenanceReport:
        names = {item["id"]: item["name"] for item in self.equipment.list_rows(ctx)}
        records = self.maintenance.list_rows(ctx)
        return MaintenanceReport(**aggregation.maintenance_summary(records, names, top_n=settings.report_top_n))

    def dashboard(self, ctx: RequestContext) -> DashboardSummary:
        equipment = self.equipment.list_rows(ctx)
        summary = aggregation.dashboard_summary(
            equipment,
            self.issues.list_rows(ctx),
            self._member_count(ctx),
            recent_n=settings.report_recent_n
        )
        summary["recent_issues"] = self._issue_responses(summary["recent_issues"], equipment)
        logger.debug(f"Dashboard for studio {ctx.studio_id}: {summary['total_equipment']} items, {summary['active_issues']} active issues")
        return DashboardSummary(**summary)
