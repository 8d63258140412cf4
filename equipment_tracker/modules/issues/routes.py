from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from equipment_tracker.database.supabase_client import get_service_supabase, get_supabase
from equipment_tracker.modules.issues.schemas import (
    IssueCreate, BulkIssueCreate, ReturnRequest, IssueResponse, IssueStatus
)
from equipment_tracker.modules.issues.service import IssueService
from equipment_tracker.core.capabilities import RequestContext
from equipment_tracker.core.dependencies import require_capability
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/issues", tags=["issues"])


def get_issue_service(
    supabase: Client = Depends(get_supabase),
    writer: Client = Depends(get_service_supabase)
) -> IssueService:
    return IssueService(supabase, writer=writer)


@router.get("", response_model=List[IssueResponse])
async def list_issues(
    status: Optional[IssueStatus] = None,
    equipment_id: Optional[str] = None,
    person: Optional[str] = None,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    ctx: RequestContext = Depends(require_capability("issues")),
    service: IssueService = Depends(get_issue_service)
):
    """List checkouts, newest first"""
    return service.list_issues(ctx, status=status, equipment_id=equipment_id, person=person, limit=limit, offset=offset)


@router.get("/export")
async def export_issues(
    ctx: RequestContext = Depends(require_capability("issues")),
    service: IssueService = Depends(get_issue_service)
):
    """Download the issue log as CSV"""
    return Response(
        content=service.export_csv(ctx),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="issues.csv"'}
    )


@router.get("/{issue_id}", response_model=IssueResponse)
async def get_issue(
    issue_id: str,
    ctx: RequestContext = Depends(require_capability("issues")),
    service: IssueService = Depends(get_issue_service)
):
    return service.get_issue(ctx, issue_id)


@router.post("", response_model=IssueResponse, status_code=201)
async def issue_equipment(
    issue_data: IssueCreate,
    ctx: RequestContext = Depends(require_capability("issues")),
    service: IssueService = Depends(get_issue_service)
):
    """Check out units of one equipment item"""
    return service.issue_equipment(ctx, issue_data)


@router.post("/bulk", response_model=List[IssueResponse], status_code=201)
async def bulk_issue(
    bulk_data: BulkIssueCreate,
    ctx: RequestContext = Depends(require_capability("issues")),
    service: IssueService = Depends(get_issue_service)
):
    """Check out a cart of items to one person; all lines or none"""
    return service.bulk_issue(ctx, bulk_data)


@router.post("/{issue_id}/return", response_model=IssueResponse)
async def return_equipment(
    issue_id: str,
    return_data: ReturnRequest,
    ctx: RequestContext = Depends(require_capability("issues")),
    service: IssueService = Depends(get_issue_service)
):
    """Mark an issue returned and restock its units"""
    return service.return_equipment(ctx, issue_id, return_data)
