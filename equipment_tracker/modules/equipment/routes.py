from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from fastapi.responses import Response
from equipment_tracker.database.supabase_client import get_supabase
from equipment_tracker.modules.equipment.schemas import (
    EquipmentCreate, EquipmentUpdate, EquipmentResponse, EquipmentStatus, ImportResult
)
from equipment_tracker.modules.equipment.service import EquipmentService
from equipment_tracker.modules.issues.schemas import IssueResponse
from equipment_tracker.modules.issues.service import IssueService
from equipment_tracker.core.capabilities import RequestContext
from equipment_tracker.core.dependencies import require_capability, require_owner
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/equipment", tags=["equipment"])


def get_equipment_service(supabase: Client = Depends(get_supabase)) -> EquipmentService:
    return EquipmentService(supabase)


def get_issue_service(supabase: Client = Depends(get_supabase)) -> IssueService:
    return IssueService(supabase)


@router.get("", response_model=List[EquipmentResponse])
async def list_equipment(
    search: Optional[str] = None,
    status: Optional[EquipmentStatus] = None,
    category_id: Optional[str] = None,
    ctx: RequestContext = Depends(require_capability("equipment")),
    service: EquipmentService = Depends(get_equipment_service)
):
    """List equipment, optionally filtered by search text, status or category."""
    return service.list_equipment(ctx, search=search, status=status, category_id=category_id)


@router.get("/issuable", response_model=List[EquipmentResponse])
async def list_issuable(
    ctx: RequestContext = Depends(require_capability("equipment")),
    service: EquipmentService = Depends(get_equipment_service)
):
    """Equipment that can currently be added to an issue cart"""
    return service.list_issuable(ctx)


@router.get("/export")
async def export_equipment(
    ctx: RequestContext = Depends(require_capability("equipment")),
    service: EquipmentService = Depends(get_equipment_service)
):
    """Download the equipment register as CSV"""
    return Response(
        content=service.export_csv(ctx),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="equipment.csv"'}
    )


@router.post("/import", response_model=ImportResult, status_code=201)
async def import_equipment(
    file: UploadFile = File(...),
    ctx: RequestContext = Depends(require_owner),
    service: EquipmentService = Depends(get_equipment_service)
):
    """
    Import equipment from a CSV file (owner only).
    Columns are read by position: Name, Serial Number, Category, Status,
    Condition, Purchase Date, Purchase Price, Notes. The first row is a header.
    """
    if not file.filename or not file.filename.lower().endswith(".csv"):
        raise HTTPException(status_code=400, detail="Only CSV files are accepted")
    content = await file.read()
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV file must be UTF-8 encoded")
    return service.import_csv(ctx, text)


@router.get("/{equipment_id}", response_model=EquipmentResponse)
async def get_equipment(
    equipment_id: str,
    ctx: RequestContext = Depends(require_capability("equipment")),
    service: EquipmentService = Depends(get_equipment_service)
):
    return service.get_equipment(ctx, equipment_id)


@router.get("/{equipment_id}/history", response_model=List[IssueResponse])
async def get_equipment_history(
    equipment_id: str,
    ctx: RequestContext = Depends(require_capability("equipment")),
    service: IssueService = Depends(get_issue_service)
):
    """Issue history of one item, newest first"""
    return service.equipment_history(ctx, equipment_id)


@router.post("", response_model=EquipmentResponse, status_code=201)
async def create_equipment(
    equipment_data: EquipmentCreate,
    ctx: RequestContext = Depends(require_owner),
    service: EquipmentService = Depends(get_equipment_service)
):
    """Add equipment to the studio (owner only)"""
    return service.create_equipment(ctx, equipment_data)


@router.put("/{equipment_id}", response_model=EquipmentResponse)
async def update_equipment(
    equipment_id: str,
    equipment_data: EquipmentUpdate,
    ctx: RequestContext = Depends(require_owner),
    service: EquipmentService = Depends(get_equipment_service)
):
    """Edit an equipment record (owner only)"""
    return service.update_equipment(ctx, equipment_id, equipment_data)


@router.delete("/{equipment_id}", status_code=204)
async def delete_equipment(
    equipment_id: str,
    ctx: RequestContext = Depends(require_owner),
    service: EquipmentService = Depends(get_equipment_service)
):
    """Delete equipment with nothing checked out (owner only)"""
    service.delete_equipment(ctx, equipment_id)
    return None
