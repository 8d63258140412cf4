from fastapi import APIRouter, Depends
from equipment_tracker.database.supabase_client import get_supabase
from equipment_tracker.modules.maintenance.schemas import MaintenanceCreate, MaintenanceResponse
from equipment_tracker.modules.maintenance.service import MaintenanceService
from equipment_tracker.core.capabilities import RequestContext
from equipment_tracker.core.dependencies import require_capability, require_owner
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/maintenance", tags=["maintenance"])


def get_maintenance_service(supabase: Client = Depends(get_supabase)) -> MaintenanceService:
    return MaintenanceService(supabase)


@router.get("", response_model=List[MaintenanceResponse])
async def list_records(
    equipment_id: Optional[str] = None,
    ctx: RequestContext = Depends(require_capability("equipment")),
    service: MaintenanceService = Depends(get_maintenance_service)
):
    return service.list_records(ctx, equipment_id=equipment_id)


@router.post("", response_model=MaintenanceResponse, status_code=201)
async def create_record(
    record_data: MaintenanceCreate,
    ctx: RequestContext = Depends(require_owner),
    service: MaintenanceService = Depends(get_maintenance_service)
):
    """Log maintenance on an item (owner only)"""
    return service.create_record(ctx, record_data)
