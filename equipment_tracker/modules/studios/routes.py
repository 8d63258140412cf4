from fastapi import APIRouter, Depends
from equipment_tracker.database.supabase_client import get_service_supabase
from equipment_tracker.modules.studios.schemas import StudioCreate, StudioJoin, StudioResponse, StudioSetupResponse
from equipment_tracker.modules.studios.service import StudioService
from equipment_tracker.core.capabilities import RequestContext
from equipment_tracker.core.dependencies import get_current_user, get_request_context
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/studios", tags=["studios"])


def get_studio_service(supabase: Client = Depends(get_service_supabase)) -> StudioService:
    return StudioService(supabase)


@router.post("", response_model=StudioSetupResponse, status_code=201)
async def create_studio(
    studio_data: StudioCreate,
    user_data: Dict = Depends(get_current_user),
    service: StudioService = Depends(get_studio_service)
):
    """Create a studio and become its owner"""
    return service.create_studio(studio_data, user_data)


@router.post("/join", response_model=StudioSetupResponse)
async def join_studio(
    join_data: StudioJoin,
    user_data: Dict = Depends(get_current_user),
    service: StudioService = Depends(get_studio_service)
):
    """Join an existing studio as an employee using the studio ID shared by its owner"""
    return service.join_studio(join_data, user_data)


@router.get("/me", response_model=StudioResponse)
async def get_my_studio(
    ctx: RequestContext = Depends(get_request_context),
    service: StudioService = Depends(get_studio_service)
):
    """Get the caller's studio (the ID is what employees enter to join)"""
    return service.get_studio(ctx.studio_id)
