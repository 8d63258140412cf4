from fastapi import APIRouter, Depends
from equipment_tracker.database.supabase_client import get_supabase
from equipment_tracker.modules.categories.schemas import CategoryCreate, CategoryUpdate, CategoryResponse
from equipment_tracker.modules.categories.service import CategoryService
from equipment_tracker.core.capabilities import RequestContext
from equipment_tracker.core.dependencies import require_capability, require_owner
from supabase import Client
from typing import List

router = APIRouter(prefix="/categories", tags=["categories"])


def get_category_service(supabase: Client = Depends(get_supabase)) -> CategoryService:
    return CategoryService(supabase)


@router.get("", response_model=List[CategoryResponse])
async def list_categories(
    ctx: RequestContext = Depends(require_capability("equipment")),
    service: CategoryService = Depends(get_category_service)
):
    return service.list_categories(ctx)


@router.post("", response_model=CategoryResponse, status_code=201)
async def create_category(
    category_data: CategoryCreate,
    ctx: RequestContext = Depends(require_owner),
    service: CategoryService = Depends(get_category_service)
):
    """Create a category (owner only)"""
    return service.create_category(ctx, category_data)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    category_data: CategoryUpdate,
    ctx: RequestContext = Depends(require_owner),
    service: CategoryService = Depends(get_category_service)
):
    """Rename a category (owner only)"""
    return service.update_category(ctx, category_id, category_data)


@router.delete("/{category_id}", status_code=204)
async def delete_category(
    category_id: str,
    ctx: RequestContext = Depends(require_owner),
    service: CategoryService = Depends(get_category_service)
):
    """Delete a category (owner only)"""
    service.delete_category(ctx, category_id)
    return None
