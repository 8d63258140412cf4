from supabase import Client
from equipment_tracker.modules.categories.schemas import CategoryCreate, CategoryUpdate, CategoryResponse
from equipment_tracker.core.capabilities import RequestContext
from equipment_tracker.core.exceptions import InventoryError, NotFound, StorageError
from fastapi import HTTPException
from typing import Dict, List


class CategoryService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_categories(self, ctx: RequestContext) -> List[CategoryResponse]:
        """List categories of the caller's studio, alphabetically"""
        try:
            result = self.supabase.table("categories")\
                .select("*")\
                .eq("studio_id", ctx.studio_id)\
                .order("name")\
                .execute()
            return [CategoryResponse(**row) for row in result.data or []]
        except Exception as e:
            raise StorageError(str(e)) from e

    def name_index(self, ctx: RequestContext) -> Dict[str, str]:
        """Lower-cased category name -> id, for CSV import"""
        return {c.name.lower(): c.id for c in self.list_categories(ctx)}

    def _ensure_unique(self, ctx: RequestContext, name: str, exclude_id: str = None) -> None:
        for category in self.list_categories(ctx):
            if category.name.lower() == name.lower() and category.id != exclude_id:
                raise HTTPException(status_code=400, detail="Category already exists")

    def create_category(self, ctx: RequestContext, category_data: CategoryCreate) -> CategoryResponse:
        self._ensure_unique(ctx, category_data.name)
        try:
            result = self.supabase.table("categories").insert({
                "studio_id": ctx.studio_id,
                "name": category_data.name
            }).execute()
            if not result.data:
                raise StorageError("Failed to create category")
            return CategoryResponse(**result.data[0])
        except InventoryError:
            raise
        except Exception as e:
            raise StorageError(str(e)) from e

    def update_category(self, ctx: RequestContext, category_id: str, category_data: CategoryUpdate) -> CategoryResponse:
        self._ensure_unique(ctx, category_data.name, exclude_id=category_id)
        try:
            result = self.supabase.table("categories")\
                .update({"name": category_data.name})\
                .eq("id", category_id)\
                .eq("studio_id", ctx.studio_id)\
                .execute()
        except Exception as e:
            raise StorageError(str(e)) from e
        if not result.data:
            raise NotFound("Category")
        return CategoryResponse(**result.data[0])

    def delete_category(self, ctx: RequestContext, category_id: str) -> bool:
        """Delete category; equipment in it becomes uncategorised"""
        try:
            self.supabase.table("equipment")\
                .update({"category_id": None})\
                .eq("category_id", category_id)\
                .eq("studio_id", ctx.studio_id)\
                .execute()
            result = self.supabase.table("categories")\
                .delete()\
                .eq("id", category_id)\
                .eq("studio_id", ctx.studio_id)\
                .execute()
        except Exception as e:
            raise StorageError(str(e)) from e
        if not result.data:
            raise NotFound("Category")
        return True
