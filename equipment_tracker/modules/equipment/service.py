from supabase import Client
from equipment_tracker.modules.equipment.schemas import (
    EquipmentCreate, EquipmentUpdate, EquipmentResponse,
    ImportResult, ImportRowError, EQUIPMENT_STATUSES, EQUIPMENT_CONDITIONS
)
from equipment_tracker.modules.equipment.csv_io import export_equipment_csv, parse_equipment_csv
from equipment_tracker.modules.categories.service import CategoryService
from equipment_tracker.core.capabilities import RequestContext
from equipment_tracker.core.exceptions import InventoryError, NotFound, StorageError
from fastapi import HTTPException
from datetime import date, datetime
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class EquipmentService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.categories = CategoryService(supabase)

    def _to_response(self, row: Dict[str, Any], category_names: Dict[str, str]) -> EquipmentResponse:
        return EquipmentResponse(**row, category_name=category_names.get(row.get("category_id")))

    def _category_names(self, ctx: RequestContext) -> Dict[str, str]:
        return {c.id: c.name for c in self.categories.list_categories(ctx)}

    def fetch_row(self, ctx: RequestContext, equipment_id: str) -> Optional[Dict[str, Any]]:
        """Raw equipment row scoped to the caller's studio, or None"""
        try:
            result = self.supabase.table("equipment")\
                .select("*")\
                .eq("id", equipment_id)\
                .eq("studio_id", ctx.studio_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise StorageError(str(e)) from e
        return result.data[0] if result.data else None

    def list_rows(self, ctx: RequestContext) -> List[Dict[str, Any]]:
        try:
            result = self.supabase.table("equipment")\
                .select("*")\
                .eq("studio_id", ctx.studio_id)\
                .order("name")\
                .execute()
        except Exception as e:
            raise StorageError(str(e)) from e
        return result.data or []

    def list_equipment(
        self,
        ctx: RequestContext,
        search: Optional[str] = None,
        status: Optional[str] = None,
        category_id: Optional[str] = None
    ) -> List[EquipmentResponse]:
        """List equipment; search matches name, serial number or code, case-insensitive"""
        try:
            query = self.supabase.table("equipment")\
                .select("*")\
                .eq("studio_id", ctx.studio_id)
            if status:
                query = query.eq("status", status)
            if category_id:
                query = query.eq("category_id", category_id)
            result = query.order("name").execute()
        except Exception as e:
            raise StorageError(str(e)) from e

        rows = result.data or []
        if search:
            needle = search.lower()
            rows = [
                row for row in rows
                if needle in (row.get("name") or "").lower()
                or needle in (row.get("serial_number") or "").lower()
                or needle in (row.get("code") or "").lower()
            ]
        names = self._category_names(ctx)
        return [self._to_response(row, names) for row in rows]

    def list_issuable(self, ctx: RequestContext) -> List[EquipmentResponse]:
        """Equipment that can be put in an issue cart: available with stock on hand"""
        try:
            result = self.supabase.table("equipment")\
                .select("*")\
                .eq("studio_id", ctx.studio_id)\
                .eq("status", "available")\
                .gt("quantity", 0)\
                .order("name")\
                .execute()
        except Exception as e:
            raise StorageError(str(e)) from e
        names = self._category_names(ctx)
        return [self._to_response(row, names) for row in result.data or []]

    def get_equipment(self, ctx: RequestContext, equipment_id: str) -> EquipmentResponse:
        row = self.fetch_row(ctx, equipment_id)
        if not row:
            raise NotFound("Equipment")
        return self._to_response(row, self._category_names(ctx))

    def _check_category(self, ctx: RequestContext, category_id: Optional[str]) -> None:
        if category_id and category_id not in self._category_names(ctx):
            raise NotFound("Category")

    def create_equipment(self, ctx: RequestContext, equipment_data: EquipmentCreate) -> EquipmentResponse:
        """Create an equipment record in the caller's studio"""
        self._check_category(ctx, equipment_data.category_id)
        try:
            payload = equipment_data.model_dump(mode="json")
            payload["studio_id"] = ctx.studio_id
            result = self.supabase.table("equipment").insert(payload).execute()
            if not result.data:
                raise StorageError("Failed to create equipment")
            logger.info(f"Equipment {result.data[0]['id']} created in studio {ctx.studio_id} (quantity {equipment_data.quantity})")
            return self._to_response(result.data[0], self._category_names(ctx))
        except InventoryError:
            raise
        except Exception as e:
            raise StorageError(str(e)) from e

    def update_equipment(self, ctx: RequestContext, equipment_id: str, equipment_data: EquipmentUpdate) -> EquipmentResponse:
        """Update an equipment record; only fields present in the request change"""
        update_data = equipment_data.model_dump(mode="json", exclude_unset=True)
        if "name" in update_data and not (update_data["name"] or "").strip():
            raise HTTPException(status_code=400, detail="Equipment name is required")
        if "quantity" in update_data and update_data["quantity"] is None:
            del update_data["quantity"]
        if "status" in update_data and update_data["status"] is None:
            del update_data["status"]
        self._check_category(ctx, update_data.get("category_id"))

        if not self.fetch_row(ctx, equipment_id):
            raise NotFound("Equipment")
        if not update_data:
            return self.get_equipment(ctx, equipment_id)
        update_data["updated_at"] = datetime.utcnow().isoformat()
        try:
            result = self.supabase.table("equipment")\
                .update(update_data)\
                .eq("id", equipment_id)\
                .eq("studio_id", ctx.studio_id)\
                .execute()
        except Exception as e:
            raise StorageError(str(e)) from e
        if not result.data:
            raise NotFound("Equipment")
        if "quantity" in update_data or "status" in update_data:
            logger.info(f"Equipment {equipment_id} edited by owner: quantity={result.data[0].get('quantity')} status={result.data[0].get('status')}")
        return self._to_response(result.data[0], self._category_names(ctx))

    def delete_equipment(self, ctx: RequestContext, equipment_id: str) -> bool:
        """Delete equipment that has no units checked out"""
        if not self.fetch_row(ctx, equipment_id):
            raise NotFound("Equipment")
        try:
            open_issues = self.supabase.table("issues")\
                .select("id")\
                .eq("equipment_id", equipment_id)\
                .eq("studio_id", ctx.studio_id)\
                .eq("status", "issued")\
                .limit(1)\
                .execute()
            if open_issues.data:
                raise HTTPException(status_code=400, detail="Equipment has units checked out; return them first")
            for table in ("maintenance_records", "issues"):
                self.supabase.table(table)\
                    .delete()\
                    .eq("equipment_id", equipment_id)\
                    .eq("studio_id", ctx.studio_id)\
                    .execute()
            result = self.supabase.table("equipment")\
                .delete()\
                .eq("id", equipment_id)\
                .eq("studio_id", ctx.studio_id)\
                .execute()
            return len(result.data) > 0
        except HTTPException:
            raise
        except Exception as e:
            raise StorageError(str(e)) from e

    def export_csv(self, ctx: RequestContext) -> str:
        return export_equipment_csv(self.list_equipment(ctx))

    def import_csv(self, ctx: RequestContext, text: str) -> ImportResult:
        """Import equipment rows; invalid rows are reported, valid rows inserted in one batch"""
        category_ids = self.categories.name_index(ctx)
        payloads = []
        errors = []
        for index, row in enumerate(parse_equipment_csv(text), start=1):
            status = (row["status"] or "available").lower()
            condition = (row["condition"] or "good").lower()
            if status not in EQUIPMENT_STATUSES:
                errors.append(ImportRowError(row=index, name=row["name"], message=f"Unknown status '{row['status']}'"))
                continue
            if condition not in EQUIPMENT_CONDITIONS:
                errors.append(ImportRowError(row=index, name=row["name"], message=f"Unknown condition '{row['condition']}'"))
                continue
            category_id = category_ids.get(row["category"].lower()) if row["category"] else None
            payloads.append({
                "studio_id": ctx.studio_id,
                "name": row["name"],
                "serial_number": row["serial_number"],
                "category_id": category_id,
                "status": status,
                "condition": condition,
                "quantity": 1,
                "purchase_date": _parse_date(row["purchase_date"]),
                "purchase_price": _parse_price(row["purchase_price"]),
                "notes": row["notes"],
            })

        if not payloads:
            return ImportResult(imported=0, errors=errors)
        try:
            result = self.supabase.table("equipment").insert(payloads).execute()
        except Exception as e:
            logger.error(f"Equipment import failed for studio {ctx.studio_id}: {e}")
            raise StorageError(str(e)) from e
        names = self._category_names(ctx)
        items = [self._to_response(r, names) for r in result.data or []]
        logger.info(f"Imported {len(items)} equipment rows into studio {ctx.studio_id}, {len(errors)} rejected")
        return ImportResult(imported=len(items), errors=errors, items=items)


def _parse_price(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    try:
        return float(value.replace(",", "").lstrip("$₹€£"))
    except ValueError:
        return None


def _parse_date(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10]).isoformat()
    except ValueError:
        return None
