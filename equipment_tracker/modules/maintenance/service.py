from supabase import Client
from equipment_tracker.modules.maintenance.schemas import MaintenanceCreate, MaintenanceResponse
from equipment_tracker.core.capabilities import RequestContext
from equipment_tracker.core.exceptions import InventoryError, NotFound, StorageError
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class MaintenanceService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _equipment_names(self, ctx: RequestContext) -> Dict[str, str]:
        result = self.supabase.table("equipment")\
            .select("id, name")\
            .eq("studio_id", ctx.studio_id)\
            .execute()
        return {row["id"]: row["name"] for row in result.data or []}

    def list_rows(self, ctx: RequestContext, equipment_id: Optional[str] = None) -> List[Dict[str, Any]]:
        try:
            query = self.supabase.table("maintenance_records")\
                .select("*")\
                .eq("studio_id", ctx.studio_id)
            if equipment_id:
                query = query.eq("equipment_id", equipment_id)
            result = query.order("performed_at", desc=True).execute()
        except Exception as e:
            raise StorageError(str(e)) from e
        return result.data or []

    def list_records(self, ctx: RequestContext, equipment_id: Optional[str] = None) -> List[MaintenanceResponse]:
        """Maintenance log for the studio or one item, most recent first"""
        rows = self.list_rows(ctx, equipment_id)
        names = self._equipment_names(ctx)
        if equipment_id and equipment_id not in names:
            raise NotFound("Equipment")
        return [MaintenanceResponse(**row, equipment_name=names.get(row["equipment_id"])) for row in rows]

    def create_record(self, ctx: RequestContext, record_data: MaintenanceCreate) -> MaintenanceResponse:
        """Append a maintenance record; stock is not affected"""
        names = self._equipment_names(ctx)
        if record_data.equipment_id not in names:
            raise NotFound("Equipment")
        payload = record_data.model_dump(mode="json")
        payload["studio_id"] = ctx.studio_id
        payload["created_by"] = ctx.user_id
        if not payload.get("performed_at"):
            payload["performed_at"] = datetime.utcnow().isoformat()
        try:
            result = self.supabase.table("maintenance_records").insert(payload).execute()
            if not result.data:
                raise StorageError("Failed to create maintenance record")
        except InventoryError:
            raise
        except Exception as e:
            logger.error(f"Error creating maintenance record for {record_data.equipment_id}: {e}")
            raise StorageError(str(e)) from e
        record = result.data[0]
        logger.info(f"Maintenance {record['id']} ({record['maintenance_type']}) logged on equipment {record['equipment_id']}")
        return MaintenanceResponse(**record, equipment_name=names[record["equipment_id"]])
