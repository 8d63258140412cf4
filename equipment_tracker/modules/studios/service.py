from supabase import Client
from equipment_tracker.modules.studios.schemas import StudioCreate, StudioJoin, StudioResponse, StudioSetupResponse
from equipment_tracker.config import settings
from equipment_tracker.config.capabilities_config import default_permission_values
from equipment_tracker.core.exceptions import InventoryError, NotFound, Unauthorized, StorageError
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class StudioService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _get_profile(self, user_id: str) -> Dict[str, Any]:
        result = self.supabase.table("profiles")\
            .select("*")\
            .eq("id", user_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise NotFound("Profile", reason=f"no profile row for user {user_id}")
        return result.data[0]

    def create_studio(self, studio_data: StudioCreate, user_data: dict) -> StudioSetupResponse:
        """Create a studio; the caller becomes its owner and default categories are seeded."""
        try:
            profile = self._get_profile(user_data["id"])
            if profile.get("studio_id"):
                raise Unauthorized("You already belong to a studio")

            result = self.supabase.table("studios").insert({
                "name": studio_data.name,
                "owner_id": user_data["id"]
            }).execute()
            if not result.data:
                raise StorageError("Failed to create studio")
            studio = result.data[0]

            self.supabase.table("profiles")\
                .update({
                    "studio_id": studio["id"],
                    "role": "owner",
                    "updated_at": datetime.utcnow().isoformat()
                })\
                .eq("id", user_data["id"])\
                .execute()

            categories = self._seed_default_categories(studio["id"])
            logger.info(f"Studio {studio['id']} created by {user_data['id']}")
            return StudioSetupResponse(
                studio=StudioResponse(**studio),
                role="owner",
                categories=categories
            )
        except InventoryError:
            raise
        except Exception as e:
            logger.error(f"Error creating studio: {e}")
            raise StorageError(str(e)) from e

    def _seed_default_categories(self, studio_id: str) -> List[str]:
        names = settings.get_default_categories_list()
        if not names:
            return []
        try:
            self.supabase.table("categories").insert([
                {"studio_id": studio_id, "name": name} for name in names
            ]).execute()
        except Exception as e:
            # Categories are optional; the studio is usable without them
            logger.warning(f"Default categories not created for studio {studio_id}: {e}")
            return []
        return names

    def join_studio(self, join_data: StudioJoin, user_data: dict) -> StudioSetupResponse:
        """Join an existing studio as an employee with default permissions."""
        try:
            profile = self._get_profile(user_data["id"])
            if profile.get("studio_id"):
                raise Unauthorized("You already belong to a studio")

            studio = self._find_studio(join_data.studio_id)
            if not studio:
                raise NotFound("Studio", reason=f"join attempt with unknown id {join_data.studio_id}")

            self.supabase.table("profiles")\
                .update({
                    "studio_id": studio["id"],
                    "role": "employee",
                    "updated_at": datetime.utcnow().isoformat()
                })\
                .eq("id", user_data["id"])\
                .execute()

            existing = self.supabase.table("employee_permissions")\
                .select("id")\
                .eq("employee_id", user_data["id"])\
                .eq("studio_id", studio["id"])\
                .execute()
            if not existing.data:
                self.supabase.table("employee_permissions").insert({
                    "employee_id": user_data["id"],
                    "studio_id": studio["id"],
                    **default_permission_values()
                }).execute()

            logger.info(f"User {user_data['id']} joined studio {studio['id']}")
            return StudioSetupResponse(studio=StudioResponse(**studio), role="employee")
        except InventoryError:
            raise
        except Exception as e:
            logger.error(f"Error joining studio: {e}")
            raise StorageError(str(e)) from e

    def _find_studio(self, studio_id: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("studios")\
            .select("*")\
            .eq("id", studio_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def get_studio(self, studio_id: str) -> StudioResponse:
        """Get studio by ID"""
        try:
            studio = self._find_studio(studio_id)
        except Exception as e:
            raise StorageError(str(e)) from e
        if not studio:
            raise NotFound("Studio")
        return StudioResponse(**studio)
