"""
Core dependencies for route protection and capability checking
"""

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials
from equipment_tracker.database.supabase_client import bearer_scheme, get_supabase
from equipment_tracker.modules.auth.service import AuthService
from equipment_tracker.core.capabilities import RequestContext
from equipment_tracker.core.exceptions import NotFound, Unauthorized, StorageError
from supabase import Client
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

security = bearer_scheme


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(credentials.credentials)


def get_profile(user_id: str, supabase: Client) -> Optional[Dict[str, Any]]:
    try:
        result = supabase.table("profiles")\
            .select("*")\
            .eq("id", user_id)\
            .limit(1)\
            .execute()
    except Exception as e:
        logger.error(f"Error loading profile {user_id}: {e}")
        raise StorageError("Failed to load profile") from e
    return result.data[0] if result.data else None


def get_permissions_row(employee_id: str, studio_id: str, supabase: Client) -> Optional[Dict[str, Any]]:
    try:
        result = supabase.table("employee_permissions")\
            .select("*")\
            .eq("employee_id", employee_id)\
            .eq("studio_id", studio_id)\
            .limit(1)\
            .execute()
    except Exception as e:
        logger.error(f"Error loading permissions for {employee_id}: {e}")
        raise StorageError("Failed to load permissions") from e
    return result.data[0] if result.data else None


def build_request_context(user_data: dict, supabase: Client) -> RequestContext:
    """Resolve profile, studio scope and capabilities for one request."""
    profile = get_profile(user_data["id"], supabase)
    if not profile:
        raise NotFound("Profile", reason=f"no profile row for user {user_data['id']}")
    if not profile.get("studio_id"):
        raise Unauthorized("Create or join a studio before using the inventory")
    permissions = None
    if profile.get("role") != "owner":
        permissions = get_permissions_row(profile["id"], profile["studio_id"], supabase)
    if not profile.get("email"):
        profile = {**profile, "email": user_data.get("email")}
    return RequestContext.from_rows(profile, permissions)


def get_request_context(
    user_data: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase)
) -> RequestContext:
    return build_request_context(user_data, supabase)


def require_capability(capability: str):
    """Factory function to create capability check dependency"""
    def check_capability(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
        if not ctx.can(capability):
            raise Unauthorized(f"Insufficient permissions. Required: {capability}")
        return ctx
    return check_capability


def require_owner(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
    """Dependency for studio-owner-only actions"""
    ensure_owner(ctx)
    return ctx


def ensure_owner(ctx: RequestContext, action: str = "perform this action") -> None:
    if not ctx.is_owner:
        raise Unauthorized(f"Only studio owners can {action}")
