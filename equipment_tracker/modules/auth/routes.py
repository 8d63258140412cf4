from fastapi import APIRouter, Depends, Security
from fastapi.security import HTTPAuthorizationCredentials
from equipment_tracker.database.supabase_client import bearer_scheme, get_auth_client, get_service_supabase, get_supabase
from equipment_tracker.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse, MeResponse
)
from equipment_tracker.modules.auth.service import AuthService
from equipment_tracker.core.capabilities import resolve_capabilities
from equipment_tracker.core.dependencies import get_current_user, get_profile, get_permissions_row
from equipment_tracker.config.capabilities_config import CAPABILITIES, get_capability_matrix
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])

# Security scheme for JWT Bearer token
security = bearer_scheme


def get_auth_service(
    supabase: Client = Depends(get_auth_client),
    admin: Client = Depends(get_service_supabase)
) -> AuthService:
    """Sign-in runs on a throwaway client so its session never reaches another request"""
    return AuthService(supabase, admin=admin)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=MeResponse)
async def get_me(
    current_user: Dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
):
    """Get current user, studio membership and capabilities (for frontend navigation)."""
    profile = get_profile(current_user["id"], supabase) or {}
    capabilities = []
    if profile.get("studio_id"):
        permissions = None
        if profile.get("role") != "owner":
            permissions = get_permissions_row(profile["id"], profile["studio_id"], supabase)
        granted = resolve_capabilities(profile, permissions)
        capabilities = [name for name in CAPABILITIES if name in granted]
    return MeResponse(
        id=current_user["id"],
        email=profile.get("email") or current_user.get("email") or "",
        full_name=profile.get("full_name"),
        role=profile.get("role"),
        studio_id=profile.get("studio_id"),
        capabilities=capabilities
    )


@router.get("/capabilities")
async def list_capabilities(current_user: Dict = Depends(get_current_user)):
    """Describe every capability flag and its employee default, for clients building navigation."""
    return {"capabilities": get_capability_matrix()}
