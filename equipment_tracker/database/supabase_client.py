"""
Supabase client access.

Data requests get a fresh anon-key client whose PostgREST session carries the
caller's bearer token, so row level security sees the caller and no session
outlives the request. Sign-up and sign-in run on a throwaway client of their
own: supabase-py copies a signed-in session onto the client that produced it.
The service-role client bypasses RLS. It is reserved for writes the API has
already authorized (onboarding, membership changes, stock and issue ledger
writes) and for scripts, and it never signs anyone in.
"""

from fastapi import Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import create_client, Client
from equipment_tracker.config import settings
import logging

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer()


class SupabaseClient:
    _service_client: Client = None

    @staticmethod
    def _create(key: str, label: str) -> Client:
        if not settings.supabase_url or not key:
            raise RuntimeError(f"SUPABASE_URL and the Supabase {label} key must be set")
        logger.debug(f"Creating Supabase client ({label} key) for {settings.supabase_url}")
        return create_client(settings.supabase_url, key)

    @classmethod
    def get_anon_client(cls) -> Client:
        """New anon-key client with no session attached"""
        return cls._create(settings.supabase_key, "anon")

    @classmethod
    def get_client_for_token(cls, access_token: str) -> Client:
        """New anon-key client whose PostgREST requests run as the token's user"""
        client = cls.get_anon_client()
        client.postgrest.auth(access_token)
        return client

    @classmethod
    def get_service_client(cls) -> Client:
        if cls._service_client is None:
            cls._service_client = cls._create(settings.supabase_service_role_key, "service-role")
        return cls._service_client

    @classmethod
    def reset_client(cls):
        cls._service_client = None


def get_supabase(credentials: HTTPAuthorizationCredentials = Security(bearer_scheme)) -> Client:
    return SupabaseClient.get_client_for_token(credentials.credentials)


def get_auth_client() -> Client:
    return SupabaseClient.get_anon_client()


def get_service_supabase() -> Client:
    return SupabaseClient.get_service_client()
