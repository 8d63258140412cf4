"""
Caller context and the single capability predicate.

The context is resolved once per request from the auth user, the profile row
and the employee_permissions row, then handed to every service call. Nothing
here is cached between requests.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional

from equipment_tracker.config.capabilities_config import CAPABILITIES


def has_capability(profile: Dict[str, Any], capability: str, permissions: Optional[Dict[str, Any]] = None) -> bool:
    """True if the profile may use ``capability``.

    Owners hold every capability. Employees read their permissions row and fall
    back to the per-capability default when the row (or the column) is missing.
    """
    if capability not in CAPABILITIES:
        raise ValueError(f"Unknown capability: {capability}")
    if profile.get("role") == "owner":
        return True
    config = CAPABILITIES[capability]
    if permissions is None:
        return config["employee_default"]
    value = permissions.get(config["column"])
    if value is None:
        return config["employee_default"]
    return bool(value)


def resolve_capabilities(profile: Dict[str, Any], permissions: Optional[Dict[str, Any]] = None) -> FrozenSet[str]:
    return frozenset(
        name for name in CAPABILITIES
        if has_capability(profile, name, permissions)
    )


@dataclass(frozen=True)
class RequestContext:
    user_id: str
    email: str
    role: str
    studio_id: str
    full_name: Optional[str] = None
    capabilities: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_owner(self) -> bool:
        return self.role == "owner"

    def can(self, capability: str) -> bool:
        return capability in self.capabilities

    @classmethod
    def from_rows(cls, profile: Dict[str, Any], permissions: Optional[Dict[str, Any]] = None) -> "RequestContext":
        return cls(
            user_id=profile["id"],
            email=profile.get("email") or "",
            role=profile.get("role") or "employee",
            studio_id=profile["studio_id"],
            full_name=profile.get("full_name"),
            capabilities=resolve_capabilities(profile, permissions),
        )
