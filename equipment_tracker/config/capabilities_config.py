"""
Capabilities Configuration
This config defines the capability flags an employee can be granted inside a studio.
Owners hold every capability; employees are gated by their employee_permissions row.
Used by the capability check, the studio join flow and the permissions backfill script.
"""

# Capability name -> employee_permissions column and the value assumed when no row exists
CAPABILITIES = {
    "dashboard": {
        "column": "can_access_dashboard",
        "employee_default": True,
        "description": "View the studio dashboard summary"
    },
    "equipment": {
        "column": "can_access_equipment",
        "employee_default": True,
        "description": "Browse equipment records and history"
    },
    "issues": {
        "column": "can_access_issues",
        "employee_default": True,
        "description": "Issue equipment to people and record returns"
    },
    "employees": {
        "column": "can_access_employees",
        "employee_default": False,
        "description": "View studio members"
    },
    "reports": {
        "column": "can_access_reports",
        "employee_default": False,
        "description": "View utilization, issue history and maintenance reports"
    },
    "analytics": {
        "column": "can_access_analytics",
        "employee_default": False,
        "description": "View analytics"
    }
}

ROLES = ("owner", "employee")


def capability_columns():
    """Return the employee_permissions column names in a stable order."""
    return [config["column"] for config in CAPABILITIES.values()]


def default_permission_values():
    """
    Column values for a freshly created employee_permissions row.
    Format: {"can_access_dashboard": True, ..., "can_access_analytics": False}
    """
    return {
        config["column"]: config["employee_default"]
        for config in CAPABILITIES.values()
    }


def get_capability_matrix():
    """
    Returns a list describing every capability, for clients building navigation.
    Format: [{"name": "dashboard", "column": "can_access_dashboard", "employee_default": True, "description": "..."}, ...]
    """
    return [
        {"name": name, **config}
        for name, config in CAPABILITIES.items()
    ]
