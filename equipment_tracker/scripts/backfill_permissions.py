"""
Backfill Employee Permissions Script
Creates the default employee_permissions row for every studio employee that
has none, using the defaults from the capabilities config.
Can be run manually after importing members or as part of a nightly job.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from equipment_tracker.config.capabilities_config import default_permission_values
from equipment_tracker.database.supabase_client import SupabaseClient
from supabase import Client
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def backfill_permissions(supabase: Client, dry_run: bool = False) -> int:
    """Insert default permission rows for employees missing one. Returns the number of rows created."""
    logger.info("Backfilling employee permissions...")

    employees = supabase.table("profiles")\
        .select("id, studio_id")\
        .eq("role", "employee")\
        .execute()
    members = [p for p in employees.data or [] if p.get("studio_id")]
    if not members:
        logger.info("No studio employees found")
        return 0

    existing = supabase.table("employee_permissions")\
        .select("employee_id, studio_id")\
        .in_("employee_id", [m["id"] for m in members])\
        .execute()
    covered = {(row["employee_id"], row["studio_id"]) for row in existing.data or []}

    missing = [
        {"employee_id": m["id"], "studio_id": m["studio_id"], **default_permission_values()}
        for m in members
        if (m["id"], m["studio_id"]) not in covered
    ]
    if not missing:
        logger.info(f"All {len(members)} employees already have permissions")
        return 0
    if dry_run:
        for row in missing:
            logger.info(f"Would create permissions for employee {row['employee_id']} in studio {row['studio_id']}")
        return len(missing)

    supabase.table("employee_permissions").insert(missing).execute()
    logger.info(f"Created {len(missing)} permission rows ({len(members) - len(missing)} already present)")
    return len(missing)


def main():
    """Main function to backfill permissions"""
    try:
        supabase = SupabaseClient.get_service_client()
        dry_run = "--dry-run" in sys.argv[1:]
        count = backfill_permissions(supabase, dry_run=dry_run)
        logger.info(f"Backfill completed: {count} row(s){' (dry run)' if dry_run else ''}")
    except Exception as e:
        logger.error(f"Error during backfill: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
