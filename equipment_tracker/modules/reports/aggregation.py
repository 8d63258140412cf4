"""
Report figures computed from rows already scoped to one studio.

Every function here is pure: it takes lists of row dicts as returned by
Supabase and returns plain dicts. Empty input gives zero-filled results.
"""

from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from equipment_tracker.modules.equipment.schemas import EQUIPMENT_STATUSES
from equipment_tracker.modules.maintenance.schemas import MAINTENANCE_TYPES

HISTORY_WINDOWS = (7, 30, 90, 365)
TIMELINE_POINTS = 30


def format_rate(part: int, whole: int) -> str:
    """Percentage with one decimal, or "0" when there is nothing to divide by."""
    if whole <= 0:
        return "0"
    return f"{part / whole * 100:.1f}"


def parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def count_by_status(equipment: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    counts = {status: 0 for status in EQUIPMENT_STATUSES}
    for item in equipment:
        status = item.get("status")
        if status in counts:
            counts[status] += 1
    return counts


def equipment_utilization(
    equipment: List[Dict[str, Any]],
    issues: List[Dict[str, Any]],
    top_n: int = 10
) -> Dict[str, Any]:
    """Status breakdown, utilization rate and most-issued equipment."""
    counts = count_by_status(equipment)
    usage = Counter(issue["equipment_id"] for issue in issues if issue.get("equipment_id"))
    most_used = sorted(
        (
            {"equipment_id": item["id"], "name": item["name"], "usage_count": usage.get(item["id"], 0), "status": item.get("status")}
            for item in equipment
        ),
        key=lambda entry: entry["usage_count"],
        reverse=True
    )
    return {
        "total_equipment": len(equipment),
        "status_counts": counts,
        "utilization_rate": format_rate(counts["issued"], len(equipment)),
        "most_used": most_used[:top_n],
    }


def requester_name(issue: Dict[str, Any]) -> str:
    return issue.get("person_name") or issue.get("person_contact") or "Unknown"


def issue_history(
    issues: List[Dict[str, Any]],
    days: int = 30,
    now: Optional[datetime] = None,
    top_n: int = 10,
    recent_n: int = 5
) -> Dict[str, Any]:
    """Issue activity over the trailing ``days`` window, by created_at.

    ``now`` is injectable so the window can be pinned in tests.
    """
    if days not in HISTORY_WINDOWS:
        raise ValueError(f"days must be one of {HISTORY_WINDOWS}, got {days}")
    now = parse_timestamp(now) if now else datetime.now(timezone.utc)
    cutoff = now - timedelta(days=days)

    window = []
    for issue in issues:
        created = parse_timestamp(issue.get("created_at"))
        if created is not None and created >= cutoff:
            window.append((created, issue))
    window.sort(key=lambda pair: pair[0], reverse=True)
    in_window = [issue for _, issue in window]

    issued = sum(1 for issue in in_window if issue.get("status") == "issued")
    returned = sum(1 for issue in in_window if issue.get("status") == "returned")

    per_day = Counter(created.date().isoformat() for created, _ in window)
    timeline = [{"date": day, "count": per_day[day]} for day in sorted(per_day)][-TIMELINE_POINTS:]

    requesters = Counter(requester_name(issue) for issue in in_window)
    top_requesters = [
        {"name": name, "count": count}
        for name, count in sorted(requesters.items(), key=lambda pair: pair[1], reverse=True)[:top_n]
    ]

    return {
        "days": days,
        "total_issues": len(in_window),
        "issued_count": issued,
        "returned_count": returned,
        "return_rate": format_rate(returned, len(in_window)),
        "timeline": timeline,
        "top_requesters": top_requesters,
        "recent_issues": in_window[:recent_n],
    }


def maintenance_summary(
    records: List[Dict[str, Any]],
    equipment_names: Dict[str, str],
    top_n: int = 10
) -> Dict[str, Any]:
    """Record count, total cost, per-type counts and the most-maintained items."""
    total_cost = 0.0
    by_type = {kind: 0 for kind in MAINTENANCE_TYPES}
    per_item: Dict[str, Dict[str, Any]] = {}
    for record in records:
        cost = float(record.get("cost") or 0)
        total_cost += cost
        kind = record.get("maintenance_type")
        if kind in by_type:
            by_type[kind] += 1
        name = equipment_names.get(record.get("equipment_id"), "Unknown")
        entry = per_item.setdefault(name, {"name": name, "count": 0, "cost": 0.0})
        entry["count"] += 1
        entry["cost"] += cost

    top = sorted(per_item.values(), key=lambda entry: entry["count"], reverse=True)[:top_n]
    return {
        "total_records": len(records),
        "total_cost": round(total_cost, 2),
        "type_counts": by_type,
        "top_equipment": [{**entry, "cost": round(entry["cost"], 2)} for entry in top],
    }


def dashboard_summary(
    equipment: List[Dict[str, Any]],
    issues: List[Dict[str, Any]],
    member_count: int,
    recent_n: int = 5
) -> Dict[str, Any]:
    counts = count_by_status(equipment)
    recent = sorted(
        issues,
        key=lambda issue: parse_timestamp(issue.get("created_at")) or datetime.min.replace(tzinfo=timezone.utc),
        reverse=True
    )
    return {
        "total_equipment": len(equipment),
        "available_equipment": counts["available"],
        "issued_equipment": counts["issued"],
        "maintenance_equipment": counts["maintenance"],
        "active_issues": sum(1 for issue in issues if issue.get("status") == "issued"),
        "total_members": member_count,
        "recent_issues": recent[:recent_n],
    }
