"""
Stock bookkeeping for equipment checkouts.

equipment.quantity counts the units currently in the studio. Issuing takes
units out, returning puts the full issued quantity back. Every change is a
compare-and-swap: the update only matches while the row still holds the
quantity and status that were validated, so two callers racing for the last
unit cannot both win. A caller that loses the swap re-reads the row and
validates again against the fresh value.
"""

from supabase import Client
from equipment_tracker.config import settings
from equipment_tracker.core.exceptions import InvalidQuantity, InsufficientStock, NotFound, StorageError
from datetime import datetime
from numbers import Number
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

DERIVED_STATUSES = ("available", "issued")


def validate_quantity(value: Any, minimum: int = 1) -> int:
    """Return ``value`` as an int no smaller than ``minimum`` or raise InvalidQuantity.

    NaN and infinities are rejected along with fractions.
    """
    if isinstance(value, bool) or not isinstance(value, Number):
        raise InvalidQuantity(value)
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidQuantity(value)
        value = int(value)
    if value < minimum:
        raise InvalidQuantity(value)
    return int(value)


def issuable_units(row: Dict[str, Any]) -> int:
    """Units that may be checked out; maintenance and retired stock is held back."""
    if row.get("status") not in DERIVED_STATUSES:
        return 0
    return max(int(row.get("quantity") or 0), 0)


def derive_status(current_status: str, quantity: int) -> str:
    if current_status not in DERIVED_STATUSES:
        return current_status
    return "issued" if quantity == 0 else "available"


class StockLedger:
    def __init__(self, supabase: Client, max_attempts: Optional[int] = None):
        self.supabase = supabase
        self.max_attempts = max_attempts or settings.stock_write_attempts

    def read(self, studio_id: str, equipment_id: str) -> Optional[Dict[str, Any]]:
        try:
            result = self.supabase.table("equipment")\
                .select("*")\
                .eq("id", equipment_id)\
                .eq("studio_id", studio_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error reading stock for equipment {equipment_id}: {e}")
            raise StorageError(str(e)) from e
        return result.data[0] if result.data else None

    def _swap(self, row: Dict[str, Any], new_quantity: int) -> Optional[Dict[str, Any]]:
        """Write new_quantity if the row is unchanged since it was read; None if another writer got there first."""
        update = {
            "quantity": new_quantity,
            "updated_at": datetime.utcnow().isoformat()
        }
        status = derive_status(row["status"], new_quantity)
        if status != row["status"]:
            update["status"] = status
        try:
            result = self.supabase.table("equipment")\
                .update(update)\
                .eq("id", row["id"])\
                .eq("studio_id", row["studio_id"])\
                .eq("quantity", row["quantity"])\
                .eq("status", row["status"])\
                .execute()
        except Exception as e:
            logger.error(f"Error writing stock for equipment {row['id']}: {e}")
            raise StorageError(str(e)) from e
        return result.data[0] if result.data else None

    def check(self, studio_id: str, equipment_id: str, quantity: int) -> Dict[str, Any]:
        """Validate a checkout against current stock without writing"""
        quantity = validate_quantity(quantity)
        row = self.read(studio_id, equipment_id)
        if not row:
            raise NotFound("Equipment", reason=f"{equipment_id} not in studio {studio_id}")
        self._ensure_available(row, quantity)
        return row

    def _ensure_available(self, row: Dict[str, Any], quantity: int) -> None:
        available = issuable_units(row)
        if quantity > available:
            reason = None
            if row.get("status") not in DERIVED_STATUSES:
                reason = f"{row.get('name', 'Equipment')} is in {row['status']} and cannot be issued"
            logger.info(f"Insufficient stock for equipment {row['id']}: requested {quantity}, available {available}")
            raise InsufficientStock(row["id"], quantity, available, reason=reason)

    def take(self, studio_id: str, equipment_id: str, quantity: int) -> Dict[str, Any]:
        """Remove quantity units from stock. Returns the updated equipment row."""
        quantity = validate_quantity(quantity)
        for attempt in range(1, self.max_attempts + 1):
            row = self.read(studio_id, equipment_id)
            if not row:
                raise NotFound("Equipment", reason=f"{equipment_id} not in studio {studio_id}")
            self._ensure_available(row, quantity)
            updated = self._swap(row, row["quantity"] - quantity)
            if updated:
                logger.info(f"Stock -{quantity} on equipment {equipment_id}: {row['quantity']} -> {updated['quantity']}")
                return updated
            logger.info(f"Stock for equipment {equipment_id} changed during checkout (attempt {attempt}), re-reading")
        raise StorageError(
            "Equipment stock is being changed by other requests; please try again",
            equipment_id=equipment_id
        )

    def give_back(self, studio_id: str, equipment_id: str, quantity: int) -> Optional[Dict[str, Any]]:
        """Put quantity units back into stock. Returns the updated row, or None if the equipment is gone."""
        quantity = validate_quantity(quantity)
        for attempt in range(1, self.max_attempts + 1):
            row = self.read(studio_id, equipment_id)
            if not row:
                logger.warning(f"Equipment {equipment_id} no longer exists; {quantity} returned unit(s) not restocked")
                return None
            updated = self._swap(row, row["quantity"] + quantity)
            if updated:
                logger.info(f"Stock +{quantity} on equipment {equipment_id}: {row['quantity']} -> {updated['quantity']}")
                return updated
            logger.info(f"Stock for equipment {equipment_id} changed during restock (attempt {attempt}), re-reading")
        raise StorageError(
            "Equipment stock is being changed by other requests; please try again",
            equipment_id=equipment_id
        )
