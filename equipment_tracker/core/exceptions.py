"""
Typed errors raised by the inventory services.

Every error carries a machine-readable ``code`` and the HTTP status the API
answers with. Routes never translate them by hand: the handler registered in
main.py renders any InventoryError as {"error": code, "detail": message}.

    InventoryError
    +-- NotFound            (404) entity missing or outside the caller's studio
    +-- InvalidQuantity     (422) non-positive or non-integer quantity
    +-- InsufficientStock   (409) requested more units than are available
    +-- AlreadyReturned     (409) return attempted on an issue that is not "issued"
    +-- Unauthorized        (403) caller lacks the role or capability
    +-- StorageError        (502) the backing store failed the request
"""

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class InventoryError(Exception):
    code = "InventoryError"
    status_code = 400

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.code, "detail": self.message}
        if self.details:
            payload["context"] = self.details
        return payload


class NotFound(InventoryError):
    """Same response whether the row is absent or belongs to another studio."""

    code = "NotFound"
    status_code = 404

    def __init__(self, resource: str = "Resource", reason: str = ""):
        if reason:
            logger.info(f"Not found: {resource} - {reason}")
        super().__init__(f"{resource} not found")
        self.resource = resource


class InvalidQuantity(InventoryError):
    code = "InvalidQuantity"
    status_code = 422

    def __init__(self, quantity: Any):
        super().__init__(f"Quantity must be a positive whole number, got {quantity!r}")
        self.quantity = quantity


class InsufficientStock(InventoryError):
    code = "InsufficientStock"
    status_code = 409

    def __init__(self, equipment_id: str, requested: int, available: int, reason: Optional[str] = None):
        message = reason or f"Insufficient quantity. Available: {available}, Requested: {requested}"
        super().__init__(message, equipment_id=equipment_id, requested=requested, available=available)
        self.equipment_id = equipment_id
        self.requested = requested
        self.available = available


class AlreadyReturned(InventoryError):
    code = "AlreadyReturned"
    status_code = 409

    def __init__(self, issue_id: str, status: str = "returned"):
        super().__init__(f"Issue {issue_id} is already {status}", issue_id=issue_id, status=status)
        self.issue_id = issue_id
        self.status = status


class Unauthorized(InventoryError):
    code = "Unauthorized"
    status_code = 403

    def __init__(self, reason: str = "You do not have access to this action"):
        logger.warning(f"Forbidden: {reason}")
        super().__init__(reason)


class StorageError(InventoryError):
    """Failures of the backing store surface as-is; nothing retries them."""

    code = "StorageError"
    status_code = 502
