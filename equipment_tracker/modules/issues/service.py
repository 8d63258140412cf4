from supabase import Client
from equipment_tracker.modules.issues.schemas import IssueCreate, BulkIssueCreate, ReturnRequest, IssueResponse
from equipment_tracker.modules.issues.stock import StockLedger, validate_quantity
from equipment_tracker.core.capabilities import RequestContext
from equipment_tracker.core.csv_io import render_csv, format_date
from equipment_tracker.core.exceptions import (
    InventoryError, NotFound, InvalidQuantity, AlreadyReturned, StorageError
)
from fastapi import HTTPException
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

ISSUE_CSV_HEADERS = [
    "Equipment",
    "Person",
    "Contact",
    "Quantity",
    "Status",
    "Issue Date",
    "Expected Return",
    "Actual Return",
    "Return Condition",
    "Issue Notes",
    "Return Notes",
]


class IssueService:
    def __init__(self, supabase: Client, ledger: Optional[StockLedger] = None, writer: Optional[Client] = None):
        # Reads run as the caller. Stock and ledger writes use writer, since RLS
        # gives clients no direct write access to issues or equipment quantity.
        self.supabase = supabase
        self.writer = writer or supabase
        self.ledger = ledger or StockLedger(self.writer)

    def _equipment_names(self, ctx: RequestContext) -> Dict[str, str]:
        result = self.supabase.table("equipment")\
            .select("id, name")\
            .eq("studio_id", ctx.studio_id)\
            .execute()
        return {row["id"]: row["name"] for row in result.data or []}

    def _to_response(self, row: Dict[str, Any], names: Dict[str, str]) -> IssueResponse:
        return IssueResponse(**row, equipment_name=names.get(row.get("equipment_id")))

    def _ledger_row(self, ctx: RequestContext, equipment: Dict[str, Any], quantity: int, context: Dict[str, Any]) -> Dict[str, Any]:
        now = datetime.utcnow().isoformat()
        expected = context.get("expected_return_date")
        return {
            "studio_id": ctx.studio_id,
            "equipment_id": equipment["id"],
            "person_name": context["person_name"],
            "person_contact": context.get("person_contact") or None,
            "quantity_issued": quantity,
            "issued_by": ctx.user_id,
            "issued_at": now,
            "expected_return_date": expected.isoformat() if expected else None,
            "issue_condition": equipment.get("condition"),
            "issue_notes": context.get("issue_notes") or None,
            "damaged_qty": 0,
            "status": "issued",
        }

    def _restock(self, ctx: RequestContext, taken: List[Tuple[str, int]]) -> None:
        """Undo decrements whose ledger rows could not be written"""
        for equipment_id, quantity in reversed(taken):
            try:
                self.ledger.give_back(ctx.studio_id, equipment_id, quantity)
            except InventoryError as e:
                logger.error(f"Could not restore {quantity} unit(s) to equipment {equipment_id}: {e}")

    def issue_equipment(self, ctx: RequestContext, issue_data: IssueCreate) -> IssueResponse:
        """Take stock and record the checkout; nothing is written when stock is short."""
        quantity = validate_quantity(issue_data.quantity_issued)
        equipment = self.ledger.take(ctx.studio_id, issue_data.equipment_id, quantity)
        row = self._ledger_row(ctx, equipment, quantity, issue_data.model_dump())
        try:
            result = self.writer.table("issues").insert(row).execute()
            if not result.data:
                raise StorageError("Failed to record issue")
        except Exception as e:
            logger.error(f"Issue insert failed for equipment {equipment['id']}, restoring stock: {e}")
            self._restock(ctx, [(equipment["id"], quantity)])
            if isinstance(e, InventoryError):
                raise
            raise StorageError(str(e)) from e

        issue = result.data[0]
        logger.info(f"Issue {issue['id']}: {quantity} x {equipment['id']} to {issue['person_name']} by {ctx.user_id}")
        return self._to_response(issue, {equipment["id"]: equipment["name"]})

    def bulk_issue(self, ctx: RequestContext, bulk_data: BulkIssueCreate) -> List[IssueResponse]:
        """Issue a cart to one person. Either every line is issued or none is."""
        if not bulk_data.items:
            raise HTTPException(status_code=400, detail="Please add at least one item to the cart")
        seen = set()
        for line in bulk_data.items:
            if line.equipment_id in seen:
                raise HTTPException(status_code=400, detail="This equipment is already in your cart")
            seen.add(line.equipment_id)

        lines = [(line.equipment_id, validate_quantity(line.quantity)) for line in bulk_data.items]
        # Every line must pass before any stock moves
        for equipment_id, quantity in lines:
            self.ledger.check(ctx.studio_id, equipment_id, quantity)

        context = bulk_data.model_dump(exclude={"items"})
        taken: List[Tuple[str, int]] = []
        rows = []
        names = {}
        try:
            for equipment_id, quantity in lines:
                equipment = self.ledger.take(ctx.studio_id, equipment_id, quantity)
                taken.append((equipment_id, quantity))
                names[equipment_id] = equipment["name"]
                rows.append(self._ledger_row(ctx, equipment, quantity, context))
        except InventoryError:
            logger.info(f"Cart for {bulk_data.person_name} rejected after {len(taken)} line(s); restoring stock")
            self._restock(ctx, taken)
            raise

        try:
            result = self.writer.table("issues").insert(rows).execute()
            if not result.data or len(result.data) != len(rows):
                raise StorageError("Failed to record issues")
        except Exception as e:
            logger.error(f"Bulk issue insert failed, restoring stock: {e}")
            self._restock(ctx, taken)
            if isinstance(e, InventoryError):
                raise
            raise StorageError(str(e)) from e

        logger.info(f"Issued {len(rows)} line(s) to {bulk_data.person_name} by {ctx.user_id}")
        return [self._to_response(row, names) for row in result.data]

    def _fetch_issue(self, ctx: RequestContext, issue_id: str) -> Optional[Dict[str, Any]]:
        try:
            result = self.supabase.table("issues")\
                .select("*")\
                .eq("id", issue_id)\
                .eq("studio_id", ctx.studio_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise StorageError(str(e)) from e
        return result.data[0] if result.data else None

    def _reopen(self, ctx: RequestContext, issue_id: str) -> None:
        """Undo a return whose units never made it back to stock"""
        try:
            self.writer.table("issues")\
                .update({
                    "status": "issued",
                    "actual_return_date": None,
                    "return_condition": None,
                    "return_notes": None,
                    "damaged_qty": 0
                })\
                .eq("id", issue_id)\
                .eq("studio_id", ctx.studio_id)\
                .eq("status", "returned")\
                .execute()
        except Exception as e:
            # The restock error is what the caller sees; this one needs a manual fix
            logger.error(f"Could not reopen issue {issue_id} after failed restock; it is returned with stock not restored: {e}")

    def return_equipment(self, ctx: RequestContext, issue_id: str, return_data: ReturnRequest) -> IssueResponse:
        """Close an issue and put its full quantity back in stock.

        Damaged units are recorded on the issue but still restocked.
        """
        issue = self._fetch_issue(ctx, issue_id)
        if not issue:
            raise NotFound("Issue")
        if issue["status"] != "issued":
            raise AlreadyReturned(issue_id, issue["status"])

        damaged = validate_quantity(return_data.damaged_qty, minimum=0)
        if damaged > issue["quantity_issued"]:
            raise InvalidQuantity(damaged)
        condition = return_data.return_condition or ("damaged" if damaged > 0 else "good")

        try:
            result = self.writer.table("issues")\
                .update({
                    "status": "returned",
                    "actual_return_date": datetime.utcnow().isoformat(),
                    "return_condition": condition,
                    "return_notes": return_data.return_notes or None,
                    "damaged_qty": damaged,
                    "updated_at": datetime.utcnow().isoformat()
                })\
                .eq("id", issue_id)\
                .eq("studio_id", ctx.studio_id)\
                .eq("status", "issued")\
                .execute()
        except Exception as e:
            raise StorageError(str(e)) from e
        if not result.data:
            # Another request closed it between our read and write
            raise AlreadyReturned(issue_id)

        try:
            self.ledger.give_back(ctx.studio_id, issue["equipment_id"], issue["quantity_issued"])
        except InventoryError:
            logger.error(f"Restock failed for issue {issue_id}; reopening it")
            self._reopen(ctx, issue_id)
            raise

        returned = result.data[0]
        logger.info(f"Issue {issue_id} returned by {ctx.user_id}: {issue['quantity_issued']} unit(s), {damaged} damaged")
        return self._to_response(returned, self._equipment_names(ctx))

    def get_issue(self, ctx: RequestContext, issue_id: str) -> IssueResponse:
        issue = self._fetch_issue(ctx, issue_id)
        if not issue:
            raise NotFound("Issue")
        return self._to_response(issue, self._equipment_names(ctx))

    def list_rows(self, ctx: RequestContext) -> List[Dict[str, Any]]:
        try:
            result = self.supabase.table("issues")\
                .select("*")\
                .eq("studio_id", ctx.studio_id)\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            raise StorageError(str(e)) from e
        return result.data or []

    def list_issues(
        self,
        ctx: RequestContext,
        status: Optional[str] = None,
        equipment_id: Optional[str] = None,
        person: Optional[str] = None,
        limit: int = 100,
        offset: int = 0
    ) -> List[IssueResponse]:
        """List issues newest first, optionally by status, equipment or person name"""
        try:
            query = self.supabase.table("issues")\
                .select("*")\
                .eq("studio_id", ctx.studio_id)
            if status:
                query = query.eq("status", status)
            if equipment_id:
                query = query.eq("equipment_id", equipment_id)
            if person:
                query = query.ilike("person_name", f"%{person}%")
            result = query.order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            names = self._equipment_names(ctx)
        except Exception as e:
            raise StorageError(str(e)) from e
        return [self._to_response(row, names) for row in result.data or []]

    def equipment_history(self, ctx: RequestContext, equipment_id: str) -> List[IssueResponse]:
        if not self.ledger.read(ctx.studio_id, equipment_id):
            raise NotFound("Equipment")
        return self.list_issues(ctx, equipment_id=equipment_id, limit=1000)

    def export_csv(self, ctx: RequestContext) -> str:
        names = self._equipment_names(ctx)
        rows = []
        for issue in self.list_rows(ctx):
            rows.append([
                names.get(issue["equipment_id"], ""),
                issue.get("person_name") or "",
                issue.get("person_contact") or "",
                issue.get("quantity_issued"),
                issue["status"],
                format_date(issue.get("issued_at")),
                format_date(issue.get("expected_return_date")),
                format_date(issue.get("actual_return_date")),
                issue.get("return_condition") or "",
                issue.get("issue_notes") or "",
                issue.get("return_notes") or "",
            ])
        return render_csv(ISSUE_CSV_HEADERS, rows)
