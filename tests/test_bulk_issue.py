import pytest
from fastapi import HTTPException

from equipment_tracker.core.exceptions import InsufficientStock, InvalidQuantity, NotFound, StorageError
from equipment_tracker.modules.issues.schemas import BulkIssueCreate, CartLine
from equipment_tracker.modules.issues.service import IssueService
from equipment_tracker.modules.issues.stock import StockLedger
from conftest import add_equipment, quantity_of


def cart(*lines, person="Jonas Grip"):
    return BulkIssueCreate(
        person_name=person,
        person_contact="jonas@example.test",
        issue_notes="Rooftop shoot",
        items=[CartLine(equipment_id=equipment_id, quantity=qty) for equipment_id, qty in lines]
    )


def test_bulk_issue_records_every_line(db, studio):
    camera = add_equipment(db, studio.id, name="Camera", quantity=2)
    lights = add_equipment(db, studio.id, name="LED Panel", quantity=6)

    issues = IssueService(db).bulk_issue(studio.owner_ctx, cart((camera["id"], 1), (lights["id"], 4)))

    assert [i.equipment_name for i in issues] == ["Camera", "LED Panel"]
    assert all(i.person_name == "Jonas Grip" and i.issue_notes == "Rooftop shoot" for i in issues)
    assert quantity_of(db, camera["id"]) == 1
    assert quantity_of(db, lights["id"]) == 2
    assert len(db.rows("issues")) == 2


def test_bulk_issue_rejects_whole_cart_when_one_line_is_short(db, studio):
    camera = add_equipment(db, studio.id, name="Camera", quantity=2)
    lights = add_equipment(db, studio.id, name="LED Panel", quantity=1)

    with pytest.raises(InsufficientStock):
        IssueService(db).bulk_issue(studio.owner_ctx, cart((camera["id"], 1), (lights["id"], 2)))

    assert quantity_of(db, camera["id"]) == 2
    assert quantity_of(db, lights["id"]) == 1
    assert db.rows("issues") == []


def test_bulk_issue_rejects_invalid_quantity_before_writing(db, studio):
    camera = add_equipment(db, studio.id, name="Camera", quantity=2)
    lights = add_equipment(db, studio.id, name="LED Panel", quantity=3)

    with pytest.raises(InvalidQuantity):
        IssueService(db).bulk_issue(studio.owner_ctx, cart((camera["id"], 1), (lights["id"], 0)))

    assert quantity_of(db, camera["id"]) == 2
    assert db.rows("issues") == []


def test_bulk_issue_unknown_equipment_is_not_found(db, studio):
    camera = add_equipment(db, studio.id, name="Camera", quantity=2)

    with pytest.raises(NotFound):
        IssueService(db).bulk_issue(studio.owner_ctx, cart((camera["id"], 1), ("missing", 1)))

    assert quantity_of(db, camera["id"]) == 2


def test_bulk_issue_empty_and_duplicate_carts(db, studio):
    camera = add_equipment(db, studio.id, name="Camera", quantity=2)
    service = IssueService(db)

    with pytest.raises(HTTPException) as empty:
        service.bulk_issue(studio.owner_ctx, cart())
    with pytest.raises(HTTPException) as duplicate:
        service.bulk_issue(studio.owner_ctx, cart((camera["id"], 1), (camera["id"], 1)))

    assert empty.value.status_code == 400
    assert duplicate.value.status_code == 400
    assert quantity_of(db, camera["id"]) == 2


class LateRaceLedger(StockLedger):
    """Another caller empties ``target`` after validation but before it is taken."""

    def __init__(self, supabase, target):
        super().__init__(supabase)
        self.target = target

    def take(self, studio_id, equipment_id, quantity):
        if equipment_id == self.target:
            row = self.read(studio_id, equipment_id)
            StockLedger(self.supabase).take(studio_id, equipment_id, row["quantity"])
        return super().take(studio_id, equipment_id, quantity)


def test_bulk_issue_restores_earlier_lines_when_a_later_line_loses_a_race(db, studio):
    camera = add_equipment(db, studio.id, name="Camera", quantity=2)
    lights = add_equipment(db, studio.id, name="LED Panel", quantity=3)
    service = IssueService(db, ledger=LateRaceLedger(db, target=lights["id"]))

    with pytest.raises(InsufficientStock):
        service.bulk_issue(studio.owner_ctx, cart((camera["id"], 2), (lights["id"], 1)))

    assert quantity_of(db, camera["id"]) == 2
    assert quantity_of(db, lights["id"]) == 0
    assert db.rows("issues") == []


def test_bulk_issue_restores_stock_when_ledger_insert_fails(db, studio):
    camera = add_equipment(db, studio.id, name="Camera", quantity=2)
    lights = add_equipment(db, studio.id, name="LED Panel", quantity=3)
    db.fail_next("issues", "insert")

    with pytest.raises(StorageError):
        IssueService(db).bulk_issue(studio.owner_ctx, cart((camera["id"], 1), (lights["id"], 3)))

    assert quantity_of(db, camera["id"]) == 2
    assert quantity_of(db, lights["id"]) == 3
    statuses = {row["id"]: row["status"] for row in db.rows("equipment")}
    assert statuses[lights["id"]] == "available"
