from equipment_tracker.core.csv_io import format_date, read_csv_rows, render_csv
from equipment_tracker.modules.equipment.csv_io import EQUIPMENT_CSV_HEADERS, parse_equipment_csv
from equipment_tracker.modules.equipment.service import EquipmentService
from equipment_tracker.modules.issues.schemas import IssueCreate, ReturnRequest
from equipment_tracker.modules.issues.service import ISSUE_CSV_HEADERS, IssueService
from conftest import add_equipment, auth_headers


def test_render_csv_quotes_every_cell():
    text = render_csv(["Name", "Notes"], [['Rig, "large"', None]])
    assert text == '"Name","Notes"\n"Rig, ""large""",""\n'


def test_read_csv_rows_strips_bom_and_blank_lines():
    rows = read_csv_rows('\ufeffName,Serial\n\n"Boom, long", B-1 \n,\n')
    assert rows == [["Name", "Serial"], ["Boom, long", "B-1"]]


def test_format_date_cuts_timestamps():
    assert format_date("2024-03-09T10:11:12+00:00") == "2024-03-09"
    assert format_date(None) == ""


def test_parse_equipment_csv_maps_columns_by_position():
    text = "Name,Serial Number,Category,Status\nFX3,S-1,Cameras,available\n,S-2\nAputure 300d,,,\n"

    rows = parse_equipment_csv(text)

    assert [r["name"] for r in rows] == ["FX3", "Aputure 300d"]
    assert rows[0]["category"] == "Cameras"
    assert rows[1]["serial_number"] is None
    assert rows[1]["notes"] is None


def test_parse_equipment_csv_header_only():
    assert parse_equipment_csv(",".join(EQUIPMENT_CSV_HEADERS)) == []


def test_import_matches_categories_and_reports_bad_rows(db, studio):
    cameras = db.table("categories").insert({"studio_id": studio.id, "name": "Cameras"}).execute().data[0]
    text = (
        "Name,Serial Number,Category,Status,Condition,Purchase Date,Purchase Price,Notes\n"
        "FX3,S-100,cameras,,,2023-02-01,\"$1,899.00\",Main body\n"
        "Old Dolly,,Grip,Broken,,,,\n"
        "Reflector,,Unlisted,Retired,FAIR,,n/a,\n"
    )

    result = EquipmentService(db).import_csv(studio.owner_ctx, text)

    assert result.imported == 2
    assert [(e.row, e.name) for e in result.errors] == [(2, "Old Dolly")]
    fx3, reflector = sorted(result.items, key=lambda e: e.name)
    assert fx3.category_id == cameras["id"]
    assert fx3.category_name == "Cameras"
    assert fx3.status == "available"
    assert fx3.condition == "good"
    assert fx3.quantity == 1
    assert fx3.purchase_price == 1899.0
    assert reflector.category_id is None
    assert reflector.status == "retired"
    assert reflector.condition == "fair"
    assert reflector.purchase_price is None


def test_equipment_export_lists_category_names(db, studio):
    lenses = db.table("categories").insert({"studio_id": studio.id, "name": "Lenses"}).execute().data[0]
    add_equipment(db, studio.id, name="50mm, f/1.2", category_id=lenses["id"], serial_number="L-5", notes='Say "cheese"')

    text = EquipmentService(db).export_csv(studio.owner_ctx)

    rows = read_csv_rows(text)
    assert rows[0] == EQUIPMENT_CSV_HEADERS
    assert rows[1][:5] == ["50mm, f/1.2", "L-5", "Lenses", "available", "good"]
    assert rows[1][7] == 'Say "cheese"'


def test_issue_export(db, studio):
    item = add_equipment(db, studio.id, name="Tripod", quantity=3)
    service = IssueService(db)
    issued = service.issue_equipment(studio.owner_ctx, IssueCreate(
        equipment_id=item["id"], quantity_issued=2, person_name="Rui", person_contact="rui@example.test",
        expected_return_date="2024-06-01"
    ))
    service.return_equipment(studio.owner_ctx, issued.id, ReturnRequest(return_notes="All good"))

    rows = read_csv_rows(service.export_csv(studio.owner_ctx))

    assert rows[0] == ISSUE_CSV_HEADERS
    record = dict(zip(ISSUE_CSV_HEADERS, rows[1]))
    assert record["Equipment"] == "Tripod"
    assert record["Quantity"] == "2"
    assert record["Status"] == "returned"
    assert record["Expected Return"] == "2024-06-01"
    assert record["Return Notes"] == "All good"


def test_import_route_accepts_csv_upload(client, studio):
    content = "Name,Serial Number\nC-Stand,CS-1\n".encode("utf-8")

    response = client.post(
        "/api/v1/equipment/import",
        files={"file": ("gear.csv", content, "text/csv")},
        headers=auth_headers(studio.owner_token)
    )

    assert response.status_code == 201
    assert response.json()["imported"] == 1

    rejected = client.post(
        "/api/v1/equipment/import",
        files={"file": ("gear.xlsx", content, "application/octet-stream")},
        headers=auth_headers(studio.owner_token)
    )
    assert rejected.status_code == 400


def test_export_routes_return_csv(client, db, studio):
    add_equipment(db, studio.id, name="Tripod", quantity=3)

    response = client.get("/api/v1/equipment/export", headers=auth_headers(studio.employee_token))

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "Tripod" in response.text
