"""Equipment CSV layout shared by export and import."""

from typing import Dict, Iterable, List, Optional

from equipment_tracker.core.csv_io import render_csv, read_csv_rows
from equipment_tracker.modules.equipment.schemas import EquipmentResponse

EQUIPMENT_CSV_HEADERS = [
    "Name",
    "Serial Number",
    "Category",
    "Status",
    "Condition",
    "Purchase Date",
    "Purchase Price",
    "Notes",
]

IMPORT_FIELDS = [
    "name",
    "serial_number",
    "category",
    "status",
    "condition",
    "purchase_date",
    "purchase_price",
    "notes",
]


def export_equipment_csv(equipment: Iterable[EquipmentResponse]) -> str:
    rows = []
    for item in equipment:
        rows.append([
            item.name,
            item.serial_number or "",
            item.category_name or "",
            item.status,
            item.condition or "",
            item.purchase_date.isoformat() if item.purchase_date else "",
            "" if item.purchase_price is None else str(item.purchase_price),
            item.notes or "",
        ])
    return render_csv(EQUIPMENT_CSV_HEADERS, rows)


def parse_equipment_csv(text: str) -> List[Dict[str, Optional[str]]]:
    """Map data rows to import fields by column position.

    The first row is the header and is skipped. Missing trailing cells and
    empty cells become None. Rows without a name are dropped.
    """
    rows = read_csv_rows(text)
    if len(rows) < 2:
        return []

    parsed = []
    for cells in rows[1:]:
        record = {
            field: (cells[i] if i < len(cells) and cells[i] else None)
            for i, field in enumerate(IMPORT_FIELDS)
        }
        if not record["name"]:
            continue
        parsed.append(record)
    return parsed
