"""CSV rendering and reading shared by the export/import endpoints."""

import csv
import io
from typing import Iterable, List, Sequence


def render_csv(headers: Sequence[str], rows: Iterable[Sequence[object]]) -> str:
    """Render rows with every cell quoted; embedded quotes are doubled."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow(["" if cell is None else cell for cell in row])
    return buffer.getvalue()


def read_csv_rows(text: str) -> List[List[str]]:
    """Parse CSV text into stripped cell lists, header row included."""
    text = text.lstrip("\ufeff")
    reader = csv.reader(io.StringIO(text.strip()))
    return [[cell.strip() for cell in row] for row in reader if any(cell.strip() for cell in row)]


def format_date(value) -> str:
    """ISO timestamps are cut to their date part; empty values stay empty."""
    if not value:
        return ""
    text = value.isoformat() if hasattr(value, "isoformat") else str(value)
    return text[:10]
