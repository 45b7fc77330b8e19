from __future__ import annotations

from dataclasses import fields
from pathlib import Path
from typing import Any

from openpyxl import Workbook, load_workbook

from .models import to_camel
from .services import CollectionService, Services


def _headers_for(service: CollectionService) -> list[str]:
    return [to_camel(f.name) for f in fields(service.model) if f.name != "extra"]


def _ensure_sheet_headers(ws, headers: list[str]) -> None:
    # Row 1 always holds the headers; a fresh sheet gets them written in place.
    if ws.max_row <= 1 and all(c.value is None for c in ws[1]):
        for col, h in enumerate(headers, start=1):
            ws.cell(row=1, column=col, value=h)
        return
    existing = [cell.value for cell in ws[1]]
    for h in headers:
        if h not in existing:
            ws.cell(row=1, column=len(existing) + 1, value=h)
            existing.append(h)


def _cell_value(value: Any) -> Any:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    if isinstance(value, dict):
        return str(value)
    return value


def export_workbook(services: Services, path: Path) -> Path:
    """Write every collection to its own sheet in an ``.xlsx`` file.

    Sheets are named after the collection keys; row 1 carries the JSON field
    names and each following row one record, with list fields comma-joined.
    """

    wb = Workbook()
    wb.remove(wb.active)
    for service in services.all():
        ws = wb.create_sheet(service.key)
        headers = _headers_for(service)
        _ensure_sheet_headers(ws, headers)
        for record in service.get_all():
            data = record.to_dict()
            ws.append([_cell_value(data.get(h, "")) for h in headers])
    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    return path


def sheet_to_dicts(path: Path, sheet: str) -> list[dict[str, Any]]:
    """Read one exported sheet back as a list of header-keyed dicts."""

    wb = load_workbook(path, read_only=True)
    try:
        ws = wb[sheet]
        rows = ws.iter_rows(values_only=True)
        headers = next(rows, ())
        out: list[dict[str, Any]] = []
        for r in rows:
            if all(v is None for v in r):
                continue
            out.append({headers[i]: r[i] for i in range(min(len(headers), len(r)))})
        return out
    finally:
        wb.close()
