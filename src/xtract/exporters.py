"""Serialize extracted records to JSON, CSV and spreadsheet formats."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import List, Sequence

from openpyxl import Workbook
from pydantic import BaseModel

from .records import RecordShape

SHEET_TITLE = "records"


def _rows(records: Sequence[BaseModel], shape: RecordShape) -> List[List[object]]:
    names = shape.field_names
    rows: List[List[object]] = []
    for record in records:
        data = record.model_dump(mode="json")
        rows.append([data.get(name) for name in names])
    return rows


def to_json(records: Sequence[BaseModel]) -> str:
    return json.dumps([record.model_dump(mode="json") for record in records], indent=2, ensure_ascii=False)


def from_json(text: str, shape: RecordShape) -> List[BaseModel]:
    payload = json.loads(text)
    if not isinstance(payload, list):
        raise ValueError("expected a JSON array of records")
    return [shape.model.model_validate(item) for item in payload]


def save_csv(records: Sequence[BaseModel], shape: RecordShape, path: Path | str) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(shape.field_names)
        writer.writerows(_rows(records, shape))
        f.flush()
    return path


def save_excel(records: Sequence[BaseModel], shape: RecordShape, path: Path | str) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = SHEET_TITLE
    sheet.append(shape.field_names)
    for row in _rows(records, shape):
        sheet.append(row)
    workbook.save(path)
    workbook.close()
    return path


__all__ = ["to_json", "from_json", "save_csv", "save_excel", "SHEET_TITLE"]
