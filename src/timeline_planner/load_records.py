from __future__ import annotations

import datetime as _dt
from typing import Any

import yaml

from .timeline_models import ProjectRecord


class RecordValidationError(Exception):
    """Raised when a records document is malformed (missing fields, bad dates, duplicate ids)."""


_RECORD_KEYS = {"id", "name", "start_date", "end_date", "row_index", "description"}
_REQUIRED_KEYS = ("id", "name", "start_date", "end_date")


def load_records(path: str) -> list[ProjectRecord]:
    """Load project records from a YAML file at the given path (no layout)."""

    with open(path, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    return parse_records(raw)


def parse_records(data: Any) -> list[ProjectRecord]:
    """
    Validate an already-decoded records document.

    Errors name the offending entry the way it reads in the file, e.g.
    `records[2].end_date: expected YYYY-MM-DD date`.
    """
    if not isinstance(data, dict) or "records" not in data:
        raise RecordValidationError("document: expected a mapping with a 'records' list")
    entries = data["records"]
    if not isinstance(entries, list):
        raise RecordValidationError("records: expected a list of project records")

    seen_ids: set[str] = set()
    return [_parse_record(entry, f"records[{idx}]", seen_ids) for idx, entry in enumerate(entries)]


def _parse_record(entry: Any, where: str, seen_ids: set[str]) -> ProjectRecord:
    if not isinstance(entry, dict):
        raise RecordValidationError(f"{where}: expected a record mapping")

    unknown = sorted(str(key) for key in entry if key not in _RECORD_KEYS)
    if unknown:
        raise RecordValidationError(f"{where}: unexpected fields {unknown}")
    missing = [key for key in _REQUIRED_KEYS if key not in entry]
    if missing:
        raise RecordValidationError(f"{where}: record is missing {missing}")

    record_id = _record_id(entry["id"], f"{where}.id")
    if record_id in seen_ids:
        raise RecordValidationError(f"{where}.id: duplicate id '{record_id}'")
    seen_ids.add(record_id)

    name = entry["name"]
    if not isinstance(name, str) or not name.strip():
        raise RecordValidationError(f"{where}.name: project name must be non-empty text")

    row_index = entry.get("row_index")
    if row_index is not None and (not isinstance(row_index, int) or isinstance(row_index, bool) or row_index < 0):
        raise RecordValidationError(f"{where}.row_index: expected non-negative integer")

    description = entry.get("description")
    if description is not None and not isinstance(description, str):
        raise RecordValidationError(f"{where}.description: expected text")

    return ProjectRecord(
        id=record_id,
        name=name,
        start_date=_record_date(entry["start_date"], f"{where}.start_date"),
        end_date=_record_date(entry["end_date"], f"{where}.end_date"),
        row_index=row_index,
        description=description,
    )


def _record_id(value: Any, where: str) -> str:
    # Bare YAML ids such as `1` decode as integers.
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if not isinstance(value, str) or not value.strip():
        raise RecordValidationError(f"{where}: record id must be non-empty text or an integer")
    return value


def _record_date(value: Any, where: str) -> _dt.date:
    # PyYAML decodes unquoted YYYY-MM-DD scalars to dates already.
    if isinstance(value, _dt.datetime):
        return value.date()
    if isinstance(value, _dt.date):
        return value
    if not isinstance(value, str):
        raise RecordValidationError(f"{where}: expected YYYY-MM-DD date")
    try:
        return _dt.date.fromisoformat(value.strip())
    except ValueError as exc:
        raise RecordValidationError(f"{where}: expected YYYY-MM-DD date") from exc
