"""Field coercion shared by the snapshot adapters."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from project_health_engine.exceptions import SnapshotParseError


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require(record: dict, fields: tuple[str, ...], where: str) -> None:
    missing = [name for name in fields if is_blank(record.get(name))]
    if missing:
        raise SnapshotParseError(f"{where}: missing required fields {missing}")


def parse_date(value: Any, name: str, where: str) -> Optional[date]:
    """Accept ISO dates or datetimes; datetimes are truncated to their date."""

    if is_blank(value):
        return None
    try:
        text = str(value).strip()
        if len(text) == 10:
            return date.fromisoformat(text)
        return datetime.fromisoformat(text).date()
    except ValueError as exc:
        raise SnapshotParseError(f"{where}: malformed {name} '{value}'") from exc


def parse_float(value: Any, name: str, where: str, default: Optional[float] = None) -> Optional[float]:
    if is_blank(value):
        return default
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise SnapshotParseError(f"{where}: invalid {name} '{value}'") from exc


def parse_bool(value: Any, name: str, where: str, default: bool = False) -> bool:
    if is_blank(value):
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "y"):
        return True
    if text in ("0", "false", "no", "n"):
        return False
    raise SnapshotParseError(f"{where}: invalid {name} '{value}'")


def parse_choice(value: Any, name: str, choices: frozenset, where: str, default: Optional[str] = None) -> str:
    if is_blank(value):
        if default is None:
            raise SnapshotParseError(f"{where}: missing {name}")
        return default
    text = str(value).strip()
    if text not in choices:
        raise SnapshotParseError(f"{where}: invalid {name} '{text}'")
    return text


def parse_id(value: Any) -> Optional[str]:
    return None if is_blank(value) else str(value).strip()
