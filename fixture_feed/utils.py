from __future__ import annotations

import os
import pathlib
from datetime import date, datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

import orjson
from dateutil import parser as dtparser

REFERENCE_TZ = "America/Bahia"


class OutputWriteError(RuntimeError):
    """Raised when the output artifact cannot be serialised or written."""


def ensure_dir(p: str | pathlib.Path) -> None:
    pathlib.Path(p).mkdir(parents=True, exist_ok=True)


def now_in(tz_name: str = REFERENCE_TZ) -> datetime:
    return datetime.now(ZoneInfo(tz_name))


def iso_z(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def parse_instant(value: object) -> Optional[datetime]:
    """Parse an upstream timestamp into an aware datetime (naive values are UTC)."""
    if value is None or value == "":
        return None
    try:
        dt = dtparser.isoparse(str(value))
    except (ValueError, OverflowError):
        try:
            dt = dtparser.parse(str(value))
        except (ValueError, OverflowError):
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def from_timestamp(value: object) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def local_date(dt: datetime, tz_name: str = REFERENCE_TZ) -> date:
    return dt.astimezone(ZoneInfo(tz_name)).date()


def day_offsets(start: date, days: int) -> list[date]:
    # start..start+days inclusive
    return [start + timedelta(days=i) for i in range(days + 1)]


def compact_day(d: date) -> str:
    return d.strftime("%Y%m%d")


def write_json(path: str | pathlib.Path, data) -> None:
    try:
        payload = orjson.dumps(data, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS)
    except TypeError as e:
        raise OutputWriteError(f"cannot serialise output: {e}") from e
    try:
        ensure_dir(pathlib.Path(path).parent)
        with open(path, "wb") as f:
            f.write(payload)
    except OSError as e:
        raise OutputWriteError(f"cannot write {path}: {e}") from e


def read_json(path: str | pathlib.Path):
    with open(path, "rb") as f:
        return orjson.loads(f.read())


def read_env(name: str, default: str | None = None) -> str | None:
    return os.environ.get(name, default)
