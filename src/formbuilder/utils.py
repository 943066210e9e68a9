from __future__ import annotations

import random
import secrets
from datetime import datetime, timezone
from typing import Any

import orjson


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()


def parse_dt(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return now_utc()
    return now_utc()


def dumps_json(value: Any) -> str:
    return orjson.dumps(value).decode("utf-8")


def loads_json(value: str | bytes | None) -> Any:
    if not value:
        return None
    return orjson.loads(value)


def new_share_token() -> str:
    return secrets.token_urlsafe(16)


def new_element_id(existing: set[str]) -> str:
    while True:
        candidate = str(random.randint(0, 10_000_000))
        if candidate not in existing:
            return candidate
