"""ISO-8601 <-> epoch-millisecond conversions for record timestamps."""
from __future__ import annotations

import datetime as dt
import re
from typing import Optional

from pydantic import AwareDatetime, TypeAdapter, ValidationError

from kafka_records.core.exceptions import InvalidTimestamp

_EPOCH = dt.datetime(1970, 1, 1, tzinfo=dt.timezone.utc)
_MS = dt.timedelta(milliseconds=1)

_AWARE = TypeAdapter(AwareDatetime)
# Date and time are required; bare numbers would otherwise parse as unix time.
_ISO_DATETIME = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}")
# Precision beyond microseconds (e.g. nanoseconds) is truncated.
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")


def parse_timestamp(value: Optional[str]) -> Optional[int]:
    """
    Accepts ISO 8601 with 'Z' or an offset, e.g. '2025-08-15T09:30:00Z' or '+02:00',
    with 0-9 fractional digits, and returns epoch milliseconds.
    Values without a zone are rejected.
    """
    if value is None:
        return None
    text = _LONG_FRACTION.sub(r"\1", value.strip().upper())
    if not _ISO_DATETIME.match(text):
        raise InvalidTimestamp(value)
    try:
        ts = _AWARE.validate_python(text)
    except ValidationError as exc:
        raise InvalidTimestamp(value) from exc
    return (ts - _EPOCH) // _MS


def format_timestamp(ts_ms: int) -> str:
    return (
        (_EPOCH + ts_ms * _MS)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )
