"""Projection of consumed kafka-python records onto the public Record shape."""
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Union

from kafka.consumer.fetcher import ConsumerRecord

from kafka_records.core.timestamps import format_timestamp
from kafka_records.models.records import Record, RecordField

# kafka-python exposes the timestamp type as the wire attribute bit.
_TIMESTAMP_TYPES = {0: "CREATE_TIME", 1: "LOG_APPEND_TIME"}
NO_TIMESTAMP_TYPE = "NO_TIMESTAMP_TYPE"

_UNSET = object()


def _timestamp(rec: ConsumerRecord) -> Any:
    if rec.timestamp is None or rec.timestamp < 0:
        return _UNSET
    return format_timestamp(rec.timestamp)


def _timestamp_type(rec: ConsumerRecord) -> str:
    return _TIMESTAMP_TYPES.get(rec.timestamp_type, NO_TIMESTAMP_TYPE)


def _headers(rec: ConsumerRecord) -> Dict[str, str]:
    return {
        k: (v.decode("utf-8", "replace") if v is not None else "")
        for k, v in (rec.headers or [])
    }


# Each accessor is only evaluated when its field is requested.
_ACCESSORS: Dict[RecordField, Callable[[ConsumerRecord], Any]] = {
    RecordField.PARTITION: lambda rec: rec.partition,
    RecordField.OFFSET: lambda rec: rec.offset,
    RecordField.TIMESTAMP: _timestamp,
    RecordField.TIMESTAMP_TYPE: _timestamp_type,
    RecordField.KEY: lambda rec: rec.key,
    RecordField.VALUE: lambda rec: rec.value,
    RecordField.HEADERS: _headers,
}


def project(rec: ConsumerRecord, include: Iterable[Union[RecordField, str]] = ()) -> Record:
    """
    Build a Record holding only the fields named in ``include``
    (all fields when it is empty). Excluded fields stay unset, not null.
    """
    wanted = {RecordField(f) for f in include}
    values: Dict[str, Any] = {}
    for field, accessor in _ACCESSORS.items():
        if wanted and field not in wanted:
            continue
        value = accessor(rec)
        if value is not _UNSET:
            values[field.value] = value
    return Record(**values)
