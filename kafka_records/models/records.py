"""Request and response models for the records explorer."""
from __future__ import annotations

from enum import Enum
from typing import Dict, Generic, List, Optional, Set, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class RecordField(str, Enum):
    """Names accepted by the ``include`` filter of a records read."""

    PARTITION = "partition"
    OFFSET = "offset"
    TIMESTAMP = "timestamp"
    TIMESTAMP_TYPE = "timestampType"
    KEY = "key"
    VALUE = "value"
    HEADERS = "headers"


class Record(BaseModel):
    """
    One message as returned to (or accepted from) operators.

    Every field is optional: a field that was not requested, or that the
    broker did not report, is left unset and dropped on serialisation
    (``exclude_unset``), while an included null key is kept as ``null``.
    """

    partition: Optional[int] = None
    offset: Optional[int] = None
    timestamp: Optional[str] = None
    timestampType: Optional[str] = None
    key: Optional[str] = None
    value: Optional[str] = None
    headers: Optional[Dict[str, str]] = None


class PagedResponse(BaseModel, Generic[T]):
    items: List[T]
    total: int
    size: int
    page: int = 1

    @classmethod
    def for_items(cls, items: List[T]) -> "PagedResponse[T]":
        return cls(items=items, total=len(items), size=len(items), page=1)


class ReadRequest(BaseModel):
    topic: str = Field(..., min_length=1)
    partition: Optional[int] = Field(None, ge=0)
    offset: Optional[int] = Field(None, ge=0)
    timestamp: Optional[str] = Field(None, examples=["2024-01-15T10:30:00Z"])
    limit: int = Field(50, ge=1, le=500)
    include: Set[RecordField] = Field(default_factory=set)


class WriteRequest(BaseModel):
    partition: Optional[int] = Field(None, ge=0)
    timestamp: Optional[str] = Field(None, examples=["2024-01-15T10:30:00Z"])
    key: Optional[str] = None
    value: str
    headers: Dict[str, str] = Field(default_factory=dict)
