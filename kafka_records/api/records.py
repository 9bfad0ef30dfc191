# kafka_records/api/records.py
from __future__ import annotations

import asyncio
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.concurrency import run_in_threadpool

from kafka_records.core.config import settings
from kafka_records.models.records import PagedResponse, Record, RecordField, WriteRequest
from kafka_records.services.record_reader import RecordReader
from kafka_records.services.record_writer import RecordWriter

router = APIRouter(prefix="/topics", tags=["records"])


# ---------- dependencies ----------

def get_reader(request: Request) -> RecordReader:
    return request.app.state.record_reader


def get_writer(request: Request) -> RecordWriter:
    return request.app.state.record_writer


# ---------- helpers ----------

def _parse_include_q(arg: Optional[List[str]]) -> List[RecordField]:
    """
    Accept repeated query keys (?include=key&include=value) as well as a
    single CSV value (?include=key,value). Unknown names raise ValueError.
    """
    if not arg:
        return []
    names = [n.strip() for item in arg for n in item.split(",") if n.strip()]
    return [RecordField(n) for n in names]


# ---------- endpoints ----------

@router.get(
    "/{topic}/records",
    response_model=PagedResponse[Record],
    response_model_exclude_unset=True,
)
def consume_records(
    topic: str,
    partition: Optional[int] = Query(None, ge=0, description="Partition number (optional)"),
    offset: Optional[int] = Query(None, ge=0, description="Offset to seek from (optional)"),
    timestamp: Optional[str] = Query(None, description="ISO8601 timestamp to seek from (optional)"),
    limit: int = Query(settings.default_limit, ge=1, le=settings.max_limit),
    include: Optional[List[str]] = Query(None, description="Fields to return; empty returns all"),
    reader: RecordReader = Depends(get_reader),
):
    """
    Returns at most `limit` records from one poll of the topic.
    `timestamp` takes precedence over `offset`.
    """
    return reader.read(
        topic,
        partition=partition,
        offset=offset,
        timestamp=timestamp,
        limit=limit,
        include=_parse_include_q(include),
    )


@router.post(
    "/{topic}/records",
    response_model=Record,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
async def produce_record(
    topic: str,
    body: WriteRequest,
    writer: RecordWriter = Depends(get_writer),
):
    """Sends one record and returns the partition/offset assigned by the broker."""
    # Creating the producer and send() both block on broker metadata.
    future = await run_in_threadpool(writer.write, topic, body)
    return await asyncio.wrap_future(future)
