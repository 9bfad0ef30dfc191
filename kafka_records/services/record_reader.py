from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Union

from kafka_records.core.config import settings
from kafka_records.core.timestamps import parse_timestamp
from kafka_records.infra.kafka.clients import KafkaClientFactory
from kafka_records.models.records import PagedResponse, ReadRequest, Record, RecordField
from kafka_records.services.position_resolver import (
    apply_positions,
    resolve_positions,
    select_partitions,
)
from kafka_records.services.projection import project

logger = logging.getLogger(__name__)


class RecordReader:
    """
    Reads one page of records from a topic with a request-scoped consumer.

    Each call creates its own consumer, performs at most one poll and closes
    the consumer before returning, whatever the outcome.
    """

    def __init__(self, factory: KafkaClientFactory, poll_timeout_ms: Optional[int] = None) -> None:
        self._factory = factory
        self.poll_timeout_ms = settings.poll_timeout_ms if poll_timeout_ms is None else poll_timeout_ms

    def read(
        self,
        topic: str,
        partition: Optional[int] = None,
        offset: Optional[int] = None,
        timestamp: Optional[str] = None,
        limit: int = 50,
        include: Iterable[Union[RecordField, str]] = (),
    ) -> PagedResponse[Record]:
        # Input errors surface before any broker round-trip.
        ts_ms = parse_timestamp(timestamp)
        include = [RecordField(f) for f in include]

        c = self._factory.create_consumer(max_records=limit)
        try:
            tps = select_partitions(topic, c.partitions_for_topic(topic), partition)
            c.assign(tps)
            apply_positions(c, resolve_positions(c, tps, offset=offset, timestamp_ms=ts_ms))

            batch = c.poll(timeout_ms=self.poll_timeout_ms, max_records=limit)
            items: List[Record] = [
                project(r, include) for records in batch.values() for r in records
            ]
            logger.debug("Read %d record(s) from %s (%d partition(s))", len(items), topic, len(tps))
            return PagedResponse[Record].for_items(items)
        finally:
            c.close()

    def read_request(self, req: ReadRequest) -> PagedResponse[Record]:
        return self.read(
            req.topic,
            partition=req.partition,
            offset=req.offset,
            timestamp=req.timestamp,
            limit=req.limit,
            include=req.include,
        )
