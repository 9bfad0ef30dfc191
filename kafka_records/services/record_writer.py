"""Single-record publication through a request-scoped producer."""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import Dict, List, Optional, Tuple

from kafka import KafkaProducer
from kafka.errors import KafkaError

from kafka_records.core.config import settings
from kafka_records.core.exceptions import BrokerSendFailure
from kafka_records.core.timestamps import format_timestamp, parse_timestamp
from kafka_records.infra.kafka.clients import KafkaClientFactory
from kafka_records.models.records import Record, WriteRequest

logger = logging.getLogger(__name__)


def to_wire_headers(headers: Optional[Dict[str, str]]) -> List[Tuple[str, bytes]]:
    """Convert a header mapping to kafka-python's ``[(key, bytes)]`` form."""
    return [(k, v.encode("utf-8")) for k, v in (headers or {}).items()]


class RecordWriter:
    """
    Publishes one record per call and reports the outcome through a future.

    Lifecycle of a call: Idle -> Sending -> Completed | Failed -> HandleClosed.
    The producer is closed as soon as the send settles; the returned future
    resolves only after that, with a Record or a BrokerSendFailure.
    """

    def __init__(self, factory: KafkaClientFactory, close_timeout_sec: Optional[float] = None) -> None:
        self._factory = factory
        self.close_timeout_sec = (
            settings.producer_close_timeout_sec if close_timeout_sec is None else close_timeout_sec
        )

    def write(self, topic: str, req: WriteRequest) -> "Future[Record]":
        """
        Send ``req`` to ``topic``.

        Raises
        ------
        InvalidTimestamp
            Synchronously, before any producer is created. Every broker-side
            failure is delivered through the returned future instead.
        """
        ts_ms = parse_timestamp(req.timestamp)
        headers = to_wire_headers(req.headers)

        promise: "Future[Record]" = Future()
        promise.set_running_or_notify_cancel()

        try:
            producer = self._factory.create_producer()
        except KafkaError as exc:
            promise.set_exception(BrokerSendFailure(topic, exc))
            return promise

        completion = _SendCompletion(topic, req, producer, promise, self.close_timeout_sec)
        try:
            sent = producer.send(
                topic,
                value=req.value,
                key=req.key,
                headers=headers,
                partition=req.partition,
                timestamp_ms=ts_ms,
            )
        except Exception as exc:  # serializer and metadata errors are raised by send() itself
            completion.failed(exc)
            return promise

        sent.add_callback(completion.succeeded)
        sent.add_errback(completion.failed)
        return promise


class _SendCompletion:
    """Settles one send exactly once, closing the producer before resolving."""

    def __init__(
        self,
        topic: str,
        req: WriteRequest,
        producer: KafkaProducer,
        promise: "Future[Record]",
        close_timeout_sec: float,
    ) -> None:
        self.topic = topic
        self.req = req
        self.producer = producer
        self.promise = promise
        self.close_timeout_sec = close_timeout_sec
        self._lock = threading.Lock()
        self._settled = False

    def succeeded(self, meta) -> None:
        fields = {"partition": meta.partition}
        # -1 means the broker did not report the value (e.g. acks=0)
        if meta.offset is not None and meta.offset >= 0:
            fields["offset"] = meta.offset
        if meta.timestamp is not None and meta.timestamp >= 0:
            fields["timestamp"] = format_timestamp(meta.timestamp)
        result = Record(
            **fields,
            key=self.req.key,
            value=self.req.value,
            headers=dict(self.req.headers),
        )
        self._settle(result=result)

    def failed(self, exc: BaseException) -> None:
        logger.info("Send to topic %s failed: %s", self.topic, exc, exc_info=exc)
        self._settle(error=BrokerSendFailure(self.topic, exc))

    def _settle(self, result: Optional[Record] = None, error: Optional[BaseException] = None) -> None:
        with self._lock:
            if self._settled:
                return
            self._settled = True
        self._close_producer()
        if error is not None:
            self.promise.set_exception(error)
        else:
            self.promise.set_result(result)

    def _close_producer(self) -> None:
        try:
            self.producer.close(timeout=self.close_timeout_sec)
        except Exception:
            logger.warning("Exception closing Kafka producer", exc_info=True)
