"""Partition selection and starting positions for a bounded records read."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from kafka import KafkaConsumer, TopicPartition

from kafka_records.core.exceptions import NoSuchPartition, NoSuchTopic

logger = logging.getLogger(__name__)


def select_partitions(
    topic: str,
    available: Optional[Iterable[int]],
    partition: Optional[int] = None,
) -> List[TopicPartition]:
    """
    Return the partitions of ``topic`` to read, in id order.

    Raises
    ------
    NoSuchTopic
        If the topic has no partitions at all (checked before filtering).
    NoSuchPartition
        If ``partition`` matches none of the topic's partition ids.
    """
    ids = sorted(available or ())
    if not ids:
        raise NoSuchTopic(topic)
    selected = [TopicPartition(topic, p) for p in ids if partition is None or p == partition]
    if not selected:
        raise NoSuchPartition(topic, partition)
    return selected


def resolve_positions(
    consumer: KafkaConsumer,
    partitions: List[TopicPartition],
    offset: Optional[int] = None,
    timestamp_ms: Optional[int] = None,
) -> Dict[TopicPartition, int]:
    """
    Compute the offset each partition should be seeked to.

    The timestamp wins over the offset. A timestamp past the last record, or an
    offset past the end offset, resolves to the end offset so the partition
    contributes nothing. With neither given the result is empty and the
    consumer keeps its default position.
    """
    if timestamp_ms is not None:
        found = consumer.offsets_for_times({tp: timestamp_ms for tp in partitions}) or {}
        missing = [tp for tp in partitions if found.get(tp) is None]
        end = consumer.end_offsets(missing) if missing else {}
        return {
            tp: (found[tp].offset if found.get(tp) is not None else end[tp])
            for tp in partitions
        }

    if offset is not None:
        end = consumer.end_offsets(partitions)
        return {tp: (offset if offset <= end[tp] else end[tp]) for tp in partitions}

    return {}


def apply_positions(consumer: KafkaConsumer, positions: Dict[TopicPartition, int]) -> None:
    for tp, position in positions.items():
        logger.debug("Seeking %s-%d to offset %d", tp.topic, tp.partition, position)
        consumer.seek(tp, position)
