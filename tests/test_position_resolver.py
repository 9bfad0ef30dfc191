"""
Tests for partition selection and seek positions.
"""

import pytest
from kafka import TopicPartition

from kafka_records.core.exceptions import NoSuchPartition, NoSuchTopic
from kafka_records.services.position_resolver import (
    apply_positions,
    resolve_positions,
    select_partitions,
)
from tests.fakes import BASE_TS, FakeConsumer


class TestSelectPartitions:
    """Tests for partition filtering."""

    def test_all_partitions_without_filter(self):
        """Test that no filter selects every partition in id order."""
        tps = select_partitions("multi", {2, 0, 1})
        assert tps == [TopicPartition("multi", p) for p in (0, 1, 2)]

    def test_filter_selects_one(self):
        """Test that a filter keeps only the matching partition."""
        assert select_partitions("multi", {0, 1, 2}, 1) == [TopicPartition("multi", 1)]

    @pytest.mark.parametrize("available", [None, set(), []])
    def test_no_partitions_is_no_such_topic(self, available):
        """Test that a topic without partitions fails with NoSuchTopic."""
        with pytest.raises(NoSuchTopic):
            select_partitions("ghost", available)

    def test_no_such_topic_checked_before_filter(self):
        """Test that NoSuchTopic wins even when a partition filter is given."""
        with pytest.raises(NoSuchTopic):
            select_partitions("ghost", None, 7)

    def test_unmatched_filter_is_no_such_partition(self):
        """Test that a filter matching nothing names topic and partition."""
        with pytest.raises(NoSuchPartition) as exc_info:
            select_partitions("t", {0}, 4)
        assert exc_info.value.topic == "t"
        assert exc_info.value.partition == 4
        assert "t" in str(exc_info.value) and "4" in str(exc_info.value)


class TestResolvePositions:
    """Tests for starting positions."""

    @pytest.fixture
    def consumer(self, cluster):
        return FakeConsumer(cluster)

    def test_no_offset_no_timestamp_keeps_default(self, consumer):
        """Test that without a seek target nothing is resolved."""
        tps = [TopicPartition("t", 0)]
        assert resolve_positions(consumer, tps) == {}
        assert consumer.calls == []

    def test_offset_within_range(self, consumer):
        """Test that an offset up to the end offset is used as is."""
        tps = [TopicPartition("t", 0)]
        assert resolve_positions(consumer, tps, offset=1) == {tps[0]: 1}
        assert resolve_positions(consumer, tps, offset=3) == {tps[0]: 3}

    def test_offset_past_end_clamps_to_end(self, consumer):
        """Test that an offset beyond the end offset resolves to the end."""
        tps = [TopicPartition("t", 0)]
        assert resolve_positions(consumer, tps, offset=5) == {tps[0]: 3}

    def test_offset_clamped_per_partition(self, cluster, consumer):
        """Test that clamping is decided per partition."""
        cluster.append("multi", 0, value="extra")
        tps = [TopicPartition("multi", p) for p in range(3)]
        positions = resolve_positions(consumer, tps, offset=2)
        assert positions == {tps[0]: 2, tps[1]: 1, tps[2]: 1}

    def test_timestamp_finds_first_offset_at_or_after(self, consumer):
        """Test that a timestamp resolves to the first record at or after it."""
        tps = [TopicPartition("t", 0)]
        assert resolve_positions(consumer, tps, timestamp_ms=BASE_TS + 1000) == {tps[0]: 1}
        assert resolve_positions(consumer, tps, timestamp_ms=BASE_TS + 1) == {tps[0]: 1}

    def test_timestamp_past_last_record_resolves_to_end(self, consumer):
        """Test that a timestamp later than every record resolves to the end offset."""
        tps = [TopicPartition("t", 0)]
        assert resolve_positions(consumer, tps, timestamp_ms=BASE_TS + 60_000) == {tps[0]: 3}

    def test_timestamp_takes_precedence_over_offset(self, consumer):
        """Test that the offset is ignored when a timestamp is given."""
        tps = [TopicPartition("t", 0)]
        assert resolve_positions(consumer, tps, offset=0, timestamp_ms=BASE_TS + 2000) == {tps[0]: 2}

    def test_apply_positions_seeks_each_partition(self, consumer):
        """Test that every resolved position becomes a seek."""
        tps = [TopicPartition("multi", p) for p in range(2)]
        apply_positions(consumer, {tps[0]: 0, tps[1]: 1})
        assert consumer.seeks == [(tps[0], 0), (tps[1], 1)]
