"""Factory for the short-lived kafka-python clients used by each request."""
from __future__ import annotations

from typing import Optional

from kafka import KafkaConsumer, KafkaProducer

from kafka_records.core.config import Settings, settings as default_settings


def _decode(b: Optional[bytes]) -> Optional[str]:
    if b is None:
        return None
    return b.decode("utf-8", "replace")


def _encode(s: Optional[str]) -> Optional[bytes]:
    if s is None:
        return None
    return s.encode("utf-8")


class KafkaClientFactory:
    """
    Builds one consumer or producer per call; callers own and close them.
    Holds no connections itself, so a single instance is shared by all requests.
    """

    def __init__(self, cfg: Optional[Settings] = None) -> None:
        self.settings = cfg or default_settings

    # ---------- bootstrap common kwargs ----------
    def _common_kwargs(self) -> dict:
        s = self.settings
        kw = dict(
            bootstrap_servers=s.kafka_bootstrap,
            client_id=s.client_id,
            request_timeout_ms=s.request_timeout_ms,
            metadata_max_age_ms=s.metadata_max_age_ms,
            api_version_auto_timeout_ms=s.api_version_auto_timeout_ms,
            security_protocol=s.security_protocol,
        )
        if s.kafka_api_version:
            kw["api_version"] = tuple(int(p) for p in s.kafka_api_version.split("."))
        if s.security_protocol.startswith("SASL"):
            kw.update(
                sasl_mechanism=s.sasl_mechanism,
                sasl_plain_username=s.sasl_plain_username,
                sasl_plain_password=s.sasl_plain_password,
            )
        if s.security_protocol.endswith("SSL"):
            kw.update(ssl_cafile=s.ssl_cafile)
        return kw

    def create_consumer(self, max_records: Optional[int] = None) -> KafkaConsumer:
        """Unsubscribed, non-committing consumer; ``max_records`` caps one poll."""
        kw = dict(
            enable_auto_commit=False,
            auto_offset_reset="earliest",
            key_deserializer=_decode,
            value_deserializer=_decode,
        )
        if max_records is not None:
            kw["max_poll_records"] = max_records
        return KafkaConsumer(**{**self._common_kwargs(), **kw})

    def create_producer(self) -> KafkaProducer:
        return KafkaProducer(
            key_serializer=_encode,
            value_serializer=_encode,
            **self._common_kwargs(),
        )
