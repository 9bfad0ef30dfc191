"""Record operation errors and their RFC 7807 *Problem Details* rendering."""
from __future__ import annotations

from typing import Optional
from uuid import uuid4

from kafka.errors import UnknownTopicOrPartitionError
from pydantic import BaseModel, ConfigDict, Field


class ProblemDetail(BaseModel):
    """Data model that serialises to RFC 7807 JSON.

    Attributes
    ----------
    type : str
        A URI reference that identifies the problem type.
    title : str
        A short human-readable summary of the problem type.
    status : int
        The HTTP status code.
    detail : str | None
        A human-readable explanation specific to this occurrence.
    instance : str
        A URI reference that identifies the specific occurrence.
    """

    model_config = ConfigDict(json_schema_extra={"required": ["type", "title", "status"]})

    type: str = Field(..., examples=["about:blank"])
    title: str
    status: int = Field(..., ge=400, le=599)
    detail: Optional[str] = None
    instance: str = Field(default_factory=lambda: f"urn:uuid:{uuid4()}")


class RecordOperationError(Exception):
    """Base class for failures of the records read/write path."""

    status_code: int = 500
    title: str = "Internal Server Error"

    def problem(self) -> ProblemDetail:
        return ProblemDetail(
            type="about:blank",
            title=self.title,
            status=self.status_code,
            detail=str(self) or None,
        )


class NoSuchTopic(RecordOperationError):
    """The topic has no partitions at all."""

    status_code = 404
    title = "Not Found"

    def __init__(self, topic: str) -> None:
        super().__init__(f"No such topic: {topic}")
        self.topic = topic


class NoSuchPartition(RecordOperationError):
    """The partition filter matched none of the topic's partitions."""

    status_code = 404
    title = "Not Found"

    def __init__(self, topic: str, partition: int | None) -> None:
        super().__init__(f"No such partition for topic {topic}: {partition}")
        self.topic = topic
        self.partition = partition


class InvalidTimestamp(RecordOperationError, ValueError):
    """A timestamp string is not ISO-8601 with a zone offset."""

    status_code = 400
    title = "Bad Request"

    def __init__(self, value: str) -> None:
        super().__init__(f"timestamp must be ISO8601 with a zone offset: {value!r}")
        self.value = value


class BrokerSendFailure(RecordOperationError):
    """The producer could not deliver a record; the client error is chained as ``__cause__``."""

    def __init__(self, topic: str, cause: BaseException) -> None:
        super().__init__(f"Failed to send record to topic {topic}: {cause}")
        self.topic = topic
        self.cause = cause
        self.__cause__ = cause
        if isinstance(cause, UnknownTopicOrPartitionError):
            self.status_code = 404
            self.title = "Not Found"

