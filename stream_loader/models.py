# Copyright 2025 Loopper-AI
# Data models for the stream loader

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any, Literal
from urllib.parse import urlparse

from . import __version__
from .utils.path_utils import join_path

OutcomeStatus = Literal["succeeded", "failed"]

DEFAULT_ENDPOINT_HEADERS = {
    "User-Agent": f"stream-loader/{__version__}",
    "Content-Type": "application/json",
}


@dataclass(frozen=True)
class StreamRecord:
    """Single Kinesis record as delivered in the Lambda event."""

    data: str
    sequence_number: str | None = None
    partition_key: str | None = None
    event_id: str | None = None

    @classmethod
    def from_event_record(cls, raw: dict[str, Any]) -> StreamRecord | None:
        """Build from an event record. Returns None when kinesis.data is missing."""
        kinesis = raw.get("kinesis")
        if not isinstance(kinesis, dict) or not isinstance(kinesis.get("data"), str):
            return None
        return cls(
            data=kinesis["data"],
            sequence_number=kinesis.get("sequenceNumber"),
            partition_key=kinesis.get("partitionKey"),
            event_id=raw.get("eventID"),
        )

    def decode(self) -> str:
        """Decode the base64 payload to text. Raises ValueError on bad input."""
        try:
            return base64.b64decode(self.data, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise ValueError(f"Undecodable record payload: {exc}") from exc


@dataclass(frozen=True)
class Endpoint:
    """Search domain endpoint. A bare hostname defaults to https."""

    host: str
    protocol: str = "https"
    headers: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_ENDPOINT_HEADERS))

    @classmethod
    def from_url(cls, url: str, headers: dict[str, str] | None = None) -> Endpoint:
        url = url.strip().rstrip("/")
        parsed = urlparse(url if "://" in url else f"https://{url}")
        if not parsed.netloc:
            raise ValueError(f"Invalid endpoint URL: {url!r}")
        # Documents always go to /{index}/{doc_type} at the domain root
        if parsed.path or parsed.query or parsed.fragment:
            raise ValueError(f"Endpoint URL must not carry a path, query or fragment: {url!r}")
        return cls(
            host=parsed.netloc,
            protocol=parsed.scheme or "https",
            headers=dict(DEFAULT_ENDPOINT_HEADERS if headers is None else headers),
        )

    @property
    def url(self) -> str:
        return f"{self.protocol}://{self.host}"


@dataclass(frozen=True)
class TargetConfig:
    """Where documents are written. Shared read-only by every pipeline in a batch."""

    region: str
    endpoint: Endpoint
    index: str
    doc_type: str

    @property
    def path(self) -> str:
        return join_path("/", self.index, self.doc_type)


@dataclass
class OutboundRequest:
    """One signed document write. Built fresh per record, never reused."""

    endpoint: Endpoint
    path: str
    body: str
    region: str
    method: str = "POST"
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def for_document(cls, target: TargetConfig, body: str) -> OutboundRequest:
        base_headers = {"presigned-expires": "false", "Host": target.endpoint.host}
        return cls(
            endpoint=target.endpoint,
            path=target.path,
            body=body,
            region=target.region,
            # Endpoint-defined headers win over the defaults
            headers={**base_headers, **target.endpoint.headers},
        )

    @property
    def url(self) -> str:
        return f"{self.endpoint.url}{self.path}"


@dataclass
class ForwardResult:
    """Result of POSTing one document to the search endpoint."""

    success: bool
    status_code: int | None = None
    response_body: str = ""
    error: str | None = None


@dataclass
class Outcome:
    """Per-record result handed to the aggregation loop."""

    status: OutcomeStatus
    body: str
    record: StreamRecord
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == "succeeded"


@dataclass(frozen=True)
class BatchResult:
    """Aggregate counts for one invocation."""

    processed: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.processed + self.failed

    def summary(self) -> str:
        line = f"Processed '{self.processed}' records."
        if self.failed:
            line += f" \nThere were '{self.failed}' records that failed to process."
        return line

    def to_dict(self) -> dict[str, Any]:
        return {"processed": self.processed, "failed": self.failed}


@dataclass
class BatchItemFailure:
    """Partial batch response entry for Lambda ReportBatchItemFailures."""

    item_identifier: str

    def to_dict(self) -> dict[str, str]:
        return {"itemIdentifier": self.item_identifier}
