# Copyright 2025 Loopper-AI
# Configuration management for the stream loader

from __future__ import annotations

import os
from dataclasses import dataclass

from .exceptions import ConfigurationError
from .models import Endpoint, TargetConfig

DEFAULT_REGION = "us-east-1"
DEFAULT_INDEX = "lambda-kine-index"
DEFAULT_DOC_TYPE = "lambda-kine-type"


@dataclass(frozen=True)
class Config:
    """Immutable configuration from environment variables."""

    endpoint_url: str
    region: str = DEFAULT_REGION
    index: str = DEFAULT_INDEX
    doc_type: str = DEFAULT_DOC_TYPE
    request_timeout: float | None = None
    report_item_failures: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> Config:
        """Load config. Region resolves from ES_REGION, then AWS_REGION."""
        region = (os.environ.get("ES_REGION") or os.environ.get("AWS_REGION") or DEFAULT_REGION).strip()
        timeout = float(os.environ.get("REQUEST_TIMEOUT") or "0")

        return cls(
            endpoint_url=(os.environ.get("ES_ENDPOINT") or "").strip().rstrip("/"),
            region=region,
            index=(os.environ.get("ES_INDEX") or DEFAULT_INDEX).strip(),
            doc_type=(os.environ.get("ES_DOC_TYPE") or DEFAULT_DOC_TYPE).strip(),
            request_timeout=timeout if timeout > 0 else None,
            report_item_failures=os.environ.get("REPORT_BATCH_ITEM_FAILURES", "false").lower() in ("1", "true", "yes"),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> tuple[bool, str | None]:
        if not self.endpoint_url:
            return False, "ES_ENDPOINT not configured"
        if not self.index or not self.doc_type:
            return False, "ES_INDEX and ES_DOC_TYPE must not be empty"
        return True, None

    def target(self) -> TargetConfig:
        """Build the TargetConfig handed to the forwarder."""
        try:
            endpoint = Endpoint.from_url(self.endpoint_url)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        return TargetConfig(region=self.region, endpoint=endpoint, index=self.index, doc_type=self.doc_type)
