# Copyright 2025 Loopper-AI
# Kinesis Lambda event parser

from __future__ import annotations

import logging
from typing import Any

from ..models import StreamRecord

logger = logging.getLogger(__name__)


class KinesisEventParser:
    """Parser for Kinesis event source mapping payloads."""

    @staticmethod
    def extract_records(event: dict[str, Any]) -> list[StreamRecord]:
        """Extract StreamRecords from the event, skipping malformed entries."""
        raw_records = event.get("Records") or []
        records: list[StreamRecord] = []
        for index, raw in enumerate(raw_records):
            record = StreamRecord.from_event_record(raw) if isinstance(raw, dict) else None
            if record is None:
                logger.warning("Skipping malformed record at index=%d", index)
                continue
            records.append(record)
        return records
