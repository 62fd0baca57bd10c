# Copyright 2025 Loopper-AI
# Lambda handler: Kinesis stream → signed POST to Elasticsearch
#
# Kinesis event source mapping invokes with {"Records": [...]}.
# Each record's base64 payload is decoded and indexed as one document.
# Failed documents are logged and counted, never retried here.
#
# With REPORT_BATCH_ITEM_FAILURES enabled, failed sequence numbers are
# returned as batchItemFailures so the event source can replay them.

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .clients import resolve_credentials
from .config import Config
from .exceptions import ConfigurationError
from .models import BatchItemFailure
from .parsers import KinesisEventParser
from .services import BatchForwarder, LoggingOutcomeSink

logger = logging.getLogger()


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Kinesis event source mapping → index every record."""
    config = Config.from_environment()
    logger.setLevel(getattr(logging, config.log_level, logging.INFO))

    request_id = getattr(context, "aws_request_id", "") if context else ""
    logger.info("lambda_handler started request_id=%s", request_id)

    is_valid, err = config.validate()
    if not is_valid:
        logger.error("Configuration error: %s", err)
        raise ConfigurationError(err)

    records = KinesisEventParser.extract_records(event)
    logger.info("Processing: record_count=%d", len(records))

    forwarder = BatchForwarder(
        records,
        config.target(),
        LoggingOutcomeSink(),
        credentials=resolve_credentials(),
        request_timeout=config.request_timeout,
    )
    result = asyncio.run(forwarder.run())

    logger.info(result.summary())
    response = result.to_dict()

    if config.report_item_failures and forwarder.failed_records:
        failures = [
            BatchItemFailure(item_identifier=r.sequence_number).to_dict()
            for r in forwarder.failed_records
            if r.sequence_number
        ]
        logger.warning("Returning batchItemFailures: count=%d request_id=%s", len(failures), request_id)
        response["batchItemFailures"] = failures

    return response
