# Copyright 2025 Loopper-AI
# Outcome notification sinks

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class OutcomeSink(Protocol):
    """Receives one notification per forwarded record."""

    def succeed(self, message: str) -> None: ...
    def fail(self, message: str) -> None: ...


class LoggingOutcomeSink:
    """Writes outcome notifications to the Lambda log."""

    def succeed(self, message: str) -> None:
        logger.info(message)

    def fail(self, message: str) -> None:
        logger.warning(message)
