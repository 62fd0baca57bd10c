# Copyright 2025 Loopper-AI
# Batch forwarding services

from .forwarder import BatchForwarder
from .sink import LoggingOutcomeSink, OutcomeSink

__all__ = ["BatchForwarder", "LoggingOutcomeSink", "OutcomeSink"]
