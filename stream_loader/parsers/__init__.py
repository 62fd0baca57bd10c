# Copyright 2025 Loopper-AI
# Parser modules for stream events

from .kinesis_parser import KinesisEventParser

__all__ = ["KinesisEventParser"]
