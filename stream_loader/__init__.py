# Copyright 2025 Loopper-AI
# Kinesis stream → Elasticsearch loader

__version__ = "1.0.0"
