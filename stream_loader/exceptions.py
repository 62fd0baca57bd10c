# Copyright 2025 Loopper-AI
# Exception hierarchy for the stream loader

from __future__ import annotations


class StreamLoaderError(Exception):
    """Base exception for all stream loader errors."""


class ConfigurationError(StreamLoaderError, ValueError):
    """Raised when configuration is missing or invalid."""


class CredentialsError(ConfigurationError):
    """Raised when no AWS credentials can be resolved."""


class TransportError(StreamLoaderError):
    """Raised when a signed request could not be delivered (connection error or timeout)."""
