# Copyright 2025 Loopper-AI
# Client modules for AWS and the search endpoint

from .credentials import resolve_credentials
from .http_client import HttpClient
from .signer import RequestSigner

__all__ = ["HttpClient", "RequestSigner", "resolve_credentials"]
