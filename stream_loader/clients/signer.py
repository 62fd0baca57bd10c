# Copyright 2025 Loopper-AI
# SigV4 request signing for the search domain

from __future__ import annotations

from datetime import datetime, timezone

from botocore.auth import SIGV4_TIMESTAMP, SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials, ReadOnlyCredentials
from botocore.exceptions import NoCredentialsError

from ..models import OutboundRequest

SERVICE_NAME = "es"


class _TimestampedSigV4Auth(SigV4Auth):
    """SigV4Auth that signs with a caller-supplied timestamp instead of reading the clock."""

    def __init__(self, credentials, service_name: str, region_name: str, timestamp: datetime):
        super().__init__(credentials, service_name, region_name)
        self.timestamp = timestamp

    def add_auth(self, request: AWSRequest) -> None:
        if self.credentials is None:
            raise NoCredentialsError()
        request.context["timestamp"] = self.timestamp.strftime(SIGV4_TIMESTAMP)
        self._modify_request_before_signing(request)
        canonical_request = self.canonical_request(request)
        string_to_sign = self.string_to_sign(request, canonical_request)
        signature = self.signature(string_to_sign, request)
        self._inject_signature_to_request(request, signature)


class RequestSigner:
    """Signs outbound requests in place with AWS Signature Version 4."""

    def __init__(self, credentials: Credentials | ReadOnlyCredentials, service: str = SERVICE_NAME):
        self.credentials = credentials
        self.service = service

    def sign(self, request: OutboundRequest, timestamp: datetime | None = None) -> None:
        """Add Authorization and X-Amz-* headers. Headers and body must be final.

        The signature depends only on the request, the credentials and
        the timestamp, which defaults to the current UTC time.
        """
        timestamp = (timestamp or datetime.now(timezone.utc)).astimezone(timezone.utc)
        aws_request = AWSRequest(
            method=request.method,
            url=request.url,
            data=request.body.encode("utf-8"),
            headers=dict(request.headers),
        )
        _TimestampedSigV4Auth(self.credentials, self.service, request.region, timestamp).add_auth(aws_request)
        request.headers = dict(aws_request.headers.items())
