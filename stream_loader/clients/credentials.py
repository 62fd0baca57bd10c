# Copyright 2025 Loopper-AI
# AWS credential resolution

from __future__ import annotations

import logging

import boto3
from botocore.credentials import ReadOnlyCredentials
from botocore.exceptions import BotoCoreError

from ..exceptions import CredentialsError

logger = logging.getLogger(__name__)


def resolve_credentials(session: boto3.Session | None = None) -> ReadOnlyCredentials:
    """Resolve frozen credentials from the boto3 credential chain.

    Environment variables come first in the chain, so a Lambda execution
    role's AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY / AWS_SESSION_TOKEN
    are picked up without extra configuration.

    Raises CredentialsError when nothing is resolvable.
    """
    session = session or boto3.Session()
    try:
        credentials = session.get_credentials()
    except BotoCoreError as exc:
        raise CredentialsError(f"Failed to resolve AWS credentials: {exc}") from exc

    if credentials is None:
        raise CredentialsError("No AWS credentials found in the environment")

    frozen = credentials.get_frozen_credentials()
    logger.debug("Resolved credentials access_key=%s...", frozen.access_key[:4])
    return frozen
