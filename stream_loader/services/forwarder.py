# Copyright 2025 Loopper-AI
# Batch forwarder: stream records → signed document writes
#
# Every record runs its own decode → build → sign → send pipeline as an
# asyncio task. Pipelines return an Outcome instead of touching shared
# state; a single aggregation loop consumes them in completion order and
# owns the tally.

from __future__ import annotations

import asyncio
import logging
from typing import Protocol, Sequence

from botocore.credentials import Credentials, ReadOnlyCredentials

from ..clients import HttpClient, RequestSigner, resolve_credentials
from ..models import BatchResult, ForwardResult, OutboundRequest, Outcome, StreamRecord, TargetConfig
from .sink import OutcomeSink

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Anything that can deliver a signed request."""

    async def send(self, request: OutboundRequest) -> ForwardResult: ...


class BatchForwarder:
    """Forwards one batch of stream records to the search endpoint.

    Scoped to a single invocation. Per-record failures are recorded and
    reported through the sink; they never abort the batch.

    Args:
        records: StreamRecords to forward, possibly empty
        config: Target endpoint, index and document type
        sink: Receives succeed/fail notifications, one per record
        credentials: Signing credentials; resolved from the environment when omitted
        transport: Delivers signed requests; an HttpClient is opened per run when omitted
        request_timeout: Total timeout in seconds for the default HttpClient

    Raises:
        TypeError: records is not a sequence of StreamRecord
        CredentialsError: no credentials given and none resolvable
    """

    def __init__(
        self,
        records: Sequence[StreamRecord],
        config: TargetConfig,
        sink: OutcomeSink,
        credentials: Credentials | ReadOnlyCredentials | None = None,
        transport: Transport | None = None,
        request_timeout: float | None = None,
    ):
        if not isinstance(records, (list, tuple)):
            raise TypeError(f"records must be a list or tuple, got {type(records).__name__}")
        for record in records:
            if not isinstance(record, StreamRecord):
                raise TypeError(f"records must contain StreamRecord values, got {type(record).__name__}")

        self.records = tuple(records)
        self.config = config
        self.sink = sink
        self.credentials = credentials if credentials is not None else resolve_credentials()
        self.signer = RequestSigner(self.credentials)
        self.transport = transport
        self.request_timeout = request_timeout

        self.processed = 0
        self.failed: list[str] = []
        self.failed_records: list[StreamRecord] = []

    def build_request(self, body: str) -> OutboundRequest:
        """Build the unsigned write request for one decoded document."""
        return OutboundRequest.for_document(self.config, body)

    async def run(self) -> BatchResult:
        """Forward every record concurrently and wait for all of them."""
        self.processed = 0
        self.failed = []
        self.failed_records = []

        if not self.records:
            logger.info("No records to forward")
            return BatchResult()

        logger.info(
            "Forwarding batch: record_count=%d target=%s%s",
            len(self.records),
            self.config.endpoint.url,
            self.config.path,
        )

        if self.transport is not None:
            await self._dispatch(self.transport)
        else:
            async with HttpClient(timeout=self.request_timeout) as transport:
                await self._dispatch(transport)

        result = BatchResult(processed=self.processed, failed=len(self.failed))
        logger.info("Batch complete: processed=%d failed=%d", result.processed, result.failed)
        return result

    async def _dispatch(self, transport: Transport) -> None:
        tasks = [asyncio.ensure_future(self._forward(record, transport)) for record in self.records]
        try:
            for next_done in asyncio.as_completed(tasks):
                self._record(await next_done)
        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

    def _record(self, outcome: Outcome) -> None:
        """Update the tally, then notify the sink. Sink errors are logged, not raised."""
        if outcome.succeeded:
            self.processed += 1
            self._notify(self.sink.succeed, f"Added document: '{outcome.body}'")
            return

        logger.warning("Forward failed: sequence_number=%s error=%s", outcome.record.sequence_number, outcome.error)
        self.failed.append(outcome.body)
        self.failed_records.append(outcome.record)
        self._notify(self.sink.fail, f"Failed to add document: '{outcome.body}'")

    @staticmethod
    def _notify(notify, message: str) -> None:
        try:
            notify(message)
        except Exception:
            logger.exception("Outcome sink raised for message=%s", message)

    async def _forward(self, record: StreamRecord, transport: Transport) -> Outcome:
        """Run one record's pipeline. Never raises for per-record errors."""
        try:
            body = record.decode()
        except ValueError as exc:
            return Outcome(status="failed", body=record.data, record=record, error=str(exc))

        try:
            request = self.build_request(body)
            self.signer.sign(request)
            result = await transport.send(request)
        except Exception as exc:
            return Outcome(status="failed", body=body, record=record, error=str(exc))

        if not result.success:
            return Outcome(status="failed", body=body, record=record, error=f"status={result.status_code} {result.error}")

        logger.debug("Forward success: sequence_number=%s status=%s", record.sequence_number, result.status_code)
        return Outcome(status="succeeded", body=body, record=record)
