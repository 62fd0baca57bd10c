# Copyright 2025 Loopper-AI
# Tests for signing, credentials and the HTTP client

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from aiohttp import web
from aiohttp import test_utils
from botocore.credentials import Credentials

from stream_loader.exceptions import CredentialsError, TransportError
from stream_loader.models import Endpoint, OutboundRequest, TargetConfig


def _make_request(endpoint: Endpoint, body: str = '{"title": "Recall"}') -> OutboundRequest:
    target = TargetConfig(region="us-east-1", endpoint=endpoint, index="recalls", doc_type="recall")
    return OutboundRequest.for_document(target, body)


class TestRequestSigner:
    """Test suite for RequestSigner."""

    def test_adds_sigv4_headers(self):
        from stream_loader.clients import RequestSigner

        request = _make_request(Endpoint(host="search-test.us-east-1.es.amazonaws.com"))
        RequestSigner(Credentials("AKIDEXAMPLE", "secret")).sign(request)

        auth = request.headers["Authorization"]
        assert auth.startswith("AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/")
        assert "/us-east-1/es/aws4_request" in auth
        assert "SignedHeaders=" in auth and "host" in auth
        assert "X-Amz-Date" in request.headers
        assert "X-Amz-Security-Token" not in request.headers

    def test_keeps_existing_headers(self):
        from stream_loader.clients import RequestSigner

        request = _make_request(Endpoint(host="search-test.us-east-1.es.amazonaws.com"))
        RequestSigner(Credentials("AKIDEXAMPLE", "secret")).sign(request)

        assert request.headers["Host"] == "search-test.us-east-1.es.amazonaws.com"
        assert request.headers["presigned-expires"] == "false"
        assert request.body == '{"title": "Recall"}'
        assert request.path == "/recalls/recall"

    def test_session_token_is_sent(self):
        from stream_loader.clients import RequestSigner

        request = _make_request(Endpoint(host="search-test.us-east-1.es.amazonaws.com"))
        creds = Credentials("ASIAEXAMPLE", "secret", "session-token")
        RequestSigner(creds.get_frozen_credentials()).sign(request)

        assert request.headers["X-Amz-Security-Token"] == "session-token"


class TestResolveCredentials:
    """Test suite for resolve_credentials."""

    @patch.dict(
        "os.environ",
        {"AWS_ACCESS_KEY_ID": "AKIDENV", "AWS_SECRET_ACCESS_KEY": "envsecret", "AWS_SESSION_TOKEN": "envtoken"},
        clear=True,
    )
    def test_from_environment(self):
        from stream_loader.clients import resolve_credentials

        creds = resolve_credentials()

        assert creds.access_key == "AKIDENV"
        assert creds.secret_key == "envsecret"
        assert creds.token == "envtoken"

    def test_none_resolvable_raises(self):
        from stream_loader.clients import resolve_credentials

        session = MagicMock()
        session.get_credentials.return_value = None

        with pytest.raises(CredentialsError, match="No AWS credentials"):
            resolve_credentials(session)

    def test_credentials_error_is_a_value_error(self):
        from stream_loader.clients import resolve_credentials

        session = MagicMock()
        session.get_credentials.return_value = None

        with pytest.raises(ValueError):
            resolve_credentials(session)


async def _start_server(handler) -> test_utils.TestServer:
    app = web.Application()
    app.router.add_post("/{index}/{doc_type}", handler)
    server = test_utils.TestServer(app, host="127.0.0.1")
    await server.start_server()
    return server


class TestHttpClient:
    """Test suite for HttpClient."""

    @pytest.mark.asyncio
    async def test_success_buffers_chunked_body(self):
        from stream_loader.clients import HttpClient

        received = {}

        async def handler(request):
            received["path"] = request.path
            received["host"] = request.headers.get("Host")
            received["body"] = await request.text()
            resp = web.StreamResponse(status=201)
            await resp.prepare(request)
            for part in (b'{"result":', b'"created"', b"}"):
                await resp.write(part)
            await resp.write_eof()
            return resp

        server = await _start_server(handler)
        try:
            endpoint = Endpoint(host=f"127.0.0.1:{server.port}", protocol="http")
            request = _make_request(endpoint)
            async with HttpClient() as client:
                result = await client.send(request)
        finally:
            await server.close()

        assert result.success is True
        assert result.status_code == 201
        assert result.response_body == '{"result":"created"}'
        assert received == {"path": "/recalls/recall", "host": f"127.0.0.1:{server.port}", "body": '{"title": "Recall"}'}

    @pytest.mark.asyncio
    async def test_non_2xx_is_unsuccessful(self):
        from stream_loader.clients import HttpClient

        async def handler(request):
            return web.json_response({"error": "mapper_parsing_exception"}, status=400)

        server = await _start_server(handler)
        try:
            endpoint = Endpoint(host=f"127.0.0.1:{server.port}", protocol="http")
            async with HttpClient(timeout=5) as client:
                result = await client.send(_make_request(endpoint))
        finally:
            await server.close()

        assert result.success is False
        assert result.status_code == 400
        assert result.error == "HTTP 400"
        assert "mapper_parsing_exception" in result.response_body

    @pytest.mark.asyncio
    async def test_connection_error_raises_transport_error(self):
        from stream_loader.clients import HttpClient

        async def handler(request):
            return web.Response()

        server = await _start_server(handler)
        port = server.port
        await server.close()

        endpoint = Endpoint(host=f"127.0.0.1:{port}", protocol="http")
        async with HttpClient(timeout=5) as client:
            with pytest.raises(TransportError):
                await client.send(_make_request(endpoint))

    @pytest.mark.asyncio
    async def test_send_outside_context_raises(self):
        from stream_loader.clients import HttpClient

        with pytest.raises(RuntimeError, match="async context manager"):
            await HttpClient().send(_make_request(Endpoint(host="localhost")))
