"""Tests for the API server routes and error handling."""

import pytest
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer

from graceful_shutdown.modules.server.api import APIServer
from graceful_shutdown.modules.server.errors import APIError, create_error_middleware
from graceful_shutdown.modules.shutdown.readiness import ReadinessFlag


@pytest.fixture
def readiness():
    return ReadinessFlag()


@pytest.mark.asyncio
async def test_readiness_ok(readiness, mock_logger):
    server = APIServer(readiness, mock_logger)
    async with TestClient(TestServer(server.app)) as client:
        response = await client.get("/healthz")
        assert response.status == 200
        assert await response.json() == {"message": "ok"}


@pytest.mark.asyncio
async def test_readiness_shutting_down(readiness, mock_logger):
    server = APIServer(readiness, mock_logger)
    async with TestClient(TestServer(server.app)) as client:
        readiness.mark_shutting_down()
        response = await client.get("/healthz")
        assert response.status == 503
        assert await response.json() == {"code": 503, "message": "the server is shutting down"}


@pytest.mark.asyncio
async def test_hello_world(readiness, mock_logger):
    server = APIServer(readiness, mock_logger, hello_delay=0.01)
    async with TestClient(TestServer(server.app)) as client:
        response = await client.get("/")
        assert response.status == 200
        assert await response.text() == "Hello, World!"


@pytest.mark.asyncio
async def test_hello_world_cancelled(readiness, mock_logger):
    server = APIServer(readiness, mock_logger, hello_delay=5)
    async with TestClient(TestServer(server.app)) as client:
        server.listener.cancel_in_flight()
        response = await client.get("/")
        assert response.status == 503
        assert await response.json() == {"code": 503, "message": "request canceled"}


@pytest.mark.asyncio
async def test_http_errors_pass_through(readiness, mock_logger):
    server = APIServer(readiness, mock_logger)
    async with TestClient(TestServer(server.app)) as client:
        assert (await client.get("/missing")).status == 404
        assert (await client.post("/healthz")).status == 405


@pytest.mark.asyncio
async def test_unexpected_error_becomes_500(mock_logger):
    async def broken(request):
        raise ValueError("boom")

    app = web.Application(middlewares=[create_error_middleware(mock_logger)])
    app.router.add_get("/broken", broken)
    async with TestClient(TestServer(app)) as client:
        response = await client.get("/broken")
        assert response.status == 500
        assert await response.json() == {"code": 500, "message": "internal server error"}

    mock_logger.log_error.assert_called_once_with("Unhandled error serving GET /broken: boom")


def test_api_error_message():
    error = APIError(503, "request canceled")
    assert str(error) == "api error: code=503, message=request canceled"
    assert error.to_dict() == {"code": 503, "message": "request canceled"}
