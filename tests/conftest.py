import httpx
import pytest

from pytest_httpassert import SoftAssertions


@pytest.fixture
def checks():
    """A fresh failure collector, inspected directly by the test."""
    return SoftAssertions()


@pytest.fixture
def mock_client():
    """Fixture to build an httpx client backed by a request handler."""
    clients: list[httpx.Client] = []

    def _mock_client(handler):
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _mock_client

    for client in clients:
        client.close()


@pytest.fixture
def captured_requests():
    """Handler recording every request and answering with a fixed body."""
    captured: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, text="ok")

    _handler.captured = captured
    return _handler
