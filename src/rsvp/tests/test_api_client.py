"""Unit tests for HttpRSVPApi, mocking the HTTP client."""

import httpx
import pytest

from src.rsvp.api_client import HttpRSVPApi
from src.rsvp.dtos import SubmissionPayload
from src.rsvp.errors import (
    ConflictError,
    ErrorKind,
    InvalidResponseError,
    NetworkError,
    RequestTimeoutError,
    RSVPError,
)

# =============================================================================
# Mock HTTP infrastructure
# =============================================================================


class MockHttpClient:
    """
    Replaces httpx.AsyncClient as the http_client_class.

    Responses are queued per path; an exception queued instead of a response
    is raised from ``request``.
    """

    def __init__(self):
        self.init_kwargs: dict = {}
        self.calls: list[dict] = []
        self._responses: dict[str, httpx.Response | Exception] = {}

    def on(self, url: str, response: httpx.Response | Exception) -> "MockHttpClient":
        self._responses[url] = response
        return self

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        self.calls.append({"method": method, "url": url, **kwargs})
        response = self._responses[url]
        if isinstance(response, Exception):
            raise response
        return response

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass

    def __call__(self, **kwargs):
        self.init_kwargs = kwargs
        return self


class MockConfig:
    rsvp_api_base_url = "http://invitacion.test"
    http_timeout_seconds = 3.0


PAYLOAD = SubmissionPayload(
    token="tok-1",
    name="Ana",
    answer="Sí",
    guests=1,
    note='{"members":[{"name":"Ana","answer":"Sí"}],"extras":[],"comment":""}',
    received_at="2025-10-01T12:00:00.000Z",
    entry_hash="abc",
)


def make_api(client: MockHttpClient) -> HttpRSVPApi:
    return HttpRSVPApi(http_client_class=client, config=MockConfig())


# =============================================================================
# Tests
# =============================================================================


@pytest.mark.asyncio
async def test_fetch_party_passes_token_and_config():
    envelope = {"ok": True, "party": {"displayName": "Ana", "members": ["Ana"]}}
    client = MockHttpClient().on("/api/party", httpx.Response(200, json=envelope))

    result = await make_api(client).fetch_party("tok-1")

    assert result == envelope
    assert client.calls[0]["params"] == {"token": "tok-1"}
    assert client.init_kwargs == {"base_url": "http://invitacion.test", "timeout": 3.0}


@pytest.mark.asyncio
async def test_fetch_party_non_json_is_invalid_response():
    client = MockHttpClient().on("/api/party", httpx.Response(200, text="<html>"))

    with pytest.raises(InvalidResponseError):
        await make_api(client).fetch_party("tok-1")


@pytest.mark.asyncio
async def test_fetch_status_returns_stored_status():
    status = {"name": "Ana", "answer": "Sí"}
    client = MockHttpClient().on(
        "/api/rsvp-status", httpx.Response(200, json={"ok": True, "status": status})
    )

    assert await make_api(client).fetch_status("tok-1") == status


@pytest.mark.parametrize("body", [{"ok": False}, {"ok": True, "status": None}, {"ok": True, "status": {}}])
@pytest.mark.asyncio
async def test_fetch_status_without_status_is_none(body):
    client = MockHttpClient().on("/api/rsvp-status", httpx.Response(200, json=body))

    assert await make_api(client).fetch_status("tok-1") is None


@pytest.mark.asyncio
async def test_timeout_is_converted():
    client = MockHttpClient().on("/api/rsvp-status", httpx.ReadTimeout("slow"))

    with pytest.raises(RequestTimeoutError) as exc_info:
        await make_api(client).fetch_status("tok-1")
    assert exc_info.value.kind is ErrorKind.TIMEOUT


@pytest.mark.asyncio
async def test_transport_error_is_converted():
    client = MockHttpClient().on("/api/party", httpx.ConnectError("refused"))

    with pytest.raises(NetworkError):
        await make_api(client).fetch_party("tok-1")


@pytest.mark.asyncio
async def test_submit_posts_camel_case_payload():
    client = MockHttpClient().on("/api/rsvp", httpx.Response(200, json={"ok": True, "row": 12}))

    result = await make_api(client).submit(PAYLOAD)

    assert result == {"ok": True, "row": 12}
    call = client.calls[0]
    assert call["method"] == "POST"
    assert call["json"]["receivedAt"] == "2025-10-01T12:00:00.000Z"
    assert call["json"]["entryHash"] == "abc"


@pytest.mark.asyncio
async def test_submit_conflict_carries_stored_status():
    stored = {"name": "Ana", "answer": "No", "guests": 0}
    client = MockHttpClient().on(
        "/api/rsvp",
        httpx.Response(409, json={"ok": False, "reason": "already_confirmed", "status": stored}),
    )

    with pytest.raises(ConflictError) as exc_info:
        await make_api(client).submit(PAYLOAD)
    assert exc_info.value.status == stored


@pytest.mark.asyncio
async def test_submit_conflict_without_body():
    client = MockHttpClient().on("/api/rsvp", httpx.Response(409, text=""))

    with pytest.raises(ConflictError) as exc_info:
        await make_api(client).submit(PAYLOAD)
    assert exc_info.value.status is None


@pytest.mark.asyncio
async def test_submit_failure_surfaces_server_message():
    client = MockHttpClient().on(
        "/api/rsvp", httpx.Response(502, json={"detail": "Error en Apps Script"})
    )

    with pytest.raises(RSVPError) as exc_info:
        await make_api(client).submit(PAYLOAD)
    assert exc_info.value.message == "Error en Apps Script"
    assert not isinstance(exc_info.value, ConflictError)


@pytest.mark.asyncio
async def test_submit_refused_in_body():
    client = MockHttpClient().on(
        "/api/rsvp", httpx.Response(200, json={"ok": False, "error": "Hoja llena"})
    )

    with pytest.raises(RSVPError) as exc_info:
        await make_api(client).submit(PAYLOAD)
    assert exc_info.value.message == "Hoja llena"


@pytest.mark.asyncio
async def test_fetch_party_error_status_is_network_error():
    client = MockHttpClient().on(
        "/api/party", httpx.Response(500, json={"detail": "Error en Apps Script"})
    )

    with pytest.raises(NetworkError) as exc_info:
        await make_api(client).fetch_party("tok-1")
    assert exc_info.value.message == "Error en Apps Script"


@pytest.mark.asyncio
async def test_submit_plain_text_acknowledgement_counts_as_written():
    client = MockHttpClient().on("/api/rsvp", httpx.Response(200, text="Guardado"))

    assert await make_api(client).submit(PAYLOAD) == {"ok": True}
