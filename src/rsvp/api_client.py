import abc
import logging
from typing import Any, Protocol

import httpx

from src.config.settings import settings
from src.rsvp import urls
from src.rsvp.dtos import SubmissionPayload
from src.rsvp.errors import (
    ConflictError,
    InvalidResponseError,
    NetworkError,
    RequestTimeoutError,
    RSVPError,
)

logger = logging.getLogger(__name__)


class RSVPApi(abc.ABC):
    """Collaborator the RSVP flow reads parties and statuses from and writes answers to."""

    @abc.abstractmethod
    async def fetch_party(self, token: str) -> dict:
        """Return the party lookup envelope ``{ok, party?}`` for a token."""
        raise NotImplementedError

    @abc.abstractmethod
    async def fetch_status(self, token: str) -> dict | None:
        """Return the stored status record for a token, or None if nothing was submitted."""
        raise NotImplementedError

    @abc.abstractmethod
    async def submit(self, payload: SubmissionPayload) -> dict:
        """
        Write a submission.

        Raises ConflictError when another submission for the token landed first.
        """
        raise NotImplementedError


class RSVPApiConfig(Protocol):
    rsvp_api_base_url: str
    http_timeout_seconds: float


def _error_text(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or None
    if isinstance(body, dict):
        message = body.get("error") or body.get("detail")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return None


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise InvalidResponseError() from e


class HttpRSVPApi(RSVPApi):
    """RSVPApi speaking JSON over HTTP to the invitation site's API."""

    def __init__(
        self,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
        config: RSVPApiConfig = settings,
    ):
        self._http_client_class = http_client_class
        self._config = config

    def _client(self) -> httpx.AsyncClient:
        return self._http_client_class(
            base_url=self._config.rsvp_api_base_url,
            timeout=self._config.http_timeout_seconds,
        )

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            async with self._client() as client:
                return await client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {url} timed out: {e}")
            raise RequestTimeoutError() from e
        except httpx.HTTPError as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise NetworkError() from e

    async def fetch_party(self, token: str) -> dict:
        response = await self._send("GET", urls.PARTY_URL, params={"token": token})
        if response.status_code >= 400:
            logger.warning(f"Party lookup for {token} failed with {response.status_code}")
            raise NetworkError(_error_text(response))
        body = _json_body(response)
        if not isinstance(body, dict):
            raise InvalidResponseError()
        return body

    async def fetch_status(self, token: str) -> dict | None:
        response = await self._send("GET", urls.RSVP_STATUS_URL, params={"token": token})
        if response.status_code >= 400:
            raise NetworkError(_error_text(response))
        body = _json_body(response)
        if not isinstance(body, dict):
            raise InvalidResponseError()
        status = body.get("status")
        if body.get("ok") and isinstance(status, dict) and status:
            return status
        return None

    async def submit(self, payload: SubmissionPayload) -> dict:
        response = await self._send("POST", urls.RSVP_URL, json=payload.as_json())

        if response.status_code == 409:
            try:
                body = response.json()
            except ValueError:
                body = None
            status = body.get("status") if isinstance(body, dict) else None
            raise ConflictError(status=status if isinstance(status, dict) else None)

        if response.is_error:
            logger.error(f"RSVP write refused with {response.status_code}")
            raise RSVPError(_error_text(response))

        try:
            body = response.json()
        except ValueError:
            # The row was written; only the acknowledgement is not JSON.
            return {"ok": True}
        if isinstance(body, dict) and body.get("ok") is False:
            raise RSVPError(_error_text(response))
        return body if isinstance(body, dict) else {"ok": True}
