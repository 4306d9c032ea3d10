import abc
import logging
from typing import Any, Protocol

import httpx

from src.config.settings import settings

logger = logging.getLogger(__name__)


class SheetsError(Exception):
    """Base error for the spreadsheet backend."""


class SheetsNotConfiguredError(SheetsError):
    def __init__(self, variable: str) -> None:
        self.variable = variable
        super().__init__(f"Falta {variable} en variables de entorno")


class SheetsUnavailableError(SheetsError):
    """The spreadsheet automation endpoint could not be reached."""


class SheetsResponseError(SheetsError):
    """The spreadsheet automation endpoint answered with a non-2xx status."""

    def __init__(self, status_code: int, text: str) -> None:
        self.status_code = status_code
        self.text = text
        super().__init__(text or f"HTTP {status_code}")


class SheetsGateway(abc.ABC):
    @abc.abstractmethod
    async def get_party(self, token: str) -> dict:
        raise NotImplementedError

    @abc.abstractmethod
    async def get_rsvp_status(self, token: str) -> dict:
        raise NotImplementedError

    @abc.abstractmethod
    async def append_rsvp(self, row: dict[str, Any]) -> dict:
        raise NotImplementedError

    @abc.abstractmethod
    async def list_rows(self, secret: str) -> dict:
        raise NotImplementedError


class SheetsConfig(Protocol):
    gsheet_get_url: str
    gsheet_post_url: str
    http_timeout_seconds: float


class AppsScriptGateway(SheetsGateway):
    """Talks to the Google Apps Script web app that fronts the guest-list spreadsheet."""

    def __init__(
        self,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
        config: SheetsConfig = settings,
    ):
        self._http_client_class = http_client_class
        self._config = config

    def _get_url(self) -> str:
        if not self._config.gsheet_get_url:
            raise SheetsNotConfiguredError("GSHEET_GET_URL")
        return self._config.gsheet_get_url

    def _post_url(self) -> str:
        if not self._config.gsheet_post_url:
            raise SheetsNotConfiguredError("GSHEET_POST_URL")
        return self._config.gsheet_post_url

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            async with self._http_client_class(
                timeout=self._config.http_timeout_seconds, follow_redirects=True
            ) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Spreadsheet {method} failed: {e}")
            raise SheetsUnavailableError(str(e) or type(e).__name__) from e

        if response.is_error:
            logger.error(f"Spreadsheet {method} answered {response.status_code}")
            raise SheetsResponseError(response.status_code, response.text)
        return response

    async def _lookup(self, **params: str) -> dict:
        response = await self._request("GET", self._get_url(), params=params)
        try:
            return response.json()
        except ValueError as e:
            raise SheetsUnavailableError("Respuesta inválida de Apps Script") from e

    async def get_party(self, token: str) -> dict:
        return await self._lookup(action="party", token=token)

    async def get_rsvp_status(self, token: str) -> dict:
        return await self._lookup(action="rsvpStatus", token=token)

    async def append_rsvp(self, row: dict[str, Any]) -> dict:
        response = await self._request("POST", self._post_url(), json=row)
        try:
            return response.json()
        except ValueError:
            return {"ok": True, "text": response.text}

    async def list_rows(self, secret: str) -> dict:
        response = await self._request(
            "GET", self._get_url(), params={"action": "list", "secret": secret}
        )
        try:
            return response.json()
        except ValueError:
            return {"ok": True, "rows": []}
