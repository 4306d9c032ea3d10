import httpx

from src.config.settings import settings
from src.sheets.gateway import (
    AppsScriptGateway,
    SheetsConfig,
    SheetsError,
    SheetsGateway,
    SheetsNotConfiguredError,
    SheetsResponseError,
    SheetsUnavailableError,
)


def get_sheets_config() -> SheetsConfig:
    """Dependency to get the spreadsheet endpoints. Override in tests."""
    return settings


def get_sheets_gateway() -> SheetsGateway:
    """Factory for the spreadsheet gateway. Override in tests."""
    return AppsScriptGateway(http_client_class=httpx.AsyncClient, config=get_sheets_config())


__all__ = [
    "AppsScriptGateway",
    "SheetsConfig",
    "SheetsError",
    "SheetsGateway",
    "SheetsNotConfiguredError",
    "SheetsResponseError",
    "SheetsUnavailableError",
    "get_sheets_config",
    "get_sheets_gateway",
]
