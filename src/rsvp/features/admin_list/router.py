import secrets
from typing import Protocol

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from src.config.settings import settings
from src.rsvp.urls import ADMIN_LIST_URL
from src.sheets import SheetsError, SheetsGateway, get_sheets_gateway
from src.sheets.http import sheets_http_exception

router = APIRouter()


class AdminConfig(Protocol):
    admin_password: str
    admin_secret: str


class AdminListRequest(BaseModel):
    password: str = ""


def get_admin_config() -> AdminConfig:
    """Dependency to get admin credentials. Override in tests."""
    return settings


@router.post(ADMIN_LIST_URL)
async def admin_list(
    request: AdminListRequest,
    config: AdminConfig = Depends(get_admin_config),
    gateway: SheetsGateway = Depends(get_sheets_gateway),
) -> dict:
    """
    List every row of the guest spreadsheet.
    Requires the admin password; the spreadsheet secret never leaves the server.
    """
    if (
        not request.password
        or not config.admin_password
        or not secrets.compare_digest(request.password, config.admin_password)
    ):
        raise HTTPException(status_code=401, detail="No autorizado")

    if not config.admin_secret:
        raise HTTPException(status_code=500, detail="Faltan variables de entorno")

    try:
        return await gateway.list_rows(config.admin_secret)
    except SheetsError as e:
        raise sheets_http_exception(e)
