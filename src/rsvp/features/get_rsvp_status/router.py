from fastapi import APIRouter, Depends, HTTPException

from src.rsvp.urls import RSVP_STATUS_URL
from src.sheets import SheetsError, SheetsGateway, get_sheets_gateway
from src.sheets.http import sheets_http_exception

router = APIRouter()


@router.get(RSVP_STATUS_URL)
async def get_rsvp_status(
    token: str | None = None,
    gateway: SheetsGateway = Depends(get_sheets_gateway),
) -> dict:
    """Return the stored RSVP for a token as ``{ok, status?}``."""
    if not token:
        raise HTTPException(status_code=400, detail="Falta token")

    try:
        return await gateway.get_rsvp_status(token)
    except SheetsError as e:
        raise sheets_http_exception(e)
