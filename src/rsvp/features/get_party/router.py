from fastapi import APIRouter, Depends, HTTPException

from src.rsvp.urls import PARTY_URL
from src.sheets import SheetsError, SheetsGateway, get_sheets_gateway
from src.sheets.http import sheets_http_exception

router = APIRouter()


@router.get(PARTY_URL)
async def get_party(
    token: str | None = None,
    gateway: SheetsGateway = Depends(get_sheets_gateway),
) -> dict:
    """
    Look up the party registered under an invitation token.
    The spreadsheet envelope ``{ok, party: {displayName, members, allowedExtra}}``
    is returned unchanged; ``ok: false`` means the token has no party.
    """
    if not token:
        raise HTTPException(status_code=400, detail="Falta token")

    try:
        return await gateway.get_party(token)
    except SheetsError as e:
        raise sheets_http_exception(e)
