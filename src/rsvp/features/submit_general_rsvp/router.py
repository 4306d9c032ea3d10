import logging

from fastapi import APIRouter, Depends, HTTPException

from src.rsvp.features.submit_general_rsvp.dtos import GeneralRSVPRequest, GeneralRSVPResponse
from src.rsvp.submission import utc_timestamp
from src.rsvp.urls import GENERAL_RSVP_URL
from src.sheets import SheetsError, SheetsGateway, get_sheets_gateway
from src.sheets.http import sheets_http_exception

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(GENERAL_RSVP_URL, response_model=GeneralRSVPResponse)
async def submit_general_rsvp(
    request: GeneralRSVPRequest,
    gateway: SheetsGateway = Depends(get_sheets_gateway),
) -> GeneralRSVPResponse:
    """
    Record an RSVP from the open form.

    Every listed adult and child counts as attending; the contact's phone is
    stored digits-only.
    """
    row = request.to_row(received_at=utc_timestamp())
    try:
        result = await gateway.append_rsvp(row)
    except SheetsError as e:
        raise sheets_http_exception(e)

    if isinstance(result, dict) and result.get("ok") is False:
        logger.error(f"Open RSVP for {request.contact_name} refused: {result}")
        raise HTTPException(
            status_code=502,
            detail=result.get("error") or "No pudimos registrar tu asistencia.",
        )

    return GeneralRSVPResponse(
        message="¡Gracias! Hemos recibido tu confirmación.",
        guests=row["guests"],
    )
