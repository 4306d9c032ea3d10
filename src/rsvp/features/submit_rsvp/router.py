import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from src.rsvp.urls import RSVP_URL
from src.sheets import SheetsError, SheetsGateway, SheetsNotConfiguredError, get_sheets_gateway
from src.sheets.http import sheets_http_exception

logger = logging.getLogger(__name__)

router = APIRouter()


class SubmissionRequest(BaseModel):
    """One spreadsheet row for a party's RSVP."""

    model_config = ConfigDict(populate_by_name=True)

    token: str | None = None
    name: str = Field(min_length=1)
    answer: str
    guests: int = Field(ge=0)
    note: str = ""
    received_at: str = Field(alias="receivedAt")
    entry_hash: str | None = Field(default=None, alias="entryHash")


class ConflictResponse(BaseModel):
    ok: bool = False
    reason: str = "already_confirmed"
    status: dict


async def find_existing_status(gateway: SheetsGateway, token: str) -> dict | None:
    """Stored status for ``token``; None when there is none or it could not be checked."""
    try:
        body = await gateway.get_rsvp_status(token)
    except SheetsNotConfiguredError:
        return None
    except SheetsError as e:
        logger.error(f"Could not check previous RSVP for {token}: {e}")
        return None

    status = body.get("status") if isinstance(body, dict) else None
    if isinstance(status, dict) and status and body.get("ok"):
        return status
    return None


@router.post(
    RSVP_URL,
    response_model=None,
    responses={409: {"model": ConflictResponse}},
)
async def submit_rsvp(
    submission: SubmissionRequest,
    gateway: SheetsGateway = Depends(get_sheets_gateway),
) -> dict | JSONResponse:
    """
    Append an RSVP row to the spreadsheet.

    A token that already has a stored RSVP is answered with 409 and the stored
    status, so the first submission for a token is the one that counts.
    """
    if submission.token:
        existing = await find_existing_status(gateway, submission.token)
        if existing is not None:
            logger.info(f"Rejected duplicate RSVP for {submission.token}")
            return JSONResponse(
                status_code=409,
                content=ConflictResponse(status=existing).model_dump(),
            )

    try:
        return await gateway.append_rsvp(submission.model_dump(by_alias=True))
    except SheetsError as e:
        raise sheets_http_exception(e)
