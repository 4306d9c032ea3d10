from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.sheets import SheetsConfig, get_sheets_config

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    version: str = "0.1.0"
    sheets_configured: bool


@router.get("/", response_model=HealthCheckResponse)
async def health_check(config: SheetsConfig = Depends(get_sheets_config)) -> HealthCheckResponse:
    """
    Report that the API is up and whether both spreadsheet endpoints are set.
    """
    return HealthCheckResponse(
        status="healthy",
        sheets_configured=bool(config.gsheet_get_url and config.gsheet_post_url),
    )
