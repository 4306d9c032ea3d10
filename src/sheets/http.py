from fastapi import HTTPException

from src.sheets.gateway import (
    SheetsError,
    SheetsNotConfiguredError,
    SheetsResponseError,
)


def sheets_http_exception(error: SheetsError) -> HTTPException:
    """Map a spreadsheet failure to the HTTP error the API answers with."""
    if isinstance(error, SheetsResponseError):
        return HTTPException(status_code=502, detail=error.text or "Error en Apps Script")
    if isinstance(error, SheetsNotConfiguredError):
        return HTTPException(status_code=500, detail=str(error))
    return HTTPException(status_code=500, detail=str(error) or "Error en Apps Script")
