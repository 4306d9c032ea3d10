"""Canonical answers and stored-note parsing.

The spreadsheet has held answers as free text, localized strings and the
``SA-`` placeholder one form variant wrote for "yes". Everything read back
goes through ``normalize_answer`` before it is displayed or counted.
"""

import json
import re
import unicodedata
from typing import Any

from src.rsvp.dtos import NO_LABEL, YES_LABEL

YES_TOKENS = frozenset({"si", "sa-", "yes", "y"})
NO_TOKENS = frozenset({"no", "n"})

_COMBINING_MARKS = re.compile("[\u0300-\u036f]")


def _simplify(value: str) -> str:
    decomposed = unicodedata.normalize("NFD", value.lower())
    return _COMBINING_MARKS.sub("", decomposed)


def normalize_answer(value: Any) -> str:
    if value is None:
        return ""
    base = str(value).strip()
    simplified = _simplify(base)
    if simplified in YES_TOKENS:
        return YES_LABEL
    if simplified in NO_TOKENS:
        return NO_LABEL
    return base


def parse_stored_note(value: Any) -> dict:
    """Parse the note column into a dict.

    Structured notes are JSON objects. Legacy free-text notes, and JSON that
    does not decode to an object, come back as ``{"comment": value}``.
    """
    if value is None or value == "":
        return {}
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            return {"comment": value}
        if isinstance(parsed, dict):
            return parsed
        return {"comment": value}
    if isinstance(value, dict):
        return value
    return {}


def is_structured_note(parsed: dict) -> bool:
    # An empty members list still marks the note as structured.
    return parsed.get("members") not in (None, "", 0, False)
