from datetime import datetime
from numbers import Number
from typing import Any

from src.rsvp.dtos import YES_LABEL, StatusSummary, SummaryMember, SummaryType
from src.rsvp.normalization import is_structured_note, normalize_answer, parse_stored_note


def _summary_members(raw_status: dict, parsed: dict, fallback_name: str) -> list[SummaryMember]:
    stored = parsed.get("members")
    members: list[SummaryMember] = []
    if isinstance(stored, list):
        for member in stored:
            member = member if isinstance(member, dict) else {}
            members.append(
                SummaryMember(
                    name=member.get("name") or fallback_name or "",
                    answer=normalize_answer(member.get("answer")),
                )
            )
    if members:
        return members

    if raw_status.get("name"):
        return [
            SummaryMember(
                name=str(raw_status["name"]),
                answer=normalize_answer(raw_status.get("answer")),
            )
        ]
    if fallback_name:
        return [
            SummaryMember(name=fallback_name, answer=normalize_answer(raw_status.get("answer")))
        ]
    return []


def _summary_comment(raw_note: Any, parsed: dict) -> str | None:
    comment = parsed.get("comment")
    if isinstance(comment, str) and comment.strip():
        return comment.strip()
    if isinstance(raw_note, str) and raw_note and not is_structured_note(parsed):
        return raw_note
    return None


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def build_summary(raw_status: dict, fallback_name: str = "") -> StatusSummary:
    """
    Build the display summary for a status record read from the spreadsheet.

    ``confirmed`` is always recomputed from the members and extras; ``guests``
    keeps whatever number the row stored, when it stored one.
    """
    parsed = parse_stored_note(raw_status.get("note"))
    members = _summary_members(raw_status, parsed, fallback_name)

    stored_extras = parsed.get("extras")
    extras = list(stored_extras) if isinstance(stored_extras, list) else []

    confirmed_members = sum(1 for member in members if member.answer == YES_LABEL)
    stored_guests = raw_status.get("guests")
    guests = int(stored_guests) if _is_number(stored_guests) else confirmed_members + len(extras)

    return StatusSummary(
        type=SummaryType.GROUP if len(members) > 1 else SummaryType.INDIVIDUAL,
        submitted_at=raw_status.get("receivedAt") or raw_status.get("timestamp") or None,
        note=_summary_comment(raw_status.get("note"), parsed),
        guests=guests,
        confirmed=confirmed_members + len(extras),
        confirmed_members=confirmed_members,
        members=members,
        extras=extras,
        hash=raw_status.get("entryHash") or None,
    )


def format_submitted_at(value: str | None) -> str | None:
    """Render an ISO-8601 submission time as ``dd/mm/yyyy HH:MM``; None when unparseable."""
    if not value:
        return None
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return moment.strftime("%d/%m/%Y %H:%M")
