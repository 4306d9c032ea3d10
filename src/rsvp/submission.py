import json
from datetime import UTC, datetime

from src.config.settings import settings
from src.rsvp.dtos import (
    GROUP_ANSWER,
    YES_LABEL,
    MemberAnswer,
    NotePayload,
    StatusSummary,
    SubmissionPayload,
    SummaryMember,
    SummaryType,
)
from src.rsvp.entry_hash import compute_entry_hash


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 with millisecond precision and a ``Z`` suffix."""
    now = now or datetime.now(UTC)
    return now.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def filled_extras(names: list[str]) -> list[str]:
    return [name.strip() for name in names if name and name.strip()]


def serialize_note(note: NotePayload) -> str:
    return json.dumps(note.as_json(), ensure_ascii=False, separators=(",", ":"))


def build_submission(
    *,
    token: str | None,
    display_name: str,
    members: list[MemberAnswer],
    extras: list[str],
    note: str = "",
    timestamp: str | None = None,
    event_id: str | None = None,
) -> tuple[SubmissionPayload, StatusSummary]:
    """
    Turn the answers entered for a party into the row written to the spreadsheet.

    Returns the payload together with the summary a successful write results
    in, so the confirmation view does not need a second round trip.
    """
    timestamp = timestamp or utc_timestamp()
    comment = note.strip()
    answered = [
        SummaryMember(name=member.name, answer=member.answer.label if member.answer else "")
        for member in members
    ]
    extra_names = filled_extras(extras)

    confirmed_members = sum(1 for member in answered if member.answer == YES_LABEL)
    guests = confirmed_members + len(extra_names)

    entry_hash = compute_entry_hash(
        token=token,
        members=[member.as_json() for member in answered],
        extras=extra_names,
        timestamp=timestamp,
        event_id=event_id,
    )

    is_group = len(answered) > 1
    if is_group:
        name = (display_name or answered[0].name or settings.default_guest_name).strip()
        answer = GROUP_ANSWER
    else:
        name = (answered[0].name if answered else "") or display_name or settings.default_guest_name
        name = name.strip()
        answer = answered[0].answer if answered else ""

    payload = SubmissionPayload(
        token=token or None,
        name=name,
        answer=answer,
        guests=guests,
        note=serialize_note(NotePayload(members=answered, extras=extra_names, comment=comment)),
        received_at=timestamp,
        entry_hash=entry_hash,
    )
    summary = StatusSummary(
        type=SummaryType.GROUP if is_group else SummaryType.INDIVIDUAL,
        submitted_at=timestamp,
        note=comment or None,
        guests=guests,
        confirmed=guests,
        confirmed_members=confirmed_members,
        members=answered,
        extras=extra_names,
        hash=entry_hash,
    )
    return payload, summary
