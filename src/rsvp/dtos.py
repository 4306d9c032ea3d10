from dataclasses import dataclass, field
from enum import Enum

YES_LABEL = "Sí"
NO_LABEL = "No"
GROUP_ANSWER = "grupo"


class Answer(str, Enum):
    YES = "yes"
    NO = "no"

    @property
    def label(self) -> str:
        return YES_LABEL if self is Answer.YES else NO_LABEL


class SummaryType(str, Enum):
    INDIVIDUAL = "individual"
    GROUP = "grupo"


class RSVPState(str, Enum):
    LOADING_STATUS = "loading_status"
    EDITABLE = "editable"
    SUBMITTING = "submitting"
    CONFIRMED = "confirmed"
    ALREADY_CONFIRMED = "already_confirmed"
    DEADLINE_PASSED = "deadline_passed"

    @property
    def is_terminal(self) -> bool:
        return self in (
            RSVPState.CONFIRMED,
            RSVPState.ALREADY_CONFIRMED,
            RSVPState.DEADLINE_PASSED,
        )


@dataclass(frozen=True)
class Party:
    """Group of invitees registered under one invitation token."""

    token: str
    display_name: str
    members: list[str] = field(default_factory=list)
    allowed_extra: int = 0


@dataclass
class MemberAnswer:
    name: str
    answer: Answer | None = None


@dataclass
class ExtraGuestSlot:
    index: int
    name: str = ""


@dataclass(frozen=True)
class SummaryMember:
    name: str
    answer: str

    def as_json(self) -> dict:
        return {"name": self.name, "answer": self.answer}


@dataclass(frozen=True)
class NotePayload:
    """Structured content stored in the spreadsheet's single note column."""

    members: list[SummaryMember] = field(default_factory=list)
    extras: list[str] = field(default_factory=list)
    comment: str = ""

    def as_json(self) -> dict:
        return {
            "members": [member.as_json() for member in self.members],
            "extras": list(self.extras),
            "comment": self.comment,
        }


@dataclass(frozen=True)
class SubmissionPayload:
    token: str | None
    name: str
    answer: str
    guests: int
    note: str
    received_at: str
    entry_hash: str

    def as_json(self) -> dict:
        return {
            "token": self.token,
            "name": self.name,
            "answer": self.answer,
            "guests": self.guests,
            "note": self.note,
            "receivedAt": self.received_at,
            "entryHash": self.entry_hash,
        }


@dataclass(frozen=True)
class StatusSummary:
    """Read model of what the spreadsheet holds for one token."""

    type: SummaryType
    submitted_at: str | None
    note: str | None
    guests: int
    confirmed: int
    confirmed_members: int
    members: list[SummaryMember] = field(default_factory=list)
    extras: list[str] = field(default_factory=list)
    hash: str | None = None
