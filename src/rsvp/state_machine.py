"""RSVP flow for one invitation page visit.

The machine starts in ``LOADING_STATUS`` when it has a token and no status
was handed in, fetches the party and any stored RSVP concurrently and then
settles in ``EDITABLE``, ``ALREADY_CONFIRMED`` or ``DEADLINE_PASSED``. A
confirmed status always wins over the deadline. Submitting moves through
``SUBMITTING`` to ``CONFIRMED``; a 409 from the backend shows the stored
submission instead of the one just entered, and any other failure returns to
``EDITABLE`` with a retryable error.

All view state belongs to the instance. ``close()`` marks it torn down, after
which late responses are dropped instead of applied.
"""

import asyncio
import logging
from collections.abc import Callable

from src.config.settings import settings
from src.rsvp.api_client import RSVPApi
from src.rsvp.deadline import DeadlineGate
from src.rsvp.dtos import (
    Answer,
    ExtraGuestSlot,
    MemberAnswer,
    Party,
    RSVPState,
    StatusSummary,
)
from src.rsvp.errors import (
    AlreadyConfirmedError,
    ConflictError,
    DeadlineExceededError,
    IncompleteAnswersError,
    InvalidResponseError,
    NetworkError,
    PartyNotFoundError,
    RSVPError,
    StatusPendingError,
    SubmissionInProgressError,
)
from src.rsvp.party_loader import PartyLoader
from src.rsvp.submission import build_submission
from src.rsvp.summary import build_summary

logger = logging.getLogger(__name__)

PARTY_LOAD_FAILED_MESSAGE = (
    "No pudimos cargar la lista de invitados. Intenta nuevamente en unos minutos."
)


class RSVPStateMachine:
    def __init__(
        self,
        api: RSVPApi,
        *,
        token: str | None = None,
        fallback_name: str = "",
        fallback_extra_seats: int = 0,
        initial_status: StatusSummary | None = None,
        deadline_gate: DeadlineGate | None = None,
        event_id: str | None = None,
        poll_interval: float | None = None,
        on_confirmed: Callable[[StatusSummary], None] | None = None,
    ) -> None:
        self.api = api
        self.party_loader = PartyLoader(api)
        self.token = token or None
        self.fallback_name = (fallback_name or settings.default_guest_name).strip()
        self.fallback_extra_seats = max(int(fallback_extra_seats or 0), 0)
        self.deadline_gate = deadline_gate or DeadlineGate()
        self.event_id = event_id
        self.poll_interval = (
            settings.deadline_poll_seconds if poll_interval is None else poll_interval
        )
        self.on_confirmed = on_confirmed

        self.party: Party | None = None
        self.members: list[MemberAnswer] = []
        self.extras: list[ExtraGuestSlot] = []
        self.note = ""
        self.summary: StatusSummary | None = None
        self.error: RSVPError | None = None

        self._cancelled = False
        self._status_requested = False
        self._poll_task: asyncio.Task | None = None

        if initial_status is not None:
            self._show_summary(initial_status, RSVPState.ALREADY_CONFIRMED, notify=False)
        elif self.token:
            self.state = RSVPState.LOADING_STATUS
        else:
            self.state = RSVPState.EDITABLE
            self._populate(None)

    async def __aenter__(self) -> "RSVPStateMachine":
        await self.start()
        return self

    async def __aexit__(self, *args) -> None:
        self.close()

    # ------------------------------------------------------------------
    # View-facing properties
    # ------------------------------------------------------------------

    @property
    def display_name(self) -> str:
        if self.party and self.party.display_name:
            return self.party.display_name
        return self.fallback_name

    @property
    def error_message(self) -> str:
        return self.error.message if self.error else ""

    @property
    def all_answered(self) -> bool:
        return bool(self.members) and all(member.answer is not None for member in self.members)

    @property
    def can_submit(self) -> bool:
        return self.state is RSVPState.EDITABLE and self.all_answered

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> RSVPState:
        if self.state.is_terminal:
            return self.state
        self._start_deadline_poll()
        if self.state is RSVPState.LOADING_STATUS:
            await self._load()
        elif self.deadline_gate.is_past_deadline():
            self._close_for_deadline()
        return self.state

    def close(self) -> None:
        self._cancelled = True
        self._stop_deadline_poll()

    async def _load(self) -> None:
        if self._status_requested or self.summary is not None:
            return
        self._status_requested = True

        (party, party_error), status = await asyncio.gather(
            self._load_party(), self._load_status()
        )
        if self._cancelled:
            logger.debug(f"Discarding load result for torn down session {self.token}")
            return

        self.party = party
        if status is not None:
            self._show_summary(
                build_summary(status, self.display_name), RSVPState.ALREADY_CONFIRMED
            )
            return

        if self.deadline_gate.is_past_deadline():
            self._close_for_deadline()
            return

        self._populate(party)
        self.error = party_error
        self.state = RSVPState.EDITABLE

    async def _load_party(self) -> tuple[Party | None, RSVPError | None]:
        try:
            return await self.party_loader.load(self.token, self.fallback_name), None
        except (PartyNotFoundError, InvalidResponseError):
            logger.info(f"No registered party for {self.token}, using single guest")
            return None, None
        except RSVPError as e:
            logger.warning(f"Could not load party for {self.token}: {e}")
            return None, NetworkError(PARTY_LOAD_FAILED_MESSAGE)

    async def _load_status(self) -> dict | None:
        try:
            return await self.api.fetch_status(self.token)
        except RSVPError as e:
            logger.warning(f"Could not load RSVP status for {self.token}: {e}")
            return None

    def _populate(self, party: Party | None) -> None:
        names = party.members if party else [self.fallback_name]
        seats = party.allowed_extra if party else self.fallback_extra_seats
        self.members = [MemberAnswer(name=name) for name in names]
        self.extras = [ExtraGuestSlot(index=index) for index in range(seats)]

    def _show_summary(self, summary: StatusSummary, state: RSVPState, notify: bool = True) -> None:
        self.summary = summary
        self.state = state
        self.error = None
        self.extras = [
            ExtraGuestSlot(index=index, name=name) for index, name in enumerate(summary.extras)
        ]
        self._stop_deadline_poll()
        if notify and self.on_confirmed:
            self.on_confirmed(summary)

    def _close_for_deadline(self) -> None:
        self.state = RSVPState.DEADLINE_PASSED
        self.error = DeadlineExceededError(self.deadline_gate.label)
        self._stop_deadline_poll()

    # ------------------------------------------------------------------
    # Deadline polling
    # ------------------------------------------------------------------

    def _start_deadline_poll(self) -> None:
        if self._poll_task is None and self.poll_interval > 0:
            self._poll_task = asyncio.create_task(self._poll_deadline())

    def _stop_deadline_poll(self) -> None:
        task = self._poll_task
        self._poll_task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def check_deadline(self) -> RSVPState:
        """Close the form if the deadline passed while it was editable."""
        if self.state is RSVPState.EDITABLE and self.deadline_gate.is_past_deadline():
            self._close_for_deadline()
        return self.state

    async def _poll_deadline(self) -> None:
        while not self._cancelled and not self.state.is_terminal:
            await asyncio.sleep(self.poll_interval)
            if self._cancelled:
                return
            # While loading, the status lookup decides; it checks the deadline itself.
            await self.check_deadline()

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def _ensure_editable(self) -> None:
        if self.state is RSVPState.EDITABLE:
            return
        if self.state is RSVPState.LOADING_STATUS:
            raise StatusPendingError()
        if self.state is RSVPState.SUBMITTING:
            raise SubmissionInProgressError()
        if self.state is RSVPState.DEADLINE_PASSED:
            raise DeadlineExceededError(self.deadline_gate.label)
        raise AlreadyConfirmedError()

    def _member(self, member: int | str) -> MemberAnswer:
        if isinstance(member, int):
            return self.members[member]
        for candidate in self.members:
            if candidate.name == member:
                return candidate
        raise KeyError(member)

    def set_answer(self, member: int | str, answer: Answer | str) -> None:
        self._ensure_editable()
        self._member(member).answer = Answer(answer)

    def set_note(self, text: str) -> None:
        self._ensure_editable()
        self.note = text

    def set_extra_name(self, index: int, name: str) -> None:
        self._ensure_editable()
        self.extras[index].name = name

    # ------------------------------------------------------------------
    # Submitting
    # ------------------------------------------------------------------

    def _reject(self, error: RSVPError) -> None:
        self.error = error
        return None

    async def submit(self) -> StatusSummary | None:
        """
        Send the answers entered so far.

        Returns the summary to show once the party is confirmed, or None when
        the submission was rejected; ``error`` then says why.
        """
        if self.state is RSVPState.LOADING_STATUS:
            return self._reject(StatusPendingError())
        if self.state is RSVPState.SUBMITTING:
            return self._reject(SubmissionInProgressError())
        if self.state in (RSVPState.CONFIRMED, RSVPState.ALREADY_CONFIRMED):
            self.error = AlreadyConfirmedError()
            return self.summary
        if self.state is RSVPState.DEADLINE_PASSED or self.deadline_gate.is_past_deadline():
            self._close_for_deadline()
            return None
        if not self.all_answered:
            return self._reject(IncompleteAnswersError())

        payload, summary = build_submission(
            token=self.token,
            display_name=self.display_name,
            members=self.members,
            extras=[slot.name for slot in self.extras],
            note=self.note,
            event_id=self.event_id,
        )

        self.state = RSVPState.SUBMITTING
        self.error = None
        try:
            await self.api.submit(payload)
        except ConflictError as e:
            if self._cancelled:
                return None
            logger.info(f"RSVP for {self.token} was already submitted, showing stored answer")
            if e.status:
                self._show_summary(
                    build_summary(e.status, self.display_name), RSVPState.ALREADY_CONFIRMED
                )
            else:
                self.summary = None
                self.state = RSVPState.ALREADY_CONFIRMED
                self.error = AlreadyConfirmedError()
                self._stop_deadline_poll()
            return self.summary
        except RSVPError as e:
            if self._cancelled:
                return None
            logger.warning(f"RSVP submission for {self.token} failed: {e}")
            self.state = RSVPState.EDITABLE
            self.error = e
            return None

        if self._cancelled:
            return None
        self._show_summary(summary, RSVPState.CONFIRMED)
        return summary
