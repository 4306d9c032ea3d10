from collections.abc import Callable
from datetime import UTC, datetime

from src.config.settings import settings


def utcnow() -> datetime:
    return datetime.now(UTC)


class DeadlineGate:
    """Decides whether new submissions are still accepted."""

    def __init__(
        self,
        deadline: datetime | None = None,
        label: str | None = None,
        now: Callable[[], datetime] = utcnow,
    ) -> None:
        self.deadline = deadline or settings.rsvp_deadline
        self.label = label or settings.rsvp_deadline_label
        self._now = now

    def is_past_deadline(self, now: Callable[[], datetime] | None = None) -> bool:
        current = (now or self._now)()
        return current >= self.deadline
