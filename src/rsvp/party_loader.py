import logging

from src.rsvp.api_client import RSVPApi
from src.rsvp.dtos import Party
from src.rsvp.errors import InvalidResponseError, PartyNotFoundError

logger = logging.getLogger(__name__)


def _allowed_extra(value) -> int:
    try:
        count = int(value or 0)
    except (TypeError, ValueError):
        return 0
    return max(count, 0)


def party_from_envelope(token: str, envelope: dict, fallback_name: str = "") -> Party:
    """
    Build a Party from a ``{ok, party}`` lookup response.

    Raises PartyNotFoundError when the envelope carries no party and
    InvalidResponseError when the party is not shaped like one.
    """
    if not envelope.get("ok") or not envelope.get("party"):
        raise PartyNotFoundError()

    raw = envelope["party"]
    if not isinstance(raw, dict):
        raise InvalidResponseError()

    raw_members = raw.get("members")
    members = [
        str(name).strip()
        for name in (raw_members if isinstance(raw_members, list) else [])
        if name is not None and str(name).strip()
    ]
    display_name = str(raw.get("displayName") or "").strip() or fallback_name

    return Party(
        token=token,
        display_name=display_name,
        members=members or [display_name],
        allowed_extra=_allowed_extra(raw.get("allowedExtra")),
    )


class PartyLoader:
    def __init__(self, api: RSVPApi) -> None:
        self.api = api

    async def load(self, token: str, fallback_name: str = "") -> Party:
        """Fetch the party registered for ``token``.

        Raises PartyNotFoundError, InvalidResponseError, NetworkError or
        RequestTimeoutError; callers fall back to a single guest.
        """
        envelope = await self.api.fetch_party(token)
        party = party_from_envelope(token, envelope, fallback_name)
        logger.debug(f"Loaded party for {token}: {len(party.members)} members")
        return party
