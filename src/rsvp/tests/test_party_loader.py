import pytest

from src.rsvp.dtos import Party
from src.rsvp.errors import InvalidResponseError, NetworkError, PartyNotFoundError
from src.rsvp.party_loader import PartyLoader, party_from_envelope
from src.rsvp.tests.inmemory import InMemoryRSVPApi


def test_party_from_envelope_filters_blank_members():
    envelope = {
        "ok": True,
        "party": {"displayName": " Familia Pérez ", "members": ["Ana", "", None, " Luis "], "allowedExtra": 2},
    }

    party = party_from_envelope("tok-1", envelope, "Invitado/a")

    assert party == Party(
        token="tok-1", display_name="Familia Pérez", members=["Ana", "Luis"], allowed_extra=2
    )


def test_party_without_members_uses_display_name():
    party = party_from_envelope("tok-1", {"ok": True, "party": {"displayName": "Rosa"}}, "X")

    assert party.members == ["Rosa"]
    assert party.allowed_extra == 0


def test_party_without_display_name_uses_fallback():
    party = party_from_envelope("tok-1", {"ok": True, "party": {"members": []}}, "Invitado/a")

    assert party.display_name == "Invitado/a"
    assert party.members == ["Invitado/a"]


@pytest.mark.parametrize("allowed_extra", [-3, "muchos", None])
def test_invalid_extra_seat_counts_become_zero(allowed_extra):
    envelope = {"ok": True, "party": {"members": ["Ana"], "allowedExtra": allowed_extra}}

    assert party_from_envelope("tok-1", envelope).allowed_extra == 0


@pytest.mark.parametrize("envelope", [{"ok": False}, {"ok": True}, {}, {"ok": True, "party": None}])
def test_missing_party_raises_not_found(envelope):
    with pytest.raises(PartyNotFoundError):
        party_from_envelope("tok-1", envelope)


def test_malformed_party_raises_invalid_response():
    with pytest.raises(InvalidResponseError):
        party_from_envelope("tok-1", {"ok": True, "party": ["Ana"]})


@pytest.mark.asyncio
async def test_loader_fetches_party_by_token():
    api = InMemoryRSVPApi(parties={"tok-1": {"displayName": "Ana", "members": ["Ana"]}})

    party = await PartyLoader(api).load("tok-1")

    assert party.members == ["Ana"]
    assert api.party_calls == ["tok-1"]


@pytest.mark.asyncio
async def test_loader_propagates_network_errors():
    api = InMemoryRSVPApi()
    api.party_error = NetworkError()

    with pytest.raises(NetworkError):
        await PartyLoader(api).load("tok-1")
