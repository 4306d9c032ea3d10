from src.rsvp.entry_hash import canonical_entry, compute_entry_hash

MEMBERS = [{"name": "Ana", "answer": "Sí"}, {"name": "Luis", "answer": "No"}]
TIMESTAMP = "2025-10-01T12:00:00.000Z"


def test_canonical_entry_matches_browser_json():
    payload = canonical_entry(
        token="tok-1", members=MEMBERS, extras=["Marta"], timestamp=TIMESTAMP, event_id="boda-test"
    )

    assert payload == (
        '{"event":"boda-test","token":"tok-1","timestamp":"2025-10-01T12:00:00.000Z",'
        '"members":[{"name":"Ana","answer":"Sí"},{"name":"Luis","answer":"No"}],'
        '"extras":["Marta"]}'
    )


def test_entry_hash_is_sha256_hex_of_canonical_entry():
    digest = compute_entry_hash(
        token="tok-1", members=MEMBERS, extras=["Marta"], timestamp=TIMESTAMP, event_id="boda-test"
    )

    assert digest == "a8b060a7dfe030016df067eb1071d27888fe9baf1ddc3fca42486d390d0fabfb"


def test_missing_token_hashes_as_null():
    digest = compute_entry_hash(token="", members=[], timestamp=TIMESTAMP, event_id="boda-test")

    assert digest == "57b2ee0943d9206a6b32abfc6810499c9333e7c6e8efe4648188c7c8eedb9e44"


def test_entry_hash_changes_with_content():
    first = compute_entry_hash(token="tok-1", members=MEMBERS, timestamp=TIMESTAMP)
    second = compute_entry_hash(token="tok-2", members=MEMBERS, timestamp=TIMESTAMP)

    assert first != second
    assert first == compute_entry_hash(token="tok-1", members=MEMBERS, timestamp=TIMESTAMP)


def test_falls_back_to_canonical_entry_without_sha256(monkeypatch):
    def unavailable(name, *args, **kwargs):
        raise ValueError(f"unsupported hash type {name}")

    monkeypatch.setattr("src.rsvp.entry_hash.hashlib.new", unavailable)

    digest = compute_entry_hash(token="tok-1", members=MEMBERS, timestamp=TIMESTAMP, event_id="e")

    assert digest == canonical_entry(
        token="tok-1", members=MEMBERS, extras=[], timestamp=TIMESTAMP, event_id="e"
    )
