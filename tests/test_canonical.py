"""Tests for canonical serialization and the audit hash construction."""

from datetime import datetime

import pytest

from urna.canonical import (
    GENESIS_HASH,
    canonical_json,
    compute_entry_hash,
    decode_value,
    encode_value,
)


class TestCanonicalJson:
    """Ensure canonical_json produces deterministic output."""

    def test_sorted_keys(self):
        """Different insertion orders → same output."""
        a = canonical_json({"z": 1, "a": 2, "m": 3})
        b = canonical_json({"a": 2, "m": 3, "z": 1})
        assert a == b
        assert a == '{"a":2,"m":3,"z":1}'

    def test_nested_sorted(self):
        obj = {"b": {"z": 1, "a": [{"y": 1, "x": 2}]}, "a": 0}
        assert canonical_json(obj) == '{"a":0,"b":{"a":[{"x":2,"y":1}],"z":1}}'

    def test_no_whitespace(self):
        result = canonical_json({"key": "value", "n": [1, 2]})
        assert " " not in result
        assert "\n" not in result

    def test_ascii_safe(self):
        assert canonical_json({"name": "Quitó"}) == '{"name":"Quit\\u00f3"}'

    def test_default_str_fallback(self):
        result = canonical_json({"ts": datetime(2026, 1, 1)})
        assert "2026" in result


class TestValueCodec:
    def test_encode_is_byte_stable(self):
        a = encode_value({"did": "C1", "votes": 0, "name": "Alice"})
        b = encode_value({"name": "Alice", "votes": 0, "did": "C1"})
        assert a == b
        assert isinstance(a, bytes)

    def test_encoded_once(self):
        """Values are JSON objects, never JSON strings holding JSON."""
        raw = encode_value({"did": "V1"})
        assert raw.startswith(b"{")
        assert decode_value(raw) == {"did": "V1"}

    def test_decode_rejects_garbage(self):
        with pytest.raises(ValueError):
            decode_value(b"{not json")


class TestEntryHash:
    ARGS = (GENESIS_HASH, "cast_vote", "V1", '{"electionID":"E1"}', "2026-01-01T00:00:00+00:00")

    def test_deterministic(self):
        h1 = compute_entry_hash(*self.ARGS)
        h2 = compute_entry_hash(*self.ARGS)
        assert h1 == h2
        assert len(h1) == 64

    def test_any_field_changes_hash(self):
        base = compute_entry_hash(*self.ARGS)
        for i in range(len(self.ARGS)):
            mutated = list(self.ARGS)
            mutated[i] = mutated[i] + "x"
            assert compute_entry_hash(*mutated) != base

    def test_field_boundary_shift_no_collision(self):
        """Moving text across a field boundary changes the hash."""
        h_normal = compute_entry_hash("G", "cast-vote", "V1", "{}", "2026")
        h_shifted = compute_entry_hash("G", "cast", "-voteV1", "{}", "2026")
        assert h_normal != h_shifted


def test_now_iso_is_utc():
    from datetime import datetime, timezone

    from urna.temporal import now_iso

    stamp = datetime.fromisoformat(now_iso())
    assert stamp.tzinfo is not None
    assert stamp.utcoffset() == timezone.utc.utcoffset(None)
