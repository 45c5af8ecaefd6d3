"""Hash-chained audit trail."""

import pytest

from conftest import ADMIN
from urna.audit import AuditTrail, entry_key
from urna.canonical import GENESIS_HASH, canonical_json, compute_entry_hash, decode_value, encode_value
from urna.contract import LedgerContract
from urna.exceptions import AlreadyExists, NotFound, StorageError
from urna.keys import AUDIT_HEAD_KEY
from urna.metrics import metrics
from urna.models import AuditEntry, RawRecord


class TestAppend:
    def test_chain_links(self, ledger):
        entries = ledger.get_audit_log()
        assert [e.action for e in entries] == [
            "register_admin",
            "create_election",
            "create_candidate",
            "create_candidate",
            "register_user",
            "register_user",
        ]
        assert entries[0].prev_hash == GENESIS_HASH
        for prev, entry in zip(entries, entries[1:]):
            assert entry.prev_hash == prev.hash
            assert entry.seq == prev.seq + 1

    def test_hash_matches_contents(self, contract, admin):
        entry = contract.get_audit_log()[0]
        assert entry.hash == compute_entry_hash(
            GENESIS_HASH,
            "register_admin",
            ADMIN,
            canonical_json({"role": "admin"}),
            entry.timestamp,
        )

    def test_head_tracks_last_entry(self, ledger):
        last = ledger.get_audit_log()[-1]
        head = decode_value(ledger.store.get(AUDIT_HEAD_KEY))
        assert head == {"seq": last.seq, "hash": last.hash}

    def test_rejected_operation_leaves_no_entry(self, contract, admin):
        with pytest.raises(AlreadyExists):
            contract.register_admin("admin2", "x", "y", "z")
        assert len(contract.get_audit_log()) == 1

    def test_filter_by_actor(self, ledger):
        ledger.cast_vote("V1", "C1", "E1")
        entries = ledger.get_audit_log(actor="V1")
        assert [e.action for e in entries] == ["register_user", "cast_vote"]
        assert entries[1].detail == {"electionID": "E1", "candidateDID": "C1"}

    def test_sequence_keys_sort_numerically(self, store):
        trail = AuditTrail(store, clock=lambda: "t")
        for i in range(11):
            trail.append("tick", "clock", {"i": i})
        assert [e.seq for e in trail.entries()] == list(range(1, 12))
        assert entry_key(2) < entry_key(10)


class TestVerify:
    def test_clean_chain(self, ledger):
        ledger.cast_vote("V1", "C1", "E1")
        report = ledger.verify_audit_trail()
        assert report == {"valid": True, "violations": [], "entries_checked": 7}

    def test_empty_chain(self, contract):
        assert contract.verify_audit_trail()["valid"] is True

    def test_tampered_detail(self, ledger):
        raw = decode_value(ledger.store.get(entry_key(2)))
        raw["detail"] = {"status": "closed"}
        ledger.store.put(entry_key(2), encode_value(raw))

        report = ledger.verify_audit_trail()

        assert report["valid"] is False
        assert [v["type"] for v in report["violations"]] == ["hash_mismatch"]
        assert report["violations"][0]["seq"] == 2
        assert metrics.counter("urna_audit_violations_total") == 1

    def test_deleted_entry(self, ledger):
        ledger.store.delete(entry_key(3))
        types = [v["type"] for v in ledger.verify_audit_trail()["violations"]]
        assert "chain_break" in types
        assert "head_mismatch" in types

    def test_corrupt_entry(self, ledger):
        ledger.store.put(entry_key(1), b"{torn")
        report = ledger.verify_audit_trail()
        assert report["violations"][0] == {"key": entry_key(1), "type": "corrupt_entry"}
        assert isinstance(ledger.get_audit_log()[0], RawRecord)


class TestDisabled:
    def test_no_entries_written(self, store):
        contract = LedgerContract(store, audit=False)
        contract.register_admin(ADMIN, "root", "2000-01-01", "h")
        assert store.get(AUDIT_HEAD_KEY) is None
        assert store.get(entry_key(1)) is None
        with pytest.raises(RuntimeError):
            contract.get_audit_log()

    def test_config_default(self, store, monkeypatch):
        from urna import config

        monkeypatch.setenv("URNA_AUDIT", "0")
        config.reload()
        assert LedgerContract(store).audit is None


def test_entry_round_trip():
    entry = AuditEntry(1, "a", "b", "t", GENESIS_HASH, "h", {"x": 1})
    assert AuditEntry.from_dict(entry.to_dict()) == entry


class TestCorruptHead:
    def test_writes_fail_with_storage_error(self, contract, admin):
        contract.store.put(AUDIT_HEAD_KEY, b"garbage")
        with pytest.raises(StorageError):
            contract.create_election("E1", "open", "2025-01-01")
        with pytest.raises(NotFound):
            contract.get_election("E1")

    def test_missing_fields(self, contract, admin):
        contract.store.put(AUDIT_HEAD_KEY, encode_value({"seq": 1}))
        with pytest.raises(StorageError):
            contract.register_user("V1", "Vera", "d", "b", "vera", "h")

    def test_verify_reports_instead_of_raising(self, ledger):
        ledger.store.put(AUDIT_HEAD_KEY, b"garbage")
        report = ledger.verify_audit_trail()
        assert report["valid"] is False
        assert report["violations"] == [{"key": AUDIT_HEAD_KEY, "type": "corrupt_head"}]
        assert report["entries_checked"] == 6


def test_verify_publishes_chain_length(ledger):
    ledger.verify_audit_trail()
    assert "urna_audit_entries 6.00" in metrics.to_prometheus()
