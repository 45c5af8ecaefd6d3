"""Voter registration, login and profile management."""

import pytest

from urna.exceptions import InvalidCredentials, InvalidInput, NotFound
from urna.models import RawRecord, Voter


class TestRegisterUser:
    def test_register(self, contract):
        voter = contract.register_user("V1", "Vera", "1995-03-03", "Quito", "vera", "h")
        assert voter.role == "user"
        assert voter.voted is False
        assert contract.get_personal_info("V1") == voter

    def test_reregister_keeps_voted_flag(self, ledger):
        ledger.cast_vote("V1", "C1", "E1")
        voter = ledger.register_user("V1", "Vera B.", "1995-03-03", "Quito", "vera2", "h2")
        assert voter.voted is True
        assert voter.name == "Vera B."
        assert ledger.get_personal_info("V1").user_name == "vera2"

    def test_blank_user_name(self, contract):
        with pytest.raises(InvalidInput):
            contract.register_user("V1", "Vera", "d", "b", "  ", "h")


class TestLoginUser:
    def test_success(self, ledger):
        assert ledger.login_user("V1", "vera", "1995-03-03").name == "Vera"

    def test_wrong_dob(self, ledger):
        with pytest.raises(InvalidCredentials):
            ledger.login_user("V1", "vera", "2000-01-01")

    def test_unknown(self, contract):
        with pytest.raises(NotFound):
            contract.login_user("nobody", "x", "y")


class TestUpdateUser:
    def test_partial_update(self, ledger):
        voter = ledger.update_user("V2", birthplace="Cusco")
        assert voter.birthplace == "Cusco"
        assert voter.name == "Victor"
        assert voter.user_name == "victor"

    def test_update_personal_info_alias(self, ledger):
        ledger.update_personal_info("V2", password_hash="new")
        assert ledger.get_personal_info("V2").password_hash == "new"

    def test_cannot_reset_voted(self, ledger):
        ledger.cast_vote("V2", "C2", "E1")
        voter = ledger.update_user("V2", name="Victor R.")
        assert voter.voted is True

    def test_missing(self, contract):
        with pytest.raises(NotFound):
            contract.update_user("ghost", name="x")


class TestReads:
    def test_get_personal_info_missing(self, contract):
        with pytest.raises(NotFound):
            contract.get_personal_info("ghost")

    def test_get_personal_info_corrupt(self, contract):
        contract.store.put("user-bad", b"not json at all")
        record = contract.get_personal_info("bad")
        assert isinstance(record, RawRecord)
        assert record.raw == "not json at all"

    def test_get_all_voters(self, ledger):
        voters = ledger.get_all_voters()
        assert [v.did for v in voters] == ["V1", "V2"]
        assert all(isinstance(v, Voter) for v in voters)

    def test_get_all_voters_skips_other_roles(self, ledger):
        ledger.store.put("user-zz", b"{broken")
        ledger.store.put(
            "user-boss",
            b'{"did":"boss","name":"B","dob":"d","birthplace":"b",'
            b'"userName":"boss","passwordHash":"h","role":"admin","voted":false}',
        )
        assert [v.did for v in ledger.get_all_voters()] == ["V1", "V2"]
