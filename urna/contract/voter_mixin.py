"""Voter mixin: register, login, profile read/update and listing."""

from __future__ import annotations

import logging
from typing import Optional, Union

from urna.exceptions import InvalidCredentials
from urna.keys import Kind, make_key, require_id
from urna.models import ROLE_USER, RawRecord, Voter

logger = logging.getLogger("urna.contract")


class VoterMixin:
    def register_user(
        self,
        did: str,
        name: str,
        dob: str,
        birthplace: str,
        user_name: str,
        password_hash: str,
    ) -> Voter:
        """Register (or re-register) a voter.

        Re-registering an existing DID overwrites the profile but keeps
        the stored ``voted`` flag.
        """
        key = make_key(Kind.USER, did)
        require_id(user_name, "userName")

        with self._operation("register_user"):
            previous = self._fetch(Voter, key)
            voted = isinstance(previous, Voter) and previous.voted
            voter = Voter(
                did=did,
                name=name,
                dob=dob,
                birthplace=birthplace,
                user_name=user_name,
                password_hash=password_hash,
                voted=voted,
            )
            self._save(key, voter)
            self._record("register_user", did, {"role": ROLE_USER, "reregistered": previous is not None})

        logger.debug("Voter %s registered", did)
        return voter

    def login_user(self, did: str, user_name: str, dob: str) -> Voter:
        key = make_key(Kind.USER, did)
        with self._operation("login_user", write=False):
            voter = self._load(Voter, key, "User")
            if voter.user_name != user_name or voter.dob != dob:
                raise InvalidCredentials("Invalid credentials")
            return voter

    def update_user(
        self,
        did: str,
        name: Optional[str] = None,
        dob: Optional[str] = None,
        birthplace: Optional[str] = None,
        user_name: Optional[str] = None,
        password_hash: Optional[str] = None,
    ) -> Voter:
        """Patch a voter profile. None leaves a field as stored.

        ``role`` and ``voted`` cannot be changed here.
        """
        key = make_key(Kind.USER, did)
        changes = {
            "name": name,
            "dob": dob,
            "birthplace": birthplace,
            "user_name": user_name,
            "password_hash": password_hash,
        }
        with self._operation("update_user"):
            voter = self._load(Voter, key, "User")
            changed = []
            for attr, value in changes.items():
                if value is not None:
                    setattr(voter, attr, value)
                    changed.append(attr)
            self._save(key, voter)
            self._record("update_user", did, {"fields": sorted(changed)})
            return voter

    update_personal_info = update_user

    def get_personal_info(self, did: str) -> Union[Voter, RawRecord]:
        key = make_key(Kind.USER, require_id(did, "did"))
        with self._operation("get_personal_info", write=False):
            return self._load_or_raw(Voter, key, "User")

    def get_all_voters(self) -> list[Voter]:
        with self._operation("get_all_voters", write=False):
            return [v for v in self._scan_entities(Voter, Kind.USER) if v.role == ROLE_USER]
