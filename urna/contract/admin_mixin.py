"""Admin mixin: register_admin, login_admin, update_admin, get_all_admins, verify_admin."""

from __future__ import annotations

import logging

from urna.canonical import encode_value
from urna.exceptions import AlreadyExists, InvalidCredentials, NotAuthorized
from urna.keys import ADMIN_LOCK_KEY, Kind, kind_prefix, make_key, require_id
from urna.storage import scan_prefix
from urna.models import ROLE_ADMIN, Admin

logger = logging.getLogger("urna.contract")


class AdminMixin:
    def register_admin(self, did: str, user_name: str, dob: str, password_hash: str) -> Admin:
        """Register the one and only admin.

        The ``admin-`` scan rejects a second admin; claiming the
        ``meta-admin-lock`` key with compare-and-swap closes the window
        between that scan and the write.
        """
        key = make_key(Kind.ADMIN, did)
        require_id(user_name, "userName")

        with self._operation("register_admin"):
            if scan_prefix(self.store, kind_prefix(Kind.ADMIN)):
                raise AlreadyExists("An admin is already registered")
            if not self.store.put_if_absent(ADMIN_LOCK_KEY, encode_value({"did": did})):
                raise AlreadyExists("An admin is already registered")

            admin = Admin(did=did, user_name=user_name, dob=dob, password_hash=password_hash)
            self._save(key, admin)
            self._record("register_admin", did, {"role": ROLE_ADMIN})

        logger.info("Admin %s registered", did)
        return admin

    def login_admin(self, did: str, user_name: str, dob: str) -> Admin:
        key = make_key(Kind.ADMIN, did)
        with self._operation("login_admin", write=False):
            admin = self._load(Admin, key, "Admin")
            if admin.user_name != user_name or admin.dob != dob:
                raise InvalidCredentials("Invalid credentials")
            return admin

    def update_admin(self, did: str, user_name: str, dob: str, password_hash: str) -> Admin:
        key = make_key(Kind.ADMIN, did)
        with self._operation("update_admin"):
            admin = self._load(Admin, key, "Admin")
            admin.user_name = user_name
            admin.dob = dob
            admin.password_hash = password_hash
            self._save(key, admin)
            self._record("update_admin", did)
            return admin

    def get_all_admins(self) -> list[Admin]:
        with self._operation("get_all_admins", write=False):
            return [a for a in self._scan_entities(Admin, Kind.ADMIN) if a.role == ROLE_ADMIN]

    def verify_admin(self, did: str) -> Admin:
        """Capability check for privileged operations."""
        with self._operation("verify_admin", write=False):
            return self._verify_admin(did)

    def _verify_admin(self, did: str) -> Admin:
        admin = self._load(Admin, make_key(Kind.ADMIN, did), "Admin")
        if admin.role != ROLE_ADMIN:
            raise NotAuthorized(f"{did} is not authorized to perform this action")
        return admin
