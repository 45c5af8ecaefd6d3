"""Contract base: store access, entity codec and the per-operation envelope."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, Type, Union

from urna import config
from urna.audit import AuditTrail
from urna.canonical import encode_value
from urna.exceptions import NotFound, StorageError, UrnaError
from urna.keys import Kind, kind_prefix
from urna.metrics import metrics
from urna.models import E, RawRecord, decode_record
from urna.storage import KeyValueStore, scan_prefix
from urna.temporal import now_iso

logger = logging.getLogger("urna.contract")


class ContractBase:
    """Shared plumbing for every operation mixin."""

    def __init__(
        self,
        store: KeyValueStore,
        audit: Optional[bool] = None,
        clock: Callable[[], str] = now_iso,
    ):
        self.store = store
        self._clock = clock
        if audit is None:
            audit = config.AUDIT_ENABLED
        self.audit: Optional[AuditTrail] = AuditTrail(store, clock) if audit else None

    # ─── Operation Envelope ───────────────────────────────────────

    @contextmanager
    def _operation(self, name: str, write: bool = True) -> Iterator[None]:
        """Run one ledger operation.

        Writes happen inside a single store transaction: any exception
        rolls back everything the operation wrote.
        """
        with metrics.track(name):
            try:
                if write:
                    with self.store.transaction():
                        yield
                else:
                    yield
            except UrnaError as e:
                logger.debug("%s rejected: %s", name, e)
                raise

    def _record(self, action: str, actor: str, detail: Optional[dict[str, Any]] = None) -> None:
        if self.audit is not None:
            self.audit.append(action, actor, detail)

    # ─── Entity Codec ─────────────────────────────────────────────

    def _fetch(self, model: Type[E], key: str) -> Union[E, RawRecord, None]:
        raw = self.store.get(key)
        if raw is None:
            return None
        return decode_record(model, key, raw)

    def _exists(self, key: str) -> bool:
        return self.store.get(key) is not None

    def _load(self, model: Type[E], key: str, what: str) -> E:
        """Point read that must yield a well-formed entity."""
        record = self._fetch(model, key)
        if record is None:
            raise NotFound(f"{what} not found")
        if isinstance(record, RawRecord):
            logger.error("Corrupt %s record under %s", what.lower(), key)
            raise StorageError(f"{what} record is corrupt")
        return record

    def _load_or_raw(self, model: Type[E], key: str, what: str) -> Union[E, RawRecord]:
        record = self._fetch(model, key)
        if record is None:
            raise NotFound(f"{what} not found")
        return record

    def _save(self, key: str, entity: Any) -> None:
        self.store.put(key, encode_value(entity.to_dict()))

    def _scan(self, model: Type[E], kind: Kind) -> list[Union[E, RawRecord]]:
        """Fresh range scan over one kind, decoded record by record."""
        return [
            decode_record(model, key, raw)
            for key, raw in scan_prefix(self.store, kind_prefix(kind))
        ]

    def _scan_entities(self, model: Type[E], kind: Kind) -> list[E]:
        return [r for r in self._scan(model, kind) if not isinstance(r, RawRecord)]
