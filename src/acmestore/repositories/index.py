"""Secondary indexes: hashed lookup string -> record id."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from acmestore.backend.unit_of_work import UnitOfWork
from acmestore.repositories.base import BaseRedisRepository

if TYPE_CHECKING:
    from acmestore.core.types import IndexFamily

log = logging.getLogger(__name__)


class IndexManager(BaseRedisRepository):
    """Create and follow index entries.

    Entries are last-writer-wins and are never re-validated against
    their target: a dangling entry simply reads as a miss.
    """

    def create_index(
        self,
        family: IndexFamily,
        lookup: str,
        target_id: str,
        ttl: int | None = None,
        uow: UnitOfWork | None = None,
    ) -> None:
        """Map *lookup* to *target_id* in *family*, overwriting any previous entry.

        When *uow* is given the write joins that transaction; otherwise
        it is committed on its own.
        """
        key = self._keys.index(family, lookup)
        if uow is not None:
            uow.set(key, target_id, ttl)
            return
        with UnitOfWork(self._client) as own:
            own.set(key, target_id, ttl)
        log.debug("Indexed %s entry -> %s", family.value, target_id)

    def resolve(self, family: IndexFamily, lookup: str) -> str | None:
        """Return the target id for *lookup*, or ``None``."""
        return self._read(self._keys.index(family, lookup))

    def get_by_index(self, family: IndexFamily, lookup: str) -> dict[str, Any] | None:
        """Resolve *lookup* and fetch the record it points at."""
        target_id = self.resolve(family, lookup)
        if target_id is None:
            return None
        record = self.fetch_record(family.target_kind, target_id)
        if record is None:
            log.debug("Dangling %s entry -> %s", family.value, target_id)
        return record
