"""Memory Store - thread-safe in-memory CRUD service over Record.

Invariants:
    - ids start at 1 and are never reused
    - put on a missing id raises RecordNotFoundError and creates nothing
    - Stored records are copies: callers never alias store state
    - fail_new makes new() raise, for failure injection

Design Decisions:
    - Plain (sync) methods: the dispatcher runs them in the thread pool,
      hence the lock around every access to _records
"""

import logging
import threading

from lazyrest.core.context import RequestContext
from lazyrest.core.domain_types import RecordId
from lazyrest.core.errors import RecordNotFoundError, ServiceError
from lazyrest.schemas.record import Record

logger = logging.getLogger(__name__)


class MemoryRecordStore:
    """In-memory resource service implementing get/put/new/delete/query."""

    def __init__(self):
        self._lock = threading.Lock()
        self._records: dict[RecordId, Record] = {}
        self._next_id = 1
        self.fail_new = False

    def get(self, ctx: RequestContext, id: RecordId) -> Record:
        with self._lock:
            record = self._records.get(id)
            if record is None:
                raise RecordNotFoundError(id)
            return record.model_copy()

    def put(self, ctx: RequestContext, id: RecordId, data: Record) -> None:
        with self._lock:
            if id not in self._records:
                raise RecordNotFoundError(id)
            self._records[id] = data.model_copy(update={"id": id})

    def new(self, ctx: RequestContext, data: Record) -> RecordId:
        if self.fail_new:
            raise ServiceError("New Failure")
        with self._lock:
            record_id = self._next_id
            self._next_id += 1
            self._records[record_id] = data.model_copy(update={"id": record_id})
        logger.debug(f"Created record {record_id}")
        return record_id

    def delete(self, ctx: RequestContext, id: RecordId) -> None:
        with self._lock:
            if self._records.pop(id, None) is None:
                raise RecordNotFoundError(id)

    def query(self, ctx: RequestContext, args: dict[str, list[str]]) -> list[Record]:
        """Records in id order; `name` filters to any of the given names."""
        names = set(args.get("name", []))
        with self._lock:
            records = [self._records[k] for k in sorted(self._records)]
        return [
            r.model_copy() for r in records if not names or r.name in names
        ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
