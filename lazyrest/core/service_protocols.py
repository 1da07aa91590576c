"""Service Protocols - one capability per contract operation.

Invariants:
    - A resource service is any object; it never inherits from these classes
    - isinstance() against a protocol only proves the method exists; the
      signature shape is checked by core/contract.py
    - Methods may be sync or async; both shapes satisfy the protocol

Design Decisions:
    - Protocol over ABC: structural subtyping, services stay framework-free
"""

from typing import Protocol, TypeVar, runtime_checkable

from lazyrest.core.context import RequestContext
from lazyrest.core.domain_types import Operation, QueryArgs, RecordId

PayloadT = TypeVar("PayloadT")


@runtime_checkable
class Reader(Protocol[PayloadT]):
    """Read: fetch one record by id. Establishes the payload type."""
    def get(self, ctx: RequestContext, id: RecordId) -> PayloadT: ...


@runtime_checkable
class Writer(Protocol[PayloadT]):
    """Write: replace an existing record."""
    def put(self, ctx: RequestContext, id: RecordId, data: PayloadT) -> None: ...


@runtime_checkable
class Creator(Protocol[PayloadT]):
    """Create: store a new record, return its id."""
    def new(self, ctx: RequestContext, data: PayloadT) -> RecordId: ...


@runtime_checkable
class Deleter(Protocol):
    """Delete: remove a record by id."""
    def delete(self, ctx: RequestContext, id: RecordId) -> None: ...


@runtime_checkable
class Querier(Protocol[PayloadT]):
    """List (optional): records matching the decoded query string."""
    def query(self, ctx: RequestContext, args: QueryArgs) -> list[PayloadT]: ...


CAPABILITIES: dict[Operation, type] = {
    Operation.READ: Reader,
    Operation.WRITE: Writer,
    Operation.CREATE: Creator,
    Operation.DELETE: Deleter,
    Operation.LIST: Querier,
}


def declares(service: object, operation: Operation) -> bool:
    """True when service exposes the operation's method at all."""
    return isinstance(service, CAPABILITIES[operation])
