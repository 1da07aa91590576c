"""Endpoint Descriptor - immutable record of a validated service.

Invariants:
    - Built only by validate_service, after every mandatory operation passed
    - Frozen: safe to share across concurrent requests without locking
    - Holds a non-owning reference to the service; never constructs or closes it
"""

from dataclasses import dataclass
from typing import Any

from pydantic import TypeAdapter

from lazyrest.core.contract import CheckedOperation


@dataclass(frozen=True)
class EndpointDescriptor:
    service: Any
    payload_type: type
    payload_adapter: TypeAdapter
    get: CheckedOperation
    put: CheckedOperation
    new: CheckedOperation
    delete: CheckedOperation
    query: CheckedOperation | None = None

    @property
    def service_name(self) -> str:
        return type(self.service).__name__

    @property
    def supports_query(self) -> bool:
        return self.query is not None
