"""Contract Validator - all-or-nothing check of a service against the CRUD contract.

Invariants:
    - get is checked first: it establishes the payload type for everything after it
    - Order is get, put, new, delete, then query (only if the service declares it)
    - Fails fast on the first violation; later operations are not inspected
    - Never mutates the service; the descriptor is the only output

Design Decisions:
    - Capability detection through service_protocols before shape checks, so a
      missing method and a malformed one produce distinct messages
    - Optional expected payload type pins registration to one concrete class
"""

import logging

from lazyrest.core.contract import SIGNATURES, check_operation, type_name
from lazyrest.core.domain_types import MANDATORY_OPERATIONS, Operation
from lazyrest.core.endpoint import EndpointDescriptor
from lazyrest.core.errors import ContractViolationError
from lazyrest.core.service_protocols import declares

logger = logging.getLogger(__name__)


def validate_service(
    service: object, payload_type: type | None = None,
) -> EndpointDescriptor:
    """Validate service; return its descriptor or raise ContractViolationError."""
    if service is None:
        raise ContractViolationError(
            Operation.READ.value, "method", "service is None",
        )

    checked = {}
    established: type | None = None
    for operation in MANDATORY_OPERATIONS:
        if not declares(service, operation):
            raise ContractViolationError(
                operation.value, "method",
                f"service does not have a {operation.value} method",
            )
        result = check_operation(service, SIGNATURES[operation], established)
        if operation is Operation.READ:
            established = result.payload_type
            _check_expected_payload(established, payload_type)
        checked[operation] = result

    query = None
    if declares(service, Operation.LIST):
        query = check_operation(
            service, SIGNATURES[Operation.LIST], established,
        )

    read = checked[Operation.READ]
    descriptor = EndpointDescriptor(
        service=service,
        payload_type=established,
        payload_adapter=read.payload_adapter,
        get=read,
        put=checked[Operation.WRITE],
        new=checked[Operation.CREATE],
        delete=checked[Operation.DELETE],
        query=query,
    )
    logger.debug(
        f"Validated {descriptor.service_name} with payload "
        f"{type_name(established)} (query={descriptor.supports_query})",
        extra={"service": descriptor.service_name},
    )
    return descriptor


def _check_expected_payload(found: type, expected: type | None) -> None:
    if expected is not None and found is not expected:
        raise ContractViolationError(
            Operation.READ.value, "return value",
            f"data type must be {type_name(expected)}, "
            f"found {type_name(found)} instead",
        )
