"""Type Contract Checker - matches one service method against its expected shape.

Invariants:
    - Checks run in a fixed order: exists, argument count, context argument,
      remaining arguments, return count, return types, payload visibility
    - The first mismatch raises ContractViolationError naming operation and position
    - get establishes the payload type; every later payload check is identity (`is`)
    - No state outside the returned CheckedOperation is touched

Design Decisions:
    - Shapes are declared as data (SIGNATURES) and interpreted by one checker,
      so adding an operation is one table entry
    - Raised exceptions are the error channel: return annotations describe
      only the success value (None = no value)
    - Visibility check = name check plus a serializability probe: a pydantic
      TypeAdapter must build and emit a JSON schema for the payload type
"""

import inspect
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, get_args, get_origin

from pydantic import PydanticUserError, TypeAdapter

from lazyrest.core.context import RequestContext
from lazyrest.core.domain_types import Operation
from lazyrest.core.errors import ContractViolationError

NoneType = type(None)

# Value types: a payload must be a record reached by reference, not one of these
SCALAR_TYPES = frozenset({int, float, complex, str, bool, bytes, NoneType})

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


class ArgKind(str, Enum):
    """Kinds of values appearing in an operation shape."""
    ID = "id"
    INT = "int"
    PAYLOAD = "payload"
    PAYLOAD_LIST = "payload_list"
    QUERY_ARGS = "query_args"


@dataclass(frozen=True)
class OperationSignature:
    """Expected shape of one operation (context argument implied)."""
    operation: Operation
    params: tuple[tuple[str, ArgKind], ...]
    returns: tuple[ArgKind, ...]

    @property
    def argument_count(self) -> int:
        """Receiver + context + declared params."""
        return 2 + len(self.params)


SIGNATURES: dict[Operation, OperationSignature] = {
    Operation.READ: OperationSignature(
        Operation.READ, (("id", ArgKind.ID),), (ArgKind.PAYLOAD,),
    ),
    Operation.WRITE: OperationSignature(
        Operation.WRITE, (("id", ArgKind.ID), ("data", ArgKind.PAYLOAD)), (),
    ),
    Operation.CREATE: OperationSignature(
        Operation.CREATE, (("data", ArgKind.PAYLOAD),), (ArgKind.INT,),
    ),
    Operation.DELETE: OperationSignature(
        Operation.DELETE, (("id", ArgKind.ID),), (),
    ),
    Operation.LIST: OperationSignature(
        Operation.LIST, (("args", ArgKind.QUERY_ARGS),),
        (ArgKind.PAYLOAD_LIST,),
    ),
}


@dataclass(frozen=True)
class CheckedOperation:
    """A method that passed its shape check, ready to be invoked."""
    operation: Operation
    method: Callable[..., Any]
    is_async: bool
    payload_type: type
    payload_adapter: TypeAdapter | None = None


def type_name(t: Any) -> str:
    """Readable name for a type or annotation in error messages."""
    if t is NoneType:
        return "None"
    if isinstance(t, type) and get_origin(t) is None:
        return t.__qualname__
    return repr(t)


def is_exported(payload_type: type) -> bool:
    """No segment of the qualified name is private (leading underscore)."""
    return not any(
        part.startswith("_") for part in payload_type.__qualname__.split(".")
    )


def probe_serializable(payload_type: type) -> TypeAdapter:
    """Build the pydantic adapter and JSON schema once; reject on failure."""
    try:
        adapter = TypeAdapter(payload_type)
        adapter.json_schema()
    except (PydanticUserError, TypeError) as e:
        raise ContractViolationError(
            Operation.READ.value, "return value",
            f"data type {type_name(payload_type)} is not serializable: {e}",
        )
    return adapter


def check_operation(
    service: object,
    signature: OperationSignature,
    payload_type: type | None = None,
) -> CheckedOperation:
    """Check one operation on service. payload_type is None only for get."""
    op = signature.operation.value
    method = getattr(service, op, None)
    if method is None or not callable(method):
        raise ContractViolationError(
            op, "method", f"service does not have a {op} method",
        )

    params = _positional_params(op, method)
    if len(params) + 1 != signature.argument_count:
        raise ContractViolationError(
            op, "arguments",
            f"{op} method needs {signature.argument_count} arguments "
            f"(including self), has {len(params) + 1}",
        )

    hints = _resolve_hints(op, method)

    ctx_hint = hints.get(params[0].name)
    if ctx_hint is not RequestContext:
        raise ContractViolationError(
            op, f"argument 1 ({params[0].name})",
            f"ctx argument must be of type RequestContext, "
            f"found {type_name(ctx_hint)} instead",
        )

    for index, ((label, kind), param) in enumerate(
        zip(signature.params, params[1:]), start=2,
    ):
        hint = hints.get(param.name)
        if not _matches(kind, hint, payload_type):
            raise ContractViolationError(
                op, f"argument {index} ({param.name})",
                f"{label} argument must be {_expected(kind, payload_type)}, "
                f"found {type_name(hint)} instead",
            )

    if "return" not in hints:
        raise ContractViolationError(
            op, "return value", "return annotation is missing",
        )
    return_hint = hints["return"]
    returned = _return_values(return_hint)
    if len(returned) != len(signature.returns):
        raise ContractViolationError(
            op, "return value",
            f"{op} method needs {len(signature.returns)} return value(s), "
            f"has {len(returned)}",
        )

    adapter = None
    if signature.operation is Operation.READ:
        payload_type = _establish_payload_type(return_hint)
        adapter = probe_serializable(payload_type)
    else:
        for index, (kind, hint) in enumerate(
            zip(signature.returns, returned),
        ):
            if not _matches(kind, hint, payload_type):
                raise ContractViolationError(
                    op, f"return value {index}",
                    f"return type must be {_expected(kind, payload_type)}, "
                    f"found {type_name(hint)} instead",
                )

    return CheckedOperation(
        operation=signature.operation,
        method=method,
        is_async=inspect.iscoroutinefunction(method),
        payload_type=payload_type,
        payload_adapter=adapter,
    )


def _positional_params(op: str, method: Callable) -> list[inspect.Parameter]:
    try:
        params = list(inspect.signature(method).parameters.values())
    except (TypeError, ValueError) as e:
        raise ContractViolationError(
            op, "signature", f"cannot inspect {op} method: {e}",
        )
    for param in params:
        if param.kind not in _POSITIONAL:
            raise ContractViolationError(
                op, f"argument {param.name}",
                f"{param.name} must be a positional parameter, "
                f"found {param.kind.description}",
            )
    return params


def _resolve_hints(op: str, method: Callable) -> dict[str, Any]:
    func = inspect.unwrap(getattr(method, "__func__", method))
    try:
        return typing.get_type_hints(func)
    except (NameError, TypeError, AttributeError) as e:
        raise ContractViolationError(
            op, "annotations", f"cannot resolve {op} annotations: {e}",
        )


def _return_values(hint: Any) -> tuple[Any, ...]:
    """Split a return annotation into the values it declares."""
    if hint is NoneType:
        return ()
    if get_origin(hint) is tuple:
        return get_args(hint)
    return (hint,)


def _establish_payload_type(hint: Any) -> type:
    if not isinstance(hint, type) or get_origin(hint) is not None:
        raise ContractViolationError(
            Operation.READ.value, "return value",
            f"data type {type_name(hint)} must be a record type",
        )
    if hint in SCALAR_TYPES:
        raise ContractViolationError(
            Operation.READ.value, "return value",
            f"data type {type_name(hint)} must be a record type, not a scalar",
        )
    if not is_exported(hint):
        raise ContractViolationError(
            Operation.READ.value, "return value",
            f"data type {type_name(hint)} not exported",
        )
    return hint


def _matches(kind: ArgKind, hint: Any, payload_type: type | None) -> bool:
    if kind in (ArgKind.ID, ArgKind.INT):
        return hint is int
    if kind is ArgKind.PAYLOAD:
        return payload_type is not None and hint is payload_type
    if kind is ArgKind.PAYLOAD_LIST:
        return (
            payload_type is not None
            and get_origin(hint) is list
            and get_args(hint) == (payload_type,)
        )
    if kind is ArgKind.QUERY_ARGS:
        if get_origin(hint) is not dict:
            return False
        args = get_args(hint)
        return (
            len(args) == 2 and args[0] is str
            and get_origin(args[1]) is list and get_args(args[1]) == (str,)
        )
    return False


def _expected(kind: ArgKind, payload_type: type | None) -> str:
    name = type_name(payload_type)
    return {
        ArgKind.ID: "an int",
        ArgKind.INT: "an int",
        ArgKind.PAYLOAD: name,
        ArgKind.PAYLOAD_LIST: f"list[{name}]",
        ArgKind.QUERY_ARGS: "dict[str, list[str]]",
    }[kind]
