"""Dynamic Dispatcher - turns one HTTP request into one validated service call.

Invariants:
    - id parsing and body decoding happen before the service is called;
      their failures never reach the service
    - The RequestContext is always the first argument of the call
    - Anything the service raises becomes a BusinessError (500, message as text/plain)
    - Success values always leave through the JSON envelope (api/envelope.py)
    - The descriptor is only read, so one dispatcher serves concurrent requests

Design Decisions:
    - async service methods are awaited on the event loop; plain methods run
      in the server thread pool (run_in_threadpool)
    - Body decode failure status comes from settings (default 500, matching
      the observed wire behaviour)
"""

import inspect
import logging
from typing import Any, Awaitable, Callable

from fastapi import Request, status
from fastapi.responses import PlainTextResponse, Response
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from lazyrest.api.envelope import json_response
from lazyrest.core.context import RequestContext
from lazyrest.core.contract import CheckedOperation
from lazyrest.core.domain_types import (
    MAX_RECORD_ID, RECORD_ID_PATTERN, Operation, QueryArgs, RecordId,
)
from lazyrest.core.endpoint import EndpointDescriptor
from lazyrest.core.errors import (
    BodyDecodeError, BusinessError, ErrorSeverity, InvalidIdError, LazyRestError,
)

logger = logging.getLogger(__name__)

_MAX_ID_DIGITS = len(str(MAX_RECORD_ID))

Step = Callable[[Request, RequestContext], Awaitable[Any]]


def parse_record_id(raw: str) -> RecordId:
    """Parse an ASCII decimal id within the signed 64-bit range."""
    if not RECORD_ID_PATTERN.fullmatch(raw):
        raise InvalidIdError(raw)
    digits = raw.lstrip("0") or "0"
    if len(digits) > _MAX_ID_DIGITS or int(digits) > MAX_RECORD_ID:
        raise InvalidIdError(raw)
    return int(digits)


def decode_query_args(request: Request) -> QueryArgs:
    """Group repeated query keys, keeping value order."""
    args: QueryArgs = {}
    for key, value in request.query_params.multi_items():
        args.setdefault(key, []).append(value)
    return args


class EndpointDispatcher:
    """Request handlers for one registered service."""

    def __init__(
        self,
        descriptor: EndpointDescriptor,
        prefix: str,
        decode_error_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        request_timeout_seconds: float | None = None,
    ):
        self.descriptor = descriptor
        self.prefix = prefix
        self._decode_error_status = decode_error_status
        self._timeout = request_timeout_seconds

    # ─── Route handlers ─────────────────────────────────────────

    async def handle_get(self, request: Request) -> Response:
        return await self._dispatch(Operation.READ, request, self._get)

    async def handle_put(self, request: Request) -> Response:
        return await self._dispatch(Operation.WRITE, request, self._put)

    async def handle_new(self, request: Request) -> Response:
        return await self._dispatch(Operation.CREATE, request, self._new)

    async def handle_delete(self, request: Request) -> Response:
        return await self._dispatch(Operation.DELETE, request, self._delete)

    async def handle_query(self, request: Request) -> Response:
        return await self._dispatch(Operation.LIST, request, self._query)

    # ─── Steps ──────────────────────────────────────────────────

    async def _get(self, request: Request, ctx: RequestContext) -> Any:
        record_id = parse_record_id(request.path_params["id"])
        return await self._invoke(self.descriptor.get, ctx, record_id)

    async def _put(self, request: Request, ctx: RequestContext) -> RecordId:
        record_id = parse_record_id(request.path_params["id"])
        data = await self._decode_body(Operation.WRITE, request)
        await self._invoke(self.descriptor.put, ctx, record_id, data)
        return record_id

    async def _new(self, request: Request, ctx: RequestContext) -> Any:
        data = await self._decode_body(Operation.CREATE, request)
        return await self._invoke(self.descriptor.new, ctx, data)

    async def _delete(self, request: Request, ctx: RequestContext) -> RecordId:
        record_id = parse_record_id(request.path_params["id"])
        await self._invoke(self.descriptor.delete, ctx, record_id)
        return record_id

    async def _query(self, request: Request, ctx: RequestContext) -> Any:
        args = decode_query_args(request)
        return await self._invoke(self.descriptor.query, ctx, args)

    # ─── Plumbing ───────────────────────────────────────────────

    async def _dispatch(
        self, operation: Operation, request: Request, step: Step,
    ) -> Response:
        ctx = RequestContext(request, self._timeout)
        try:
            data = await step(request, ctx)
        except LazyRestError as e:
            self._log_failure(operation, request, e)
            return PlainTextResponse(e.public_message, status_code=e.http_status)
        return json_response(data)

    async def _decode_body(self, operation: Operation, request: Request) -> Any:
        """Decode the JSON body into a fresh payload instance."""
        body = await request.body()
        try:
            return self.descriptor.payload_adapter.validate_json(body)
        except ValidationError as e:
            raise BodyDecodeError(
                operation.value, str(e), self._decode_error_status,
            ) from e

    async def _invoke(
        self, checked: CheckedOperation, ctx: RequestContext, *args: Any,
    ) -> Any:
        try:
            if checked.is_async:
                result = await checked.method(ctx, *args)
            else:
                result = await run_in_threadpool(checked.method, ctx, *args)
                if inspect.isawaitable(result):
                    result = await result
        except Exception as e:
            raise BusinessError(checked.operation.value, e) from e
        return result

    def _log_failure(
        self, operation: Operation, request: Request, exc: LazyRestError,
    ) -> None:
        extra = {
            **exc.to_log_extra(),
            "operation": operation.value,
            "prefix": self.prefix,
            "path": request.url.path,
        }
        if exc.severity is ErrorSeverity.INFO:
            logger.info(f"Rejected {operation.value}: {exc.message}", extra=extra)
        elif exc.severity is ErrorSeverity.WARNING:
            logger.warning(
                f"{operation.value} failed: {exc.message}", extra=extra,
            )
        else:
            logger.error(
                f"{operation.value} failed: {exc.message}", extra=extra,
            )
