"""Router - registers resource services and mounts their generated REST routes.

Invariants:
    - add_service validates first; on any failure nothing is mounted
    - One prefix maps to exactly one service per router
    - Routes per prefix p:
        GET  /p/get/{id}     POST /p/put/{id}     POST /p/new
        GET  /p/delete/{id}  GET  /p/query (only if the service has query)
    - Delete stays on GET: changing the verb would change the wire contract
    - Router is itself an ASGI app; the FastAPI app underneath does path matching

Design Decisions:
    - {id} is matched as a plain segment and parsed by the dispatcher, so a
      non-numeric id answers 400 instead of a router 404
    - Generated routes are hidden from the OpenAPI schema
"""

import logging
from types import MappingProxyType
from typing import Any, Mapping

from fastapi import APIRouter, FastAPI

from lazyrest.api.dispatch import EndpointDispatcher
from lazyrest.api.error_handlers import register_error_handlers
from lazyrest.config import Settings, get_settings
from lazyrest.core.contract import type_name
from lazyrest.core.endpoint import EndpointDescriptor
from lazyrest.core.errors import ContractViolationError, RegistrationError
from lazyrest.core.validator import validate_service

logger = logging.getLogger(__name__)


class Router:
    """Routes requests to registered REST resource services."""

    def __init__(
        self, settings: Settings | None = None, app: FastAPI | None = None,
    ):
        self.settings = settings or get_settings()
        self.app = app or FastAPI(
            title="lazyrest", openapi_url=None, docs_url=None, redoc_url=None,
        )
        register_error_handlers(self.app)
        self._services: dict[str, EndpointDescriptor] = {}

    @property
    def services(self) -> Mapping[str, EndpointDescriptor]:
        """Read-only view: prefix -> descriptor."""
        return MappingProxyType(self._services)

    def add_service(
        self, prefix: str, service: Any, payload_type: type | None = None,
    ) -> EndpointDescriptor:
        """Validate service and mount its routes under /prefix.

        Raises ContractViolationError when the service does not satisfy the
        contract and RegistrationError when the prefix is unusable.
        """
        name = prefix.strip("/")
        if not name:
            raise RegistrationError(prefix, "prefix is empty")
        if name in self._services:
            raise RegistrationError(prefix, "prefix already registered")

        try:
            descriptor = validate_service(service, payload_type)
        except ContractViolationError as e:
            logger.warning(
                f"Rejected service {type(service).__name__} for /{name}: "
                f"{e.message}",
                extra={**e.to_log_extra(), "prefix": name},
            )
            raise

        dispatcher = EndpointDispatcher(
            descriptor,
            name,
            decode_error_status=self.settings.body_decode_error_status,
            request_timeout_seconds=self.settings.request_timeout_seconds,
        )
        self.app.include_router(_bind_routes(name, dispatcher))
        self._services[name] = descriptor
        logger.info(
            f"Mounted {descriptor.service_name} at /{name} "
            f"(payload {type_name(descriptor.payload_type)}, "
            f"query={descriptor.supports_query})",
            extra={"service": descriptor.service_name, "prefix": name},
        )
        return descriptor

    async def __call__(self, scope, receive, send) -> None:
        await self.app(scope, receive, send)


def _bind_routes(prefix: str, dispatcher: EndpointDispatcher) -> APIRouter:
    router = APIRouter(prefix=f"/{prefix}", include_in_schema=False)
    router.add_api_route(
        "/get/{id}", dispatcher.handle_get, methods=["GET"],
    )
    router.add_api_route(
        "/put/{id}", dispatcher.handle_put, methods=["POST"],
    )
    router.add_api_route(
        "/new", dispatcher.handle_new, methods=["POST"],
    )
    # TODO: expose DELETE /p/{id} alongside once clients can migrate off GET
    router.add_api_route(
        "/delete/{id}", dispatcher.handle_delete, methods=["GET"],
    )
    if dispatcher.descriptor.supports_query:
        router.add_api_route(
            "/query", dispatcher.handle_query, methods=["GET"],
        )
    return router
