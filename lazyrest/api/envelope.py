"""Response Envelope - the single JSON wire shape for successful results.

Invariants:
    - Wire shape is {"error": str, "data": any}; an envelope field left empty
      is omitted, while None values inside data are kept
    - A success envelope never carries an error
    - Encoding happens fully before any byte is written: an unencodable value
      yields a generic 500 and no partial body
    - NaN and infinities have no JSON form and count as unencodable
    - The underlying encode failure is logged, never sent to the client
"""

import logging
import math
from typing import Any

from fastapi import status
from fastapi.responses import PlainTextResponse, Response
from pydantic import BaseModel
from pydantic_core import PydanticSerializationError

from lazyrest.core.errors import EnvelopeEncodingError

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


class ResponseEnvelope(BaseModel):
    error: str | None = None
    data: Any = None

    def to_json(self) -> bytes:
        """Encode, omitting envelope fields that are None."""
        empty = {name for name in ("error", "data") if getattr(self, name) is None}
        return self.model_dump_json(exclude=empty or None).encode()


def _reject_non_finite(value: Any) -> None:
    if isinstance(value, float):
        if not math.isfinite(value):
            raise EnvelopeEncodingError(f"non-finite float {value!r}")
    elif isinstance(value, dict):
        for item in value.values():
            _reject_non_finite(item)
    elif isinstance(value, (list, tuple, set, frozenset)):
        for item in value:
            _reject_non_finite(item)


def encode_envelope(data: Any) -> bytes:
    """Serialize data inside a success envelope."""
    envelope = ResponseEnvelope(data=data)
    try:
        _reject_non_finite(envelope.model_dump()["data"])
        return envelope.to_json()
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise EnvelopeEncodingError(str(e))


def json_response(data: Any) -> Response:
    """Success response, or a detail-free 500 if data cannot be encoded."""
    try:
        body = encode_envelope(data)
    except EnvelopeEncodingError as e:
        logger.error(e.message, extra=e.to_log_extra())
        return PlainTextResponse(
            e.public_message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return Response(content=body, media_type=JSON_MEDIA_TYPE)
