"""JSON utilities using orjson.

Usage:
    from joytask.utils.json_utils import ORJSONResponse

    return ORJSONResponse(content={"status": "ok"})
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

import orjson
from fastapi.responses import JSONResponse

# Statistics payloads are keyed by integers (day in cycle, weeks completed)
_ORJSON_OPTIONS = orjson.OPT_UTC_Z | orjson.OPT_NON_STR_KEYS


def _default_serializer(obj: Any) -> Any:
    """Custom serializer for types not natively supported by orjson."""
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, bytes):
        return obj.decode("utf-8")
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


class ORJSONResponse(JSONResponse):
    """FastAPI response class using orjson for serialization."""

    media_type = "application/json"

    def render(self, content: Any) -> bytes:
        """Render content to JSON bytes."""
        return orjson.dumps(
            content,
            default=_default_serializer,
            option=_ORJSON_OPTIONS,
        )
