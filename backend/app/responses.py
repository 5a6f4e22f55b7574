"""Turn operation results into HTTP responses."""

import json
from typing import Any

from fastapi import status
from fastapi.responses import RedirectResponse, Response

from app.config import Settings
from app.errors import AuthFailed, GatewayError, OperationResult, SerializationError
from app.logger import api_logger
from app.session import SessionHandle

JSON_MEDIA_TYPE = "application/json"


def encode_json(payload: Any) -> bytes:
    """Encode a payload as compact UTF-8 JSON without escaping unicode or slashes."""
    try:
        return json.dumps(
            payload, ensure_ascii=False, allow_nan=False, separators=(",", ":")
        ).encode("utf-8")
    except (TypeError, ValueError) as e:
        api_logger.error(f"JSON encode error: {e}")
        raise SerializationError() from e


def json_response(payload: Any, status_code: int = status.HTTP_200_OK) -> Response:
    return Response(
        content=encode_json(payload), status_code=status_code, media_type=JSON_MEDIA_TYPE
    )


def error_response(error: GatewayError, settings: Settings) -> Response:
    if isinstance(error, AuthFailed):
        return RedirectResponse(url=settings.logout_path, status_code=status.HTTP_302_FOUND)
    return json_response({"error": error.message}, status_code=error.status_code)


def render(result: OperationResult, session: SessionHandle, settings: Settings) -> Response:
    """Render a result, attaching the session cookie when it is new."""
    if result.ok:
        try:
            response = json_response(result.payload)
        except SerializationError as e:
            response = error_response(e, settings)
    else:
        response = error_response(result.error, settings)
    return session.attach(response)
