"""
Exception handlers translating known failures into JSON responses.

Body shape for every KnownError:
    {"message": str, "failure": FailureDetail}
Cooldown failures add "hours" and "minutes" remaining.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from maelmon.models.failure import CooldownActiveError, KnownError, StorageError

logger = logging.getLogger(__name__)


async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    """Render a KnownError with its own status code."""
    content: dict[str, Any] = {
        "message": exc.message,
        "failure": exc.to_detail().model_dump(mode="json"),
    }
    if isinstance(exc, CooldownActiveError):
        content["hours"] = exc.hours
        content["minutes"] = exc.minutes

    if isinstance(exc, StorageError):
        logger.error("STORAGE_ERROR_RESPONSE", extra={"operation": exc.operation})

    return JSONResponse(status_code=exc.status_code, content=content)


def register_error_handlers(app: FastAPI) -> None:
    """Attach the KnownError handler to the application."""
    app.add_exception_handler(KnownError, known_error_handler)  # type: ignore[arg-type]
