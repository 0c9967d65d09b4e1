"""Maps every failure inside an operation to one fixed, user-facing message."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse

from todo_tracker.db.store import ItemNotFound

logger = structlog.get_logger()


class OperationFailed(Exception):
    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@contextmanager
def operation_failure(message: str, event: str, **context) -> Iterator[None]:
    """Log any exception raised in the block and re-raise it as OperationFailed.

    Store errors, malformed bodies and missing fields all surface as the same
    ``message``; details only go to the log.
    """
    try:
        yield
    except ItemNotFound as e:
        logger.warning(event, error=str(e), **context)
        raise OperationFailed(message, status_code=404) from e
    except Exception as e:
        logger.error(event, error=str(e), error_type=type(e).__name__, **context)
        raise OperationFailed(message) from e


async def operation_failed_handler(request: Request, exc: OperationFailed) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
