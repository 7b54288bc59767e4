"""Request logging under a run context.

Each request becomes one run: the correlation ID comes from the
X-Correlation-ID header or is generated, and the trigger is the last path
segment (``check-deadlines``, ``override-score``, ``metrics``...). The ID
is echoed back so a scheduler can match its call to the server logs.
"""

import time
from typing import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from peer_verification.infrastructure.observability.correlation import begin_run, end_run

CORRELATION_HEADER = "X-Correlation-ID"

logger = structlog.get_logger(__name__)


def trigger_for_path(path: str) -> str:
    return path.rstrip("/").rsplit("/", 1)[-1] or "root"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Starts a run per request and logs its outcome."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        run = begin_run(
            request.headers.get(CORRELATION_HEADER),
            trigger=trigger_for_path(request.url.path),
        )
        log = logger.bind(method=request.method, path=request.url.path)
        started = time.monotonic()

        try:
            response = await call_next(request)
        except Exception:
            log.exception(
                "request_failed",
                duration_ms=int((time.monotonic() - started) * 1000),
            )
            raise
        finally:
            end_run()

        log_method = log.warning if response.status_code in (401, 500) else log.info
        log_method(
            "request_handled",
            correlation_id=run.correlation_id,
            trigger=run.trigger,
            status_code=response.status_code,
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        response.headers[CORRELATION_HEADER] = run.correlation_id
        return response
