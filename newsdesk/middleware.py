import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response

from .logging_utils import log_api_request
from .metrics import record_http_request


async def log_requests_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Log every request with its timing and count it in the HTTP metrics.

    Requests are labelled by route template so ids do not end up as
    separate metric series.
    """
    start_time = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - start_time

    route = getattr(request.scope.get("route"), "path", None)
    log_api_request(
        request=request,
        response_status=response.status_code,
        process_time_ms=elapsed * 1000,
        route=route,
    )
    record_http_request(
        request.method, route or "unmatched", response.status_code, elapsed
    )
    return response
