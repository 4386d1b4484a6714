"""OpenTelemetry instruments for requests, writes and the connection pool.

Instruments are no-ops unless ``setup_telemetry`` installed a meter provider.
"""

from collections.abc import Iterable

from opentelemetry import metrics
from opentelemetry.metrics import CallbackOptions, Observation
from sqlalchemy.engine import Engine

meter = metrics.get_meter("newsdesk")

http_request_duration = meter.create_histogram(
    name="http_request_duration_seconds",
    description="Duration of HTTP requests in seconds",
    unit="s",
)

http_requests_total = meter.create_counter(
    name="http_requests_total",
    description="HTTP requests by method, route and status",
)

http_request_errors = meter.create_counter(
    name="http_request_errors_total",
    description="HTTP responses with a 4xx or 5xx status",
)

record_writes_total = meter.create_counter(
    name="record_writes_total",
    description="Committed writes by resource (articles, events) and operation",
)


def record_http_request(method: str, endpoint: str, status_code: int, duration: float):
    labels = {"method": method, "endpoint": endpoint, "status_code": str(status_code)}

    http_request_duration.record(duration, labels)
    http_requests_total.add(1, labels)

    if status_code >= 400:
        http_request_errors.add(1, labels)


def record_article_operation(operation: str) -> None:
    record_writes_total.add(1, {"resource": "articles", "operation": operation})


def record_event_operation(operation: str) -> None:
    record_writes_total.add(1, {"resource": "events", "operation": operation})


# Engine of the running application; the gauge is registered once per process
_observed_engine: Engine | None = None


def _pool_checked_out(options: CallbackOptions) -> Iterable[Observation]:
    engine = _observed_engine
    if engine is None:
        return
    checkedout = getattr(engine.pool, "checkedout", None)
    if checkedout is not None:
        yield Observation(checkedout(), {"database": engine.url.get_backend_name()})


pool_connections_checked_out = meter.create_observable_gauge(
    name="db_pool_connections_checked_out",
    callbacks=[_pool_checked_out],
    description="Connections currently borrowed from the pool",
)


def observe_pool(engine: Engine | None) -> None:
    """Point the pool gauge at ``engine`` (None stops reporting)."""
    global _observed_engine
    _observed_engine = engine
