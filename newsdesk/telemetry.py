"""OpenTelemetry configuration for Newsdesk."""

import os
import sys

from opentelemetry import metrics, trace
from opentelemetry.exporter.prometheus import PrometheusMetricReader
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from prometheus_client import start_http_server

from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_METRICS_PORT = 9464


def telemetry_enabled() -> bool:
    """Telemetry is opt-in (ENABLE_TELEMETRY=1) and always off under pytest."""
    if not os.getenv("ENABLE_TELEMETRY"):
        return False
    return "pytest" not in sys.modules and not os.getenv("TESTING")


def setup_telemetry(app) -> bool:
    """Configure OpenTelemetry tracing and metrics for the FastAPI application.

    Returns:
        Whether instrumentation was installed
    """
    if not telemetry_enabled():
        return False

    try:
        prometheus_reader = PrometheusMetricReader()
        metrics.set_meter_provider(MeterProvider(metric_readers=[prometheus_reader]))

        metrics_port = int(os.getenv("METRICS_PORT", DEFAULT_METRICS_PORT))
        start_http_server(metrics_port)
        logger.info("Prometheus metrics server started", port=metrics_port)

        tracer_provider = TracerProvider()
        # Console exporter; swap for an OTLP exporter in production
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        trace.set_tracer_provider(tracer_provider)

        FastAPIInstrumentor.instrument_app(app)
        SQLAlchemyInstrumentor().instrument()
        logger.info("OpenTelemetry tracing and metrics setup completed")
        return True
    except Exception as e:
        # Telemetry must never keep the API from starting
        logger.error("Failed to setup OpenTelemetry", error_message=str(e))
        return False
