"""Observability setup for OpenTelemetry, metrics, and structured logging."""

import logging

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_client import CollectorRegistry, Counter, Gauge, generate_latest
import structlog

from .config import settings

SERVICE_NAME = "travel-social-api"

# Prometheus metrics
REGISTRY = CollectorRegistry()

# Booking lifecycle metrics
BOOKINGS_REQUESTED = Counter(
    'bookings_requested_total',
    'Total booking requests created',
    registry=REGISTRY
)

BOOKING_TRANSITIONS = Counter(
    'booking_transitions_total',
    'Booking lifecycle transitions',
    ['transition'],
    registry=REGISTRY
)

CAPACITY_REJECTIONS = Counter(
    'booking_capacity_rejections_total',
    'Booking operations refused for insufficient capacity',
    ['operation'],
    registry=REGISTRY
)

# Inventory metrics
INVENTORY_DRIFT = Gauge(
    'package_inventory_drift_packages',
    'Packages whose available slots disagree with their confirmed bookings',
    registry=REGISTRY
)

# Notification metrics
NOTIFICATIONS_CREATED = Counter(
    'notifications_created_total',
    'Notifications persisted',
    ['type'],
    registry=REGISTRY
)

NOTIFICATIONS_SUPPRESSED = Counter(
    'notifications_suppressed_total',
    'Notifications skipped because sender and recipient are the same actor',
    ['type'],
    registry=REGISTRY
)

# Social graph metrics
EDGES_TOGGLED = Counter(
    'social_edges_toggled_total',
    'Follow and like toggles',
    ['kind', 'state'],
    registry=REGISTRY
)


def setup_structured_logging():
    """Configure structured logging with structlog."""

    def add_trace_context(logger, method_name, event_dict):
        """Add trace context to log events."""
        span = trace.get_current_span()
        if span and span.is_recording():
            ctx = span.get_span_context()
            event_dict['trace_id'] = format(ctx.trace_id, '032x')
            event_dict['span_id'] = format(ctx.span_id, '016x')
        return event_dict

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_trace_context,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.ConsoleRenderer() if settings.debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level)
        ),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _resource(app_name: str) -> Resource:
    return Resource.create({
        "service.name": app_name,
        "service.version": "1.0.0",
        "environment": settings.environment,
    })


def setup_tracing(app_name: str = SERVICE_NAME):
    """Setup OpenTelemetry tracing."""
    provider = TracerProvider(resource=_resource(app_name))
    trace.set_tracer_provider(provider)

    if settings.otlp_endpoint:
        otlp_exporter = OTLPSpanExporter(endpoint=settings.otlp_endpoint)
        provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

    return trace.get_tracer(__name__)


def setup_metrics(app_name: str = SERVICE_NAME):
    """Setup OpenTelemetry metrics."""
    if settings.otlp_endpoint:
        otlp_exporter = OTLPMetricExporter(endpoint=settings.otlp_endpoint)
        reader = PeriodicExportingMetricReader(exporter=otlp_exporter, export_interval_millis=60000)
        metrics.set_meter_provider(MeterProvider(resource=_resource(app_name), metric_readers=[reader]))

    return metrics.get_meter(__name__)


def instrument_fastapi(app):
    """Instrument FastAPI with OpenTelemetry."""
    FastAPIInstrumentor.instrument_app(app)


def instrument_sqlalchemy():
    """Instrument SQLAlchemy with OpenTelemetry."""
    SQLAlchemyInstrumentor().instrument()


class MetricsCollector:
    """Collector for business metrics."""

    @staticmethod
    def record_booking_requested():
        BOOKINGS_REQUESTED.inc()

    @staticmethod
    def record_booking_transition(transition: str):
        """Record a lifecycle transition (confirmed, rejected, deleted)."""
        BOOKING_TRANSITIONS.labels(transition=transition).inc()

    @staticmethod
    def record_capacity_rejection(operation: str):
        CAPACITY_REJECTIONS.labels(operation=operation).inc()

    @staticmethod
    def record_notification(notification_type: str, suppressed: bool = False):
        """Record a notification that was created or suppressed."""
        if suppressed:
            NOTIFICATIONS_SUPPRESSED.labels(type=notification_type).inc()
        else:
            NOTIFICATIONS_CREATED.labels(type=notification_type).inc()

    @staticmethod
    def record_edge_toggle(kind: str, state: str):
        EDGES_TOGGLED.labels(kind=kind, state=state).inc()

    @staticmethod
    def set_inventory_drift(count: int):
        """Set the number of packages currently out of balance."""
        INVENTORY_DRIFT.set(count)


def get_prometheus_metrics():
    """Get Prometheus metrics for the /metrics endpoint."""
    return generate_latest(REGISTRY)


# Global metrics collector instance
metrics_collector = MetricsCollector()
