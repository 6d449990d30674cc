"""
OpenTelemetry tracing configuration
"""
from typing import Optional

from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (BatchSpanProcessor,
                                            ConsoleSpanExporter)

from app.core.config import get_settings
from app.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)

_tracer_provider: Optional[TracerProvider] = None


def configure_tracing(app=None):
    """
    Configure OpenTelemetry tracing when enabled in settings

    Args:
        app: FastAPI application to instrument (optional)
    """
    global _tracer_provider

    if _tracer_provider is not None:
        return

    settings = get_settings()
    if not settings.enable_tracing:
        logger.info("OpenTelemetry tracing is disabled via configuration")
        return

    resource = Resource.create({
        "service.name": settings.tracing_service_name,
        "service.environment": settings.app_env,
    })
    _tracer_provider = TracerProvider(resource=resource)
    _tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(_tracer_provider)

    if app is not None:
        FastAPIInstrumentor.instrument_app(app)
        logger.info("FastAPI instrumentation enabled")


def get_current_trace_id() -> Optional[str]:
    """Trace id of the active span, hex encoded, or None outside a trace"""
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        return format(span_context.trace_id, '032x')
    return None


def shutdown_tracing():
    global _tracer_provider
    if _tracer_provider is not None:
        _tracer_provider.shutdown()
        _tracer_provider = None
