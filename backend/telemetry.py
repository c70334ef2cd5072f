# telemetry.py — Optional OpenTelemetry tracing for the NexBoard API
"""
Traces requests and SQL statements when OTEL_EXPORTER_OTLP_ENDPOINT is set.
Without an endpoint, or without the telemetry extra installed, nothing is
instrumented and the API runs unchanged.
"""
import os
import logging

logger = logging.getLogger("nexboard.telemetry")

SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "nexboard-api")
SERVICE_VERSION = "1.0.0"
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
OTLP_ENDPOINT = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "")

# Request paths never traced
EXCLUDED_URLS = "health"


def setup_telemetry(app=None, engine=None):
    """Register a tracer provider and instrument the app and the DB engine.

    Returns the provider, or ``None`` when tracing stays off.
    """
    if not OTLP_ENDPOINT:
        logger.info("Tracing disabled (OTEL_EXPORTER_OTLP_ENDPOINT not set)")
        return None

    try:
        from opentelemetry import trace
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor
        from opentelemetry.sdk.resources import Resource, SERVICE_NAME as RES_SVC_NAME
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
    except ImportError:
        logger.info("OpenTelemetry SDK not installed; tracing disabled")
        return None

    resource = Resource.create({
        RES_SVC_NAME: SERVICE_NAME,
        "service.version": SERVICE_VERSION,
        "deployment.environment": ENVIRONMENT,
    })
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=OTLP_ENDPOINT, insecure=True))
    )
    trace.set_tracer_provider(provider)

    if app is not None:
        try:
            from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
            FastAPIInstrumentor.instrument_app(
                app, excluded_urls=EXCLUDED_URLS, tracer_provider=provider,
            )
        except ImportError:
            logger.warning("opentelemetry-instrumentation-fastapi not installed")

    if engine is not None:
        try:
            from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
            # Async engines are instrumented through their sync core
            SQLAlchemyInstrumentor().instrument(
                engine=engine.sync_engine, tracer_provider=provider,
            )
        except ImportError:
            logger.warning("opentelemetry-instrumentation-sqlalchemy not installed")

    logger.info(f"Tracing {SERVICE_NAME} → {OTLP_ENDPOINT}")
    return provider
