"""OpenTelemetry tracer provider for the analytics and search services.

Spans are exported over OTLP gRPC to a collector, printed to the console
for local work, or kept in process only ("none"). FastAPI requests and
SQLAlchemy statements are instrumented so a slow dashboard can be broken
down into its sub-queries.
"""

import logging

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.config import Settings

logger = logging.getLogger(__name__)

# Liveness probes would otherwise dominate the trace volume.
UNTRACED_URLS = "/api/v1/health"

_provider: TracerProvider | None = None


def _span_exporter(settings: Settings) -> SpanExporter | None:
    kind = settings.telemetry_exporter
    if kind == "none":
        return None
    if kind == "otlp":
        endpoint = settings.telemetry_otlp_endpoint
        if endpoint:
            return OTLPSpanExporter(endpoint=endpoint, insecure=endpoint.startswith("http://"))
        logger.warning("TELEMETRY_OTLP_ENDPOINT is not set; falling back to console spans")
    elif kind != "console":
        logger.warning("Unknown telemetry exporter %r; using console", kind)
    return ConsoleSpanExporter()


def start_tracing(settings: Settings, app: FastAPI, engine: AsyncEngine) -> TracerProvider:
    """Install the global tracer provider and instrument app and engine."""
    global _provider
    provider = TracerProvider(
        resource=Resource(
            attributes={
                SERVICE_NAME: settings.app_name,
                SERVICE_VERSION: settings.app_version,
                "deployment.environment": settings.telemetry_environment,
            }
        ),
        sampler=TraceIdRatioBased(settings.telemetry_sample_rate),
    )
    exporter = _span_exporter(settings)
    if exporter is not None:
        provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(
        app, tracer_provider=provider, excluded_urls=UNTRACED_URLS
    )
    SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine, tracer_provider=provider)
    _provider = provider
    logger.info(
        "Tracing started: exporter=%s sample_rate=%s",
        settings.telemetry_exporter,
        settings.telemetry_sample_rate,
    )
    return provider


def stop_tracing() -> None:
    """Flush pending spans and drop the provider; no-op when tracing never started."""
    global _provider
    if _provider is None:
        return
    _provider.shutdown()
    _provider = None
    logger.info("Tracing stopped")
