from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.propagate import set_global_textmap
from opentelemetry.sdk.resources import DEPLOYMENT_ENVIRONMENT, SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

_OTEL_CONFIGURED = False
logger = logging.getLogger(__name__)

# Probes and scrapes would otherwise dominate the trace volume.
_EXCLUDED_URLS = "health/live,health/ready,metrics"


def _build_provider() -> TracerProvider:
    service_name = os.getenv("OTEL_SERVICE_NAME", "tableside")
    environment = os.getenv("APP_ENV", "dev").lower()
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")

    provider = TracerProvider(
        resource=Resource.create(
            {SERVICE_NAME: service_name, DEPLOYMENT_ENVIRONMENT: environment}
        )
    )
    if endpoint:
        try:
            exporter = OTLPSpanExporter(
                endpoint=endpoint,
                insecure=endpoint.startswith("http://"),
            )
            provider.add_span_processor(BatchSpanProcessor(exporter))
        except Exception:
            logger.exception("otel_exporter_setup_failed", extra={"endpoint": endpoint})
    return provider


def configure_otel(app: FastAPI) -> None:
    global _OTEL_CONFIGURED
    if _OTEL_CONFIGURED:
        return

    provider = _build_provider()
    trace.set_tracer_provider(provider)
    set_global_textmap(TraceContextTextMapPropagator())
    FastAPIInstrumentor.instrument_app(
        app,
        tracer_provider=provider,
        excluded_urls=_EXCLUDED_URLS,
    )
    _OTEL_CONFIGURED = True
    logger.info(
        "otel_configured",
        extra={"exporter_enabled": bool(os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT"))},
    )
