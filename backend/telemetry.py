# telemetry.py - OpenTelemetry tracing for the product workbench
"""
Traces inbound FastAPI requests and outbound LLM calls (httpx).
Exports to an OTLP collector when OTEL_EXPORTER_OTLP_ENDPOINT is set,
otherwise stays off; the SDK packages are the optional ``telemetry`` extra.
"""
import os
import logging
from contextlib import nullcontext

logger = logging.getLogger("workbench.telemetry")

SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "product-workbench-api")
SERVICE_VERSION = "1.0.0"
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
OTLP_ENDPOINT = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "")


def setup_telemetry(app=None):
    """Register a tracer provider and instrument FastAPI + httpx.

    Returns the provider, or None when tracing stays off (no endpoint,
    SDK not installed, or setup failure, which is logged).
    """
    if not OTLP_ENDPOINT:
        logger.info("OpenTelemetry disabled (OTEL_EXPORTER_OTLP_ENDPOINT not set)")
        return None

    try:
        from opentelemetry import trace
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor
        from opentelemetry.sdk.resources import Resource, SERVICE_NAME as RES_SVC_NAME
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

        resource = Resource.create({
            RES_SVC_NAME: SERVICE_NAME,
            "service.version": SERVICE_VERSION,
            "deployment.environment": ENVIRONMENT,
        })
        provider = TracerProvider(resource=resource)
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=OTLP_ENDPOINT, insecure=True)))
        trace.set_tracer_provider(provider)

        if app is not None:
            try:
                from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
                FastAPIInstrumentor.instrument_app(app, excluded_urls="health", tracer_provider=provider)
                logger.info("FastAPI instrumented with OpenTelemetry")
            except ImportError:
                logger.warning("opentelemetry-instrumentation-fastapi not installed")

        # LLM provider calls
        try:
            from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
            HTTPXClientInstrumentor().instrument(tracer_provider=provider)
            logger.info("HTTPX instrumented with OpenTelemetry")
        except ImportError:
            logger.warning("opentelemetry-instrumentation-httpx not installed")

        logger.info(f"OpenTelemetry initialised → {OTLP_ENDPOINT}")
        return provider

    except ImportError:
        logger.info("OpenTelemetry SDK not installed, tracing disabled")
        return None
    except Exception as e:
        logger.error(f"OpenTelemetry setup failed: {e}")
        return None


def get_tracer(name: str = "workbench"):
    """Tracer for manual spans; None when the OpenTelemetry API is not installed."""
    try:
        from opentelemetry import trace
        return trace.get_tracer(name, SERVICE_VERSION)
    except ImportError:
        return None


def start_span(name: str, **attributes):
    """Context manager for a span named ``name`` (no-op without OpenTelemetry)."""
    tracer = get_tracer()
    if tracer is None:
        return nullcontext()
    return tracer.start_as_current_span(name, attributes=attributes)
