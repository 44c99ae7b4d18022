"""OpenTelemetry tracing configuration.

Spans are exported to an OTLP backend when ``OTLP_ENDPOINT`` is set, or
printed to the console in debug mode. Without either, tracing stays off and
``get_tracer`` hands out the API's no-op tracer, so manual spans such as the
gate's ``gate.allows`` cost nothing.
"""

import structlog
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from sqlalchemy.engine import Engine

from staffdesk import __version__
from staffdesk.config import settings


log = structlog.get_logger()


def _build_provider() -> TracerProvider | None:
    resource = Resource.create(
        {
            "service.name": settings.app_name.lower().replace(" ", "-"),
            "service.version": __version__,
            "deployment.environment": settings.environment,
        }
    )

    if settings.otlp_endpoint:
        exporter = OTLPSpanExporter(
            endpoint=settings.otlp_endpoint,
            insecure=not settings.otlp_endpoint.startswith("https"),
        )
        log.info("tracing_configured", exporter="otlp", endpoint=settings.otlp_endpoint)
    elif settings.debug:
        exporter = ConsoleSpanExporter()
        log.info("tracing_configured", exporter="console")
    else:
        return None

    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(exporter))
    return provider


def setup_tracing(app: FastAPI, engine: Engine | None = None) -> bool:
    """Configure tracing and instrument the app, Redis and the database.

    Args:
        app: The FastAPI application instance to instrument
        engine: Synchronous engine behind the async engine, if any

    Returns:
        True if tracing was enabled
    """
    provider = _build_provider()
    if provider is None:
        log.info("tracing_disabled", reason="no OTLP_ENDPOINT configured")
        return False

    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(
        app,
        excluded_urls="health/.*,docs,redoc,openapi.json",
    )
    RedisInstrumentor().instrument()
    if engine is not None:
        instrument_sqlalchemy(engine)

    log.info("tracing_setup_complete")
    return True


def instrument_sqlalchemy(engine: Engine) -> None:
    """Instrument a SQLAlchemy engine for tracing.

    Args:
        engine: The engine to instrument (``async_engine.sync_engine``)
    """
    SQLAlchemyInstrumentor().instrument(engine=engine)
    log.debug("instrumented_sqlalchemy")


def get_tracer(name: str) -> trace.Tracer:
    """Get a tracer for manual spans.

    Example:
        tracer = get_tracer(__name__)
        with tracer.start_as_current_span("gate.allows"):
            ...
    """
    return trace.get_tracer(name)


def shutdown_tracing() -> None:
    """Flush pending spans and stop the provider, if one was installed."""
    provider = trace.get_tracer_provider()
    if isinstance(provider, TracerProvider):
        provider.shutdown()
        log.info("tracing_shutdown_complete")
