from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource, SERVICE_NAME, SERVICE_VERSION
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.requests import RequestsInstrumentor

from .config import APP_VERSION, settings
from .utils import get_logger

logger = get_logger(__name__)


def setup_observability(app=None) -> bool:
    """
    Sets up OpenTelemetry tracing when an OTLP endpoint is configured.

    Stripe and Supabase both talk HTTP through requests/httpx, so their
    calls show up as child spans of the request that made them.
    """
    if not settings.otel.exporter_otlp_endpoint:
        logger.info("OTEL_EXPORTER_OTLP_ENDPOINT not set. Skipping OpenTelemetry setup.")
        return False

    logger.info("Setting up OpenTelemetry", service=settings.otel.service_name)

    resource = Resource.create({
        SERVICE_NAME: settings.otel.service_name,
        SERVICE_VERSION: APP_VERSION,
    })

    provider = TracerProvider(resource=resource)

    # grpc exporter expects host:port
    endpoint = settings.otel.exporter_otlp_endpoint.replace("http://", "").replace("https://", "")

    otlp_exporter = OTLPSpanExporter(endpoint=endpoint, insecure=True)
    provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

    trace.set_tracer_provider(provider)

    HTTPXClientInstrumentor().instrument()
    RequestsInstrumentor().instrument()

    if app:
        FastAPIInstrumentor.instrument_app(app, tracer_provider=provider)

    logger.info("OpenTelemetry setup complete.")
    return True
