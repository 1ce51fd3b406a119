from __future__ import annotations

from typing import TYPE_CHECKING

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider, sampling
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from prometheus_client import REGISTRY
from prometheus_fastapi_instrumentator import Instrumentator

from client_identity.core.logging import get_logger
from client_identity.domain.common.utils import StringUtils

if TYPE_CHECKING:
    from fastapi import FastAPI
    from opentelemetry.sdk.trace.sampling import Sampler

    from client_identity.core.config import Configuration

logger = get_logger(__name__)


# noinspection HttpUrlsUsage
def _setup_tracing(config: Configuration) -> None:
    """Setup distributed tracing with OpenTelemetry."""
    ratio = config.observability.tracing_sample_ratio
    if ratio >= 1.0:
        sampler: Sampler = sampling.ALWAYS_ON

    elif ratio <= 0.0:
        sampler = sampling.ALWAYS_OFF

    else:
        sampler = sampling.TraceIdRatioBased(ratio)

    resource = Resource.create(
        {
            'service.name': StringUtils.service_name(),
            'service.version': config.app_version,
            'deployment.environment': config.app_environment,
        }
    )
    provider = TracerProvider(sampler=sampler, resource=resource)

    endpoint = str(config.observability.traces_endpoint)
    if not endpoint.startswith('http'):
        endpoint = f'http://{endpoint}'

    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=True))
    )

    if config.observability.traces_to_console:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    logger.info(f'Tracing to {endpoint} with sample ratio {ratio}')


def _setup_metrics(app: FastAPI) -> None:
    Instrumentator(
        should_group_status_codes=False,
        should_ignore_untemplated=True,
        excluded_handlers=['/health.*', '/metrics', '/docs.*'],
        registry=REGISTRY,
    ).instrument(app)


def configure_observability(app: FastAPI, config: Configuration) -> None:
    """Configure tracing and HTTP metrics for the application."""
    if not config.observability.enabled:
        return

    _setup_tracing(config)
    _setup_metrics(app)

    FastAPIInstrumentor.instrument_app(
        app,
        excluded_urls=config.observability.excluded_urls,
        tracer_provider=trace.get_tracer_provider(),
    )
