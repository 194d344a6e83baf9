"""
OpenTelemetry tracing configuration.

Provides:
- Auto-instrumentation for FastAPI and the MongoDB driver
- OTLP export when OTEL_EXPORTER_OTLP_ENDPOINT is set
"""

import os
from typing import Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.pymongo import PymongoInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON


class TracingConfig:
    """
    Usage:
        # Initialize once at app startup
        tracing = TracingConfig(service_name="popcorn-api")
        tracing.setup()
    """

    def __init__(
        self,
        *,
        service_name: str,
        otlp_endpoint: str | None = None,
        enable_console: bool = False,
    ) -> None:
        self.service_name = service_name
        self.otlp_endpoint = otlp_endpoint or os.getenv('OTEL_EXPORTER_OTLP_ENDPOINT')
        self.enable_console = (
            enable_console or os.getenv('OTEL_CONSOLE_EXPORT', 'false').lower() == 'true'
        )

        self._provider: TracerProvider | None = None

    def setup(self) -> None:
        resource = Resource(attributes={SERVICE_NAME: self.service_name})

        # Keep every span at the SDK level; volume control belongs in the collector
        self._provider = TracerProvider(resource=resource, sampler=ALWAYS_ON)

        if self.otlp_endpoint:
            otlp_exporter = OTLPSpanExporter(endpoint=self.otlp_endpoint)
            self._provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

        if self.enable_console:
            self._provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

        trace.set_tracer_provider(self._provider)

    def instrument_fastapi(self, *, app: Any, excluded_urls: str = 'health,metrics') -> None:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=excluded_urls)

    def instrument_pymongo(self) -> None:
        PymongoInstrumentor().instrument()

    def shutdown(self) -> None:
        if self._provider:
            self._provider.shutdown()
