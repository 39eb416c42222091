import logging
from typing import Dict, Optional

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import ReadableSpan, Span, SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from gateway.vars import OTLP_ENDPOINT, OTLP_HEADERS, SERVICE_NAME

logger = logging.getLogger("uvicorn.error")

_provider_configured = False

BODY_CHUNK_EVENT = "http.response.body"


def is_body_chunk(span: ReadableSpan) -> bool:
    return bool(span.attributes) and span.attributes.get("asgi.event.type") == BODY_CHUNK_EVENT


class BodyChunkSpanFilter(SpanProcessor):
    """
    Sits in front of another span processor and never hands it the ASGI
    ``http.response.body`` send spans. A relayed WebDAV download emits one
    per chunk, which would flood the exporter queue.
    """

    def __init__(self, delegate: SpanProcessor):
        self.delegate = delegate

    def on_start(self, span: Span, parent_context: Optional[Context] = None) -> None:
        self.delegate.on_start(span, parent_context=parent_context)

    def on_end(self, span: ReadableSpan) -> None:
        if is_body_chunk(span):
            return
        self.delegate.on_end(span)

    def shutdown(self) -> None:
        self.delegate.shutdown()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return self.delegate.force_flush(timeout_millis)


def parse_otlp_headers(raw: str) -> Dict[str, str]:
    """``key=value,key2=value2`` to a dict; malformed entries are skipped."""
    headers: Dict[str, str] = {}
    for entry in raw.split(","):
        key, sep, value = entry.partition("=")
        if sep and key.strip() and value.strip():
            headers[key.strip()] = value.strip()
    return headers


def configure_tracing() -> None:
    global _provider_configured
    if _provider_configured:
        return

    provider = TracerProvider(resource=Resource.create({"service.name": SERVICE_NAME}))
    if OTLP_ENDPOINT:
        exporter = OTLPSpanExporter(
            endpoint=OTLP_ENDPOINT,
            headers=parse_otlp_headers(OTLP_HEADERS) or None,
        )
        provider.add_span_processor(BodyChunkSpanFilter(BatchSpanProcessor(exporter)))
        logger.info(f"Exporting traces to {OTLP_ENDPOINT}")
    trace.set_tracer_provider(provider)
    _provider_configured = True


def instrument_app(app: FastAPI) -> None:
    configure_tracing()
    FastAPIInstrumentor.instrument_app(app)
