"""OpenTelemetry spans for extraction and chat calls."""
from typing import Optional

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.requests import RequestsInstrumentor

from docviewer import __version__
from docviewer.api.schemas import DocumentResponse
from docviewer.config import Settings
from docviewer.utils.logger import logger

SERVICE_NAME = "document-extraction-viewer"


def initialize_tracing(settings: Settings) -> Optional[TracerProvider]:
    """
    Set up the tracer provider when tracing is enabled in settings.

    Spans go to the OTLP HTTP endpoint when one is configured, otherwise to
    the console. Every requests.Session call also gets an HTTP client span.

    Args:
        settings: Application settings (tracing_enabled, otlp_endpoint)

    Returns:
        TracerProvider instance if tracing is enabled, None otherwise
    """
    if not settings.tracing_enabled:
        logger.info("Tracing is disabled")
        return None

    try:
        resource = Resource.create(
            {
                "service.name": SERVICE_NAME,
                "service.version": __version__,
                "docviewer.api_base_url": settings.api_base_url,
            }
        )

        tracer_provider = TracerProvider(resource=resource)
        trace.set_tracer_provider(tracer_provider)

        if settings.otlp_endpoint:
            exporter = OTLPSpanExporter(endpoint=settings.otlp_endpoint)
            logger.info(f"Tracing initialized with OTLP exporter: {settings.otlp_endpoint}")
        else:
            exporter = ConsoleSpanExporter()
            logger.info("Tracing initialized with console exporter")

        tracer_provider.add_span_processor(BatchSpanProcessor(exporter))

        instrumentor = RequestsInstrumentor()
        if not instrumentor.is_instrumented_by_opentelemetry:
            instrumentor.instrument()

        return tracer_provider

    except Exception as e:
        logger.error(f"Failed to initialize tracing: {str(e)}", exc_info=True)
        return None


def get_tracer() -> trace.Tracer:
    """Tracer used by the API clients (no-op until tracing is initialized)."""
    return trace.get_tracer("docviewer", __version__)


def record_upload(span: trace.Span, name: str, mime_type: str, size: int) -> None:
    """Describe the uploaded file on an extraction span."""
    span.set_attribute("docviewer.file.name", name)
    span.set_attribute("docviewer.file.mime_type", mime_type)
    span.set_attribute("docviewer.file.size_bytes", size)


def record_document(span: trace.Span, document: DocumentResponse) -> None:
    """
    Describe an extraction result on a span.

    Args:
        span: Span for the extraction or parse call
        document: Validated extraction result
    """
    if document.document_id:
        span.set_attribute("docviewer.document_id", document.document_id)
    span.set_attribute("docviewer.page_count", document.page_count or 0)
    span.set_attribute("docviewer.chunk_count", len(document.chunks))
    span.set_attribute("docviewer.page_error_count", len(document.errors))


def shutdown_tracing(tracer_provider: Optional[TracerProvider]) -> None:
    """Flush pending spans and shut the provider down."""
    if tracer_provider:
        try:
            tracer_provider.shutdown()
            logger.info("Tracing shutdown completed")
        except Exception as e:
            logger.warning(f"Error during tracing shutdown: {str(e)}")
