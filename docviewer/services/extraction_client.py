"""Client for the document extraction API."""
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError

from docviewer.api.schemas import ApiResponse
from docviewer.exceptions import ExtractionAPIError, TransportError
from docviewer.models.document import UploadedFile
from docviewer.services.api_client import APIClient
from docviewer.services.samples import sample_document
from docviewer.utils.logger import logger
from docviewer.utils.tracer import get_tracer, record_document, record_upload
from docviewer.validators import upload_field_for


class ExtractionClient(APIClient):
    """Uploads documents for extraction and re-parses them by id."""

    def _url(self, path: str = "") -> str:
        return f"{self.settings.api_base_url}{self.settings.api_path}{path}"

    def process_document(self, file: UploadedFile, pages: Optional[str] = None) -> ApiResponse:
        """
        Send a document for extraction.

        Args:
            file: Validated upload
            pages: Optional page selection forwarded to the API (e.g. "0,1,2")

        Returns:
            ApiResponse whose data always has a page count

        Raises:
            ExtractionAPIError: If the API rejects the document or its
                response does not match the expected schema
            TransportError: If the API cannot be reached and the sample
                fallback is disabled
        """
        files = {upload_field_for(file): (file.name, file.content, file.mime_type)}
        data = {
            "include_marginalia": "true",
            "include_metadata_in_markdown": "true",
        }
        if pages:
            data["pages"] = pages

        with get_tracer().start_as_current_span("docviewer.extract") as span:
            record_upload(span, file.name, file.mime_type, file.size)
            try:
                payload = self._post(
                    self._url(),
                    "Failed to process document",
                    files=files,
                    data=data,
                )
            except TransportError as e:
                if self.settings.sample_fallback_enabled and _is_connection_refusal(e):
                    logger.warning(
                        "Extraction API unreachable, using sample data. "
                        "Make sure the backend server is running."
                    )
                    span.set_attribute("docviewer.sample_fallback", True)
                    return sample_document()
                raise

            response = _to_response(payload)
            record_document(span, response.data)

        logger.info(
            f"Document processed: {file.name}",
            extra={
                "document_id": response.data.document_id,
                "page_count": response.data.page_count,
                "chunk_count": len(response.data.chunks),
            },
        )
        return response

    def parse_document(self, document_id: str) -> ApiResponse:
        """
        Re-parse a previously uploaded document.

        Args:
            document_id: Id returned by an earlier extraction

        Returns:
            ApiResponse whose data always has a page count

        Raises:
            ExtractionAPIError: On a non-2xx or malformed response
        """
        with get_tracer().start_as_current_span("docviewer.parse") as span:
            span.set_attribute("docviewer.document_id", document_id)
            payload = self._post(
                self._url(f"/parse/{document_id}"),
                "Failed to parse document",
                json={},
            )
            response = _to_response(payload)
            record_document(span, response.data)

        logger.info(
            "Document parsed",
            extra={"document_id": document_id, "chunk_count": len(response.data.chunks)},
        )
        return response


def _to_response(payload: Dict[str, Any]) -> ApiResponse:
    """Validate a 2xx body; schema violations become API errors."""
    try:
        return ApiResponse.from_payload(payload)
    except ValidationError as e:
        logger.error(f"Extraction response failed validation: {str(e)}")
        raise ExtractionAPIError(
            f"Invalid response from extraction API: {e.error_count()} errors"
        ) from e


def _is_connection_refusal(error: TransportError) -> bool:
    """True when no connection could be opened at all (not a timeout)."""
    cause = error.__cause__
    return isinstance(cause, requests.exceptions.ConnectionError) and not isinstance(
        cause, requests.exceptions.Timeout
    )
