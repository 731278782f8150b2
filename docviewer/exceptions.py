"""Custom exception classes for the document viewer."""
from typing import Optional


class DocumentViewerError(Exception):
    """Base exception for document viewer errors."""
    pass


class ValidationError(DocumentViewerError):
    """Raised when an uploaded file fails client-side validation."""
    pass


class FileTypeNotSupportedError(ValidationError):
    """Raised when an unsupported file type is selected."""
    pass


class FileSizeExceededError(ValidationError):
    """Raised when file size exceeds the maximum allowed."""
    pass


class DocumentEmptyError(ValidationError):
    """Raised when an uploaded file has no content."""
    pass


class APIError(DocumentViewerError):
    """Raised when a call to the extraction API or proxy fails."""
    pass


class ExtractionAPIError(APIError):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, detail: str, status_code: Optional[int] = None):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


class TransportError(APIError):
    """Raised when the request never got a response (DNS, refused, reset)."""
    pass


class PageRenderError(DocumentViewerError):
    """Raised when a document page cannot be rasterized."""
    pass
