"""Upload validation, run before any network call."""
from typing import Optional

from docviewer.config import Settings
from docviewer.exceptions import (
    DocumentEmptyError,
    FileSizeExceededError,
    FileTypeNotSupportedError,
)
from docviewer.models.document import PDF_MIME_TYPE, UploadedFile


class UploadValidator:
    """Base class for upload validators."""

    SUPPORTED_EXTENSIONS = []
    SUPPORTED_MIME_TYPES = []

    @classmethod
    def validate_file_type(cls, file: UploadedFile) -> str:
        """Validate extension and MIME type and return the clean extension."""
        if not file.name:
            raise FileTypeNotSupportedError("File name is required.")

        if file.extension not in cls.SUPPORTED_EXTENSIONS:
            raise FileTypeNotSupportedError(
                "Invalid file format. Please upload JPEG, PNG, or PDF."
            )
        if file.mime_type not in cls.SUPPORTED_MIME_TYPES:
            raise FileTypeNotSupportedError(
                "Invalid file type. Please upload JPEG, PNG, or PDF."
            )

        return file.extension

    @classmethod
    def validate_file_size(cls, file_size_bytes: int, max_size_mb: int) -> None:
        """Validate file size."""
        if file_size_bytes == 0:
            raise DocumentEmptyError("The selected file is empty.")

        if file_size_bytes > max_size_mb * 1024 * 1024:
            raise FileSizeExceededError(
                f"File size exceeds the maximum limit of {max_size_mb}MB."
            )


class ImageValidator(UploadValidator):
    """Validator for JPEG and PNG images."""

    SUPPORTED_EXTENSIONS = ["jpg", "jpeg", "png"]
    SUPPORTED_MIME_TYPES = ["image/jpeg", "image/jpg", "image/png"]


class PDFValidator(UploadValidator):
    """Validator for PDF files."""

    SUPPORTED_EXTENSIONS = ["pdf"]
    SUPPORTED_MIME_TYPES = [PDF_MIME_TYPE]


def get_validator_for_file(file: UploadedFile) -> type:
    """
    Get the appropriate validator for an uploaded file.

    Args:
        file: Uploaded file

    Returns:
        Validator class for the file type

    Raises:
        FileTypeNotSupportedError: If file type is not supported
    """
    if file.extension in PDFValidator.SUPPORTED_EXTENSIONS:
        return PDFValidator
    if file.extension in ImageValidator.SUPPORTED_EXTENSIONS:
        return ImageValidator
    raise FileTypeNotSupportedError("Invalid file format. Please upload JPEG, PNG, or PDF.")


def validate_upload(file: UploadedFile, settings: Settings) -> Optional[str]:
    """
    Validate an upload before it is sent for extraction.

    Args:
        file: Uploaded file
        settings: Application settings with upload limits

    Returns:
        An informational note for the user, or None

    Raises:
        FileTypeNotSupportedError: On a bad extension or MIME type
        FileSizeExceededError: When the file is larger than the limit
        DocumentEmptyError: When the file has no bytes
    """
    validator = get_validator_for_file(file)
    validator.validate_file_type(file)
    validator.validate_file_size(file.size, settings.max_file_size_mb)

    # Page limits are enforced server-side
    if validator is PDFValidator:
        return f"Note: PDFs must have {settings.max_pages} pages or fewer."
    return None


def upload_field_for(file: UploadedFile) -> str:
    """Multipart field name the extraction API expects for this file."""
    return "pdf" if file.is_pdf else "image"
