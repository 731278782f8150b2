"""Tests for upload validation."""
import pytest

from docviewer.exceptions import (
    DocumentEmptyError,
    FileSizeExceededError,
    FileTypeNotSupportedError,
)
from docviewer.models.document import UploadedFile
from docviewer.validators import (
    ImageValidator,
    PDFValidator,
    get_validator_for_file,
    upload_field_for,
    validate_upload,
)


class TestValidateUpload:
    """Tests for validate_upload."""

    def test_png_accepted(self, png_file, settings):
        """Test a small PNG passes without a note."""
        assert validate_upload(png_file, settings) is None

    def test_pdf_gets_page_note(self, pdf_file, settings):
        """Test PDFs pass with the page-limit note."""
        assert validate_upload(pdf_file, settings) == "Note: PDFs must have 50 pages or fewer."

    def test_oversized_file_rejected(self, settings):
        """Test a 300MB file is rejected before any call."""
        big = UploadedFile(name="huge.png", content=b"0" * (300 * 1024 * 1024), mime_type="image/png")
        with pytest.raises(FileSizeExceededError, match="250MB"):
            validate_upload(big, settings)

    def test_ten_megabyte_png_accepted(self, settings):
        """Test a 10MB PNG is within limits."""
        file = UploadedFile(name="scan.png", content=b"0" * (10 * 1024 * 1024), mime_type="image/png")
        assert validate_upload(file, settings) is None

    def test_unsupported_extension(self, settings):
        """Test non-image, non-PDF files."""
        file = UploadedFile(name="notes.docx", content=b"data", mime_type="application/msword")
        with pytest.raises(FileTypeNotSupportedError):
            validate_upload(file, settings)

    def test_mismatched_mime_type(self, settings):
        """Test a .png whose MIME type is not an image."""
        file = UploadedFile(name="fake.png", content=b"data", mime_type="text/plain")
        with pytest.raises(FileTypeNotSupportedError):
            validate_upload(file, settings)

    def test_empty_file(self, settings):
        """Test zero-byte uploads."""
        file = UploadedFile(name="empty.pdf", content=b"", mime_type="application/pdf")
        with pytest.raises(DocumentEmptyError):
            validate_upload(file, settings)


class TestHelpers:
    """Tests for validator selection and field names."""

    def test_validator_selection(self, png_file, pdf_file):
        """Test the validator class per extension."""
        assert get_validator_for_file(png_file) is ImageValidator
        assert get_validator_for_file(pdf_file) is PDFValidator
        jpeg = UploadedFile(name="PHOTO.JPEG", content=b"x", mime_type="image/jpeg")
        assert get_validator_for_file(jpeg) is ImageValidator

    def test_no_extension(self):
        """Test files without an extension."""
        with pytest.raises(FileTypeNotSupportedError):
            get_validator_for_file(UploadedFile(name="README", content=b"x", mime_type="text/plain"))

    def test_upload_field(self, png_file, pdf_file):
        """Test multipart field names."""
        assert upload_field_for(pdf_file) == "pdf"
        assert upload_field_for(png_file) == "image"
