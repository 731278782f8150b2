"""Pytest configuration and fixtures."""
from unittest.mock import Mock

import pytest
import requests

from docviewer.api.schemas import DocumentChunk, DocumentResponse
from docviewer.config import Settings
from docviewer.models.document import UploadedFile


@pytest.fixture
def settings():
    """Settings with fixed URLs and limits."""
    return Settings(
        landing_ai_api_key="test-key",
        use_backend=True,
        backend_url="http://proxy.test/api/landing",
        direct_api_base_url="https://api.test",
        api_path="/v1/tools/agentic-document-analysis",
        max_file_size_mb=250,
        max_pages=50,
        sample_fallback_enabled=True,
        tracing_enabled=False,
    )


@pytest.fixture
def sample_chunks():
    """Chunks spread over pages 0 and 2, plus one without grounding."""
    return [
        DocumentChunk(
            chunk_id="c-title",
            chunk_type="title",
            text="Quarterly Report",
            grounding=[{"box": {"l": 0.1, "t": 0.05, "r": 0.9, "b": 0.1}, "page": 0}],
        ),
        DocumentChunk(
            chunk_id="c-table",
            chunk_type="table",
            text="<table><tr><th>A</th><th>B</th></tr><tr><td>1</td><td>2</td></tr></table>",
            grounding=[
                {"box": {"l": 0.1, "t": 0.2, "r": 0.9, "b": 0.5}, "page": 2},
                {"box": {"l": 0.1, "t": 0.0, "r": 0.9, "b": 0.1}, "page": 0},
            ],
        ),
        DocumentChunk(
            chunk_id="c-footer",
            chunk_type="page_footer",
            text="Confidential",
            grounding=None,
        ),
    ]


@pytest.fixture
def document(sample_chunks):
    """Extraction result without an explicit page count."""
    return DocumentResponse(markdown="# Quarterly Report", chunks=sample_chunks, documentId="doc-1")


@pytest.fixture
def png_file():
    return UploadedFile(name="scan.png", content=b"\x89PNG\r\n\x1a\n" + b"0" * 64, mime_type="image/png")


@pytest.fixture
def pdf_file():
    return UploadedFile(name="report.pdf", content=b"%PDF-1.4\n%%EOF", mime_type="application/pdf")


def _make_response(status_code=200, payload=None):
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    if isinstance(payload, Exception):
        response.json = Mock(side_effect=payload)
    else:
        response.json = Mock(return_value=payload if payload is not None else {})
    return response


@pytest.fixture
def make_response():
    """Factory for mocked requests.Response objects."""
    return _make_response


@pytest.fixture
def session():
    """Real session with a mocked post method."""
    session = requests.Session()
    session.post = Mock()
    return session
