"""Tests for API payload schemas."""
import pytest
from pydantic import ValidationError

from docviewer.api.schemas import (
    ApiResponse,
    ChatRequest,
    ChatResponse,
    DocumentChunk,
    DocumentResponse,
)


def _raw_chunk(chunk_id, page):
    return {
        "text": f"Chunk {chunk_id}",
        "chunk_type": "text",
        "chunk_id": chunk_id,
        "grounding": [{"box": {"l": 0.1, "t": 0.1, "r": 0.5, "b": 0.2}, "page": page}],
    }


class TestApiResponse:
    """Tests for building responses from raw JSON."""

    def test_page_count_from_highest_grounding(self):
        """Test chunks on pages {0, 2} give a page count of 3."""
        response = ApiResponse.from_payload(
            {"data": {"markdown": "text", "chunks": [_raw_chunk("a", 0), _raw_chunk("b", 2)]}}
        )
        assert response.data.page_count == 3

    def test_explicit_page_count_kept(self):
        """Test that a page count sent by the API is not overwritten."""
        response = ApiResponse.from_payload(
            {"data": {"markdown": "", "chunks": [_raw_chunk("a", 0)], "pageCount": 12}}
        )
        assert response.data.page_count == 12

    def test_short_page_count_raised_to_groundings(self):
        """Test that groundings never point past the last page."""
        response = ApiResponse.from_payload(
            {"data": {"markdown": "", "chunks": [_raw_chunk("a", 4)], "pageCount": 2}}
        )
        assert response.data.page_count == 5

    def test_bare_document_page_count_from_groundings(self):
        """Test the wrapped document counts pages from its groundings."""
        response = ApiResponse.from_payload({"markdown": "", "chunks": [_raw_chunk("a", 3)]})
        assert response.data.page_count == 4

    def test_bare_document_wrapped(self):
        """Test top-level markdown and chunks without a data envelope."""
        response = ApiResponse.from_payload({"markdown": "# Hi", "chunks": [_raw_chunk("a", 0)]})
        assert response.data.markdown == "# Hi"
        assert response.data.page_count == 1
        assert [c.chunk_id for c in response.data.chunks] == ["a"]

    def test_empty_payload(self):
        """Test a body with nothing usable."""
        response = ApiResponse.from_payload({})
        assert response.data.chunks == []
        assert response.data.page_count == 1

    def test_document_id_alias(self):
        """Test camelCase keys from the wire."""
        response = ApiResponse.from_payload(
            {"data": {"markdown": "", "chunks": [], "documentId": "abc"}}
        )
        assert response.data.document_id == "abc"

    def test_unknown_keys_ignored(self):
        """Test that extra fields don't fail validation."""
        response = ApiResponse.from_payload(
            {"data": {"markdown": "", "chunks": [], "extraction_metadata": {"v": 2}}, "meta": 1}
        )
        assert response.data.markdown == ""

    def test_null_errors(self):
        """Test that null errors become empty lists."""
        response = ApiResponse.from_payload({"data": {"chunks": [], "errors": None}, "errors": None})
        assert response.all_errors == []


class TestDocumentResponse:
    """Tests for document-level validation and helpers."""

    def test_duplicate_chunk_ids_rejected(self):
        """Test that chunk ids must be unique within a document."""
        with pytest.raises(ValidationError, match="Duplicate chunk_id"):
            DocumentResponse(chunks=[_raw_chunk("a", 0), _raw_chunk("a", 1)])

    def test_negative_page_rejected(self):
        """Test that grounding pages are 0-based and non-negative."""
        with pytest.raises(ValidationError):
            DocumentChunk(**_raw_chunk("a", -1))

    def test_get_chunk(self, document):
        """Test lookup by id."""
        assert document.get_chunk("c-table").chunk_type == "table"
        assert document.get_chunk("nope") is None

    def test_first_page(self, sample_chunks):
        """Test the first grounding decides the chunk's page."""
        title, table, footer = sample_chunks
        assert title.first_page == 0
        assert table.first_page == 2
        assert footer.first_page is None

    def test_to_payload_uses_wire_names(self, document):
        """Test serialization for the chat endpoints."""
        payload = document.to_payload()
        assert payload["documentId"] == "doc-1"
        assert "document_id" not in payload
        assert "pageCount" not in payload
        assert payload["chunks"][0]["chunk_id"] == "c-title"

    def test_to_payload_keeps_null_grounding(self, document):
        """Test ungrounded chunks are sent with grounding set to null."""
        footer = document.to_payload()["chunks"][2]
        assert footer["chunk_id"] == "c-footer"
        assert "grounding" in footer
        assert footer["grounding"] is None


class TestChatSchemas:
    """Tests for chat request and response bodies."""

    def test_request_serializes_camel_case(self, document):
        """Test the chat request body keys."""
        request = ChatRequest(document_data=document.to_payload(), message="Hi")
        body = request.model_dump(by_alias=True)
        assert set(body) == {"documentData", "message"}

    def test_empty_message_rejected(self):
        """Test that a chat request needs a message."""
        with pytest.raises(ValidationError):
            ChatRequest(documentData={}, message="")

    def test_response_nulls(self):
        """Test that null lists in a reply become empty lists."""
        response = ChatResponse.model_validate(
            {"message": "Done", "sourceChunks": None, "suggestedQuestions": None}
        )
        assert response.source_chunks == []
        assert response.suggested_questions == []
        assert response.error is None
