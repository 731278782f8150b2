"""Pydantic schemas for extraction and chat API payloads."""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ChunkType = Literal[
    "title",
    "page_header",
    "page_footer",
    "page_number",
    "key_value",
    "form",
    "table",
    "figure",
    "text",
]


class WireModel(BaseModel):
    """Base for payloads exchanged with the API; unknown keys are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class BoxCoordinates(WireModel):
    """Bounding box normalized to the page image (0-1 on each axis)."""

    l: float = Field(..., description="Left edge")
    t: float = Field(..., description="Top edge")
    r: float = Field(..., description="Right edge")
    b: float = Field(..., description="Bottom edge")


class Grounding(WireModel):
    """Location of a chunk: a box on a 0-based page."""

    box: BoxCoordinates
    page: int = Field(..., ge=0, description="0-based page index")


class PageError(WireModel):
    """Per-page extraction error reported by the API."""

    page_num: int
    error: str
    error_code: int


class DocumentChunk(WireModel):
    """One extracted content unit."""

    text: str = ""
    chunk_type: ChunkType = "text"
    chunk_id: str
    grounding: Optional[List[Grounding]] = None

    @property
    def first_page(self) -> Optional[int]:
        """0-based page of the first grounding, if any."""
        if self.grounding:
            return self.grounding[0].page
        return None


class DocumentResponse(WireModel):
    """Extraction result for a whole document."""

    markdown: str = ""
    chunks: List[DocumentChunk] = Field(default_factory=list)
    errors: List[PageError] = Field(default_factory=list)
    document_id: Optional[str] = Field(None, alias="documentId")
    page_count: Optional[int] = Field(None, alias="pageCount")

    @field_validator("errors", mode="before")
    @classmethod
    def none_errors_to_empty(cls, v: Any) -> Any:
        return v or []

    @model_validator(mode="after")
    def check_unique_chunk_ids(self) -> "DocumentResponse":
        seen = set()
        for chunk in self.chunks:
            if chunk.chunk_id in seen:
                raise ValueError(f"Duplicate chunk_id in response: {chunk.chunk_id}")
            seen.add(chunk.chunk_id)
        return self

    def computed_page_count(self) -> int:
        """Highest grounded page + 1, or 1 when nothing is grounded."""
        pages = [
            grounding.page
            for chunk in self.chunks
            if chunk.grounding
            for grounding in chunk.grounding
        ]
        return max(pages, default=0) + 1

    def get_chunk(self, chunk_id: str) -> Optional[DocumentChunk]:
        for chunk in self.chunks:
            if chunk.chunk_id == chunk_id:
                return chunk
        return None

    def to_payload(self) -> Dict[str, Any]:
        """
        Serialize with wire (camelCase) names for the chat endpoints.

        Only the optional top-level ids are left out when unset; chunks keep
        ``"grounding": null``.
        """
        unset = {
            name
            for name in ("document_id", "page_count")
            if getattr(self, name) is None
        }
        return self.model_dump(by_alias=True, exclude=unset)


class ApiResponse(WireModel):
    """Envelope returned by the extraction endpoint."""

    data: DocumentResponse
    errors: List[PageError] = Field(default_factory=list)

    @field_validator("errors", mode="before")
    @classmethod
    def none_errors_to_empty(cls, v: Any) -> Any:
        return v or []

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ApiResponse":
        """
        Build a response from raw API JSON.

        Args:
            payload: Decoded JSON body

        Returns:
            ApiResponse with page_count always set
        """
        data = payload.get("data") if isinstance(payload, dict) else None
        if isinstance(data, dict) and isinstance(data.get("chunks"), list):
            response = cls.model_validate(payload)
            # Never fewer pages than the highest grounding references
            response.data.page_count = max(
                response.data.page_count or 0, response.data.computed_page_count()
            )
            return response

        # Bare document at the top level
        payload = payload if isinstance(payload, dict) else {}
        document = DocumentResponse(
            markdown=payload.get("markdown") or "",
            chunks=payload.get("chunks") or [],
            errors=payload.get("errors") or [],
        )
        document.page_count = document.computed_page_count()
        return cls(data=document)

    @property
    def all_errors(self) -> List[PageError]:
        return list(self.errors) + list(self.data.errors)


class ChatRequest(WireModel):
    """Request body for the chat endpoint."""

    document_data: Dict[str, Any] = Field(..., alias="documentData")
    message: str = Field(..., min_length=1)


class ChatResponse(WireModel):
    """Reply from the chat endpoint."""

    message: str = ""
    source_chunks: List[DocumentChunk] = Field(default_factory=list, alias="sourceChunks")
    error: Optional[str] = None
    suggested_questions: List[str] = Field(default_factory=list, alias="suggestedQuestions")

    @field_validator("source_chunks", "suggested_questions", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return v or []


class SuggestedQuestionsResponse(WireModel):
    """Reply from the suggest-questions endpoint."""

    questions: List[str] = Field(default_factory=list)
