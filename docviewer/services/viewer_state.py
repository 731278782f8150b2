"""In-memory state for one document view: pages, selection, errors."""
from dataclasses import dataclass
from typing import List, Optional

from docviewer.api.schemas import ApiResponse, DocumentChunk, DocumentResponse, PageError
from docviewer.services.overlay import OverlayBox, chunks_for_page, overlay_boxes


@dataclass
class ViewerState:
    """
    State shared by the page viewer and the content pane.

    Pages are 1-based here; chunk groundings are 0-based.
    """

    document: Optional[DocumentResponse] = None
    page_count: int = 1
    current_page: int = 1
    selected_chunk_id: Optional[str] = None
    is_processing: bool = False
    processing_error: Optional[str] = None

    @property
    def chunks(self) -> List[DocumentChunk]:
        return self.document.chunks if self.document else []

    @property
    def markdown(self) -> str:
        return self.document.markdown if self.document else ""

    @property
    def document_id(self) -> Optional[str]:
        return self.document.document_id if self.document else None

    def begin(self) -> None:
        """Mark a call as outstanding; the triggering control is disabled."""
        self.is_processing = True
        self.processing_error = None

    def finish(self) -> None:
        self.is_processing = False

    def load(self, document: DocumentResponse) -> None:
        """
        Show a new extraction result.

        Args:
            document: Extraction result; its page_count may be missing
        """
        self.document = document
        self.page_count = max(1, document.page_count or 0, document.computed_page_count())
        self.current_page = 1
        self.selected_chunk_id = None
        self.processing_error = None

    def fail(self, message: str) -> None:
        """Record a processing failure; the error panel replaces the content."""
        self.processing_error = message

    def go_to_page(self, page: int) -> bool:
        """Move to a 1-based page. Out-of-range pages are ignored."""
        if 1 <= page <= self.page_count:
            self.current_page = page
            return True
        return False

    def next_page(self) -> bool:
        return self.go_to_page(self.current_page + 1)

    def previous_page(self) -> bool:
        return self.go_to_page(self.current_page - 1)

    def select_chunk(self, chunk_id: str) -> None:
        """
        Select a chunk and bring its first grounding page into view.

        Args:
            chunk_id: Chunk to select
        """
        self.selected_chunk_id = chunk_id
        chunk = self.document.get_chunk(chunk_id) if self.document else None
        if chunk is None or chunk.first_page is None:
            return
        self.go_to_page(chunk.first_page + 1)

    @property
    def selected_chunk(self) -> Optional[DocumentChunk]:
        if self.document is None or self.selected_chunk_id is None:
            return None
        return self.document.get_chunk(self.selected_chunk_id)

    def page_chunks(self) -> List[DocumentChunk]:
        return chunks_for_page(self.chunks, self.current_page)

    def page_boxes(self) -> List[OverlayBox]:
        return overlay_boxes(self.chunks, self.current_page)


def page_errors_summary(response: ApiResponse) -> Optional[str]:
    """Per-page errors joined for a warning toast, or None when clean."""
    errors: List[PageError] = response.all_errors
    if not errors:
        return None
    return ", ".join(f"Page {error.page_num}: {error.error}" for error in errors)
