"""Canned documents for the example gallery and the offline fallback."""
import re
from typing import Tuple

from PIL import Image, ImageDraw

from docviewer.api.schemas import ApiResponse, DocumentChunk, DocumentResponse, Grounding
from docviewer.models.document import ExampleFile

EXAMPLE_FILES = [
    ExampleFile(id="invoice", name="Invoice", tags=["Tables", "Multi-column"]),
    ExampleFile(id="lab-report", name="Lab Report", tags=["Medical", "Images"]),
    ExampleFile(id="loan-form", name="Loan Form", tags=["Forms", "Checkboxes"]),
    ExampleFile(
        id="performance-charts",
        name="Performance Charts",
        tags=["Charts", "Reading Order"],
    ),
]

TAG_PATTERN = re.compile(r"<[^>]+>")

DEFAULT_SUGGESTED_QUESTIONS = [
    "What is the main topic of this document?",
    "Can you summarize the key points?",
    "Are there any tables or figures in this document?",
    "What data is presented in this document?",
]


def _chunk(chunk_id: str, chunk_type: str, text: str, l: float, t: float, r: float, b: float, page: int = 0) -> DocumentChunk:
    return DocumentChunk(
        chunk_id=chunk_id,
        chunk_type=chunk_type,
        text=text,
        grounding=[Grounding(box={"l": l, "t": t, "r": r, "b": b}, page=page)],
    )


def sample_document() -> ApiResponse:
    """Placeholder extraction shown when the API cannot be reached."""
    return ApiResponse(
        data=DocumentResponse(
            markdown=(
                "# Sample Document\n\n## Extracted Content\n\n"
                "This is sample extracted content to demonstrate the UI functionality.\n\n"
                "## Note\n\n"
                "In a real application, this would show actual content extracted from your document."
            ),
            chunks=[
                _chunk("sample-1", "title", "Sample Document Title", 0.1, 0.1, 0.9, 0.2),
                _chunk(
                    "sample-2",
                    "text",
                    "This is sample extracted content to demonstrate the UI functionality.",
                    0.1, 0.3, 0.9, 0.4,
                ),
                _chunk("sample-3", "form", "Field: Sample Value", 0.2, 0.5, 0.8, 0.6),
            ],
            page_count=1,
        )
    )


def loan_form_document() -> ApiResponse:
    """Demo extraction for the "Loan Form" example."""
    table = (
        "<table><tr><th>Field</th><th>Value</th></tr>"
        "<tr><td>Loan Amount</td><td>$250,000</td></tr>"
        "<tr><td>Term</td><td>30 years</td></tr>"
        "<tr><td>Property Address</td><td>123 Main Street, Springfield</td></tr></table>"
    )
    chunks = [
        _chunk("loan-1", "title", "Uniform Residential Loan Application", 0.08, 0.04, 0.92, 0.09),
        _chunk("loan-2", "page_header", "Section 1: Borrower Information", 0.08, 0.11, 0.6, 0.14),
        _chunk(
            "loan-3",
            "key_value",
            "Name: Jane Doe\nSocial Security Number: XXX-XX-1234\nDate of Birth: 04/12/1985",
            0.08, 0.16, 0.6, 0.27,
        ),
        _chunk("loan-4", "form", "Citizenship: [x] U.S. Citizen [ ] Permanent Resident Alien", 0.08, 0.29, 0.92, 0.33),
        _chunk("loan-5", "table", table, 0.08, 0.36, 0.92, 0.55),
        _chunk("loan-6", "text", "Borrower agrees to the terms stated in this application.", 0.08, 0.6, 0.92, 0.66),
        _chunk("loan-7", "page_number", "1", 0.47, 0.95, 0.53, 0.98),
    ]
    markdown = "\n\n".join(
        f"<!-- chunk {chunk.chunk_id} -->\n{chunk.text}" for chunk in chunks
    )
    return ApiResponse(
        data=DocumentResponse(
            markdown=markdown,
            chunks=chunks,
            document_id="demo-loan-form",
            page_count=1,
        )
    )


def demo_document_for(example: ExampleFile) -> ApiResponse:
    """Demo data for a gallery entry; only "Loan Form" ships with any."""
    if example.name == "Loan Form":
        return loan_form_document()
    raise LookupError(f"No demo data for example '{example.name}'")


def demo_page_image(response: ApiResponse, size: Tuple[int, int] = (850, 1100)) -> Image.Image:
    """
    Draw a stand-in page for demo data.

    Chunk text is written inside each chunk's box so the overlay lines up
    with something on screen.

    Args:
        response: Demo extraction result
        size: Page size in pixels (letter proportions by default)

    Returns:
        RGB page image
    """
    image = Image.new("RGB", size, "white")
    draw = ImageDraw.Draw(image)
    width, height = size

    for chunk in response.data.chunks:
        if not chunk.grounding:
            continue
        box = chunk.grounding[0].box
        text = TAG_PATTERN.sub(" ", chunk.text)
        draw.multiline_text(
            (box.l * width + 4, box.t * height + 4),
            text,
            fill="black",
        )

    return image

