"""Page rasterization and overlay drawing for the viewer pane."""
import io
from typing import Optional, Sequence

from pdf2image import convert_from_bytes
from PIL import Image, ImageDraw

from docviewer.exceptions import PageRenderError
from docviewer.models.document import UploadedFile
from docviewer.services.overlay import OverlayBox
from docviewer.utils.logger import logger

BOX_COLOR = (74, 222, 128, 160)
HIGHLIGHT_COLOR = (59, 130, 246, 255)
HIGHLIGHT_FILL = (59, 130, 246, 40)


class PageRenderer:
    """Turns an uploaded file into page images."""

    def __init__(self, dpi: int = 150):
        """
        Initialize page renderer.

        Args:
            dpi: DPI for PDF rasterization (higher = sharper but slower)
        """
        self.dpi = dpi

    def render_page(self, file: UploadedFile, page: int) -> Image.Image:
        """
        Render a 1-based page of the uploaded file.

        Args:
            file: Uploaded PDF or image
            page: 1-based page number

        Returns:
            RGB image of the page

        Raises:
            PageRenderError: If the page does not exist or cannot be decoded
        """
        if page < 1:
            raise PageRenderError(f"Invalid page number: {page}")

        if file.is_pdf:
            return self._render_pdf_page(file, page)

        if page != 1:
            raise PageRenderError(f"Image documents have a single page, got page {page}")

        try:
            image = Image.open(io.BytesIO(file.content))
            return image.convert("RGB")
        except Exception as e:
            raise PageRenderError(f"Could not open image {file.name}: {str(e)}") from e

    def _render_pdf_page(self, file: UploadedFile, page: int) -> Image.Image:
        try:
            images = convert_from_bytes(
                file.content, dpi=self.dpi, first_page=page, last_page=page
            )
        except Exception as e:
            logger.error(f"Error rasterizing PDF page {page}: {str(e)}", exc_info=True)
            raise PageRenderError(f"Could not render page {page} of {file.name}") from e

        if not images:
            raise PageRenderError(f"Page {page} does not exist in {file.name}")

        return images[0].convert("RGB")


def fit_width(image: Image.Image, width: int) -> Image.Image:
    """Resize to a fixed width, keeping the aspect ratio."""
    if image.width == width:
        return image
    height = max(1, round(image.height * width / image.width))
    return image.resize((width, height))


def draw_overlay(
    image: Image.Image,
    boxes: Sequence[OverlayBox],
    highlighted_chunk_id: Optional[str] = None,
) -> Image.Image:
    """
    Draw grounding boxes over a page image.

    Args:
        image: Page image
        boxes: Overlay boxes for this page
        highlighted_chunk_id: Selected chunk, drawn emphasized

    Returns:
        A new RGB image with the rectangles drawn
    """
    base = image.convert("RGBA")
    layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)

    for box in boxes:
        rect = box.to_pixels(base.width, base.height)
        if box.chunk_id == highlighted_chunk_id:
            draw.rectangle(rect, outline=HIGHLIGHT_COLOR, fill=HIGHLIGHT_FILL, width=3)
        else:
            draw.rectangle(rect, outline=BOX_COLOR, width=2)

    return Image.alpha_composite(base, layer).convert("RGB")
