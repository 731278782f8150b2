"""Bounding-box overlay geometry for the page viewer."""
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from docviewer.api.schemas import BoxCoordinates, DocumentChunk


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class OverlayBox:
    """A grounding box positioned in percent of the page container."""

    chunk_id: str
    chunk_type: str
    left: float
    top: float
    width: float
    height: float

    @classmethod
    def from_box(cls, chunk: DocumentChunk, box: BoxCoordinates) -> "OverlayBox":
        """
        Position a normalized box as percentages, clamped to the page.

        Args:
            chunk: Chunk the box belongs to
            box: Normalized coordinates (0-1)

        Returns:
            OverlayBox with every edge inside [0, 100]
        """
        left = _clamp(box.l * 100)
        top = _clamp(box.t * 100)
        right = _clamp(box.r * 100)
        bottom = _clamp(box.b * 100)
        return cls(
            chunk_id=chunk.chunk_id,
            chunk_type=chunk.chunk_type,
            left=left,
            top=top,
            width=max(0.0, right - left),
            height=max(0.0, bottom - top),
        )

    @property
    def area(self) -> float:
        return self.width * self.height

    def contains(self, x_percent: float, y_percent: float) -> bool:
        return (
            self.left <= x_percent <= self.left + self.width
            and self.top <= y_percent <= self.top + self.height
        )

    def to_pixels(self, width: int, height: int) -> Tuple[float, float, float, float]:
        """Rectangle (x0, y0, x1, y1) inside a container of the given size."""
        x0 = self.left * width / 100
        y0 = self.top * height / 100
        return (
            x0,
            y0,
            x0 + self.width * width / 100,
            y0 + self.height * height / 100,
        )


def chunks_for_page(chunks: Sequence[DocumentChunk], page: int) -> List[DocumentChunk]:
    """Chunks with at least one grounding on the 1-based UI page."""
    page_index = page - 1
    return [
        chunk
        for chunk in chunks
        if chunk.grounding and any(g.page == page_index for g in chunk.grounding)
    ]


def overlay_boxes(chunks: Sequence[DocumentChunk], page: int) -> List[OverlayBox]:
    """One overlay box per grounding on the 1-based UI page, in chunk order."""
    page_index = page - 1
    boxes = []
    for chunk in chunks_for_page(chunks, page):
        for grounding in chunk.grounding:
            if grounding.page == page_index:
                boxes.append(OverlayBox.from_box(chunk, grounding.box))
    return boxes


def hit_test(boxes: Sequence[OverlayBox], x_fraction: float, y_fraction: float) -> Optional[str]:
    """
    Find the chunk under a click.

    Boxes can nest (a table inside a form), so the smallest containing box
    wins.

    Args:
        boxes: Overlay boxes for the visible page
        x_fraction: Click position as a fraction of the image width
        y_fraction: Click position as a fraction of the image height

    Returns:
        The chunk id, or None when the click hit no box
    """
    x_percent = x_fraction * 100
    y_percent = y_fraction * 100
    hits = [box for box in boxes if box.contains(x_percent, y_percent)]
    if not hits:
        return None
    return min(hits, key=lambda box: box.area).chunk_id
