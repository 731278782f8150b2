"""Tests for overlay geometry and page drawing."""
import pytest
from PIL import Image

from docviewer.api.schemas import DocumentChunk
from docviewer.services.overlay import OverlayBox, chunks_for_page, hit_test, overlay_boxes
from docviewer.services.page_renderer import draw_overlay, fit_width


def _chunk(chunk_id, l, t, r, b, page=0):
    return DocumentChunk(
        chunk_id=chunk_id,
        chunk_type="text",
        text=chunk_id,
        grounding=[{"box": {"l": l, "t": t, "r": r, "b": b}, "page": page}],
    )


class TestOverlayBox:
    """Tests for OverlayBox positioning."""

    def test_position_is_fraction_times_hundred(self):
        """Test percentage positioning."""
        chunk = _chunk("a", 0.1, 0.2, 0.6, 0.5)
        box = OverlayBox.from_box(chunk, chunk.grounding[0].box)
        assert box.left == pytest.approx(10)
        assert box.top == pytest.approx(20)
        assert box.width == pytest.approx(50)
        assert box.height == pytest.approx(30)

    def test_clamped_to_page(self):
        """Test that out-of-range coordinates stay within 0-100%."""
        chunk = _chunk("a", -0.2, 0.9, 1.3, 1.4)
        box = OverlayBox.from_box(chunk, chunk.grounding[0].box)
        assert box.left == 0
        assert box.top == pytest.approx(90)
        assert box.left + box.width <= 100
        assert box.top + box.height <= 100

    def test_inverted_box_has_zero_size(self):
        """Test boxes whose right edge is left of the left edge."""
        chunk = _chunk("a", 0.6, 0.6, 0.4, 0.4)
        box = OverlayBox.from_box(chunk, chunk.grounding[0].box)
        assert box.width == 0
        assert box.height == 0

    def test_to_pixels(self):
        """Test pixel rectangle equals fraction times container size."""
        chunk = _chunk("a", 0.25, 0.1, 0.75, 0.3)
        box = OverlayBox.from_box(chunk, chunk.grounding[0].box)
        x0, y0, x1, y1 = box.to_pixels(800, 1000)
        assert (x0, y0) == pytest.approx((200, 100))
        assert (x1, y1) == pytest.approx((600, 300))


class TestPageFiltering:
    """Tests for selecting chunks and boxes by page."""

    def test_chunks_for_page(self, sample_chunks):
        """Test 1-based page filtering against 0-based groundings."""
        assert [c.chunk_id for c in chunks_for_page(sample_chunks, 1)] == ["c-title", "c-table"]
        assert [c.chunk_id for c in chunks_for_page(sample_chunks, 3)] == ["c-table"]
        assert chunks_for_page(sample_chunks, 2) == []

    def test_overlay_boxes_only_current_page(self, sample_chunks):
        """Test that a multi-page chunk only contributes its boxes for this page."""
        boxes = overlay_boxes(sample_chunks, 3)
        assert len(boxes) == 1
        assert boxes[0].chunk_id == "c-table"
        assert boxes[0].top == pytest.approx(20)

    def test_ungrounded_chunks_skipped(self, sample_chunks):
        """Test chunks without grounding never get a box."""
        ids = {box.chunk_id for page in (1, 2, 3) for box in overlay_boxes(sample_chunks, page)}
        assert "c-footer" not in ids


class TestHitTest:
    """Tests for click hit-testing."""

    def test_click_inside_box(self):
        """Test that a click selects the box under it."""
        chunks = [_chunk("a", 0.1, 0.1, 0.5, 0.5)]
        boxes = overlay_boxes(chunks, 1)
        assert hit_test(boxes, 0.3, 0.3) == "a"

    def test_click_outside(self):
        """Test that a click on empty space selects nothing."""
        boxes = overlay_boxes([_chunk("a", 0.1, 0.1, 0.5, 0.5)], 1)
        assert hit_test(boxes, 0.9, 0.9) is None

    def test_smallest_nested_box_wins(self):
        """Test nested boxes resolve to the innermost."""
        chunks = [_chunk("outer", 0.0, 0.0, 1.0, 1.0), _chunk("inner", 0.4, 0.4, 0.6, 0.6)]
        boxes = overlay_boxes(chunks, 1)
        assert hit_test(boxes, 0.5, 0.5) == "inner"
        assert hit_test(boxes, 0.1, 0.1) == "outer"


class TestDrawing:
    """Tests for drawing boxes with Pillow."""

    def test_draw_overlay_keeps_size(self):
        """Test that drawing returns an RGB image of the same size."""
        image = Image.new("RGB", (200, 300), "white")
        boxes = overlay_boxes([_chunk("a", 0.1, 0.1, 0.5, 0.5)], 1)
        result = draw_overlay(image, boxes, highlighted_chunk_id="a")
        assert result.size == (200, 300)
        assert result.mode == "RGB"
        # Outline pixel at the top-left corner of the box is no longer white
        assert result.getpixel((20, 30)) != (255, 255, 255)

    def test_fit_width_keeps_aspect_ratio(self):
        """Test resizing to the viewer width."""
        image = Image.new("RGB", (1700, 2200))
        resized = fit_width(image, 850)
        assert resized.size == (850, 1100)
