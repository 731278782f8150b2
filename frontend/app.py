"""Streamlit frontend for the document extraction viewer."""
import atexit
import html
from typing import Optional

import streamlit as st
from streamlit_image_coordinates import streamlit_image_coordinates

from docviewer.api.schemas import ApiResponse
from docviewer.chat import ChatSession
from docviewer.config import get_settings
from docviewer.exceptions import DocumentViewerError, PageRenderError, ValidationError
from docviewer.models.document import ExampleFile, UploadedFile
from docviewer.services.chat_client import ChatClient
from docviewer.services.extraction_client import ExtractionClient
from docviewer.services.markdown_renderer import render_markdown
from docviewer.services.overlay import hit_test
from docviewer.services.page_renderer import PageRenderer, draw_overlay, fit_width
from docviewer.services.samples import EXAMPLE_FILES, demo_document_for, demo_page_image
from docviewer.services.viewer_state import ViewerState, page_errors_summary
from docviewer.utils.logger import logger
from docviewer.utils.tracer import initialize_tracing, shutdown_tracing
from docviewer.validators import validate_upload

# Page configuration
st.set_page_config(
    page_title="Agentic Document Extraction",
    page_icon="📄",
    layout="wide",
    initial_sidebar_state="expanded"
)

settings = get_settings()

st.markdown("""
    <style>
        #MainMenu {visibility: hidden;}
        footer {visibility: hidden;}

        .main-header {
            text-align: center;
            padding: 1.5rem 0;
            border-bottom: 2px solid #e0e0e0;
            margin-bottom: 1.5rem;
        }

        .error-panel {
            text-align: center;
            padding: 3rem 1rem;
        }

        .page-note {
            color: #6b7280;
            font-size: 0.8rem;
        }

        .math-block {
            overflow-x: auto;
            margin: 1rem 0;
        }

        .math-inline {
            display: inline-block;
            margin: 0 0.15rem;
            vertical-align: middle;
        }
    </style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_clients():
    """Create the API clients once per server process."""
    tracer_provider = initialize_tracing(settings)
    if tracer_provider:
        atexit.register(shutdown_tracing, tracer_provider)
    return ExtractionClient(settings), ChatClient(settings)


@st.cache_data(show_spinner=False)
def render_page_image(content: bytes, name: str, mime_type: str, page: int, dpi: int):
    """Rasterize one page; cached so reruns don't re-render."""
    renderer = PageRenderer(dpi=dpi)
    return renderer.render_page(UploadedFile(name=name, content=content, mime_type=mime_type), page)


# Initialize session state
if "viewer" not in st.session_state:
    st.session_state.viewer = ViewerState()
if "upload" not in st.session_state:
    st.session_state.upload = None
if "demo_image" not in st.session_state:
    st.session_state.demo_image = None
if "chat" not in st.session_state:
    st.session_state.chat = None
if "last_click" not in st.session_state:
    st.session_state.last_click = None
if "view_mode" not in st.session_state:
    st.session_state.view_mode = "blocks"

extraction_client, chat_client = get_clients()
viewer: ViewerState = st.session_state.viewer


def show_document(response: ApiResponse) -> None:
    """Load an extraction result into the viewer and start a chat session."""
    viewer.load(response.data)
    st.session_state.chat = ChatSession(chat_client, response.data)

    issues = page_errors_summary(response)
    if issues:
        st.toast(f"Document processed with some issues: {issues}", icon="⚠️")
    else:
        st.toast("Document processed successfully", icon="✅")


def process_upload(file: UploadedFile, pages: Optional[str]) -> None:
    """Send the upload for extraction and keep the result."""
    viewer.begin()
    try:
        with st.spinner("Extracting... We're processing your document with high accuracy."):
            response = extraction_client.process_document(file, pages=pages or None)
        st.session_state.upload = file
        st.session_state.demo_image = None
        show_document(response)
    except DocumentViewerError as e:
        logger.error(f"Error processing document: {str(e)}")
        st.session_state.upload = file
        viewer.fail(str(e) or "Failed to process document. Please try again.")
        st.toast(str(e), icon="❌")
    finally:
        viewer.finish()


def parse_current_document() -> None:
    """Re-parse the current document by id."""
    if not viewer.document_id:
        st.error("No document ID available. Please process a document first.")
        return

    viewer.begin()
    try:
        with st.spinner("Parsing document..."):
            response = extraction_client.parse_document(viewer.document_id)
        show_document(response)
    except DocumentViewerError as e:
        logger.error(f"Error parsing document: {str(e)}")
        viewer.fail(str(e) or "Failed to parse document. Please try again.")
        st.toast(str(e), icon="❌")
    finally:
        viewer.finish()


def open_example(example: ExampleFile) -> None:
    """Load demo data for a gallery entry without calling the API."""
    try:
        response = demo_document_for(example)
    except LookupError:
        st.info("Example file demo is only available for 'Loan Form' at this time.")
        return

    st.session_state.upload = None
    st.session_state.demo_image = demo_page_image(response)
    show_document(response)


def reset_document() -> None:
    st.session_state.viewer = ViewerState()
    st.session_state.upload = None
    st.session_state.demo_image = None
    st.session_state.chat = None
    st.session_state.last_click = None


def current_page_image():
    """Page image for the viewer, or None when nothing can be shown."""
    if st.session_state.demo_image is not None:
        return st.session_state.demo_image if viewer.current_page == 1 else None

    file: Optional[UploadedFile] = st.session_state.upload
    if file is None:
        return None
    try:
        return render_page_image(
            file.content, file.name, file.mime_type, viewer.current_page, settings.render_dpi
        )
    except PageRenderError as e:
        st.warning(str(e))
        return None


def render_rich_text(content: str) -> None:
    rendered = render_markdown(content)
    st.markdown(rendered.body, unsafe_allow_html=rendered.is_html)


def render_upload_view() -> None:
    st.markdown("""
        <div class="main-header">
            <h1>📄 Agentic Document Extraction</h1>
            <p>Extract structured information from visually complex documents with text,
            tables, pictures, charts, and other information. Every extracted element is
            pinned to its exact location in the document.</p>
        </div>
    """, unsafe_allow_html=True)

    uploaded_file = st.file_uploader(
        "Upload",
        type=["jpeg", "jpg", "png", "pdf"],
        help=f"JPEG, PNG, PDF. Max file size: {settings.max_file_size_mb}MB. "
             f"Max file pages: {settings.max_pages}",
    )
    pages = st.text_input(
        "Pages (optional)",
        placeholder="e.g. 0,1,2",
        help="Comma-separated 0-based page indices to extract from a PDF",
    )

    if uploaded_file is not None:
        file = UploadedFile(
            name=uploaded_file.name,
            content=uploaded_file.getvalue(),
            mime_type=uploaded_file.type or "",
        )
        if st.button("Upload & Process", type="primary", disabled=viewer.is_processing):
            try:
                note = validate_upload(file, settings)
            except ValidationError as e:
                st.error(str(e))
            else:
                if note:
                    st.info(note)
                process_upload(file, pages.strip())
                st.rerun()

    st.divider()
    st.subheader("Example files")
    columns = st.columns(len(EXAMPLE_FILES))
    for column, example in zip(columns, EXAMPLE_FILES):
        with column:
            with st.container(border=True):
                st.markdown(f"**{example.name}**")
                st.caption(" · ".join(example.tags))
                if st.button("Open", key=f"example-{example.id}"):
                    open_example(example)
                    if viewer.document is not None:
                        st.rerun()


def render_page_viewer() -> None:
    nav_prev, nav_label, nav_next = st.columns([1, 2, 1])
    with nav_prev:
        if st.button("‹", disabled=viewer.current_page == 1 or viewer.is_processing):
            viewer.previous_page()
            st.rerun()
    with nav_label:
        st.markdown(
            f"<div style='text-align: center;'>{viewer.current_page} / {viewer.page_count}</div>",
            unsafe_allow_html=True,
        )
    with nav_next:
        if st.button("›", disabled=viewer.current_page == viewer.page_count or viewer.is_processing):
            viewer.next_page()
            st.rerun()

    image = current_page_image()
    if image is None:
        st.info("No preview available for this page.")
        return

    boxes = viewer.page_boxes()
    page_image = fit_width(draw_overlay(image, boxes, viewer.selected_chunk_id), settings.viewer_width)
    click = streamlit_image_coordinates(page_image, key=f"page-{viewer.current_page}")

    if click and click != st.session_state.last_click:
        st.session_state.last_click = click
        width = click.get("width") or page_image.width
        height = click.get("height") or page_image.height
        chunk_id = hit_test(boxes, click["x"] / width, click["y"] / height)
        if chunk_id:
            viewer.select_chunk(chunk_id)
            st.rerun()


def render_error_panel() -> None:
    st.markdown(f"""
        <div class="error-panel">
            <h3>⚠️ Processing Error</h3>
            <p>{html.escape(viewer.processing_error)}</p>
            <p class="page-note">Try uploading a different document or check your connection.</p>
        </div>
    """, unsafe_allow_html=True)


def render_chunk_block(index: int, chunk) -> None:
    selected = chunk.chunk_id == viewer.selected_chunk_id
    label = f"Figure {index + 1}" if chunk.chunk_type == "figure" else f"{index + 1} - {chunk.chunk_type}"

    with st.container(border=True):
        header, action = st.columns([4, 1])
        with header:
            st.markdown(f"{'🔵 ' if selected else ''}`{label}`")
        with action:
            if st.button("Select", key=f"select-{chunk.chunk_id}", disabled=selected):
                viewer.select_chunk(chunk.chunk_id)
                st.rerun()
        render_rich_text(chunk.text)
        if chunk.first_page is not None:
            st.markdown(
                f"<span class='page-note'>Located on page {chunk.first_page + 1}</span>",
                unsafe_allow_html=True,
            )
        if selected:
            with st.expander("Copy text"):
                st.code(chunk.text, language=None)


def render_content_tab() -> None:
    if viewer.is_processing:
        st.info("Processing document...")
        return

    if viewer.processing_error:
        render_error_panel()
        return

    if not viewer.chunks:
        st.info("No content extracted. Try parsing the document.")
        return

    mode_col, parse_col, download_col = st.columns([3, 1, 1])
    with mode_col:
        st.session_state.view_mode = st.radio(
            "View",
            options=["blocks", "combined"],
            format_func=lambda mode: "Content Blocks" if mode == "blocks" else "Combined View",
            horizontal=True,
            label_visibility="collapsed",
            index=0 if st.session_state.view_mode == "blocks" else 1,
        )
    with parse_col:
        if st.button("Re-parse", disabled=not viewer.document_id or viewer.is_processing):
            parse_current_document()
            st.rerun()
    with download_col:
        if viewer.markdown:
            st.download_button(
                "Download",
                data=viewer.markdown,
                file_name="document-extraction.md",
                mime="text/markdown",
            )

    if st.session_state.view_mode == "combined":
        with st.container(border=True):
            render_rich_text(viewer.markdown)
        return

    # Streamlit cannot scroll to an element, so the selection is pinned on top
    selected = viewer.selected_chunk
    if selected is not None:
        st.caption("Selected block")
        render_chunk_block(viewer.chunks.index(selected), selected)
        st.divider()

    for index, chunk in enumerate(viewer.chunks):
        if selected is not None and chunk.chunk_id == selected.chunk_id:
            continue
        render_chunk_block(index, chunk)


def send_chat_message(session: ChatSession, message: str) -> None:
    with st.spinner("Thinking..."):
        session.send(message)
    st.rerun()


def render_chat_tab() -> None:
    session: Optional[ChatSession] = st.session_state.chat
    if session is None:
        st.info("Process a document to chat with it.")
        return

    if not session.messages:
        st.subheader("💬 Chat with Document")
        st.caption(
            "Ask questions about the document content. The AI will find answers from "
            "forms, reports, figures and highlight the exact sources."
        )
        if st.button("Suggest questions", disabled=session.is_sending):
            with st.spinner("Generating questions..."):
                session.load_suggestions()
            st.rerun()

        st.markdown("**Suggested questions**")
        for idx, question in enumerate(session.suggested_questions):
            if st.button(question, key=f"suggested-{idx}", disabled=session.is_sending):
                send_chat_message(session, question)
    else:
        for msg in session.messages:
            with st.chat_message(msg.role):
                if msg.role == "assistant":
                    render_rich_text(msg.content)
                else:
                    st.write(msg.content)

    message = st.chat_input(
        "Type your question about the document...",
        disabled=session.is_sending,
    )
    if message:
        send_chat_message(session, message)


def render_document_view() -> None:
    viewer_col, content_col = st.columns([1, 1])

    with viewer_col:
        render_page_viewer()

    with content_col:
        content_tab, chat_tab = st.tabs(["📄 Document Content", "💬 Chat with Document"])
        with content_tab:
            render_content_tab()
        with chat_tab:
            render_chat_tab()


# Sidebar
with st.sidebar:
    st.header("File selection")
    file: Optional[UploadedFile] = st.session_state.upload
    if file is not None:
        st.info(f"📄 {file.name}")
    elif viewer.document is not None:
        st.info("📄 Example document")

    if viewer.document is not None or viewer.processing_error:
        if st.button("‹ Back"):
            reset_document()
            st.rerun()

# Main content area
if viewer.document is None and not viewer.processing_error:
    render_upload_view()
else:
    render_document_view()
