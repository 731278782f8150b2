"""Markdown normalization for extracted content.

The extraction API emits markdown with embedded HTML tables, HTML comments
and LaTeX. Tables are rewritten as markdown tables, formulas become MathML,
and whatever HTML survives is sanitized before it reaches the page.
"""
import re
from dataclasses import dataclass
from typing import List

import nh3
from latex2mathml.converter import convert as latex_to_mathml

from docviewer.utils.logger import logger
from docviewer.utils.text_cleaner import clean_markdown

TABLE_PATTERN = re.compile(r"<table\b[^>]*>(.*?)</table>", re.DOTALL | re.IGNORECASE)
ROW_PATTERN = re.compile(r"<tr\b[^>]*>(.*?)</tr>", re.DOTALL | re.IGNORECASE)
CELL_PATTERN = re.compile(r"<t([hd])\b[^>]*>(.*?)</t[hd]>", re.DOTALL | re.IGNORECASE)

BLOCK_MATH = re.compile(r"\$\$([^$]+)\$\$")
# No whitespace just inside the delimiters, so "$5 and $10" is not math
INLINE_MATH = re.compile(r"\$(?![\s$])([^$]+?)(?<!\s)\$")

HTML_MARKERS = (
    "<table",
    "</table>",
    '<div class="math-block">',
    '<span class="math-inline">',
)

MATHML_TAGS = {
    "math", "semantics", "annotation", "mrow", "mi", "mn", "mo", "ms",
    "mtext", "mspace", "msup", "msub", "msubsup", "mfrac", "msqrt",
    "mroot", "mover", "munder", "munderover", "mtable", "mtr", "mtd",
    "mstyle", "mpadded", "mphantom", "menclose", "merror",
}
ALLOWED_TAGS = {
    "p", "br", "hr", "div", "span", "strong", "b", "em", "i", "u", "sub",
    "sup", "code", "pre", "blockquote", "ul", "ol", "li", "a", "img",
    "h1", "h2", "h3", "h4", "h5", "h6",
    "table", "thead", "tbody", "tfoot", "tr", "th", "td", "caption",
} | MATHML_TAGS
ALLOWED_ATTRIBUTES = {
    "*": {"class"},
    "a": {"href", "title"},
    "img": {"src", "alt"},
    "td": {"colspan", "rowspan"},
    "th": {"colspan", "rowspan"},
    "math": {"display", "xmlns"},
    "mo": {"stretchy", "fence", "separator"},
    "mstyle": {"displaystyle", "scriptlevel"},
}


@dataclass
class RenderedContent:
    """Normalized content and how to render it."""

    body: str
    is_html: bool = False


def _cells(row: str) -> List[str]:
    return [content.strip() or " " for _, content in CELL_PATTERN.findall(row)]


def _table_to_markdown(match: re.Match) -> str:
    rows = ROW_PATTERN.findall(match.group(1))

    markdown_table = "\n"
    for row_index, row in enumerate(rows):
        cells = _cells(row)
        markdown_table += f"| {' | '.join(cells)} |\n"

        # Separator after a header row
        if row_index == 0 and re.search(r"<th\b", row, re.IGNORECASE):
            markdown_table += f"| {' | '.join('---' for _ in cells)} |\n"

    return markdown_table


def convert_html_tables(content: str) -> str:
    """
    Convert HTML tables to markdown tables.

    Nested tables are not handled: the first non-greedy match wins and the
    remainder is left in place.

    Args:
        content: Markdown that may contain <table> elements

    Returns:
        Content with each table replaced by markdown table syntax
    """
    return TABLE_PATTERN.sub(_table_to_markdown, content)


def has_math(content: str) -> bool:
    """Check whether content contains $...$ or $$...$$ formulas."""
    if "$" not in content:
        return False
    return bool(BLOCK_MATH.search(content) or INLINE_MATH.search(content))


def _render_formula(formula: str, display: str) -> str:
    return latex_to_mathml(formula.strip(), display=display)


def _render_block(match: re.Match) -> str:
    try:
        rendered = _render_formula(match.group(1), "block")
    except Exception as e:
        logger.warning(f"Could not render block formula: {str(e)}")
        return match.group(0)
    return f'<div class="math-block">{rendered}</div>'


def _render_inline(match: re.Match) -> str:
    try:
        rendered = _render_formula(match.group(1), "inline")
    except Exception as e:
        logger.warning(f"Could not render inline formula: {str(e)}")
        return match.group(0)
    return f'<span class="math-inline">{rendered}</span> '


def render_math(content: str) -> str:
    """
    Render LaTeX formulas to MathML.

    Block formulas are handled before inline ones so $$ pairs are not
    consumed as two empty inline formulas.

    Args:
        content: Text with $...$ / $$...$$ formulas

    Returns:
        Text with formulas replaced by MathML wrappers
    """
    content = BLOCK_MATH.sub(_render_block, content)
    return INLINE_MATH.sub(_render_inline, content)


def sanitize_html(html: str) -> str:
    """Strip scripts, event handlers and unknown tags."""
    return nh3.clean(html, tags=ALLOWED_TAGS, attributes=ALLOWED_ATTRIBUTES)


def contains_html(content: str) -> bool:
    return any(marker in content for marker in HTML_MARKERS)


def render_markdown(content: str) -> RenderedContent:
    """
    Normalize extracted markdown for display.

    Math is rendered first, then HTML tables are converted, then the
    result is cleaned. If table or math HTML is still present, the
    sanitized HTML is returned for raw injection. Otherwise the cleaned
    markdown goes to the markdown renderer.

    Args:
        content: Markdown from the extraction API or a chat reply

    Returns:
        RenderedContent with the body and whether it is HTML
    """
    result = content or ""

    if has_math(result):
        result = render_math(result)

    result = convert_html_tables(result)
    result = clean_markdown(result)

    if contains_html(result):
        return RenderedContent(body=sanitize_html(result), is_html=True)
    return RenderedContent(body=result, is_html=False)
