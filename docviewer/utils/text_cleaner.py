"""Text cleaning and normalization utilities."""
import re

HTML_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)
CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b-\x0c\x0e-\x1f]")
HORIZONTAL_WHITESPACE = re.compile(r"[ \t\f\v]+")
EXCESS_NEWLINES = re.compile(r"\n{3,}")
SPACE_BETWEEN_TAGS = re.compile(r">[ \t]+<")


def clean_markdown(text: str) -> str:
    """
    Clean extracted markdown for rendering.

    Strips HTML comments (the API embeds chunk metadata in them) and
    collapses whitespace. Line structure is kept so markdown tables and
    lists still parse. Applying it twice gives the same result.

    Args:
        text: Raw markdown

    Returns:
        Cleaned markdown
    """
    text = CONTROL_CHARS.sub("", text)
    text = HTML_COMMENT.sub("", text)

    # Normalize line breaks
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    text = HORIZONTAL_WHITESPACE.sub(" ", text)
    text = EXCESS_NEWLINES.sub("\n\n", text)
    text = SPACE_BETWEEN_TAGS.sub("><", text)

    return text.strip()
