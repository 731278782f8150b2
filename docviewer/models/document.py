"""Local data models for uploads, chat and the example gallery."""
from dataclasses import dataclass, field
from typing import List, Literal

PDF_MIME_TYPE = "application/pdf"


@dataclass
class UploadedFile:
    """A file picked by the user, held in memory."""

    name: str
    content: bytes
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        """Lower-case extension without the dot, or '' when there is none."""
        if "." not in self.name:
            return ""
        return self.name.rsplit(".", 1)[-1].lower()

    @property
    def is_pdf(self) -> bool:
        return self.mime_type == PDF_MIME_TYPE


@dataclass
class ChatMessage:
    """One transcript entry."""

    role: Literal["user", "assistant"]
    content: str


@dataclass
class ExampleFile:
    """Entry in the example gallery."""

    id: str
    name: str
    tags: List[str] = field(default_factory=list)
