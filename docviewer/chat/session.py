"""Chat transcript and turn handling."""
from typing import List, Optional, Protocol

from docviewer.api.schemas import ChatResponse, DocumentResponse
from docviewer.models.document import ChatMessage
from docviewer.services.samples import DEFAULT_SUGGESTED_QUESTIONS
from docviewer.utils.logger import logger

ERROR_REPLY = "An error occurred. Please try again."
EMPTY_REPLY = "Sorry, I couldn't process that request."


class ChatBackend(Protocol):
    """What the session needs from a chat client."""

    def chat(self, document_data: DocumentResponse, message: str) -> ChatResponse:
        ...

    def suggest_questions(self, document_data: DocumentResponse) -> List[str]:
        ...


class ChatSession:
    """Ordered transcript for one document plus suggested follow-ups."""

    def __init__(
        self,
        client: ChatBackend,
        document_data: DocumentResponse,
        suggested_questions: Optional[List[str]] = None,
    ):
        """
        Initialize chat session.

        Args:
            client: Chat client used for every turn
            document_data: Extraction result sent with each message
            suggested_questions: Initial suggestions (defaults when omitted)
        """
        self.client = client
        self.document_data = document_data
        self.messages: List[ChatMessage] = []
        self.suggested_questions = list(suggested_questions or DEFAULT_SUGGESTED_QUESTIONS)
        self.is_sending = False

    def send(self, message: str) -> Optional[ChatMessage]:
        """
        Run one chat turn.

        Appends the user message, then exactly one assistant entry: the
        reply, the reported error, or a fallback string. There is no retry.

        Args:
            message: User input

        Returns:
            The assistant entry, or None when the input was blank
        """
        text = message.strip()
        if not text:
            return None

        self.messages.append(ChatMessage(role="user", content=text))
        self.is_sending = True
        try:
            response = self.client.chat(self.document_data, text)
            reply = self._reply_for(response)
        except Exception as e:
            logger.error(f"Error sending chat message: {str(e)}", exc_info=True)
            reply = ERROR_REPLY
        finally:
            self.is_sending = False

        entry = ChatMessage(role="assistant", content=reply)
        self.messages.append(entry)
        return entry

    def _reply_for(self, response: ChatResponse) -> str:
        if response.message:
            if response.suggested_questions:
                self.suggested_questions = list(response.suggested_questions)
            return response.message
        if response.error:
            return f"Error: {response.error}"
        return EMPTY_REPLY

    def load_suggestions(self) -> List[str]:
        """Refresh suggested questions; keep the current ones on an empty result."""
        questions = self.client.suggest_questions(self.document_data)
        if questions:
            self.suggested_questions = list(questions)
        return self.suggested_questions

    def reset(self) -> None:
        self.messages = []
