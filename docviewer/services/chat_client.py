"""Client for the chat and question-suggestion endpoints of the proxy."""
from typing import List

from docviewer.api.schemas import (
    ChatRequest,
    ChatResponse,
    DocumentResponse,
    SuggestedQuestionsResponse,
)
from docviewer.exceptions import APIError
from docviewer.services.api_client import APIClient
from docviewer.services.samples import DEFAULT_SUGGESTED_QUESTIONS
from docviewer.utils.logger import logger


class ChatClient(APIClient):
    """Sends questions about an extracted document to the proxy backend."""

    def chat(self, document_data: DocumentResponse, message: str) -> ChatResponse:
        """
        Ask a question about the document.

        The whole extraction result is sent with every message; the proxy
        keeps no per-document state.

        Args:
            document_data: Extraction result the question refers to
            message: User's question

        Returns:
            ChatResponse from the proxy

        Raises:
            ExtractionAPIError: On a non-2xx response
            TransportError: If the proxy cannot be reached
        """
        request = ChatRequest(document_data=document_data.to_payload(), message=message)
        payload = self._post(
            f"{self.settings.backend_url.rstrip('/')}/chat",
            "Failed to chat with document",
            json=request.model_dump(by_alias=True),
        )
        return ChatResponse.model_validate(payload)

    def suggest_questions(self, document_data: DocumentResponse) -> List[str]:
        """
        Get follow-up questions for the document.

        Args:
            document_data: Extraction result

        Returns:
            Suggested questions, or the default list when the call fails
        """
        try:
            payload = self._post(
                f"{self.settings.backend_url.rstrip('/')}/suggest-questions",
                "Failed to get suggested questions",
                json={"documentData": document_data.to_payload()},
            )
            return SuggestedQuestionsResponse.model_validate(payload).questions
        except (APIError, ValueError) as e:
            logger.error(f"Error getting suggested questions: {str(e)}")
            return list(DEFAULT_SUGGESTED_QUESTIONS)
