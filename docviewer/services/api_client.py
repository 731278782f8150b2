"""Shared HTTP plumbing for the extraction and chat clients."""
import time
from typing import Any, Dict, Optional

import requests

from docviewer.config import Settings
from docviewer.exceptions import ExtractionAPIError, TransportError
from docviewer.utils.logger import logger
from docviewer.utils.tracer import get_tracer


def error_detail(response: requests.Response, default: str) -> str:
    """
    Pull a readable message out of an error response.

    Args:
        response: Non-2xx response
        default: Message used when the body has no usable detail

    Returns:
        The body's "detail" field, or the default
    """
    try:
        detail = response.json().get("detail")
    except (ValueError, AttributeError):
        return default

    if isinstance(detail, list) and detail:
        first = detail[0]
        detail = first.get("msg", default) if isinstance(first, dict) else str(first)
    return detail or default


class APIClient:
    """Base client: one session, Basic auth on every call."""

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        """
        Initialize API client.

        Args:
            settings: Application settings (URLs, API key, timeouts)
            session: Optional session, mainly for tests
        """
        self.settings = settings
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Basic {settings.landing_ai_api_key}"})

    def _post(
        self,
        url: str,
        failure_message: str,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        """
        POST and decode the JSON body.

        Args:
            url: Absolute endpoint URL
            failure_message: Message used when an error body has no detail
            **kwargs: Passed through to requests (json, data, files)

        Returns:
            Decoded JSON payload

        Raises:
            TransportError: If no response was received
            ExtractionAPIError: If the response status is not 2xx
        """
        start = time.perf_counter()
        with get_tracer().start_as_current_span("docviewer.api.post") as span:
            span.set_attribute("http.url", url)
            try:
                response = self.session.post(
                    url, timeout=self.settings.request_timeout_seconds, **kwargs
                )
            except requests.exceptions.RequestException as e:
                logger.error(f"Request to {url} failed: {str(e)}", extra={"endpoint": url})
                raise TransportError(str(e)) from e

            elapsed_ms = (time.perf_counter() - start) * 1000
            span.set_attribute("http.status_code", response.status_code)

        if not response.ok:
            detail = error_detail(response, failure_message)
            logger.error(
                f"API error from {url}: {detail}",
                extra={"endpoint": url, "status_code": response.status_code},
            )
            raise ExtractionAPIError(detail, status_code=response.status_code)

        logger.info(
            f"API call to {url} succeeded",
            extra={
                "endpoint": url,
                "status_code": response.status_code,
                "response_time_ms": round(elapsed_ms, 1),
            },
        )

        try:
            return response.json()
        except ValueError as e:
            raise ExtractionAPIError(
                f"{failure_message}: response was not JSON",
                status_code=response.status_code,
            ) from e
