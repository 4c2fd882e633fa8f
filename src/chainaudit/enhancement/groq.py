"""Groq chat-completion enhancer.

Sends one finding to an OpenAI-compatible chat completion endpoint (Groq by
default) and asks for a JSON object with ``enhancedDescription``,
``exploitationScenario`` and ``recommendation``. The call is made once,
without retry.
"""

from __future__ import annotations

import json
import logging

import httpx

from chainaudit.enhancement.client import DEFAULT_TIMEOUT, post_json
from chainaudit.enhancement.models import EnhancementRequest, EnhancementResponse
from chainaudit.exceptions import EnhancementError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_MODEL = "llama-3.3-70b-versatile"
TEMPERATURE = 0.2
MAX_TOKENS = 1000

SYSTEM_PROMPT = (
    "You are a smart contract security expert. Enhance vulnerability "
    "descriptions with clear, actionable insights. Return JSON only."
)


def build_prompt(request: EnhancementRequest) -> str:
    """Render the user message describing one finding."""
    return (
        "Enhance this vulnerability report:\n\n"
        f"Vulnerability: {request.name}\n"
        f"Type: {request.type}\n"
        f"Line: {request.line_number}\n"
        f"Code: {request.code_snippet}\n\n"
        "Provide JSON with: enhancedDescription, exploitationScenario, recommendation"
    )


class GroqEnhancer:
    """Enhancer backed by a Groq (OpenAI-compatible) chat completion API.

    Args:
        api_key: Bearer token for the API. Must be non-empty.
        model: Chat model name.
        base_url: API root; ``/chat/completions`` is appended.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport, used by tests.

    Raises:
        EnhancementError: If ``api_key`` is empty.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise EnhancementError("An API key is required for AI enhancement")
        self._api_key = api_key
        self._model = model
        self._url = base_url.rstrip("/") + "/chat/completions"
        self._timeout = timeout
        self._transport = transport

    async def enhance(self, request: EnhancementRequest) -> EnhancementResponse:
        """Ask the model for richer text about ``request``.

        Raises:
            EnhancementError: On transport failure or an unusable response.
        """
        payload = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(request)},
            ],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
            "response_format": {"type": "json_object"},
        }
        body = await post_json(
            self._url,
            payload,
            headers={"Authorization": f"Bearer {self._api_key}"},
            timeout=self._timeout,
            transport=self._transport,
        )
        logger.debug("Enhanced %s at line %d", request.name, request.line_number)
        return EnhancementResponse.from_payload(_message_json(body))


def _message_json(body: dict) -> dict:
    """Extract and decode the first choice's JSON message content."""
    try:
        content = body["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise EnhancementError("Response has no message content") from exc
    if not content:
        return {}
    try:
        decoded = json.loads(content)
    except json.JSONDecodeError as exc:
        raise EnhancementError(f"Message content is not JSON: {exc}") from exc
    if not isinstance(decoded, dict):
        raise EnhancementError("Message content is not a JSON object")
    return decoded
