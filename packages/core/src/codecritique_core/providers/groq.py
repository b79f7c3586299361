"""Single-shot chat-completions client for Groq's OpenAI-compatible API.

Requests go through the openai SDK with retries disabled; the raw response
body is decoded here so a malformed completion surfaces as ProtocolError
instead of an attribute error deep inside SDK models.
"""

from __future__ import annotations

import json
import logging

import httpx
import openai
from openai import AsyncOpenAI

from codecritique_core.errors import ProtocolError, TransportError
from codecritique_core.providers.base import ProviderClient

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a code review assistant."


def extract_content(body: str) -> str:
    """Return ``choices[0].message.content`` from a chat completion body."""
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, RecursionError) as e:
        raise ProtocolError(f"Failed to decode Groq response: {e}", line=body[:200]) from e

    try:
        content = payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise ProtocolError("Invalid response format from Groq: missing choices[0].message.content") from e

    if not isinstance(content, str):
        raise ProtocolError("Invalid content in Groq response: expected a string")
    return content


class SingleShotChatClient(ProviderClient):
    DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
    TEMPERATURE = 0.7
    MAX_TOKENS = 1024

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = DEFAULT_BASE_URL,
        temperature: float = TEMPERATURE,
        max_tokens: int = MAX_TOKENS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._transport = transport

    @property
    def name(self) -> str:
        return "Groq"

    def _client(self) -> AsyncOpenAI:
        http_client = httpx.AsyncClient(transport=self._transport) if self._transport is not None else None
        return AsyncOpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            # A failed call fails once; retry policy belongs to the caller.
            max_retries=0,
            timeout=None,
            http_client=http_client,
        )

    async def _send(self, prompt: str) -> str:
        async with self._client() as client:
            try:
                raw = await client.chat.completions.with_raw_response.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                )
            except openai.APIStatusError as e:
                raise TransportError(
                    f"Groq returned non-OK status: {e.status_code}",
                    status_code=e.status_code,
                    body=_error_body(e),
                ) from e
            except openai.APIConnectionError as e:
                raise TransportError(f"Failed to send request to Groq: {e}") from e
            body = raw.http_response.text

        logger.debug("Groq returned %d byte(s)", len(body))
        return extract_content(body)


def _error_body(error: openai.APIStatusError) -> str | None:
    try:
        return error.response.text
    except httpx.ResponseNotRead:
        return None
