"""Streaming line client for Ollama's /api/generate endpoint.

The response body is newline-delimited JSON, one ``{"response", "done"}``
object per line. Fragments are concatenated in order until a line reports
``done: true`` or the server closes the stream.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

import httpx

from codecritique_core.errors import ProtocolError, TransportError
from codecritique_core.providers.base import ProviderClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Chunk:
    response: str
    done: bool


def _decode_line(line: str) -> _Chunk:
    """Decode one stream line, raising ProtocolError on anything unexpected."""
    try:
        payload = json.loads(line)
    except (json.JSONDecodeError, RecursionError) as e:
        raise ProtocolError(f"Failed to decode Ollama stream line: {e}", line=line) from e

    if not isinstance(payload, dict):
        raise ProtocolError("Ollama stream line is not a JSON object", line=line)

    # Ollama reports failures that happen after the 200 status in-band.
    error = payload.get("error")
    if isinstance(error, str):
        raise ProtocolError(f"Ollama reported an error: {error}", line=line)

    response = payload.get("response", "")
    done = payload.get("done", False)
    if response is None:
        response = ""
    if not isinstance(response, str):
        raise ProtocolError("Ollama stream line has a non-string 'response'", line=line)
    if not isinstance(done, bool):
        raise ProtocolError("Ollama stream line has a non-boolean 'done'", line=line)
    return _Chunk(response=response, done=done)


class StreamingLineClient(ProviderClient):
    def __init__(self, url: str, model: str, transport: httpx.AsyncBaseTransport | None = None):
        self.url = url
        self.model = model
        # Only tests inject a transport; production uses httpx's default.
        self._transport = transport

    @property
    def name(self) -> str:
        return "Ollama"

    async def _send(self, prompt: str) -> str:
        fragments: list[str] = []
        finished = False
        body = {"model": self.model, "prompt": prompt}

        # No httpx timeout: generation can take minutes, and the caller's
        # deadline is enforced by ProviderClient.send.
        async with httpx.AsyncClient(transport=self._transport, timeout=None) as client:
            try:
                async with client.stream("POST", self.url, json=body) as response:
                    if not response.is_success:
                        raise TransportError(
                            f"Ollama returned non-OK status: {response.status_code}",
                            status_code=response.status_code,
                            body=await _read_body(response),
                        )

                    async for line in response.aiter_lines():
                        if not line.strip():
                            continue
                        chunk = _decode_line(line)
                        fragments.append(chunk.response)
                        if chunk.done:
                            finished = True
                            break
            except httpx.HTTPError as e:
                raise TransportError(f"Failed to send request to Ollama: {e}") from e

        logger.debug(
            "Ollama stream %s after %d fragment(s)",
            "completed" if finished else "closed without done",
            len(fragments),
        )
        return "".join(fragments)


async def _read_body(response: httpx.Response) -> str | None:
    """Best-effort read of an error body for diagnostics."""
    try:
        return (await response.aread()).decode("utf-8", errors="replace")
    except httpx.HTTPError:
        return None
