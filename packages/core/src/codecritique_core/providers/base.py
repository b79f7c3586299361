"""Provider client base implementing the Template Method pattern.

Every backend shares the same outer contract:
    send() → deadline scope → _send()   ← only this differs per provider

Subclasses implement two things only:
  - __init__: store immutable configuration (endpoint, model, credential)
  - _send: make one request and return the model's raw text

Deadline handling lives here so each _send stays focused on its own wire
protocol, and expiry is reported the same way for every backend.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from abc import ABC, abstractmethod

from codecritique_core.errors import CancellationError, ConfigError, ProviderNotImplementedError

logger = logging.getLogger(__name__)


class Provider(enum.Enum):
    """The closed set of providers the orchestrator knows about."""

    OLLAMA = "Ollama"
    GROQ = "Groq"
    OPENAI = "OpenAI"
    ANTHROPIC = "Anthropic"

    @classmethod
    def parse(cls, name: str) -> Provider:
        for provider in cls:
            if provider.value.lower() == str(name).strip().lower():
                return provider
        choices = ", ".join(p.value for p in cls)
        raise ConfigError(f"Unknown AI provider: {name!r}. Choose one of: {choices}.")


class ProviderClient(ABC):
    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    async def send(self, prompt: str, timeout: float | None = None) -> str:
        """Send ``prompt`` and return the model's accumulated text.

        ``timeout`` is the caller's deadline in seconds for the whole call,
        including every read of a streamed body. When it expires the request
        is abandoned, its connection released and CancellationError raised.
        """
        try:
            async with asyncio.timeout(timeout):
                return await self._send(prompt)
        except TimeoutError as e:
            logger.debug("%s: deadline of %ss expired", self.__class__.__name__, timeout)
            raise CancellationError(f"{self.name} call cancelled after {timeout}s deadline") from e

    @property
    def name(self) -> str:
        return self.__class__.__name__

    # ------------------------------------------------------------------ #
    # Abstract: implement in each provider                                #
    # ------------------------------------------------------------------ #

    @abstractmethod
    async def _send(self, prompt: str) -> str:
        """Make a single request and return the raw text response.

        Must raise TransportError or ProtocolError on failure and must release
        its connection on every exit path.
        """


class UnimplementedClient(ProviderClient):
    """Stands in for a provider that is recognised but has no backend yet."""

    def __init__(self, provider: str):
        self.provider = provider

    @property
    def name(self) -> str:
        return self.provider

    async def _send(self, prompt: str) -> str:
        raise ProviderNotImplementedError(self.provider)
