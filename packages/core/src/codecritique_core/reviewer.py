"""Core PR review orchestration."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, assert_never

import httpx

from codecritique_core.errors import ConfigError, CritiqueError
from codecritique_core.models import PullRequest, Review
from codecritique_core.parser import ReviewParser
from codecritique_core.prompt import PromptBuilder
from codecritique_core.providers.base import Provider, ProviderClient, UnimplementedClient
from codecritique_core.providers.groq import SingleShotChatClient
from codecritique_core.providers.ollama import StreamingLineClient

logger = logging.getLogger(__name__)


def _require(config: dict, key: str, provider: Provider) -> str:
    value = config.get(key)
    if not value:
        raise ConfigError(f"{provider.value} provider requires '{key}' to be set.")
    return value


def resolve_client(config: dict, transport: httpx.AsyncBaseTransport | None = None) -> ProviderClient:
    """Map the configured provider to its client.

    Every Provider member must be handled here; assert_never makes a missing
    branch a type-checking error rather than a runtime surprise.
    """
    provider = Provider.parse(config.get("provider", ""))
    logger.debug("Resolved AI provider: %s", provider.value)

    if provider is Provider.OLLAMA:
        return StreamingLineClient(
            url=_require(config, "ollama_url", provider),
            model=_require(config, "ollama_model", provider),
            transport=transport,
        )
    if provider is Provider.GROQ:
        api_key = config.get("groq_api_key")
        if not api_key:
            raise ConfigError("GROQ_API_KEY environment variable is not set.")
        return SingleShotChatClient(
            api_key=api_key,
            model=_require(config, "groq_model", provider),
            base_url=config.get("groq_base_url") or SingleShotChatClient.DEFAULT_BASE_URL,
            transport=transport,
        )
    if provider is Provider.OPENAI or provider is Provider.ANTHROPIC:
        return UnimplementedClient(provider.value)
    assert_never(provider)


@contextmanager
def _step(name: str) -> Iterator[None]:
    """Label any CritiqueError raised inside the block with the step name."""
    try:
        yield
    except CritiqueError as e:
        e.step = name
        raise


class ReviewOrchestrator:
    """Drive one review: resolve provider → render prompt → send → parse.

    Holds configuration only; every call allocates its own client and
    buffers, so concurrent review() calls need no locking.
    """

    def __init__(
        self,
        config: dict,
        prompt_builder: PromptBuilder | None = None,
        parser: ReviewParser | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.parser = parser or ReviewParser()
        self._transport = transport

    async def review(self, pr: PullRequest, timeout: float | None = None) -> Review:
        with _step("resolve provider"):
            client = resolve_client(self.config, transport=self._transport)
        with _step("render prompt"):
            prompt = self.prompt_builder.render(pr)
        with _step("send prompt"):
            raw = await client.send(prompt, timeout=timeout)
        with _step("parse review"):
            review = self.parser.parse(raw)

        logger.debug("Parsed review with %d code feedback item(s)", len(review.code_feedback))
        return review.attach(pr)
