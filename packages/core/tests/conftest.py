"""Shared fixtures for exercising provider clients against httpx.MockTransport."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest


class TrackingStream(httpx.AsyncByteStream):
    """Response body that records whether httpx closed it.

    ``hang=True`` makes the body stall after its last chunk, the way a model
    server does while it is still generating.
    """

    def __init__(self, chunks: list[bytes], hang: bool = False):
        self.chunks = chunks
        self.hang = hang
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk
        if self.hang:
            await asyncio.sleep(3600)

    async def aclose(self) -> None:
        self.closed = True


class TrackingTransport(httpx.MockTransport):
    """MockTransport that records whether the owning client released it."""

    def __init__(self, handler):
        super().__init__(handler)
        self.closed = False

    async def aclose(self) -> None:
        self.closed = True


def ndjson_line(**fields) -> str:
    return json.dumps(fields)


@pytest.fixture
def tracking_stream():
    """Build a TrackingStream from text lines, one chunk per line."""

    def _make(*lines: str, hang: bool = False) -> TrackingStream:
        return TrackingStream([(line + "\n").encode() for line in lines], hang=hang)

    return _make


@pytest.fixture
def tracking_transport():
    return TrackingTransport


@pytest.fixture
def line():
    return ndjson_line


@pytest.fixture
def review_json():
    """A complete, valid model answer."""
    return json.dumps(
        {
            "review": {
                "summary": "Adds retry handling to the uploader.",
                "overall_impression": "Solid change.",
                "code_quality": {
                    "strengths": ["Clear naming"],
                    "areas_for_improvement": ["Missing docstrings"],
                },
                "potential_issues": ["Unbounded retries"],
                "suggestions": ["Cap the retry count"],
                "security_concerns": "None found.",
                "testing": "Add a test for the failure path.",
                "estimated_effort_to_review": "Low",
                "code_feedback": [
                    {"file": "uploader.py", "line": 12, "suggestion": "Use a constant."},
                    {"file": "README.md", "suggestion": "Document the flag."},
                ],
            }
        }
    )
