"""Presenters that turn a completed Review into text for the terminal.

Markup escaping lives here and only here: the HTML presenter escapes every
model-provided string, while the prompt sent to the model is plain text.
"""

from __future__ import annotations

import html
import json
from typing import Callable

from codecritique_core.errors import ConfigError
from codecritique_core.models import Review


def render_json(review: Review) -> str:
    return json.dumps(review.to_dict(), indent=4)


def _bullets(items) -> list[str]:
    return [f"- {item}" for item in items] or ["_None._"]


def render_markdown(review: Review) -> str:
    lines = ["# CodeCritique Review", ""]

    pr = review.pull_request
    if pr is not None:
        lines += [
            "## Pull Request Details",
            "",
            f"- **Title:** {pr.title}",
            f"- **Branch:** {pr.branch}",
            f"- **Description:** {pr.description}",
            "",
        ]

    lines += [
        "## Review Summary",
        "",
        f"- **Summary:** {review.summary}",
        f"- **Overall Impression:** {review.overall_impression}",
        f"- **Estimated Effort:** {review.estimated_effort}",
        "",
        "## Code Quality",
        "",
        "### Strengths",
        "",
        *_bullets(review.code_quality.strengths),
        "",
        "### Areas for Improvement",
        "",
        *_bullets(review.code_quality.areas_for_improvement),
        "",
        "## Potential Issues",
        "",
        *_bullets(review.potential_issues),
        "",
        "## Suggestions",
        "",
        *_bullets(review.suggestions),
        "",
        "## Security Concerns",
        "",
        review.security_concerns,
        "",
        "## Testing",
        "",
        review.testing,
        "",
        "## Code Feedback",
        "",
    ]
    for fb in review.code_feedback:
        lines.append(f"### File: {fb.file}")
        if fb.line is not None:
            lines.append(f"**Line:** {fb.line}")
        lines += [f"**Suggestion:** {fb.suggestion}", ""]

    return "\n".join(lines).rstrip() + "\n"


def _html_list(items) -> str:
    return "\n".join(f"      <li>{html.escape(item)}</li>" for item in items)


def render_html(review: Review) -> str:
    e = html.escape
    parts = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '  <meta charset="UTF-8">',
        "  <title>CodeCritique Review</title>",
        "</head>",
        "<body>",
        "  <h1>CodeCritique Review</h1>",
    ]

    pr = review.pull_request
    if pr is not None:
        parts += [
            "  <section>",
            "    <h2>Pull Request Details</h2>",
            f"    <p><strong>Title:</strong> {e(pr.title)}</p>",
            f"    <p><strong>Branch:</strong> {e(pr.branch)}</p>",
            f"    <p><strong>Description:</strong> {e(pr.description)}</p>",
            "  </section>",
        ]

    parts += [
        "  <section>",
        "    <h2>Review Summary</h2>",
        f"    <p><strong>Summary:</strong> {e(review.summary)}</p>",
        f"    <p><strong>Overall Impression:</strong> {e(review.overall_impression)}</p>",
        f"    <p><strong>Estimated Effort:</strong> {e(review.estimated_effort)}</p>",
        "  </section>",
        "  <section>",
        "    <h2>Code Quality</h2>",
        "    <h3>Strengths</h3>",
        "    <ul>",
        _html_list(review.code_quality.strengths),
        "    </ul>",
        "    <h3>Areas for Improvement</h3>",
        "    <ul>",
        _html_list(review.code_quality.areas_for_improvement),
        "    </ul>",
        "  </section>",
        "  <section>",
        "    <h2>Potential Issues</h2>",
        "    <ul>",
        _html_list(review.potential_issues),
        "    </ul>",
        "  </section>",
        "  <section>",
        "    <h2>Suggestions</h2>",
        "    <ul>",
        _html_list(review.suggestions),
        "    </ul>",
        "  </section>",
        "  <section>",
        "    <h2>Security Concerns</h2>",
        f"    <p>{e(review.security_concerns)}</p>",
        "  </section>",
        "  <section>",
        "    <h2>Testing</h2>",
        f"    <p>{e(review.testing)}</p>",
        "  </section>",
        "  <section>",
        "    <h2>Code Feedback</h2>",
    ]
    for fb in review.code_feedback:
        parts.append("    <div>")
        parts.append(f"      <p><strong>File:</strong> {e(fb.file)}</p>")
        if fb.line is not None:
            parts.append(f"      <p><strong>Line:</strong> {fb.line}</p>")
        parts.append(f"      <p><strong>Suggestion:</strong> {e(fb.suggestion)}</p>")
        parts.append("    </div>")
    parts += ["  </section>", "</body>", "</html>"]

    return "\n".join(p for p in parts if p) + "\n"


PRINTERS: dict[str, Callable[[Review], str]] = {
    "json": render_json,
    "markdown": render_markdown,
    "html": render_html,
}


def get_printer(kind: str) -> Callable[[Review], str]:
    try:
        return PRINTERS[str(kind).lower()]
    except KeyError:
        raise ConfigError(f"Printer kind {kind!r} not available. Choose one of: {', '.join(PRINTERS)}.")
