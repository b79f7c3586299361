"""Pull request snapshot and structured review models.

The Review keeps a back-reference to the PullRequest it was produced for so
presenters can show the title and branch, but the reference is an
association only: it is excluded from equality, repr and to_dict() so the
serialised review never echoes the whole input back.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field


@dataclass(frozen=True)
class File:
    name: str
    content: str


@dataclass(frozen=True)
class PullRequest:
    """Read-only snapshot supplied by a source fetcher."""

    title: str
    description: str
    files: tuple[File, ...] = ()
    branch: str = ""

    def __post_init__(self):
        # Accept any iterable from callers but store an immutable tuple.
        object.__setattr__(self, "files", tuple(self.files))
        seen: set[str] = set()
        for f in self.files:
            if f.name in seen:
                raise ValueError(f"Duplicate file in pull request: {f.name!r}")
            seen.add(f.name)


@dataclass(frozen=True)
class CodeQuality:
    strengths: tuple[str, ...] = ()
    areas_for_improvement: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "strengths": list(self.strengths),
            "areas_for_improvement": list(self.areas_for_improvement),
        }


@dataclass(frozen=True)
class Feedback:
    file: str = ""
    line: int | None = None  # None = the model gave no usable line number
    suggestion: str = ""

    def to_dict(self) -> dict:
        data: dict = {"file": self.file}
        if self.line is not None:
            data["line"] = self.line
        data["suggestion"] = self.suggestion
        return data


@dataclass(frozen=True)
class Review:
    summary: str = ""
    overall_impression: str = ""
    code_quality: CodeQuality = field(default_factory=CodeQuality)
    potential_issues: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()
    security_concerns: str = ""
    testing: str = ""
    estimated_effort: str = ""
    code_feedback: tuple[Feedback, ...] = ()
    pull_request: PullRequest | None = field(default=None, compare=False, repr=False)

    def attach(self, pr: PullRequest) -> Review:
        """Return a copy of this review associated with ``pr``.

        A review is attached once, by the orchestrator, after parsing.
        """
        if self.pull_request is not None:
            raise ValueError("Review is already attached to a pull request.")
        return dataclasses.replace(self, pull_request=pr)

    def to_dict(self) -> dict:
        """Serialise using the same keys the model is asked to produce."""
        return {
            "summary": self.summary,
            "overall_impression": self.overall_impression,
            "code_quality": self.code_quality.to_dict(),
            "potential_issues": list(self.potential_issues),
            "suggestions": list(self.suggestions),
            "security_concerns": self.security_concerns,
            "testing": self.testing,
            "estimated_effort_to_review": self.estimated_effort,
            "code_feedback": [fb.to_dict() for fb in self.code_feedback],
        }
