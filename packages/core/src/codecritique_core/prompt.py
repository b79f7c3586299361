"""Render a pull request snapshot into the reviewer prompt.

The prompt is plain text sent to a model, not a document shown in a browser,
so substitution is done with string.Template and nothing is escaped. Markup
escaping belongs to the HTML presenter only.
"""

from __future__ import annotations

from pathlib import Path
from string import Template

from codecritique_core.errors import TemplateError
from codecritique_core.models import PullRequest

PROMPTS_DIR = Path(__file__).parent / "prompts"
_DEFAULT_TEMPLATE = PROMPTS_DIR / "reviewer.prompt"

PLACEHOLDERS = frozenset({"title", "description", "file_list", "file_blocks"})


class PromptBuilder:
    def __init__(self, template: str | None = None):
        text = template if template is not None else _DEFAULT_TEMPLATE.read_text(encoding="utf-8")
        self._template = Template(text)

        # Validate once so render() can never fail on a bad template.
        if not self._template.is_valid():
            raise TemplateError("Prompt template contains an invalid placeholder.")
        unknown = set(self._template.get_identifiers()) - PLACEHOLDERS
        if unknown:
            raise TemplateError(f"Prompt template uses unknown placeholder(s): {', '.join(sorted(unknown))}")

    def render(self, pr: PullRequest) -> str:
        """Return the prompt for ``pr``; identical input yields identical output."""
        file_list = "\n".join(f"- {f.name}" for f in pr.files)
        file_blocks = "\n\n".join(f"### File: '{f.name}'\n\n{f.content}" for f in pr.files)
        return self._template.substitute(
            title=pr.title,
            description=pr.description,
            file_list=file_list,
            file_blocks=file_blocks,
        )
