"""review command: fetch a pull request and print an AI review of it."""

from __future__ import annotations

import asyncio
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from codecritique_cli.printers import get_printer
from codecritique_core.errors import CritiqueError
from codecritique_core.reviewer import ReviewOrchestrator
from codecritique_core.sources import fetch_pull_request

# Status output goes to stderr so stdout carries only the rendered review.
console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _split_repo(repo: str) -> str:
    parts = repo.split("/")
    if len(parts) < 2 or not all(parts):
        raise click.BadParameter("Invalid repository path. Use the format: owner/repo", param_hint="REPO")
    return repo


@click.command("review")
@click.argument("repo")
@click.argument("number", type=int)
@click.option(
    "--provider",
    type=click.Choice(["Ollama", "Groq", "OpenAI", "Anthropic"], case_sensitive=False),
    default=None,
    help="AI provider. Overrides config file.",
)
@click.option(
    "--format",
    "printer",
    type=click.Choice(["json", "markdown", "html"], case_sensitive=False),
    default=None,
    help="Output format. Overrides config file.",
)
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Seconds to wait for the model before cancelling. Overrides config file.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def review_cmd(
    ctx,
    repo: str,
    number: int,
    provider: str | None,
    printer: str | None,
    timeout: float | None,
    verbose: bool,
):
    """Review pull request NUMBER of REPO (owner/repo).

    \b
    Environment variables:
      GITHUB_TOKEN    Required when git_provider is GitHub
      GITLAB_TOKEN    Required when git_provider is GitLab
      GROQ_API_KEY    Required when using --provider Groq
    """
    from codecritique_core.config import load_config

    _configure_logging(verbose)
    repo = _split_repo(repo)

    config_path = (ctx.obj or {}).get("config_path", ".codecritique.yml")

    try:
        config = load_config(
            config_path,
            cli_overrides={"provider": provider, "printer": printer, "timeout": timeout},
        )
        render = get_printer(config["printer"])

        console.print(f"[cyan]Fetching {repo}#{number} from {config['git_provider']}...[/cyan]")
        pr = fetch_pull_request(config, repo, number)

        console.print(f"[cyan]Reviewing {len(pr.files)} file(s) with {config['provider']}...[/cyan]")
        review = asyncio.run(ReviewOrchestrator(config).review(pr, timeout=config.get("timeout")))
    except CritiqueError as e:
        raise click.ClickException(str(e)) from e

    click.echo(render(review), nl=False)
