"""CLI entry point for codecritique.

Commands:
  review   fetch a pull request, review it with the configured model and
           print the result as JSON, Markdown or HTML
"""

from __future__ import annotations

import importlib.metadata

import click

from codecritique_cli.commands.review import review_cmd


@click.group()
@click.version_option(
    version=importlib.metadata.version("codecritique"),
    prog_name="codecritique",
)
@click.option(
    "--config",
    "config_path",
    default=".codecritique.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="CODECRITIQUE_CONFIG",
)
@click.pass_context
def main(ctx: click.Context, config_path: str):
    """AI-powered pull request reviewer backed by Ollama or Groq."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(review_cmd)
