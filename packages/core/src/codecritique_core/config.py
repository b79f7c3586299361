import os
from pathlib import Path
from typing import Optional

import yaml

from codecritique_core.errors import ConfigError

DEFAULT_CONFIG: dict = {
    "provider": "Ollama",  # Ollama | Groq | OpenAI | Anthropic
    "ollama_url": "http://localhost:11434/api/generate",
    "ollama_model": "llama3",
    "groq_base_url": "https://api.groq.com/openai/v1",
    "groq_model": "llama3-70b-8192",
    "groq_api_key": None,
    "git_provider": "GitHub",  # GitHub | GitLab
    "gitlab_url": "https://gitlab.com",
    "printer": "json",  # json | markdown | html
    "timeout": None,  # seconds allowed for the model call; None = wait indefinitely
}


def _timeout(value) -> Optional[float]:
    """Coerce the configured deadline to positive seconds, or None for no deadline."""
    if value is None:
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"timeout must be a number of seconds, got {value!r}") from None
    if isinstance(value, bool) or not seconds > 0:
        raise ConfigError(f"timeout must be a positive number of seconds, got {value!r}")
    return seconds


def load_config(config_path: str = ".codecritique.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .codecritique.yml in the current directory
      3. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            try:
                file_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigError(f"{config_path} must contain a mapping of settings")
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    config["timeout"] = _timeout(config.get("timeout"))

    # Resolve credentials from environment variables. GROQ_API_KEY wins over
    # a key written into the config file so CI can inject it.
    config["github_token"] = os.environ.get("GITHUB_TOKEN")
    config["gitlab_token"] = os.environ.get("GITLAB_TOKEN")
    config["groq_api_key"] = os.environ.get("GROQ_API_KEY") or config.get("groq_api_key")

    return config
