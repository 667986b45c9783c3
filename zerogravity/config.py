"""
Zero Gravity - Configuration Module

Centralized configuration for the generator, embedder and CLI. Set
environment variables or edit config.json in the project root.

Environment Variables (optional):
    ZEROGRAVITY_PROJECT_ROOT: Base directory for config.json, .env and data/
    ZEROGRAVITY_API_KEY: Anthropic API key (takes precedence)
    ANTHROPIC_API_KEY: Anthropic API key
    OPENAI_API_KEY: OpenAI API key for embeddings
"""

import os
import json
from pathlib import Path
from typing import Optional, Dict, Any

from zerogravity.logging_setup import get_logger, LogCategory


def get_project_root() -> Path:
    """
    Get the project root directory.

    Priority:
    1. ZEROGRAVITY_PROJECT_ROOT environment variable
    2. Current working directory
    """
    env_root = os.environ.get("ZEROGRAVITY_PROJECT_ROOT")
    if env_root:
        return Path(env_root)
    return Path.cwd()


def get_default_config() -> Dict[str, Any]:
    """Get default configuration values."""
    project_root = get_project_root()

    return {
        "project_root": str(project_root),
        "data_dir": str(project_root / "data"),

        # Generation
        "generation_model": "claude-sonnet-4-5-20250929",
        "max_tokens": 2048,

        # Embedding
        "embedding_model": "text-embedding-3-small",
        "embedding_dimensions": 1536,

        # Stamp output
        "stamp_version": "0.1",
        "info_url": None,
    }


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from config.json, layered over the defaults.

    Args:
        config_path: Path to config file. Defaults to PROJECT_ROOT/config.json

    Returns:
        Configuration dictionary
    """
    if config_path is None:
        config_path = get_project_root() / "config.json"

    config = get_default_config()
    if config_path.exists():
        with open(config_path, 'r', encoding='utf-8') as f:
            config.update(json.load(f))
        get_logger().debug(f"{LogCategory.CONFIG} Loaded config from {config_path}")

    return config


def save_config(config: Dict[str, Any], config_path: Optional[Path] = None):
    """Save configuration to config.json file."""
    if config_path is None:
        config_path = get_project_root() / "config.json"

    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config, f, indent=2, ensure_ascii=False)


def read_env_file(env_file: Path) -> Dict[str, str]:
    """Read KEY=value pairs from a .env file, skipping comments."""
    values: Dict[str, str] = {}
    if not env_file.exists():
        return values

    with open(env_file, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith('#') or '=' not in line:
                continue
            key, value = line.split('=', 1)
            values[key.strip()] = value.strip().strip('"').strip("'")
    return values


class ZeroGravityConfig:
    """
    Configuration for the Zero Gravity tools.

    Usage:
        config = ZeroGravityConfig()
        print(config.generation_model)

        # Or with a custom config file:
        config = ZeroGravityConfig(config_path=Path("my_config.json"))
    """

    def __init__(self, config_path: Optional[Path] = None):
        self._config = load_config(config_path)
        self._project_root = Path(self._config.get("project_root") or get_project_root())

    @property
    def project_root(self) -> Path:
        return self._project_root

    @property
    def data_dir(self) -> Path:
        return Path(self._config.get("data_dir") or self._project_root / "data")

    @property
    def generation_model(self) -> str:
        return self._config.get("generation_model", "claude-sonnet-4-5-20250929")

    @property
    def max_tokens(self) -> int:
        return int(self._config.get("max_tokens", 2048))

    @property
    def embedding_model(self) -> str:
        return self._config.get("embedding_model", "text-embedding-3-small")

    @property
    def embedding_dimensions(self) -> int:
        return int(self._config.get("embedding_dimensions", 1536))

    @property
    def stamp_version(self) -> str:
        return self._config.get("stamp_version", "0.1")

    @property
    def info_url(self) -> Optional[str]:
        return self._config.get("info_url")

    def _env_values(self) -> Dict[str, str]:
        return read_env_file(self.project_root / ".env")

    def get_anthropic_api_key(self) -> Optional[str]:
        """
        Get the Anthropic API key.

        Priority:
        1. ZEROGRAVITY_API_KEY or ANTHROPIC_API_KEY environment variable
        2. The same names in the project .env file
        3. ~/.anthropic/api_key file
        """
        for name in ("ZEROGRAVITY_API_KEY", "ANTHROPIC_API_KEY"):
            api_key = os.environ.get(name)
            if api_key:
                return api_key

        env_values = self._env_values()
        for name in ("ZEROGRAVITY_API_KEY", "ANTHROPIC_API_KEY"):
            if env_values.get(name):
                return env_values[name]

        home_key = Path.home() / ".anthropic" / "api_key"
        if home_key.exists():
            return home_key.read_text().strip()

        return None

    def get_openai_api_key(self) -> Optional[str]:
        """Get the OpenAI API key from the environment or the project .env file."""
        api_key = os.environ.get("OPENAI_API_KEY")
        if api_key:
            return api_key
        return self._env_values().get("OPENAI_API_KEY") or None
