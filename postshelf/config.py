"""Configuration loading for Postshelf.

The post list lives in ``postshelf.yaml`` at the project root::

    posts_dir: posts
    posts:
      - hello 2020-01-01
      - world

Each ``posts`` entry is ``slug`` or ``slug date``. The date is a free-form
string used verbatim as the post's ``created_at``.

Key functions:
- load_config: Loads postshelf.yaml with defaults applied.
- parse_entry / parse_entries: Turn raw entries into PostEntry values.
- save_entries: Write the post list back to postshelf.yaml.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .utils import split_words

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "postshelf.yaml"

DEFAULT_CONFIG = {
    "posts_dir": "posts",
    "posts": [],
}


class ConfigError(Exception):
    """Invalid configuration with file context.

    Attributes:
        path: Path to the configuration file, if known.
        message: Human-readable error message.
    """

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}" if path else message)


@dataclass(frozen=True)
class PostEntry:
    """One configured post.

    Attributes:
        slug: Post slug, also the Markdown filename stem.
        date: Configured creation date, or None to use the load date.
    """

    slug: str
    date: str | None = None

    def to_line(self) -> str:
        """Render the entry back into its ``slug [date]`` form."""
        return f"{self.slug} {self.date}" if self.date else self.slug


def config_path(project_root: Path) -> Path:
    return project_root / CONFIG_FILENAME


def load_config(project_root: Path) -> dict[str, Any]:
    """Load configuration from postshelf.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.
    """
    path = config_path(project_root)
    config = {**DEFAULT_CONFIG, "posts": list(DEFAULT_CONFIG["posts"])}
    if path.exists():
        with open(path, encoding="utf-8") as f:
            try:
                loaded = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML: {exc}", path) from exc
        if isinstance(loaded, dict):
            config.update(loaded)
        else:
            logger.warning("Ignoring %s: top level is not a mapping", path)
    else:
        logger.debug("No %s found in %s; using defaults", CONFIG_FILENAME, project_root)
    if config.get("posts") is None:
        config["posts"] = []
    if not isinstance(config["posts"], list):
        raise ConfigError("'posts' must be a list of 'slug [date]' entries", path)
    return config


def parse_entry(raw: Any) -> PostEntry:
    """Parse a single ``slug [date]`` entry.

    Tokens after the date are ignored.

    Raises:
        ConfigError: If the entry has no slug, or YAML read it as a boolean.
    """
    if raw is None:
        raise ConfigError("Empty post entry in 'posts'")
    if isinstance(raw, bool):
        raise ConfigError(
            f"Post entry parsed as boolean {raw!r}; quote it, e.g. - \"no\""
        )
    parts = split_words(str(raw))
    if not parts:
        raise ConfigError(f"Empty post entry: {raw!r}")
    slug = parts[0]
    date = parts[1] if len(parts) > 1 else None
    return PostEntry(slug=slug, date=date)


def parse_entries(raw_entries: Iterable[Any]) -> list[PostEntry]:
    """Parse configured entries, keeping configuration order."""
    return [parse_entry(raw) for raw in raw_entries]


def posts_dir(project_root: Path, config: dict[str, Any]) -> Path:
    """Resolve the posts directory from configuration."""
    return project_root / str(config.get("posts_dir") or DEFAULT_CONFIG["posts_dir"])


def save_entries(project_root: Path, entries: Iterable[PostEntry]) -> None:
    """Write the post list back to postshelf.yaml.

    Other top-level keys in the file are preserved; comments are not.

    Raises:
        ConfigError: If the existing file is not a YAML mapping.
    """
    path = config_path(project_root)
    data: dict[str, Any] = {}
    if path.exists():
        with open(path, encoding="utf-8") as f:
            try:
                loaded = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML: {exc}", path) from exc
        if not isinstance(loaded, dict):
            raise ConfigError("Top level must be a mapping; refusing to overwrite", path)
        data.update(loaded)
    data["posts"] = [entry.to_line() for entry in entries]
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
