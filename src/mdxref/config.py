"""Configuration loading and validation for mdxref."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from mdxref.core.errors import ConfigError
from mdxref.core.models import FallbackStyle
from mdxref.links.urls import DEFAULT_DOMAINS, ENTITY_TYPES

DEFAULT_CONFIG_PATH = "~/.mdxref/config.yaml"


class LinksConfig(BaseModel):
    """Link resolution settings."""

    resolve_internal: bool = Field(default=True, description="Rewrite links at all")
    fallback_style: FallbackStyle = Field(
        default=FallbackStyle.BOLD,
        description="Rendering of unresolved links",
    )
    url_aliases: dict[str, str] = Field(
        default_factory=dict,
        description="Raw URL path -> canonical URL path (may carry #anchor)",
    )
    entity_locations: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Entity type -> canonical URL prefixes where it is defined",
    )
    exclude_urls: list[str] = Field(
        default_factory=list,
        description="Canonical paths that are never resolved",
    )
    max_match_step: int | None = Field(
        default=None,
        ge=1,
        le=12,
        description="Last anchor-matching strategy to try",
    )
    domains: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DOMAINS),
        description="Site domains stripped from absolute URLs",
    )

    @field_validator("entity_locations")
    @classmethod
    def validate_entity_types(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        """Only recognised entity types may be restricted."""
        unknown = sorted(set(v) - set(ENTITY_TYPES))
        if unknown:
            raise ValueError(f"Unknown entity types in entity_locations: {', '.join(unknown)}")
        return v

    @field_validator("domains")
    @classmethod
    def strip_trailing_slash(cls, v: list[str]) -> list[str]:
        """Store domains without a trailing slash."""
        return [d.rstrip("/") for d in v]


class MarkdownConfig(BaseModel):
    """Delimiters used when rendering fallback text."""

    emphasis: str = Field(default="_", pattern=r"^(_|\*)$")
    strong: str = Field(default="**", pattern=r"^(__|\*\*)$")


class OutputConfig(BaseModel):
    """Output file naming conventions."""

    extension: str = Field(default=".md", description="Output file extension")
    id_length: int = Field(default=4, ge=1, description="Length of short output IDs")

    @field_validator("extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        """Extensions are written with their leading dot."""
        if not v.startswith(".") or len(v) < 2:
            raise ValueError(f"Invalid extension: {v!r}. Expected e.g. '.md'.")
        return v


class MdxrefConfig(BaseModel):
    """Top-level mdxref configuration."""

    links: LinksConfig = Field(default_factory=LinksConfig)
    markdown: MarkdownConfig = Field(default_factory=MarkdownConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    workers: int = Field(default=8, ge=1, description="Documents processed concurrently")
    log_level: str = Field(default="INFO", description="Logging level")


def load_config(path: str | None = None) -> MdxrefConfig:
    """Load and validate configuration from a YAML file.

    Environment variable overrides:
        MDXREF_FALLBACK_STYLE: overrides links.fallback_style
        MDXREF_MAX_MATCH_STEP: overrides links.max_match_step
        MDXREF_LOG_LEVEL: overrides log_level

    Args:
        path: Path to config file. Defaults to ~/.mdxref/config.yaml, which
            may be absent (defaults are used then).

    Returns:
        Validated MdxrefConfig.

    Raises:
        ConfigError: If the config file is missing, unreadable, or invalid.
    """
    config_path = Path(path or DEFAULT_CONFIG_PATH).expanduser()

    data: object = {}
    if config_path.exists():
        try:
            raw = config_path.read_text()
        except OSError as e:
            raise ConfigError(f"Cannot read config file: {e}") from e

        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file: {e}") from e

        if data is None:
            data = {}
    elif path is not None:
        raise ConfigError(f"Config file not found: {config_path}")

    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a YAML mapping")

    # Apply environment variable overrides
    links = data.setdefault("links", {})
    if not isinstance(links, dict):
        raise ConfigError("Config section 'links' must be a mapping")

    env_style = os.environ.get("MDXREF_FALLBACK_STYLE")
    if env_style:
        links["fallback_style"] = env_style

    env_step = os.environ.get("MDXREF_MAX_MATCH_STEP")
    if env_step:
        links["max_match_step"] = env_step

    env_level = os.environ.get("MDXREF_LOG_LEVEL")
    if env_level:
        data["log_level"] = env_level

    try:
        return MdxrefConfig(**data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
