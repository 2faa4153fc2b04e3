"""Index resolution settings.

Provides the knobs of the index resolution engine, loaded from environment
variables with RESOLUTION_ prefix (or conf/resolution.yaml).

Features controlled:
- Which actions count as search-like (payload mining, wildcard expansion)
- Which declared tokens collapse a request to the ``_all`` sentinel
- Whether matched wildcard patterns stay in the resolved set
- Capabilities granted by the host (reading / rewriting request index fields)
- Optional catalog file used by the HTTP service and the CLI
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_sources import create_resolution_yaml_source

PatternPolicy = Literal["keep", "replace"]


class ResolutionSettings(BaseSettings):
    """Index resolution configuration.

    Environment variables use RESOLUTION_ prefix. List values are JSON.
    Example: RESOLUTION_SEARCH_ACTIONS='["indices:data/read/search"]'
    """

    search_actions: list[str] = Field(
        default_factory=lambda: ["indices:data/read/search"],
        description="Actions of single requests treated as search-like",
    )
    catch_all_tokens: list[str] = Field(
        default_factory=lambda: ["_all", "_search"],
        description="Declared names that collapse the resolved set to _all",
    )
    mine_payload: bool = Field(
        default=True,
        description="Harvest index names from the query body of search-like requests",
    )
    pattern_policy: PatternPolicy = Field(
        default="keep",
        description=(
            "keep: matched wildcard patterns stay next to their expansions; "
            "replace: a pattern that matched something is dropped"
        ),
    )
    can_read_indices: bool = Field(
        default=True,
        description="Host allows reading the index field of single requests",
    )
    can_rewrite_indices: bool = Field(
        default=True,
        description="Host allows pushing rewritten indices back onto requests",
    )
    catalog_path: Path | None = Field(
        default=None,
        description="JSON file mapping index names to alias lists",
    )

    model_config = SettingsConfigDict(
        env_prefix="RESOLUTION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @field_validator("search_actions", "catch_all_tokens")
    @classmethod
    def _strip_blank(cls, v: list[str]) -> list[str]:
        """Drop blank entries and surrounding whitespace."""
        return [item.strip() for item in v if item and item.strip()]

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        """Customize settings source precedence: init > yaml > env > dotenv > secrets."""
        return (
            init_settings,
            create_resolution_yaml_source(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )


__all__ = ["PatternPolicy", "ResolutionSettings"]
