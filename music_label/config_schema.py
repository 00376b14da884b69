"""Pydantic schema for configuration validation.

All config values are validated at startup. Typos and invalid values
fail fast with clear error messages.

Usage:
    from music_label.config_schema import load_validated_config, AppConfig
    config = load_validated_config("config/config.yaml")
    # config is now a validated AppConfig instance
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# BASE MODEL WITH STRICT VALIDATION
# =============================================================================

class StrictModel(BaseModel):
    """Base model that rejects unknown fields (catches typos)."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# LEDGER MODEL
# =============================================================================

class LedgerConfig(StrictModel):
    """Ledger state machine configuration."""

    default_owner_address: str = Field(
        default="artist_address",
        description="Owning address recorded for artists registered without one"
    )

    @field_validator("default_owner_address")
    @classmethod
    def address_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("default_owner_address must not be blank")
        return v


# =============================================================================
# CONTRACT MODELS
# =============================================================================

class MethodConfig(StrictModel):
    """Configuration for a contract method."""

    description: str = Field(default="", description="Method description for callers")


class ContractMethodsConfig(StrictModel):
    """Per-method configuration for the label contract."""

    register_artist: MethodConfig = Field(
        default_factory=lambda: MethodConfig(
            description="Register as an artist. Args: [name]"
        )
    )
    release_song: MethodConfig = Field(
        default_factory=lambda: MethodConfig(
            description="Release a priced song. Args: [artist_id, title, price]"
        )
    )
    invest: MethodConfig = Field(
        default_factory=lambda: MethodConfig(
            description="Invest in an artist. Args: [artist_id, amount]"
        )
    )
    buy_song: MethodConfig = Field(
        default_factory=lambda: MethodConfig(
            description="Buy a song, crediting its royalty balance. Args: [song_id]"
        )
    )
    distribute_royalties: MethodConfig = Field(
        default_factory=lambda: MethodConfig(
            description="Clear a song's accrued royalties. Args: [song_id]"
        )
    )
    balance: MethodConfig = Field(
        default_factory=lambda: MethodConfig(
            description="Get a song's undistributed royalty balance. Args: [song_id]"
        )
    )


class ContractConfig(StrictModel):
    """Host contract configuration."""

    id: str = Field(default="music_label", description="Contract identifier")
    description: str = Field(
        default="Decentralized music label: artists, songs, investments, royalties",
        description="Contract description"
    )
    methods: ContractMethodsConfig = Field(default_factory=ContractMethodsConfig)


# =============================================================================
# LOGGING MODEL
# =============================================================================

class LoggingConfig(StrictModel):
    """Logging configuration."""

    events_enabled: bool = Field(
        default=True,
        description="Write ledger transitions to the JSONL event log"
    )
    output_file: str = Field(
        default="label_events.jsonl",
        description="JSONL file for ledger events"
    )
    level: str = Field(
        default="INFO",
        description="Python logging level for diagnostic output"
    )

    @field_validator("level")
    @classmethod
    def valid_level(cls, v: str) -> str:
        upper = v.upper()
        if upper not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown logging level: {v}")
        return upper


# =============================================================================
# ROOT MODEL
# =============================================================================

class AppConfig(StrictModel):
    """Root configuration model for the entire application.

    All fields have sensible defaults, so an empty config file is valid.
    """

    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    contract: ContractConfig = Field(default_factory=ContractConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# LOADING FUNCTIONS
# =============================================================================

def load_validated_config(config_path: str | Path = "config/config.yaml") -> AppConfig:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to config YAML file.

    Returns:
        Validated AppConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid (with detailed error message).
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw_config = yaml.safe_load(f) or {}

    return AppConfig.model_validate(raw_config)


def validate_config_dict(config_dict: dict[str, Any]) -> AppConfig:
    """Validate a configuration dictionary.

    Raises:
        pydantic.ValidationError: If config is invalid.
    """
    return AppConfig.model_validate(config_dict)


__all__ = [
    "AppConfig",
    "LedgerConfig",
    "ContractConfig",
    "ContractMethodsConfig",
    "MethodConfig",
    "LoggingConfig",
    "StrictModel",
    "load_validated_config",
    "validate_config_dict",
]
