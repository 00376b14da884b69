"""Tests for config loading and Pydantic schema validation."""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from music_label import config as config_module
from music_label.config_schema import (
    AppConfig,
    load_validated_config,
    validate_config_dict,
)
from music_label.label.ledger import LabelLedger


class TestValidConfig:
    """Test that valid configs are accepted."""

    def test_empty_config_uses_defaults(self) -> None:
        config = validate_config_dict({})
        assert config.ledger.default_owner_address == "artist_address"
        assert config.logging.events_enabled is True
        assert config.logging.level == "INFO"
        assert config.contract.id == "music_label"

    def test_partial_config_merges_defaults(self) -> None:
        config = validate_config_dict({"ledger": {"default_owner_address": "label_vault"}})
        assert config.ledger.default_owner_address == "label_vault"
        assert config.logging.output_file == "label_events.jsonl"

    def test_full_config_loads(self) -> None:
        config = load_validated_config(config_module.DEFAULT_CONFIG_PATH)
        assert isinstance(config, AppConfig)
        assert config.contract.methods.buy_song.description != ""

    def test_level_is_normalised(self) -> None:
        config = validate_config_dict({"logging": {"level": "debug"}})
        assert config.logging.level == "DEBUG"


class TestInvalidConfig:
    """Test that invalid configs are rejected."""

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_config_dict({"ledgr": {}})

    def test_unknown_nested_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_config_dict({"ledger": {"owner": "x"}})

    def test_blank_owner_address_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_config_dict({"ledger": {"default_owner_address": "  "}})

    def test_bad_logging_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_config_dict({"logging": {"level": "LOUD"}})

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_validated_config(tmp_path / "nope.yaml")


class TestConfigAccess:
    """Tests for the global config helpers."""

    def test_load_and_get(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("ledger:\n  default_owner_address: vault\n")

        config_module.load_config(path)

        assert config_module.get("ledger.default_owner_address") == "vault"
        assert config_module.get("ledger.missing", "fallback") == "fallback"
        assert config_module.get_validated_config().ledger.default_owner_address == "vault"

    def test_empty_file_is_valid(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert config_module.load_config(path) == {}
        assert config_module.get_validated_config().logging.events_enabled is True

    def test_set_config_value_revalidates(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("{}\n")
        config_module.load_config(path)

        config_module.set_config_value("logging.output_file", "other.jsonl")

        assert config_module.get_validated_config().logging.output_file == "other.jsonl"
        with pytest.raises(ValidationError):
            config_module.set_config_value("logging.bogus", 1)

    def test_configure_logging(self) -> None:
        config = validate_config_dict({"logging": {"level": "WARNING"}})

        config_module.configure_logging(config)

        assert logging.getLogger("music_label").level == logging.WARNING


class TestLedgerFromConfig:
    """Tests for building a ledger from config."""

    def test_from_config_with_events(self, tmp_path: Path) -> None:
        config = validate_config_dict({
            "ledger": {"default_owner_address": "vault"},
            "logging": {"output_file": str(tmp_path / "events.jsonl")},
        })

        ledger = LabelLedger.from_config(config)
        ledger.register_artist("Test Artist")

        assert ledger.get_artist(1).address == "vault"
        assert ledger.event_logger is not None
        assert len(ledger.event_logger.read_events("artist_registered")) == 1

    def test_from_config_events_disabled(self) -> None:
        config = validate_config_dict({"logging": {"events_enabled": False}})

        ledger = LabelLedger.from_config(config)

        assert ledger.event_logger is None
