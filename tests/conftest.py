"""Pytest fixtures for music label tests.

Common fixtures for testing the label ledger.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from music_label import config as config_module
from music_label.label.contract import MusicLabelContract
from music_label.label.ledger import LabelLedger
from music_label.label.logger import EventLogger


@pytest.fixture(autouse=True)
def _reset_global_config() -> Iterator[None]:
    """Each test starts with no loaded config."""
    config_module.reset_config()
    yield
    config_module.reset_config()


@pytest.fixture
def ledger() -> LabelLedger:
    """Create a fresh LabelLedger instance for each test."""
    return LabelLedger()


@pytest.fixture
def ledger_with_song(ledger: LabelLedger) -> LabelLedger:
    """Ledger with artist 1 ("Test Artist") and song 1 ("Test Song", price 100)."""
    ledger.register_artist("Test Artist")
    ledger.release_song(1, "Test Song", 100)
    return ledger


@pytest.fixture
def event_logger(tmp_path: Path) -> EventLogger:
    """EventLogger writing to a temp file."""
    return EventLogger(output_file=tmp_path / "events.jsonl")


@pytest.fixture
def logged_ledger(event_logger: EventLogger) -> LabelLedger:
    """Ledger that records its transitions to the event logger."""
    return LabelLedger(event_logger=event_logger)


@pytest.fixture
def contract(ledger: LabelLedger) -> MusicLabelContract:
    """Contract surface over a fresh ledger."""
    return MusicLabelContract(ledger)
