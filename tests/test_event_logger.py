"""Tests for the JSONL event log and the ledger events it records."""

import json
import logging
from pathlib import Path

import pytest

from music_label.label.ledger import LabelLedger
from music_label.label.logger import EventLogger


class TestEventLogger:
    """Tests for the raw logger."""

    def test_log_writes_jsonl(self, event_logger: EventLogger) -> None:
        event_logger.log("custom", {"x": 1})

        lines = event_logger.output_path.read_text().splitlines()
        assert len(lines) == 1
        event = json.loads(lines[0])
        assert event["event_type"] == "custom"
        assert event["x"] == 1
        assert event["sequence"] == 1
        assert "timestamp" in event

    def test_sequence_is_monotonic(self, event_logger: EventLogger) -> None:
        for i in range(3):
            event_logger.log("tick", {"i": i})

        assert [e["sequence"] for e in event_logger.read_events()] == [1, 2, 3]
        assert event_logger.sequence == 3

    def test_truncates_existing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "events.jsonl"
        path.write_text('{"old": true}\n')

        logger = EventLogger(output_file=path)

        assert logger.read_events() == []

    def test_append_mode_keeps_existing(self, tmp_path: Path) -> None:
        path = tmp_path / "events.jsonl"
        path.write_text('{"event_type": "old"}\n')

        logger = EventLogger(output_file=path, truncate=False)
        logger.log("new", {})

        assert [e["event_type"] for e in logger.read_events()] == ["old", "new"]

    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        logger = EventLogger(output_file=tmp_path / "nested" / "dir" / "events.jsonl")
        logger.log("x", {})

        assert logger.output_path.exists()

    def test_read_events_filter(self, event_logger: EventLogger) -> None:
        event_logger.log("a", {})
        event_logger.log("b", {})
        event_logger.log("a", {})

        assert len(event_logger.read_events("a")) == 2


class TestLedgerEvents:
    """Tests for events emitted by ledger transitions."""

    def test_full_flow_events(self, logged_ledger: LabelLedger, event_logger: EventLogger) -> None:
        logged_ledger.register_artist("Test Artist", address="alice")
        logged_ledger.release_song(1, "Test Song", 100)
        logged_ledger.invest_in_artist("fan1", 1, 1000)
        logged_ledger.buy_song("user1", 1)
        logged_ledger.buy_song("user2", 1)
        logged_ledger.distribute_royalties(1)

        events = event_logger.read_events()
        assert [e["event_type"] for e in events] == [
            "artist_registered",
            "song_released",
            "investment_made",
            "song_purchased",
            "song_purchased",
            "royalties_distributed",
        ]
        assert events[0]["address"] == "alice"
        assert events[2]["total_investment_after"] == 1000
        assert events[4]["buyer_id"] == "user2"
        assert events[4]["balance_after"] == 200
        assert events[5]["amount"] == 200
        assert events[5]["artist_id"] == 1

    def test_failures_emit_nothing(
        self, logged_ledger: LabelLedger, event_logger: EventLogger
    ) -> None:
        logged_ledger.release_song(1, "Nope", 1)
        logged_ledger.invest_in_artist("fan1", 1, 1)
        logged_ledger.buy_song("user1", 1)
        logged_ledger.distribute_royalties(1)

        assert event_logger.read_events() == []


class TestUnwritableLog:
    """A failing event log never desynchronises the ledger from its results."""

    @pytest.fixture
    def broken_logger(self, event_logger: EventLogger) -> EventLogger:
        event_logger.output_path.unlink()
        event_logger.output_path.mkdir()
        return event_logger

    def test_transitions_still_apply(
        self,
        logged_ledger: LabelLedger,
        broken_logger: EventLogger,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.ERROR, logger="music_label.label.ledger"):
            assert logged_ledger.register_artist("Test Artist").value == 1
            assert logged_ledger.release_song(1, "Test Song", 100).value == 1
            assert logged_ledger.invest_in_artist("fan1", 1, 10).value is True
            assert logged_ledger.buy_song("user1", 1).value is True

        assert logged_ledger.artist_count() == 1
        assert logged_ledger.song_id_nonce == 1
        assert logged_ledger.get_investment("fan1", 1) == 10
        assert logged_ledger.get_artist(1).total_investment == 10
        assert logged_ledger.get_royalty_balance(1) == 100
        assert logged_ledger.check_invariants() == []
        failures = [r for r in caplog.records if "Failed to write" in r.getMessage()]
        assert len(failures) == 4

    def test_distribution_still_applies(
        self, logged_ledger: LabelLedger, broken_logger: EventLogger
    ) -> None:
        logged_ledger.register_artist("Test Artist")
        logged_ledger.release_song(1, "Test Song", 100)
        logged_ledger.buy_song("user1", 1)

        result = logged_ledger.distribute_royalties(1)

        assert result.details["amount"] == 100
        assert logged_ledger.get_royalty_balance(1) == 0
