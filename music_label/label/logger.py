"""JSONL event logger - append-only record of every ledger transition.

The event log is the observable stream an external payout engine reads.
royalties_distributed events carry the amount cleared by each distribution.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


class EventLogger:
    """Append-only JSONL event log.

    Every event includes a monotonic 'sequence' field for ordering, so
    readers can detect gaps or replays independently of timestamps.
    """

    output_path: Path
    _sequence: int

    def __init__(self, output_file: str | Path, truncate: bool = True) -> None:
        """Initialize the event logger.

        Args:
            output_file: Path of the JSONL file to append to
            truncate: Clear any existing log on init (new run)
        """
        self.output_path = Path(output_file)
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._sequence = 0
        if truncate:
            self.output_path.write_text("")

    @property
    def sequence(self) -> int:
        """Sequence number of the last event written."""
        return self._sequence

    def log(self, event_type: str, data: dict[str, Any]) -> None:
        """Log an event to the JSONL file."""
        self._sequence += 1
        event: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "sequence": self._sequence,
            "event_type": event_type,
            **data,
        }
        with open(self.output_path, "a") as f:
            f.write(json.dumps(event) + "\n")

    def read_events(self, event_type: str | None = None) -> list[dict[str, Any]]:
        """Read back logged events, optionally filtered by type."""
        if not self.output_path.exists():
            return []
        events: list[dict[str, Any]] = []
        with open(self.output_path) as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                event = json.loads(line)
                if event_type is None or event.get("event_type") == event_type:
                    events.append(event)
        return events

    # ========== Ledger Event Helpers ==========

    def log_artist_registered(self, artist_id: int, name: str, address: str) -> None:
        self.log("artist_registered", {
            "artist_id": artist_id,
            "name": name,
            "address": address,
        })

    def log_song_released(
        self, song_id: int, artist_id: int, title: str, price: int
    ) -> None:
        self.log("song_released", {
            "song_id": song_id,
            "artist_id": artist_id,
            "title": title,
            "price": price,
        })

    def log_investment_made(
        self,
        investor_id: str,
        artist_id: int,
        amount: int,
        investment_after: int,
        total_investment_after: int,
    ) -> None:
        """Log an investment.

        Args:
            investor_id: Identity of the investing caller
            artist_id: Artist receiving the investment
            amount: Amount added by this call
            investment_after: Cumulative amount for this (investor, artist) pair
            total_investment_after: Artist's total across all investors
        """
        self.log("investment_made", {
            "investor_id": investor_id,
            "artist_id": artist_id,
            "amount": amount,
            "investment_after": investment_after,
            "total_investment_after": total_investment_after,
        })

    def log_song_purchased(
        self, buyer_id: str, song_id: int, price: int, balance_after: int
    ) -> None:
        """Log a sale. The buyer is recorded here for auditing only."""
        self.log("song_purchased", {
            "buyer_id": buyer_id,
            "song_id": song_id,
            "price": price,
            "balance_after": balance_after,
        })

    def log_royalties_distributed(self, song_id: int, artist_id: int, amount: int) -> None:
        """Log a distribution with the balance cleared from the song."""
        self.log("royalties_distributed", {
            "song_id": song_id,
            "artist_id": artist_id,
            "amount": amount,
        })
