"""Label ledger - registries for artists, songs, investments and royalties

Four registries share one ledger instance:
1. Artists - sequential ids from 1, never deleted
2. Songs - sequential ids from 1 (independent counter), each referencing an artist
3. Investments - cumulative amount per (investor, artist) pair
4. Royalties - undistributed sale revenue per song

All mutations go through here. Expected failures are returned as Result
values, never raised. Each operation either applies all of its changes or
none of them.

Amounts and prices are plain ints in a currency-agnostic unit. Negative
values are accepted as given.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import TYPE_CHECKING, Any, TypedDict

from .errors import Result, already_exists, not_found, ok, unauthorized
from .logger import EventLogger
from .models import Artist, ArtistDict, InvestmentKey, Song, SongDict, investment_key

if TYPE_CHECKING:
    from ..config_schema import AppConfig


logger = logging.getLogger(__name__)

DEFAULT_OWNER_ADDRESS: str = "artist_address"


class LedgerSnapshot(TypedDict):
    """JSON-serialisable view of the whole ledger."""
    artists: dict[str, ArtistDict]
    songs: dict[str, SongDict]
    investments: dict[str, int]
    royalties: dict[str, int]
    artist_id_nonce: int
    song_id_nonce: int


class LabelLedger:
    """
    Owns the artist, song, investment and royalty registries.

    Cross-registry invariants:
    - every song's artist_id names a registered artist
    - an artist's total_investment equals the sum of its investments
    - a song's royalty balance equals the prices of its sales since the
      last distribution

    Thread-safety: every mutation runs under one re-entrant lock covering
    all four registries and both counters. The *_async variants additionally
    serialize coroutines through one asyncio.Lock.
    """

    artists: dict[int, Artist]
    songs: dict[int, Song]
    investments: dict[InvestmentKey, int]
    royalties: dict[int, int]
    event_logger: EventLogger | None
    default_owner_address: str
    _artist_id_nonce: int
    _song_id_nonce: int
    _lock: threading.RLock
    _async_lock: asyncio.Lock

    def __init__(
        self,
        event_logger: EventLogger | None = None,
        default_owner_address: str = DEFAULT_OWNER_ADDRESS,
    ) -> None:
        self.artists = {}
        self.songs = {}
        self.investments = {}
        self.royalties = {}
        self.event_logger = event_logger
        self.default_owner_address = default_owner_address
        self._artist_id_nonce = 0
        self._song_id_nonce = 0
        self._lock = threading.RLock()
        self._async_lock = asyncio.Lock()

    @classmethod
    def from_config(
        cls,
        config: "AppConfig",
        event_logger: EventLogger | None = None,
    ) -> "LabelLedger":
        """Create a LabelLedger from validated config.

        Args:
            config: Validated application config
            event_logger: Explicit event logger. When omitted, one is created
                from the logging section if events are enabled.

        Returns:
            Configured LabelLedger instance
        """
        if event_logger is None and config.logging.events_enabled:
            event_logger = EventLogger(output_file=config.logging.output_file)
        return cls(
            event_logger=event_logger,
            default_owner_address=config.ledger.default_owner_address,
        )

    def _record(self, event_type: str, **payload: Any) -> None:
        """Write a committed transition to the event log.

        A failed write never undoes or fails the transition: the state the
        caller is told about is the state the ledger holds.
        """
        if self.event_logger is None:
            return
        try:
            getattr(self.event_logger, f"log_{event_type}")(**payload)
        except OSError:
            logger.exception(
                "Failed to write %s event to %s", event_type, self.event_logger.output_path
            )

    # ===== STATE TRANSITIONS =====

    def register_artist(self, name: str, address: str | None = None) -> Result[int]:
        """Register a new artist.

        Args:
            name: Display name
            address: Owning address (the registering caller). Defaults to
                the configured owner address.

        Returns:
            ok(artist_id). AlreadyExists only if id allocation ever hands out
            an id that is already taken; that branch leaves the counter
            untouched, so the counter only moves on success.
        """
        owner = address if address is not None else self.default_owner_address
        with self._lock:
            new_id = self._artist_id_nonce + 1
            if new_id in self.artists:
                logger.error("Artist id %d already allocated; id counter is corrupt", new_id)
                return already_exists(f"Artist {new_id} already exists", artist_id=new_id)
            self._artist_id_nonce = new_id
            self.artists[new_id] = Artist(id=new_id, name=name, address=owner)
            self._record("artist_registered", artist_id=new_id, name=name, address=owner)
        logger.debug("Registered artist %d (%s) owned by %s", new_id, name, owner)
        return ok(new_id)

    def release_song(self, artist_id: int, title: str, price: int) -> Result[int]:
        """Release a song for an existing artist.

        No song id is consumed when the artist does not exist.
        """
        with self._lock:
            if not self.artist_exists(artist_id):
                logger.warning("release_song: artist %s not found", artist_id)
                return not_found(f"Artist {artist_id} not found", artist_id=artist_id)
            self._song_id_nonce += 1
            new_id = self._song_id_nonce
            self.songs[new_id] = Song(id=new_id, artist_id=artist_id, title=title, price=price)
            self._record(
                "song_released", song_id=new_id, artist_id=artist_id, title=title, price=price
            )
        logger.debug("Released song %d '%s' for artist %d at %d", new_id, title, artist_id, price)
        return ok(new_id)

    def invest_in_artist(self, investor_id: str, artist_id: int, amount: int) -> Result[bool]:
        """Add amount to investor's stake in an artist and to the artist's total.

        Both updates happen in one critical section, so no reader ever sees
        one without the other.
        """
        with self._lock:
            artist = self.artists.get(artist_id)
            if artist is None:
                logger.warning(
                    "invest_in_artist: artist %s not found (investor %s)", artist_id, investor_id
                )
                return not_found(f"Artist {artist_id} not found", artist_id=artist_id)
            key = (investor_id, artist_id)
            current = self.investments.get(key, 0)
            self.investments[key] = current + amount
            artist.total_investment += amount
            self._record(
                "investment_made",
                investor_id=investor_id,
                artist_id=artist_id,
                amount=amount,
                investment_after=self.investments[key],
                total_investment_after=artist.total_investment,
            )
        logger.debug("%s invested %d in artist %d", investor_id, amount, artist_id)
        return ok(True)

    def buy_song(self, buyer_id: str, song_id: int) -> Result[bool]:
        """Credit the song's royalty balance with its unit price.

        The buyer identity only goes to the event log; it never affects the
        balance.
        """
        with self._lock:
            song = self.songs.get(song_id)
            if song is None:
                logger.warning("buy_song: song %s not found (buyer %s)", song_id, buyer_id)
                return not_found(f"Song {song_id} not found", song_id=song_id)
            balance = self.royalties.get(song_id, 0) + song.price
            self.royalties[song_id] = balance
            self._record(
                "song_purchased",
                buyer_id=buyer_id,
                song_id=song_id,
                price=song.price,
                balance_after=balance,
            )
        logger.debug("%s bought song %d for %d", buyer_id, song_id, song.price)
        return ok(True)

    def distribute_royalties(self, song_id: int) -> Result[bool]:
        """Clear a song's accrued royalties.

        Fails with Unauthorized both when the song was never sold and when
        its balance is not positive; details["reason"] tells them apart.

        On success the value stays True and details["amount"] holds the
        balance that was cleared. The same amount is written to the event
        log before the reset.
        """
        with self._lock:
            balance = self.royalties.get(song_id)
            if balance is None:
                logger.warning("distribute_royalties: song %s has no sales", song_id)
                return unauthorized(
                    f"No royalties to distribute for song {song_id}",
                    song_id=song_id,
                    reason="no_sales",
                )
            if balance <= 0:
                logger.warning(
                    "distribute_royalties: song %s balance is %d", song_id, balance
                )
                return unauthorized(
                    f"No royalties to distribute for song {song_id}",
                    song_id=song_id,
                    reason="zero_balance",
                )
            self._record(
                "royalties_distributed",
                song_id=song_id,
                artist_id=self.songs[song_id].artist_id,
                amount=balance,
            )
            self.royalties[song_id] = 0
        logger.info("Distributed %d in royalties for song %d", balance, song_id)
        return ok(True, amount=balance)

    def clear(self) -> None:
        """Reset every registry and both id counters. Use with caution - mainly for testing."""
        with self._lock:
            self.artists.clear()
            self.songs.clear()
            self.investments.clear()
            self.royalties.clear()
            self._artist_id_nonce = 0
            self._song_id_nonce = 0
        logger.debug("Ledger cleared")

    # ===== ASYNC OPERATIONS (Thread-Safe) =====

    async def register_artist_async(self, name: str, address: str | None = None) -> Result[int]:
        """Async serialized register_artist."""
        async with self._async_lock:
            return self.register_artist(name, address)

    async def release_song_async(self, artist_id: int, title: str, price: int) -> Result[int]:
        """Async serialized release_song."""
        async with self._async_lock:
            return self.release_song(artist_id, title, price)

    async def invest_in_artist_async(
        self, investor_id: str, artist_id: int, amount: int
    ) -> Result[bool]:
        """Async serialized invest_in_artist."""
        async with self._async_lock:
            return self.invest_in_artist(investor_id, artist_id, amount)

    async def buy_song_async(self, buyer_id: str, song_id: int) -> Result[bool]:
        """Async serialized buy_song."""
        async with self._async_lock:
            return self.buy_song(buyer_id, song_id)

    async def distribute_royalties_async(self, song_id: int) -> Result[bool]:
        """Async serialized distribute_royalties."""
        async with self._async_lock:
            return self.distribute_royalties(song_id)

    # ===== QUERIES =====

    @property
    def artist_id_nonce(self) -> int:
        """Last artist id handed out (0 before any registration)."""
        return self._artist_id_nonce

    @property
    def song_id_nonce(self) -> int:
        """Last song id handed out (0 before any release)."""
        return self._song_id_nonce

    def artist_count(self) -> int:
        return len(self.artists)

    def song_count(self) -> int:
        return len(self.songs)

    def get_artist(self, artist_id: int) -> Artist | None:
        return self.artists.get(artist_id)

    def get_song(self, song_id: int) -> Song | None:
        return self.songs.get(song_id)

    def artist_exists(self, artist_id: int) -> bool:
        return artist_id in self.artists

    def song_exists(self, song_id: int) -> bool:
        return song_id in self.songs

    def get_investment(self, investor_id: str, artist_id: int) -> int:
        """Cumulative amount investor_id has put into artist_id (0 if none)."""
        return self.investments.get((investor_id, artist_id), 0)

    def get_investments_for_artist(self, artist_id: int) -> dict[str, int]:
        """Map of investor id to cumulative amount for one artist."""
        with self._lock:
            return {
                investor: amount
                for (investor, aid), amount in self.investments.items()
                if aid == artist_id
            }

    def get_songs_by_artist(self, artist_id: int) -> list[Song]:
        """Songs released by an artist, in release order."""
        with self._lock:
            return [s for s in self.songs.values() if s.artist_id == artist_id]

    def get_royalty_balance(self, song_id: int) -> int | None:
        """Undistributed royalties for a song, None if it was never sold."""
        return self.royalties.get(song_id)

    def snapshot(self) -> LedgerSnapshot:
        """Get a JSON-serialisable snapshot of all registries and counters.

        Investments are keyed by their string form, e.g. "fan1-1".
        """
        with self._lock:
            return {
                "artists": {str(aid): a.to_dict() for aid, a in self.artists.items()},
                "songs": {str(sid): s.to_dict() for sid, s in self.songs.items()},
                "investments": {
                    investment_key(investor, aid): amount
                    for (investor, aid), amount in self.investments.items()
                },
                "royalties": {str(sid): bal for sid, bal in self.royalties.items()},
                "artist_id_nonce": self._artist_id_nonce,
                "song_id_nonce": self._song_id_nonce,
            }

    def check_invariants(self) -> list[str]:
        """Return a description of every violated cross-registry invariant."""
        problems: list[str] = []
        with self._lock:
            for song in self.songs.values():
                if song.artist_id not in self.artists:
                    problems.append(f"song {song.id} references missing artist {song.artist_id}")
            totals: dict[int, int] = {}
            for (_, aid), amount in self.investments.items():
                totals[aid] = totals.get(aid, 0) + amount
            for aid, artist in self.artists.items():
                expected = totals.get(aid, 0)
                if artist.total_investment != expected:
                    problems.append(
                        f"artist {aid} total_investment {artist.total_investment} != {expected}"
                    )
            for sid in self.royalties:
                if sid not in self.songs:
                    problems.append(f"royalty balance for missing song {sid}")
            if self.artists and max(self.artists) > self._artist_id_nonce:
                problems.append("artist id exceeds artist counter")
            if self.songs and max(self.songs) > self._song_id_nonce:
                problems.append("song id exceeds song counter")
        return problems


__all__ = ["LabelLedger", "LedgerSnapshot", "DEFAULT_OWNER_ADDRESS"]
