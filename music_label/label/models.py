"""Data model for the label ledger: artists, songs, and investment keys."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict


class ArtistDict(TypedDict):
    """Serialized artist record."""
    id: int
    name: str
    address: str
    total_investment: int


class SongDict(TypedDict):
    """Serialized song record."""
    id: int
    artist_id: int
    title: str
    price: int


@dataclass
class Artist:
    """A registered creator.

    total_investment always equals the sum of every investment recorded
    against this artist. Only the ledger mutates it.
    """

    id: int
    name: str
    address: str
    total_investment: int = 0

    def to_dict(self) -> ArtistDict:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "total_investment": self.total_investment,
        }


@dataclass(frozen=True)
class Song:
    """A priced work released by an artist. Immutable once released."""

    id: int
    artist_id: int
    title: str
    price: int

    def to_dict(self) -> SongDict:
        return {
            "id": self.id,
            "artist_id": self.artist_id,
            "title": self.title,
            "price": self.price,
        }


InvestmentKey = tuple[str, int]


def investment_key(investor_id: str, artist_id: int) -> str:
    """String form of an investment key, e.g. ("fan1", 1) -> "fan1-1".

    Artist ids are integers, so the key can always be split back on the
    last "-" even when the investor id contains dashes.
    """
    return f"{investor_id}-{artist_id}"


def parse_investment_key(key: str) -> InvestmentKey:
    """Inverse of investment_key()."""
    investor_id, _, artist_part = key.rpartition("-")
    if not investor_id or not artist_part:
        raise ValueError(f"Malformed investment key: {key!r}")
    return investor_id, int(artist_part)

