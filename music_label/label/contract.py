"""Music label contract - method-dispatch surface over the label ledger

The host calls invoke(method, args, invoker_id). The contract checks the
argument shape, supplies the invoker's identity where an operation needs
one, and forwards to the ledger. Ledger results come back as dicts via
Result.to_dict().

Method descriptions are configurable via config.yaml.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, TypedDict

from ..config_schema import ContractConfig
from .errors import validation_error
from .ledger import LabelLedger


logger = logging.getLogger(__name__)


class MethodInfo(TypedDict):
    name: str
    description: str


@dataclass
class ContractMethod:
    """A method exposed by the contract"""
    name: str
    handler: Callable[[list[Any], str], dict[str, Any]]
    description: str
    arg_names: tuple[str, ...]


def _int_arg_error(value: Any, name: str) -> dict[str, Any] | None:
    """Validation error unless value is a real int (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, int):
        return validation_error(
            f"{name} must be an integer, got {type(value).__name__}: {value!r}",
            provided=value,
        )
    return None


class MusicLabelContract:
    """
    Host-facing contract that proxies to a LabelLedger.

    The invoker id is used as:
    - the owning address on register_artist
    - the investor on invest
    - the buyer on buy_song
    """

    id: str
    description: str
    ledger: LabelLedger
    methods: dict[str, ContractMethod]

    def __init__(
        self,
        ledger: LabelLedger,
        contract_config: ContractConfig | None = None,
    ) -> None:
        cfg = contract_config or ContractConfig()
        self.id = cfg.id
        self.description = cfg.description
        self.ledger = ledger
        self.methods = {}

        method_cfg = cfg.methods
        self.register_method(
            "register_artist", self._register_artist,
            method_cfg.register_artist.description, ("name",),
        )
        self.register_method(
            "release_song", self._release_song,
            method_cfg.release_song.description, ("artist_id", "title", "price"),
        )
        self.register_method(
            "invest", self._invest,
            method_cfg.invest.description, ("artist_id", "amount"),
        )
        self.register_method(
            "buy_song", self._buy_song,
            method_cfg.buy_song.description, ("song_id",),
        )
        self.register_method(
            "distribute_royalties", self._distribute_royalties,
            method_cfg.distribute_royalties.description, ("song_id",),
        )
        self.register_method(
            "balance", self._balance,
            method_cfg.balance.description, ("song_id",),
        )

    def register_method(
        self,
        name: str,
        handler: Callable[[list[Any], str], dict[str, Any]],
        description: str = "",
        arg_names: tuple[str, ...] = (),
    ) -> None:
        """Register a callable method on this contract"""
        self.methods[name] = ContractMethod(
            name=name,
            handler=handler,
            description=description,
            arg_names=arg_names,
        )

    def get_method(self, method_name: str) -> ContractMethod | None:
        return self.methods.get(method_name)

    def list_methods(self) -> list[MethodInfo]:
        return [
            {"name": m.name, "description": m.description}
            for m in self.methods.values()
        ]

    def invoke(self, method_name: str, args: list[Any] | None, invoker_id: str) -> dict[str, Any]:
        """Dispatch a call from the host.

        Argument count is checked here; argument types are checked by each
        handler.
        """
        method = self.get_method(method_name)
        if method is None:
            return validation_error(
                f"Unknown method '{method_name}'. Available: {sorted(self.methods)}",
                code="method_not_found",
                method=method_name,
            )
        call_args = list(args or [])
        if len(call_args) < len(method.arg_names):
            return validation_error(
                f"{method_name} requires {list(method.arg_names)} "
                f"({len(method.arg_names)} args, got {len(call_args)})",
                code="missing_argument",
                required=list(method.arg_names),
            )
        logger.debug("%s invoked %s%s", invoker_id, method_name, call_args)
        return method.handler(call_args, invoker_id)

    def _register_artist(self, args: list[Any], invoker_id: str) -> dict[str, Any]:
        name = args[0]
        if not isinstance(name, str):
            return validation_error(
                f"Artist name must be a string, got {type(name).__name__}: {name!r}",
                provided=name,
            )
        result = self.ledger.register_artist(name, address=invoker_id)
        return result.to_dict()

    def _release_song(self, args: list[Any], invoker_id: str) -> dict[str, Any]:
        artist_id, title, price = args[0], args[1], args[2]
        err = _int_arg_error(artist_id, "artist_id") or _int_arg_error(price, "price")
        if err is not None:
            return err
        if not isinstance(title, str):
            return validation_error(
                f"title must be a string, got {type(title).__name__}: {title!r}",
                provided=title,
            )
        return self.ledger.release_song(artist_id, title, price).to_dict()

    def _invest(self, args: list[Any], invoker_id: str) -> dict[str, Any]:
        artist_id, amount = args[0], args[1]
        err = _int_arg_error(artist_id, "artist_id") or _int_arg_error(amount, "amount")
        if err is not None:
            return err
        return self.ledger.invest_in_artist(invoker_id, artist_id, amount).to_dict()

    def _buy_song(self, args: list[Any], invoker_id: str) -> dict[str, Any]:
        song_id = args[0]
        err = _int_arg_error(song_id, "song_id")
        if err is not None:
            return err
        return self.ledger.buy_song(invoker_id, song_id).to_dict()

    def _distribute_royalties(self, args: list[Any], invoker_id: str) -> dict[str, Any]:
        song_id = args[0]
        err = _int_arg_error(song_id, "song_id")
        if err is not None:
            return err
        return self.ledger.distribute_royalties(song_id).to_dict()

    def _balance(self, args: list[Any], invoker_id: str) -> dict[str, Any]:
        song_id = args[0]
        err = _int_arg_error(song_id, "song_id")
        if err is not None:
            return err
        return {
            "success": True,
            "song_id": song_id,
            "royalties": self.ledger.get_royalty_balance(song_id) or 0,
        }
