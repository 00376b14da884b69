# Label ledger package
from .ledger import LabelLedger, LedgerSnapshot, DEFAULT_OWNER_ADDRESS
from .models import Artist, Song, investment_key, parse_investment_key
from .errors import (
    ErrorCategory, ErrorCode, Result,
    ok, error, not_found, already_exists, unauthorized, validation_error,
)
from .logger import EventLogger
from .contract import MusicLabelContract, ContractMethod

__all__ = [
    "LabelLedger",
    "LedgerSnapshot",
    "DEFAULT_OWNER_ADDRESS",
    "Artist",
    "Song",
    "investment_key",
    "parse_investment_key",
    "ErrorCategory",
    "ErrorCode",
    "Result",
    "ok",
    "error",
    "not_found",
    "already_exists",
    "unauthorized",
    "validation_error",
    "EventLogger",
    "MusicLabelContract",
    "ContractMethod",
]
