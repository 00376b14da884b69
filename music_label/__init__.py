"""Music label ledger package.

This package contains:
- config: Configuration loading and management
- label: Ledger state machine, result types, event log, host contract
"""

from __future__ import annotations

__all__: list[str] = []
