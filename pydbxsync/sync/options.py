"""Options controlling a sync run."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SyncOptions:
    """Immutable settings passed to the sync engine."""

    quiet: bool = False
    """Suppress "unchanged" notices and the summary (never errors or conflicts)"""

    assume_yes: bool = False
    """Transfer without asking for confirmation"""
