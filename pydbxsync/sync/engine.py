"""Core sync engine for reconciling local files with remote files."""

import logging
import time
from contextlib import nullcontext
from dataclasses import dataclass
from enum import Enum
from typing import ContextManager, Iterable, Optional

from ..api import DbxClient
from ..exceptions import DbxError
from ..output import OutputFormatter
from ..progress import TransferProgressDisplay
from ..utils import format_timestamp
from .comparator import FileComparator, SyncAction, SyncDecision
from .gate import ConfirmationGate, InteractiveGate
from .operations import SyncOperations
from .options import SyncOptions
from .pair import SyncPair
from .probe import LocalFile, LocalFileProbe

logger = logging.getLogger(__name__)


class SyncStatus(str, Enum):
    """Outcome of syncing one pair."""

    UNCHANGED = "unchanged"
    UPLOADED = "uploaded"
    DOWNLOADED = "downloaded"
    DECLINED = "declined"
    CONFLICT = "conflict"
    FAILED = "failed"


@dataclass
class SyncResult:
    """Outcome of syncing one pair."""

    pair: SyncPair
    """The pair that was processed"""

    status: SyncStatus
    """What happened"""

    decision: Optional[SyncDecision] = None
    """Decision taken (None if the pair failed before deciding)"""

    error: Optional[str] = None
    """Error message for failed pairs"""


class SyncEngine:
    """Core sync engine that orchestrates file synchronization.

    Pairs are processed strictly one after another. A failure in one pair
    is reported and never stops the remaining pairs.
    """

    def __init__(
        self,
        client: DbxClient,
        options: Optional[SyncOptions] = None,
        gate: Optional[ConfirmationGate] = None,
        output: Optional[OutputFormatter] = None,
        comparator: Optional[FileComparator] = None,
        probe: Optional[LocalFileProbe] = None,
        progress: Optional[TransferProgressDisplay] = None,
    ):
        """Initialize sync engine.

        Args:
            client: Remote store API client
            options: Quiet/assume-yes settings for this run
            gate: Confirmation gate asked before every transfer
                (interactive terminal prompt by default)
            output: Output formatter for displaying progress/status
            comparator: Decision procedure (default FileComparator)
            probe: Local file probe (default LocalFileProbe)
            progress: Optional progress bar shown during transfers
        """
        self.client = client
        self.options = options or SyncOptions()
        self.gate = gate or InteractiveGate()
        self.output = output or OutputFormatter(quiet=self.options.quiet)
        self.comparator = comparator or FileComparator()
        self.probe = probe or LocalFileProbe()
        self.progress = progress
        self.operations = SyncOperations(client)

    def run(self, pairs: Iterable[SyncPair]) -> list[SyncResult]:
        """Sync every pair in order.

        Args:
            pairs: Sync pairs, processed left to right

        Returns:
            One SyncResult per pair, in the same order

        Examples:
            >>> engine = SyncEngine(client, SyncOptions(assume_yes=True))
            >>> results = engine.run([SyncPair(Path("notes.txt"), "/notes.txt")])
            >>> print(results[0].status)
        """
        start_time = time.time()
        results = [self.sync_pair(pair) for pair in pairs]
        logger.debug(
            f"Synced {len(results)} pair(s) in {time.time() - start_time:.2f}s"
        )

        if not self.options.quiet:
            self._display_summary(results)

        return results

    def sync_pair(self, pair: SyncPair) -> SyncResult:
        """Sync a single pair.

        Args:
            pair: Sync pair to reconcile

        Returns:
            SyncResult describing the outcome
        """
        logger.debug(f"Syncing {pair}")

        try:
            remote = self.operations.get_remote_metadata(pair.remote)
            local = self.probe.probe(pair.local)
            decision = self.comparator.decide(local, remote)
        except DbxError as e:
            return self._fail(pair, None, e)

        logger.debug(
            f"Decision for {pair}: {decision.action.value} ({decision.reason})"
        )

        if decision.conflict:
            when = (
                format_timestamp(local.modified_at)
                if local.modified_at is not None
                else "the same time"
            )
            self.output.warning(
                f"Conflict: {pair} differ in content but were both modified "
                f"at {when}; resolve manually"
            )
            return SyncResult(pair, SyncStatus.CONFLICT, decision)

        if decision.action == SyncAction.NONE:
            if not self.options.quiet:
                self.output.info(f"Unchanged: {pair}")
            return SyncResult(pair, SyncStatus.UNCHANGED, decision)

        if not self._confirm(pair, decision):
            self.output.warning(
                f"Skipped {pair}: transfer declined ({decision.reason})"
            )
            return SyncResult(pair, SyncStatus.DECLINED, decision)

        try:
            return self._execute_decision(pair, decision, local, remote.modified_at)
        except DbxError as e:
            return self._fail(pair, decision, e)

    def _confirm(self, pair: SyncPair, decision: SyncDecision) -> bool:
        """Ask the confirmation gate unless assume-yes is set."""
        if self.options.assume_yes:
            return True

        if decision.action == SyncAction.UPLOAD:
            prompt = f"Upload {pair.local} to {pair.remote} ({decision.reason})?"
        else:
            prompt = f"Download {pair.remote} to {pair.local} ({decision.reason})?"
        return self.gate.ask(prompt, True)

    def _execute_decision(
        self,
        pair: SyncPair,
        decision: SyncDecision,
        local: LocalFile,
        remote_modified_at: Optional[int],
    ) -> SyncResult:
        """Execute a confirmed upload or download."""
        action_start = time.time()

        if decision.action == SyncAction.UPLOAD:
            with self._transfer_progress(f"Uploading {pair.local.name}") as callback:
                self.operations.upload_file(
                    local_path=pair.local,
                    remote_path=pair.remote,
                    client_modified=local.modified_at,
                    progress_callback=callback,
                )
            status = SyncStatus.UPLOADED
            self.output.success(
                f"Uploaded {pair.local} -> {pair.remote} ({decision.reason})"
            )
        else:
            with self._transfer_progress(f"Downloading {pair.local.name}") as callback:
                self.operations.download_file(
                    remote_path=pair.remote,
                    local_path=pair.local,
                    modified_at=remote_modified_at,
                    progress_callback=callback,
                )
            status = SyncStatus.DOWNLOADED
            self.output.success(
                f"Downloaded {pair.remote} -> {pair.local} ({decision.reason})"
            )

        logger.debug(
            "%s of %s took %.2fs",
            decision.action.value,
            pair,
            time.time() - action_start,
        )
        return SyncResult(pair, status, decision)

    def _transfer_progress(self, description: str) -> ContextManager:
        if self.progress is None:
            return nullcontext()
        return self.progress.transfer(description)

    def _fail(
        self, pair: SyncPair, decision: Optional[SyncDecision], error: DbxError
    ) -> SyncResult:
        logger.debug(f"Sync of {pair} failed", exc_info=True)
        self.output.error(f"Failed to sync {pair}: {error}")
        return SyncResult(pair, SyncStatus.FAILED, decision, str(error))

    @staticmethod
    def summarize(results: Iterable[SyncResult]) -> dict:
        """Count results per outcome.

        Returns:
            Dictionary with keys uploads, downloads, unchanged, declined,
            conflicts and errors
        """
        stats = {
            "uploads": 0,
            "downloads": 0,
            "unchanged": 0,
            "declined": 0,
            "conflicts": 0,
            "errors": 0,
        }
        keys = {
            SyncStatus.UPLOADED: "uploads",
            SyncStatus.DOWNLOADED: "downloads",
            SyncStatus.UNCHANGED: "unchanged",
            SyncStatus.DECLINED: "declined",
            SyncStatus.CONFLICT: "conflicts",
            SyncStatus.FAILED: "errors",
        }
        for result in results:
            stats[keys[result.status]] += 1
        return stats

    def _display_summary(self, results: list[SyncResult]) -> None:
        stats = self.summarize(results)
        items = [
            ("Uploaded", str(stats["uploads"])),
            ("Downloaded", str(stats["downloads"])),
            ("Unchanged", str(stats["unchanged"])),
        ]
        if stats["declined"]:
            items.append(("Declined", str(stats["declined"])))
        if stats["conflicts"]:
            items.append(("Conflicts", str(stats["conflicts"])))
        if stats["errors"]:
            items.append(("Failed", str(stats["errors"])))
        self.output.print_summary("Sync Complete", items)
