"""Append-only store for verification results.

This module provides the ResultStore class for persisting and querying
verification results in a JSONL file. Every verification appends a new
line; the current result of an (app, manager) pair is the one with the
latest timestamp. The only in-place change is clearing a manual review
flag, which rewrites the file atomically under an exclusive lock.
"""

import fcntl
import json
import logging
import os
from pathlib import Path
from tempfile import NamedTemporaryFile
from types import TracebackType
from typing import IO

from packmate.core.paths import get_results_path
from packmate.models.verification import VerificationResult

logger = logging.getLogger(__name__)

# Wire field name -> attribute used for ordering flagged results
SORT_FIELDS: dict[str, str] = {
    "timestamp": "parsed_timestamp",
    "appId": "app_id",
    "packageManagerId": "package_manager_id",
    "packageName": "package_name",
}
DEFAULT_SORT_FIELD = "timestamp"


class ResultStoreError(Exception):
    """Raised when the results file cannot be read or written."""


class ResultStore:
    """Verification results in a JSONL file.

    Storage location: ~/.local/state/packmate/results.jsonl

    The store is opened lazily on first use and must be closed by its
    owner, either explicitly or by using it as a context manager. A
    sibling ``.lock`` file serializes writers.

    Example:
        >>> with ResultStore(tmp_path / "results.jsonl") as store:
        ...     store.append(result)
        ...     store.latest("git", "homebrew")
    """

    def __init__(self, path: Path | None = None) -> None:
        """Initialize ResultStore.

        Args:
            path: Optional override for the results file.
                  Default: ~/.local/state/packmate/results.jsonl
        """
        self._path = path if path is not None else get_results_path()
        self._lock_file: IO[str] | None = None

    @property
    def path(self) -> Path:
        """Path to the results file."""
        return self._path

    @property
    def is_open(self) -> bool:
        """Check if the store holds its lock file open."""
        return self._lock_file is not None

    def open(self) -> None:
        """Create the results directory and open the lock file.

        Called automatically by every operation; calling it again is a no-op.

        Raises:
            ResultStoreError: If the directory or lock file cannot be created.
        """
        if self._lock_file is not None:
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._lock_file = open(
                self._path.with_name(self._path.name + ".lock"), "a", encoding="utf-8"
            )
        except OSError as e:
            raise ResultStoreError(f"Failed to open results store: {e}") from e
        logger.debug("Opened results store at %s", self._path)

    def close(self) -> None:
        """Close the lock file. The store reopens itself if used again."""
        if self._lock_file is not None:
            self._lock_file.close()
            self._lock_file = None

    def __enter__(self) -> "ResultStore":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def append(self, result: VerificationResult) -> None:
        """Append one result to the store.

        Raises:
            ResultStoreError: If the file cannot be written.
        """
        self.open()
        line = result.to_json_line()
        try:
            with self._locked(), self._path.open(mode="a", encoding="utf-8") as f:
                f.write(line + "\n")
                f.flush()
        except OSError as e:
            raise ResultStoreError(f"Failed to append result: {e}") from e

    def results(self) -> list[VerificationResult]:
        """Read all stored results in file order.

        Corrupt lines are skipped with a warning.
        """
        return [result for _, result in self._read_entries()]

    def latest(self, app_id: str, package_manager_id: str) -> VerificationResult | None:
        """Return the current result for a pair, or None if never verified."""
        matches = [
            r
            for r in self.results()
            if r.app_id == app_id and r.package_manager_id == package_manager_id
        ]
        return _newest(matches)

    def current_results(self) -> list[VerificationResult]:
        """Return the current result of every stored pair, ordered by pair."""
        by_pair: dict[tuple[str, str], list[VerificationResult]] = {}
        for result in self.results():
            by_pair.setdefault(result.key, []).append(result)
        current = [_newest(results) for results in by_pair.values()]
        return sorted((r for r in current if r is not None), key=lambda r: r.key)

    def flagged(
        self,
        package_manager_id: str | None = None,
        sort_by: str = DEFAULT_SORT_FIELD,
    ) -> list[VerificationResult]:
        """Return flagged results, newest or highest first.

        Args:
            package_manager_id: Only results for this manager, if given.
            sort_by: Wire field to sort by, descending. Unknown fields fall
                back to timestamp.

        Returns:
            Every stored result with manualReviewFlag set to true.
        """
        attribute = SORT_FIELDS.get(sort_by, SORT_FIELDS[DEFAULT_SORT_FIELD])
        matches = [
            r
            for r in self.results()
            if r.is_flagged
            and (package_manager_id is None or r.package_manager_id == package_manager_id)
        ]
        return sorted(matches, key=lambda r: getattr(r, attribute), reverse=True)

    def clear_flag(self, app_id: str, package_manager_id: str) -> bool:
        """Clear the manual review flag of the newest flagged matching document.

        Match and update happen under the store lock. Other documents are
        written back unchanged, byte for byte.

        Args:
            app_id: Application identifier.
            package_manager_id: Package manager identifier.

        Returns:
            True if a flagged document was found and cleared, False if none
            matched (the file is then left untouched).

        Raises:
            ResultStoreError: If the file cannot be rewritten.
        """
        self.open()
        with self._locked():
            lines = self._read_lines()
            target_index: int | None = None
            target: VerificationResult | None = None
            for index, result in self._parse_lines(lines):
                if (
                    result.app_id == app_id
                    and result.package_manager_id == package_manager_id
                    and result.is_flagged
                    and (target is None or result.parsed_timestamp >= target.parsed_timestamp)
                ):
                    target_index, target = index, result

            if target_index is None or target is None:
                return False

            lines[target_index] = target.with_flag(False).to_json_line() + "\n"
            self._rewrite(lines)

        logger.info("Cleared review flag for %s on %s", app_id, package_manager_id)
        return True

    def _read_lines(self) -> list[str]:
        if not self._path.exists():
            return []
        try:
            with self._path.open(encoding="utf-8") as f:
                return f.readlines()
        except OSError as e:
            raise ResultStoreError(f"Failed to read results: {e}") from e

    def _parse_lines(self, lines: list[str]) -> list[tuple[int, VerificationResult]]:
        entries: list[tuple[int, VerificationResult]] = []
        for index, line in enumerate(lines):
            if not line.strip():
                continue
            try:
                entries.append((index, VerificationResult.from_json_line(line)))
            except (json.JSONDecodeError, KeyError, ValueError, TypeError) as e:
                logger.warning("Skipping corrupt results line %d: %s", index + 1, str(e))
        return entries

    def _read_entries(self) -> list[tuple[int, VerificationResult]]:
        return self._parse_lines(self._read_lines())

    def _rewrite(self, lines: list[str]) -> None:
        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self._path.parent,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                f.writelines(lines)
            os.replace(str(tmp_path), str(self._path))
        except OSError as e:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise ResultStoreError(f"Failed to rewrite results: {e}") from e

    def _locked(self) -> "_FileLock":
        self.open()
        if self._lock_file is None:
            raise ResultStoreError("Results store is not open")
        return _FileLock(self._lock_file)


class _FileLock:
    """Exclusive advisory lock held for the duration of a with block."""

    def __init__(self, lock_file: IO[str]) -> None:
        self._lock_file = lock_file

    def __enter__(self) -> None:
        fcntl.flock(self._lock_file.fileno(), fcntl.LOCK_EX)

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        fcntl.flock(self._lock_file.fileno(), fcntl.LOCK_UN)


def _newest(results: list[VerificationResult]) -> VerificationResult | None:
    """Pick the result with the latest timestamp; later lines win ties."""
    newest: VerificationResult | None = None
    for result in results:
        if newest is None or result.parsed_timestamp >= newest.parsed_timestamp:
            newest = result
    return newest
