"""Verification result models.

This module defines data structures for recording whether a package
identifier still resolves in its package manager's registry. Results are
immutable and stored append-only; the current status of an
(app, manager) pair is the result with the latest timestamp.
"""

import json
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from enum import Enum
from typing import Any

# Error message of a clean not-found answer from a registry
NOT_FOUND_MESSAGE = "Package not found"


class VerificationStatus(str, Enum):
    """Outcome of a package verification attempt.

    Attributes:
        VERIFIED: Package exists in the manager's registry.
        FAILED: Package was not found or the check was inconclusive.
        PENDING: Package has not been verified yet.
        UNVERIFIABLE: Manager has no public registry API.
    """

    VERIFIED = "verified"
    FAILED = "failed"
    PENDING = "pending"
    UNVERIFIABLE = "unverifiable"


@dataclass(frozen=True, slots=True)
class VerificationResult:
    """Record of one verification of an (app, manager) pair.

    Attributes:
        app_id: Catalog application identifier.
        package_manager_id: Manager the package was checked against.
        package_name: Literal package identifier that was checked.
        status: Classification of the check.
        timestamp: When the check completed (ISO 8601, UTC).
        error_message: Explanation when status is FAILED.
        manual_review_flag: True when an administrator should look at it.
    """

    app_id: str
    package_manager_id: str
    package_name: str
    status: VerificationStatus
    timestamp: str
    error_message: str | None = None
    manual_review_flag: bool | None = None

    def __post_init__(self) -> None:
        """Validate result data after initialization."""
        if not self.app_id:
            msg = "Application id cannot be empty"
            raise ValueError(msg)
        if not self.package_manager_id:
            msg = "Package manager id cannot be empty"
            raise ValueError(msg)
        if not self.timestamp:
            msg = "Timestamp cannot be empty"
            raise ValueError(msg)
        try:
            parse_timestamp(self.timestamp)
        except (AttributeError, ValueError) as e:
            msg = f"Invalid timestamp: {self.timestamp!r}"
            raise ValueError(msg) from e

    @property
    def key(self) -> tuple[str, str]:
        """The (app_id, package_manager_id) pair this result belongs to."""
        return (self.app_id, self.package_manager_id)

    @property
    def is_flagged(self) -> bool:
        """Check if the result is waiting for manual review."""
        return bool(self.manual_review_flag)

    @property
    def is_inconclusive(self) -> bool:
        """Whether this is a flagged failure other than a clean not-found."""
        return (
            self.status == VerificationStatus.FAILED
            and self.is_flagged
            and self.error_message != NOT_FOUND_MESSAGE
        )

    @property
    def parsed_timestamp(self) -> datetime:
        """Timestamp as an aware datetime for ordering."""
        return parse_timestamp(self.timestamp)

    def with_flag(self, flagged: bool) -> "VerificationResult":
        """Return a copy with the manual review flag set or cleared."""
        return replace(self, manual_review_flag=flagged)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the document shape used by the store and the API.

        Returns:
            Dictionary with camelCase keys; optional fields only when set.
        """
        result: dict[str, Any] = {
            "appId": self.app_id,
            "packageManagerId": self.package_manager_id,
            "packageName": self.package_name,
            "status": self.status.value,
            "timestamp": self.timestamp,
        }
        if self.error_message is not None:
            result["errorMessage"] = self.error_message
        if self.manual_review_flag is not None:
            result["manualReviewFlag"] = self.manual_review_flag
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VerificationResult":
        """Deserialize from a stored document.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If status or other data is invalid.
        """
        return cls(
            app_id=data["appId"],
            package_manager_id=data["packageManagerId"],
            package_name=data.get("packageName", ""),
            status=VerificationStatus(data["status"]),
            timestamp=data["timestamp"],
            error_message=data.get("errorMessage"),
            manual_review_flag=data.get("manualReviewFlag"),
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line (no trailing newline)."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json_line(cls, line: str) -> "VerificationResult":
        """Deserialize from a JSON line.

        Raises:
            json.JSONDecodeError: If line is not valid JSON.
            KeyError: If required fields are missing.
            ValueError: If data is invalid.
        """
        return cls.from_dict(json.loads(line.strip()))


@dataclass(slots=True)
class VerificationSummary:
    """Aggregate counts for one verification run.

    Attributes:
        total: Number of (app, manager) pairs processed.
        verified: Pairs confirmed to exist.
        failed: Pairs cleanly reported as missing.
        errors: Pairs whose check was inconclusive or raised.
        unverifiable: Pairs on managers without a registry API.
    """

    total: int = 0
    verified: int = 0
    failed: int = 0
    errors: int = 0
    unverifiable: int = 0

    def record(self, result: VerificationResult) -> None:
        """Count one result into the summary."""
        self.total += 1
        if result.status == VerificationStatus.VERIFIED:
            self.verified += 1
        elif result.status == VerificationStatus.UNVERIFIABLE:
            self.unverifiable += 1
        elif result.status == VerificationStatus.FAILED and result.is_inconclusive:
            self.errors += 1
        elif result.status == VerificationStatus.FAILED:
            self.failed += 1

    def record_error(self) -> None:
        """Count a pair whose processing raised unexpectedly."""
        self.total += 1
        self.errors += 1

    def to_dict(self) -> dict[str, int]:
        """Serialize to a plain dictionary."""
        return {
            "total": self.total,
            "verified": self.verified,
            "failed": self.failed,
            "errors": self.errors,
            "unverifiable": self.unverifiable,
        }


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp, accepting a trailing 'Z'.

    Naive timestamps are interpreted as UTC.
    """
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as an ISO 8601 UTC string with millisecond precision."""
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def pending_placeholder(app_id: str, package_manager_id: str) -> dict[str, Any]:
    """Status document returned for a pair that was never verified."""
    return {
        "appId": app_id,
        "packageManagerId": package_manager_id,
        "status": VerificationStatus.PENDING.value,
        "timestamp": None,
    }
