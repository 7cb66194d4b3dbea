"""Unit tests for verification result models."""

import json
from collections.abc import Callable
from datetime import UTC, datetime

import pytest
from packmate.models.verification import (
    NOT_FOUND_MESSAGE,
    VerificationResult,
    VerificationStatus,
    VerificationSummary,
    format_timestamp,
    parse_timestamp,
    pending_placeholder,
)

MakeResult = Callable[..., VerificationResult]


class TestVerificationResult:
    """Tests for VerificationResult."""

    def test_empty_app_id_rejected(self, make_result: MakeResult) -> None:
        """Results must name an application."""
        with pytest.raises(ValueError, match="Application id"):
            make_result(app_id="")

    def test_empty_timestamp_rejected(self, make_result: MakeResult) -> None:
        """Results must carry a timestamp."""
        with pytest.raises(ValueError, match="Timestamp"):
            make_result(timestamp="")

    @pytest.mark.parametrize("timestamp", ["yesterday", "2026-13-01T00:00:00Z", 1700000000])
    def test_malformed_timestamp_rejected(
        self, make_result: MakeResult, timestamp: object
    ) -> None:
        """Timestamps must be ISO 8601 strings."""
        with pytest.raises(ValueError, match="Invalid timestamp"):
            make_result(timestamp=timestamp)

    def test_to_dict_omits_unset_optionals(self, make_result: MakeResult) -> None:
        """Optional fields only appear when set."""
        data = make_result().to_dict()
        assert data == {
            "appId": "firefox",
            "packageManagerId": "flatpak",
            "packageName": "org.mozilla.firefox",
            "status": "verified",
            "timestamp": "2026-03-01T12:00:00.000Z",
        }

    def test_to_dict_includes_flag_and_error(self, make_result: MakeResult) -> None:
        """Flagged failures serialize their error and flag."""
        data = make_result(
            status=VerificationStatus.FAILED,
            error_message="Request timed out",
            manual_review_flag=True,
        ).to_dict()
        assert data["errorMessage"] == "Request timed out"
        assert data["manualReviewFlag"] is True

    def test_json_line_is_compact(self, make_result: MakeResult) -> None:
        """JSON lines contain no newlines or padding."""
        line = make_result().to_json_line()
        assert "\n" not in line
        assert ", " not in line
        assert VerificationResult.from_json_line(line + "\n") == make_result()

    def test_from_dict_requires_status(self) -> None:
        """Documents without a status cannot be loaded."""
        with pytest.raises(KeyError):
            VerificationResult.from_dict({"appId": "a", "packageManagerId": "snap", "timestamp": "t"})

    def test_from_dict_rejects_unknown_status(self) -> None:
        """Unknown status values are rejected."""
        with pytest.raises(ValueError):
            VerificationResult.from_json_line(
                json.dumps(
                    {
                        "appId": "a",
                        "packageManagerId": "snap",
                        "status": "broken",
                        "timestamp": "2026-03-01T12:00:00.000Z",
                    }
                )
            )

    def test_with_flag(self, make_result: MakeResult) -> None:
        """with_flag returns a modified copy."""
        flagged = make_result(manual_review_flag=True)
        cleared = flagged.with_flag(False)
        assert flagged.is_flagged
        assert not cleared.is_flagged
        assert cleared.manual_review_flag is False

    def test_inconclusive_excludes_clean_not_found(self, make_result: MakeResult) -> None:
        """A flagged not-found answer is a regression, not an inconclusive check."""
        regression = make_result(
            status=VerificationStatus.FAILED,
            error_message=NOT_FOUND_MESSAGE,
            manual_review_flag=True,
        )
        timeout = make_result(
            status=VerificationStatus.FAILED,
            error_message="Request timed out",
            manual_review_flag=True,
        )
        assert not regression.is_inconclusive
        assert timeout.is_inconclusive


class TestVerificationSummary:
    """Tests for VerificationSummary counting."""

    def test_counts_by_outcome(self, make_result: MakeResult) -> None:
        """Each status lands in its own bucket."""
        summary = VerificationSummary()
        summary.record(make_result())
        summary.record(make_result(status=VerificationStatus.UNVERIFIABLE))
        summary.record(make_result(status=VerificationStatus.FAILED, error_message=NOT_FOUND_MESSAGE))
        summary.record(
            make_result(
                status=VerificationStatus.FAILED,
                error_message="HTTP error: 503 Service Unavailable",
                manual_review_flag=True,
            )
        )
        summary.record_error()

        assert summary.to_dict() == {
            "total": 5,
            "verified": 1,
            "failed": 1,
            "errors": 2,
            "unverifiable": 1,
        }

    def test_regression_counts_as_failed(self, make_result: MakeResult) -> None:
        """A flagged clean not-found still counts as a failure."""
        summary = VerificationSummary()
        summary.record(
            make_result(
                status=VerificationStatus.FAILED,
                error_message=NOT_FOUND_MESSAGE,
                manual_review_flag=True,
            )
        )
        assert summary.failed == 1
        assert summary.errors == 0


class TestTimestamps:
    """Tests for timestamp helpers."""

    def test_format_has_milliseconds_and_z(self) -> None:
        """Timestamps are UTC with millisecond precision."""
        moment = datetime(2026, 3, 1, 12, 0, 0, 123456, tzinfo=UTC)
        assert format_timestamp(moment) == "2026-03-01T12:00:00.123Z"

    def test_parse_accepts_z_suffix(self) -> None:
        """A trailing Z parses as UTC."""
        assert parse_timestamp("2026-03-01T12:00:00.123Z") == datetime(
            2026, 3, 1, 12, 0, 0, 123000, tzinfo=UTC
        )

    def test_parse_naive_is_utc(self) -> None:
        """Naive timestamps are treated as UTC."""
        assert parse_timestamp("2026-03-01T12:00:00").tzinfo == UTC


class TestPendingPlaceholder:
    """Tests for the pending placeholder document."""

    def test_shape(self) -> None:
        """Placeholder carries pending status and a null timestamp."""
        assert pending_placeholder("firefox", "snap") == {
            "appId": "firefox",
            "packageManagerId": "snap",
            "status": "pending",
            "timestamp": None,
        }
