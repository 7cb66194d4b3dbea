"""Unit tests for the verification service."""

from collections.abc import Callable
from datetime import UTC, datetime

import httpx
import pytest
from packmate.core.config import PackmateConfig
from packmate.models.catalog import Catalog
from packmate.models.verification import (
    NOT_FOUND_MESSAGE,
    VerificationResult,
    VerificationStatus,
)
from packmate.store.results import ResultStore, ResultStoreError
from packmate.verification.service import VerificationService

FIXED_NOW = datetime(2026, 3, 1, 12, 0, 0, 123456, tzinfo=UTC)

Handler = Callable[[httpx.Request], httpx.Response]


def registry_ok(request: httpx.Request) -> httpx.Response:
    """Answer every registry as if the package exists."""
    if request.url.host == "community.chocolatey.org":
        return httpx.Response(200, json={"d": {"results": [{"Id": "x"}]}})
    return httpx.Response(200, json={})


def no_network(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected request to {request.url}")


def make_service(
    store: ResultStore,
    handler: Handler,
    sleeps: list[float] | None = None,
    config: PackmateConfig | None = None,
) -> VerificationService:
    return VerificationService(
        store,
        config=config,
        client=httpx.Client(transport=httpx.MockTransport(handler)),
        sleep=sleeps.append if sleeps is not None else (lambda _: None),
        clock=lambda: FIXED_NOW,
    )


class TestVerifyPackage:
    """Tests for VerificationService.verify_package."""

    def test_verified(self, store: ResultStore) -> None:
        """An existing package is recorded as verified."""
        service = make_service(store, registry_ok)

        result = service.verify_package("git", "chocolatey", "git")

        assert result.status == VerificationStatus.VERIFIED
        assert result.error_message is None
        assert result.manual_review_flag is None
        assert result.timestamp == "2026-03-01T12:00:00.123Z"
        assert store.results() == [result]

    def test_not_found_is_not_flagged(self, store: ResultStore) -> None:
        """A clean not-found answer fails without a review flag."""
        service = make_service(store, lambda request: httpx.Response(404))

        result = service.verify_package("firefox", "flatpak", "org.mozilla.firefox")

        assert result.status == VerificationStatus.FAILED
        assert result.error_message == NOT_FOUND_MESSAGE
        assert result.is_flagged is False

    def test_timeout_is_flagged(self, store: ResultStore) -> None:
        """An inconclusive check is flagged after the retries run out."""
        sleeps: list[float] = []

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        service = make_service(store, handler, sleeps)

        result = service.verify_package("git", "homebrew", "git")

        assert result.status == VerificationStatus.FAILED
        assert result.manual_review_flag is True
        assert "timed out" in (result.error_message or "")
        assert sleeps == [1.0, 2.0]

    def test_invalid_winget_id_is_flagged(self, store: ResultStore) -> None:
        """A malformed winget id is flagged without a request."""
        service = make_service(store, no_network)

        result = service.verify_package("firefox", "winget", "Firefox")

        assert result.status == VerificationStatus.FAILED
        assert result.is_flagged
        assert "Publisher.PackageName" in (result.error_message or "")

    def test_unverifiable_makes_no_request(self, store: ResultStore) -> None:
        """Managers without a registry are recorded as unverifiable."""
        service = make_service(store, no_network)

        result = service.verify_package("git", "apt", "git")

        assert result.status == VerificationStatus.UNVERIFIABLE
        assert result.error_message is None

    def test_regression_is_flagged(
        self,
        store: ResultStore,
        make_result: Callable[..., VerificationResult],
    ) -> None:
        """A verified package that stops resolving is flagged for review."""
        store.append(make_result(timestamp="2026-03-01T12:00:00.500Z"))
        service = make_service(store, lambda request: httpx.Response(404))

        result = service.verify_package("firefox", "flatpak", "org.mozilla.firefox")

        assert result.status == VerificationStatus.FAILED
        assert result.error_message == NOT_FOUND_MESSAGE
        assert result.manual_review_flag is True
        # Never earlier than the stored result, even with a lagging clock
        assert result.timestamp == "2026-03-01T12:00:00.501Z"
        assert store.latest("firefox", "flatpak") == result

    def test_timestamps_strictly_increase(self, store: ResultStore) -> None:
        """Results issued within the same millisecond get distinct timestamps."""
        service = make_service(store, registry_ok)

        first = service.verify_package("git", "homebrew", "git")
        second = service.verify_package("git", "homebrew", "git")
        third = service.verify_package("vlc", "dnf", "vlc")

        assert first.timestamp == "2026-03-01T12:00:00.123Z"
        assert second.timestamp == "2026-03-01T12:00:00.124Z"
        assert third.timestamp == "2026-03-01T12:00:00.125Z"
        assert store.latest("git", "homebrew") == second

    def test_unknown_manager(self, store: ResultStore) -> None:
        """Unknown manager ids raise ValueError and store nothing."""
        service = make_service(store, no_network)

        with pytest.raises(ValueError):
            service.verify_package("git", "emerge", "git")

        assert store.results() == []

    def test_retry_policy_from_config(self, store: ResultStore) -> None:
        """Attempts and backoff follow the configuration."""
        sleeps: list[float] = []
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503)

        config = PackmateConfig(max_retries=2, retry_base_delay=0.25)
        service = make_service(store, handler, sleeps, config)

        result = service.verify_package("git", "homebrew", "git")

        assert result.is_flagged
        assert len(calls) == 2
        assert sleeps == [0.25]


class TestVerifyAll:
    """Tests for VerificationService.verify_all."""

    def test_summary(self, store: ResultStore, sample_catalog: Catalog) -> None:
        """Every offered pair is processed once."""
        service = make_service(store, registry_ok)

        summary = service.verify_all(sample_catalog)

        assert summary.to_dict() == {
            "total": 21,
            "verified": 13,
            "failed": 0,
            "errors": 0,
            "unverifiable": 8,
        }
        assert len(store.results()) == 21
        # The empty snap target of vlc is not an offered pair
        assert store.latest("vlc", "snap") is None

    def test_politeness_delay(self, store: ResultStore, sample_catalog: Catalog) -> None:
        """The service pauses between registry requests only."""
        sleeps: list[float] = []
        config = PackmateConfig(request_delay=0.2)
        service = make_service(store, registry_ok, sleeps, config)

        service.verify_all(sample_catalog)

        assert sleeps == [0.2] * 12

    def test_failures_counted(self, store: ResultStore, sample_catalog: Catalog) -> None:
        """Not-found answers count as failed, inconclusive ones as errors."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "flathub.org":
                return httpx.Response(404)
            if request.url.host == "api.snapcraft.io":
                return httpx.Response(400)
            return registry_ok(request)

        service = make_service(store, handler)

        summary = service.verify_all(sample_catalog)

        assert summary.failed == 3
        assert summary.errors == 2
        assert summary.verified == 8
        assert {(r.app_id, r.package_manager_id) for r in store.flagged()} == {
            ("firefox", "snap"),
            ("vscode", "snap"),
        }

    def test_store_read_once(
        self,
        store: ResultStore,
        sample_catalog: Catalog,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """A run reads the current results once instead of per pair."""
        reads: list[int] = []
        real_current_results = store.current_results

        def counting_current_results() -> list[VerificationResult]:
            reads.append(1)
            return real_current_results()

        def no_latest(app_id: str, package_manager_id: str) -> None:
            raise AssertionError("latest() called during a full run")

        monkeypatch.setattr(store, "current_results", counting_current_results)
        monkeypatch.setattr(store, "latest", no_latest)
        service = make_service(store, registry_ok)

        summary = service.verify_all(sample_catalog)

        assert summary.total == 21
        assert reads == [1]

    def test_regression_flagged_during_run(
        self,
        store: ResultStore,
        sample_catalog: Catalog,
        make_result: Callable[..., VerificationResult],
    ) -> None:
        """Previous results loaded up front still drive regression flags."""
        store.append(make_result(timestamp="2026-03-01T12:00:00.500Z"))

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "flathub.org":
                return httpx.Response(404)
            return registry_ok(request)

        service = make_service(store, handler)

        service.verify_all(sample_catalog)

        latest = store.latest("firefox", "flatpak")
        assert latest is not None
        assert latest.manual_review_flag is True
        assert latest.timestamp == "2026-03-01T12:00:00.501Z"
        assert [(r.app_id, r.package_manager_id) for r in store.flagged()] == [
            ("firefox", "flatpak")
        ]

    def test_bad_stored_timestamp_does_not_block_pair(
        self, store: ResultStore, sample_catalog: Catalog
    ) -> None:
        """A stored line with a malformed timestamp is ignored, not counted as an error."""
        with store.path.open("a", encoding="utf-8") as f:
            f.write(
                '{"appId": "git", "packageManagerId": "apt", "packageName": "git", '
                '"status": "verified", "timestamp": "yesterday"}\n'
            )
        service = make_service(store, registry_ok)

        summary = service.verify_all(sample_catalog)
        single = service.verify_package("git", "apt", "git")

        assert summary.errors == 0
        assert summary.unverifiable == 8
        assert single.status == VerificationStatus.UNVERIFIABLE

    def test_exception_does_not_stop_run(
        self,
        store: ResultStore,
        sample_catalog: Catalog,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """A pair that raises is counted as an error and the run continues."""
        real_append = store.append
        failures = iter([True])

        def flaky_append(result: VerificationResult) -> None:
            if next(failures, False):
                raise ResultStoreError("disk full")
            real_append(result)

        monkeypatch.setattr(store, "append", flaky_append)
        service = make_service(store, registry_ok)

        summary = service.verify_all(sample_catalog)

        assert summary.total == 21
        assert summary.errors == 1
        assert len(store.results()) == 20


class TestClientOwnership:
    """Tests for HTTP client lifecycle."""

    def test_passed_client_not_closed(self, store: ResultStore) -> None:
        """A client passed in stays open after close()."""
        client = httpx.Client(transport=httpx.MockTransport(registry_ok))
        service = VerificationService(store, client=client)

        service.close()

        assert client.is_closed is False

    def test_own_client_created_and_closed(self, store: ResultStore) -> None:
        """The service creates its client lazily and closes it."""
        with VerificationService(store, PackmateConfig(request_timeout=5.0)) as service:
            client = service.client
            assert client.timeout.read == 5.0
            assert client.headers["User-Agent"].startswith("packmate/")

        assert client.is_closed is True

    def test_is_verifiable(self) -> None:
        """Only managers with a registry API are verifiable."""
        assert VerificationService.is_verifiable("snap") is True
        assert VerificationService.is_verifiable("pacman") is False
