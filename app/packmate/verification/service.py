"""Verification pipeline.

This module provides the VerificationService, which checks catalog
package identifiers against their package manager registries, classifies
the outcome, flags ambiguous cases for manual review and appends every
result to the result store.
"""

import logging
import time
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from types import TracebackType

import httpx

from packmate import __version__
from packmate.core.config import PackmateConfig
from packmate.models.catalog import Catalog
from packmate.models.manager import PackageManagerId, get_package_manager
from packmate.models.verification import (
    NOT_FOUND_MESSAGE,
    VerificationResult,
    VerificationStatus,
    VerificationSummary,
    format_timestamp,
)
from packmate.store.results import ResultStore
from packmate.verification.retry import call_with_retry
from packmate.verification.verifiers import RegistryError, get_verifier

logger = logging.getLogger(__name__)

# Smallest step between two timestamps issued by the service
TIMESTAMP_RESOLUTION = timedelta(milliseconds=1)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class VerificationService:
    """Checks package identifiers and records the results.

    The service owns its HTTP client, created lazily on the first registry
    request and released by close(). The result store is owned by the
    caller.

    Attributes:
        store: Result store receiving every verification result.
        config: Registry request policy.

    Example:
        >>> with ResultStore() as store, VerificationService(store) as service:
        ...     summary = service.verify_all(load_catalog())
    """

    def __init__(
        self,
        store: ResultStore,
        config: PackmateConfig | None = None,
        client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the service.

        Args:
            store: Result store to read previous results from and append to.
            config: Request policy. Defaults to PackmateConfig().
            client: HTTP client to use instead of creating one. A client
                passed in is not closed by close().
            sleep: Sleep function for backoff and politeness delays.
            clock: Source of the current UTC time.
        """
        self.store = store
        self.config = config or PackmateConfig()
        self._client = client
        self._owns_client = client is None
        self._sleep = sleep
        self._clock = clock
        self._last_issued: datetime | None = None

    @property
    def client(self) -> httpx.Client:
        """HTTP client for registry requests, created on first use."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.config.request_timeout,
                follow_redirects=True,
                headers={"User-Agent": f"packmate/{__version__}"},
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client if the service created it."""
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def __enter__(self) -> "VerificationService":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @staticmethod
    def is_verifiable(manager_id: PackageManagerId | str) -> bool:
        """Check whether a manager has a registry that can be queried."""
        return get_package_manager(manager_id).verifiable

    def verify_package(
        self,
        app_id: str,
        manager_id: PackageManagerId | str,
        package_name: str,
    ) -> VerificationResult:
        """Verify one package identifier and append the result.

        Args:
            app_id: Catalog application identifier.
            manager_id: Package manager the identifier belongs to.
            package_name: Identifier as stored in the catalog.

        Returns:
            The stored VerificationResult.

        Raises:
            ValueError: If the manager id is unknown.
            ResultStoreError: If the store cannot be read or written.
        """
        manager = PackageManagerId(manager_id)
        previous = self.store.latest(app_id, manager.value)
        return self._verify(app_id, manager, package_name, previous)

    def _verify(
        self,
        app_id: str,
        manager: PackageManagerId,
        package_name: str,
        previous: VerificationResult | None,
    ) -> VerificationResult:
        """Check one identifier against the pair's previous result and append the outcome."""
        status, error_message, flag = self._check(manager, package_name)
        if (
            status == VerificationStatus.FAILED
            and not flag
            and previous is not None
            and previous.status == VerificationStatus.VERIFIED
        ):
            logger.warning("%s on %s regressed from verified to failed", app_id, manager.value)
            flag = True

        result = VerificationResult(
            app_id=app_id,
            package_manager_id=manager.value,
            package_name=package_name,
            status=status,
            timestamp=self._next_timestamp(previous),
            error_message=error_message,
            manual_review_flag=True if flag else None,
        )
        self.store.append(result)
        logger.debug("%s on %s: %s", app_id, manager.value, status.value)
        return result

    def verify_all(self, catalog: Catalog) -> VerificationSummary:
        """Verify every (app, manager) pair of the catalog.

        Pairs are processed sequentially with a politeness delay between
        registry requests. A pair that raises is logged, counted as an
        error, and the run continues.

        Args:
            catalog: Catalog whose targets are verified.

        Returns:
            Aggregate counts for the run.
        """
        summary = VerificationSummary()
        current = {result.key: result for result in self.store.current_results()}
        requested = False
        for app in catalog.apps:
            for manager in PackageManagerId:
                package_name = app.target_for(manager)
                if package_name is None:
                    continue
                if self.is_verifiable(manager):
                    if requested and self.config.request_delay > 0:
                        self._sleep(self.config.request_delay)
                    requested = True
                try:
                    result = self._verify(
                        app.id, manager, package_name, current.get((app.id, manager.value))
                    )
                except Exception:
                    logger.exception("Verification of %s on %s failed", app.id, manager.value)
                    summary.record_error()
                    continue
                summary.record(result)

        logger.info(
            "Verification run finished: %d total, %d verified, %d failed, %d errors, "
            "%d unverifiable",
            summary.total,
            summary.verified,
            summary.failed,
            summary.errors,
            summary.unverifiable,
        )
        return summary

    def _check(
        self,
        manager: PackageManagerId,
        package_name: str,
    ) -> tuple[VerificationStatus, str | None, bool]:
        """Query the registry and classify the answer.

        Returns:
            Tuple of (status, error message, needs manual review).
        """
        if not self.is_verifiable(manager):
            return VerificationStatus.UNVERIFIABLE, None, False

        verifier = get_verifier(manager, self.client)
        if verifier is None:
            return VerificationStatus.UNVERIFIABLE, None, False

        try:
            exists = call_with_retry(
                lambda: verifier.exists(package_name),
                max_attempts=self.config.max_retries,
                base_delay=self.config.retry_base_delay,
                sleep=self._sleep,
            )
        except RegistryError as e:
            logger.warning("Inconclusive check of %s on %s: %s", package_name, manager.value, e)
            return VerificationStatus.FAILED, str(e), True

        if exists:
            return VerificationStatus.VERIFIED, None, False
        return VerificationStatus.FAILED, NOT_FOUND_MESSAGE, False

    def _next_timestamp(self, previous: VerificationResult | None) -> str:
        """Issue a timestamp later than any issued before and than the pair's last result."""
        moment = self._clock()
        moment = moment.replace(microsecond=moment.microsecond // 1000 * 1000)
        previous_moment = previous.parsed_timestamp if previous is not None else None
        for floor in (self._last_issued, previous_moment):
            if floor is not None and moment <= floor:
                moment = floor + TIMESTAMP_RESOLUTION
        self._last_issued = moment
        return format_timestamp(moment)
