"""Abstract base class for registry verifiers.

This module defines the Verifier interface that every verifiable package
manager implements, and the RegistryError hierarchy used to report
inconclusive registry answers.
"""

import logging
from abc import ABC, abstractmethod

import httpx

from packmate.models.manager import PackageManagerId

logger = logging.getLogger(__name__)


class RegistryError(Exception):
    """Base exception for inconclusive registry checks.

    Attributes:
        retryable: Whether repeating the request may give a definite answer.
    """

    retryable: bool = False


class RateLimitError(RegistryError):
    """Raised when the registry rate-limits the client (429, GitHub 403).

    Attributes:
        retry_after: Seconds the registry asked the client to wait, if given.
    """

    retryable = True

    def __init__(self, message: str, retry_after: float | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class RegistryNetworkError(RegistryError):
    """Raised on timeouts and transport failures."""

    retryable = True


class RegistryUnavailableError(RegistryError):
    """Raised when the registry answers with a 5xx status."""

    retryable = True


class RegistryResponseError(RegistryError):
    """Raised on an unexpected status or an unreadable response body."""


class InvalidPackageIdError(RegistryError):
    """Raised when an identifier cannot be mapped to a registry URL."""


class Verifier(ABC):
    """Abstract base class for all registry verifiers.

    A verifier answers one question: does a package identifier exist in
    its package manager's registry? A definite answer is returned as a
    bool; anything else raises a RegistryError.

    Example:
        >>> with httpx.Client(timeout=10.0) as client:
        ...     HomebrewVerifier(client).exists("git")
        True
    """

    registry_name: str = "registry"

    def __init__(self, client: httpx.Client) -> None:
        """Initialize the verifier.

        Args:
            client: HTTP client used for registry requests. The caller owns
                it and sets the timeout.
        """
        self._client = client

    @property
    @abstractmethod
    def manager_id(self) -> PackageManagerId:
        """Return the package manager this verifier checks."""

    @abstractmethod
    def build_url(self, package_name: str) -> str:
        """Build the registry URL for a package identifier.

        Raises:
            InvalidPackageIdError: If the identifier has an invalid shape.
        """

    def headers(self) -> dict[str, str]:
        """Extra request headers for the registry."""
        return {}

    def exists(self, package_name: str) -> bool:
        """Check whether a package exists in the registry.

        Args:
            package_name: Identifier as stored in the catalog.

        Returns:
            True if the registry knows the package, False on a clean
            not-found answer.

        Raises:
            RegistryError: If the registry gave no definite answer.
        """
        url = self.build_url(package_name)
        logger.debug("Checking %s at %s", package_name, url)
        response = self._get(url)
        return self.interpret(response)

    def interpret(self, response: httpx.Response) -> bool:
        """Turn a registry response into an existence answer.

        Raises:
            RegistryError: If the response is not a definite answer.
        """
        if response.status_code == 404:
            return False
        if response.is_success:
            return True
        raise self.error_for(response)

    def error_for(self, response: httpx.Response) -> RegistryError:
        """Map a non-definite response to a RegistryError."""
        status = response.status_code
        if status == 429:
            retry_after = _parse_retry_after(response.headers.get("Retry-After"))
            suffix = f". Retry after {retry_after:g}s" if retry_after is not None else ""
            return RateLimitError(f"Rate limited by {self.registry_name}{suffix}", retry_after)
        if status >= 500:
            return RegistryUnavailableError(
                f"{self.registry_name} unavailable: HTTP {status} {response.reason_phrase}"
            )
        return RegistryResponseError(f"HTTP error: {status} {response.reason_phrase}")

    def _get(self, url: str) -> httpx.Response:
        try:
            return self._client.get(url, headers=self.headers())
        except httpx.TimeoutException as e:
            msg = f"Request to {self.registry_name} timed out"
            raise RegistryNetworkError(msg) from e
        except httpx.TransportError as e:
            msg = f"Network error while contacting {self.registry_name}: {e}"
            raise RegistryNetworkError(msg) from e


def _parse_retry_after(value: str | None) -> float | None:
    """Parse a Retry-After header given in seconds."""
    if value is None:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    return max(0.0, seconds)
