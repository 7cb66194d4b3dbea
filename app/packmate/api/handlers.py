"""Request handlers for the verification endpoints.

Each handler takes already-extracted request parts (header values, path
parameters, the raw JSON body) and returns an ApiResponse. Handlers never
raise: unexpected failures are logged and turned into a 500 response.
"""

import functools
import hmac
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from packmate.core.config import PackmateConfig
from packmate.models.catalog import Catalog
from packmate.models.manager import PackageManagerId
from packmate.models.verification import pending_placeholder
from packmate.store.results import DEFAULT_SORT_FIELD, ResultStore
from packmate.verification.service import VerificationService

logger = logging.getLogger(__name__)

P = ParamSpec("P")
M = TypeVar("M", bound=BaseModel)

ServiceFactory = Callable[[ResultStore, PackmateConfig], VerificationService]
RequestBody = str | bytes | dict[str, Any] | None

INVALID_BODY = "Invalid request body"


@dataclass(frozen=True, slots=True)
class ApiResponse:
    """Status code and JSON-serializable body of a handler response."""

    status_code: int
    body: Any = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class VerifyRequest(BaseModel):
    """Body of a single-package verification request."""

    model_config = ConfigDict(populate_by_name=True)

    package_manager_id: str | None = Field(default=None, alias="packageManagerId")


class ResolveRequest(BaseModel):
    """Body of a flag resolution request."""

    model_config = ConfigDict(populate_by_name=True)

    app_id: str | None = Field(default=None, alias="appId")
    package_manager_id: str | None = Field(default=None, alias="packageManagerId")


def _error(status_code: int, message: str, details: str | None = None) -> ApiResponse:
    body: dict[str, str] = {"error": message}
    if details is not None:
        body["details"] = details
    return ApiResponse(status_code, body)


def _guarded(message: str) -> Callable[[Callable[P, ApiResponse]], Callable[P, ApiResponse]]:
    """Turn unexpected exceptions raised by a handler into a logged 500 response."""

    def decorator(func: Callable[P, ApiResponse]) -> Callable[P, ApiResponse]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> ApiResponse:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.exception("%s", message)
                return _error(500, message, str(e))

        return wrapper

    return decorator


def _parse_body(model: type[M], body: RequestBody) -> M | None:
    """Validate a request body, returning None if it is malformed."""
    try:
        if isinstance(body, str | bytes):
            return model.model_validate_json(body)
        if isinstance(body, dict):
            return model.model_validate(body)
    except ValidationError as e:
        logger.debug("Rejected request body: %s", e)
    return None


@_guarded("Failed to complete verification")
def trigger_verification(
    authorization: str | None,
    *,
    store: ResultStore,
    catalog: Catalog,
    config: PackmateConfig | None = None,
    service_factory: ServiceFactory = VerificationService,
) -> ApiResponse:
    """Run a full verification pass, authorized by the cron secret.

    Args:
        authorization: Value of the Authorization header.
        store: Result store receiving the results.
        catalog: Catalog whose targets are verified.
        config: Configuration holding the secret and request policy.
        service_factory: Builds the VerificationService for the run.

    Returns:
        200 with the run summary, 401 if the header does not carry the
        secret, 500 if no secret is configured.
    """
    config = config or PackmateConfig()
    secret = config.effective_cron_secret
    if not secret:
        logger.error("Cron secret is not configured")
        return _error(500, "Server configuration error")

    if not hmac.compare_digest(authorization or "", f"Bearer {secret}"):
        logger.warning("Rejected verification trigger with invalid credentials")
        return _error(401, "Unauthorized")

    service = service_factory(store, config)
    try:
        summary = service.verify_all(catalog)
    finally:
        service.close()

    logger.info("Scheduled verification complete: %s", summary.to_dict())
    return ApiResponse(200, summary.to_dict())


@_guarded("Failed to verify package")
def verify_package(
    app_id: str,
    body: RequestBody,
    *,
    store: ResultStore,
    catalog: Catalog,
    config: PackmateConfig | None = None,
    service_factory: ServiceFactory = VerificationService,
) -> ApiResponse:
    """Verify one application on one package manager.

    Args:
        app_id: Application identifier from the request path.
        body: JSON body carrying packageManagerId.
        store: Result store receiving the result.
        catalog: Catalog used to look up the package identifier.
        config: Request policy.
        service_factory: Builds the VerificationService for the request.

    Returns:
        200 with the stored result, 400 for a bad body, 404 if the app is
        unknown or not offered on the manager.
    """
    request = _parse_body(VerifyRequest, body)
    if request is None:
        return _error(400, INVALID_BODY)
    if not request.package_manager_id:
        return _error(400, "packageManagerId is required")

    try:
        manager = PackageManagerId(request.package_manager_id)
    except ValueError:
        return _error(400, f"Unknown package manager: {request.package_manager_id}")

    app = catalog.get(app_id)
    if app is None:
        return _error(404, "App not found")

    package_name = app.target_for(manager)
    if package_name is None:
        return _error(404, "Package not available for this manager")

    service = service_factory(store, config or PackmateConfig())
    try:
        result = service.verify_package(app_id, manager, package_name)
    finally:
        service.close()
    return ApiResponse(200, result.to_dict())


@_guarded("Failed to fetch verification status")
def verification_status(
    app_id: str | None = None,
    package_manager_id: str | None = None,
    *,
    store: ResultStore,
) -> ApiResponse:
    """Return current verification results.

    With both identifiers, returns the current result of that pair or a
    pending placeholder if it was never verified. Otherwise returns the
    current result of every stored pair.
    """
    if app_id and package_manager_id:
        result = store.latest(app_id, package_manager_id)
        if result is None:
            return ApiResponse(200, pending_placeholder(app_id, package_manager_id))
        return ApiResponse(200, result.to_dict())

    return ApiResponse(200, [r.to_dict() for r in store.current_results()])


@_guarded("Failed to fetch flagged packages")
def list_flagged(
    package_manager_id: str | None = None,
    sort_by: str | None = None,
    *,
    store: ResultStore,
) -> ApiResponse:
    """Return results awaiting manual review, sorted descending."""
    results = store.flagged(package_manager_id or None, sort_by or DEFAULT_SORT_FIELD)
    return ApiResponse(200, [r.to_dict() for r in results])


@_guarded("Failed to update flagged package")
def resolve_flagged(body: RequestBody, *, store: ResultStore) -> ApiResponse:
    """Clear the review flag of the newest flagged result for a pair.

    Returns:
        200 with {"success": true}, 400 for a bad body, 404 if nothing
        flagged matches.
    """
    request = _parse_body(ResolveRequest, body)
    if request is None:
        return _error(400, INVALID_BODY)
    if not request.app_id or not request.package_manager_id:
        return _error(400, "appId and packageManagerId are required")

    if not store.clear_flag(request.app_id, request.package_manager_id):
        return _error(404, "No flagged package found matching the criteria")
    return ApiResponse(200, {"success": True})
