"""Request handlers for the verification endpoints.

The handlers are transport independent: a web framework or the CLI passes
in the request parts and serializes the returned ApiResponse.
"""

from packmate.api.handlers import (
    ApiResponse,
    ResolveRequest,
    VerifyRequest,
    list_flagged,
    resolve_flagged,
    trigger_verification,
    verification_status,
    verify_package,
)

__all__ = [
    "ApiResponse",
    "ResolveRequest",
    "VerifyRequest",
    "list_flagged",
    "resolve_flagged",
    "trigger_verification",
    "verification_status",
    "verify_package",
]
