"""Verification of package identifiers against package manager registries."""

from packmate.verification.retry import call_with_retry
from packmate.verification.service import VerificationService

__all__ = ["VerificationService", "call_with_retry"]
