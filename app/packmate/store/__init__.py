"""Persistence of verification results."""

from packmate.store.results import ResultStore, ResultStoreError

__all__ = ["ResultStore", "ResultStoreError"]
