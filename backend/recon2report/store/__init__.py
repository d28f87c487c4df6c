"""Session and target storage."""

from recon2report.store.base import (
    AssessmentStore,
    SessionNotFoundError,
    StoreError,
    TargetNotFoundError,
)
from recon2report.store.memory import InMemoryStore

__all__ = [
    "AssessmentStore",
    "InMemoryStore",
    "SessionNotFoundError",
    "StoreError",
    "TargetNotFoundError",
]
