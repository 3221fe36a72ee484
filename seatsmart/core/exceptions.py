"""Error hierarchy for the seating plan orchestration layer."""

from __future__ import annotations

from typing import List, Optional


class SeatSmartError(Exception):
    """Base error for recoverable, reportable failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PlanNotFoundError(SeatSmartError):
    """Raised when no seating plan is stored under the requested id."""

    def __init__(self, plan_id: str):
        super().__init__(f"Seating plan '{plan_id}' not found")
        self.plan_id = plan_id


class PlanStorageError(SeatSmartError):
    """Raised when the storage backend fails to save or load a plan."""


class InvalidSnapshotError(SeatSmartError):
    """Raised when a submitted snapshot breaks the guest/table invariants."""

    def __init__(self, errors: List[str], message: Optional[str] = None):
        super().__init__(message or "Seating plan is inconsistent")
        self.errors = errors


class NameGenerationError(SeatSmartError):
    """Raised when table names cannot be generated."""


class PlanAlreadyExistsError(SeatSmartError):
    """Raised when creating a plan under an id that is already taken."""

    def __init__(self, plan_id: str):
        super().__init__(f"Seating plan '{plan_id}' already exists")
        self.plan_id = plan_id
