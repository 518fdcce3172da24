"""Domain error definitions."""

from __future__ import annotations


class CellarError(Exception):
    """Base class for cellar domain errors."""


class BottleNotFoundError(CellarError):
    """Raised when a bottle id does not resolve for the given owner."""

    def __init__(self, bottle_id: str) -> None:
        super().__init__(f"Bottle not found: {bottle_id}")
        self.bottle_id = bottle_id


class DuplicateBottleError(CellarError):
    """Raised when an owner already has a bottle with the given external key."""

    def __init__(self, external_key: str) -> None:
        super().__init__(f"Bottle already exists: {external_key}")
        self.external_key = external_key


class OpenedRecordNotFoundError(CellarError):
    """Raised when an opened-history entry does not resolve for the given owner."""

    def __init__(self, opened_id: str) -> None:
        super().__init__(f"Opened record not found: {opened_id}")
        self.opened_id = opened_id


class InsufficientQuantityError(CellarError):
    """Raised when a quantity change would leave a bottle below zero."""

    def __init__(self, available: int, requested: int) -> None:
        super().__init__(f"Cannot remove {requested} bottle(s); only {available} left")
        self.available = available
        self.requested = requested


class InvalidRatingError(CellarError):
    """Raised when a rating falls outside the 0-100 scale."""


class ImportValidationError(CellarError):
    """Raised when a raw import item cannot be coerced into a bottle payload."""

    def __init__(self, reason: str, *, external_key: str = "unknown") -> None:
        super().__init__(reason)
        self.reason = reason
        self.external_key = external_key
