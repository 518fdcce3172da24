"""Public domain model surface."""

from __future__ import annotations

from vinboard.domain.model.bottle import (
    DEFAULT_WINDOW_SOURCE,
    BottleRecord,
    DrinkingWindow,
    OpenedRecord,
    new_id,
)
from vinboard.domain.model.enums import (
    BottleStatus,
    CoarseStatus,
    ImportAction,
    ImportMode,
    NormalizedField,
)
from vinboard.domain.model.errors import (
    BottleNotFoundError,
    CellarError,
    DuplicateBottleError,
    ImportValidationError,
    InsufficientQuantityError,
    InvalidRatingError,
    OpenedRecordNotFoundError,
)

__all__ = [
    "DEFAULT_WINDOW_SOURCE",
    "BottleNotFoundError",
    "BottleRecord",
    "BottleStatus",
    "CellarError",
    "CoarseStatus",
    "DrinkingWindow",
    "DuplicateBottleError",
    "ImportAction",
    "ImportMode",
    "ImportValidationError",
    "InsufficientQuantityError",
    "InvalidRatingError",
    "NormalizedField",
    "OpenedRecord",
    "OpenedRecordNotFoundError",
    "new_id",
]
