from __future__ import annotations

import pytest

from vinboard.domain.importing import (
    create_quantity,
    detect_import_mode,
    merge_quantity,
    resolve_quantity,
    sync_quantity,
)
from vinboard.domain.model import ImportMode


@pytest.mark.parametrize(("incoming", "expected"), [(None, 1), (0, 1), (-2, 1), (6, 6)])
def test_create_quantity(incoming: int | None, expected: int) -> None:
    assert create_quantity(incoming) == expected


def test_merge_adds_to_existing_stock() -> None:
    assert merge_quantity(1, None) == 2
    assert merge_quantity(3, 2) == 5
    assert merge_quantity(None, None) == 1


def test_sync_replaces_existing_stock() -> None:
    assert sync_quantity(5, 1) == 1
    assert sync_quantity(5, 0) == 0
    assert sync_quantity(5, -3) == 0
    assert sync_quantity(5, None) == 5


def test_resolve_quantity_dispatches_on_mode() -> None:
    assert resolve_quantity(ImportMode.MERGE, 1, 1) == 2
    assert resolve_quantity(ImportMode.SYNC, 1, 1) == 1


def test_detect_import_mode() -> None:
    assert detect_import_mode({"schema_version": 1, "bottles": []}) is ImportMode.SYNC
    assert detect_import_mode({"bottles": []}) is ImportMode.MERGE
    assert detect_import_mode([{"external_key": "k"}]) is ImportMode.MERGE
    assert detect_import_mode({"external_key": "k"}) is ImportMode.MERGE
