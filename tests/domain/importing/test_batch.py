from __future__ import annotations

from datetime import UTC, datetime

import pytest

from tests.helpers.bottles import OWNER, FakeBottleStore, fixed_clock
from vinboard.domain.importing import ImportReport, import_bottles
from vinboard.domain.model import ImportAction, ImportMode

NOW = datetime(2027, 6, 1, tzinfo=UTC)


def _run(
    store: FakeBottleStore,
    payload: object,
    mode: ImportMode = ImportMode.MERGE,
) -> ImportReport:
    return import_bottles(
        payload,
        OWNER,
        mode=mode,
        lookup=store.lookup,
        save=store.save,
        clock=fixed_clock(NOW),
    )


def test_missing_key_is_reported_and_batch_continues() -> None:
    store = FakeBottleStore()
    payload = [
        {"external_key": "a", "producer": "A"},
        {"producer": "No key"},
        {"external_key": "b", "producer": "B"},
    ]

    report = _run(store, payload)

    assert report.created == 2
    assert report.updated == 0
    assert report.errors_count == 1
    assert report.errors[0].external_key == "unknown"
    assert "external_key" in report.errors[0].reason
    assert [record.external_key for record, _ in store.saved] == ["a", "b"]


def test_reimport_merges_quantity() -> None:
    store = FakeBottleStore()

    _run(store, {"external_key": "x"})
    report = _run(store, {"external_key": "x"})

    assert report.updated == 1
    assert store.get("x").quantity == 2
    assert store.saved[-1][1] is ImportAction.UPDATED


def test_reimport_in_sync_mode_replaces_quantity() -> None:
    store = FakeBottleStore()

    _run(store, {"external_key": "x"}, ImportMode.SYNC)
    _run(store, {"external_key": "x"}, ImportMode.SYNC)

    assert store.get("x").quantity == 1


def test_duplicate_keys_within_one_batch_update_the_first() -> None:
    store = FakeBottleStore()

    report = _run(store, [{"external_key": "x"}, {"external_key": "x", "quantity": 2}])

    assert (report.created, report.updated) == (1, 1)
    assert store.get("x").quantity == 3


def test_save_failure_is_reported() -> None:
    store = FakeBottleStore(fail_save_for={"bad"})

    report = _run(store, [{"external_key": "bad"}, {"external_key": "good"}])

    assert report.created == 1
    assert report.to_dict()["errors"] == [
        {"externalKey": "bad", "reason": "save failed for bad"}
    ]


def test_envelope_payload_is_unwrapped() -> None:
    store = FakeBottleStore()
    payload = {"schema_version": 1, "bottles": [{"external_key": "a"}, {"external_key": "b"}]}

    report = _run(store, payload, ImportMode.SYNC)

    assert report.created == 2
    assert report.processed == 2


def test_report_to_dict() -> None:
    store = FakeBottleStore()

    report = _run(store, [{"external_key": "a"}, "garbage"])

    assert report.to_dict() == {
        "mode": "merge",
        "created": 1,
        "updated": 0,
        "errorsCount": 1,
        "errors": [{"externalKey": "unknown", "reason": "Import item must be an object"}],
    }


def test_unknown_mode_is_rejected() -> None:
    store = FakeBottleStore()

    with pytest.raises(ValueError, match="replace"):
        import_bottles([], OWNER, mode="replace", lookup=store.lookup, save=store.save)


def test_oversized_quantity_does_not_abort_batch() -> None:
    store = FakeBottleStore()

    report = _run(store, [{"external_key": "a", "quantity": 10**400}, {"external_key": "b"}])

    assert report.created == 2
    assert report.errors_count == 0
    assert store.get("a").quantity == 1


def test_out_of_range_timestamp_is_reported_and_batch_continues() -> None:
    store = FakeBottleStore()
    payload = [
        {"external_key": "a", "price_updated_at": "0001-01-01T00:00:00+01:00"},
        {"external_key": "b", "price_updated_at": "2026-01-01T00:00:00Z"},
    ]

    report = _run(store, payload)

    assert report.created == 1
    assert report.errors_count == 1
    assert report.errors[0].external_key == "a"
    assert "price_updated_at" in report.errors[0].reason
    assert store.get("b").price_updated_at == datetime(2026, 1, 1, tzinfo=UTC)
