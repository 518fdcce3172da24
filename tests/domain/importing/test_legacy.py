from __future__ import annotations

import json

from vinboard.domain.importing import normalize_legacy_import, normalize_sources


def test_aliases_resolve_to_canonical_names() -> None:
    item = {
        "external_key": "k",
        "price_min_eur": 20,
        "price_typical_eur": "25,5",
        "price_max": 30,
        "price_max_eur": 99,
        "price_checked_at": "2024-05-01",
        "sources_json": json.dumps(["https://a.example", {"url": "https://b.example"}]),
    }

    resolved = normalize_legacy_import(item)

    assert resolved.fields == {
        "external_key": "k",
        "price_min": 20,
        "price_typical": "25,5",
        "price_max": 30,
        "price_updated_at": "2024-05-01",
        "sources": ["https://a.example", "https://b.example"],
    }
    assert resolved.legacy is item
    assert resolved.sources == ["https://a.example", "https://b.example"]
    assert resolved.price_updated_at == "2024-05-01"


def test_canonical_name_wins_over_alias() -> None:
    resolved = normalize_legacy_import(
        {"external_key": "k", "price_sources": ["new"], "price_sources_json": '["old"]'}
    )

    assert resolved.price_sources == ["new"]


def test_absent_sources_stay_absent() -> None:
    resolved = normalize_legacy_import({"external_key": "k", "sources": "not json"})

    assert "sources" not in resolved.fields
    assert resolved.sources is None


def test_grapes_list_is_joined() -> None:
    resolved = normalize_legacy_import({"external_key": "k", "grapes": ["Syrah", "", "Grenache"]})

    assert resolved.fields["grapes"] == "Syrah, Grenache"


def test_normalize_sources_shapes() -> None:
    assert normalize_sources(None) is None
    assert normalize_sources({"url": "x"}) is None
    assert normalize_sources([]) == []
    assert normalize_sources(["a", "", 3, {"name": "b"}]) == ["a", '{"name": "b"}']
    assert normalize_sources('[{"url": "https://c.example"}]') == ["https://c.example"]
