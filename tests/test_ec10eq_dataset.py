"""Tests for EC10eq dataset decoding (nested and flat wire formats)."""

from __future__ import annotations

import pytest

from analysis.ec10eq_dataset import (
    DatasetShapeError,
    Observation,
    detect_wire_format,
    is_dataset_payload,
    parse_dataset,
)

pytestmark = pytest.mark.unit


NESTED = {
    "cas": "71-43-2",
    "chemical_name": "Benzene",
    "trophic_groups": {
        "fish": {"Danio rerio": [{"EC10eq": 2.5, "test_id": 7, "year": 2001, "author": "Smith"}]},
        "algae": {
            "Chlorella vulgaris": [{"EC10eq": 0.3, "test_id": "A-1", "year": "1999", "author": None}],
            "Anabaena flos-aquae": [{"EC10eq": 12}],
        },
    },
}

FLAT = {
    "cas": "71-43-2",
    "chemical_name": "Benzene",
    "endpoints": [
        {"trophic_group": "algae", "species": "Chlorella vulgaris", "EC10eq": 0.3, "test_id": "A-1", "year": 1999},
        {"trophic_group": "fish", "species": "Danio rerio", "EC10eq": 2.5, "test_id": 7, "year": 2001, "author": "Smith"},
        {"trophic_group": "algae", "species": "Anabaena flos-aquae", "EC10eq": "12"},
    ],
}


def test_detect_wire_format_distinguishes_shapes() -> None:
    """Nested, flat, chart descriptions and junk are told apart."""

    assert detect_wire_format(NESTED) == "nested"
    assert detect_wire_format(FLAT) == "flat"
    assert detect_wire_format({"data": [], "layout": {}, "cas": "71-43-2", "trophic_groups": {}}) is None
    assert detect_wire_format({"trophic_groups": {}}) is None
    assert detect_wire_format(["not", "a", "mapping"]) is None
    assert is_dataset_payload(NESTED)
    assert not is_dataset_payload({"data": [], "layout": {}})


def test_parse_nested_dataset_decodes_observations() -> None:
    """Nested payloads decode with typed observation fields."""

    dataset = parse_dataset(NESTED)

    assert dataset.cas == "71-43-2"
    assert dataset.chemical_name == "Benzene"
    assert dataset.observation_count == 3
    assert dataset.trophic_groups["fish"]["Danio rerio"] == (
        Observation(value=2.5, test_id=7, year=2001, author="Smith"),
    )
    chlorella = dataset.trophic_groups["algae"]["Chlorella vulgaris"][0]
    assert chlorella.year == 1999
    assert chlorella.test_id == "A-1"
    assert chlorella.author is None


def test_flat_and_nested_payloads_decode_identically() -> None:
    """Both wire formats decode to the same canonical dataset."""

    assert parse_dataset(FLAT) == parse_dataset(NESTED)


def test_iter_buckets_is_sorted_by_group_then_species() -> None:
    """Buckets iterate in ascending group then species order."""

    order = [(group, species) for group, species, _ in parse_dataset(NESTED).iter_buckets()]

    assert order == [
        ("algae", "Anabaena flos-aquae"),
        ("algae", "Chlorella vulgaris"),
        ("fish", "Danio rerio"),
    ]


def test_parsed_dataset_is_read_only() -> None:
    """Decoded mappings cannot be mutated by downstream code."""

    dataset = parse_dataset(NESTED)

    with pytest.raises(TypeError):
        dataset.trophic_groups["plants"] = {}  # type: ignore[index]


def test_empty_groups_yield_an_empty_dataset() -> None:
    """Groups with no observations are valid input and report is_empty."""

    dataset = parse_dataset({"cas": "50-00-0", "chemical_name": "  ", "trophic_groups": {"fish": {"Danio rerio": []}}})

    assert dataset.is_empty
    assert dataset.chemical_name is None


@pytest.mark.parametrize(
    "payload",
    [
        {"cas": "", "trophic_groups": {}},
        {"cas": "71-43-2", "trophic_groups": []},
        {"cas": "71-43-2", "trophic_groups": {"fish": []}},
        {"cas": "71-43-2", "trophic_groups": {"fish": {"Danio rerio": {"EC10eq": 1}}}},
        {"cas": "71-43-2", "trophic_groups": {"fish": {"Danio rerio": [{"EC10eq": "n/a"}]}}},
        {"cas": "71-43-2", "trophic_groups": {"fish": {"Danio rerio": [{"EC10eq": float("nan")}]}}},
        {"cas": "71-43-2", "endpoints": [{"species": "Danio rerio", "EC10eq": 1}]},
        {"cas": "71-43-2", "endpoints": {"trophic_group": "fish"}},
        {"data": [], "layout": {}},
    ],
)
def test_malformed_payloads_raise_shape_errors(payload: object) -> None:
    """Structural problems surface as DatasetShapeError."""

    with pytest.raises(DatasetShapeError):
        parse_dataset(payload)
