"""EC10eq dataset model and wire-format decoding.

The upstream API returns the same semantic dataset in two shapes:

- nested: ``{"cas", "chemical_name", "trophic_groups": {group: {species: [obs]}}}``
- flat: ``{"cas", "chemical_name", "endpoints": [{"trophic_group", "species", ...obs}]}``

Both are decoded here, once, into `Ec10eqDataset`. Nothing downstream needs to
know which shape the payload arrived in.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Literal

WireFormat = Literal["nested", "flat"]

VALUE_KEY = "EC10eq"


class DatasetShapeError(ValueError):
    """Raised when a payload cannot be decoded into an EC10eq dataset."""


@dataclass(frozen=True, slots=True)
class Observation:
    """A single EC10eq endpoint measurement.

    Args:
        value: EC10eq concentration (mg/L).
        test_id: Upstream test identifier.
        year: Publication year, when known.
        author: Author/reference string, when known.
    """

    value: float
    test_id: int | str | None = None
    year: int | None = None
    author: str | None = None


SpeciesBucket = Mapping[str, tuple[Observation, ...]]


@dataclass(frozen=True, slots=True)
class Ec10eqDataset:
    """EC10eq observations for one substance, grouped by trophic group and species.

    Args:
        cas: CAS registry number of the substance.
        chemical_name: Optional display name.
        trophic_groups: Read-only mapping of trophic group -> species -> observations.
    """

    cas: str
    chemical_name: str | None
    trophic_groups: Mapping[str, SpeciesBucket]

    @property
    def is_empty(self) -> bool:
        """Return True when the dataset holds no observation at all."""

        return self.observation_count == 0

    @property
    def observation_count(self) -> int:
        """Total number of observations across all buckets."""

        return sum(len(obs) for bucket in self.trophic_groups.values() for obs in bucket.values())

    def iter_buckets(self) -> Iterator[tuple[str, str, tuple[Observation, ...]]]:
        """Yield (group, species, observations) in canonical display order.

        Trophic groups and species are both sorted ascending; observations keep
        their source order.
        """

        for group in sorted(self.trophic_groups):
            bucket = self.trophic_groups[group]
            for species in sorted(bucket):
                yield group, species, bucket[species]


def detect_wire_format(payload: object) -> WireFormat | None:
    """Return the dataset wire format of a payload, or None for non-datasets.

    Chart descriptions (``{"data", "layout"}``) are never datasets even when
    they happen to carry dataset-like keys.
    """

    if not isinstance(payload, Mapping):
        return None
    if "data" in payload and "layout" in payload:
        return None
    if "cas" not in payload:
        return None
    if "trophic_groups" in payload:
        return "nested"
    if "endpoints" in payload:
        return "flat"
    return None


def is_dataset_payload(payload: object) -> bool:
    """Return True when `payload` is an EC10eq dataset in either wire format."""

    return detect_wire_format(payload) is not None


def parse_dataset(payload: object) -> Ec10eqDataset:
    """Decode a nested or flat EC10eq payload.

    Args:
        payload: Decoded JSON payload from the upstream API.

    Returns:
        Ec10eqDataset in the canonical nested representation.

    Raises:
        DatasetShapeError: When the payload is not a dataset or is malformed.
    """

    wire_format = detect_wire_format(payload)
    if wire_format is None:
        raise DatasetShapeError("Payload is not an EC10eq dataset (expected 'trophic_groups' or 'endpoints').")
    assert isinstance(payload, Mapping)

    cas = str(payload.get("cas") or "").strip()
    if not cas:
        raise DatasetShapeError("EC10eq dataset is missing its CAS number.")
    name = payload.get("chemical_name")
    chemical_name = (str(name).strip() or None) if name is not None else None

    if wire_format == "nested":
        groups = _decode_nested(payload.get("trophic_groups"))
    else:
        groups = _decode_flat(payload.get("endpoints"))

    frozen = {
        group: MappingProxyType({species: tuple(obs) for species, obs in bucket.items()})
        for group, bucket in groups.items()
    }
    return Ec10eqDataset(cas=cas, chemical_name=chemical_name, trophic_groups=MappingProxyType(frozen))


def _decode_nested(raw: object) -> dict[str, dict[str, list[Observation]]]:
    """Decode the nested ``trophic_groups`` mapping."""

    if not isinstance(raw, Mapping):
        raise DatasetShapeError("'trophic_groups' must be a mapping of trophic group -> species.")

    groups: dict[str, dict[str, list[Observation]]] = {}
    for group, species_map in raw.items():
        if not isinstance(species_map, Mapping):
            raise DatasetShapeError(f"Trophic group {group!r} must map species to observation lists.")
        bucket: dict[str, list[Observation]] = {}
        for species, rows in species_map.items():
            if not isinstance(rows, list):
                raise DatasetShapeError(f"Observations for {group!r} / {species!r} must be a list.")
            bucket[str(species)] = [_decode_observation(row, where=f"{group} - {species}") for row in rows]
        groups[str(group)] = bucket
    return groups


def _decode_flat(raw: object) -> dict[str, dict[str, list[Observation]]]:
    """Group flat endpoint records by trophic group, then species (first-seen order)."""

    if not isinstance(raw, list):
        raise DatasetShapeError("'endpoints' must be a list of endpoint records.")

    groups: dict[str, dict[str, list[Observation]]] = {}
    for idx, row in enumerate(raw):
        if not isinstance(row, Mapping):
            raise DatasetShapeError(f"endpoints[{idx}] must be an object.")
        group = row.get("trophic_group")
        species = row.get("species")
        if group is None or species is None:
            raise DatasetShapeError(f"endpoints[{idx}] requires 'trophic_group' and 'species'.")
        observation = _decode_observation(row, where=f"endpoints[{idx}]")
        groups.setdefault(str(group), {}).setdefault(str(species), []).append(observation)
    return groups


def _decode_observation(row: object, *, where: str) -> Observation:
    """Decode one observation record."""

    if not isinstance(row, Mapping):
        raise DatasetShapeError(f"Observation in {where} must be an object.")
    value = _parse_value(row.get(VALUE_KEY))
    if value is None:
        raise DatasetShapeError(f"Observation in {where} has no finite {VALUE_KEY} value.")

    author = row.get("author")
    return Observation(
        value=value,
        test_id=_parse_test_id(row.get("test_id")),
        year=_parse_int(row.get("year")),
        author=str(author) if author is not None else None,
    )


def _parse_value(value: Any) -> float | None:
    """Parse a finite float, rejecting booleans and non-numeric strings."""

    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def _parse_test_id(value: Any) -> int | str | None:
    """Keep integer test ids as ints, anything else as a string."""

    if value is None or value == "":
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return str(value)


def _parse_int(value: Any) -> int | None:
    """Best-effort int parsing for optional fields."""

    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        try:
            return int(float(str(value)))
        except (OverflowError, ValueError):
            return None
