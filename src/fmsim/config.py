"""
Run configuration and JSON scenario files.

A scenario file holds the two setup catalogs and, optionally, run settings::

    {
        "machine_types": [
            {"name": "Lathe", "mttf_days": 120, "repair_days": 3, "quantity": 8}
        ],
        "adjuster_groups": [
            {"id": "A", "count": 2, "machine_types": ["Lathe"]}
        ],
        "simulation": {"years": 2, "seed": 42, "recent_events": 10}
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from fmsim.catalog import Catalog
from fmsim.errors import ConfigurationError

DAYS_PER_YEAR = 365
MAX_YEARS = 1000
RECENT_EVENTS = 10


def _check_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer (got {value!r})")


@dataclass(frozen=True)
class SimulationConfig:
    """Settings for a run. ``seed=None`` seeds the failure clock from OS entropy."""

    years: int = 1
    seed: int | None = None
    days_per_year: int = DAYS_PER_YEAR
    recent_events: int = RECENT_EVENTS

    def __post_init__(self) -> None:
        for name in ("years", "days_per_year", "recent_events"):
            _check_int(name, getattr(self, name))
        if self.seed is not None:
            _check_int("seed", self.seed)
        if self.years < 1 or self.years > MAX_YEARS:
            raise ConfigurationError(f"years must be between 1 and {MAX_YEARS} (got {self.years})")
        if self.days_per_year < 1:
            raise ConfigurationError("days_per_year must be positive")
        if self.recent_events < 0:
            raise ConfigurationError("recent_events cannot be negative")

    @property
    def horizon_days(self) -> int:
        return self.years * self.days_per_year

    def with_overrides(self, **changes: Any) -> SimulationConfig:
        """Copy with the given fields replaced; ``None`` values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _field(record: dict[str, Any], key: str, where: str) -> Any:
    try:
        return record[key]
    except KeyError:
        raise ConfigurationError(f"{where}: missing field {key!r}") from None


def _records(data: dict[str, Any], key: str) -> list[Any]:
    records = data.get(key, [])
    if not isinstance(records, list):
        raise ConfigurationError(f"{key}: expected a list")
    return records


def catalog_from_dict(data: dict[str, Any]) -> Catalog:
    """Build a catalog from the ``machine_types`` and ``adjuster_groups`` lists."""
    if not isinstance(data, dict):
        raise ConfigurationError("Scenario must be a JSON object")

    catalog = Catalog()
    for i, record in enumerate(_records(data, "machine_types")):
        where = f"machine_types[{i}]"
        if not isinstance(record, dict):
            raise ConfigurationError(f"{where}: expected an object")
        catalog.add_machine_type(
            _field(record, "name", where),
            _field(record, "mttf_days", where),
            _field(record, "repair_days", where),
            _field(record, "quantity", where),
        )
    for i, record in enumerate(_records(data, "adjuster_groups")):
        where = f"adjuster_groups[{i}]"
        if not isinstance(record, dict):
            raise ConfigurationError(f"{where}: expected an object")
        machine_types = _field(record, "machine_types", where)
        if isinstance(machine_types, str) or not isinstance(machine_types, list):
            raise ConfigurationError(f"{where}: machine_types must be a list of names")
        catalog.add_adjuster_group(
            _field(record, "id", where),
            _field(record, "count", where),
            machine_types,
        )
    return catalog


def config_from_dict(data: dict[str, Any]) -> SimulationConfig:
    settings = data.get("simulation") or {}
    if not isinstance(settings, dict):
        raise ConfigurationError("simulation: expected an object")
    known = {"years", "seed", "days_per_year", "recent_events"}
    unknown = set(settings) - known
    if unknown:
        raise ConfigurationError(f"simulation: unknown field(s) {', '.join(sorted(unknown))}")
    return SimulationConfig(**settings)


def load_scenario(path: Path | str) -> tuple[Catalog, SimulationConfig]:
    """Read a JSON scenario file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        raise ConfigurationError(f"{path}: not a UTF-8 text file ({exc})") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"{path}: invalid JSON ({exc})") from exc
    return catalog_from_dict(data), config_from_dict(data)
