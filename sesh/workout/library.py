"""Read-only protocol catalog and the bundled hangboard dataset."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Iterable

from loguru import logger

from sesh.workout.model import Filter, ProtocolEntry, TimedItem
from sesh.workout.parser import load_catalog, load_warmups

DATA_DIR = Path(__file__).resolve().parent / "data"
CATALOG_FILE = DATA_DIR / "catalog.json"
WARMUPS_FILE = DATA_DIR / "warmups.json"


class CatalogLookupError(LookupError):
    """Raised when a filter key is missing from the catalog."""

    def __init__(
        self,
        message: str,
        *,
        protocol: str,
        intensity: str | None = None,
        duration: int | None = None,
    ) -> None:
        super().__init__(message)
        self.protocol = protocol
        self.intensity = intensity
        self.duration = duration


class Catalog:
    def __init__(self, protocols: Iterable[ProtocolEntry]) -> None:
        self._protocols: dict[str, ProtocolEntry] = {p.name: p for p in protocols}

    def protocols(self) -> tuple[str, ...]:
        return tuple(self._protocols)

    def describe(self, protocol_name: str) -> str:
        return self._protocol(protocol_name).description

    def intensity_levels(self, protocol_name: str) -> tuple[str, ...]:
        return tuple(self._protocol(protocol_name).intensity_levels)

    def durations(self, protocol_name: str, intensity_level: str) -> tuple[int, ...]:
        protocol = self._protocol(protocol_name)
        intensity = protocol.intensity_levels.get(intensity_level)
        if intensity is None:
            raise _fail(
                f"Intensity level '{intensity_level}' not found in protocol '{protocol_name}'.",
                protocol=protocol_name,
                intensity=intensity_level,
            )
        return tuple(sorted(intensity.durations))

    def lookup(self, flt: Filter) -> tuple[TimedItem, ...]:
        protocol = self._protocol(flt.protocol_name)

        intensity = protocol.intensity_levels.get(flt.intensity_level)
        if intensity is None:
            raise _fail(
                f"Intensity level '{flt.intensity_level}' not found in protocol "
                f"'{flt.protocol_name}'.",
                protocol=flt.protocol_name,
                intensity=flt.intensity_level,
                duration=flt.duration,
            )

        entry = intensity.durations.get(flt.duration)
        if entry is None:
            raise _fail(
                f"Duration '{flt.duration}' not found in intensity level "
                f"'{flt.intensity_level}' of protocol '{flt.protocol_name}'.",
                protocol=flt.protocol_name,
                intensity=flt.intensity_level,
                duration=flt.duration,
            )
        return entry.items

    def _protocol(self, protocol_name: str) -> ProtocolEntry:
        protocol = self._protocols.get(protocol_name)
        if protocol is None:
            raise _fail(f"Protocol '{protocol_name}' not found.", protocol=protocol_name)
        return protocol


def _fail(
    message: str,
    *,
    protocol: str,
    intensity: str | None = None,
    duration: int | None = None,
) -> CatalogLookupError:
    logger.warning(message)
    return CatalogLookupError(message, protocol=protocol, intensity=intensity, duration=duration)


def distinct_targets(pool: Iterable[TimedItem]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for item in pool:
        for target in sorted(item.targets):
            seen.setdefault(target, None)
    return tuple(seen)


@lru_cache(maxsize=None)
def default_catalog() -> Catalog:
    return Catalog(load_catalog(CATALOG_FILE))


@lru_cache(maxsize=None)
def default_warmups() -> tuple[TimedItem, ...]:
    return load_warmups(WARMUPS_FILE)
