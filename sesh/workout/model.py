"""Session domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


Phase = Literal["PREP", "WORK", "REST_REP", "REST_SET", "FINISHED"]
IntensityLevel = Literal["Low", "Medium", "High"]

PHASES: tuple[Phase, ...] = ("PREP", "WORK", "REST_REP", "REST_SET", "FINISHED")
REST_PHASES: frozenset[Phase] = frozenset({"REST_REP", "REST_SET"})

PROTOCOL_NAMES: tuple[str, ...] = (
    "Short Maximal Hangs",
    "Longer Hangs (Strength-Endurance)",
    "Classic 7:3 Repeaters",
    "6:10 Heavy Repeaters",
    "10:5 Repeaters",
    "Frequent Low-Intensity Hangs (e.g., Abrahangs)",
    "Active Recovery Hangs",
)
INTENSITY_LEVELS: tuple[IntensityLevel, ...] = ("Low", "Medium", "High")
DURATIONS_MIN: tuple[int, ...] = (10, 15, 20, 25, 30)


@dataclass(frozen=True)
class TimedItem:
    label: str
    work_sec: int
    rest_rep_sec: int
    reps: int
    sets: int
    rest_set_sec: int
    secondary_label: str = ""
    intensity_note: str = ""
    targets: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_valid(self) -> bool:
        return self.reps > 0 and self.sets > 0 and self.work_sec > 0

    @property
    def duration_sec(self) -> int:
        """Active time of the item: hangs, rests between reps and between sets."""
        per_set = self.reps * self.work_sec + max(0, self.reps - 1) * self.rest_rep_sec
        return self.sets * per_set + max(0, self.sets - 1) * self.rest_set_sec


@dataclass(frozen=True)
class Filter:
    protocol_name: str
    intensity_level: str
    duration: int


@dataclass(frozen=True)
class DurationEntry:
    duration: int
    estimated_time: str
    items: tuple[TimedItem, ...]


@dataclass(frozen=True)
class IntensityEntry:
    level: str
    description: str
    durations: dict[int, DurationEntry]


@dataclass(frozen=True)
class ProtocolEntry:
    name: str
    description: str
    intensity_levels: dict[str, IntensityEntry]


def valid_items(items: tuple[TimedItem, ...] | list[TimedItem]) -> tuple[TimedItem, ...]:
    return tuple(item for item in items if item.is_valid)
