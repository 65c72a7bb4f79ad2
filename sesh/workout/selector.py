"""Exercise lookup and duration-bounded warm-up selection."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, Sequence

from loguru import logger

from sesh.workout.estimator import estimate_total_sec
from sesh.workout.library import Catalog
from sesh.workout.model import Filter, TimedItem, valid_items

FINGER_TARGETS = frozenset({"finger", "finger_joints", "wrist", "grip_strength"})
SHOULDER_TARGETS = frozenset({"scapula", "upper_back", "neck", "rotator_cuff"})

WARMUP_FRACTION = 0.2
WARMUP_MIN_MINUTES = 2
WARMUP_MAX_MINUTES = 10


@dataclass(frozen=True)
class WarmupGroups:
    finger: tuple[TimedItem, ...]
    shoulder: tuple[TimedItem, ...]
    other: tuple[TimedItem, ...]


@dataclass(frozen=True)
class SessionPlan:
    filter: Filter
    warmups: tuple[TimedItem, ...]
    exercises: tuple[TimedItem, ...]

    @property
    def items(self) -> tuple[TimedItem, ...]:
        return self.warmups + self.exercises

    def estimated_total_sec(self, prep_sec: int) -> int:
        return estimate_total_sec(self.items, prep_sec)


def warmup_budget_sec(
    session_minutes: int,
    *,
    fraction: float = WARMUP_FRACTION,
    min_minutes: float = WARMUP_MIN_MINUTES,
    max_minutes: float = WARMUP_MAX_MINUTES,
) -> int:
    minutes = min(max(session_minutes * fraction, min_minutes), max_minutes)
    return int(round(minutes * 60))


def partition_warmups(pool: Iterable[TimedItem]) -> WarmupGroups:
    finger: list[TimedItem] = []
    shoulder: list[TimedItem] = []
    other: list[TimedItem] = []
    for item in pool:
        if item.targets & FINGER_TARGETS:
            finger.append(item)
        elif item.targets & SHOULDER_TARGETS:
            shoulder.append(item)
        else:
            other.append(item)
    return WarmupGroups(tuple(finger), tuple(shoulder), tuple(other))


def select_warmups(
    pool: Iterable[TimedItem],
    target_sec: int,
    rng: random.Random | None = None,
) -> tuple[TimedItem, ...]:
    """Pick warm-ups whose combined duration stays within ``target_sec``.

    One finger/wrist item and one shoulder/upper-back item are taken first
    when any of them fits; the remaining budget is filled from the other
    candidates in random order.
    """
    source = rng or random.Random()
    groups = partition_warmups(valid_items(list(pool)))

    selected: list[TimedItem] = []
    accumulated = 0

    # Leave room for the shortest shoulder item so both groups can be covered.
    reserve = min(
        (item.duration_sec for item in groups.shoulder if item.duration_sec <= target_sec),
        default=0,
    )
    finger_order = _shuffled(groups.finger, source)
    finger_pick = _first_fit(finger_order, target_sec - reserve) or _first_fit(
        finger_order, target_sec
    )
    if finger_pick is not None:
        selected.append(finger_pick)
        accumulated += finger_pick.duration_sec

    shoulder_pick = _first_fit(_shuffled(groups.shoulder, source), target_sec - accumulated)
    if shoulder_pick is not None:
        selected.append(shoulder_pick)
        accumulated += shoulder_pick.duration_sec

    for item in _shuffled(groups.other, source):
        if accumulated >= target_sec:
            break
        if accumulated + item.duration_sec <= target_sec:
            selected.append(item)
            accumulated += item.duration_sec

    logger.debug(
        "Selected {} warm-ups ({}s of {}s budget)", len(selected), accumulated, target_sec
    )
    return tuple(selected)


def _first_fit(items: Sequence[TimedItem], budget_sec: int) -> TimedItem | None:
    return next((item for item in items if item.duration_sec <= budget_sec), None)


def _shuffled(items: Sequence[TimedItem], rng: random.Random) -> list[TimedItem]:
    out = list(items)
    rng.shuffle(out)
    return out


def build_session_plan(
    catalog: Catalog,
    flt: Filter,
    warmup_pool: Iterable[TimedItem] | None = None,
    rng: random.Random | None = None,
    *,
    warmup_fraction: float = WARMUP_FRACTION,
    warmup_min_minutes: float = WARMUP_MIN_MINUTES,
    warmup_max_minutes: float = WARMUP_MAX_MINUTES,
) -> SessionPlan:
    exercises = valid_items(catalog.lookup(flt))
    warmups: tuple[TimedItem, ...] = ()
    if warmup_pool is not None:
        budget = warmup_budget_sec(
            flt.duration,
            fraction=warmup_fraction,
            min_minutes=warmup_min_minutes,
            max_minutes=warmup_max_minutes,
        )
        warmups = select_warmups(warmup_pool, budget, rng=rng)
    return SessionPlan(filter=flt, warmups=warmups, exercises=exercises)
