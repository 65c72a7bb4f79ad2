"""Async controller shared by the terminal and web front-ends."""

from __future__ import annotations

import random
from typing import Callable, Iterable

from sesh.core.config import SessionConfig
from sesh.workout.engine import (
    WARMUP_LABELS,
    WORKOUT_LABELS,
    PhaseLabels,
    SessionEngine,
    SessionProgress,
)
from sesh.workout.library import Catalog, default_catalog, default_warmups
from sesh.workout.model import Filter, TimedItem
from sesh.workout.parser import load_catalog, load_warmups
from sesh.workout.runner import SessionRunner
from sesh.workout.selector import SessionPlan, build_session_plan


class UIController:
    def __init__(
        self,
        config: SessionConfig | None = None,
        catalog: Catalog | None = None,
        warmup_pool: Iterable[TimedItem] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config or SessionConfig()
        self._catalog = catalog or _resolve_catalog(self._config)
        self._warmup_pool = (
            tuple(warmup_pool) if warmup_pool is not None else _resolve_warmups(self._config)
        )
        self._rng = rng
        self._runner = SessionRunner(tick_sec=self._config.tick_sec)

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def warmup_pool(self) -> tuple[TimedItem, ...]:
        return self._warmup_pool

    def plan(self, flt: Filter, with_warmup: bool = True) -> SessionPlan:
        return build_session_plan(
            self._catalog,
            flt,
            self._warmup_pool if with_warmup else None,
            rng=self._rng,
            warmup_fraction=self._config.warmup_fraction,
            warmup_min_minutes=self._config.warmup_min_minutes,
            warmup_max_minutes=self._config.warmup_max_minutes,
        )

    async def start_warmup(
        self,
        plan: SessionPlan,
        on_progress: Callable[[SessionProgress], None],
        on_finish: Callable[[bool], None],
    ) -> SessionEngine:
        return await self.start_session(plan.warmups, WARMUP_LABELS, on_progress, on_finish)

    async def start_workout(
        self,
        plan: SessionPlan,
        on_progress: Callable[[SessionProgress], None],
        on_finish: Callable[[bool], None],
    ) -> SessionEngine:
        return await self.start_session(plan.exercises, WORKOUT_LABELS, on_progress, on_finish)

    async def start_session(
        self,
        items: Iterable[TimedItem],
        labels: PhaseLabels,
        on_progress: Callable[[SessionProgress], None],
        on_finish: Callable[[bool], None],
    ) -> SessionEngine:
        engine = SessionEngine(items, prep_sec=self._config.prep_sec, labels=labels)
        await self._runner.start(engine, on_progress, on_finish)
        return engine

    async def stop_session(self) -> None:
        await self._runner.stop()

    def toggle_pause(self) -> None:
        self._runner.toggle_pause()

    def skip_phase(self) -> None:
        self._runner.skip_phase()

    def skip_item(self) -> None:
        self._runner.skip_item()

    def finish_early(self) -> None:
        self._runner.finish_early()

    @property
    def session_running(self) -> bool:
        return self._runner.is_running


def _resolve_catalog(config: SessionConfig) -> Catalog:
    if config.catalog_path is not None:
        return Catalog(load_catalog(config.catalog_path))
    return default_catalog()


def _resolve_warmups(config: SessionConfig) -> tuple[TimedItem, ...]:
    if config.warmups_path is not None:
        return load_warmups(config.warmups_path)
    return default_warmups()
