"""One-second clock that drives a session engine on the asyncio loop."""

from __future__ import annotations

import asyncio
from typing import Callable, Optional

from loguru import logger

from sesh.workout.engine import SessionEngine, SessionProgress


ProgressCallback = Callable[[SessionProgress], None]
FinishCallback = Callable[[bool], None]


class SessionRunner:
    def __init__(self, tick_sec: float = 1.0) -> None:
        if tick_sec <= 0:
            raise ValueError("tick_sec must be > 0")
        self._tick_sec = tick_sec
        self._engine: Optional[SessionEngine] = None
        self._task: Optional[asyncio.Task[None]] = None
        self._stop_event = asyncio.Event()
        self._resume_event = asyncio.Event()
        self._on_progress: Optional[ProgressCallback] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def engine(self) -> Optional[SessionEngine]:
        return self._engine

    async def start(
        self,
        engine: SessionEngine,
        on_progress: ProgressCallback,
        on_finish: FinishCallback,
    ) -> None:
        if self.is_running:
            raise RuntimeError("Session already running")

        self._engine = engine
        self._on_progress = on_progress
        self._stop_event = asyncio.Event()
        self._resume_event = asyncio.Event()
        self._sync_clock_gate()
        on_progress(engine.progress())
        self._task = asyncio.create_task(self._run(engine, on_progress, on_finish))

    async def stop(self) -> None:
        if not self.is_running:
            return

        self._stop_event.set()
        self._resume_event.set()
        assert self._task is not None
        await self._task
        self._task = None

    def toggle_pause(self) -> None:
        self._command(lambda engine: engine.toggle_pause())

    def skip_phase(self) -> None:
        self._command(lambda engine: engine.skip_phase())

    def skip_item(self) -> None:
        self._command(lambda engine: engine.skip_item())

    def finish_early(self) -> None:
        self._command(lambda engine: engine.finish_early())

    def _command(self, action: Callable[[SessionEngine], None]) -> None:
        if self._engine is None or not self.is_running:
            return
        action(self._engine)
        self._sync_clock_gate()
        if self._on_progress is not None:
            self._on_progress(self._engine.progress())

    def _sync_clock_gate(self) -> None:
        assert self._engine is not None
        if self._engine.paused and not self._engine.finished:
            self._resume_event.clear()
        else:
            self._resume_event.set()

    async def _run(
        self,
        engine: SessionEngine,
        on_progress: ProgressCallback,
        on_finish: FinishCallback,
    ) -> None:
        completed = False
        try:
            while not self._stop_event.is_set() and not engine.finished:
                await self._resume_event.wait()
                if self._stop_event.is_set() or engine.finished:
                    break
                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=self._tick_sec)
                    break
                except asyncio.TimeoutError:
                    pass
                if engine.tick():
                    on_progress(engine.progress())
            completed = engine.finished and not self._stop_event.is_set()
        finally:
            logger.info("Session clock stopped (completed={})", completed)
            on_finish(completed)
