from __future__ import annotations

import asyncio

import pytest

from sesh.ui import web_app
from sesh.ui.cues import CueTracker
from sesh.ui.web_app import WebState, drain_cues, make_progress_handler
from sesh.workout.engine import SessionEngine
from sesh.workout.model import TimedItem
from sesh.workout.runner import SessionRunner


def _item() -> TimedItem:
    return TimedItem(
        label="Half-Crimp",
        work_sec=1,
        rest_rep_sec=3,
        reps=2,
        sets=1,
        rest_set_sec=0,
    )


def test_runner_updates_queue_cues_without_page_calls(monkeypatch: pytest.MonkeyPatch) -> None:
    def _no_slot(*_args: object, **_kwargs: object) -> None:
        raise RuntimeError("The current slot cannot be determined")

    monkeypatch.setattr(web_app.ui, "run_javascript", _no_slot)

    async def _run() -> None:
        state = WebState()
        on_progress = make_progress_handler(state, CueTracker(countdown_at=3))
        runner = SessionRunner(tick_sec=0.005)
        finishes: list[bool] = []
        done = asyncio.Event()

        def on_finish(completed: bool) -> None:
            finishes.append(completed)
            done.set()

        await runner.start(SessionEngine([_item()], prep_sec=3), on_progress, on_finish)
        await asyncio.wait_for(done.wait(), timeout=5.0)
        await runner.stop()

        assert finishes == [True]
        assert state.progress is not None and state.progress.finished
        assert state.pending_cues.count("countdown") == 2
        assert "rest_start" in state.pending_cues
        assert "rest_stop" in state.pending_cues

    asyncio.run(_run())


def test_drain_cues_empties_queue_and_respects_sound_switch() -> None:
    state = WebState(pending_cues=["countdown", "rest_start"])
    assert drain_cues(state) == ["countdown", "rest_start"]
    assert state.pending_cues == []
    assert drain_cues(state) == []

    state.sound = False
    state.pending_cues.append("countdown")
    assert drain_cues(state) == []
    assert state.pending_cues == []
