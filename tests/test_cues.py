from __future__ import annotations

from sesh.ui.cues import CueTracker
from sesh.workout.engine import SessionEngine
from sesh.workout.model import TimedItem


def _engine() -> SessionEngine:
    item = TimedItem(
        label="Half-Crimp", work_sec=2, rest_rep_sec=4, reps=2, sets=2, rest_set_sec=5
    )
    return SessionEngine([item], prep_sec=5)


def test_countdown_fires_once_before_each_work_phase() -> None:
    engine = _engine()
    tracker = CueTracker(countdown_at=3)
    countdowns: list[str] = []

    tracker.update(engine.progress())
    while not engine.finished:
        engine.tick()
        progress = engine.progress()
        if "countdown" in tracker.update(progress):
            countdowns.append(progress.phase)
        # a repeated snapshot must not re-trigger
        assert "countdown" not in tracker.update(progress)

    assert countdowns == ["PREP", "REST_REP", "REST_SET", "REST_REP"]


def test_rest_loop_follows_rest_phases_and_pause() -> None:
    engine = _engine()
    tracker = CueTracker()

    engine.skip_phase()
    assert tracker.update(engine.progress()) == []

    engine.skip_phase()
    assert engine.state.phase == "REST_REP"
    assert tracker.update(engine.progress()) == ["rest_start"]
    assert tracker.rest_playing

    engine.toggle_pause()
    assert tracker.update(engine.progress()) == ["rest_stop"]

    engine.toggle_pause()
    assert tracker.update(engine.progress()) == ["rest_start"]

    engine.skip_phase()
    assert engine.state.phase == "WORK"
    assert tracker.update(engine.progress()) == ["rest_stop"]
    assert not tracker.rest_playing


def test_no_countdown_while_paused() -> None:
    engine = _engine()
    tracker = CueTracker(countdown_at=3)
    engine.tick()
    engine.tick()
    engine.toggle_pause()

    assert engine.progress().phase_sec_left == 3
    assert tracker.update(engine.progress()) == []

    engine.toggle_pause()
    assert tracker.update(engine.progress()) == ["countdown"]
