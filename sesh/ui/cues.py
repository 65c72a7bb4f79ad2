"""Audio cue decisions derived from session progress snapshots."""

from __future__ import annotations

from typing import Literal

from sesh.workout.engine import SessionProgress
from sesh.workout.model import REST_PHASES

Cue = Literal["countdown", "rest_start", "rest_stop"]

COUNTDOWN_PHASES = frozenset({"PREP", "REST_REP", "REST_SET"})


class CueTracker:
    """Turn progress updates into start/stop edges for the audio player.

    The rest loop plays exactly while a rest phase is running unpaused; the
    countdown fires once per phase when ``countdown_at`` seconds remain
    before work starts.
    """

    def __init__(self, countdown_at: int = 3) -> None:
        self._countdown_at = countdown_at
        self._rest_playing = False
        self._last_countdown: tuple[int, int, int, str] | None = None

    @property
    def rest_playing(self) -> bool:
        return self._rest_playing

    def reset(self) -> None:
        self._rest_playing = False
        self._last_countdown = None

    def update(self, progress: SessionProgress) -> list[Cue]:
        cues: list[Cue] = []

        in_rest = progress.phase in REST_PHASES and not progress.paused
        if in_rest and not self._rest_playing:
            self._rest_playing = True
            cues.append("rest_start")
        elif not in_rest and self._rest_playing:
            self._rest_playing = False
            cues.append("rest_stop")

        if (
            not progress.paused
            and progress.phase in COUNTDOWN_PHASES
            and progress.phase_sec_left == self._countdown_at
        ):
            key = (
                progress.item_index,
                progress.current_set,
                progress.current_rep,
                progress.phase,
            )
            if key != self._last_countdown:
                self._last_countdown = key
                cues.append("countdown")
        return cues
