"""Phase state machine for guided hangboard and warm-up sessions."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Iterable, Optional

from loguru import logger

from sesh.workout.estimator import estimate_total_sec, format_clock
from sesh.workout.model import Phase, TimedItem, valid_items


@dataclass(frozen=True)
class PhaseLabels:
    prep: str
    work: str
    rest_rep: str
    rest_set: str
    finished: str

    def for_phase(self, phase: Phase) -> str:
        return {
            "PREP": self.prep,
            "WORK": self.work,
            "REST_REP": self.rest_rep,
            "REST_SET": self.rest_set,
            "FINISHED": self.finished,
        }[phase]


WORKOUT_LABELS = PhaseLabels(
    prep="Get Ready",
    work="HANG!",
    rest_rep="Rest",
    rest_set="Set Rest",
    finished="Session Complete!",
)
WARMUP_LABELS = PhaseLabels(
    prep="Get Ready",
    work="WORK",
    rest_rep="Rest",
    rest_set="Set Rest",
    finished="Warm-up Complete!",
)


@dataclass(frozen=True)
class SessionState:
    item_index: int
    current_set: int
    current_rep: int
    phase: Phase
    phase_sec_left: int
    total_sec_left: int
    paused: bool = False


@dataclass(frozen=True)
class SessionProgress:
    item_index: int
    item_total: int
    item_label: str
    item_detail: str
    next_label: str | None
    current_set: int
    set_total: int
    current_rep: int
    rep_total: int
    phase: Phase
    phase_label: str
    phase_sec_left: int
    total_sec_left: int
    paused: bool

    @property
    def phase_display(self) -> str:
        return format_clock(self.phase_sec_left)

    @property
    def total_display(self) -> str:
        return format_clock(self.total_sec_left)

    @property
    def finished(self) -> bool:
        return self.phase == "FINISHED"


CompleteCallback = Callable[[], None]

_FINISHED_STATE = SessionState(
    item_index=0,
    current_set=0,
    current_rep=0,
    phase="FINISHED",
    phase_sec_left=0,
    total_sec_left=0,
)


class SessionEngine:
    """Owns the session state; mutated only by ``tick`` and the command methods."""

    def __init__(
        self,
        items: Iterable[TimedItem],
        prep_sec: int = 5,
        labels: PhaseLabels = WORKOUT_LABELS,
        on_complete: Optional[CompleteCallback] = None,
    ) -> None:
        self._items = valid_items(list(items))
        self._prep_sec = max(0, prep_sec)
        self._labels = labels
        self._on_complete = on_complete
        self._completion_sent = False

        if self._items:
            self._state = SessionState(
                item_index=0,
                current_set=1,
                current_rep=1,
                phase="PREP",
                phase_sec_left=self._prep_sec,
                total_sec_left=estimate_total_sec(self._items, self._prep_sec),
            )
        else:
            self._state = _FINISHED_STATE

    @property
    def items(self) -> tuple[TimedItem, ...]:
        return self._items

    @property
    def prep_sec(self) -> int:
        return self._prep_sec

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def finished(self) -> bool:
        return self._state.phase == "FINISHED"

    @property
    def paused(self) -> bool:
        return self._state.paused

    @property
    def is_empty(self) -> bool:
        return not self._items

    def progress(self) -> SessionProgress:
        s = self._state
        item = self._items[s.item_index] if self._items else None
        next_index = s.item_index + 1
        next_label = (
            self._items[next_index].label
            if s.phase != "FINISHED" and next_index < len(self._items)
            else None
        )
        return SessionProgress(
            item_index=s.item_index,
            item_total=len(self._items),
            item_label=item.label if item else "",
            item_detail=item.secondary_label if item else "",
            next_label=next_label,
            current_set=s.current_set,
            set_total=item.sets if item else 0,
            current_rep=s.current_rep,
            rep_total=item.reps if item else 0,
            phase=s.phase,
            phase_label=self._labels.for_phase(s.phase),
            phase_sec_left=s.phase_sec_left,
            total_sec_left=s.total_sec_left,
            paused=s.paused,
        )

    def tick(self) -> bool:
        """Consume one clock second. Returns False when the clock should be idle."""
        s = self._state
        if s.paused or s.phase == "FINISHED":
            return False

        phase_left = max(0, s.phase_sec_left - 1)
        total_left = max(0, s.total_sec_left - 1)
        if phase_left > 0:
            self._state = replace(s, phase_sec_left=phase_left, total_sec_left=total_left)
            return True

        self._state = replace(s, total_sec_left=total_left)
        self._advance()
        return True

    def toggle_pause(self) -> None:
        if self.finished:
            return
        self._state = replace(self._state, paused=not self._state.paused)
        logger.debug("Session {}", "paused" if self._state.paused else "resumed")

    def skip_phase(self) -> None:
        s = self._state
        if s.paused or s.phase == "FINISHED":
            return
        skipped = s.phase_sec_left
        self._state = replace(s, total_sec_left=max(0, s.total_sec_left - skipped))
        self._advance()

    def skip_item(self) -> None:
        s = self._state
        if s.paused or s.phase == "FINISHED":
            return

        next_index = s.item_index + 1
        if next_index >= len(self._items):
            self._finish()
            return

        # Recompute the remainder from the next item; never give back time.
        remaining = estimate_total_sec(self._items[next_index:], self._prep_sec)
        total_left = min(remaining, max(0, s.total_sec_left - s.phase_sec_left))
        self._state = replace(
            s,
            item_index=next_index,
            current_set=1,
            current_rep=1,
            phase="PREP",
            phase_sec_left=self._prep_sec,
            total_sec_left=total_left,
        )
        logger.debug("Skipped to item {}/{}", next_index + 1, len(self._items))

    def finish_early(self) -> None:
        if self.finished:
            return
        self._state = replace(
            self._state,
            phase="FINISHED",
            phase_sec_left=0,
            total_sec_left=0,
            paused=True,
        )
        logger.info("Session finished early")
        self._notify_complete()

    def _advance(self) -> None:
        s = self._state
        item = self._items[s.item_index]

        if s.phase in ("PREP", "REST_REP", "REST_SET"):
            self._state = replace(s, phase="WORK", phase_sec_left=item.work_sec)
        elif s.phase == "WORK":
            if s.current_rep < item.reps:
                self._state = replace(
                    s,
                    phase="REST_REP",
                    phase_sec_left=item.rest_rep_sec,
                    current_rep=s.current_rep + 1,
                )
            elif s.current_set < item.sets:
                self._state = replace(
                    s,
                    phase="REST_SET",
                    phase_sec_left=item.rest_set_sec,
                    current_set=s.current_set + 1,
                    current_rep=1,
                )
            elif s.item_index < len(self._items) - 1:
                self._state = replace(
                    s,
                    phase="PREP",
                    phase_sec_left=self._prep_sec,
                    item_index=s.item_index + 1,
                    current_set=1,
                    current_rep=1,
                )
            else:
                self._finish()
                return
        logger.debug(
            "Phase {} -> {} (item {}, set {}, rep {})",
            s.phase,
            self._state.phase,
            self._state.item_index + 1,
            self._state.current_set,
            self._state.current_rep,
        )

    def _finish(self) -> None:
        self._state = replace(
            self._state, phase="FINISHED", phase_sec_left=0, total_sec_left=0
        )
        logger.info("Session complete ({} items)", len(self._items))
        self._notify_complete()

    def _notify_complete(self) -> None:
        if self._completion_sent:
            return
        self._completion_sent = True
        if self._on_complete is not None:
            self._on_complete()
