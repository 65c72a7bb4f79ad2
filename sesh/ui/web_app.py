"""NiceGUI web UI for guided hangboard sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from nicegui import ui

from sesh.ui.controller import UIController
from sesh.ui.cues import Cue, CueTracker
from sesh.workout.engine import SessionProgress
from sesh.workout.estimator import format_clock
from sesh.workout.library import CatalogLookupError
from sesh.workout.model import Filter, TimedItem
from sesh.workout.selector import SessionPlan

PHASE_COLORS = {
    "PREP": "#60a5fa",
    "WORK": "#ef4444",
    "REST_REP": "#22c55e",
    "REST_SET": "#eab308",
    "FINISHED": "#4ade80",
}

_BEEP_JS = """
(() => {{
  const ctx = new (window.AudioContext || window.webkitAudioContext)();
  const osc = ctx.createOscillator();
  const gain = ctx.createGain();
  osc.type = 'sine';
  osc.frequency.value = {freq};
  gain.gain.value = 0.05;
  osc.connect(gain);
  gain.connect(ctx.destination);
  osc.start();
  setTimeout(() => {{ osc.stop(); ctx.close(); }}, {ms});
}})();
"""


@dataclass
class WebState:
    status: str = "Pick a protocol"
    plan: SessionPlan | None = None
    progress: SessionProgress | None = None
    stage: str = "setup"  # setup | warmup | workout
    sound: bool = True
    pending_cues: list[Cue] = field(default_factory=list)


def _item_line(item: TimedItem) -> str:
    edge = f" - {item.secondary_label}" if item.secondary_label else ""
    return (
        f"{item.label}{edge} | {item.sets} set(s) x {item.reps} reps x"
        f" {format_clock(item.work_sec)} | rest {format_clock(item.rest_rep_sec)}"
    )


def make_progress_handler(
    state: WebState, cues: CueTracker
) -> Callable[[SessionProgress], None]:
    """Record runner updates without touching the page.

    The runner calls this from its own task, which has no NiceGUI slot, so
    cues are queued here and played by ``drain_cues`` under ``ui.timer``.
    """

    def on_progress(progress: SessionProgress) -> None:
        state.progress = progress
        state.pending_cues.extend(cues.update(progress))

    return on_progress


def drain_cues(state: WebState) -> list[Cue]:
    queued, state.pending_cues = state.pending_cues, []
    return queued if state.sound else []


def run_web_ui(
    controller: UIController,
    *,
    host: str = "127.0.0.1",
    port: int = 8090,
) -> int:
    state = WebState()
    cues = CueTracker(countdown_at=controller.config.countdown_cue_sec)
    catalog = controller.catalog
    on_progress = make_progress_handler(state, cues)

    ui.add_head_html(
        """
        <style>
          body { background: #1a1512; color: #f5f5f4; font-family: Arial, sans-serif; }
          .sx-card { background: #2a2320; border: 1px solid #3f3633; border-radius: 12px; }
          .sx-clock { font-size: 4.5rem; font-weight: 300; font-variant-numeric: tabular-nums; }
        </style>
        """
    )

    with ui.column().classes("w-full max-w-xl mx-auto gap-3 p-4") as setup_view:
        ui.label("Hangboard Session").classes("text-xl font-semibold")
        protocol_select = ui.select(
            list(catalog.protocols()),
            label="Protocol",
            value=catalog.protocols()[0] if catalog.protocols() else None,
        ).classes("w-full")
        intensity_select = ui.select([], label="Intensity").classes("w-full")
        duration_select = ui.select([], label="Duration (min)").classes("w-full")
        warmup_switch = ui.switch("Include warm-up", value=True)
        sound_switch = ui.switch("Sound cues", value=True)
        plan_btn = ui.button("Build session").props("color=primary")
        with ui.card().classes("sx-card w-full"):
            plan_info = ui.label("No session built").classes("text-sm")
            plan_list = ui.column().classes("gap-1")
        with ui.row().classes("gap-2"):
            warmup_btn = ui.button("Start warm-up")
            workout_btn = ui.button("Start workout").props("color=primary")

    with ui.column().classes("w-full max-w-xl mx-auto gap-3 p-4 items-center") as session_view:
        stage_label = ui.label("-").classes("text-sm uppercase tracking-wide")
        item_label = ui.label("-").classes("text-lg font-semibold text-center")
        detail_label = ui.label("").classes("text-sm text-center")
        phase_label = ui.label("-").classes("text-2xl font-bold")
        phase_clock = ui.label("00:00").classes("sx-clock")
        counters_label = ui.label("").classes("text-sm")
        total_label = ui.label("Total left: 00:00").classes("text-sm")
        next_label = ui.label("").classes("text-sm")
        with ui.row().classes("gap-2"):
            pause_btn = ui.button("Pause")
            skip_phase_btn = ui.button("Next phase")
            skip_item_btn = ui.button("Skip exercise")
            finish_btn = ui.button("Finish").props("color=negative")
        back_btn = ui.button("Back to setup").props("outline")
    status_label = ui.label("").classes("text-sm mx-auto")

    def play(cue: Cue) -> None:
        if cue == "countdown":
            ui.run_javascript(_BEEP_JS.format(freq=880, ms=400))
        elif cue == "rest_start":
            ui.run_javascript(_BEEP_JS.format(freq=440, ms=150))

    def refresh_filters() -> None:
        protocol = protocol_select.value
        levels = list(catalog.intensity_levels(protocol)) if protocol else []
        intensity_select.options = levels
        if intensity_select.value not in levels:
            intensity_select.value = levels[0] if levels else None
        intensity_select.update()
        refresh_durations()

    def refresh_durations() -> None:
        protocol = protocol_select.value
        level = intensity_select.value
        durations = list(catalog.durations(protocol, level)) if protocol and level else []
        duration_select.options = durations
        if duration_select.value not in durations:
            duration_select.value = durations[0] if durations else None
        duration_select.update()

    def refresh_plan() -> None:
        plan_list.clear()
        if state.plan is None:
            plan_info.text = "No session built"
            return
        total = state.plan.estimated_total_sec(controller.config.prep_sec)
        plan_info.text = (
            f"{len(state.plan.warmups)} warm-up(s), {len(state.plan.exercises)} exercise(s)"
            f" | about {format_clock(total)}"
        )
        with plan_list:
            for item in state.plan.warmups:
                ui.label(f"Warm-up: {_item_line(item)}").classes("text-xs")
            for item in state.plan.exercises:
                ui.label(_item_line(item)).classes("text-xs")

    def refresh_ui() -> None:
        for cue in drain_cues(state):
            play(cue)
        status_label.text = state.status
        in_session = state.stage != "setup"
        setup_view.set_visibility(not in_session)
        session_view.set_visibility(in_session)
        has_plan = state.plan is not None
        warmup_btn.set_enabled(has_plan and bool(state.plan and state.plan.warmups))
        workout_btn.set_enabled(has_plan and bool(state.plan and state.plan.exercises))

        progress = state.progress
        running = controller.session_running
        pause_btn.set_enabled(running)
        skip_phase_btn.set_enabled(running and progress is not None and not progress.paused)
        skip_item_btn.set_enabled(running and progress is not None and not progress.paused)
        finish_btn.set_enabled(running)
        back_btn.set_enabled(not running)
        if progress is None:
            return

        stage_label.text = "Warm-up" if state.stage == "warmup" else "Workout"
        item_label.text = progress.item_label or "-"
        detail_label.text = progress.item_detail
        phase_label.text = progress.phase_label
        phase_label.style(f"color: {PHASE_COLORS[progress.phase]};")
        phase_clock.text = progress.phase_display
        counters_label.text = (
            ""
            if progress.finished
            else (
                f"Exercise {progress.item_index + 1}/{progress.item_total}"
                f" | Set {progress.current_set}/{progress.set_total}"
                f" | Rep {progress.current_rep}/{progress.rep_total}"
            )
        )
        total_label.text = f"Total left: {progress.total_display}"
        next_label.text = f"Next: {progress.next_label}" if progress.next_label else ""
        pause_btn.text = "Resume" if progress.paused else "Pause"

    def on_finish(completed: bool) -> None:
        if state.stage == "warmup":
            state.status = "Warm-up complete" if completed else "Warm-up stopped"
        else:
            state.status = "Workout complete" if completed else "Workout stopped"
        cues.reset()

    def on_build() -> None:
        if duration_select.value is None:
            ui.notify("Pick a protocol, intensity and duration", color="negative")
            return
        flt = Filter(
            protocol_name=str(protocol_select.value),
            intensity_level=str(intensity_select.value),
            duration=int(duration_select.value),
        )
        try:
            state.plan = controller.plan(flt, with_warmup=bool(warmup_switch.value))
        except CatalogLookupError as exc:
            state.plan = None
            ui.notify(str(exc), color="negative")
        refresh_plan()
        refresh_ui()

    async def start_stage(stage: str) -> None:
        if state.plan is None or controller.session_running:
            return
        state.stage = stage
        state.progress = None
        cues.reset()
        state.pending_cues.clear()
        if stage == "warmup":
            await controller.start_warmup(state.plan, on_progress, on_finish)
            state.status = "Warm-up started"
        else:
            await controller.start_workout(state.plan, on_progress, on_finish)
            state.status = "Workout started"
        refresh_ui()

    async def on_back() -> None:
        await controller.stop_session()
        state.stage = "setup"
        state.progress = None
        refresh_ui()

    def on_sound_toggle() -> None:
        state.sound = bool(sound_switch.value)

    protocol_select.on_value_change(lambda _: refresh_filters())
    intensity_select.on_value_change(lambda _: refresh_durations())
    sound_switch.on_value_change(lambda _: on_sound_toggle())
    plan_btn.on_click(on_build)
    warmup_btn.on_click(lambda: start_stage("warmup"))
    workout_btn.on_click(lambda: start_stage("workout"))
    pause_btn.on_click(controller.toggle_pause)
    skip_phase_btn.on_click(controller.skip_phase)
    skip_item_btn.on_click(controller.skip_item)
    finish_btn.on_click(controller.finish_early)
    back_btn.on_click(on_back)

    refresh_filters()
    refresh_plan()
    refresh_ui()
    ui.timer(0.25, refresh_ui)
    ui.run(host=host, port=port, reload=False, title="Hangboard Session")
    return 0
