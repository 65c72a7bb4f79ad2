"""Catalog file parser (JSON protocol tree and warm-up pool)."""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger

from sesh.workout.model import (
    DurationEntry,
    IntensityEntry,
    ProtocolEntry,
    TimedItem,
)


class CatalogParseError(ValueError):
    """Raised when a catalog or warm-up file is invalid."""


def load_catalog(path: str | Path) -> tuple[ProtocolEntry, ...]:
    file_path = Path(path)
    protocols = parse_catalog(_read_json(file_path))
    logger.info("Loaded {} protocols from {}", len(protocols), file_path)
    return protocols


def load_warmups(path: str | Path) -> tuple[TimedItem, ...]:
    file_path = Path(path)
    pool = parse_warmups(_read_json(file_path))
    logger.info("Loaded {} warm-up candidates from {}", len(pool), file_path)
    return pool


def _read_json(path: Path) -> object:
    if path.suffix.lower() != ".json":
        raise CatalogParseError(f"Unsupported catalog format '{path.suffix}'. Use .json")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise CatalogParseError(f"Invalid JSON in {path.name}: {exc}") from exc


def parse_catalog(data: object) -> tuple[ProtocolEntry, ...]:
    if isinstance(data, dict):
        root = data.get("FingerboardTrainingData", data)
        if not isinstance(root, dict):
            raise CatalogParseError("'FingerboardTrainingData' must be an object")
        protocols_obj = root.get("Protocols")
    else:
        protocols_obj = data
    if not isinstance(protocols_obj, list):
        raise CatalogParseError("Catalog field 'Protocols' must be an array")

    protocols: list[ProtocolEntry] = []
    seen: set[str] = set()
    for i, raw in enumerate(protocols_obj):
        where = f"Protocol {i + 1}"
        if not isinstance(raw, dict):
            raise CatalogParseError(f"{where}: must be an object")
        name = raw.get("ProtocolName")
        if not isinstance(name, str) or not name.strip():
            raise CatalogParseError(f"{where}: 'ProtocolName' must be a non-empty string")
        if name in seen:
            raise CatalogParseError(f"{where}: duplicate protocol '{name}'")
        seen.add(name)
        protocols.append(
            ProtocolEntry(
                name=name,
                description=str(raw.get("Description") or ""),
                intensity_levels=_parse_intensity_levels(
                    raw.get("IntensityLevels"), where=f"{where} ({name})"
                ),
            )
        )
    return tuple(protocols)


def _parse_intensity_levels(raw: object, *, where: str) -> dict[str, IntensityEntry]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise CatalogParseError(f"{where}: 'IntensityLevels' must be an object")

    levels: dict[str, IntensityEntry] = {}
    for level, level_obj in raw.items():
        if level_obj is None:
            continue
        level_where = f"{where} / {level}"
        if not isinstance(level_obj, dict):
            raise CatalogParseError(f"{level_where}: must be an object")
        durations_obj = level_obj.get("Durations") or {}
        if not isinstance(durations_obj, dict):
            raise CatalogParseError(f"{level_where}: 'Durations' must be an object")

        durations: dict[int, DurationEntry] = {}
        for key, entry in durations_obj.items():
            if entry is None:
                continue
            duration = _parse_duration_key(key, where=level_where)
            entry_where = f"{level_where} / {key}"
            if not isinstance(entry, dict):
                raise CatalogParseError(f"{entry_where}: must be an object")
            exercises_obj = entry.get("Exercises")
            if not isinstance(exercises_obj, list):
                raise CatalogParseError(f"{entry_where}: 'Exercises' must be an array")
            durations[duration] = DurationEntry(
                duration=duration,
                estimated_time=str(entry.get("EstimatedWorkoutTime") or ""),
                items=tuple(
                    _build_exercise(obj, where=f"{entry_where} exercise {j + 1}")
                    for j, obj in enumerate(exercises_obj)
                ),
            )
        levels[level] = IntensityEntry(
            level=level,
            description=str(level_obj.get("Description") or ""),
            durations=durations,
        )
    return levels


def _parse_duration_key(key: str, *, where: str) -> int:
    try:
        return int(str(key).strip().removesuffix("min"))
    except ValueError as exc:
        raise CatalogParseError(f"{where}: invalid duration key '{key}'") from exc


def _build_exercise(raw: object, *, where: str) -> TimedItem:
    if not isinstance(raw, dict):
        raise CatalogParseError(f"{where}: must be an object")
    grip = str(raw.get("GripType") or "")
    edge = str(raw.get("EdgeType") or "")
    # Rest between sets is stored in minutes in this format.
    rest_set_min = _parse_number_field(raw.get("RestBetweenSets_min", 0), "RestBetweenSets_min", where)
    return TimedItem(
        label=grip,
        secondary_label=edge,
        work_sec=_parse_int_field(raw.get("HangDuration_s"), "HangDuration_s", where),
        rest_rep_sec=_parse_int_field(raw.get("RestBetweenHangs_s", 0), "RestBetweenHangs_s", where),
        reps=_parse_int_field(raw.get("Reps"), "Reps", where),
        sets=_parse_int_field(raw.get("Sets"), "Sets", where),
        rest_set_sec=int(round(rest_set_min * 60)),
        intensity_note=str(raw.get("IntensityModifier") or ""),
    )


def parse_warmups(data: object) -> tuple[TimedItem, ...]:
    if not isinstance(data, list):
        raise CatalogParseError("Warm-up pool must be an array")

    pool: list[TimedItem] = []
    for i, raw in enumerate(data):
        where = f"Warm-up {i + 1}"
        if not isinstance(raw, dict):
            raise CatalogParseError(f"{where}: must be an object")
        targets_obj = raw.get("target") or []
        if not isinstance(targets_obj, list) or not all(isinstance(t, str) for t in targets_obj):
            raise CatalogParseError(f"{where}: 'target' must be an array of strings")

        grip = str(raw.get("GripType") or "")
        description = str(raw.get("Description") or "")
        label = description if grip in ("", "None") else f"{grip} {description}".strip()
        pool.append(
            TimedItem(
                label=label,
                secondary_label=str(raw.get("Additional_Info") or ""),
                work_sec=_parse_int_field(raw.get("Duration_s"), "Duration_s", where),
                rest_rep_sec=_parse_int_field(raw.get("Rest_s", 0), "Rest_s", where),
                reps=_parse_int_field(raw.get("Reps"), "Reps", where),
                sets=_parse_int_field(raw.get("Sets"), "Sets", where),
                rest_set_sec=_parse_int_field(
                    raw.get("RestBetweenSets_s", 0), "RestBetweenSets_s", where
                ),
                intensity_note=str(raw.get("Intensity_Modifier") or ""),
                targets=frozenset(targets_obj),
            )
        )
    return tuple(pool)


def _parse_number_field(raw: object, field_name: str, where: str) -> float:
    if raw is None:
        return 0.0
    if isinstance(raw, bool):
        raise CatalogParseError(f"{where}: invalid {field_name}")
    try:
        value = float(str(raw).strip())
    except ValueError as exc:
        raise CatalogParseError(f"{where}: invalid {field_name}") from exc
    if value < 0:
        raise CatalogParseError(f"{where}: {field_name} must be >= 0")
    return value


def _parse_int_field(raw: object, field_name: str, where: str) -> int:
    if raw is None:
        raise CatalogParseError(f"{where}: missing {field_name}")
    if isinstance(raw, bool):
        raise CatalogParseError(f"{where}: invalid {field_name}")
    try:
        number = float(str(raw).strip())
    except ValueError as exc:
        raise CatalogParseError(f"{where}: invalid {field_name}") from exc
    if not number.is_integer():
        raise CatalogParseError(f"{where}: invalid {field_name}")
    value = int(number)
    if value < 0:
        raise CatalogParseError(f"{where}: {field_name} must be >= 0")
    return value
