from __future__ import annotations

import pytest
from loguru import logger

from sesh.workout.library import (
    Catalog,
    CatalogLookupError,
    default_catalog,
    default_warmups,
    distinct_targets,
)
from sesh.workout.model import Filter, PROTOCOL_NAMES, TimedItem
from sesh.workout.parser import parse_catalog

SAMPLE = {
    "FingerboardTrainingData": {
        "Protocols": [
            {
                "ProtocolName": "Short Maximal Hangs",
                "Description": "Max hangs",
                "IntensityLevels": {
                    "Low": {
                        "Description": "Easy",
                        "Durations": {
                            "10": {
                                "EstimatedWorkoutTime": "10 min",
                                "Exercises": [
                                    {
                                        "GripType": "Half-Crimp",
                                        "EdgeType": "Medium Edge (20mm)",
                                        "HangDuration_s": 7,
                                        "RestBetweenHangs_s": 180,
                                        "Reps": 2,
                                        "Sets": 1,
                                        "RestBetweenSets_min": 0,
                                        "IntensityModifier": "Bodyweight or small added weight",
                                    }
                                ],
                            },
                            "15": None,
                        },
                    }
                },
            }
        ]
    }
}


def _catalog() -> Catalog:
    return Catalog(parse_catalog(SAMPLE))


def test_lookup_returns_single_exercise() -> None:
    items = _catalog().lookup(Filter("Short Maximal Hangs", "Low", 10))

    assert items == (
        TimedItem(
            label="Half-Crimp",
            secondary_label="Medium Edge (20mm)",
            work_sec=7,
            rest_rep_sec=180,
            reps=2,
            sets=1,
            rest_set_sec=0,
            intensity_note="Bodyweight or small added weight",
        ),
    )


def test_unknown_protocol_message() -> None:
    with pytest.raises(CatalogLookupError) as excinfo:
        _catalog().lookup(Filter("Nonexistent Protocol", "Low", 10))

    assert str(excinfo.value) == "Protocol 'Nonexistent Protocol' not found."
    assert isinstance(excinfo.value, LookupError)
    assert excinfo.value.protocol == "Nonexistent Protocol"


def test_unknown_intensity_message() -> None:
    with pytest.raises(CatalogLookupError) as excinfo:
        _catalog().lookup(Filter("Short Maximal Hangs", "Extreme", 10))

    assert str(excinfo.value) == (
        "Intensity level 'Extreme' not found in protocol 'Short Maximal Hangs'."
    )


def test_intensity_errors_match_and_log_in_lookup_and_durations() -> None:
    catalog = _catalog()
    messages: list[str] = []
    handler_id = logger.add(messages.append, level="WARNING", format="{message}")
    try:
        with pytest.raises(CatalogLookupError) as from_lookup:
            catalog.lookup(Filter("Short Maximal Hangs", "Extreme", 10))
        with pytest.raises(CatalogLookupError) as from_durations:
            catalog.durations("Short Maximal Hangs", "Extreme")
    finally:
        logger.remove(handler_id)

    assert str(from_durations.value) == str(from_lookup.value)
    assert from_durations.value.protocol == "Short Maximal Hangs"
    assert from_durations.value.intensity == "Extreme"
    assert [m.strip() for m in messages] == [str(from_lookup.value)] * 2


def test_unknown_and_null_duration_message() -> None:
    catalog = _catalog()
    for duration in (45, 15):
        with pytest.raises(CatalogLookupError) as excinfo:
            catalog.lookup(Filter("Short Maximal Hangs", "Low", duration))
        assert str(excinfo.value) == (
            f"Duration '{duration}' not found in intensity level 'Low' of protocol "
            "'Short Maximal Hangs'."
        )
        assert excinfo.value.intensity == "Low"
        assert excinfo.value.duration == duration


def test_enumeration_helpers() -> None:
    catalog = _catalog()
    assert catalog.protocols() == ("Short Maximal Hangs",)
    assert catalog.intensity_levels("Short Maximal Hangs") == ("Low",)
    assert catalog.durations("Short Maximal Hangs", "Low") == (10,)
    assert catalog.describe("Short Maximal Hangs") == "Max hangs"


def test_bundled_catalog_loads_once_and_covers_protocols() -> None:
    catalog = default_catalog()
    assert default_catalog() is catalog
    assert set(catalog.protocols()) == set(PROTOCOL_NAMES)

    items = catalog.lookup(Filter("Short Maximal Hangs", "Low", 10))
    assert len(items) == 1
    assert items[0].label == "Half-Crimp"
    assert items[0].work_sec == 7


def test_bundled_warmups_have_both_required_groups() -> None:
    targets = set(distinct_targets(default_warmups()))
    assert "finger" in targets
    assert "scapula" in targets
    assert all(item.targets for item in default_warmups())
