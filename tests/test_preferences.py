from __future__ import annotations

from pathlib import Path

import pytest

from code_chrono.app.state.preference_state import (
    PreferenceState,
    create_idle_minutes,
    create_timer_duration,
    positive_int,
)
from code_chrono.local_storage import LocalStorage


def test_defaults_without_stored_values(storage: LocalStorage) -> None:
    assert create_idle_minutes(storage).get() == 0
    assert create_timer_duration(storage).get() == 25


def test_set_persists_and_survives_restart(storage_path: Path) -> None:
    pref = create_timer_duration(LocalStorage(str(storage_path)))
    pref.set(50)

    # A fresh storage object re-reads the file, as on the next launch.
    reloaded = create_timer_duration(LocalStorage(str(storage_path)))
    assert reloaded.get() == 50
    assert LocalStorage(str(storage_path)).get_item("code-chrono-timer-duration") == "50"


@pytest.mark.parametrize("raw", ["abc", "-3", "", "1.5", "null"])
def test_malformed_idle_minutes_falls_back_to_default(storage: LocalStorage, raw: str) -> None:
    storage.set_item("code-chrono-idle-minutes", raw)
    assert create_idle_minutes(storage).get() == 0


@pytest.mark.parametrize("raw", ["0", "-10", "soon"])
def test_timer_duration_must_be_positive(storage: LocalStorage, raw: str) -> None:
    storage.set_item("code-chrono-timer-duration", raw)
    assert create_timer_duration(storage).get() == 25


def test_write_time_validation_coerces_to_default(storage: LocalStorage) -> None:
    pref = create_idle_minutes(storage)
    pref.set(10)
    assert storage.get_item("code-chrono-idle-minutes") == "10"

    pref.set(-1)
    assert pref.get() == 0
    assert storage.get_item("code-chrono-idle-minutes") == "0"

    pref.set("15")
    assert pref.get() == 15


def test_invalid_stored_value_is_rewritten_with_default(storage: LocalStorage) -> None:
    storage.set_item("code-chrono-timer-duration", "garbage")
    create_timer_duration(storage)
    assert storage.get_item("code-chrono-timer-duration") == "25"


def test_no_storage_backend_degrades_to_memory() -> None:
    pref = create_idle_minutes(None)
    assert pref.get() == 0
    pref.set(5)
    assert pref.get() == 5


def test_value_changed_emitted_only_on_change(storage: LocalStorage) -> None:
    pref = create_timer_duration(storage)
    seen: list[object] = []
    pref.valueChanged.connect(seen.append)

    pref.set(30)
    pref.set(30)
    pref.update(lambda v: v + 5)

    assert seen == [30, 35]
    assert pref.value == 35


def test_generic_preference_with_custom_key(storage: LocalStorage) -> None:
    pref = PreferenceState("code-chrono-custom", 3, coerce=positive_int(3), decode=int, storage=storage)
    pref.set(7)
    assert pref.key == "code-chrono-custom"
    assert pref.default == 3
    assert storage.get_item("code-chrono-custom") == "7"
