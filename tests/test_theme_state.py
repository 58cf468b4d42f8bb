from __future__ import annotations

from PySide6.QtWidgets import QApplication

from code_chrono.app.state.theme_state import ThemeState
from code_chrono.local_storage import LocalStorage


def _applied_theme() -> str:
    app = QApplication.instance()
    assert app is not None
    return str(app.property("chronoTheme"))


def test_default_theme_is_light_and_applied(storage: LocalStorage) -> None:
    theme = ThemeState(storage)
    assert theme.get() == "light"
    assert _applied_theme() == "light"
    assert storage.get_item("code-chrono-theme") == "light"


def test_stored_theme_is_applied_at_startup(storage: LocalStorage) -> None:
    storage.set_item("code-chrono-theme", "dark")
    theme = ThemeState(storage)
    assert theme.get() == "dark"
    assert _applied_theme() == "dark"


def test_unsupported_stored_theme_falls_back(storage: LocalStorage) -> None:
    storage.set_item("code-chrono-theme", "solarized")
    assert ThemeState(storage).get() == "light"
    assert storage.get_item("code-chrono-theme") == "light"


def test_toggle_flips_persists_and_applies(storage: LocalStorage) -> None:
    theme = ThemeState(storage)
    theme.toggle()
    assert theme.get() == "dark"
    assert storage.get_item("code-chrono-theme") == "dark"
    assert _applied_theme() == "dark"

    theme.toggle()
    assert theme.get() == "light"
    assert storage.get_item("code-chrono-theme") == "light"
    assert _applied_theme() == "light"


def test_set_rejects_unknown_theme(storage: LocalStorage) -> None:
    theme = ThemeState(storage)
    theme.set("dark")
    theme.set("neon")
    assert theme.get() == "light"
    assert storage.get_item("code-chrono-theme") == "light"
