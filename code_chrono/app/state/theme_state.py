from __future__ import annotations

from PySide6.QtCore import QObject, Slot

from code_chrono.app.state.preference_state import PreferenceState, one_of
from code_chrono.local_storage import LocalStorage, storage_key
from code_chrono.styles import THEMES, apply_theme

THEME_DEFAULT = "light"


class ThemeState(PreferenceState):
    """Light/dark theme preference.

    Unlike the other preferences, an accepted change is also applied to the
    running application (palette + stylesheet), and the stored value is
    applied once at startup.
    """

    def __init__(self, storage: LocalStorage | None = None, parent: QObject | None = None) -> None:
        super().__init__(
            storage_key("theme"),
            THEME_DEFAULT,
            coerce=one_of(THEMES, THEME_DEFAULT),
            storage=storage,
            parent=parent,
        )
        self._on_changed(self.get())

    def _on_changed(self, value: str) -> None:
        apply_theme(value)

    @Slot()
    def toggle(self) -> None:
        self.update(lambda t: "dark" if t == "light" else "light")
