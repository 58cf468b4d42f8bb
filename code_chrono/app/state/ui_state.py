from __future__ import annotations

from PySide6.QtCore import Property, QObject, Signal

# Duration-picker choice that defers to the free-text custom value.
CUSTOM_DURATION = "custom"


class UiState(QObject):
    """Transient UI values; never persisted, never sent to the backend as-is."""

    currentTaskNameChanged = Signal(str)
    durationChoiceChanged = Signal(str)
    customDurationChanged = Signal(str)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._current_task_name = ""
        self._duration_choice = "25"
        self._custom_duration = ""

    def _get_current_task_name(self) -> str:
        return str(self._current_task_name)

    currentTaskName = Property(str, _get_current_task_name, notify=currentTaskNameChanged)  # type: ignore[arg-type]

    def _get_duration_choice(self) -> str:
        return str(self._duration_choice)

    durationChoice = Property(str, _get_duration_choice, notify=durationChoiceChanged)  # type: ignore[arg-type]

    def _get_custom_duration(self) -> str:
        return str(self._custom_duration)

    customDuration = Property(str, _get_custom_duration, notify=customDurationChanged)  # type: ignore[arg-type]

    def set_current_task_name(self, name: str) -> None:
        v = str(name)
        if v == self._current_task_name:
            return
        self._current_task_name = v
        self.currentTaskNameChanged.emit(v)

    def set_duration_choice(self, choice: str) -> None:
        v = str(choice)
        if v == self._duration_choice:
            return
        self._duration_choice = v
        self.durationChoiceChanged.emit(v)

    def set_custom_duration(self, text: str) -> None:
        v = str(text)
        if v == self._custom_duration:
            return
        self._custom_duration = v
        self.customDurationChanged.emit(v)
