from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Coroutine
from typing import Any

from PySide6.QtCore import Property, QObject, Signal, Slot

from code_chrono.app.state.domain_state import DomainState
from code_chrono.app.state.preference_state import (
    PreferenceState,
    create_idle_minutes,
    create_timer_duration,
)
from code_chrono.app.state.templates_state import TemplatesState
from code_chrono.app.state.theme_state import ThemeState
from code_chrono.app.state.timer_state import TimerMirror
from code_chrono.app.state.ui_state import CUSTOM_DURATION, UiState
from code_chrono.i18n.resolver import LocaleState
from code_chrono.local_storage import LocalStorage
from code_chrono.logger import get_logger
from code_chrono.models import Task, TaskTemplate
from code_chrono.ports import Backend

_logger = get_logger("context")


class AppContext(QObject):
    """Process-wide handle to every state object.

    Created once at startup and passed to whatever needs it; it is never torn
    down. All writes to the state objects go through their own methods, either
    called directly or via ``dispatch``.

    UI → Python: context.dispatch(cmd, payload)
    Python → UI: context.event(dict)
    """

    # QObject already has an .event() handler method, so we must not shadow it.
    event_ = Signal(object, name="event")

    def __init__(
        self,
        backend: Backend,
        storage: LocalStorage | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._backend = backend
        self._storage = storage

        self._theme = ThemeState(storage, self)
        self._locale = LocaleState(storage, self)
        self._idle_minutes = create_idle_minutes(storage, self)
        self._timer_duration = create_timer_duration(storage, self)
        self._templates = TemplatesState(storage, self)

        self._domain = DomainState(backend, self)
        self._timer = TimerMirror(backend, self)
        self._ui = UiState(self)

        self._running: set[asyncio.Task[Any]] = set()

    # ---- expose state objects to the UI ----
    def _get_theme(self) -> QObject:
        return self._theme

    theme = Property(QObject, _get_theme, constant=True)  # type: ignore[arg-type]

    def _get_locale(self) -> QObject:
        return self._locale

    locale = Property(QObject, _get_locale, constant=True)  # type: ignore[arg-type]

    def _get_idle_minutes(self) -> QObject:
        return self._idle_minutes

    idleMinutes = Property(QObject, _get_idle_minutes, constant=True)  # type: ignore[arg-type]

    def _get_timer_duration(self) -> QObject:
        return self._timer_duration

    timerDuration = Property(QObject, _get_timer_duration, constant=True)  # type: ignore[arg-type]

    def _get_templates(self) -> QObject:
        return self._templates

    templates = Property(QObject, _get_templates, constant=True)  # type: ignore[arg-type]

    def _get_domain(self) -> QObject:
        return self._domain

    domain = Property(QObject, _get_domain, constant=True)  # type: ignore[arg-type]

    def _get_timer(self) -> QObject:
        return self._timer

    timer = Property(QObject, _get_timer, constant=True)  # type: ignore[arg-type]

    def _get_ui(self) -> QObject:
        return self._ui

    ui = Property(QObject, _get_ui, constant=True)  # type: ignore[arg-type]

    # Typed accessors for Python callers.
    @property
    def theme_state(self) -> ThemeState:
        return self._theme

    @property
    def locale_state(self) -> LocaleState:
        return self._locale

    @property
    def idle_minutes(self) -> PreferenceState:
        return self._idle_minutes

    @property
    def timer_duration(self) -> PreferenceState:
        return self._timer_duration

    @property
    def templates_state(self) -> TemplatesState:
        return self._templates

    @property
    def domain_state(self) -> DomainState:
        return self._domain

    @property
    def timer_mirror(self) -> TimerMirror:
        return self._timer

    @property
    def ui_state(self) -> UiState:
        return self._ui

    # ---- actions that consume transient UI state ----
    def resolve_duration_minutes(self) -> int:
        """Minutes for the next session, from the duration picker."""
        choice = self._ui._get_duration_choice().strip()
        text = self._ui._get_custom_duration().strip() if choice == CUSTOM_DURATION else choice
        with contextlib.suppress(ValueError):
            minutes = int(text)
            if minutes > 0:
                return minutes
        return int(self._timer_duration.get())

    async def start_timer(self) -> bool:
        name = self._ui._get_current_task_name().strip()
        return await self._timer.start_pomodoro(name, self.resolve_duration_minutes())

    async def toggle_pause_hotkey(self) -> bool:
        """Global pause/resume shortcut; ignored while no task name is entered."""
        if not self._ui._get_current_task_name().strip():
            _logger.debug("pause hotkey ignored: no current task")
            return False
        return await self._timer.pause_timer()

    async def startup(self) -> None:
        await asyncio.gather(self._timer.initialize(), self._domain.refresh_all())

    # ---- UI command entry ----
    @Slot(str, "QVariant")  # type: ignore[call-overload]
    def dispatch(self, cmd: str, payload: object | None = None) -> None:
        command = str(cmd or "").strip()
        if not command:
            self._emit_error("Empty cmd")
            return

        try:
            if self._dispatch_sync(command, payload):
                return
            coro = self._async_command(command, payload)
        except (KeyError, TypeError, ValueError) as e:
            self._emit_error(f"{command}: invalid payload: {e}")
            return

        if coro is None:
            self._emit_error(f"Unknown cmd: {command}")
            return
        self._schedule(command, coro)

    def _dispatch_sync(self, command: str, payload: object | None) -> bool:  # noqa: PLR0911, PLR0912
        value = _get_payload_value(payload, "value", default=None)

        if command == "setTheme":
            self._theme.set(value)
            return True
        if command == "toggleTheme":
            self._theme.toggle()
            return True
        if command == "setLocale":
            self._locale.set_locale(str(value))
            return True
        if command == "setIdleMinutes":
            self._idle_minutes.set(value)
            return True
        if command == "setTimerDuration":
            self._timer_duration.set(value)
            return True
        if command == "saveTemplate":
            self._templates.save_template(TaskTemplate.from_dict(value))
            return True
        if command == "deleteTemplate":
            self._templates.delete_template(str(value))
            return True
        if command == "setCurrentTaskName":
            self._ui.set_current_task_name(str(value or ""))
            return True
        if command == "setDurationChoice":
            self._ui.set_duration_choice(str(value or ""))
            return True
        if command == "setCustomDuration":
            self._ui.set_custom_duration(str(value or ""))
            return True
        if command == "setSearchQuery":
            self._domain.set_search_query(str(value or ""))
            return True
        if command == "setFilterProject":
            self._domain.set_filter_project(value)
            return True
        if command == "setFilterTag":
            self._domain.set_filter_tag(value)
            return True
        if command == "setFilterStatus":
            self._domain.set_filter_status(value)
            return True
        return False

    def _async_command(self, command: str, payload: object | None) -> Coroutine[Any, Any, Any] | None:  # noqa: PLR0911, PLR0912, PLR0915
        if command == "refreshAll":
            return self._domain.refresh_all()
        if command == "refreshTasks":
            return self._domain.refresh_tasks()
        if command == "refreshProjects":
            return self._domain.refresh_projects()
        if command == "refreshTags":
            return self._domain.refresh_tags()
        if command == "searchTasks":
            query = _get_payload_value(payload, "query", default=self._domain._get_search_query())
            return self._domain.search_tasks(str(query))

        if command == "createTask":
            return self._domain.create_task(Task.from_draft(_require_payload_value(payload, "task")))
        if command == "updateTask":
            return self._domain.update_task(Task.from_dict(_require_payload_value(payload, "task")))
        if command == "deleteTask":
            return self._domain.delete_task(int(_require_payload_value(payload, "id")))
        if command == "createProject":
            name = str(_require_payload_value(payload, "name"))
            return self._domain.create_project(name, _get_payload_value(payload, "color", default=None))
        if command == "deleteProject":
            return self._domain.delete_project(int(_require_payload_value(payload, "id")))
        if command == "createTag":
            name = str(_require_payload_value(payload, "name"))
            return self._domain.create_tag(name, _get_payload_value(payload, "color", default=None))
        if command == "deleteTag":
            return self._domain.delete_tag(int(_require_payload_value(payload, "id")))

        if command == "initTimer":
            return self._timer.initialize()
        if command == "startTimer":
            return self.start_timer()
        if command == "pauseTimer":
            return self._timer.pause_timer()
        if command == "resetTimer":
            return self._timer.reset_timer()
        if command == "recordActivity":
            return self._timer.record_activity()
        return None

    def _schedule(self, command: str, coro: Coroutine[Any, Any, Any]) -> None:
        try:
            fut = asyncio.get_running_loop().create_task(coro)
        except RuntimeError:
            coro.close()
            self._emit_error(f"{command}: no running event loop")
            return
        self._running.add(fut)
        fut.add_done_callback(self._running.discard)
        _logger.debug("scheduled %s", command)

    def _emit_error(self, message: str) -> None:
        _logger.warning("dispatch: %s", message)
        self.event_.emit({"type": "event", "name": "error", "level": "error", "message": message})


def _get_payload_value(payload: object | None, key: str, *, default: Any) -> Any:
    """Extract a value from a UI payload.

    Supports:
    - dict-like payloads (Python dict)
    - None
    - otherwise returns default
    """

    if payload is None:
        return default

    # QML often passes a JS object which arrives as QJSValue/QVariant.
    if payload.__class__.__name__ == "QJSValue" and hasattr(payload, "toVariant"):
        with contextlib.suppress(Exception):
            payload = payload.toVariant()  # type: ignore[assignment, attr-defined]

    if isinstance(payload, dict):
        return payload.get(key, default)

    return default


def _require_payload_value(payload: object | None, key: str) -> Any:
    value = _get_payload_value(payload, key, default=None)
    if value is None:
        raise KeyError(key)
    return value
