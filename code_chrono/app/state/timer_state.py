from __future__ import annotations

from enum import StrEnum
from typing import Any

from PySide6.QtCore import Property, QObject, Signal

from code_chrono.logger import get_logger
from code_chrono.models import TimerState
from code_chrono.ports import Backend, Unlisten

_logger = get_logger("timer")

TIMER_TICK_EVENT = "timer-tick"


class MirrorStatus(StrEnum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    LIVE = "live"


class TimerMirror(QObject):
    """Mirror of the backend's single timer snapshot.

    Design:
    - ``timer`` is None until the first successful ``get_timer``; None means
      "unknown", not "idle". QML should not render it as a paused timer.
    - ``initialize`` runs at most once per instance. A second call, whether the
      first is still in flight or already finished, does nothing. A failed
      attempt drops back to UNINITIALIZED and is not retried.
    - Once LIVE, every ``timer-tick`` push replaces the snapshot as a whole.
    - Control commands (start/pause/reset) never touch the snapshot; the
      backend answers them with a push.
    """

    timerChanged = Signal(object)
    statusChanged = Signal(str)

    def __init__(self, backend: Backend, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._backend = backend
        self._status = MirrorStatus.UNINITIALIZED
        self._init_started = False
        self._timer: TimerState | None = None
        self._unlisten: Unlisten | None = None

    def _get_timer(self) -> TimerState | None:
        return self._timer

    timer = Property(object, _get_timer, notify=timerChanged)  # type: ignore[arg-type]

    def _get_status(self) -> str:
        return str(self._status)

    status = Property(str, _get_status, notify=statusChanged)  # type: ignore[arg-type]

    @property
    def mirror_status(self) -> MirrorStatus:
        return self._status

    @property
    def is_known(self) -> bool:
        return self._timer is not None

    # ---- internal mutation helpers ----
    def _set_status(self, status: MirrorStatus) -> None:
        if status == self._status:
            return
        self._status = status
        self.statusChanged.emit(str(status))

    def _set_timer(self, snapshot: TimerState) -> None:
        self._timer = snapshot
        self.timerChanged.emit(snapshot)

    # ---- lifecycle ----
    async def initialize(self) -> None:
        if self._init_started:
            return
        self._init_started = True
        self._set_status(MirrorStatus.INITIALIZING)

        try:
            snapshot = TimerState.from_dict(await self._backend.invoke("get_timer"))
        except Exception as e:
            _logger.error("get_timer failed, timer state stays unknown: %s", e)
            self._set_status(MirrorStatus.UNINITIALIZED)
            return

        self._set_timer(snapshot)
        self._set_status(MirrorStatus.LIVE)

        try:
            self._unlisten = await self._backend.listen(TIMER_TICK_EVENT, self._on_tick)
        except Exception as e:
            _logger.error("subscribing to %s failed: %s", TIMER_TICK_EVENT, e)

    def _on_tick(self, payload: Any) -> None:
        try:
            snapshot = TimerState.from_dict(payload)
        except (KeyError, TypeError, ValueError) as e:
            _logger.warning("dropping malformed %s payload: %s", TIMER_TICK_EVENT, e)
            return
        self._set_timer(snapshot)

    # ---- commands ----
    async def _command(self, command: str, args: dict[str, Any] | None = None) -> bool:
        try:
            await self._backend.invoke(command, args)
        except Exception as e:
            _logger.error("%s failed: %s", command, e)
            return False
        return True

    async def start_pomodoro(self, task_name: str, duration_minutes: int | None = None) -> bool:
        return await self._command(
            "start_pomodoro",
            {"task_name": str(task_name), "duration_minutes": duration_minutes},
        )

    async def pause_timer(self) -> bool:
        """Toggle pause/resume on the backend."""
        return await self._command("pause_timer")

    async def reset_timer(self) -> bool:
        return await self._command("reset_timer")

    async def record_activity(self) -> bool:
        return await self._command("record_activity")
