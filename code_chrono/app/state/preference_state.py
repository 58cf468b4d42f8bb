from __future__ import annotations

from collections.abc import Callable
from typing import Any

from PySide6.QtCore import Property, QObject, Signal

from code_chrono.local_storage import LocalStorage, storage_key
from code_chrono.logger import get_logger

_logger = get_logger("preferences")


class PreferenceState(QObject):
    """A single persisted preference value that QML binds to.

    Design:
    - On construction the stored string is read synchronously, decoded and
      validated; anything unusable seeds the documented default instead.
    - ``coerce`` runs on every write as well, so durable storage never holds
      an invalid value.
    - Persistence is an explicit step of ``set`` (see ``_persist``), not a
      subscription on ``valueChanged``.
    - ``storage=None`` means no durable backend: the value lives in memory only.
    """

    valueChanged = Signal(object)

    def __init__(
        self,
        key: str,
        default: Any,
        *,
        coerce: Callable[[Any], Any],
        decode: Callable[[str], Any] = str,
        encode: Callable[[Any], str] = str,
        storage: LocalStorage | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._key = key
        self._default = default
        self._coerce = coerce
        self._decode = decode
        self._encode = encode
        self._storage = storage
        self._value = self._load()
        self._persist(self._value)

    @property
    def key(self) -> str:
        return self._key

    @property
    def default(self) -> Any:
        return self._default

    def _get_value(self) -> Any:
        return self._value

    value = Property(object, _get_value, notify=valueChanged)  # type: ignore[arg-type]

    def get(self) -> Any:
        return self._value

    def set(self, value: Any) -> None:
        v = self._validated(value)
        if v == self._value:
            return
        self._value = v
        self._persist(v)
        self._on_changed(v)
        self.valueChanged.emit(v)

    def update(self, fn: Callable[[Any], Any]) -> None:
        self.set(fn(self._value))

    # ---- hooks ----
    def _on_changed(self, value: Any) -> None:
        """Extra side effect of an accepted change (after persisting)."""

    # ---- storage ----
    def _validated(self, value: Any) -> Any:
        try:
            return self._coerce(value)
        except Exception as e:
            _logger.warning("invalid value for %s (%r): %s", self._key, value, e)
            return self._default

    def _load(self) -> Any:
        if self._storage is None:
            return self._default
        raw = self._storage.get_item(self._key)
        if raw is None:
            return self._default
        try:
            decoded = self._decode(raw)
        except Exception as e:
            _logger.debug("stored %s unreadable, using default: %s", self._key, e)
            return self._default
        return self._validated(decoded)

    def _persist(self, value: Any) -> None:
        if self._storage is None:
            return
        encoded = self._encode(value)
        if self._storage.get_item(self._key) == encoded:
            return
        self._storage.set_item(self._key, encoded)


# ---- validators ----
def non_negative_int(default: int) -> Callable[[Any], int]:
    def coerce(value: Any) -> int:
        n = _as_int(value)
        return n if n is not None and n >= 0 else default

    return coerce


def positive_int(default: int) -> Callable[[Any], int]:
    def coerce(value: Any) -> int:
        n = _as_int(value)
        return n if n is not None and n > 0 else default

    return coerce


def one_of(choices: tuple[str, ...], default: str) -> Callable[[Any], str]:
    def coerce(value: Any) -> str:
        return value if isinstance(value, str) and value in choices else default

    return coerce


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


# ---- instances ----
IDLE_MINUTES_DEFAULT = 0
TIMER_DURATION_DEFAULT = 25


def create_idle_minutes(storage: LocalStorage | None, parent: QObject | None = None) -> PreferenceState:
    """Idle auto-pause threshold in minutes; 0 disables it."""
    return PreferenceState(
        storage_key("idle-minutes"),
        IDLE_MINUTES_DEFAULT,
        coerce=non_negative_int(IDLE_MINUTES_DEFAULT),
        storage=storage,
        parent=parent,
    )


def create_timer_duration(storage: LocalStorage | None, parent: QObject | None = None) -> PreferenceState:
    """Default work-session length in minutes."""
    return PreferenceState(
        storage_key("timer-duration"),
        TIMER_DURATION_DEFAULT,
        coerce=positive_int(TIMER_DURATION_DEFAULT),
        storage=storage,
        parent=parent,
    )
