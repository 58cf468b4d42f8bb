from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from PySide6.QtCore import Property, QObject, Signal, Slot

from code_chrono.app.state.preference_state import PreferenceState, one_of
from code_chrono.i18n.locales import BR, EL, EN, ES, PT
from code_chrono.local_storage import LocalStorage, storage_key
from code_chrono.logger import get_logger

_logger = get_logger("i18n")

LOCALE_KEY = storage_key("locale")

LOCALE_OPTIONS: tuple[tuple[str, str], ...] = (
    ("en", "🇬🇧 English"),
    ("pt", "🇵🇹 Português"),
    ("br", "🇧🇷 Português (BR)"),
    ("es", "🇪🇸 Español"),
    ("el", "🇬🇷 Ελληνικά"),
)
SUPPORTED_LOCALES: tuple[str, ...] = tuple(code for code, _ in LOCALE_OPTIONS)
DEFAULT_LOCALE = SUPPORTED_LOCALES[0]

_DICTIONARIES: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        "en": MappingProxyType(EN),
        "pt": MappingProxyType(PT),
        "br": MappingProxyType(BR),
        "es": MappingProxyType(ES),
        "el": MappingProxyType(EL),
    }
)


def resolve_locale(code: object) -> str:
    """Return ``code`` if supported, else the default locale. Never raises."""
    return code if isinstance(code, str) and code in _DICTIONARIES else DEFAULT_LOCALE


def dictionary_for(code: object) -> Mapping[str, str]:
    return _DICTIONARIES[resolve_locale(code)]


def lookup(locale: object, key: str) -> str:
    """Resolve ``key`` in ``locale``, falling back to the default dictionary, then the key."""
    table = dictionary_for(locale)
    if key in table:
        return table[key]
    fallback = _DICTIONARIES[DEFAULT_LOCALE].get(key)
    if fallback is None:
        _logger.debug("missing string key: %s", key)
        return key
    return fallback


def t(key: str, storage: LocalStorage | None = None) -> str:
    """One-shot lookup under the locale currently persisted in ``storage``.

    Reads the stored code fresh on every call, so it works before any
    LocaleState exists (e.g. in notifications built at startup).
    """
    stored = storage.get_item(LOCALE_KEY) if storage is not None else None
    return lookup(stored, key)


def create_locale_preference(storage: LocalStorage | None, parent: QObject | None = None) -> PreferenceState:
    return PreferenceState(
        LOCALE_KEY,
        DEFAULT_LOCALE,
        coerce=one_of(SUPPORTED_LOCALES, DEFAULT_LOCALE),
        storage=storage,
        parent=parent,
    )


class LocaleState(QObject):
    """Active locale plus the dictionary derived from it."""

    localeChanged = Signal(str)
    stringsChanged = Signal(object)

    def __init__(self, storage: LocalStorage | None = None, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._storage = storage
        self._preference = create_locale_preference(storage, self)
        self._strings = dictionary_for(self._preference.get())
        self._preference.valueChanged.connect(self._on_locale_changed)

    @property
    def preference(self) -> PreferenceState:
        return self._preference

    def _get_locale(self) -> str:
        return str(self._preference.get())

    locale = Property(str, _get_locale, notify=localeChanged)  # type: ignore[arg-type]

    def _get_strings(self) -> Mapping[str, str]:
        return self._strings

    strings = Property(object, _get_strings, notify=stringsChanged)  # type: ignore[arg-type]

    @Slot(str)
    def set_locale(self, code: str) -> None:
        self._preference.set(code)

    def t(self, key: str) -> str:
        return t(key, self._storage) if self._storage is not None else lookup(self._preference.get(), key)

    def _on_locale_changed(self, code: object) -> None:
        self._strings = dictionary_for(code)
        self.localeChanged.emit(str(code))
        self.stringsChanged.emit(self._strings)
