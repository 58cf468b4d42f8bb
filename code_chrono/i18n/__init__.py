"""Locale selection and string lookup."""

from code_chrono.i18n.resolver import (
    DEFAULT_LOCALE,
    LOCALE_OPTIONS,
    SUPPORTED_LOCALES,
    LocaleState,
    lookup,
    resolve_locale,
    t,
)

__all__ = [
    "DEFAULT_LOCALE",
    "LOCALE_OPTIONS",
    "SUPPORTED_LOCALES",
    "LocaleState",
    "lookup",
    "resolve_locale",
    "t",
]
