from PySide6.QtGui import QColor, QFont, QPalette
from PySide6.QtWidgets import QApplication

# -----------------------------------------------------------------------------
# Palette definitions
# -----------------------------------------------------------------------------

THEMES = ("light", "dark")


class ChronoColors:
    # Dark Theme
    DARK_WINDOW = "#1C1E22"  # Neutral background
    DARK_SURFACE = "#262A30"  # Card/Layer background
    DARK_SURFACE_ALT = "#2C3037"  # Alternate list rows
    DARK_BORDER = "#3A3F47"
    DARK_TEXT = "#E6E6E6"
    DARK_TEXT_SEC = "#9AA0A6"
    DARK_ACCENT = "#FF7A59"  # Tomato
    DARK_ACCENT_TEXT = "#000000"

    # Light Theme
    LIGHT_WINDOW = "#F5F5F4"
    LIGHT_SURFACE = "#FFFFFF"
    LIGHT_SURFACE_ALT = "#FAFAF9"
    LIGHT_BORDER = "#E2E2E0"
    LIGHT_TEXT = "#1F1F1F"
    LIGHT_TEXT_SEC = "#5D5D5D"
    LIGHT_ACCENT = "#E5533C"
    LIGHT_ACCENT_TEXT = "#FFFFFF"


COMMON_QSS = """
    QToolTip {
        color: {{text}};
        background-color: {{surface}};
        border: 1px solid {{border}};
        padding: 6px;
        border-radius: 4px;
    }

    QStatusBar {
        background-color: {{window}};
        color: {{text_sec}};
        border-top: 1px solid {{border}};
    }

    QPushButton:default {
        background-color: {{accent}};
        color: {{accent_text}};
    }
"""


def _palette_def(theme: str) -> dict[str, str]:
    if theme == "dark":
        return {
            "window": ChronoColors.DARK_WINDOW,
            "surface": ChronoColors.DARK_SURFACE,
            "surface_alt": ChronoColors.DARK_SURFACE_ALT,
            "border": ChronoColors.DARK_BORDER,
            "text": ChronoColors.DARK_TEXT,
            "text_sec": ChronoColors.DARK_TEXT_SEC,
            "accent": ChronoColors.DARK_ACCENT,
            "accent_text": ChronoColors.DARK_ACCENT_TEXT,
        }
    return {
        "window": ChronoColors.LIGHT_WINDOW,
        "surface": ChronoColors.LIGHT_SURFACE,
        "surface_alt": ChronoColors.LIGHT_SURFACE_ALT,
        "border": ChronoColors.LIGHT_BORDER,
        "text": ChronoColors.LIGHT_TEXT,
        "text_sec": ChronoColors.LIGHT_TEXT_SEC,
        "accent": ChronoColors.LIGHT_ACCENT,
        "accent_text": ChronoColors.LIGHT_ACCENT_TEXT,
    }


def _apply_style(app: QApplication, pal_def: dict[str, str], font_size: int = 10) -> None:
    """Apply palette and QSS based on definition dict."""
    app.setStyle("Fusion")

    palette = QPalette()

    c_window = QColor(pal_def["window"])
    c_surface = QColor(pal_def["surface"])
    c_text = QColor(pal_def["text"])
    c_accent = QColor(pal_def["accent"])
    c_disabled = QColor(pal_def["text_sec"])

    palette.setColor(QPalette.ColorRole.Window, c_window)
    palette.setColor(QPalette.ColorRole.WindowText, c_text)
    palette.setColor(QPalette.ColorRole.Base, c_surface)
    palette.setColor(QPalette.ColorRole.AlternateBase, QColor(pal_def["surface_alt"]))
    palette.setColor(QPalette.ColorRole.Text, c_text)
    palette.setColor(QPalette.ColorRole.Button, c_surface)
    palette.setColor(QPalette.ColorRole.ButtonText, c_text)
    palette.setColor(QPalette.ColorRole.Highlight, c_accent)
    palette.setColor(QPalette.ColorRole.HighlightedText, QColor(pal_def["accent_text"]))

    palette.setColor(QPalette.ColorGroup.Disabled, QPalette.ColorRole.Text, c_disabled)
    palette.setColor(QPalette.ColorGroup.Disabled, QPalette.ColorRole.ButtonText, c_disabled)

    app.setPalette(palette)

    font = app.font()
    font.setStyleHint(QFont.StyleHint.SansSerif)
    font.setPointSize(font_size)
    app.setFont(font)

    qss = COMMON_QSS
    for key, val in pal_def.items():
        qss = qss.replace(f"{{{{{key}}}}}", val)
    app.setStyleSheet(qss)


def apply_theme(theme: str, app: QApplication | None = None, font_size: int = 10) -> bool:
    """Apply a theme ("light" or "dark") to the running application.

    Returns False when there is no QApplication to style (headless startup).
    """
    if app is None:
        inst = QApplication.instance()
        app = inst if isinstance(inst, QApplication) else None
    if app is None:
        return False
    _apply_style(app, _palette_def(theme), font_size)
    app.setProperty("chronoTheme", theme)
    return True
