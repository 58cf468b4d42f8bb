from __future__ import annotations

import json
from typing import Any

from PySide6.QtCore import QObject

from code_chrono.app.state.preference_state import PreferenceState
from code_chrono.local_storage import LocalStorage, storage_key
from code_chrono.logger import get_logger
from code_chrono.models import TaskTemplate

_logger = get_logger("templates")


def _decode_templates(raw: str) -> Any:
    return json.loads(raw)


def _encode_templates(value: list[TaskTemplate]) -> str:
    return json.dumps([t.to_dict() for t in value], ensure_ascii=False)


def _coerce_templates(value: Any) -> list[TaskTemplate]:
    if not isinstance(value, list):
        return []
    out: list[TaskTemplate] = []
    seen: set[str] = set()
    for item in value:
        try:
            tpl = item if isinstance(item, TaskTemplate) else TaskTemplate.from_dict(item)
        except (KeyError, TypeError, ValueError) as e:
            _logger.warning("dropping malformed template %r: %s", item, e)
            continue
        if tpl.id in seen:
            continue
        seen.add(tpl.id)
        out.append(tpl)
    return out


class TemplatesState(PreferenceState):
    """Saved task templates (local only, never synced to the backend)."""

    def __init__(self, storage: LocalStorage | None = None, parent: QObject | None = None) -> None:
        super().__init__(
            storage_key("templates"),
            [],
            coerce=_coerce_templates,
            decode=_decode_templates,
            encode=_encode_templates,
            storage=storage,
            parent=parent,
        )

    @property
    def templates(self) -> list[TaskTemplate]:
        return list(self.get())

    def save_template(self, template: TaskTemplate) -> None:
        """Add a template, or replace the one with the same id in place."""

        def _apply(current: list[TaskTemplate]) -> list[TaskTemplate]:
            items = list(current)
            for i, t in enumerate(items):
                if t.id == template.id:
                    items[i] = template
                    return items
            items.append(template)
            return items

        self.update(_apply)

    def delete_template(self, template_id: str) -> None:
        self.update(lambda current: [t for t in current if t.id != template_id])
