from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import IntEnum, StrEnum
from typing import Any


class TaskStatus(StrEnum):
    TODO = "todo"
    DOING = "doing"
    DONE = "done"


class TimerPhase(IntEnum):
    """Ordinal encoding used on the wire (``TimerState.phase``)."""

    WORK = 0
    SHORT_BREAK = 1
    LONG_BREAK = 2


def _opt_int(value: Any) -> int | None:
    return None if value is None else int(value)


def _opt_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _require_mapping(raw: Any, what: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise TypeError(f"{what} payload must be an object, got {type(raw).__name__}")
    return raw


@dataclass(frozen=True, slots=True)
class Project:
    id: int
    name: str
    color: str | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> Project:
        d = _require_mapping(raw, "project")
        return cls(id=int(d["id"]), name=str(d["name"]), color=_opt_str(d.get("color")))


@dataclass(frozen=True, slots=True)
class Tag:
    id: int
    name: str
    color: str | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> Tag:
        d = _require_mapping(raw, "tag")
        return cls(id=int(d["id"]), name=str(d["name"]), color=_opt_str(d.get("color")))


@dataclass(frozen=True, slots=True)
class Task:
    """Backend-owned task, as cached by the last refresh.

    ``parent_id`` forms a tree that is not checked for cycles here.
    ``external_id``/``source`` identify tasks imported from an outside tracker.
    """

    id: int
    title: str
    priority: int
    status: TaskStatus
    position: int
    created_at: int
    description: str | None = None
    due_date: int | None = None
    project_id: int | None = None
    parent_id: int | None = None
    external_id: str | None = None
    source: str | None = None
    completed_at: int | None = None
    tags: tuple[Tag, ...] = ()

    @classmethod
    def from_dict(cls, raw: Any) -> Task:
        d = _require_mapping(raw, "task")
        return cls(
            id=int(d["id"]),
            title=str(d["title"]),
            priority=int(d.get("priority", 0)),
            status=TaskStatus(d["status"]),
            position=int(d.get("position", 0)),
            created_at=int(d.get("created_at", 0)),
            description=_opt_str(d.get("description")),
            due_date=_opt_int(d.get("due_date")),
            project_id=_opt_int(d.get("project_id")),
            parent_id=_opt_int(d.get("parent_id")),
            external_id=_opt_str(d.get("external_id")),
            source=_opt_str(d.get("source")),
            completed_at=_opt_int(d.get("completed_at")),
            tags=tuple(Tag.from_dict(t) for t in d.get("tags") or ()),
        )

    @classmethod
    def from_draft(cls, raw: Any) -> Task:
        """Task typed in the UI before the backend assigns an id."""
        d = _require_mapping(raw, "task")
        return cls.from_dict({"id": 0, "status": TaskStatus.TODO.value, **d})

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["status"] = str(self.status)
        out["tags"] = [asdict(t) for t in self.tags]
        return out


@dataclass(frozen=True, slots=True)
class TimerState:
    """Full timer snapshot; every update replaces the previous one."""

    remaining: int
    paused: bool
    phase: TimerPhase
    task_active: bool
    active_task_name: str | None
    session_duration: int
    last_activity: int

    @classmethod
    def from_dict(cls, raw: Any) -> TimerState:
        d = _require_mapping(raw, "timer")
        return cls(
            remaining=int(d["remaining"]),
            paused=bool(d["paused"]),
            phase=TimerPhase(int(d["phase"])),
            task_active=bool(d["task_active"]),
            active_task_name=_opt_str(d.get("active_task_name")),
            session_duration=int(d["session_duration"]),
            last_activity=int(d.get("last_activity", 0)),
        )


@dataclass(frozen=True, slots=True)
class TaskTemplate:
    """User-defined task preset, stored locally only."""

    id: str
    name: str
    title: str = ""
    priority: int = 0
    project_id: int | None = None
    description: str = ""
    tag_ids: tuple[int, ...] = ()

    @classmethod
    def from_dict(cls, raw: Any) -> TaskTemplate:
        d = _require_mapping(raw, "template")
        return cls(
            id=str(d["id"]),
            name=str(d["name"]),
            title=str(d.get("title") or ""),
            priority=int(d.get("priority") or 0),
            project_id=_opt_int(d.get("project_id")),
            description=str(d.get("description") or ""),
            tag_ids=tuple(int(t) for t in d.get("tagIds", d.get("tag_ids")) or ()),
        )

    def to_dict(self) -> dict[str, Any]:
        """Stored form; tags are kept under ``tagIds``."""
        out = asdict(self)
        del out["tag_ids"]
        out["tagIds"] = list(self.tag_ids)
        return out
