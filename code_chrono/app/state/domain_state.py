from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from PySide6.QtCore import Property, QObject, Signal

from code_chrono.logger import get_logger
from code_chrono.models import Project, Tag, Task, TaskStatus
from code_chrono.ports import Backend

_logger = get_logger("domain")

T = TypeVar("T")


def _as_id(raw: Any) -> int | None:
    try:
        return None if raw is None else int(raw)
    except (TypeError, ValueError):
        _logger.warning("backend returned a non-integer id: %r", raw)
        return None


def _parse_list(raw: Any, parse: Callable[[Any], T]) -> list[T]:
    if not isinstance(raw, list):
        raise TypeError(f"expected a list, got {type(raw).__name__}")
    return [parse(item) for item in raw]


class DomainState(QObject):
    """Mirror of backend-owned tasks, projects and tags.

    Design:
    - Each collection is replaced wholesale by a successful fetch and never
      patched locally. A failed request (or an unparsable response) leaves
      the previous collection untouched and is logged.
    - No request is cancelled or de-duplicated. Two concurrent refreshes of
      the same collection race; the response that arrives last wins.
    - ``search_tasks`` and the filter-driven ``refresh_tasks`` are separate
      write paths into the same task collection; search ignores the filters.
    """

    tasksChanged = Signal(object)
    projectsChanged = Signal(object)
    tagsChanged = Signal(object)

    searchQueryChanged = Signal(str)
    filterProjectChanged = Signal(object)
    filterTagChanged = Signal(object)
    filterStatusChanged = Signal(object)

    def __init__(self, backend: Backend, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._backend = backend

        self._tasks: list[Task] = []
        self._projects: list[Project] = []
        self._tags: list[Tag] = []

        self._search_query = ""
        self._filter_project: int | None = None
        self._filter_tag: int | None = None
        self._filter_status: str | None = None

    # ---- collections (read-only; replaced by refresh) ----
    def _get_tasks(self) -> list[Task]:
        return list(self._tasks)

    tasks = Property(list, _get_tasks, notify=tasksChanged)  # type: ignore[arg-type]

    def _get_projects(self) -> list[Project]:
        return list(self._projects)

    projects = Property(list, _get_projects, notify=projectsChanged)  # type: ignore[arg-type]

    def _get_tags(self) -> list[Tag]:
        return list(self._tags)

    tags = Property(list, _get_tags, notify=tagsChanged)  # type: ignore[arg-type]

    # ---- filters ----
    def _get_search_query(self) -> str:
        return str(self._search_query)

    searchQuery = Property(str, _get_search_query, notify=searchQueryChanged)  # type: ignore[arg-type]

    def _get_filter_project(self) -> int | None:
        return self._filter_project

    filterProject = Property(object, _get_filter_project, notify=filterProjectChanged)  # type: ignore[arg-type]

    def _get_filter_tag(self) -> int | None:
        return self._filter_tag

    filterTag = Property(object, _get_filter_tag, notify=filterTagChanged)  # type: ignore[arg-type]

    def _get_filter_status(self) -> str | None:
        return self._filter_status

    filterStatus = Property(object, _get_filter_status, notify=filterStatusChanged)  # type: ignore[arg-type]

    def set_search_query(self, query: str) -> None:
        q = str(query or "")
        if q == self._search_query:
            return
        self._search_query = q
        self.searchQueryChanged.emit(q)

    def set_filter_project(self, project_id: int | None) -> None:
        v = None if project_id is None else int(project_id)
        if v == self._filter_project:
            return
        self._filter_project = v
        self.filterProjectChanged.emit(v)

    def set_filter_tag(self, tag_id: int | None) -> None:
        v = None if tag_id is None else int(tag_id)
        if v == self._filter_tag:
            return
        self._filter_tag = v
        self.filterTagChanged.emit(v)

    def set_filter_status(self, status: str | None) -> None:
        v = None if status is None else str(TaskStatus(status))
        if v == self._filter_status:
            return
        self._filter_status = v
        self.filterStatusChanged.emit(v)

    # ---- internal mutation helpers ----
    def _set_tasks(self, tasks: list[Task]) -> None:
        self._tasks = list(tasks)
        self.tasksChanged.emit(list(self._tasks))

    def _set_projects(self, projects: list[Project]) -> None:
        self._projects = list(projects)
        self.projectsChanged.emit(list(self._projects))

    def _set_tags(self, tags: list[Tag]) -> None:
        self._tags = list(tags)
        self.tagsChanged.emit(list(self._tags))

    async def _fetch(
        self,
        command: str,
        args: Mapping[str, Any] | None,
        parse: Callable[[Any], T],
    ) -> list[T] | None:
        try:
            raw = await self._backend.invoke(command, args)
            return _parse_list(raw, parse)
        except Exception as e:
            _logger.error("%s failed: %s", command, e)
            return None

    # ---- refresh ----
    async def refresh_tasks(self) -> None:
        args = {
            "filter_project": self._filter_project,
            "filter_tag": self._filter_tag,
            "filter_status": self._filter_status,
        }
        result = await self._fetch("get_tasks", args, Task.from_dict)
        if result is not None:
            self._set_tasks(result)
            _logger.debug("tasks refreshed: %d", len(result))

    async def refresh_projects(self) -> None:
        result = await self._fetch("get_projects", None, Project.from_dict)
        if result is not None:
            self._set_projects(result)

    async def refresh_tags(self) -> None:
        result = await self._fetch("get_tags", None, Tag.from_dict)
        if result is not None:
            self._set_tags(result)

    async def refresh_all(self) -> None:
        """Refresh all three collections concurrently; each settles on its own."""
        await asyncio.gather(
            self.refresh_tasks(),
            self.refresh_projects(),
            self.refresh_tags(),
            return_exceptions=True,
        )

    async def search_tasks(self, query: str) -> None:
        result = await self._fetch("search_tasks", {"query": str(query)}, Task.from_dict)
        if result is not None:
            self._set_tasks(result)
            _logger.debug("search %r matched %d tasks", query, len(result))

    # ---- mutations (backend first, then refresh) ----
    async def _command(self, command: str, args: Mapping[str, Any]) -> tuple[bool, Any]:
        try:
            return True, await self._backend.invoke(command, args)
        except Exception as e:
            _logger.error("%s failed: %s", command, e)
            return False, None

    async def create_task(self, task: Task) -> int | None:
        ok, new_id = await self._command("create_task", {"task": task.to_dict()})
        if not ok:
            return None
        await self.refresh_tasks()
        return _as_id(new_id)

    async def update_task(self, task: Task) -> bool:
        ok, _ = await self._command("update_task", {"task": task.to_dict()})
        if ok:
            await self.refresh_tasks()
        return ok

    async def delete_task(self, task_id: int) -> bool:
        ok, _ = await self._command("delete_task", {"id": int(task_id)})
        if ok:
            await self.refresh_tasks()
        return ok

    async def create_project(self, name: str, color: str | None = None) -> int | None:
        ok, new_id = await self._command("create_project", {"name": str(name), "color": color})
        if not ok:
            return None
        await self.refresh_projects()
        return _as_id(new_id)

    async def delete_project(self, project_id: int) -> bool:
        ok, _ = await self._command("delete_project", {"id": int(project_id)})
        if ok:
            # Tasks lose their project reference on the backend side.
            await asyncio.gather(self.refresh_projects(), self.refresh_tasks())
        return ok

    async def create_tag(self, name: str, color: str | None = None) -> int | None:
        ok, new_id = await self._command("create_tag", {"name": str(name), "color": color})
        if not ok:
            return None
        await self.refresh_tags()
        return _as_id(new_id)

    async def delete_tag(self, tag_id: int) -> bool:
        ok, _ = await self._command("delete_tag", {"id": int(tag_id)})
        if ok:
            await asyncio.gather(self.refresh_tags(), self.refresh_tasks())
        return ok
