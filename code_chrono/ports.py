"""
Ports (interfaces) used by the state layer.

State objects depend on this Protocol instead of a concrete transport, so the
stdio process backend and the in-memory test fake are interchangeable.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol

EventHandler = Callable[[Any], None]
Unlisten = Callable[[], None]


class BackendError(Exception):
    """A backend command failed or the channel to the backend went away."""

    def __init__(self, command: str, message: str) -> None:
        super().__init__(f"{command}: {message}")
        self.command = command
        self.message = message


class Backend(Protocol):
    """Request/response commands plus a push-event stream.

    Commands used by this layer:
    - get_tasks(filter_project, filter_tag, filter_status) -> list[task]
    - get_projects() / get_tags() -> list
    - search_tasks(query) -> list[task]
    - get_timer() -> timer snapshot
    Push events: "timer-tick" with a full timer snapshot as payload.
    """

    async def invoke(self, command: str, args: Mapping[str, Any] | None = None) -> Any: ...

    async def listen(self, event: str, handler: EventHandler) -> Unlisten: ...
