from __future__ import annotations

import asyncio
import contextlib
import json
from collections.abc import Mapping
from typing import Any

from .logger import get_logger
from .ports import BackendError, EventHandler, Unlisten

_logger = get_logger("ipc")

# Upper bound for one JSON line; full task lists arrive as a single line.
STREAM_LIMIT = 16 * 1024 * 1024


class StdioBackend:
    """Backend reached over JSON lines on a pair of byte streams.

    Wire format, one JSON object per line:
    - request:  {"id": 7, "cmd": "get_tasks", "args": {...}}
    - response: {"id": 7, "ok": true, "result": ...} or {"id": 7, "ok": false, "error": "..."}
    - push:     {"event": "timer-tick", "payload": {...}}

    Push events are dispatched in arrival order, synchronously inside the read loop.
    """

    def __init__(self, reader: asyncio.StreamReader, writer: Any) -> None:
        self._reader = reader
        self._writer = writer
        self._next_id = 0
        self._pending: dict[int, tuple[str, asyncio.Future[Any]]] = {}
        self._handlers: dict[str, list[EventHandler]] = {}
        self._read_task: asyncio.Task[None] | None = None
        self._process: asyncio.subprocess.Process | None = None
        self._closed = False

    @classmethod
    async def spawn(cls, *argv: str, limit: int = STREAM_LIMIT) -> StdioBackend:
        """Start the backend process and attach to its stdin/stdout."""
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            limit=limit,
        )
        if proc.stdout is None or proc.stdin is None:
            proc.kill()
            await proc.wait()
            raise BackendError("spawn", "backend process has no stdio pipes")
        backend = cls(proc.stdout, proc.stdin)
        backend._process = proc
        backend.start()
        _logger.info("backend started: pid=%s argv=%s", proc.pid, " ".join(argv))
        return backend

    def start(self) -> None:
        if self._read_task is None:
            self._read_task = asyncio.ensure_future(self._read_loop())

    async def invoke(self, command: str, args: Mapping[str, Any] | None = None) -> Any:
        if self._closed:
            raise BackendError(command, "backend channel is closed")
        self.start()

        self._next_id += 1
        req_id = self._next_id
        fut: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._pending[req_id] = (command, fut)

        line = json.dumps({"id": req_id, "cmd": command, "args": dict(args or {})}, ensure_ascii=False)
        try:
            self._writer.write(line.encode("utf-8") + b"\n")
            await self._writer.drain()
        except (OSError, RuntimeError) as e:
            self._pending.pop(req_id, None)
            raise BackendError(command, f"write failed: {e}") from e

        _logger.debug("request sent: id=%d cmd=%s", req_id, command)
        return await fut

    async def listen(self, event: str, handler: EventHandler) -> Unlisten:
        self.start()
        self._handlers.setdefault(event, []).append(handler)

        def unlisten() -> None:
            handlers = self._handlers.get(event, [])
            with contextlib.suppress(ValueError):
                handlers.remove(handler)

        return unlisten

    async def close(self) -> None:
        self._closed = True
        with contextlib.suppress(OSError, RuntimeError):
            self._writer.close()
        if self._read_task is not None:
            self._read_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._read_task
        self._fail_pending("backend channel is closed")
        if self._process is not None and self._process.returncode is None:
            self._process.terminate()
            await self._process.wait()

    # ---- read side ----
    async def _read_loop(self) -> None:
        try:
            while True:
                try:
                    raw = await self._reader.readline()
                except ValueError as e:
                    # The reader discards the oversized line; its request can't be identified.
                    _logger.error("backend line over the stream limit dropped: %s", e)
                    self._fail_pending("backend response exceeded the stream limit")
                    continue
                if not raw:
                    _logger.warning("backend stream closed")
                    break
                self._handle_line(raw)
        except Exception as e:
            _logger.exception("backend read loop failed: %s", e)
        finally:
            self._closed = True
            self._fail_pending("backend channel is closed")

    def _handle_line(self, raw: bytes) -> None:
        try:
            msg = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            _logger.warning("malformed backend line dropped: %s", e)
            return
        if not isinstance(msg, dict):
            _logger.warning("non-object backend message dropped: %r", msg)
            return

        if "event" in msg:
            self._dispatch_event(str(msg["event"]), msg.get("payload"))
            return

        req_id = msg.get("id")
        entry = self._pending.pop(req_id, None) if isinstance(req_id, int) else None
        if entry is None:
            _logger.warning("response for unknown request id dropped: %r", req_id)
            return
        command, fut = entry
        if fut.done():
            return
        if msg.get("ok"):
            fut.set_result(msg.get("result"))
        else:
            fut.set_exception(BackendError(command, str(msg.get("error", "unknown error"))))

    def _dispatch_event(self, event: str, payload: Any) -> None:
        for handler in list(self._handlers.get(event, [])):
            try:
                handler(payload)
            except Exception as e:
                _logger.exception("event handler failed for %s: %s", event, e)

    def _fail_pending(self, message: str) -> None:
        pending, self._pending = self._pending, {}
        for command, fut in pending.values():
            if not fut.done():
                fut.set_exception(BackendError(command, message))
