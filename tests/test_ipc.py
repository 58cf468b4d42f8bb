from __future__ import annotations

import asyncio
import json

import pytest

from code_chrono.app.state.domain_state import DomainState
from code_chrono.ipc import STREAM_LIMIT, StdioBackend
from code_chrono.ports import BackendError

from .fakes import task_dict


class FakeWriter:
    def __init__(self) -> None:
        self.lines: list[dict] = []
        self.closed = False

    def write(self, data: bytes) -> None:
        for raw in data.decode("utf-8").splitlines():
            self.lines.append(json.loads(raw))

    async def drain(self) -> None:
        await asyncio.sleep(0)

    def close(self) -> None:
        self.closed = True


def _feed(reader: asyncio.StreamReader, msg: object) -> None:
    reader.feed_data(json.dumps(msg).encode("utf-8") + b"\n")


async def _settle() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_invoke_round_trip() -> None:
    reader = asyncio.StreamReader()
    writer = FakeWriter()
    backend = StdioBackend(reader, writer)

    call = asyncio.ensure_future(backend.invoke("get_tasks", {"filter_status": "todo"}))
    await _settle()

    assert writer.lines == [{"id": 1, "cmd": "get_tasks", "args": {"filter_status": "todo"}}]
    _feed(reader, {"id": 1, "ok": True, "result": [{"id": 5}]})

    assert await call == [{"id": 5}]
    await backend.close()


@pytest.mark.asyncio
async def test_error_response_raises_backend_error() -> None:
    reader = asyncio.StreamReader()
    backend = StdioBackend(reader, FakeWriter())

    call = asyncio.ensure_future(backend.invoke("get_projects"))
    await _settle()
    _feed(reader, {"id": 1, "ok": False, "error": "database is locked"})

    with pytest.raises(BackendError) as exc:
        await call
    assert exc.value.command == "get_projects"
    assert exc.value.message == "database is locked"
    await backend.close()


@pytest.mark.asyncio
async def test_responses_matched_by_id_out_of_order() -> None:
    reader = asyncio.StreamReader()
    backend = StdioBackend(reader, FakeWriter())

    first = asyncio.ensure_future(backend.invoke("get_tasks"))
    second = asyncio.ensure_future(backend.invoke("get_tags"))
    await _settle()
    _feed(reader, {"id": 2, "ok": True, "result": "tags"})
    _feed(reader, {"id": 1, "ok": True, "result": "tasks"})

    assert await first == "tasks"
    assert await second == "tags"
    await backend.close()


@pytest.mark.asyncio
async def test_push_events_reach_listeners_until_unlisten() -> None:
    reader = asyncio.StreamReader()
    backend = StdioBackend(reader, FakeWriter())
    seen: list[object] = []

    unlisten = await backend.listen("timer-tick", seen.append)
    _feed(reader, {"event": "timer-tick", "payload": {"remaining": 3}})
    _feed(reader, {"event": "other", "payload": 1})
    await _settle()

    unlisten()
    _feed(reader, {"event": "timer-tick", "payload": {"remaining": 2}})
    await _settle()

    assert seen == [{"remaining": 3}]
    await backend.close()


@pytest.mark.asyncio
async def test_failing_handler_does_not_block_others(chrono_logs) -> None:
    reader = asyncio.StreamReader()
    backend = StdioBackend(reader, FakeWriter())
    seen: list[object] = []

    def broken(_payload) -> None:
        raise RuntimeError("handler bug")

    await backend.listen("timer-tick", broken)
    await backend.listen("timer-tick", seen.append)
    reader.feed_data(b"not json\n")
    _feed(reader, {"event": "timer-tick", "payload": 1})
    await _settle()

    assert seen == [1]
    assert any("malformed backend line" in r.getMessage() for r in chrono_logs)
    await backend.close()


@pytest.mark.asyncio
async def test_eof_fails_pending_requests() -> None:
    reader = asyncio.StreamReader()
    backend = StdioBackend(reader, FakeWriter())

    call = asyncio.ensure_future(backend.invoke("get_timer"))
    await _settle()
    reader.feed_eof()

    with pytest.raises(BackendError):
        await call
    with pytest.raises(BackendError):
        await backend.invoke("get_timer")
    await backend.close()


def _big_task_list(count: int) -> list[dict]:
    return [task_dict(i, f"Task {i} " + "x" * 200, description="d" * 60) for i in range(count)]


@pytest.mark.asyncio
async def test_large_task_list_fits_in_one_line() -> None:
    reader = asyncio.StreamReader(limit=STREAM_LIMIT)
    backend = StdioBackend(reader, FakeWriter())
    domain = DomainState(backend)

    job = asyncio.ensure_future(domain.refresh_tasks())
    await _settle()
    _feed(reader, {"id": 1, "ok": True, "result": _big_task_list(400)})
    await asyncio.wait_for(job, 2)

    assert len(domain.tasks) == 400
    await backend.close()


@pytest.mark.asyncio
async def test_oversized_line_fails_request_and_channel_keeps_working(chrono_logs) -> None:
    reader = asyncio.StreamReader(limit=1024)
    backend = StdioBackend(reader, FakeWriter())
    domain = DomainState(backend)

    job = asyncio.ensure_future(domain.refresh_tasks())
    await _settle()
    _feed(reader, {"id": 1, "ok": True, "result": _big_task_list(50)})
    await asyncio.wait_for(job, 2)

    assert domain.tasks == []
    assert any("stream limit" in r.getMessage() for r in chrono_logs)

    call = asyncio.ensure_future(backend.invoke("get_tags"))
    await _settle()
    _feed(reader, {"id": 2, "ok": True, "result": []})
    assert await asyncio.wait_for(call, 2) == []
    await backend.close()


class BrokenReader:
    def __init__(self) -> None:
        self.gate = asyncio.Event()

    async def readline(self) -> bytes:
        await self.gate.wait()
        raise ConnectionResetError("pipe reset")


@pytest.mark.asyncio
async def test_read_failure_closes_channel_and_fails_pending(chrono_logs) -> None:
    reader = BrokenReader()
    backend = StdioBackend(reader, FakeWriter())  # type: ignore[arg-type]

    call = asyncio.ensure_future(backend.invoke("get_timer"))
    await _settle()
    reader.gate.set()

    with pytest.raises(BackendError):
        await asyncio.wait_for(call, 2)
    with pytest.raises(BackendError):
        await backend.invoke("get_timer")
    assert any("read loop failed" in r.getMessage() for r in chrono_logs)
    await backend.close()


class FakeProcess:
    def __init__(self, stdout: asyncio.StreamReader | None, stdin: FakeWriter | None) -> None:
        self.stdout = stdout
        self.stdin = stdin
        self.pid = 4242
        self.returncode: int | None = None
        self.killed = False

    def kill(self) -> None:
        self.killed = True
        self.returncode = -9

    def terminate(self) -> None:
        self.returncode = -15

    async def wait(self) -> int:
        return self.returncode or 0


@pytest.mark.asyncio
async def test_spawn_raises_the_stream_limit(monkeypatch) -> None:
    seen: dict = {}
    proc = FakeProcess(asyncio.StreamReader(), FakeWriter())

    async def fake_exec(*argv, **kwargs):
        seen.update(kwargs, argv=argv)
        return proc

    monkeypatch.setattr(asyncio, "create_subprocess_exec", fake_exec)
    backend = await StdioBackend.spawn("code-chrono-backend", "--stdio")

    assert seen["limit"] == STREAM_LIMIT
    assert seen["argv"] == ("code-chrono-backend", "--stdio")
    await backend.close()
    assert proc.returncode == -15


@pytest.mark.asyncio
async def test_spawn_without_pipes_raises_backend_error(monkeypatch) -> None:
    proc = FakeProcess(None, None)

    async def fake_exec(*argv, **kwargs):
        return proc

    monkeypatch.setattr(asyncio, "create_subprocess_exec", fake_exec)

    with pytest.raises(BackendError):
        await StdioBackend.spawn("code-chrono-backend")
    assert proc.killed
