from __future__ import annotations

import argparse
import logging
import os
import shlex
import sys

from PySide6 import QtAsyncio
from PySide6.QtWidgets import QApplication

from code_chrono.app.context import AppContext
from code_chrono.ipc import StdioBackend
from code_chrono.local_storage import LocalStorage
from code_chrono.logger import get_logger, setup_logger

_logger = get_logger("main")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="code-chrono", description="Code Chrono state layer")
    parser.add_argument(
        "--backend",
        default=os.getenv("CODE_CHRONO_BACKEND", "code-chrono-backend"),
        help="Backend command line (split shell-style)",
    )
    parser.add_argument("--storage", default=None, help="Path of the local storage JSON file")
    parser.add_argument("--log-level", default=None, help="debug/info/warning/error")
    args, _ = parser.parse_known_args(argv)
    return args


async def _start(context_holder: list[AppContext], backend_argv: list[str], storage: LocalStorage) -> None:
    backend = await StdioBackend.spawn(*backend_argv)
    context = AppContext(backend, storage)
    # Keep the context alive for the whole process.
    context_holder.append(context)
    await context.startup()
    _logger.info(
        "state ready: tasks=%d projects=%d tags=%d timer=%s",
        len(context.domain_state.tasks),
        len(context.domain_state.projects),
        len(context.domain_state.tags),
        context.timer_mirror.mirror_status,
    )


def run(argv: list[str] | None = None) -> int:
    """Application entrypoint (packaging-friendly)."""
    if argv is None:
        argv = sys.argv

    args = _parse_args(argv[1:])
    if args.log_level:
        os.environ["CODE_CHRONO_LOG_LEVEL"] = str(args.log_level)
    setup_logger(logging.INFO)

    backend_argv = shlex.split(args.backend)
    if not backend_argv:
        _logger.error("no backend command given")
        return 2

    app = QApplication(argv)
    app.setApplicationName("Code Chrono")
    storage = LocalStorage(args.storage)

    holder: list[AppContext] = []
    QtAsyncio.run(_start(holder, backend_argv, storage), keep_running=True, quit_qapp=True)
    return 0


if __name__ == "__main__":
    sys.exit(run())
