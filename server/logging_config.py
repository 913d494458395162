"""Logging setup for the API server.

Every record is tagged with the process role and, while an HTTP request is
being served, the request id plus method and path::

    2026-10-19 14:30:00 [Server][INFO] main:41 - Database tables ready
    2026-10-19 14:30:01 [Server][Req ab12cd34 POST /api/chat][ERROR] api.chat:57 - Completion gateway failed ...

The request middleware in ``main.py`` opens a :func:`request_context`;
handlers just use ``logging.getLogger(__name__)``.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(role)s]%(request_tag)s[%(levelname)s] %(name)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Handler names; setup_logging() uses them to stay idempotent
STREAM_HANDLER = "_chatbot_stream"
FILE_HANDLER = "_chatbot_file"

QUIET_LOGGERS = ("httpx", "httpcore", "urllib3", "multipart")
UVICORN_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error")


@dataclass(frozen=True)
class RequestInfo:
    request_id: str
    method: str = ""
    path: str = ""

    @property
    def tag(self) -> str:
        route = f" {self.method} {self.path}" if self.method else ""
        return f"[Req {self.request_id[:8]}{route}]"


current_request: ContextVar[RequestInfo | None] = ContextVar("current_request", default=None)


@contextmanager
def request_context(request_id: str, method: str = "", path: str = ""):
    """Tag log records emitted inside the block with this request."""
    token = current_request.set(RequestInfo(request_id, method, path))
    try:
        yield
    finally:
        current_request.reset(token)


class ContextFilter(logging.Filter):
    """Adds ``role``, ``request_id`` and ``request_tag`` to each record."""

    def __init__(self, role: str) -> None:
        super().__init__()
        self.role = role

    def filter(self, record: logging.LogRecord) -> bool:
        info = current_request.get()
        record.role = self.role  # type: ignore[attr-defined]
        record.request_id = info.request_id if info else ""  # type: ignore[attr-defined]
        record.request_tag = info.tag if info else ""  # type: ignore[attr-defined]
        return True


def build_formatter() -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)


def _file_handler(settings) -> logging.Handler:
    log_path = Path(settings.LOG_FILE)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        str(log_path),
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )


def setup_logging(role: str) -> None:
    """Configure the root logger for *role* (e.g. ``"Server"``).

    Logs go to stderr, and also to a rotating file when ``LOG_FILE`` is set.
    Calling it again is a no-op.
    """
    from config import settings

    root = logging.getLogger()
    if any(h.name == STREAM_HANDLER for h in root.handlers):
        return

    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    handlers = {STREAM_HANDLER: logging.StreamHandler(sys.stderr)}
    if settings.LOG_FILE:
        handlers[FILE_HANDLER] = _file_handler(settings)

    context_filter = ContextFilter(role)
    formatter = build_formatter()
    for name, handler in handlers.items():
        handler.name = name
        handler.addFilter(context_filter)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # uvicorn installs its own handlers unless log_config=None; route through ours
    if "server" in role.lower():
        for name in UVICORN_LOGGERS:
            uv_logger = logging.getLogger(name)
            uv_logger.handlers.clear()
            uv_logger.propagate = True
