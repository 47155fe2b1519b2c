"""Structured logging: stderr console plus JSON-lines event file.

stdout belongs to the MCP stdio transport, so nothing here ever writes to it.
"""

import contextvars
import json
import logging
import os
import sys
import threading
import time
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from src.core.config import config


def _format_duration(seconds: float) -> str:
    if seconds < 0:
        return "0s"
    if seconds >= 60:
        m = int(seconds // 60)
        s = seconds % 60
        if s < 0.05:
            return f"{m}m"
        return f"{m}m {s:.0f}s" if s >= 1 else f"{m}m {s:.1f}s"
    if seconds >= 0.05:
        return f"{seconds:.1f}s"
    if seconds > 0:
        return "<0.1s"
    return "0s"


def _short_reason(reason: str | None, max_len: int = 80) -> str:
    """One-line short reason for console (failed tool or login)."""
    if not reason or not reason.strip():
        return ""
    s = reason.strip().replace("\n", " ").strip()
    return s[:max_len] + "..." if len(s) > max_len else s


def _short_query(query: str, max_len: int = 60) -> str:
    q = (query or "").strip()
    return q if len(q) <= max_len else q[: max_len - 3].rstrip() + "..."


_log_tool_start: contextvars.ContextVar[float | None] = contextvars.ContextVar(
    "log_tool_start", default=None
)
_log_search_start: contextvars.ContextVar[float | None] = contextvars.ContextVar(
    "log_search_start", default=None
)
_log_in_tool: contextvars.ContextVar[bool] = contextvars.ContextVar(
    "log_in_tool", default=False
)


def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    try:
        return sys.stderr.isatty()
    except Exception:
        return False


def _c(role: str) -> str:
    if not _use_color():
        return ""
    # 38;5;N = foreground 256-color
    codes = {
        "dim": "\033[38;5;239m",
        "tool": "\033[38;5;81m",
        "auth": "\033[38;5;141m",
        "run": "\033[38;5;78m",
        "done_ok": "\033[38;5;78m",
        "done_fail": "\033[38;5;203m",
        "fallback": "\033[38;5;221m",
        "duration": "\033[38;5;221m",
    }
    return codes.get(role, "")


def _reset() -> str:
    if not _use_color():
        return ""
    return "\033[0m"


@dataclass
class LogEvent:
    event_type: str
    timestamp: str
    data: dict[str, Any]

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


class SupplyLogger:
    def __init__(self, log_to_file: bool | None = None):
        self._file_lock = threading.Lock()
        self._log_file_handle = None
        if config.log_to_file if log_to_file is None else log_to_file:
            config.logs_dir.mkdir(parents=True, exist_ok=True)
            self.log_file = config.logs_dir / "server.log"
            self._log_file_handle = open(self.log_file, "a", encoding="utf-8")
        self._setup_console_logger()

    def _setup_console_logger(self):
        self.console = logging.getLogger("supply")
        self.console.setLevel(logging.DEBUG)
        self._console_formatter = logging.Formatter(
            "%(asctime)s │ %(message)s", datefmt="%H:%M:%S"
        )
        if not self.console.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setLevel(getattr(logging, config.log_level, logging.INFO))
            handler.setFormatter(self._console_formatter)
            self.console.addHandler(handler)
        self._setup_third_party_console_logging()

    def _setup_third_party_console_logging(self):
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.WARNING)
        handler.setFormatter(self._console_formatter)
        for name in ("mcp", "httpx"):
            log = logging.getLogger(name)
            log.setLevel(logging.WARNING)
            log.propagate = False
            if not log.handlers:
                log.addHandler(handler)

    def log_event(self, event: LogEvent) -> None:
        if self._log_file_handle is None:
            return
        with self._file_lock:
            self._log_file_handle.write(event.to_json() + "\n")
            self._log_file_handle.flush()

    def _timestamp(self) -> str:
        return datetime.now().isoformat()

    def _prefix(self) -> str:
        return "  │ " if _log_in_tool.get() else ""

    def _emit(self, event_type: str, data: dict[str, Any]) -> None:
        self.log_event(
            LogEvent(event_type=event_type, timestamp=self._timestamp(), data=data)
        )

    def _format_tool_args(self, args: dict) -> str:
        """Shorten args for console so long queries don't flood the log."""
        max_val = 72
        out = []
        for k, v in (args or {}).items():
            s = repr(v)
            if len(s) > max_val:
                s = s[: max_val - 3].rstrip() + "..."
            out.append(f"{k}={s}")
        return ", ".join(out)

    # -- authentication ---------------------------------------------------

    def auth_attempt(self, backend_url: str):
        self._emit("AUTH_ATTEMPT", {"backend_url": backend_url})
        self.console.info(
            f"{self._prefix()}{_c('auth')}🔐 Authenticating{_reset()} with {backend_url}"
        )

    def auth_success(self, expires_at: float):
        expiry = datetime.fromtimestamp(expires_at).isoformat(timespec="seconds")
        self._emit("AUTH_SUCCESS", {"expires_at": expiry})
        self.console.info(
            f"{self._prefix()}{_c('done_ok')}✅ Authenticated{_reset()}  token valid until {expiry}"
        )

    def auth_failure(self, reason: str):
        self._emit("AUTH_FAILURE", {"reason": reason[:500]})
        self.console.error(
            f"{self._prefix()}{_c('done_fail')}❌ Authentication failed{_reset()}: {_short_reason(reason)}"
        )

    # -- backend ------------------------------------------------------------

    def backend_request(self, path: str, params: dict[str, Any] | None = None):
        self._emit("BACKEND_REQUEST", {"path": path, "params": params or {}})
        self.console.debug(
            f"{self._prefix()}GET {path}  {self._format_tool_args(params or {})}"
        )

    # -- search -------------------------------------------------------------

    def search_start(self, operation: str, query: str, **params: Any):
        _log_search_start.set(time.monotonic())
        self._emit("SEARCH_START", {"operation": operation, "query": query[:500], **params})
        icon = "🧠" if operation == "vector_search" else "🔍"
        self.console.info(
            f"{self._prefix()}{icon} {operation}: \"{_short_query(query)}\""
        )

    def fallback_triggered(self, query: str, reason: str):
        self._emit("FALLBACK_TRIGGERED", {"query": query[:500], "reason": reason})
        self.console.info(
            f"{self._prefix()}{_c('fallback')}📝 Falling back to literal listing{_reset()} ({reason})"
        )

    def search_done(self, operation: str, total_found: int, returned: int, success: bool):
        start = _log_search_start.get()
        _log_search_start.set(None)
        elapsed = (time.monotonic() - start) if start is not None else 0.0
        self._emit(
            "SEARCH_DONE",
            {
                "operation": operation,
                "total_found": total_found,
                "returned": returned,
                "success": success,
                "duration_seconds": round(elapsed, 3),
            },
        )
        self.console.debug(
            f"{self._prefix()}{operation}: {returned}/{total_found} products"
            f"  {_c('duration')}{_format_duration(elapsed)}{_reset()}"
        )

    # -- tools --------------------------------------------------------------

    def tool_execute(self, tool_name: str, args: dict):
        _log_tool_start.set(time.monotonic())
        _log_in_tool.set(True)
        self._emit("TOOL_EXECUTE", {"tool": tool_name, "args": args})
        short_args = self._format_tool_args(args)
        self.console.info(
            f"{_c('run')}▶ Run{_reset()}  {_c('tool')}{tool_name}{_reset()}({short_args})"
        )

    def tool_result(
        self,
        tool_name: str,
        result_length: int,
        success: bool,
        *,
        error_reason: str | None = None,
    ) -> None:
        _log_in_tool.set(False)
        start = _log_tool_start.get()
        _log_tool_start.set(None)
        elapsed = (time.monotonic() - start) if start is not None else 0.0
        data: dict[str, Any] = {
            "tool": tool_name,
            "result_length": result_length,
            "success": success,
            "duration_seconds": round(elapsed, 3),
        }
        if not success and error_reason:
            data["error_reason"] = error_reason[:500]
        self._emit("TOOL_RESULT", data)
        dur_colored = f"{_c('duration')}{_format_duration(elapsed)}{_reset()}"
        if success:
            status_str = f"{_c('done_ok')}[ok]{_reset()}"
        else:
            reason = _short_reason(error_reason)
            status_str = f"{_c('done_fail')}[failed]{_reset()}" + (f" {reason}" if reason else "")
        self.console.info(
            f"{_c('done_ok')}✓ Done{_reset()}  {_c('tool')}{tool_name}{_reset()}  "
            f"total {dur_colored}  {result_length} chars  {status_str}"
        )

    # -- passthroughs -------------------------------------------------------

    def error(self, message: str, *args, exception: Exception | None = None, **kwargs):
        self._emit(
            "ERROR",
            {"message": message, "exception": str(exception) if exception else None},
        )
        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        if exception and "exc_info" not in log_kwargs:
            log_kwargs["exc_info"] = exception
        self.console.error(f"❌ Error: {message}", *args, **log_kwargs)

    def info(self, message: str, *args, **kwargs):
        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        self.console.info(message, *args, **log_kwargs)

    def warning(self, message: str, *args, **kwargs):
        self._emit("WARNING", {"message": message[:500]})
        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        self.console.warning(f"⚠️ {message}", *args, **log_kwargs)

    def exception(self, message: str, *args, **kwargs):
        self._emit("ERROR", {"message": message[:500]})
        self.console.exception(f"❌ {message}", *args, **kwargs)

    def debug(self, message: str, *args, **kwargs):
        self._emit("DEBUG", {"message": message})
        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        self.console.debug(message, *args, **log_kwargs)

    def close(self) -> None:
        with self._file_lock:
            if self._log_file_handle is not None:
                self._log_file_handle.close()
                self._log_file_handle = None


logger = SupplyLogger()
