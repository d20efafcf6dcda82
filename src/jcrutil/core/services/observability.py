"""Event log for jcrutil operations.

Each event is one line on stderr so stdout stays free for JSON envelopes.

Environment:
    JCRUTIL_LOG_FORMAT  "text" (default) or "json" lines.
    JCRUTIL_LOG_SILENT  "1" drops every event.
    JCRUTIL_DEBUG       "1" enables the trace events sent through log_debug().
    JCRUTIL_RUN_ID      UUIDv4 to stamp on events instead of a generated one.
"""

import json
import os
import re
import sys
import time
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Generator, Optional

from jcrutil.core.services.error_codes import ErrorCode, RepositoryError

_UUID4_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")

_current_run_id: Optional[str] = None


def get_run_id() -> str:
    """Return JCRUTIL_RUN_ID when it is a UUIDv4, else a fresh UUIDv4."""
    candidate = (os.environ.get("JCRUTIL_RUN_ID") or "").strip().lower()
    return candidate if _UUID4_RE.match(candidate) else str(uuid.uuid4())


def get_current_run_id() -> str:
    global _current_run_id
    if _current_run_id is None:
        _current_run_id = get_run_id()
    return _current_run_id


def reset_current_run_id() -> None:
    global _current_run_id
    _current_run_id = None


def get_log_format() -> str:
    return os.environ.get("JCRUTIL_LOG_FORMAT", "text")


def _flag(name: str) -> bool:
    return os.environ.get(name) == "1"


def _format_text(entry: Dict[str, Any]) -> str:
    parts = [f"[{entry['run_id']}]", entry["timestamp"], entry["operation"]]
    if "level" in entry:
        parts.append(f"[{entry['level']}]")
    parts.append("OK" if entry["success"] else "FAILED")
    if "duration_ms" in entry:
        parts.append(f"({entry['duration_ms']:.2f}ms)")
    if "error_code" in entry:
        parts.append(f"[{entry['error_code']}]")
    if "details" in entry:
        parts.append(json.dumps(entry["details"], default=str))
    return " ".join(parts)


def _emit(operation: str, success: bool, **fields: Any) -> None:
    if _flag("JCRUTIL_LOG_SILENT"):
        return
    entry: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "run_id": get_current_run_id(),
        "operation": operation,
        "success": success,
    }
    entry.update((key, value) for key, value in fields.items() if value is not None)
    if get_log_format() == "json":
        line = json.dumps(entry, separators=(",", ":"), default=str)
    else:
        line = _format_text(entry)
    print(line, file=sys.stderr, flush=True)


def log_event(
    operation: str,
    success: bool,
    duration_ms: Optional[float] = None,
    error_code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    """Write one operation event to stderr.

    Empty details and error codes are left out of the entry; durations are
    rounded to two decimals.
    """
    _emit(
        operation,
        success,
        duration_ms=None if duration_ms is None else round(duration_ms, 2),
        error_code=error_code or None,
        details=details or None,
    )


def log_debug(operation: str, details: Optional[Dict[str, Any]] = None) -> None:
    """Trace event, only written when JCRUTIL_DEBUG=1."""
    if _flag("JCRUTIL_DEBUG"):
        _emit(operation, True, level="debug", details=details or None)


@contextmanager
def log_operation(operation: str, details: Optional[Dict[str, Any]] = None) -> Generator[Dict[str, Any], None, None]:
    """Time the enclosed block and log it as one event.

    The yielded dict's ``details`` entry may be extended inside the block. A
    raised RepositoryError is logged with its code, anything else as
    UNKNOWN_ERROR; the exception always propagates.
    """
    context: Dict[str, Any] = {"details": dict(details or {})}
    started = time.monotonic()
    error_code: Optional[str] = None
    try:
        yield context
    except RepositoryError as exc:
        error_code = exc.code.value
        raise
    except BaseException:
        error_code = ErrorCode.UNKNOWN_ERROR.value
        raise
    finally:
        log_event(
            operation,
            error_code is None,
            duration_ms=(time.monotonic() - started) * 1000,
            error_code=error_code,
            details=context["details"],
        )
