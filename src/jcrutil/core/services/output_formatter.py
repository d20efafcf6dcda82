"""JSON output envelope formatter for the jcrutil CLI.

Key guarantees:
- Deterministic key ordering (fixed top-level order, nested keys sorted)
- data always present (defaults to {})
- error present only on failure
- run_id is a full UUIDv4
- root is always an absolute path
- Single-line JSON output
"""

import json
import re
import uuid
from pathlib import Path
from typing import Any, Dict, Optional

from jcrutil.core.services.error_codes import ErrorCode

OUTPUT_SCHEMA_VERSION = "1.0"

_ENVELOPE_KEY_ORDER = [
    "output_schema_version",
    "success",
    "command",
    "run_id",
    "root",
    "data",
    "error",
]

_UUID4_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$"
)


def _normalize_run_id(run_id: Optional[str]) -> str:
    if run_id and _UUID4_RE.match(run_id):
        return run_id
    return str(uuid.uuid4())


def _recursively_sort_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _recursively_sort_keys(value[k]) for k in sorted(value, key=str)}
    if isinstance(value, (list, tuple)):
        return [_recursively_sort_keys(v) for v in value]
    return value


def _ordered(envelope: Dict[str, Any]) -> Dict[str, Any]:
    ordered = {k: envelope[k] for k in _ENVELOPE_KEY_ORDER if k in envelope}
    for k in sorted(envelope):
        if k not in ordered:
            ordered[k] = envelope[k]
    return ordered


def format_envelope(
    *,
    command: str,
    root: str | Path,
    success: bool,
    data: Optional[dict] = None,
    error: Optional[dict] = None,
    run_id: Optional[str] = None,
) -> str:
    """Build a JSON envelope as a deterministic single-line string.

    Args:
        command: CLI subcommand name (e.g. "mkpath", "autoname").
        root: Workspace root path (resolved to absolute).
        success: Whether the command completed without error.
        data: Command-specific payload. Defaults to {}.
        error: Error object (code, message, optional details).
        run_id: Override run_id (must be a UUIDv4).
    """
    envelope: Dict[str, Any] = {
        "output_schema_version": OUTPUT_SCHEMA_VERSION,
        "success": success,
        "command": command,
        "run_id": _normalize_run_id(run_id),
        "root": Path(root).resolve().as_posix(),
        "data": _recursively_sort_keys(data if data is not None else {}),
    }
    if error is not None:
        envelope["error"] = _recursively_sort_keys(error)
    return json.dumps(_ordered(envelope), separators=(",", ":"), default=str)


def format_error_envelope(
    *,
    command: str,
    root: str | Path,
    error_code: ErrorCode,
    message: str,
    details: Optional[dict] = None,
    run_id: Optional[str] = None,
) -> str:
    error: Dict[str, Any] = {"code": error_code.value, "message": message}
    if details:
        error["details"] = details
    return format_envelope(
        command=command,
        root=root,
        success=False,
        error=error,
        run_id=run_id,
    )
