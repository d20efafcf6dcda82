"""Exit code mapping for the jcrutil CLI."""

from __future__ import annotations

import os

from jcrutil.core.services.error_codes import ErrorCode

EX_SUCCESS = 0
EX_USAGE = getattr(os, "EX_USAGE", 64)
EX_DATAERR = getattr(os, "EX_DATAERR", 65)
EX_NOINPUT = getattr(os, "EX_NOINPUT", 66)
EX_CANTCREAT = getattr(os, "EX_CANTCREAT", 73)
EX_CONFIG = getattr(os, "EX_CONFIG", 78)


def exit_code_for_error(error_code: ErrorCode) -> int:
    """Map ErrorCode to sysexits-style exit codes."""
    mapping = {
        ErrorCode.INVALID_HINT: EX_USAGE,
        ErrorCode.UNKNOWN_NAMESPACE: EX_DATAERR,
        ErrorCode.NAME_SPACE_EXHAUSTED: EX_CANTCREAT,
        ErrorCode.ITEM_EXISTS: EX_CANTCREAT,
        ErrorCode.ITEM_NOT_FOUND: EX_NOINPUT,
        ErrorCode.INVALID_NAME: EX_DATAERR,
        ErrorCode.CONFIG_INVALID: EX_CONFIG,
        ErrorCode.TREE_FILE_INVALID: EX_DATAERR,
        ErrorCode.TREE_FILE_NOT_FOUND: EX_NOINPUT,
        ErrorCode.UNKNOWN_ERROR: EX_DATAERR,
    }
    return mapping.get(error_code, EX_DATAERR)
