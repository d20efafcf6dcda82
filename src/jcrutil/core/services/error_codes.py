"""Error codes and exception handling for jcrutil.

This module defines the package-wide ErrorCode enum and the RepositoryError
exception hierarchy. Name generation raises InvalidHintError and
UnknownNamespaceError; the in-memory tree raises ItemExistsError,
ItemNotFoundError and InvalidNameError. Path materialization never wraps
these, it lets them propagate.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Package-wide error code enumeration.

    Categories:
        Naming: INVALID_HINT, UNKNOWN_NAMESPACE, NAME_SPACE_EXHAUSTED
        Tree: ITEM_EXISTS, ITEM_NOT_FOUND, INVALID_NAME
        Adapters: CONFIG_INVALID, TREE_FILE_INVALID, TREE_FILE_NOT_FOUND
    """

    INVALID_HINT = "INVALID_HINT"
    UNKNOWN_NAMESPACE = "UNKNOWN_NAMESPACE"
    NAME_SPACE_EXHAUSTED = "NAME_SPACE_EXHAUSTED"
    ITEM_EXISTS = "ITEM_EXISTS"
    ITEM_NOT_FOUND = "ITEM_NOT_FOUND"
    INVALID_NAME = "INVALID_NAME"
    CONFIG_INVALID = "CONFIG_INVALID"
    TREE_FILE_INVALID = "TREE_FILE_INVALID"
    TREE_FILE_NOT_FOUND = "TREE_FILE_NOT_FOUND"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class RepositoryError(Exception):
    """Base exception for repository errors.

    Wraps an ErrorCode with a human-readable message and optional structured
    details for machine-parseable error responses.

    Attributes:
        code: The ErrorCode enum value for this error.
        message: Human-readable error description.
        details: Optional dictionary of additional structured context.

    Example:
        >>> error = RepositoryError(
        ...     code=ErrorCode.ITEM_NOT_FOUND,
        ...     message="No node at /content/missing",
        ...     details={"path": "/content/missing"}
        ... )
        >>> error.code
        <ErrorCode.ITEM_NOT_FOUND: 'ITEM_NOT_FOUND'>
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details
        super().__init__(message)

    def __repr__(self) -> str:
        """Return a developer-friendly representation of the error."""
        return f"{type(self).__name__}(code={self.code.value!r}, message={self.message!r}, details={self.details!r})"


class InvalidHintError(RepositoryError):
    """The name hint matches none of the supported hint shapes."""

    def __init__(self, name_hint: str):
        super().__init__(
            code=ErrorCode.INVALID_HINT,
            message=f"Invalid nameHint '{name_hint}'",
            details={"name_hint": name_hint},
        )


class UnknownNamespaceError(RepositoryError):
    """The name hint references a prefix or URI that is not registered."""

    def __init__(self, name_hint: str, namespace: str):
        super().__init__(
            code=ErrorCode.UNKNOWN_NAMESPACE,
            message=f"Invalid nameHint '{name_hint}': namespace '{namespace}' is not registered",
            details={"name_hint": name_hint, "namespace": namespace},
        )


class NameSpaceExhaustedError(RepositoryError):
    """Bounded name synthesis gave up without finding an unused candidate."""

    def __init__(self, prefix: str, base: str, attempts: int):
        super().__init__(
            code=ErrorCode.NAME_SPACE_EXHAUSTED,
            message=f"No unused name found for '{prefix}{base}' after {attempts} attempts",
            details={"prefix": prefix, "base": base, "attempts": attempts},
        )


class ItemExistsError(RepositoryError):
    def __init__(self, path: str):
        super().__init__(
            code=ErrorCode.ITEM_EXISTS,
            message=f"An item already exists at '{path}'",
            details={"path": path},
        )


class ItemNotFoundError(RepositoryError):
    def __init__(self, path: str):
        super().__init__(
            code=ErrorCode.ITEM_NOT_FOUND,
            message=f"No item found at '{path}'",
            details={"path": path},
        )


class InvalidNameError(RepositoryError):
    def __init__(self, name: str, reason: str):
        super().__init__(
            code=ErrorCode.INVALID_NAME,
            message=f"Invalid node name '{name}': {reason}",
            details={"name": name, "reason": reason},
        )
