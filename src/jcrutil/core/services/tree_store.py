"""YAML persistence for the in-memory content tree.

A tree file holds the root node as a mapping with optional ``properties``
(name to scalar) and ``children`` (name to node) keys, recursively.
"""

from __future__ import annotations

import os
import tempfile
from typing import Any, Dict

import yaml
from jsonschema import Draft7Validator

from jcrutil.core.services.error_codes import ErrorCode, RepositoryError
from jcrutil.core.services.memory_tree import MemoryNode
from jcrutil.core.services.observability import log_debug
from jcrutil.core.services.repo_config import RepoConfig

TREE_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "$ref": "#/definitions/node",
    "definitions": {
        "node": {
            "type": ["object", "null"],
            "properties": {
                "properties": {
                    "type": ["object", "null"],
                    "additionalProperties": {
                        "type": ["string", "number", "boolean", "null", "array"],
                        "items": {"type": ["string", "number", "boolean"]},
                    },
                },
                "children": {
                    "type": ["object", "null"],
                    "additionalProperties": {"$ref": "#/definitions/node"},
                },
            },
            "additionalProperties": False,
        }
    },
}

_TREE_VALIDATOR = Draft7Validator(TREE_SCHEMA)


def load_tree(config: RepoConfig, create_missing: bool = True) -> MemoryNode:
    """Load the configured tree file.

    A missing file yields a fresh root when `create_missing` is True and
    raises TREE_FILE_NOT_FOUND otherwise.
    """
    tree_file = config.tree_file
    if not tree_file.exists():
        if not create_missing:
            raise RepositoryError(
                code=ErrorCode.TREE_FILE_NOT_FOUND,
                message=f"Tree file not found: {tree_file}",
                details={"tree_file": str(tree_file)},
            )
        log_debug(operation="debug.tree_created", details={"tree_file": str(tree_file)})
        return MemoryNode.new_root(config.namespaces)

    try:
        data = yaml.safe_load(tree_file.read_text(encoding="utf-8")) or {}
    except (yaml.YAMLError, OSError) as exc:
        raise RepositoryError(
            code=ErrorCode.TREE_FILE_INVALID,
            message=f"Failed to read tree file {tree_file}: {exc}",
            details={"tree_file": str(tree_file)},
        ) from exc

    errors = sorted(_TREE_VALIDATOR.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    error = errors[0] if errors else None
    if error is not None:
        location = "/".join(str(p) for p in error.path)
        raise RepositoryError(
            code=ErrorCode.TREE_FILE_INVALID,
            message=f"Invalid tree file {tree_file}: {error.message}",
            details={"tree_file": str(tree_file), "location": location},
        )

    root = MemoryNode.from_dict(data, config.namespaces)
    log_debug(operation="debug.tree_loaded", details={"tree_file": str(tree_file)})
    return root


def save_tree(config: RepoConfig, root: MemoryNode) -> None:
    """Write the tree back atomically (temp file + rename)."""
    tree_file = config.tree_file
    tree_file.parent.mkdir(parents=True, exist_ok=True)
    payload = yaml.safe_dump(root.to_dict(), sort_keys=False, default_flow_style=False, allow_unicode=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{tree_file.name}.", dir=str(tree_file.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(payload)
        os.replace(tmp_name, tree_file)
    except OSError:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    log_debug(operation="debug.tree_saved", details={"tree_file": str(tree_file)})
