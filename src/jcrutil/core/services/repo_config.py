from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from jsonschema import Draft7Validator

from jcrutil.core.services.error_codes import ErrorCode, RepositoryError
from jcrutil.core.services.namespaces import NamespaceRegistry
from jcrutil.core.services.observability import log_debug

CONFIG_FILENAME = "jcrutil.config.yaml"
DEFAULT_TREE_FILE = "repository.yaml"
DEFAULT_NAMESPACE_ENV = "JCRUTIL_DEFAULT_NAMESPACE"

CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "tree_file": {"type": "string", "minLength": 1},
        "default_namespace": {"type": "string"},
        "max_attempts": {"type": ["integer", "null"], "minimum": 1},
        "namespaces": {
            "type": "object",
            "propertyNames": {"type": "string", "pattern": "^([a-zA-Z][a-zA-Z0-9]*)?$"},
            "additionalProperties": {"type": "string"},
        },
    },
    "additionalProperties": False,
}

_CONFIG_VALIDATOR = Draft7Validator(CONFIG_SCHEMA)


@dataclass(frozen=True)
class RepoConfig:
    root_dir: Path
    tree_path: str
    default_namespace: str
    namespaces: NamespaceRegistry
    max_attempts: Optional[int] = None

    @property
    def tree_file(self) -> Path:
        return self.root_dir / self.tree_path

    @property
    def config_file(self) -> Path:
        return self.root_dir / CONFIG_FILENAME


def _safe_repo_relative_path(root_dir: Path, raw: str) -> Optional[str]:
    raw = raw.strip()
    if not raw:
        return None
    p = Path(raw)
    if p.is_absolute():
        return None
    try:
        (root_dir / p).resolve().relative_to(root_dir.resolve())
    except ValueError:
        return None
    return p.as_posix()


def _read_config_data(config_path: Path) -> Dict[str, Any]:
    if not config_path.exists():
        return {}
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except (yaml.YAMLError, OSError) as exc:
        raise RepositoryError(
            code=ErrorCode.CONFIG_INVALID,
            message=f"Failed to read {config_path.name}: {exc}",
            details={"config_path": str(config_path)},
        ) from exc

    errors = sorted(_CONFIG_VALIDATOR.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errors:
        raise RepositoryError(
            code=ErrorCode.CONFIG_INVALID,
            message=f"Invalid {config_path.name}: {errors[0].message}",
            details={
                "config_path": str(config_path),
                "errors": [
                    {"path": "/".join(str(p) for p in e.path), "message": e.message}
                    for e in errors
                ],
            },
        )
    return data


def resolve_default_namespace(cli_value: Optional[str], config_value: Optional[str]) -> str:
    """Resolve the default namespace: CLI arg > env var > config file > ""."""
    if cli_value is not None:
        return cli_value.strip()
    env_value = os.environ.get(DEFAULT_NAMESPACE_ENV)
    if env_value is not None:
        return env_value.strip()
    return (config_value or "").strip()


def load_repo_config(root_dir: str | Path, default_namespace: Optional[str] = None) -> RepoConfig:
    root = Path(root_dir).resolve()
    config_path = root / CONFIG_FILENAME
    data = _read_config_data(config_path)
    log_debug(
        operation="debug.config_loaded",
        details={"config_path": str(config_path), "exists": config_path.exists()},
    )

    tree_path = DEFAULT_TREE_FILE
    if "tree_file" in data:
        tree_path = _safe_repo_relative_path(root, data["tree_file"]) or ""
        if not tree_path:
            raise RepositoryError(
                code=ErrorCode.CONFIG_INVALID,
                message=f"tree_file '{data['tree_file']}' must stay inside {root}",
                details={"tree_file": data["tree_file"], "root_dir": str(root)},
            )

    namespaces = NamespaceRegistry(data.get("namespaces") or {})

    default_ns = resolve_default_namespace(default_namespace, data.get("default_namespace"))
    if default_ns not in namespaces:
        raise RepositoryError(
            code=ErrorCode.UNKNOWN_NAMESPACE,
            message=f"Default namespace '{default_ns}' is not registered",
            details={"default_namespace": default_ns, "registered": sorted(namespaces)},
        )

    return RepoConfig(
        root_dir=root,
        tree_path=tree_path,
        default_namespace=default_ns,
        namespaces=namespaces,
        max_attempts=data.get("max_attempts"),
    )
