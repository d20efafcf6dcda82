from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Protocol


class TreeItem(Protocol):
    """A named entry of the content tree (node or property)."""

    def get_name(self) -> str: ...

    def remove(self) -> None: ...


class TreeNode(TreeItem, Protocol):
    """Navigation surface the core needs from a tree node.

    Implementations decide what makes a name valid; add_node may raise any
    RepositoryError and callers in this package let it propagate.
    """

    def has_node(self, name: str) -> bool: ...

    def get_node(self, name: str) -> "TreeNode": ...

    def add_node(self, name: str) -> "TreeNode": ...

    def get_nodes(self) -> Iterable["TreeNode"]: ...

    def get_properties(self) -> Iterable[TreeItem]: ...


class HintKind(str, Enum):
    DEFAULT = "default"
    EMPTY_NAMESPACE = "empty_namespace"
    PREFIX = "prefix"
    URI = "uri"
    PREFIX_WITH_SEED = "prefix_with_seed"
    URI_WITH_SEED = "uri_with_seed"


@dataclass(frozen=True)
class ParsedHint:
    """A name hint classified into exactly one hint shape.

    Attributes:
        kind: Which shape matched.
        prefix: Namespace prefix named by the hint (PREFIX, PREFIX_WITH_SEED).
        uri: Namespace URI named by the hint (URI, URI_WITH_SEED).
        seed: Local name base (PREFIX_WITH_SEED, URI_WITH_SEED), else "".
    """

    kind: HintKind
    prefix: Optional[str] = None
    uri: Optional[str] = None
    seed: str = ""


@dataclass
class CreatePathResult:
    path: str
    created: List[str] = field(default_factory=list)
    dry_run: bool = False


@dataclass
class AutoNameResult:
    """Result of an auto-named node creation.

    Attributes:
        parent_path: Absolute path of the parent node.
        name: The generated child name.
        path: Absolute path of the new node.
        hint_kind: The hint shape the name hint was classified as.
        dry_run: True if the node was not actually added.
    """

    parent_path: str
    name: str
    path: str
    hint_kind: HintKind
    dry_run: bool = False


@dataclass
class PurgeReport:
    removed_nodes: List[str] = field(default_factory=list)
    removed_properties: List[str] = field(default_factory=list)
    kept: List[str] = field(default_factory=list)
    dry_run: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return {
            "removed_nodes": list(self.removed_nodes),
            "removed_properties": list(self.removed_properties),
            "kept": list(self.kept),
            "dry_run": self.dry_run,
        }
