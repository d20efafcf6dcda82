from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from jcrutil.core.services.memory_tree import MemoryNode
from jcrutil.core.services.node_paths import resolve_path
from jcrutil.core.services.observability import log_operation
from jcrutil.core.services.repo_config import load_repo_config
from jcrutil.core.services.tree_store import load_tree


@dataclass(frozen=True)
class TreeView:
    path: str
    tree: Dict[str, Any]


def _limit_depth(node: MemoryNode, depth: Optional[int]) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    props = {p.get_name(): p.value for p in node.get_properties()}
    if props:
        data["properties"] = props
    if depth is not None and depth <= 0:
        return data
    children = {
        child.get_name(): _limit_depth(child, None if depth is None else depth - 1)
        for child in node.get_nodes()
    }
    if children:
        data["children"] = children
    return data


class ShowTreeUseCase:
    def __init__(self, root_dir: str):
        self._config = load_repo_config(root_dir)

    def execute(self, path: str = "/", depth: Optional[int] = None) -> TreeView:
        with log_operation("tree_show", details={"path": path, "depth": depth}):
            root = load_tree(self._config, create_missing=False)
            node = resolve_path(root, path)
            return TreeView(path=node.get_path(), tree=_limit_depth(node, depth))
