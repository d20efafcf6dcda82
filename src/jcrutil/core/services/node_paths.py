from __future__ import annotations

from typing import List

from jcrutil.core.domain.entities import TreeNode
from jcrutil.core.services.error_codes import ItemNotFoundError


def split_path(path: str) -> List[str]:
    """Split a slash-separated path, dropping empty segments."""
    return [segment for segment in path.split("/") if segment]


def create_path(root: TreeNode, path: str) -> TreeNode:
    """Create a node and its parents, if necessary. Like mkdir -p.

    Walks from `root` through each segment of `path`, descending into
    existing children and adding missing ones. Returns the node for the last
    segment, or `root` when the path has no segments.

    Segment names are not validated here. Errors raised by add_node()
    propagate unchanged; ancestors created before the failure stay in place.
    """
    current = root
    for segment in split_path(path):
        if current.has_node(segment):
            current = current.get_node(segment)
        else:
            current = current.add_node(segment)
    return current


def resolve_path(root: TreeNode, path: str) -> TreeNode:
    """Return the existing node at `path` below `root`.

    Raises:
        ItemNotFoundError: if a segment is missing.
    """
    current = root
    walked: List[str] = []
    for segment in split_path(path):
        walked.append(segment)
        if not current.has_node(segment):
            raise ItemNotFoundError("/" + "/".join(walked))
        current = current.get_node(segment)
    return current


def join_path(parent_path: str, name: str) -> str:
    segments = split_path(parent_path)
    segments.append(name)
    return "/" + "/".join(segments)
