"""In-memory implementation of the tree access interface.

MemoryNode and MemoryProperty back the CLI and the tests. Node names are
validated on add_node(); property names are not.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional

from jcrutil.core.services.error_codes import InvalidNameError, ItemExistsError, ItemNotFoundError
from jcrutil.core.services.namespaces import NamespaceRegistry

ILLEGAL_NAME_CHARS = frozenset("/[]|*")


def validate_node_name(name: str, namespaces: Optional[Mapping] = None) -> None:
    """Raise InvalidNameError unless `name` is a usable node name."""
    if not name:
        raise InvalidNameError(name, "name is empty")
    if name in (".", ".."):
        raise InvalidNameError(name, "name is reserved")
    bad = sorted({c for c in name if c in ILLEGAL_NAME_CHARS or c.isspace()})
    if bad:
        raise InvalidNameError(name, f"illegal characters {''.join(bad)!r}")
    if name.count(":") > 1:
        raise InvalidNameError(name, "more than one colon")
    if ":" in name:
        prefix, local = name.split(":")
        if not prefix or not local:
            raise InvalidNameError(name, "empty prefix or local name")
        if namespaces is not None and prefix not in namespaces:
            raise InvalidNameError(name, f"namespace prefix '{prefix}' is not registered")


class MemoryProperty:
    __slots__ = ("_name", "value", "_parent")

    def __init__(self, name: str, value: Any, parent: "MemoryNode"):
        self._name = name
        self.value = value
        self._parent = parent

    def get_name(self) -> str:
        return self._name

    def get_path(self) -> str:
        return _join(self._parent.get_path(), self._name)

    def remove(self) -> None:
        self._parent._properties.pop(self._name, None)

    def __repr__(self) -> str:
        return f"MemoryProperty({self.get_path()!r}, value={self.value!r})"


class MemoryNode:
    """A node of an in-memory content tree.

    Example:
        >>> root = MemoryNode.new_root()
        >>> root.add_node("content").get_path()
        '/content'
    """

    def __init__(
        self,
        name: str = "",
        parent: Optional["MemoryNode"] = None,
        namespaces: Optional[Mapping] = None,
    ) -> None:
        self._name = name
        self._parent = parent
        self._namespaces = namespaces if namespaces is not None else (parent._namespaces if parent else None)
        self._children: Dict[str, MemoryNode] = {}
        self._properties: Dict[str, MemoryProperty] = {}

    @classmethod
    def new_root(cls, namespaces: Optional[Mapping] = None) -> "MemoryNode":
        """Create a root node carrying the items a fresh repository has."""
        root = cls(namespaces=namespaces if namespaces is not None else NamespaceRegistry())
        root.set_property("jcr:primaryType", "rep:root")
        root.add_node("jcr:system")
        return root

    @property
    def namespaces(self) -> Optional[Mapping]:
        return self._namespaces

    def get_name(self) -> str:
        return self._name

    def get_parent(self) -> Optional["MemoryNode"]:
        return self._parent

    def get_path(self) -> str:
        if self._parent is None:
            return "/"
        return _join(self._parent.get_path(), self._name)

    def has_node(self, name: str) -> bool:
        return name in self._children

    def get_node(self, name: str) -> "MemoryNode":
        try:
            return self._children[name]
        except KeyError:
            raise ItemNotFoundError(_join(self.get_path(), name)) from None

    def add_node(self, name: str) -> "MemoryNode":
        validate_node_name(name, self._namespaces)
        if name in self._children:
            raise ItemExistsError(_join(self.get_path(), name))
        child = MemoryNode(name, parent=self)
        self._children[name] = child
        return child

    def get_nodes(self) -> Iterator["MemoryNode"]:
        return iter(list(self._children.values()))

    def get_node_names(self) -> List[str]:
        return list(self._children)

    def has_property(self, name: str) -> bool:
        return name in self._properties

    def get_property(self, name: str) -> MemoryProperty:
        try:
            return self._properties[name]
        except KeyError:
            raise ItemNotFoundError(_join(self.get_path(), name)) from None

    def set_property(self, name: str, value: Any) -> MemoryProperty:
        prop = self._properties.get(name)
        if prop is None:
            prop = MemoryProperty(name, value, self)
            self._properties[name] = prop
        else:
            prop.value = value
        return prop

    def get_properties(self) -> Iterator[MemoryProperty]:
        return iter(list(self._properties.values()))

    def remove(self) -> None:
        if self._parent is None:
            raise ValueError("The root node cannot be removed")
        self._parent._children.pop(self._name, None)
        self._parent = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self._properties:
            data["properties"] = {name: prop.value for name, prop in self._properties.items()}
        if self._children:
            data["children"] = {name: child.to_dict() for name, child in self._children.items()}
        return data

    @classmethod
    def from_dict(cls, data: Mapping, namespaces: Optional[Mapping] = None) -> "MemoryNode":
        """Build a root node from the mapping produced by to_dict()."""
        root = cls(namespaces=namespaces if namespaces is not None else NamespaceRegistry())
        _populate(root, data)
        return root

    def __repr__(self) -> str:
        return f"MemoryNode({self.get_path()!r}, children={len(self._children)})"


def _populate(node: MemoryNode, data: Mapping) -> None:
    for name, value in (data.get("properties") or {}).items():
        node.set_property(str(name), value)
    for name, child_data in (data.get("children") or {}).items():
        _populate(node.add_node(str(name)), child_data or {})


def _join(parent_path: str, name: str) -> str:
    return f"{parent_path.rstrip('/')}/{name}"
