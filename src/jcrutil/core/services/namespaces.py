from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Dict, Iterator, Optional
from urllib.parse import urlsplit

from jcrutil.core.services.error_codes import ErrorCode, RepositoryError

NAME_PART_PATTERN = r"[a-zA-Z][a-zA-Z0-9]*"
NAME_PART_RE = re.compile(NAME_PART_PATTERN)

BUILTIN_NAMESPACES: Dict[str, str] = {
    "": "",
    "jcr": "http://www.jcp.org/jcr/1.0",
    "nt": "http://www.jcp.org/jcr/nt/1.0",
    "mix": "http://www.jcp.org/jcr/mix/1.0",
    "xml": "http://www.w3.org/XML/1998/namespace",
    "rep": "internal",
}

# Schemes that are valid URLs without a network location.
_PATH_ONLY_SCHEMES = frozenset({"mailto", "news", "file"})
_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*$")


def is_valid_namespace_uri(uri: str) -> bool:
    """Return True if `uri` is a syntactically valid URL."""
    if not uri or any(c.isspace() for c in uri):
        return False
    try:
        parts = urlsplit(uri)
    except ValueError:
        return False
    if not parts.scheme or not _SCHEME_RE.match(parts.scheme):
        return False
    if parts.scheme.lower() in _PATH_ONLY_SCHEMES:
        return bool(parts.netloc or parts.path)
    return bool(parts.netloc) and bool(parts.hostname)


def prefix_for_uri(namespaces: Mapping[str, str], uri: str) -> Optional[str]:
    """Reverse lookup: first non-empty prefix (iteration order) mapped to `uri`."""
    for prefix, registered in namespaces.items():
        if prefix and registered == uri:
            return prefix
    return None


class NamespaceRegistry(Mapping):
    """Read-only prefix to URI table, queryable both directions."""

    def __init__(self, namespaces: Optional[Mapping[str, str]] = None, include_builtins: bool = True):
        table: Dict[str, str] = dict(BUILTIN_NAMESPACES) if include_builtins else {}
        for prefix, uri in (namespaces or {}).items():
            if not isinstance(prefix, str) or (prefix and not NAME_PART_RE.fullmatch(prefix)):
                raise RepositoryError(
                    code=ErrorCode.CONFIG_INVALID,
                    message=f"Invalid namespace prefix '{prefix}'",
                    details={"prefix": prefix, "uri": uri},
                )
            if prefix in BUILTIN_NAMESPACES and include_builtins and BUILTIN_NAMESPACES[prefix] != uri:
                raise RepositoryError(
                    code=ErrorCode.CONFIG_INVALID,
                    message=f"Built-in namespace prefix '{prefix}' cannot be remapped",
                    details={"prefix": prefix, "uri": uri},
                )
            table[prefix] = uri
        self._table = table

    def __getitem__(self, prefix: str) -> str:
        return self._table[prefix]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def get_uri(self, prefix: str) -> Optional[str]:
        return self._table.get(prefix)

    def get_prefix(self, uri: str) -> Optional[str]:
        return prefix_for_uri(self._table, uri)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._table)
