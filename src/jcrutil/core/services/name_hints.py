"""Classification of auto-naming hints.

A hint takes one of six shapes, tried in this order:

    None               name in the default namespace
    "", ":" or "{}"    name in the empty namespace
    "prefix:"          name in the namespace registered under prefix
    "{uri}"            name in the namespace registered for uri
    "prefix:seed"      like "prefix:", local part built from seed
    "{uri}seed"        like "{uri}", local part built from seed

Classification is purely structural. Whether the prefix or URI is registered
is checked later, when the hint is resolved against a namespace table.
"""

from __future__ import annotations

import re
from typing import Optional

from jcrutil.core.domain.entities import HintKind, ParsedHint
from jcrutil.core.services.error_codes import InvalidHintError
from jcrutil.core.services.namespaces import NAME_PART_PATTERN, NAME_PART_RE, is_valid_namespace_uri

EMPTY_NAMESPACE_HINTS = frozenset({"", ":", "{}"})

_BARE_PREFIX_RE = re.compile("(" + NAME_PART_PATTERN + "):")
_URI_WITH_SEED_RE = re.compile(r"\{([^}]+)\}(" + NAME_PART_PATTERN + ")")


def classify_name_hint(name_hint: Optional[str]) -> ParsedHint:
    """Classify `name_hint` into one of the six hint shapes.

    Raises:
        InvalidHintError: if the hint matches none of them.
    """
    if name_hint is None:
        return ParsedHint(kind=HintKind.DEFAULT)

    if name_hint in EMPTY_NAMESPACE_HINTS:
        return ParsedHint(kind=HintKind.EMPTY_NAMESPACE)

    colons = name_hint.count(":")

    if colons == 1 and name_hint.endswith(":"):
        match = _BARE_PREFIX_RE.fullmatch(name_hint)
        if match:
            return ParsedHint(kind=HintKind.PREFIX, prefix=match.group(1))

    if len(name_hint) > 2 and name_hint.startswith("{") and name_hint.endswith("}"):
        uri = name_hint[1:-1]
        if is_valid_namespace_uri(uri):
            return ParsedHint(kind=HintKind.URI, uri=uri)

    if colons == 1:
        prefix, seed = name_hint.split(":")
        if NAME_PART_RE.fullmatch(prefix) and NAME_PART_RE.fullmatch(seed):
            return ParsedHint(kind=HintKind.PREFIX_WITH_SEED, prefix=prefix, seed=seed)

    match = _URI_WITH_SEED_RE.fullmatch(name_hint)
    if match:
        return ParsedHint(kind=HintKind.URI_WITH_SEED, uri=match.group(1), seed=match.group(2))

    raise InvalidHintError(name_hint)
