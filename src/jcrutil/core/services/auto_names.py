"""Automatic node name generation.

generate_auto_node_name() turns an optional name hint into a node name that
is valid for the hint's namespace and unused among a parent's children. It
only checks that referenced namespaces exist; everything else about the new
node is the caller's business.
"""

from __future__ import annotations

import random
from collections.abc import Mapping
from typing import Callable, Iterable, Optional

from jcrutil.core.domain.entities import HintKind, ParsedHint
from jcrutil.core.services.error_codes import NameSpaceExhaustedError, UnknownNamespaceError
from jcrutil.core.services.name_hints import classify_name_hint
from jcrutil.core.services.namespaces import prefix_for_uri
from jcrutil.core.services.observability import log_debug

MAX_RANDOM_INT = 2**31 - 1

RandomInt = Callable[[], int]

_random = random.Random()


def _default_random_int() -> int:
    return _random.randint(0, MAX_RANDOM_INT)


def generate_with_prefix(
    used_names: Iterable[str],
    prefix: str,
    base: str = "",
    *,
    random_int: Optional[RandomInt] = None,
    max_attempts: Optional[int] = None,
) -> str:
    """Return the first `prefix + base + <random int>` not in `used_names`.

    Args:
        used_names: Names that may not be chosen.
        prefix: Namespace prefix including the trailing colon, or "".
        base: Start of the local name, or "".
        random_int: Source of non-negative integers. Defaults to a uniform
            draw from [0, MAX_RANDOM_INT].
        max_attempts: Give up after this many candidates. None retries until
            an unused name turns up.

    Raises:
        NameSpaceExhaustedError: when max_attempts candidates were all taken.
    """
    if max_attempts is not None and max_attempts < 1:
        raise ValueError(f"max_attempts must be a positive integer, got {max_attempts!r}")

    used = used_names if isinstance(used_names, (set, frozenset)) else frozenset(used_names)
    draw = random_int or _default_random_int

    attempts = 0
    while max_attempts is None or attempts < max_attempts:
        attempts += 1
        number = draw()
        if number < 0:
            raise ValueError(f"random_int returned a negative number: {number}")
        candidate = f"{prefix}{base}{number}"
        if candidate not in used:
            return candidate

    raise NameSpaceExhaustedError(prefix=prefix, base=base, attempts=attempts)


def resolve_hint_prefix(
    parsed: ParsedHint,
    namespaces: Mapping,
    default_namespace: str,
    name_hint: Optional[str],
) -> str:
    """Return the name prefix (with trailing colon, or "") for a classified hint.

    Raises:
        UnknownNamespaceError: if the hint names an unregistered prefix or URI.
    """
    if parsed.kind is HintKind.DEFAULT:
        return f"{default_namespace}:" if default_namespace else ""

    if parsed.kind is HintKind.EMPTY_NAMESPACE:
        return ""

    if parsed.kind in (HintKind.PREFIX, HintKind.PREFIX_WITH_SEED):
        if parsed.prefix not in namespaces:
            raise UnknownNamespaceError(name_hint=str(name_hint), namespace=str(parsed.prefix))
        return f"{parsed.prefix}:"

    # URI and URI_WITH_SEED
    prefix = prefix_for_uri(namespaces, str(parsed.uri))
    if prefix is None:
        raise UnknownNamespaceError(name_hint=str(name_hint), namespace=str(parsed.uri))
    return f"{prefix}:"


def generate_auto_node_name(
    used_names: Iterable[str],
    namespaces: Mapping,
    default_namespace: str,
    name_hint: Optional[str] = None,
    *,
    random_int: Optional[RandomInt] = None,
    max_attempts: Optional[int] = None,
) -> str:
    """Generate a valid, unused node name from an optional name hint.

    Args:
        used_names: Child names currently used under the parent.
        namespaces: Prefix to URI map of all known namespaces.
        default_namespace: Prefix to use when no hint is given.
        name_hint: Hint in one of the shapes accepted by classify_name_hint().
        random_int: Injectable integer source, see generate_with_prefix().
        max_attempts: Optional retry bound, see generate_with_prefix().

    Returns:
        A name such as "app:123456" or "app:report42".

    Raises:
        InvalidHintError: if the hint is malformed.
        UnknownNamespaceError: if the hint references an unknown namespace.
        NameSpaceExhaustedError: if max_attempts is set and exhausted.
    """
    parsed = classify_name_hint(name_hint)
    prefix = resolve_hint_prefix(parsed, namespaces, default_namespace, name_hint)
    name = generate_with_prefix(
        used_names,
        prefix,
        parsed.seed,
        random_int=random_int,
        max_attempts=max_attempts,
    )
    log_debug(
        operation="debug.auto_name_generated",
        details={"name_hint": name_hint, "hint_kind": parsed.kind.value, "name": name},
    )
    return name
