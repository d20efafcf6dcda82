import re

import pytest

from jcrutil.core.services.auto_names import (
    MAX_RANDOM_INT,
    generate_auto_node_name,
    generate_with_prefix,
)
from jcrutil.core.services.error_codes import (
    ErrorCode,
    InvalidHintError,
    NameSpaceExhaustedError,
    RepositoryError,
    UnknownNamespaceError,
)
from jcrutil.core.services.namespaces import NamespaceRegistry

NAMESPACES = {
    "": "",
    "jcr": "http://www.jcp.org/jcr/1.0",
    "app": "http://example.org/app",
}


class TestGenerateAutoNodeName:
    def test_absent_hint_uses_default_namespace(self):
        name = generate_auto_node_name([], NAMESPACES, "app")
        assert re.fullmatch(r"app:\d+", name)

    def test_absent_hint_with_empty_default_namespace_has_no_prefix(self):
        name = generate_auto_node_name([], NAMESPACES, "")
        assert re.fullmatch(r"\d+", name)

    @pytest.mark.parametrize("hint", ["", ":", "{}"])
    def test_empty_namespace_hints(self, hint):
        name = generate_auto_node_name([], NAMESPACES, "app", hint)
        assert re.fullmatch(r"\d+", name)

    def test_bare_prefix(self):
        name = generate_auto_node_name([], NAMESPACES, "", "jcr:")
        assert re.fullmatch(r"jcr:\d+", name)

    def test_unknown_prefix(self):
        with pytest.raises(UnknownNamespaceError) as exc_info:
            generate_auto_node_name([], NAMESPACES, "", "foo:")

        assert exc_info.value.code == ErrorCode.UNKNOWN_NAMESPACE
        assert exc_info.value.details["namespace"] == "foo"

    def test_bare_uri_with_matching_entry(self):
        name = generate_auto_node_name([], NAMESPACES, "", "{http://example.org/app}")
        assert re.fullmatch(r"app:\d+", name)

    def test_bare_uri_without_matching_entry(self):
        with pytest.raises(UnknownNamespaceError):
            generate_auto_node_name([], NAMESPACES, "", "{http://example.org/ns}")

    def test_prefix_with_seed(self):
        name = generate_auto_node_name([], NAMESPACES, "", "app:report")
        assert re.fullmatch(r"app:report\d+", name)

    def test_prefix_with_seed_unknown_prefix_does_not_fall_back(self):
        with pytest.raises(UnknownNamespaceError):
            generate_auto_node_name([], NAMESPACES, "app", "nope:report")

    def test_uri_with_seed(self):
        name = generate_auto_node_name([], NAMESPACES, "", "{http://www.jcp.org/jcr/1.0}content")
        assert re.fullmatch(r"jcr:content\d+", name)

    def test_uri_with_seed_unknown_uri(self):
        with pytest.raises(UnknownNamespaceError):
            generate_auto_node_name([], NAMESPACES, "", "{urn:unknown}content")

    def test_malformed_hint(self):
        with pytest.raises(InvalidHintError):
            generate_auto_node_name([], NAMESPACES, "", "1prefix:name")

    def test_unknown_namespace_is_a_repository_error(self):
        with pytest.raises(RepositoryError):
            generate_auto_node_name([], NAMESPACES, "", "foo:")

    def test_uri_mapped_to_several_prefixes_picks_first(self):
        namespaces = {"b": "urn:shared", "a": "urn:shared"}
        name = generate_auto_node_name([], namespaces, "", "{urn:shared}x")
        assert name.startswith("b:x")

    def test_uri_lookup_ignores_empty_prefix(self):
        namespaces = {"": "http://example.org/shared", "a": "http://example.org/shared"}
        name = generate_auto_node_name([], namespaces, "", "{http://example.org/shared}")
        assert name.startswith("a:")

    def test_uri_lookup_only_matches_empty_prefix(self):
        with pytest.raises(UnknownNamespaceError):
            generate_auto_node_name([], {"": "urn:empty"}, "", "{urn:empty}x")

    def test_accepts_namespace_registry(self):
        registry = NamespaceRegistry({"app": "http://example.org/app"})
        name = generate_auto_node_name([], registry, "", "{http://example.org/app}doc")
        assert name.startswith("app:doc")

    def test_skips_used_names(self, int_sequence):
        used = {"app:1", "app:2"}
        name = generate_auto_node_name(used, NAMESPACES, "app", random_int=int_sequence(1, 2, 3))
        assert name == "app:3"

    @pytest.mark.parametrize(
        "hint, expected",
        [
            (None, "app:7"),
            ("", "7"),
            ("jcr:", "jcr:7"),
            ("{http://example.org/app}", "app:7"),
            ("app:doc", "app:doc7"),
            ("{http://example.org/app}doc", "app:doc7"),
        ],
    )
    def test_shape_per_hint(self, int_sequence, hint, expected):
        name = generate_auto_node_name(
            ["app:doc1"], NAMESPACES, "app", hint, random_int=int_sequence(7)
        )
        assert name == expected

    def test_same_inputs_same_output(self, int_sequence):
        first = generate_auto_node_name([], NAMESPACES, "app", "app:x", random_int=int_sequence(5))
        second = generate_auto_node_name([], NAMESPACES, "app", "app:x", random_int=int_sequence(5))
        assert first == second == "app:x5"

    def test_result_never_in_used_names(self):
        used = {f"app:{i}" for i in range(50)}
        for _ in range(20):
            assert generate_auto_node_name(used, NAMESPACES, "app") not in used


class TestGenerateWithPrefix:
    def test_returns_last_free_candidate(self, int_sequence):
        used = {"p:a0", "p:a1", "p:a2"}
        name = generate_with_prefix(
            used, "p:", "a", random_int=int_sequence(0, 1, 2, 1, 0, 3), max_attempts=10
        )
        assert name == "p:a3"

    def test_bounded_retries_raise(self, int_sequence):
        used = {"x1"}
        with pytest.raises(NameSpaceExhaustedError) as exc_info:
            generate_with_prefix(used, "", "x", random_int=int_sequence(1, 1, 1), max_attempts=3)

        assert exc_info.value.code == ErrorCode.NAME_SPACE_EXHAUSTED
        assert exc_info.value.details["attempts"] == 3

    def test_rejects_non_positive_bound(self):
        with pytest.raises(ValueError):
            generate_with_prefix([], "", max_attempts=0)

    def test_rejects_negative_random_numbers(self, int_sequence):
        with pytest.raises(ValueError):
            generate_with_prefix([], "", random_int=int_sequence(-1))

    def test_default_random_range(self):
        name = generate_with_prefix([], "")
        assert 0 <= int(name) <= MAX_RANDOM_INT

    def test_accepts_any_iterable_of_used_names(self, int_sequence):
        used = (n for n in ["a1"])
        assert generate_with_prefix(used, "", "a", random_int=int_sequence(1, 2)) == "a2"
