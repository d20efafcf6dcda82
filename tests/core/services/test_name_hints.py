import pytest

from jcrutil.core.domain.entities import HintKind, ParsedHint
from jcrutil.core.services.error_codes import ErrorCode, InvalidHintError, RepositoryError
from jcrutil.core.services.name_hints import classify_name_hint


def test_absent_hint_is_default():
    assert classify_name_hint(None) == ParsedHint(kind=HintKind.DEFAULT)


@pytest.mark.parametrize("hint", ["", ":", "{}"])
def test_empty_namespace_markers(hint):
    assert classify_name_hint(hint).kind is HintKind.EMPTY_NAMESPACE


def test_bare_prefix():
    parsed = classify_name_hint("app:")
    assert parsed.kind is HintKind.PREFIX
    assert parsed.prefix == "app"
    assert parsed.seed == ""


def test_bare_uri():
    parsed = classify_name_hint("{http://example.org/ns}")
    assert parsed.kind is HintKind.URI
    assert parsed.uri == "http://example.org/ns"


def test_prefix_with_seed():
    parsed = classify_name_hint("app:report2")
    assert parsed == ParsedHint(kind=HintKind.PREFIX_WITH_SEED, prefix="app", seed="report2")


def test_uri_with_seed():
    parsed = classify_name_hint("{http://example.org/ns}report")
    assert parsed == ParsedHint(kind=HintKind.URI_WITH_SEED, uri="http://example.org/ns", seed="report")


def test_uri_with_seed_accepts_non_url_uri():
    # The seeded form only requires the URI to be free of closing braces.
    parsed = classify_name_hint("{internal}item")
    assert parsed.kind is HintKind.URI_WITH_SEED
    assert parsed.uri == "internal"


def test_bare_uri_must_be_a_url():
    with pytest.raises(InvalidHintError):
        classify_name_hint("{not a url}")


def test_bare_urn_is_not_a_url():
    with pytest.raises(InvalidHintError):
        classify_name_hint("{urn:foo}")
    assert classify_name_hint("{urn:foo}item").kind is HintKind.URI_WITH_SEED


@pytest.mark.parametrize(
    "hint",
    [
        "1prefix:name",
        "1prefix:",
        "app:1name",
        "app:na-me",
        "a:b:c",
        "a:b:",
        "plain",
        "{http://example.org/ns}1seed",
        "{}seed",
        "app:\n",
        "app:name\n",
    ],
)
def test_malformed_hints_are_rejected(hint):
    with pytest.raises(InvalidHintError) as exc_info:
        classify_name_hint(hint)

    assert exc_info.value.code == ErrorCode.INVALID_HINT
    assert exc_info.value.details == {"name_hint": hint}


def test_invalid_hint_is_a_repository_error():
    with pytest.raises(RepositoryError):
        classify_name_hint("no-colon-here")
