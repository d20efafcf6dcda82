from jcrutil.core.domain.entities import (
    AutoNameResult,
    CreatePathResult,
    HintKind,
    ParsedHint,
    PurgeReport,
)


def test_parsed_hint_defaults():
    parsed = ParsedHint(kind=HintKind.DEFAULT)
    assert parsed.prefix is None
    assert parsed.uri is None
    assert parsed.seed == ""


def test_hint_kind_values_are_strings():
    assert HintKind.PREFIX_WITH_SEED == "prefix_with_seed"
    assert {k.value for k in HintKind} == {
        "default",
        "empty_namespace",
        "prefix",
        "uri",
        "prefix_with_seed",
        "uri_with_seed",
    }


def test_result_defaults():
    assert CreatePathResult(path="/a").created == []
    result = AutoNameResult(parent_path="/", name="x1", path="/x1", hint_kind=HintKind.EMPTY_NAMESPACE)
    assert result.dry_run is False


def test_purge_report_as_dict():
    report = PurgeReport(removed_nodes=["content"], kept=["jcr:system"])
    assert report.as_dict() == {
        "removed_nodes": ["content"],
        "removed_properties": [],
        "kept": ["jcr:system"],
        "dry_run": False,
    }
