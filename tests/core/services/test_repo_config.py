import pytest

from jcrutil.core.services.error_codes import ErrorCode, RepositoryError
from jcrutil.core.services.repo_config import (
    DEFAULT_TREE_FILE,
    load_repo_config,
    resolve_default_namespace,
)


def test_defaults_without_config_file(tmp_path):
    config = load_repo_config(tmp_path)

    assert config.root_dir == tmp_path.resolve()
    assert config.tree_path == DEFAULT_TREE_FILE
    assert config.tree_file == tmp_path.resolve() / DEFAULT_TREE_FILE
    assert config.default_namespace == ""
    assert config.max_attempts is None
    assert "jcr" in config.namespaces


def test_loads_namespaces_and_options(tmp_path):
    (tmp_path / "jcrutil.config.yaml").write_text(
        "tree_file: data/tree.yaml\n"
        "default_namespace: app\n"
        "max_attempts: 50\n"
        "namespaces:\n"
        "  app: http://example.org/app\n",
        encoding="utf-8",
    )
    config = load_repo_config(tmp_path)

    assert config.tree_path == "data/tree.yaml"
    assert config.default_namespace == "app"
    assert config.max_attempts == 50
    assert config.namespaces["app"] == "http://example.org/app"


@pytest.mark.parametrize(
    "content",
    [
        "unknown_key: 1\n",
        "max_attempts: 0\n",
        "max_attempts: many\n",
        "namespaces: [a, b]\n",
        "- just\n- a list\n",
        "namespaces: {app: [1]}\n",
        "tree_file: '../outside.yaml'\n",
        "tree_file: /etc/tree.yaml\n",
        "namespaces:\n  1bad: urn:x\n",
        "key: [unclosed\n",
    ],
)
def test_invalid_config(tmp_path, content):
    (tmp_path / "jcrutil.config.yaml").write_text(content, encoding="utf-8")
    with pytest.raises(RepositoryError) as exc_info:
        load_repo_config(tmp_path)
    assert exc_info.value.code == ErrorCode.CONFIG_INVALID


def test_unregistered_default_namespace(tmp_path):
    (tmp_path / "jcrutil.config.yaml").write_text("default_namespace: nope\n", encoding="utf-8")
    with pytest.raises(RepositoryError) as exc_info:
        load_repo_config(tmp_path)
    assert exc_info.value.code == ErrorCode.UNKNOWN_NAMESPACE


def test_default_namespace_precedence(monkeypatch):
    assert resolve_default_namespace("cli", "config") == "cli"
    monkeypatch.setenv("JCRUTIL_DEFAULT_NAMESPACE", "env")
    assert resolve_default_namespace(None, "config") == "env"
    assert resolve_default_namespace("", "config") == ""
    monkeypatch.delenv("JCRUTIL_DEFAULT_NAMESPACE")
    assert resolve_default_namespace(None, "config") == "config"
    assert resolve_default_namespace(None, None) == ""


def test_cli_default_namespace_override(workspace):
    config = load_repo_config(workspace, default_namespace="jcr")
    assert config.default_namespace == "jcr"


@pytest.mark.parametrize(
    "content",
    [
        "namespaces: {1: 5, a: 6}\n",
        "namespaces:\n  1: http://example.org/x\n",
    ],
)
def test_non_string_namespace_prefix(tmp_path, content):
    (tmp_path / "jcrutil.config.yaml").write_text(content, encoding="utf-8")
    with pytest.raises(RepositoryError) as exc_info:
        load_repo_config(tmp_path)
    assert exc_info.value.code == ErrorCode.CONFIG_INVALID
    assert exc_info.value.details["errors"]
