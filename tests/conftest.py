"""Shared pytest fixtures."""

import pytest

from jcrutil.core.services.observability import reset_current_run_id


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Reset the cached run id and drop jcrutil env overrides for each test."""
    for name in (
        "JCRUTIL_RUN_ID",
        "JCRUTIL_LOG_FORMAT",
        "JCRUTIL_LOG_SILENT",
        "JCRUTIL_DEBUG",
        "JCRUTIL_DEFAULT_NAMESPACE",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_current_run_id()
    yield
    reset_current_run_id()


@pytest.fixture
def workspace(tmp_path):
    """A workspace with an `app` namespace registered."""
    (tmp_path / "jcrutil.config.yaml").write_text(
        "namespaces:\n"
        "  app: http://example.org/app\n"
        "default_namespace: app\n",
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def int_sequence():
    """Factory for deterministic random_int sources yielding the given numbers in order."""

    def make(*numbers):
        return iter(numbers).__next__

    return make
