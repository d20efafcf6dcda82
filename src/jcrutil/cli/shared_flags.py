"""Click options shared by the workspace commands."""

import functools
import os
from contextlib import contextmanager

import click

LOG_SILENT_ENV = "JCRUTIL_LOG_SILENT"

_root = click.option(
    "--root",
    default=".",
    help="Workspace directory holding jcrutil.config.yaml and the tree file.",
)
_format = click.option(
    "--format",
    "format",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format (text|json).",
)
_output = click.option(
    "--output",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write output to this file path instead of stdout.",
)
_dry_run = click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Report what would change without writing the tree file.",
)


@contextmanager
def silenced_logs(enabled: bool):
    """Set JCRUTIL_LOG_SILENT=1 for the block, restoring the old value after."""
    previous = os.environ.get(LOG_SILENT_ENV)
    if not enabled or previous == "1":
        yield
        return
    os.environ[LOG_SILENT_ENV] = "1"
    try:
        yield
    finally:
        if previous is None:
            os.environ.pop(LOG_SILENT_ENV, None)
        else:
            os.environ[LOG_SILENT_ENV] = previous


def _quiet_machine_output(f):
    # Event lines would interleave with JSON envelopes; JCRUTIL_DEBUG keeps them.
    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        machine = kwargs.get("format") == "json" or bool(kwargs.get("output"))
        with silenced_logs(machine and os.environ.get("JCRUTIL_DEBUG") != "1"):
            return f(*args, **kwargs)

    return wrapper


def workspace_options():
    """Apply --root, --format and --output, silencing event logs for JSON or file output."""

    def decorator(f):
        return _root(_quiet_machine_output(_output(_format(f))))

    return decorator


def dry_run_option():
    return _dry_run
