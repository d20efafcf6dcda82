import contextlib
import os
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from jcrutil.cli.shared_flags import dry_run_option, workspace_options
from jcrutil.core.services.error_codes import ErrorCode, RepositoryError
from jcrutil.core.services.exit_codes import exit_code_for_error
from jcrutil.core.services.observability import get_current_run_id
from jcrutil.core.services.output_formatter import format_envelope, format_error_envelope
from jcrutil.core.services.repo_config import load_repo_config
from jcrutil.core.use_cases.add_node_auto_named import AddNodeAutoNamedUseCase
from jcrutil.core.use_cases.create_path import CreatePathUseCase
from jcrutil.core.use_cases.delete_all_nodes import DeleteAllNodesUseCase
from jcrutil.core.use_cases.show_tree import ShowTreeUseCase

console = Console()


def get_console() -> Console:
    """Helper to get the rich console from context if available."""
    ctx = click.get_current_context(silent=True)
    if ctx and isinstance(ctx.obj, dict) and "console" in ctx.obj:
        return ctx.obj["console"]
    return console


@contextlib.contextmanager
def text_console(output: Optional[str]) -> Iterator[Console]:
    """Yield a console printing to stdout, or to `output` when given."""
    if not output:
        yield get_console()
        return
    with open(output, "w", encoding="utf-8") as fh:
        yield Console(file=fh, no_color=True, width=120)


def _write_output(payload: str, output: Optional[str] = None) -> None:
    """Write output to stdout or to a file if requested."""
    if output:
        Path(output).write_text(payload + "\n", encoding="utf-8")
    else:
        click.echo(payload)


@contextlib.contextmanager
def command_output_handler(
    command_name: str,
    format: str,
    output: Optional[str],
    run_id: str,
    root_path: Optional[Path] = None,
):
    """Centralized error handling and output formatting for CLI commands."""
    try:
        yield
    except RepositoryError as e:
        if format == "json":
            _write_output(
                format_error_envelope(
                    command=command_name,
                    root=str(root_path) if root_path else ".",
                    error_code=e.code,
                    message=e.message,
                    details=e.details,
                    run_id=run_id,
                ),
                output,
            )
        else:
            with text_console(output) as out:
                out.print(f"[bold red][ERROR {e.code.value}] {escape(e.message)}[/bold red]")
        raise SystemExit(exit_code_for_error(e.code))
    except (click.exceptions.Abort, click.exceptions.Exit, click.ClickException):
        raise
    except Exception as e:
        safe_msg = "An unexpected internal error occurred."
        if format == "json":
            _write_output(
                format_error_envelope(
                    command=command_name,
                    root=str(root_path) if root_path else ".",
                    error_code=ErrorCode.UNKNOWN_ERROR,
                    message=safe_msg,
                    details={"internal_error": str(e)},
                    run_id=run_id,
                ),
                output,
            )
        else:
            with text_console(output) as out:
                out.print(f"[bold red][ERROR UNKNOWN_ERROR] {safe_msg}[/bold red]")

        # Always log the real error to stderr for operators
        click.echo(f"INTERNAL ERROR: {e}", err=True)
        raise SystemExit(exit_code_for_error(ErrorCode.UNKNOWN_ERROR))


def _emit(command: str, format: str, output: Optional[str], root_path: Path, run_id: str, data: Dict[str, Any]) -> bool:
    """Write the JSON success envelope; return False when text output is wanted."""
    if format != "json":
        return False
    _write_output(
        format_envelope(command=command, root=str(root_path), success=True, data=data, run_id=run_id),
        output,
    )
    return True


def _render_tree(data: Dict[str, Any], branch: Tree) -> None:
    for name, value in (data.get("properties") or {}).items():
        branch.add(f"[dim]{escape(name)}[/dim] = {escape(repr(value))}")
    for name, child in (data.get("children") or {}).items():
        _render_tree(child, branch.add(f"[bold]{escape(name)}[/bold]"))


@click.group()
@click.version_option(package_name="jcrutil", prog_name="jcrutil")
@click.option("--no-color", is_flag=True, default=False, help="Disable ANSI colors in text output.")
@click.option("--verbose", is_flag=True, default=False, help="Enable verbose debug logging.")
@click.pass_context
def cli(ctx: click.Context, no_color: bool, verbose: bool):
    """Content tree helper: materialize paths, auto-name nodes, purge content."""
    if no_color:
        os.environ["NO_COLOR"] = "1"
    if verbose:
        previous_debug = os.environ.get("JCRUTIL_DEBUG")
        os.environ["JCRUTIL_DEBUG"] = "1"

        def _restore_debug() -> None:
            if previous_debug is None:
                os.environ.pop("JCRUTIL_DEBUG", None)
            else:
                os.environ["JCRUTIL_DEBUG"] = previous_debug

        ctx.call_on_close(_restore_debug)

    ctx.ensure_object(dict)
    ctx.obj["console"] = Console(no_color=no_color)


@cli.command()
@click.argument("path")
@workspace_options()
@dry_run_option()
def mkpath(root, format, output, dry_run, path):
    """Create the node at PATH and any missing ancestors (like mkdir -p)."""
    run_id = get_current_run_id()
    root_path = Path(root).resolve()

    with command_output_handler("mkpath", format, output, run_id, root_path):
        result = CreatePathUseCase(root_dir=str(root_path)).execute(path, dry_run=dry_run)
        data = {"path": result.path, "created": result.created, "dry_run": result.dry_run}
        if _emit("mkpath", format, output, root_path, run_id, data):
            return
        with text_console(output) as out:
            prefix = "[yellow](DRY RUN)[/yellow] " if dry_run else ""
            if result.created:
                out.print(f"{prefix}[green]Created[/green] {escape(result.path)} ({len(result.created)} new)")
            else:
                out.print(f"{prefix}[blue]Exists[/blue] {escape(result.path)}")


@cli.command()
@click.argument("parent", default="/")
@workspace_options()
@click.option("--hint", "name_hint", default=None, help="Name hint, e.g. 'app:', '{http://example.org/ns}', 'app:report'.")
@click.option("--default-namespace", default=None, help="Prefix used when no hint is given.")
@dry_run_option()
def autoname(root, format, output, name_hint, default_namespace, dry_run, parent):
    """Add an automatically named child node under PARENT."""
    run_id = get_current_run_id()
    root_path = Path(root).resolve()

    with command_output_handler("autoname", format, output, run_id, root_path):
        use_case = AddNodeAutoNamedUseCase(root_dir=str(root_path), default_namespace=default_namespace)
        result = use_case.execute(parent_path=parent, name_hint=name_hint, dry_run=dry_run)
        data = {
            "parent_path": result.parent_path,
            "name": result.name,
            "path": result.path,
            "hint_kind": result.hint_kind.value,
            "dry_run": result.dry_run,
        }
        if _emit("autoname", format, output, root_path, run_id, data):
            return
        with text_console(output) as out:
            prefix = "[yellow](DRY RUN)[/yellow] " if dry_run else ""
            out.print(f"{prefix}[green]Added[/green] {escape(result.path)}")


@cli.command()
@workspace_options()
@dry_run_option()
@click.option("--yes", is_flag=True, default=False, help="Do not ask for confirmation.")
def purge(root, format, output, dry_run, yes):
    """Delete every node and property under the root except jcr:/rep: items."""
    run_id = get_current_run_id()
    root_path = Path(root).resolve()

    if not (yes or dry_run):
        click.confirm("Remove all non-system content from the tree?", abort=True)

    with command_output_handler("purge", format, output, run_id, root_path):
        report = DeleteAllNodesUseCase(root_dir=str(root_path)).execute(dry_run=dry_run)
        if _emit("purge", format, output, root_path, run_id, report.as_dict()):
            return
        with text_console(output) as out:
            if dry_run:
                out.print("[yellow](DRY RUN)[/yellow]")
            for name in report.removed_nodes:
                out.print(f"[red]Removed node[/red] {escape(name)}")
            for name in report.removed_properties:
                out.print(f"[red]Removed property[/red] {escape(name)}")
            if not report.removed_nodes and not report.removed_properties:
                out.print("[green]Nothing to remove.[/green]")


@cli.command()
@click.argument("path", default="/")
@workspace_options()
@click.option("--depth", type=click.IntRange(min=0), default=None, help="Limit the listing depth.")
def tree(root, format, output, depth, path):
    """Show the tree below PATH."""
    run_id = get_current_run_id()
    root_path = Path(root).resolve()

    with command_output_handler("tree", format, output, run_id, root_path):
        view = ShowTreeUseCase(root_dir=str(root_path)).execute(path, depth=depth)
        if _emit("tree", format, output, root_path, run_id, {"path": view.path, "tree": view.tree}):
            return
        branch = Tree(f"[bold]{escape(view.path)}[/bold]")
        _render_tree(view.tree, branch)
        with text_console(output) as out:
            out.print(branch)


@cli.command()
@workspace_options()
def namespaces(root, format, output):
    """List registered namespace prefixes and URIs."""
    run_id = get_current_run_id()
    root_path = Path(root).resolve()

    with command_output_handler("namespaces", format, output, run_id, root_path):
        config = load_repo_config(str(root_path))
        table_data = config.namespaces.as_dict()
        data = {"namespaces": table_data, "default_namespace": config.default_namespace}
        if _emit("namespaces", format, output, root_path, run_id, data):
            return
        table = Table(title="Namespaces")
        table.add_column("Prefix", style="cyan")
        table.add_column("URI")
        for prefix, uri in table_data.items():
            marker = " (default)" if prefix == config.default_namespace else ""
            table.add_row(escape(prefix or "''") + marker, escape(uri or "''"))
        with text_console(output) as out:
            out.print(table)


if __name__ == "__main__":
    cli()
