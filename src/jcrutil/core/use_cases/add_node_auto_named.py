from __future__ import annotations

from typing import Optional

from jcrutil.core.domain.entities import AutoNameResult
from jcrutil.core.services.auto_names import RandomInt, generate_auto_node_name
from jcrutil.core.services.name_hints import classify_name_hint
from jcrutil.core.services.node_paths import join_path, resolve_path
from jcrutil.core.services.observability import log_operation
from jcrutil.core.services.repo_config import RepoConfig, load_repo_config
from jcrutil.core.services.tree_store import load_tree, save_tree


class AddNodeAutoNamedUseCase:
    """
    Add a child node whose name is generated from an optional name hint.

    The used names are the parent's current child names, so the generated
    name never collides with an existing sibling. Hint and namespace errors
    surface as InvalidHintError / UnknownNamespaceError before anything is
    written.
    """

    def __init__(
        self,
        root_dir: str,
        default_namespace: Optional[str] = None,
        random_int: Optional[RandomInt] = None,
    ):
        self._config: RepoConfig = load_repo_config(root_dir, default_namespace=default_namespace)
        self._random_int = random_int

    def execute(
        self,
        parent_path: str = "/",
        name_hint: Optional[str] = None,
        dry_run: bool = False,
    ) -> AutoNameResult:
        details = {"parent_path": parent_path, "name_hint": name_hint, "dry_run": dry_run}
        with log_operation("node_add_auto_named", details=details) as ctx:
            root = load_tree(self._config)
            parent = resolve_path(root, parent_path)

            kind = classify_name_hint(name_hint).kind
            name = generate_auto_node_name(
                parent.get_node_names(),
                self._config.namespaces,
                self._config.default_namespace,
                name_hint,
                random_int=self._random_int,
                max_attempts=self._config.max_attempts,
            )

            if dry_run:
                path = join_path(parent.get_path(), name)
            else:
                path = parent.add_node(name).get_path()
                save_tree(self._config, root)

            ctx["details"]["name"] = name
            return AutoNameResult(
                parent_path=parent.get_path(),
                name=name,
                path=path,
                hint_kind=kind,
                dry_run=dry_run,
            )
