from __future__ import annotations

from jcrutil.core.domain.entities import CreatePathResult
from jcrutil.core.services.node_paths import create_path, split_path
from jcrutil.core.services.observability import log_operation
from jcrutil.core.services.repo_config import RepoConfig, load_repo_config
from jcrutil.core.services.tree_store import load_tree, save_tree


class CreatePathUseCase:
    """Materialize a node path in the workspace tree, like `mkdir -p`.

    The tree file is written even when a segment fails part way, so ancestors
    created before the failure persist, matching create_path() itself.
    """

    def __init__(self, root_dir: str):
        self._config: RepoConfig = load_repo_config(root_dir)

    def execute(self, path: str, dry_run: bool = False) -> CreatePathResult:
        segments = split_path(path)
        with log_operation("path_create", details={"path": path, "dry_run": dry_run}) as ctx:
            root = load_tree(self._config)

            # Record which segments are new before touching the tree.
            created = []
            current = root
            for segment in segments:
                if current is not None and current.has_node(segment):
                    current = current.get_node(segment)
                else:
                    current = None
                    created.append(segment)

            if dry_run:
                target = "/" + "/".join(segments)
            else:
                try:
                    target = create_path(root, path).get_path()
                finally:
                    save_tree(self._config, root)

            ctx["details"]["created"] = len(created)
            return CreatePathResult(path=target, created=created, dry_run=dry_run)
