from __future__ import annotations

from jcrutil.core.domain.entities import PurgeReport
from jcrutil.core.services.observability import log_operation
from jcrutil.core.services.repo_config import RepoConfig, load_repo_config
from jcrutil.core.services.system_items import delete_all_nodes
from jcrutil.core.services.tree_store import load_tree, save_tree


class DeleteAllNodesUseCase:
    """Remove all user content below the root, keeping jcr:/rep: items."""

    def __init__(self, root_dir: str):
        self._config: RepoConfig = load_repo_config(root_dir)

    def execute(self, dry_run: bool = False) -> PurgeReport:
        with log_operation("nodes_delete_all", details={"dry_run": dry_run}) as ctx:
            root = load_tree(self._config, create_missing=False)
            report = delete_all_nodes(root, dry_run=dry_run)
            if not dry_run:
                save_tree(self._config, root)
            ctx["details"]["removed"] = len(report.removed_nodes) + len(report.removed_properties)
            return report
