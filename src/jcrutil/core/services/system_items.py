from __future__ import annotations

from typing import Union

from jcrutil.core.domain.entities import PurgeReport, TreeItem, TreeNode

SYSTEM_PREFIXES = ("jcr:", "rep:")


def is_system_item(item: Union[str, TreeItem]) -> bool:
    """Determine whether a name (or an item's name) is in a system namespace."""
    name = item if isinstance(item, str) else item.get_name()
    return name.startswith(SYSTEM_PREFIXES)


def delete_all_nodes(root: TreeNode, dry_run: bool = False) -> PurgeReport:
    """Remove every child node and property of `root` that is not a system item.

    Implementations may keep nodes like jcr:system under the root that
    callers are not allowed to remove, so those are skipped.
    """
    report = PurgeReport(dry_run=dry_run)

    # Snapshot first so removal does not disturb iteration.
    for node in list(root.get_nodes()):
        name = node.get_name()
        if is_system_item(name):
            report.kept.append(name)
            continue
        if not dry_run:
            node.remove()
        report.removed_nodes.append(name)

    for prop in list(root.get_properties()):
        name = prop.get_name()
        if is_system_item(name):
            report.kept.append(name)
            continue
        if not dry_run:
            prop.remove()
        report.removed_properties.append(name)

    return report
