from __future__ import annotations

"""
Tree Renderer.

Converts a project tree into a visual ASCII representation in display order.
"""

from typing import List, Optional

from sketchpad.core.vfs.file_tree import FileTree

_TYPE_MARKERS = {
    "image": " [image]",
    "video": " [video]",
}


def render_tree_structure(
        tree: FileTree,
        lines: List[str],
        parent_id: Optional[str] = None,
        prefix: str = "",
        show_types: bool = False,
) -> None:
    """
    Recursively transform the tree into a list of strings.

    Uses standard ASCII connectors (├──, └──) and manages indentation
    levels for nested folders. The entry script is marked with '*'.

    Args:
        tree: Project tree.
        lines: Accumulator list for output strings.
        parent_id: Folder being rendered, None for root.
        prefix: Indentation prefix for the current recursion level.
        show_types: Append a media kind marker to asset entries.
    """
    entries = tree.list_children(parent_id)
    total = len(entries)

    for i, node in enumerate(entries):
        is_last = (i == total - 1)
        connector = "└── " if is_last else "├── "

        label = node.name + ("/" if node.is_folder else "")
        if node.id == tree.entry_id:
            label += " *"
        if show_types:
            label += _TYPE_MARKERS.get(node.type.value, "")

        lines.append(f"{prefix}{connector}{label}")

        if node.is_folder:
            new_prefix = prefix + ("    " if is_last else "│   ")
            render_tree_structure(tree, lines, node.id, new_prefix, show_types)


def render_tree(tree: FileTree, show_types: bool = False) -> List[str]:
    lines: List[str] = []
    render_tree_structure(tree, lines, show_types=show_types)
    return lines
