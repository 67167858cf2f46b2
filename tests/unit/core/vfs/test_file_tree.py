from __future__ import annotations

"""
Unit tests for the In-Memory Virtual File System.

Verifies:
1. Initial state and the protected entry script.
2. Creation rules (extension policy, sibling name conflicts, invalid names).
3. Subtree deletion (exact descendant set, deepest-first order).
4. Move semantics (cycle rejection, target validation).
5. Read helpers (display order, paths, ancestry).
6. Structural soundness under random operation sequences.
"""

import random
from typing import Callable, Dict, Optional

import pytest

from sketchpad.core.vfs.file_tree import FileTree
from sketchpad.domain.constants import DEFAULT_SKETCH, ENTRY_NODE_ID, NEW_SCRIPT_CONTENT
from sketchpad.domain.errors import (
    CycleDetected,
    InvalidName,
    NameConflict,
    NotEditable,
    NotFound,
    ProtectedEntry,
    StructuralError,
)
from sketchpad.domain.file_models import FileType, ResourceHandle


def _structure(tree: FileTree) -> Dict[str, tuple]:
    """Comparable view of the whole tree (id -> (name, parent, type))."""
    return {n.id: (n.name, n.parent_id, n.type) for n in tree.snapshot()}


@pytest.fixture
def nested(tree: FileTree) -> Dict[str, str]:
    """
    Build:
        src/
            lib/
                util.js
            main_helper.js
        docs/
        sketch.js
    """
    ids = {"src": tree.add("src", FileType.FOLDER)}
    ids["lib"] = tree.add("lib", FileType.FOLDER, ids["src"])
    ids["util"] = tree.add("util", FileType.SCRIPT, ids["lib"])
    ids["helper"] = tree.add("main_helper.js", FileType.SCRIPT, ids["src"])
    ids["docs"] = tree.add("docs", FileType.FOLDER)
    return ids

# -----------------------------------------------------------------------------
# Initial state
# -----------------------------------------------------------------------------

def test_new_tree_holds_only_entry(tree: FileTree) -> None:
    """TC-01: A fresh tree contains exactly the entry script with default content."""
    assert len(tree) == 1
    entry = tree.entry
    assert entry.id == ENTRY_NODE_ID == tree.entry_id
    assert entry.name == "sketch.js"
    assert entry.parent_id is None
    assert entry.type is FileType.SCRIPT
    assert entry.content == DEFAULT_SKETCH


def test_custom_entry_name_gets_extension() -> None:
    """TC-02: A configured entry name without extension is normalized."""
    t = FileTree(entry_content="", entry_name="main")
    assert t.entry.name == "main.js"


def test_get_returns_detached_copy(tree: FileTree) -> None:
    """TC-03: Mutating a returned node does not affect the tree."""
    node = tree.get(tree.entry_id)
    node.name = "hacked.js"
    node.content = "x"
    assert tree.entry.name == "sketch.js"
    assert tree.entry.content == DEFAULT_SKETCH

# -----------------------------------------------------------------------------
# Creation
# -----------------------------------------------------------------------------

def test_add_script_appends_extension(tree: FileTree) -> None:
    """TC-04: Scripts get '.js' appended and placeholder content."""
    node_id = tree.add("helper", FileType.SCRIPT)
    node = tree.get(node_id)
    assert node.name == "helper.js"
    assert node.content == NEW_SCRIPT_CONTENT

    kept = tree.get(tree.add("other.js", FileType.SCRIPT))
    assert kept.name == "other.js"


def test_add_folder_keeps_name(tree: FileTree) -> None:
    folder = tree.get(tree.add("assets", FileType.FOLDER))
    assert folder.name == "assets"
    assert folder.is_folder


def test_add_rejects_media_types(tree: FileTree) -> None:
    """TC-05: Media nodes can only be created through upload()."""
    with pytest.raises(ValueError):
        tree.add("cat.png", FileType.IMAGE)


def test_add_into_missing_or_non_folder_parent(tree: FileTree) -> None:
    """TC-06: The parent must be an existing folder."""
    with pytest.raises(NotFound):
        tree.add("a", FileType.SCRIPT, "ghost")
    with pytest.raises(NotFound):
        tree.add("a", FileType.SCRIPT, tree.entry_id)
    assert len(tree) == 1


def test_sibling_name_conflict_is_rejected(tree: FileTree) -> None:
    """TC-07: Exact duplicate names among siblings raise NameConflict."""
    tree.add("utils", FileType.SCRIPT)
    with pytest.raises(NameConflict):
        tree.add("utils.js", FileType.SCRIPT)
    with pytest.raises(NameConflict):
        tree.add("sketch", FileType.SCRIPT)


def test_name_conflict_is_case_sensitive(tree: FileTree) -> None:
    tree.add("utils", FileType.SCRIPT)
    tree.add("Utils", FileType.SCRIPT)
    names = [n.name for n in tree.list_children()]
    assert "utils.js" in names and "Utils.js" in names


def test_same_name_in_different_folders_is_allowed(tree: FileTree) -> None:
    folder = tree.add("lib", FileType.FOLDER)
    tree.add("sketch", FileType.SCRIPT, folder)
    assert tree.find_by_path("lib/sketch.js") is not None


@pytest.mark.parametrize("bad_name", ["", "   ", ".", "..", "a/b", "a\\b"])
def test_invalid_names_are_rejected(tree: FileTree, bad_name: str) -> None:
    """TC-08: Empty, reserved and separator-containing names raise InvalidName."""
    with pytest.raises(InvalidName):
        tree.add(bad_name, FileType.FOLDER)
    assert len(tree) == 1


def test_upload_infers_media_kind(tree: FileTree) -> None:
    """TC-09: Uploads wrap a handle and take their type from its media kind."""
    image = ResourceHandle("h1", "data:image/png;base64,AA==", "image/png", 1)
    video = ResourceHandle("h2", "data:video/mp4;base64,AA==", "video/mp4", 1)

    img_node = tree.get(tree.upload("cat.png", image))
    vid_node = tree.get(tree.upload("clip.mp4", video))

    assert img_node.type is FileType.IMAGE
    assert img_node.handle == image
    assert img_node.name == "cat.png"
    assert vid_node.type is FileType.VIDEO


def test_upload_name_conflict(tree: FileTree, image_handle: Callable[..., ResourceHandle]) -> None:
    tree.upload("cat.png", image_handle())
    with pytest.raises(NameConflict):
        tree.upload("cat.png", image_handle())

# -----------------------------------------------------------------------------
# Deletion
# -----------------------------------------------------------------------------

def test_delete_folder_removes_exact_subtree(tree: FileTree, nested: Dict[str, str]) -> None:
    """TC-10: Deleting a folder removes it and its transitive descendants only."""
    expected = {nested["src"], nested["lib"], nested["util"], nested["helper"]}
    before = set(_structure(tree))

    removed = tree.delete(nested["src"])

    assert {n.id for n in removed} == expected
    assert set(_structure(tree)) == before - expected
    assert nested["docs"] in tree
    assert tree.entry_id in tree


def test_delete_removes_children_before_parents(tree: FileTree, nested: Dict[str, str]) -> None:
    removed = [n.id for n in tree.delete(nested["src"])]
    assert removed[-1] == nested["src"]
    assert removed.index(nested["util"]) < removed.index(nested["lib"])


def test_delete_entry_is_forbidden(tree: FileTree, nested: Dict[str, str]) -> None:
    """TC-11: The entry script can never be deleted and the tree stays unchanged."""
    before = _structure(tree)
    with pytest.raises(ProtectedEntry):
        tree.delete(tree.entry_id)
    assert _structure(tree) == before


def test_delete_unknown_node(tree: FileTree) -> None:
    with pytest.raises(NotFound):
        tree.delete("ghost")

# -----------------------------------------------------------------------------
# Move
# -----------------------------------------------------------------------------

def test_move_reparents_node(tree: FileTree, nested: Dict[str, str]) -> None:
    tree.move(nested["util"], nested["docs"])
    assert tree.get(nested["util"]).parent_id == nested["docs"]
    assert tree.path_of(nested["util"]) == "docs/util.js"

    tree.move(nested["util"], None)
    assert tree.get(nested["util"]).parent_id is None


def test_move_into_self_or_descendant_fails(tree: FileTree, nested: Dict[str, str]) -> None:
    """TC-12: Moving a folder under itself or a descendant raises CycleDetected."""
    before = _structure(tree)
    with pytest.raises(CycleDetected):
        tree.move(nested["src"], nested["src"])
    with pytest.raises(CycleDetected):
        tree.move(nested["src"], nested["lib"])
    assert _structure(tree) == before


def test_move_cycle_iff_target_in_subtree(tree: FileTree, nested: Dict[str, str]) -> None:
    """TC-13: move(id, p) fails with CycleDetected exactly when p is id or below it."""
    folders = [nested["src"], nested["lib"], nested["docs"]]
    movable = folders + [nested["util"], nested["helper"]]

    for node_id in movable:
        subtree = {node_id, *tree.descendants(node_id)}
        original_parent: Optional[str] = tree.get(node_id).parent_id
        for target in folders:
            if target in subtree:
                with pytest.raises(CycleDetected):
                    tree.move(node_id, target)
            else:
                tree.move(node_id, target)
                tree.move(node_id, original_parent)


def test_move_entry_is_forbidden(tree: FileTree, nested: Dict[str, str]) -> None:
    with pytest.raises(ProtectedEntry):
        tree.move(tree.entry_id, nested["docs"])
    assert tree.entry.parent_id is None


def test_move_into_non_folder_fails(tree: FileTree, nested: Dict[str, str]) -> None:
    with pytest.raises(NotFound):
        tree.move(nested["helper"], nested["util"])
    with pytest.raises(NotFound):
        tree.move(nested["helper"], "ghost")


def test_move_name_conflict(tree: FileTree, nested: Dict[str, str]) -> None:
    tree.add("util", FileType.SCRIPT, nested["docs"])
    with pytest.raises(NameConflict):
        tree.move(nested["util"], nested["docs"])
    assert tree.get(nested["util"]).parent_id == nested["lib"]

# -----------------------------------------------------------------------------
# Rename and content
# -----------------------------------------------------------------------------

def test_rename_script_keeps_extension_policy(tree: FileTree, nested: Dict[str, str]) -> None:
    tree.rename(nested["helper"], "renamed")
    assert tree.get(nested["helper"]).name == "renamed.js"


def test_rename_entry_is_forbidden(tree: FileTree) -> None:
    with pytest.raises(ProtectedEntry):
        tree.rename(tree.entry_id, "index.js")


def test_rename_to_own_name_is_not_a_conflict(tree: FileTree, nested: Dict[str, str]) -> None:
    tree.rename(nested["docs"], "docs")
    assert tree.get(nested["docs"]).name == "docs"


def test_rename_conflict(tree: FileTree, nested: Dict[str, str]) -> None:
    with pytest.raises(NameConflict):
        tree.rename(nested["docs"], "src")


def test_update_content_only_for_scripts(tree: FileTree, nested: Dict[str, str]) -> None:
    """TC-14: Folders and media are immutable."""
    tree.update_content(nested["util"], "let a = 1;")
    assert tree.get(nested["util"]).content == "let a = 1;"
    with pytest.raises(NotEditable):
        tree.update_content(nested["docs"], "x")

# -----------------------------------------------------------------------------
# Read helpers
# -----------------------------------------------------------------------------

def test_display_order_folders_first_then_casefold(tree: FileTree) -> None:
    """TC-15: Children are listed folders first, each group by case-insensitive name."""
    tree.add("beta", FileType.SCRIPT)
    tree.add("Alpha", FileType.SCRIPT)
    tree.add("zeta", FileType.FOLDER)
    tree.add("Assets", FileType.FOLDER)

    names = [n.name for n in tree.list_children()]
    assert names == ["Assets", "zeta", "Alpha.js", "beta.js", "sketch.js"]


def test_walk_is_preorder(tree: FileTree, nested: Dict[str, str]) -> None:
    order = [n.id for n in tree.walk()]
    assert order == [
        nested["docs"],
        nested["src"],
        nested["lib"],
        nested["util"],
        nested["helper"],
        tree.entry_id,
    ]


def test_paths_and_ancestry(tree: FileTree, nested: Dict[str, str]) -> None:
    assert tree.path_of(nested["util"]) == "src/lib/util.js"
    assert tree.resolve_path(nested["util"]) == ["src", "lib", "util.js"]
    assert tree.ancestors(nested["util"]) == [nested["lib"], nested["src"]]
    assert tree.depth(nested["util"]) == 2
    assert tree.depth(tree.entry_id) == 0

    found = tree.find_by_path("src/lib/util.js")
    assert found is not None and found.id == nested["util"]
    assert tree.find_by_path("src/missing.js") is None

# -----------------------------------------------------------------------------
# Structural soundness
# -----------------------------------------------------------------------------

def test_random_operations_keep_tree_acyclic(tree: FileTree) -> None:
    """TC-16: Any add/delete/move sequence leaves every ancestor chain finite."""
    rng = random.Random(1234)

    for step in range(300):
        nodes = tree.snapshot()
        folders = [n.id for n in nodes if n.is_folder]
        op = rng.choice(["add_folder", "add_script", "delete", "move", "move"])
        try:
            if op == "add_folder":
                tree.add(f"f{step}", FileType.FOLDER, rng.choice(folders + [None]))
            elif op == "add_script":
                tree.add(f"s{step}", FileType.SCRIPT, rng.choice(folders + [None]))
            elif op == "delete":
                tree.delete(rng.choice(nodes).id)
            else:
                tree.move(rng.choice(nodes).id, rng.choice(folders + [None]))
        except StructuralError:
            pass

        for node in tree.snapshot():
            chain = tree.ancestors(node.id)
            assert len(chain) <= len(tree)
            assert node.id not in chain

    assert tree.entry_id in tree
