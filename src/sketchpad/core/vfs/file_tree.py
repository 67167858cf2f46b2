from __future__ import annotations

"""
In-Memory Virtual File System.

Owns every file and folder node of a sketch project. Nodes live in an arena
keyed by id with explicit parent references; structural operations walk
ancestor chains explicitly so that cycle detection and depth bounds never
depend on recursion.

Every public mutation validates completely before touching the arena, so a
failing call leaves the tree exactly as it was.

The arena is guarded by a re-entrant lock shared by readers and by uploads
inserted from worker threads.
"""

import logging
import threading
import uuid
from typing import Callable, Dict, Iterator, List, Optional

from sketchpad.domain.constants import (
    DEFAULT_SKETCH,
    ENTRY_NODE_ID,
    ENTRY_SCRIPT_NAME,
    NEW_SCRIPT_CONTENT,
    PATH_SEPARATOR,
    SCRIPT_EXTENSION,
)
from sketchpad.domain.errors import (
    CycleDetected,
    InvalidName,
    NameConflict,
    NotEditable,
    NotFound,
    ProtectedEntry,
)
from sketchpad.domain.file_models import FileNode, FileType, ResourceHandle

logger = logging.getLogger(__name__)

_FORBIDDEN_NAME_CHARS = ("/", "\\")


def _random_id() -> str:
    return uuid.uuid4().hex[:9]


class FileTree:
    """
    Hierarchical project tree with a protected entry script at root.
    """

    def __init__(
            self,
            entry_content: str = DEFAULT_SKETCH,
            entry_name: str = ENTRY_SCRIPT_NAME,
            id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        """
        Initialize a tree holding only the entry script.

        Args:
            entry_content: Initial source of the entry script.
            entry_name: File name of the entry script.
            id_factory: Optional generator of node ids.
        """
        self._id_factory = id_factory or _random_id
        self._lock = threading.RLock()
        self._entry_id = ENTRY_NODE_ID
        self._nodes: Dict[str, FileNode] = {
            ENTRY_NODE_ID: FileNode(
                id=ENTRY_NODE_ID,
                name=self._normalize_name(entry_name, FileType.SCRIPT),
                parent_id=None,
                type=FileType.SCRIPT,
                content=entry_content,
            )
        }

    # -------------------------------------------------------------------------
    # READ API
    # -------------------------------------------------------------------------

    @property
    def entry_id(self) -> str:
        return self._entry_id

    @property
    def entry(self) -> FileNode:
        return self._nodes[self._entry_id].copy()

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def get(self, node_id: str) -> FileNode:
        """Return a detached copy of a node. Raises NotFound."""
        return self._require(node_id).copy()

    def find(self, node_id: Optional[str]) -> Optional[FileNode]:
        node = self._nodes.get(node_id) if node_id is not None else None
        return node.copy() if node else None

    def list_children(self, parent_id: Optional[str] = None) -> List[FileNode]:
        """
        List the direct children of a folder (or of root) in display order.

        Folders come first, then files; each group is sorted by name
        case-insensitively.

        Args:
            parent_id: Folder id, or None for root.

        Returns:
            List[FileNode]: Detached copies of the children.
        """
        if parent_id is not None:
            self._require_folder(parent_id)
        with self._lock:
            children = [n.copy() for n in self._nodes.values() if n.parent_id == parent_id]
        children.sort(key=lambda n: (not n.is_folder, n.name.casefold(), n.name))
        return children

    def walk(self, parent_id: Optional[str] = None) -> Iterator[FileNode]:
        """
        Pre-order traversal in display order (folders first, then files).

        Args:
            parent_id: Folder to start below, or None for the whole tree.

        Yields:
            FileNode: Detached copies of the visited nodes.
        """
        stack: List[FileNode] = list(reversed(self.list_children(parent_id)))
        while stack:
            node = stack.pop()
            yield node
            if node.is_folder:
                stack.extend(reversed(self.list_children(node.id)))

    def snapshot(self) -> List[FileNode]:
        """All nodes in display order, taken atomically."""
        with self._lock:
            return list(self.walk())

    def ancestors(self, node_id: str) -> List[str]:
        """
        Walk the parent chain of a node up to root.

        The walk is bounded by the number of nodes in the arena; exceeding
        that bound means the parent links form a cycle.

        Args:
            node_id: Starting node.

        Returns:
            List[str]: Ancestor ids, nearest parent first.
        """
        with self._lock:
            node = self._require(node_id)
            chain: List[str] = []
            cursor = node.parent_id
            while cursor is not None:
                if len(chain) >= len(self._nodes):
                    raise CycleDetected(node_id, cursor)
                chain.append(cursor)
                cursor = self._require(cursor).parent_id
        return chain

    def descendants(self, node_id: str) -> List[str]:
        """
        Collect the full transitive descendant set of a node.

        Returns:
            List[str]: Descendant ids, parents before their children.
        """
        with self._lock:
            self._require(node_id)
            found: List[str] = []
            stack = self._child_ids(node_id)
            while stack:
                current = stack.pop()
                found.append(current)
                stack.extend(self._child_ids(current))
        return found

    def depth(self, node_id: str) -> int:
        """Number of ancestors of a node. Root-level nodes have depth 0."""
        return len(self.ancestors(node_id))

    def resolve_path(self, node_id: str) -> List[str]:
        """
        Names from root down to the node, inclusive.
        """
        with self._lock:
            names = [self._require(node_id).name]
            names.extend(self._nodes[a].name for a in self.ancestors(node_id))
        names.reverse()
        return names

    def path_of(self, node_id: str) -> str:
        return PATH_SEPARATOR.join(self.resolve_path(node_id))

    def find_by_path(self, path: str) -> Optional[FileNode]:
        """
        Resolve a separator-joined root-to-leaf path to a node.

        Args:
            path: Path such as 'assets/img.png'.

        Returns:
            Optional[FileNode]: Matching node copy, or None.
        """
        segments = [s for s in path.strip(PATH_SEPARATOR).split(PATH_SEPARATOR) if s]
        parent_id: Optional[str] = None
        current: Optional[FileNode] = None
        for segment in segments:
            current = next(
                (n for n in self._arena() if n.parent_id == parent_id and n.name == segment),
                None,
            )
            if current is None:
                return None
            parent_id = current.id
        return current.copy() if current else None

    # -------------------------------------------------------------------------
    # MUTATION API
    # -------------------------------------------------------------------------

    def add(self, name: str, node_type: FileType, parent_id: Optional[str] = None) -> str:
        """
        Create an empty folder or a new script.

        Scripts get the canonical extension appended when missing and start
        with placeholder content. Media nodes are created through upload().

        Args:
            name: Display name.
            node_type: FileType.SCRIPT or FileType.FOLDER.
            parent_id: Target folder id, None for root.

        Returns:
            str: Identifier of the new node.
        """
        node_type = FileType(node_type)
        if node_type.is_media:
            raise ValueError("Media nodes are created by upload(), not add().")

        clean_name = self._normalize_name(name, node_type)
        content = NEW_SCRIPT_CONTENT if node_type is FileType.SCRIPT else ""
        with self._lock:
            self._require_folder(parent_id)
            self._check_conflict(clean_name, parent_id)
            return self._insert(clean_name, node_type, parent_id, content)

    def upload(self, name: str, handle: ResourceHandle, parent_id: Optional[str] = None) -> str:
        """
        Wrap a ready resource handle into a new media node.

        The node type is inferred from the handle's media kind.

        Args:
            name: Display name of the asset.
            handle: Resource handle acquired from the upload collaborator.
            parent_id: Target folder id, None for root.

        Returns:
            str: Identifier of the new node.
        """
        node_type = handle.media_kind
        clean_name = self._normalize_name(name, node_type)
        with self._lock:
            self._require_folder(parent_id)
            self._check_conflict(clean_name, parent_id)
            return self._insert(clean_name, node_type, parent_id, handle)

    def delete(self, node_id: str) -> List[FileNode]:
        """
        Remove a node and its whole subtree.

        Nodes are removed deepest first, so no remaining node ever points
        to a removed parent.

        Args:
            node_id: Node to remove.

        Returns:
            List[FileNode]: Removed nodes in removal order.
        """
        if node_id == self._entry_id:
            raise ProtectedEntry(node_id, "deleted")
        with self._lock:
            self._require(node_id)

            # Parents-before-children order, removed in reverse
            doomed = [node_id] + self.descendants(node_id)

            removed: List[FileNode] = []
            for victim in reversed(doomed):
                removed.append(self._nodes.pop(victim))

        logger.debug(f"Deleted {len(removed)} node(s) rooted at {node_id!r}")
        return removed

    def rename(self, node_id: str, new_name: str) -> None:
        """
        Rename a node in place. The entry script cannot be renamed.
        """
        if node_id == self._entry_id:
            raise ProtectedEntry(node_id, "renamed")
        with self._lock:
            node = self._require(node_id)
            clean_name = self._normalize_name(new_name, node.type)
            self._check_conflict(clean_name, node.parent_id, exclude_id=node_id)
            node.name = clean_name
        logger.debug(f"Renamed {node_id!r} to {clean_name!r}")

    def move(self, node_id: str, new_parent_id: Optional[str]) -> None:
        """
        Reparent a node.

        Fails with CycleDetected when the target is the node itself or one
        of its descendants, detected by walking the target's ancestor chain.

        Args:
            node_id: Node to move.
            new_parent_id: Destination folder id, None for root.
        """
        with self._lock:
            node = self._require(node_id)

            cursor = new_parent_id
            steps = 0
            while cursor is not None and cursor in self._nodes:
                if cursor == node_id:
                    raise CycleDetected(node_id, new_parent_id)
                steps += 1
                if steps > len(self._nodes):
                    raise CycleDetected(node_id, new_parent_id)
                cursor = self._nodes[cursor].parent_id

            if node_id == self._entry_id:
                raise ProtectedEntry(node_id, "moved")
            self._require_folder(new_parent_id)
            self._check_conflict(node.name, new_parent_id, exclude_id=node_id)

            node.parent_id = new_parent_id
        logger.debug(f"Moved {node_id!r} under {new_parent_id!r}")

    def update_content(self, node_id: str, content: str) -> None:
        """Replace the source text of a script. Media and folders are immutable."""
        with self._lock:
            node = self._require(node_id)
            if not node.is_script:
                raise NotEditable(node_id, node.type.value)
            node.content = content

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _arena(self) -> List[FileNode]:
        with self._lock:
            return list(self._nodes.values())

    def _require(self, node_id: Optional[str]) -> FileNode:
        node = self._nodes.get(node_id) if node_id is not None else None
        if node is None:
            raise NotFound(node_id)
        return node

    def _require_folder(self, folder_id: Optional[str]) -> None:
        if folder_id is None:
            return
        node = self._nodes.get(folder_id)
        if node is None or not node.is_folder:
            raise NotFound(folder_id, "folder")

    def _child_ids(self, parent_id: str) -> List[str]:
        return [n.id for n in self._arena() if n.parent_id == parent_id]

    def _check_conflict(self, name: str, parent_id: Optional[str], exclude_id: Optional[str] = None) -> None:
        for n in self._arena():
            if n.parent_id == parent_id and n.name == name and n.id != exclude_id:
                raise NameConflict(name, parent_id)

    def _insert(self, name: str, node_type: FileType, parent_id: Optional[str], content) -> str:
        node_id = self._id_factory()
        while node_id in self._nodes:
            node_id = self._id_factory()
        self._nodes[node_id] = FileNode(node_id, name, parent_id, node_type, content)
        logger.debug(f"Added {node_type.value} {name!r} ({node_id}) under {parent_id!r}")
        return node_id

    @staticmethod
    def _normalize_name(name: str, node_type: FileType) -> str:
        """Trim, validate, and append the script extension where required."""
        clean = (name or "").strip()
        if not clean:
            raise InvalidName(name, "name is empty")
        if clean in (".", ".."):
            raise InvalidName(name, "reserved name")
        if any(ch in clean for ch in _FORBIDDEN_NAME_CHARS):
            raise InvalidName(name, "path separators are not allowed")
        if node_type is FileType.SCRIPT and not clean.endswith(SCRIPT_EXTENSION):
            clean += SCRIPT_EXTENSION
        return clean
