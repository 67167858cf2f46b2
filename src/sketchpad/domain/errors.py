from __future__ import annotations

"""
Domain Error Taxonomy.

Structural errors are raised by the virtual file system and guarantee that
the tree is left exactly as it was before the failing call. Bundler errors
abort a run before any preview is started. Collaborator errors (upload and
generation) are surfaced verbatim without touching tree or history state.
"""

from typing import Optional


class SketchpadError(Exception):
    """Base class for every error raised by the sketchpad core."""


# -----------------------------------------------------------------------------
# STRUCTURAL ERRORS (FILE TREE)
# -----------------------------------------------------------------------------

class StructuralError(SketchpadError):
    """A file tree operation was rejected. The tree is unchanged."""


class NotFound(StructuralError):
    def __init__(self, node_id: Optional[str], what: str = "node") -> None:
        self.node_id = node_id
        super().__init__(f"{what.capitalize()} not found: {node_id!r}")


class CycleDetected(StructuralError):
    def __init__(self, node_id: str, new_parent_id: Optional[str]) -> None:
        self.node_id = node_id
        self.new_parent_id = new_parent_id
        super().__init__(
            f"Cannot move {node_id!r} into {new_parent_id!r}: target is the node itself or one of its descendants"
        )


class ProtectedEntry(StructuralError):
    def __init__(self, node_id: str, action: str) -> None:
        self.node_id = node_id
        self.action = action
        super().__init__(f"The entry script cannot be {action}")


class NameConflict(StructuralError):
    def __init__(self, name: str, parent_id: Optional[str]) -> None:
        self.name = name
        self.parent_id = parent_id
        where = "root" if parent_id is None else repr(parent_id)
        super().__init__(f"A node named {name!r} already exists in {where}")


class InvalidName(StructuralError):
    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        super().__init__(f"Invalid name {name!r}: {reason}")


class NotEditable(StructuralError):
    def __init__(self, node_id: str, node_type: str) -> None:
        self.node_id = node_id
        self.node_type = node_type
        super().__init__(f"Content of {node_type} node {node_id!r} is immutable")


# -----------------------------------------------------------------------------
# BUNDLER ERRORS
# -----------------------------------------------------------------------------

class BundlerError(SketchpadError):
    """A bundle could not be produced. No preview must be started."""


class EntryNotFound(BundlerError):
    def __init__(self, entry_id: Optional[str]) -> None:
        self.entry_id = entry_id
        super().__init__(f"Entry script {entry_id!r} does not resolve to a script")


# -----------------------------------------------------------------------------
# COLLABORATOR ERRORS
# -----------------------------------------------------------------------------

class UploadError(SketchpadError):
    """The upload collaborator could not produce a resource handle."""


class GenerationError(SketchpadError):
    """The AI generation collaborator failed. The message is user-facing."""
