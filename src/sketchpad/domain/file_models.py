from __future__ import annotations

"""
Virtual File System Data Models.

Defines the node and resource handle types held by the in-memory file tree.
Nodes are addressed by id and reference their parent by id only, so the tree
is an arena rather than a graph of object references.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

# -----------------------------------------------------------------------------
# NODE TYPES
# -----------------------------------------------------------------------------

class FileType(str, Enum):
    SCRIPT = "script"
    IMAGE = "image"
    VIDEO = "video"
    FOLDER = "folder"

    @property
    def is_media(self) -> bool:
        return self in (FileType.IMAGE, FileType.VIDEO)


@dataclass(frozen=True)
class ResourceHandle:
    """
    Stable reference to uploaded binary content.

    Attributes:
        handle_id: Unique identifier assigned by the resource store.
        uri: Dereferenceable location embedded into bundles.
        media_type: MIME type of the wrapped content.
        size: Payload size in bytes.
    """
    handle_id: str
    uri: str
    media_type: str
    size: int = 0

    @property
    def media_kind(self) -> FileType:
        """Infer the node type for this resource. Anything not video is an image."""
        if self.media_type.lower().startswith("video"):
            return FileType.VIDEO
        return FileType.IMAGE


NodeContent = Union[str, ResourceHandle]


# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass
class FileNode:
    """
    Single entry of the virtual file system.

    Attributes:
        id: Unique node identifier.
        name: Display name, unique among siblings.
        parent_id: Identifier of the parent folder, None for root level.
        type: Node kind.
        content: Source text for scripts, a ResourceHandle for media,
            an empty string for folders.
    """
    id: str
    name: str
    parent_id: Optional[str]
    type: FileType
    content: NodeContent = field(default="")

    @property
    def is_folder(self) -> bool:
        return self.type is FileType.FOLDER

    @property
    def is_script(self) -> bool:
        return self.type is FileType.SCRIPT

    @property
    def is_media(self) -> bool:
        return self.type.is_media

    @property
    def handle(self) -> Optional[ResourceHandle]:
        if isinstance(self.content, ResourceHandle):
            return self.content
        return None

    def copy(self) -> FileNode:
        return FileNode(self.id, self.name, self.parent_id, self.type, self.content)
