from __future__ import annotations

"""
Resource Handle Store (Upload Collaborator).

Turns uploaded binary media into stable resource handles. Handles are
base64 'data:' URIs so that a bundle embedding them is fully self-contained.
A handle stays live until it is released; the workspace releases handles of
deleted media nodes.
"""

import base64
import logging
import mimetypes
import threading
import uuid
from typing import Dict, Optional

from sketchpad.domain.constants import IMPORTABLE_MEDIA_PREFIXES
from sketchpad.domain.errors import UploadError
from sketchpad.domain.file_models import ResourceHandle

logger = logging.getLogger(__name__)


def guess_media_type(file_name: str) -> Optional[str]:
    """Infer a MIME type from a file name, or None when unknown."""
    media_type, _ = mimetypes.guess_type(file_name)
    return media_type


class ResourceStore:
    """
    Registry of live resource handles.
    """

    def __init__(self) -> None:
        self._handles: Dict[str, ResourceHandle] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._handles)

    def acquire(self, data: bytes, file_name: str = "", media_type: Optional[str] = None) -> ResourceHandle:
        """
        Register binary content and return its handle.

        Args:
            data: Raw media bytes.
            file_name: Original file name, used to infer the media type.
            media_type: Explicit MIME type; takes precedence over inference.

        Returns:
            ResourceHandle: Live handle wrapping the content.
        """
        if not isinstance(data, (bytes, bytearray)):
            raise UploadError(f"Upload payload must be bytes, received {type(data).__name__}.")

        resolved = (media_type or guess_media_type(file_name) or "").lower()
        if not resolved.startswith(IMPORTABLE_MEDIA_PREFIXES):
            raise UploadError(f"Unsupported media type for '{file_name}': {resolved or 'unknown'}")

        encoded = base64.b64encode(bytes(data)).decode("ascii")
        handle = ResourceHandle(
            handle_id=uuid.uuid4().hex,
            uri=f"data:{resolved};base64,{encoded}",
            media_type=resolved,
            size=len(data),
        )

        with self._lock:
            self._handles[handle.handle_id] = handle

        logger.debug(f"Resource acquired: {file_name or handle.handle_id} ({resolved}, {len(data)} bytes)")
        return handle

    def release(self, handle: ResourceHandle) -> bool:
        """
        Release a handle. Releasing twice is harmless.

        Returns:
            bool: True if the handle was live.
        """
        with self._lock:
            released = self._handles.pop(handle.handle_id, None) is not None
        if released:
            logger.debug(f"Resource released: {handle.handle_id}")
        return released

    def is_live(self, handle: ResourceHandle) -> bool:
        with self._lock:
            return handle.handle_id in self._handles
