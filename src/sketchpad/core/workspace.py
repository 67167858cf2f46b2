from __future__ import annotations

"""
Sketch Workspace.

Single-writer facade over the project state. Every user action is applied
synchronously under one lock:
- edits commit the superseded text to history before the new text lands;
- deletes cascade to history discard and resource release;
- runs build a bundle first and only then start a preview session.

Uploads may acquire their resource handle on a worker thread; the node is
inserted only once the handle is ready.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Dict, List, Optional

from sketchpad.core.bundler.builder import SketchBundler
from sketchpad.core.generation.service import generate_code, generator_from_config
from sketchpad.core.generation.strategies import CodeGenerator
from sketchpad.core.history.store import HistoryStore
from sketchpad.core.preview.session import ConsoleLog, PreviewSession
from sketchpad.core.resources.store import ResourceStore
from sketchpad.core.vfs.file_tree import FileTree
from sketchpad.domain.bundle_models import Bundle
from sketchpad.domain.config import validate_config
from sketchpad.domain.errors import NotEditable, StructuralError
from sketchpad.domain.file_models import FileNode, FileType

logger = logging.getLogger(__name__)

UPLOAD_WORKERS = 2


class Workspace:
    """
    Project session: tree, history, resources, console and preview.
    """

    def __init__(
            self,
            config: Optional[Dict[str, Any]] = None,
            *,
            tree: Optional[FileTree] = None,
            resources: Optional[ResourceStore] = None,
    ) -> None:
        cfg, warnings = validate_config(config if config is not None else {})
        for w in warnings:
            logger.warning(f"Configuration Warning: {w}")

        self.config = cfg
        self.tree = tree or FileTree(entry_name=cfg["entry_name"])
        self.history = HistoryStore(limit=cfg["history_limit"])
        self.resources = resources or ResourceStore()
        self.bundler = SketchBundler(cfg)
        self.console = ConsoleLog()
        self.session: Optional[PreviewSession] = None

        self._lock = threading.RLock()
        self._executor: Optional[ThreadPoolExecutor] = None

    # -------------------------------------------------------------------------
    # EDITING
    # -------------------------------------------------------------------------

    def content_of(self, file_id: str) -> str:
        node = self.tree.get(file_id)
        if not node.is_script:
            raise NotEditable(file_id, node.type.value)
        return str(node.content)

    def edit(self, file_id: str, new_content: str) -> bool:
        """
        Accept new content from the editor.

        Args:
            file_id: Edited script.
            new_content: Full replacement text.

        Returns:
            bool: False when the content did not change and nothing was recorded.
        """
        with self._lock:
            current = self.content_of(file_id)
            if new_content == current:
                return False
            self.history.commit(file_id, current)
            self.tree.update_content(file_id, new_content)
            return True

    def undo(self, file_id: str) -> Optional[str]:
        """Restore the previous content. Returns None when there is nothing to undo."""
        with self._lock:
            restored = self.history.undo(file_id, self.content_of(file_id))
            if restored is not None:
                self.tree.update_content(file_id, restored)
            return restored

    def redo(self, file_id: str) -> Optional[str]:
        """Re-apply undone content. Returns None when there is nothing to redo."""
        with self._lock:
            restored = self.history.redo(file_id, self.content_of(file_id))
            if restored is not None:
                self.tree.update_content(file_id, restored)
            return restored

    def apply_generated(self, file_id: str, prompt: str, generator: Optional[CodeGenerator] = None) -> str:
        """
        Replace a script with AI-generated code through the regular edit path.

        The provider call runs outside the lock; on GenerationError nothing is
        mutated. Without an explicit generator the configured provider is used.

        Returns:
            str: The applied code.
        """
        current = self.content_of(file_id)
        code = generate_code(prompt, current, generator or generator_from_config(self.config))
        self.edit(file_id, code)
        return code

    # -------------------------------------------------------------------------
    # STRUCTURE
    # -------------------------------------------------------------------------

    def add(self, name: str, node_type: FileType, parent_id: Optional[str] = None) -> str:
        with self._lock:
            return self.tree.add(name, node_type, parent_id)

    def upload(
            self,
            data: bytes,
            name: str,
            parent_id: Optional[str] = None,
            media_type: Optional[str] = None,
    ) -> str:
        """
        Acquire a resource handle and insert the media node.

        The handle is released again if the insertion is rejected.

        Returns:
            str: Identifier of the new node.
        """
        handle = self.resources.acquire(data, name, media_type)
        with self._lock:
            try:
                return self.tree.upload(name, handle, parent_id)
            except StructuralError:
                self.resources.release(handle)
                raise

    def submit_upload(
            self,
            data: bytes,
            name: str,
            parent_id: Optional[str] = None,
            media_type: Optional[str] = None,
    ) -> Future:
        """
        Fire-and-forget upload. The returned future yields the node id or
        raises the upload/structural error.
        """
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=UPLOAD_WORKERS, thread_name_prefix="sketchpad-upload")
        return self._executor.submit(self.upload, data, name, parent_id, media_type)

    def delete(self, node_id: str) -> List[FileNode]:
        """
        Delete a node and its subtree, discarding histories and releasing
        resource handles of every removed node.
        """
        with self._lock:
            removed = self.tree.delete(node_id)
            for node in removed:
                self.history.discard(node.id)
                if node.handle is not None:
                    self.resources.release(node.handle)
        logger.info(f"Deleted {len(removed)} node(s).")
        return removed

    def rename(self, node_id: str, new_name: str) -> None:
        with self._lock:
            self.tree.rename(node_id, new_name)

    def move(self, node_id: str, new_parent_id: Optional[str]) -> None:
        with self._lock:
            self.tree.move(node_id, new_parent_id)

    # -------------------------------------------------------------------------
    # PREVIEW
    # -------------------------------------------------------------------------

    def build(self, entry_id: Optional[str] = None) -> Bundle:
        with self._lock:
            return self.bundler.build(self.tree, entry_id)

    def run(self, entry_id: Optional[str] = None, *, clear_console: bool = True) -> PreviewSession:
        """
        Build the project and start a new preview session.

        The bundle is built before anything else happens, so an EntryNotFound
        leaves the current session and the console untouched.

        Args:
            entry_id: Optional entry override.
            clear_console: Clear the console for the new run (the Run action).

        Returns:
            PreviewSession: The started session.
        """
        bundle = self.build(entry_id)

        self.stop()
        if clear_console:
            self.console.clear()

        session = PreviewSession(self.console, origin_tag=self.config["origin_tag"])
        session.start(bundle)
        self.session = session
        return session

    def stop(self) -> None:
        if self.session is not None:
            self.session.stop()
            self.session = None

    def close(self) -> None:
        """Stop the preview and wait for pending uploads."""
        self.stop()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
