from __future__ import annotations

"""
Sketch Bundler.

Assembles a project tree into one self-contained preview document:
1. Auxiliary scripts are collected in display pre-order, which fixes their
   declaration and execution order.
2. Asset nodes are indexed by path.
3. Quoted literals naming an asset are rewritten to its resource URI.
4. Bridge prologue, auxiliary scripts (annotated with their paths) and the
   entry script are concatenated inside an exception guard.
5. The guarded program is embedded into the fixed execution harness.

User script text is passed through unvalidated; the only failure the bundler
produces is EntryNotFound.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sketchpad.core.bundler.assets import build_asset_index, substitute_asset_literals
from sketchpad.core.bundler.harness import BRIDGE_PROLOGUE, guard_program, render_document
from sketchpad.core.vfs.file_tree import FileTree
from sketchpad.domain.bundle_models import Bundle
from sketchpad.domain.config import validate_config
from sketchpad.domain.errors import EntryNotFound, NotFound
from sketchpad.domain.file_models import FileNode

logger = logging.getLogger(__name__)


class SketchBundler:
    """
    Builds preview bundles from file tree snapshots.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        """
        Args:
            config: Application configuration; missing keys use defaults.
        """
        cfg, warnings = validate_config(config if config is not None else {})
        for w in warnings:
            logger.warning(f"Configuration Warning: {w}")

        self.origin_tag: str = cfg["origin_tag"]
        self.library_url: str = cfg["library_url"].format(version=cfg["p5_version"])

    def build(self, tree: FileTree, entry_id: Optional[str] = None) -> Bundle:
        """
        Produce the bundle for the current state of a tree.

        Args:
            tree: Project tree to assemble.
            entry_id: Script to execute last; defaults to the tree's entry.

        Returns:
            Bundle: Assembled artifact.
        """
        entry_id = tree.entry_id if entry_id is None else entry_id
        entry = self._resolve_entry(tree, entry_id)
        entry_path = tree.path_of(entry.id)

        # 1-2. Collect scripts and assets in display order
        scripts: List[Tuple[str, FileNode]] = []
        assets: List[Tuple[str, FileNode]] = []
        for node in tree.walk():
            if node.is_script and node.id != entry.id:
                scripts.append((tree.path_of(node.id), node))
            elif node.is_media:
                assets.append((tree.path_of(node.id), node))

        # 3. Asset literal substitution
        index = build_asset_index(assets)
        sections: List[str] = [BRIDGE_PROLOGUE]
        for path, node in scripts:
            source, matched = substitute_asset_literals(str(node.content), index)
            if matched:
                logger.debug(f"{path}: resolved asset references {matched}")
            sections.append(f"// --- {path} ---\n{source}")

        entry_source, matched = substitute_asset_literals(str(entry.content), index)
        if matched:
            logger.debug(f"{entry_path}: resolved asset references {matched}")
        sections.append(f"// --- {entry_path} ---\n{entry_source}")

        # 4-5. Guard and embed into the harness
        program = guard_program("\n\n".join(sections))
        html = render_document(program, self.library_url, self.origin_tag)

        logger.info(f"Bundle built: entry={entry_path}, scripts={len(scripts)}, assets={len(assets)}")
        return Bundle(
            html=html,
            code=program,
            entry_path=entry_path,
            script_paths=[path for path, _ in scripts],
            asset_paths={path: node.handle.uri for path, node in assets if node.handle},
        )

    @staticmethod
    def _resolve_entry(tree: FileTree, entry_id: Optional[str]) -> FileNode:
        try:
            entry = tree.get(entry_id) if entry_id is not None else None
        except NotFound:
            entry = None
        if entry is None or not entry.is_script:
            logger.error(f"Bundle aborted: entry {entry_id!r} is not a script")
            raise EntryNotFound(entry_id)
        return entry
