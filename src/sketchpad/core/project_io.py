from __future__ import annotations

"""
Project Import and Bundle Export.

Bridges the in-memory workspace and the local disk for headless use: a
directory is mirrored into a fresh workspace (folders, '.js' scripts, image
and video assets) and a built bundle is written out as a standalone HTML file.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sketchpad.core.resources.store import guess_media_type
from sketchpad.core.workspace import Workspace
from sketchpad.domain.bundle_models import Bundle
from sketchpad.domain.constants import IMPORTABLE_MEDIA_PREFIXES, SCRIPT_EXTENSION
from sketchpad.domain.errors import SketchpadError
from sketchpad.domain.file_models import FileType

logger = logging.getLogger(__name__)


@dataclass
class ProjectImport:
    """
    Outcome of mirroring a directory into a workspace.

    Attributes:
        workspace: Populated workspace.
        entry_found: Whether the root held the configured entry script.
        imported: Relative paths that became nodes.
        skipped: Relative paths ignored (unsupported type or rejected name).
    """
    workspace: Workspace
    entry_found: bool = False
    imported: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


def load_project(directory: str, config: Optional[Dict[str, Any]] = None) -> ProjectImport:
    """
    Mirror a project directory into a new workspace.

    Hidden entries are ignored. The root-level file named like the configured
    entry script becomes the entry content; it is loaded as initial state, not
    as an edit.

    Args:
        directory: Project root on disk.
        config: Application configuration.

    Returns:
        ProjectImport: Workspace and import report.
    """
    workspace = Workspace(config)
    report = ProjectImport(workspace=workspace)
    tree = workspace.tree
    entry_name = tree.entry.name

    root = os.path.abspath(directory)
    folder_ids: Dict[str, Optional[str]] = {"": None}

    for current, dirs, files in os.walk(root):
        dirs[:] = sorted(d for d in dirs if not d.startswith("."))
        files.sort()

        rel_dir = os.path.relpath(current, root)
        rel_dir = "" if rel_dir == "." else rel_dir.replace(os.sep, "/")
        parent_id = folder_ids[rel_dir]

        kept: List[str] = []
        for d in dirs:
            rel = f"{rel_dir}/{d}" if rel_dir else d
            try:
                folder_ids[rel] = workspace.add(d, FileType.FOLDER, parent_id)
            except SketchpadError as e:
                logger.warning(f"Skipped folder '{rel}': {e}")
                report.skipped.append(rel)
                continue
            kept.append(d)
        # Rejected folders are not descended into
        dirs[:] = kept

        for name in files:
            if name.startswith("."):
                continue
            rel = f"{rel_dir}/{name}" if rel_dir else name
            full_path = os.path.join(current, name)
            try:
                _import_file(workspace, full_path, name, rel, parent_id, entry_name, report)
            except (OSError, UnicodeDecodeError, SketchpadError) as e:
                logger.warning(f"Skipped '{rel}': {e}")
                report.skipped.append(rel)

    if not report.entry_found:
        logger.warning(f"No '{entry_name}' found at the root of {root}")

    logger.info(f"Project imported: {len(report.imported)} file(s), {len(report.skipped)} skipped")
    return report


def _import_file(
        workspace: Workspace,
        full_path: str,
        name: str,
        rel: str,
        parent_id: Optional[str],
        entry_name: str,
        report: ProjectImport,
) -> None:
    if name.endswith(SCRIPT_EXTENSION):
        with open(full_path, "r", encoding="utf-8") as f:
            source = f.read()
        if parent_id is None and name == entry_name:
            workspace.tree.update_content(workspace.tree.entry_id, source)
            report.entry_found = True
        else:
            node_id = workspace.add(name, FileType.SCRIPT, parent_id)
            workspace.tree.update_content(node_id, source)
        report.imported.append(rel)
        return

    media_type = guess_media_type(name) or ""
    if not media_type.startswith(IMPORTABLE_MEDIA_PREFIXES):
        logger.debug(f"Unsupported file type skipped: {rel}")
        report.skipped.append(rel)
        return

    with open(full_path, "rb") as f:
        data = f.read()
    workspace.upload(data, name, parent_id, media_type)
    report.imported.append(rel)


def write_bundle(bundle: Bundle, output_path: str) -> str:
    """
    Write a bundle's HTML document to disk.

    Returns:
        str: Absolute path of the written file.
    """
    target = os.path.abspath(output_path)
    os.makedirs(os.path.dirname(target), exist_ok=True)
    with open(target, "w", encoding="utf-8") as f:
        f.write(bundle.html)
    logger.info(f"Bundle written to {target}")
    return target
