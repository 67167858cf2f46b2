from __future__ import annotations

"""
Integration tests for Project Import and Bundle Export.

Verifies that a project directory on disk is mirrored into a workspace
(scripts, folders, media; hidden and unsupported files skipped) and that the
resulting bundle is written as a standalone HTML file.
"""

import os
from pathlib import Path

import pytest

from sketchpad.core.project_io import load_project, write_bundle
from sketchpad.domain.file_models import FileType


@pytest.fixture
def project_dir(tmp_path: Path, png_bytes: bytes) -> Path:
    """
    Structure:
        project/
            sketch.js
            notes.txt
            .hidden.js
            lib/helper.js
            assets/img.png
            .git/config
    """
    root = tmp_path / "project"
    (root / "lib").mkdir(parents=True)
    (root / "assets").mkdir()
    (root / ".git").mkdir()

    (root / "sketch.js").write_text(
        "let img;\nfunction preload() { img = loadImage('assets/img.png'); }\n",
        encoding="utf-8",
    )
    (root / "notes.txt").write_text("todo", encoding="utf-8")
    (root / ".hidden.js").write_text("// secret", encoding="utf-8")
    (root / "lib" / "helper.js").write_text("function helper() {}", encoding="utf-8")
    (root / "assets" / "img.png").write_bytes(png_bytes)
    (root / ".git" / "config").write_text("[core]", encoding="utf-8")
    return root


def test_load_project_mirrors_directory(project_dir: Path) -> None:
    """TC-01: Scripts, folders and media become nodes; the root sketch.js is the entry."""
    report = load_project(str(project_dir))
    tree = report.workspace.tree

    try:
        assert report.entry_found
        assert sorted(report.imported) == ["assets/img.png", "lib/helper.js", "sketch.js"]
        assert report.skipped == ["notes.txt"]

        assert "loadImage('assets/img.png')" in str(tree.entry.content)
        helper = tree.find_by_path("lib/helper.js")
        assert helper is not None and helper.content == "function helper() {}"
        image = tree.find_by_path("assets/img.png")
        assert image is not None and image.type is FileType.IMAGE
        assert tree.find_by_path(".git") is None
    finally:
        report.workspace.close()


def test_loaded_entry_has_no_history(project_dir: Path) -> None:
    """TC-02: Importing sets initial content; it is not an undoable edit."""
    report = load_project(str(project_dir))
    try:
        assert report.workspace.tree.entry_id not in report.workspace.history
    finally:
        report.workspace.close()


def test_build_and_write_bundle(project_dir: Path, tmp_path: Path) -> None:
    """TC-03: The written document embeds scripts and the resolved asset."""
    report = load_project(str(project_dir))
    try:
        bundle = report.workspace.build()
    finally:
        report.workspace.close()

    target = write_bundle(bundle, str(tmp_path / "out" / "index.html"))

    html = Path(target).read_text(encoding="utf-8")
    assert Path(target).is_absolute()
    assert "function helper() {}" in html
    assert "loadImage('data:image/png;base64," in html
    assert bundle.script_paths == ["lib/helper.js"]


def test_missing_entry_is_reported(tmp_path: Path) -> None:
    root = tmp_path / "empty"
    root.mkdir()
    (root / "other.js").write_text("// x", encoding="utf-8")

    report = load_project(str(root))
    try:
        assert not report.entry_found
        assert report.imported == ["other.js"]
    finally:
        report.workspace.close()


def test_custom_entry_name(tmp_path: Path) -> None:
    root = tmp_path / "custom"
    root.mkdir()
    (root / "main.js").write_text("// main", encoding="utf-8")

    report = load_project(str(root), {"entry_name": "main.js"})
    try:
        assert report.entry_found
        assert report.workspace.tree.entry.content == "// main"
    finally:
        report.workspace.close()


def test_undecodable_script_is_skipped(tmp_path: Path) -> None:
    """TC-04: A script that is not valid UTF-8 is reported, not fatal."""
    root = tmp_path / "legacy"
    root.mkdir()
    (root / "sketch.js").write_text("// ok", encoding="utf-8")
    (root / "legacy.js").write_bytes("// café".encode("latin-1"))

    report = load_project(str(root))
    try:
        assert report.entry_found
        assert report.imported == ["sketch.js"]
        assert report.skipped == ["legacy.js"]
        assert report.workspace.tree.find_by_path("legacy.js") is None
    finally:
        report.workspace.close()


@pytest.mark.skipif(os.name == "nt", reason="backslash is a path separator on Windows")
def test_rejected_folder_name_is_skipped(tmp_path: Path) -> None:
    """TC-05: A folder the tree cannot name is skipped along with its contents."""
    root = tmp_path / "odd"
    (root / "a\\b").mkdir(parents=True)
    (root / "a\\b" / "inner.js").write_text("// inner", encoding="utf-8")
    (root / "lib").mkdir()
    (root / "lib" / "ok.js").write_text("// ok", encoding="utf-8")
    (root / "sketch.js").write_text("// entry", encoding="utf-8")

    report = load_project(str(root))
    try:
        assert report.skipped == ["a\\b"]
        assert sorted(report.imported) == ["lib/ok.js", "sketch.js"]
        assert len(report.workspace.tree) == 3
    finally:
        report.workspace.close()
