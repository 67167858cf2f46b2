from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema (subcommands, help messages and defaults) and
translates parsed namespaces into configuration overrides.
"""

import argparse
from typing import Any, Dict

from sketchpad.domain.constants import APP_VERSION

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the Sketchpad CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="sketchpad",
        description="Bundle multi-file p5.js sketches into self-contained preview documents.",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {APP_VERSION}",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the persisted configuration file.",
    )

    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    # --- build ---
    build = sub.add_parser("build", help="Bundle a project directory into one HTML file.")
    build.add_argument("project_dir", help="Directory holding the sketch project.")
    build.add_argument(
        "-o", "--output",
        dest="output_path",
        default=None,
        help="Target HTML file (default: <project_dir>/index.html).",
    )
    build.add_argument(
        "--entry",
        dest="entry_name",
        default=None,
        help="Root-level script executed last (default: sketch.js).",
    )
    build.add_argument(
        "--p5-version",
        dest="p5_version",
        default=None,
        help="p5.js release loaded by the preview document.",
    )
    build.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the build report as JSON.",
    )

    # --- tree ---
    tree = sub.add_parser("tree", help="Print the project structure in display order.")
    tree.add_argument("project_dir", help="Directory holding the sketch project.")
    tree.add_argument(
        "--types",
        dest="show_types",
        action="store_true",
        help="Mark image and video assets.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    entry_name = getattr(args, "entry_name", None)
    if entry_name:
        overrides["entry_name"] = entry_name.strip()

    p5_version = getattr(args, "p5_version", None)
    if p5_version:
        overrides["p5_version"] = p5_version.strip()

    if args.debug:
        overrides["log_level"] = "DEBUG"

    return overrides
