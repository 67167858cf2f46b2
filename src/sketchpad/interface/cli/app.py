from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Runs the headless commands. Configuration is resolved from defaults or the
persisted state plus CLI overrides, logging is bootstrapped from it, and the
project directory is imported into a fresh workspace that is then bundled or
rendered as a tree.
"""

import json
import os
import sys
from typing import Any, Dict, List, Optional

from sketchpad.core.analysis.tree_renderer import render_tree
from sketchpad.core.project_io import ProjectImport, load_project, write_bundle
from sketchpad.domain.bundle_models import Bundle
from sketchpad.domain.config import get_default_config, load_config, validate_config
from sketchpad.domain.errors import SketchpadError
from sketchpad.infra.fs import normalize_path
from sketchpad.infra.logging import LoggingConfig, configure_logging, get_logger
from sketchpad.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_BUILD_FAILED = 1
EXIT_BAD_INPUT = 2

DEFAULT_OUTPUT_NAME = "index.html"

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 ok, 1 build failure, 2 bad input path).
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Configuration hierarchy (defaults or persisted state, then CLI overrides)
    base_conf = get_default_config() if args.use_defaults else load_config()
    raw_conf = dict(base_conf)
    raw_conf.update(cli_args.args_to_overrides(args))
    config, warnings = validate_config(raw_conf, strict=False)

    # 3. Logging bootstrap (console only)
    configure_logging(LoggingConfig.from_settings(config, debug=args.debug))
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    # 4. Pre-flight input verification
    project_dir = normalize_path(args.project_dir, fallback=os.curdir)
    if not os.path.isdir(project_dir):
        msg = f"Project directory does not exist: {project_dir}"
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_BAD_INPUT

    if args.command == "tree":
        return _run_tree(project_dir, config, args.show_types)
    return _run_build(project_dir, config, args)

# -----------------------------------------------------------------------------
# COMMANDS
# -----------------------------------------------------------------------------

def _run_tree(project_dir: str, config: Dict[str, Any], show_types: bool) -> int:
    report = load_project(project_dir, config)
    try:
        print(os.path.basename(project_dir) + "/")
        for line in render_tree(report.workspace.tree, show_types=show_types):
            print(line)
    finally:
        report.workspace.close()
    return EXIT_OK


def _run_build(project_dir: str, config: Dict[str, Any], args: Any) -> int:
    report = load_project(project_dir, config)
    workspace = report.workspace
    try:
        if not report.entry_found:
            msg = f"No '{config['entry_name']}' found at the root of {project_dir}"
            logger.error(msg)
            print(f"ERROR: {msg}", file=sys.stderr)
            return EXIT_BUILD_FAILED

        output_path = normalize_path(args.output_path, fallback=os.path.join(project_dir, DEFAULT_OUTPUT_NAME))
        try:
            bundle = workspace.build()
            written = write_bundle(bundle, output_path)
        except (SketchpadError, OSError) as e:
            msg = f"Build failed: {e}"
            logger.critical(msg, exc_info=True)
            print(f"ERROR: {msg}", file=sys.stderr)
            return EXIT_BUILD_FAILED
    finally:
        workspace.close()

    if args.json_output:
        print(json.dumps(_build_report(bundle, report, written), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(bundle, report, written)
    return EXIT_OK

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _build_report(bundle: Bundle, report: ProjectImport, output_path: str) -> Dict[str, Any]:
    return {
        "ok": True,
        "output_path": output_path,
        "entry_path": bundle.entry_path,
        "script_paths": list(bundle.script_paths),
        "asset_paths": sorted(bundle.asset_paths),
        "imported": list(report.imported),
        "skipped": list(report.skipped),
    }


def _print_human_summary(bundle: Bundle, report: ProjectImport, output_path: str) -> None:
    """
    Format and print the build result to standard output.

    Args:
        bundle: Built bundle.
        report: Import report of the project directory.
        output_path: Location of the written HTML document.
    """
    print("Bundle built successfully.")
    print(f"Output: {output_path}")
    print(f"Entry: {bundle.entry_path}")

    if bundle.script_paths:
        print("Scripts (execution order):")
        for path in bundle.script_paths:
            print(f"  - {path}")
    if bundle.asset_paths:
        print(f"Assets embedded: {len(bundle.asset_paths)}")
    if report.skipped:
        print(f"Files skipped: {len(report.skipped)}")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
