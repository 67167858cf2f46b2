from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Provides centralized access to application-wide constants: the canonical
entry sketch, script extension rules, bridge protocol identifiers, the p5.js
runtime location and the AI provider registry.
"""

from typing import Dict, Tuple

APP_VERSION = "1.0.0"
CURRENT_CONFIG_VERSION = "1.0.0"

# -----------------------------------------------------------------------------
# FILE TREE DEFAULTS
# -----------------------------------------------------------------------------
ENTRY_NODE_ID = "main"
ENTRY_SCRIPT_NAME = "sketch.js"
SCRIPT_EXTENSION = ".js"
NEW_SCRIPT_CONTENT = "// New file"
PATH_SEPARATOR = "/"

DEFAULT_SKETCH = """function setup() {
  createCanvas(windowWidth, windowHeight);
  background(20);
  noStroke();
}

function draw() {
  let x = mouseX;
  let y = mouseY;

  background(20, 10);

  fill(255, 150);
  circle(x, height/2, 20);
}

function windowResized() {
  resizeCanvas(windowWidth, windowHeight);
  background(20);
}"""

# Extensions recognized when importing a project directory from disk
IMPORTABLE_MEDIA_PREFIXES: Tuple[str, ...] = ("image/", "video/")

# -----------------------------------------------------------------------------
# PREVIEW RUNTIME
# -----------------------------------------------------------------------------
BRIDGE_ORIGIN_TAG = "p5-runner"
P5_VERSION = "1.9.0"
P5_LIBRARY_URL = "https://cdnjs.cloudflare.com/ajax/libs/p5.js/{version}/p5.min.js"

SEVERITY_INFO = "info"
SEVERITY_WARNING = "warning"
SEVERITY_ERROR = "error"

# Console channel names used inside the sandbox mapped to bridge severities
SEVERITY_ALIASES: Dict[str, str] = {
    "log": SEVERITY_INFO,
    "info": SEVERITY_INFO,
    "debug": SEVERITY_INFO,
    "warn": SEVERITY_WARNING,
    "warning": SEVERITY_WARNING,
    "error": SEVERITY_ERROR,
}

# -----------------------------------------------------------------------------
# AI PROVIDER REGISTRY
# -----------------------------------------------------------------------------
DEFAULT_PROVIDER = "GOOGLE"

AI_MODELS: Dict[str, Dict[str, str]] = {
    "Gemini 2.5 Flash": {"id": "gemini-2.5-flash", "provider": "GOOGLE"},
    "Gemini 2.5 Pro": {"id": "gemini-2.5-pro", "provider": "GOOGLE"},
    "Claude 4.5 Sonnet": {"id": "claude-sonnet-4-5-20250929", "provider": "ANTHROPIC"},
    "Claude 3.5 Sonnet": {"id": "claude-3-5-sonnet-20240620", "provider": "ANTHROPIC"},
}

DEFAULT_MODEL_BY_PROVIDER: Dict[str, str] = {
    "GOOGLE": "gemini-2.5-flash",
    "ANTHROPIC": "claude-sonnet-4-5-20250929",
}
