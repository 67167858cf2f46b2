from __future__ import annotations

"""
Unit tests for the Preview Execution Harness.
"""

import json

from sketchpad.core.bundler.harness import (
    escape_script_text,
    guard_program,
    render_bridge,
    render_document,
)


def test_guard_program_wraps_body() -> None:
    """TC-01: Program code is wrapped in a try/catch reporting through the bridge."""
    assert guard_program("draw();") == (
        "try {\n"
        "draw();\n"
        "} catch (e) {\n"
        "  window.__sketchpadBridge.report(e);\n"
        "}"
    )


def test_bridge_maps_console_channels() -> None:
    """TC-02: log/info map to info, warn to warning, error to error."""
    bridge = render_bridge("p5-runner")
    assert "var ORIGIN = \"p5-runner\";" in bridge
    assert "log: 'info'" in bridge
    assert "info: 'info'" in bridge
    assert "warn: 'warning'" in bridge
    assert "error: 'error'" in bridge
    assert "' (Line: '" in bridge


def test_bridge_origin_is_quoted_safely() -> None:
    tag = 'evil"; alert(1); "'
    assert f"var ORIGIN = {json.dumps(tag)};" in render_bridge(tag)


def test_bridge_origin_cannot_close_script() -> None:
    bridge = render_bridge("</Script><b>x</b>")
    assert "</Script" not in bridge
    assert "<\\/Script><b>x</b>" in bridge


def test_escape_script_text() -> None:
    assert escape_script_text("a</script>b</SCRIPT>") == "a<\\/script>b<\\/SCRIPT>"
    assert escape_script_text("</Script></sCrIpT >") == "<\\/Script><\\/sCrIpT >"
    assert escape_script_text("plain") == "plain"


def test_render_document_layout() -> None:
    """TC-03: Runtime loads before the bridge, which loads before the program."""
    html = render_document("console.log(1);", "https://cdn.example/p5.js", "tag")

    assert html.startswith("<!DOCTYPE html>")
    runtime = html.index('<script src="https://cdn.example/p5.js"></script>')
    bridge = html.index("var ORIGIN")
    program = html.index("console.log(1);")
    assert runtime < bridge < program
    assert "touch-action: none" in html
    assert "preventDefault" in html
