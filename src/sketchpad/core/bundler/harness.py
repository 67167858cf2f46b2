from __future__ import annotations

"""
Preview Execution Harness.

Fixed HTML scaffolding around a bundled program: the p5.js runtime, styles and
listeners that keep touch gestures inside the canvas, and the logging bridge
that forwards console output and uncaught errors to the host as structured
messages over window.parent.postMessage.
"""

import json
import re
from string import Template

# -----------------------------------------------------------------------------
# BRIDGE (SANDBOX SIDE)
# -----------------------------------------------------------------------------

_BRIDGE_TEMPLATE = Template("""
(function() {
  var ORIGIN = $origin;
  var CHANNELS = { log: 'info', info: 'info', warn: 'warning', error: 'error' };

  function render(args) {
    return Array.prototype.map.call(args, function(a) {
      if (a instanceof Error) return String(a);
      if (typeof a === 'object' && a !== null) {
        try { return JSON.stringify(a); } catch (e) { return String(a); }
      }
      return String(a);
    }).join(' ');
  }

  function post(severity, text) {
    try {
      window.parent.postMessage({ source: ORIGIN, severity: severity, text: text }, '*');
    } catch (e) {
      // host unreachable or payload not cloneable
    }
  }

  Object.keys(CHANNELS).forEach(function(name) {
    var original = console[name];
    console[name] = function() {
      post(CHANNELS[name], render(arguments));
      if (original) original.apply(console, arguments);
    };
  });

  window.onerror = function(msg, url, lineNo) {
    post('error', String(msg) + (lineNo ? ' (Line: ' + lineNo + ')' : ''));
    return false;
  };

  window.__sketchpadBridge = {
    post: post,
    report: function(err) { post('error', render([err])); }
  };
})();
""")

# -----------------------------------------------------------------------------
# DOCUMENT
# -----------------------------------------------------------------------------

_DOCUMENT_TEMPLATE = Template("""<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0, maximum-scale=1.0, user-scalable=no">
    <script src="$library_url"></script>
    <style>
      body {
        margin: 0;
        padding: 0;
        overflow: hidden;
        background-color: #18181b;
        display: flex;
        justify-content: center;
        align-items: center;
        height: 100vh;
        width: 100vw;
        touch-action: none;
        -webkit-user-select: none;
        user-select: none;
        -webkit-touch-callout: none;
      }
      canvas {
        display: block;
        touch-action: none;
      }
    </style>
    <script>$bridge</script>
  </head>
  <body>
    <script>
      document.addEventListener('touchmove', function(e) { e.preventDefault(); }, { passive: false });

$program
    </script>
  </body>
</html>
""")

# Program prologue: seal the bridge before any user code runs
BRIDGE_PROLOGUE = "Object.freeze(window.__sketchpadBridge);"


_SCRIPT_CLOSE_RX = re.compile(r"</(script)", re.IGNORECASE)


def render_bridge(origin_tag: str) -> str:
    """Render the sandbox-side bridge installer for a given origin tag."""
    return _BRIDGE_TEMPLATE.substitute(origin=escape_script_text(json.dumps(origin_tag)))


def guard_program(body: str) -> str:
    """
    Wrap program code so a synchronous exception becomes one error log entry.
    """
    return (
        "try {\n"
        f"{body}\n"
        "} catch (e) {\n"
        "  window.__sketchpadBridge.report(e);\n"
        "}"
    )


def render_document(program: str, library_url: str, origin_tag: str) -> str:
    """
    Assemble the complete preview document.

    Args:
        program: Guarded program code.
        library_url: Absolute URL of the p5.js runtime.
        origin_tag: Sentinel used by the host to recognize bridge messages.

    Returns:
        str: HTML document.
    """
    return _DOCUMENT_TEMPLATE.substitute(
        library_url=library_url,
        bridge=render_bridge(origin_tag),
        program=escape_script_text(program),
    )


def escape_script_text(code: str) -> str:
    """Keep user code from terminating the enclosing <script> element."""
    return _SCRIPT_CLOSE_RX.sub(r"<\\/\1", code)
