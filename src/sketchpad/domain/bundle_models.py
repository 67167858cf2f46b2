from __future__ import annotations

"""
Bundle and Preview Data Models.

Defines the artifact produced by the sketch bundler and the structured
messages exchanged over the one-way bridge between the sandboxed preview
and the host console.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sketchpad.domain.constants import SEVERITY_ALIASES, SEVERITY_INFO

# -----------------------------------------------------------------------------
# BUNDLE ARTIFACT
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Bundle:
    """
    Self-contained program assembled for one preview run.

    Attributes:
        html: Complete HTML document handed to the preview host.
        code: Guarded program code embedded in the document.
        entry_path: Root-to-leaf path of the entry script.
        script_paths: Auxiliary script paths in execution order.
        asset_paths: Asset path to resource URI mapping used for substitution.
        built_at: Epoch timestamp of the build.
    """
    html: str
    code: str
    entry_path: str
    script_paths: List[str] = field(default_factory=list)
    asset_paths: Dict[str, str] = field(default_factory=dict)
    built_at: float = field(default_factory=time.time)


# -----------------------------------------------------------------------------
# BRIDGE PROTOCOL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class BridgeMessage:
    """
    Structured event posted by the sandbox.

    Attributes:
        source: Origin tag identifying the preview runtime.
        severity: One of info, warning, error.
        text: Rendered message text.
    """
    source: str
    severity: str
    text: str

    @classmethod
    def from_payload(cls, payload: Any) -> Optional[BridgeMessage]:
        """
        Parse a raw posted payload.

        Accepts both the current keys (severity/text) and the legacy
        console-style keys (type/message). Unknown severities fall back to info.

        Args:
            payload: Object received from the channel.

        Returns:
            Optional[BridgeMessage]: Parsed message, or None if the payload
            is not a bridge message at all.
        """
        if not isinstance(payload, dict) or "source" not in payload:
            return None

        raw_severity = str(payload.get("severity", payload.get("type", SEVERITY_INFO))).lower()
        severity = SEVERITY_ALIASES.get(raw_severity, SEVERITY_INFO)
        text = payload.get("text", payload.get("message", ""))

        return cls(source=str(payload["source"]), severity=severity, text=str(text))

    def to_payload(self) -> Dict[str, str]:
        return {"source": self.source, "severity": self.severity, "text": self.text}


@dataclass(frozen=True)
class LogEntry:
    """
    Line of the host console.

    Attributes:
        id: Sequential identifier, unique within a console.
        severity: One of info, warning, error.
        text: Message text.
        timestamp: Epoch timestamp when the host received the message.
    """
    id: int
    severity: str
    text: str
    timestamp: float
