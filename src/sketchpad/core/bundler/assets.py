from __future__ import annotations

"""
Asset Reference Resolution.

Best-effort textual pass that rewrites quoted string literals naming an
uploaded asset into that asset's resource URI. This is a literal match over
quoted strings, not a parse of the script: any string that happens to equal
an asset path is rewritten too, including ones unrelated to asset loading.
"""

import logging
import re
from typing import Dict, Iterable, List, Tuple

from sketchpad.domain.file_models import FileNode

logger = logging.getLogger(__name__)

# Single-line string literal delimited by ', " or a backtick; escapes are
# skipped over but not decoded.
_STRING_LITERAL_RX = re.compile(
    r"""(?P<quote>["'`])(?P<body>(?:\\.|(?!(?P=quote))[^\\\n])*)(?P=quote)"""
)


def build_asset_index(assets: Iterable[Tuple[str, FileNode]]) -> Dict[str, str]:
    """
    Map every literal that may reference an asset to its resource URI.

    Args:
        assets: (root-to-leaf path, media node) pairs.

    Returns:
        Dict[str, str]: Literal text to resource URI. Root-level assets are
        reachable by bare name, which for them is also the full path.
    """
    index: Dict[str, str] = {}
    for path, node in assets:
        handle = node.handle
        if handle is None:
            logger.warning(f"Asset without resource handle skipped: {path}")
            continue
        index[path] = handle.uri
        if node.parent_id is None:
            index[node.name] = handle.uri
    return index


def substitute_asset_literals(source: str, index: Dict[str, str]) -> Tuple[str, List[str]]:
    """
    Rewrite quoted literals equal to an indexed asset path.

    The original quote character is preserved; every other literal is left
    byte-for-byte unchanged.

    Args:
        source: Script source text.
        index: Literal to URI mapping from build_asset_index().

    Returns:
        Tuple[str, List[str]]: (Rewritten source, matched literals in order).
    """
    if not index or not source:
        return source, []

    matched: List[str] = []

    def _replace(match: re.Match) -> str:
        body = match.group("body")
        uri = index.get(body)
        if uri is None:
            return match.group(0)
        matched.append(body)
        quote = match.group("quote")
        return f"{quote}{uri}{quote}"

    return _STRING_LITERAL_RX.sub(_replace, source), matched
