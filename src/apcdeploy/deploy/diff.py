"""Line diff between deployed and local configuration content."""

from __future__ import annotations

import difflib

from apcdeploy.config.data import normalize_content
from apcdeploy.models.deployment import DiffResult


def printable(line: str) -> str:
    """Replace undecodable bytes kept by ``surrogateescape`` with U+FFFD."""
    return line.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def calculate_diff(
    remote: bytes | str,
    local: bytes | str,
    content_type: str,
    profile_kind: str = "",
    file_name: str = "data",
) -> DiffResult:
    """Diff two versions of configuration content after normalization.

    Both sides go through normalize_content first, so key order, YAML layout
    and line endings never show up as changes.

    Raises:
        ValidationError: If either side does not parse for its content type
    """
    remote_lines = normalize_content(remote, content_type, profile_kind).splitlines()
    local_lines = normalize_content(local, content_type, profile_kind).splitlines()

    lines = difflib.unified_diff(
        remote_lines,
        local_lines,
        fromfile=f"remote/{file_name}",
        tofile=f"local/{file_name}",
        lineterm="",
    )
    return DiffResult(lines=[printable(line) for line in lines])
