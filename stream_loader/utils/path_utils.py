# Copyright 2025 Loopper-AI
# URL path utilities

from __future__ import annotations

import posixpath


def join_path(*segments: str) -> str:
    """
    Join URL path segments and normalize the result.

    Behaves like a POSIX path join followed by normalization: repeated
    slashes collapse, "." and ".." resolve, and a trailing slash on the
    last segment is kept. Segments are joined as relative parts, so a
    leading slash on a later segment does not discard earlier ones.

    Args:
        segments: Path segments, e.g. ("/", index, doc_type)

    Returns:
        Normalized absolute path string
    """
    parts = [s for s in segments if s]
    if not parts:
        return "/"

    joined = "/".join(parts)
    normalized = posixpath.normpath("/" + joined)
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")

    if joined.endswith("/") and normalized != "/":
        normalized += "/"
    return normalized
