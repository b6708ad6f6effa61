"""Stable bookmark names for anchors and links in the report.

Bookmark names must be identical for identical input in every run and on
every platform, so they are derived from a fixed blake2b digest instead of a
runtime string hash. The name only contains lowercase letters, digits and
underscores (word processors reject "-" in bookmark names).
"""

import hashlib

BOOKMARK_SCHEME = "b1"
DIGEST_SIZE = 8


def bookmark_code(text: str, section_id: str) -> str:
    """Return the bookmark name for a display text within a section.

    Args:
        text: Display text of the anchor or link
        section_id: Scope of the bookmark (a section id or a cell value)

    Returns:
        Name in the form "b1_<16 hex chars>"; matching is case-insensitive
    """
    payload = f"{section_id}{text}".upper().encode("utf-8")
    digest = hashlib.blake2b(payload, digest_size=DIGEST_SIZE).hexdigest()
    return f"{BOOKMARK_SCHEME}_{digest}"
