from __future__ import annotations

from typing import List


# Horizontal caption blocks, in drawing order
BLOCK_NAMES: List[str] = [
    "left",
    "center",
    "right",
]

LINES_PER_BLOCK = 3

_ALIASES = {
    "centre": "center",
    "middle": "center",
}


def normalize_block(value: str) -> str:
    """Normalize a block name to canonical lowercase form without surrounding spaces."""
    key = (value or "").strip().lower()
    return _ALIASES.get(key, key)


def is_allowed_block(value: str) -> bool:
    return normalize_block(value) in BLOCK_NAMES


def require_block(value: str) -> str:
    if not is_allowed_block(value):
        raise ValueError(f"Unknown caption block '{value}', expected one of {BLOCK_NAMES}")
    return normalize_block(value)


def require_line(line: int) -> int:
    line = int(line)
    if not 1 <= line <= LINES_PER_BLOCK:
        raise ValueError(f"Caption line must be within 1-{LINES_PER_BLOCK}, got {line}")
    return line
