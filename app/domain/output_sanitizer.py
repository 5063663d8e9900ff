"""Cleanup of raw provisioning process output before it is logged or relayed."""

from __future__ import annotations

import re
from typing import Final

_ANSI_ESCAPE_PATTERN: Final[re.Pattern[str]] = re.compile(r"\x1b\[[0-9;]*[a-zA-Z]")

# Docker pull/extract progress lines.
NOISY_OUTPUT_MARKERS: Final[tuple[str, ...]] = (
    "Downloading",
    "Extracting",
    "Waiting",
    "Verifying",
    "Pull complete",
    "Already exists",
    "Download complete",
    "Pulling from",
    "Pulling fs layer",
    "Digest:",
)


def domain_strip_ansi_sequences(raw_text: str) -> str:
    """Remove terminal color and cursor control sequences."""

    return _ANSI_ESCAPE_PATTERN.sub("", raw_text)


def domain_sanitize_output(raw_text: str) -> str:
    """Strip control sequences and drop blank or noisy lines from process output.

    Surviving lines keep their original text and order.

    Args:
        raw_text: Combined stdout/stderr text of an external process.

    Returns:
        str: Cleaned text joined with newlines, empty when nothing survives.
    """

    kept_lines: list[str] = []
    for line in domain_strip_ansi_sequences(raw_text).split("\n"):
        trimmed_line = line.strip()
        if not trimmed_line:
            continue
        if any(marker in trimmed_line for marker in NOISY_OUTPUT_MARKERS):
            continue
        kept_lines.append(line)
    return "\n".join(kept_lines)
