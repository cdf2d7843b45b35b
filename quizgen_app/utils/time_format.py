"""Display helpers for countdowns and elapsed times."""

from __future__ import annotations


def format_clock(seconds: int) -> str:
    """Format a number of seconds as ``m:ss``."""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


def format_score(score: float) -> str:
    """Format a score without trailing zeros (``5.25``, ``6``, ``-0.75``)."""
    text = f"{score:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text
