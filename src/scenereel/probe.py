"""Media probing via ffprobe."""

import math
from pathlib import Path

from .common import MediaToolError, run_ffprobe


class ProbeError(MediaToolError):
    """ffprobe ran but did not report a usable duration."""


def probe_duration(path: str | Path, timeout: float | None = None) -> float:
    """Return the container duration of a media file in seconds.

    Runs ffprobe in inspection mode, which prints a single number on stdout.

    Raises:
        MediaToolError: ffprobe failed, timed out, or is not installed.
        ProbeError: The output was not a positive number.
    """
    result = run_ffprobe(
        [
            "-v", "error",
            "-show_entries", "format=duration",
            "-of", "default=noprint_wrappers=1:nokey=1",
            str(path),
        ],
        timeout=timeout,
    )
    text = result.stdout.strip()
    try:
        duration = float(text)
    except ValueError:
        raise ProbeError(f"ffprobe returned no duration for {path}: {text!r}") from None
    if not math.isfinite(duration) or duration <= 0:
        raise ProbeError(f"ffprobe returned an invalid duration for {path}: {text!r}")
    return duration
