"""Hard-cut concatenation via ffmpeg's concat demuxer.

Clips are joined end to end with no overlap, so the result is exactly as
long as the sum of its parts. Always re-encodes: clips from different
renders may not share encoder parameters, which stream-copy cannot fix.
"""

import logging
from pathlib import Path

from .common import run_ffmpeg


logger = logging.getLogger(__name__)

CONCAT_LIST_NAME = "concat-list.txt"
AUDIO_BITRATE = "256k"


def concat_total_duration(durations: list[float]) -> float:
    """Length of a hard-cut composite: no overlap is subtracted."""
    return float(sum(durations))


def _quote(path: str) -> str:
    # concat demuxer syntax: single quotes, with ' written as '\''
    return "'" + path.replace("'", "'\\''") + "'"


def write_concat_list(clips: list[str], list_path: str | Path) -> Path:
    """Write a concat demuxer list file, one `file '<path>'` line per clip."""
    list_path = Path(list_path)
    lines = [f"file {_quote(str(Path(c).resolve()))}" for c in clips]
    list_path.write_text("\n".join(lines) + "\n")
    return list_path


def concatenate(
    clips: list[str],
    output_path: str | Path,
    width: int | None = None,
    height: int | None = None,
    bitrate: str | None = None,
    list_dir: str | Path | None = None,
) -> str:
    """Join clips with hard cuts into output_path.

    Args:
        clips: Clip paths in order.
        output_path: Output mp4 path (parent directory is created).
        width, height: Scale to this size when both are given.
        bitrate: Target video bitrate; constant quality (crf 18) when None.
        list_dir: Where to write the temporary list file
            (default: next to the output).

    Returns:
        The output path.

    Raises:
        ValueError: Empty clip list.
        MediaToolError: ffmpeg failed or timed out.
    """
    if not clips:
        raise ValueError("No videos to concatenate")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    list_path = Path(list_dir or output_path.parent) / CONCAT_LIST_NAME

    if bitrate:
        rate_args = ["-b:v", bitrate]
    else:
        rate_args = ["-crf", "18"]
    scale_args = []
    if width and height:
        scale_args = ["-vf", f"scale={width}:{height}"]

    args = [
        "-y",
        "-f", "concat",
        "-safe", "0",
        "-i", str(list_path),
        "-c:v", "libx264",
        "-c:a", "aac",
        "-b:a", AUDIO_BITRATE,
        *rate_args,
        *scale_args,
        "-preset", "medium",
        "-profile:v", "high",
        "-level", "4.2",
        "-pix_fmt", "yuv420p",
        "-movflags", "+faststart",
        str(output_path),
    ]

    write_concat_list(clips, list_path)
    try:
        logger.info("Concatenating %d clips into %s", len(clips), output_path)
        run_ffmpeg(args)
    finally:
        list_path.unlink(missing_ok=True)
    return str(output_path)
