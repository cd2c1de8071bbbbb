"""Thumbnail extraction — one letterboxed 1280x720 JPEG frame."""

import logging
from pathlib import Path

from .common import run_ffmpeg


logger = logging.getLogger(__name__)

THUMBNAIL_WIDTH = 1280
THUMBNAIL_HEIGHT = 720


def extract_thumbnail(
    video_path: str | Path,
    output_path: str | Path,
    timestamp: float = 1.0,
) -> str:
    """Grab the frame at `timestamp` seconds, scaled and padded to 1280x720.

    Raises:
        FileNotFoundError: The source video does not exist.
        MediaToolError: ffmpeg failed or timed out.
    """
    video_path = Path(video_path)
    if not video_path.exists():
        raise FileNotFoundError(f"Source video not found: {video_path}")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    w, h = THUMBNAIL_WIDTH, THUMBNAIL_HEIGHT
    run_ffmpeg([
        "-y",
        "-i", str(video_path),
        "-ss", f"{timestamp:.3f}",
        "-vframes", "1",
        "-vf", f"scale={w}:{h}:force_original_aspect_ratio=decrease,"
               f"pad={w}:{h}:(ow-iw)/2:(oh-ih)/2",
        "-q:v", "2",
        str(output_path),
    ])
    logger.info("Thumbnail generated: %s", output_path)
    return str(output_path)
