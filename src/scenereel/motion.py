"""Ken Burns motion filters for still images.

Every variant upscales the image first (zoompan on a small source image
jitters visibly) and then runs zoompan for `ceil(duration * fps)` frames:

  - zoom-in:   zoom grows from 1.0 toward 1.25, centered.
  - zoom-out:  zoom starts at 1.25 and shrinks toward 1.0, centered.
               zoompan's zoom starts at 1, so the expression resets to the
               maximum on the first frame and decreases from there.
  - pan-*:     zoom fixed at 1.25, the crop window slides linearly across
               the spare width (left/right) or height (up/down).

Unknown or missing motion renders as zoom-in.
"""

import math

ZOOM_START = 1.0
ZOOM_END = 1.25

# Pre-zoompan upscale width.
UPSCALE_WIDTH = 8000

MOTIONS = ("zoom-in", "zoom-out", "pan-left", "pan-right", "pan-up", "pan-down")

_CENTER_X = "iw/2-(iw/zoom/2)"
_CENTER_Y = "ih/2-(ih/zoom/2)"
_MID_X = "(iw-iw/zoom)/2"
_MID_Y = "(ih-ih/zoom)/2"


def frame_count(duration: float, fps: int) -> int:
    return max(1, math.ceil(duration * fps))


def _pan(axis: str, forward: bool, last_frame: int) -> str:
    """Crop offset that slides across the spare extent of `axis` ("w" or "h")."""
    spare = f"(i{axis}-i{axis}/zoom)"
    progress = f"min(1,on/{last_frame})"
    if not forward:
        progress = f"(1-{progress})"
    return f"min({spare},max(0,{spare}*{progress}))"


def zoompan_params(motion: str | None, duration: float, fps: int) -> tuple[str, str, str]:
    """Return the (z, x, y) zoompan expressions for a motion variant."""
    frames = frame_count(duration, fps)
    increment = (ZOOM_END - ZOOM_START) / frames
    last_frame = max(1, frames - 1)

    if motion == "zoom-out":
        z = (
            f"if(lte(zoom,{ZOOM_START}),{ZOOM_END},"
            f"max({ZOOM_START},zoom-{increment}))"
        )
        return z, _CENTER_X, _CENTER_Y
    if motion == "pan-left":
        return f"{ZOOM_END}", _pan("w", False, last_frame), _MID_Y
    if motion == "pan-right":
        return f"{ZOOM_END}", _pan("w", True, last_frame), _MID_Y
    if motion == "pan-up":
        return f"{ZOOM_END}", _MID_X, _pan("h", False, last_frame)
    if motion == "pan-down":
        return f"{ZOOM_END}", _MID_X, _pan("h", True, last_frame)

    # zoom-in, and anything unrecognized.
    return f"min(zoom+{increment},{ZOOM_END})", _CENTER_X, _CENTER_Y


def motion_filter(
    motion: str | None,
    duration: float,
    width: int,
    height: int,
    fps: int = 30,
) -> str:
    """Build the -vf expression that animates a still image.

    Args:
        motion: One of MOTIONS; anything else is treated as zoom-in.
        duration: Realized clip duration in seconds.
        width: Output width in pixels.
        height: Output height in pixels.
        fps: Output frame rate.
    """
    z, x, y = zoompan_params(motion, duration, fps)
    frames = frame_count(duration, fps)
    return (
        f"scale={UPSCALE_WIDTH}:-1,"
        f"zoompan=z='{z}':x='{x}':y='{y}':d={frames}:s={width}x{height}:fps={fps}"
    )
