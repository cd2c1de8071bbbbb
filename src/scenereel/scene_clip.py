"""Per-scene clip rendering — still image + motion + optional narration.

Each scene becomes one mp4 in the working directory:

  scene-<index>-video.mp4       silent Ken Burns clip
  scene-<index>-with-audio.mp4  the same clip with narration muxed in

When narration is present the silent clip is replaced by the muxed one.
If muxing fails the silent clip is kept: a scene without sound is better
than a missing scene.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from .common import MediaToolError, run_ffmpeg
from .manifest import DEFAULT_FPS, Scene
from .motion import motion_filter
from .probe import probe_duration


logger = logging.getLogger(__name__)

# Added to the probed narration length so re-encoding never cuts the last word.
AUDIO_TAIL_PADDING = 0.1

# Assumed narration length when ffprobe cannot read the audio file.
FALLBACK_AUDIO_DURATION = 5.0

AUDIO_BITRATE = "256k"


@dataclass(frozen=True)
class SceneRenderResult:
    success: bool
    clip_path: str | None = None
    duration: float = 0.0
    has_audio: bool = False
    error: str | None = None


def scene_video_path(work_dir: str | Path, index: int) -> Path:
    return Path(work_dir) / f"scene-{index}-video.mp4"


def scene_audio_path(work_dir: str | Path, index: int) -> Path:
    return Path(work_dir) / f"scene-{index}-with-audio.mp4"


def realized_duration(scene: Scene, audio_duration: float | None = None) -> float:
    """Clip length for a scene: nominal, stretched to cover its narration."""
    duration = scene.nominal_duration
    if audio_duration is not None:
        duration = max(duration, audio_duration + AUDIO_TAIL_PADDING)
    return duration


def _narration_duration(audio_file: Path, index: int) -> float:
    try:
        return probe_duration(audio_file)
    except MediaToolError as e:
        logger.warning(
            "Scene %d: could not probe %s, assuming %.1fs of narration: %s",
            index, audio_file, FALLBACK_AUDIO_DURATION, e,
        )
        return FALLBACK_AUDIO_DURATION


def _video_args(image: Path, vf: str, duration: float, output: Path) -> list[str]:
    return [
        "-y",
        "-loop", "1",
        "-i", str(image),
        "-vf", vf,
        "-t", f"{duration:.3f}",
        "-pix_fmt", "yuv420p",
        "-c:v", "libx264",
        "-preset", "medium",
        "-crf", "18",
        "-profile:v", "high",
        "-level", "4.2",
        str(output),
    ]


def _mux_args(video: Path, audio: Path, output: Path) -> list[str]:
    return [
        "-y",
        "-i", str(video),
        "-i", str(audio),
        "-c:v", "copy",
        "-c:a", "aac",
        "-b:a", AUDIO_BITRATE,
        "-map", "0:v:0",
        "-map", "1:a:0",
        "-shortest",
        str(output),
    ]


def build_scene_clip(
    scene: Scene,
    work_dir: str | Path,
    index: int,
    width: int,
    height: int,
    fps: int = DEFAULT_FPS,
) -> SceneRenderResult:
    """Render one scene to an mp4 clip inside work_dir.

    Steps:
      1. Fail fast (no ffmpeg call) if the image is missing.
      2. Realized duration: nominal duration, or the probed narration
         length + 0.1s when that is longer.
      3. Render the still image through the motion filter.
      4. Mux narration onto the clip, keeping the silent clip on failure.

    Returns:
        SceneRenderResult. Downstream timing must use its `duration`,
        not the scene's nominal duration.
    """
    image = Path(scene.image_file) if scene.image_file else None
    if image is None or not image.exists():
        logger.error("Image file not found for scene %s: %s", scene.id, scene.image_file)
        return SceneRenderResult(
            success=False, error=f"Image file not found for scene {scene.id}",
        )

    audio = Path(scene.audio_file) if scene.audio_file else None
    if audio is not None and not audio.exists():
        logger.warning("Scene %d: narration %s not found, rendering silent", index, audio)
        audio = None

    duration = realized_duration(scene)
    if audio is not None:
        audio_duration = _narration_duration(audio, index)
        duration = realized_duration(scene, audio_duration)
        logger.info(
            "Scene %d: using audio duration %.2fs (+ %.1fs buffer)",
            index, audio_duration, AUDIO_TAIL_PADDING,
        )

    video_path = scene_video_path(work_dir, index)
    vf = motion_filter(scene.motion, duration, width, height, fps)
    try:
        run_ffmpeg(_video_args(image, vf, duration, video_path))
    except MediaToolError as e:
        video_path.unlink(missing_ok=True)
        return SceneRenderResult(success=False, duration=duration, error=str(e))

    if audio is None:
        return SceneRenderResult(success=True, clip_path=str(video_path), duration=duration)

    muxed_path = scene_audio_path(work_dir, index)
    try:
        run_ffmpeg(_mux_args(video_path, audio, muxed_path))
    except MediaToolError as e:
        logger.warning("Scene %d: audio mux failed, keeping video-only clip: %s", index, e)
        muxed_path.unlink(missing_ok=True)
        return SceneRenderResult(success=True, clip_path=str(video_path), duration=duration)

    video_path.unlink(missing_ok=True)
    return SceneRenderResult(
        success=True, clip_path=str(muxed_path), duration=duration, has_audio=True,
    )
