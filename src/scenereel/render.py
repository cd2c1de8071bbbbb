"""Render orchestration — manifest in, finished mp4 out.

Pipeline:
  1. Build every scene clip, one at a time, in manifest order. A failed
     scene is dropped and reported; the render goes on without it.
  2. Compose the clips: transitions when at least one boundary asks for
     one, plain concatenation otherwise. A failed transition render falls
     back to concatenation.
  3. Delete the intermediate scene clips, whatever happened.

Only a render with no usable clips, or a failed final concatenation, is
reported as a failure.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .common import MediaToolError
from .concat import CONCAT_LIST_NAME, concatenate
from .manifest import DEFAULT_BITRATE, ExportQuality, Manifest, Scene
from .scene_clip import build_scene_clip
from .transitions import compose_with_transitions, is_hard_cut


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderResult:
    success: bool
    output_path: str | None = None
    error: str | None = None
    scene_durations: tuple[float, ...] = ()
    rendered_scenes: tuple[Scene, ...] = ()
    scene_errors: tuple[str, ...] = field(default_factory=tuple)


def _remove_intermediates(paths: list[str], work_dir: Path) -> None:
    for p in [*paths, str(work_dir / CONCAT_LIST_NAME)]:
        try:
            Path(p).unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove intermediate file %s: %s", p, e)


def render(
    manifest: Manifest,
    output_path: str | Path,
    work_dir: str | Path,
    export_quality: ExportQuality | None = None,
) -> RenderResult:
    """Render a manifest into a single mp4.

    Args:
        manifest: The render job. Read-only.
        output_path: Final mp4 path; its directory is created if needed.
        work_dir: Caller-owned directory for intermediate clips. Renders
            running at the same time must use different directories.
        export_quality: Optional size/bitrate override.

    Returns:
        RenderResult. On success it also carries the realized duration of
        every scene that made it into the video, for chapter building.
    """
    scenes = manifest.scenes
    if not scenes:
        return RenderResult(success=False, error="No scenes in manifest")

    if export_quality is not None:
        width, height = export_quality.width, export_quality.height
        bitrate = export_quality.bitrate or DEFAULT_BITRATE
    else:
        width, height, bitrate = manifest.width, manifest.height, DEFAULT_BITRATE

    work_dir = Path(work_dir)
    work_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Rendering video with %d scenes at %dx%d", len(scenes), width, height)

    clips: list[str] = []
    durations: list[float] = []
    audio_flags: list[bool] = []
    rendered: list[Scene] = []
    failures: list[str] = []

    try:
        for i, scene in enumerate(scenes):
            logger.info("Processing scene %d/%d: %s", i + 1, len(scenes), scene.id)
            result = build_scene_clip(scene, work_dir, i, width, height, manifest.fps)
            if not result.success or not result.clip_path:
                message = f"Scene {i + 1} ({scene.id}): {result.error}"
                logger.warning("Failed to create scene %d: %s", i + 1, result.error)
                failures.append(message)
                continue
            clips.append(result.clip_path)
            durations.append(result.duration)
            audio_flags.append(result.has_audio)
            rendered.append(scene)

        if not clips:
            error = "No scene videos were created. Failed scenes: " + "; ".join(failures)
            logger.error(error)
            return RenderResult(success=False, error=error, scene_errors=tuple(failures))

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        styles = [s.transition_style for s in rendered]
        boundary_durations = [manifest.transition_duration_for(s) for s in rendered[:-1]]
        wants_transitions = len(clips) > 1 and any(
            not is_hard_cut(style, t) for style, t in zip(styles, boundary_durations)
        )

        composed = False
        if wants_transitions:
            try:
                compose_with_transitions(
                    clips, durations, styles, manifest.transition_duration,
                    output_path, width, height, bitrate,
                    audio_flags=audio_flags,
                    transition_durations=boundary_durations,
                )
                composed = True
            except MediaToolError as e:
                logger.warning(
                    "Transition rendering failed, falling back to simple concat: %s", e,
                )

        if not composed:
            try:
                concatenate(
                    clips, output_path, width, height, bitrate, list_dir=work_dir,
                )
            except MediaToolError as e:
                logger.error("Concatenation failed: %s", e)
                return RenderResult(
                    success=False, error=str(e), scene_errors=tuple(failures),
                )
    finally:
        _remove_intermediates(clips, work_dir)

    logger.info("Video rendered successfully: %s", output_path)
    return RenderResult(
        success=True,
        output_path=str(output_path),
        scene_durations=tuple(durations),
        rendered_scenes=tuple(rendered),
        scene_errors=tuple(failures),
    )
