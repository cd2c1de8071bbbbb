"""Chapter marks from scene timing. Pure: no I/O, no ffmpeg."""

from dataclasses import dataclass

from .manifest import Scene


@dataclass(frozen=True)
class Chapter:
    title: str
    start_time: float
    end_time: float


def build_chapters(scenes: list[Scene], durations: list[float]) -> list[Chapter]:
    """One chapter per scene, back to back on a running clock.

    `durations` must be the realized durations from rendering (see
    RenderResult.scene_durations); nominal durations drift from the video
    whenever narration stretched a scene. A missing or zero entry falls
    back to the scene's nominal duration.
    """
    chapters = []
    current = 0.0
    for i, scene in enumerate(scenes):
        duration = durations[i] if i < len(durations) else None
        duration = duration or scene.nominal_duration
        chapters.append(Chapter(f"Scene {i + 1}", current, current + duration))
        current += duration
    return chapters


def chapters_to_dicts(chapters: list[Chapter]) -> list[dict]:
    """Plain {title, startTime, endTime} records, ready for JSON."""
    return [
        {"title": c.title, "startTime": c.start_time, "endTime": c.end_time}
        for c in chapters
    ]
