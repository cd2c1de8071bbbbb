"""Manifest loader and render-job value types.

A manifest describes one render: output geometry, frame rate, the shared
transition duration, and the ordered scenes. Manifests are YAML (JSON
manifests load too, JSON being a subset of YAML).

Manifest schema:
  video:
    fps: 30
    width: 1280
    height: 720
    transition_duration: 0.5    # shared default, per-scene override allowed
  paths:
    assets: "/data/project-42"
  scenes:
    - id: intro
      image: "${assets}/intro.png"
      audio: "${assets}/intro.mp3"   # optional narration
      duration: 5                    # nominal seconds
      motion: zoom-in                # Ken Burns variant
      transition: fade               # how this scene hands off to the next
"""

from dataclasses import dataclass
from pathlib import Path

import yaml

from .common import resolve_path_vars


VALID_MOTIONS = {"zoom-in", "zoom-out", "pan-left", "pan-right", "pan-up", "pan-down"}

VALID_TRANSITIONS = {
    "none", "fade", "dissolve",
    "wipe-left", "wipe-right", "wipe-up", "wipe-down",
}

DEFAULT_FPS = 30
DEFAULT_WIDTH = 1280
DEFAULT_HEIGHT = 720
DEFAULT_TRANSITION_DURATION = 0.5
DEFAULT_SCENE_DURATION = 5.0
DEFAULT_BITRATE = "8M"


@dataclass(frozen=True)
class Scene:
    id: str
    image_file: str | None
    audio_file: str | None = None
    duration: float | None = None
    motion: str | None = None
    transition: str | None = None
    transition_duration: float | None = None
    text: str = ""

    @property
    def nominal_duration(self) -> float:
        """Nominal duration, falling back to 5s when absent or zero."""
        return self.duration or DEFAULT_SCENE_DURATION

    @property
    def transition_style(self) -> str:
        return self.transition or "none"


@dataclass(frozen=True)
class Manifest:
    scenes: tuple[Scene, ...]
    fps: int = DEFAULT_FPS
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    transition_duration: float = DEFAULT_TRANSITION_DURATION

    def transition_duration_for(self, scene: Scene) -> float:
        """Outgoing transition duration for a scene (its own, else the shared one)."""
        if scene.transition_duration is not None:
            return scene.transition_duration
        return self.transition_duration


@dataclass(frozen=True)
class ExportQuality:
    width: int
    height: int
    bitrate: str = DEFAULT_BITRATE


EXPORT_QUALITIES = {
    "720p": ExportQuality(1280, 720, "4M"),
    "1080p": ExportQuality(1920, 1080, "8M"),
    "4k": ExportQuality(3840, 2160, "20M"),
}


def resolve_export_quality(name: str | None) -> ExportQuality | None:
    """Look up a named export preset. None passes through."""
    if name is None:
        return None
    if name not in EXPORT_QUALITIES:
        raise ValueError(
            f"Unknown export quality '{name}'. Valid: {sorted(EXPORT_QUALITIES)}"
        )
    return EXPORT_QUALITIES[name]


# ── Manifest loading ──────────────────────────────────────────────


def _positive_number(value, what: str, allow_zero: bool = False) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{what} must be a number, got {value!r}")
    if value < 0 or (value == 0 and not allow_zero):
        bound = ">= 0" if allow_zero else "> 0"
        raise ValueError(f"{what} must be {bound}, got {value!r}")
    return value


def _parse_scene(raw: dict, index: int, paths: dict) -> Scene:
    prefix = f"Scene {index}"
    if not isinstance(raw, dict):
        raise ValueError(f"{prefix}: expected a mapping, got {type(raw).__name__}")
    if "id" not in raw:
        raise ValueError(f"{prefix}: missing required field 'id'")
    if "image" not in raw:
        raise ValueError(f"{prefix}: missing required field 'image'")

    scene_id = str(raw["id"])
    prefix = f"Scene {index} ({scene_id})"

    image = resolve_path_vars(str(raw["image"]), paths)
    audio = raw.get("audio")
    if audio is not None:
        audio = resolve_path_vars(str(audio), paths)

    duration = raw.get("duration")
    if duration is not None:
        duration = _positive_number(duration, f"{prefix}: duration", allow_zero=True)

    # Unknown motion is not an error: it renders as zoom-in.
    motion = raw.get("motion")
    if motion is not None:
        motion = str(motion)

    transition = raw.get("transition")
    if transition is not None and transition not in VALID_TRANSITIONS:
        raise ValueError(
            f"{prefix}: invalid transition '{transition}'. "
            f"Valid: {sorted(VALID_TRANSITIONS)}"
        )

    transition_duration = raw.get("transition_duration")
    if transition_duration is not None:
        transition_duration = _positive_number(
            transition_duration, f"{prefix}: transition_duration", allow_zero=True,
        )

    return Scene(
        id=scene_id,
        image_file=image,
        audio_file=audio,
        duration=duration,
        motion=motion,
        transition=transition,
        transition_duration=transition_duration,
        text=str(raw.get("text", "")),
    )


def load_manifest(manifest_path: str | Path) -> Manifest:
    """Load, validate, and normalize a render manifest.

    Processing pipeline:
      1. Parse YAML.
      2. Validate video settings (fps, width, height, transition_duration).
      3. Resolve ${path} variables in scene image/audio paths.
      4. Validate per-scene fields and reject duplicate scene ids.

    Args:
        manifest_path: Path to the YAML (or JSON) manifest.

    Returns:
        Manifest with resolved paths.

    Raises:
        ValueError: Missing/invalid fields, or no scenes at all.
    """
    with open(manifest_path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ValueError("Manifest: expected a mapping at the top level")

    video = raw.get("video") or {}
    fps = video.get("fps", DEFAULT_FPS)
    if isinstance(fps, bool) or not isinstance(fps, int) or fps <= 0:
        raise ValueError(f"Manifest: video.fps must be a positive integer, got {fps!r}")
    width = video.get("width", DEFAULT_WIDTH)
    height = video.get("height", DEFAULT_HEIGHT)
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValueError(
                f"Manifest: video.{name} must be a positive integer, got {value!r}"
            )
    transition_duration = _positive_number(
        video.get("transition_duration", DEFAULT_TRANSITION_DURATION),
        "Manifest: video.transition_duration",
        allow_zero=True,
    )

    paths = raw.get("paths", {})

    raw_scenes = raw.get("scenes") or []
    if not raw_scenes:
        raise ValueError("Manifest: at least one scene is required")

    scenes = []
    seen_ids = {}
    for i, raw_scene in enumerate(raw_scenes):
        scene = _parse_scene(raw_scene, i, paths)
        if scene.id in seen_ids:
            raise ValueError(
                f"Scene {i}: duplicate id '{scene.id}' "
                f"(also used by scene {seen_ids[scene.id]})"
            )
        seen_ids[scene.id] = i
        scenes.append(scene)

    return Manifest(
        scenes=tuple(scenes),
        fps=fps,
        width=width,
        height=height,
        transition_duration=float(transition_duration),
    )


def validate_paths(manifest: Manifest) -> None:
    """Check that every scene image and narration file exists on disk.

    Raises:
        FileNotFoundError: Lists all missing files.
    """
    missing = []
    for scene in manifest.scenes:
        for p in (scene.image_file, scene.audio_file):
            if p and not Path(p).exists():
                missing.append(p)

    if missing:
        msg = f"Missing {len(missing)} file(s):\n"
        for p in missing:
            msg += f"  - {p}\n"
        raise FileNotFoundError(msg)
