"""Transition composition — join scene clips with cross-dissolves.

Clips are chained left to right into a single -filter_complex graph. The
transition recorded on scene i-1 decides how clip i enters the composite
(the transition belongs to the *outgoing* scene):

  - any xfade style: clip i starts `t` seconds before the composite so far
    ends, and the two are blended over those `t` seconds.
  - "none" (or a zero duration): hard cut, clip i starts when the
    composite so far ends.

The same start offsets drive the narration: every clip's audio is delayed
to the moment its picture is first blended in, then all narration streams
are mixed into one track.

Worked example, durations [5, 7, 3], fade everywhere, t = 0.5:

  clip 0 starts at 0.0                 composite ends at 5.0
  clip 1 starts at 5.0 - 0.5 = 4.5     composite ends at 4.5 + 7 = 11.5
  clip 2 starts at 11.5 - 0.5 = 11.0   composite ends at 11.0 + 3 = 14.0

14.0 = sum(d) - (N-1)*t. The start offset must be `end - t`, not `end`:
xfade consumes `t` seconds from both inputs at once, so starting at `end`
would freeze the last frame of the outgoing clip instead of overlapping.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from .common import run_ffmpeg
from .filtergraph import FilterGraphBuilder, filter_expr
from .manifest import DEFAULT_BITRATE


logger = logging.getLogger(__name__)

XFADE_TRANSITIONS = {
    "fade": "fade",
    "dissolve": "dissolve",
    "wipe-left": "wipeleft",
    "wipe-right": "wiperight",
    "wipe-up": "wipeup",
    "wipe-down": "wipedown",
}

AUDIO_BITRATE = "256k"
SILENT_SAMPLE_RATE = 44100


def xfade_name(style: str | None) -> str:
    """Map a transition style to ffmpeg's xfade name. Unknown styles fade."""
    return XFADE_TRANSITIONS.get(style or "", "fade")


def is_hard_cut(style: str | None, duration: float) -> bool:
    return style in (None, "none") or duration <= 0


@dataclass(frozen=True)
class Timeline:
    offsets: tuple[float, ...]
    total_duration: float

    def delay_ms(self, index: int) -> int:
        """Audio delay for clip `index`, in whole milliseconds."""
        return max(0, round(self.offsets[index] * 1000))


def _boundary_durations(
    n: int,
    transition_duration: float,
    transition_durations: list[float | None] | None,
) -> list[float]:
    """Per-boundary transition duration: override where given, else shared."""
    result = []
    for i in range(n - 1):
        override = None
        if transition_durations is not None and i < len(transition_durations):
            override = transition_durations[i]
        result.append(transition_duration if override is None else override)
    return result


def timeline_offsets(
    durations: list[float],
    transition_styles: list[str | None],
    transition_duration: float,
    transition_durations: list[float | None] | None = None,
) -> Timeline:
    """Compute where each clip starts in the composite, and its total length.

    Args:
        durations: Realized clip durations, in order.
        transition_styles: Outgoing style per clip (the last one is unused).
        transition_duration: Shared transition duration in seconds.
        transition_durations: Optional per-boundary overrides (None = shared).

    Returns:
        Timeline with one start offset per clip.
    """
    if not durations:
        raise ValueError("No clips to lay out")
    if len(transition_styles) < len(durations) - 1:
        raise ValueError(
            f"Need {len(durations) - 1} transition styles, got {len(transition_styles)}"
        )

    boundary = _boundary_durations(len(durations), transition_duration, transition_durations)

    offsets = [0.0]
    clip_end = durations[0]
    for i in range(1, len(durations)):
        t = boundary[i - 1]
        if is_hard_cut(transition_styles[i - 1], t):
            offset = clip_end
        else:
            offset = max(0.0, clip_end - t)
        offsets.append(offset)
        clip_end = offset + durations[i]

    return Timeline(tuple(offsets), clip_end)


def build_transition_graph(
    durations: list[float],
    transition_styles: list[str | None],
    transition_duration: float,
    width: int,
    height: int,
    audio_flags: list[bool] | None = None,
    transition_durations: list[float | None] | None = None,
) -> tuple[str, Timeline]:
    """Build the -filter_complex expression for a transitioned composite.

    Input i of the ffmpeg call must be clip i. The graph exposes two output
    pads: [vout] (video, forced to width x height with letterboxing) and
    [aout] (mixed narration, or silence spanning the composite).

    Returns:
        (filter_complex, timeline)
    """
    n = len(durations)
    if n < 2:
        raise ValueError("Transitions need at least 2 clips")
    audio_flags = list(audio_flags or [False] * n)
    if len(audio_flags) != n:
        raise ValueError(f"Expected {n} audio flags, got {len(audio_flags)}")

    timeline = timeline_offsets(
        durations, transition_styles, transition_duration, transition_durations,
    )
    boundary = _boundary_durations(n, transition_duration, transition_durations)

    graph = FilterGraphBuilder()

    # ── Video: common timebase, then one binary node per boundary ──
    # concat emits AVTB while clips keep the mp4 timebase; xfade needs
    # both inputs on the same one.
    video = [
        graph.add([f"{i}:v"], "settb=AVTB", "setpts=PTS-STARTPTS", outputs=[f"s{i}"])
        for i in range(n)
    ]
    current = video[0]
    for i in range(1, n):
        out = "vtrans" if i == n - 1 else f"v{i}"
        style = transition_styles[i - 1]
        t = boundary[i - 1]
        if is_hard_cut(style, t):
            node = filter_expr("concat", n=2, v=1, a=0)
        else:
            node = filter_expr(
                "xfade",
                transition=xfade_name(style),
                duration=f"{t:.3f}",
                offset=f"{timeline.offsets[i]:.3f}",
            )
        current = graph.add([current, video[i]], node, outputs=[out])

    graph.add(
        [current],
        f"scale={width}:{height}:force_original_aspect_ratio=decrease",
        f"pad={width}:{height}:(ow-iw)/2:(oh-ih)/2",
        outputs=["vout"],
    )

    # ── Audio: delay each narration to its clip's entry, then mix ──
    audio_labels = []
    for i, has_audio in enumerate(audio_flags):
        if not has_audio:
            continue
        chain = ["asetpts=PTS-STARTPTS"]
        if i > 0:
            delay = timeline.delay_ms(i)
            chain.append(filter_expr("adelay", f"{delay}|{delay}"))
        audio_labels.append(graph.add([f"{i}:a"], *chain, outputs=[f"a{i}"]))

    if audio_labels:
        graph.add(
            audio_labels,
            filter_expr(
                "amix", inputs=len(audio_labels), duration="longest", normalize=0,
            ),
            outputs=["aout"],
        )
    else:
        graph.add(
            [],
            filter_expr("anullsrc", r=SILENT_SAMPLE_RATE, cl="stereo"),
            filter_expr("atrim", duration=f"{timeline.total_duration:.3f}"),
            outputs=["aout"],
        )

    return graph.render(), timeline


def compose_with_transitions(
    clips: list[str],
    durations: list[float],
    transition_styles: list[str | None],
    transition_duration: float,
    output_path: str | Path,
    width: int,
    height: int,
    bitrate: str = DEFAULT_BITRATE,
    audio_flags: list[bool] | None = None,
    transition_durations: list[float | None] | None = None,
) -> Timeline:
    """Render clips into output_path with cross-dissolve transitions.

    One ffmpeg invocation; failures are not retried, the caller decides
    whether to fall back to plain concatenation.

    Args:
        clips: Scene clip paths, in timeline order.
        durations: Realized duration of each clip.
        transition_styles: Outgoing transition style of each clip.
        transition_duration: Shared transition duration in seconds.
        output_path: Final mp4 path.
        width: Output width.
        height: Output height.
        bitrate: Target video bitrate, e.g. "8M".
        audio_flags: Whether each clip carries a narration stream.
        transition_durations: Optional per-boundary duration overrides.

    Returns:
        The Timeline the composite was built from.

    Raises:
        ValueError: Fewer than 2 clips, mismatched lists, or no boundary
            with an actual transition.
        MediaToolError: ffmpeg failed or timed out.
    """
    if len(clips) != len(durations):
        raise ValueError(
            f"Got {len(clips)} clips but {len(durations)} durations"
        )
    boundary = _boundary_durations(len(clips), transition_duration, transition_durations)
    if not any(
        not is_hard_cut(style, t)
        for style, t in zip(transition_styles[: len(clips) - 1], boundary)
    ):
        raise ValueError("No boundary has a transition; use concatenation instead")

    filter_complex, timeline = build_transition_graph(
        durations, transition_styles, transition_duration, width, height,
        audio_flags=audio_flags, transition_durations=transition_durations,
    )

    inputs = []
    for clip in clips:
        inputs.extend(["-i", str(clip)])

    args = [
        "-y",
        *inputs,
        "-filter_complex", filter_complex,
        "-map", "[vout]",
        "-map", "[aout]",
        "-c:v", "libx264",
        "-b:v", bitrate,
        "-preset", "medium",
        "-profile:v", "high",
        "-level", "4.2",
        "-pix_fmt", "yuv420p",
        "-c:a", "aac",
        "-b:a", AUDIO_BITRATE,
        "-movflags", "+faststart",
        str(output_path),
    ]

    logger.info(
        "Composing %d clips with transitions, expected duration ~%.1fs",
        len(clips), timeline.total_duration,
    )
    run_ffmpeg(args)
    return timeline
