"""CLI for rendering — manifest of scenes to a finished mp4.

Usage:
    scenereel render --manifest scenes.yaml --output final.mp4

    # Override output size/bitrate with a preset, keep intermediates in ./work
    scenereel render --manifest scenes.yaml --output final.mp4 \
        --quality 1080p --work-dir work/

    # Also write a thumbnail and the chapter list
    scenereel render --manifest scenes.yaml --output final.mp4 \
        --thumbnail thumb.jpg --chapters chapters.json

    # Validate only (no rendering)
    scenereel render --manifest scenes.yaml --validate
"""

import argparse
import json
import logging
import sys
import tempfile
from pathlib import Path

from .chapters import build_chapters, chapters_to_dicts
from .common import MediaToolError
from .manifest import (
    EXPORT_QUALITIES,
    load_manifest,
    resolve_export_quality,
    validate_paths,
)
from .render import render
from .thumbnail import extract_thumbnail


def _parse_args(args=None):
    parser = argparse.ArgumentParser(
        description="Render a scene manifest into a single video.",
    )
    parser.add_argument(
        "--manifest", required=True,
        help="Path to YAML (or JSON) scene manifest",
    )
    parser.add_argument(
        "--output",
        help="Output mp4 path (required unless --validate)",
    )
    parser.add_argument(
        "--work-dir", default=None,
        help="Directory for intermediate scene clips (default: a temp dir)",
    )
    parser.add_argument(
        "--quality", choices=sorted(EXPORT_QUALITIES), default=None,
        help="Export preset overriding the manifest's size and the default bitrate",
    )
    parser.add_argument(
        "--thumbnail", default=None,
        help="Also extract a JPEG thumbnail to this path",
    )
    parser.add_argument(
        "--thumbnail-at", type=float, default=1.0,
        help="Thumbnail timestamp in seconds (default: 1.0)",
    )
    parser.add_argument(
        "--chapters", default=None,
        help="Also write chapter marks (JSON) to this path",
    )
    parser.add_argument(
        "--validate", action="store_true",
        help="Validate manifest only — check paths, don't render",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log every ffmpeg command",
    )
    return parser, parser.parse_args(args)


def main(args=None):
    parser, parsed = _parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    manifest = load_manifest(parsed.manifest)

    if parsed.validate:
        validate_paths(manifest)
        print(f"Manifest valid: {len(manifest.scenes)} scenes "
              f"at {manifest.width}x{manifest.height}, {manifest.fps}fps")
        for i, s in enumerate(manifest.scenes):
            print(f"  {i}: {s.id}  {s.image_file}  "
                  f"motion={s.motion or 'zoom-in'} -> {s.transition_style}")
        print("All paths verified.")
        return

    if not parsed.output:
        parser.error("--output is required (unless using --validate)")

    quality = resolve_export_quality(parsed.quality)

    print(f"Rendering {len(manifest.scenes)} scenes to {parsed.output}")
    if parsed.work_dir:
        result = render(manifest, parsed.output, parsed.work_dir, quality)
    else:
        with tempfile.TemporaryDirectory(prefix="scenereel-") as work_dir:
            result = render(manifest, parsed.output, work_dir, quality)

    for err in result.scene_errors:
        print(f"  SKIPPED  {err}")

    if not result.success:
        print(f"\nRender failed: {result.error}", file=sys.stderr)
        sys.exit(1)

    print(f"\nDone: {result.output_path}")

    if parsed.thumbnail:
        try:
            extract_thumbnail(result.output_path, parsed.thumbnail, parsed.thumbnail_at)
        except MediaToolError as e:
            print(f"Thumbnail failed: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"Thumbnail: {parsed.thumbnail}")

    if parsed.chapters:
        chapters = build_chapters(list(result.rendered_scenes), list(result.scene_durations))
        Path(parsed.chapters).parent.mkdir(parents=True, exist_ok=True)
        with open(parsed.chapters, "w") as f:
            json.dump(chapters_to_dicts(chapters), f, indent=2)
        print(f"Chapters: {parsed.chapters} ({len(chapters)} entries)")


if __name__ == "__main__":
    main()
