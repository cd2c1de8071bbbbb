"""CLI for thumbnails — grab one letterboxed frame from a video.

Usage:
    scenereel thumbnail final.mp4 --output thumb.jpg
    scenereel thumbnail final.mp4 --output thumb.jpg --at 12.5
"""

import argparse

from .thumbnail import extract_thumbnail


def _parse_args(args=None):
    parser = argparse.ArgumentParser(
        description="Extract a 1280x720 JPEG thumbnail from a video.",
    )
    parser.add_argument(
        "video",
        help="Path to the source video",
    )
    parser.add_argument(
        "--output", required=True,
        help="Output JPEG path",
    )
    parser.add_argument(
        "--at", type=float, default=1.0,
        help="Timestamp in seconds (default: 1.0)",
    )
    return parser.parse_args(args)


def main(args=None):
    parsed = _parse_args(args)

    print(f"Extracting frame at {parsed.at:.1f}s from {parsed.video}")
    extract_thumbnail(parsed.video, parsed.output, parsed.at)
    print(f"Done: {parsed.output}")


if __name__ == "__main__":
    main()
