"""CLI for concatenation — join finished videos with hard cuts.

Usage:
    scenereel concat part1.mp4 part2.mp4 --output joined.mp4

    # Re-scale and cap the bitrate while joining
    scenereel concat part1.mp4 part2.mp4 --output joined.mp4 \
        --size 1920x1080 --bitrate 8M
"""

import argparse
from pathlib import Path

from .concat import concatenate


def _parse_size(value: str) -> tuple[int, int]:
    try:
        w, h = value.lower().split("x")
        return int(w), int(h)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Size must look like 1280x720, got {value!r}"
        ) from None


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Concatenate videos end to end (re-encoded, no transitions).",
    )
    parser.add_argument(
        "videos", nargs="+",
        help="Input videos, in order",
    )
    parser.add_argument(
        "--output", required=True,
        help="Output mp4 path",
    )
    parser.add_argument(
        "--size", type=_parse_size, default=None,
        help="Scale output to WIDTHxHEIGHT",
    )
    parser.add_argument(
        "--bitrate", default=None,
        help="Target video bitrate, e.g. 8M (default: constant quality)",
    )
    parsed = parser.parse_args(args)

    missing = [v for v in parsed.videos if not Path(v).exists()]
    if missing:
        parser.error(f"Input video(s) not found: {', '.join(missing)}")

    width, height = parsed.size if parsed.size else (None, None)

    print(f"Concatenating {len(parsed.videos)} videos into {parsed.output}")
    concatenate(parsed.videos, parsed.output, width, height, parsed.bitrate)
    print(f"Done: {parsed.output}")


if __name__ == "__main__":
    main()
