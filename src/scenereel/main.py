"""Subcommand dispatcher for scenereel.

Usage:
    scenereel render     --manifest ... --output ...
    scenereel thumbnail  final.mp4 --output thumb.jpg
    scenereel concat     a.mp4 b.mp4 --output joined.mp4
"""

import argparse
import sys


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="scenereel",
        description="Render narrated image scenes into a video, with thumbnails and joins.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands. Each delegates to its own module's main().
    subparsers.add_parser("render", help="Render a scene manifest to mp4")
    subparsers.add_parser("thumbnail", help="Extract a thumbnail frame from a video")
    subparsers.add_parser("concat", help="Join videos end to end")

    # Parse only the subcommand name, pass the rest to the subcommand's parser.
    parsed, remaining = parser.parse_known_args(args)

    if parsed.command is None:
        parser.print_help()
        sys.exit(1)

    if parsed.command == "render":
        from .render_cli import main as render_main
        render_main(remaining)
    elif parsed.command == "thumbnail":
        from .thumbnail_cli import main as thumbnail_main
        thumbnail_main(remaining)
    elif parsed.command == "concat":
        from .concat_cli import main as concat_main
        concat_main(remaining)


if __name__ == "__main__":
    main()
