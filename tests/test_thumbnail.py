"""Tests for thumbnail extraction.

Argument checks use fake_tools; one test extracts from a real lavfi video.
"""

import subprocess

import imageio_ffmpeg
import pytest
from PIL import Image

from scenereel.common import MediaToolError
from scenereel.thumbnail import extract_thumbnail

_FFMPEG = imageio_ffmpeg.get_ffmpeg_exe()


@pytest.fixture
def short_video(tmp_path):
    """A 2-second 320x240 test video (4:3, so the thumbnail is pillarboxed)."""
    out = tmp_path / "video.mp4"
    subprocess.run(
        [
            _FFMPEG, "-y",
            "-f", "lavfi", "-i", "color=c=green:s=320x240:d=2:r=10",
            "-c:v", "libx264", "-crf", "28", "-pix_fmt", "yuv420p",
            str(out),
        ],
        check=True,
        capture_output=True,
    )
    return out


class TestExtractThumbnail:
    def test_missing_source(self, fake_tools, tmp_path):
        with pytest.raises(FileNotFoundError, match="Source video not found"):
            extract_thumbnail(tmp_path / "nope.mp4", tmp_path / "thumb.jpg")
        assert fake_tools.calls == []

    def test_argument_shape(self, fake_tools, tmp_path):
        video = tmp_path / "video.mp4"
        video.write_bytes(b"mp4")
        out = tmp_path / "thumbs" / "thumb.jpg"
        assert extract_thumbnail(video, out, timestamp=2.5) == str(out)
        assert fake_tools.ffmpeg_calls[0] == [
            "ffmpeg", "-y",
            "-i", str(video),
            "-ss", "2.500",
            "-vframes", "1",
            "-vf", "scale=1280:720:force_original_aspect_ratio=decrease,"
                   "pad=1280:720:(ow-iw)/2:(oh-ih)/2",
            "-q:v", "2",
            str(out),
        ]

    def test_default_timestamp_is_one_second(self, fake_tools, tmp_path):
        video = tmp_path / "video.mp4"
        video.write_bytes(b"mp4")
        extract_thumbnail(video, tmp_path / "thumb.jpg")
        cmd = fake_tools.ffmpeg_calls[0]
        assert cmd[cmd.index("-ss") + 1] == "1.000"

    def test_failure_raises(self, fake_tools, tmp_path):
        video = tmp_path / "video.mp4"
        video.write_bytes(b"mp4")
        fake_tools.fail_when = lambda cmd: True
        with pytest.raises(MediaToolError):
            extract_thumbnail(video, tmp_path / "thumb.jpg")

    def test_real_frame_is_letterboxed_720p(self, short_video, tmp_path):
        out = tmp_path / "thumb.jpg"
        extract_thumbnail(short_video, out)
        with Image.open(out) as img:
            assert img.size == (1280, 720)
            assert img.format == "JPEG"
            # 4:3 source is centered with black bars left and right.
            r, g, b = img.convert("RGB").getpixel((10, 360))
            assert max(r, g, b) < 30
