"""Shared test fixtures for scenereel tests.

Two kinds of fixtures:
  - real media (still images, narration tones) made with Pillow and the
    imageio-ffmpeg binary, for tests that run ffmpeg for real;
  - `fake_tools`, which replaces subprocess.run so ffmpeg/ffprobe calls
    are recorded and answered without running anything.
"""

import shutil
import subprocess
from pathlib import Path
from unittest.mock import patch

import imageio_ffmpeg
import numpy as np
import pytest
from PIL import Image

_FFMPEG = imageio_ffmpeg.get_ffmpeg_exe()

requires_ffprobe = pytest.mark.skipif(
    shutil.which("ffprobe") is None,
    reason="ffprobe not on PATH (imageio-ffmpeg does not bundle it)",
)


def make_image(path, size=(64, 48), color=(200, 80, 40)):
    """Write a small gradient PNG so motion is visible in rendered frames."""
    w, h = size
    ramp = np.linspace(0, 255, w, dtype=np.uint8)
    frame = np.zeros((h, w, 3), dtype=np.uint8)
    frame[..., 0] = color[0]
    frame[..., 1] = ramp
    frame[..., 2] = color[2]
    Image.fromarray(frame).save(path)
    return Path(path)


@pytest.fixture
def still_image(tmp_path):
    return make_image(tmp_path / "still.png")


@pytest.fixture
def narration(tmp_path):
    """A 1.5-second 440Hz tone as WAV."""
    out = tmp_path / "narration.wav"
    subprocess.run(
        [
            _FFMPEG, "-y",
            "-f", "lavfi", "-i", "sine=frequency=440:duration=1.5",
            "-c:a", "pcm_s16le",
            str(out),
        ],
        check=True,
        capture_output=True,
    )
    return out


class FakeTools:
    """Stands in for subprocess.run inside scenereel.common.

    ffmpeg calls "succeed" by creating their output file (the last
    argument); ffprobe calls print `probe_output`. `fail_when(cmd)` makes
    matching calls exit with code 1.
    """

    def __init__(self):
        self.calls: list[list[str]] = []
        self.probe_output = "3.0\n"
        self.fail_when = lambda cmd: False
        self.stderr = "Error: simulated failure"

    def __call__(self, cmd, **kwargs):
        cmd = list(cmd)
        self.calls.append(cmd)
        if self.fail_when(cmd):
            return subprocess.CompletedProcess(cmd, 1, "", self.stderr)
        if cmd[0] == "ffprobe":
            return subprocess.CompletedProcess(cmd, 0, self.probe_output, "")
        Path(cmd[-1]).write_bytes(b"fake media")
        return subprocess.CompletedProcess(cmd, 0, "", "")

    @property
    def ffmpeg_calls(self):
        return [c for c in self.calls if c[0] == "ffmpeg"]

    @property
    def ffprobe_calls(self):
        return [c for c in self.calls if c[0] == "ffprobe"]


@pytest.fixture
def fake_tools(monkeypatch):
    monkeypatch.setenv("SCENEREEL_FFMPEG", "ffmpeg")
    monkeypatch.setenv("SCENEREEL_FFPROBE", "ffprobe")
    tools = FakeTools()
    with patch("scenereel.common.subprocess.run", side_effect=tools):
        yield tools
