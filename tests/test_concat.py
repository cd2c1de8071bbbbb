"""Tests for hard-cut concatenation."""

from pathlib import Path

import pytest

from scenereel.common import MediaToolError
from scenereel.concat import (
    CONCAT_LIST_NAME,
    concat_total_duration,
    concatenate,
    write_concat_list,
)


class TestConcatTotalDuration:
    def test_no_overlap_subtracted(self):
        assert concat_total_duration([5, 7, 3]) == 15.0

    def test_single(self):
        assert concat_total_duration([2.5]) == 2.5


class TestWriteConcatList:
    def test_one_line_per_clip(self, tmp_path):
        a, b = tmp_path / "a.mp4", tmp_path / "b.mp4"
        list_path = write_concat_list([str(a), str(b)], tmp_path / "list.txt")
        assert list_path.read_text().splitlines() == [
            f"file '{a.resolve()}'",
            f"file '{b.resolve()}'",
        ]

    def test_quotes_apostrophes(self, tmp_path):
        clip = tmp_path / "it's.mp4"
        list_path = write_concat_list([str(clip)], tmp_path / "list.txt")
        assert "it'\\''s.mp4" in list_path.read_text()


class TestConcatenate:
    def test_arguments_with_scale_and_bitrate(self, fake_tools, tmp_path):
        out = tmp_path / "out" / "final.mp4"
        concatenate(["/w/a.mp4", "/w/b.mp4"], out, 1280, 720, "4M")
        cmd = fake_tools.ffmpeg_calls[0]
        assert cmd[1:8] == ["-y", "-f", "concat", "-safe", "0", "-i",
                            str(out.parent / CONCAT_LIST_NAME)]
        assert cmd[cmd.index("-b:v") + 1] == "4M"
        assert cmd[cmd.index("-vf") + 1] == "scale=1280:720"
        assert cmd[cmd.index("-c:v") + 1] == "libx264"
        assert "-crf" not in cmd
        assert cmd[-1] == str(out)

    def test_constant_quality_without_bitrate(self, fake_tools, tmp_path):
        concatenate(["/w/a.mp4"], tmp_path / "final.mp4")
        cmd = fake_tools.ffmpeg_calls[0]
        assert cmd[cmd.index("-crf") + 1] == "18"
        assert "-b:v" not in cmd
        assert "-vf" not in cmd

    def test_list_file_removed_on_success(self, fake_tools, tmp_path):
        concatenate(["/w/a.mp4"], tmp_path / "final.mp4", list_dir=tmp_path)
        assert not (tmp_path / CONCAT_LIST_NAME).exists()

    def test_list_file_removed_on_failure(self, fake_tools, tmp_path):
        fake_tools.fail_when = lambda cmd: True
        with pytest.raises(MediaToolError):
            concatenate(["/w/a.mp4"], tmp_path / "final.mp4", list_dir=tmp_path)
        assert not (tmp_path / CONCAT_LIST_NAME).exists()

    def test_list_written_before_ffmpeg_runs(self, fake_tools, tmp_path):
        seen = []
        fake_tools.fail_when = lambda cmd: seen.append(
            Path(cmd[cmd.index("-i") + 1]).read_text()
        )
        concatenate(["/w/a.mp4", "/w/b.mp4"], tmp_path / "final.mp4")
        assert seen == ["file '/w/a.mp4'\nfile '/w/b.mp4'\n"]

    def test_empty_list_rejected(self, fake_tools, tmp_path):
        with pytest.raises(ValueError, match="No videos"):
            concatenate([], tmp_path / "final.mp4")
        assert fake_tools.calls == []
