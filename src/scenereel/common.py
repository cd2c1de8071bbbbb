"""scenereel.common — shared utilities for scene rendering.

Contains: path variable resolution, external tool location, and the
subprocess runner every ffmpeg/ffprobe call goes through.
"""

import logging
import os
import re
import subprocess

import imageio_ffmpeg


logger = logging.getLogger(__name__)


# ── Tool settings ──────────────────────────────────────────────────
# imageio-ffmpeg bundles ffmpeg but NOT ffprobe, so ffprobe comes from PATH
# unless overridden.

DEFAULT_FFMPEG_TIMEOUT = 3600.0
DEFAULT_FFPROBE_TIMEOUT = 30.0

# Error output is truncated to its tail before it is attached to errors.
STDERR_TAIL_CHARS = 500


class MediaToolError(RuntimeError):
    """An ffmpeg/ffprobe invocation failed, timed out, or could not start."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        if stderr:
            message = f"{message}\n{stderr}"
        super().__init__(message)


def ffmpeg_exe() -> str:
    """Return the ffmpeg executable: $SCENEREEL_FFMPEG or the bundled binary."""
    return os.environ.get("SCENEREEL_FFMPEG") or imageio_ffmpeg.get_ffmpeg_exe()


def ffprobe_exe() -> str:
    return os.environ.get("SCENEREEL_FFPROBE") or "ffprobe"


def _timeout_from_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return max(1.0, float(raw))
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %.0fs", name, raw, default)
        return default


def ffmpeg_timeout() -> float:
    return _timeout_from_env("SCENEREEL_FFMPEG_TIMEOUT", DEFAULT_FFMPEG_TIMEOUT)


def ffprobe_timeout() -> float:
    return _timeout_from_env("SCENEREEL_FFPROBE_TIMEOUT", DEFAULT_FFPROBE_TIMEOUT)


# ── Path utilities ─────────────────────────────────────────────────

def resolve_path_vars(text: str, paths: dict[str, str]) -> str:
    """Replace ${name} variables in a string using the paths dict."""
    def _replace(match):
        key = match.group(1)
        if key not in paths:
            raise ValueError(f"Unknown path variable: ${{{key}}}")
        return str(paths[key])
    return re.sub(r"\$\{(\w+)\}", _replace, text)


# ── Subprocess runner ──────────────────────────────────────────────

def stderr_tail(text: str, limit: int = STDERR_TAIL_CHARS) -> str:
    """Keep only the last `limit` characters of a tool's error stream."""
    if not text:
        return ""
    return text[-limit:]


def run_tool(cmd: list[str], timeout: float) -> subprocess.CompletedProcess:
    """Run an external media tool and return the completed process.

    A non-zero exit, a timeout, and a missing executable are all reported
    the same way: as MediaToolError with the tail of stderr attached.
    """
    logger.debug("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(
            cmd, capture_output=True, text=True, timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        stderr = exc.stderr or ""
        if isinstance(stderr, bytes):
            stderr = stderr.decode(errors="replace")
        raise MediaToolError(
            f"{os.path.basename(cmd[0])} timed out after {timeout:.0f}s",
            stderr=stderr_tail(stderr),
        ) from exc
    except OSError as exc:
        raise MediaToolError(f"Could not start {cmd[0]}: {exc}") from exc

    if result.returncode != 0:
        tail = stderr_tail(result.stderr)
        logger.error(
            "%s failed (code %d): %s",
            os.path.basename(cmd[0]), result.returncode, tail,
        )
        raise MediaToolError(
            f"{os.path.basename(cmd[0])} failed (code {result.returncode})",
            returncode=result.returncode,
            stderr=tail,
        )
    return result


def run_ffmpeg(args: list[str], timeout: float | None = None) -> subprocess.CompletedProcess:
    """Run ffmpeg with the given arguments (without the executable)."""
    return run_tool([ffmpeg_exe(), *args], timeout or ffmpeg_timeout())


def run_ffprobe(args: list[str], timeout: float | None = None) -> subprocess.CompletedProcess:
    """Run ffprobe with the given arguments (without the executable)."""
    return run_tool([ffprobe_exe(), *args], timeout or ffprobe_timeout())
