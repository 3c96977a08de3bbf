import asyncio
import re
import shutil
from dataclasses import dataclass
from typing import List, Optional, Sequence, Set, Type

import imageio_ffmpeg

from .errors import ConfigurationError, MediaProbeError, ReelError

DURATION_RE = re.compile(r"Duration:\s*(\d+):(\d+):(\d+(?:\.\d+)?)")
VIDEO_STREAM_RE = re.compile(r"Stream #\d+:\d+.*?: Video: .*?, (\d{2,5})x(\d{2,5})")
AUDIO_STREAM_RE = re.compile(r"Stream #\d+:\d+.*?: Audio:")

# Both compositor graphs draw text; imageio-ffmpeg's static build lacks it
REQUIRED_FILTERS = ("drawtext",)

_ffmpeg_path: Optional[str] = None
_verified: Set[str] = set()


@dataclass
class MediaInfo:
    duration: float
    width: Optional[int] = None
    height: Optional[int] = None
    has_audio: bool = False


def find_ffmpeg(preferred: Optional[str] = None) -> str:
    """Configured path, then ffmpeg on PATH, then imageio-ffmpeg's build"""
    if preferred:
        return preferred
    return shutil.which("ffmpeg") or imageio_ffmpeg.get_ffmpeg_exe()


def ffmpeg_exe() -> str:
    return _ffmpeg_path or find_ffmpeg()


def parse_filter_names(listing: str) -> Set[str]:
    """Filter names from `ffmpeg -filters` output"""
    names = set()
    for line in listing.splitlines():
        # rows look like " T.C drawtext          V->V       Draw text on top of video frames"
        parts = line.split()
        if len(parts) >= 3 and "->" in parts[2]:
            names.add(parts[1])
    return names


async def ensure_ffmpeg(preferred: Optional[str] = None,
                        required: Sequence[str] = REQUIRED_FILTERS) -> str:
    """Resolve the ffmpeg binary and check it has every filter the reels use.

    The result is remembered, so later runs skip the check and every
    subsequent ffmpeg call goes to the same binary.
    """
    global _ffmpeg_path
    exe = find_ffmpeg(preferred)
    if exe not in _verified:
        try:
            proc = await asyncio.create_subprocess_exec(
                exe, "-hide_banner", "-filters",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ConfigurationError(f"Cannot run ffmpeg at {exe}: {e}") from e
        stdout, _ = await proc.communicate()

        available = parse_filter_names(stdout.decode(errors="replace"))
        missing = [name for name in required if name not in available]
        if missing:
            raise ConfigurationError(
                f"ffmpeg at {exe} has no {', '.join(missing)} filter. "
                f"Install an ffmpeg built with libfreetype or point REEL_FFMPEG at one."
            )
        _verified.add(exe)
        print(f"✅ Using ffmpeg: {exe}")

    _ffmpeg_path = exe
    return exe


def _tail(stderr: str, lines: int = 15) -> str:
    return "\n".join(stderr.strip().splitlines()[-lines:])


def parse_media_info(stderr: str, path: str) -> MediaInfo:
    """Read duration and stream layout out of ffmpeg's input banner"""
    match = DURATION_RE.search(stderr)
    if not match:
        raise MediaProbeError(f"Duration not found in video metadata for {path}: {_tail(stderr, 5)}")
    hours, minutes, seconds = match.groups()
    duration = int(hours) * 3600 + int(minutes) * 60 + float(seconds)
    if duration <= 0:
        raise MediaProbeError(f"Duration not found in video metadata for {path}")

    info = MediaInfo(duration=duration, has_audio=bool(AUDIO_STREAM_RE.search(stderr)))
    video = VIDEO_STREAM_RE.search(stderr)
    if video:
        info.width, info.height = int(video.group(1)), int(video.group(2))
    return info


async def probe_media(path: str) -> MediaInfo:
    """Probe a media file with `ffmpeg -i` (imageio-ffmpeg ships no ffprobe)"""
    proc = await asyncio.create_subprocess_exec(
        ffmpeg_exe(), "-hide_banner", "-i", path,
        stdout=asyncio.subprocess.DEVNULL,
        stderr=asyncio.subprocess.PIPE,
    )
    _, stderr = await proc.communicate()
    # ffmpeg exits non-zero here because no output is given; the banner is what we want
    return parse_media_info(stderr.decode(errors="replace"), path)


def _progress_seconds(line: str) -> Optional[float]:
    if not line.startswith("out_time_us="):
        return None
    value = line.split("=", 1)[1]
    if not value.isdigit():
        return None
    return int(value) / 1_000_000


async def run_ffmpeg(args: List[str], label: str, error_cls: Type[ReelError] = ReelError,
                     duration: Optional[float] = None):
    """Run one ffmpeg invocation to completion.

    Progress is printed when the expected output duration is known; it is
    informational only. A non-zero exit raises error_cls with the tail of
    ffmpeg's stderr.
    """
    cmd = [ffmpeg_exe(), "-y", "-hide_banner", "-nostats", "-progress", "pipe:1", *args]
    print(f"🎬 {label}: {' '.join(cmd)}")

    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stderr_task = asyncio.create_task(proc.stderr.read())

    last_percent = -1
    async for raw in proc.stdout:
        seconds = _progress_seconds(raw.decode(errors="replace").strip())
        if seconds is None or not duration:
            continue
        percent = min(100, int(seconds / duration * 100))
        if percent != last_percent:
            print(f"\rProgress: {percent}%", end="", flush=True)
            last_percent = percent

    stderr = (await stderr_task).decode(errors="replace")
    returncode = await proc.wait()
    if last_percent >= 0:
        print()

    if returncode != 0:
        print(f"❌ {label} failed (exit {returncode})")
        raise error_cls(f"{label} failed: {_tail(stderr)}")

    print(f"✅ {label} done")
