import math
import os
import random
from dataclasses import dataclass
from typing import List, Optional

from .config import REEL_HEIGHT, REEL_WIDTH, EncodingSettings
from .errors import ConfigurationError, SegmentExtractionError
from .ffmpeg import MediaInfo, probe_media, run_ffmpeg
from .filters import FilterChain, fill_frame

AUDIO_EXTENSIONS = {".mp3", ".wav", ".m4a", ".aac", ".ogg", ".flac"}


@dataclass
class MediaAsset:
    video_path: str
    audio_path: Optional[str] = None


# --- MEDIA SELECTION ---

def require_file(path: str, label: str = "File") -> str:
    if not os.path.isfile(path):
        raise ConfigurationError(f"{label} not found at: {path}")
    return path


def require_directory(path: str, label: str = "Directory") -> str:
    if not os.path.isdir(path):
        raise ConfigurationError(f"{label} not found at: {path}")
    return path


def list_audio_files(folder: str) -> List[str]:
    """Audio files with a recognised extension, sorted for stable selection"""
    if not os.path.isdir(folder):
        return []
    return sorted(
        os.path.join(folder, name)
        for name in os.listdir(folder)
        if os.path.splitext(name)[1].lower() in AUDIO_EXTENSIONS
        and os.path.isfile(os.path.join(folder, name))
    )


def pick_random_audio(folder: str, required: bool = True,
                      rng: Optional[random.Random] = None) -> Optional[str]:
    """Pick one audio track uniformly at random.

    With required=False a missing or empty folder is not an error: a
    warning is printed and None is returned so the reel goes out without
    background music.
    """
    rng = rng or random
    print("🎵 Selecting random audio file...")

    if not os.path.isdir(folder):
        if required:
            raise ConfigurationError(f"Audio folder not found at: {folder}")
        print("⚠️ Audio directory not found, proceeding without background music")
        return None

    audio_files = list_audio_files(folder)
    if not audio_files:
        if required:
            raise ConfigurationError(f"No audio files found in {folder}")
        print("⚠️ No audio files found in audio directory")
        return None

    selected = rng.choice(audio_files)
    print(f"✅ Selected audio: {os.path.basename(selected)}")
    return selected


# --- SEGMENT EXTRACTION ---

def plan_segment_start(source_duration: float, target_duration: float,
                       rng: Optional[random.Random] = None) -> float:
    """Uniform start offset in [0, source - target], clamped at 0"""
    rng = rng or random
    max_start = max(0.0, source_duration - target_duration)
    return rng.uniform(0, max_start)


def _encode_args(encoding: EncodingSettings) -> List[str]:
    return [
        "-c:v", encoding.video_codec,
        "-pix_fmt", encoding.pix_fmt,
        "-preset", encoding.preset,
        "-crf", str(encoding.crf),
    ]


def _fill_frame_filter() -> str:
    return FilterChain([], fill_frame(REEL_WIDTH, REEL_HEIGHT)).render()


async def extract_random_segment(input_video: str, output_video: str, duration: float,
                                 encoding: EncodingSettings, rng: Optional[random.Random] = None) -> float:
    """Cut `duration` seconds from a random offset, scaled and cropped to 1080x1920.

    A source shorter than `duration` starts at 0 and is not looped, so the
    result is only as long as the source. Returns the chosen start offset.
    """
    print("🎞️ Extracting random segment from b-roll video...")
    info = await probe_media(input_video)
    start = plan_segment_start(info.duration, duration, rng)

    print(f"   B-roll duration: {info.duration:.2f}s")
    print(f"   Extracting {duration:g}s from {start:.2f}s")

    await run_ffmpeg(
        ["-ss", f"{start:.3f}", "-i", input_video, "-t", f"{duration:g}",
         "-vf", _fill_frame_filter(),
         *_encode_args(encoding),
         "-c:a", encoding.audio_codec,
         output_video],
        "Extract b-roll segment",
        SegmentExtractionError,
        duration=duration,
    )
    return start


async def _cut(input_video: str, start: float, duration: float, output_video: str,
               encoding: EncodingSettings):
    await run_ffmpeg(
        ["-ss", f"{start:.3f}", "-i", input_video, "-t", f"{duration:g}",
         "-c:v", encoding.video_codec, "-c:a", encoding.audio_codec,
         output_video],
        "Extract segment",
        SegmentExtractionError,
        duration=duration,
    )


def write_concat_list(clip_path: str, repeats: int, concat_file: str):
    """ffmpeg concat demuxer list repeating one clip"""
    escaped = os.path.abspath(clip_path).replace("'", "'\\''")
    with open(concat_file, "w", encoding="utf-8") as f:
        f.write("\n".join([f"file '{escaped}'"] * repeats) + "\n")


async def loop_video(input_video: str, target_duration: float, output_video: str,
                     scratch_dir: str, encoding: EncodingSettings):
    """Repeat a short clip end to end, then hard-trim to target_duration"""
    info = await probe_media(input_video)
    repeats = math.ceil(target_duration / info.duration)
    print(f"🔁 Looping {info.duration:.2f}s clip x{repeats} to fill {target_duration:g}s")

    concat_file = os.path.join(scratch_dir, "concat.txt")
    write_concat_list(input_video, repeats, concat_file)

    await run_ffmpeg(
        ["-f", "concat", "-safe", "0", "-i", concat_file,
         "-t", f"{target_duration:g}",
         "-c:v", encoding.video_codec, "-c:a", encoding.audio_codec,
         output_video],
        "Loop video",
        SegmentExtractionError,
        duration=target_duration,
    )


async def resize_to_vertical(input_video: str, output_video: str, encoding: EncodingSettings,
                             duration: Optional[float] = None):
    print("📐 Resizing to 9:16 aspect ratio (1080x1920)...")
    await run_ffmpeg(
        ["-i", input_video,
         "-vf", _fill_frame_filter(),
         *_encode_args(encoding),
         "-c:a", encoding.audio_codec,
         output_video],
        "Resize",
        SegmentExtractionError,
        duration=duration,
    )


async def extract_or_loop_segment(input_video: str, output_video: str, duration: float,
                                  scratch_dir: str, encoding: EncodingSettings,
                                  rng: Optional[random.Random] = None) -> MediaInfo:
    """Exactly `duration` seconds of 1080x1920 video from the source.

    Long sources are cut at a random offset; short ones are looped.
    Intermediates go to scratch_dir, which the caller owns and removes.
    Returns the probed source info.
    """
    info = await probe_media(input_video)
    print(f"🎞️ Video duration: {info.duration:.2f} seconds")

    segment = os.path.join(scratch_dir, "segment.mp4")
    if info.duration < duration:
        print(f"   Video is shorter than {duration:g} seconds, will loop to fill {duration:g} seconds")
        full = os.path.join(scratch_dir, "full.mp4")
        await _cut(input_video, 0, info.duration, full, encoding)
        await loop_video(full, duration, segment, scratch_dir, encoding)
    else:
        start = plan_segment_start(info.duration, duration, rng)
        print(f"   Extracting segment starting at {start:.2f} seconds...")
        await _cut(input_video, start, duration, segment, encoding)

    await resize_to_vertical(segment, output_video, encoding, duration)
    return info
