import os
import random
import shutil
import tempfile
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from openai import AsyncOpenAI
from playwright.async_api import async_playwright

from .compositor import burn_in_captions, overlay_code_on_video
from .config import ReelConfig
from .content import ContentSnippet, HookBundle, generate_hook_bundle, generate_snippet
from .ffmpeg import ensure_ffmpeg
from .media import (
    MediaAsset,
    extract_or_loop_segment,
    extract_random_segment,
    pick_random_audio,
    require_directory,
    require_file,
)
from .renderer import render_snippet

CAPTION_BANNER = "=" * 20 + " REEL " + "=" * 20


# --- RESULTS ---

@dataclass
class CodingChallengeResult:
    output_dir: str
    video_path: str
    caption_path: str
    image_path: str
    broll_segment_path: str
    audio_path: str
    snippet: ContentSnippet


@dataclass
class ReadCaptionResult:
    output_folder: str
    video_path: str
    caption_path: str
    hook: str
    caption: str
    cta: str
    audio_path: Optional[str] = None


# --- HELPERS ---

def coding_folder_name(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return now.strftime("output_%Y%m%d_%H%M%S")


def caption_folder_name(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with ':' and 'T' swapped for filesystem-safe characters"""
    now = now or datetime.now(timezone.utc)
    return now.strftime("output_%Y-%m-%d_%H-%M-%S")


def format_coding_caption(snippet: ContentSnippet, audio_path: str) -> str:
    return (
        f"{CAPTION_BANNER}\n"
        f"DIFFICULTY: {snippet.difficulty}\n\n"
        f"CODE:\n{snippet.code}\n\n"
        f"CAPTION:\n{snippet.caption}\n\n"
        f"AUDIO: {os.path.basename(audio_path)}\n"
    )


def format_read_caption(bundle: HookBundle) -> str:
    return f"{bundle.hook}\n\n{bundle.caption}\n\n{bundle.cta}"


def write_text(path: str, content: str):
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)


@asynccontextmanager
async def launch_browser():
    """Headless Chromium for one run, closed on every exit path"""
    async with async_playwright() as p:
        browser = await p.chromium.launch(args=["--no-sandbox"])
        try:
            yield browser
        finally:
            await browser.close()


# --- PIPELINES ---

class CodingChallengePipeline:
    """Code card over b-roll with a fading difficulty label and music.

    Every artifact stays in the timestamped folder, also after a failure,
    so a broken run can be inspected.
    """

    def __init__(self, config: ReelConfig, client: Optional[AsyncOpenAI] = None,
                 rng: Optional[random.Random] = None):
        self.config = config
        self.client = client
        self.rng = rng or random.Random()

    def _check_inputs(self) -> MediaAsset:
        self.config.validate()
        require_file(self.config.broll_path, "B-roll video")
        require_directory(self.config.audio_dir, "Audio folder")
        return MediaAsset(video_path=self.config.broll_path)

    async def run(self) -> CodingChallengeResult:
        config = self.config
        media = self._check_inputs()
        await ensure_ffmpeg(config.ffmpeg_path or None)

        output_dir = os.path.join(config.output_root, coding_folder_name())
        image_path = os.path.join(output_dir, "snippet.png")
        broll_segment_path = os.path.join(output_dir, "broll_segment.mp4")
        video_path = os.path.join(output_dir, "reel.mp4")
        caption_path = os.path.join(output_dir, "caption.txt")

        os.makedirs(output_dir, exist_ok=True)
        print(f"📁 Output directory: {output_dir}")
        duration = config.coding_duration
        print(f"🎬 Generating 1 code snippet for a {duration:g}s video...")

        async with launch_browser() as browser:
            snippet = await generate_snippet(config, self.client)
            await render_snippet(snippet.code, image_path, browser, config.card)

        media.audio_path = pick_random_audio(config.audio_dir, required=True, rng=self.rng)

        await extract_random_segment(media.video_path, broll_segment_path, duration,
                                     config.encoding, self.rng)

        await overlay_code_on_video(broll_segment_path, image_path, media.audio_path, video_path,
                                    duration, snippet.difficulty, config.level, config.encoding)

        write_text(caption_path, format_coding_caption(snippet, media.audio_path))
        print(f"✅ Caption saved: {caption_path}")

        print("=" * 60)
        print("✨ ALL DONE!")
        print("=" * 60)
        print(f"📁 Folder: {output_dir}")
        print(f"🎥 Video: {video_path}")
        print(f"📝 Caption: {caption_path}")
        print(f"🖼️  Image: {image_path}")
        print(f"🎵 Audio: {os.path.basename(media.audio_path)}")
        print(f"⏱️  Level appears at: {config.level.appear_time:g}s")

        return CodingChallengeResult(
            output_dir=output_dir,
            video_path=video_path,
            caption_path=caption_path,
            image_path=image_path,
            broll_segment_path=broll_segment_path,
            audio_path=media.audio_path,
            snippet=snippet,
        )


class ReadCaptionPipeline:
    """Hook text over looped/cut b-roll, optional background music.

    Intermediates live in a scratch directory that is removed whether the
    run succeeds or not; the named output folder is kept.
    """

    def __init__(self, config: ReelConfig, client: Optional[AsyncOpenAI] = None,
                 rng: Optional[random.Random] = None):
        self.config = config
        self.client = client
        self.rng = rng or random.Random()

    async def run(self) -> ReadCaptionResult:
        config = self.config
        config.validate()
        media = MediaAsset(video_path=require_file(config.broll_path, "Video file"))
        await ensure_ffmpeg(config.ffmpeg_path or None)

        output_folder = os.path.join(config.output_root, caption_folder_name())
        os.makedirs(output_folder, exist_ok=True)
        video_path = os.path.join(output_folder, "reel.mp4")
        caption_path = os.path.join(output_folder, "caption.txt")
        print(f"📁 Output folder: {output_folder}")

        scratch_dir = tempfile.mkdtemp(prefix="video-reel-")
        try:
            bundle = await generate_hook_bundle(config, self.client)
            print(f"----------------Hook----------------:\n{bundle.hook}")
            print(f"----------------Caption----------------:\n{bundle.caption}")
            print(f"----------------CTA----------------:\n{bundle.cta}")

            media.audio_path = pick_random_audio(config.audio_dir, required=False, rng=self.rng)

            resized = os.path.join(scratch_dir, "resized.mp4")
            source = await extract_or_loop_segment(media.video_path, resized, config.caption_duration,
                                                   scratch_dir, config.encoding, self.rng)

            await burn_in_captions(resized, media.audio_path, video_path, bundle.hook, config.caption,
                                   config.encoding, source.has_audio, config.caption_duration)

            write_text(caption_path, format_read_caption(bundle))
            print(f"✅ Caption saved: {caption_path}")

            return ReadCaptionResult(
                output_folder=output_folder,
                video_path=video_path,
                caption_path=caption_path,
                hook=bundle.hook,
                caption=bundle.caption,
                cta=bundle.cta,
                audio_path=media.audio_path,
            )
        finally:
            shutil.rmtree(scratch_dir, ignore_errors=True)
