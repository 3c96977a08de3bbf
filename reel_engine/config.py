import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigurationError

# --- REEL FORMAT ---
REEL_WIDTH = 1080
REEL_HEIGHT = 1920


@dataclass
class CardStyle:
    """Layout of the rendered code card"""
    width: int = REEL_WIDTH
    height: int = REEL_HEIGHT
    scale: float = 1
    padding: int = 80
    font: str = "'JetBrains Mono', 'Fira Code', Menlo, monospace"
    font_size: int = 34
    theme: str = "nord"
    language: str = "javascript"
    title: str = "What Is The Output?"


@dataclass
class LevelLabelStyle:
    """Difficulty label burned into the coding challenge reel"""
    fontfile: str = "/System/Library/Fonts/Supplemental/Arial Bold.ttf"
    font_size: int = 42
    color: str = "#818cf8"
    border_width: int = 2
    y: int = 840               # between the title and the code frame
    appear_time: float = 2.0
    fade_duration: float = 0.3


@dataclass
class CaptionStyle:
    """Hook and subtext layout for the read caption reel"""
    fontfile: str = "Inter.ttf"
    main_font_size: int = 60
    main_line_gap: int = 20
    main_max_chars: int = 30
    main_border_width: int = 3
    sub_text: str = "(Read caption)"
    sub_font_size: int = 40
    sub_line_gap: int = 15
    sub_max_chars: int = 25
    sub_border_width: int = 2
    sub_appear_time: float = 4.0
    center_offset: int = -100   # hook group sits slightly above centre
    sub_spacing: int = 80       # gap between hook block and subtext


@dataclass
class EncodingSettings:
    video_codec: str = "libx264"
    pix_fmt: str = "yuv420p"
    preset: str = "medium"
    crf: int = 23
    audio_codec: str = "aac"
    audio_bitrate: str = "192k"
    caption_video_bitrate: str = "8000k"
    caption_fps: int = 24


@dataclass
class ReelConfig:
    """Everything a pipeline run needs, resolved once up front"""
    openai_api_key: str = ""
    snippet_model: str = "gpt-4o"
    snippet_temperature: float = 0.9
    snippet_max_tokens: int = 500
    hook_model: str = "gpt-4o-mini"
    hook_temperature: float = 0.9

    broll_path: str = "bRoll.mov"
    audio_dir: str = "audio"
    output_root: str = "."
    ffmpeg_path: str = ""      # empty: ffmpeg on PATH, then imageio-ffmpeg's build

    coding_duration: float = 10.0
    caption_duration: float = 7.0

    card: CardStyle = field(default_factory=CardStyle)
    level: LevelLabelStyle = field(default_factory=LevelLabelStyle)
    caption: CaptionStyle = field(default_factory=CaptionStyle)
    encoding: EncodingSettings = field(default_factory=EncodingSettings)

    port: int = 3001

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "ReelConfig":
        """Build a config from .env + environment variables"""
        load_dotenv(env_file)
        config = cls(
            openai_api_key=os.environ.get("OPENAI_API_KEY", ""),
            snippet_model=os.environ.get("REEL_SNIPPET_MODEL", cls.snippet_model),
            hook_model=os.environ.get("REEL_HOOK_MODEL", cls.hook_model),
            broll_path=os.environ.get("REEL_BROLL_PATH", cls.broll_path),
            audio_dir=os.environ.get("REEL_AUDIO_DIR", cls.audio_dir),
            output_root=os.environ.get("REEL_OUTPUT_ROOT", cls.output_root),
            ffmpeg_path=os.environ.get("REEL_FFMPEG", cls.ffmpeg_path),
            coding_duration=float(os.environ.get("REEL_CODING_DURATION", cls.coding_duration)),
            port=int(os.environ.get("PORT", cls.port)),
        )
        if os.environ.get("REEL_LEVEL_FONT"):
            config.level.fontfile = os.environ["REEL_LEVEL_FONT"]
        if os.environ.get("REEL_CAPTION_FONT"):
            config.caption.fontfile = os.environ["REEL_CAPTION_FONT"]
        return config

    def require_api_key(self) -> str:
        if not self.openai_api_key:
            raise ConfigurationError("Missing OPENAI_API_KEY. Set it in the environment or .env file.")
        return self.openai_api_key

    def validate(self):
        """Fail fast before any pipeline step touches disk or network"""
        self.require_api_key()
        if self.coding_duration <= 0 or self.caption_duration <= 0:
            raise ConfigurationError("Reel durations must be positive")
