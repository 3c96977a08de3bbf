from typing import List, Optional

from .config import REEL_HEIGHT, REEL_WIDTH, CaptionStyle, EncodingSettings, LevelLabelStyle
from .errors import CompositionError
from .ffmpeg import run_ffmpeg
from .filters import (
    AMix,
    ATrim,
    DrawText,
    FilterGraph,
    Overlay,
    Scale,
    block_height,
    line_positions,
    wrap_text,
)


# --- CODING CHALLENGE ---

def level_label(difficulty: str, style: LevelLabelStyle) -> DrawText:
    return DrawText(
        text=f"LEVEL: {difficulty}",
        fontfile=style.fontfile,
        fontsize=style.font_size,
        fontcolor=style.color,
        y=style.y,
        borderw=style.border_width,
        bordercolor="black",
        appear_at=style.appear_time,
        fade=style.fade_duration,
    )


def build_code_overlay_graph(difficulty: str, duration: float, style: LevelLabelStyle) -> FilterGraph:
    """Card image over every frame, fading level label, trimmed audio"""
    return (
        FilterGraph()
        .add(["1:v"], [Scale(REEL_WIDTH, REEL_HEIGHT)], "overlay")
        .add(["0:v", "overlay"], [Overlay(0, 0)], "video_base")
        .add(["video_base"], [level_label(difficulty, style)], "video")
        .add(["2:a"], [ATrim(duration)], "audio")
    )


def build_code_overlay_args(background_video: str, overlay_image: str, audio_path: str,
                            output_video: str, duration: float, difficulty: str,
                            style: LevelLabelStyle, encoding: EncodingSettings) -> List[str]:
    graph = build_code_overlay_graph(difficulty, duration, style)
    return [
        "-i", background_video,
        "-i", overlay_image,
        "-i", audio_path,
        "-filter_complex", graph.render(),
        "-map", "[video]",
        "-map", "[audio]",
        "-c:v", encoding.video_codec,
        "-c:a", encoding.audio_codec,
        "-b:a", encoding.audio_bitrate,
        "-t", f"{duration:g}",
        "-pix_fmt", encoding.pix_fmt,
        "-preset", encoding.preset,
        "-crf", str(encoding.crf),
        "-shortest",
        output_video,
    ]


async def overlay_code_on_video(background_video: str, overlay_image: str, audio_path: str,
                                output_video: str, duration: float, difficulty: str,
                                style: LevelLabelStyle, encoding: EncodingSettings):
    print("🎬 Overlaying code snippet on background video and adding audio...")
    args = build_code_overlay_args(background_video, overlay_image, audio_path, output_video,
                                   duration, difficulty, style, encoding)
    await run_ffmpeg(args, "Compose coding challenge reel", CompositionError, duration=duration)
    print(f"✅ Final video with audio and level text created: {output_video}")


# --- READ CAPTION ---

def caption_text_ops(hook: str, style: CaptionStyle) -> List[DrawText]:
    """One drawtext per wrapped line: hook block centred, subtext gated below it"""
    main_lines = wrap_text(hook, style.main_max_chars)
    sub_lines = wrap_text(style.sub_text, style.sub_max_chars)

    main_height = block_height(len(main_lines), style.main_font_size, style.main_line_gap)
    main_start = REEL_HEIGHT / 2 - main_height / 2 + style.center_offset
    sub_start = main_start + main_height + style.sub_spacing

    ops = []
    for line, y in zip(main_lines, line_positions(len(main_lines), style.main_font_size,
                                                  style.main_line_gap, main_start)):
        ops.append(DrawText(
            text=line,
            fontfile=style.fontfile,
            fontsize=style.main_font_size,
            y=y,
            borderw=style.main_border_width,
        ))
    for line, y in zip(sub_lines, line_positions(len(sub_lines), style.sub_font_size,
                                                 style.sub_line_gap, sub_start)):
        ops.append(DrawText(
            text=line,
            fontfile=style.fontfile,
            fontsize=style.sub_font_size,
            y=y,
            borderw=style.sub_border_width,
            appear_at=style.sub_appear_time,
        ))
    return ops


def build_caption_graph(hook: str, style: CaptionStyle, audio_path: Optional[str],
                        has_segment_audio: bool, duration: float) -> FilterGraph:
    graph = FilterGraph().add(["0:v"], caption_text_ops(hook, style), "vout")
    if audio_path:
        if has_segment_audio:
            graph.add(["0:a", "1:a"], [AMix(inputs=2, duration="shortest", dropout_transition=2)], "aout")
        else:
            graph.add(["1:a"], [ATrim(duration)], "aout")
    return graph


def build_caption_args(segment_video: str, audio_path: Optional[str], output_video: str,
                       hook: str, style: CaptionStyle, encoding: EncodingSettings,
                       has_segment_audio: bool, duration: float) -> List[str]:
    graph = build_caption_graph(hook, style, audio_path, has_segment_audio, duration)

    args = ["-i", segment_video]
    if audio_path:
        args += ["-i", audio_path]
    args += ["-filter_complex", graph.render(), "-map", "[vout]"]
    if audio_path:
        args += ["-map", "[aout]", "-c:a", encoding.audio_codec, "-b:a", encoding.audio_bitrate]
    else:
        # keep the segment's own audio untouched (if it has any)
        args += ["-map", "0:a?", "-c:a", encoding.audio_codec]
    args += [
        "-c:v", encoding.video_codec,
        "-preset", encoding.preset,
        "-b:v", encoding.caption_video_bitrate,
        "-pix_fmt", encoding.pix_fmt,
        "-r", str(encoding.caption_fps),
        "-t", f"{duration:g}",
        output_video,
    ]
    return args


async def burn_in_captions(segment_video: str, audio_path: Optional[str], output_video: str,
                           hook: str, style: CaptionStyle, encoding: EncodingSettings,
                           has_segment_audio: bool, duration: float):
    lines = wrap_text(hook, style.main_max_chars)
    print("📝 Main text will be displayed as:")
    for i, line in enumerate(lines, 1):
        print(f"   Line {i}: {line}")
    if audio_path:
        print("🎵 Adding background audio...")

    args = build_caption_args(segment_video, audio_path, output_video, hook, style, encoding,
                              has_segment_audio, duration)
    await run_ffmpeg(args, "Burn in captions", CompositionError, duration=duration)
    print(f"✅ Video exported successfully to: {output_video}")
