"""Small structured description of ffmpeg filter graphs.

Pipelines describe what they want (scale, crop, overlay, timed text,
audio trim/mix) with the dataclasses below and call ``render()`` once to
get the textual filter syntax. Escaping of user/model text only happens
here.

ffmpeg parses a filter graph in two passes: the graph parser splits on
``[],;`` honouring single quotes, then each filter splits its options on
``:``/``=``. Option values therefore get :func:`escape_filter_text` for the
option pass and :func:`quote_filter_value` for the graph pass.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

FILTER_SPECIAL_CHARS = ("\\", "'", ":")


def escape_filter_text(text: str) -> str:
    """Backslash-escape backslash, single quote and colon for a filter option value"""
    escaped = []
    for char in text:
        if char in FILTER_SPECIAL_CHARS:
            escaped.append("\\")
        escaped.append(char)
    return "".join(escaped)


def quote_filter_value(value: str) -> str:
    """Single-quote a value for the graph parser.

    Quotes can't be escaped inside a quoted run, so each embedded quote
    closes the run, is emitted as ``\\'`` and the run is reopened.
    """
    return "'" + value.replace("'", "'\\''") + "'"


def wrap_text(text: str, max_chars: int = 30) -> List[str]:
    """Greedy word wrap.

    Words are packed while the line (with single spaces) fits max_chars.
    A word longer than max_chars gets a line of its own and is never split.
    """
    lines = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if len(candidate) <= max_chars:
            current = candidate
        else:
            if current:
                lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


def block_height(line_count: int, font_size: int, line_gap: int) -> int:
    if line_count == 0:
        return 0
    return line_count * font_size + (line_count - 1) * line_gap


def line_positions(line_count: int, font_size: int, line_gap: int, start_y: float) -> List[float]:
    """Top y of each stacked line"""
    return [start_y + i * (font_size + line_gap) for i in range(line_count)]


def _number(value: float) -> str:
    return f"{value:g}"


# --- FILTER OPERATIONS ---

@dataclass
class Scale:
    width: int
    height: int
    force_original_aspect_ratio: Optional[str] = None   # "increase" to fill

    def render(self) -> str:
        out = f"scale={self.width}:{self.height}"
        if self.force_original_aspect_ratio:
            out += f":force_original_aspect_ratio={self.force_original_aspect_ratio}"
        return out


@dataclass
class Crop:
    """Centre crop"""
    width: int
    height: int

    def render(self) -> str:
        return f"crop={self.width}:{self.height}"


@dataclass
class Overlay:
    x: int = 0
    y: int = 0

    def render(self) -> str:
        return f"overlay={self.x}:{self.y}"


@dataclass
class DrawText:
    """Burned-in text.

    appear_at hides the text before that time. With fade set, alpha ramps
    linearly from 0 to 1 over fade seconds starting at appear_at;
    without it the text just switches on.
    """
    text: str
    fontfile: str
    fontsize: int
    fontcolor: str = "white"
    x: str = "(w-text_w)/2"
    y: Union[str, float] = 0
    borderw: int = 0
    bordercolor: str = "black"
    appear_at: Optional[float] = None
    fade: Optional[float] = None

    def alpha_expression(self) -> Optional[str]:
        if self.appear_at is None or not self.fade:
            return None
        start = _number(self.appear_at)
        end = _number(self.appear_at + self.fade)
        return f"if(lt(t,{start}),0,if(lt(t,{end}),(t-{start})/{_number(self.fade)},1))"

    def render(self) -> str:
        y = self.y if isinstance(self.y, str) else _number(self.y)
        options = [
            ("fontfile", quote_filter_value(escape_filter_text(self.fontfile))),
            ("text", quote_filter_value(escape_filter_text(self.text))),
            ("expansion", "none"),
            ("fontsize", str(self.fontsize)),
            ("fontcolor", self.fontcolor),
            ("x", quote_filter_value(self.x)),
            ("y", quote_filter_value(y)),
        ]
        if self.borderw:
            options += [("borderw", str(self.borderw)), ("bordercolor", self.bordercolor)]
        if self.appear_at is not None:
            options.append(("enable", quote_filter_value(f"gte(t,{_number(self.appear_at)})")))
        alpha = self.alpha_expression()
        if alpha:
            options.append(("alpha", quote_filter_value(alpha)))
        return "drawtext=" + ":".join(f"{key}={value}" for key, value in options)


@dataclass
class ATrim:
    """Trim audio to [0, duration) and reset timestamps to start at zero"""
    duration: float

    def render(self) -> str:
        return f"atrim=0:{_number(self.duration)},asetpts=PTS-STARTPTS"


@dataclass
class AMix:
    inputs: int = 2
    duration: str = "shortest"
    dropout_transition: float = 2

    def render(self) -> str:
        return (f"amix=inputs={self.inputs}:duration={self.duration}"
                f":dropout_transition={_number(self.dropout_transition)}")


FilterOp = Union[Scale, Crop, Overlay, DrawText, ATrim, AMix]


@dataclass
class FilterChain:
    """Labelled inputs -> comma-joined ops -> labelled output"""
    inputs: Sequence[str]
    ops: Sequence[FilterOp]
    output: Optional[str] = None

    def render(self) -> str:
        labels = "".join(f"[{label}]" for label in self.inputs)
        body = ",".join(op.render() for op in self.ops)
        out = f"[{self.output}]" if self.output else ""
        return f"{labels}{body}{out}"


@dataclass
class FilterGraph:
    chains: List[FilterChain] = field(default_factory=list)

    def add(self, inputs: Sequence[str], ops: Sequence[FilterOp], output: Optional[str] = None) -> "FilterGraph":
        self.chains.append(FilterChain(list(inputs), list(ops), output))
        return self

    def render(self) -> str:
        return ";".join(chain.render() for chain in self.chains)


def fill_frame(width: int, height: int) -> List[FilterOp]:
    """Scale up to cover the frame, then centre crop to exactly width x height"""
    return [Scale(width, height, force_original_aspect_ratio="increase"), Crop(width, height)]
