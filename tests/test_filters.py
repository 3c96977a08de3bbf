"""Tests for the filter graph model, text escaping and word wrap."""

import pytest

from reel_engine.filters import (
    AMix,
    ATrim,
    Crop,
    DrawText,
    FilterChain,
    FilterGraph,
    Overlay,
    Scale,
    block_height,
    escape_filter_text,
    fill_frame,
    line_positions,
    quote_filter_value,
    wrap_text,
)

SAMPLE_TEXTS = [
    "",
    "short",
    "7 free resources that replaced my entire computer science degree",
    "supercalifragilisticexpialidocious is a very long word indeed",
    "a b c d e f g h i j k l m n o p q r s t u v w x y z",
    "Stop scrolling: this one JavaScript quirk trips up senior devs (Read caption)",
    "exactly-thirty-characters-long and more",
]


def has_unescaped_special(text: str) -> bool:
    """True if a backslash, quote or colon appears without an escaping backslash"""
    i = 0
    while i < len(text):
        char = text[i]
        if char == "\\":
            if i + 1 >= len(text):
                return True
            i += 2
            continue
        if char in ("'", ":"):
            return True
        i += 1
    return False


class TestWrapText:
    """Tests for greedy word wrapping."""

    def test_packs_words_within_limit(self) -> None:
        assert wrap_text("one two three four", 9) == ["one two", "three", "four"]

    def test_line_may_be_exactly_max(self) -> None:
        assert wrap_text("abcd efgh", 9) == ["abcd efgh"]

    def test_long_word_gets_own_line_unsplit(self) -> None:
        lines = wrap_text("hi supercalifragilistic there", 10)
        assert lines == ["hi", "supercalifragilistic", "there"]

    def test_empty_text(self) -> None:
        assert wrap_text("", 30) == []

    @pytest.mark.parametrize("text", SAMPLE_TEXTS)
    @pytest.mark.parametrize("width", [1, 5, 10, 25, 30])
    def test_line_lengths_and_word_order(self, text: str, width: int) -> None:
        lines = wrap_text(text, width)
        for line in lines:
            assert len(line) <= width or " " not in line
        assert " ".join(lines).split() == text.split()


class TestEscaping:
    """Tests for filter text escaping and quoting."""

    def test_escapes_each_special_char(self) -> None:
        assert escape_filter_text("LEVEL: Hard") == "LEVEL\\: Hard"
        assert escape_filter_text("it's") == "it\\'s"
        assert escape_filter_text("C:\\path") == "C\\:\\\\path"

    def test_plain_text_untouched(self) -> None:
        assert escape_filter_text("Read caption, now") == "Read caption, now"

    @pytest.mark.parametrize("text", [
        "it's: a \\ test",
        "\\\\",
        "'''",
        ":::",
        "trailing\\",
        "\\'",
        "already \\: escaped",
    ])
    def test_never_leaves_unescaped_special_chars(self, text: str) -> None:
        escaped = escape_filter_text(text)
        assert not has_unescaped_special(escaped)

    def test_escaping_twice_stays_safe(self) -> None:
        twice = escape_filter_text(escape_filter_text("a:b'c\\d"))
        assert not has_unescaped_special(twice)

    def test_quote_filter_value_wraps_embedded_quote(self) -> None:
        assert quote_filter_value("abc") == "'abc'"
        assert quote_filter_value("it\\'s") == "'it\\'\\''s'"


class TestFilterOps:
    """Tests for individual filter renderers."""

    def test_fill_frame(self) -> None:
        chain = FilterChain([], fill_frame(1080, 1920))
        assert chain.render() == "scale=1080:1920:force_original_aspect_ratio=increase,crop=1080:1920"

    def test_plain_scale_and_overlay(self) -> None:
        assert Scale(1080, 1920).render() == "scale=1080:1920"
        assert Overlay().render() == "overlay=0:0"
        assert Crop(10, 20).render() == "crop=10:20"

    def test_audio_ops(self) -> None:
        assert ATrim(7).render() == "atrim=0:7,asetpts=PTS-STARTPTS"
        assert AMix().render() == "amix=inputs=2:duration=shortest:dropout_transition=2"

    def test_drawtext_fade_ramp(self) -> None:
        text = DrawText(text="LEVEL: Hard", fontfile="/fonts/Arial Bold.ttf", fontsize=42,
                        fontcolor="#818cf8", y=840, borderw=2, appear_at=2.0, fade=0.3)
        rendered = text.render()

        assert rendered.startswith("drawtext=")
        assert "fontfile='/fonts/Arial Bold.ttf'" in rendered
        assert "text='LEVEL\\: Hard'" in rendered
        assert "y='840'" in rendered
        assert "enable='gte(t,2)'" in rendered
        assert "alpha='if(lt(t,2),0,if(lt(t,2.3),(t-2)/0.3,1))'" in rendered
        assert "borderw=2:bordercolor=black" in rendered

    def test_drawtext_hard_gate_has_no_alpha(self) -> None:
        rendered = DrawText(text="(Read caption)", fontfile="Inter.ttf", fontsize=40,
                            appear_at=4).render()
        assert "enable='gte(t,4)'" in rendered
        assert "alpha" not in rendered

    def test_drawtext_always_visible(self) -> None:
        rendered = DrawText(text="hello", fontfile="Inter.ttf", fontsize=60, y=830).render()
        assert "enable" not in rendered
        assert "borderw" not in rendered

    def test_drawtext_disables_expansion(self) -> None:
        rendered = DrawText(text="100% %{pts}", fontfile="Inter.ttf", fontsize=60).render()
        assert "expansion=none" in rendered

    def test_drawtext_quote_survives_graph_quoting(self) -> None:
        rendered = DrawText(text="don't", fontfile="Inter.ttf", fontsize=60).render()
        assert "text='don\\'\\''t'" in rendered


class TestFilterGraph:
    """Tests for chaining and labelling."""

    def test_chains_joined_with_semicolons(self) -> None:
        graph = (
            FilterGraph()
            .add(["1:v"], [Scale(1080, 1920)], "overlay")
            .add(["0:v", "overlay"], [Overlay(0, 0)], "video")
            .add(["2:a"], [ATrim(10)], "audio")
        )
        assert graph.render() == (
            "[1:v]scale=1080:1920[overlay];"
            "[0:v][overlay]overlay=0:0[video];"
            "[2:a]atrim=0:10,asetpts=PTS-STARTPTS[audio]"
        )

    def test_chain_without_output_label(self) -> None:
        assert FilterChain(["0:v"], [Crop(2, 2)]).render() == "[0:v]crop=2:2"


class TestLayout:
    """Tests for stacked line geometry."""

    def test_block_height(self) -> None:
        assert block_height(0, 60, 20) == 0
        assert block_height(1, 60, 20) == 60
        assert block_height(3, 60, 20) == 220

    def test_line_positions(self) -> None:
        assert line_positions(3, 60, 20, 100) == [100, 180, 260]
