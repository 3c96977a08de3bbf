"""Shared fixtures: a config pointing at throwaway inputs, fake OpenAI replies."""

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from reel_engine.config import ReelConfig


@pytest.fixture
def broll_path(tmp_path: Path) -> Path:
    path = tmp_path / "bRoll.mov"
    path.write_bytes(b"fake video")
    return path


@pytest.fixture
def audio_dir(tmp_path: Path) -> Path:
    path = tmp_path / "audio"
    path.mkdir()
    (path / "track.mp3").write_bytes(b"fake audio")
    return path


@pytest.fixture
def output_root(tmp_path: Path) -> Path:
    path = tmp_path / "out"
    path.mkdir()
    return path


@pytest.fixture
def reel_config(broll_path: Path, audio_dir: Path, output_root: Path) -> ReelConfig:
    return ReelConfig(
        openai_api_key="test-key",
        broll_path=str(broll_path),
        audio_dir=str(audio_dir),
        output_root=str(output_root),
    )


def chat_reply(content: str) -> SimpleNamespace:
    """Shape of an openai chat completion with one text choice"""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def parsed_reply(parsed, refusal=None) -> SimpleNamespace:
    """Shape of an openai structured-output completion"""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(parsed=parsed, refusal=refusal))]
    )


@pytest.fixture
def fake_openai() -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock()
    client.chat.completions.parse = AsyncMock()
    return client
