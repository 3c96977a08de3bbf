"""Tests for the HTTP endpoints."""

import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

import main
from reel_engine.content import ContentSnippet
from reel_engine.errors import ConfigurationError, SegmentExtractionError
from reel_engine.pipelines import CodingChallengeResult, ReadCaptionResult


@pytest.fixture
def client() -> TestClient:
    return TestClient(main.app)


def pipeline_returning(result=None, error=None) -> MagicMock:
    pipeline = MagicMock()
    pipeline.return_value.run = AsyncMock(return_value=result, side_effect=error)
    return pipeline


def workspace(*parts: str) -> str:
    return os.path.join(main.config.output_root, *parts)


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "message": "Server is running"}


class TestCodingChallengeEndpoint:
    """Tests for POST /api/generate/coding-challenge."""

    def test_success_shape(self, client: TestClient) -> None:
        folder = "output_20260309_070501"
        result = CodingChallengeResult(
            output_dir=workspace(folder),
            video_path=workspace(folder, "reel.mp4"),
            caption_path=workspace(folder, "caption.txt"),
            image_path=workspace(folder, "snippet.png"),
            broll_segment_path=workspace(folder, "broll_segment.mp4"),
            audio_path="audio/track.mp3",
            snippet=ContentSnippet(code="console.log(0.1 + 0.2);", difficulty="Easy", caption="Guess!"),
        )
        with patch("main.CodingChallengePipeline", new=pipeline_returning(result)) as pipeline:
            response = client.post("/api/generate/coding-challenge")

        pipeline.assert_called_once_with(main.config)
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        data = body["data"]
        assert data["outputDir"] == folder
        assert data["videoPath"] == f"{folder}/reel.mp4"
        assert data["videoUrl"] == f"http://testserver/{folder}/reel.mp4"
        assert data["captionUrl"] == f"http://testserver/{folder}/caption.txt"
        assert data["imagePath"] == f"{folder}/snippet.png"
        assert data["imageUrl"] == f"http://testserver/{folder}/snippet.png"
        assert data["snippet"] == {"difficulty": "Easy", "code": "console.log(0.1 + 0.2);", "caption": "Guess!"}

    def test_failure_is_500_with_message(self, client: TestClient) -> None:
        error = ConfigurationError("Missing OPENAI_API_KEY. Set it in the environment or .env file.")
        with patch("main.CodingChallengePipeline", new=pipeline_returning(error=error)):
            response = client.post("/api/generate/coding-challenge")

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": str(error)}


class TestReadCaptionEndpoint:
    """Tests for POST /api/generate/read-caption."""

    def test_success_shape(self, client: TestClient) -> None:
        folder = "output_2026-03-09_07-05-01"
        result = ReadCaptionResult(
            output_folder=workspace(folder),
            video_path=workspace(folder, "reel.mp4"),
            caption_path=workspace(folder, "caption.txt"),
            hook="3 habits of devs who ship",
            caption="1. ...",
            cta="Comment SHIP",
        )
        with patch("main.ReadCaptionPipeline", new=pipeline_returning(result)):
            response = client.post("/api/generate/read-caption")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data == {
            "outputFolder": folder,
            "videoPath": f"{folder}/reel.mp4",
            "videoUrl": f"http://testserver/{folder}/reel.mp4",
            "captionPath": f"{folder}/caption.txt",
            "captionUrl": f"http://testserver/{folder}/caption.txt",
            "hook": "3 habits of devs who ship",
            "caption": "1. ...",
            "cta": "Comment SHIP",
        }

    def test_failure_is_500_with_message(self, client: TestClient) -> None:
        error = SegmentExtractionError("Resize failed: Conversion failed!")
        with patch("main.ReadCaptionPipeline", new=pipeline_returning(error=error)):
            response = client.post("/api/generate/read-caption")

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Resize failed: Conversion failed!"}
