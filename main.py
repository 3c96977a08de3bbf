import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from reel_engine.config import ReelConfig
from reel_engine.ffmpeg import ensure_ffmpeg
from reel_engine.pipelines import CodingChallengePipeline, ReadCaptionPipeline

config = ReelConfig.from_env()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # refuse to start with an ffmpeg that cannot draw the reel text
    await ensure_ffmpeg(config.ffmpeg_path or None)
    yield


app = FastAPI(title="Code Reel Engine", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- PATH HELPERS ---

def normalize_path(path: str) -> str:
    """Path relative to the output root, with forward slashes"""
    rel = os.path.relpath(os.path.normpath(path), os.path.normpath(config.output_root))
    return rel.replace(os.sep, "/")


def file_url(path: str, request: Request) -> str:
    return f"{request.base_url}{normalize_path(path)}"


def error_response(e: Exception, fallback: str) -> JSONResponse:
    return JSONResponse(status_code=500, content={"success": False, "error": str(e) or fallback})


# --- API ENDPOINTS ---

@app.get("/health")
async def health():
    return {"status": "ok", "message": "Server is running"}


@app.post("/api/generate/coding-challenge")
async def generate_coding_challenge(request: Request):
    """Run the coding challenge pipeline to completion and return the manifest"""
    try:
        print("📹 Generating coding challenge reel...")
        result = await CodingChallengePipeline(config).run()
    except Exception as e:
        print(f"❌ Error generating coding challenge reel: {e}")
        return error_response(e, "Failed to generate coding challenge reel")

    return {
        "success": True,
        "message": "Coding challenge reel generated successfully",
        "data": {
            "outputDir": normalize_path(result.output_dir),
            "videoPath": normalize_path(result.video_path),
            "videoUrl": file_url(result.video_path, request),
            "captionPath": normalize_path(result.caption_path),
            "captionUrl": file_url(result.caption_path, request),
            "imagePath": normalize_path(result.image_path),
            "imageUrl": file_url(result.image_path, request),
            "snippet": {
                "difficulty": result.snippet.difficulty,
                "code": result.snippet.code,
                "caption": result.snippet.caption,
            },
        },
    }


@app.post("/api/generate/read-caption")
async def generate_read_caption(request: Request):
    """Run the read caption pipeline to completion and return the manifest"""
    try:
        print("📹 Generating read caption reel...")
        result = await ReadCaptionPipeline(config).run()
    except Exception as e:
        print(f"❌ Error generating read caption reel: {e}")
        return error_response(e, "Failed to generate read caption reel")

    return {
        "success": True,
        "message": "Read caption reel generated successfully",
        "data": {
            "outputFolder": normalize_path(result.output_folder),
            "videoPath": normalize_path(result.video_path),
            "videoUrl": file_url(result.video_path, request),
            "captionPath": normalize_path(result.caption_path),
            "captionUrl": file_url(result.caption_path, request),
            "hook": result.hook,
            "caption": result.caption,
            "cta": result.cta,
        },
    }


# Generated reels are served from the output root; mounted last so the API routes win
app.mount("/", StaticFiles(directory=config.output_root, check_dir=False), name="outputs")


if __name__ == "__main__":
    print(f"🚀 Server running on port {config.port}")
    print(f"📍 Health check: http://localhost:{config.port}/health")
    print(f"📹 Coding Challenge: POST http://localhost:{config.port}/api/generate/coding-challenge")
    print(f"📹 Read Caption: POST http://localhost:{config.port}/api/generate/read-caption")
    uvicorn.run(app, host="0.0.0.0", port=config.port)
