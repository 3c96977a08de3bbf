import argparse
import asyncio
import json
from dataclasses import asdict
from typing import List, Optional

from .config import ReelConfig
from .pipelines import CodingChallengePipeline, ReadCaptionPipeline

PIPELINES = {
    "coding-challenge": CodingChallengePipeline,
    "read-caption": ReadCaptionPipeline,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="reel_engine", description="Generate one reel")
    parser.add_argument("kind", choices=sorted(PIPELINES), help="Which reel to generate")
    parser.add_argument("--env-file", default=None, help="Path to a .env file (default: search upwards)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = ReelConfig.from_env(args.env_file)
    pipeline = PIPELINES[args.kind](config)

    try:
        result = asyncio.run(pipeline.run())
    except Exception as e:
        print(f"Error: {e}")
        return 1

    print(json.dumps(asdict(result), indent=2, default=lambda o: o.model_dump()))
    return 0
