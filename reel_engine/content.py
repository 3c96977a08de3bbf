import json
import re
from typing import Optional

from openai import AsyncOpenAI
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config import ReelConfig
from .errors import ParseError
from .prompts import CODING_CHALLENGE_PROMPT, MAIN_TEXT_PROMPT, VARIATION_INSTRUCTION


# --- DATA MODELS ---

class ContentSnippet(BaseModel):
    """Coding challenge content for one reel"""
    model_config = ConfigDict(frozen=True)

    code: str
    difficulty: str
    caption: str


class HookBundle(BaseModel):
    """Read caption content for one reel"""
    model_config = ConfigDict(frozen=True)

    hook: str = Field(description="Curiosity hook ending with (Read caption), no emojis")
    caption: str = Field(description="Full long-form caption with emojis and numbered bullets")
    cta: str = Field(description="Comment keyword CTA line")


def _client(config: ReelConfig, client: Optional[AsyncOpenAI]) -> AsyncOpenAI:
    api_key = config.require_api_key()
    return client or AsyncOpenAI(api_key=api_key)


def strip_code_fences(text: str) -> str:
    """Remove ```json / ``` wrapping that models like to add around JSON"""
    text = text.strip()
    text = re.sub(r"```json\n?", "", text)
    text = re.sub(r"```\n?", "", text)
    return text.strip()


def parse_snippet(text: str) -> ContentSnippet:
    cleaned = strip_code_fences(text)
    try:
        return ContentSnippet.model_validate(json.loads(cleaned))
    except (json.JSONDecodeError, ValidationError) as e:
        raise ParseError(f"Model reply is not a valid snippet: {e}") from e


async def generate_snippet(config: ReelConfig, client: Optional[AsyncOpenAI] = None) -> ContentSnippet:
    """Ask the model for a code challenge (free text, parsed as JSON)"""
    client = _client(config, client)
    print("🤖 Generating code snippet...")

    response = await client.chat.completions.create(
        model=config.snippet_model,
        messages=[{"role": "user", "content": CODING_CHALLENGE_PROMPT}],
        max_tokens=config.snippet_max_tokens,
        temperature=config.snippet_temperature,
    )
    content = response.choices[0].message.content or ""
    snippet = parse_snippet(content)
    print(f"✨ Snippet generated (difficulty: {snippet.difficulty})")
    return snippet


async def generate_hook_bundle(config: ReelConfig, client: Optional[AsyncOpenAI] = None) -> HookBundle:
    """Ask the model for hook + caption + cta as schema-validated output.

    A variation instruction is appended and sampling runs hot so consecutive
    runs don't produce the same hook. Nothing is deduplicated against
    previous runs.
    """
    client = _client(config, client)
    print("🤖 Generating hook and caption...")

    response = await client.chat.completions.parse(
        model=config.hook_model,
        messages=[{"role": "user", "content": MAIN_TEXT_PROMPT + VARIATION_INSTRUCTION}],
        response_format=HookBundle,
        temperature=config.hook_temperature,
    )
    message = response.choices[0].message
    if message.refusal:
        raise ParseError(f"Model refused to generate captions: {message.refusal}")
    if message.parsed is None:
        raise ParseError("Model reply did not match the hook/caption/cta schema")

    bundle = message.parsed
    print(f"✨ Hook: {bundle.hook}")
    return bundle
