"""
Content generation client: script, scene prompts, images and speech.
Every backend call goes through retry_utils.with_retry individually.
"""
import json
import math
import base64
from dataclasses import replace

import llm_utils
import prompt_builders
from audio_utils import decode, decode_audio_data
from config import Config
from constants import voice_label
from llm_utils import MalformedResponseError, clean_json_response
from retry_utils import with_retry
from schemas import SCENE_PROMPTS_SCHEMA, SCRIPT_SCHEMA
from shorts_types import ScriptData, VoiceData


def count_words(text: str) -> int:
    return len(text.split())


def estimate_duration(text: str) -> int:
    """Seconds of narration at Config.words_per_second, rounded up."""
    return math.ceil(count_words(text) / Config.words_per_second)


def recommended_scene_count(estimated_duration: int) -> int:
    """8 scenes for short scripts, 10 for long ones, 9 otherwise."""
    if estimated_duration < Config.short_script_seconds:
        return Config.short_script_scenes
    if estimated_duration > Config.long_script_seconds:
        return Config.long_script_scenes
    return Config.default_scenes


def narration_text(script: ScriptData) -> str:
    """Text sent to TTS; the ' . ' separators give the voice a beat between sections."""
    return f"{script.hook} . {script.main_content} . {script.ending}"


def _parse_json(text: str, what: str):
    try:
        return json.loads(clean_json_response(text))
    except ValueError as e:
        raise MalformedResponseError(f"Could not parse {what} JSON from backend: {e}") from e


def parse_script(text: str) -> ScriptData:
    """Build ScriptData from the backend's structured output and compute its duration."""
    data = _parse_json(text, "script")
    if not isinstance(data, dict):
        raise MalformedResponseError(f"Expected a script object, got {type(data).__name__}")
    missing = [k for k in ("hook", "mainContent", "ending") if not isinstance(data.get(k), str)]
    if missing:
        raise MalformedResponseError(f"Script response missing fields: {missing}")
    keywords = data.get("keywords") or []
    if not isinstance(keywords, list):
        raise MalformedResponseError("Script 'keywords' must be an array of strings")
    script = ScriptData(
        hook=data["hook"],
        main_content=data["mainContent"],
        ending=data["ending"],
        keywords=[str(k) for k in keywords],
    )
    return replace(script, estimated_duration=estimate_duration(script.full_text))


def parse_scene_prompts(text: str) -> list[str]:
    data = _parse_json(text, "scene prompts")
    if not isinstance(data, list) or not all(isinstance(p, str) for p in data):
        raise MalformedResponseError("Scene prompts response is not a JSON array of strings")
    return data


async def generate_script(niche: str) -> ScriptData:
    """Generate a structured Shorts script for the niche."""
    if not niche or not niche.strip():
        raise ValueError("A niche is required to generate a script")

    async def _call() -> ScriptData:
        text = await llm_utils.generate_text(
            prompt_builders.build_script_prompt(niche),
            response_json_schema=SCRIPT_SCHEMA,
        )
        return parse_script(text)

    script = await with_retry(_call)
    print(f"[SCRIPT] Generated script for '{niche}' (~{script.estimated_duration}s, {len(script.keywords)} keywords)")
    return script


async def generate_scene_prompts(script: ScriptData) -> list[str]:
    """Request recommended_scene_count purely visual scene descriptions for the script."""
    if script is None:
        raise ValueError("A script is required to generate scene prompts")
    scene_count = recommended_scene_count(script.estimated_duration)

    async def _call() -> list[str]:
        text = await llm_utils.generate_text(
            prompt_builders.build_scene_prompts_prompt(
                script.hook, script.main_content, script.ending, scene_count,
            ),
            response_json_schema=SCENE_PROMPTS_SCHEMA,
        )
        return parse_scene_prompts(text)

    prompts = await with_retry(_call)
    print(f"[IMAGES] Received {len(prompts)} scene prompt(s) (requested {scene_count})")
    return prompts


async def generate_image(prompt: str, style: str) -> str:
    """Generate one 9:16 image; returns a data URI."""
    if not prompt or not prompt.strip():
        raise ValueError("An image prompt is required")

    async def _call() -> str:
        img_bytes, mime_type = await llm_utils.generate_image(
            prompt_builders.build_image_prompt(prompt, style),
            aspect_ratio=Config.aspect_ratio,
        )
        return f"data:{mime_type};base64,{base64.b64encode(img_bytes).decode('ascii')}"

    return await with_retry(_call)


async def generate_speech(text: str, voice_name: str) -> str:
    """Generate narration audio; returns base64 raw PCM."""
    if not text or not text.strip():
        raise ValueError("Narration text is required")

    async def _call() -> str:
        pcm = await llm_utils.generate_speech(text, voice_name)
        return base64.b64encode(pcm).decode("ascii")

    return await with_retry(_call)


async def generate_voice(script: ScriptData, voice_name: str) -> VoiceData:
    """Narrate the whole script and measure the real audio duration."""
    if script is None:
        raise ValueError("A script is required to generate a voice-over")
    audio_b64 = await generate_speech(narration_text(script), voice_name)
    buffer = decode_audio_data(decode(audio_b64), Config.sample_rate, Config.num_channels)
    print(f"[VOICE] Generated {buffer.duration:.1f}s voice-over with {voice_name}")
    return VoiceData(
        voice_name=voice_label(voice_name),
        audio_url=audio_b64,
        speed=1.0,
        duration=buffer.duration,
    )
