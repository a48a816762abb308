"""
Unified LLM utilities for text, image and speech generation.
Dispatches to Google (Gemini) or OpenAI based on .env TEXT_PROVIDER / IMAGE_PROVIDER / TTS_PROVIDER.

.env variables (see config.py for defaults):
  TEXT_PROVIDER, IMAGE_PROVIDER, TTS_PROVIDER - "google" or "openai" (default: google)
  TEXT_MODEL_GOOGLE, IMAGE_MODEL_GOOGLE, TTS_MODEL_GOOGLE
  TEXT_MODEL_OPENAI, IMAGE_MODEL_OPENAI, TTS_MODEL_OPENAI, TTS_VOICE_OPENAI
  GOOGLE_API_KEY     - Required for Google (GEMINI_API_KEY and API_KEY also supported)
  OPENAI_API_KEY     - Required for OpenAI

All calls are coroutines. Server (5xx) and transport failures from either SDK are
re-raised as TransientGenerationError so callers can decide what to retry.
"""

import os
import json
import base64
from typing import Any

import httpx

from config import (
    TEXT_PROVIDER,
    IMAGE_PROVIDER,
    TTS_PROVIDER,
    TEXT_MODEL_GOOGLE,
    IMAGE_MODEL_GOOGLE,
    TTS_MODEL_GOOGLE,
    TEXT_MODEL_OPENAI,
    IMAGE_MODEL_OPENAI,
    TTS_MODEL_OPENAI,
    TTS_VOICE_OPENAI,
    DEBUG,
)

PROVIDERS = ("google", "openai")

# OpenAI image sizes closest to each aspect ratio
OPENAI_IMAGE_SIZES = {
    "9:16": "1024x1536",
    "16:9": "1536x1024",
    "1:1": "1024x1024",
}

OPENAI_VOICES = frozenset([
    "alloy", "ash", "ballad", "coral", "echo", "fable", "nova", "onyx", "sage", "shimmer", "verse",
])


class GenerationError(RuntimeError):
    """Base class for failures reported by the generation backend."""


class TransientGenerationError(GenerationError):
    """Server-side or transport failure; safe to retry."""


class MalformedResponseError(GenerationError):
    """Backend answered but the payload is unusable (bad JSON, missing image/audio)."""


def _log(msg: str) -> None:
    if DEBUG:
        print(f"[LLM] {msg}")


def is_transient_error(exc: BaseException) -> bool:
    """True for errors the transport layer classified as transient."""
    return isinstance(exc, TransientGenerationError)


def _transient_error_types() -> tuple[type[BaseException], ...]:
    from google.genai import errors as genai_errors
    import openai
    return (
        genai_errors.ServerError,
        httpx.TransportError,
        openai.InternalServerError,
        openai.APIConnectionError,
    )


def _raise_if_transient(exc: Exception) -> None:
    """Re-raise SDK server/transport errors as TransientGenerationError; leave others alone."""
    if isinstance(exc, TransientGenerationError):
        return
    if isinstance(exc, _transient_error_types()):
        raise TransientGenerationError(f"{type(exc).__name__}: {exc}") from exc


def _resolve_provider(provider: str | None, default: str, env_name: str) -> str:
    prov = (provider or default).lower()
    if prov not in PROVIDERS:
        raise ValueError(
            f"{env_name} must be 'google' or 'openai'. Got: {prov}. "
            f"Set {env_name} in .env or pass provider=."
        )
    return prov


def _google_client():
    api_key = os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
    if not api_key:
        raise ValueError(
            "GOOGLE_API_KEY or GEMINI_API_KEY is not set. Set one in .env for Google (Gemini). "
            "You can create an API key in Google AI Studio."
        )
    from google import genai
    return genai.Client(api_key=api_key)


def _openai_client():
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise ValueError("OPENAI_API_KEY is not set. Set it in .env for OpenAI.")
    from openai import AsyncOpenAI
    return AsyncOpenAI(api_key=api_key)


def get_text_model_display() -> str:
    """Return a short string for logging: provider / model (e.g. 'google / gemini-3-flash-preview')."""
    prov = TEXT_PROVIDER.lower()
    model = TEXT_MODEL_OPENAI if prov == "openai" else TEXT_MODEL_GOOGLE
    return f"{prov} / {model}"


def clean_json_response(content: str) -> str:
    """Remove markdown code blocks from JSON response."""
    content = content.strip()
    if content.startswith("```json"):
        content = content[7:]
    elif content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    return content.strip()


def _ensure_openai_schema(schema: dict) -> dict:
    """Ensure schema has additionalProperties: false for OpenAI Structured Outputs."""
    if schema.get("type") != "object":
        return schema
    result = dict(schema)
    if "additionalProperties" not in result:
        result["additionalProperties"] = False
    if "properties" in result:
        result["properties"] = {
            k: _ensure_openai_schema(v) if isinstance(v, dict) else v
            for k, v in result["properties"].items()
        }
    return result


def _wrap_array_schema(schema: dict) -> dict:
    """OpenAI Structured Outputs need an object at the root; nest arrays under 'items'."""
    inner = {k: v for k, v in schema.items() if k != "title"}
    return {
        "type": "object",
        "title": schema.get("title", "response"),
        "properties": {"items": inner},
        "required": ["items"],
    }


def _first_inline_data(response: Any):
    """Return the first inline_data blob in the first candidate, or None."""
    candidates = getattr(response, "candidates", None)
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        inline = getattr(part, "inline_data", None)
        if inline is not None and getattr(inline, "data", None):
            return inline
    return None


async def generate_text(
    prompt: str,
    response_json_schema: dict | None = None,
    model: str | None = None,
    provider: str | None = None,
    temperature: float = 0.7,
) -> str:
    """
    Generate text for a single user prompt using Google Gemini or OpenAI.

    Args:
        prompt: The user prompt.
        response_json_schema: Optional JSON schema for structured output. For Google it is passed
            as response_json_schema in the config; for OpenAI as a strict json_schema response_format
            (array schemas are wrapped in an object and unwrapped again).
        model: Model name; if None, use env TEXT_MODEL_GOOGLE or TEXT_MODEL_OPENAI.
        provider: "google" or "openai"; if None, use env TEXT_PROVIDER.
        temperature: Sampling temperature.

    Returns:
        The model reply as a single string (JSON text when a schema is given).
    """
    prov = _resolve_provider(provider, TEXT_PROVIDER, "TEXT_PROVIDER")

    if prov == "openai":
        client = _openai_client()
        model_name = model or TEXT_MODEL_OPENAI
        req: dict[str, Any] = {
            "model": model_name,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
        }
        wrapped = False
        if response_json_schema is not None:
            schema = response_json_schema
            if schema.get("type") == "array":
                schema = _wrap_array_schema(schema)
                wrapped = True
            openai_schema = _ensure_openai_schema(schema)
            req["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": openai_schema.get("title", "response"),
                    "strict": True,
                    "schema": openai_schema,
                },
            }
        _log(f"openai text request: model={model_name}")
        try:
            response = await client.chat.completions.create(**req)
        except Exception as e:
            _raise_if_transient(e)
            raise
        text = response.choices[0].message.content or ""
        if not text:
            raise MalformedResponseError("OpenAI returned empty text.")
        if wrapped:
            try:
                text = json.dumps(json.loads(clean_json_response(text))["items"])
            except (ValueError, KeyError, TypeError) as e:
                raise MalformedResponseError(f"OpenAI array response is not wrapped in 'items': {e}") from e
        return text

    # Google Gemini (google.genai SDK)
    from google.genai import types
    client = _google_client()
    model_name = model or TEXT_MODEL_GOOGLE
    config_kw: dict[str, Any] = {"temperature": temperature}
    if response_json_schema is not None:
        config_kw["response_mime_type"] = "application/json"
        config_kw["response_json_schema"] = response_json_schema
    _log(f"google text request: model={model_name}")
    try:
        response = await client.aio.models.generate_content(
            model=model_name,
            contents=prompt,
            config=types.GenerateContentConfig(**config_kw),
        )
    except Exception as e:
        _raise_if_transient(e)
        raise
    text = getattr(response, "text", None) or ""
    if not text:
        raise MalformedResponseError("Google Gemini returned empty text. The model may have blocked the response.")
    return text


async def generate_image(
    prompt: str,
    aspect_ratio: str = "9:16",
    model: str | None = None,
    provider: str | None = None,
    **kwargs: Any,
) -> tuple[bytes, str]:
    """
    Generate one image from a text prompt using Google or OpenAI.

    Returns:
        (image bytes, mime type) of the first image in the response.
    """
    prov = _resolve_provider(provider, IMAGE_PROVIDER, "IMAGE_PROVIDER")

    if prov == "openai":
        client = _openai_client()
        model_name = model or IMAGE_MODEL_OPENAI
        req_kwargs: dict[str, Any] = {
            "model": model_name,
            "prompt": prompt,
            "size": OPENAI_IMAGE_SIZES.get(aspect_ratio, "1024x1024"),
            "n": 1,
            **kwargs,
        }
        # response_format is only accepted by dall-e models; GPT image models always return base64
        if model_name.lower().startswith("dall-e-"):
            req_kwargs["response_format"] = "b64_json"
        else:
            req_kwargs.setdefault("moderation", "low")
        _log(f"openai image request: model={model_name} size={req_kwargs['size']}")
        try:
            resp = await client.images.generate(**req_kwargs)
        except Exception as e:
            _raise_if_transient(e)
            raise
        b64_data = getattr(resp.data[0], "b64_json", None) if resp.data else None
        if not b64_data:
            raise MalformedResponseError("OpenAI image response had no b64_json")
        return base64.b64decode(b64_data), "image/png"

    from google.genai import types
    client = _google_client()
    model_name = model or IMAGE_MODEL_GOOGLE
    _log(f"google image request: model={model_name} aspect_ratio={aspect_ratio}")
    try:
        response = await client.aio.models.generate_content(
            model=model_name,
            contents=prompt,
            config=types.GenerateContentConfig(
                image_config=types.ImageConfig(aspect_ratio=aspect_ratio),
            ),
        )
    except Exception as e:
        _raise_if_transient(e)
        raise
    inline = _first_inline_data(response)
    if inline is None:
        raise MalformedResponseError("No image data returned from Gemini")
    return inline.data, getattr(inline, "mime_type", None) or "image/png"


async def generate_speech(
    text: str,
    voice_name: str,
    model: str | None = None,
    provider: str | None = None,
) -> bytes:
    """
    Generate narration audio as raw 16-bit mono PCM at 24kHz.

    Args:
        text: Narration text.
        voice_name: Gemini prebuilt voice (e.g. "Kore"). For OpenAI, names outside its voice list
            fall back to TTS_VOICE_OPENAI.
        model: Model name; if None, use env TTS_MODEL_GOOGLE or TTS_MODEL_OPENAI.
        provider: "google" or "openai"; if None, use env TTS_PROVIDER.
    """
    prov = _resolve_provider(provider, TTS_PROVIDER, "TTS_PROVIDER")

    if prov == "openai":
        client = _openai_client()
        model_name = model or TTS_MODEL_OPENAI
        voice = voice_name.lower() if voice_name.lower() in OPENAI_VOICES else TTS_VOICE_OPENAI
        _log(f"openai speech request: model={model_name} voice={voice}")
        try:
            response = await client.audio.speech.create(
                model=model_name,
                voice=voice,
                input=text,
                response_format="pcm",
            )
        except Exception as e:
            _raise_if_transient(e)
            raise
        audio = response.content
        if not audio:
            raise MalformedResponseError("No audio data returned")
        return audio

    from google.genai import types
    client = _google_client()
    model_name = model or TTS_MODEL_GOOGLE
    _log(f"google speech request: model={model_name} voice={voice_name}")
    try:
        response = await client.aio.models.generate_content(
            model=model_name,
            contents=text,
            config=types.GenerateContentConfig(
                response_modalities=["AUDIO"],
                speech_config=types.SpeechConfig(
                    voice_config=types.VoiceConfig(
                        prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice_name),
                    ),
                ),
            ),
        )
    except Exception as e:
        _raise_if_transient(e)
        raise
    inline = _first_inline_data(response)
    if inline is None:
        raise MalformedResponseError("No audio data returned")
    return inline.data
