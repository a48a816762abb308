"""
Configuration settings for short generation.
Environment values come from .env; Config holds the generation constants.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Provider and model selection (from .env); used by llm_utils
# TEXT_PROVIDER / IMAGE_PROVIDER / TTS_PROVIDER: "google" or "openai"
TEXT_PROVIDER = os.getenv("TEXT_PROVIDER", "google").lower()
IMAGE_PROVIDER = os.getenv("IMAGE_PROVIDER", "google").lower()
TTS_PROVIDER = os.getenv("TTS_PROVIDER", "google").lower()

TEXT_MODEL_GOOGLE = os.getenv("TEXT_MODEL_GOOGLE", "gemini-3-flash-preview")
IMAGE_MODEL_GOOGLE = os.getenv("IMAGE_MODEL_GOOGLE", "gemini-2.5-flash-image")
TTS_MODEL_GOOGLE = os.getenv("TTS_MODEL_GOOGLE", "gemini-2.5-flash-preview-tts")

TEXT_MODEL_OPENAI = os.getenv("TEXT_MODEL_OPENAI", "gpt-5.2")
IMAGE_MODEL_OPENAI = os.getenv("IMAGE_MODEL_OPENAI", "gpt-image-1.5")
TTS_MODEL_OPENAI = os.getenv("TTS_MODEL_OPENAI", "gpt-4o-mini-tts")
TTS_VOICE_OPENAI = os.getenv("TTS_VOICE_OPENAI", "onyx")

# Mock account / session storage (single JSON file)
STORE_PATH = Path(os.getenv("AUTOSHORTS_STORE_PATH", ".autoshorts/store.json"))

DEBUG = os.getenv("DEBUG", "").lower() in ("1", "true", "yes")


class Config:
    # Retry settings (transient backend errors only)
    max_retries = 2              # Extra attempts after the first call (3 tries total)
    retry_backoff_seconds = 1.0  # Fixed wait between attempts

    # Script timing
    words_per_second = 2.5       # Narration pace used for estimated_duration

    # Scene count: 8 for short scripts, 10 for long ones, 9 otherwise
    short_script_seconds = 20
    long_script_seconds = 45
    short_script_scenes = 8
    default_scenes = 9
    long_script_scenes = 10
    fallback_duration = 30       # Used for coverage when no script exists yet

    # Image settings
    aspect_ratio = "9:16"
    default_style = "Cinematic"

    # Voice settings (TTS returns 16-bit mono PCM at 24kHz)
    default_voice = "Kore"
    sample_rate = 24000
    num_channels = 1

    # Entitlements
    starting_credits = 3
    premium_credits = 999999
