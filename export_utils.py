"""
Write the generated package to disk: script text, voice-over audio and scene images.
"""
import io
import base64
from pathlib import Path

import requests
from PIL import Image

from audio_utils import decode, pcm_to_wav_bytes
from shorts_types import GeneratedImage, ScriptData, VoiceData

USER_AGENT = "AutoShorts/1.0 (scene image export)"


def format_script_text(script: ScriptData) -> str:
    return (
        f"{script.hook}\n\n{script.main_content}\n\n{script.ending}\n\n"
        f"Keywords: {', '.join(script.keywords)}"
    )


def save_script_text(script: ScriptData, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_script_text(script), encoding="utf-8")
    return path


def save_voiceover(voice: VoiceData, path: Path) -> Path:
    """Raw PCM (audio/pcm, 16-bit mono 24kHz) exactly as returned by TTS."""
    if not voice.audio_url:
        raise ValueError("Voice-over has no audio to save")
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(decode(voice.audio_url))
    return path


def save_voiceover_wav(voice: VoiceData, path: Path) -> Path:
    if not voice.audio_url:
        raise ValueError("Voice-over has no audio to save")
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(pcm_to_wav_bytes(decode(voice.audio_url)))
    return path


def load_image_bytes(url: str) -> bytes:
    """Bytes behind a data URI or a remote http(s) URL."""
    if url.startswith("data:"):
        header, _, payload = url.partition(",")
        if ";base64" not in header:
            raise ValueError("Only base64 data URIs are supported")
        return base64.b64decode(payload)
    resp = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=30)
    resp.raise_for_status()
    return resp.content


def save_scene_images(images: list[GeneratedImage], out_dir: Path) -> list[Path]:
    """Save images as scene-1.png, scene-2.png, ... in storyboard order."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for i, image in enumerate(images, start=1):
        path = out_dir / f"scene-{i}.png"
        img = Image.open(io.BytesIO(load_image_bytes(image.url)))
        img.save(path, "PNG")
        paths.append(path)
    return paths


def export_package(script: ScriptData | None, images: list[GeneratedImage], voice: VoiceData | None,
                   out_dir: Path) -> list[Path]:
    """Write every asset that exists; returns the written paths."""
    out_dir = Path(out_dir)
    written: list[Path] = []
    if script is not None:
        written.append(save_script_text(script, out_dir / "script.txt"))
    if voice is not None and voice.audio_url:
        written.append(save_voiceover(voice, out_dir / "voiceover.pcm"))
        written.append(save_voiceover_wav(voice, out_dir / "voiceover.wav"))
    written.extend(save_scene_images(images, out_dir))
    for path in written:
        print(f"[EXPORT] Saved: {path}")
    return written
