"""
Helpers for the raw PCM audio returned by the TTS backends.
Speech comes back as base64 signed 16-bit little-endian PCM (mono, 24kHz).
"""
import io
import wave
import base64
from dataclasses import dataclass

import numpy as np

from config import Config

SAMPLE_RATE = Config.sample_rate
NUM_CHANNELS = Config.num_channels
SAMPLE_WIDTH = 2  # bytes per 16-bit sample


@dataclass
class AudioBuffer:
    """Deinterleaved float samples in [-1.0, 1.0]; channels has shape (num_channels, frames)."""

    channels: np.ndarray
    sample_rate: int

    @property
    def number_of_channels(self) -> int:
        return self.channels.shape[0]

    @property
    def length(self) -> int:
        """Frame count."""
        return self.channels.shape[1]

    @property
    def duration(self) -> float:
        return self.length / self.sample_rate

    def get_channel_data(self, channel: int) -> np.ndarray:
        return self.channels[channel]


def decode(b64: str) -> bytes:
    """Standard base64 decode."""
    return base64.b64decode(b64)


def decode_audio_data(data: bytes, sample_rate: int, num_channels: int) -> AudioBuffer:
    """
    Interpret data as signed 16-bit little-endian PCM and split it into channels.

    Each sample is normalized as sample / 32768.0. Frame count is
    total_samples // num_channels; a trailing odd byte and any samples that do not
    fill a whole frame are dropped.
    """
    if num_channels < 1:
        raise ValueError(f"num_channels must be >= 1, got {num_channels}")
    usable = len(data) - (len(data) % SAMPLE_WIDTH)
    samples = np.frombuffer(data[:usable], dtype="<i2")
    frame_count = len(samples) // num_channels
    frames = samples[: frame_count * num_channels].reshape(frame_count, num_channels)
    channels = (frames.T.astype(np.float64) / 32768.0).astype(np.float32)
    return AudioBuffer(channels=channels, sample_rate=sample_rate)


def pcm_to_wav_bytes(data: bytes, sample_rate: int = SAMPLE_RATE, num_channels: int = NUM_CHANNELS) -> bytes:
    """Wrap raw 16-bit PCM in a WAV container so ordinary players can open it."""
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wav:
        wav.setnchannels(num_channels)
        wav.setsampwidth(SAMPLE_WIDTH)
        wav.setframerate(sample_rate)
        wav.writeframes(data[: len(data) - (len(data) % (SAMPLE_WIDTH * num_channels))])
    return buf.getvalue()
