"""
Data types shared by the generation steps.
Dict conversion uses the camelCase keys stored in session files and returned by the backend.
"""
from dataclasses import dataclass, field, replace
from enum import Enum


class Step(Enum):
    """Wizard steps, in navigation order."""

    AUTH = "AUTH"
    WELCOME = "WELCOME"
    NICHE_SELECTION = "NICHE_SELECTION"
    SCRIPT_GENERATION = "SCRIPT_GENERATION"
    IMAGE_GENERATOR = "IMAGE_GENERATOR"
    VOICE_GENERATOR = "VOICE_GENERATOR"
    DOWNLOAD = "DOWNLOAD"


@dataclass(frozen=True)
class ScriptData:
    """A generated short script. estimated_duration is in seconds."""

    hook: str
    main_content: str
    ending: str
    keywords: list[str] = field(default_factory=list)
    estimated_duration: int = 0

    @property
    def full_text(self) -> str:
        return f"{self.hook} {self.main_content} {self.ending}"

    def with_edits(self, **changes) -> "ScriptData":
        """Return a copy with edited text fields; the measured duration is kept."""
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "hook": self.hook,
            "mainContent": self.main_content,
            "ending": self.ending,
            "keywords": list(self.keywords),
            "estimatedDuration": self.estimated_duration,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ScriptData":
        return cls(
            hook=data.get("hook", ""),
            main_content=data.get("mainContent", ""),
            ending=data.get("ending", ""),
            keywords=list(data.get("keywords") or []),
            estimated_duration=int(data.get("estimatedDuration", 0)),
        )


@dataclass(frozen=True)
class GeneratedImage:
    url: str  # data URI or remote URL
    prompt: str


@dataclass(frozen=True)
class VoiceData:
    voice_name: str
    audio_url: str | None = None  # base64 raw PCM
    speed: float = 1.0
    duration: float | None = None  # measured from decoded audio


@dataclass
class User:
    email: str
    credits: int = 0
    is_premium: bool = False
    is_creator: bool = False

    def to_dict(self) -> dict:
        return {
            "email": self.email,
            "credits": self.credits,
            "isPremium": self.is_premium,
            "isCreator": self.is_creator,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            email=data["email"],
            credits=int(data.get("credits", 0)),
            is_premium=bool(data.get("isPremium", False)),
            is_creator=bool(data.get("isCreator", False)),
        )


@dataclass(frozen=True)
class Niche:
    id: str
    name: str
    icon: str = ""
    color: str = ""
