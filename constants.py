"""
Catalog of niches, image styles and narration voices offered by the wizard.
"""

from shorts_types import Niche

NICHES: list[Niche] = [
    Niche("motivation", "Motivation", "fa-fire", "bg-orange-500"),
    Niche("tech", "Tech Facts", "fa-microchip", "bg-blue-500"),
    Niche("health", "Health Tips", "fa-heart-pulse", "bg-green-500"),
    Niche("fun-facts", "Fun Facts", "fa-lightbulb", "bg-yellow-500"),
    Niche("business", "Business", "fa-briefcase", "bg-indigo-500"),
    Niche("celebrity", "Celebrity Stories", "fa-star", "bg-purple-500"),
    Niche("educational", "Educational", "fa-book-open", "bg-teal-500"),
    Niche("true-crime", "True Crime", "fa-mask", "bg-red-900"),
]

IMAGE_STYLES: list[str] = [
    "Realistic", "Cartoon", "3D", "Minimal", "Aesthetic", "Urban", "Neon", "Cinematic",
]

# Gemini prebuilt voices: id -> (label, gender)
VOICES: dict[str, tuple[str, str]] = {
    "Kore": ("Kore (Energetic)", "Male"),
    "Puck": ("Puck (Youthful)", "Male"),
    "Charon": ("Charon (Deep)", "Male"),
    "Fenrir": ("Fenrir (Robotic)", "Neutral"),
    "Zephyr": ("Zephyr (Professional)", "Female"),
}


def find_niche(value: str) -> Niche:
    """
    Resolve a niche by id or name (case-insensitive).
    Unknown values become a custom niche so any topic can be used.
    """
    key = value.strip().lower()
    for niche in NICHES:
        if key in (niche.id, niche.name.lower()):
            return niche
    return Niche(id=key.replace(" ", "-"), name=value.strip())


def voice_label(voice_id: str) -> str:
    """Display label for a voice id, e.g. 'Kore (Energetic)'."""
    if voice_id in VOICES:
        return VOICES[voice_id][0]
    return voice_id
