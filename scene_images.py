"""
Scene image generation for a script.

The batch asks for scene prompts once, then generates images strictly one at a
time in prompt order. A failed image is skipped; the batch only fails when no
image at all could be produced.
"""
from typing import Callable

import generation_service
from config import Config
from llm_utils import GenerationError
from shorts_types import GeneratedImage, ScriptData


class BatchGenerationError(GenerationError):
    """Every image in a batch failed."""


async def generate_scene_images(
    script: ScriptData,
    style: str,
    images: list[GeneratedImage] | None = None,
    on_update: Callable[[list[GeneratedImage]], None] | None = None,
) -> list[GeneratedImage]:
    """
    Generate one image per scene prompt and append them after the existing images.

    Args:
        script: Script to illustrate.
        style: Image style (e.g. "Cinematic").
        images: Images already in the storyboard; kept first, never modified.
        on_update: Called with a fresh copy of the collection after every successful image.

    Returns:
        The new collection (existing images followed by the successes, in prompt order).

    Raises:
        ValueError: No script given (no request is made).
        BatchGenerationError: No image could be generated.
        Errors from generate_scene_prompts propagate unchanged.
    """
    if script is None:
        raise ValueError("A script is required to generate scene images")
    collection = list(images or [])
    start_count = len(collection)

    prompts = await generation_service.generate_scene_prompts(script)

    for i, prompt in enumerate(prompts, start=1):
        try:
            url = await generation_service.generate_image(prompt, style)
        except Exception as e:
            print(f"[IMAGES] WARNING: Skipping scene {i}/{len(prompts)} due to failure: {e}")
            continue
        collection.append(GeneratedImage(url=url, prompt=prompt))
        print(f"[IMAGES] Scene {i}/{len(prompts)} done ({len(collection) - start_count} new)")
        if on_update is not None:
            on_update(list(collection))

    if len(collection) == start_count:
        raise BatchGenerationError("All image generations failed.")
    return collection


async def add_scene_image(images: list[GeneratedImage], prompt: str, style: str) -> list[GeneratedImage]:
    """Generate a single image for a hand-written prompt and append it."""
    if not prompt or not prompt.strip():
        raise ValueError("Describe a scene before generating an image")
    url = await generation_service.generate_image(prompt, style)
    return [*images, GeneratedImage(url=url, prompt=prompt)]


def remove_scene_image(images: list[GeneratedImage], index: int) -> list[GeneratedImage]:
    """Return a copy without the image at index; later scenes move up."""
    if not 0 <= index < len(images):
        raise IndexError(f"No scene image at index {index}")
    return images[:index] + images[index + 1:]


def coverage_percent(images: list[GeneratedImage], script: ScriptData | None) -> float:
    """Share of the recommended scene count already covered, capped at 100."""
    duration = script.estimated_duration if script else Config.fallback_duration
    recommended = generation_service.recommended_scene_count(duration)
    return min(100.0, len(images) / recommended * 100)
