"""
Prompt builders for short generation.
Keeps request text in one place so the generation client only deals with transport.
"""

NO_TEXT_CONSTRAINT = (
    "ABSOLUTELY NO TEXT, NO LETTERS, NO WORDS, NO NUMBERS, NO OVERLAYS, NO LOGOS, NO SIGNAGE. "
    "JUST THE VISUAL SCENE."
)


def build_script_prompt(niche: str) -> str:
    """Prompt for a structured YouTube Shorts script in the given niche."""
    return f"""Write a high-quality YouTube Shorts script for the niche: {niche}.
Ensure it has a powerful hook, engaging main content, and a smooth ending.
Also provide relevant keywords."""


def get_scene_prompt_rules() -> str:
    """Rules every scene description must follow (images must stay text-free)."""
    return """IMPORTANT rules for prompts:
1. They must be purely visual.
2. DO NOT include any text, letters, numbers, watermarks, or logos in the scenes.
3. Focus on cinematic photography and dynamic actions."""


def build_scene_prompts_prompt(hook: str, main_content: str, ending: str, scene_count: int) -> str:
    """
    Prompt asking for exactly scene_count visual scene descriptions.

    Args:
        hook: Script hook
        main_content: Script body
        ending: Script ending
        scene_count: Number of scene descriptions to request
    """
    return f"""Based on this script, generate EXACTLY {scene_count} distinct visual scene descriptions for a YouTube Short.
Script: Hook: {hook} Content: {main_content} Ending: {ending}.
{get_scene_prompt_rules()}
Output as a JSON array of strings."""


def build_image_prompt(prompt: str, style: str) -> str:
    """Compose style + scene description + fixed negative constraints."""
    return (
        f"{style} style photo: {prompt}. "
        f"Cinematic lighting, 8k, photorealistic, vibrant colors. {NO_TEXT_CONSTRAINT}"
    )
