"""
JSON schemas for short generation.
Pass these to llm_utils.generate_text(response_json_schema=...) for structured output.
"""

# --- Script (hook / body / ending + keywords) ---
SCRIPT_SCHEMA = {
    "type": "object",
    "title": "short_script",
    "properties": {
        "hook": {"type": "string"},
        "mainContent": {"type": "string"},
        "ending": {"type": "string"},
        "keywords": {
            "type": "array",
            "items": {"type": "string"},
        },
    },
    "required": ["hook", "mainContent", "ending", "keywords"],
}

# --- Scene prompts (one purely visual description per image) ---
SCENE_PROMPTS_SCHEMA = {
    "type": "array",
    "title": "scene_prompts",
    "items": {"type": "string"},
}
