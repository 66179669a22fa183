"""Prompt builders for the writing agents."""

from __future__ import annotations

from collections.abc import Sequence

from screenwright.agents.models import DialogueForm, SceneDirection
from screenwright.fountain.scene_context import SceneContext

CONTEXT_PROMPT_CHARS = 200

SPACING_RULES = """CRITICAL SPACING RULES (Fountain.io spec):
- Character: ONE blank line BEFORE, NO blank line AFTER
- Dialogue: NO blank line before, ONE blank line AFTER
- Parenthetical: NO blank lines before/after
- Action: ONE blank line BEFORE Character (if next is Character)"""

FOUNTAIN_STYLE_RULES = """- Character names in ALL CAPS when speaking
- Character extensions are valid: CHARACTER (O.S.), CHARACTER (V.O.), CHARACTER (CONT'D)
- Action lines in normal case
- NO markdown formatting (no # headers, no ---, no markdown syntax)
- Use ellipses (...) for pauses, hesitations, or trailing off in dialogue
- Double dashes (--) are valid in Fountain but should be used sparingly, primarily in action lines"""

SCREENWRITER_SYSTEM_PROMPT = f"""You are a professional screenwriting assistant. Generate 1-3 lines of Fountain format screenplay text that continue the scene.

CRITICAL: Respond with ONLY valid JSON. No explanations, no markdown, just JSON:
{{
  "content": ["line 1", "line 2", "line 3"],
  "lineCount": 3
}}

Rules:
- NO scene headings (INT./EXT.) - this is a continuation
{FOUNTAIN_STYLE_RULES}
- Just 1-3 lines total

{SPACING_RULES}"""

DIALOGUE_SYSTEM_PROMPT = """You are an expert dialogue writer for film and television. Write natural, subtext-rich dialogue that advances the scene.

CRITICAL: Respond with ONLY valid JSON matching the requested structure. Character names must be in ALL CAPS."""

DIRECTOR_SYSTEM_PROMPT = f"""You are a film director and screenwriter. Write complete scenes in Fountain format from the given directions.

CRITICAL: Respond with ONLY valid JSON matching the requested structure.

Rules:
- Each scene MUST start with its own scene heading (INT./EXT. LOCATION - TIME)
{FOUNTAIN_STYLE_RULES}
- Do NOT include synopses (=) or act breaks (#)"""

REWRITE_SYSTEM_PROMPT = f"""You are a professional script doctor. Rewrite the selected screenplay text as requested, keeping it in Fountain format and blending with the surrounding text.

Rules:
- NO scene headings
{FOUNTAIN_STYLE_RULES}

{SPACING_RULES}"""


def build_context_info(scene: SceneContext | None) -> str:
    """Summarize the current scene for a prompt."""
    if scene is None:
        return ""

    info = ""
    if scene.heading:
        info += f"SCREENPLAY CONTEXT:\nCurrent scene: {scene.heading}\n"
    if scene.act:
        info += f"Act: {scene.act}\n"
    if scene.characters:
        info += f"Characters in this scene: {', '.join(scene.characters)}\n"
    if info:
        info += "\n"
    return info


def build_screenwriter_prompt(
    user_message: str,
    scene: SceneContext | None,
    context_before: str = "",
) -> str:
    """Build the screenwriter prompt for a short JSON continuation."""
    prompt = user_message
    if context_before:
        prompt += (
            "\n\nContext from screenplay (what comes before):\n"
            f"{context_before[:CONTEXT_PROMPT_CHARS]}"
        )
    context_info = build_context_info(scene)
    if context_info:
        prompt += f"\n\n{context_info}"

    prompt += f"""

Generate 1-3 lines of Fountain format screenplay text. Respond with ONLY valid JSON:
{{
  "content": ["line 1", "line 2", "line 3"],
  "lineCount": 3
}}

Rules:
- NO scene headings (INT./EXT.) - this is a continuation
{FOUNTAIN_STYLE_RULES}
- Do NOT add timing metadata or pause durations
- Just 1-3 content elements (can include blank lines for proper spacing, up to 10 items total)

{SPACING_RULES}"""
    return prompt


def build_dialogue_prompt(form: DialogueForm, scene: SceneContext | None) -> str:
    """Build the dialogue prompt from the dialogue modal's form."""
    prompt = (
        f"{build_context_info(scene)}Generate compelling screenplay dialogue "
        "based on the following context:\n\n"
    )
    fields = [
        ("Scene", form.scene_heading),
        ("Act", form.act),
        ("Characters", ", ".join(form.characters)),
        ("Conflict/Tension", form.conflict),
        ("Tone", form.tone),
        ("Subtext", form.subtext),
        ("Character Wants", form.character_wants),
        ("Power Dynamics", form.power_dynamics),
        ("Specific Lines to Include", form.specific_lines),
    ]
    for label, value in fields:
        if value:
            prompt += f"{label}: {value}\n"

    prompt += """

Generate dialogue in JSON format:
{
  "dialogue": [
    {"character": "CHARACTER", "line": "dialogue text", "subtext": "optional subtext"},
    ...
  ],
  "breakdown": "optional analysis"
}

Rules:
- Character names in ALL CAPS
- Natural, realistic dialogue
- Subtext where appropriate
- NO markdown formatting
- Each exchange should advance the scene"""
    return prompt


def build_director_prompt(
    directions: Sequence[SceneDirection],
    scene: SceneContext | None,
    context_before: str = "",
) -> str:
    """Build the director modal prompt for one to three new scenes."""
    count = len(directions)
    plural = "s" if count > 1 else ""

    scene_prompts = ""
    for index, direction in enumerate(directions, start=1):
        scene_prompts += f"Scene {index}:\n"
        scene_prompts += f"Location: {direction.location}\n"
        scene_prompts += f"Scenario: {direction.scenario}\n"
        if direction.direction.strip():
            scene_prompts += f"Direction: {direction.direction}\n"
        scene_prompts += "\n"

    context_section = ""
    if context_before:
        context_section = (
            "\n\nContext from screenplay:\n"
            f"{context_before[:CONTEXT_PROMPT_CHARS]}...\n"
        )
    current = scene.heading if scene else "current scene"
    if scene:
        context_section += f"Current scene: {scene.heading}\n"

    return f"""{build_context_info(scene)}Generate {count} complete scene{plural} based on the following directions:

{scene_prompts}{context_section}

Generate all scenes in JSON format:
{{
  "scenes": [
    {{
      "heading": "INT. LOCATION - TIME",
      "content": ["action line", "CHARACTER", "dialogue", ...]
    }}
  ],
  "totalLines": 15
}}

Rules:
- Each scene MUST have its own scene heading (INT./EXT. LOCATION - TIME)
- Each scene: 5-30 lines of content
- NO markdown formatting
- Character names in ALL CAPS when speaking
- Action lines in normal case
- Create NEW scenes that come AFTER the current scene "{current}"
- Do NOT repeat or rewrite the current scene"""


def build_rewrite_prompt(
    instruction: str,
    selected_text: str,
    scene: SceneContext | None,
    before: str = "",
    after: str = "",
) -> str:
    """Build the rewrite prompt for a selected span of the screenplay."""
    context = ""
    if before:
        context += (
            "Text BEFORE the selected section (maintain continuity with this):\n"
            f'"{before}"\n\n'
        )
    context += f'Selected text to rewrite:\n"{selected_text}"\n\n'
    if after:
        context += (
            "Text AFTER the selected section (maintain continuity with this):\n"
            f'"{after}"\n\n'
        )
    if scene:
        if scene.heading:
            context += f"Current scene: {scene.heading}\n"
        if scene.characters:
            context += f"Characters in scene: {', '.join(scene.characters)}\n"
        context += "\n"

    request = instruction.strip() or "Rewrite this"
    return f"""{context}Rewrite the selected text: "{request}"

Respond with JSON:
{{
  "rewrittenText": "rewritten text here"
}}

Rules:
- NO scene headings
{FOUNTAIN_STYLE_RULES}
- Match Fountain format with proper newlines
- Blend with surrounding text

{SPACING_RULES}"""
