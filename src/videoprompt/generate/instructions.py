"""Instruction templates sent alongside the two video references.

Every template treats the first video as the structural/style input and the
second one as the target, and asks for a single raw prompt as output.
"""

from __future__ import annotations

from enum import StrEnum


class InstructionTemplate(StrEnum):
    NARRATIVE = "narrative"
    STYLE_ONLY = "style_only"
    EDIT_LIST = "edit_list"


_NARRATIVE = (
    "You are an expert Prompt Engineer for advanced video generation models. "
    "I have provided two videos:\n"
    "1. **Input Structure (Video 1)**: The structural reference (sketch, wireframe, or raw footage).\n"
    "2. **Target Output (Video 2)**: The final styled result (the 'ground truth').\n\n"
    "**OBJECTIVE**: Write a comprehensive, detailed text prompt that describes exactly how to "
    "transform Video 1 into Video 2. The description should be vivid and precise.\n\n"
    "**INSTRUCTIONS**:\n"
    "1. **Narrative Flow**: Describe the video scene-by-scene in a chronological way "
    "(e.g., 'The video starts with...', 'Then...', 'Finally...').\n"
    "2. **Visual Details**: Focus on the Art Style, Backgrounds, Lighting, and Textures in every scene.\n"
    "3. **Character Consistency**: Please explicitly mention that character details should remain consistent.\n"
    "4. **Audio**: Include a description of the audio and atmosphere.\n\n"
    "**OUTPUT**:\n"
    "Please provide the prompt text directly, followed by a brief summary of the "
    "Duration and Audio at the end."
)

_STYLE_ONLY = (
    "You are an expert Prompt Engineer for video style transfer models. "
    "I have provided two videos:\n"
    "1. **Style Reference (Video 1)**: The look and feel to copy.\n"
    "2. **Target Content (Video 2)**: The footage that should receive that look.\n\n"
    "**OBJECTIVE**: Describe only the visual style of Video 1 so that it can be applied to "
    "Video 2: palette, lighting, rendering technique, texture, camera language and grading. "
    "Do not describe the content or story of either video.\n\n"
    "**OUTPUT**:\n"
    "Output only the raw prompt as a single paragraph. No preamble, no headings, no quotes."
)

_EDIT_LIST = (
    "You are a senior video editor. I have provided two videos:\n"
    "1. **Source (Video 1)**: The original footage.\n"
    "2. **Result (Video 2)**: The same footage after editing and stylisation.\n\n"
    "**OBJECTIVE**: List every edit that turns Video 1 into Video 2: colour and lighting "
    "changes, added or removed elements, style transformations, timing and transitions, "
    "audio changes.\n\n"
    "**OUTPUT**:\n"
    "Output only the raw prompt as a numbered list of imperative edit instructions, "
    "one edit per line. No preamble and no closing remarks."
)

INSTRUCTIONS: dict[InstructionTemplate, str] = {
    InstructionTemplate.NARRATIVE: _NARRATIVE,
    InstructionTemplate.STYLE_ONLY: _STYLE_ONLY,
    InstructionTemplate.EDIT_LIST: _EDIT_LIST,
}


def instruction_text(template: InstructionTemplate | str) -> str:
    """Return the instruction text for ``template``."""
    try:
        return INSTRUCTIONS[InstructionTemplate(template)]
    except ValueError as exc:
        raise KeyError(f"Unknown instruction template '{template}'") from exc


__all__ = ["INSTRUCTIONS", "InstructionTemplate", "instruction_text"]
