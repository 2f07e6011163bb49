"""Prompt templates for data analysis.

Builds the system message and the composite user prompt that embeds the
contents of the selected files.
"""

from collections.abc import Sequence

ANALYST_SYSTEM_PROMPT = (
    "You are a helpful data analyst. Analyze the provided data files according "
    "to the user's prompt and provide detailed insights, patterns, and "
    "recommendations. Always provide a clear, concise response in your output."
)

FILES_INTRO = "Here are the contents of the selected data files:"
ANALYZE_INSTRUCTION = "Please analyze this data according to the prompt above."


def format_file_section(name: str, text: str) -> str:
    """Render one file as a delimited section."""
    return f"\n\n=== File: {name} ===\n{text}"


def build_file_sections(files: Sequence[tuple[str, str]]) -> str:
    """Concatenate (name, text) pairs in the given order."""
    return "".join(format_file_section(name, text) for name, text in files)


def build_analysis_prompt(prompt: str, files: Sequence[tuple[str, str]]) -> str:
    """Build the user message: prompt, file sections, closing instruction.

    Args:
        prompt: The user's natural-language request.
        files: (name, text) pairs in the order the user selected them.

    Returns:
        The composite prompt sent as the user message.
    """
    return (
        f"{prompt}\n\n"
        f"{FILES_INTRO}\n"
        f"{build_file_sections(files)}\n\n"
        f"{ANALYZE_INSTRUCTION}"
    )
