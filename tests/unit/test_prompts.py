"""Unit tests for analysis prompt assembly."""

from fileanalyst.services.prompts import (
    ANALYZE_INSTRUCTION,
    build_analysis_prompt,
    build_file_sections,
    format_file_section,
)


class TestFileSections:
    """Tests for file section formatting."""

    def test_section_delimiter(self):
        """Test each file is introduced by a delimiter line naming it."""
        assert format_file_section("a.csv", "x,y") == "\n\n=== File: a.csv ===\nx,y"

    def test_order_preserved(self):
        """Test sections follow the given order, not alphabetical order."""
        sections = build_file_sections([("b.csv", "B"), ("a.csv", "A")])
        assert sections.index("=== File: b.csv ===") < sections.index("=== File: a.csv ===")


class TestBuildAnalysisPrompt:
    """Tests for the composite prompt."""

    def test_layout(self):
        """Test prompt, file block, and closing instruction layout."""
        prompt = build_analysis_prompt("Which field yields most?", [("yields.csv", "field,t\nN,7")])

        assert prompt == (
            "Which field yields most?\n\n"
            "Here are the contents of the selected data files:\n"
            "\n\n=== File: yields.csv ===\nfield,t\nN,7"
            "\n\nPlease analyze this data according to the prompt above."
        )

    def test_ends_with_instruction(self):
        """Test the closing instruction follows the last file after a blank line."""
        prompt = build_analysis_prompt("Go", [("a.txt", "one"), ("b.txt", "two")])
        assert prompt.endswith("two\n\n" + ANALYZE_INSTRUCTION)
