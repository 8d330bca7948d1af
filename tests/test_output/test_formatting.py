"""Tests for on-screen summary beautification."""

from tubedigest.output.formatting import DIVIDER, beautify


class TestBeautify:
    def test_bullets(self) -> None:
        text = "- one\n-  two\nnot - a bullet"
        assert beautify(text) == "• one\n• two\nnot - a bullet"

    def test_rule_becomes_divider(self) -> None:
        text = "Body\n---\nDetail Level: Moderate"
        assert beautify(text) == f"Body\n\n{DIVIDER}\n\nDetail Level: Moderate"

    def test_divider_before_sections(self) -> None:
        text = "Main\n\n💬 Comments Summary\nC\n\n🔍 Fact Check\nF"
        assert beautify(text) == (
            f"Main\n\n{DIVIDER}\n💬 Comments Summary\nC"
            f"\n\n{DIVIDER}\n🔍 Fact Check\nF"
        )

    def test_fact_check_results_heading(self) -> None:
        text = "Main\n**Fact Check Results:**\n- ok"
        assert beautify(text) == f"Main\n{DIVIDER}\n**Fact Check Results:**\n• ok"

    def test_no_double_divider_under_heading(self) -> None:
        text = "🔍 Fact Check\n**Fact Check Results:**"
        assert beautify(text).count(DIVIDER) == 1

    def test_compacts_blank_lines(self) -> None:
        assert beautify("a\n\n\n\nb\n\n") == "a\n\nb"

    def test_empty(self) -> None:
        assert beautify("") == ""
        assert beautify(None) == ""
