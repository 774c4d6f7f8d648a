"""Unit tests for runfile.listing."""

import click

from runfile.listing import command_display, render_listing
from runfile.parser import parse_runfile_string
from runfile.registry import Registry


def _render(content: str, color: bool = False) -> str:
    return render_listing(Registry(parse_runfile_string(content)).groups(), color=color)


class TestRenderListing:
    def test_sample_layout(self, sample_runfile_content: str) -> None:
        lines = _render(sample_runfile_content).splitlines()
        assert lines[0].startswith("hello name?")
        assert lines[0].endswith("# Say hello")
        assert lines[1] == ""
        assert lines[2] == "Build"
        assert lines[3].startswith("  b, build -r, --release --output=<file>")
        assert lines[3].endswith("# Compile the project")
        assert lines[4] == "  t, test ...args"
        assert lines[5] == ""
        assert lines[6] == "Deploy"
        assert lines[7] == "  deploy target"

    def test_descriptions_aligned(self) -> None:
        content = "# one\na:\n  true\n\n# two\nlonger-name target:\n  true\n"
        lines = _render(content).splitlines()
        assert lines[0].index("#") == lines[1].index("#")
        # widest entry is 18 chars, already even
        assert lines[1] == "longer-name target # two"

    def test_alignment_rounds_to_even(self) -> None:
        assert _render("# d\nabc:\n  true\n").splitlines() == ["abc  # d"]

    def test_no_trailing_space_without_description(self) -> None:
        output = _render("# d\nlong-command:\n  true\nx:\n  true\n")
        assert "x\n" in output
        assert not any(line.endswith(" ") for line in output.splitlines())

    def test_empty_groups_skipped(self) -> None:
        output = _render("# --- Empty ---\n# --- Full ---\nx:\n  true\n")
        assert "Empty" not in output
        assert output == "Full\n  x\n"

    def test_empty_runfile(self) -> None:
        assert _render("") == ""

    def test_color(self) -> None:
        content = "# --- G ---\n# desc\nx:\n  true\n"
        output = _render(content, color=True)
        assert click.style("G", bold=True) in output
        assert click.style("# desc", fg="bright_black") in output
        assert click.unstyle(output) == _render(content)


def test_command_display() -> None:
    cmd = parse_runfile_string("b, build target? -r, --release:\n  true\n").commands[0]
    assert command_display(cmd) == "b, build target? -r, --release"
