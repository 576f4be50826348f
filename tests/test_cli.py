"""
Tests for the command-line interface.
"""

import json

from docx_composer.cli import create_parser, main
from docx_composer.version import __version__


class TestCli:
    def test_parser_compose_arguments(self):
        args = create_parser().parse_args(["compose", "out.docx", "a.docx", "b.docx", "--workers", "2", "--no-prune"])

        assert args.command == "compose"
        assert args.output == "out.docx"
        assert args.inputs == ["a.docx", "b.docx"]
        assert args.workers == 2
        assert args.no_prune
        assert args.template is None

    def test_compose(self, first_snapshot, second_snapshot, docx_factory, temp_dir, capsys):
        first = docx_factory(first_snapshot, "first.docx")
        second = docx_factory(second_snapshot, "second.docx")
        output = temp_dir / "merged.docx"

        code = main(["--no-rich", "compose", str(output), str(first), str(second)])

        assert code == 0
        assert output.exists()
        assert "Saved" in capsys.readouterr().out

    def test_info_json(self, first_snapshot, docx_factory, capsys):
        path = docx_factory(first_snapshot, "first.docx")

        code = main(["--no-rich", "info", str(path), "--json"])

        info = json.loads(capsys.readouterr().out)
        assert code == 0
        assert info["max_footnote_id"] == 2
        assert info["charts"] == ["charts/chart1.xml"]
        assert info["dangling_references"]["document"] == []

    def test_missing_input_returns_error(self, temp_dir, capsys):
        code = main(["--no-rich", "compose", str(temp_dir / "out.docx"), str(temp_dir / "missing.docx")])

        assert code == 1
        assert "Error" in capsys.readouterr().err

    def test_version(self, capsys):
        assert main(["version"]) == 0
        assert __version__ in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "docx-composer" in capsys.readouterr().out
