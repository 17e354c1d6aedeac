"""Tests for the command-line interface."""

import pytest

from protoschedule.cli import main

from conftest import fixture_path


class TestCLI:
    """Tests for cli.main."""

    @pytest.fixture
    def normal(self):
        return str(fixture_path("schedule_normal"))

    def test_check_within(self, normal, capsys):
        code = main(["check", normal, "--at", "2024-01-16T10:15"])
        out = capsys.readouterr().out

        assert code == 0
        assert "WITHIN" in out
        assert "day-shift" in out

    def test_check_outside(self, normal, capsys):
        code = main(["check", normal, "--at", "2024-01-20T10:15"])

        assert code == 1
        assert "OUTSIDE" in capsys.readouterr().out

    def test_show(self, normal, capsys):
        code = main(["show", normal, "--at", "2024-01-15", "--days"])
        out = capsys.readouterr().out

        assert code == 0
        assert out.startswith("Schedule Definition: Support desk, 10 intervals")
        assert "Overlaps" in out

    def test_validate(self, normal, capsys):
        assert main(["validate", normal]) == 0
        assert "PASSED" in capsys.readouterr().out

    def test_validate_bad_tokens(self, capsys):
        code = main(["validate", str(fixture_path("schedule_badtokens"))])
        out = capsys.readouterr().out

        assert code == 1
        assert "FAILED (2 errors)" in out

    def test_malformed_definition(self, capsys):
        code = main(["show", str(fixture_path("schedule_malformed"))])

        assert code == 2
        assert "invalid schedule definition" in capsys.readouterr().err

    def test_out_of_range_duration(self, tmp_path, capsys):
        definition = tmp_path / "forever.json"
        definition.write_text(
            '{"schedule": {"tue": [{"start": "0800", "duration": "9999999999h"}]}}',
            encoding="utf-8",
        )

        assert main(["check", str(definition), "--at", "2024-01-16T10:15"]) == 2
        assert "out of range" in capsys.readouterr().err
        assert main(["validate", str(definition)]) == 1

    def test_missing_file(self, tmp_path, capsys):
        assert main(["check", str(tmp_path / "missing.json")]) == 2

    def test_pdf(self, normal, tmp_path, capsys):
        output = tmp_path / "week.pdf"
        code = main(["pdf", normal, "-o", str(output), "--at", "2024-01-15"])

        assert code == 0
        assert output.exists()

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_bad_instant(self, normal):
        with pytest.raises(SystemExit):
            main(["check", normal, "--at", "yesterday"])
