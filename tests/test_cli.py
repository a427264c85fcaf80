"""
Tests for the croncalc command line.
"""

import pytest

from croncalc.cli.main import cli


@pytest.mark.unit
class TestNext:
    def test_prints_fire_times_with_weekday(self, runner):
        result = runner.invoke(
            cli, ["next", "0 12 * * *", "--start", "2024-01-01 00:00", "-n", "2"]
        )
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [
            "2024.01.01 12:00:00  Monday",
            "2024.01.02 12:00:00  Tuesday",
        ]

    def test_expression_may_be_split_over_arguments(self, runner):
        result = runner.invoke(
            cli,
            ["next", "10", "0-8/2", "*", "*", "SUN,TUE", "--start", "2024-01-03", "-n", "1"],
        )
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == ["2024.01.07 00:10:00  Sunday"]

    def test_reports_end_bound(self, runner):
        result = runner.invoke(
            cli,
            [
                "next",
                "0 0 1 1 *",
                "--start",
                "2024-06-01",
                "--end",
                "2026-06-01",
                "-n",
                "5",
            ],
        )
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[:2] == [
            "2025.01.01 00:00:00  Wednesday",
            "2026.01.01 00:00:00  Thursday",
        ]
        assert "No further fire times before 2026-06-01 00:00:00" in lines[2]

    def test_default_expression_and_count_from_config(self, runner):
        result = runner.invoke(cli, ["next", "--start", "2024-01-03 00:00"])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert len(lines) == 9
        assert lines[0] == "2024.01.07 00:10:00  Sunday"
        assert lines[5] == "2024.01.09 00:10:00  Tuesday"

    def test_config_controls_format(self, runner, test_env):
        test_env.config_path.write_text(
            '[output]\ndatetime_format = "%Y-%m-%dT%H:%M:%S"\nshow_weekday = false\n'
            "[search]\ncount = 2\n",
            encoding="utf-8",
        )
        result = runner.invoke(cli, ["next", "0 12 * * *", "--start", "2024-01-01"])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[-2:] == ["2024-01-01T12:00:00", "2024-01-02T12:00:00"]

    def test_start_now_uses_clock(self, runner, frozen_time):
        result = runner.invoke(cli, ["next", "0 13 * * *", "--start", "now", "-n", "1"])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == ["2025.01.01 13:00:00  Wednesday"]

    def test_invalid_expression(self, runner, croncalc_home):
        result = runner.invoke(cli, ["next", "* * * 13 *"])
        assert result.exit_code == 1
        assert "Invalid expression" in result.output
        assert "month" in result.output
        logs = list((croncalc_home / "logs").glob("log_*.md"))
        assert logs

    def test_bad_start(self, runner):
        result = runner.invoke(cli, ["next", "* * * * *", "--start", "not a date"])
        assert result.exit_code == 2
        assert "Expected a date/time" in result.output


    def test_mixed_offset_bounds_are_rejected(self, runner):
        result = runner.invoke(
            cli,
            [
                "next",
                "0 12 * * *",
                "--start",
                "2024-01-01T00:00:00+00:00",
                "--end",
                "2024-02-01",
            ],
        )
        assert result.exit_code == 2
        assert "must both have a UTC offset" in result.output

    def test_aware_bounds(self, runner):
        result = runner.invoke(
            cli,
            [
                "next",
                "0 12 * * *",
                "--start",
                "2024-01-01T00:00:00+00:00",
                "--end",
                "2024-01-02T00:00:00+00:00",
            ],
        )
        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[0] == "2024.01.01 12:00:00  Monday"

    def test_expression_parsed_once(self, runner, monkeypatch):
        import croncalc.cli.main as cli_main
        import croncalc.occurrence as occurrence

        calls = []
        real_parse = cli_main.parse_expression

        def counting_parse(expression):
            calls.append(expression)
            return real_parse(expression)

        monkeypatch.setattr(cli_main, "parse_expression", counting_parse)
        monkeypatch.setattr(occurrence, "parse_expression", counting_parse)
        result = runner.invoke(
            cli, ["next", "0 12 * * *", "--start", "2024-01-01", "-n", "3"]
        )
        assert result.exit_code == 0, result.output
        assert calls == ["0 12 * * *"]


@pytest.mark.unit
class TestCheck:
    def test_valid_expression_shows_fields(self, runner):
        result = runner.invoke(cli, ["check", "* * * * Mon-Fri"])
        assert result.exit_code == 0, result.output
        assert "Expression is valid" in result.output
        assert "day-of-week" in result.output
        assert "1, 2, 3, 4, 5" in result.output

    def test_invalid_expression(self, runner):
        result = runner.invoke(cli, ["check", "* * *"])
        assert result.exit_code == 1
        assert "5 or 6 tokens" in result.output

    def test_verbose_writes_bug_log(self, runner, croncalc_home):
        result = runner.invoke(cli, ["--verbose", "check", "0 0 * * *"])
        assert result.exit_code == 0, result.output
        assert list((croncalc_home / "logs").glob("bug_*.md"))


@pytest.mark.unit
def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert result.output.startswith("croncalc version")


@pytest.mark.unit
def test_home_option(runner, tmp_path, monkeypatch):
    home = tmp_path / "elsewhere"
    result = runner.invoke(cli, ["--home", str(home), "check", "0 0 * * *"])
    assert result.exit_code == 0, result.output
    assert (home / "config.toml").exists()
