"""Tests for the command line interface."""

import pytest
from click.testing import CliRunner


def _commands(stdout):
    lines = [line for line in stdout.splitlines() if line.strip()]
    assert all(line.startswith("AFL_AUTORESUME=") for line in lines), stdout
    return lines


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.delenv("AFLFLEET_RUNNERS", raising=False)
    monkeypatch.delenv("AFLFLEET_SEED", raising=False)


class TestGenerate:
    """Tests for the generate command."""

    def test_prints_commands(self, afl_fuzz, target, campaign_dirs):
        """Test one line per runner is printed."""
        from aflfleet.cli import cli

        input_dir, output_dir = campaign_dirs
        result = CliRunner().invoke(cli, [
            "generate", "-t", str(target), "-b", str(afl_fuzz), "-r", "5",
            "-i", str(input_dir), "-o", str(output_dir), "--seed", "1",
        ], obj={})

        assert result.exit_code == 0, result.output
        commands = _commands(result.stdout)
        assert len(commands) == 5
        assert "-M main_target" in commands[0]

    def test_seed_reproducible(self, afl_fuzz, target, tmp_path):
        """Test --seed fixes the campaign."""
        from aflfleet.cli import cli

        outputs = []
        for run in range(2):
            result = CliRunner().invoke(cli, [
                "generate", "-t", str(target), "-b", str(afl_fuzz), "-r", "9",
                "-i", str(tmp_path / "in"), "-o", str(tmp_path / f"out{run}"),
                "--seed", "1234",
            ], obj={})
            assert result.exit_code == 0, result.output
            outputs.append([c.replace(f"out{run}", "out") for c in _commands(result.stdout)])

        assert outputs[0] == outputs[1]

    def test_config_file_runners(self, afl_fuzz, target, campaign_dirs, tmp_path):
        """Test the runner count falls back to the config file."""
        import json
        from aflfleet.cli import cli

        config = tmp_path / "fleet.json"
        config.write_text(json.dumps({"runners": 3}))
        input_dir, output_dir = campaign_dirs

        result = CliRunner().invoke(cli, [
            "--config", str(config),
            "generate", "-t", str(target), "-b", str(afl_fuzz),
            "-i", str(input_dir), "-o", str(output_dir),
        ], obj={})

        assert result.exit_code == 0, result.output
        assert len(_commands(result.stdout)) == 3

    def test_missing_target(self, afl_fuzz, tmp_path):
        """Test a missing target exits with an error."""
        from aflfleet.cli import cli

        result = CliRunner().invoke(cli, [
            "generate", "-t", str(tmp_path / "missing"), "-b", str(afl_fuzz),
        ], obj={})

        assert result.exit_code == 1
        assert "Could not find target" in result.stderr
        assert result.stdout == ""

    def test_non_empty_output(self, afl_fuzz, target, campaign_dirs):
        """Test a populated output directory exits without commands."""
        from aflfleet.cli import cli

        input_dir, output_dir = campaign_dirs
        output_dir.mkdir()
        (output_dir / "stale").write_text("x")

        result = CliRunner().invoke(cli, [
            "generate", "-t", str(target), "-b", str(afl_fuzz), "-r", "2",
            "-i", str(input_dir), "-o", str(output_dir),
        ], obj={})

        assert result.exit_code == 1
        assert _commands(result.stdout) == []

    def test_use_tmux(self, afl_fuzz, target, campaign_dirs):
        """Test --use-tmux hands the runners to a tmux session."""
        from unittest.mock import patch
        from aflfleet.cli import cli

        input_dir, output_dir = campaign_dirs
        with patch("aflfleet.fuzzing.tmux.TmuxSession.launch") as launch:
            result = CliRunner().invoke(cli, [
                "generate", "-t", str(target), "-b", str(afl_fuzz), "-r", "2",
                "-i", str(input_dir), "-o", str(output_dir),
                "--use-tmux", "--session", "fleet",
            ], obj={})

        assert result.exit_code == 0, result.output
        launch.assert_called_once()
        assert _commands(result.stdout) == []


    def test_quiet_by_default(self, afl_fuzz, target, campaign_dirs):
        """Test the summary only reaches stderr with -v."""
        from aflfleet.cli import cli

        input_dir, output_dir = campaign_dirs
        args = [
            "generate", "-t", str(target), "-b", str(afl_fuzz), "-r", "2",
            "-i", str(input_dir), "-o", str(output_dir),
        ]

        quiet = CliRunner().invoke(cli, args, obj={})
        assert quiet.exit_code == 0, quiet.output
        assert "Generated" not in quiet.stderr

        verbose = CliRunner().invoke(cli, ["-v"] + args, obj={})
        assert verbose.exit_code == 0, verbose.output
        assert "Generated" in verbose.stderr
        assert len(_commands(verbose.stdout)) == 2


class TestSchedules:
    """Tests for the schedules command."""

    def test_lists_schedules(self):
        """Test every power schedule is listed."""
        from aflfleet.cli import cli

        result = CliRunner().invoke(cli, ["schedules"], obj={})
        assert result.exit_code == 0
        for name in ["fast", "explore", "coe", "lin", "quad", "exploit", "rare"]:
            assert name in result.output

    def test_version(self):
        """Test --version."""
        from aflfleet import __version__
        from aflfleet.cli import cli

        result = CliRunner().invoke(cli, ["--version"])
        assert __version__ in result.output
