#!/usr/bin/env python3
"""
AFLFleet - Parallel AFL++ Campaign Generator

CLI interface using Click for command-line interaction.
"""

import subprocess
import sys

import click
from rich.console import Console
from rich.table import Table

from aflfleet import __version__
from aflfleet.utils.config import Config, set_config
from aflfleet.utils.logging import console as err_console, setup_logging

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", count=True, help="Increase verbosity")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Config file")
@click.pass_context
def cli(ctx, verbose, config_path):
    """AFLFleet - Parallel AFL++ Campaign Generator"""
    ctx.ensure_object(dict)

    config = Config.load(config_path)
    if verbose:
        config.verbose = verbose
    set_config(config)
    ctx.obj["config"] = config

    setup_logging(verbosity=config.verbose)


@cli.command()
@click.option("-t", "--target", required=True, help="Instrumented target binary to fuzz")
@click.option("-s", "--san-target", help="Instrumented with *SAN binary to use")
@click.option("-c", "--cmpl-target", help="Instrumented with CMPLOG binary to use")
@click.option("-a", "--target-args", help="Target binary arguments, including @@ if needed")
@click.option("-r", "--runners", type=int, help="Amount of processes to spin up")
@click.option("-i", "--input-dir", help="Corpus directory")
@click.option("-o", "--output-dir", help="Output directory")
@click.option("-x", "--dictionary", help="Dictionary to use")
@click.option(
    "-b", "--afl-binary",
    help="Custom path to 'afl-fuzz'. Falls back to $PATH, then $AFL_PATH",
)
@click.option("--seed", type=int, help="Seed for reproducible campaigns")
@click.option("--use-tmux", is_flag=True, help="Spin up a tmux session with the fuzzers")
@click.option("--session", "session_name", help="tmux session name")
@click.pass_context
def generate(
    ctx, target, san_target, cmpl_target, target_args, runners, input_dir,
    output_dir, dictionary, afl_binary, seed, use_tmux, session_name,
):
    """Generate afl-fuzz commands for a parallel campaign."""
    from aflfleet.core.harness import Harness
    from aflfleet.fuzzing.campaign import Campaign
    from aflfleet.fuzzing.tmux import TmuxSession

    config: Config = ctx.obj["config"]

    try:
        harness = Harness.create(target, san_target, cmpl_target, target_args)
        campaign = Campaign(
            harness,
            runners=runners if runners is not None else config.runners,
            afl_binary=afl_binary or config.afl_path,
            input_dir=input_dir or config.input_dir,
            output_dir=output_dir or config.output_dir,
            dictionary=dictionary or config.dictionary,
            seed=seed if seed is not None else config.seed,
        )
        runners_cfg = campaign.synthesize()

        if use_tmux:
            TmuxSession(session_name or config.tmux_session, runners_cfg).launch()
        else:
            for runner in runners_cfg:
                click.echo(runner.to_command())

    except (FileNotFoundError, FileExistsError, NotADirectoryError, ValueError) as e:
        err_console.print(f"[error]Error:[/error] {e}")
        sys.exit(1)
    except subprocess.CalledProcessError as e:
        err_console.print(f"[error]tmux failed:[/error] {e}")
        sys.exit(1)


@cli.command()
def schedules():
    """Show the power schedule rotation used across runners."""
    from aflfleet.fuzzing.config import SCHEDULES

    table = Table(title="Power Schedules")
    table.add_column("Slot", style="cyan")
    table.add_column("Schedule", style="green")

    for i, schedule in enumerate(SCHEDULES):
        table.add_row(f"{i} (mod {len(SCHEDULES)})", schedule.value)

    console.print(table)


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
