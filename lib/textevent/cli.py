"""
Command-line driver for the text event simulation.

    textevent run -S ./mystim.csv -T 1.5E7
    textevent version
"""

from __future__ import annotations
from pathlib import Path

from rich import print
import typer
import yaml

from desim import MAX_USER_TIME, SimExec
from desim.messages import NOTE, configure_logging, fatal_error_and_die, std_msg
from desim.version import full_version_string, print_version
from textevent.config import DEFAULT_CONFIG_PATH, RunConfig
from textevent.files import file_exists, file_exists_read, file_exists_write
from textevent.log_writer import TextEventLog
from textevent.reader import open_text_event_loader

app = typer.Typer(
    help=(
        "A simple demonstration of the discrete event simulation engine, "
        "which logs the time and text of each event in a stimulus file."
    ),
    add_completion=False,
)


def parse_run_until(value: str | None) -> float | None:
    """Convert the run-until option, which may also be "MAX"."""
    if value is None:
        return None
    if value.strip().upper() == "MAX":
        return MAX_USER_TIME
    try:
        return float(value)
    except ValueError:
        raise typer.BadParameter(f"{value!r} is not a number, or 'MAX'.")


def resolve_config(
    config_path: str | None,
    **overrides,
) -> RunConfig:
    """Load the configuration file (if any), then apply command-line overrides."""
    try:
        if config_path is not None:
            if not file_exists(config_path):
                msg = f'Could not open configuration file:  "{config_path}".'
                fatal_error_and_die(msg)
            config = RunConfig.load(config_path)
        elif file_exists(DEFAULT_CONFIG_PATH):
            config = RunConfig.load(DEFAULT_CONFIG_PATH)
        else:
            config = RunConfig()
        return config.updated(**overrides)
    except (ValueError, yaml.YAMLError) as err:
        # N.B. includes pydantic ValidationError, a ValueError.
        fatal_error_and_die(f"Invalid configuration.\n{err}")


def check_stimulus_path(stimulus_path: str):
    if file_exists_read(stimulus_path):
        return
    message = f'The specified Stimulus File: "{stimulus_path}" '
    if file_exists(stimulus_path):
        message += (
            "exists.\nHowever, either you do not have read access to the file,\n"
            "or the pathname doesn't specify a regular file (perhaps\n"
            "it identifies a directory)."
        )
    else:
        message += "could not be found."
    message += (
        "\nSimulation requires a valid stimulus file to execute.\n"
        "Please check the Stimulus File pathname and try again."
    )
    fatal_error_and_die(message)


def check_log_path(log_path: str):
    if not file_exists(log_path) or file_exists_write(log_path):
        return
    if Path(log_path).is_file():
        message = (
            f'The specified Log File: "{log_path}" exists.\n'
            "However, you do not seem to have write access to the file."
        )
    else:
        message = f'Unexpected issue with the Log File pathname:\n  "{log_path}"'
    fatal_error_and_die(message)


@app.command()
def run(
    config_path: str | None = typer.Option(
        None,
        "--config",
        "-C",
        help=f"YAML configuration file [default: {DEFAULT_CONFIG_PATH}]",
    ),
    log_path: str | None = typer.Option(
        None, "--log", "-L", help="Data log file [default: ./logfile.csv]"
    ),
    stimulus_path: str | None = typer.Option(
        None, "--stimulus", "-S", help="Stimulus file [default: ./stim.csv]"
    ),
    run_until: str | None = typer.Option(
        None,
        "--until",
        "-T",
        help="Simulation run time limit, in user time units, or 'MAX'.",
    ),
    read_window: float | None = typer.Option(
        None, "--window", help="Span of each stimulus load pass [default: 1000.0]"
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="e.g. DEBUG, INFO"),
):
    """Run a simulation from a text event stimulus file."""
    # Configuration errors are reported at the default level.
    configure_logging()
    config = resolve_config(
        config_path,
        log_path=log_path,
        stimulus_path=stimulus_path,
        run_until=parse_run_until(run_until),
        read_window=read_window,
        log_level=log_level,
    )
    configure_logging(config.log_level)

    print(
        "\n[bold]********************************************"
        "\n***  Welcome to the Text Event Example!  ***"
        "\n********************************************[/bold]"
    )
    print_version("Executing:")
    std_msg(NOTE, f'Simulation "Run until time" set to {config.run_until} time units.')

    check_stimulus_path(config.stimulus_path)
    check_log_path(config.log_path)
    loader = open_text_event_loader(config.stimulus_path, window=config.read_window)
    log = TextEventLog(config.log_path)
    log.write_header_or_die()

    executive = SimExec()
    executive.init(config.run_until, loader, log_manager=log, config=config)
    end_time = executive.run()
    print(
        f"\n[green]=>=>=>=>=>=>=>>> Simulation Complete at time {end_time} "
        "<<<=<=<=<=<=<=<=[/green]"
    )
    executive.teardown()


@app.command()
def version():
    """Show version details."""
    print(full_version_string())


def main():
    app()


if __name__ == "__main__":
    main()
