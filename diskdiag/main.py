"""
diskdiag.main
------------
AUTHOR: carter-vin

Local CLI harness for the disk sensor:
- construct a sensor from CLI / file / env config
- take one reading, emit it, close

Key contract:
- `disk-diagnostics --help` shows a Commands section.
- `disk-diagnostics read` exits 1 and emits no reading when the query fails.
"""

from __future__ import annotations

import os
import platform
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer

from diskdiag.config import DISK_PATH_ENV, ConfigError, DiskConfig, load_config_file
from diskdiag.emit import EmitTargets, emit_reading_json
from diskdiag.logging import SENSOR_VERSION, emit_event
from diskdiag.model import reading_to_json, validate_reading
from diskdiag.poll import poll_once
from diskdiag.sensor import DiskSensor, UnimplementedError

app = typer.Typer(
    add_completion=False,
    help="disk-diagnostics: disk capacity sensor for a single path",
)

DEFAULT_SENSOR_NAME = "disk"


# -----------------------------
# DATA CLASSES
# -----------------------------
@dataclass(frozen=True)
class EnvironmentInfo:
    python_version: str
    os: str
    machine: str
    utc_now: str


def collect_environment_info() -> EnvironmentInfo:
    return EnvironmentInfo(
        python_version=sys.version.split()[0],
        os=f"{platform.system()} {platform.release()}",
        machine=platform.machine(),
        utc_now=datetime.now(timezone.utc).isoformat(),
    )


def resolve_cli_config(path: Optional[str], config_file: Optional[str]) -> DiskConfig:
    """
    Precedence:
    1) DISKDIAG_PATH env var
    2) --path
    3) --config file
    4) empty (sensor applies the default root)
    """
    env_path = os.getenv(DISK_PATH_ENV)
    if env_path:
        return DiskConfig(path=env_path)

    if path is not None:
        return DiskConfig(path=path)

    if config_file is not None:
        try:
            return load_config_file(Path(config_file))
        except ConfigError as e:
            raise typer.BadParameter(str(e), param_hint="--config")

    return DiskConfig()


# -----------------------------
# ROOT COMMAND BEHAVIOR
# -----------------------------
@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """
    Print a hint when no subcommand is given.
    """
    if ctx.invoked_subcommand is None:
        typer.echo("No command provided. Try: disk-diagnostics --help")


# -----------------------------
# CLI COMMANDS
# -----------------------------
@app.command()
def version() -> None:
    """
    Print sensor version & runtime env
    """
    env = collect_environment_info()

    typer.echo(f"disk-diagnostics v{SENSOR_VERSION}")
    typer.echo(f"python={env.python_version}")
    typer.echo(f"os={env.os}")
    typer.echo(f"machine={env.machine}")
    typer.echo(f"utc_now={env.utc_now}")


@app.command("read")
def read(
    path: Optional[str] = typer.Option(
        None,
        "--path",
        help="Drive or path to query (e.g. C:, C, /mnt/data). Empty means the primary drive root.",
    ),
    config_file: Optional[str] = typer.Option(
        None,
        "--config",
        help="JSON file with a 'path' field.",
    ),
    spool_path: Optional[str] = typer.Option(
        None,
        "--spool",
        help="Append the reading to this JSONL spool file.",
    ),
    no_stdout: bool = typer.Option(
        False,
        "--no-stdout",
        help="Disable printing the reading JSON to stdout.",
    ),
    name: str = typer.Option(
        DEFAULT_SENSOR_NAME,
        "--name",
        help="Sensor name used in events.",
    ),
) -> None:
    """
    Take one disk reading and exit

    Failure semantics:
    - failed query -> exit code 1, no reading emitted
    - failed spool write -> Typer raises and exits non-zero
    """
    config = resolve_cli_config(path, config_file)

    def _on_spool_error(e: Exception, spool: Path) -> None:
        emit_event(
            "spool_write_failed",
            sensor=name,
            spool_path=str(spool),
            error_type=type(e).__name__,
            message=str(e),
        )

    with DiskSensor(name, config) as sensor:
        outcome = poll_once(sensor)

    if not outcome.ok:
        typer.echo(f"read failed: {outcome.error_type}: {outcome.error_message}", err=True)
        raise typer.Exit(code=1)

    reading = outcome.reading
    validate_reading(reading)

    targets = EmitTargets(
        spool_path=Path(spool_path) if spool_path else None,
        emit_stdout=not no_stdout,
    )
    emit_reading_json(reading_to_json(reading), targets, on_spool_error=_on_spool_error)


@app.command("command")
def command(
    path: Optional[str] = typer.Option(None, "--path", help="Drive or path the sensor is built with."),
) -> None:
    """
    Send an empty generic command; the disk sensor rejects all commands
    """
    config = resolve_cli_config(path, None)

    with DiskSensor(DEFAULT_SENSOR_NAME, config) as sensor:
        try:
            sensor.do_command({})
        except UnimplementedError as e:
            typer.echo(f"command rejected: {e}", err=True)
            raise typer.Exit(code=2)


if __name__ == "__main__":
    app()
