#!/usr/bin/env python3
"""Command-line interface for pyopto22 using Typer."""

import json
import logging
import time
from datetime import datetime, timezone
from typing import Any, Optional

import typer
from typing_extensions import Annotated

from . import __version__  # type: ignore
from .categories import get_default_category_map
from .controller import PACController, explain_name
from .error_log import ErrorLog
from .errors import (
    BlankParameterError,
    InvalidValueError,
    NoPrefixError,
    ReadOnlyError,
    RemoteError,
    UnknownPrefixError,
    UnknownVariableError,
)
from .types import BaseType, Category

app = typer.Typer(
    name="pyopto22",
    help="Read and write controller strategy variables over the REST interface.",
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)

# Errors a caller can fix by changing the command line
_USAGE_ERRORS = (
    BlankParameterError,
    NoPrefixError,
    UnknownPrefixError,
    UnknownVariableError,
    ReadOnlyError,
    InvalidValueError,
)

# ============================================================================
# Shared options and helpers
# ============================================================================

HostOption = Annotated[
    Optional[str],
    typer.Option("--host", "-h", help="Controller hostname or IP address", envvar="OPTO22_HOST"),
]
UsernameOption = Annotated[
    Optional[str],
    typer.Option("--username", "-U", help="REST API username (key name)", envvar="OPTO22_USERNAME"),
]
PasswordOption = Annotated[
    Optional[str],
    typer.Option("--password", "-P", help="REST API password (key value)", envvar="OPTO22_PASSWORD"),
]
TimeoutOption = Annotated[
    float,
    typer.Option("--timeout", "-t", help="Request timeout in seconds", envvar="OPTO22_TIMEOUT"),
]
ProfileOption = Annotated[
    str,
    typer.Option("--profile", help="Category map profile", envvar="OPTO22_PROFILE"),
]
ErrorLogOption = Annotated[
    Optional[str],
    typer.Option("--error-log", help="Append REST errors to this file", envvar="OPTO22_ERROR_LOG_PATH"),
]
ErrorLogFormatOption = Annotated[
    str,
    typer.Option("--error-log-format", help="Error log format: text or csv", envvar="OPTO22_ERROR_LOG_FORMAT"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable debug logging"),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Output as JSON"),
]


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbose flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if not verbose else "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_client(
    host: Optional[str],
    username: Optional[str],
    password: Optional[str],
    timeout: float,
    profile: str,
    error_log: Optional[str] = None,
    error_log_format: str = "text",
) -> PACController:
    """Create and return a PACController instance."""
    if not host:
        typer.echo("Error: --host is required for this command", err=True)
        raise typer.Exit(2)
    sink = ErrorLog(error_log, error_log_format) if error_log else None
    return PACController(
        host,
        username or "",
        password or "",
        profile=profile,
        timeout=timeout,
        error_log=sink,
    )


def parse_bool(value: str) -> bool:
    """Parse boolean value from string."""
    v = value.lower().strip()
    if v in ("true", "1", "on", "yes"):
        return True
    if v in ("false", "0", "off", "no"):
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


def parse_int(value: str) -> int:
    """Parse integer value from string, supporting hex and the signed 32-bit range."""
    v = value.strip()
    if v.lower().startswith(("0x", "-0x")):
        num = int(v, 16)
    else:
        num = int(v)
    if not (-(2**31) <= num <= 2**31 - 1):
        raise ValueError(f"Signed 32-bit integer out of range: {num}")
    return num


def parse_value(category: Category, raw: str) -> Any:
    """
    Turn a command-line string into a value for the category.

    Tables take a JSON array (e.g. '[1, 2, 3]'); scalars are parsed by base type.
    """
    if category.is_table:
        try:
            values = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"Table values must be a JSON array: {e}") from e
        if not isinstance(values, list):
            raise ValueError("Table values must be a JSON array")
        return values
    if category.base_type == BaseType.BOOLEAN:
        return parse_bool(raw)
    if category.base_type == BaseType.INTEGER:
        return parse_int(raw)
    if category.base_type == BaseType.FLOAT:
        return float(raw)
    return raw


def format_value(value: Any) -> str:
    """Format value for display."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (list, tuple)):
        return json.dumps(list(value))
    return str(value)


def format_poll_value(value: Any) -> str:
    """Format value for poll output: floats with 2 decimal places."""
    if isinstance(value, float):
        return f"{value:.2f}"
    return format_value(value)


def plain(value: Any) -> Any:
    """Convert tables to lists so values can be JSON-encoded."""
    if hasattr(value, "to_list"):
        return value.to_list()
    return value


def fail(message: str, code: int, verbose: bool = False) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    if verbose and code == 4:
        import traceback

        traceback.print_exc()
    return typer.Exit(code)


# ============================================================================
# Commands
# ============================================================================


@app.command()
def ping(
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    timeout: TimeoutOption = 10.0,
    profile: ProfileOption = "snap-pac",
    verbose: VerboseOption = False,
) -> None:
    """
    Test connectivity and credentials by fetching the device identity document.
    """
    setup_logging(verbose)

    try:
        client = create_client(host, username, password, timeout, profile)
        with client:
            client.get_json(client.category_map.device_path)
            typer.echo(f"OK: Connected to {host}")
    except _USAGE_ERRORS as e:
        raise fail(str(e), 2)
    except RemoteError as e:
        raise fail(f"REST error: {e}", 3)
    except typer.Exit:
        raise
    except Exception as e:
        raise fail(f"Unexpected error: {e}", 4, verbose)


@app.command()
def info(
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    timeout: TimeoutOption = 10.0,
    profile: ProfileOption = "snap-pac",
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
) -> None:
    """
    Show package version and profile; with --host, also device and strategy metadata.
    """
    setup_logging(verbose)

    info_data: dict[str, Any] = {
        "version": __version__,
        "profile": profile,
    }

    if host:
        try:
            client = create_client(host, username, password, timeout, profile)
            with client:
                client.load_device_info()
                device = client.device_info
                strategy = client.strategy_info
                info_data["device"] = {
                    "controller_type": device.controller_type,
                    "firmware_version": device.firmware_version,
                    "firmware_timestamp": device.firmware_timestamp.isoformat() if device.firmware_timestamp else None,
                    "mac_1": device.mac_1,
                    "mac_2": device.mac_2,
                    "up_time_seconds": device.up_time_seconds,
                }
                info_data["strategy"] = {
                    "strategy_name": strategy.strategy_name,
                    "strategy_timestamp": (
                        strategy.strategy_timestamp.isoformat() if strategy.strategy_timestamp else None
                    ),
                    "crc": strategy.crc,
                    "running_charts": strategy.running_charts,
                }
        except BlankParameterError as e:
            raise fail(str(e), 2)
        except RemoteError as e:
            info_data["connectivity"] = {"status": "failed", "host": host, "error": str(e)}

    if json_output:
        typer.echo(json.dumps(info_data, indent=2))
    else:
        typer.echo(f"pyopto22 version: {info_data['version']}")
        typer.echo(f"Profile: {info_data['profile']}")
        if "device" in info_data:
            typer.echo(f"Controller:      {info_data['device']['controller_type']}")
            typer.echo(f"Firmware:        {info_data['device']['firmware_version']}")
            typer.echo(f"Strategy:        {info_data['strategy']['strategy_name']}")
            typer.echo(f"Running charts:  {info_data['strategy']['running_charts']}")
        if "connectivity" in info_data:
            typer.echo(f"Connectivity: FAILED ({host}): {info_data['connectivity']['error']}")


@app.command()
def read(
    name: Annotated[str, typer.Argument(help="Variable to read (e.g. iCount, bReady, ftSetpoints)")],
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    timeout: TimeoutOption = 10.0,
    profile: ProfileOption = "snap-pac",
    error_log: ErrorLogOption = None,
    error_log_format: ErrorLogFormatOption = "text",
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
) -> None:
    """
    Read a single variable from the controller.

    Tables are printed as a JSON array.
    """
    setup_logging(verbose)

    try:
        client = create_client(host, username, password, timeout, profile, error_log, error_log_format)
        with client:
            value = plain(client.get(name))
            if json_output:
                typer.echo(json.dumps({"name": name, "value": value}))
            else:
                typer.echo(format_value(value))
    except _USAGE_ERRORS as e:
        raise fail(str(e), 2)
    except RemoteError as e:
        raise fail(f"REST error: {e}", 3)
    except typer.Exit:
        raise
    except Exception as e:
        raise fail(f"Unexpected error: {e}", 4, verbose)


@app.command()
def write(
    name: Annotated[str, typer.Argument(help="Variable to write (e.g. iCount, bReady, aoValve)")],
    value: Annotated[str, typer.Argument(help="Value: bool true/false/1/0/on/off; int decimal or 0x hex; tables as a JSON array")],
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    timeout: TimeoutOption = 10.0,
    profile: ProfileOption = "snap-pac",
    error_log: ErrorLogOption = None,
    error_log_format: ErrorLogFormatOption = "text",
    verbose: VerboseOption = False,
) -> None:
    """
    Write a value to a single variable.

    The value is parsed according to the category the name's prefix selects.
    """
    setup_logging(verbose)

    try:
        category = get_default_category_map(profile).resolve(name)
        try:
            parsed_value = parse_value(category, value)
        except ValueError as e:
            raise fail(f"Invalid value: {e}", 2)

        client = create_client(host, username, password, timeout, profile, error_log, error_log_format)
        with client:
            client.set(name, parsed_value)
            typer.echo(f"OK: Wrote {name} = {value}")
    except _USAGE_ERRORS as e:
        raise fail(str(e), 2)
    except RemoteError as e:
        raise fail(f"REST error: {e}", 3)
    except typer.Exit:
        raise
    except Exception as e:
        raise fail(f"Unexpected error: {e}", 4, verbose)


@app.command()
def explain(
    name: Annotated[str, typer.Argument(help="Variable to explain (e.g. iCount, bReady)")],
    profile: ProfileOption = "snap-pac",
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
) -> None:
    """
    Show the prefix, category and REST paths a variable name resolves to.

    Does not require a connection; uses the packaged category map only.
    """
    setup_logging(verbose)

    try:
        category_map = get_default_category_map(profile)
        info = explain_name(category_map, name)

        data = {
            "name": info.name,
            "prefix": info.prefix,
            "category": info.category.value,
            "base_type": info.base_type.value,
            "table": info.is_table,
            "read_only": info.read_only,
            "read_path": info.read_path,
            "write_path": info.write_path,
        }

        if json_output:
            typer.echo(json.dumps(data, indent=2))
        else:
            typer.echo(f"Name:        {data['name']}")
            typer.echo(f"Prefix:      {data['prefix']}")
            typer.echo(f"Category:    {data['category']}")
            typer.echo(f"Base type:   {data['base_type']}")
            typer.echo(f"Table:       {format_value(data['table'])}")
            typer.echo(f"Read-only:   {format_value(data['read_only'])}")
            typer.echo(f"Read path:   {data['read_path']}")
            typer.echo(f"Write path:  {data['write_path'] or '-'}")
    except (NoPrefixError, UnknownPrefixError) as e:
        raise fail(str(e), 2)
    except Exception as e:
        raise fail(f"Unexpected error: {e}", 4, verbose)


@app.command(name="read-many")
def read_many(
    names: Annotated[list[str], typer.Argument(help="Variables to read (space-separated)")],
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    timeout: TimeoutOption = 10.0,
    profile: ProfileOption = "snap-pac",
    error_log: ErrorLogOption = None,
    error_log_format: ErrorLogFormatOption = "text",
    verbose: VerboseOption = False,
    partial: Annotated[bool, typer.Option("--partial", help="Return partial results if some names fail")] = False,
) -> None:
    """
    Read several variables; each category is fetched once.

    By default, fails entirely if any name is invalid.
    Use --partial to return results for valid names only.
    """
    setup_logging(verbose)

    try:
        client = create_client(host, username, password, timeout, profile, error_log, error_log_format)
        with client:
            if partial:
                results: dict[str, Any] = {}
                errors: dict[str, str] = {}
                for name in names:
                    try:
                        results[name] = plain(client.get(name))
                    except (NoPrefixError, UnknownPrefixError, UnknownVariableError) as e:
                        errors[name] = str(e)
                output: dict[str, Any] = {"values": results}
                if errors:
                    output["errors"] = errors
                typer.echo(json.dumps(output, indent=2))
            else:
                typer.echo(json.dumps(client.read_many(names), indent=2))
    except _USAGE_ERRORS as e:
        raise fail(str(e), 2)
    except RemoteError as e:
        raise fail(f"REST error: {e}", 3)
    except typer.Exit:
        raise
    except Exception as e:
        raise fail(f"Unexpected error: {e}", 4, verbose)


@app.command()
def poll(
    names: Annotated[list[str], typer.Argument(help="Variables to poll (e.g. iCount fTemp bReady)")],
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    timeout: TimeoutOption = 10.0,
    profile: ProfileOption = "snap-pac",
    error_log: ErrorLogOption = None,
    error_log_format: ErrorLogFormatOption = "text",
    verbose: VerboseOption = False,
    interval: Annotated[float, typer.Option("--interval", "-i", help="Polling interval in seconds")] = 1.0,
    once: Annotated[bool, typer.Option("--once", help="Poll once and exit")] = False,
    format: Annotated[str, typer.Option("--format", "-f", help="Output format: text, json, csv")] = "text",
) -> None:
    """
    Continuously poll variables at the given interval.

    The cache is cleared before each cycle, so every cycle costs one request
    per category (and per table).

    Outputs format:
    - text: timestamp + name=value pairs (default)
    - json: NDJSON with {"timestamp": "...", "values": {...}} per line
    - csv: names as columns, one row per poll cycle
    """
    setup_logging(verbose)

    if format not in ("text", "json", "csv"):
        typer.echo(f"Error: Invalid format '{format}'. Must be text, json, or csv.", err=True)
        raise typer.Exit(2)

    if interval <= 0:
        typer.echo(f"Error: Interval must be positive, got {interval}", err=True)
        raise typer.Exit(2)

    if not names:
        typer.echo("Error: At least one variable is required for poll", err=True)
        raise typer.Exit(2)

    try:
        client = create_client(host, username, password, timeout, profile, error_log, error_log_format)

        if format == "csv":
            typer.echo("timestamp," + ",".join(names))

        with client:
            while True:
                client.clear_cache()
                results = client.read_many(names)
                timestamp = datetime.now(timezone.utc).isoformat()
                formatted = {name: format_poll_value(results[name]) for name in names}

                if format == "text":
                    pairs = " ".join(f"{name}={formatted[name]}" for name in names)
                    typer.echo(f"{timestamp} {pairs}")
                elif format == "json":
                    typer.echo(json.dumps({"timestamp": timestamp, "values": results}))
                elif format == "csv":
                    typer.echo(timestamp + "," + ",".join(formatted[name] for name in names))

                if once:
                    break
                time.sleep(interval)
    except _USAGE_ERRORS as e:
        raise fail(str(e), 2)
    except RemoteError as e:
        raise fail(f"REST error: {e}", 3)
    except KeyboardInterrupt:
        typer.echo("\nStopped by user", err=True)
        raise typer.Exit(0)
    except typer.Exit:
        raise
    except Exception as e:
        raise fail(f"Unexpected error: {e}", 4, verbose)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"pyopto22 {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version and exit"),
    ] = None,
) -> None:
    """pyopto22 - read and write controller strategy variables over REST."""
    pass


if __name__ == "__main__":
    app()
