"""
rngkit.cli
----------

Small command-line front-end for drawing secure values.

Commands:
  - bool    : Print a random boolean.
  - int     : Random integer from the unsigned 32-bit domain (optional bounds).
  - long    : Random integer from the unsigned 64-bit domain (optional bounds).
  - float   : Single-precision fraction in [0, 1).
  - double  : Double-precision fraction in [0, 1).
  - bytes   : Random bytes as hex, base64 or raw.
  - string  : Random string over the default or a custom alphabet.
  - demo    : One of everything.

Environment:
  RNGKIT_BUFFER_SIZE / RNGKIT_SOURCE / RNGKIT_SOURCE_PATH configure the generator
  (see `rngkit.config.GeneratorConfig.from_env`); RNGKIT_LOG_LEVEL and
  RNGKIT_LOG_FORMAT configure logging.

Example:
  rngkit int --min 1 --max 6
  rngkit string 32 --charset 0123456789abcdef
  rngkit --buffer-size 4096 bytes 2048 --format b64
"""

from __future__ import annotations

import base64
import sys
import warnings
from typing import List, Optional

import typer

from ..config import GeneratorConfig
from ..errors import RNGError, RNGWarning
from ..generator import Generator
from ..log import setup_logging
from ..version import __version__

__all__ = ["app", "main"]

app = typer.Typer(
    name="rngkit",
    help="Draw unbiased values from a cryptographically secure byte source.",
    no_args_is_help=True,
    add_completion=False,
)


def _generator(ctx: typer.Context) -> Generator:
    return ctx.obj["generator"]


def _bounds(minimum: Optional[int], maximum: Optional[int]) -> List[int]:
    if minimum is not None and maximum is None:
        raise typer.BadParameter("--min requires --max")
    if maximum is None:
        return []
    if minimum is None:
        return [maximum]
    return [minimum, maximum]


def _run(fn, *args):
    try:
        return fn(*args)
    except RNGError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(2)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(0)


@app.callback()
def main_callback(
    ctx: typer.Context,
    buffer_size: Optional[int] = typer.Option(
        None, "--buffer-size", "-b", help="Shared buffer capacity in bytes (default 1024)."
    ),
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="JSON/YAML config file (overrides environment)."
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG|INFO|WARNING|ERROR"),
    log_format: Optional[str] = typer.Option(None, "--log-format", help="plain|json"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
    ),
) -> None:
    setup_logging(level=log_level, fmt=log_format)
    # advisories are already logged; keep the CLI output to the value itself
    warnings.simplefilter("ignore", RNGWarning)
    try:
        cfg = GeneratorConfig.from_file(config) if config else GeneratorConfig.from_env()
    except (OSError, ValueError) as e:
        typer.echo(f"error: invalid configuration: {e}", err=True)
        raise typer.Exit(2)
    if buffer_size is not None:
        cfg.buffer_size = buffer_size
    ctx.obj = {"generator": Generator.from_config(cfg)}


@app.command("bool")
def cmd_bool(ctx: typer.Context) -> None:
    """Print true or false."""
    typer.echo(str(_run(_generator(ctx).generate_boolean)).lower())


@app.command("int")
def cmd_int(
    ctx: typer.Context,
    minimum: Optional[int] = typer.Option(None, "--min", help="Inclusive lower bound (needs --max)."),
    maximum: Optional[int] = typer.Option(None, "--max", help="Inclusive upper bound."),
    count: int = typer.Option(1, "--count", "-n", min=1, help="How many values to print."),
) -> None:
    """Print random 32-bit integers."""
    bounds = _bounds(minimum, maximum)
    for _ in range(count):
        typer.echo(_run(_generator(ctx).generate_int, *bounds))


@app.command("long")
def cmd_long(
    ctx: typer.Context,
    minimum: Optional[int] = typer.Option(None, "--min", help="Inclusive lower bound (needs --max)."),
    maximum: Optional[int] = typer.Option(None, "--max", help="Inclusive upper bound."),
    count: int = typer.Option(1, "--count", "-n", min=1, help="How many values to print."),
) -> None:
    """Print random 64-bit integers."""
    bounds = _bounds(minimum, maximum)
    for _ in range(count):
        typer.echo(_run(_generator(ctx).generate_long, *bounds))


@app.command("float")
def cmd_float(ctx: typer.Context) -> None:
    """Print a single-precision fraction in [0, 1)."""
    typer.echo(repr(_run(_generator(ctx).generate_float)))


@app.command("double")
def cmd_double(ctx: typer.Context) -> None:
    """Print a double-precision fraction in [0, 1)."""
    typer.echo(repr(_run(_generator(ctx).generate_double)))


@app.command("bytes")
def cmd_bytes(
    ctx: typer.Context,
    length: int = typer.Argument(..., help="Number of bytes."),
    fmt: str = typer.Option("hex", "--format", "-f", help="hex | b64 | raw"),
) -> None:
    """Print random bytes."""
    if fmt not in ("hex", "b64", "raw"):
        raise typer.BadParameter("--format must be one of hex, b64, raw")
    data = _run(_generator(ctx).generate_byte_array, length)
    if fmt == "raw":
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    elif fmt == "b64":
        typer.echo(base64.b64encode(data).decode("ascii"))
    else:
        typer.echo(data.hex())


@app.command("string")
def cmd_string(
    ctx: typer.Context,
    length: int = typer.Argument(..., help="Number of characters."),
    charset: Optional[str] = typer.Option(None, "--charset", "-s", help="Alphabet to draw from."),
    keep_duplicates: bool = typer.Option(
        False, "--keep-duplicates", help="Weight repeated characters instead of collapsing them."
    ),
) -> None:
    """Print a random string."""
    gen = _generator(ctx)
    if charset is None:
        typer.echo(_run(gen.generate_string, length))
    else:
        typer.echo(_run(gen.generate_string, length, charset, not keep_duplicates))


@app.command("demo")
def cmd_demo(ctx: typer.Context) -> None:
    """Draw one of everything."""
    gen = _generator(ctx)
    lines = [
        ("generate_boolean()", gen.generate_boolean()),
        ("generate_int()", gen.generate_int()),
        ("generate_int(999)", gen.generate_int(999)),
        ("generate_int(999, 9999)", gen.generate_int(999, 9999)),
        ("generate_long()", gen.generate_long()),
        ("generate_long(999999999)", gen.generate_long(999999999)),
        ("generate_long(999999999, 999999999999)", gen.generate_long(999999999, 999999999999)),
        ("generate_float()", gen.generate_float()),
        ("generate_double()", gen.generate_double()),
        ("generate_string(99)", gen.generate_string(99)),
        ("generate_string(99, 'abcd')", gen.generate_string(99, "abcd")),
        ("generate_byte_array(32)", gen.generate_byte_array(32).hex()),
    ]
    width = max(len(name) for name, _ in lines)
    for name, value in lines:
        typer.echo(f"{name.ljust(width)}  {value}")


def main() -> None:  # pragma: no cover
    try:
        app(prog_name="rngkit")
    except KeyboardInterrupt:
        typer.echo("", err=True)
        sys.exit(130)


if __name__ == "__main__":  # pragma: no cover
    main()
