"""Command-line client for toggling and coloring Hue light groups."""

from __future__ import annotations

import argparse
import asyncio
import json
import math
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, NoReturn, Optional, Union

import httpx
import yaml

from . import __version__
from .client import DEFAULT_TIMEOUT, HueClient
from .config import CONFIG_ENV_PREFIX, BridgeConfig, load_config
from .errors import CliError, InvalidArgument
from .logging import LOG_LEVELS, configure_logging, get_logger, redact_url


logger = get_logger("hue.cli")


@dataclass(frozen=True)
class ClientOptions:
    """Invocation-wide options that are not part of the bridge config."""

    config_path: Optional[Path]
    timeout: float
    output: str
    dry_run: bool
    log_level: str
    log_format: str


@dataclass(frozen=True)
class ToggleCommand:
    group: int
    on: bool

    def payload(self) -> Dict[str, Any]:
        return {"on": self.on}


@dataclass(frozen=True)
class ColorCommand:
    group: int
    x: float
    y: float

    def payload(self) -> Dict[str, Any]:
        return {"xy": [self.x, self.y]}


Command = Union[ToggleCommand, ColorCommand]


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports bad input as `InvalidArgument`."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        raise InvalidArgument(message)


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(f"{CONFIG_ENV_PREFIX}{name}", default)


def _group_id(value: str) -> int:
    try:
        group = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"group must be an integer; got {value!r}") from None
    if group < 0:
        raise argparse.ArgumentTypeError(f"group must be non-negative; got {group}")
    return group


def _coordinate(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"coordinate must be a number; got {value!r}") from None
    if not math.isfinite(number):
        raise argparse.ArgumentTypeError(f"coordinate must be finite; got {value!r}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="hue",
        description=(
            "Toggle or color a Hue light group. Reads the bridge address, user key "
            "and color presets from ~/hueconfig.json (override with --config or "
            f"{CONFIG_ENV_PREFIX}CONFIG). Examples: `hue toggle 1 on`, "
            "`hue color 1 --xy 0.3 0.4`, `hue color 1 --name warm`."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        type=Path,
        default=_env("CONFIG"),
        help=f"Path to the JSON config file (env: {CONFIG_ENV_PREFIX}CONFIG).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=_env("TIMEOUT", str(DEFAULT_TIMEOUT)),
        help=(
            f"Request timeout in seconds (env: {CONFIG_ENV_PREFIX}TIMEOUT). "
            f"Defaults to {DEFAULT_TIMEOUT}."
        ),
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the request that would be sent instead of sending it.",
    )
    parser.add_argument(
        "--output",
        choices=["json", "yaml"],
        default=_env("OUTPUT", "json"),
        help=f"Format for --dry-run output (env: {CONFIG_ENV_PREFIX}OUTPUT). Defaults to 'json'.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=_env("LOG_LEVEL", "WARNING"),
        help=f"Log verbosity level (env: {CONFIG_ENV_PREFIX}LOG_LEVEL). Defaults to WARNING.",
    )
    parser.add_argument(
        "--log-format",
        choices=["plain", "json"],
        default=_env("LOG_FORMAT", "plain"),
        help=f"Log output format (env: {CONFIG_ENV_PREFIX}LOG_FORMAT).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_toggle_command(subparsers)
    _add_color_command(subparsers)
    return parser


def _add_toggle_command(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    toggle = subparsers.add_parser(
        "toggle",
        help="Turn a group on or off (PUT /groups/{group}/action with {'on': bool})",
        description="Switches every light in the group on or off.",
    )
    toggle.add_argument("group", type=_group_id, help="Group identifier")
    toggle.add_argument("status", help="Either 'on' or 'off'")
    toggle.set_defaults(func=_cmd_toggle)


def _add_color_command(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    color = subparsers.add_parser(
        "color",
        help="Set a group's color (PUT /groups/{group}/action with {'xy': [x, y]})",
        description=(
            "Sets the CIE xy color of every light in the group, either from explicit "
            "coordinates or from a preset listed under 'colors' in the config file."
        ),
    )
    color.add_argument("group", type=_group_id, help="Group identifier")
    selection = color.add_mutually_exclusive_group(required=True)
    selection.add_argument(
        "--xy",
        nargs=2,
        type=_coordinate,
        metavar=("X", "Y"),
        help="CIE xy chromaticity coordinates",
    )
    selection.add_argument("--name", help="Name of a color preset from the config file")
    color.set_defaults(func=_cmd_color)


def _load_options(args: argparse.Namespace) -> ClientOptions:
    output = args.output or "json"
    if output not in {"json", "yaml"}:
        raise InvalidArgument("Output format must be 'json' or 'yaml'")
    log_level = str(args.log_level).upper()
    if log_level not in LOG_LEVELS:
        raise InvalidArgument(f"Log level must be one of {list(LOG_LEVELS)}; got {args.log_level}")
    log_format = args.log_format or "plain"
    if log_format not in {"plain", "json"}:
        raise InvalidArgument("Log format must be 'plain' or 'json'")
    if not args.timeout > 0:
        raise InvalidArgument(f"Timeout must be positive; got {args.timeout}")

    return ClientOptions(
        config_path=Path(args.config).expanduser() if args.config else None,
        timeout=args.timeout,
        output=output,
        dry_run=args.dry_run,
        log_level=log_level,
        log_format=log_format,
    )


def _cmd_toggle(_config: BridgeConfig, args: argparse.Namespace) -> ToggleCommand:
    if args.status not in ("on", "off"):
        raise InvalidArgument(f"Status must be 'on' or 'off'; got {args.status!r}")
    return ToggleCommand(group=args.group, on=args.status == "on")


def _cmd_color(config: BridgeConfig, args: argparse.Namespace) -> ColorCommand:
    if args.xy is not None and args.name is not None:
        raise InvalidArgument("Choose either --xy or --name, not both.")
    if args.xy is not None:
        x, y = args.xy
        return ColorCommand(group=args.group, x=x, y=y)
    if args.name is None:
        raise InvalidArgument("One of --xy or --name is required.")
    preset = config.find_preset(args.name)
    logger.debug("Resolved preset", extra={"preset": preset.name, "x": preset.x, "y": preset.y})
    return ColorCommand(group=args.group, x=preset.x, y=preset.y)


def build_command(args: argparse.Namespace, config: BridgeConfig) -> Command:
    """Turn parsed arguments into a command, resolving preset names."""

    func: Callable[[BridgeConfig, argparse.Namespace], Command] = args.func
    return func(config, args)


async def dispatch(client: HueClient, command: Command) -> None:
    """Send `command` to the bridge as a single group action."""

    if isinstance(command, ToggleCommand):
        await client.set_group_on(command.group, command.on)
    else:
        await client.set_group_color(command.group, command.x, command.y)


async def _run(
    config: BridgeConfig,
    command: Command,
    options: ClientOptions,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> None:
    async with HueClient.from_config(config, timeout=options.timeout, transport=transport) as client:
        await dispatch(client, command)


def _describe_request(config: BridgeConfig, command: Command) -> Dict[str, Any]:
    client = HueClient.from_config(config)
    return {
        "method": "PUT",
        "url": redact_url(client.group_action_url(command.group)),
        "body": command.payload(),
    }


def _print_output(data: Any, output: str) -> None:
    if output == "yaml":
        yaml.safe_dump(data, sys.stdout, sort_keys=False)
    else:
        json.dump(data, sys.stdout, indent=2)
        sys.stdout.write("\n")


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = _build_parser()

    try:
        args = parser.parse_args(args=argv)
        options = _load_options(args)
        configure_logging(options.log_level, options.log_format)
        config = load_config(options.config_path)
        command = build_command(args, config)

        if options.dry_run:
            _print_output(_describe_request(config, command), options.output)
            return

        asyncio.run(_run(config, command, options))
    except CliError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        sys.exit(exc.exit_code)


if __name__ == "__main__":
    main()
