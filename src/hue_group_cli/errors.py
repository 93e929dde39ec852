"""Error types raised by the Hue group CLI."""

from __future__ import annotations


class CliError(Exception):
    """Raised when the CLI encounters an expected error condition."""

    exit_code = 1


class ConfigReadError(CliError):
    """The configuration file is missing or could not be read."""


class ConfigParseError(CliError):
    """The configuration file is not valid JSON or lacks a required field."""


class InvalidArgument(CliError):
    """A command-line argument failed validation."""

    exit_code = 2


class PresetLookupError(CliError, LookupError):
    """No color preset matches the requested name."""


class NetworkError(CliError):
    """The request to the bridge could not be sent."""
