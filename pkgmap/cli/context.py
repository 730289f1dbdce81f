from __future__ import annotations

from dataclasses import dataclass

import typer

from pkgmap.core.config import Settings, load_settings
from pkgmap.core.errors import ErrorCode
from pkgmap.core.result import Err
from pkgmap.output.console import ConsoleProtocol, RichConsole
from pkgmap.output.errors import print_config_error


@dataclass(frozen=True, slots=True)
class CLIContext:
    settings: Settings
    console: ConsoleProtocol


def build_console() -> ConsoleProtocol:
    return RichConsole()


def build_context(console: ConsoleProtocol) -> CLIContext:
    """Load settings; the settings file is the first file pkg-map reads."""
    settings_result = load_settings()
    if isinstance(settings_result, Err):
        print_config_error(settings_result.error, console)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(settings=settings_result.value, console=console)
