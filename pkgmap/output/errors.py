"""Error presentation and exit code mapping."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pkgmap.core.config import ConfigError
from pkgmap.core.errors import ErrorCode
from pkgmap.mapping.errors import (
    InvalidInvocation,
    MalformedMap,
    MapNotFound,
    MissingNames,
    PkgMapError,
)
from pkgmap.output.console import Style

if TYPE_CHECKING:
    from pkgmap.output.console import ConsoleProtocol

__all__ = ["print_pkg_map_error", "pkg_map_error_exit_code", "print_config_error"]


def print_pkg_map_error(error: PkgMapError, console: ConsoleProtocol) -> None:
    """Print a resolution error to the console."""
    match error:
        case InvalidInvocation(message=message):
            console.error(message)
            console.print("usage: pkg-map [--element NAME | --pkg-map PATH] NAME...", Style.DIM)
        case MapNotFound(path=path, element=element):
            label = element or str(path)
            console.error(f"Required pkg-map for {label} not found ({path})")
        case MalformedMap(path=path, reason=reason):
            console.error(f"Unable to parse {path}: {reason}")
        case MissingNames(path=path, names=names):
            for name in names:
                console.error(f"{path} has no valid mapping for package {name}")


def pkg_map_error_exit_code(error: PkgMapError) -> ErrorCode:
    """Map a resolution error to the process exit code."""
    match error:
        case MapNotFound():
            return ErrorCode.MAP_NOT_FOUND
        case InvalidInvocation() | MalformedMap() | MissingNames():
            return ErrorCode.USER_ERROR


def print_config_error(error: ConfigError, console: ConsoleProtocol) -> None:
    console.error(error.message)
