from __future__ import annotations

import json
from pathlib import Path
from typing import NoReturn

import typer

from pkgmap import __version__
from pkgmap.cli.context import build_console, build_context
from pkgmap.core.errors import ErrorCode
from pkgmap.core.result import Err, Ok
from pkgmap.mapping.document import check_target
from pkgmap.mapping.errors import MissingNames, PkgMapError
from pkgmap.mapping.service import PkgMapRequest, PkgMapService
from pkgmap.output.console import ConsoleProtocol
from pkgmap.output.errors import pkg_map_error_exit_code, print_pkg_map_error
from pkgmap.output.log import configure_logging


app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    rich_markup_mode="rich",
)


@app.command(name="pkg-map")
def pkg_map(
    names: list[str] | None = typer.Argument(None, help="Logical package names to resolve."),
    element: str | None = typer.Option(
        None, "--element", help="Element whose mapping document to use."
    ),
    pkg_map_path: Path | None = typer.Option(
        None, "--pkg-map", help="Explicit mapping document (instead of --element)."
    ),
    distro: str | None = typer.Option(
        None, "--distro", help="Target distro [default: $DISTRO_NAME]."
    ),
    release: str | None = typer.Option(
        None, "--release", help="Target release [default: $DIB_RELEASE]."
    ),
    map_dir: Path | None = typer.Option(
        None, "--map-dir", help="Lookup root for element documents [default: $PKG_MAP_DIR]."
    ),
    missing_ok: bool = typer.Option(
        False, "--missing-ok", help="Pass unmapped names (or all, if no document) through."
    ),
    show_map: bool = typer.Option(
        False, "--show-map", help="Print the effective mapping as JSON and exit."
    ),
    debug: bool = typer.Option(False, "--debug", help="Trace resolution steps to stderr."),
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    """Translate logical package names into distro-specific ones."""
    configure_logging(debug)

    if version:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))

    console = build_console()
    target = check_target(element=element, pkg_map=pkg_map_path)
    if isinstance(target, Err):
        _fail(console, target.error)

    ctx = build_context(console)
    settings = ctx.settings.override(distro=distro, release=release, map_dir=map_dir)
    request = PkgMapRequest(
        element=element,
        pkg_map=pkg_map_path,
        distro=settings.distro,
        release=settings.release,
        missing_ok=missing_ok,
        names=tuple(names or ()),
        map_dir=settings.map_dir,
    )
    service = PkgMapService(request)

    if show_map:
        match service.show():
            case Ok(mapping):
                typer.echo(json.dumps(mapping, indent=2, sort_keys=True))
            case Err(error):
                _fail(ctx.console, error)
        return

    match service.run():
        case Ok(resolution):
            for package in resolution.packages:
                typer.echo(package)
        case Err(error):
            if isinstance(error, MissingNames):
                for package in error.resolved:
                    typer.echo(package)
            _fail(ctx.console, error)


def _fail(console: ConsoleProtocol, error: PkgMapError) -> NoReturn:
    print_pkg_map_error(error, console)
    raise typer.Exit(code=int(pkg_map_error_exit_code(error)))


def main() -> None:
    app()
