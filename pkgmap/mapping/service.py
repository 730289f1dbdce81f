"""The load-merge-resolve pipeline behind the pkg-map command."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from pkgmap.core.config import DEFAULT_MAP_DIR
from pkgmap.core.result import Err, Ok, Result
from pkgmap.core.structured import StrMap

from .document import MappingDocument, load_document, locate
from .errors import InvalidInvocation, MapNotFound, MissingNames, PkgMapError
from .resolver import Resolution, effective_mapping, passthrough, resolve_names

__all__ = ["PkgMapRequest", "PkgMapService"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PkgMapRequest:
    """One invocation's inputs, after settings defaults were applied."""

    element: str | None = None
    pkg_map: Path | None = None
    distro: str | None = None
    release: str | None = None
    missing_ok: bool = False
    names: tuple[str, ...] = ()
    map_dir: Path = DEFAULT_MAP_DIR


class PkgMapService:
    def __init__(self, request: PkgMapRequest) -> None:
        self._request = request

    def run(self) -> Result[Resolution, PkgMapError]:
        """Resolve the requested names.

        Invocation problems are reported before the document is touched.
        A missing document is passed through when missing-ok is set.
        """
        req = self._request
        if not req.names:
            return Err(InvalidInvocation("No package names given"))

        prepared = self._prepare()
        if isinstance(prepared, Err):
            return prepared
        path, distro = prepared.value

        loaded = self._load(path)
        if isinstance(loaded, Err):
            return loaded
        document = loaded.value
        if document is None:
            return Ok(passthrough(req.names))

        mapping = effective_mapping(document, distro, req.release)
        resolution = resolve_names(mapping, req.names, missing_ok=req.missing_ok)
        if not resolution.ok:
            return Err(MissingNames(path, resolution.missing, resolved=resolution.packages))
        return Ok(resolution)

    def show(self) -> Result[StrMap, PkgMapError]:
        """Return the effective mapping instead of resolving names."""
        prepared = self._prepare()
        if isinstance(prepared, Err):
            return prepared
        path, distro = prepared.value

        loaded = self._load(path)
        if isinstance(loaded, Err):
            return loaded
        if loaded.value is None:
            return Ok({})
        return Ok(effective_mapping(loaded.value, distro, self._request.release))

    def _prepare(self) -> Result[tuple[Path, str], InvalidInvocation]:
        req = self._request
        located = locate(element=req.element, pkg_map=req.pkg_map, map_dir=req.map_dir)
        if isinstance(located, Err):
            return located
        if not req.distro:
            return Err(InvalidInvocation("Distro not set; use --distro or DISTRO_NAME"))

        logger.debug(
            "map=%s distro=%s release=%s missing_ok=%s",
            located.value,
            req.distro,
            req.release,
            req.missing_ok,
        )
        return Ok((located.value, req.distro))

    def _load(self, path: Path) -> Result[MappingDocument | None, PkgMapError]:
        """Load the document; Ok(None) means absent and tolerated."""
        loaded = load_document(path)
        if isinstance(loaded, Ok):
            return loaded

        error = loaded.error
        if isinstance(error, MapNotFound):
            if self._request.missing_ok:
                logger.debug("%s not found, names pass through unchanged", path)
                return Ok(None)
            return Err(MapNotFound(path, element=self._request.element))
        return loaded
