from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class InvalidInvocation:
    message: str


@dataclass(frozen=True, slots=True)
class MapNotFound:
    path: Path
    element: str | None = None


@dataclass(frozen=True, slots=True)
class MalformedMap:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class MissingNames:
    path: Path
    names: tuple[str, ...]
    resolved: tuple[str, ...] = ()


PkgMapError = InvalidInvocation | MapNotFound | MalformedMap | MissingNames
