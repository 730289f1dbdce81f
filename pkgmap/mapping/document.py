"""Mapping document loading.

A mapping document is a JSON object with up to four sections, from
least to most specific:

    {
      "default": {"<name>": "<package>"},
      "family":  {"<family>": {"<name>": "<package>"}},
      "distro":  {"<distro>": {"<name>": "<package>"}},
      "release": {"<distro>": {"<release>": {"<name>": "<package>"}}}
    }

Every section is optional. Unknown top-level keys are ignored.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from pkgmap.core.result import Err, Ok, Result
from pkgmap.core.structured import StrMap, as_str_dict, is_str_map
from pkgmap.platform.family import os_family

from .errors import InvalidInvocation, MalformedMap, MapNotFound

__all__ = [
    "MappingDocument",
    "check_target",
    "Tier",
    "load_document",
    "locate",
    "parse_document",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Tier:
    """One overlay contributing to the effective mapping."""

    label: str
    names: StrMap


def _empty_nested() -> dict[str, StrMap]:
    return {}


def _empty_release() -> dict[str, dict[str, StrMap]]:
    return {}


@dataclass(frozen=True, slots=True)
class MappingDocument:
    """Parsed contents of one element's mapping document."""

    path: Path
    default: StrMap = field(default_factory=dict)
    family: dict[str, StrMap] = field(default_factory=_empty_nested)
    distro: dict[str, StrMap] = field(default_factory=_empty_nested)
    release: dict[str, dict[str, StrMap]] = field(default_factory=_empty_release)

    def tiers(self, distro: str, release: str | None = None) -> Iterator[Tier]:
        """Yield the tiers that apply to distro/release, least specific first.

        Tiers whose key is absent for this distro, family or release are
        skipped.
        """
        yield Tier("default", self.default)

        family = os_family(distro)
        if family.key is not None and family.key in self.family:
            yield Tier(f"family:{family}", self.family[family.key])

        if distro in self.distro:
            yield Tier(f"distro:{distro}", self.distro[distro])

        if release is not None:
            releases = self.release.get(distro, {})
            if release in releases:
                yield Tier(f"release:{distro}/{release}", releases[release])


def check_target(
    *, element: str | None, pkg_map: Path | None
) -> Result[None, InvalidInvocation]:
    """Check that exactly one of ``element`` and ``pkg_map`` is given."""
    if element and pkg_map:
        return Err(InvalidInvocation("Specify either --element or --pkg-map, not both"))
    if not element and not pkg_map:
        return Err(InvalidInvocation("Specify one of --element or --pkg-map"))
    return Ok(None)


def locate(
    *,
    element: str | None,
    pkg_map: Path | None,
    map_dir: Path,
) -> Result[Path, InvalidInvocation]:
    """Return the document path for an element or an explicit file."""
    checked = check_target(element=element, pkg_map=pkg_map)
    if isinstance(checked, Err):
        return checked
    if pkg_map:
        return Ok(pkg_map)
    return Ok(map_dir / str(element))


def load_document(path: Path) -> Result[MappingDocument, MapNotFound | MalformedMap]:
    """Read and parse the document at ``path``."""
    try:
        with path.open("r", encoding="utf-8") as handle:
            data: object = json.load(handle)
    except FileNotFoundError:
        return Err(MapNotFound(path))
    except json.JSONDecodeError as e:
        return Err(MalformedMap(path, f"invalid JSON: {e}"))
    except UnicodeDecodeError as e:
        return Err(MalformedMap(path, f"not UTF-8 text: {e}"))
    # Oversized integer literals and runaway nesting fail outside JSONDecodeError.
    except (ValueError, RecursionError) as e:
        return Err(MalformedMap(path, f"invalid JSON: {e}"))
    except OSError as e:
        return Err(MalformedMap(path, f"unreadable: {e}"))

    logger.debug("loaded mapping document %s", path)
    return parse_document(data, path)


def parse_document(data: object, path: Path) -> Result[MappingDocument, MalformedMap]:
    """Validate the shape of decoded JSON and build a MappingDocument."""
    root = as_str_dict(data)
    if root is None:
        return Err(MalformedMap(path, "top level must be a JSON object"))

    default: StrMap = {}
    if "default" in root:
        value = root["default"]
        if not is_str_map(value):
            return Err(MalformedMap(path, "'default' must map names to strings"))
        default = value

    family = _nested(root.get("family", {}), "family")
    if isinstance(family, str):
        return Err(MalformedMap(path, family))

    distro = _nested(root.get("distro", {}), "distro")
    if isinstance(distro, str):
        return Err(MalformedMap(path, distro))

    release: dict[str, dict[str, StrMap]] = {}
    section = root.get("release", {})
    releases = as_str_dict(section)
    if releases is None:
        return Err(MalformedMap(path, "'release' must be a JSON object"))
    for distro_name, per_distro in releases.items():
        nested = _nested(per_distro, f"release.{distro_name}")
        if isinstance(nested, str):
            return Err(MalformedMap(path, nested))
        release[distro_name] = nested

    return Ok(
        MappingDocument(
            path=path,
            default=default,
            family=family,
            distro=distro,
            release=release,
        )
    )


def _nested(value: object, where: str) -> dict[str, StrMap] | str:
    """Validate a ``{key: {name: package}}`` section; a str return is the problem."""
    section = as_str_dict(value)
    if section is None:
        return f"'{where}' must be a JSON object"

    out: dict[str, StrMap] = {}
    for sub, names in section.items():
        if not is_str_map(names):
            return f"'{where}.{sub}' must map names to strings"
        out[sub] = names
    return out
