"""Effective mapping merge and per-name resolution."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from pkgmap.core.structured import StrMap

from .document import MappingDocument, Tier

__all__ = [
    "Resolution",
    "effective_mapping",
    "merge_tiers",
    "passthrough",
    "resolve_names",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of resolving a batch of logical names.

    Attributes:
        packages: Lines to print, in input order.
        suppressed: Names explicitly mapped to an empty string.
        fallback: Unmapped names echoed unchanged (missing-ok mode).
        missing: Unmapped names without missing-ok; non-empty means failure.
    """

    packages: tuple[str, ...] = ()
    suppressed: tuple[str, ...] = ()
    fallback: tuple[str, ...] = ()
    missing: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.missing


def merge_tiers(tiers: Iterable[Tier]) -> StrMap:
    """Overlay tiers onto an empty accumulator; later tiers win per key."""
    merged: StrMap = {}
    for tier in tiers:
        logger.debug("applying %s (%d names)", tier.label, len(tier.names))
        merged.update(tier.names)
    return merged


def effective_mapping(
    document: MappingDocument, distro: str, release: str | None = None
) -> StrMap:
    return merge_tiers(document.tiers(distro, release))


def resolve_names(
    mapping: StrMap, names: Sequence[str], *, missing_ok: bool = False
) -> Resolution:
    """Resolve each name against the effective mapping.

    Missing names are collected over the whole pass so every one of them
    can be reported, not only the first.
    """
    packages: list[str] = []
    suppressed: list[str] = []
    fallback: list[str] = []
    missing: list[str] = []

    for name in names:
        if name not in mapping:
            if missing_ok:
                logger.debug("%s: no mapping, passing through", name)
                fallback.append(name)
                packages.append(name)
            else:
                missing.append(name)
            continue

        package = mapping[name]
        if package:
            logger.debug("%s -> %s", name, package)
            packages.append(package)
        else:
            logger.debug("%s: mapped to nothing", name)
            suppressed.append(name)

    return Resolution(
        packages=tuple(packages),
        suppressed=tuple(suppressed),
        fallback=tuple(fallback),
        missing=tuple(missing),
    )


def passthrough(names: Sequence[str]) -> Resolution:
    """Identity resolution used when no mapping document exists."""
    return Resolution(packages=tuple(names), fallback=tuple(names))
