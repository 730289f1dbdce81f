"""Distro to OS family classification.

The family tier of a mapping document is keyed by these names. Unknown
distros belong to no family, so that tier contributes nothing for them.
"""

from __future__ import annotations

from enum import Enum

__all__ = [
    "OsFamily",
    "DISTRO_FAMILIES",
    "os_family",
]


class OsFamily(Enum):
    """OS family, valued by its key in the ``family`` section."""

    REDHAT = "redhat"
    DEBIAN = "debian"
    ORACLE = "oracle"
    SUSE = "suse"
    GENTOO = "gentoo"
    NONE = ""

    def __str__(self) -> str:
        return self.value or "none"

    @property
    def key(self) -> str | None:
        """Section key in the mapping document, None for no family."""
        return self.value or None


DISTRO_FAMILIES: dict[str, OsFamily] = {
    "fedora": OsFamily.REDHAT,
    "rhel": OsFamily.REDHAT,
    "rhel7": OsFamily.REDHAT,
    "rhel8": OsFamily.REDHAT,
    "rhel9": OsFamily.REDHAT,
    "centos": OsFamily.REDHAT,
    "centos7": OsFamily.REDHAT,
    "rocky": OsFamily.REDHAT,
    "almalinux": OsFamily.REDHAT,
    "openeuler": OsFamily.REDHAT,
    "debian": OsFamily.DEBIAN,
    "ubuntu": OsFamily.DEBIAN,
    "oracle": OsFamily.ORACLE,
    "oraclelinux": OsFamily.ORACLE,
    "opensuse": OsFamily.SUSE,
    "sles": OsFamily.SUSE,
    "gentoo": OsFamily.GENTOO,
}


def os_family(distro: str) -> OsFamily:
    """Return the family of ``distro`` (exact, case-sensitive match)."""
    return DISTRO_FAMILIES.get(distro, OsFamily.NONE)
