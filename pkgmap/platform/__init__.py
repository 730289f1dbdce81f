"""Platform classification."""

from .family import DISTRO_FAMILIES, OsFamily, os_family

__all__ = [
    "DISTRO_FAMILIES",
    "OsFamily",
    "os_family",
]
