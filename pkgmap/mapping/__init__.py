"""Mapping documents and package name resolution."""

from .document import (
    MappingDocument,
    Tier,
    check_target,
    load_document,
    locate,
    parse_document,
)
from .errors import InvalidInvocation, MalformedMap, MapNotFound, MissingNames, PkgMapError
from .resolver import Resolution, effective_mapping, merge_tiers, passthrough, resolve_names
from .service import PkgMapRequest, PkgMapService

__all__ = [
    # document
    "MappingDocument",
    "Tier",
    "check_target",
    "load_document",
    "locate",
    "parse_document",
    # errors
    "InvalidInvocation",
    "MalformedMap",
    "MapNotFound",
    "MissingNames",
    "PkgMapError",
    # resolver
    "Resolution",
    "effective_mapping",
    "merge_tiers",
    "passthrough",
    "resolve_names",
    # service
    "PkgMapRequest",
    "PkgMapService",
]
