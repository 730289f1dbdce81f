"""Distro-specific package name resolution for disk-image builds."""

__version__ = "0.1.0"
