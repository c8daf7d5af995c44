"""Capabilities package - filesystem and network access for updater components."""

from .base import Capability
from .filesystem import FileSystemCapability
from .network import NetworkFetchCapability

__all__ = [
    "Capability",
    "FileSystemCapability",
    "NetworkFetchCapability",
]
