"""Data models for the GitLab updater."""

from .capability import CapabilityDescriptor, CapabilityResult, CapabilityStatus
from .extension import ExtensionKind, ExtensionRegistration
from .transient import UpdateDescriptor, UpdateTransient

__all__ = [
    "CapabilityDescriptor",
    "CapabilityResult",
    "CapabilityStatus",
    "ExtensionKind",
    "ExtensionRegistration",
    "UpdateDescriptor",
    "UpdateTransient",
]
