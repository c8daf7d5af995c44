"""Capability data models."""

from enum import Enum
from typing import Any
from pydantic import BaseModel, Field


class CapabilityStatus(str, Enum):
    """Status of a capability in the current environment."""
    AVAILABLE = "available"
    RESTRICTED = "restricted"
    UNAVAILABLE = "unavailable"


class CapabilityDescriptor(BaseModel):
    """Describes a capability handed to the updater components.

    This is the metadata about a capability, not the implementation.
    """
    name: str = Field(..., description="Unique capability name, e.g., 'fs.copy_dir'")
    description: str = Field(..., description="Human-readable description of what this capability does")
    status: CapabilityStatus = Field(default=CapabilityStatus.AVAILABLE)
    operations: list[str] = Field(
        default_factory=list,
        description="Operations offered by the capability"
    )
    restrictions: list[str] = Field(
        default_factory=list,
        description="Any restrictions on this capability (e.g., 'limited to /var/www')"
    )


class CapabilityResult(BaseModel):
    """Result of a capability call that does not raise."""
    success: bool
    value: Any = None
    error: str | None = None
    status_code: int | None = None

    @classmethod
    def ok(cls, value: Any, status_code: int | None = None) -> "CapabilityResult":
        return cls(success=True, value=value, status_code=status_code)

    @classmethod
    def fail(cls, error: str, status_code: int | None = None) -> "CapabilityResult":
        return cls(success=False, error=error, status_code=status_code)
