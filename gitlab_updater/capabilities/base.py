"""Base capability interface.

Capabilities are the only way updater components reach the outside world.
They are:
- Explicit: components receive them as constructor arguments
- Auditable: every failed operation surfaces as a CapabilityError or a failed result
- Restrictable: each can be limited to paths or domains
"""

from abc import ABC, abstractmethod

from gitlab_updater.models.capability import CapabilityDescriptor


class Capability(ABC):
    """Abstract base class for all capabilities.

    A capability is an explicit permission to perform a class of actions.
    Components cannot touch anything that isn't explicitly provided.
    """

    @property
    @abstractmethod
    def descriptor(self) -> CapabilityDescriptor:
        """Return the capability descriptor for this capability."""
        pass

    @property
    def name(self) -> str:
        """Shortcut to get capability name."""
        return self.descriptor.name
