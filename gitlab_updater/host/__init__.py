"""Host package - local stand-in for the CMS update lifecycle."""

from .local import LocalHost

__all__ = ["LocalHost"]
