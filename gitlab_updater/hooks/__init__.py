"""Hooks package - lifecycle dispatch between host and updaters."""

from .dispatcher import HookDispatcher, PRE_INSTALL, pre_check, read_transient

__all__ = ["HookDispatcher", "PRE_INSTALL", "pre_check", "read_transient"]
