"""Hook dispatcher - named lifecycle points with filter handlers.

The host calls ``apply`` at fixed points of its update lifecycle. Every
handler registered for that point receives the current value plus the
call arguments and returns the (possibly changed) value for the next one.
"""

from dataclasses import dataclass, field
from itertools import count
from typing import Any, Callable

from gitlab_updater.core.errors import UpdaterError
from gitlab_updater.core.logging import get_logger

log = get_logger("hooks")

DEFAULT_PRIORITY = 10

PRE_INSTALL = "pre_install"


def pre_check(kind: str) -> str:
    """Hook run before the host stores a fresh update transient."""
    return f"pre_check_{kind}s"


def read_transient(kind: str) -> str:
    """Hook run whenever the host reads the update transient."""
    return f"read_transient_{kind}s"


@dataclass(order=True)
class _Registration:
    priority: int
    sequence: int
    handler: Callable[..., Any] = field(compare=False)
    name: str = field(compare=False, default="")


class HookDispatcher:
    """Registry of filter handlers per hook name."""

    def __init__(self):
        self._hooks: dict[str, list[_Registration]] = {}
        self._sequence = count()

    def register(self, hook: str, handler: Callable[..., Any], priority: int = DEFAULT_PRIORITY) -> None:
        """Register ``handler`` for ``hook``.

        Lower priorities run first; equal priorities run in registration order.
        """
        entry = _Registration(
            priority=priority,
            sequence=next(self._sequence),
            handler=handler,
            name=getattr(handler, "__qualname__", repr(handler)),
        )
        handlers = self._hooks.setdefault(hook, [])
        handlers.append(entry)
        handlers.sort()

    def unregister(self, hook: str, handler: Callable[..., Any]) -> bool:
        handlers = self._hooks.get(hook, [])
        for entry in handlers:
            if entry.handler == handler:
                handlers.remove(entry)
                return True
        return False

    def has_handlers(self, hook: str) -> bool:
        return bool(self._hooks.get(hook))

    def apply(self, hook: str, value: Any, *args: Any, strict: bool = False) -> Any:
        """Pipe ``value`` through every handler of ``hook``.

        A handler raising ``UpdaterError`` is logged and skipped, the value
        from before it flows on. With ``strict`` the error propagates
        instead. Other exceptions always propagate.
        """
        for entry in list(self._hooks.get(hook, [])):
            try:
                value = entry.handler(value, *args)
            except UpdaterError as e:
                if strict:
                    raise
                log.warning(
                    f"Handler {entry.name} failed on {hook}: {e.message}",
                    component="hooks",
                )
        return value
