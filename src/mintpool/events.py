"""
mintpool.events  ──  Lifecycle hooks for stored premints

    @on.inserted("zora_premint_v2")
    def announce(premint): ...

    @on.seen_on_chain()            # every kind
    def prune(premint): ...
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Callable, Dict, List

if TYPE_CHECKING:
    from .core.premint import PremintRecord

logger = logging.getLogger(__name__)

ANY_KIND = "*"
EVENT_TYPES = ("inserted", "seen_on_chain")

Handler = Callable[["PremintRecord"], None]


class EventRegistry:
    """Central registry for event handlers"""

    def __init__(self):
        # Maps event type -> premint kind -> handlers, in registration order
        self._handlers: Dict[str, Dict[str, List[Handler]]] = {
            event_type: defaultdict(list) for event_type in EVENT_TYPES
        }

    def register(self, event_type: str, kinds: tuple[str, ...], handler: Handler) -> None:
        """Register a handler for specific kinds (all kinds if none given)"""
        for kind in kinds or (ANY_KIND,):
            if handler not in self._handlers[event_type][kind]:
                self._handlers[event_type][kind].append(handler)

    def handlers_for(self, event_type: str, kind: str) -> List[Handler]:
        handlers = list(self._handlers[event_type].get(kind, ()))
        handlers += [
            h for h in self._handlers[event_type].get(ANY_KIND, ()) if h not in handlers
        ]
        return handlers

    def emit(self, event_type: str, premint: PremintRecord) -> None:
        """Emit event to all matching handlers.

        The store has already committed when this runs, so a failing handler
        is logged and the remaining handlers still run.
        """
        for handler in self.handlers_for(event_type, premint.kind):
            try:
                handler(premint)
            except Exception:
                logger.exception(
                    "%s handler %r failed for %s/%s",
                    event_type,
                    getattr(handler, "__name__", handler),
                    premint.kind,
                    premint.id,
                )

    def clear(self) -> None:
        for by_kind in self._handlers.values():
            by_kind.clear()


# Global registry instance
_registry = EventRegistry()


class OnDecorator:
    """Namespace for event decorators"""

    @staticmethod
    def inserted(*kinds: str) -> Callable[[Handler], Handler]:
        """Decorator for handling newly stored premints"""

        def decorator(func: Handler) -> Handler:
            _registry.register("inserted", kinds, func)
            return func

        return decorator

    @staticmethod
    def seen_on_chain(*kinds: str) -> Callable[[Handler], Handler]:
        """Decorator for handling premints confirmed on chain"""

        def decorator(func: Handler) -> Handler:
            _registry.register("seen_on_chain", kinds, func)
            return func

        return decorator


# Export the decorator interface
on = OnDecorator()


def emit_inserted(premint: PremintRecord) -> None:
    _registry.emit("inserted", premint)


def emit_seen_on_chain(premint: PremintRecord) -> None:
    _registry.emit("seen_on_chain", premint)


def clear_handlers() -> None:
    """Drop every registered handler."""
    _registry.clear()
