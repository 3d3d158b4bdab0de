"""
Typed event bus for decoupled communication.

Uses Enums for event types to prevent magic strings.

Usage:
    # Subscribe; keep the handle to release it later
    sub = event_bus.subscribe(UIEvent.DIALOG_ENDED, on_dialog_ended)

    # Publish
    event_bus.publish(UIEvent.DIALOG_ENDED)

    # Release
    sub.release()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable
from weakref import WeakMethod, ref


logger = logging.getLogger(__name__)


class EngineEvent(Enum):
    """Built-in engine events."""
    # Lifecycle
    GAME_START = auto()
    GAME_QUIT = auto()

    # Scene
    SCENE_PUSHED = auto()
    SCENE_POPPED = auto()

    # Window
    WINDOW_RESIZED = auto()

    # Entity
    ENTITY_CREATED = auto()
    ENTITY_DESTROYED = auto()


class UIEvent(Enum):
    """UI events."""
    DIALOG_STARTED = auto()
    DIALOG_ENDED = auto()       # Closure signal, no payload
    DIALOG_LINE_SHOWN = auto()
    PROMPT_CHANGED = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Dictionary of event-specific data
        consumed: Whether the event has been handled
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        """Mark event as consumed (stops propagation)."""
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        """Get event data by key."""
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]


EventHandler = Callable[[Event], None]


@dataclass(eq=False)
class _Listener:
    priority: int
    handler_ref: Any
    one_shot: bool
    alive: bool = True


class Subscription:
    """
    Handle returned by EventBus.subscribe.

    Releasing it detaches the handler immediately, including from a
    dispatch that is currently in progress.
    """

    def __init__(self, bus: EventBus, event_type: Enum, listener: _Listener):
        self._bus = bus
        self._event_type = event_type
        self._listener = listener

    @property
    def active(self) -> bool:
        return self._listener.alive

    @property
    def event_type(self) -> Enum:
        return self._event_type

    def release(self) -> None:
        """Detach the handler. Safe to call more than once."""
        if self._listener.alive:
            self._bus._detach(self._event_type, self._listener)

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.release()


class EventBus:
    """
    Central event bus for publish/subscribe messaging.

    Features:
    - Typed events (Enum-based)
    - Priority ordering
    - Weak references (auto-cleanup when handlers are deleted)
    - One-shot handlers
    - Event consumption (stops propagation)
    - Events published while dispatching are queued, never nested
    """

    def __init__(self):
        self._listeners: dict[Enum, list[_Listener]] = {}
        self._event_queue: list[Event] = []
        self._is_publishing = False

    def subscribe(
        self,
        event_type: Enum,
        handler: EventHandler,
        priority: int = 0,
        one_shot: bool = False,
        weak: bool = True,
    ) -> Subscription:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to listen for
            handler: Callback function(event: Event)
            priority: Higher priority handlers are called first (default 0)
            one_shot: If True, handler is removed after first call
            weak: If True, use weak reference (handler auto-removed if deleted)

        Returns:
            Subscription handle
        """
        if weak:
            if hasattr(handler, '__self__'):
                handler_ref = WeakMethod(handler)
            else:
                handler_ref = ref(handler)
        else:
            handler_ref = handler

        listener = _Listener(priority, handler_ref, one_shot)
        listeners = self._listeners.setdefault(event_type, [])

        # Equal priorities keep subscription order
        insert_idx = len(listeners)
        for i, existing in enumerate(listeners):
            if priority > existing.priority:
                insert_idx = i
                break
        listeners.insert(insert_idx, listener)

        return Subscription(self, event_type, listener)

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        """Remove every subscription of handler to event_type."""
        for listener in list(self._listeners.get(event_type, [])):
            if self._resolve(listener.handler_ref) == handler:
                self._detach(event_type, listener)

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Args:
            event_type: The event type
            **data: Event data as keyword arguments

        Returns:
            The Event object (check .consumed to see if it was handled)
        """
        event = Event(type=event_type, data=data)

        if self._is_publishing:
            self._event_queue.append(event)
        else:
            self._dispatch(event)

        return event

    def listener_count(self, event_type: Enum) -> int:
        """Number of live handlers for an event type."""
        return sum(
            1 for listener in self._listeners.get(event_type, [])
            if listener.alive and self._resolve(listener.handler_ref) is not None
        )

    def clear(self, event_type: Enum | None = None) -> None:
        """
        Clear handlers.

        Args:
            event_type: If specified, only clear handlers for this type.
                       If None, clear all handlers.
        """
        types = list(self._listeners) if event_type is None else [event_type]
        for etype in types:
            for listener in self._listeners.pop(etype, []):
                listener.alive = False

    def _detach(self, event_type: Enum, listener: _Listener) -> None:
        listener.alive = False
        listeners = self._listeners.get(event_type)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def _dispatch(self, event: Event) -> None:
        """Dispatch event to handlers, then drain the queue."""
        self._is_publishing = True
        try:
            # Snapshot: subscriptions made by a handler apply to the next event
            for listener in list(self._listeners.get(event.type, [])):
                if not listener.alive:
                    continue

                handler = self._resolve(listener.handler_ref)
                if handler is None:
                    self._detach(event.type, listener)
                    continue

                if listener.one_shot:
                    self._detach(event.type, listener)

                try:
                    handler(event)
                except Exception:
                    logger.exception("Error in event handler for %s", event.type)

                if event.consumed:
                    break
        finally:
            self._is_publishing = False

        while self._event_queue:
            self._dispatch(self._event_queue.pop(0))

    @staticmethod
    def _resolve(handler_ref: Any) -> EventHandler | None:
        if isinstance(handler_ref, (ref, WeakMethod)):
            return handler_ref()
        return handler_ref
