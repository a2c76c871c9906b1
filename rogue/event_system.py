"""
Event system for game sessions.

The session publishes what happens on each command or tick; render and
logging consumers subscribe to the events they care about instead of
reaching into engine internals.
"""

import sys
from enum import Enum, auto
from typing import Callable, Any, Dict, List, Optional
from dataclasses import dataclass, field


class Event(Enum):
    """Event types that can occur during a game session."""

    # Session lifecycle
    LEVEL_START = auto()
    ENEMIES_CLEARED = auto()
    PLAYER_DEFEATED = auto()

    # Player actions
    PLAYER_MOVED = auto()  # kwargs: x, y
    ITEM_PICKED_UP = auto()  # kwargs: item, x, y
    ENEMY_DAMAGED = auto()  # kwargs: enemy_id, hp
    ENEMY_KILLED = auto()  # kwargs: enemy_id

    # Enemy tick
    ENEMY_MOVED = auto()  # kwargs: enemy_id, x, y
    PLAYER_DAMAGED = auto()  # kwargs: enemy_id, hp

    # Something visible changed; redraw
    STATE_CHANGED = auto()  # kwargs: command


@dataclass
class EventData:
    """Container for event data passed to handlers."""

    event: Event
    kwargs: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        if self.kwargs:
            kwargs_str = ", ".join(f"{k}={v}" for k, v in self.kwargs.items())
            return f"EventData({self.event.name}, {kwargs_str})"
        return f"EventData({self.event.name})"


# Event handler signature: takes event data, returns nothing
EventHandler = Callable[[EventData], None]


class EventBus:
    """
    Event bus for publishing and subscribing to game events.

    Subscribers register handlers for specific event types, and the session
    emits events that trigger those handlers synchronously, in subscription
    order.
    """

    def __init__(self) -> None:
        """Initialize an empty event bus."""
        self._handlers: Dict[Event, List[EventHandler]] = {}
        self._debug: bool = False

    def set_debug(self, debug: bool) -> None:
        """Enable or disable debug logging of events."""
        self._debug = debug

    def subscribe(self, event: Event, handler: EventHandler) -> None:
        """
        Subscribe a handler to an event type.

        Args:
            event: The event type to listen for
            handler: Callable that takes EventData and returns None
        """
        if event not in self._handlers:
            self._handlers[event] = []
        self._handlers[event].append(handler)

    def unsubscribe(self, event: Event, handler: EventHandler) -> None:
        """
        Unsubscribe a handler from an event type.

        Raises:
            ValueError: If handler was not subscribed to this event
        """
        if event not in self._handlers:
            raise ValueError(f"No handlers registered for event {event}")
        if handler not in self._handlers[event]:
            raise ValueError(f"Handler not subscribed to event {event}")
        self._handlers[event].remove(handler)

    def emit(self, event: Event, **kwargs: Any) -> None:
        """
        Emit an event, triggering all subscribed handlers.

        Args:
            event: The event type to emit
            **kwargs: Event-specific data passed to handlers
        """
        event_data = EventData(event=event, kwargs=kwargs)

        if self._debug:
            print(f"[EventBus] Emitting: {event_data}", file=sys.stderr)

        for handler in list(self._handlers.get(event, [])):
            try:
                handler(event_data)
            except Exception as e:
                # Log and keep going so the remaining handlers still run
                print(f"[EventBus] Handler error for {event.name}: {e}", file=sys.stderr)
                if self._debug:
                    raise

    def clear(self) -> None:
        """Remove all event handlers."""
        self._handlers.clear()

    def handler_count(self, event: Optional[Event] = None) -> int:
        """
        Get the number of handlers registered.

        Args:
            event: If provided, count handlers for this event only.
                   If None, count total handlers across all events.
        """
        if event is not None:
            return len(self._handlers.get(event, []))
        return sum(len(handlers) for handlers in self._handlers.values())
