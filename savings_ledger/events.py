"""
Event System Module

Publish/subscribe dispatcher for ledger events. Events are emitted after a
state change has been committed; they exist for monitoring and are never
required for correctness.
"""

from enum import Enum
from typing import Callable, Dict, List, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone
import uuid
import logging
from threading import RLock


class LedgerEvent(Enum):
    """Events that can occur in the savings ledger"""
    DEPOSIT = "ledger.deposit"
    WITHDRAWAL = "ledger.withdrawal"
    INTEREST_ACCRUED = "ledger.interest_accrued"
    INTEREST_CLAIMED = "ledger.interest_claimed"
    PARAMETERS_UPDATED = "ledger.parameters_updated"


@dataclass
class EventPayload:
    """Payload for ledger events"""
    event_type: LedgerEvent
    user: Optional[str]
    data: Dict[str, Any]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'event_type': self.event_type.value,
            'user': self.user,
            'data': self.data,
            'timestamp': self.timestamp.isoformat(),
            'event_id': self.event_id
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EventPayload':
        """Create from dictionary"""
        return cls(
            event_type=LedgerEvent(data['event_type']),
            user=data['user'],
            data=data['data'],
            timestamp=datetime.fromisoformat(data['timestamp']) if isinstance(data['timestamp'], str) else data['timestamp'],
            event_id=data['event_id']
        )


def _handler_name(handler: Callable) -> str:
    return getattr(handler, "__name__", repr(handler))


class EventDispatcher:
    """Central event dispatcher, publish/subscribe pattern"""

    def __init__(self):
        self._handlers: Dict[LedgerEvent, List[Callable]] = {}
        self._global_handlers: List[Callable] = []  # catch-all handlers
        self._lock = RLock()
        self.logger = logging.getLogger("savings_ledger.events")

    def subscribe(self, event_type: LedgerEvent, handler: Callable) -> None:
        """Subscribe to a specific event type"""
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)
            self.logger.debug(f"Subscribed handler {_handler_name(handler)} to {event_type.value}")

    def subscribe_all(self, handler: Callable) -> None:
        """Subscribe to ALL events"""
        with self._lock:
            self._global_handlers.append(handler)
            self.logger.debug(f"Subscribed global handler {_handler_name(handler)}")

    def unsubscribe(self, event_type: LedgerEvent, handler: Callable) -> None:
        """Unsubscribe from a specific event type"""
        with self._lock:
            try:
                self._handlers.get(event_type, []).remove(handler)
                self.logger.debug(f"Unsubscribed handler {_handler_name(handler)} from {event_type.value}")
            except ValueError:
                self.logger.warning(f"Handler {_handler_name(handler)} was not subscribed to {event_type.value}")

    def unsubscribe_all(self, handler: Callable) -> None:
        """Unsubscribe a catch-all handler"""
        with self._lock:
            try:
                self._global_handlers.remove(handler)
                self.logger.debug(f"Unsubscribed global handler {_handler_name(handler)}")
            except ValueError:
                self.logger.warning(f"Global handler {_handler_name(handler)} was not subscribed")

    def publish(self, event: EventPayload) -> None:
        """Publish event to all subscribers"""
        with self._lock:
            handlers = list(self._handlers.get(event.event_type, [])) + list(self._global_handlers)

        self.logger.debug(f"Publishing event {event.event_type.value} for {event.user}")
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                # Log but don't break the ledger operation
                self.logger.error(f"Error in event handler {_handler_name(handler)} for {event.event_type.value}: {e}")

    def clear(self) -> None:
        """Clear all handlers"""
        with self._lock:
            self._handlers.clear()
            self._global_handlers.clear()
            self.logger.info("All event handlers cleared")

    def get_handler_count(self, event_type: Optional[LedgerEvent] = None) -> int:
        """Get count of handlers for a specific event type or all"""
        with self._lock:
            if event_type:
                return len(self._handlers.get(event_type, []))
            total = sum(len(handlers) for handlers in self._handlers.values())
            return total + len(self._global_handlers)


class EventRecorder:
    """Catch-all handler that keeps every event it sees, in order"""

    def __init__(self):
        self.events: List[EventPayload] = []
        self._lock = RLock()

    def __call__(self, event: EventPayload) -> None:
        with self._lock:
            self.events.append(event)

    def of_type(self, event_type: LedgerEvent) -> List[EventPayload]:
        with self._lock:
            return [event for event in self.events if event.event_type == event_type]


def create_ledger_event(event_type: LedgerEvent, user: Optional[str], timestamp: int, **data: Any) -> EventPayload:
    """Create a ledger event stamped with the ledger clock time"""
    payload = dict(data)
    payload["ledger_time"] = timestamp
    return EventPayload(event_type=event_type, user=user, data=payload)
