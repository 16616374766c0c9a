"""
Event System Module

Notification payloads emitted by the ledger and a publish/subscribe
dispatcher that delivers them to in-process subscribers.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone
import uuid
import logging
from threading import RLock


# Sender of the mint notification emitted at initialization
ZERO_ACCOUNT = "0x0000000000000000000000000000000000000000"


class LedgerEvent(Enum):
    """Notifications a committed ledger operation can emit"""
    TRANSFER = "Transfer"
    TOKENS_DEPOSITED = "TokensDeposited"
    TOKENS_WITHDRAWN = "TokensWithdrawn"


@dataclass
class EventPayload:
    """Payload for ledger notifications"""
    event_type: LedgerEvent
    data: Dict[str, Any]
    sequence: int = 0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def name(self) -> str:
        return self.event_type.value

    def args(self) -> tuple:
        """Event fields in declaration order"""
        return tuple(self.data.values())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'event_type': self.event_type.value,
            'data': self.data,
            'sequence': self.sequence,
            'timestamp': self.timestamp.isoformat(),
            'event_id': self.event_id
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EventPayload':
        """Create from dictionary"""
        return cls(
            event_type=LedgerEvent(data['event_type']),
            data=data['data'],
            sequence=data.get('sequence', 0),
            timestamp=datetime.fromisoformat(data['timestamp']) if isinstance(data['timestamp'], str) else data['timestamp'],
            event_id=data['event_id']
        )


def _handler_name(handler: Callable) -> str:
    return getattr(handler, '__name__', repr(handler))


class EventDispatcher:
    """Central event dispatcher, publish/subscribe pattern"""

    def __init__(self):
        self._handlers: Dict[LedgerEvent, List[Callable]] = {}
        self._global_handlers: List[Callable] = []  # catch-all handlers
        self._lock = RLock()
        self.logger = logging.getLogger("token_ledger.events")

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
            self.logger.debug(f"Publishing event {event.name} #{event.sequence}")

            for handler in list(self._handlers.get(event.event_type, [])):
                try:
                    handler(event)
                except Exception as e:
                    # Subscribers cannot undo a committed operation
                    self.logger.error(f"Error in event handler {_handler_name(handler)} for {event.name}: {e}")

            for handler in list(self._global_handlers):
                try:
                    handler(event)
                except Exception as e:
                    self.logger.error(f"Error in global event handler {_handler_name(handler)} for {event.name}: {e}")

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


def create_transfer_event(sender: str, recipient: str, amount: int) -> EventPayload:
    """Transfer{from, to, amount}"""
    return EventPayload(
        event_type=LedgerEvent.TRANSFER,
        data={"from": sender, "to": recipient, "amount": amount}
    )


def create_deposit_event(depositor: str, amount: int, timestamp: int) -> EventPayload:
    """TokensDeposited{depositor, amount, timestamp}"""
    return EventPayload(
        event_type=LedgerEvent.TOKENS_DEPOSITED,
        data={"depositor": depositor, "amount": amount, "timestamp": timestamp}
    )


def create_withdrawal_event(depositor: str, principal: int, interest: int, total: int) -> EventPayload:
    """TokensWithdrawn{depositor, principal, interest, total}"""
    return EventPayload(
        event_type=LedgerEvent.TOKENS_WITHDRAWN,
        data={
            "depositor": depositor,
            "principal": principal,
            "interest": interest,
            "total": total
        }
    )
