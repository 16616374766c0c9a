"""
Audit Trail Module

Hash-chained immutable log of committed ledger operations. Each event stores
the SHA-256 hash of its predecessor so any edit to the history is detectable.
"""

import hashlib
import json
import threading
import uuid
from datetime import datetime, timezone
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional, Any
from enum import Enum

from .storage import AuditStore


class AuditEventType(Enum):
    """Types of audit events"""
    LEDGER_INITIALIZED = "ledger_initialized"
    TRANSFER_COMMITTED = "transfer_committed"
    DEPOSIT_OPENED = "deposit_opened"
    DEPOSIT_WITHDRAWN = "deposit_withdrawn"


@dataclass
class AuditEvent:
    """
    Immutable audit event with hash chaining for tamper detection
    """
    id: str
    sequence: int
    recorded_at: datetime
    event_type: AuditEventType
    account: str
    previous_hash: str
    current_hash: str
    metadata: Dict[str, Any]

    def calculate_hash(self) -> str:
        """
        Calculate SHA-256 hash of this event
        Hash covers every field except current_hash itself
        """
        hash_data = {
            'id': self.id,
            'sequence': self.sequence,
            'recorded_at': self.recorded_at.isoformat(),
            'event_type': self.event_type.value,
            'account': self.account,
            'previous_hash': self.previous_hash,
            'metadata': self.metadata
        }

        json_data = json.dumps(hash_data, sort_keys=True, separators=(',', ':'), default=str)
        return hashlib.sha256(json_data.encode('utf-8')).hexdigest()

    def verify_hash(self) -> bool:
        """Verify that the current hash is correct"""
        return self.current_hash == self.calculate_hash()

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result['recorded_at'] = self.recorded_at.isoformat()
        result['event_type'] = self.event_type.value
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AuditEvent':
        data = dict(data)
        data['recorded_at'] = datetime.fromisoformat(data['recorded_at'])
        data['event_type'] = AuditEventType(data['event_type'])
        return cls(**data)


class AuditTrail:
    """
    Hash-chained audit trail for tamper detection
    """

    def __init__(self, store: AuditStore):
        self.store = store
        self._lock = threading.Lock()
        self._last_hash = ""
        self._sequence = 0

        latest = store.latest()
        if latest:
            self._last_hash = latest['current_hash']
            self._sequence = latest['sequence']

    def log_event(
        self,
        event_type: AuditEventType,
        account: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> AuditEvent:
        """
        Log an audit event with hash chaining

        Args:
            event_type: Type of audit event
            account: Account that initiated the operation
            metadata: Operation-specific data

        Returns:
            Created AuditEvent
        """
        with self._lock:
            event = AuditEvent(
                id=str(uuid.uuid4()),
                sequence=self._sequence + 1,
                recorded_at=datetime.now(timezone.utc),
                event_type=event_type,
                account=account,
                previous_hash=self._last_hash,
                current_hash="",
                metadata=metadata or {}
            )
            event.current_hash = event.calculate_hash()

            self.store.append(event.to_dict())

            self._last_hash = event.current_hash
            self._sequence = event.sequence
            return event

    def get_all_events(self, limit: Optional[int] = None) -> List[AuditEvent]:
        """Get all audit events in chain order"""
        events = [AuditEvent.from_dict(data) for data in self.store.entries()]
        if limit:
            events = events[-limit:]
        return events

    def get_events_for_account(self, account: str) -> List[AuditEvent]:
        """Get all audit events initiated by an account"""
        return [AuditEvent.from_dict(data) for data in self.store.entries_for(account)]

    def verify_integrity(self) -> Dict[str, Any]:
        """
        Verify the integrity of the entire audit chain

        Returns:
            Dictionary with integrity check results
        """
        result = {
            'valid': True,
            'total_events': 0,
            'hash_errors': [],
            'chain_breaks': []
        }

        events = self.get_all_events()
        result['total_events'] = len(events)

        previous_hash = ""
        for i, event in enumerate(events):
            if not event.verify_hash():
                result['valid'] = False
                result['hash_errors'].append({
                    'event_id': event.id,
                    'position': i,
                    'expected_hash': event.calculate_hash(),
                    'actual_hash': event.current_hash
                })
            if event.previous_hash != previous_hash:
                result['valid'] = False
                result['chain_breaks'].append({
                    'event_id': event.id,
                    'position': i,
                    'expected_previous_hash': previous_hash,
                    'actual_previous_hash': event.previous_hash
                })
            previous_hash = event.current_hash

        return result

    def count_events(self) -> int:
        return len(self.store)
