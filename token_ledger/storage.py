"""
Audit Store Module

Append-only backing store for the audit trail. Entries are JSON-compatible
dictionaries indexed by their chain sequence number, starting at 1.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import json
import threading


class AuditStore(ABC):
    """Append-only, sequence-indexed record store"""

    @abstractmethod
    def append(self, entry: Dict[str, Any]) -> int:
        """Store an entry at the next sequence number and return that number"""

    @abstractmethod
    def latest(self) -> Optional[Dict[str, Any]]:
        """Most recently appended entry, or None when empty"""

    @abstractmethod
    def entries(self) -> List[Dict[str, Any]]:
        """All entries in sequence order"""

    @abstractmethod
    def entries_for(self, account: str) -> List[Dict[str, Any]]:
        """Entries whose account field matches, in sequence order"""

    @abstractmethod
    def __len__(self) -> int:
        ...


class InMemoryAuditStore(AuditStore):
    """
    Audit store held in process memory

    Entries are copied through JSON on the way in and out, so callers can
    never alter what has been stored.
    """

    def __init__(self):
        self._entries: List[str] = []
        self._by_account: Dict[str, List[int]] = {}
        self._lock = threading.RLock()

    def append(self, entry: Dict[str, Any]) -> int:
        encoded = json.dumps(entry, default=str)
        with self._lock:
            self._entries.append(encoded)
            sequence = len(self._entries)
            account = entry.get('account')
            if account is not None:
                self._by_account.setdefault(account, []).append(sequence)
            return sequence

    def latest(self) -> Optional[Dict[str, Any]]:
        with self._lock:
            if not self._entries:
                return None
            return json.loads(self._entries[-1])

    def entries(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [json.loads(encoded) for encoded in self._entries]

    def entries_for(self, account: str) -> List[Dict[str, Any]]:
        with self._lock:
            return [
                json.loads(self._entries[sequence - 1])
                for sequence in self._by_account.get(account, [])
            ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
