"""
Notification log, audit and invariant endpoints
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..ledger import LedgerEngine
from .dependencies import get_engine
from .schemas import EventListModel, EventModel


router = APIRouter()


@router.get("/events", response_model=EventListModel)
def list_events(limit: Optional[int] = Query(None, ge=1), engine: LedgerEngine = Depends(get_engine)):
    """Committed notifications, oldest first"""
    events = engine.events
    if limit:
        events = events[-limit:]
    return EventListModel(events=[
        EventModel(sequence=e.sequence, event_type=e.name, data=e.data)
        for e in events
    ])


@router.get("/audit/verify")
def verify_audit_trail(engine: LedgerEngine = Depends(get_engine)):
    """Verify the hash chain of the audit trail"""
    if engine.audit_trail is None:
        return {"enabled": False}
    return {"enabled": True, **engine.audit_trail.verify_integrity()}


@router.get("/invariants")
def check_invariants(engine: LedgerEngine = Depends(get_engine)):
    """Check conservation of supply"""
    return engine.verify_invariants()
