"""
Tests for the Event System (Observer Pattern)

Tests notification payloads and the publish/subscribe dispatcher.
"""

from datetime import datetime
from unittest.mock import Mock

from token_ledger.events import (
    LedgerEvent, EventPayload, EventDispatcher,
    create_transfer_event, create_deposit_event, create_withdrawal_event
)


class TestEventPayload:
    """Test EventPayload creation and serialization"""

    def test_event_payload_creation(self):
        event = create_transfer_event("alice", "bob", 50)

        assert event.event_type == LedgerEvent.TRANSFER
        assert event.name == "Transfer"
        assert event.data == {"from": "alice", "to": "bob", "amount": 50}
        assert event.args() == ("alice", "bob", 50)
        assert isinstance(event.timestamp, datetime)
        assert len(event.event_id) > 0

    def test_deposit_and_withdrawal_fields(self):
        deposited = create_deposit_event("alice", 500, 1700000000)
        withdrawn = create_withdrawal_event("alice", 500, 10, 510)

        assert deposited.name == "TokensDeposited"
        assert deposited.args() == ("alice", 500, 1700000000)
        assert withdrawn.name == "TokensWithdrawn"
        assert withdrawn.args() == ("alice", 500, 10, 510)

    def test_event_payload_serialization(self):
        original = create_withdrawal_event("alice", 500, 30, 530)
        original.sequence = 7

        event_dict = original.to_dict()
        assert event_dict['event_type'] == "TokensWithdrawn"
        assert event_dict['sequence'] == 7

        restored = EventPayload.from_dict(event_dict)
        assert restored.event_type == original.event_type
        assert restored.data == original.data
        assert restored.sequence == 7
        assert restored.timestamp == original.timestamp
        assert restored.event_id == original.event_id


class TestEventDispatcher:
    """Test the event dispatcher"""

    def test_subscribe_and_publish_single_event(self):
        dispatcher = EventDispatcher()
        handler = Mock()
        dispatcher.subscribe(LedgerEvent.TRANSFER, handler)

        event = create_transfer_event("alice", "bob", 1)
        dispatcher.publish(event)

        handler.assert_called_once_with(event)

    def test_handlers_only_receive_their_type(self):
        dispatcher = EventDispatcher()
        transfer_handler = Mock()
        deposit_handler = Mock()
        dispatcher.subscribe(LedgerEvent.TRANSFER, transfer_handler)
        dispatcher.subscribe(LedgerEvent.TOKENS_DEPOSITED, deposit_handler)

        deposit = create_deposit_event("alice", 5, 0)
        dispatcher.publish(deposit)

        transfer_handler.assert_not_called()
        deposit_handler.assert_called_once_with(deposit)

    def test_global_handler(self):
        dispatcher = EventDispatcher()
        handler = Mock()
        dispatcher.subscribe_all(handler)

        dispatcher.publish(create_transfer_event("a", "b", 1))
        dispatcher.publish(create_deposit_event("a", 1, 0))

        assert handler.call_count == 2

    def test_unsubscribe(self):
        dispatcher = EventDispatcher()
        handler = Mock()
        dispatcher.subscribe(LedgerEvent.TRANSFER, handler)
        dispatcher.unsubscribe(LedgerEvent.TRANSFER, handler)

        dispatcher.publish(create_transfer_event("a", "b", 1))

        handler.assert_not_called()
        assert dispatcher.get_handler_count() == 0

    def test_unsubscribe_unknown_handler_is_harmless(self):
        dispatcher = EventDispatcher()
        dispatcher.unsubscribe(LedgerEvent.TRANSFER, Mock())
        dispatcher.unsubscribe_all(Mock())

    def test_handler_error_does_not_stop_others(self):
        dispatcher = EventDispatcher()
        failing = Mock(side_effect=RuntimeError("boom"))
        healthy = Mock()
        dispatcher.subscribe(LedgerEvent.TRANSFER, failing)
        dispatcher.subscribe(LedgerEvent.TRANSFER, healthy)

        dispatcher.publish(create_transfer_event("a", "b", 1))

        failing.assert_called_once()
        healthy.assert_called_once()

    def test_handler_count_and_clear(self):
        dispatcher = EventDispatcher()
        dispatcher.subscribe(LedgerEvent.TRANSFER, Mock())
        dispatcher.subscribe(LedgerEvent.TOKENS_WITHDRAWN, Mock())
        dispatcher.subscribe_all(Mock())

        assert dispatcher.get_handler_count(LedgerEvent.TRANSFER) == 1
        assert dispatcher.get_handler_count() == 3

        dispatcher.clear()
        assert dispatcher.get_handler_count() == 0
