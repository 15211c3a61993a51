"""
Tests for the lifecycle event bus.
"""

import pytest

from auras.core.constants import RemovalReason
from auras.effects.event_system import AuraEvent, EffectEvent, EventBus, EventType


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def removed_event(target):
    return AuraEvent(
        event_type=EventType.AURA_REMOVED,
        target=target,
        aura_name="Stun",
        aura_instance_id="abc",
        reason=RemovalReason.REMOVED,
    )


def test_emit_reaches_listeners_of_the_type(bus, removed_event, mocker):
    """
    Test that listeners only receive events of the type they subscribed to.
    """
    on_removed = mocker.Mock()
    on_applied = mocker.Mock()
    bus.subscribe(EventType.AURA_REMOVED, on_removed)
    bus.subscribe(EventType.AURA_APPLIED, on_applied)

    bus.emit(removed_event)

    on_removed.assert_called_once_with(removed_event)
    on_applied.assert_not_called()


def test_listeners_run_in_subscription_order(bus, removed_event):
    order = []
    bus.subscribe(EventType.AURA_REMOVED, lambda event: order.append("first"))
    bus.subscribe(EventType.AURA_REMOVED, lambda event: order.append("second"))

    bus.emit(removed_event)

    assert order == ["first", "second"]


def test_unsubscribe(bus, removed_event, mocker):
    listener = mocker.Mock()
    bus.subscribe(EventType.AURA_REMOVED, listener)

    assert bus.has_listeners(EventType.AURA_REMOVED)
    assert bus.unsubscribe(EventType.AURA_REMOVED, listener) is True
    assert bus.unsubscribe(EventType.AURA_REMOVED, listener) is False
    assert not bus.has_listeners(EventType.AURA_REMOVED)

    bus.emit(removed_event)
    listener.assert_not_called()


def test_listener_errors_propagate(bus, removed_event, mocker):
    bus.subscribe(EventType.AURA_REMOVED, mocker.Mock(side_effect=RuntimeError("boom")))
    with pytest.raises(RuntimeError):
        bus.emit(removed_event)


def test_event_string_forms(removed_event, target):
    changed = EffectEvent(
        event_type=EventType.EFFECT_CHANGED,
        target=target,
        effect_id="Armor",
        value=3,
        active_count=1,
    )
    assert "Stun" in str(removed_event)
    assert str(changed) == "EffectEvent(EFFECT_CHANGED, Armor=3)"
