"""
Tests for ObjectEffectState and StateStore.
"""

import threading

import pytest

from auras.effects.aura import AuraInstance, AuraTemplate
from auras.engine.state import ObjectEffectState, StateStore


def make_aura(target, name, **effects):
    template = AuraTemplate(effect_instances=effects)
    return AuraInstance.from_template(name, target, template)


@pytest.fixture
def state(target):
    return ObjectEffectState(target)


# === ObjectEffectState ===


def test_register_indexes_effect_instances(state, target):
    """
    Test that the per-effect view always matches the registered auras.
    """
    shield = make_aura(target, "Shield", Armor={"Amount": 1})
    petrify = make_aura(target, "Petrify", Stunned={}, Armor={"Amount": 5})

    assert state.register(shield) == ["Armor"]
    assert state.register(petrify) == ["Stunned", "Armor"]

    assert [i["Amount"] for i in state.active_instances("Armor")] == [1, 5]
    assert state.has_effect("Stunned")
    assert len(state) == 2
    assert petrify.id in state


def test_register_twice_fails(state, target):
    shield = make_aura(target, "Shield", Armor={"Amount": 1})
    state.register(shield)
    with pytest.raises(ValueError):
        state.register(shield)


def test_unregister_drops_empty_effects(state, target):
    shield = make_aura(target, "Shield", Armor={"Amount": 1})
    state.register(shield)

    assert state.unregister(shield.id) is shield
    assert state.unregister(shield.id) is None
    assert not state.has_effect("Armor")
    assert "Armor" not in state.active_by_effect
    assert state.is_empty


def test_active_instances_exclude(state, target):
    first = make_aura(target, "Shield", Armor={"Amount": 1})
    second = make_aura(target, "Shield", Armor={"Amount": 2})
    state.register(first)
    state.register(second)

    remaining = state.active_instances("Armor", exclude=first.id)
    assert [i.aura_instance_id for i in remaining] == [second.id]
    assert state.active_instances("Missing") == []


def test_aura_queries(state, target):
    state.register(make_aura(target, "Shield", Armor={}))
    stun = make_aura(target, "Stun", Stunned={})
    state.register(stun)
    state.register(make_aura(target, "Shield", Armor={}))

    assert state.aura_names() == ["Shield", "Stun"]
    assert state.has_aura("Stun")
    assert not state.has_aura("Petrify")
    assert state.instances_of("Stun") == [stun.id]
    assert len(state.instances_of("Shield")) == 2


# === StateStore ===


def test_store_creates_on_demand(target):
    store = StateStore()
    assert store.get(target) is None

    state = store.create(target)
    assert store.create(target) is state
    assert target in store
    assert len(store) == 1


def test_locked_without_create_yields_none(target):
    store = StateStore()
    with store.locked(target) as state:
        assert state is None
    assert target not in store


def test_locked_holds_the_state_lock(target):
    """
    Test that another thread cannot enter the critical section while it is
    held.
    """
    store = StateStore()
    entered = threading.Event()
    results = []

    def contender():
        with store.locked(target) as state:
            results.append(state)
        entered.set()

    with store.locked(target, create=True) as state:
        thread = threading.Thread(target=contender)
        thread.start()
        assert not entered.wait(0.05)
    thread.join()
    assert results == [state]


def test_destroy_marks_released(target):
    store = StateStore()
    state = store.create(target)

    assert store.destroy(target) is state
    assert state.released
    assert target not in store
    assert store.destroy(target) is None


def test_locked_retries_after_release(target):
    """
    Test that a state destroyed while a caller waits for its lock is never
    handed out; a fresh state is created instead.
    """
    store = StateStore()
    old = store.create(target)
    acquired = []

    def waiter():
        with store.locked(target, create=True) as state:
            acquired.append(state)

    with old.lock:
        thread = threading.Thread(target=waiter)
        thread.start()
        # Let the waiter block on the old state's lock.
        thread.join(0.05)
        store.destroy(target)
    thread.join()

    assert len(acquired) == 1
    assert acquired[0] is not old
    assert store.get(target) is acquired[0]
