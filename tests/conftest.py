"""
Shared fixtures for the aura engine tests.
"""

from typing import Any

import pytest

from auras import AuraSystem, ManualScheduler, OneOrMore, Sum


class Dummy:
    """A host object: hashable by identity, with a few pushed attributes."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.stunned = False
        self.armor = 0

    def __repr__(self) -> str:
        return f"Dummy({self.name})"


class ApplyRecorder:
    """Applier recording every (target, value) it is called with."""

    def __init__(self, attribute: str | None = None) -> None:
        self.attribute = attribute
        self.calls: list[tuple[Any, Any]] = []

    def __call__(self, target: Any, value: Any) -> None:
        self.calls.append((target, value))
        if self.attribute is not None:
            setattr(target, self.attribute, value)

    @property
    def values(self) -> list[Any]:
        return [value for _, value in self.calls]


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def system(scheduler):
    return AuraSystem(scheduler)


@pytest.fixture
def target():
    return Dummy("Target")


@pytest.fixture
def other_target():
    return Dummy("Other")


@pytest.fixture
def stun_recorder():
    return ApplyRecorder("stunned")


@pytest.fixture
def armor_recorder():
    return ApplyRecorder("armor")


@pytest.fixture
def stun_system(system, stun_recorder, armor_recorder):
    """
    A system with a one-or-more "Stunned" effect, a summing "Armor" effect
    and a few auras using them.
    """
    system.register_effect(
        "Stunned", default=False, reduce=OneOrMore(), apply=stun_recorder
    )
    system.register_effect("Armor", default=0, reduce=Sum("Amount"), apply=armor_recorder)
    system.register_aura(
        "Stun",
        lambda settings: {
            "Duration": settings.get("Duration", 1),
            "EffectInstances": {"Stunned": {}},
        },
    )
    system.register_aura(
        "Shield",
        lambda settings: {
            "EffectInstances": {"Armor": {"Amount": settings.get("Amount", 5)}},
        },
    )
    system.register_aura(
        "Petrify",
        lambda settings: {
            "Duration": settings.get("Duration", 5),
            "EffectInstances": {
                "Stunned": {},
                "Armor": {"Amount": settings.get("Amount", 10)},
            },
        },
    )
    return system
