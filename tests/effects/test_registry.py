"""
Tests for the effect and aura registries.
"""

import pytest

from auras.core.errors import (
    DuplicateRegistrationError,
    NotFoundError,
    UnknownAuraError,
    UnknownEffectError,
)
from auras.effects.appliers import Noop
from auras.effects.effect import Effect
from auras.effects.reducers import OneOrMore
from auras.effects.registry import AuraRegistry, EffectRegistry


@pytest.fixture
def effects():
    return EffectRegistry()


@pytest.fixture
def auras():
    return AuraRegistry()


def test_define_and_get_effect(effects):
    effect = effects.define("Stunned", default=False, reduce=OneOrMore(), apply=Noop())

    assert isinstance(effect, Effect)
    assert effects.get("Stunned") is effect
    assert "Stunned" in effects
    assert len(effects) == 1
    assert effects.ids() == ["Stunned"]


def test_register_effect_object(effects):
    effect = Effect(id="Rooted", default=False, reduce=OneOrMore(), apply=Noop())
    assert effects.register(effect) is effect
    assert list(effects) == [effect]


def test_duplicate_effect(effects):
    """
    Test that an effect id can only be registered once.
    """
    effects.define("Stunned", default=False, reduce=OneOrMore(), apply=Noop())

    with pytest.raises(DuplicateRegistrationError) as excinfo:
        effects.define("Stunned", default=True, reduce=OneOrMore(), apply=Noop())
    assert excinfo.value.name == "Stunned"
    assert effects.get("Stunned").default is False


def test_unknown_effect(effects):
    with pytest.raises(UnknownEffectError) as excinfo:
        effects.get("Missing")
    assert excinfo.value.name == "Missing"
    assert isinstance(excinfo.value, NotFoundError)
    assert isinstance(excinfo.value, LookupError)


def test_define_and_get_aura(auras):
    aura = auras.define("Stun", lambda settings: {"EffectInstances": {}})
    assert auras.get("Stun") is aura
    assert auras.ids() == ["Stun"]


def test_aura_does_not_check_effects_on_registration(auras):
    """
    Test that effect ids inside an aura template are resolved lazily.
    """
    auras.define("Ghost", lambda settings: {"EffectInstances": {"Missing": {}}})
    assert "Ghost" in auras


def test_duplicate_and_unknown_aura(auras):
    auras.define("Stun", lambda settings: {"EffectInstances": {}})
    with pytest.raises(DuplicateRegistrationError):
        auras.define("Stun", lambda settings: {"EffectInstances": {}})
    with pytest.raises(UnknownAuraError):
        auras.get("Missing")


def test_registries_can_be_shared(effects, auras):
    """
    Test that two systems built on the same registries see the same
    definitions.
    """
    from auras import AuraSystem

    first = AuraSystem(effects=effects, auras=auras)
    second = AuraSystem(effects=effects, auras=auras)
    first.register_effect("Stunned", default=False, reduce=OneOrMore(), apply=Noop())

    assert "Stunned" in second.effects
