"""
Tests for the fold/push recomputation helpers.
"""

from auras.effects.effect import Effect
from auras.effects.effect_instance import EffectInstance
from auras.effects.reducers import Sum
from auras.engine.recompute import fold, push, recompute


def instance(**data):
    return EffectInstance(effect_id="Armor", aura_instance_id="a", data=data)


def test_fold_empty_returns_default(mocker):
    effect = Effect(id="Armor", default=0, reduce=Sum("Amount"), apply=mocker.Mock())
    assert fold(effect, []) == 0


def test_fold_does_not_mutate_default(mocker):
    """
    Test that a reducer mutating its accumulator leaves the default intact.
    """

    def collect(acc, inst):
        acc.append(inst["Tag"])
        return acc

    effect = Effect(id="Tags", default=[], reduce=collect, apply=mocker.Mock())

    assert fold(effect, [instance(Tag="a"), instance(Tag="b")]) == ["a", "b"]
    assert fold(effect, [instance(Tag="c")]) == ["c"]
    assert effect.default == []


def test_push_calls_apply(mocker, target):
    apply = mocker.Mock()
    effect = Effect(id="Armor", default=0, reduce=Sum("Amount"), apply=apply)

    push(effect, target, 4)

    apply.assert_called_once_with(target, 4)


def test_recompute_applies_exactly_once(mocker, target):
    apply = mocker.Mock()
    effect = Effect(id="Armor", default=0, reduce=Sum("Amount"), apply=apply)

    value = recompute(effect, target, [instance(Amount=2), instance(Amount=3)])

    assert value == 5
    apply.assert_called_once_with(target, 5)
