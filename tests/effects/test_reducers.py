"""
Tests for the stock reducers and appliers.
"""

import pytest

from auras.effects.appliers import Noop, SetAttribute
from auras.effects.effect import Effect
from auras.effects.effect_instance import EffectInstance
from auras.effects.reducers import Max, Min, OneOrMore, Product, Sum
from auras.engine.recompute import fold

from conftest import Dummy


def make_instances(*datas):
    return [
        EffectInstance(effect_id="Test", aura_instance_id=str(i), data=data)
        for i, data in enumerate(datas)
    ]


def folded(reducer, default, *datas):
    effect = Effect(id="Test", default=default, reduce=reducer, apply=Noop())
    return fold(effect, make_instances(*datas))


def test_one_or_more():
    assert folded(OneOrMore(), False) is False
    assert folded(OneOrMore(), False, {}) is True
    assert folded(OneOrMore(), False, {}, {}) is True


def test_sum():
    assert folded(Sum("Amount"), 0, {"Amount": 2}, {"Amount": 3}, {}) == 5
    assert folded(Sum("Amount", missing=1), 0, {"Amount": 2}, {}) == 3


def test_product():
    """
    Test multiplicative stacking of slows, missing fields count as 1.
    """
    result = folded(Product("Factor"), 1.0, {"Factor": 0.5}, {"Factor": 0.5}, {})
    assert result == pytest.approx(0.25)


def test_max_and_min_skip_missing_fields():
    datas = ({"Level": 3}, {}, {"Level": 7}, {"Level": 5})
    assert folded(Max("Level"), 0, *datas) == 7
    assert folded(Min("Level"), 100, *datas) == 3
    assert folded(Max("Level"), 0, {}) == 0


def test_set_attribute():
    dummy = Dummy("Target")
    SetAttribute("armor")(dummy, 12)
    assert dummy.armor == 12


def test_noop_leaves_target_untouched():
    dummy = Dummy("Target")
    Noop()(dummy, 12)
    assert dummy.armor == 0
