"""Test the operator table and its IEEE-754 behaviour."""
import math

import pytest

from expression_calculator.common.operators import OPERATORS, divide, modulus, power


def test_operator_phases():
    """Each operator belongs to its precedence phase."""
    assert {symbol: phase for symbol, (phase, _) in OPERATORS.items()} == {
        "^": 0, "*": 1, "/": 1, "%": 1, "+": 2, "-": 2,
    }


@pytest.mark.parametrize("left,right,expected", [
    (1.0, 0.0, math.inf),
    (-1.0, 0.0, -math.inf),
    (1.0, -0.0, -math.inf),
    (7.0, 2.0, 3.5),
])
def test_divide(left, right, expected):
    """divide follows IEEE division, including by zero."""
    assert divide(left, right) == expected


def test_divide_zero_by_zero():
    """0/0 is NaN."""
    assert math.isnan(divide(0.0, 0.0))


@pytest.mark.parametrize("left,right,expected", [
    (5.0, 2.0, 1.0),
    (5.5, 2.0, 1.5),
    (-5.0, 3.0, -2.0),  # sign of the dividend, like C fmod
    (5.0, math.inf, 5.0),
])
def test_modulus(left, right, expected):
    """modulus behaves like C fmod()."""
    assert modulus(left, right) == expected


@pytest.mark.parametrize("left,right", [(5.0, 0.0), (math.inf, 2.0)])
def test_modulus_domain_errors(left, right):
    """Domain errors of fmod() give NaN."""
    assert math.isnan(modulus(left, right))


@pytest.mark.parametrize("base,exponent,expected", [
    (2.0, 10.0, 1024.0),
    (4.0, 0.5, 2.0),
    (10.0, 400.0, math.inf),
    (-10.0, 401.0, -math.inf),
    (-10.0, 400.0, math.inf),
    (0.0, -1.0, math.inf),
    (-0.0, -1.0, -math.inf),
])
def test_power(base, exponent, expected):
    """power overflows to a signed infinity instead of raising."""
    assert power(base, exponent) == expected


def test_power_domain_error():
    """A negative base with a fractional exponent is NaN."""
    assert math.isnan(power(-8.0, 1.0 / 3.0))
