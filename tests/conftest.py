"""Shared fixtures for the unitscope tests.

``TableEvaluator`` is a small, exact unit registry so the engine tests do
not depend on pint's unit database. Unit expressions are products of
``symbol`` or ``symbol^n`` tokens joined by ``*``, with at most one ``/``.
"""

import re

import pytest

from unitscope.dimensions import dimension_key
from unitscope.evaluator import ConversionError, ExpressionError, PintEvaluator
from unitscope.units import Quantity, UnitComponent

_L, _M, _T = "[length]", "[mass]", "[time]"

LENGTH = {_L: 1}
MASS = {_M: 1}
TIME = {_T: 1}
FORCE = {_M: 1, _L: 1, _T: -2}
PRESSURE = {_M: 1, _L: -1, _T: -2}
ENERGY = {_M: 1, _L: 2, _T: -2}
POWER = {_M: 1, _L: 2, _T: -3}
AREA = {_L: 2}
VOLUME = {_L: 3}

# symbol -> (factor to SI, signature)
UNITS: dict[str, tuple[float, dict[str, int]]] = {
    "m": (1.0, LENGTH),
    "meter": (1.0, LENGTH),
    "ft": (0.3048, LENGTH),
    "foot": (0.3048, LENGTH),
    "in": (0.0254, LENGTH),
    "km": (1000.0, LENGTH),
    "kg": (1.0, MASS),
    "kilogram": (1.0, MASS),
    "g": (0.001, MASS),
    "lb": (0.45359237, MASS),
    "s": (1.0, TIME),
    "second": (1.0, TIME),
    "min": (60.0, TIME),
    "h": (3600.0, TIME),
    "N": (1.0, FORCE),
    "newton": (1.0, FORCE),
    "lbf": (4.4482216152605, FORCE),
    "kN": (1000.0, FORCE),
    "Pa": (1.0, PRESSURE),
    "pascal": (1.0, PRESSURE),
    "psi": (4.4482216152605 / 0.0254**2, PRESSURE),
    "bar": (1e5, PRESSURE),
    "J": (1.0, ENERGY),
    "joule": (1.0, ENERGY),
    "J1": (1.0, ENERGY),
    "cal": (4.184, ENERGY),
    "kWh": (3.6e6, ENERGY),
    "W": (1.0, POWER),
    "watt": (1.0, POWER),
    "hp": (745.69987158227022, POWER),
    "acre": (4046.8564224, AREA),
    "L": (0.001, VOLUME),
    "liter": (0.001, VOLUME),
}

_BASE_NAMES = {_L: "meter", _M: "kilogram", _T: "second"}

_NUMBER = re.compile(r"^\s*([-+]?\d+(?:\.\d*)?(?:[eE][-+]?\d+)?)\s*(.*?)\s*$")


def _tokens(expression: str) -> list[tuple[str, int]]:
    text = expression.replace(" ", "").replace("**", "^")
    if not text:
        return []
    numerator, _, denominator = text.partition("/")
    tokens = []
    for part, sign in ((numerator, 1), (denominator, -1)):
        if not part:
            continue
        for token in part.split("*"):
            symbol, _, power = token.partition("^")
            if symbol not in UNITS:
                raise KeyError(symbol)
            tokens.append((symbol, sign * int(power or 1)))
    return tokens


def _resolve(expression: str) -> tuple[float, dict[str, int]]:
    factor = 1.0
    signature: dict[str, int] = {}
    for symbol, power in _tokens(expression):
        unit_factor, unit_signature = UNITS[symbol]
        factor *= unit_factor**power
        for name, exp in unit_signature.items():
            signature[name] = signature.get(name, 0) + exp * power
    return factor, {k: v for k, v in signature.items() if v != 0}


class TableEvaluator:
    """Exact in-memory evaluator over ``UNITS``."""

    def classify(self, unit: str) -> str | None:
        try:
            return dimension_key(_resolve(unit)[1])
        except (KeyError, ValueError):
            return None

    def units_in_dimension(self, dimension: str) -> set[str]:
        return {name for name in UNITS if self.classify(name) == dimension}

    def all_units(self) -> list[str]:
        return ["", *UNITS]

    def convert(self, value: float, from_unit: str, to_unit: str) -> float:
        try:
            from_factor, from_signature = _resolve(from_unit)
            to_factor, to_signature = _resolve(to_unit)
        except (KeyError, ValueError) as err:
            raise ConversionError(from_unit, to_unit) from err
        if from_signature != to_signature:
            raise ConversionError(from_unit, to_unit)
        return value * from_factor / to_factor

    def evaluate(self, expression: str) -> Quantity:
        match = _NUMBER.match(expression)
        if match is None:
            raise ExpressionError(f"Cannot evaluate {expression!r}")
        magnitude, units = float(match.group(1)), match.group(2)
        try:
            tokens = _tokens(units)
        except (KeyError, ValueError) as err:
            raise ExpressionError(f"Cannot evaluate {expression!r}") from err
        components = tuple(
            UnitComponent(symbol, self.classify(symbol), power) for symbol, power in tokens
        )
        return Quantity(magnitude, components, units)

    def base_form(self, unit_expression: str) -> str:
        try:
            _, signature = _resolve(unit_expression)
        except (KeyError, ValueError) as err:
            raise ConversionError(unit_expression, "base units") from err
        return "*".join(f"{_BASE_NAMES[name]}^{exp}" for name, exp in sorted(signature.items()))

    def format_quantity(self, quantity: Quantity) -> str:
        if not quantity.units:
            return f"{quantity.magnitude:g}"
        return f"{quantity.magnitude:g} {quantity.units}"


@pytest.fixture
def evaluator() -> TableEvaluator:
    """Deterministic evaluator with a small unit table."""
    return TableEvaluator()


@pytest.fixture(scope="session")
def pint_evaluator() -> PintEvaluator:
    """Evaluator backed by pint's default registry, shared across tests."""
    return PintEvaluator()
