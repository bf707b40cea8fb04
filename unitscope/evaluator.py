"""Quantity evaluator interface and its pint implementation.

The conversion engine never parses unit strings or stores unit definitions
itself. It talks to an evaluator through ``QuantityEvaluator``:

- ``classify``: unit symbol -> base-dimension key (None if unknown)
- ``units_in_dimension``: base-dimension key -> every symbol with that key
- ``all_units``: every symbol in the registry
- ``convert``: value in one unit -> value in another
- ``evaluate``: free-text expression -> Quantity
- ``base_form``: unit expression written in base units
- ``format_quantity``: display text for an evaluated quantity

``PintEvaluator`` provides all of it on top of a ``pint.UnitRegistry``.

Example:
    >>> from unitscope.evaluator import PintEvaluator
    >>> evaluator = PintEvaluator()
    >>> q = evaluator.evaluate("2 N/m^2")
    >>> [c.dimension for c in q.components]
    ['FORCE', 'LENGTH']
    >>> evaluator.convert(1.0, "ft", "m")
    0.3048
"""

import logging
import math
import re
from collections import defaultdict
from functools import cached_property
from tokenize import TokenError
from typing import Protocol, runtime_checkable

import pint
from beartype import beartype
from pint.errors import PintError

from unitscope.dimensions import dimension_key
from unitscope.units import Quantity, UnitComponent

logger = logging.getLogger(__name__)

# Everything pint's parser and converter can raise for bad user input.
_PINT_FAILURES = (PintError, TokenError, SyntaxError, TypeError, ValueError,
                  AttributeError, KeyError, ZeroDivisionError)

# Leading "name =" of an assignment such as "x = 2 N/m^2". "==" is left alone.
_ASSIGNMENT = re.compile(r"^\s*[A-Za-z_]\w*\s*=(?!=)")


# =============================================================================
# Errors
# =============================================================================


class UnitscopeError(ValueError):
    """Base class for errors raised by unitscope."""


class ExpressionError(UnitscopeError):
    """An expression could not be evaluated to a quantity."""


class ConversionError(UnitscopeError):
    """A value could not be converted between two units."""

    def __init__(self, from_unit: str, to_unit: str) -> None:
        super().__init__(f"Cannot convert {from_unit} to {to_unit}")
        self.from_unit = from_unit
        self.to_unit = to_unit


# =============================================================================
# Evaluator Interface
# =============================================================================


@runtime_checkable
class QuantityEvaluator(Protocol):
    """Capabilities the conversion engine needs from a unit registry."""

    def classify(self, unit: str) -> str | None: ...

    def units_in_dimension(self, dimension: str) -> set[str]: ...

    def all_units(self) -> list[str]: ...

    def convert(self, value: float, from_unit: str, to_unit: str) -> float: ...

    def evaluate(self, expression: str) -> Quantity: ...

    def base_form(self, unit_expression: str) -> str: ...

    def format_quantity(self, quantity: Quantity) -> str: ...


def _normalize_exponent(exponent: int | float) -> int | float:
    exponent = float(exponent)
    return int(exponent) if exponent.is_integer() else exponent


# =============================================================================
# Pint Implementation
# =============================================================================


class PintEvaluator:
    """Evaluate and convert quantities with a pint unit registry.

    Args:
        registry: Registry to use. By default a fresh ``pint.UnitRegistry``
            that converts offset units (degC, degF) to their base unit
            in products, so "10 degC/s" evaluates.

    The registry is treated as static: the symbol -> dimension index is
    built on first use and reused afterwards.
    """

    def __init__(self, registry: pint.UnitRegistry | None = None) -> None:
        if registry is None:
            registry = pint.UnitRegistry(autoconvert_offset_to_baseunit=True)
        self.registry = registry

    def __repr__(self) -> str:
        return f"PintEvaluator(system={self.registry.default_system!r})"

    # -------------------------------------------------------------------------
    # Classification
    # -------------------------------------------------------------------------

    def _dimensionality(self, unit_expression: str) -> dict[str, int | float]:
        container = self.registry.Quantity(1, unit_expression).dimensionality
        return {name: container[name] for name in container}

    @beartype
    def classify(self, unit: str) -> str | None:
        """Get the base-dimension key of a unit symbol, None if unknown."""
        try:
            return dimension_key(self._dimensionality(unit))
        except _PINT_FAILURES:
            return None

    @cached_property
    def _dimension_index(self) -> dict[str, set[str]]:
        index: dict[str, set[str]] = defaultdict(set)
        for name in self.all_units():
            key = self.classify(name)
            if key is None:
                logger.debug("Skipping unclassifiable registry unit %r", name)
                continue
            index[key].add(name)
        return dict(index)

    @beartype
    def units_in_dimension(self, dimension: str) -> set[str]:
        """Get every registry symbol classified under ``dimension``."""
        return set(self._dimension_index.get(dimension, ()))

    def all_units(self) -> list[str]:
        """Get every unit name, symbol and alias defined in the registry."""
        return list(self.registry)

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    @beartype
    def convert(self, value: float | int, from_unit: str, to_unit: str) -> float:
        """Convert ``value`` from one unit expression to another.

        Raises:
            ConversionError: If either unit is unknown or the units are
                dimensionally incompatible
        """
        try:
            converted = self.registry.Quantity(value, from_unit).to(to_unit)
        except _PINT_FAILURES as err:
            raise ConversionError(from_unit, to_unit) from err
        return float(converted.magnitude)

    @beartype
    def base_form(self, unit_expression: str) -> str:
        """Write a unit expression in base units, e.g. ``kilogram*meter^2*second^-2``."""
        try:
            base = self.registry.Quantity(1, unit_expression).to_base_units()
        except _PINT_FAILURES as err:
            raise ConversionError(unit_expression, "base units") from err
        return "*".join(
            f"{name}^{_normalize_exponent(exp)}" for name, exp in base.unit_items()
        )

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    @beartype
    def evaluate(self, expression: str) -> Quantity:
        """Evaluate a free-text expression such as ``"5 kg*m^2/s^2"``.

        Plain numbers evaluate to a Quantity with no components. A leading
        assignment target (``"x = 2 N/m^2"``) is dropped.

        Raises:
            ExpressionError: If the expression cannot be parsed, is not a
                finite scalar, or does not fit in a float
        """
        text = _ASSIGNMENT.sub("", expression, count=1)
        if not text.strip():
            raise ExpressionError("Empty expression")
        try:
            parsed = self.registry.parse_expression(text)
        except _PINT_FAILURES as err:
            raise ExpressionError(f"Cannot evaluate {expression!r}: {err}") from err

        is_quantity = isinstance(parsed, self.registry.Quantity)
        raw = parsed.magnitude if is_quantity else parsed
        if not isinstance(raw, (int, float)):
            raise ExpressionError(f"Expression {expression!r} is not a scalar")
        try:
            magnitude = float(raw)
        except OverflowError as err:
            raise ExpressionError(f"Expression {expression!r} is too large") from err
        if not math.isfinite(magnitude):
            raise ExpressionError(f"Expression {expression!r} is not finite")

        if not is_quantity:
            return Quantity(magnitude)

        components = []
        for name, exponent in parsed.unit_items():
            key = self.classify(name)
            if key is None:
                logger.debug("Skipping unclassifiable component %r", name)
                continue
            components.append(UnitComponent(name, key, _normalize_exponent(exponent)))

        return Quantity(magnitude, tuple(components), str(parsed.units))

    @beartype
    def format_quantity(self, quantity: Quantity) -> str:
        """Display text for a quantity, e.g. ``"2 newton / meter ** 2"``."""
        if not quantity.units:
            return f"{quantity.magnitude:.14g}"
        return f"{quantity.magnitude:.14g} {quantity.units}"
