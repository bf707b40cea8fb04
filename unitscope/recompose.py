"""Recompute a quantity's value under user-selected units.

The user picks one target unit per base dimension. Each unit component of
the quantity is decomposed into base factors (see ``unitscope.dimensions``)
and every factor is converted to its selected unit, raised to its
effective exponent.

A quantity is only recomposed when every required dimension has a
selection. A partial selection reports the missing dimensions instead of a
dimensionally incomplete number.

Example:
    >>> from unitscope.evaluator import PintEvaluator
    >>> from unitscope.recompose import recompose
    >>> from unitscope.units import Selection
    >>>
    >>> evaluator = PintEvaluator()
    >>> q = evaluator.evaluate("2 N/m^2")
    >>> sel = Selection().select("FORCE", "lbf", 1).select("LENGTH", "ft", -2)
    >>> result = recompose(q, sel, evaluator)
    >>> print(result)
    0.041771 (lbf) / (ft^2)
"""

import logging

import numpy as np
from beartype import beartype

from unitscope.config import DEFAULT_CONFIG, EngineConfig
from unitscope.dimensions import COMPOUND_DIMENSIONS, decompose, required_dimensions
from unitscope.evaluator import ConversionError, QuantityEvaluator
from unitscope.units import DimensionalResult, Quantity, Selection, SelectedUnit

logger = logging.getLogger(__name__)


def _format_exponent(exponent: int | float) -> str:
    return f"{exponent:g}"


@beartype
def format_selection(selection: Selection, config: EngineConfig = DEFAULT_CONFIG) -> str:
    """Write a selection as a compound-unit expression.

    Entries are sorted by dimension key, positive exponents go in the
    numerator and negative ones in the denominator.

    Examples:
        >>> format_selection(Selection.from_units([
        ...     SelectedUnit("LENGTH", "ft", -2), SelectedUnit("FORCE", "lbf", 1),
        ... ]))
        '(lbf) / (ft^2)'
    """
    ordered = sorted(selection, key=lambda entry: entry.dimension)

    numerator = " * ".join(
        entry.unit if entry.exponent == 1 else f"{entry.unit}^{_format_exponent(entry.exponent)}"
        for entry in ordered
        if entry.exponent > 0
    )
    denominator = " * ".join(
        f"{entry.unit}^{_format_exponent(abs(entry.exponent))}"
        for entry in ordered
        if entry.exponent < 0
    )

    if numerator and denominator:
        return f"({numerator}) / ({denominator})"
    if numerator:
        return numerator
    if denominator:
        return f"1 / ({denominator})"
    return config.empty_selection_text


@beartype
def missing_dimensions(quantity: Quantity, selection: Selection) -> list[str]:
    """List required dimensions that have no selected unit."""
    return [d for d in required_dimensions(quantity) if d not in selection]


@beartype
def recompose(
    quantity: Quantity,
    selection: Selection,
    evaluator: QuantityEvaluator,
    config: EngineConfig = DEFAULT_CONFIG,
) -> DimensionalResult:
    """Recompute a quantity's value in the selected units.

    Args:
        quantity: Evaluated quantity
        selection: Target unit per base dimension
        evaluator: Registry used for conversion factors
        config: Formatting options

    Returns:
        Empty result for an empty selection, an error result naming the
        missing dimensions or the failing unit pair, otherwise the value
        and its unit expression
    """
    if len(selection) == 0:
        return DimensionalResult.empty()

    missing = missing_dimensions(quantity, selection)
    if missing:
        return DimensionalResult.failure(f"Missing unit selection for: {', '.join(missing)}")

    factors: list[float] = []
    exponents: list[float] = []

    for component in quantity.components:
        decomposition = COMPOUND_DIMENSIONS.get(component.dimension)
        try:
            if decomposition is not None:
                # Rescale to the coherent unit so the native sub-units apply.
                factors.append(
                    evaluator.convert(1.0, component.unit, decomposition.reference_unit)
                )
                exponents.append(component.exponent)

            for factor in decompose(component.dimension, component.exponent):
                target: SelectedUnit = selection[factor.dimension]
                source = factor.native_unit or component.unit
                factors.append(evaluator.convert(1.0, source, target.unit))
                exponents.append(factor.exponent)
        except ConversionError as err:
            logger.warning("Recomposition of %s failed: %s", quantity, err)
            return DimensionalResult.failure(str(err))

    value = quantity.magnitude * float(
        np.prod(np.power(np.asarray(factors, dtype=float), np.asarray(exponents, dtype=float)))
    )
    if not np.isfinite(value):
        return DimensionalResult.failure(f"Recomposed value of {quantity} is not finite")

    return DimensionalResult(
        value=float(value),
        units=format_selection(selection, config),
    )
