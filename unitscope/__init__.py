"""unitscope - Explore every way a physical quantity can be re-expressed.

This package takes an evaluated quantity such as ``2 N/m^2`` and lists its
conversions per base dimension, the named derived units equivalent to its
compound unit, and its value under any per-dimension unit selection.

Example:
    >>> from unitscope import PintEvaluator, Selection, build_conversions, recompose
    >>>
    >>> evaluator = PintEvaluator()
    >>> q = evaluator.evaluate("2 N/m^2")
    >>> groups = build_conversions(q, evaluator)
    >>> sel = Selection().select("FORCE", "lbf", 1).select("LENGTH", "ft", -2)
    >>> print(recompose(q, sel, evaluator))
    0.041771 (lbf) / (ft^2)
"""

__version__ = "0.1.0"

from unitscope.config import DEFAULT_CONFIG, EngineConfig
from unitscope.conversions import (
    build_conversions,
    compatible_units,
    find_derived_units,
    find_equivalent_units,
    remove_duplicate_conversions,
)
from unitscope.dimensions import decompose, dimension_key, required_dimensions
from unitscope.evaluator import (
    ConversionError,
    ExpressionError,
    PintEvaluator,
    QuantityEvaluator,
    UnitscopeError,
)
from unitscope.export import conversions_to_dataframe
from unitscope.recompose import format_selection, missing_dimensions, recompose
from unitscope.session import Evaluation, recompute_all, select_unit
from unitscope.units import (
    ConversionGroup,
    ConversionOption,
    DerivedUnit,
    DimensionalResult,
    Quantity,
    SelectedUnit,
    Selection,
    UnitComponent,
)

__all__ = [
    # Version
    "__version__",
    # Configuration
    "EngineConfig",
    "DEFAULT_CONFIG",
    # Records
    "Quantity",
    "UnitComponent",
    "ConversionOption",
    "ConversionGroup",
    "DerivedUnit",
    "SelectedUnit",
    "Selection",
    "DimensionalResult",
    # Evaluator
    "QuantityEvaluator",
    "PintEvaluator",
    "UnitscopeError",
    "ExpressionError",
    "ConversionError",
    # Dimensions
    "dimension_key",
    "decompose",
    "required_dimensions",
    # Conversions
    "compatible_units",
    "remove_duplicate_conversions",
    "find_equivalent_units",
    "find_derived_units",
    "build_conversions",
    # Recomposition
    "recompose",
    "missing_dimensions",
    "format_selection",
    # Session
    "Evaluation",
    "recompute_all",
    "select_unit",
    # Export
    "conversions_to_dataframe",
]
