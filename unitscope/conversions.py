"""Conversion option sets for evaluated quantities.

For every base dimension of a quantity this module lists the compatible
units and what one unit of the quantity's own unit is worth in each of
them. For the compound unit as a whole it finds the named derived units
(joule, pascal, watt...) with the same dimension signature.

Registries hold many units that are mutually incompatible, so conversion
failures while building these lists are skipped rather than raised.

Example:
    >>> from unitscope.conversions import build_conversions
    >>> from unitscope.evaluator import PintEvaluator
    >>>
    >>> evaluator = PintEvaluator()
    >>> groups = build_conversions(evaluator.evaluate("2 N/m^2"), evaluator)
    >>> [(g.dimension, g.exponent) for g in groups]
    [('FORCE', 1), ('LENGTH', -2)]
    >>> energy = evaluator.evaluate("5 kg*m^2/s^2")
    >>> build_conversions(energy, evaluator)[0].derived_units[0].name
    'J'
"""

import logging
from collections.abc import Iterable

from beartype import beartype

from unitscope.config import DEFAULT_CONFIG, EngineConfig
from unitscope.evaluator import ConversionError, QuantityEvaluator
from unitscope.units import ConversionGroup, ConversionOption, DerivedUnit, Quantity

logger = logging.getLogger(__name__)

# =============================================================================
# Compatible Units and Deduplication
# =============================================================================


@beartype
def compatible_units(evaluator: QuantityEvaluator, dimension: str) -> set[str]:
    """Get every unit symbol registered under a base dimension.

    Unknown dimensions yield an empty set.
    """
    return evaluator.units_in_dimension(dimension)


@beartype
def remove_duplicate_conversions(
    conversions: Iterable[ConversionOption],
) -> list[ConversionOption]:
    """Keep one option per distinct numeric value.

    Options are grouped by the numeral their formatted value starts with.
    Within a group the option with the longest unit symbol wins; the first
    one seen wins a tie. Groups keep the order of their first member.

    Args:
        conversions: Options for a single dimension or derived unit

    Returns:
        Deduplicated options
    """
    kept: dict[str, ConversionOption] = {}
    for option in conversions:
        numeral = option.numeric_part
        current = kept.get(numeral)
        if current is None or len(option.unit) > len(current.unit):
            kept[numeral] = option
    return list(kept.values())


def _convert_one(
    evaluator: QuantityEvaluator,
    from_unit: str,
    targets: Iterable[str],
    config: EngineConfig,
) -> list[ConversionOption]:
    """Express one ``from_unit`` in each target, skipping incompatible ones."""
    options = []
    for target in sorted(targets):
        try:
            value = evaluator.convert(1.0, from_unit, target)
        except ConversionError as err:
            logger.debug("Skipping conversion: %s", err)
            continue
        options.append(ConversionOption(target, config.format_value(value, target)))
    return options


# =============================================================================
# Derived Units
# =============================================================================


def _normalize_unit_string(evaluator: QuantityEvaluator, unit_expression: str) -> str:
    """Base form of a unit with its factors sorted, for textual comparison."""
    try:
        base = evaluator.base_form(unit_expression)
    except ConversionError:
        base = unit_expression
    return "*".join(sorted(part.strip() for part in base.split("*")))


@beartype
def units_equivalent(
    evaluator: QuantityEvaluator,
    unit1: str,
    unit2: str,
    normalized1: str | None = None,
) -> bool:
    """Whether two unit expressions share a dimension signature.

    Units are equivalent if one of either converts to the other, or failing
    that, if their sorted base forms are identical.

    Args:
        evaluator: Registry used for conversions
        unit1: First unit expression
        unit2: Second unit expression
        normalized1: Sorted base form of ``unit1``, when already known
    """
    for source, target in ((unit1, unit2), (unit2, unit1)):
        try:
            evaluator.convert(1.0, source, target)
        except ConversionError:
            continue
        return True
    if normalized1 is None:
        normalized1 = _normalize_unit_string(evaluator, unit1)
    return normalized1 == _normalize_unit_string(evaluator, unit2)


@beartype
def main_unit_key(unit: str) -> tuple[int, str, str]:
    """Sort key choosing the canonical member of an equivalence class.

    Shorter symbols come first, then alphabetical order ignoring case, then
    exact text so the order is total.
    """
    return (len(unit), unit.casefold(), unit)


@beartype
def find_equivalent_units(
    quantity: Quantity,
    evaluator: QuantityEvaluator,
    config: EngineConfig = DEFAULT_CONFIG,
) -> set[str]:
    """Find every registry unit with the quantity's dimension signature.

    The empty symbol and symbols containing the configured placeholder
    marker are skipped.
    """
    equivalent: set[str] = set()
    if not quantity.units:
        return equivalent

    normalized = _normalize_unit_string(evaluator, quantity.units)
    for name in evaluator.all_units():
        if not name or config.placeholder_marker in name:
            continue
        if evaluator.classify(name) is None:
            continue
        if units_equivalent(evaluator, quantity.units, name, normalized):
            equivalent.add(name)
    return equivalent


@beartype
def find_derived_units(
    quantity: Quantity,
    evaluator: QuantityEvaluator,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[DerivedUnit]:
    """Find the named derived unit equivalent to a quantity's compound unit.

    The canonical unit is the shortest equivalent symbol (alphabetical on a
    tie). Its conversions cover every unit compatible with its own dimension
    and every other equivalent unit, deduplicated.

    Args:
        quantity: Evaluated quantity
        evaluator: Registry to search
        config: Formatting and filtering options

    Returns:
        A single-element list with the derived unit, or an empty list when
        there is no equivalent unit or nothing converts
    """
    equivalent = find_equivalent_units(quantity, evaluator, config)
    if not equivalent:
        return []

    main_unit = min(equivalent, key=main_unit_key)
    dimension = evaluator.classify(main_unit)
    direct = compatible_units(evaluator, dimension) if dimension is not None else set()

    conversions = _convert_one(evaluator, main_unit, direct, config)
    conversions += _convert_one(evaluator, main_unit, equivalent - {main_unit}, config)
    if not conversions:
        return []

    try:
        definition = evaluator.base_form(main_unit)
    except ConversionError:
        definition = main_unit

    return [
        DerivedUnit(
            name=main_unit,
            definition=f"1 {definition}",
            conversions=tuple(remove_duplicate_conversions(conversions)),
        )
    ]


# =============================================================================
# Conversion Sets
# =============================================================================


@beartype
def build_conversions(
    quantity: Quantity,
    evaluator: QuantityEvaluator,
    config: EngineConfig = DEFAULT_CONFIG,
    include_derived: bool = True,
) -> list[ConversionGroup]:
    """Build the conversion options for every base dimension of a quantity.

    Only the first component of each dimension is used. Derived units are
    attached to the first group.

    Args:
        quantity: Evaluated quantity
        evaluator: Registry used for lookups and conversions
        config: Formatting and filtering options
        include_derived: Whether to search for equivalent derived units

    Returns:
        Conversion groups in component order; empty for a plain number
    """
    groups: list[ConversionGroup] = []
    seen: set[str] = set()

    for component in quantity.components:
        if component.dimension in seen:
            continue
        seen.add(component.dimension)

        targets = compatible_units(evaluator, component.dimension)
        options = _convert_one(evaluator, component.unit, targets, config)
        groups.append(
            ConversionGroup(
                dimension=component.dimension,
                exponent=component.exponent,
                conversions=tuple(remove_duplicate_conversions(options)),
            )
        )

    if groups and include_derived:
        derived = find_derived_units(quantity, evaluator, config)
        if derived:
            first = groups[0]
            groups[0] = ConversionGroup(
                dimension=first.dimension,
                exponent=first.exponent,
                conversions=first.conversions,
                derived_units=tuple(derived),
            )

    logger.debug("Built %d conversion groups for %s", len(groups), quantity)
    return groups
