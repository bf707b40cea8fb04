"""Base dimensions and compound-dimension decomposition.

Base-dimension keys name a physical dimension (``LENGTH``, ``MASS``) or a
compound quantity category (``PRESSURE``, ``ENERGY``). Registries describe
units by a dimensionality signature such as ``{"[length]": 1, "[time]": -1}``;
``dimension_key`` maps a signature onto its key.

Compound categories cannot be converted with a single unit choice. Their
decomposition into base factors is fixed by physics:

    pressure = force / length^2
    energy   = mass * length^2 / time^2
    power    = mass * length^2 / time^3

Example:
    >>> decompose("PRESSURE", 1)
    [Factor(dimension='FORCE', exponent=1, native_unit='N'),
     Factor(dimension='LENGTH', exponent=-2, native_unit='m')]
"""

from collections.abc import Mapping
from dataclasses import dataclass

from beartype import beartype

from unitscope.units import Quantity

# =============================================================================
# Dimension Keys
# =============================================================================

DIMENSIONLESS = "NONE"

# Signature -> key. Signatures are sorted (dimension, exponent) pairs.
_NAMED_SIGNATURES: dict[tuple[tuple[str, int], ...], str] = {
    (("[length]", 1),): "LENGTH",
    (("[mass]", 1),): "MASS",
    (("[time]", 1),): "TIME",
    (("[current]", 1),): "CURRENT",
    (("[temperature]", 1),): "TEMPERATURE",
    (("[luminosity]", 1),): "LUMINOUS_INTENSITY",
    (("[substance]", 1),): "AMOUNT_OF_SUBSTANCE",
    (("[information]", 1),): "BIT",
    (("[length]", 2),): "SURFACE",
    (("[length]", 3),): "VOLUME",
    (("[length]", 1), ("[time]", -1)): "VELOCITY",
    (("[length]", 1), ("[time]", -2)): "ACCELERATION",
    (("[time]", -1),): "FREQUENCY",
    (("[length]", 1), ("[mass]", 1), ("[time]", -2)): "FORCE",
    (("[length]", 2), ("[mass]", 1), ("[time]", -2)): "ENERGY",
    (("[length]", 2), ("[mass]", 1), ("[time]", -3)): "POWER",
    (("[length]", -1), ("[mass]", 1), ("[time]", -2)): "PRESSURE",
    (("[current]", 1), ("[time]", 1)): "ELECTRIC_CHARGE",
    (("[current]", 2), ("[length]", -2), ("[mass]", -1), ("[time]", 4)): "ELECTRIC_CAPACITANCE",
    (("[current]", -1), ("[length]", 2), ("[mass]", 1), ("[time]", -3)): "ELECTRIC_POTENTIAL",
    (("[current]", -2), ("[length]", 2), ("[mass]", 1), ("[time]", -3)): "ELECTRIC_RESISTANCE",
    (("[current]", -2), ("[length]", 2), ("[mass]", 1), ("[time]", -2)): "ELECTRIC_INDUCTANCE",
    (("[current]", 2), ("[length]", -2), ("[mass]", -1), ("[time]", 3)): "ELECTRIC_CONDUCTANCE",
    (("[current]", -1), ("[length]", 2), ("[mass]", 1), ("[time]", -2)): "MAGNETIC_FLUX",
    (("[current]", -1), ("[mass]", 1), ("[time]", -2)): "MAGNETIC_FLUX_DENSITY",
}


def _signature(dimensionality: Mapping[str, int | float]) -> tuple[tuple[str, int | float], ...]:
    return tuple(sorted((name, exp) for name, exp in dimensionality.items() if exp != 0))


@beartype
def dimension_key(dimensionality: Mapping[str, int | float]) -> str:
    """Name a dimensionality signature.

    Args:
        dimensionality: Mapping of registry base dimension to exponent

    Returns:
        The named key, ``NONE`` for an empty signature, or the signature
        written out (e.g. ``"[length]^1*[time]^-3"``) when it has no name
    """
    signature = _signature(dimensionality)
    if not signature:
        return DIMENSIONLESS
    named = _NAMED_SIGNATURES.get(signature)
    if named is not None:
        return named
    return "*".join(f"{name}^{_format_exponent(exp)}" for name, exp in signature)


def _format_exponent(exponent: int | float) -> str:
    if float(exponent).is_integer():
        return str(int(exponent))
    return f"{exponent:g}"


# =============================================================================
# Compound Decomposition
# =============================================================================


@beartype
@dataclass(frozen=True, slots=True)
class Factor:
    """One base-dimension factor of a (possibly compound) unit component.

    Attributes:
        dimension: Base dimension that needs a selected unit
        exponent: Effective exponent, already multiplied by the component's
        native_unit: Unit the factor is measured in before conversion, or
            None when the component's own unit is used
    """

    dimension: str
    exponent: int | float
    native_unit: str | None = None


@beartype
@dataclass(frozen=True, slots=True)
class Decomposition:
    """How a compound dimension breaks down into base factors.

    Attributes:
        reference_unit: Coherent SI unit of the compound; a component in any
            other unit is rescaled to it before the factors apply
        factors: (dimension, exponent multiplier, native unit) per factor
    """

    reference_unit: str
    factors: tuple[tuple[str, int, str], ...]


_AREA = Decomposition("m^2", (("LENGTH", 2, "m"),))

COMPOUND_DIMENSIONS: dict[str, Decomposition] = {
    "PRESSURE": Decomposition("Pa", (("FORCE", 1, "N"), ("LENGTH", -2, "m"))),
    "ENERGY": Decomposition("J", (("MASS", 1, "kg"), ("LENGTH", 2, "m"), ("TIME", -2, "s"))),
    "POWER": Decomposition("W", (("MASS", 1, "kg"), ("LENGTH", 2, "m"), ("TIME", -3, "s"))),
    "AREA": _AREA,
    "SURFACE": _AREA,
    "VOLUME": Decomposition("m^3", (("LENGTH", 3, "m"),)),
}


@beartype
def decompose(dimension: str, exponent: int | float) -> list[Factor]:
    """Break a dimension raised to ``exponent`` into base factors.

    Args:
        dimension: Base-dimension key
        exponent: Exponent of the unit component

    Returns:
        Ordered factors. Dimensions without a decomposition map to themselves.
    """
    decomposition = COMPOUND_DIMENSIONS.get(dimension)
    if decomposition is None:
        return [Factor(dimension, exponent)]
    return [
        Factor(name, multiplier * exponent, native)
        for name, multiplier, native in decomposition.factors
    ]


@beartype
def required_dimensions(quantity: Quantity) -> list[str]:
    """List the base dimensions a quantity needs selected, in order."""
    required: dict[str, None] = {}
    for component in quantity.components:
        for factor in decompose(component.dimension, component.exponent):
            required.setdefault(factor.dimension)
    return list(required)
