"""Units module for unitscope.

Provides the immutable records passed between the evaluator, the conversion
builder and the recomposer: quantities with compound units, conversion
options grouped by dimension, derived-unit equivalence classes, and the
user's per-dimension unit selection.

Design principles:
- Immutable: frozen dataclasses, a new record replaces an old one
- Type safe: beartype checks at runtime
- Validated on construction: invalid records never exist
"""

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from beartype import beartype

# =============================================================================
# Evaluated Quantities
# =============================================================================


@beartype
@dataclass(frozen=True, slots=True)
class UnitComponent:
    """One factor of a compound unit.

    Attributes:
        unit: Unit symbol as known to the evaluator (e.g. "newton", "m")
        dimension: Base-dimension key of the unit (e.g. "FORCE")
        exponent: Power the unit is raised to in the compound unit
    """

    unit: str
    dimension: str
    exponent: int | float

    def __post_init__(self) -> None:
        if not self.unit:
            raise ValueError("Unit component requires a unit symbol")
        if self.exponent == 0:
            raise ValueError(f"Unit component {self.unit!r} has zero exponent")


@beartype
@dataclass(frozen=True, slots=True)
class Quantity:
    """A numeric magnitude tagged with a compound unit.

    Quantities are produced by an evaluator from user input and are never
    modified afterwards. A quantity with no components is a plain number.

    Examples:
        >>> q = Quantity(
        ...     2.0,
        ...     (UnitComponent("newton", "FORCE", 1), UnitComponent("meter", "LENGTH", -2)),
        ...     "newton / meter ** 2",
        ... )
        >>> q.is_physical
        True
    """

    magnitude: float | int
    components: tuple[UnitComponent, ...] = ()
    units: str = ""

    def __post_init__(self) -> None:
        if not math.isfinite(self.magnitude):
            raise ValueError(f"Quantity magnitude must be finite, got {self.magnitude!r}")

    @property
    def is_physical(self) -> bool:
        """Whether the quantity carries at least one unit component."""
        return len(self.components) > 0

    @property
    def dimensions(self) -> tuple[str, ...]:
        """Distinct component dimensions, in order of first appearance."""
        return tuple(dict.fromkeys(c.dimension for c in self.components))

    def __str__(self) -> str:
        if not self.units:
            return f"{self.magnitude:g}"
        return f"{self.magnitude:g} {self.units}"


# =============================================================================
# Conversion Options
# =============================================================================


@beartype
@dataclass(frozen=True, slots=True)
class ConversionOption:
    """One unit of some dimension expressed in another compatible unit.

    Attributes:
        unit: Target unit symbol
        value: Formatted converted value, numeral first (e.g. "3.2808398950131 ft")
    """

    unit: str
    value: str

    @property
    def numeric_part(self) -> str:
        """Leading numeral of the formatted value, without the unit suffix."""
        return self.value.split(" ", 1)[0]

    @property
    def magnitude(self) -> float:
        """Leading numeral as a float."""
        return float(self.numeric_part)


@beartype
@dataclass(frozen=True, slots=True)
class DerivedUnit:
    """A named unit standing for an equivalence class of compound units.

    Attributes:
        name: Canonical member of the equivalence class (e.g. "J")
        definition: One of the canonical unit written in base units
        conversions: One canonical unit expressed in every equivalent unit
    """

    name: str
    definition: str
    conversions: tuple[ConversionOption, ...]


@beartype
@dataclass(frozen=True, slots=True)
class ConversionGroup:
    """Conversion options for one base dimension of a quantity.

    Attributes:
        dimension: Base-dimension key
        exponent: Exponent of the originating unit component
        conversions: Deduplicated conversion options
        derived_units: Equivalent derived units (first group only)
    """

    dimension: str
    exponent: int | float
    conversions: tuple[ConversionOption, ...]
    derived_units: tuple[DerivedUnit, ...] = ()

    @property
    def units(self) -> list[str]:
        """Unit symbols offered by this group."""
        return [option.unit for option in self.conversions]


# =============================================================================
# Unit Selection
# =============================================================================


@beartype
@dataclass(frozen=True, slots=True)
class SelectedUnit:
    """The user's target unit for one base dimension."""

    dimension: str
    unit: str
    exponent: int | float


@beartype
@dataclass(frozen=True, slots=True)
class Selection:
    """Target units keyed by base dimension.

    A selection holds at most one unit per dimension. Selecting a unit for a
    dimension that already has one returns a new selection with the entry
    replaced.

    Examples:
        >>> sel = Selection().select("FORCE", "lbf", 1).select("LENGTH", "ft", -2)
        >>> sel["FORCE"].unit
        'lbf'
        >>> sel.select("FORCE", "kip", 1)["FORCE"].unit
        'kip'
    """

    entries: tuple[SelectedUnit, ...] = ()

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for entry in self.entries:
            if entry.dimension in seen:
                raise ValueError(f"Selection has more than one unit for {entry.dimension!r}")
            seen.add(entry.dimension)

    @classmethod
    def from_units(cls, units: Iterable[SelectedUnit]) -> "Selection":
        """Build a selection, later entries replacing earlier ones."""
        by_dimension: dict[str, SelectedUnit] = {}
        for unit in units:
            by_dimension.pop(unit.dimension, None)
            by_dimension[unit.dimension] = unit
        return cls(tuple(by_dimension.values()))

    def select(self, dimension: str, unit: str, exponent: int | float) -> "Selection":
        """Return a new selection with ``unit`` chosen for ``dimension``."""
        kept = tuple(e for e in self.entries if e.dimension != dimension)
        return Selection((*kept, SelectedUnit(dimension, unit, exponent)))

    def restrict(self, dimensions: Iterable[str]) -> "Selection":
        """Return a new selection holding only the given dimensions."""
        allowed = set(dimensions)
        return Selection(tuple(e for e in self.entries if e.dimension in allowed))

    @property
    def dimensions(self) -> set[str]:
        return {e.dimension for e in self.entries}

    def get(self, dimension: str) -> SelectedUnit | None:
        for entry in self.entries:
            if entry.dimension == dimension:
                return entry
        return None

    def __getitem__(self, dimension: str) -> SelectedUnit:
        entry = self.get(dimension)
        if entry is None:
            raise KeyError(dimension)
        return entry

    def __contains__(self, dimension: object) -> bool:
        return any(e.dimension == dimension for e in self.entries)

    def __iter__(self) -> Iterator[SelectedUnit]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


# =============================================================================
# Recomposition Result
# =============================================================================


@beartype
@dataclass(frozen=True, slots=True)
class DimensionalResult:
    """Outcome of recomposing a quantity under a selection.

    Exactly one of (value and units) or error is set. All three are None
    only when the selection was empty.
    """

    value: float | None = None
    units: str | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.error is not None and (self.value is not None or self.units is not None):
            raise ValueError("A failed result cannot carry a value")
        if (self.value is None) != (self.units is None):
            raise ValueError("A result needs both a value and its units")

    @classmethod
    def empty(cls) -> "DimensionalResult":
        return cls()

    @classmethod
    def failure(cls, message: str) -> "DimensionalResult":
        return cls(error=message)

    @property
    def ok(self) -> bool:
        return self.value is not None

    def __str__(self) -> str:
        if self.error is not None:
            return self.error
        if self.value is None:
            return ""
        return f"{self.value:.6f} {self.units}"
