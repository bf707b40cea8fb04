"""Tests for dimension naming and compound decomposition."""

import pytest

from unitscope.dimensions import (
    COMPOUND_DIMENSIONS,
    DIMENSIONLESS,
    Factor,
    decompose,
    dimension_key,
    required_dimensions,
)
from unitscope.units import Quantity, UnitComponent


class TestDimensionKey:
    """Test naming of dimensionality signatures."""

    @pytest.mark.parametrize(
        ("dimensionality", "expected"),
        [
            ({"[length]": 1}, "LENGTH"),
            ({"[mass]": 1}, "MASS"),
            ({"[time]": 1}, "TIME"),
            ({"[length]": 2}, "SURFACE"),
            ({"[length]": 3}, "VOLUME"),
            ({"[mass]": 1, "[length]": 1, "[time]": -2}, "FORCE"),
            ({"[mass]": 1, "[length]": -1, "[time]": -2}, "PRESSURE"),
            ({"[mass]": 1, "[length]": 2, "[time]": -2}, "ENERGY"),
            ({"[mass]": 1, "[length]": 2, "[time]": -3}, "POWER"),
            ({"[time]": -1}, "FREQUENCY"),
            ({"[temperature]": 1}, "TEMPERATURE"),
            ({"[information]": 1}, "BIT"),
        ],
    )
    def test_named_signatures(self, dimensionality: dict, expected: str) -> None:
        assert dimension_key(dimensionality) == expected

    def test_key_order_independent(self) -> None:
        a = dimension_key({"[time]": -2, "[mass]": 1, "[length]": 1})
        b = dimension_key({"[length]": 1, "[mass]": 1, "[time]": -2})
        assert a == b == "FORCE"

    def test_float_exponents_match(self) -> None:
        assert dimension_key({"[length]": 2.0}) == "SURFACE"

    def test_dimensionless(self) -> None:
        assert dimension_key({}) == DIMENSIONLESS
        assert dimension_key({"[length]": 0}) == DIMENSIONLESS

    def test_unnamed_signature_written_out(self) -> None:
        """Test that signatures without a name get a stable textual key."""
        key = dimension_key({"[time]": -3, "[length]": 1})
        assert key == "[length]^1*[time]^-3"


class TestDecompose:
    """Test the compound decomposition table."""

    def test_pressure(self) -> None:
        assert decompose("PRESSURE", 1) == [
            Factor("FORCE", 1, "N"),
            Factor("LENGTH", -2, "m"),
        ]

    def test_energy(self) -> None:
        assert decompose("ENERGY", 1) == [
            Factor("MASS", 1, "kg"),
            Factor("LENGTH", 2, "m"),
            Factor("TIME", -2, "s"),
        ]

    def test_power(self) -> None:
        factors = decompose("POWER", 1)
        assert [(f.dimension, f.exponent) for f in factors] == [
            ("MASS", 1),
            ("LENGTH", 2),
            ("TIME", -3),
        ]

    def test_area_and_surface_match(self) -> None:
        assert decompose("AREA", 1) == decompose("SURFACE", 1) == [Factor("LENGTH", 2, "m")]

    def test_volume(self) -> None:
        assert decompose("VOLUME", 1) == [Factor("LENGTH", 3, "m")]

    def test_exponent_multiplies_through(self) -> None:
        """Test that the compound's own exponent scales every factor."""
        factors = decompose("PRESSURE", -2)
        assert [(f.dimension, f.exponent) for f in factors] == [("FORCE", -2), ("LENGTH", 4)]

    def test_identity_for_other_dimensions(self) -> None:
        assert decompose("LENGTH", -2) == [Factor("LENGTH", -2)]
        assert decompose("FORCE", 1) == [Factor("FORCE", 1, None)]

    def test_reference_units(self) -> None:
        assert COMPOUND_DIMENSIONS["PRESSURE"].reference_unit == "Pa"
        assert COMPOUND_DIMENSIONS["VOLUME"].reference_unit == "m^3"


class TestRequiredDimensions:
    """Test which dimensions a quantity needs selected."""

    def test_simple_components(self) -> None:
        q = Quantity(
            2.0,
            (UnitComponent("N", "FORCE", 1), UnitComponent("m", "LENGTH", -2)),
            "N/m^2",
        )
        assert required_dimensions(q) == ["FORCE", "LENGTH"]

    def test_compound_component(self) -> None:
        """Test that a pressure unit needs both force and length."""
        q = Quantity(3.0, (UnitComponent("psi", "PRESSURE", 1),), "psi")
        assert required_dimensions(q) == ["FORCE", "LENGTH"]

    def test_shared_dimensions_listed_once(self) -> None:
        q = Quantity(
            1.0,
            (UnitComponent("W", "POWER", 1), UnitComponent("m", "LENGTH", -1)),
            "W/m",
        )
        assert required_dimensions(q) == ["MASS", "LENGTH", "TIME"]

    def test_plain_number(self) -> None:
        assert required_dimensions(Quantity(4.0)) == []
