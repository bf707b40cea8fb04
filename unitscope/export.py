"""Tabular views of conversion groups.

Example:
    >>> import polars as pl
    >>> from unitscope.export import conversions_to_dataframe
    >>> df = conversions_to_dataframe(groups)
    >>> df.filter(pl.col("dimension") == "LENGTH").select("unit", "magnitude")
"""

from collections.abc import Sequence

import polars as pl
from beartype import beartype

from unitscope.units import ConversionGroup

_SCHEMA = {
    "dimension": pl.Utf8,
    "exponent": pl.Float64,
    "source": pl.Utf8,
    "unit": pl.Utf8,
    "value": pl.Utf8,
    "magnitude": pl.Float64,
}


@beartype
def conversions_to_dataframe(groups: Sequence[ConversionGroup]) -> pl.DataFrame:
    """Export conversion groups to a Polars DataFrame.

    One row per conversion option. Rows coming from a derived unit have
    ``source`` set to ``"derived:<name>"``, the others to ``"dimension"``.

    Args:
        groups: Groups from ``build_conversions``

    Returns:
        Polars DataFrame with columns dimension, exponent, source, unit,
        value and magnitude
    """
    rows: dict[str, list] = {name: [] for name in _SCHEMA}

    def add(group: ConversionGroup, source: str, options) -> None:
        for option in options:
            rows["dimension"].append(group.dimension)
            rows["exponent"].append(float(group.exponent))
            rows["source"].append(source)
            rows["unit"].append(option.unit)
            rows["value"].append(option.value)
            rows["magnitude"].append(option.magnitude)

    for group in groups:
        add(group, "dimension", group.conversions)
        for derived in group.derived_units:
            add(group, f"derived:{derived.name}", derived.conversions)

    return pl.DataFrame(rows, schema=_SCHEMA)
