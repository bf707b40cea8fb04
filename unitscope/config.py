"""Engine configuration for unitscope.

Every public operation takes an optional ``config`` argument. When omitted,
``DEFAULT_CONFIG`` is used.

Example:
    >>> from unitscope.config import EngineConfig
    >>> coarse = EngineConfig(precision=6)
    >>> groups = build_conversions(quantity, evaluator, config=coarse)
"""

from dataclasses import dataclass

from beartype import beartype


@beartype
@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Tunable constants used by the conversion engine.

    Attributes:
        precision: Significant digits used when formatting converted values.
            Deduplication compares these formatted numerals, so a lower
            precision merges more near-identical units.
        placeholder_marker: Registry symbols containing this text are treated
            as dimensionless placeholders and skipped by the derived-unit scan
        empty_selection_text: Shown when no units are selected
        invalid_expression_text: Reported when an expression cannot be evaluated
    """

    precision: int = 14
    placeholder_marker: str = "1"
    empty_selection_text: str = "No units selected"
    invalid_expression_text: str = "Invalid expression"

    def __post_init__(self) -> None:
        if self.precision < 1:
            raise ValueError(f"precision must be at least 1, got {self.precision}")

    def format_value(self, value: float, unit: str) -> str:
        """Format a converted value with its unit, e.g. ``"0.3048 m"``."""
        return f"{value:.{self.precision}g} {unit}"


DEFAULT_CONFIG = EngineConfig()
