"""Recompute everything shown for an expression and a unit selection.

``recompute_all`` is the single entry point a presentation layer calls on
every input change. It holds no state: the caller keeps the returned
``Evaluation`` and passes its selection back in on the next change.

Example:
    >>> from unitscope.evaluator import PintEvaluator
    >>> from unitscope.session import recompute_all, select_unit
    >>>
    >>> evaluator = PintEvaluator()
    >>> ev = recompute_all("5 kg*m^2/s^2", evaluator=evaluator)
    >>> ev = select_unit(ev, "MASS", "lb", 1, evaluator=evaluator)
    >>> ev.result.error
    'Missing unit selection for: LENGTH, TIME'
"""

from dataclasses import dataclass

from beartype import beartype

from unitscope.config import DEFAULT_CONFIG, EngineConfig
from unitscope.conversions import build_conversions
from unitscope.dimensions import required_dimensions
from unitscope.evaluator import ExpressionError, QuantityEvaluator
from unitscope.recompose import recompose
from unitscope.units import ConversionGroup, DimensionalResult, Quantity, Selection


@beartype
@dataclass(frozen=True, slots=True)
class Evaluation:
    """Everything derived from one expression and selection.

    Attributes:
        expression: The input text
        value: Evaluated quantity as text, "" for blank input
        in_meters: Evaluated physical quantity as text, None for plain
            numbers and invalid input
        groups: Conversion groups for the quantity
        result: Recomposition under ``selection``
        selection: Selection restricted to the dimensions that still apply
        quantity: The evaluated quantity, None for blank or invalid input
    """

    expression: str
    value: str
    in_meters: str | None
    groups: tuple[ConversionGroup, ...]
    result: DimensionalResult
    selection: Selection
    quantity: Quantity | None = None

    @property
    def is_valid(self) -> bool:
        return self.quantity is not None


def _applicable_dimensions(quantity: Quantity, groups: list[ConversionGroup]) -> set[str]:
    return {g.dimension for g in groups} | set(required_dimensions(quantity))


@beartype
def recompute_all(
    expression: str,
    selection: Selection | None = None,
    *,
    evaluator: QuantityEvaluator,
    config: EngineConfig = DEFAULT_CONFIG,
    include_derived: bool = True,
) -> Evaluation:
    """Evaluate an expression and rebuild all derived state.

    Blank input clears everything. Input the evaluator rejects reports
    ``config.invalid_expression_text`` and clears the selection. Otherwise
    the selection keeps only the dimensions that still apply.

    Args:
        expression: User input, e.g. "2 N/m^2"
        selection: Current selection, if any
        evaluator: Quantity evaluator
        config: Engine options
        include_derived: Whether to search for equivalent derived units

    Returns:
        The new evaluation
    """
    selection = selection if selection is not None else Selection()

    if not expression.strip():
        return Evaluation(
            expression=expression,
            value="",
            in_meters=None,
            groups=(),
            result=DimensionalResult.empty(),
            selection=Selection(),
        )

    try:
        quantity = evaluator.evaluate(expression)
    except ExpressionError:
        return Evaluation(
            expression=expression,
            value=config.invalid_expression_text,
            in_meters=None,
            groups=(),
            result=DimensionalResult.failure(config.invalid_expression_text),
            selection=Selection(),
        )

    groups = build_conversions(quantity, evaluator, config, include_derived=include_derived)
    selection = selection.restrict(_applicable_dimensions(quantity, groups))
    text = evaluator.format_quantity(quantity)

    return Evaluation(
        expression=expression,
        value=text,
        in_meters=text if quantity.is_physical else None,
        groups=tuple(groups),
        result=recompose(quantity, selection, evaluator, config),
        selection=selection,
        quantity=quantity,
    )


@beartype
def select_unit(
    evaluation: Evaluation,
    dimension: str,
    unit: str,
    exponent: int | float,
    *,
    evaluator: QuantityEvaluator,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Evaluation:
    """Choose a unit for one dimension and recompute the result.

    The conversion groups are reused; only the selection and the
    recomposition change. Selecting on an invalid evaluation leaves it
    unchanged.
    """
    if evaluation.quantity is None:
        return evaluation

    selection = evaluation.selection.select(dimension, unit, exponent)
    return Evaluation(
        expression=evaluation.expression,
        value=evaluation.value,
        in_meters=evaluation.in_meters,
        groups=evaluation.groups,
        result=recompose(evaluation.quantity, selection, evaluator, config),
        selection=selection,
        quantity=evaluation.quantity,
    )
