"""
Conversion of user input to field values.

Text-based editors commit through these functions: text is parsed to the
field's numeric type, clamped to the rule's bounds and rounded to its
precision. Text that cannot be parsed commits the type's zero value; a
ValueParseError never leaves this module's commit functions.
"""

import logging
import math
from typing import Optional, Tuple, Type, Union

from pyqt_fieldforms.exceptions import ValueParseError

logger = logging.getLogger(__name__)

Number = Union[int, float]


def parse_number(text: str, number_type: Type) -> Number:
    """
    Strictly parse text as ``number_type`` (int or float).

    Raises:
        ValueParseError: If the text is not a finite number of that type
    """
    stripped = text.strip()
    try:
        value = number_type(stripped)
    except (TypeError, ValueError) as e:
        raise ValueParseError(f"'{text}' is not a valid {number_type.__name__}") from e
    if number_type is float and not math.isfinite(value):
        raise ValueParseError(f"'{text}' is not a finite float")
    return value


def clamp(value: Number, minimum: float, maximum: float) -> Number:
    if value < minimum:
        return minimum
    if value > maximum:
        return maximum
    return value


def round_to_precision(value: float, precision: Optional[int]) -> float:
    """Round half to even at ``precision`` decimals; a negative precision disables rounding."""
    if precision is None or precision < 0:
        return value
    return round(value, precision)


def grid_bounds(minimum: float, maximum: float, precision: Optional[int]) -> Tuple[float, float]:
    """
    Pull the bounds inward onto the ``precision`` decimal grid.

    A clamped value then stays on the grid, so committing its displayed
    text again yields the same value. Bounds closer than one step apart
    are returned unchanged.
    """
    if precision is None or precision < 0:
        return minimum, maximum
    step = 10.0 ** -precision
    low, high = round(minimum, precision), round(maximum, precision)
    if low < minimum:
        low = round(low + step, precision)
    if high > maximum:
        high = round(high - step, precision)
    if low > high:
        return minimum, maximum
    return low, high


def _as_type(value: Number, number_type: Type) -> Number:
    if number_type is int:
        return int(value) if math.isfinite(value) else 0
    return float(value)


def commit_number(text: str, number_type: Type, minimum: float = -math.inf,
                  maximum: float = math.inf, precision: Optional[int] = None) -> Number:
    """
    Convert edited text to a bounded number.

    Args:
        text: Text the user left in the widget
        number_type: int or float
        minimum: Lower bound
        maximum: Upper bound
        precision: Decimals kept for floats

    Returns:
        The committed value; the type's zero value if the text is empty or
        cannot be parsed
    """
    if not text.strip():
        return number_type()
    try:
        value = parse_number(text, number_type)
    except ValueParseError as e:
        logger.debug(f"Committing zero value: {e}")
        return number_type()
    if number_type is float:
        value = round_to_precision(value, precision)
    else:
        precision = 0
    low, high = grid_bounds(minimum, maximum, precision)
    return _as_type(clamp(value, low, high), number_type)


def commit_slider(value: float, number_type: Type, minimum: float, maximum: float,
                  precision: Optional[int] = None) -> Number:
    """Convert a slider position to the field type: ints to the nearest integer, floats to precision."""
    if number_type is int:
        low, high = grid_bounds(minimum, maximum, 0)
        return _as_type(clamp(round(value), low, high), int)
    low, high = grid_bounds(minimum, maximum, precision)
    return float(clamp(round_to_precision(float(value), precision), low, high))


def commit_text(text: str, max_length: Optional[int] = None) -> str:
    if max_length is not None and max_length >= 0:
        return text[:max_length]
    return text


def format_number(value: Number, number_type: Type, precision: Optional[int] = None) -> str:
    """Text shown in a numeric field: floats with ``precision`` decimals, ints as-is."""
    if number_type is float and precision is not None and precision >= 0:
        return f"{float(value):.{precision}f}"
    return str(value)
