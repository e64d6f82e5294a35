"""Number formatting for quote display."""

from __future__ import annotations

from ticker.models import Styles


def _precision(value: float) -> int:
    magnitude = abs(value)
    if magnitude == 0.0:
        return 2
    if magnitude >= 10000:
        return 0
    if magnitude < 10:
        return 4
    if magnitude < 100:
        return 3
    if magnitude >= 1000 and value < 0:
        return 1
    return 2


def convert_float_to_string(value: float, is_variable_precision: bool) -> str:
    """Format a float, scaling large values and choosing precision by magnitude."""
    if not is_variable_precision:
        return f"{value:.2f}"

    unit = ""
    if value > 1_000_000_000_000:
        value /= 1_000_000_000_000
        unit = " T"
    if value > 1_000_000_000:
        value /= 1_000_000_000
        unit = " B"
    if value > 1_000_000:
        value /= 1_000_000
        unit = " M"

    return f"{value:.{_precision(value)}f}{unit}"


def value_text(value: float, styles: Styles) -> str:
    """Styled value text, or an empty string for non-positive values."""
    if value <= 0.0:
        return ""
    return styles.text(convert_float_to_string(value, False))