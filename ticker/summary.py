"""Portfolio summary line shown above the watchlist."""

from __future__ import annotations

from dataclasses import dataclass, field

from ticker.format import convert_float_to_string
from ticker.grid import Cell, Grid, Row, render, visible_width
from ticker.models import Context, HoldingChange, Styles

_MIN_WIDTH = 80


@dataclass
class HoldingSummary:
    value: float = 0.0
    cost: float = 0.0
    day_change: HoldingChange = field(default_factory=HoldingChange)
    total_change: HoldingChange = field(default_factory=HoldingChange)


def _change_text(change: float, change_percent: float, styles: Styles) -> str:
    amount = (
        f"{convert_float_to_string(change, False)} "
        f"({convert_float_to_string(change_percent, False)}%)"
    )
    if change == 0.0:
        return styles.text_label(amount)
    arrow = "↑ " if change > 0.0 else "↓ "
    return styles.text_price(change_percent, arrow + amount)


@dataclass
class SummaryModel:
    """Summary of holdings: day change, total change, value and cost."""

    context: Context = field(default_factory=Context)
    width: int = _MIN_WIDTH
    summary: HoldingSummary = field(default_factory=HoldingSummary)

    @property
    def styles(self) -> Styles:
        return self.context.reference.styles

    def view(self) -> str:
        """Render the summary, or nothing when the terminal is too narrow."""
        if self.width < _MIN_WIDTH:
            return ""

        styles = self.styles
        label = styles.text_label
        summary = self.summary

        text_change = (
            label("Day Change: ")
            + _change_text(summary.day_change.amount, summary.day_change.percent, styles)
            + label(" • ")
            + label("Change: ")
            + _change_text(summary.total_change.amount, summary.total_change.percent, styles)
        )
        width_change = visible_width(text_change)
        text_value = (
            label(" • ") + label("Value: ") + label(convert_float_to_string(summary.value, False))
        )
        width_value = visible_width(text_value)
        text_cost = (
            label(" • ") + label("Cost: ") + label(convert_float_to_string(summary.cost, False))
        )
        # The cost column takes the width of the value column.
        width_cost = width_value

        return render(
            Grid(
                rows=[
                    Row(
                        width=self.width,
                        cells=[
                            Cell(text=text_change, width=width_change),
                            Cell(
                                text=text_value,
                                width=width_value,
                                visible_min_width=width_change + width_value,
                            ),
                            Cell(
                                text=text_cost,
                                width=width_cost,
                                visible_min_width=width_change + width_value + width_cost,
                            ),
                        ],
                    ),
                    Row(
                        width=self.width,
                        cells=[Cell(text=styles.text_line("━" * self.width))],
                    ),
                ],
                gutter_horizontal=1,
            )
        )