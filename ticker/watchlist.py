"""Watchlist of quotes, positions and fundamentals rendered as a grid."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from ticker.format import convert_float_to_string, value_text
from ticker.grid import Align, Cell, Grid, Row, render
from ticker.models import Asset, AssetClass, Config, Context, Styles
from ticker.sorter import new_sorter

_MIN_WIDTH = 80
_WIDTH_MARKET_STATE = 5
_WIDTH_GUTTER = 1
_WIDTH_LABEL = 15
_WIDTH_NAME = 20
_WIDTH_POSITION_GUTTER = 2
_WIDTH_CHANGE_STATIC = 12  # "↓ " + " (100.00%)"
_WIDTH_RANGE_STATIC = 3  # " - "
_MAX_NAME_LENGTH = 20


@dataclass
class _CellWidths:
    position_length: int = 0
    quote_length: int = 0
    quote: int = 0
    quote_extended: int = 0
    quote_range: int = 0
    position: int = 0
    position_extended: int = 0
    volume_market_cap: int = 0


def _cell_widths(assets: list[Asset]) -> _CellWidths:
    widths = _CellWidths()
    for asset in assets:
        precision = asset.meta.is_variable_precision
        volume_market_cap_length = len(
            convert_float_to_string(asset.quote_extended.market_cap, True)
        )
        if asset.quote_extended.fifty_two_week_high == 0.0:
            quote_length = len(convert_float_to_string(asset.quote_price.price, precision))
        else:
            quote_length = len(
                convert_float_to_string(asset.quote_extended.fifty_two_week_high, precision)
            )

        widths.volume_market_cap = max(widths.volume_market_cap, volume_market_cap_length)

        if quote_length > widths.quote_length:
            widths.quote_length = quote_length
            widths.quote = quote_length + _WIDTH_CHANGE_STATIC
            widths.quote_extended = quote_length
            widths.quote_range = _WIDTH_RANGE_STATIC + quote_length * 2

        if not asset.holding.is_empty():
            position_length = len(convert_float_to_string(asset.holding.value, precision))
            quantity_length = len(convert_float_to_string(asset.holding.quantity, precision))
            if position_length > widths.position_length:
                widths.position_length = position_length
                widths.position = position_length + _WIDTH_CHANGE_STATIC + _WIDTH_POSITION_GUTTER
            widths.position_extended = max(
                widths.position_extended, position_length, quantity_length
            )
    return widths


def _quote_change_text(
    change: float, change_percent: float, is_variable_precision: bool, styles: Styles
) -> str:
    if change == 0.0:
        arrow = "  "
    elif change > 0.0:
        arrow = "↑ "
    else:
        arrow = "↓ "
    return styles.text_price(
        change_percent,
        arrow
        + convert_float_to_string(change, is_variable_precision)
        + " ("
        + convert_float_to_string(change_percent, False)
        + "%)",
    )


def _text_name(asset: Asset, styles: Styles) -> str:
    return styles.text_bold(asset.symbol) + "\n" + styles.text_label(asset.name[:_MAX_NAME_LENGTH])


def _text_quote(asset: Asset, styles: Styles) -> str:
    precision = asset.meta.is_variable_precision
    return (
        styles.text(convert_float_to_string(asset.quote_price.price, precision))
        + "\n"
        + _quote_change_text(
            asset.quote_price.change, asset.quote_price.change_percent, precision, styles
        )
    )


def _text_position(asset: Asset, styles: Styles) -> str:
    precision = asset.meta.is_variable_precision
    holding = asset.holding
    position_value = ""
    position_change = ""
    if holding.value != 0.0:
        position_value = value_text(holding.value, styles) + styles.text_light(
            " (" + convert_float_to_string(holding.weight, precision) + "%)"
        )
    if holding.total_change.amount != 0.0:
        position_change = _quote_change_text(
            holding.total_change.amount, holding.total_change.percent, precision, styles
        )
    return position_value + "\n" + position_change


def _text_quote_extended(asset: Asset, styles: Styles) -> str:
    precision = asset.meta.is_variable_precision
    if asset.class_ is AssetClass.FUTURES_CONTRACT:
        if asset.quote_futures.index_price == 0.0:
            return ""
        return (
            styles.text(convert_float_to_string(asset.quote_futures.index_price, precision))
            + "\n"
            + styles.text(convert_float_to_string(asset.quote_futures.basis, False))
            + "%"
        )
    prev_close = styles.text(
        convert_float_to_string(asset.quote_price.price_prev_close, precision)
    )
    if asset.quote_price.price_open == 0.0:
        return prev_close + "\n"
    return (
        prev_close
        + "\n"
        + styles.text(convert_float_to_string(asset.quote_price.price_open, precision))
    )


def _text_quote_extended_labels(asset: Asset, styles: Styles) -> str:
    if asset.class_ is AssetClass.FUTURES_CONTRACT:
        if asset.quote_futures.index_price == 0.0:
            return ""
        return styles.text_label("Index Price:") + "\n" + styles.text_label("Basis:")
    if asset.quote_price.price_open == 0.0:
        return styles.text_label("Prev. Close:") + "\n"
    return styles.text_label("Prev. Close:") + "\n" + styles.text_label("Open:")


def _text_position_extended(asset: Asset, styles: Styles) -> str:
    if asset.holding.quantity == 0.0:
        return ""
    precision = asset.meta.is_variable_precision
    return (
        styles.text(convert_float_to_string(asset.holding.unit_cost, precision))
        + "\n"
        + styles.text(convert_float_to_string(asset.holding.quantity, precision))
    )


def _text_position_extended_labels(asset: Asset, styles: Styles) -> str:
    if asset.holding.quantity == 0.0:
        return ""
    return styles.text_label("Avg. Cost:") + "\n" + styles.text_label("Quantity:")


def _range(low: float, high: float, precision: bool, styles: Styles) -> str:
    return (
        convert_float_to_string(low, precision)
        + styles.text(" - ")
        + convert_float_to_string(high, precision)
    )


def _has_day_range(asset: Asset) -> bool:
    return asset.quote_price.price_day_high != 0.0 and asset.quote_price.price_day_low != 0.0


def _text_quote_range(asset: Asset, styles: Styles) -> str:
    precision = asset.meta.is_variable_precision
    price = asset.quote_price
    if asset.class_ is AssetClass.FUTURES_CONTRACT:
        if _has_day_range(asset):
            return (
                _range(price.price_day_low, price.price_day_high, precision, styles)
                + "\n"
                + asset.quote_futures.expiry
            )
        return asset.quote_futures.expiry
    if _has_day_range(asset):
        return (
            _range(price.price_day_low, price.price_day_high, precision, styles)
            + "\n"
            + _range(
                asset.quote_extended.fifty_two_week_low,
                asset.quote_extended.fifty_two_week_high,
                precision,
                styles,
            )
        )
    return ""


def _text_quote_range_labels(asset: Asset, styles: Styles) -> str:
    if asset.class_ is AssetClass.FUTURES_CONTRACT:
        if _has_day_range(asset):
            return styles.text_label("Day Range:") + "\n" + styles.text_label("Expiry:")
        return styles.text_label("Expiry:")
    if _has_day_range(asset):
        return styles.text_label("Day Range:") + "\n" + styles.text_label("52wk Range:")
    return ""


def _text_volume_market_cap(asset: Asset) -> str:
    first = (
        asset.quote_futures.open_interest
        if asset.class_ is AssetClass.FUTURES_CONTRACT
        else asset.quote_extended.market_cap
    )
    return (
        convert_float_to_string(first, True)
        + "\n"
        + convert_float_to_string(asset.quote_extended.volume, True)
    )


def _text_volume_market_cap_labels(asset: Asset, styles: Styles) -> str:
    first = "Open Interest:" if asset.class_ is AssetClass.FUTURES_CONTRACT else "Market Cap:"
    return styles.text_label(first) + "\n" + styles.text_label("Volume:")


def _text_separator(width: int, styles: Styles) -> str:
    return styles.text_line("─" * width)


def _exchange_delay_text(delay: float) -> str:
    if delay <= 0:
        return "Real-Time"
    return f"Delayed {delay:.0f}min"


def _format_tag(text: str, styles: Styles) -> str:
    return styles.tag(" " + text + " ")


def _text_tags(asset: Asset, styles: Styles) -> str:
    currency = asset.currency
    currency_text = currency.from_currency_code
    if currency.to_currency_code and currency.to_currency_code != currency.from_currency_code:
        currency_text = currency.from_currency_code + " → " + currency.to_currency_code
    return " ".join(
        _format_tag(text, styles)
        for text in (currency_text, _exchange_delay_text(asset.exchange.delay), asset.exchange.name)
    )


def _text_market_state(asset: Asset, styles: Styles) -> str:
    if asset.exchange.is_regular_trading_session:
        return styles.text_label(" ●  ")
    if asset.exchange.is_active:
        return styles.text_label(" ○  ")
    return ""


def _build_cells(asset: Asset, config: Config, styles: Styles, widths: _CellWidths) -> list[Cell]:
    if not config.extra_info_fundamentals and not config.show_holdings:
        return [
            Cell(text=_text_name(asset, styles)),
            Cell(text=_text_market_state(asset, styles), width=_WIDTH_MARKET_STATE, align=Align.RIGHT),
            Cell(text=_text_quote(asset, styles), width=widths.quote, align=Align.RIGHT),
        ]

    cells_name = [
        Cell(text=_text_name(asset, styles), width=_WIDTH_NAME),
        Cell(text=""),
        Cell(text=_text_market_state(asset, styles), width=_WIDTH_MARKET_STATE, align=Align.RIGHT),
    ]
    cells = [Cell(text=_text_quote(asset, styles), width=widths.quote, align=Align.RIGHT)]

    width_min_term = _WIDTH_NAME + _WIDTH_MARKET_STATE + widths.quote + 3 * _WIDTH_GUTTER

    if config.show_holdings:
        width_holdings = (
            width_min_term
            + widths.position
            + 3 * _WIDTH_GUTTER
            + widths.position_extended
            + _WIDTH_LABEL
        )
        cells = [
            Cell(
                text=_text_position_extended_labels(asset, styles),
                width=_WIDTH_LABEL,
                align=Align.RIGHT,
                visible_min_width=width_holdings,
            ),
            Cell(
                text=_text_position_extended(asset, styles),
                width=widths.position_extended,
                align=Align.RIGHT,
                visible_min_width=width_min_term
                + widths.position
                + 2 * _WIDTH_GUTTER
                + widths.position_extended,
            ),
            Cell(
                text=_text_position(asset, styles),
                width=widths.position,
                align=Align.RIGHT,
                visible_min_width=width_min_term + widths.position + _WIDTH_GUTTER,
            ),
        ] + cells
        width_min_term = width_holdings

    if config.extra_info_fundamentals:
        base = width_min_term + widths.quote_extended
        cells = [
            Cell(
                text=_text_volume_market_cap_labels(asset, styles),
                width=_WIDTH_LABEL,
                align=Align.RIGHT,
                visible_min_width=base
                + 6 * _WIDTH_GUTTER
                + 3 * _WIDTH_LABEL
                + widths.quote_range
                + widths.volume_market_cap,
            ),
            Cell(
                text=_text_volume_market_cap(asset),
                width=widths.volume_market_cap,
                align=Align.RIGHT,
                visible_min_width=base
                + 5 * _WIDTH_GUTTER
                + 2 * _WIDTH_LABEL
                + widths.quote_range
                + widths.volume_market_cap,
            ),
            Cell(
                text=_text_quote_range_labels(asset, styles),
                width=_WIDTH_LABEL,
                align=Align.RIGHT,
                visible_min_width=base + 4 * _WIDTH_GUTTER + 2 * _WIDTH_LABEL + widths.quote_range,
            ),
            Cell(
                text=_text_quote_range(asset, styles),
                width=widths.quote_range,
                align=Align.RIGHT,
                visible_min_width=base + 3 * _WIDTH_GUTTER + _WIDTH_LABEL + widths.quote_range,
            ),
            Cell(
                text=_text_quote_extended_labels(asset, styles),
                width=_WIDTH_LABEL,
                align=Align.RIGHT,
                visible_min_width=base + 2 * _WIDTH_GUTTER + _WIDTH_LABEL,
            ),
            Cell(
                text=_text_quote_extended(asset, styles),
                width=widths.quote_extended,
                align=Align.RIGHT,
                visible_min_width=base + _WIDTH_GUTTER,
            ),
        ] + cells

    return cells_name + cells


@dataclass
class WatchlistModel:
    """List of assets with quotes and, optionally, holdings and fundamentals."""

    context: Context = field(default_factory=Context)
    width: int = _MIN_WIDTH
    assets: list[Asset] = field(default_factory=list)
    sorter: Optional[Callable[[list[Asset]], list[Asset]]] = None

    def __post_init__(self) -> None:
        if self.sorter is None:
            self.sorter = new_sorter(self.context.config.sort)

    @property
    def styles(self) -> Styles:
        return self.context.reference.styles

    def view(self) -> str:
        """Render the watchlist, or a notice when the terminal is too narrow."""
        if self.width < _MIN_WIDTH:
            return (
                "Terminal window too narrow to render content\n"
                f"Resize to fix ({self.width}/{_MIN_WIDTH})"
            )

        config = self.context.config
        styles = self.styles
        widths = _cell_widths(self.assets)
        rows: list[Row] = []
        for asset in self.sorter(self.assets):
            rows.append(Row(width=self.width, cells=_build_cells(asset, config, styles, widths)))
            if config.extra_info_exchange:
                rows.append(Row(width=self.width, cells=[Cell(text=_text_tags(asset, styles))]))
            if config.separate:
                rows.append(
                    Row(width=self.width, cells=[Cell(text=_text_separator(self.width, styles))])
                )

        return render(Grid(rows=rows, gutter_horizontal=_WIDTH_GUTTER))