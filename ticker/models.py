"""Core data types shared across quote sources, sorting and rendering."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable


class AssetClass(enum.Enum):
    """Kind of instrument a quote refers to."""

    STOCK = "stock"
    CRYPTOCURRENCY = "cryptocurrency"
    FUTURES_CONTRACT = "futures_contract"


class QuoteSource(enum.Enum):
    """Where a quote is fetched from."""

    YAHOO = "yahoo"
    USER_DEFINED = "user_defined"
    COINGECKO = "coingecko"
    COINCAP = "coincap"
    COINBASE = "coinbase"
    ALPACA = "alpaca"
    UNKNOWN = "unknown"


class ExchangeState(enum.Enum):
    """Trading state of an exchange."""

    OPEN = "open"
    CLOSED = "closed"


@dataclass
class Currency:
    from_currency_code: str = ""
    to_currency_code: str = ""
    rate: float = 0.0


@dataclass
class QuotePrice:
    price: float = 0.0
    price_prev_close: float = 0.0
    price_open: float = 0.0
    price_day_high: float = 0.0
    price_day_low: float = 0.0
    change: float = 0.0
    change_percent: float = 0.0


@dataclass
class QuoteExtended:
    fifty_two_week_high: float = 0.0
    fifty_two_week_low: float = 0.0
    market_cap: float = 0.0
    volume: float = 0.0


@dataclass
class QuoteFutures:
    symbol_underlying: str = ""
    index_price: float = 0.0
    basis: float = 0.0
    open_interest: float = 0.0
    expiry: str = ""


@dataclass
class Exchange:
    name: str = ""
    delay: float = 0.0
    state: ExchangeState = ExchangeState.OPEN
    is_active: bool = False
    is_regular_trading_session: bool = False


@dataclass
class Meta:
    is_hidden: bool = False
    is_variable_precision: bool = False
    order_index: int = 0


@dataclass
class HoldingChange:
    amount: float = 0.0
    percent: float = 0.0


@dataclass
class Holding:
    value: float = 0.0
    cost: float = 0.0
    quantity: float = 0.0
    unit_cost: float = 0.0
    weight: float = 0.0
    day_change: HoldingChange = field(default_factory=HoldingChange)
    total_change: HoldingChange = field(default_factory=HoldingChange)

    def is_empty(self) -> bool:
        """True when every field holds its zero value."""
        return self == Holding()


@dataclass
class AssetQuote:
    name: str = ""
    symbol: str = ""
    class_: AssetClass = AssetClass.STOCK
    currency: Currency = field(default_factory=Currency)
    quote_price: QuotePrice = field(default_factory=QuotePrice)
    quote_extended: QuoteExtended = field(default_factory=QuoteExtended)
    quote_futures: QuoteFutures = field(default_factory=QuoteFutures)
    quote_source: QuoteSource = QuoteSource.UNKNOWN
    exchange: Exchange = field(default_factory=Exchange)
    meta: Meta = field(default_factory=Meta)


@dataclass
class Asset:
    name: str = ""
    symbol: str = ""
    class_: AssetClass = AssetClass.STOCK
    currency: Currency = field(default_factory=Currency)
    holding: Holding = field(default_factory=Holding)
    quote_price: QuotePrice = field(default_factory=QuotePrice)
    quote_extended: QuoteExtended = field(default_factory=QuoteExtended)
    quote_futures: QuoteFutures = field(default_factory=QuoteFutures)
    quote_source: QuoteSource = QuoteSource.UNKNOWN
    exchange: Exchange = field(default_factory=Exchange)
    meta: Meta = field(default_factory=Meta)


@dataclass
class CurrencyRate:
    from_currency: str = ""
    to_currency: str = ""
    rate: float = 0.0


@dataclass
class AssetGroupSymbolsBySource:
    source: QuoteSource = QuoteSource.UNKNOWN
    symbols: list[str] = field(default_factory=list)


@dataclass
class AssetGroup:
    name: str = ""
    symbols_by_source: list[AssetGroupSymbolsBySource] = field(default_factory=list)


@dataclass
class AssetGroupQuote:
    asset_group: AssetGroup = field(default_factory=AssetGroup)
    asset_quotes: list[AssetQuote] = field(default_factory=list)


def _unstyled_price(percent: float, text: str) -> str:
    """Render price text as plain text, ignoring the percent change."""
    return str(text)


@dataclass
class Styles:
    """Text styling functions; each defaults to rendering plain text."""

    text: Callable[[str], str] = field(default_factory=lambda: str)
    text_light: Callable[[str], str] = field(default_factory=lambda: str)
    text_label: Callable[[str], str] = field(default_factory=lambda: str)
    text_bold: Callable[[str], str] = field(default_factory=lambda: str)
    text_line: Callable[[str], str] = field(default_factory=lambda: str)
    text_price: Callable[[float, str], str] = field(default_factory=lambda: _unstyled_price)
    tag: Callable[[str], str] = field(default_factory=lambda: str)


@dataclass
class ConfigColorScheme:
    text: str = ""
    text_light: str = ""
    text_label: str = ""
    text_line: str = ""
    text_tag: str = ""
    background_tag: str = ""


@dataclass
class Config:
    refresh_interval: int = 0
    separate: bool = False
    extra_info_exchange: bool = False
    extra_info_fundamentals: bool = False
    show_summary: bool = False
    show_holdings: bool = False
    sort: str = ""
    currency: str = ""
    color_scheme: ConfigColorScheme = field(default_factory=ConfigColorScheme)


@dataclass
class Reference:
    currency_rates: dict[str, CurrencyRate] = field(default_factory=dict)
    styles: Styles = field(default_factory=Styles)
    source_to_underlying_asset_symbols: dict[QuoteSource, list[str]] = field(default_factory=dict)


@dataclass
class Context:
    config: Config = field(default_factory=Config)
    groups: list[AssetGroup] = field(default_factory=list)
    reference: Reference = field(default_factory=Reference)


@dataclass
class HttpClients:
    default: Any = None
    yahoo: Any = None


@dataclass
class Dependencies:
    http_clients: HttpClients = field(default_factory=HttpClients)