"""Quotes for stocks and other securities from the Yahoo Finance API."""

from __future__ import annotations

from typing import Any, Iterable

import requests

from ticker.models import (
    AssetClass,
    AssetQuote,
    Currency,
    Exchange,
    ExchangeState,
    Meta,
    QuoteExtended,
    QuotePrice,
    QuoteSource,
)
from ticker.yahoo_client import SessionRefreshError

_QUOTE_PATH = "/v7/finance/quote"
_FIELDS = ",".join(
    [
        "shortName",
        "regularMarketChange",
        "regularMarketChangePercent",
        "regularMarketPrice",
        "regularMarketPreviousClose",
        "regularMarketOpen",
        "regularMarketDayRange",
        "regularMarketDayHigh",
        "regularMarketDayLow",
        "regularMarketVolume",
        "postMarketChange",
        "postMarketChangePercent",
        "postMarketPrice",
        "preMarketChange",
        "preMarketChangePercent",
        "preMarketPrice",
        "fiftyTwoWeekHigh",
        "fiftyTwoWeekLow",
        "marketCap",
    ]
)
_POST_MARKET_STATES = frozenset({"POST", "POSTPOST"})


def _number(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    return 0.0


def _raw(quote: dict[str, Any], key: str) -> float:
    value = quote.get(key)
    if isinstance(value, dict):
        value = value.get("raw")
    return _number(value)


def _text(quote: dict[str, Any], key: str) -> str:
    value = quote.get(key)
    return value if isinstance(value, str) else ""


def transform_response_quote(response_quote: dict[str, Any]) -> AssetQuote:
    """Build an asset quote from one entry of the API's quote result list."""
    asset_class = (
        AssetClass.CRYPTOCURRENCY
        if _text(response_quote, "quoteType") == "CRYPTOCURRENCY"
        else AssetClass.STOCK
    )
    market_state = _text(response_quote, "marketState")
    regular_change = _raw(response_quote, "regularMarketChange")
    regular_change_percent = _raw(response_quote, "regularMarketChangePercent")
    post_price = _raw(response_quote, "postMarketPrice")
    pre_price = _raw(response_quote, "preMarketPrice")

    quote = AssetQuote(
        name=_text(response_quote, "shortName"),
        symbol=_text(response_quote, "symbol"),
        class_=asset_class,
        currency=Currency(from_currency_code=_text(response_quote, "currency").upper()),
        quote_price=QuotePrice(
            price=_raw(response_quote, "regularMarketPrice"),
            price_prev_close=_raw(response_quote, "regularMarketPreviousClose"),
            price_open=_raw(response_quote, "regularMarketOpen"),
            price_day_high=_raw(response_quote, "regularMarketDayHigh"),
            price_day_low=_raw(response_quote, "regularMarketDayLow"),
            change=regular_change,
            change_percent=regular_change_percent,
        ),
        quote_extended=QuoteExtended(
            fifty_two_week_high=_raw(response_quote, "fiftyTwoWeekHigh"),
            fifty_two_week_low=_raw(response_quote, "fiftyTwoWeekLow"),
            market_cap=_raw(response_quote, "marketCap"),
            volume=_raw(response_quote, "regularMarketVolume"),
        ),
        quote_source=QuoteSource.YAHOO,
        exchange=Exchange(
            name=_text(response_quote, "fullExchangeName"),
            delay=_number(response_quote.get("exchangeDataDelayedBy")),
            state=ExchangeState.OPEN,
            is_active=True,
            is_regular_trading_session=True,
        ),
        meta=Meta(is_variable_precision=asset_class is AssetClass.CRYPTOCURRENCY),
    )

    if market_state == "REGULAR":
        return quote

    if market_state in _POST_MARKET_STATES and post_price == 0.0:
        quote.exchange.is_regular_trading_session = False
        return quote

    if market_state == "PRE" and pre_price == 0.0:
        quote.exchange.is_active = False
        quote.exchange.is_regular_trading_session = False
        return quote

    if market_state in _POST_MARKET_STATES:
        quote.quote_price.price = post_price
        quote.quote_price.change = _raw(response_quote, "postMarketChange") + regular_change
        quote.quote_price.change_percent = (
            _raw(response_quote, "postMarketChangePercent") + regular_change_percent
        )
        quote.exchange.is_regular_trading_session = False
        return quote

    if market_state == "PRE":
        quote.quote_price.price = pre_price
        quote.quote_price.change = _raw(response_quote, "preMarketChange")
        quote.quote_price.change_percent = _raw(response_quote, "preMarketChangePercent")
        quote.exchange.is_regular_trading_session = False
        return quote

    if post_price != 0.0:
        quote.quote_price.price = post_price
        quote.quote_price.change = _raw(response_quote, "postMarketChange") + regular_change
        quote.quote_price.change_percent = (
            _raw(response_quote, "postMarketChangePercent") + regular_change_percent
        )
        quote.exchange.is_active = False
        quote.exchange.is_regular_trading_session = False
        return quote

    quote.exchange.is_active = False
    quote.exchange.is_regular_trading_session = False
    return quote


def get_asset_quotes(client: Any, symbols: Iterable[str]) -> list[AssetQuote]:
    """Fetch quotes for the symbols; any failed request yields no quotes."""
    params = {"fields": _FIELDS, "symbols": ",".join(symbols)}
    try:
        response = client.get(_QUOTE_PATH, params)
    except (requests.RequestException, SessionRefreshError):
        return []
    if not response.ok:
        return []
    try:
        payload = response.json()
    except ValueError:
        return []
    if not isinstance(payload, dict):
        return []
    results = (payload.get("quoteResponse") or {}).get("result") or []
    return [transform_response_quote(item) for item in results if isinstance(item, dict)]