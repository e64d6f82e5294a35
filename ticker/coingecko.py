"""Cryptocurrency quotes from the CoinGecko API."""

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

_MARKETS_URL = (
    "https://api.coingecko.com/api/v3/coins/markets"
    "?vs_currency=usd&ids={ids}&order=market_cap_desc&per_page=250&page=1&sparkline=false"
)


def _number(data: dict[str, Any], key: str) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def _text(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def _transform_market(data: dict[str, Any]) -> AssetQuote:
    price = _number(data, "current_price")
    change = _number(data, "price_change_24h")
    return AssetQuote(
        name=_text(data, "name"),
        symbol=_text(data, "symbol").upper(),
        class_=AssetClass.CRYPTOCURRENCY,
        currency=Currency(from_currency_code="USD"),
        quote_price=QuotePrice(
            price=price,
            price_prev_close=price - change,
            price_day_high=_number(data, "high_24h"),
            price_day_low=_number(data, "low_24h"),
            change=change,
            change_percent=_number(data, "price_change_percentage_24h"),
        ),
        quote_extended=QuoteExtended(
            fifty_two_week_high=_number(data, "ath"),
            fifty_two_week_low=_number(data, "atl"),
            market_cap=_number(data, "market_cap"),
            volume=_number(data, "total_volume"),
        ),
        quote_source=QuoteSource.COINGECKO,
        exchange=Exchange(
            name="Crypto Aggregate",
            delay=0.0,
            state=ExchangeState.OPEN,
            is_active=True,
            is_regular_trading_session=True,
        ),
        meta=Meta(is_variable_precision=True),
    )


def get_asset_quotes(session: requests.Session, symbols: Iterable[str]) -> list[AssetQuote]:
    """Quotes for the CoinGecko coin ids; a failed request yields no quotes."""
    url = _MARKETS_URL.format(ids=",".join(symbols))
    try:
        response = session.get(url)
    except requests.RequestException:
        return []
    if not response.ok:
        return []
    try:
        payload = response.json()
    except ValueError:
        return []
    if not isinstance(payload, list):
        return []
    return [_transform_market(item) for item in payload if isinstance(item, dict)]