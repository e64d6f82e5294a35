"""Option quotes from the Alpaca market data API."""

from __future__ import annotations

from typing import Any, Iterable

import requests

from ticker.models import (
    AssetQuote,
    Exchange,
    QuoteExtended,
    QuotePrice,
    QuoteSource,
)

_SNAPSHOTS_URL = "https://data.alpaca.markets/v1beta1/options/snapshots"
_SYMBOL_SUFFIX = ".AP"
_API_KEY_ID = "placeholder"
_API_SECRET_KEY = "secret"


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _number(data: dict[str, Any], key: str) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def _fetch_snapshot(session: requests.Session, symbol: str) -> dict[str, Any]:
    """Snapshot payload for one symbol; an empty payload when the request fails."""
    headers = {
        "APCA-API-KEY-ID": _API_KEY_ID,
        "APCA-API-SECRET-KEY": _API_SECRET_KEY,
    }
    try:
        response = session.get(_SNAPSHOTS_URL, headers=headers, params={"symbols": symbol})
    except requests.RequestException:
        return {}
    if not response.ok:
        return {}
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


def _transform_snapshot(payload: dict[str, Any], symbol: str) -> AssetQuote:
    snapshot = _section(payload, "snapshot")
    daily_bar = _section(snapshot, "dailyBar")
    bid_price = _number(_section(snapshot, "latestQuote"), "bp")
    prev_close = _number(_section(snapshot, "prevDailyBar"), "c")
    return AssetQuote(
        symbol=symbol,
        quote_price=QuotePrice(
            price=bid_price,
            price_prev_close=prev_close,
            price_open=_number(daily_bar, "o"),
            price_day_high=_number(daily_bar, "h"),
            price_day_low=_number(daily_bar, "l"),
            change=bid_price - prev_close,
        ),
        quote_extended=QuoteExtended(volume=_number(daily_bar, "v")),
        quote_source=QuoteSource.ALPACA,
        exchange=Exchange(name="Alpaca", is_active=True),
    )


def get_asset_quotes(session: requests.Session, symbols: Iterable[str]) -> list[AssetQuote]:
    """Quotes for symbols ending in ".AP", one request per symbol; others are ignored."""
    quotes = []
    for symbol in symbols:
        if not symbol.endswith(_SYMBOL_SUFFIX):
            continue
        base_symbol = symbol[: -len(_SYMBOL_SUFFIX)]
        quotes.append(_transform_snapshot(_fetch_snapshot(session, base_symbol), base_symbol))
    return quotes