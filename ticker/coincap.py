"""Cryptocurrency quotes from the CoinCap API."""

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

_ASSETS_URL = "https://api.coincap.io/v2/assets"


def _parse_float(value: Any) -> float:
    if not isinstance(value, str):
        return 0.0
    try:
        return float(value)
    except ValueError:
        return 0.0


def _text(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def _transform_asset(data: dict[str, Any]) -> AssetQuote:
    price = _parse_float(data.get("priceUsd"))
    change_percent = _parse_float(data.get("changePercent24Hr"))
    price_prev_close = (1 + change_percent / 100) * price
    return AssetQuote(
        name=_text(data, "name"),
        symbol=_text(data, "symbol"),
        class_=AssetClass.CRYPTOCURRENCY,
        currency=Currency(from_currency_code="USD"),
        quote_price=QuotePrice(
            price=price,
            price_prev_close=price_prev_close,
            change=price_prev_close - price,
            change_percent=change_percent,
        ),
        quote_extended=QuoteExtended(
            market_cap=_parse_float(data.get("marketCapUsd")),
            volume=_parse_float(data.get("volumeUsd24Hr")),
        ),
        quote_source=QuoteSource.COINCAP,
        exchange=Exchange(
            name="Crypto Aggregate via CoinCap",
            delay=0.0,
            state=ExchangeState.OPEN,
            is_active=True,
            is_regular_trading_session=True,
        ),
        meta=Meta(is_variable_precision=True),
    )


def get_asset_quotes(session: requests.Session, symbols: Iterable[str]) -> list[AssetQuote]:
    """Quotes for the CoinCap asset ids; a failed request yields no quotes."""
    try:
        response = session.get(_ASSETS_URL, params={"ids": ",".join(symbols).lower()})
    except requests.RequestException:
        return []
    if not response.ok:
        return []
    try:
        payload = response.json()
    except ValueError:
        return []
    if not isinstance(payload, dict):
        return []
    return [_transform_asset(item) for item in payload.get("data") or [] if isinstance(item, dict)]