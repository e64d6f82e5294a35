"""Quotes for spot products and futures contracts from the Coinbase API."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

import requests

from ticker.models import (
    AssetClass,
    AssetQuote,
    Currency,
    Exchange,
    ExchangeState,
    Meta,
    QuoteExtended,
    QuoteFutures,
    QuotePrice,
    QuoteSource,
)

_PRODUCTS_URL = "https://api.coinbase.com/api/v3/brokerage/market/products"
_PRODUCT_TYPE_FUTURE = "FUTURE"


def _text(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _parse_float(value: Any) -> float:
    if not isinstance(value, str):
        return 0.0
    try:
        return float(value)
    except ValueError:
        return 0.0


def _divide(numerator: float, denominator: float) -> float:
    if denominator != 0.0:
        return numerator / denominator
    if numerator == 0.0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def _parse_expiry(value: str) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp; a timestamp without an offset is rejected."""
    text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed if parsed.tzinfo is not None else None


def format_expiry(expiration_date: datetime, now: Optional[datetime] = None) -> str:
    """Time left until expiration as days and hours, or hours and minutes under a day."""
    if now is None:
        now = datetime.now(timezone.utc)
    seconds = (expiration_date - now).total_seconds()
    total_hours = seconds / 3600
    days = int(total_hours / 24)
    hours = int(math.fmod(int(total_hours), 24))
    minutes = int(math.fmod(int(seconds / 60), 60))
    if days == 0:
        return f"{hours}h {minutes}min"
    return f"{days}d {hours}h"


def _transform_product(
    product: dict[str, Any], underlying: Optional[dict[str, Any]]
) -> AssetQuote:
    price = _parse_float(product.get("price"))
    volume = _parse_float(product.get("volume_24h"))
    change_percent = _parse_float(product.get("price_percentage_change_24h"))
    change = price * (change_percent / 100)

    name = _text(product, "base_name")
    symbol = _text(product, "base_display_symbol")
    is_active = _text(product, "status") == "online"
    asset_class = AssetClass.CRYPTOCURRENCY
    futures = QuoteFutures()

    if _text(product, "product_type") == _PRODUCT_TYPE_FUTURE:
        details = _section(product, "future_product_details")
        name = _text(details, "group_description")
        symbol = _text(product, "product_id")
        is_active = _section(product, "fcm_trading_session_details").get("is_session_open") is True
        asset_class = AssetClass.FUTURES_CONTRACT
        expiration = _parse_expiry(_text(details, "contract_expiry"))
        futures = QuoteFutures(
            symbol_underlying=_text(details, "contract_root_unit"),
            expiry=format_expiry(expiration) if expiration is not None else "",
        )
        if underlying:
            price_underlying = _parse_float(underlying.get("price"))
            futures.index_price = price_underlying
            futures.basis = _divide(price_underlying - price, price)

    return AssetQuote(
        name=name,
        symbol=symbol,
        class_=asset_class,
        currency=Currency(from_currency_code=_text(product, "quote_currency_id").upper()),
        quote_price=QuotePrice(price=price, change=change, change_percent=change_percent),
        quote_extended=QuoteExtended(volume=volume),
        quote_futures=futures,
        quote_source=QuoteSource.COINBASE,
        exchange=Exchange(
            name=_text(product, "product_venue"),
            state=ExchangeState.OPEN,
            is_active=is_active,
            is_regular_trading_session=True,
        ),
        meta=Meta(is_variable_precision=True),
    )


def _transform_products(
    symbols: Iterable[str], products: list[dict[str, Any]]
) -> list[AssetQuote]:
    requested = set(symbols)
    by_product_id = {_text(p, "product_id"): p for p in products}
    quotes = []
    for product in products:
        # Products not requested directly are only there to price futures contracts
        if _text(product, "product_id") not in requested:
            continue
        underlying = None
        if _text(product, "product_type") == _PRODUCT_TYPE_FUTURE:
            root = _text(_section(product, "future_product_details"), "contract_root_unit")
            underlying = by_product_id.get(root + "-USD")
        quotes.append(_transform_product(product, underlying))
    return quotes


def _fetch_products(session: requests.Session, product_ids: list[str]) -> list[dict[str, Any]]:
    try:
        response = session.get(_PRODUCTS_URL, params={"product_ids": product_ids})
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
    products = payload.get("products") or []
    return [p for p in products if isinstance(p, dict)]


def get_asset_quotes(
    session: requests.Session, symbols: Iterable[str], symbols_underlying: Iterable[str]
) -> list[AssetQuote]:
    """Quotes for the symbols, using the underlying symbols to price futures contracts.

    A failed request yields no quotes.
    """
    symbols = list(symbols)
    merged = sorted(set(symbols) | set(symbols_underlying))
    return _transform_products(symbols, _fetch_products(session, merged))


def get_underlying_asset_symbols(session: requests.Session, symbols: Iterable[str]) -> list[str]:
    """Spot product symbols of the assets underlying the futures contracts among the symbols."""
    return [
        _text(_section(product, "future_product_details"), "contract_root_unit") + "-USD"
        for product in _fetch_products(session, list(symbols))
        if _text(product, "product_type") == _PRODUCT_TYPE_FUTURE
    ]