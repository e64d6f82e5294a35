"""Currency conversion rates from the Yahoo Finance API."""

from __future__ import annotations

from typing import Any, Iterable

from ticker.models import CurrencyRate

_QUOTE_PATH = "/v7/finance/quote"
_FIELDS = "regularMarketPrice,currency"
_DEFAULT_TARGET_CURRENCY = "USD"


def _text(quote: dict[str, Any], key: str) -> str:
    value = quote.get(key)
    return value if isinstance(value, str) else ""


def _raw_price(quote: dict[str, Any]) -> float:
    value = quote.get("regularMarketPrice")
    if isinstance(value, dict):
        value = value.get("raw")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def _fetch_quotes(client: Any, symbols: Iterable[str]) -> list[dict[str, Any]]:
    """Request currency and price for the symbols.

    Transport and session errors propagate; an unusable response yields no quotes.
    """
    response = client.get(_QUOTE_PATH, {"fields": _FIELDS, "symbols": ",".join(symbols)})
    if not response.ok:
        return []
    try:
        payload = response.json()
    except ValueError:
        return []
    if not isinstance(payload, dict):
        return []
    results = (payload.get("quoteResponse") or {}).get("result") or []
    return [item for item in results if isinstance(item, dict)]


def _currency_pair_symbols(quotes: list[dict[str, Any]], target_currency: str) -> list[str]:
    """Unique pair symbols converting each quote's currency into the target currency."""
    same_currency_pair = f"{target_currency}{target_currency}=X"
    missing_currency_pair = f"{target_currency}=X"
    pairs: dict[str, None] = {}
    for quote in quotes:
        pair = f"{_text(quote, 'currency')}{target_currency}=X"
        if pair not in (same_currency_pair, missing_currency_pair):
            pairs.setdefault(pair, None)
    return list(pairs)


def _to_currency_rate(quote: dict[str, Any]) -> CurrencyRate:
    symbol = _text(quote, "symbol")
    return CurrencyRate(
        from_currency=symbol[:3],
        to_currency=symbol[3:6],
        rate=_raw_price(quote),
    )


def get_currency_rates(
    client: Any, symbols: Iterable[str], target_currency: str = ""
) -> dict[str, CurrencyRate]:
    """Rates converting the currency of each symbol into the target currency.

    The result is keyed by the source currency code. The target currency defaults
    to USD. Errors raised by the client while requesting are propagated.
    """
    target_currency = target_currency or _DEFAULT_TARGET_CURRENCY
    pair_symbols = _currency_pair_symbols(_fetch_quotes(client, symbols), target_currency)
    if not pair_symbols:
        return {}
    rates: dict[str, CurrencyRate] = {}
    for quote in _fetch_quotes(client, pair_symbols):
        rate = _to_currency_rate(quote)
        rates[rate.from_currency] = rate
    return rates