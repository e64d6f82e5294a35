"""Fetching quotes and reference data for asset groups across quote sources."""

from __future__ import annotations

from typing import Any, Callable, Iterable

from ticker import coinbase, coincap, coingecko, yahoo_currency, yahoo_quote
from ticker.models import (
    AssetGroup,
    AssetGroupQuote,
    AssetGroupSymbolsBySource,
    AssetQuote,
    CurrencyRate,
    Dependencies,
    QuoteSource,
    Reference,
)


def _quotes_by_source(
    dependencies: Dependencies,
    reference: Reference,
    symbols_by_source: AssetGroupSymbolsBySource,
) -> list[AssetQuote]:
    source = symbols_by_source.source
    symbols = symbols_by_source.symbols
    clients = dependencies.http_clients

    if source is QuoteSource.YAHOO:
        return yahoo_quote.get_asset_quotes(clients.yahoo, symbols)
    if source is QuoteSource.COINGECKO:
        return coingecko.get_asset_quotes(clients.default, symbols)
    if source is QuoteSource.COINCAP:
        return coincap.get_asset_quotes(clients.default, symbols)
    if source is QuoteSource.COINBASE:
        underlying = reference.source_to_underlying_asset_symbols.get(QuoteSource.COINBASE, [])
        return coinbase.get_asset_quotes(clients.default, symbols, underlying)
    return []


def get_asset_group_quote(
    dependencies: Dependencies, reference: Reference
) -> Callable[[AssetGroup], AssetGroupQuote]:
    """Function fetching quotes for every symbol of a group from its data source."""

    def quote_group(asset_group: AssetGroup) -> AssetGroupQuote:
        quotes = [
            quote
            for symbols_by_source in asset_group.symbols_by_source
            for quote in _quotes_by_source(dependencies, reference, symbols_by_source)
        ]
        return AssetGroupQuote(asset_group=asset_group, asset_quotes=quotes)

    return quote_group


def _unique_symbols_by_source(asset_groups: Iterable[AssetGroup]) -> dict[QuoteSource, list[str]]:
    """Symbols of all groups per source, without duplicates, in first-seen order."""
    unique: dict[QuoteSource, dict[str, None]] = {}
    for asset_group in asset_groups:
        for symbols_by_source in asset_group.symbols_by_source:
            seen = unique.setdefault(symbols_by_source.source, {})
            for symbol in symbols_by_source.symbols:
                seen.setdefault(symbol, None)
    return {source: list(symbols) for source, symbols in unique.items()}


def get_asset_groups_currency_rates(
    client: Any, asset_groups: Iterable[AssetGroup], target_currency: str
) -> dict[str, CurrencyRate]:
    """Currency rates into the target currency for the symbols across all groups.

    Errors raised while requesting rates propagate.
    """
    symbols = _unique_symbols_by_source(asset_groups).get(QuoteSource.YAHOO)
    if not symbols:
        return {}
    return yahoo_currency.get_currency_rates(client, symbols, target_currency)


def get_asset_group_underlying_asset_symbols(
    session: Any, asset_groups: Iterable[AssetGroup]
) -> dict[QuoteSource, list[str]]:
    """Underlying spot symbols for the futures contracts watched across all groups."""
    symbols = _unique_symbols_by_source(asset_groups).get(QuoteSource.COINBASE)
    if symbols is None:
        return {}
    return {QuoteSource.COINBASE: coinbase.get_underlying_asset_symbols(session, symbols)}