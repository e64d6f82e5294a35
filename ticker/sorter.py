"""Orderings for the watchlist."""

from __future__ import annotations

from typing import Callable

from ticker.models import Asset

Sorter = Callable[[list[Asset]], list[Asset]]


def _split_active(assets: list[Asset]) -> tuple[list[Asset], list[Asset]]:
    active = [a for a in assets if a.exchange.is_active]
    inactive = [a for a in assets if not a.exchange.is_active]
    return active, inactive


def sort_by_user(assets: list[Asset]) -> list[Asset]:
    """Holdings in configured order first, then everything else in input order."""
    if not assets:
        return assets
    count = len(assets)
    return sorted(
        assets,
        key=lambda a: count if a.holding.is_empty() else a.meta.order_index,
    )


def sort_by_alpha(assets: list[Asset]) -> list[Asset]:
    """Alphabetical by symbol."""
    if not assets:
        return assets
    return sorted(assets, key=lambda a: a.symbol)


def sort_by_value(assets: list[Asset]) -> list[Asset]:
    """Largest holding value first, active markets before inactive ones."""
    if not assets:
        return assets
    active, inactive = _split_active(assets)
    key = lambda a: -a.holding.value  # noqa: E731
    return sorted(active, key=key) + sorted(inactive, key=key)


def sort_by_change(assets: list[Asset]) -> list[Asset]:
    """Largest percent change first, active markets before inactive ones."""
    if not assets:
        return assets
    active, inactive = _split_active(assets)
    key = lambda a: -a.quote_price.change_percent  # noqa: E731
    return sorted(active, key=key) + sorted(inactive, key=key)


_SORTERS: dict[str, Sorter] = {
    "alpha": sort_by_alpha,
    "value": sort_by_value,
    "user": sort_by_user,
}


def new_sorter(sort: str) -> Sorter:
    """Sorter for a name, defaulting to percent change."""
    return _SORTERS.get(sort, sort_by_change)