# ticker

`ticker` is a library that gets price quotes for stocks, cryptocurrencies,
futures contracts and options from several market data sources. It turns
them into one common quote model (`ticker.models`) and renders them as text
for the terminal: a watchlist, a portfolio summary and coloured price
changes.

## Data sources

| Module                  | What it fetches                                                   |
|-------------------------|-------------------------------------------------------------------|
| `ticker.yahoo_quote`    | Stock and ETF quotes, including pre- and post-market prices       |
| `ticker.yahoo_currency` | Currency conversion rates into a target currency (default `USD`)  |
| `ticker.coinbase`       | Spot crypto and futures contracts, with index price, basis and expiry |
| `ticker.coincap`        | Aggregate crypto quotes                                           |
| `ticker.coingecko`      | Aggregate crypto quotes                                           |
| `ticker.alpaca`         | Option snapshots for symbols ending in `.AP`                      |

The quote functions return an empty list when a request fails or the
response cannot be read. `ticker.alpaca` sends fixed placeholder
credentials with every request.

`ticker.yahoo_client.YahooClient` wraps a `requests.Session` for the Yahoo
endpoints. When a request gets an error response (status 400 or above), it
obtains a new session cookie and crumb and retries the request once. If the
session cannot be refreshed, `SessionRefreshError` is raised.
`YahooClient.refresh_session()` can also be called directly.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Usage

Fetch quotes for a group of assets, one request per data source:

```python
import requests

from ticker.models import (
    AssetGroup, AssetGroupSymbolsBySource, Dependencies, HttpClients,
    QuoteSource, Reference,
)
from ticker.quote import get_asset_group_quote
from ticker.yahoo_client import YahooClient

session = requests.Session()
dependencies = Dependencies(
    http_clients=HttpClients(default=session, yahoo=YahooClient()),
)

group = AssetGroup(
    name="default",
    symbols_by_source=[
        AssetGroupSymbolsBySource(QuoteSource.YAHOO, ["GOOG", "NET"]),
        AssetGroupSymbolsBySource(QuoteSource.COINBASE, ["BTC-USD"]),
    ],
)

group_quote = get_asset_group_quote(dependencies, Reference())(group)
for quote in group_quote.asset_quotes:
    print(quote.symbol, quote.quote_price.price)
```

`get_asset_group_quote` covers the Yahoo, CoinGecko, CoinCap and Coinbase
sources. Symbols of any other source in a group give no quotes. Call
`ticker.alpaca.get_asset_quotes` directly for option snapshots.

To price Coinbase futures contracts against their underlying spot product,
look up the underlying symbols first and pass them in the `Reference`:

```python
from ticker.quote import get_asset_group_underlying_asset_symbols

underlying = get_asset_group_underlying_asset_symbols(session, [group])
reference = Reference(source_to_underlying_asset_symbols=underlying)
group_quote = get_asset_group_quote(dependencies, reference)(group)
```

Currency conversion rates for every Yahoo symbol across all groups, keyed
by source currency:

```python
from ticker.quote import get_asset_groups_currency_rates

rates = get_asset_groups_currency_rates(YahooClient(), [group], "EUR")
```

### Formatting and styling

```python
from ticker.format import convert_float_to_string
from ticker.models import ConfigColorScheme
from ticker.style import get_color_scheme, style_price

convert_float_to_string(43523398, True)   # "43.523 M"
convert_float_to_string(0.563412, False)  # "0.56"

styles = get_color_scheme(ConfigColorScheme(text="#ffffff"))
print(style_price(3.0, "$100.00"))        # green, shade set by the size of the change
```

Colours in a `ConfigColorScheme` that are not `#rgb` or `#rrggbb` fall back
to the defaults. The colour output follows the terminal's capability: true
colour, 256 colours, 16 colours or plain text. `detect_color_profile()`
reports which one is in use.

### Sorting

`ticker.sorter.new_sorter` returns a sorting function for a list of assets.

- `"alpha"` sorts by symbol.
- `"value"` sorts by holding value, largest first.
- `"user"` puts assets with a holding first, in their configured order
  (`meta.order_index`), then the rest in their given order.
- Any other value sorts by percent change, largest first.

With `"value"` and the default sort, assets on active exchanges come before
inactive ones.

### Rendering

`ticker.watchlist.WatchlistModel` and `ticker.summary.SummaryModel` render
the assets and a `HoldingSummary` into fixed-width text, using the column
layout in `ticker.grid`. Each model's `view()` returns the finished string.
Below 80 columns the watchlist returns a notice to widen the terminal and
the summary returns an empty string. Columns for holdings and fundamentals
are dropped when the width is too small to show them.

## What this package does not do

- It has no command and no interactive screen. It does not refresh quotes
  on a timer, take keyboard input or switch between groups; the caller
  drives fetching and prints the output of `view()`.
- It does not read configuration files. `Config`, `Context` and the asset
  groups are built in code.
- It does not turn quotes into `Asset` values with holdings, nor compute a
  `HoldingSummary` from positions. The caller fills these in before
  rendering.