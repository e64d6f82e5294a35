import re
from datetime import datetime, timedelta, timezone

import pytest
import requests
import responses

from ticker.coinbase import format_expiry, get_asset_quotes, get_underlying_asset_symbols
from ticker.models import AssetClass, ExchangeState, QuoteSource

PRODUCTS_URL = re.escape("https://api.coinbase.com/api/v3/brokerage/market/products")

SPOT_BTC = {
    "base_display_symbol": "BTC",
    "product_type": "SPOT",
    "product_id": "BTC-USD",
    "base_name": "Bitcoin",
    "price": "50000.00",
    "price_percentage_change_24h": "2.0408163265306123",
    "volume_24h": "1500.50",
    "display_name": "Bitcoin",
    "status": "online",
    "quote_currency_id": "USD",
    "product_venue": "CBE",
}

FUTURE_BIT = {
    "product_id": "BIT-31JAN25-CDE",
    "price": "97345",
    "price_percentage_change_24h": "-3.14412218297597",
    "volume_24h": "93744",
    "base_name": "",
    "status": "",
    "product_type": "FUTURE",
    "quote_currency_id": "USD",
    "fcm_trading_session_details": {"is_session_open": True},
    "base_display_symbol": "",
    "product_venue": "FCM",
    "future_product_details": {
        "venue": "cde",
        "contract_code": "BIT",
        "contract_expiry": "2025-01-31T16:00:00Z",
        "contract_root_unit": "BTC",
        "group_description": "Nano Bitcoin Futures",
        "contract_expiry_timezone": "Europe/London",
    },
}


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def _register(mocked, query_pattern, products, status=200):
    mocked.add(
        responses.GET,
        re.compile(PRODUCTS_URL + r"\?" + query_pattern + "$"),
        json={"products": products},
        status=status,
    )


def test_transforms_spot_quote(mocked):
    _register(mocked, "product_ids=BTC-USD", [SPOT_BTC])
    output = get_asset_quotes(requests.Session(), ["BTC-USD"], [])
    assert len(output) == 1
    quote = output[0]
    assert quote.name == "Bitcoin"
    assert quote.symbol == "BTC"
    assert quote.class_ is AssetClass.CRYPTOCURRENCY
    assert quote.currency.from_currency_code == "USD"
    assert quote.quote_price.price == 50000.00
    assert quote.quote_price.price_prev_close == 0.0
    assert quote.quote_price.price_open == 0.0
    assert quote.quote_price.price_day_high == 0.0
    assert quote.quote_price.price_day_low == 0.0
    assert quote.quote_price.change == 1020.4081632653063
    assert quote.quote_price.change_percent == 2.0408163265306123
    assert quote.quote_extended.volume == 1500.50
    assert quote.quote_source is QuoteSource.COINBASE
    assert quote.exchange.name == "CBE"
    assert quote.exchange.state is ExchangeState.OPEN
    assert quote.exchange.is_active is True
    assert quote.exchange.is_regular_trading_session is True
    assert quote.meta.is_variable_precision is True


def test_closed_market_marks_asset_inactive(mocked):
    _register(mocked, "product_ids=BTC-USD", [{**SPOT_BTC, "status": ""}])
    output = get_asset_quotes(requests.Session(), ["BTC-USD"], [])
    assert len(output) == 1
    assert output[0].exchange.is_active is False


def test_failed_request_returns_no_quotes(mocked):
    mocked.add(
        responses.GET,
        re.compile(PRODUCTS_URL + r"\?product_ids=BTC-USD$"),
        json={"error": "Internal Server Error"},
        status=500,
    )
    assert get_asset_quotes(requests.Session(), ["BTC-USD"], []) == []


def test_connection_error_returns_no_quotes(mocked):
    assert get_asset_quotes(requests.Session(), ["ETH-USD"], []) == []


def test_futures_contract_quote(mocked):
    _register(mocked, "product_ids=BIT-31JAN25-CDE", [FUTURE_BIT])
    output = get_asset_quotes(requests.Session(), ["BIT-31JAN25-CDE"], [])
    assert len(output) == 1
    quote = output[0]
    assert quote.class_ is AssetClass.FUTURES_CONTRACT
    assert quote.symbol == "BIT-31JAN25-CDE"
    assert quote.name == "Nano Bitcoin Futures"
    assert quote.quote_futures.symbol_underlying == "BTC"
    assert quote.quote_futures.index_price == 0.0
    assert quote.quote_futures.basis == 0.0
    assert quote.exchange.name == "FCM"
    assert quote.exchange.state is ExchangeState.OPEN
    assert quote.exchange.is_active is True
    assert quote.exchange.is_regular_trading_session is True


def test_futures_contract_uses_underlying_quote(mocked):
    _register(
        mocked,
        "product_ids=BIT-31JAN25-CDE&product_ids=BTC-USD",
        [FUTURE_BIT, {**SPOT_BTC, "status": ""}],
    )
    output = get_asset_quotes(requests.Session(), ["BIT-31JAN25-CDE"], ["BTC-USD"])
    assert len(output) == 1
    quote = output[0]
    assert quote.class_ is AssetClass.FUTURES_CONTRACT
    assert quote.symbol == "BIT-31JAN25-CDE"
    assert quote.name == "Nano Bitcoin Futures"
    assert quote.quote_futures.symbol_underlying == "BTC"
    assert quote.quote_futures.index_price == 50000.00
    assert quote.quote_futures.basis == -0.4863629359494581
    assert quote.exchange.is_active is True


def test_underlying_asset_symbols_for_futures(mocked):
    _register(
        mocked,
        "product_ids=BIT-31JAN25-CDE",
        [
            {
                "product_id": "BIT-31JAN25-CDE",
                "product_type": "FUTURE",
                "future_product_details": {"contract_root_unit": "BTC"},
            }
        ],
    )
    assert get_underlying_asset_symbols(requests.Session(), ["BIT-31JAN25-CDE"]) == ["BTC-USD"]


def test_underlying_asset_symbols_ignore_spot(mocked):
    _register(mocked, "product_ids=BTC-USD", [{"product_id": "BTC-USD", "product_type": "SPOT"}])
    assert get_underlying_asset_symbols(requests.Session(), ["BTC-USD"]) == []


NOW = datetime(2024, 12, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "delta, expected",
    [
        (timedelta(days=5, hours=10, minutes=30), "5d 10h"),
        (timedelta(hours=3, minutes=15), "3h 15min"),
        (timedelta(minutes=45), "0h 45min"),
        (-timedelta(hours=1, minutes=30), "-1h -30min"),
    ],
)
def test_format_expiry(delta, expected):
    assert format_expiry(NOW + delta, NOW) == expected