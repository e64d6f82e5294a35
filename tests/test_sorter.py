import copy

import pytest

from ticker.models import Asset, Exchange, Holding, Meta, QuotePrice
from ticker.sorter import new_sorter


def _asset(symbol, price, change, pct, active, regular, value=None, order=0):
    return Asset(
        symbol=symbol,
        name=symbol,
        quote_price=QuotePrice(price=price, change=change, change_percent=pct),
        holding=Holding(value=value) if value is not None else Holding(),
        exchange=Exchange(is_active=active, is_regular_trading_session=regular),
        meta=Meta(order_index=order),
    )


@pytest.fixture
def quotes():
    btc = _asset("BTC-USD", 50000.0, 10000.0, 20.0, True, True, value=50000.0, order=1)
    btc.quote_price.price_prev_close = 10000.0
    btc.quote_price.price_open = 10000.0
    return {
        "btc": btc,
        "tw": _asset("TW", 109.04, 3.53, 5.65, True, False),
        "goog": _asset("GOOG", 2523.53, -32.02, -1.35, True, False, value=2523.53, order=0),
        "msft": _asset("MSFT", 242.01, -0.99, -0.41, False, False),
        "rblx": _asset("RBLX", 85.0, 10.0, 7.32, False, False),
    }


def test_default_sorts_by_change(quotes):
    q = quotes
    coin = _asset("COIN", 220.0, 20.0, 10.0, False, False)
    assets = [q["rblx"], q["btc"], q["tw"], q["goog"], q["msft"], coin]
    assert new_sorter("")(assets) == [q["btc"], q["tw"], q["goog"], coin, q["rblx"], q["msft"]]


def test_alpha(quotes):
    q = quotes
    assets = [q["btc"], q["tw"], q["goog"], q["msft"]]
    assert new_sorter("alpha")(assets) == [q["btc"], q["goog"], q["msft"], q["tw"]]


def test_value(quotes):
    q = quotes
    rblx = copy.deepcopy(q["rblx"])
    rblx.holding.value = 900.0
    msft = copy.deepcopy(q["msft"])
    msft.holding.value = 100.0
    assets = [q["btc"], q["tw"], q["goog"], msft, rblx]
    assert new_sorter("value")(assets) == [q["btc"], q["goog"], q["tw"], rblx, msft]


def test_user(quotes):
    q = quotes
    assets = [q["btc"], q["tw"], q["goog"], q["msft"]]
    assert new_sorter("user")(assets) == [q["goog"], q["btc"], q["tw"], q["msft"]]


def test_sorter_does_not_modify_input(quotes):
    q = quotes
    assets = [q["tw"], q["btc"]]
    new_sorter("alpha")(assets)
    assert assets == [q["tw"], q["btc"]]


@pytest.mark.parametrize("name", ["", "alpha", "value", "user"])
def test_empty(name):
    assert new_sorter(name)([]) == []