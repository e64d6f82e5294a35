from ticker.models import (
    Asset,
    AssetClass,
    Holding,
    HoldingChange,
    Styles,
)


def test_default_holding_is_empty():
    assert Holding().is_empty() is True


def test_holding_with_value_is_not_empty():
    assert Holding(value=1.0).is_empty() is False


def test_holding_with_nested_change_is_not_empty():
    assert Holding(total_change=HoldingChange(amount=2.0)).is_empty() is False


def test_default_styles_return_text_unchanged():
    styles = Styles()
    assert styles.text("abc") == "abc"
    assert styles.tag("x") == "x"
    assert styles.text_price(5.0, "up") == "up"


def test_assets_do_not_share_mutable_defaults():
    first = Asset()
    second = Asset()
    first.holding.value = 10.0
    assert second.holding.value == 0.0
    assert first.class_ is AssetClass.STOCK