import io
import sys

import pytest

from ticker.models import ConfigColorScheme
from ticker.style import (
    ColorProfile,
    detect_color_profile,
    get_color_scheme,
    new_style,
    style_price,
)


@pytest.fixture
def true_color(monkeypatch):
    monkeypatch.setenv("COLORTERM", "truecolor")


@pytest.fixture
def ascii_terminal(monkeypatch):
    monkeypatch.delenv("COLORTERM", raising=False)
    monkeypatch.setattr(sys, "stdout", io.StringIO())


def test_detects_true_color(true_color):
    assert detect_color_profile() is ColorProfile.TRUE_COLOR


def test_detects_ascii_without_tty(ascii_terminal):
    assert detect_color_profile() is ColorProfile.ASCII


def test_new_style_true_color(true_color):
    assert new_style("#ffffff", "#000000", False)("test") == (
        "\x1b[38;2;255;255;255;48;2;0;0;0mtest\x1b[0m"
    )


def test_new_style_bold_true_color(true_color):
    assert new_style("#ffffff", "#000000", True)("test") == (
        "\x1b[38;2;255;255;255;48;2;0;0;0;1mtest\x1b[0m"
    )


def test_new_style_ascii(ascii_terminal):
    assert new_style("#ffffff", "#000000", False)("test") == "\x1b[;mtest\x1b[0m"
    assert new_style("#ffffff", "#000000", True)("test") == "\x1b[;;1mtest\x1b[0m"


def test_default_color_scheme(true_color):
    assert get_color_scheme(ConfigColorScheme()).text("test") == "\x1b[38;2;208;208;208mtest\x1b[0m"


def test_custom_color(true_color):
    styles = get_color_scheme(ConfigColorScheme(text="#ffffff"))
    assert styles.text("test") == "\x1b[38;2;255;255;255mtest\x1b[0m"


def test_invalid_custom_color_falls_back(true_color):
    styles = get_color_scheme(ConfigColorScheme(text="white"))
    assert styles.text("test") == "\x1b[38;2;208;208;208mtest\x1b[0m"


def test_default_color_scheme_ascii(ascii_terminal):
    assert get_color_scheme(ConfigColorScheme()).text("test") == "test"


@pytest.mark.parametrize(
    "percent, expected",
    [
        (0.0, "\x1b[38;5;241m$100.00\x1b[0m"),
        (11.0, "\x1b[38;2;119;153;40m$100.00\x1b[0m"),
        (7.0, "\x1b[38;2;143;184;48m$100.00\x1b[0m"),
        (3.0, "\x1b[38;2;174;224;56m$100.00\x1b[0m"),
        (-11.0, "\x1b[38;2;153;73;38m$100.00\x1b[0m"),
        (-7.0, "\x1b[38;2;184;87;46m$100.00\x1b[0m"),
        (-3.0, "\x1b[38;2;224;107;56m$100.00\x1b[0m"),
    ],
)
def test_style_price_true_color(true_color, percent, expected):
    assert style_price(percent, "$100.00") == expected


@pytest.mark.parametrize("percent", [0.0, 11.0, -3.0])
def test_style_price_ascii(ascii_terminal, percent):
    assert style_price(percent, "$100.00") == "$100.00"