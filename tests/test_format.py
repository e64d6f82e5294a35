import pytest

from ticker.format import convert_float_to_string, value_text
from ticker.models import Styles


def test_fixed_precision_of_two():
    assert convert_float_to_string(0.563412, False) == "0.56"


@pytest.mark.parametrize(
    "value, expected",
    [
        (0.563412, "0.5634"),
        (12.5634, "12.563"),
        (204.4325, "204.43"),
        (0.0, "0.00"),
        (-2000.0, "-2000.0"),
        (10000.0, "10000"),
        (43523398, "43.523 M"),
        (43523398000, "43.523 B"),
        (43523398000000, "43.523 T"),
    ],
)
def test_variable_precision(value, expected):
    assert convert_float_to_string(value, True) == expected


def test_value_text_non_positive_is_empty():
    assert value_text(0.0, Styles()) == ""


def test_value_text_formats_value():
    assert value_text(435.32, Styles()) == "435.32"