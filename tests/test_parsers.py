import pytest

from stockguard.adapters.parsers import normalize_cpf, normalize_ean, normalize_str, parse_quantidade
from stockguard.domain.errors import InvalidEan, InvalidQuantity


@pytest.mark.parametrize(
    "val,expected",
    [
        (12, 12),
        (0, 0),
        ("12", 12),
        (" +3 ", 3),
        (4.0, 4),
    ],
)
def test_parse_quantidade(val, expected):
    assert parse_quantidade(val) == expected


@pytest.mark.parametrize("val", [-1, "-2", "1.5", 2.5, "abc", "", None, True])
def test_parse_quantidade_invalida(val):
    with pytest.raises(InvalidQuantity):
        parse_quantidade(val)


def test_normalize_cpf():
    assert normalize_cpf("123.456.789-09") == "12345678909"
    assert normalize_cpf("  ") is None
    assert normalize_cpf(None) is None


def test_normalize_ean():
    assert normalize_ean(" 7891234567895 ") == "7891234567895"
    with pytest.raises(InvalidEan) as exc:
        normalize_ean("")
    assert exc.value.message == "Código Yarn é obrigatório"
    with pytest.raises(InvalidEan):
        normalize_ean("78A1")


def test_normalize_str():
    assert normalize_str("  x ") == "x"
    assert normalize_str("   ") is None
    assert normalize_str(None) is None
