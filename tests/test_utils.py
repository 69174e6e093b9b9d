"""Extraction primitives: locale-aware numbers, dates, ids and safe field extraction."""
import pytest
from bs4 import BeautifulSoup

from ecidadania.exceptions import ValidationError
from ecidadania.utils import (
    extract_block_text,
    extract_date,
    extract_id,
    extract_number,
    extract_text,
    extract_time,
    para_dataframe,
    parse_brazilian_number,
    percentuais,
    safe_extract,
    truncar,
    validar_data,
    validar_id,
    validar_limite,
)
from ecidadania.modelos import ConsultaResumo


@pytest.mark.parametrize("texto, esperado", [
    ("1.234.567", 1234567),
    ("713.428", 713428),
    ("42", 42),
    ("abc", 0),
    ("", 0),
    ("2.400,75", 2400),
])
def test_parse_brazilian_number(texto, esperado):
    assert parse_brazilian_number(texto) == esperado


def test_extract_number_handles_decimal_comma():
    assert extract_number("1.234,56") == pytest.approx(1234.56)
    assert extract_number("R$ 10,5") == pytest.approx(10.5)
    assert extract_number("sem número") == 0


def test_extract_date_expands_two_digit_years():
    assert extract_date("03/02/26") == "2026-02-03"
    assert extract_date("03/02/2026") == "2026-02-03"
    assert extract_date("evento em 15/08/2025 às 10:00") == "2025-08-15"
    assert extract_date("sem data") is None


def test_extract_time_takes_first_match():
    assert extract_time("03/02/26 | 09:00 - 12:30") == "09:00"
    assert extract_time("sem horário") is None


def test_extract_id():
    assert extract_id("visualizacaomateria?id=12345") == 12345
    assert extract_id("/ecidadania/visualizacaoideia?foo=1&id=77") == 77
    assert extract_id("visualizacaomateria") is None
    assert extract_id("") is None


def test_safe_extract_returns_default_on_exception():
    def falha():
        raise ValueError("campo ausente")

    assert safe_extract(falha, "padrao", "campo") == "padrao"


def test_safe_extract_replaces_none_with_default():
    assert safe_extract(lambda: None, 0, "numero") == 0
    assert safe_extract(lambda: 5, 0, "numero") == 5


def test_extract_text_normalizes_whitespace():
    soup = BeautifulSoup("<div> Olá   <b>mundo</b>\n cidadão </div>", "html.parser")
    assert extract_text(soup.div) == "Olá mundo cidadão"
    assert extract_text(None) == ""


def test_extract_block_text_keeps_one_line_per_text_node():
    soup = BeautifulSoup("<div><span>713.428</span> <span>1.002.970</span><span>SIM</span></div>", "html.parser")
    assert extract_block_text(soup.div) == "713.428\n1.002.970\nSIM"


def test_percentuais_rounds_independently():
    assert percentuais(2400, 2600) == (48, 52)
    assert percentuais(0, 0) == (0, 0)
    # 1/3 e 2/3 -> 33 + 67
    assert percentuais(1, 2) == (33, 67)
    # 1/8 = 12.5 e 7/8 = 87.5 arredondam para cima: soma 101
    assert percentuais(1, 7) == (13, 88)


def test_truncar():
    assert len(truncar("x" * 800)) == 500
    assert truncar(None) == ""


def test_validar_data():
    assert validar_data("2024-01-15") == "2024-01-15"
    assert validar_data("15/01/2024") == "2024-01-15"
    assert validar_data(None) is None
    with pytest.raises(ValidationError):
        validar_data("31/02/2024")
    with pytest.raises(ValidationError):
        validar_data("janeiro")


def test_validar_id_and_limite():
    assert validar_id(3) == 3
    for invalido in (0, -1, "3", True):
        with pytest.raises(ValidationError):
            validar_id(invalido)
    assert validar_limite(100) == 100
    with pytest.raises(ValidationError):
        validar_limite(101)


def test_para_dataframe():
    df = para_dataframe([ConsultaResumo(id=1, ementa="a"), ConsultaResumo(id=2, ementa="b")])
    assert list(df["id"]) == [1, 2]
    assert "percentual_sim" in df.columns
