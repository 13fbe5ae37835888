"""
Tests para la interpretación de fechas CII (códigos UNTDID 2379).
"""
from datetime import date

import pytest

from cii2ubl.mapping.dates import get_date_pattern, parse_cii_date, parse_date
from cii2ubl.models.cii_types import CIIDateTime


class TestDateFormats:
    """Tests para cada código de formato soportado"""

    @pytest.mark.parametrize("code, value, expected", [
        ("2", "311224", date(2024, 12, 31)),
        ("3", "123124", date(2024, 12, 31)),
        ("4", "31122024", date(2024, 12, 31)),
        ("101", "241231", date(2024, 12, 31)),
        ("102", "20241231", date(2024, 12, 31)),
        ("103", "050101", date(2005, 1, 3)),
        ("105", "24366", date(2024, 12, 31)),
    ])
    def test_supported_codes(self, diagnostics, code, expected, value):
        """Test: cada código soportado produce la fecha esperada sin diagnósticos"""
        assert parse_date(value, code, diagnostics) == expected
        assert len(diagnostics) == 0

    def test_empty_code_defaults_to_102(self, diagnostics):
        """Test: sin código se usa el formato 102"""
        assert parse_date("20240229", None, diagnostics) == date(2024, 2, 29)
        assert parse_date("20240229", "", diagnostics) == date(2024, 2, 29)
        assert len(diagnostics) == 0

    def test_two_digit_year_maps_to_2000s(self, diagnostics):
        """Test: los años de dos dígitos siempre caen en 2000-2099"""
        assert parse_date("311299", "2", diagnostics) == date(2099, 12, 31)
        assert parse_date("700101", "101", diagnostics) == date(2070, 1, 1)


class TestDateErrors:
    """Tests para códigos no soportados y valores inválidos"""

    def test_unsupported_code(self, diagnostics):
        """Test: código 999 devuelve None y exactamente un error"""
        assert parse_date("20240101", "999", diagnostics) is None
        assert len(diagnostics) == 1
        assert len(diagnostics.errors) == 1
        assert "Unsupported date format '999'" in diagnostics.errors[0].message

    def test_get_pattern_unsupported(self, diagnostics):
        """Test: get_date_pattern con código desconocido"""
        assert get_date_pattern("999", diagnostics) is None
        assert diagnostics.has_errors()

    def test_invalid_value(self, diagnostics):
        """Test: valor que no cumple el patrón"""
        assert parse_date("20241340", "102", diagnostics) is None
        assert len(diagnostics.errors) == 1

    def test_invalid_iso_week(self, diagnostics):
        """Test: semana ISO fuera de rango"""
        assert parse_date("246003", "103", diagnostics) is None
        assert len(diagnostics.errors) == 1

    @pytest.mark.parametrize("value", ["05011", "050108", "0501a1"])
    def test_iso_week_needs_two_digit_weekday(self, diagnostics, value):
        """Test: el formato 103 exige YYwwee con día ISO 01-07"""
        assert parse_date(value, "103", diagnostics) is None
        assert len(diagnostics.errors) == 1

    def test_error_message_names_format_code(self, diagnostics):
        """Test: el mensaje de error cita el código de formato"""
        parse_date("059901", "103", diagnostics)
        parse_date("2024", None, diagnostics)
        messages = [d.message for d in diagnostics.errors]
        assert messages == [
            "Failed to parse the date '059901' using format '103'",
            "Failed to parse the date '2024' using format '102'",
        ]

    def test_get_pattern_returns_parser(self, diagnostics):
        """Test: get_date_pattern devuelve una función que interpreta la fecha"""
        assert get_date_pattern("103", diagnostics)("050101") == date(2005, 1, 3)
        assert get_date_pattern(None, diagnostics)("20240229") == date(2024, 2, 29)
        assert len(diagnostics) == 0

    def test_missing_value_is_silent(self, diagnostics):
        """Test: sin valor no hay fecha ni diagnóstico"""
        assert parse_date(None, "102", diagnostics) is None
        assert parse_date("", "999", diagnostics) is None
        assert parse_cii_date(None, diagnostics) is None
        assert len(diagnostics) == 0

    def test_error_path_is_recorded(self, diagnostics):
        """Test: la ruta del campo queda en el diagnóstico"""
        path = ("CrossIndustryInvoice", "ExchangedDocument", "IssueDateTime")
        parse_cii_date(CIIDateTime(value="2024", format="102"), diagnostics, path)
        assert diagnostics.errors[0].path == path
