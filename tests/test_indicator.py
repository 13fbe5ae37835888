"""
Tests para la resolución de indicadores CII.
"""
from cii2ubl.mapping.indicator import TriState, parse_indicator
from cii2ubl.models.cii_types import CIIIndicator


class TestParseIndicator:
    """Tests para parse_indicator"""

    def test_boolean_form(self, diagnostics):
        """Test: la forma booleana se usa directamente"""
        assert parse_indicator(CIIIndicator(indicator=True), diagnostics) is TriState.TRUE
        assert parse_indicator(CIIIndicator(indicator=False), diagnostics) is TriState.FALSE
        assert len(diagnostics) == 0

    def test_boolean_form_wins_over_string(self, diagnostics):
        """Test: si existen ambas formas gana la booleana"""
        indicator = CIIIndicator(indicator=False, indicator_string="true")
        assert parse_indicator(indicator, diagnostics) is TriState.FALSE

    def test_string_form(self, diagnostics):
        """Test: texto "true" / "false" """
        assert parse_indicator(CIIIndicator(indicator_string="true"), diagnostics) is TriState.TRUE
        assert parse_indicator(CIIIndicator(indicator_string="false"), diagnostics) is TriState.FALSE
        assert len(diagnostics) == 0

    def test_string_form_is_case_sensitive(self, diagnostics):
        """Test: "TRUE" no es un valor válido"""
        assert parse_indicator(CIIIndicator(indicator_string="TRUE"), diagnostics) is TriState.UNDEFINED
        assert len(diagnostics.errors) == 1

    def test_empty_container(self, diagnostics):
        """Test: contenedor sin ninguna forma da UNDEFINED y error"""
        result = parse_indicator(CIIIndicator(), diagnostics, ("ChargeIndicator",))
        assert result is TriState.UNDEFINED
        assert diagnostics.errors[0].message == "Indicator has neither a value nor a string value"
        assert diagnostics.errors[0].path == ("ChargeIndicator",)

    def test_missing_indicator(self, diagnostics):
        """Test: sin indicador devuelve UNDEFINED sin diagnóstico"""
        assert parse_indicator(None, diagnostics) is TriState.UNDEFINED
        assert len(diagnostics) == 0


class TestTriState:
    def test_properties(self):
        """Test: propiedades del tri-estado"""
        assert TriState.of(True).is_true
        assert TriState.of(False).is_false
        assert not TriState.UNDEFINED.is_defined
        assert TriState.TRUE.is_defined
