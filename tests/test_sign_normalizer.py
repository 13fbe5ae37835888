"""
Tests para la normalización de signos de cantidad y precio.
"""
from decimal import Decimal

from cii2ubl.core.config import ConversionSettings
from cii2ubl.mapping.sign_normalizer import swap_quantity_and_price_if_needed


class TestSignTable:
    """Tests para la tabla de decisión"""

    def test_negative_line_positive_quantity_negative_price(self, settings, diagnostics):
        """Test: línea negativa, cantidad 5 y precio -10 -> -5 / 10"""
        result = swap_quantity_and_price_if_needed(True, Decimal("5"), Decimal("-10"), settings, diagnostics)
        assert result.quantity == Decimal("-5")
        assert result.price == Decimal("10")
        assert len(diagnostics) == 0

    def test_negative_line_negative_quantity(self, settings, diagnostics):
        """Test: línea negativa con cantidad negativa ya es válida"""
        result = swap_quantity_and_price_if_needed(True, Decimal("-5"), Decimal("10"), settings, diagnostics)
        assert (result.quantity, result.price) == (Decimal("-5"), Decimal("10"))
        assert len(diagnostics) == 0

    def test_negative_line_same_signs(self, settings, diagnostics):
        """Test: línea negativa con cantidad y precio positivos da advertencia"""
        result = swap_quantity_and_price_if_needed(True, Decimal("5"), Decimal("10"), settings, diagnostics)
        assert (result.quantity, result.price) == (Decimal("5"), Decimal("10"))
        assert len(diagnostics.warnings) == 1

    def test_positive_line_both_negative(self, settings, diagnostics):
        """Test: línea positiva con ambos negativos -> ambos positivos"""
        result = swap_quantity_and_price_if_needed(False, Decimal("-5"), Decimal("-10"), settings, diagnostics)
        assert (result.quantity, result.price) == (Decimal("5"), Decimal("10"))

    def test_positive_line_mixed_signs(self, settings, diagnostics):
        """Test: línea positiva con signos distintos da advertencia"""
        result = swap_quantity_and_price_if_needed(False, Decimal("-5"), Decimal("10"), settings, diagnostics)
        assert (result.quantity, result.price) == (Decimal("-5"), Decimal("10"))
        assert len(diagnostics.warnings) == 1

    def test_positive_line_positive_values(self, settings, diagnostics):
        """Test: caso normal sin cambios"""
        result = swap_quantity_and_price_if_needed(False, Decimal("5"), Decimal("10"), settings, diagnostics)
        assert (result.quantity, result.price) == (Decimal("5"), Decimal("10"))
        assert len(diagnostics) == 0


class TestSwapDisabled:
    """Tests con los flags de intercambio desactivados"""

    def test_values_unchanged_with_info(self, diagnostics):
        """Test: sin intercambio los valores no cambian y se registra info"""
        settings = ConversionSettings(swap_quantity_sign_if_needed=False, swap_price_sign_if_needed=False)
        result = swap_quantity_and_price_if_needed(True, Decimal("5"), Decimal("-10"), settings, diagnostics)
        assert (result.quantity, result.price) == (Decimal("5"), Decimal("-10"))
        assert len(diagnostics) == 2
        assert all(d.level.value == "info" for d in diagnostics)

    def test_only_quantity_disabled(self, diagnostics):
        """Test: cada flag controla su propio valor"""
        settings = ConversionSettings(swap_quantity_sign_if_needed=False)
        result = swap_quantity_and_price_if_needed(True, Decimal("5"), Decimal("-10"), settings, diagnostics)
        assert (result.quantity, result.price) == (Decimal("5"), Decimal("10"))
        assert len(diagnostics) == 1


class TestWithoutPrice:
    def test_inconsistent_sign_without_price(self, settings, diagnostics):
        """Test: sin precio solo se comprueba la coherencia"""
        result = swap_quantity_and_price_if_needed(True, Decimal("5"), None, settings, diagnostics)
        assert result.quantity == Decimal("5")
        assert result.price is None
        assert len(diagnostics.warnings) == 1
