"""Tests for the supply/demand price calculator."""

import numpy as np
import pytest

from regionecon.calculators import PriceCalculator
from regionecon.config import ConfigurationError


@pytest.fixture
def price() -> PriceCalculator:
    return PriceCalculator(
        volatility_factor=1.0,
        elasticities={"Food": 0.5, "Luxury": 1.5},
        income_elasticities={"Food": 0.3, "Luxury": 1.8},
    )


class TestCalculatePrice:
    """price = base · (1 + v · e · (D − S) / max(S, 0.1)), floored at 0."""

    @pytest.mark.parametrize("supply", [0.01, 1.0, 50.0, 1e6])
    def test_balanced_market_keeps_base_price(self, price, supply):
        assert price.calculate_price(100.0, supply, supply) == pytest.approx(100.0)

    def test_excess_demand_raises_price(self, price):
        assert price.calculate_price(100.0, 100.0, 150.0) == pytest.approx(150.0)

    def test_excess_supply_lowers_price(self, price):
        assert price.calculate_price(100.0, 100.0, 80.0) == pytest.approx(80.0)

    def test_zero_supply_is_finite_and_non_negative(self, price):
        p = price.calculate_price(100.0, 0.0, 10.0)
        assert np.isfinite(p)
        assert p > 100.0

    def test_glut_floors_at_zero(self, price):
        assert price.calculate_price(100.0, 1000.0, 0.0) == 0.0

    def test_higher_elasticity_is_more_sensitive(self, price):
        food = price.calculate_price(100.0, 100.0, 120.0, "Food")
        lux = price.calculate_price(100.0, 100.0, 120.0, "Luxury")
        neutral = price.calculate_price(100.0, 100.0, 120.0, "Unknown")
        assert food == pytest.approx(110.0)
        assert neutral == pytest.approx(120.0)
        assert lux == pytest.approx(130.0)

    def test_volatility_factor_scales_imbalance(self):
        calm = PriceCalculator(volatility_factor=0.5)
        assert calm.calculate_price(100.0, 100.0, 120.0) == pytest.approx(110.0)

    def test_vectorized(self, price):
        out = price.calculate_price(
            np.array([100.0, 100.0]), np.array([10.0, 10.0]), np.array([10.0, 20.0])
        )
        np.testing.assert_allclose(out, [100.0, 200.0])


class TestElasticityTable:
    def test_unknown_resource_is_neutral(self, price):
        assert price.get_resource_elasticity("Unobtainium") == 1.0
        assert price.get_resource_elasticity(None) == 1.0

    def test_set_and_get(self, price):
        price.set_resource_elasticity("Manufacturing", 1.2)
        assert price.get_resource_elasticity("Manufacturing") == 1.2

    def test_empty_name_ignored(self, price):
        price.set_resource_elasticity("", 3.0)
        assert "" not in price.elasticities

    @pytest.mark.parametrize("value", [0.0, -0.5])
    def test_non_positive_rejected(self, price, value):
        with pytest.raises(ConfigurationError):
            price.set_resource_elasticity("Food", value)
        assert price.get_resource_elasticity("Food") == 0.5

    def test_constructor_rejects_bad_table(self):
        with pytest.raises(ConfigurationError):
            PriceCalculator(elasticities={"Food": 0.0})

    def test_constructor_rejects_bad_volatility(self):
        with pytest.raises(ConfigurationError, match="volatility_factor"):
            PriceCalculator(volatility_factor=0.0)

    def test_invalid_update_rolls_back(self, price):
        with pytest.raises(ConfigurationError, match="volatility_factor"):
            price.update(volatility_factor=0.0)
        assert price.volatility_factor == 1.0


class TestDemandModifiers:
    def test_income_adjustment_floor_at_wealth_ten(self, price):
        """Wealth below 10 behaves like wealth 10 (log10 = 1)."""
        assert price.adjust_demand_by_income(100.0, 0, "Food") == pytest.approx(115.0)
        assert price.adjust_demand_by_income(100.0, 10, "Food") == pytest.approx(115.0)

    def test_luxuries_react_more_to_wealth(self, price):
        food = price.adjust_demand_by_income(100.0, 10_000, "Food")
        lux = price.adjust_demand_by_income(100.0, 10_000, "Luxury")
        assert food == pytest.approx(160.0)
        assert lux == pytest.approx(460.0)

    def test_substitution_effect(self):
        # substitute twice as expensive, cross elasticity 0.5 → +50 %
        assert PriceCalculator.calculate_substitution_effect(
            100.0, 200.0, 100.0, 0.5
        ) == pytest.approx(150.0)

    def test_substitution_effect_clamped(self):
        assert PriceCalculator.calculate_substitution_effect(
            100.0, 1000.0, 100.0, 1.0
        ) == pytest.approx(200.0)
        assert PriceCalculator.calculate_substitution_effect(
            100.0, 0.0, 100.0, 1.0
        ) == pytest.approx(50.0)

    def test_substitution_without_base_price(self):
        assert PriceCalculator.calculate_substitution_effect(80.0, 5.0, 0.0, 1.0) == 80.0


class TestPriceShock:
    def test_shock_formula(self):
        assert PriceCalculator.calculate_price_shock(100.0, 0.1, 0.0, 1.0) == (
            pytest.approx(110.0)
        )

    @pytest.mark.parametrize("shock", [-10.0, -0.5, 0.0, 0.5, 10.0])
    def test_shock_clamped(self, shock):
        p = PriceCalculator.calculate_price_shock(100.0, shock, 0.0, 1.0)
        assert 75.0 <= p <= 150.0

    def test_zero_volatility_no_change(self):
        assert PriceCalculator.calculate_price_shock(100.0, 5.0, -5.0, 0.0) == 100.0
