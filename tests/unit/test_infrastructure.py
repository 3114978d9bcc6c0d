"""Tests for the infrastructure calculator."""

import numpy as np
import pytest

from regionecon.calculators import InfrastructureCalculator
from regionecon.config import ConfigurationError


@pytest.fixture
def infra() -> InfrastructureCalculator:
    return InfrastructureCalculator(
        efficiency_modifier=0.1,
        decay_rate=0.02,
        maintenance_cost_factor=0.05,
    )


class TestEfficiencyBoost:
    def test_no_boost_at_zero(self, infra):
        assert infra.calculate_efficiency_boost(0) == 1.0

    def test_linear_in_level(self, infra):
        assert infra.calculate_efficiency_boost(5) == pytest.approx(1.5)

    def test_negative_level_clamped(self, infra):
        assert infra.calculate_efficiency_boost(-3) == 1.0

    def test_monotone(self, infra):
        boost = infra.calculate_efficiency_boost(np.linspace(0, 10, 11))
        assert (np.diff(boost) >= 0).all()


class TestMaintenanceAndDecay:
    """Decay is offset by maintenance, in proportion to the required cost."""

    def test_maintenance_cost_quadratic(self, infra):
        assert infra.calculate_maintenance_cost(4) == pytest.approx(0.8)

    def test_full_decay_without_maintenance(self, infra):
        assert infra.calculate_decay(10.0) == pytest.approx(9.8)

    def test_full_maintenance_keeps_level(self, infra):
        required = infra.calculate_maintenance_cost(10.0)
        assert infra.calculate_decay(10.0, required) == pytest.approx(10.0)

    def test_partial_maintenance_partial_decay(self, infra):
        required = infra.calculate_maintenance_cost(10.0)
        assert infra.calculate_decay(10.0, required / 2) == pytest.approx(9.9)

    def test_zero_level_stays_zero(self, infra):
        assert infra.calculate_decay(0.0) == 0.0

    def test_vectorized_decay(self, infra):
        out = infra.calculate_decay(np.array([10.0, 10.0]), np.array([0.0, 5.0]))
        np.testing.assert_allclose(out, [9.8, 10.0])

    def test_decay_rate_zero_never_decays(self):
        calc = InfrastructureCalculator(decay_rate=0.0)
        assert calc.calculate_decay(7.0) == pytest.approx(7.0)


class TestGrowth:
    def test_growth_at_level_zero(self, infra):
        assert infra.calculate_growth(100, 0) == pytest.approx(5.0)

    def test_diminishing_returns(self, infra):
        low = infra.calculate_growth(100, 0)
        high = infra.calculate_growth(100, 10)
        assert high == pytest.approx(low / 2)

    def test_surplus_maintenance_counts_as_development(self, infra):
        required = infra.calculate_maintenance_cost(10.0)
        with_surplus = infra.update_infrastructure(10.0, required + 20.0, 0.0)
        with_development = infra.update_infrastructure(10.0, required, 20.0)
        assert with_surplus == pytest.approx(with_development)
        assert with_surplus > 10.0

    def test_no_investment_is_plain_decay(self, infra):
        assert infra.update_infrastructure(10.0) == pytest.approx(9.8)


class TestQualityConversion:
    def test_level_to_quality(self, infra):
        assert infra.level_to_quality(5.0) == pytest.approx(0.5)
        assert infra.level_to_quality(25.0) == 1.0

    def test_quality_to_level(self, infra):
        assert infra.quality_to_level(0.3) == pytest.approx(3.0)
        assert infra.quality_to_level(-1.0) == 0.0


class TestValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"efficiency_modifier": 0.0},
            {"decay_rate": 1.5},
            {"decay_rate": -0.1},
            {"maintenance_cost_factor": 0.0},
            {"max_level": 0.0},
            {"growth_rate": -1.0},
        ],
    )
    def test_invalid_parameters(self, kwargs):
        with pytest.raises(ConfigurationError):
            InfrastructureCalculator(**kwargs)

    def test_update_rolls_back(self, infra):
        with pytest.raises(ConfigurationError):
            infra.update(decay_rate=2.0)
        assert infra.decay_rate == 0.02
