"""Tests for the economic cycle state machine."""

import numpy as np
import pytest

from regionecon.calculators import (
    DEFAULT_PHASE_COEFFICIENTS,
    CyclePhase,
    EconomicCycleCalculator,
    Effect,
)
from regionecon.config import ConfigurationError


def _phases(cycle: EconomicCycleCalculator, n: int) -> list[CyclePhase]:
    seen = []
    for _ in range(n):
        seen.append(cycle.current_phase)
        cycle.advance_cycle()
    return seen


class TestCyclePhase:
    def test_next_wraps(self):
        assert CyclePhase.TROUGH.next() is CyclePhase.EXPANSION
        assert CyclePhase.EXPANSION.next() is CyclePhase.PEAK

    def test_labels(self):
        assert [p.label for p in CyclePhase] == [
            "Expansion",
            "Peak",
            "Contraction",
            "Trough",
        ]

    def test_from_name(self):
        assert CyclePhase.from_name("contraction") is CyclePhase.CONTRACTION
        assert CyclePhase.from_name(CyclePhase.PEAK) is CyclePhase.PEAK
        with pytest.raises(ConfigurationError, match="Unknown cycle phase"):
            CyclePhase.from_name("Boom")


class TestConstruction:
    @pytest.mark.parametrize("length", [0, -4])
    def test_non_positive_length_rejected(self, length):
        with pytest.raises(ConfigurationError, match="cycle_length"):
            EconomicCycleCalculator(cycle_length=length)

    @pytest.mark.parametrize("length", [2.5, True, "12"])
    def test_non_integer_length_rejected(self, length):
        with pytest.raises(ConfigurationError):
            EconomicCycleCalculator(cycle_length=length)

    def test_numpy_integer_length_accepted(self):
        cycle = EconomicCycleCalculator(cycle_length=np.int64(8))
        assert cycle.cycle_length == 8
        assert type(cycle.cycle_length) is int

    def test_starts_in_expansion(self):
        cycle = EconomicCycleCalculator(cycle_length=12)
        assert cycle.current_phase is CyclePhase.EXPANSION
        assert cycle.phase_progress == 0.0
        assert cycle.current_tick == 0

    def test_default_table_is_neutral(self):
        cycle = EconomicCycleCalculator(cycle_length=12)
        for phase in CyclePhase:
            assert cycle.get_phase_coefficient(phase, Effect.PRODUCTION) == 1.0

    def test_with_default_coefficients(self):
        cycle = EconomicCycleCalculator.with_default_coefficients(8)
        assert cycle.get_phase_coefficient("Peak", Effect.CONSUMPTION) == 1.3
        assert cycle.coefficient_table() == DEFAULT_PHASE_COEFFICIENTS


class TestAdvance:
    def test_even_split(self):
        cycle = EconomicCycleCalculator(cycle_length=8)
        assert _phases(cycle, 8) == [
            CyclePhase.EXPANSION,
            CyclePhase.EXPANSION,
            CyclePhase.PEAK,
            CyclePhase.PEAK,
            CyclePhase.CONTRACTION,
            CyclePhase.CONTRACTION,
            CyclePhase.TROUGH,
            CyclePhase.TROUGH,
        ]

    def test_uneven_split(self):
        """L=6: boundaries at ceil(0), ceil(1.5), ceil(3), ceil(4.5) = 0, 2, 3, 5."""
        cycle = EconomicCycleCalculator(cycle_length=6)
        assert _phases(cycle, 6) == [
            CyclePhase.EXPANSION,
            CyclePhase.EXPANSION,
            CyclePhase.PEAK,
            CyclePhase.CONTRACTION,
            CyclePhase.CONTRACTION,
            CyclePhase.TROUGH,
        ]

    def test_short_cycle_skips_phases(self):
        cycle = EconomicCycleCalculator(cycle_length=2)
        assert _phases(cycle, 4) == [
            CyclePhase.EXPANSION,
            CyclePhase.CONTRACTION,
            CyclePhase.EXPANSION,
            CyclePhase.CONTRACTION,
        ]

    def test_length_one_stays_in_expansion(self):
        cycle = EconomicCycleCalculator(cycle_length=1)
        assert set(_phases(cycle, 5)) == {CyclePhase.EXPANSION}

    @pytest.mark.parametrize("length", [1, 3, 4, 7, 12, 25])
    def test_closure_after_full_cycle(self, length):
        cycle = EconomicCycleCalculator(cycle_length=length)
        start = cycle.current_phase
        for _ in range(length):
            cycle.advance_cycle()
        assert cycle.current_phase is start
        assert cycle.phase_progress == 0.0

    def test_progress_in_unit_interval(self):
        cycle = EconomicCycleCalculator(cycle_length=10)
        for _ in range(30):
            assert 0.0 <= cycle.phase_progress < 1.0
            cycle.advance_cycle()

    def test_progress_values(self):
        cycle = EconomicCycleCalculator(cycle_length=12)
        progress = []
        for _ in range(3):
            progress.append(cycle.phase_progress)
            cycle.advance_cycle()
        np.testing.assert_allclose(progress, [0.0, 1 / 3, 2 / 3])

    def test_reset(self):
        cycle = EconomicCycleCalculator(cycle_length=4)
        cycle.advance_cycle()
        cycle.advance_cycle()
        cycle.reset()
        assert cycle.current_tick == 0
        assert cycle.current_phase is CyclePhase.EXPANSION


class TestCoefficients:
    def test_unset_effect_is_neutral(self):
        cycle = EconomicCycleCalculator(cycle_length=4)
        assert cycle.apply_cycle_effect(100, "Unset") == 100.0

    def test_apply_uses_current_phase(self):
        cycle = EconomicCycleCalculator(cycle_length=4)
        cycle.set_phase_coefficient(CyclePhase.EXPANSION, "Production", 1.2)
        cycle.set_phase_coefficient(CyclePhase.PEAK, "Production", 0.5)
        assert cycle.apply_cycle_effect(100.0, "Production") == pytest.approx(120.0)
        cycle.advance_cycle()
        assert cycle.apply_cycle_effect(100.0, "Production") == pytest.approx(50.0)

    def test_apply_vectorized(self):
        cycle = EconomicCycleCalculator(
            cycle_length=4, coefficients={"Expansion": {"Unrest": 2.0}}
        )
        out = cycle.apply_cycle_effect(np.array([1.0, 2.0]), "Unrest")
        np.testing.assert_allclose(out, [2.0, 4.0])

    def test_negative_coefficient_rejected(self):
        cycle = EconomicCycleCalculator(cycle_length=4)
        with pytest.raises(ConfigurationError):
            cycle.set_phase_coefficient("Peak", "Production", -1.0)

    def test_coefficients_survive_reset(self):
        cycle = EconomicCycleCalculator(cycle_length=4)
        cycle.set_phase_coefficient("Expansion", "Production", 1.5)
        cycle.reset()
        assert cycle.get_phase_coefficient("Expansion", "Production") == 1.5


class TestDescription:
    def test_description_names_phase_and_stage(self):
        cycle = EconomicCycleCalculator(cycle_length=12)
        assert cycle.get_economic_condition_description().startswith(
            "Economic Expansion (early stage)"
        )
        cycle.advance_cycle()
        assert "(middle stage)" in cycle.get_economic_condition_description()
        cycle.advance_cycle()
        assert "(late stage)" in cycle.get_economic_condition_description()

    def test_description_changes_with_phase(self):
        cycle = EconomicCycleCalculator(cycle_length=4)
        texts = set()
        for _ in range(4):
            texts.add(cycle.get_economic_condition_description())
            cycle.advance_cycle()
        assert len(texts) == 4
        assert any(t.startswith("Economic Trough") for t in texts)
