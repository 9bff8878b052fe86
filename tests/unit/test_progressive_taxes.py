"""Tests for progressive INSS and IRRF calculations.

Uses the 2025 tables built inline so the assertions do not depend on
the YAML files shipped with the package.
"""

import pytest
from pydantic import ValidationError

from rescisao.sdk.taxes import calc_inss, calc_irrf
from rescisao.sdk.taxes.schemas import InssRules, IrrfRules


# === FIXTURES ===


@pytest.fixture
def inss_2025():
    return InssRules.model_validate({
        "teto": 8157.41,
        "faixas": [
            {"ate": 1518.00, "aliquota": 0.075},
            {"ate": 2793.88, "aliquota": 0.09},
            {"ate": 4190.83, "aliquota": 0.12},
            {"ate": 8157.41, "aliquota": 0.14},
        ],
    })


@pytest.fixture
def irrf_2025():
    return IrrfRules.model_validate({
        "deducao_dependente": 189.59,
        "faixas": [
            {"de": 0.00, "ate": 2428.81, "aliquota": 0.0, "deduzir": 0.00},
            {"de": 2428.81, "ate": 2826.66, "aliquota": 0.075, "deduzir": 182.16},
            {"de": 2826.66, "ate": 3751.06, "aliquota": 0.15, "deduzir": 394.16},
            {"de": 3751.06, "ate": 4664.69, "aliquota": 0.225, "deduzir": 675.49},
            {"de": 4664.69, "aliquota": 0.275, "deduzir": 908.73},
        ],
    })


# === INSS ===


class TestInss:

    def test_zero_and_negative_base(self, inss_2025):
        assert calc_inss(0, inss_2025) == 0
        assert calc_inss(-100, inss_2025) == 0

    def test_first_bracket_only(self, inss_2025):
        assert calc_inss(1000.00, inss_2025) == pytest.approx(75.00)
        assert calc_inss(1518.00, inss_2025) == pytest.approx(113.85)

    def test_cumulative_walk(self, inss_2025):
        # 1518 * 7.5% + (3000 - 1518) * 9%... capped at 2793.88, then 12%
        expected = 1518 * 0.075 + (2793.88 - 1518) * 0.09 + (3000 - 2793.88) * 0.12
        assert calc_inss(3000.00, inss_2025) == pytest.approx(expected)

    def test_at_ceiling(self, inss_2025):
        assert round(calc_inss(8157.41, inss_2025), 2) == 951.63

    def test_ceiling_saturation(self, inss_2025):
        at_ceiling = calc_inss(8157.41, inss_2025)
        for base in (8157.42, 9000, 15000, 1_000_000):
            assert calc_inss(base, inss_2025) == pytest.approx(at_ceiling)

    def test_monotonic(self, inss_2025):
        previous = 0.0
        for cents in range(0, 1_000_000, 2_537):
            value = calc_inss(cents / 100, inss_2025)
            assert value >= previous
            previous = value

    def test_continuous_at_bracket_boundaries(self, inss_2025):
        """No jump beyond the marginal rate at any boundary."""
        for faixa in inss_2025.faixas:
            below = calc_inss(faixa.ate - 0.01, inss_2025)
            above = calc_inss(faixa.ate + 0.01, inss_2025)
            assert above - below <= 0.02 * 0.14 + 1e-9


# === IRRF ===


class TestIrrf:

    def test_exempt_bracket(self, irrf_2025):
        assert calc_irrf(2428.80, 0, 0, irrf_2025) == 0

    def test_non_positive_adjusted_base(self, irrf_2025):
        assert calc_irrf(500.00, 2, 100.00, irrf_2025) == 0
        assert calc_irrf(0, 0, 0, irrf_2025) == 0

    def test_single_bracket_formula(self, irrf_2025):
        # 3000 falls in the 15% bracket: 3000 * 0.15 - 394.16
        assert calc_irrf(3000.00, 0, 0, irrf_2025) == pytest.approx(55.84)

    def test_top_bracket(self, irrf_2025):
        assert calc_irrf(5000.00, 0, 0, irrf_2025) == pytest.approx(466.27)

    def test_inss_and_dependents_reduce_base(self, irrf_2025):
        # 5000 - 189.59 = 4810.41 -> top bracket
        assert calc_irrf(5000.00, 1, 0, irrf_2025) == pytest.approx(4810.41 * 0.275 - 908.73)
        # 5000 - 500 (INSS) - 2 * 189.59 = 4120.82 -> 22.5% bracket
        assert calc_irrf(5000.00, 2, 500.00, irrf_2025) == pytest.approx(4120.82 * 0.225 - 675.49)

    def test_lower_bound_inclusive(self, irrf_2025):
        # 2428.81 belongs to the 7.5% bracket: 182.16075 - 182.16
        assert calc_irrf(2428.81, 0, 0, irrf_2025) == pytest.approx(0.00075, abs=1e-6)

    def test_never_negative(self, irrf_2025):
        for base in (2430.00, 2826.66, 3751.06, 4664.69):
            assert calc_irrf(base, 0, 0, irrf_2025) >= 0


# === Table validation ===


class TestTableValidation:

    def test_inss_bounds_must_ascend(self):
        with pytest.raises(ValidationError, match="ascending"):
            InssRules.model_validate({
                "teto": 3000,
                "faixas": [{"ate": 2000, "aliquota": 0.09}, {"ate": 1000, "aliquota": 0.075}],
            })

    def test_irrf_brackets_must_not_overlap(self):
        with pytest.raises(ValidationError, match="overlap"):
            IrrfRules.model_validate({
                "deducao_dependente": 100,
                "faixas": [
                    {"de": 0, "ate": 2000, "aliquota": 0},
                    {"de": 1500, "aliquota": 0.1, "deduzir": 150},
                ],
            })

    def test_only_last_irrf_bracket_unbounded(self):
        with pytest.raises(ValidationError, match="unbounded"):
            IrrfRules.model_validate({
                "deducao_dependente": 100,
                "faixas": [
                    {"de": 0, "aliquota": 0},
                    {"de": 2000, "aliquota": 0.1, "deduzir": 150},
                ],
            })

    def test_rate_out_of_range(self):
        with pytest.raises(ValidationError):
            InssRules.model_validate({"teto": 1000, "faixas": [{"ate": 1000, "aliquota": 7.5}]})
