"""Progressive INSS and IRRF calculations.

INSS walks the brackets cumulatively (each slice of the base is taxed at
its own marginal rate). IRRF picks the single bracket containing the
adjusted base and applies ``base * rate - fixed deduction``.
"""

import logging

from .schemas import InssRules, IrrfRules

logger = logging.getLogger(__name__)


def calc_inss(base: float, rules: InssRules) -> float:
    """Calculate the INSS contribution on a base using the progressive walk.

    The base is capped at the ceiling, so the result is constant for any
    base at or above it.

    Args:
        base: Contribution base (sum of INSS-incident earnings for one group)
        rules: INSS table for the year

    Returns:
        Contribution amount (unrounded)
    """
    if base <= 0:
        return 0.0

    remaining = min(base, rules.teto)
    contribution = 0.0
    previous_bound = 0.0

    for faixa in rules.faixas:
        width = faixa.ate - previous_bound
        in_bracket = min(remaining, width)
        if in_bracket > 0:
            contribution += in_bracket * faixa.aliquota
            remaining -= in_bracket
        previous_bound = faixa.ate
        if remaining <= 0:
            break

    return contribution


def calc_irrf(base: float, dependents: int, inss_paid: float, rules: IrrfRules) -> float:
    """Calculate IRRF for one group.

    Args:
        base: Gross IRRF base (sum of IRRF-incident earnings for one group)
        dependents: Number of declared dependents
        inss_paid: INSS already computed for the same group
        rules: IRRF table for the year

    Returns:
        Income tax amount (unrounded, never negative)
    """
    adjusted = base - inss_paid - dependents * rules.deducao_dependente
    if adjusted <= 0:
        return 0.0

    for faixa in rules.faixas:
        if faixa.contains(adjusted):
            return max(0.0, adjusted * faixa.aliquota - faixa.deduzir)

    # Gap in a hand-edited table: nothing matches
    logger.warning(f"IRRF: no bracket contains adjusted base {adjusted:.2f}")
    return 0.0
