"""taxes - Progressive payroll tax tables and calculations.

Scope:
- INSS contribution brackets (cumulative walk, capped at the ceiling)
- IRRF income tax brackets (single bracket, fixed deduction per bracket)

Constraints:
- Pure calculation - no reason catalog or entitlement logic (that's in config)
- Tables are passed in explicitly; nothing here reads files

Usage:
    from rescisao.sdk.taxes import calc_inss, calc_irrf

    inss = calc_inss(3500.00, config.tabelas.inss)
    irrf = calc_irrf(3500.00, dependents=1, inss_paid=inss, rules=config.tabelas.irrf)
"""

from .progressive import calc_inss, calc_irrf
from .schemas import InssBracket, InssRules, IrrfBracket, IrrfRules, TaxTables

__all__ = [
    "calc_inss",
    "calc_irrf",
    "InssBracket",
    "InssRules",
    "IrrfBracket",
    "IrrfRules",
    "TaxTables",
]
