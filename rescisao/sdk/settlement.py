"""Settlement aggregation: ledger lines -> grouped tax bases -> totals.

INSS and IRRF are each computed twice, once per settlement group:

- MENSAL: ordinary monthly earnings (saldo de salário, adicionais, HE, DSR)
- DECIMO_TERCEIRO: 13º proporcional + 13º da projeção do aviso

The groups are never mixed before the bracket logic; their taxes are only
added together for the top-line totals.
"""

import logging
from typing import Any, Dict, Union

from .audit import AuditLog
from .config import SettlementConfig
from .schemas import LedgerLine, LineGroup, SettlementResult, TaxBases, TerminationInput
from .taxes import calc_inss, calc_irrf
from .verbas import VerbaGenerator, money

logger = logging.getLogger(__name__)


def group_base(lines: list[LedgerLine], tax: str, group: LineGroup) -> float:
    """Sum the earnings of one group that are subject to a tax.

    Args:
        lines: Ledger lines
        tax: Incidence flag name, 'inss' or 'irrf'
        group: Settlement group

    Returns:
        Tax base, rounded to cents
    """
    return money(sum(
        line.value for line in lines
        if line.kind == "provento" and line.group == group and getattr(line, tax)
    ))


def calculate_settlement(
    data: Union[TerminationInput, Dict[str, Any]],
    config: SettlementConfig,
) -> SettlementResult:
    """Calculate a termination settlement.

    Args:
        data: TerminationInput (or a dict validated into one)
        config: Tax tables and reason catalog to use

    Returns:
        SettlementResult with the ledger, per-group taxes, totals and audit log

    Raises:
        pydantic.ValidationError: If ``data`` is a dict that fails validation
        ReasonNotFoundError: If the reason code is not in the catalog
        CategoryNotFoundError: If the reason's category has no entitlement flags
    """
    if not isinstance(data, TerminationInput):
        data = TerminationInput.model_validate(data)

    # Lookup failures abort before any line is produced
    motivo, entitlements = config.resolve(data.reason_code)
    logger.debug(f"Motivo {motivo.codigo} -> categoria {motivo.categoria} (tabelas {config.ano})")

    log = AuditLog()
    verbas = VerbaGenerator(data, entitlements, log).generate()
    lines = verbas.lines

    tables = config.tabelas

    base_inss_monthly = group_base(lines, "inss", "MENSAL")
    base_inss_13 = verbas.thirteenth_base
    inss_monthly = money(calc_inss(base_inss_monthly, tables.inss))
    inss_13 = money(calc_inss(base_inss_13, tables.inss))
    log.info(f"Base INSS Mensal: R$ {base_inss_monthly:.2f} → INSS: R$ {inss_monthly:.2f}")
    log.info(f"Base INSS 13º (base única): R$ {base_inss_13:.2f} → INSS: R$ {inss_13:.2f}")

    base_irrf_monthly = group_base(lines, "irrf", "MENSAL")
    base_irrf_13 = verbas.thirteenth_base
    dependents = data.irrf_dependents
    irrf_monthly = money(calc_irrf(base_irrf_monthly, dependents, inss_monthly, tables.irrf))
    irrf_13 = money(calc_irrf(base_irrf_13, dependents, inss_13, tables.irrf))
    log.info(
        f"Base IRRF Mensal: R$ {base_irrf_monthly:.2f} - INSS R$ {inss_monthly:.2f} "
        f"- {dependents} dependente(s) → IRRF: R$ {irrf_monthly:.2f}"
    )
    log.info(
        f"Base IRRF 13º (base única): R$ {base_irrf_13:.2f} - INSS R$ {inss_13:.2f} "
        f"- {dependents} dependente(s) → IRRF: R$ {irrf_13:.2f}"
    )

    total_earnings = money(sum(line.value for line in lines if line.kind == "provento"))
    total_deductions = money(sum(line.value for line in lines if line.kind == "desconto"))
    inss = money(inss_monthly + inss_13)
    irrf = money(irrf_monthly + irrf_13)

    # total_earnings already carries the MULTA_FGTS line
    net = money(total_earnings - total_deductions - inss - irrf)
    logger.debug(
        f"Totals: proventos={total_earnings:.2f} descontos={total_deductions:.2f} "
        f"inss={inss:.2f} irrf={irrf:.2f} liquido={net:.2f}"
    )

    return SettlementResult(
        reason_code=motivo.codigo,
        category=motivo.categoria,
        lines=tuple(lines),
        reference_remuneration=money(data.reference_remuneration),
        total_earnings=total_earnings,
        total_deductions=total_deductions,
        bases=TaxBases(
            inss_monthly=base_inss_monthly,
            inss_thirteenth=base_inss_13,
            irrf_monthly=base_irrf_monthly,
            irrf_thirteenth=base_irrf_13,
        ),
        inss=inss,
        inss_monthly=inss_monthly,
        inss_thirteenth=inss_13,
        irrf=irrf,
        irrf_monthly=irrf_monthly,
        irrf_thirteenth=irrf_13,
        fgts_penalty=verbas.fgts_penalty,
        net=net,
        notice_days_used=verbas.notice_days_used,
        vacation_fraction_used=verbas.vacation_fraction_used,
        thirteenth_fraction_used=verbas.thirteenth_fraction_used,
        log=log.entries(),
        overtime=verbas.overtime,
        dsr=verbas.dsr,
    )


def settlement_to_dict(result: SettlementResult) -> Dict[str, Any]:
    """JSON-ready dict of a result (dates and datetimes as ISO strings)."""
    return result.model_dump(mode="json")
