"""Line-item (verba) generation for a termination settlement.

Turns a TerminationInput plus the entitlement flags of its termination
category into the ordered ledger lines of the settlement:

1. Variable-pay add-ons (ATS, noturno, periculosidade, insalubridade,
   quebra de caixa, VR, horas extras, intra/interjornada, comissão,
   gratificação, DSR sobre variáveis)
2. Faltas and DSR sobre faltas
3. Saldo de salário
4. Férias (vencidas, proporcionais, projeção do aviso) and 1/3 on the
   combined vacation base
5. 13º (proporcional, projeção do aviso) as one combined base
6. Aviso prévio indenizado
7. Desconto de aviso não cumprido
8. Indenização do art. 479 (contrato a termo)
9. Multa do FGTS

Every amount proportional to "salary" uses the reference remuneration
(salário base + média de variáveis).
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

from .audit import AuditLog, resolve_adjustable
from .config import Entitlements
from .dates import (
    days_between,
    default_notice_days,
    default_thirteenth_fraction,
    default_vacation_fraction,
)
from .schemas import (
    Adicionais,
    DsrSummary,
    LedgerLine,
    LineGroup,
    OvertimeBreakdown,
    OvertimeTier,
    RestViolationDetail,
    TerminationInput,
)

logger = logging.getLogger(__name__)

DEFAULT_MONTHLY_HOURS = 220
NIGHT_HOUR_FACTOR = 60 / 52.5
OVERTIME_50_FACTOR = 1.5
OVERTIME_100_FACTOR = 2.0
ART_479_FACTOR = 0.5

# Rubricas whose values reflect into the weekly paid rest (DSR)
DSR_VARIABLE_CODES = ("COMISSAO", "HORA_EXTRA", "INTRAJORNADA", "INTERJORNADA", "ADICIONAL_NOTURNO")


def money(amount: float) -> float:
    """Round to cents."""
    return round(amount, 2) + 0.0  # -0.0 -> 0.0


def _brl(amount: float) -> str:
    return f"R$ {amount:.2f}"


def _pct(rate: float) -> str:
    return f"{rate * 100:.0f}%"


def _qty(amount: float) -> str:
    return f"{amount:g}"


@dataclass
class GeneratedVerbas:
    """Output of the generator, consumed by the aggregator."""
    lines: list[LedgerLine]
    vacation_base: float
    thirteenth_base: float
    notice_days_used: int
    vacation_fraction_used: int
    thirteenth_fraction_used: int
    fgts_penalty: float
    overtime: Optional[OvertimeBreakdown] = None
    dsr: Optional[DsrSummary] = None


@dataclass
class _HourlyBase:
    """Composite base for the derived hourly rate."""
    seniority: float
    commission: float
    unhealthy: float
    bonus: float
    hazard: float
    total: float
    divisor: float
    rate: float


@dataclass
class _Variables:
    """Values that reflect into DSR, by rubrica."""
    values: dict = field(default_factory=dict)

    @property
    def total(self) -> float:
        return sum(self.values.get(code, 0.0) for code in DSR_VARIABLE_CODES)


class VerbaGenerator:
    """Builds the ledger lines for one settlement calculation."""

    def __init__(self, data: TerminationInput, entitlements: Entitlements, log: AuditLog):
        self.data = data
        self.entitlements = entitlements
        self.log = log
        self.reference = data.reference_remuneration
        self.daily = self.reference / 30
        self.lines: list[LedgerLine] = []

    # -------------------------------------------------------------------------
    # Line helpers
    # -------------------------------------------------------------------------

    def _earning(
        self,
        code: str,
        description: str,
        value: float,
        taxable: bool = True,
        fgts: Optional[bool] = None,
        group: LineGroup = "MENSAL",
    ) -> float:
        """Append a provento line; returns the rounded value."""
        value = money(value)
        self.lines.append(LedgerLine(
            code=code,
            description=description,
            value=value,
            kind="provento",
            inss=taxable,
            irrf=taxable,
            fgts=taxable if fgts is None else fgts,
            group=group if taxable else "NAO_APLICA",
        ))
        return value

    def _deduction(self, code: str, description: str, value: float) -> float:
        """Append a desconto line; returns the rounded value."""
        value = money(value)
        self.lines.append(LedgerLine(
            code=code,
            description=description,
            value=value,
            kind="desconto",
            inss=False,
            irrf=False,
            fgts=False,
            group="NAO_APLICA",
        ))
        return value

    # -------------------------------------------------------------------------
    # Orchestration
    # -------------------------------------------------------------------------

    def generate(self) -> GeneratedVerbas:
        self.log.info(
            f"Remuneração de referência calculada: {_brl(self.reference)} (Salário Base + Médias)"
        )

        overtime, dsr = None, None
        if self.data.adicionais is not None:
            overtime, dsr = self._add_ons(self.data.adicionais)

        self._absences()
        self._salary_balance()

        vacation_fraction, thirteenth_fraction, notice_days = self._resolve_proration()
        projection_months = self._projection_months(notice_days)

        vacation_base = self._vacation(vacation_fraction, projection_months)
        thirteenth_base = self._thirteenth(thirteenth_fraction, projection_months)
        if projection_months:
            self.log.info(
                f"Avos por projeção de aviso: {projection_months}/12 para Férias e 13º (rubricas separadas)"
            )

        self._notice_pay(notice_days)
        self._unworked_notice_penalty()
        self._fixed_term_indemnity()
        fgts_penalty = self._fgts_penalty()

        return GeneratedVerbas(
            lines=self.lines,
            vacation_base=vacation_base,
            thirteenth_base=thirteenth_base,
            notice_days_used=notice_days,
            vacation_fraction_used=vacation_fraction,
            thirteenth_fraction_used=thirteenth_fraction,
            fgts_penalty=fgts_penalty,
            overtime=overtime,
            dsr=dsr,
        )

    # -------------------------------------------------------------------------
    # 1. Add-ons
    # -------------------------------------------------------------------------

    def _hourly_base(self, adicionais: Adicionais) -> _HourlyBase:
        salary = self.data.base_salary
        seniority = (
            salary * adicionais.seniority.percent * adicionais.seniority.years
            if adicionais.seniority else 0.0
        )
        unhealthy = adicionais.unhealthy.base * adicionais.unhealthy.percent if adicionais.unhealthy else 0.0
        hazard = salary * adicionais.hazard_percent if adicionais.hazard_percent else 0.0
        bonus = adicionais.bonus or 0.0
        commission = adicionais.commission or 0.0
        divisor = adicionais.overtime.monthly_hours if adicionais.overtime else DEFAULT_MONTHLY_HOURS

        total = salary + seniority + commission + unhealthy + bonus + hazard
        return _HourlyBase(
            seniority=seniority,
            commission=commission,
            unhealthy=unhealthy,
            bonus=bonus,
            hazard=hazard,
            total=total,
            divisor=divisor,
            rate=total / divisor,
        )

    @staticmethod
    def _uses_hourly_rate(adicionais: Adicionais) -> bool:
        return bool(
            (adicionais.night_shift and adicionais.night_shift.hours > 0)
            or (adicionais.overtime and (adicionais.overtime.hours_50 > 0 or adicionais.overtime.hours_100 > 0))
            or (adicionais.intrajornada and adicionais.intrajornada.hours > 0)
            or (adicionais.interjornada and adicionais.interjornada.hours > 0)
        )

    def _add_ons(self, adicionais: Adicionais) -> tuple[Optional[OvertimeBreakdown], Optional[DsrSummary]]:
        salary = self.data.base_salary
        base = self._hourly_base(adicionais)
        variables = _Variables()

        if self._uses_hourly_rate(adicionais):
            self.log.info(
                f"Base Hora Extra: {_brl(base.total)} (Sal. Base: {salary:.2f} + ATS: {base.seniority:.2f} "
                f"+ Comissão: {base.commission:.2f} + Insalub.: {base.unhealthy:.2f} "
                f"+ Gratif.: {base.bonus:.2f} + Pericul.: {base.hazard:.2f})"
            )
            self.log.info(f"Valor Hora: {_brl(base.total)} ÷ {_qty(base.divisor)}h = {_brl(base.rate)}")

        if base.seniority > 0:
            self._earning(
                "ATS",
                f"ATS ({adicionais.seniority.years} anos x {_pct(adicionais.seniority.percent)})",
                base.seniority,
            )

        night = adicionais.night_shift
        if night and night.hours > 0:
            value = base.rate * night.percent * night.hours * NIGHT_HOUR_FACTOR
            variables.values["ADICIONAL_NOTURNO"] = self._earning(
                "ADICIONAL_NOTURNO",
                f"Adicional Noturno ({_qty(night.hours)}h × {_pct(night.percent)})",
                value,
            )
            self.log.info(
                f"Adicional Noturno: {_qty(night.hours)}h × (60/52,5) × {_brl(base.rate)} "
                f"× {_pct(night.percent)} = {_brl(value)}"
            )

        if base.hazard > 0:
            self._earning("PERICULOSIDADE", f"Periculosidade ({_pct(adicionais.hazard_percent)})", base.hazard)

        if base.unhealthy > 0:
            self._earning(
                "INSALUBRIDADE",
                f"Insalubridade ({_pct(adicionais.unhealthy.percent)})",
                base.unhealthy,
            )

        if adicionais.cashier_percent and adicionais.cashier_percent > 0:
            self._earning(
                "QUEBRA_CAIXA",
                f"Quebra de Caixa ({_pct(adicionais.cashier_percent)})",
                salary * adicionais.cashier_percent,
            )

        voucher = adicionais.meal_voucher
        if voucher and voucher.day_rate > 0 and voucher.days > 0:
            self._earning(
                "VALE_REFEICAO",
                f"Vale Refeição ({voucher.days} dias)",
                voucher.day_rate * voucher.days,
                taxable=False,
                fgts=False,
            )

        overtime = self._overtime(adicionais, base, variables)

        if base.commission > 0:
            variables.values["COMISSAO"] = self._earning("COMISSAO", "Comissões", base.commission)

        if base.bonus > 0:
            self._earning("GRATIFICACAO", "Gratificações", base.bonus)

        dsr = self._dsr_on_variables(adicionais, variables)
        return overtime, dsr

    def _overtime(
        self, adicionais: Adicionais, base: _HourlyBase, variables: _Variables
    ) -> Optional[OvertimeBreakdown]:
        """Overtime tiers and intra/interjornada, all at the derived hourly rate."""
        hours_50 = adicionais.overtime.hours_50 if adicionais.overtime else 0.0
        hours_100 = adicionais.overtime.hours_100 if adicionais.overtime else 0.0

        he50 = base.rate * OVERTIME_50_FACTOR * hours_50
        he100 = base.rate * OVERTIME_100_FACTOR * hours_100
        overtime_value = 0.0

        if hours_50 > 0 or hours_100 > 0:
            if hours_50 > 0:
                self.log.info(f"HE 50%: {_brl(base.rate)} × 1,5 × {_qty(hours_50)}h = {_brl(he50)}")
            if hours_100 > 0:
                self.log.info(f"HE 100%: {_brl(base.rate)} × 2,0 × {_qty(hours_100)}h = {_brl(he100)}")

            parts = []
            if hours_50 > 0:
                parts.append(f"{_qty(hours_50)}h 50%")
            if hours_100 > 0:
                parts.append(f"{_qty(hours_100)}h 100%")
            overtime_value = self._earning("HORA_EXTRA", f"Hora Extra ({' + '.join(parts)})", he50 + he100)
            variables.values["HORA_EXTRA"] = overtime_value

        rest_details = {}
        for code, label, violation in (
            ("INTRAJORNADA", "Intrajornada", adicionais.intrajornada),
            ("INTERJORNADA", "Interjornada", adicionais.interjornada),
        ):
            if violation is None or violation.hours <= 0:
                continue
            raw = base.rate * violation.factor * violation.hours
            value = self._earning(code, f"{label} ({_qty(violation.hours)}h × {violation.factor:.1f})", raw)
            variables.values[code] = value
            rest_details[code] = RestViolationDetail(hours=violation.hours, factor=violation.factor, value=value)
            self.log.info(
                f"{label}: {_brl(base.rate)} × {violation.factor:.1f} × {_qty(violation.hours)}h = {_brl(raw)}"
            )

        if overtime_value == 0 and not rest_details:
            return None

        total_overtime = overtime_value + sum(d.value for d in rest_details.values())
        return OvertimeBreakdown(
            base_salary=self.data.base_salary,
            seniority=money(base.seniority),
            commission=money(base.commission),
            unhealthy=money(base.unhealthy),
            bonus=money(base.bonus),
            hazard=money(base.hazard),
            total=money(base.total),
            divisor=base.divisor,
            hourly_rate=base.rate,
            he50=OvertimeTier(quantity=hours_50, factor=OVERTIME_50_FACTOR, value=money(he50)),
            he100=OvertimeTier(quantity=hours_100, factor=OVERTIME_100_FACTOR, value=money(he100)),
            intrajornada=rest_details.get("INTRAJORNADA"),
            interjornada=rest_details.get("INTERJORNADA"),
            total_overtime=money(total_overtime),
        )

    def _dsr_on_variables(self, adicionais: Adicionais, variables: _Variables) -> Optional[DsrSummary]:
        config = adicionais.dsr
        if config is None:
            return None

        total = money(variables.total)
        value = 0.0

        if config.business_days <= 0:
            self.log.warn(
                f"DSR sobre variáveis não calculado: dias úteis inválidos ({config.business_days})"
            )
            if total > 0:
                self._earning("DSR_VARIAVEIS", "DSR sobre Variáveis (dias úteis inválidos)", 0.0)
        elif total > 0:
            value = self._earning(
                "DSR_VARIAVEIS",
                f"DSR sobre Variáveis ({config.business_days} úteis / {config.non_business_days} não úteis)",
                total / config.business_days * config.non_business_days,
            )
            self.log.info(
                f"DSR calculado: ({_brl(total)} ÷ {config.business_days}) × {config.non_business_days} = {_brl(value)}"
            )

        return DsrSummary(
            business_days=config.business_days,
            non_business_days=config.non_business_days,
            value=value,
        )

    # -------------------------------------------------------------------------
    # 2-3. Absences and salary balance
    # -------------------------------------------------------------------------

    def _absences(self) -> None:
        days = self.data.absence_days
        if days <= 0:
            return

        plural = "" if days == 1 else "s"
        self._deduction("DESCONTO_FALTAS", f"Desconto de Faltas ({_qty(days)} dia{plural})", self.daily * days)

        if self.data.absence_dsr > 0:
            self._deduction("DESCONTO_DSR_FALTAS", "Desconto DSR por Faltas", self.data.absence_dsr)
        else:
            self.log.warn("Faltas informadas sem DSR correspondente - verifique se aplicável")

    def _salary_balance(self) -> None:
        if not self.entitlements.saldo_salario:
            return
        effective_days = max(0.0, self.data.days_worked - self.data.absence_days)
        self._earning("SALDO_SALARIO", f"Saldo de Salário ({_qty(effective_days)} dias)", self.daily * effective_days)

    # -------------------------------------------------------------------------
    # Proration
    # -------------------------------------------------------------------------

    def _resolve_proration(self) -> tuple[int, int, int]:
        """Calculated avos / notice days, replaced by audited overrides."""
        data = self.data
        adjustables = data.adjustables

        vacation = resolve_adjustable(
            adjustables.vacation_fraction,
            default_vacation_fraction(data.hire_date, data.termination_date),
            "Avos de férias",
            self.log,
            suffix="/12",
        )
        thirteenth = resolve_adjustable(
            adjustables.thirteenth_fraction,
            default_thirteenth_fraction(data.termination_date),
            "Avos de 13º",
            self.log,
            suffix="/12",
        )
        notice = resolve_adjustable(
            adjustables.notice_days,
            default_notice_days(days_between(data.hire_date, data.termination_date)),
            "Dias de aviso",
            self.log,
        )
        logger.debug(f"Proration used: ferias={vacation}/12, 13o={thirteenth}/12, aviso={notice} dias")
        return vacation, thirteenth, notice

    def _notice_indemnified(self) -> bool:
        return self.entitlements.aviso and self.data.notice_type == "INDENIZADO"

    def _projection_months(self, notice_days: int) -> int:
        """Months the indemnified notice projects into vacation and 13th."""
        if not (self._notice_indemnified() and self.entitlements.reflexos_aviso):
            return 0
        return math.ceil(notice_days / 30)

    # -------------------------------------------------------------------------
    # 4-5. Vacation and 13th
    # -------------------------------------------------------------------------

    def _vacation(self, fraction: int, projection_months: int) -> float:
        """Vacation lines, then 1/3 on the combined vacation base."""
        ent = self.entitlements
        periods = self.data.expired_vacation_periods
        base = 0.0

        if ent.ferias_vencidas and periods > 0:
            plural = "s" if periods > 1 else ""
            base += self._earning(
                "FERIAS_VENCIDAS", f"Férias Vencidas ({periods} período{plural})",
                self.reference * periods, taxable=False,
            )

        if ent.ferias_prop and fraction > 0:
            base += self._earning(
                "FERIAS_PROP", f"Férias Proporcionais ({fraction}/12)",
                self.reference / 12 * fraction, taxable=False,
            )

        if projection_months > 0:
            base += self._earning(
                "FERIAS_PROJECAO_AVISO", f"Férias Indenizadas - Projeção Aviso ({projection_months}/12)",
                self.reference / 12 * projection_months, taxable=False,
            )

        if base > 0:
            third = self._earning(
                "TERCO_FERIAS", "1/3 Constitucional sobre Férias (base única)", base / 3, taxable=False,
            )
            self.log.info(
                f"1/3 calculado sobre base única de férias (vencidas + proporcionais + projeção aviso): "
                f"{_brl(base)} → 1/3 = {_brl(third)}"
            )
        return money(base)

    def _thirteenth(self, fraction: int, projection_months: int) -> float:
        """13th lines; their sum is the 13th-group tax base."""
        if not self.entitlements.decimo_terceiro:
            return 0.0

        base = 0.0
        if fraction > 0:
            base += self._earning(
                "DECIMO_TERCEIRO", f"13º Salário Proporcional ({fraction}/12)",
                self.reference / 12 * fraction, group="DECIMO_TERCEIRO",
            )
        if projection_months > 0:
            base += self._earning(
                "DECIMO_TERCEIRO_PROJECAO_AVISO", f"13º Indenizado - Projeção Aviso ({projection_months}/12)",
                self.reference / 12 * projection_months, group="DECIMO_TERCEIRO",
            )
        return money(base)

    # -------------------------------------------------------------------------
    # 6-9. Notice, penalties, indemnities
    # -------------------------------------------------------------------------

    def _notice_pay(self, notice_days: int) -> None:
        ent = self.entitlements
        if not ent.aviso:
            return
        if self.data.notice_type != "INDENIZADO":
            self.log.info(f"Aviso prévio trabalhado ({notice_days} dias): sem verba indenizatória")
            return

        factor_note = f" - {_pct(ent.fator_aviso)}" if ent.fator_aviso < 1 else ""
        self._earning(
            "AVISO_PREVIO_INDENIZADO",
            f"Aviso Prévio Indenizado ({notice_days} dias{factor_note})",
            self.daily * notice_days * ent.fator_aviso,
            taxable=False,
            fgts=True,
        )
        self.log.info(
            f"Aviso indenizado calculado sobre Salário Base + Médias: {_brl(self.reference)} × {notice_days} dias"
        )

    def _unworked_notice_penalty(self) -> None:
        days = self.data.notice_penalty_days
        if days <= 0:
            return
        if not self.entitlements.desconto_aviso:
            self.log.warn(
                f"Desconto de aviso não cumprido ({days} dias) ignorado: motivo não prevê o desconto"
            )
            return
        self._deduction(
            "DESCONTO_AVISO_NAO_CUMPRIDO", f"Desconto Aviso Não Cumprido ({days} dias)", self.daily * days,
        )

    def _fixed_term_indemnity(self) -> None:
        if not self.entitlements.art_479:
            return
        end = self.data.fixed_term_end
        if end is None:
            self.log.warn("Data de término do contrato não informada - indenização do art. 479 não calculada")
            return
        remaining = days_between(self.data.termination_date, end)
        self._earning(
            "INDENIZACAO_ART_479", f"Indenização Art. 479 ({remaining} dias)",
            self.daily * remaining * ART_479_FACTOR, taxable=False,
        )

    def _fgts_penalty(self) -> float:
        percent = self.entitlements.multa_fgts_percent
        penalty = money(self.data.fgts_balance * percent)
        if penalty > 0:
            self._earning("MULTA_FGTS", f"Multa FGTS ({_pct(percent)})", penalty, taxable=False)
        return penalty
