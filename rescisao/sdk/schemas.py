"""Pydantic schemas for settlement inputs and results.

All schemas use extra='forbid' to reject unknown fields, ensuring
typos in input files cause clear errors rather than silent ignoring.
Inputs and results are frozen: one invocation builds them, nobody
mutates them afterwards.
"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

LineKind = Literal["provento", "desconto"]
LineGroup = Literal["MENSAL", "DECIMO_TERCEIRO", "NAO_APLICA"]
LogKind = Literal["INFO", "AVISO", "MANUAL"]
ContractType = Literal["INDETERMINADO", "DETERMINADO", "EXPERIENCIA"]
NoticeType = Literal["INDENIZADO", "TRABALHADO"]
UnhealthyGrade = Literal["minimo", "medio", "maximo"]

UNHEALTHY_GRADE_PERCENT = {"minimo": 0.10, "medio": 0.20, "maximo": 0.40}


# =============================================================================
# Adicionais - optional variable-pay inputs
# =============================================================================


class _Input(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class NightShift(_Input):
    """Adicional noturno."""

    hours: float = Field(..., ge=0, description="Night hours worked (clock hours)")
    percent: float = Field(..., ge=0, le=1, description="Premium, e.g. 0.20")


class Unhealthy(_Input):
    """Insalubridade."""

    grade: UnhealthyGrade = Field(..., description="minimo (10%), medio (20%), maximo (40%)")
    base: float = Field(..., ge=0, description="Minimum wage or configured base")

    @property
    def percent(self) -> float:
        return UNHEALTHY_GRADE_PERCENT[self.grade]


class MealVoucher(_Input):
    """Vale refeição."""

    day_rate: float = Field(..., ge=0)
    days: int = Field(..., ge=0)


class SeniorityBonus(_Input):
    """ATS - adicional por tempo de serviço."""

    percent: float = Field(..., ge=0, le=1, description="Percent of salary per year, e.g. 0.01")
    years: int = Field(..., ge=0)


class Overtime(_Input):
    """Hora extra at the 50% and 100% tiers."""

    monthly_hours: float = Field(default=220, gt=0, description="Monthly hours divisor (220 or 110)")
    hours_50: float = Field(default=0, ge=0)
    hours_100: float = Field(default=0, ge=0)


class RestViolation(_Input):
    """Intrajornada / interjornada hours paid as overtime."""

    hours: float = Field(..., ge=0)
    factor: float = Field(default=1.5, ge=0, description="Multiplier: 1.0, 1.5, 2.0")


class DsrConfig(_Input):
    """Business / non-business day counts for DSR on variables."""

    business_days: int = Field(..., ge=0)
    non_business_days: int = Field(..., ge=0)


class Adicionais(_Input):
    """Optional variable-pay inputs. None means the add-on is absent."""

    night_shift: Optional[NightShift] = None
    hazard_percent: Optional[float] = Field(default=None, ge=0, le=1, description="Periculosidade, e.g. 0.30")
    unhealthy: Optional[Unhealthy] = None
    cashier_percent: Optional[float] = Field(default=None, ge=0, le=1, description="Quebra de caixa")
    meal_voucher: Optional[MealVoucher] = None
    seniority: Optional[SeniorityBonus] = None
    bonus: Optional[float] = Field(default=None, ge=0, description="Gratificações")
    commission: Optional[float] = Field(default=None, ge=0, description="Comissões")
    overtime: Optional[Overtime] = None
    intrajornada: Optional[RestViolation] = None
    interjornada: Optional[RestViolation] = None
    dsr: Optional[DsrConfig] = None


# =============================================================================
# Adjustables - calculated vs user-edited proration values
# =============================================================================


class Adjustable(_Input):
    """A calculated proration value and an optional audited override."""

    calculated: int = Field(..., ge=0)
    edited: Optional[int] = Field(default=None, ge=0)
    justification: Optional[str] = None

    @property
    def is_overridden(self) -> bool:
        return self.edited is not None and self.edited != self.calculated


class Adjustables(_Input):
    """Adjustable avos and notice days."""

    vacation_fraction: Optional[Adjustable] = None
    thirteenth_fraction: Optional[Adjustable] = None
    notice_days: Optional[Adjustable] = None

    @model_validator(mode="after")
    def check_avos_range(self) -> "Adjustables":
        for name in ("vacation_fraction", "thirteenth_fraction"):
            adj = getattr(self, name)
            if adj is not None and adj.edited is not None and adj.edited > 12:
                raise ValueError(f"{name}.edited must be between 0 and 12, got {adj.edited}")
        return self


# =============================================================================
# Termination input
# =============================================================================


class TerminationInput(_Input):
    """Everything one settlement calculation needs besides configuration."""

    base_salary: float = Field(..., ge=0, description="Salário base")
    hire_date: date
    termination_date: date
    reason_code: str = Field(..., description="Termination-reason code from the catalog")
    contract_type: ContractType = "INDETERMINADO"
    notice_type: NoticeType = "INDENIZADO"
    days_worked: float = Field(default=30, ge=0, le=31, description="Days worked in the final month")
    expired_vacation_periods: int = Field(default=0, ge=0)
    fgts_balance: float = Field(default=0, ge=0)
    irrf_dependents: int = Field(default=0, ge=0)
    variable_pay_average: float = Field(default=0, ge=0, description="Média de variáveis")
    notice_penalty_days: int = Field(default=0, ge=0, description="Unworked notice days to deduct")
    absence_days: float = Field(default=0, ge=0, description="Faltas (fractional)")
    absence_dsr: float = Field(default=0, ge=0, description="DSR deduction for absences")
    fixed_term_end: Optional[date] = None
    adjustables: Adjustables = Field(default_factory=Adjustables)
    adicionais: Optional[Adicionais] = None

    @field_validator("reason_code", mode="before")
    @classmethod
    def reason_code_as_text(cls, v):
        """Accept unquoted YAML codes (02 -> '02')."""
        if isinstance(v, int) and not isinstance(v, bool):
            return f"{v:02d}"
        return v

    @model_validator(mode="after")
    def check_dates(self) -> "TerminationInput":
        if self.termination_date < self.hire_date:
            raise ValueError(
                f"termination_date ({self.termination_date}) is before hire_date ({self.hire_date})"
            )
        if self.fixed_term_end is not None and self.fixed_term_end < self.termination_date:
            raise ValueError(
                f"fixed_term_end ({self.fixed_term_end}) is before termination_date ({self.termination_date})"
            )
        return self

    @property
    def reference_remuneration(self) -> float:
        """Salary plus variable-pay average, the base for proration and notice."""
        return self.base_salary + self.variable_pay_average


# =============================================================================
# Results
# =============================================================================


class _Output(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class LedgerLine(_Output):
    """Single earning or deduction (verba) of the settlement."""

    code: str = Field(..., description="Rubrica, e.g. 'SALDO_SALARIO'")
    description: str
    value: float = Field(..., ge=0)
    kind: LineKind
    inss: bool = Field(..., description="Subject to INSS")
    irrf: bool = Field(..., description="Subject to IRRF")
    fgts: bool = Field(..., description="Subject to FGTS deposit")
    group: LineGroup = "NAO_APLICA"


class LogEntry(_Output):
    """Audit log entry."""

    timestamp: datetime
    kind: LogKind
    message: str


class OvertimeTier(_Output):
    quantity: float
    factor: float
    value: float


class RestViolationDetail(_Output):
    hours: float
    factor: float
    value: float


class OvertimeBreakdown(_Output):
    """Composition of the derived hourly rate and the overtime it priced."""

    base_salary: float
    seniority: float
    commission: float
    unhealthy: float
    bonus: float
    hazard: float
    total: float
    divisor: float
    hourly_rate: float
    he50: OvertimeTier
    he100: OvertimeTier
    intrajornada: Optional[RestViolationDetail] = None
    interjornada: Optional[RestViolationDetail] = None
    total_overtime: float


class DsrSummary(_Output):
    """Echo of the DSR configuration and the value it produced."""

    business_days: int
    non_business_days: int
    value: float


class TaxBases(_Output):
    """INSS/IRRF bases per group."""

    inss_monthly: float
    inss_thirteenth: float
    irrf_monthly: float
    irrf_thirteenth: float


class SettlementResult(_Output):
    """Complete settlement: ledger, taxes per group, totals and audit log."""

    reason_code: str
    category: str
    lines: tuple[LedgerLine, ...]
    reference_remuneration: float
    total_earnings: float = Field(..., description="All provento lines, FGTS penalty included")
    total_deductions: float = Field(..., description="All desconto lines, taxes excluded")
    bases: TaxBases
    inss: float
    inss_monthly: float
    inss_thirteenth: float
    irrf: float
    irrf_monthly: float
    irrf_thirteenth: float
    fgts_penalty: float
    net: float
    notice_days_used: int
    vacation_fraction_used: int
    thirteenth_fraction_used: int
    log: tuple[LogEntry, ...]
    overtime: Optional[OvertimeBreakdown] = None
    dsr: Optional[DsrSummary] = None

    def lines_by_code(self, code: str) -> list[LedgerLine]:
        return [line for line in self.lines if line.code == code]

    def line_value(self, code: str) -> float:
        """Sum of the values of all lines with a code (0 if absent)."""
        return round(sum(line.value for line in self.lines_by_code(code)), 2)

    def log_entries(self, kind: LogKind) -> list[LogEntry]:
        return [entry for entry in self.log if entry.kind == kind]
