"""Pydantic schemas for tax table validation.

These schemas validate the ``tabelas`` section of the yearly YAML files
and provide typed access to the INSS/IRRF brackets.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class InssBracket(BaseModel):
    """Single INSS bracket: marginal rate up to an upper bound."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    ate: float = Field(..., gt=0, description="Upper bound of the bracket")
    aliquota: float = Field(..., ge=0, le=1, description="Marginal rate as decimal")


class InssRules(BaseModel):
    """INSS (employee contribution) table."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    teto: float = Field(..., gt=0, description="Contribution ceiling (max base)")
    faixas: list[InssBracket] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_ascending(self) -> "InssRules":
        bounds = [f.ate for f in self.faixas]
        if bounds != sorted(bounds) or len(set(bounds)) != len(bounds):
            raise ValueError(f"INSS brackets must have strictly ascending 'ate': {bounds}")
        return self


class IrrfBracket(BaseModel):
    """Single IRRF bracket over [de, ate). ``ate`` None means unbounded."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    de: float = Field(default=0, ge=0, description="Lower bound (inclusive)")
    ate: Optional[float] = Field(default=None, description="Upper bound (exclusive)")
    aliquota: float = Field(..., ge=0, le=1)
    deduzir: float = Field(default=0, ge=0, description="Fixed deduction for the bracket")

    def contains(self, base: float) -> bool:
        upper = self.ate if self.ate is not None else float("inf")
        return self.de <= base < upper


class IrrfRules(BaseModel):
    """IRRF (withheld income tax) table."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    deducao_dependente: float = Field(..., ge=0, description="Deduction per dependent")
    faixas: list[IrrfBracket] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_non_overlapping(self) -> "IrrfRules":
        previous_upper = None
        for faixa in self.faixas:
            if previous_upper is None and faixa is not self.faixas[0]:
                raise ValueError("Only the last IRRF bracket may be unbounded")
            if previous_upper is not None and faixa.de < previous_upper:
                raise ValueError(
                    f"IRRF brackets overlap: bracket starting at {faixa.de} "
                    f"begins before previous upper bound {previous_upper}"
                )
            previous_upper = faixa.ate
        return self


class TaxTables(BaseModel):
    """Both payroll tax tables for a year."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    inss: InssRules
    irrf: IrrfRules
