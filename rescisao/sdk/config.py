"""Configuration management for the rescisão calculator.

The calculation engine takes its configuration as an explicit, immutable
``SettlementConfig`` value. This module builds that value from a yearly
YAML file holding:

- tabelas: INSS and IRRF bracket tables
- motivos: termination-reason catalog (code -> category key)
- categorias: per-category entitlement flags
- tipos_contrato / tipos_aviso: choice lists for consumers

Tables directory resolution (first one holding the requested year wins):
1. RESCISAO_TABLES_PATH environment variable
2. XDG_CONFIG_HOME/rescisao/tabelas/ (~/.config/rescisao/tabelas/)
3. Tables bundled with the package (rescisao/tabelas/)

Year resolution falls back to the nearest prior year with a tables file,
so a 2026 termination uses the 2025 tables until 2026 tables are added.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .taxes.schemas import TaxTables

logger = logging.getLogger(__name__)

APP_NAME = "rescisao"
TABLES_DIRNAME = "tabelas"


class SettlementConfigError(LookupError):
    """Raised when the reason catalog cannot resolve a termination."""
    pass


class ReasonNotFoundError(SettlementConfigError):
    """Raised when a termination-reason code is not in the catalog."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Motivo não encontrado: {code!r}")


class CategoryNotFoundError(SettlementConfigError):
    """Raised when a reason points at a category missing from the table."""

    def __init__(self, code: str, category: str):
        self.code = code
        self.category = category
        super().__init__(f"Categoria não encontrada: {category!r} (motivo {code!r})")


class TablesNotFoundError(FileNotFoundError):
    """Raised when no tables file exists for the requested year."""
    pass


# =============================================================================
# Schemas
# =============================================================================


class CatalogItem(BaseModel):
    """A code/description pair (contract type, notice type)."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    codigo: str
    descricao: str


class TerminationReason(BaseModel):
    """Termination-reason catalog entry."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    codigo: str
    descricao: str
    categoria: str = Field(..., description="Key into the categorias table")


class Entitlements(BaseModel):
    """What a termination category entitles the worker to."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    saldo_salario: bool = False
    ferias_vencidas: bool = False
    ferias_prop: bool = False
    decimo_terceiro: bool = False
    aviso: bool = False
    fator_aviso: float = Field(default=1.0, gt=0, le=1)
    reflexos_aviso: bool = False
    desconto_aviso: bool = False
    art_479: bool = False
    multa_fgts_percent: float = Field(default=0.0, ge=0, le=1)


class SettlementConfig(BaseModel):
    """Read-only configuration consumed by the calculation engine."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    ano: int
    tabelas: TaxTables
    motivos: list[TerminationReason]
    categorias: dict[str, Entitlements]
    tipos_contrato: list[CatalogItem] = Field(default_factory=list)
    tipos_aviso: list[CatalogItem] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_reason_codes(self) -> "SettlementConfig":
        codes = [m.codigo for m in self.motivos]
        duplicates = sorted({c for c in codes if codes.count(c) > 1})
        if duplicates:
            raise ValueError(f"Duplicate termination-reason codes: {duplicates}")
        return self

    def get_reason(self, code: str) -> TerminationReason:
        """Look up a termination reason by code.

        Raises:
            ReasonNotFoundError: If the code is not in the catalog
        """
        for motivo in self.motivos:
            if motivo.codigo == code:
                return motivo
        raise ReasonNotFoundError(code)

    def resolve(self, code: str) -> tuple[TerminationReason, Entitlements]:
        """Resolve a reason code to its catalog entry and entitlement flags.

        Raises:
            ReasonNotFoundError: If the code is not in the catalog
            CategoryNotFoundError: If the reason's category has no flags
        """
        motivo = self.get_reason(code)
        categoria = self.categorias.get(motivo.categoria)
        if categoria is None:
            raise CategoryNotFoundError(code, motivo.categoria)
        return motivo, categoria


# =============================================================================
# Paths
# =============================================================================


def get_bundled_tables_dir() -> Path:
    """Get the tables directory shipped inside the package."""
    return Path(__file__).parent.parent / TABLES_DIRNAME


def get_user_tables_dir() -> Path:
    """Get the user tables directory (XDG config).

    Returns:
        Path to ~/.config/rescisao/tabelas (may not exist)
    """
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME / TABLES_DIRNAME


def get_tables_search_path() -> list[Path]:
    """Get tables directories in resolution order."""
    dirs = []
    env_path = os.environ.get("RESCISAO_TABLES_PATH")
    if env_path:
        dirs.append(Path(env_path))
    dirs.append(get_user_tables_dir())
    dirs.append(get_bundled_tables_dir())
    return dirs


def available_years() -> list[int]:
    """Get sorted list of years with a tables file (descending)."""
    years = set()
    for tables_dir in get_tables_search_path():
        if tables_dir.is_dir():
            years.update(int(p.stem) for p in tables_dir.glob("*.yaml") if p.stem.isdigit())
    return sorted(years, reverse=True)


def find_tables_file(year: int) -> Path:
    """Find the tables file for a year, falling back to prior years.

    Args:
        year: Calendar year of the termination

    Returns:
        Path to the YAML file to load

    Raises:
        TablesNotFoundError: If no file exists for the year or any prior year
    """
    candidates = [y for y in available_years() if y <= int(year)]
    for candidate in candidates:
        for tables_dir in get_tables_search_path():
            path = tables_dir / f"{candidate}.yaml"
            if path.exists():
                if candidate != int(year):
                    logger.info(f"No tables for {year}, using {candidate} ({path})")
                return path

    searched = ", ".join(str(d) for d in get_tables_search_path())
    raise TablesNotFoundError(f"Tables file not found for year {year} (searched: {searched})")


# =============================================================================
# Loading
# =============================================================================


def load_config_file(path: Path) -> SettlementConfig:
    """Load and validate a tables YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return SettlementConfig.model_validate(data)


@lru_cache(maxsize=None)
def _load_cached(path: str) -> SettlementConfig:
    return load_config_file(Path(path))


def load_settlement_config(year: Optional[int] = None) -> SettlementConfig:
    """Load the settlement configuration for a year.

    Args:
        year: Calendar year (default: latest available)

    Returns:
        Validated, immutable SettlementConfig

    Raises:
        TablesNotFoundError: If no tables file can be found
    """
    if year is None:
        years = available_years()
        if not years:
            raise TablesNotFoundError("No tables files available")
        year = years[0]

    path = find_tables_file(year)
    logger.debug(f"Loading settlement tables from {path}")
    return _load_cached(str(path.resolve()))


def clear_config_cache() -> None:
    """Forget previously loaded tables (tests, edited user tables)."""
    _load_cached.cache_clear()
