"""Rescisão SDK - Core settlement calculation functionality."""

from .config import (
    SettlementConfig,
    Entitlements,
    TerminationReason,
    CatalogItem,
    SettlementConfigError,
    ReasonNotFoundError,
    CategoryNotFoundError,
    TablesNotFoundError,
    load_settlement_config,
    load_config_file,
    available_years,
    find_tables_file,
    clear_config_cache,
)

from .schemas import (
    TerminationInput,
    Adicionais,
    Adjustable,
    Adjustables,
    LedgerLine,
    LogEntry,
    SettlementResult,
    OvertimeBreakdown,
    DsrSummary,
    TaxBases,
)

from .dates import (
    months_between,
    days_between,
    default_notice_days,
    default_vacation_fraction,
    default_thirteenth_fraction,
    derive_defaults,
)

from .taxes import calc_inss, calc_irrf

from .settlement import calculate_settlement, settlement_to_dict

__all__ = [
    # Config
    "SettlementConfig",
    "Entitlements",
    "TerminationReason",
    "CatalogItem",
    "SettlementConfigError",
    "ReasonNotFoundError",
    "CategoryNotFoundError",
    "TablesNotFoundError",
    "load_settlement_config",
    "load_config_file",
    "available_years",
    "find_tables_file",
    "clear_config_cache",
    # Schemas
    "TerminationInput",
    "Adicionais",
    "Adjustable",
    "Adjustables",
    "LedgerLine",
    "LogEntry",
    "SettlementResult",
    "OvertimeBreakdown",
    "DsrSummary",
    "TaxBases",
    # Dates
    "months_between",
    "days_between",
    "default_notice_days",
    "default_vacation_fraction",
    "default_thirteenth_fraction",
    "derive_defaults",
    # Taxes
    "calc_inss",
    "calc_irrf",
    # Calculation
    "calculate_settlement",
    "settlement_to_dict",
]
