"""Rescisão MCP Server - FastMCP implementation for settlement tools."""

import json
import logging
from datetime import date
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import Field, ValidationError

from rescisao.sdk import (
    SettlementConfigError,
    TablesNotFoundError,
    TerminationInput,
    available_years,
    calculate_settlement,
    derive_defaults,
    load_settlement_config,
    settlement_to_dict,
)

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("rescisao")


# --- Tools ---

@mcp.tool()
async def calculate_termination(
    termination: dict[str, Any] = Field(
        description=(
            "TerminationInput fields: base_salary, hire_date (YYYY-MM-DD), termination_date, "
            "reason_code (e.g. '02'), notice_type ('INDENIZADO' or 'TRABALHADO'), days_worked, "
            "fgts_balance, irrf_dependents, variable_pay_average, absence_days, absence_dsr, "
            "expired_vacation_periods, notice_penalty_days, fixed_term_end, adjustables, adicionais"
        ),
    ),
    year: Optional[int] = Field(default=None, description="Tables year (default: termination year)"),
) -> dict[str, Any]:
    """Calculate a Brazilian termination settlement. Returns itemized verbas, INSS/IRRF per group, net amount and the audit log."""
    try:
        data = TerminationInput.model_validate(termination)
    except ValidationError as e:
        logger.error(f"Invalid termination input: {e}")
        return {"error": "invalid input", "details": json.loads(e.json())}

    try:
        config = load_settlement_config(year or data.termination_date.year)
    except TablesNotFoundError as e:
        logger.error(f"Error loading tables: {e}")
        return {"error": str(e)}
    except ValidationError as e:
        logger.error(f"Invalid tables file: {e}")
        return {"error": "invalid tables", "details": json.loads(e.json())}

    try:
        result = calculate_settlement(data, config)
    except SettlementConfigError as e:
        logger.error(f"Error calculating settlement: {e}")
        return {"error": str(e)}
    return settlement_to_dict(result)


@mcp.tool()
async def list_termination_reasons(
    year: Optional[int] = Field(default=None, description="Tables year (default: latest)"),
) -> dict[str, Any]:
    """List termination-reason codes with their category and entitlement flags."""
    try:
        config = load_settlement_config(year)
    except TablesNotFoundError as e:
        logger.error(f"Error loading tables: {e}")
        return {"error": str(e), "motivos": []}

    return {
        "ano": config.ano,
        "motivos": [
            {
                **m.model_dump(),
                "direitos": config.categorias[m.categoria].model_dump() if m.categoria in config.categorias else None,
            }
            for m in config.motivos
        ],
        "tipos_contrato": [t.model_dump() for t in config.tipos_contrato],
        "tipos_aviso": [t.model_dump() for t in config.tipos_aviso],
    }


@mcp.tool()
async def preview_defaults(
    hire_date: str = Field(description="Hire date (YYYY-MM-DD)"),
    termination_date: str = Field(description="Termination date (YYYY-MM-DD)"),
) -> dict[str, Any]:
    """Calculated vacation avos, 13th avos and notice days for two dates (the values overrides are checked against)."""
    try:
        hire = date.fromisoformat(hire_date)
        termination = date.fromisoformat(termination_date)
    except ValueError as e:
        return {"error": str(e)}
    if termination < hire:
        return {"error": "termination_date is before hire_date"}
    return derive_defaults(hire, termination)


# --- Resources (optional, for browsing) ---

@mcp.resource("rescisao://tabelas/years")
async def list_years_resource() -> str:
    """List years with bundled or user tables."""
    return json.dumps({"years": available_years()}, indent=2)


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
