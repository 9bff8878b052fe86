"""Rescisão CLI - Command-line interface for termination settlements."""

import json
import logging
import os
from pathlib import Path

import click
import yaml
from pydantic import ValidationError
from rich.console import Console

from rescisao import __version__
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

from .renderers.settlement_renderer import (
    render_defaults,
    render_reasons,
    render_settlement,
    render_tables,
)

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "WARNING").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.WARNING),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)

DATE = click.DateTime(formats=["%Y-%m-%d", "%d/%m/%Y"])


def _load_config(year):
    try:
        return load_settlement_config(year)
    except (TablesNotFoundError, ValidationError) as e:
        raise click.ClickException(str(e))


def _read_input(path: Path) -> dict:
    """Read a termination input file (YAML or JSON)."""
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise click.ClickException(f"{path}: could not parse input file:\n{e}")
    if not isinstance(data, dict):
        raise click.ClickException(f"{path}: expected a mapping of input fields")
    return data


@click.group()
@click.version_option(version=__version__, prog_name="rescisao")
def cli():
    """Rescisão - Cálculo de verbas rescisórias (CLT).

    Computes the itemized termination settlement, INSS/IRRF per group
    (mensal and 13º) and the audit log of manual adjustments.

    Tables are loaded from (first one holding the year):

    \b
    1. RESCISAO_TABLES_PATH environment variable
    2. ~/.config/rescisao/tabelas/ (XDG default)
    3. Tables bundled with the package
    """
    pass


@cli.command("calc")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--year", type=int, help="Tables year (default: year of the termination date)")
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table",
              help="Output format (default: table)")
@click.option("--log/--no-log", "show_log", default=True, help="Show the calculation log (table format)")
def calc(input_file, year, output_format, show_log):
    """Calculate the settlement described in INPUT_FILE.

    INPUT_FILE is a YAML or JSON mapping of TerminationInput fields, e.g.:

    \b
      base_salary: 3000.00
      hire_date: 2023-01-10
      termination_date: 2024-07-20
      reason_code: "02"
      notice_type: INDENIZADO
      fgts_balance: 4200.00

    Examples:

    \b
      rescisao calc desligamento.yaml
      rescisao calc desligamento.yaml --format json
    """
    raw = _read_input(input_file)
    try:
        data = TerminationInput.model_validate(raw)
    except ValidationError as e:
        raise click.ClickException(f"Invalid input in {input_file}:\n{e}")

    config = _load_config(year or data.termination_date.year)

    try:
        result = calculate_settlement(data, config)
    except SettlementConfigError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps(settlement_to_dict(result), indent=2, ensure_ascii=False))
        return

    render_settlement(Console(width=140), result, show_log=show_log)


@cli.command("motivos")
@click.option("--year", type=int, help="Tables year (default: latest)")
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table")
def motivos(year, output_format):
    """List termination reasons and their entitlements."""
    config = _load_config(year)

    if output_format == "json":
        output = {
            "ano": config.ano,
            "motivos": [m.model_dump() for m in config.motivos],
            "categorias": {k: v.model_dump() for k, v in config.categorias.items()},
            "tipos_contrato": [t.model_dump() for t in config.tipos_contrato],
            "tipos_aviso": [t.model_dump() for t in config.tipos_aviso],
        }
        click.echo(json.dumps(output, indent=2, ensure_ascii=False))
        return

    render_reasons(Console(), config)


@cli.command("tabelas")
@click.argument("year", type=int, required=False)
@click.option("--list", "list_years", is_flag=True, help="Only list available years")
def tabelas(year, list_years):
    """Show the INSS and IRRF tables for YEAR (default: latest)."""
    if list_years:
        years = available_years()
        if not years:
            raise click.ClickException("No tables files available")
        for y in years:
            click.echo(y)
        return

    render_tables(Console(), _load_config(year))


@cli.command("avos")
@click.argument("hire_date", type=DATE)
@click.argument("termination_date", type=DATE)
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table")
def avos(hire_date, termination_date, output_format):
    """Show the calculated avos and notice days for two dates.

    These are the values to put in the 'calculated' field of the
    adjustables block when overriding them.

    \b
      rescisao avos 2023-01-10 2024-07-20
    """
    hire, termination = hire_date.date(), termination_date.date()
    if termination < hire:
        raise click.BadParameter("termination date is before hire date")

    defaults = derive_defaults(hire, termination)
    if output_format == "json":
        click.echo(json.dumps(defaults, indent=2))
        return

    render_defaults(Console(), defaults)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
