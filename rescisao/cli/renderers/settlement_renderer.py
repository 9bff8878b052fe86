"""Rich renderer for settlement results.

Transforms SDK models into formatted Rich tables. Read-only: nothing here
changes a result field.
"""

from typing import Any, Dict

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from rescisao.sdk.config import SettlementConfig
from rescisao.sdk.schemas import SettlementResult

GROUP_BADGES = {
    "MENSAL": "[dim]mensal[/dim]",
    "DECIMO_TERCEIRO": "[cyan]13º[/cyan]",
    "NAO_APLICA": "",
}

LOG_STYLES = {
    "INFO": "dim",
    "AVISO": "yellow",
    "MANUAL": "magenta",
}


def render_settlement(console: Console, result: SettlementResult, show_log: bool = True) -> None:
    """Render a settlement as Rich tables.

    Args:
        console: Rich Console instance
        result: Output of calculate_settlement()
        show_log: Also render the audit log
    """
    for entry in result.log_entries("AVISO"):
        console.print(Panel(f"[yellow]{entry.message}[/yellow]", title="Aviso", border_style="yellow"))

    _render_summary(console, result)
    _render_lines(console, result)
    _render_taxes(console, result)
    if result.overtime is not None:
        _render_overtime(console, result)
    if show_log:
        _render_log(console, result)


def _render_summary(console: Console, result: SettlementResult) -> None:
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("key", style="dim")
    table.add_column("value")

    table.add_row("Motivo", f"{result.reason_code} ({result.category})")
    table.add_row("Remuneração de referência", _fmt(result.reference_remuneration))
    table.add_row("Dias de aviso", str(result.notice_days_used))
    table.add_row("Avos de férias", f"{result.vacation_fraction_used}/12")
    table.add_row("Avos de 13º", f"{result.thirteenth_fraction_used}/12")
    if result.dsr is not None:
        table.add_row(
            "DSR",
            f"{result.dsr.business_days} úteis / {result.dsr.non_business_days} não úteis "
            f"= {_fmt(result.dsr.value)}",
        )

    console.print(Panel(table, title="Parâmetros", border_style="dim"))


def _render_lines(console: Console, result: SettlementResult) -> None:
    table = Table(title="Verbas Rescisórias", box=box.ROUNDED)
    table.add_column("Rubrica", style="dim")
    table.add_column("Descrição", min_width=30)
    table.add_column("Incid.", justify="center")
    table.add_column("Grupo", justify="center")
    table.add_column("Valor", justify="right", min_width=14)

    for line in result.lines:
        flags = "".join(
            letter if flag else "·"
            for letter, flag in (("I", line.inss), ("R", line.irrf), ("F", line.fgts))
        )
        value = _fmt(line.value)
        if line.kind == "desconto":
            value = f"[red]- {value}[/red]"
        table.add_row(line.code, line.description, flags, GROUP_BADGES[line.group], value)

    table.add_row("", "", "", "", "")
    table.add_row("", "[bold]Total de proventos[/bold]", "", "", f"[bold]{_fmt(result.total_earnings)}[/bold]")
    table.add_row("", "[bold]Total de descontos[/bold]", "", "", f"[bold red]- {_fmt(result.total_deductions)}[/bold red]")

    console.print(table)


def _render_taxes(console: Console, result: SettlementResult) -> None:
    table = Table(title="Encargos por Grupo", box=box.ROUNDED)
    table.add_column("", style="bold", min_width=20)
    table.add_column("Base", justify="right", min_width=12)
    table.add_column("Valor", justify="right", min_width=12)

    bases = result.bases
    table.add_row("INSS Mensal", _fmt(bases.inss_monthly), _fmt(result.inss_monthly))
    table.add_row("INSS 13º", _fmt(bases.inss_thirteenth), _fmt(result.inss_thirteenth))
    table.add_row("IRRF Mensal", _fmt(bases.irrf_monthly), _fmt(result.irrf_monthly))
    table.add_row("IRRF 13º", _fmt(bases.irrf_thirteenth), _fmt(result.irrf_thirteenth))
    table.add_row("[dim]Total INSS + IRRF[/dim]", "", f"[dim]{_fmt(result.inss + result.irrf)}[/dim]")
    table.add_row("", "", "")
    if result.fgts_penalty > 0:
        table.add_row("Multa FGTS (incluída)", "", _fmt(result.fgts_penalty))
    table.add_row(
        "[bold green]LÍQUIDO[/bold green]", "",
        f"[bold green]{_fmt(result.net)}[/bold green]",
    )

    console.print(table)


def _render_overtime(console: Console, result: SettlementResult) -> None:
    ot = result.overtime
    table = Table(title="Base de Hora Extra", box=box.SIMPLE)
    table.add_column("Componente", style="dim")
    table.add_column("Valor", justify="right")

    for label, value in (
        ("Salário base", ot.base_salary),
        ("ATS", ot.seniority),
        ("Comissão", ot.commission),
        ("Insalubridade", ot.unhealthy),
        ("Gratificação", ot.bonus),
        ("Periculosidade", ot.hazard),
    ):
        table.add_row(label, _fmt(value))
    table.add_row("[bold]Base total[/bold]", f"[bold]{_fmt(ot.total)}[/bold]")
    table.add_row(f"Valor hora (÷ {ot.divisor:g})", _fmt(ot.hourly_rate))

    for label, tier in (("HE 50%", ot.he50), ("HE 100%", ot.he100)):
        if tier.quantity > 0:
            table.add_row(f"{label} ({tier.quantity:g}h × {tier.factor})", _fmt(tier.value))
    for label, detail in (("Intrajornada", ot.intrajornada), ("Interjornada", ot.interjornada)):
        if detail is not None:
            table.add_row(f"{label} ({detail.hours:g}h × {detail.factor})", _fmt(detail.value))
    table.add_row("[bold]Total[/bold]", f"[bold]{_fmt(ot.total_overtime)}[/bold]")

    console.print(table)


def _render_log(console: Console, result: SettlementResult) -> None:
    table = Table(title="Log de Cálculo", box=box.SIMPLE, show_header=False)
    table.add_column("hora", style="dim")
    table.add_column("tipo")
    table.add_column("mensagem")

    for entry in result.log:
        style = LOG_STYLES[entry.kind]
        table.add_row(
            entry.timestamp.strftime("%H:%M:%S"),
            f"[{style}]{entry.kind}[/{style}]",
            entry.message,
        )

    console.print(table)


def render_reasons(console: Console, config: SettlementConfig) -> None:
    """Render the termination-reason catalog with entitlement flags."""
    table = Table(title=f"Motivos de Desligamento (tabelas {config.ano})", box=box.ROUNDED)
    table.add_column("Código", style="bold")
    table.add_column("Descrição")
    table.add_column("Categoria", style="dim")
    table.add_column("Aviso", justify="center")
    table.add_column("Multa FGTS", justify="right")

    for motivo in config.motivos:
        categoria = config.categorias.get(motivo.categoria)
        if categoria is None:
            table.add_row(motivo.codigo, motivo.descricao, f"[red]{motivo.categoria}?[/red]", "-", "-")
            continue
        aviso = "-"
        if categoria.aviso:
            aviso = "sim" if categoria.fator_aviso == 1 else f"{categoria.fator_aviso:.0%}"
        table.add_row(
            motivo.codigo,
            motivo.descricao,
            motivo.categoria,
            aviso,
            f"{categoria.multa_fgts_percent:.0%}",
        )

    console.print(table)


def render_tables(console: Console, config: SettlementConfig) -> None:
    """Render INSS and IRRF bracket tables."""
    inss = Table(title=f"INSS {config.ano} (teto {_fmt(config.tabelas.inss.teto)})", box=box.ROUNDED)
    inss.add_column("Até", justify="right")
    inss.add_column("Alíquota", justify="right")
    for faixa in config.tabelas.inss.faixas:
        inss.add_row(_fmt(faixa.ate), f"{faixa.aliquota:.1%}")
    console.print(inss)

    irrf = Table(
        title=f"IRRF {config.ano} (dedução por dependente {_fmt(config.tabelas.irrf.deducao_dependente)})",
        box=box.ROUNDED,
    )
    irrf.add_column("De", justify="right")
    irrf.add_column("Até (exclusive)", justify="right")
    irrf.add_column("Alíquota", justify="right")
    irrf.add_column("Deduzir", justify="right")
    for faixa in config.tabelas.irrf.faixas:
        irrf.add_row(
            _fmt(faixa.de),
            _fmt(faixa.ate) if faixa.ate is not None else "acima",
            f"{faixa.aliquota:.1%}",
            _fmt(faixa.deduzir),
        )
    console.print(irrf)


def render_defaults(console: Console, defaults: Dict[str, Any]) -> None:
    """Render calculated avos / notice days for a pair of dates."""
    table = Table(show_header=False, box=box.ROUNDED)
    table.add_column("key", style="dim")
    table.add_column("value", justify="right")

    table.add_row("Meses de vínculo", str(defaults["months_of_service"]))
    table.add_row("Dias de vínculo", str(defaults["days_of_service"]))
    table.add_row("Avos de férias", f"{defaults['vacation_fraction']}/12")
    table.add_row("Avos de 13º", f"{defaults['thirteenth_fraction']}/12")
    table.add_row("Dias de aviso", str(defaults["notice_days"]))

    console.print(table)


def _fmt(amount: float | None) -> str:
    """Format currency amount as BRL (R$ 1.234,56)."""
    if amount is None:
        return "-"
    text = f"{amount:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"R$ {text}"
