"""Tests for audited overrides of avos and notice days."""

import pytest
from pydantic import ValidationError

from rescisao.sdk import calculate_settlement
from rescisao.sdk.audit import JUSTIFICATION_MISSING, AuditLog, resolve_adjustable
from rescisao.sdk.config import get_bundled_tables_dir, load_config_file
from rescisao.sdk.schemas import Adjustable, Adjustables


@pytest.fixture(scope="module")
def config_2024():
    return load_config_file(get_bundled_tables_dir() / "2024.yaml")


def make_input(adjustables):
    """3000/month, Jan 2024 -> Jul 2024 (6 vacation avos, 30 notice days)."""
    return {
        "base_salary": 3000.00,
        "hire_date": "2024-01-10",
        "termination_date": "2024-07-20",
        "reason_code": "02",
        "notice_type": "INDENIZADO",
        "adjustables": adjustables,
    }


class TestResolveAdjustable:

    def test_not_supplied_uses_default(self):
        log = AuditLog()
        assert resolve_adjustable(None, 6, "Avos de férias", log) == 6
        assert len(log) == 0

    def test_edited_equal_to_calculated_is_not_logged(self):
        log = AuditLog()
        adj = Adjustable(calculated=6, edited=6, justification="igual")
        assert resolve_adjustable(adj, 6, "Avos de férias", log) == 6
        assert len(log) == 0

    def test_override_logs_manual_entry(self):
        log = AuditLog()
        adj = Adjustable(calculated=6, edited=10, justification="Acordo coletivo")
        assert resolve_adjustable(adj, 6, "Avos de férias", log, suffix="/12") == 10

        (entry,) = log.entries()
        assert entry.kind == "MANUAL"
        assert entry.message == "Avos de férias alterado de 6/12 para 10/12. Justificativa: Acordo coletivo"

    @pytest.mark.parametrize("justification", [None, "", "   "])
    def test_missing_justification_placeholder(self, justification):
        log = AuditLog()
        adj = Adjustable(calculated=30, edited=45, justification=justification)
        resolve_adjustable(adj, 30, "Dias de aviso", log)
        assert log.entries()[0].message.endswith(f"Justificativa: {JUSTIFICATION_MISSING}")

    def test_entries_are_immutable_snapshot(self):
        log = AuditLog()
        log.info("um")
        snapshot = log.entries()
        log.warn("dois")
        assert len(snapshot) == 1
        assert isinstance(snapshot, tuple)


class TestAdjustablesValidation:

    def test_avos_above_twelve_rejected(self):
        with pytest.raises(ValidationError, match="between 0 and 12"):
            Adjustables.model_validate({"vacation_fraction": {"calculated": 6, "edited": 13}})

    def test_notice_days_not_capped(self):
        adj = Adjustables.model_validate({"notice_days": {"calculated": 30, "edited": 120}})
        assert adj.notice_days.edited == 120

    def test_negative_edit_rejected(self):
        with pytest.raises(ValidationError):
            Adjustable(calculated=6, edited=-1)


class TestOverridesInSettlement:

    def test_vacation_override(self, config_2024):
        result = calculate_settlement(
            make_input({"vacation_fraction": {"calculated": 6, "edited": 10, "justification": "Revisão"}}),
            config_2024,
        )
        assert result.vacation_fraction_used == 10
        assert result.line_value("FERIAS_PROP") == 2500.00
        (entry,) = result.log_entries("MANUAL")
        assert entry.message == "Avos de férias alterado de 6/12 para 10/12. Justificativa: Revisão"

    def test_notice_override_changes_projection(self, config_2024):
        result = calculate_settlement(
            make_input({"notice_days": {"calculated": 30, "edited": 45, "justification": "CCT"}}),
            config_2024,
        )
        assert result.notice_days_used == 45
        assert result.line_value("AVISO_PREVIO_INDENIZADO") == 4500.00
        assert result.line_value("FERIAS_PROJECAO_AVISO") == 500.00
        assert result.line_value("DECIMO_TERCEIRO_PROJECAO_AVISO") == 500.00
        assert result.log_entries("MANUAL")[0].message == (
            "Dias de aviso alterado de 30 para 45. Justificativa: CCT"
        )

    def test_thirteenth_override(self, config_2024):
        result = calculate_settlement(
            make_input({"thirteenth_fraction": {"calculated": 8, "edited": 7}}),
            config_2024,
        )
        assert result.thirteenth_fraction_used == 7
        assert result.line_value("DECIMO_TERCEIRO") == 1750.00

    def test_zero_avos_drop_lines(self, config_2024):
        result = calculate_settlement(
            make_input({
                "vacation_fraction": {"calculated": 6, "edited": 0, "justification": "Férias gozadas"},
                "thirteenth_fraction": {"calculated": 8, "edited": 0, "justification": "Pago"},
            }),
            config_2024,
        )
        assert result.lines_by_code("FERIAS_PROP") == []
        assert result.lines_by_code("DECIMO_TERCEIRO") == []
        assert len(result.log_entries("MANUAL")) == 2

    def test_no_overrides_no_manual_entries(self, config_2024):
        result = calculate_settlement(make_input({}), config_2024)
        assert result.log_entries("MANUAL") == []
        assert result.vacation_fraction_used == 6
        assert result.thirteenth_fraction_used == 8
        assert result.notice_days_used == 30
