"""Tests for tables loading and directory resolution."""

import pytest
import yaml
from pydantic import ValidationError

from rescisao.sdk.config import (
    SettlementConfig,
    TablesNotFoundError,
    available_years,
    clear_config_cache,
    find_tables_file,
    get_bundled_tables_dir,
    get_tables_search_path,
    get_user_tables_dir,
    load_config_file,
    load_settlement_config,
)


@pytest.fixture
def isolated_tables(tmp_path, monkeypatch):
    """Empty env and XDG tables directories; bundled tables still visible."""
    env_dir = tmp_path / "env_tables"
    xdg_home = tmp_path / "xdg"
    env_dir.mkdir()

    monkeypatch.setenv("RESCISAO_TABLES_PATH", str(env_dir))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg_home))
    clear_config_cache()
    yield {"env_dir": env_dir, "user_dir": xdg_home / "rescisao" / "tabelas"}
    clear_config_cache()


def bundled_data(year):
    with open(get_bundled_tables_dir() / f"{year}.yaml", encoding="utf-8") as f:
        return yaml.safe_load(f)


class TestSearchPath:

    def test_order(self, isolated_tables):
        path = get_tables_search_path()
        assert path == [
            isolated_tables["env_dir"],
            isolated_tables["user_dir"],
            get_bundled_tables_dir(),
        ]

    def test_without_env_var(self, isolated_tables, monkeypatch):
        monkeypatch.delenv("RESCISAO_TABLES_PATH")
        assert get_tables_search_path() == [get_user_tables_dir(), get_bundled_tables_dir()]

    def test_bundled_years(self, isolated_tables):
        assert available_years()[:2] == [2025, 2024]


class TestYearResolution:

    def test_exact_year(self, isolated_tables):
        assert find_tables_file(2024) == get_bundled_tables_dir() / "2024.yaml"

    def test_falls_back_to_prior_year(self, isolated_tables):
        assert find_tables_file(2030) == get_bundled_tables_dir() / "2025.yaml"
        assert load_settlement_config(2030).ano == 2025

    def test_no_prior_year(self, isolated_tables):
        with pytest.raises(TablesNotFoundError, match="1999"):
            find_tables_file(1999)

    def test_default_is_latest(self, isolated_tables):
        assert load_settlement_config().ano == 2025

    def test_env_dir_wins(self, isolated_tables):
        data = bundled_data(2025)
        data["motivos"] = [m for m in data["motivos"] if m["codigo"] != "33"]
        (isolated_tables["env_dir"] / "2025.yaml").write_text(
            yaml.safe_dump(data, allow_unicode=True), encoding="utf-8"
        )

        config = load_settlement_config(2025)
        assert "33" not in {m.codigo for m in config.motivos}

    def test_user_dir_adds_year(self, isolated_tables):
        data = bundled_data(2025)
        data["ano"] = 2026
        user_dir = isolated_tables["user_dir"]
        user_dir.mkdir(parents=True)
        (user_dir / "2026.yaml").write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")

        assert available_years()[0] == 2026
        assert load_settlement_config(2027).ano == 2026

    def test_cached(self, isolated_tables):
        assert load_settlement_config(2024) is load_settlement_config(2024)


class TestBundledTables:

    @pytest.mark.parametrize("year", [2024, 2025])
    def test_valid(self, year):
        config = load_config_file(get_bundled_tables_dir() / f"{year}.yaml")
        assert config.ano == year
        # every reason resolves to a category
        for motivo in config.motivos:
            config.resolve(motivo.codigo)

    def test_2025_values(self):
        config = load_config_file(get_bundled_tables_dir() / "2025.yaml")
        assert config.tabelas.inss.teto == 8157.41
        assert config.tabelas.irrf.deducao_dependente == 189.59
        assert config.tabelas.irrf.faixas[0].ate == 2428.81

    def test_categories(self):
        config = load_config_file(get_bundled_tables_dir() / "2024.yaml")
        _, sem_justa = config.resolve("02")
        _, acordo = config.resolve("33")
        _, pedido = config.resolve("07")
        assert sem_justa.multa_fgts_percent == 0.40
        assert acordo.fator_aviso == 0.5 and acordo.multa_fgts_percent == 0.20
        assert pedido.desconto_aviso and not pedido.aviso


class TestValidation:

    def test_duplicate_reason_codes(self):
        data = bundled_data(2024)
        data["motivos"].append(dict(data["motivos"][0]))
        with pytest.raises(ValidationError, match="Duplicate"):
            SettlementConfig.model_validate(data)

    def test_unknown_key_rejected(self):
        data = bundled_data(2024)
        data["categorias"]["JUSTA_CAUSA"]["ferias_dobro"] = True
        with pytest.raises(ValidationError):
            SettlementConfig.model_validate(data)

    def test_config_is_frozen(self):
        config = load_config_file(get_bundled_tables_dir() / "2024.yaml")
        with pytest.raises(ValidationError):
            config.ano = 2030
