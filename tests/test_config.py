import pytest

from config import CONFIG_ENV_VAR, ConfigurationManager, get_config


@pytest.fixture
def fresh_config(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    ConfigurationManager.reset()
    yield
    ConfigurationManager.reset()


def test_defaults_are_loaded(fresh_config):
    assert get_config("input.pdf.backend") == "pdfplumber"
    assert get_config("postprocessing.defaults.due_in_days") == 14
    assert get_config("paths.account_mapping").endswith("account_mapping.yaml")
    assert get_config("missing.key", "fallback") == "fallback"
    assert get_config("input.pdf.backend.deeper", "fallback") == "fallback"


def test_site_file_is_layered_over_defaults(fresh_config, tmp_path):
    site = tmp_path / "site.yaml"
    site.write_text(
        "paths:\n  output_dir: out\n"
        "postprocessing:\n  defaults:\n    due_in_days: 30\n",
        encoding="utf-8",
    )

    ConfigurationManager(site)
    assert get_config("postprocessing.defaults.due_in_days") == 30
    assert get_config("postprocessing.defaults.enabled") is True
    assert get_config("paths.output_dir") == str(tmp_path / "out")


def test_site_file_from_environment(fresh_config, tmp_path, monkeypatch):
    site = tmp_path / "env.yaml"
    site.write_text("input:\n  pdf:\n    backend: pymupdf\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(site))

    assert get_config("input.pdf.backend") == "pymupdf"


def test_missing_site_file(fresh_config, tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigurationManager(tmp_path / "nope.yaml")


def test_reload_picks_up_edited_site_file(fresh_config, tmp_path):
    site = tmp_path / "site.yaml"
    site.write_text("output:\n  json:\n    indent: 4\n", encoding="utf-8")
    config = ConfigurationManager(site)
    assert get_config("output.json.indent") == 4

    site.write_text("output:\n  json:\n    indent: 0\n", encoding="utf-8")
    assert get_config("output.json.indent") == 4

    config.reload()
    assert get_config("output.json.indent") == 0
    assert get_config("input.pdf.backend") == "pdfplumber"
