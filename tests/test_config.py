"""
Tests for configuration loading — installer.yml parsing and validation.
"""

import textwrap
from pathlib import Path

import pytest

from bertenv.core.config.loader import ConfigError, find_config_file, load_settings
from bertenv.core.use_cases.config_check import check_config


@pytest.fixture
def flat_yml(tmp_path: Path) -> Path:
    path = tmp_path / "installer.yml"
    path.write_text(textwrap.dedent("""\
        python_version: "3.8"
        venv_dir: .venv
        requirements: requirements-gpu.txt
        torch_version: 1.10.0
    """))
    return path


@pytest.fixture
def wrapped_yml(tmp_path: Path) -> Path:
    path = tmp_path / "installer.yml"
    path.write_text(textwrap.dedent("""\
        installer:
          model_url: https://huggingface.co/bert-base-uncased
    """))
    return path


class TestFindConfigFile:
    def test_finds_in_dir(self, flat_yml: Path):
        assert find_config_file(flat_yml.parent) == flat_yml.resolve()

    def test_walks_up(self, flat_yml: Path):
        sub = flat_yml.parent / "a" / "b"
        sub.mkdir(parents=True)
        assert find_config_file(sub) == flat_yml.resolve()


class TestLoadSettings:
    def test_flat(self, flat_yml: Path):
        settings = load_settings(flat_yml)
        assert settings.python_version == "3.8"
        assert settings.venv_dir == ".venv"
        assert settings.requirements == "requirements-gpu.txt"
        assert settings.torch_version == "1.10.0"
        assert settings.torchvision_version == "0.10.0"

    def test_wrapped(self, wrapped_yml: Path):
        assert load_settings(wrapped_yml).model_url == "https://huggingface.co/bert-base-uncased"

    def test_defaults_when_absent(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_settings().venv_dir == "venv"

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "installer.yml"
        path.write_text("")
        assert load_settings(path).requirements == "requirements.txt"

    def test_explicit_missing(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="Config file not found"):
            load_settings(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "installer.yml"
        path.write_text("venv_dir: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "installer.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_settings(path)

    def test_unknown_key(self, tmp_path: Path):
        path = tmp_path / "installer.yml"
        path.write_text("cuda_version: 118\n")
        with pytest.raises(ConfigError, match="Invalid installer configuration"):
            load_settings(path)


class TestCheckConfig:
    def test_defaults_warn(self, tmp_path: Path):
        result = check_config(working_dir=tmp_path)
        assert result.valid
        assert any("No installer.yml" in w for w in result.warnings)
        assert any("requirements.txt" in w for w in result.warnings)

    def test_valid_file(self, flat_yml: Path):
        (flat_yml.parent / "requirements-gpu.txt").write_text("numpy\n")
        result = check_config(flat_yml, working_dir=flat_yml.parent)
        assert result.valid
        assert result.warnings == []
        assert result.to_dict()["settings"]["venv_dir"] == ".venv"

    def test_invalid_file(self, tmp_path: Path):
        path = tmp_path / "installer.yml"
        path.write_text("bogus: 1\n")
        result = check_config(path, working_dir=tmp_path)
        assert not result.valid
        assert result.errors
