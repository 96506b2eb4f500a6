"""
Tests for CLI commands — install, verify, channels, config check.
"""

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from bertenv.adapters.mock import MockAdapter
from bertenv.adapters.registry import AdapterRegistry
from bertenv.main import cli


@pytest.fixture
def scripted(monkeypatch, mock_adapter: MockAdapter) -> MockAdapter:
    """Route the CLI's real registry through ``mock_adapter``."""
    registry = AdapterRegistry()
    registry.set_mock_mode(True, mock_adapter=mock_adapter)
    monkeypatch.setattr(
        "bertenv.core.use_cases.install.build_default_registry",
        lambda mock_mode=False: registry,
    )
    return mock_adapter


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "BERT" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestInstallArguments:
    @pytest.mark.parametrize(
        "args, message",
        [
            (["pipenv"], "Invalid environment type: pipenv"),
            (["venv", "tpu"], "Invalid device: tpu"),
            (["venv", "gpu", "118"], "Invalid CUDA version: 118"),
            (["--device", "gpu", "--cuda", "90"], "Invalid CUDA version: 90"),
            (["venv", "--env-type", "conda"], "Conflicting values"),
        ],
    )
    def test_invalid_exits_1_before_running(self, project_dir, scripted, args, message):
        result = CliRunner().invoke(cli, ["install", *args])
        assert result.exit_code == 1
        assert message in result.output
        assert scripted.call_count == 0

    def test_invalid_cuda_lists_supported(self, project_dir, scripted):
        result = CliRunner().invoke(cli, ["install", "venv", "gpu", "118"])
        assert "Supported: 102 (CUDA 10.2), 110 (CUDA 11.0), 111 (CUDA 11.1), 113 (CUDA 11.3)" in result.output

    def test_invalid_json(self, project_dir, scripted):
        result = CliRunner().invoke(cli, ["install", "conda", "gpu", "999", "--json"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["error_kind"] == "invalid-argument"

    def test_cpu_ignores_bad_cuda(self, project_dir, scripted):
        result = CliRunner().invoke(cli, ["install", "venv", "cpu", "999"])
        assert result.exit_code == 0


class TestInstallRun:
    def test_success(self, project_dir, scripted):
        scripted.set_output("env.probe", "Python 3.9.7")
        result = CliRunner().invoke(cli, ["install"])
        assert result.exit_code == 0
        out = result.output
        assert "Environment: venv | Device: cpu" in out
        assert "[1/4] Setting up Python virtual environment (venv)..." in out
        assert "✅ Python 3.9.7" in out
        assert "Installing PyTorch (CPU version)..." in out
        assert "✅ Installation Completed Successfully!" in out
        assert "source venv/bin/activate" in out or "venv\\Scripts\\activate" in out
        assert "GPU Mode" not in out

    def test_gpu_conda_success(self, project_dir, scripted):
        result = CliRunner().invoke(cli, ["install", "conda", "gpu", "113", "nlp"])
        assert result.exit_code == 0
        assert "Creating Conda environment 'nlp' with Python 3.9..." in result.output
        assert "Installing PyTorch with CUDA 11.3..." in result.output
        assert "conda activate nlp" in result.output
        assert "GPU Mode: Training will be significantly faster!" in result.output

    def test_missing_conda(self, project_dir, scripted):
        scripted.set_failure("env.probe", "conda not found on PATH")
        result = CliRunner().invoke(cli, ["install", "conda"])
        assert result.exit_code == 1
        assert "Conda not found!" in result.output
        assert "Download: https://www.anaconda.com/products/miniconda" in result.output
        assert scripted.called_ids == ["env.probe"]

    def test_dependency_failure(self, project_dir, scripted):
        scripted.set_failure("deps.install", "ERROR: No matching distribution found")
        result = CliRunner().invoke(cli, ["install"])
        assert result.exit_code == 1
        assert "Dependency installation failed!" in result.output
        assert "No matching distribution" in result.output
        assert "deps.verify" not in scripted.called_ids
        assert "Installation Completed" not in result.output

    def test_driver_warning_keeps_exit_zero(self, project_dir, scripted):
        scripted.set_failure("gpu.driver", "nvidia-smi not found; no NVIDIA driver detected")
        result = CliRunner().invoke(cli, ["install", "--device", "gpu"])
        assert result.exit_code == 0
        assert "⚠️" in result.output

    def test_check_output_is_echoed(self, project_dir, scripted):
        scripted.set_output("torch.verify", "PyTorch 1.9.0+cpu\nCUDA available: False")
        result = CliRunner().invoke(cli, ["install"])
        assert "PyTorch 1.9.0+cpu" in result.output
        assert "✅ PyTorch installed successfully" in result.output

    def test_json(self, project_dir, scripted):
        result = CliRunner().invoke(cli, ["install", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["report"]["status"] == "ok"
        assert data["guidance"]["steps"]

    def test_json_failure(self, project_dir, scripted):
        scripted.set_failure("deps.verify")
        result = CliRunner().invoke(cli, ["install", "--json"])
        assert result.exit_code == 1
        assert json.loads(result.output)["report"]["error_kind"] == "verification-failed"

    def test_mock_flag(self, project_dir):
        result = CliRunner().invoke(cli, ["install", "--mock"])
        assert result.exit_code == 0
        assert "Installation Completed Successfully!" in result.output

    def test_dry_run(self, project_dir):
        result = CliRunner().invoke(cli, ["install", "venv", "gpu", "111", "--dry-run"])
        assert result.exit_code == 0
        assert "torch==1.9.0+cu111" in result.output
        assert "--index-url https://download.pytorch.org/whl/cu111" in result.output
        assert "none executed" in result.output
        assert not (project_dir / "venv").exists()

    def test_requirements_override(self, project_dir):
        result = CliRunner().invoke(cli, ["install", "-r", "requirements-dev.txt", "--dry-run"])
        assert "-r requirements-dev.txt" in result.output

    def test_config_file_applies(self, project_dir):
        (project_dir / "installer.yml").write_text("venv_dir: .venv\n")
        result = CliRunner().invoke(cli, ["install", "--dry-run"])
        assert "-m venv .venv" in result.output

    def test_bad_config_exits_1(self, project_dir, scripted):
        (project_dir / "installer.yml").write_text("nope: true\n")
        result = CliRunner().invoke(cli, ["install"])
        assert result.exit_code == 1
        assert "Invalid installer configuration" in result.output
        assert scripted.call_count == 0


class TestVerifyCommand:
    def test_ok(self, project_dir, scripted):
        result = CliRunner().invoke(cli, ["verify"])
        assert result.exit_code == 0
        assert scripted.called_ids == ["deps.verify"]

    def test_failure(self, project_dir, scripted):
        scripted.set_failure("deps.verify", "No module named 'transformers'")
        result = CliRunner().invoke(cli, ["verify", "conda", "-n", "nlp"])
        assert result.exit_code == 1
        assert "Verification failed!" in result.output

    def test_invalid_env(self, project_dir, scripted):
        result = CliRunner().invoke(cli, ["verify", "docker"])
        assert result.exit_code == 1


class TestChannelsCommand:
    def test_table(self):
        result = CliRunner().invoke(cli, ["channels"])
        assert result.exit_code == 0
        assert "cu111" in result.output
        assert "(default)" in result.output

    def test_json(self):
        result = CliRunner().invoke(cli, ["channels", "--json"])
        rows = json.loads(result.output)
        assert [r["code"] for r in rows] == ["102", "110", "111", "113"]
        assert rows[2] == {
            "code": "111",
            "channel": "cu111",
            "label": "CUDA 11.1",
            "min_driver": "455.23",
            "default": True,
        }


class TestConfigCheckCommand:
    def test_defaults(self, project_dir):
        result = CliRunner().invoke(cli, ["config", "check"])
        assert result.exit_code == 0
        assert "valid" in result.output.lower()

    def test_invalid(self, tmp_path: Path):
        path = tmp_path / "installer.yml"
        path.write_text(textwrap.dedent("""\
            installer:
              torch: 2.0
        """))
        result = CliRunner().invoke(cli, ["--config", str(path), "config", "check", "--json"])
        assert result.exit_code == 1
        assert json.loads(result.output)["valid"] is False
