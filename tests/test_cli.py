"""
Tests for CLI commands — run, plan, inventory, config check.
"""

import json
from pathlib import Path

from click.testing import CliRunner

from orchestra.main import cli


def _invoke(workspace_yml: Path, *args: str):
    runner = CliRunner()
    return runner.invoke(cli, ["--config", str(workspace_yml), *args])


class TestRunCommand:
    def test_mock_build(self, workspace_yml: Path):
        result = _invoke(workspace_yml, "run", "build", "--mock")
        assert result.exit_code == 0
        assert "▶ pubsub [kafka]" in result.output
        assert "9 executed, 0 skipped" in result.output

    def test_mock_clippy_shows_skips(self, workspace_yml: Path):
        result = _invoke(workspace_yml, "run", "clippy", "--mock")
        assert result.exit_code == 0
        assert "⊘ proto" in result.output
        assert "6 executed, 3 skipped" in result.output

    def test_algorithm_arguments(self, workspace_yml: Path):
        result = _invoke(workspace_yml, "run", "test", "sm3hash", "sm2", "false", "--mock")
        assert result.exit_code == 0
        assert "proto [sm3hash sm2]" in result.output
        assert "sm3hash+sm2" in result.output

    def test_unknown_action(self, workspace_yml: Path):
        result = _invoke(workspace_yml, "run", "lint", "--mock")
        assert result.exit_code == 1
        assert "Unknown action 'lint'" in result.output
        assert "▶" not in result.output

    def test_unknown_hash(self, workspace_yml: Path):
        result = _invoke(workspace_yml, "run", "build", "md5", "--mock")
        assert result.exit_code == 1
        assert "Unknown hash algorithm" in result.output

    def test_unaccounted_module(self, workspace_root: Path, workspace_yml: Path):
        (workspace_root / "newcrate").mkdir()
        result = _invoke(workspace_yml, "run", "build", "--mock")
        assert result.exit_code == 1
        assert "• newcrate" in result.output

    def test_upload_with_test(self, workspace_yml: Path):
        result = _invoke(workspace_yml, "run", "test", "", "", "true", "--mock")
        assert result.exit_code == 0
        assert "Coverage:" in result.output

    def test_mock_builtin_plan_without_checkout(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = CliRunner().invoke(cli, ["run", "build", "--mock"])
        assert result.exit_code == 0
        assert "pubsub [kafka]" in result.output
        assert "cannot enter" not in result.output

    def test_json(self, workspace_yml: Path):
        result = _invoke(workspace_yml, "run", "build", "--mock", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["state"] == "done"
        assert data["executed"] == 9

    def test_quiet_hides_progress(self, workspace_yml: Path):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["--quiet", "--config", str(workspace_yml), "run", "build", "--mock"]
        )
        assert result.exit_code == 0
        assert "▶" not in result.output


class TestPlanCommand:
    def test_plan(self, workspace_yml: Path):
        result = _invoke(workspace_yml, "plan", "clippy")
        assert result.exit_code == 0
        assert "transports" in result.output
        assert "⊘ hashable [sha3hash]" in result.output
        assert "9 invocations: 6 to run, 3 skipped" in result.output

    def test_plan_json(self, workspace_yml: Path):
        result = _invoke(workspace_yml, "plan", "build", "blake2b", "ed25519", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["plan"]["hash"] == "blake2bhash"
        assert data["plan"]["crypto"] == "ed25519"

    def test_plan_bad_action(self, workspace_yml: Path):
        result = _invoke(workspace_yml, "plan", "deploy")
        assert result.exit_code == 1


class TestInventoryCommand:
    def test_complete(self, workspace_yml: Path):
        result = _invoke(workspace_yml, "inventory")
        assert result.exit_code == 0
        assert "Every module is accounted for" in result.output

    def test_extra_directory(self, workspace_root: Path, workspace_yml: Path):
        (workspace_root / "newcrate").mkdir()
        result = _invoke(workspace_yml, "inventory")
        assert result.exit_code == 1
        assert "newcrate" in result.output

    def test_json(self, workspace_yml: Path):
        result = _invoke(workspace_yml, "inventory", "clippy", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["complete"] is True
        assert data["skipped"] == ["hashable", "crypto", "proto"]


class TestConfigCheckCommand:
    def test_valid(self, workspace_yml: Path):
        result = _invoke(workspace_yml, "config", "check")
        assert result.exit_code == 0
        assert "Configuration is valid" in result.output
        assert "Modules: 7" in result.output

    def test_invalid(self, tmp_path: Path):
        path = tmp_path / "orchestra.yml"
        path.write_text("stages: [\n")
        result = _invoke(path, "config", "check")
        assert result.exit_code == 1
        assert "Invalid YAML" in result.output

    def test_json(self, workspace_yml: Path):
        result = _invoke(workspace_yml, "config", "check", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["valid"] is True
        assert data["stage_count"] == 6
