"""Unit tests for Config and related Pydantic models (create_rando_app.config).

Tests cover:
- GitConfig / InstallerConfig defaults and derived argv
- Config defaults, save/load, from_env
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from create_rando_app.config import DEFAULT_API_URL, Config, GitConfig, InstallerConfig


class TestGitConfig:
    @pytest.mark.unit
    def test_defaults(self):
        git = GitConfig()
        assert git.default_branch == "main"
        assert git.commit_message == "Initial commit: Add .gitignore"
        assert git.ignore_filename == ".gitignore"
        assert git.ignore_content == "node_modules\n"

    @pytest.mark.unit
    def test_empty_branch_rejected(self):
        with pytest.raises(ValidationError):
            GitConfig(default_branch="")


class TestInstallerConfig:
    @pytest.mark.unit
    def test_default_argv_forces_install(self):
        installer = InstallerConfig()
        assert installer.argv == ["npm", "install", "--force"]
        assert installer.display == "npm install --force"

    @pytest.mark.unit
    def test_custom_command(self):
        installer = InstallerConfig(command="pnpm")
        assert installer.argv == ["pnpm", "install", "--force"]

    @pytest.mark.unit
    def test_args_not_shared_between_instances(self):
        a = InstallerConfig()
        a.args.append("--verbose")
        assert InstallerConfig().args == ["install", "--force"]


class TestConfigDefaults:
    @pytest.mark.unit
    def test_defaults(self):
        config = Config()
        assert config.api_url == DEFAULT_API_URL
        assert config.api_url.endswith("/api/trpc/challenge.getCurrentChallenge")
        assert config.request_timeout is None
        assert config.default_project_name == "my-rando-app"
        assert config.manifest_filename == "package.json"
        assert config.metadata_filename == "devrando.config.json"

    @pytest.mark.unit
    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ValidationError):
            Config(request_timeout=0)


class TestConfigSaveLoad:
    @pytest.mark.unit
    def test_roundtrip(self, tmp_path: Path):
        config = Config(
            api_url="http://localhost:9999/api",
            installer=InstallerConfig(command="yarn"),
        )
        path = config.save(tmp_path / "nested" / "config.json")
        assert path.exists()

        loaded = Config.load(path)
        assert loaded == config
        assert loaded.installer.command == "yarn"

    @pytest.mark.unit
    def test_saved_file_is_json(self, tmp_path: Path):
        path = Config().save(tmp_path / "config.json")
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["git"]["default_branch"] == "main"


class TestConfigFromEnv:
    @pytest.mark.unit
    def test_no_env_gives_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            config = Config.from_env()
        assert config == Config()

    @pytest.mark.unit
    def test_overrides(self):
        env = {
            "RANDO_API_URL": "http://example.test/api",
            "RANDO_PROJECT_NAME": "chaos",
            "RANDO_PACKAGE_MANAGER": "pnpm",
            "RANDO_GIT_BRANCH": "trunk",
            "RANDO_REQUEST_TIMEOUT": "2.5",
        }
        with patch.dict("os.environ", env, clear=True):
            config = Config.from_env()
        assert config.api_url == "http://example.test/api"
        assert config.default_project_name == "chaos"
        assert config.installer.command == "pnpm"
        assert config.installer.args == ["install", "--force"]
        assert config.git.default_branch == "trunk"
        assert config.request_timeout == 2.5

    @pytest.mark.unit
    def test_empty_values_ignored(self):
        with patch.dict("os.environ", {"RANDO_API_URL": ""}, clear=True):
            config = Config.from_env()
        assert config.api_url == DEFAULT_API_URL
