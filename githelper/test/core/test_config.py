"""Tests for githelper.core.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from githelper.core.config import Config, GlobalOptions, load_config
from githelper.core.result import Err, Ok


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


class TestDefaults:
    def test_defaults(self) -> None:
        config = Config()
        assert config.github_token is None
        assert config.use_ssh is True
        assert config.no_fzf is False
        assert config.main_branch == "main"

    def test_frozen(self) -> None:
        config = Config()
        with pytest.raises(AttributeError):
            config.debug = True  # type: ignore[misc]


class TestLoadConfig:
    def test_missing_default_file_is_fine(self) -> None:
        result = load_config(env={})
        assert isinstance(result, Ok)
        assert result.value == Config()

    def test_reads_default_file(self, isolated_home: Path) -> None:
        (isolated_home / ".githelper.yaml").write_text(
            "github_token: ghp_abc\nmain_branch: trunk\nuse_ssh: false\n", encoding="utf-8"
        )
        result = load_config(env={})
        assert isinstance(result, Ok)
        assert result.value.github_token == "ghp_abc"
        assert result.value.main_branch == "trunk"
        assert result.value.use_ssh is False
        assert result.value.source == isolated_home / ".githelper.yaml"

    def test_explicit_missing_file_is_error(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "nope.yaml", env={})
        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_invalid_yaml_is_error(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("github_token: [unclosed\n", encoding="utf-8")
        result = load_config(path, env={})
        assert isinstance(result, Err)
        assert "Invalid YAML" in result.error.message

    def test_non_mapping_root_is_error(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        result = load_config(path, env={})
        assert isinstance(result, Err)

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        result = load_config(path, env={})
        assert isinstance(result, Ok)
        assert result.value.main_branch == "main"

    def test_environment_overrides_file(self, tmp_path: Path) -> None:
        path = tmp_path / "c.yaml"
        path.write_text("github_token: from-file\nno_fzf: false\n", encoding="utf-8")
        env = {"GITHELPER_GITHUB_TOKEN": "from-env", "GITHELPER_NO_FZF": "yes"}
        result = load_config(path, env=env)
        assert isinstance(result, Ok)
        assert result.value.github_token == "from-env"
        assert result.value.no_fzf is True

    def test_unrecognised_env_bool_is_ignored(self) -> None:
        result = load_config(env={"GITHELPER_USE_SSH": "maybe"})
        assert isinstance(result, Ok)
        assert result.value.use_ssh is True


class TestOptions:
    def test_flags_switch_on(self) -> None:
        config = Config().with_options(GlobalOptions(debug=True, no_fzf=True))
        assert config.debug is True
        assert config.no_fzf is True

    def test_absent_flags_keep_loaded_values(self) -> None:
        config = Config(no_fzf=True).with_options(GlobalOptions())
        assert config.no_fzf is True


class TestDescribe:
    def test_secrets_are_not_printed(self) -> None:
        config = Config(github_token="ghp_secret", openai_api_key="sk-secret")
        text = "\n".join(config.describe())
        assert "ghp_secret" not in text
        assert "sk-secret" not in text
        assert "github token present: True" in text
        assert "openai api key present: True" in text
