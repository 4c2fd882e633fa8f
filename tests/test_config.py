"""Tests for layered configuration loading.

Verifies:
- Defaults apply when no file or environment variable is present.
- The YAML file in the working directory overrides defaults.
- Environment variables override the file.
- Invalid files, unknown keys and out-of-range values are rejected.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from chainaudit.config import (
    CONFIG_FILENAME,
    MAX_AI_FINDINGS,
    AuditConfig,
    load_config,
    load_env_overrides,
)
from chainaudit.enhancement.groq import DEFAULT_MODEL
from chainaudit.exceptions import ConfigurationError


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestDefaults:
    def test_no_layers(self, workdir: Path) -> None:
        config = load_config(environ={})
        assert config == AuditConfig()
        assert config.model == DEFAULT_MODEL
        assert config.ai_max_findings == 3
        assert not config.ai_enabled


class TestYamlLayer:
    def test_working_directory_file(self, workdir: Path) -> None:
        (workdir / CONFIG_FILENAME).write_text(
            "ai_max_findings: 1\ncompliance_threshold: 70\n", encoding="utf-8",
        )
        config = load_config(environ={})
        assert config.ai_max_findings == 1
        assert config.compliance_threshold == 70

    def test_explicit_path(self, workdir: Path) -> None:
        path = workdir / "custom.yml"
        path.write_text("model: mixtral\n", encoding="utf-8")
        assert load_config(path, environ={}).model == "mixtral"

    def test_explicit_path_missing(self, workdir: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(workdir / "absent.yml", environ={})

    def test_empty_file(self, workdir: Path) -> None:
        (workdir / CONFIG_FILENAME).write_text("", encoding="utf-8")
        assert load_config(environ={}) == AuditConfig()

    @pytest.mark.parametrize(
        ("content", "message"),
        [
            ("- a\n- b\n", "mapping"),
            ("colour: blue\n", "Unknown config keys"),
            ("model: [unclosed\n", "Cannot read"),
            ("ai_timeout: -1\n", "ai_timeout"),
            ("compliance_threshold: 101\n", "compliance_threshold"),
            ("ai_max_findings: 4\n", "ai_max_findings"),
            ("ai_timeout: fast\n", "Invalid configuration"),
        ],
    )
    def test_invalid_file(self, workdir: Path, content: str, message: str) -> None:
        (workdir / CONFIG_FILENAME).write_text(content, encoding="utf-8")
        with pytest.raises(ConfigurationError, match=message):
            load_config(environ={})


class TestEnvironmentLayer:
    def test_env_overrides_file(self, workdir: Path) -> None:
        (workdir / CONFIG_FILENAME).write_text("ai_max_findings: 1\n", encoding="utf-8")
        config = load_config(environ={
            "CHAINAUDIT_AI_MAX_FINDINGS": "2",
            "GROQ_API_KEY": "gsk-test",
            "CHAINAUDIT_AI_TIMEOUT": "7.5",
        })
        assert config.ai_max_findings == 2
        assert config.api_key == "gsk-test"
        assert config.ai_timeout == 7.5
        assert config.ai_enabled

    def test_unconvertible_value_ignored(self, caplog: pytest.LogCaptureFixture) -> None:
        overrides = load_env_overrides({"CHAINAUDIT_AI_MAX_FINDINGS": "many", "GROQ_MODEL": "m"})
        assert overrides == {"model": "m"}
        assert "CHAINAUDIT_AI_MAX_FINDINGS" in caplog.text

    def test_unrelated_variables_skipped(self) -> None:
        assert load_env_overrides({"HOME": "/root"}) == {}


class TestValidate:
    @pytest.mark.parametrize(
        "config",
        [
            AuditConfig(ai_timeout=0),
            AuditConfig(ai_max_findings=-1),
            AuditConfig(ai_max_findings=MAX_AI_FINDINGS + 1),
            AuditConfig(compliance_threshold=-5),
            AuditConfig(model=""),
        ],
    )
    def test_out_of_range(self, config: AuditConfig) -> None:
        with pytest.raises(ConfigurationError):
            config.validate()

    def test_env_cannot_raise_ai_call_budget(self, workdir: Path) -> None:
        with pytest.raises(ConfigurationError, match="ai_max_findings"):
            load_config(environ={"CHAINAUDIT_AI_MAX_FINDINGS": "50"})

    def test_upper_bound_accepted(self) -> None:
        AuditConfig(ai_max_findings=MAX_AI_FINDINGS).validate()
