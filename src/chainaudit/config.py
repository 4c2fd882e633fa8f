"""Layered configuration for chainaudit.

Precedence, lowest first::

    hardcoded defaults < YAML file < environment variables

The YAML file is ``.chainaudit.yml`` in the working directory unless an
explicit path is given. Keys are the ``AuditConfig`` field names::

    model: llama-3.3-70b-versatile
    ai_timeout: 20
    ai_max_findings: 3
    compliance_threshold: 80

The API key is normally supplied through ``GROQ_API_KEY`` rather than the
file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from chainaudit.enhancement.groq import DEFAULT_BASE_URL, DEFAULT_MODEL
from chainaudit.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".chainaudit.yml"

# Upper bound on AI enhancement calls per analysis.
MAX_AI_FINDINGS = 3

# (environment variable, config field, type tag)
_ENV_MAPPINGS: tuple[tuple[str, str, str], ...] = (
    ("GROQ_API_KEY", "api_key", "str"),
    ("GROQ_MODEL", "model", "str"),
    ("GROQ_BASE_URL", "base_url", "str"),
    ("CHAINAUDIT_AI_TIMEOUT", "ai_timeout", "float"),
    ("CHAINAUDIT_AI_MAX_FINDINGS", "ai_max_findings", "int"),
    ("CHAINAUDIT_COMPLIANCE_THRESHOLD", "compliance_threshold", "int"),
)


@dataclass(frozen=True)
class AuditConfig:
    """Settings for one chainaudit process.

    Attributes:
        api_key: Bearer token for the AI collaborator. Empty disables the
            AI step.
        model: Chat model used for enhancement.
        base_url: Root of the OpenAI-compatible API.
        ai_timeout: Per-request timeout for enhancement calls, seconds.
        ai_max_findings: How many Critical/High findings are enhanced,
            at most ``MAX_AI_FINDINGS``.
        compliance_threshold: Percentage below which the report recommends
            improving compliance.
    """

    api_key: str = ""
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    ai_timeout: float = 20.0
    ai_max_findings: int = 3
    compliance_threshold: int = 80

    @property
    def ai_enabled(self) -> bool:
        return bool(self.api_key)

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ConfigurationError: If any value is out of range.
        """
        if self.ai_timeout <= 0:
            raise ConfigurationError(f"ai_timeout must be positive, got {self.ai_timeout}")
        if not 0 <= self.ai_max_findings <= MAX_AI_FINDINGS:
            raise ConfigurationError(
                f"ai_max_findings must be in [0, {MAX_AI_FINDINGS}], got {self.ai_max_findings}"
            )
        if not 0 <= self.compliance_threshold <= 100:
            raise ConfigurationError(
                f"compliance_threshold must be in [0, 100], got {self.compliance_threshold}"
            )
        if not self.model:
            raise ConfigurationError("model must not be empty")


def _coerce(raw: str, type_tag: str) -> Any:
    """Convert a raw env-var string to the appropriate Python type."""
    if type_tag == "int":
        return int(raw)
    if type_tag == "float":
        return float(raw)
    return raw


def load_env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Read configuration values from explicitly-set environment variables.

    Absent variables are skipped. A value that cannot be converted is
    logged and ignored so the lower layers stay in effect.
    """
    env = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    for env_name, key, type_tag in _ENV_MAPPINGS:
        if env_name not in env:
            continue
        try:
            overrides[key] = _coerce(env[env_name], type_tag)
        except ValueError as exc:
            logger.warning(
                "Ignoring env var %s: could not convert %r to %s (%s)",
                env_name, env[env_name], type_tag, exc,
            )
    return overrides


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Load a YAML config file as a flat dict of known keys.

    Raises:
        ConfigurationError: If the file is unreadable, is not a mapping,
            or contains unknown keys.
    """
    logger.info("Loading configuration from %s", path)
    try:
        with open(path, "r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Cannot read config file {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    known = {f.name for f in fields(AuditConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigurationError(f"Unknown config keys in {path}: {', '.join(unknown)}")
    return dict(raw)


def load_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> AuditConfig:
    """Build the effective configuration.

    Args:
        path: Explicit YAML file. When None, ``.chainaudit.yml`` in the
            working directory is used if it exists.
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        A validated ``AuditConfig``.

    Raises:
        ConfigurationError: If the file is invalid, an explicit ``path``
            does not exist, or a value is out of range.
    """
    layers: dict[str, Any] = {}
    if path is not None:
        file_path = Path(path)
        if not file_path.is_file():
            raise ConfigurationError(f"Config file not found: {file_path}")
        layers.update(load_yaml_config(file_path))
    elif Path(CONFIG_FILENAME).is_file():
        layers.update(load_yaml_config(Path(CONFIG_FILENAME)))
    layers.update(load_env_overrides(environ))

    try:
        config = replace(AuditConfig(), **layers)
    except TypeError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
    try:
        config.validate()
    except TypeError as exc:
        raise ConfigurationError(f"Invalid configuration value type: {exc}") from exc
    return config
