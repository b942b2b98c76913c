"""Configuration loading for repowiki (.repowiki.yml plus environment overrides)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".repowiki.yml"

ENV_BASE_URL_KEYS = ("REPOWIKI_LLM_BASE_URL", "OPENAI_BASE_URL")
ENV_MODEL_KEYS = ("REPOWIKI_LLM_MODEL", "OPENAI_MODEL")
ENV_API_KEY_KEYS = ("REPOWIKI_LLM_API_KEY", "OPENAI_API_KEY")
ENV_GIT_HOST_KEYS = ("REPOWIKI_GIT_HOST",)
ENV_WORKSPACE_KEYS = ("REPOWIKI_WORKSPACE_ROOT",)


@dataclass(frozen=True)
class LLMConfig:
    """Completion endpoint settings."""

    base_url: str = "http://localhost:8317"
    model: str = "gpt-5-codex-mini"
    api_key: Optional[str] = None
    temperature: float = 0.3
    max_tokens: int = 8192
    request_timeout: float = 300.0


@dataclass(frozen=True)
class GitConfig:
    """Version-control executable and remote host."""

    host: str = "github.com"
    executable: str = "git"


@dataclass(frozen=True)
class SelectionLimits:
    """Character budgets applied while picking repository files."""

    max_total_chars: int = 60_000
    min_file_chars: int = 200
    max_file_chars: int = 30_000
    truncate_chars: int = 2_000
    max_identity_chars: int = 5_000
    max_prompt_files: int = 30


@dataclass(frozen=True)
class PipelineConfig:
    """Everything an ingestion pipeline needs, resolved up front."""

    llm: LLMConfig = field(default_factory=LLMConfig)
    git: GitConfig = field(default_factory=GitConfig)
    selection: SelectionLimits = field(default_factory=SelectionLimits)
    workspace_root: Optional[Path] = None


def load_config(
    config_path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> PipelineConfig:
    """Load configuration from disk (if present) and apply environment overrides."""
    env = os.environ if environ is None else environ
    data: Dict[str, Any] = {}
    root: Optional[Path] = None
    if config_path is not None:
        config_file = _resolve_config_path(config_path)
        root = config_file.parent
        if config_file.exists():
            data = _read_config(config_file)

    llm_data = _as_dict(data.get("llm"))
    defaults = LLMConfig()
    llm = LLMConfig(
        base_url=(
            _first_env_value(env, ENV_BASE_URL_KEYS)
            or _as_str(llm_data.get("base_url"))
            or defaults.base_url
        ).rstrip("/"),
        model=(
            _first_env_value(env, ENV_MODEL_KEYS)
            or _as_str(llm_data.get("model"))
            or defaults.model
        ),
        api_key=_first_env_value(env, ENV_API_KEY_KEYS) or _as_str(llm_data.get("api_key")),
        temperature=_pick(_as_float(llm_data.get("temperature")), defaults.temperature),
        max_tokens=_pick(_as_int(llm_data.get("max_tokens")), defaults.max_tokens),
        request_timeout=_pick(
            _as_float(llm_data.get("request_timeout")), defaults.request_timeout
        ),
    )

    git_data = _as_dict(data.get("git"))
    git_defaults = GitConfig()
    git = GitConfig(
        host=(
            _first_env_value(env, ENV_GIT_HOST_KEYS)
            or _as_str(git_data.get("host"))
            or git_defaults.host
        ),
        executable=_as_str(git_data.get("executable")) or git_defaults.executable,
    )

    selection = SelectionLimits()
    selection_data = _as_dict(data.get("selection"))
    overrides = {}
    for name in (
        "max_total_chars",
        "min_file_chars",
        "max_file_chars",
        "truncate_chars",
        "max_identity_chars",
        "max_prompt_files",
    ):
        value = _as_int(selection_data.get(name))
        if value is not None:
            if value < 0:
                raise ConfigError(f"selection.{name} must not be negative")
            overrides[name] = value
    if overrides:
        selection = replace(selection, **overrides)

    workspace_value = _first_env_value(env, ENV_WORKSPACE_KEYS) or _as_str(
        data.get("workspace_root")
    )
    workspace_root = None
    if workspace_value:
        workspace_root = Path(workspace_value).expanduser()
        if not workspace_root.is_absolute() and root is not None:
            workspace_root = root / workspace_root

    return PipelineConfig(
        llm=llm,
        git=git,
        selection=selection,
        workspace_root=workspace_root,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _first_env_value(env: Mapping[str, str], keys: Sequence[str]) -> str | None:
    for key in keys:
        value = env.get(key)
        if value:
            return value
    return None


def _pick(value: Any, default: Any) -> Any:
    return default if value is None else value


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "GitConfig",
    "LLMConfig",
    "PipelineConfig",
    "SelectionLimits",
    "load_config",
]
