"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Project config (.retro/config.yaml)
  2. User config (~/.retro/config.yaml)
  3. Environment variables (RETRO_LLM_PROVIDER, RETRO_LLM_MODEL)
  4. Defaults

API keys are NEVER stored in config files.
They must be provided via environment variables.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .content.prompts import MAX_SUGGESTIONS
from .presentation.symbols import get_symbols

logger = logging.getLogger(__name__)


# Supported providers and their defaults
PROVIDERS = {
    "claude": {
        "env_key": "ANTHROPIC_API_KEY",
        "default_model": "claude-haiku-4-5",
        "models": [
            # Lightweight / fast (default)
            "claude-haiku-4-5",
            # Balanced
            "claude-sonnet-4-5",
            # Large / Powerful
            "claude-opus-4-5",
        ]
    },
    "openai": {
        "env_key": "OPENAI_API_KEY",
        "default_model": "gpt-5-mini",
        "models": [
            "gpt-5-nano",
            "gpt-5-mini",
            "gpt-5",
            "gpt-4.1-mini",
        ]
    },
    "mock": {
        "env_key": "",
        "default_model": "mock",
        "models": ["mock"]
    },
}

DEFAULT_PROVIDER = "claude"
DEFAULT_DEBOUNCE_SECONDS = 5.0
DEFAULT_CONTEXT_LINES = 10


@dataclass
class LLMConfig:
    """Reviewer provider configuration."""
    provider: str = DEFAULT_PROVIDER
    model: Optional[str] = None  # None = use provider default

    @property
    def effective_model(self) -> str:
        """Get model, falling back to provider default."""
        if self.model:
            return self.model
        return PROVIDERS.get(self.provider, {}).get("default_model", "")

    @property
    def api_key_env(self) -> str:
        """Environment variable holding the API key ("" if none needed)."""
        return PROVIDERS.get(self.provider, {}).get("env_key", "")

    @property
    def api_key(self) -> Optional[str]:
        """Get API key from environment. Never stored."""
        if not self.api_key_env:
            return None
        return os.environ.get(self.api_key_env) or None

    @property
    def is_available(self) -> bool:
        """True if the provider needs no key or its key is set."""
        return not self.api_key_env or bool(self.api_key)

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.provider not in PROVIDERS:
            valid = ", ".join(PROVIDERS.keys())
            return f"Unknown provider '{self.provider}'. Valid: {valid}"

        if self.model:
            valid_models = PROVIDERS[self.provider]["models"]
            if self.model not in valid_models:
                return f"Unknown model '{self.model}' for {self.provider}. Valid: {', '.join(valid_models)}"

        return None


@dataclass
class AnalysisConfig:
    """Pipeline tuning."""
    enabled: bool = True
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS
    context_lines: int = DEFAULT_CONTEXT_LINES
    max_suggestions: int = MAX_SUGGESTIONS

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.debounce_seconds < 0:
            return "debounce_seconds must be >= 0"
        if self.context_lines < 0:
            return "context_lines must be >= 0"
        if not 1 <= self.max_suggestions <= MAX_SUGGESTIONS:
            return f"max_suggestions must be between 1 and {MAX_SUGGESTIONS}"
        return None


@dataclass
class DisplayConfig:
    """Display preferences."""
    symbols: str = "auto"  # "unicode" | "ascii" | "auto"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        valid_symbols = ("unicode", "ascii", "auto")
        if self.symbols not in valid_symbols:
            return f"Unknown symbols setting '{self.symbols}'. Valid: {', '.join(valid_symbols)}"
        return None


@dataclass
class Config:
    """Application configuration."""
    llm: LLMConfig = field(default_factory=LLMConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "llm": {
                "provider": self.llm.provider,
                "model": self.llm.model
            },
            "analysis": {
                "enabled": self.analysis.enabled,
                "debounce_seconds": self.analysis.debounce_seconds,
                "context_lines": self.analysis.context_lines,
                "max_suggestions": self.analysis.max_suggestions
            },
            "display": {
                "symbols": self.display.symbols
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary. Unparseable numbers fall back to defaults."""
        llm_data = data.get("llm") or {}
        analysis_data = data.get("analysis") or {}
        display_data = data.get("display") or {}

        max_suggestions = _as_int(analysis_data.get("max_suggestions"), MAX_SUGGESTIONS)

        return cls(
            llm=LLMConfig(
                provider=llm_data.get("provider", DEFAULT_PROVIDER),
                model=llm_data.get("model")
            ),
            analysis=AnalysisConfig(
                enabled=_as_bool(analysis_data.get("enabled"), True),
                debounce_seconds=_as_float(analysis_data.get("debounce_seconds"), DEFAULT_DEBOUNCE_SECONDS),
                context_lines=max(0, _as_int(analysis_data.get("context_lines"), DEFAULT_CONTEXT_LINES)),
                max_suggestions=min(max(max_suggestions, 1), MAX_SUGGESTIONS)
            ),
            display=DisplayConfig(
                symbols=display_data.get("symbols", "auto")
            )
        )


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Project config (.retro/config.yaml)
      2. User config (~/.retro/config.yaml)
      3. Environment
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".retro"
    PROJECT_CONFIG_DIR = ".retro"
    CONFIG_FILE = "config.yaml"

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.USER_CONFIG_DIR / self.CONFIG_FILE

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        config_data: Dict[str, Any] = {}

        # Environment sits below both files
        if os.environ.get("RETRO_LLM_PROVIDER"):
            config_data.setdefault("llm", {})["provider"] = os.environ["RETRO_LLM_PROVIDER"]
        if os.environ.get("RETRO_LLM_MODEL"):
            config_data.setdefault("llm", {})["model"] = os.environ["RETRO_LLM_MODEL"]

        config_data = self._merge(config_data, self._read_yaml(self.user_config_path))
        config_data = self._merge(config_data, self._read_yaml(self.project_config_path))

        self._config = Config.from_dict(config_data)
        return self._config

    def reload(self) -> Config:
        self._config = None
        return self.load()

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        """Read one config layer. Malformed files are ignored."""
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (yaml.YAMLError, OSError) as e:
            logger.warning("Ignoring malformed config %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: top level is not a mapping", path)
            return {}
        return data

    def save_project(self, config: Config):
        """Save configuration to project config file."""
        self._save(self.project_config_path, config)

    def save_user(self, config: Config):
        """Save configuration to user config file."""
        self._save(self.user_config_path, config)

    def _save(self, path: Path, config: Config):
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            yaml.safe_dump(config.to_dict(), f, default_flow_style=False)
        self._config = config

    def set(self, key: str, value: str, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value.

        Args:
            key: Dot-separated key (e.g., "llm.model")
            value: Value to set
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'llm.model')"

        section, setting = parts

        if section == "llm":
            if setting == "provider":
                if value != config.llm.provider:
                    config.llm.model = None
                config.llm.provider = value
            elif setting == "model":
                config.llm.model = value or None
            else:
                return f"Unknown LLM setting: {setting}. Valid: provider, model"
            error = config.llm.validate()

        elif section == "analysis":
            try:
                if setting == "enabled":
                    config.analysis.enabled = value.lower() in ('true', '1', 'yes', 'on')
                elif setting == "debounce_seconds":
                    config.analysis.debounce_seconds = float(value)
                elif setting == "context_lines":
                    config.analysis.context_lines = int(value)
                elif setting == "max_suggestions":
                    config.analysis.max_suggestions = int(value)
                else:
                    return (f"Unknown analysis setting: {setting}. "
                            "Valid: enabled, debounce_seconds, context_lines, max_suggestions")
            except ValueError:
                return f"Invalid value for analysis.{setting}: {value}"
            error = config.analysis.validate()

        elif section == "display":
            if setting == "symbols":
                config.display.symbols = value
            else:
                return f"Unknown display setting: {setting}. Valid: symbols"
            error = config.display.validate()

        else:
            return f"Unknown section: {section}. Valid: llm, analysis, display"

        if error:
            # Discard the half-applied change
            self._config = None
            return error

        if scope == "project":
            self.save_project(config)
        else:
            self.save_user(config)

        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value as a string."""
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return None

        section, setting = parts

        if section == "llm":
            if setting == "provider":
                return config.llm.provider
            elif setting == "model":
                return config.llm.effective_model
        elif section == "analysis" and hasattr(config.analysis, setting):
            value = getattr(config.analysis, setting)
            return str(value).lower() if isinstance(value, bool) else str(value)
        elif section == "display" and setting == "symbols":
            return config.display.symbols

        return None

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()
        symbols = get_symbols(config.display.symbols)

        if not config.llm.api_key_env:
            api_key_status = "Not required"
        elif config.llm.is_available:
            api_key_status = f"{symbols.check_pass} Set"
        else:
            api_key_status = f"{symbols.check_fail} Missing"

        lines = [
            "Configuration:",
            "",
            "LLM:",
            f"  Provider: {config.llm.provider}",
            f"  Model: {config.llm.effective_model}",
            f"  API Key: {api_key_status}",
        ]

        if config.llm.api_key_env and not config.llm.is_available:
            lines.append(f"  (Set {config.llm.api_key_env} environment variable)")

        lines.extend([
            "",
            "Analysis:",
            f"  Enabled: {config.analysis.enabled}",
            f"  Debounce: {config.analysis.debounce_seconds}s",
            f"  Context lines: {config.analysis.context_lines}",
            f"  Max suggestions: {config.analysis.max_suggestions}",
            "",
            "Display:",
            f"  Symbols: {config.display.symbols}",
            "",
            "Config files:",
            f"  User: {self.user_config_path}",
            f"  Project: {self.project_config_path}",
        ])

        return "\n".join(lines)


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        if value.lower() in ("true", "1", "yes", "on"):
            return True
        if value.lower() in ("false", "0", "no", "off"):
            return False
    return default


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


# Convenience function
def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()
