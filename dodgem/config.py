"""
Dodgem Configuration Management.

Handles loading, saving, and validating configuration from various sources:
- Default values
- Configuration file (TOML)
- Environment variables
- Command-line arguments
"""

from __future__ import annotations

import json
import logging
import os
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, List

import tomli_w
import yaml

logger = logging.getLogger(__name__)

# Configuration directory and file constants
DEFAULT_CONFIG_DIR = Path.home() / ".config" / "dodgem"
DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_DATA_DIR = Path.home() / ".local" / "share" / "dodgem"
CREDENTIALS_FILE = "credentials.json"

SUPPORTED_ENGINES = ("chromium", "firefox", "webkit")


@dataclass
class ValidationIssue:
    """Validation issue found in the configuration."""
    field: str
    message: str
    severity: str  # "error" or "warning"

    def __str__(self) -> str:
        return f"[{self.severity.upper()}] {self.field}: {self.message}"


@dataclass
class BrowserConfig:
    """Configuration for the automated browser."""

    engine: str = "chromium"
    headless: bool = True

    # Timeouts in seconds, applied to every page
    navigation_timeout: float = 30.0
    action_timeout: float = 15.0

    locale: str = "en-US"


@dataclass
class GarageConfig:
    """Configuration for the Rocket League Garage site."""

    base_url: str = "https://rocket-league.com"


@dataclass
class SchedulerConfig:
    """Configuration for the bump scheduler."""

    default_interval: int = 15  # minutes
    cooldown_seconds: float = 10.0  # between edit and save in "all" mode

    # Sleep until the nominal next run instead of a full interval after each cycle
    fixed_cadence: bool = False


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "WARNING"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[Path] = None


@dataclass
class DodgemConfig:
    """Main configuration container for Dodgem."""

    # Paths
    config_dir: Path = DEFAULT_CONFIG_DIR
    data_dir: Path = DEFAULT_DATA_DIR

    # Sub-configurations
    browser: BrowserConfig = field(default_factory=BrowserConfig)
    garage: GarageConfig = field(default_factory=GarageConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def credentials_file(self) -> Path:
        """Location of the stored account credentials."""
        return self.config_dir / CREDENTIALS_FILE


_SECTIONS = ("browser", "garage", "scheduler", "logging")


def get_config_path(env_prefix: str = "DODGEM_") -> Path:
    """Location of the config file, honouring the CONFIG_DIR environment override."""
    env_config_dir = os.environ.get(f"{env_prefix}CONFIG_DIR")
    config_dir = Path(env_config_dir) if env_config_dir else DEFAULT_CONFIG_DIR
    return config_dir / DEFAULT_CONFIG_FILE


def load_config(
    config_path: Optional[Path] = None,
    env_prefix: str = "DODGEM_"
) -> DodgemConfig:
    """
    Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file
    3. Default values

    Args:
        config_path: Path to config file (default: ~/.config/dodgem/config.toml)
        env_prefix: Prefix for environment variables

    Returns:
        Loaded configuration
    """
    config = DodgemConfig()

    if config_path is None:
        config_path = get_config_path(env_prefix)

    if config_path.exists():
        config = _load_from_file(config_path, config)

    config = _load_from_env(config, env_prefix)

    return config


def _load_from_file(path: Path, config: DodgemConfig) -> DodgemConfig:
    """Load configuration from a TOML file."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Failed to load config from {path}: {e}")
        return config

    for section in _SECTIONS:
        if section not in data:
            continue
        section_obj = getattr(config, section)
        for key, value in data[section].items():
            if hasattr(section_obj, key):
                if key == "file":
                    value = Path(value) if value else None
                setattr(section_obj, key, value)
            else:
                logger.warning(f"Ignoring unknown config key: {section}.{key}")

    # Top-level settings
    if "config_dir" in data:
        config.config_dir = Path(data["config_dir"])
    if "data_dir" in data:
        config.data_dir = Path(data["data_dir"])

    return config


def _as_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes", "on")


def _load_from_env(config: DodgemConfig, prefix: str) -> DodgemConfig:
    """Load configuration from environment variables."""

    # Browser settings
    if env_val := os.environ.get(f"{prefix}BROWSER_ENGINE"):
        config.browser.engine = env_val.lower()
    if env_val := os.environ.get(f"{prefix}HEADLESS"):
        config.browser.headless = _as_bool(env_val)
    if env_val := os.environ.get(f"{prefix}NAVIGATION_TIMEOUT"):
        config.browser.navigation_timeout = float(env_val)
    if env_val := os.environ.get(f"{prefix}ACTION_TIMEOUT"):
        config.browser.action_timeout = float(env_val)

    # Site settings
    if env_val := os.environ.get(f"{prefix}BASE_URL"):
        config.garage.base_url = env_val.rstrip("/")

    # Scheduler settings
    if env_val := os.environ.get(f"{prefix}INTERVAL"):
        config.scheduler.default_interval = int(env_val)
    if env_val := os.environ.get(f"{prefix}COOLDOWN_SECONDS"):
        config.scheduler.cooldown_seconds = float(env_val)
    if env_val := os.environ.get(f"{prefix}FIXED_CADENCE"):
        config.scheduler.fixed_cadence = _as_bool(env_val)

    # Logging settings
    if env_val := os.environ.get(f"{prefix}LOG_LEVEL"):
        config.logging.level = env_val.upper()
    if env_val := os.environ.get(f"{prefix}LOG_FILE"):
        config.logging.file = Path(env_val)

    # Paths
    if env_val := os.environ.get(f"{prefix}CONFIG_DIR"):
        config.config_dir = Path(env_val)
    if env_val := os.environ.get(f"{prefix}DATA_DIR"):
        config.data_dir = Path(env_val)

    return config


def save_config(config: DodgemConfig, path: Optional[Path] = None) -> None:
    """
    Save configuration to a TOML file.

    Args:
        config: Configuration to save
        path: Path to save to (default: config.config_dir / config.toml)
    """
    if path is None:
        path = config.config_dir / DEFAULT_CONFIG_FILE

    path.parent.mkdir(parents=True, exist_ok=True)

    document = config_to_dict(config, mask_secrets=False)
    # TOML has no null; drop unset optional values
    document["logging"] = {k: v for k, v in document["logging"].items() if v is not None}

    with open(path, "wb") as f:
        tomli_w.dump(document, f)


def ensure_directories(config: DodgemConfig) -> None:
    """Ensure all required directories exist."""
    config.config_dir.mkdir(parents=True, exist_ok=True)
    config.data_dir.mkdir(parents=True, exist_ok=True)


def get_default_config() -> DodgemConfig:
    """Get the default configuration."""
    return DodgemConfig()


# Global configuration instance (lazy-loaded)
_global_config: Optional[DodgemConfig] = None


def get_config() -> DodgemConfig:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = load_config()
    return _global_config


def set_config(config: DodgemConfig) -> None:
    """Set the global configuration instance."""
    global _global_config
    _global_config = config


def clear_config_cache() -> None:
    """Clear the global configuration cache."""
    global _global_config
    _global_config = None


def set_config_value(section: str, key: str, value: str, config_path: Optional[Path] = None) -> None:
    """
    Set a single configuration value and persist to file.

    Args:
        section: Configuration section (e.g., 'browser', 'scheduler')
        key: Configuration key within the section
        value: Value to set (converted to the type of the current value)
        config_path: Path to config file (default: get_config_path())

    Raises:
        ValueError: If the section or key is unknown, or the value cannot be converted
    """
    if config_path is None:
        config_path = get_config_path()

    config = load_config(config_path)

    if section not in _SECTIONS:
        raise ValueError(f"Unknown configuration section: {section}")
    section_obj = getattr(config, section)

    if not hasattr(section_obj, key):
        raise ValueError(f"Unknown configuration key: {section}.{key}")

    current_value = getattr(section_obj, key)
    current_type = type(current_value)

    if current_type == bool:
        converted_value: Any = _as_bool(value)
    elif current_type == int:
        converted_value = int(value)
    elif current_type == float:
        converted_value = float(value)
    elif current_type == Path or key == "file":
        converted_value = Path(value)
    else:
        converted_value = value

    setattr(section_obj, key, converted_value)

    save_config(config, config_path)


def _validate_url(url: str) -> bool:
    """Validate a URL format."""
    url_pattern = r"^https?://[^\s/$.?#].[^\s]*$"
    return bool(re.match(url_pattern, url))


def validate_config(config: Optional[DodgemConfig] = None) -> List[ValidationIssue]:
    """
    Validate configuration and return list of issues.

    Args:
        config: Configuration to validate (default: loaded from file)

    Returns:
        List of validation issues (empty if valid)
    """
    if config is None:
        config = load_config()

    issues: List[ValidationIssue] = []

    if config.browser.engine not in SUPPORTED_ENGINES:
        issues.append(ValidationIssue(
            field="browser.engine",
            message=f"Unsupported engine '{config.browser.engine}' (use one of: {', '.join(SUPPORTED_ENGINES)})",
            severity="error"
        ))

    for name in ("navigation_timeout", "action_timeout"):
        if getattr(config.browser, name) <= 0:
            issues.append(ValidationIssue(
                field=f"browser.{name}",
                message="Timeout must be positive.",
                severity="error"
            ))

    if not _validate_url(config.garage.base_url):
        issues.append(ValidationIssue(
            field="garage.base_url",
            message=f"Invalid URL format: {config.garage.base_url}",
            severity="error"
        ))

    interval = config.scheduler.default_interval
    if isinstance(interval, bool) or not isinstance(interval, int):
        issues.append(ValidationIssue(
            field="scheduler.default_interval",
            message=f"Interval must be a whole number of minutes, got {interval!r}.",
            severity="error"
        ))
    elif interval < 1:
        issues.append(ValidationIssue(
            field="scheduler.default_interval",
            message="Interval must be at least 1 minute.",
            severity="error"
        ))

    cooldown = config.scheduler.cooldown_seconds
    if isinstance(cooldown, bool) or not isinstance(cooldown, (int, float)):
        issues.append(ValidationIssue(
            field="scheduler.cooldown_seconds",
            message=f"Cooldown must be a number of seconds, got {cooldown!r}.",
            severity="error"
        ))
    elif cooldown < 0:
        issues.append(ValidationIssue(
            field="scheduler.cooldown_seconds",
            message="Cooldown cannot be negative.",
            severity="error"
        ))

    if config.logging.level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        issues.append(ValidationIssue(
            field="logging.level",
            message=f"Unknown log level: {config.logging.level}",
            severity="warning"
        ))

    if not config.credentials_file.exists():
        issues.append(ValidationIssue(
            field="credentials",
            message="No credentials stored. Run 'dodgem login' first.",
            severity="warning"
        ))

    for name in ("config_dir", "data_dir"):
        directory: Path = getattr(config, name)
        if not directory.exists():
            issues.append(ValidationIssue(
                field=name,
                message=f"Directory does not exist: {directory}",
                severity="warning"
            ))
            continue
        try:
            test_file = directory / ".write_test"
            test_file.touch()
            test_file.unlink()
        except OSError:
            issues.append(ValidationIssue(
                field=name,
                message=f"Directory is not writable: {directory}",
                severity="error"
            ))

    return issues


def config_to_dict(config: DodgemConfig, mask_secrets: bool = True) -> dict[str, Any]:
    """
    Convert configuration to dictionary.

    Args:
        config: Configuration to convert
        mask_secrets: If True, mask sensitive values

    Returns:
        Dictionary representation of config
    """
    def mask_value(key: str, value: Any) -> Any:
        """Mask sensitive values."""
        if isinstance(value, Path):
            value = str(value)
        if not mask_secrets:
            return value
        sensitive_keys = {"password", "secret", "token"}
        if value and any(sk in key.lower() for sk in sensitive_keys):
            return "****"
        return value

    return {
        "config_dir": str(config.config_dir),
        "data_dir": str(config.data_dir),
        "browser": {
            "engine": config.browser.engine,
            "headless": config.browser.headless,
            "navigation_timeout": config.browser.navigation_timeout,
            "action_timeout": config.browser.action_timeout,
            "locale": config.browser.locale,
        },
        "garage": {
            "base_url": config.garage.base_url,
        },
        "scheduler": {
            "default_interval": config.scheduler.default_interval,
            "cooldown_seconds": config.scheduler.cooldown_seconds,
            "fixed_cadence": config.scheduler.fixed_cadence,
        },
        "logging": {
            "level": config.logging.level,
            "format": config.logging.format,
            "file": mask_value("file", config.logging.file),
        },
    }


def export_config_yaml(config: DodgemConfig, mask_secrets: bool = True) -> str:
    """
    Export configuration as YAML string.

    Args:
        config: Configuration to export
        mask_secrets: If True, mask sensitive values

    Returns:
        YAML string representation of config
    """
    config_dict = config_to_dict(config, mask_secrets)
    return yaml.dump(config_dict, default_flow_style=False, sort_keys=False, allow_unicode=True)


def export_config_json(config: DodgemConfig, mask_secrets: bool = True) -> str:
    """
    Export configuration as JSON string.

    Args:
        config: Configuration to export
        mask_secrets: If True, mask sensitive values

    Returns:
        JSON string representation of config
    """
    config_dict = config_to_dict(config, mask_secrets)
    return json.dumps(config_dict, indent=2)
