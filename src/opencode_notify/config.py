"""Configuration models for opencode-notify."""

import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .logging import get_logger

DEFAULT_STATE_DIR = Path.home() / ".local" / "state" / "ocn"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "opencode" / "ocn.json"

Theme = Literal["tokyonight", "catppuccin", "plain"]


class MacosNotifyConfig(BaseModel):
    """Desktop notification settings, including the per-status switches."""

    enabled: bool = Field(default=True, description="Show macOS notifications")
    on_idle: bool = Field(default=True, description="Notify when a session completes")
    on_prompt: bool = Field(default=True, description="Notify when input is needed")
    on_error: bool = Field(default=True, description="Notify when a session errors")


class BellNotifyConfig(BaseModel):
    enabled: bool = Field(default=False, description="Ring the terminal bell")


class TmuxPaneNotifyConfig(BaseModel):
    enabled: bool = Field(default=True, description="Badge the tmux pane")


class NotifyConfig(BaseModel):
    macos: MacosNotifyConfig = Field(default_factory=MacosNotifyConfig)
    bell: BellNotifyConfig = Field(default_factory=BellNotifyConfig)
    tmux_pane: TmuxPaneNotifyConfig = Field(default_factory=TmuxPaneNotifyConfig)


class OcnConfig(BaseModel):
    """Root configuration model."""

    notify: NotifyConfig = Field(default_factory=NotifyConfig)
    debounce_ms: int = Field(
        default=2000,
        ge=0,
        description="Minimum interval between two delivered notifications",
    )
    notifier_timeout_ms: Optional[int] = Field(
        default=10000,
        ge=0,
        description="Upper bound for a single notifier call (None disables it)",
    )
    state_dir: Path = Field(
        default=DEFAULT_STATE_DIR,
        description="Directory holding one status file per running instance",
    )
    theme: Theme = Field(default="tokyonight", description="tmux status line theme")


def find_config_file() -> Path:
    """Find the configuration file.

    Search order:
    1. OCN_CONFIG environment variable
    2. ~/.config/opencode/ocn.json
    """
    env_path = os.environ.get("OCN_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH


def load_config(config_path: Optional[Path] = None) -> OcnConfig:
    """Load configuration from disk.

    The file may be JSON or YAML. A missing, unreadable or invalid file
    yields the defaults.

    Args:
        config_path: Path to the config file. If None, will search for it.

    Returns:
        Loaded OcnConfig object.
    """
    path = Path(config_path) if config_path is not None else find_config_file()
    if not path.exists():
        return OcnConfig()

    logger = get_logger()
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return OcnConfig.model_validate(raw)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to read config {path}: {e}")
    except ValidationError as e:
        logger.warning(f"Invalid config {path}, using defaults: {e}")
    return OcnConfig()


def get_config() -> OcnConfig:
    """Get the configuration (always reloads from disk)."""
    return load_config()
