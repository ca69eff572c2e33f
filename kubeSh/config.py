# kubeSh/config.py
"""
Configuration loading for kubeSh.

Settings come from built-in defaults, then an optional YAML file
(~/.kubesh/config.yaml or $KUBESH_CONFIG), then KUBESH_* environment variables.
Command line flags are applied on top by kubeSh.main.
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from kubeSh.constants import (
    CONFIG_FILE,
    HISTORY_FILE,
    PLUGIN_DIR,
    DEFAULT_KUBECTL,
    DEFAULT_FZF,
    DEFAULT_PROMPT_TEMPLATE,
    DEFAULT_SHORTCUTS,
    HIGHLIGHT_SGR,
    CURRENT_SGR,
    ENV_CONFIG,
    ENV_PICKER,
    ENV_PLUGIN_DIR,
    ENV_LOG_LEVEL,
    ENV_KUBECTL,
    PICKER_AUTO,
    PICKER_MODES,
)

logger = logging.getLogger(__name__)

class ConfigError(Exception):
    """Raised when the configuration file cannot be used."""
    pass

@dataclass
class ShellConfig:
    kubectl_path: str = DEFAULT_KUBECTL
    kubeconfig: Optional[str] = None
    picker: str = PICKER_AUTO
    fzf_path: str = DEFAULT_FZF
    plugin_directories: List[str] = field(default_factory=lambda: [str(PLUGIN_DIR)])
    plugin_modules: List[str] = field(default_factory=list)
    shortcuts: Dict[str, List[str]] = field(default_factory=lambda: {k: list(v) for k, v in DEFAULT_SHORTCUTS.items()})
    prompt_template: str = DEFAULT_PROMPT_TEMPLATE
    highlight_sgr: str = HIGHLIGHT_SGR
    current_sgr: str = CURRENT_SGR
    persist_namespace: bool = False
    history_file: str = str(HISTORY_FILE)
    log_level: str = "WARNING"

    def validate(self):
        if self.picker not in PICKER_MODES:
            raise ConfigError(f"Invalid picker '{self.picker}'. Expected one of: {', '.join(PICKER_MODES)}")
        for name, prefix in self.shortcuts.items():
            if not isinstance(prefix, list) or not all(isinstance(arg, str) for arg in prefix):
                raise ConfigError(f"Shortcut '{name}' must map to a list of kubectl arguments")

def _read_yaml_file(path: Path) -> Dict[str, Any]:
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse config file '{path}': {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file '{path}' must contain a top-level mapping.")
    return data

def _apply_file_values(config: ShellConfig, data: Dict[str, Any], path: Path):
    known = set(ShellConfig.__dataclass_fields__)
    for key, value in data.items():
        if key not in known:
            logger.warning(f"Ignoring unknown config key '{key}' in {path}")
            continue
        if key == "shortcuts":
            # User shortcuts extend the defaults instead of replacing them
            if not isinstance(value, dict):
                raise ConfigError(f"'shortcuts' in {path} must be a mapping")
            config.shortcuts.update(
                {name: prefix.split() if isinstance(prefix, str) else prefix for name, prefix in value.items()}
            )
        elif key in ("plugin_directories", "plugin_modules") and isinstance(value, str):
            setattr(config, key, [value])
        else:
            setattr(config, key, value)

def _apply_environment(config: ShellConfig):
    if os.environ.get(ENV_PICKER):
        config.picker = os.environ[ENV_PICKER].lower()
    if os.environ.get(ENV_PLUGIN_DIR):
        config.plugin_directories = os.environ[ENV_PLUGIN_DIR].split(os.pathsep)
    if os.environ.get(ENV_LOG_LEVEL):
        config.log_level = os.environ[ENV_LOG_LEVEL].upper()
    if os.environ.get(ENV_KUBECTL):
        config.kubectl_path = os.environ[ENV_KUBECTL]

def load_config(path: Optional[str] = None) -> ShellConfig:
    """
    Build the shell configuration.

    Args:
        path: Explicit config file. When omitted, $KUBESH_CONFIG or
              ~/.kubesh/config.yaml is used if it exists.

    Returns:
        The validated ShellConfig

    Raises:
        ConfigError: If the file is missing (when given explicitly) or malformed
    """
    config = ShellConfig()

    explicit = path or os.environ.get(ENV_CONFIG)
    config_path = Path(explicit).expanduser() if explicit else CONFIG_FILE

    if config_path.exists():
        data = _read_yaml_file(config_path)
        _apply_file_values(config, data, config_path)
        logger.info(f"Loaded configuration from {config_path}")
    elif explicit:
        raise ConfigError(f"Config file not found at: '{config_path}'")

    _apply_environment(config)
    config.validate()
    return config
