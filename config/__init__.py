"""
Configuration Module for the Utility Bill Extractor.

Settings are read from ``config/settings.yaml``. A site file (passed as
``--config`` or named by the ``BILL_EXTRACTOR_CONFIG`` environment variable)
is layered on top, so it only needs the keys it changes:

    extraction:
      labels:
        due_date: ["Verval Datum", "Uiterste betaaldatum"]

Relative ``paths`` entries resolve against the directory of the file that
set them.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

CONFIG_DIR = Path(__file__).parent
DEFAULT_CONFIG_PATH = CONFIG_DIR / "settings.yaml"
CONFIG_ENV_VAR = "BILL_EXTRACTOR_CONFIG"


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _read_yaml(path: Path, base_dir: Path) -> Dict[str, Any]:
    """
    Read one settings file and anchor its relative paths.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        yaml.YAMLError: If the file is not valid YAML.
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    for key, value in (data.get('paths') or {}).items():
        if value and not Path(value).is_absolute():
            data['paths'][key] = str(base_dir / value)

    return data


class ConfigurationManager:
    """
    Process-wide settings for the bill extractor.

    Attributes:
        config_path (Optional[Path]): Site file layered over the defaults.

    Example:
        >>> config = ConfigurationManager()
        >>> config.get("input.pdf.backend")
        'pdfplumber'
        >>> config.get("postprocessing.defaults.due_in_days")
        14
    """

    _instance: Optional['ConfigurationManager'] = None

    def __new__(cls, config_path: Optional[Union[str, Path]] = None) -> 'ConfigurationManager':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[Union[str, Path]] = None) -> None:
        """
        Load settings once, or switch to another site file.

        Args:
            config_path: Site file. Defaults to $BILL_EXTRACTOR_CONFIG if
                set. Passing a different file than the current one reloads.
        """
        if config_path is None and not self._initialized:
            config_path = os.environ.get(CONFIG_ENV_VAR) or None

        if self._initialized and (config_path is None or Path(config_path) == self.config_path):
            return

        self.config_path = Path(config_path) if config_path else None
        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        # Defaults are anchored at the project root, site files at their own directory.
        config = _read_yaml(DEFAULT_CONFIG_PATH, CONFIG_DIR.parent)
        if self.config_path is not None:
            config = _merge(config, _read_yaml(self.config_path, self.config_path.parent))
        self._config = config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key: Configuration key in dot notation (e.g., "input.pdf.backend").
            default: Returned when any part of the key is missing.

        Returns:
            Configuration value or default.
        """
        value: Any = self._config
        for part in key.split('.'):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def get_all(self) -> Dict[str, Any]:
        return self._config.copy()

    def reload(self) -> None:
        """Re-read the defaults and the site file."""
        self._load_config()

    @classmethod
    def reset(cls) -> None:
        """Forget the loaded settings; the next access loads them again."""
        cls._instance = None


def get_config(key: str, default: Any = None) -> Any:
    """Shortcut for ``ConfigurationManager().get(key, default)``."""
    return ConfigurationManager().get(key, default)


__all__ = ['ConfigurationManager', 'get_config', 'CONFIG_ENV_VAR']
