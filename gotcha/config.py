"""
load the config from config.yaml, the environment and .env
"""

import os
import yaml
from dotenv import dotenv_values, find_dotenv
from pathlib import Path
from typing import Dict, Any, Mapping, Optional

# environment variable -> (section, key)
ENV_OVERRIDES = {
    'GOTCHA_USER_AGENT': ('transport', 'user_agent'),
    'GOTCHA_VERIFY_SSL': ('transport', 'verify'),
    'GOTCHA_MAX_CONNECTIONS': ('transport', 'max_connections'),
    'GOTCHA_MAX_KEEPALIVE_CONNECTIONS': ('transport', 'max_keepalive_connections'),
    'GOTCHA_CONNECT_TIMEOUT': ('transport', 'connect_timeout'),
    'GOTCHA_LOG_LEVEL': ('logging', 'level'),
    'GOTCHA_LOG_JSON': ('logging', 'json'),
}


def _convert(value: str):
    lowered = value.lower()
    if lowered in ('true', 'false'):
        return lowered == 'true'
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            pass
    return value


class Config:
    """Configuration read from config.yaml, overridden by GOTCHA_* variables.

    Values found in a .env file are used as overrides too, below the real
    environment, but are never written into ``os.environ``.
    """

    def __init__(self, config_path: Optional[str] = None, use_dotenv: bool = True):
        if config_path is None:
            config_path = Path(__file__).parent / "config.yaml"

        self.config_path = Path(config_path)
        self.use_dotenv = use_dotenv
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        try:
            with open(self.config_path, 'r') as f:
                config = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")

        return self._apply_env_overrides(config, self._environment())

    def _environment(self) -> Mapping[str, Optional[str]]:
        if not self.use_dotenv:
            return os.environ
        dotenv_path = find_dotenv(usecwd=True)
        if not dotenv_path:
            return os.environ
        return {**dotenv_values(dotenv_path), **os.environ}

    @staticmethod
    def _apply_env_overrides(config: Dict[str, Any], environ: Mapping[str, Optional[str]]) -> Dict[str, Any]:
        for env_var, (section, key) in ENV_OVERRIDES.items():
            value = environ.get(env_var)
            if value is None:
                continue
            if not isinstance(config.get(section), dict):
                config[section] = {}
            config[section][key] = _convert(value)
        return config

    def get(self, *keys, default=None):
        """Walk nested keys, e.g. ``get('transport', 'user_agent')``."""
        current = self._config
        for key in keys:
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default
        return current

    @property
    def transport(self) -> Dict[str, Any]:
        return self.get('transport', default={}) or {}

    @property
    def logging(self) -> Dict[str, Any]:
        return self.get('logging', default={}) or {}
