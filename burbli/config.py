"""
Configuration Loader for Burbli
Loads and validates site configuration from config.yaml
"""

import os
import yaml
from pathlib import Path
from typing import Dict, List, Any, Optional, Union

from burbli.constants import APP_DIR, DEFAULT_CONFIG_PATH, DEFAULT_DB_PATH, SITE_ROUTES


class Config:
    """Configuration manager for Burbli."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize configuration from YAML file.

        Args:
            config_path: Path to config.yaml (defaults to BURBLI_CONFIG or ./config.yaml)
        """
        if config_path is None:
            config_path = os.environ.get("BURBLI_CONFIG") or DEFAULT_CONFIG_PATH

        self.config_path = Path(config_path)
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {self.config_path}\n"
                f"Copy config.example.yaml to config.yaml and fill in your information."
            )

        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        # Validate required fields
        self._validate_config(config)

        return config

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """Validate that required configuration fields are present."""
        if not isinstance(config, dict):
            raise ValueError("Config file must contain a mapping at the top level")

        required_sections = ['site']
        for section in required_sections:
            if section not in config:
                raise ValueError(f"Missing required config section: {section}")

        # Validate site section
        required_site_fields = ['name', 'base_url']
        for field in required_site_fields:
            if not (config['site'] or {}).get(field):
                raise ValueError(f"Missing required site field: {field}")

        timeout = (config.get('places') or {}).get('timeout', 10)
        if not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ValueError("places.timeout must be a positive number of seconds")

    # ===== SITE =====

    @property
    def site_name(self) -> str:
        """Get the site's display name."""
        return self._config['site']['name']

    @property
    def base_url(self) -> str:
        """Get the public base URL, without a trailing slash."""
        return self._config['site']['base_url'].rstrip('/')

    @property
    def page_routes(self) -> List[str]:
        """Get the public page paths listed in the sitemap."""
        return self._config['site'].get('pages', SITE_ROUTES)

    # ===== DATABASE =====

    @property
    def database_path(self) -> Path:
        """Get the SQLite database path (relative paths resolve from the project root)."""
        path = (self._config.get('database') or {}).get('path')
        if not path:
            return DEFAULT_DB_PATH
        path = Path(path)
        return path if path.is_absolute() else APP_DIR / path

    # ===== PLACES =====

    @property
    def places_api_key(self) -> str:
        """Get the Google Maps API key from the environment."""
        return os.environ.get('GOOGLE_MAPS_API_KEY', '')

    @property
    def places_country(self) -> str:
        """Get the country autocomplete is restricted to."""
        return (self._config.get('places') or {}).get('country', 'au')

    @property
    def places_timeout(self) -> float:
        """Get the places API request timeout in seconds."""
        return (self._config.get('places') or {}).get('timeout', 10)

    # ===== UTILITY METHODS =====

    def reload(self) -> None:
        """Reload configuration from file."""
        self._config = self._load_config()

    def to_dict(self) -> Dict[str, Any]:
        """
        Return a copy of the raw configuration dictionary.

        Returns:
            Dict containing all configuration values
        """
        return dict(self._config)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation key.

        Example: config.get('site.name')
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value


# Global config instance
_config: Optional[Config] = None


def get_config(config_path: Optional[Union[str, Path]] = None) -> Config:
    """
    Get global configuration instance.
    Creates instance on first call, then returns cached instance.
    An explicit config_path always loads that file and replaces the cache.
    """
    global _config
    if config_path is not None:
        _config = Config(config_path)
    elif _config is None:
        _config = Config()
    return _config


def reload_config() -> None:
    """Reload configuration from file."""
    global _config
    if _config is not None:
        _config.reload()
    else:
        _config = Config()
