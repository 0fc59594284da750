"""
Configuration management for Notetree.
"""
import logging
import os
import yaml
from typing import Dict, Any, Optional, List

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Manages configuration settings for Notetree.
    """
    def __init__(self, config_file: Optional[str] = None):
        self.config = self._load_default_config()

        # If a config file is specified, load it
        if config_file:
            self.config_file = config_file
        else:
            # Use default config location
            home_dir = os.path.expanduser("~")
            self.config_file = os.path.join(home_dir, ".notetree", "config.yaml")

        # Load config from file if it exists
        if os.path.exists(self.config_file):
            self._load_config()

    def _load_default_config(self) -> Dict[str, Any]:
        """
        Load the default configuration settings.

        Returns:
            A dictionary containing default configuration.
        """
        data_dir = os.path.join(os.path.expanduser("~"), ".notetree")
        return {
            "data_dir": data_dir,
            "notebooks_file": os.path.join(data_dir, "notebooks.yaml"),
            "notes_dir": os.path.join(os.path.expanduser("~"), "notetree"),
            "versions_dir": os.path.join(data_dir, "versions"),
            "max_nesting_depth": 5,
            "terminal_statuses": ["completed", "archived"],
            "log_level": "WARNING",
            "default_notebooks": [
                {"id": "personal", "name": "personal", "color": "blue",
                 "description": "Personal notes and thoughts"},
                {"id": "work", "name": "work", "color": "green",
                 "description": "Work-related notes and projects"},
                {"id": "projects", "name": "projects", "color": "orange",
                 "description": "Development projects and ideas"},
            ],
        }

    def _load_config(self) -> None:
        """
        Load configuration from the config file.
        """
        try:
            with open(self.config_file, 'r') as f:
                user_config = yaml.safe_load(f)
                if user_config:
                    # Merge with defaults, preserving user settings
                    self._merge_config(self.config, user_config)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not load config file {self.config_file}: {str(e)}")

    def _merge_config(self, default: Dict[str, Any], user: Dict[str, Any]) -> None:
        """
        Merge user configuration with default configuration.

        Args:
            default: The default configuration dictionary.
            user: The user configuration dictionary.
        """
        for key, value in user.items():
            if key in default and isinstance(default[key], dict) and isinstance(value, dict):
                self._merge_config(default[key], value)
            else:
                default[key] = value

    def save_config(self) -> bool:
        """
        Save the current configuration to the config file.

        Returns:
            True if successful, False otherwise.
        """
        try:
            # Ensure directory exists
            config_dir = os.path.dirname(self.config_file)
            if config_dir and not os.path.exists(config_dir):
                os.makedirs(config_dir)

            with open(self.config_file, 'w') as f:
                yaml.dump(self.config, f, default_flow_style=False)
            return True
        except OSError as e:
            logger.error(f"Error saving config: {str(e)}")
            return False

    def get_config(self, key: Optional[str] = None) -> Any:
        """
        Get configuration settings.

        Args:
            key: Optional key to get. If None, returns the entire config.

        Returns:
            The requested configuration value or the entire config.
        """
        if key:
            return self.config.get(key)
        return self.config

    def set_config(self, key: str, value: Any) -> None:
        """
        Set a configuration value.
        """
        self.config[key] = value

    def get_path(self, key: str) -> str:
        """
        Get a path setting with ``~`` expanded.
        """
        return os.path.expanduser(str(self.config.get(key) or self._load_default_config()[key]))

    def get_max_nesting_depth(self) -> int:
        value = self.config.get("max_nesting_depth")
        try:
            depth = int(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid max_nesting_depth {value!r}, using default")
            return self._load_default_config()["max_nesting_depth"]
        return max(depth, 1)

    def get_terminal_statuses(self) -> List[str]:
        statuses = self.config.get("terminal_statuses") or []
        if isinstance(statuses, str):
            return [statuses]
        return [str(status) for status in statuses]

    def get_default_notebooks(self) -> List[Dict[str, Any]]:
        """
        Get the notebooks seeded into an empty store.
        """
        notebooks = self.config.get("default_notebooks")
        if not notebooks:
            notebooks = self._load_default_config()["default_notebooks"]
        return [dict(nb) for nb in notebooks]


# Create a global instance for easy access
_config_manager = None


def get_config_manager(config_file: Optional[str] = None) -> ConfigManager:
    """
    Get the global ConfigManager instance.

    Args:
        config_file: Optional config file. Passing one replaces the global instance.

    Returns:
        The ConfigManager instance.
    """
    global _config_manager
    if _config_manager is None or config_file:
        _config_manager = ConfigManager(config_file)
    return _config_manager
