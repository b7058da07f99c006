"""
Configuration management for the SAR dog competition system.
"""

import copy
import logging
import yaml
from typing import Dict, Any

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages configuration loading and provides default values."""

    @staticmethod
    def load_config(config_file: str) -> Dict[str, Any]:
        """Load configuration from YAML file, filling missing keys with defaults."""
        config = ConfigManager.get_default_config()
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning(f"Configuration file '{config_file}' not found. Using default configuration.")
            return config
        except yaml.YAMLError as e:
            logger.warning(f"Error parsing configuration file: {e}. Using default configuration.")
            return config

        if not isinstance(loaded, dict):
            logger.warning(f"Configuration file '{config_file}' is not a mapping. Using default configuration.")
            return config

        config.update(loaded)
        return config

    @staticmethod
    def get_default_config() -> Dict[str, Any]:
        """Return default configuration if config file is not available."""
        return copy.deepcopy({
            'database_path': 'sardog.db',
            'log_level': 'INFO',
            'qualifying_levels': ['Відбіркові', 'Відбіркові CACT'],
            'qualification_bands': [
                {'min': 0, 'max': 209.5, 'label': 'Insufficient'},
                {'min': 210, 'max': 239.5, 'label': 'Satisfactory'},
                {'min': 240, 'max': 269.5, 'label': 'Good'},
                {'min': 270, 'max': 285.5, 'label': 'Very good'},
                {'min': 286, 'max': 300, 'label': 'Excellent'}
            ],
            'unclassified_label': 'Unclassified',
            'public_minimums': {'search': 140, 'obedience': 70},
            'below_minimum_label': 'Insufficient',
            'rating_top_results': 2,
            'fallback_names': {
                'athlete': 'Unknown participant',
                'dog': 'Unknown dog',
                'team': 'No team',
                'unknown': 'Unknown'
            }
        })
