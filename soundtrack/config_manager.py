"""Configuration management for the book soundtrack toolkit."""

import os
from typing import Dict, Any

from soundtrack.exceptions import ConfigurationError

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s: %(message)s"

DEFAULT_USER_AGENT = {
    'app_name': 'book-soundtrack-enricher',
    'version': '1.0',
    'contact': 'your.email@example.com',
}


class Config:
    """Configuration container with validation."""

    def __init__(self):
        """Initialize configuration from environment or config.py file."""
        # Try to import from config.py first
        try:
            import sys
            from pathlib import Path

            # Add parent directory to path to import config
            config_dir = Path(__file__).parent.parent
            if str(config_dir) not in sys.path:
                sys.path.insert(0, str(config_dir))

            try:
                import config as config_module
                self._load_from_module(config_module)
            except ImportError:
                self._load_from_env()
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}")

        # Validation is an explicit call so tests can build a Config and
        # then override attributes before checking them.

    def _load_from_module(self, config_module) -> None:
        """Load configuration from config.py module."""
        # Data files
        self.songs_csv_path = getattr(config_module, 'SONGS_CSV_PATH', 'data/songs.csv')
        self.songs_json_path = getattr(config_module, 'SONGS_JSON_PATH', 'data/songs.json')

        # iTunes Search API
        self.itunes_search_url = getattr(config_module, 'ITUNES_SEARCH_URL', 'https://itunes.apple.com/search')
        self.itunes_country = getattr(config_module, 'ITUNES_COUNTRY', None)
        self.itunes_result_limit = getattr(config_module, 'ITUNES_RESULT_LIMIT', 5)
        self.itunes_timeout = getattr(config_module, 'ITUNES_TIMEOUT', 10.0)

        # Enrichment pacing
        self.query_delay = getattr(config_module, 'QUERY_DELAY', 0.5)
        self.query_budget = getattr(config_module, 'QUERY_BUDGET', 15)
        self.artwork_size = getattr(config_module, 'ARTWORK_SIZE', 1000)

        # Playback
        self.preserve_mute = getattr(config_module, 'PRESERVE_MUTE', False)

        self.log_level = getattr(config_module, 'LOG_LEVEL', 'INFO')
        self.log_format = getattr(config_module, 'LOG_FORMAT', DEFAULT_LOG_FORMAT)

        ua = getattr(config_module, 'USER_AGENT', {})
        self.user_agent = {
            'app_name': ua.get('app_name', DEFAULT_USER_AGENT['app_name']),
            'version': ua.get('version', DEFAULT_USER_AGENT['version']),
            'contact': ua.get('contact', DEFAULT_USER_AGENT['contact'])
        }

    def _load_from_env(self) -> None:
        """Load configuration from environment variables (fallback)."""
        # Data files
        self.songs_csv_path = os.getenv('SONGS_CSV_PATH', 'data/songs.csv')
        self.songs_json_path = os.getenv('SONGS_JSON_PATH', 'data/songs.json')

        # iTunes Search API
        self.itunes_search_url = os.getenv('ITUNES_SEARCH_URL', 'https://itunes.apple.com/search')
        self.itunes_country = os.getenv('ITUNES_COUNTRY') or None
        self.itunes_result_limit = int(os.getenv('ITUNES_RESULT_LIMIT', '5'))
        self.itunes_timeout = float(os.getenv('ITUNES_TIMEOUT', '10.0'))

        # Enrichment pacing
        self.query_delay = float(os.getenv('QUERY_DELAY', '0.5'))
        self.query_budget = int(os.getenv('QUERY_BUDGET', '15'))
        self.artwork_size = int(os.getenv('ARTWORK_SIZE', '1000'))

        # Playback
        self.preserve_mute = os.getenv('PRESERVE_MUTE', 'false').lower() == 'true'

        self.log_level = os.getenv('LOG_LEVEL', 'INFO')
        self.log_format = os.getenv('LOG_FORMAT', DEFAULT_LOG_FORMAT)

        self.user_agent = {
            'app_name': os.getenv('UA_APP_NAME', DEFAULT_USER_AGENT['app_name']),
            'version': os.getenv('UA_VERSION', DEFAULT_USER_AGENT['version']),
            'contact': os.getenv('UA_CONTACT', DEFAULT_USER_AGENT['contact'])
        }

    def _validate(self) -> None:
        """Validate configuration values."""
        if int(self.query_budget) < 1:
            raise ConfigurationError("QUERY_BUDGET must be at least 1.")

        if float(self.query_delay) < 0:
            raise ConfigurationError("QUERY_DELAY cannot be negative.")

        if float(self.itunes_timeout) <= 0:
            raise ConfigurationError(
                "ITUNES_TIMEOUT must be positive; an unbounded wait on the search API is not allowed."
            )

        if not 1 <= int(self.itunes_result_limit) <= 200:
            raise ConfigurationError("ITUNES_RESULT_LIMIT must be between 1 and 200.")

        if int(self.artwork_size) < 1:
            raise ConfigurationError("ARTWORK_SIZE must be a positive pixel size.")

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            'songs_csv_path': self.songs_csv_path,
            'songs_json_path': self.songs_json_path,
            'itunes_search_url': self.itunes_search_url,
            'itunes_country': self.itunes_country,
            'itunes_result_limit': self.itunes_result_limit,
            'itunes_timeout': self.itunes_timeout,
            'query_delay': self.query_delay,
            'query_budget': self.query_budget,
            'artwork_size': self.artwork_size,
            'preserve_mute': self.preserve_mute,
            'log_level': self.log_level,
        }

    def __repr__(self) -> str:
        """String representation (sanitized - no contact details)."""
        return (
            f"Config(songs_json={self.songs_json_path}, "
            f"query_budget={self.query_budget}, "
            f"query_delay={self.query_delay}s)"
        )
