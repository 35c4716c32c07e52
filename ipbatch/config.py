"""
Configuration management for ipbatch.

This module reads runtime settings from the environment, including the
lookup service endpoint, request timeout, worker limits and API token
overrides.
"""

import os
import sys
import logging
from typing import Optional
from pathlib import Path

logger = logging.getLogger(__name__)

PROGRAM_NAME = "ipbatch"
DEFAULT_SERVICE_URL = "https://ipinfo.io"


class AppConfig:
    """Environment-backed configuration manager."""

    def get_api_key(self, service: str = 'ipinfo') -> Optional[str]:
        """
        Retrieve an API key for a service from the environment.

        Args:
            service: Service name (e.g., 'ipinfo')

        Returns:
            API key if available and well-formed, None otherwise
        """
        env_names = [f"IPBATCH_{service.upper()}_API_KEY"] + self._get_alternative_env_names(service)
        for env_name in env_names:
            api_key = os.getenv(env_name)
            if not api_key:
                continue
            if self._validate_api_key_format(api_key):
                logger.info(f"API key loaded for service: {service} (via {env_name})")
                return api_key.strip()
            logger.warning(f"Invalid API key format in {env_name}, ignoring")

        logger.debug(f"No API key found in environment for service: {service}")
        return None

    def _validate_api_key_format(self, api_key: str) -> bool:
        """
        Validate API key format.

        Args:
            api_key: The API key to validate

        Returns:
            True if format is valid, False otherwise
        """
        if not api_key or not api_key.strip():
            return False

        api_key = api_key.strip()
        if len(api_key) < 8 or len(api_key) > 128:
            return False

        return not any(char in api_key for char in [' ', '\t', '\n', '\r'])

    def _get_alternative_env_names(self, service: str) -> list:
        """
        Get alternative environment variable names for a service.

        Args:
            service: Service name

        Returns:
            List of alternative environment variable names
        """
        alternatives = {
            'ipinfo': ['IPINFO_TOKEN', 'IPINFO_API_KEY'],
        }

        return alternatives.get(service.lower(), [])

    def get_service_url(self) -> str:
        """
        Get the base URL of the lookup service.

        Returns:
            HTTPS base URL without a trailing slash
        """
        url = os.getenv('IPBATCH_SERVICE_URL', '').strip()
        if not url:
            return DEFAULT_SERVICE_URL

        if not url.startswith('https://'):
            logger.warning(f"Non-HTTPS service URL configured: {url}, using {DEFAULT_SERVICE_URL}")
            return DEFAULT_SERVICE_URL

        return url.rstrip('/')

    def get_request_timeout(self) -> Optional[float]:
        """
        Get the per-request timeout.

        Returns:
            Timeout in seconds bounded to 1-120, or None to use the HTTP
            client's default
        """
        value = os.getenv('IPBATCH_REQUEST_TIMEOUT')
        if value is None or not value.strip():
            return None
        try:
            return max(1.0, min(120.0, float(value)))
        except ValueError:
            logger.warning(f"Invalid IPBATCH_REQUEST_TIMEOUT value: {value}")
            return None

    def get_max_workers(self) -> Optional[int]:
        """
        Get the default cap on concurrent lookups.

        Returns:
            Positive worker count, or None for one worker per address
        """
        value = os.getenv('IPBATCH_MAX_WORKERS')
        if value is None or not value.strip():
            return None
        try:
            workers = int(value)
        except ValueError:
            logger.warning(f"Invalid IPBATCH_MAX_WORKERS value: {value}")
            return None
        return workers if workers > 0 else None

    def get_config_dir(self) -> Path:
        """
        Get the per-user directory holding the persisted credential.

        Returns:
            Directory path (not necessarily existing yet)
        """
        override = os.getenv('IPBATCH_CONFIG_DIR')
        if override:
            return Path(override)

        if sys.platform.startswith('win'):
            base = Path(os.environ.get('APPDATA', str(Path.home())))
            return base / PROGRAM_NAME
        if sys.platform == 'darwin':
            return Path.home() / 'Library' / 'Application Support' / PROGRAM_NAME

        xdg = os.environ.get('XDG_CONFIG_HOME')
        if xdg:
            return Path(xdg) / PROGRAM_NAME
        return Path.home() / '.config' / PROGRAM_NAME

    def is_debug_mode(self) -> bool:
        """
        Check if debug mode is enabled.

        Returns:
            True if debug mode is enabled
        """
        debug_value = os.getenv('IPBATCH_DEBUG', 'false').lower()
        return debug_value in ('true', '1', 'yes', 'on')

    def get_debug_level(self) -> str:
        """
        Get debug level for controlling verbosity.

        Returns:
            Debug level: 'off', 'basic', 'detailed', or 'verbose'
        """
        if not self.is_debug_mode():
            return 'off'

        level = os.getenv('IPBATCH_DEBUG_LEVEL', 'basic').lower()
        if level in ('basic', 'detailed', 'verbose'):
            return level
        return 'basic'

# Global configuration instance
config = AppConfig()
