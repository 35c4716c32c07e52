"""
IPinfo lookup client.

Issues one HTTPS GET per address against the IPinfo service and returns the
decoded JSON body unchanged. Works without a token, subject to the service's
anonymous rate limits.
"""

import logging
import requests
from typing import Dict, Any, Optional
from . import __version__
from .config import config
from .debug import debug_lookup_method
from .errors import LookupFailedError
from .security import redact_secrets

logger = logging.getLogger(__name__)


class LookupClient:
    """Client for single-address lookups."""

    def __init__(self, token: Optional[str] = None, base_url: Optional[str] = None,
                 timeout: Optional[float] = None):
        """
        Initialize the client.

        Args:
            token: Optional IPinfo access token, sent as the ``token`` query parameter
            base_url: Service base URL (defaults to the configured service URL)
            timeout: Request timeout in seconds; None leaves the HTTP client's default
        """
        self.token = token
        self.base_url = (base_url or config.get_service_url()).rstrip('/')
        self.timeout = timeout if timeout is not None else config.get_request_timeout()
        self.headers = {
            'User-Agent': f'ipbatch/{__version__}',
            'Accept': 'application/json',
        }

    def build_url(self, ip_address: str) -> str:
        """Return the lookup URL for an address, without the token."""
        return f"{self.base_url}/{ip_address}"

    @debug_lookup_method
    def lookup(self, ip_address: str) -> Dict[str, Any]:
        """
        Look up a single address.

        Args:
            ip_address: The IP address to resolve

        Returns:
            The decoded JSON body returned by the service

        Raises:
            LookupFailedError: On any network error, non-2xx status or
                undecodable body
        """
        params = {'token': self.token} if self.token else None

        try:
            response = requests.get(
                self.build_url(ip_address),
                params=params,
                headers=self.headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            raise LookupFailedError(ip_address, self._sanitize(e)) from e
        except ValueError as e:
            raise LookupFailedError(ip_address, f"invalid JSON response: {self._sanitize(e)}") from e

    def _sanitize(self, error: Exception) -> str:
        """Render an exception message with the token masked."""
        message = redact_secrets(str(error), [self.token] if self.token else None)
        logger.debug(f"Lookup request failed: {message}")
        return message
